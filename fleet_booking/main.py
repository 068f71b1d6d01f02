from contextlib import asynccontextmanager
import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fleet_booking.core.db import create_tables
from fleet_booking.core.environment import get_cors_origins, should_create_tables
from fleet_booking.core.logging import setup_logging
from fleet_booking.exceptions import register_exception_handlers
from fleet_booking.routers import bookings, health, metrics, vehicles


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    if should_create_tables():
        await create_tables()
        logger.info("Database tables ready")
    yield


def create_app() -> FastAPI:
    app = FastAPI(title="Fleet Booking API", lifespan=lifespan)

    register_exception_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_cors_origins(),
        allow_methods=["*"],   # Allows POST, GET, DELETE, OPTIONS
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(metrics.router)
    app.include_router(vehicles.router)
    app.include_router(bookings.router)
    return app


app = create_app()


def run():
    uvicorn.run("fleet_booking.main:app", host="0.0.0.0", port=8000)


if __name__ == "__main__":
    run()
