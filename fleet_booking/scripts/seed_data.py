import asyncio
import logging

from fleet_booking.core.db import AsyncSessionLocal, create_tables
from fleet_booking.core.logging import setup_logging
from fleet_booking.services.booking_service import BookingService
from fleet_booking.services.store import SqlAlchemyBookingStore

logger = logging.getLogger(__name__)

DEMO_FLEET = [
    ("Tata Ace", 750, 4),
    ("Mahindra Bolero Pickup", 1500, 4),
    ("Eicher Pro 2049", 5000, 6),
    ("Ashok Leyland 1616", 16000, 10),
    ("BharatBenz 3128R", 28000, 12),
]


async def seed(service: BookingService) -> list:
    """Adds the demo fleet through the booking service and returns the new vehicles."""
    vehicles = []
    for name, capacity_kg, tyres in DEMO_FLEET:
        vehicles.append(await service.add_vehicle_core(name, capacity_kg, tyres))
    return vehicles


async def main():
    setup_logging()
    await create_tables()
    async with AsyncSessionLocal() as db:
        vehicles = await seed(BookingService(SqlAlchemyBookingStore(db)))
    logger.info("Seed data inserted", extra={"vehicles": len(vehicles)})


if __name__ == "__main__":
    asyncio.run(main())
