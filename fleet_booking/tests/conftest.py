"""
Pytest configuration and shared fixtures for the fleet booking test suite.

This module provides:
- Database fixtures (in-memory SQLite for fast tests)
- FastAPI async client with the database dependency overridden
- An in-memory BookingStore and a fixed clock for service tests
- Data factories for vehicles and reservations
"""

import os

# Must be set before fleet_booking.core.db builds its engine
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import fleet_booking.models  # noqa: F401  registers tables on Base.metadata
from fleet_booking.core.db import Base, get_db
from fleet_booking.main import create_app
from fleet_booking.models.vehicle import Vehicle
from fleet_booking.models.reservation import Reservation, ReservationStatus
from fleet_booking.services.booking_service import BookingService
from fleet_booking.services.store import SqlAlchemyBookingStore
from fleet_booking.tests.fakes import InMemoryBookingStore


# Test Database Configuration
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Fixed "now" for service tests, all sample reservations are after it
FIXED_NOW = datetime(2030, 1, 1, 8, 0, tzinfo=timezone.utc)


def at(hour: int, minute: int = 0, day: int = 2) -> datetime:
    """An instant on January ``day`` 2030, UTC."""
    return datetime(2030, 1, day, hour, minute, tzinfo=timezone.utc)


@pytest.fixture
async def async_engine():
    """Create async engine for testing with in-memory SQLite."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def async_db_session(async_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create async database session for testing."""
    async_session = async_sessionmaker(async_engine, expire_on_commit=False)

    async with async_session() as session:
        yield session


@pytest.fixture
async def async_client(async_db_session) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client against a fresh app sharing the test database session."""
    app = create_app()

    async def override_get_db():
        yield async_db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def memory_store() -> InMemoryBookingStore:
    return InMemoryBookingStore()


@pytest.fixture
def booking_service(memory_store) -> BookingService:
    """BookingService over the in-memory store with the clock pinned to FIXED_NOW."""
    return BookingService(memory_store, clock=lambda: FIXED_NOW)


@pytest.fixture
def sql_store(async_db_session) -> SqlAlchemyBookingStore:
    return SqlAlchemyBookingStore(async_db_session)


# Test Data Factories
@pytest.fixture
async def test_vehicle(async_db_session) -> Vehicle:
    """Create a test vehicle."""
    vehicle = Vehicle(name="Eicher Pro 2049", capacity_kg=5000, tyres=6)
    async_db_session.add(vehicle)
    await async_db_session.commit()
    await async_db_session.refresh(vehicle)
    return vehicle


@pytest.fixture
def reservation_factory(async_db_session):
    """Insert reservations directly, bypassing booking rules (e.g. ones already started)."""
    async def make(vehicle_id: int, start: datetime, hours: float = 2,
                   status: str = ReservationStatus.CONFIRMED.value,
                   customer_id: str = "customer-1") -> int:
        reservation = Reservation(
            vehicle_id=vehicle_id,
            customer_id=customer_id,
            from_pincode="110001",
            to_pincode="110003",
            start_time=start,
            end_time=start + timedelta(hours=hours),
            estimated_ride_duration_hours=hours,
            status=status,
        )
        async_db_session.add(reservation)
        await async_db_session.commit()
        return reservation.id

    return make


def future_start(days: int = 2) -> datetime:
    """A whole hour ``days`` from the real current time, for HTTP tests."""
    now = datetime.now(timezone.utc).replace(minute=0, second=0, microsecond=0)
    return now + timedelta(days=days)
