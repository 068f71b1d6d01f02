from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fleet_booking.core.db import get_db
from fleet_booking.services.booking_service import BookingService
from fleet_booking.services.store import SqlAlchemyBookingStore


def get_booking_service(db: AsyncSession = Depends(get_db)) -> BookingService:
    return BookingService(SqlAlchemyBookingStore(db))
