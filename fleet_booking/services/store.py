from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from fleet_booking.models.vehicle import Vehicle
from fleet_booking.models.reservation import Reservation, ReservationStatus
from fleet_booking.services.exceptions import StorageError


class BookingStore(ABC):
    """
    Storage collaborator used by the booking core.

    The core only ever talks to this interface, so the SQLAlchemy store can be
    swapped for an in-memory one in tests. Writes commit before returning.
    """

    @abstractmethod
    async def find_vehicle_by_id(self, vehicle_id: int, lock: bool = False) -> Optional[Vehicle]:
        """Returns the vehicle or None. ``lock`` holds its row until commit/rollback."""

    @abstractmethod
    async def find_vehicles_by_min_capacity(self, capacity_kg: float) -> List[Vehicle]:
        ...

    @abstractmethod
    async def list_vehicles(self) -> List[Vehicle]:
        ...

    @abstractmethod
    async def create_vehicle(self, vehicle: Vehicle) -> Vehicle:
        ...

    @abstractmethod
    async def find_reservations_by_vehicle(
        self, vehicle_id: int, exclude_status: Optional[str] = ReservationStatus.CANCELLED.value
    ) -> List[Reservation]:
        ...

    @abstractmethod
    async def find_reservation_by_id(self, reservation_id: int) -> Optional[Reservation]:
        ...

    @abstractmethod
    async def list_reservations(self, customer_id: Optional[str] = None) -> List[Reservation]:
        ...

    @abstractmethod
    async def create_reservation(self, reservation: Reservation) -> Reservation:
        """Persists the reservation, assigning id and created_at."""

    @abstractmethod
    async def update_reservation_status(self, reservation: Reservation, status: str) -> Reservation:
        ...

    @abstractmethod
    async def count_reservations(
        self,
        vehicle_id: int,
        status: Optional[str] = None,
        starting_from: Optional[datetime] = None,
    ) -> int:
        ...

    @abstractmethod
    async def rollback(self) -> None:
        """Discards pending work and releases any row lock taken by find_vehicle_by_id."""


class SqlAlchemyBookingStore(BookingStore):
    """
    BookingStore backed by an async SQLAlchemy session.

    Every driver error rolls the session back and is re-raised as StorageError.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_vehicle_by_id(self, vehicle_id: int, lock: bool = False) -> Optional[Vehicle]:
        stmt = select(Vehicle).where(Vehicle.id == vehicle_id)
        if lock:
            # SELECT ... FOR UPDATE on PostgreSQL, ignored by SQLite
            stmt = stmt.with_for_update()
        try:
            return (await self.db.execute(stmt)).scalar_one_or_none()
        except SQLAlchemyError as e:
            await self._fail(e)

    async def find_vehicles_by_min_capacity(self, capacity_kg: float) -> List[Vehicle]:
        stmt = (
            select(Vehicle)
            .where(Vehicle.capacity_kg >= capacity_kg)
            .order_by(Vehicle.capacity_kg, Vehicle.id)
        )
        try:
            return list((await self.db.execute(stmt)).scalars().all())
        except SQLAlchemyError as e:
            await self._fail(e)

    async def list_vehicles(self) -> List[Vehicle]:
        stmt = select(Vehicle).order_by(Vehicle.created_at.desc(), Vehicle.id.desc())
        try:
            return list((await self.db.execute(stmt)).scalars().all())
        except SQLAlchemyError as e:
            await self._fail(e)

    async def create_vehicle(self, vehicle: Vehicle) -> Vehicle:
        self.db.add(vehicle)
        try:
            await self.db.commit()
            await self.db.refresh(vehicle)
            return vehicle
        except SQLAlchemyError as e:
            await self._fail(e)

    async def find_reservations_by_vehicle(
        self, vehicle_id: int, exclude_status: Optional[str] = ReservationStatus.CANCELLED.value
    ) -> List[Reservation]:
        stmt = select(Reservation).where(Reservation.vehicle_id == vehicle_id)
        if exclude_status is not None:
            stmt = stmt.where(Reservation.status != exclude_status)
        stmt = stmt.order_by(Reservation.start_time)
        try:
            return list((await self.db.execute(stmt)).scalars().all())
        except SQLAlchemyError as e:
            await self._fail(e)

    async def find_reservation_by_id(self, reservation_id: int) -> Optional[Reservation]:
        stmt = (
            select(Reservation)
            .where(Reservation.id == reservation_id)
            .execution_options(populate_existing=True)
        )
        try:
            return (await self.db.execute(stmt)).scalar_one_or_none()
        except SQLAlchemyError as e:
            await self._fail(e)

    async def list_reservations(self, customer_id: Optional[str] = None) -> List[Reservation]:
        stmt = select(Reservation)
        if customer_id:
            stmt = stmt.where(Reservation.customer_id == customer_id)
        stmt = (
            stmt.order_by(Reservation.created_at.desc(), Reservation.id.desc())
            .execution_options(populate_existing=True)
        )
        try:
            return list((await self.db.execute(stmt)).scalars().all())
        except SQLAlchemyError as e:
            await self._fail(e)

    async def create_reservation(self, reservation: Reservation) -> Reservation:
        self.db.add(reservation)
        try:
            # commit releases the vehicle row lock taken during booking
            await self.db.commit()
            return await self._reload_reservation(reservation.id)
        except SQLAlchemyError as e:
            await self._fail(e)

    async def update_reservation_status(self, reservation: Reservation, status: str) -> Reservation:
        reservation.status = status
        try:
            await self.db.commit()
            return await self._reload_reservation(reservation.id)
        except SQLAlchemyError as e:
            await self._fail(e)

    async def count_reservations(
        self,
        vehicle_id: int,
        status: Optional[str] = None,
        starting_from: Optional[datetime] = None,
    ) -> int:
        stmt = select(func.count(Reservation.id)).where(Reservation.vehicle_id == vehicle_id)
        if status is not None:
            stmt = stmt.where(Reservation.status == status)
        if starting_from is not None:
            stmt = stmt.where(Reservation.start_time >= starting_from)
        try:
            return (await self.db.execute(stmt)).scalar() or 0
        except SQLAlchemyError as e:
            await self._fail(e)

    async def rollback(self) -> None:
        await self.db.rollback()

    async def _reload_reservation(self, reservation_id: int) -> Reservation:
        # populate_existing picks up server-side timestamps and the vehicle
        stmt = (
            select(Reservation)
            .where(Reservation.id == reservation_id)
            .execution_options(populate_existing=True)
        )
        return (await self.db.execute(stmt)).scalar_one()

    async def _fail(self, error: SQLAlchemyError):
        await self.db.rollback()
        raise StorageError(str(error)) from error
