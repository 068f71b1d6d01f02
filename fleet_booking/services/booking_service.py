import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional, Union

from fleet_booking.core.metrics import track_performance
from fleet_booking.core.prometheus_metrics import prometheus_collector

# Models
from fleet_booking.models.vehicle import Vehicle
from fleet_booking.models.reservation import Reservation, ReservationStatus

# Collaborators
from fleet_booking.services.store import BookingStore
from fleet_booking.services.availability import is_available
from fleet_booking.services.duration import estimate_ride_duration
from fleet_booking.services.validators import BusinessRules, ensure_utc

# Exceptions
from fleet_booking.services.exceptions import (
    BookingDomainError,
    BookingConflictError,
    InvalidReservationStateError,
    ReservationNotFoundError,
    VehicleNotFoundError,
)

logger = logging.getLogger(__name__)


def vehicle_to_dict(vehicle: Vehicle) -> Dict:
    return dict(
        id=vehicle.id,
        name=vehicle.name,
        capacity_kg=vehicle.capacity_kg,
        tyres=vehicle.tyres,
        created_at=vehicle.created_at,
        updated_at=vehicle.updated_at,
    )


class BookingService:
    """
    Business logic service for searching, booking and cancelling vehicles.

    This service provides core functionality for:
    - Ride duration estimation from pincodes
    - Availability checks against a vehicle's active reservations
    - Booking creation with an availability re-check right before the write
    - Cancellation of reservations that have not started yet
    - Fleet registration, listings and per-vehicle booking statistics

    Storage is injected as a BookingStore, so the same logic runs against
    SQLAlchemy in production and an in-memory store in tests. Domain errors
    are raised to the caller and never retried here.
    """

    def __init__(self, store: BookingStore, clock: Optional[Callable[[], datetime]] = None):
        """
        Args:
            store (BookingStore): Storage collaborator for vehicles and reservations
            clock (callable, optional): Returns the current instant; defaults to UTC now
        """
        self.store = store
        self._clock = clock

    def get_datetime_now_core(self) -> datetime:
        """Current instant as an aware UTC datetime."""
        if self._clock is not None:
            return ensure_utc(self._clock())
        return datetime.now(timezone.utc)

    def estimate_ride_duration_core(self, from_pincode: str, to_pincode: str) -> float:
        return estimate_ride_duration(from_pincode, to_pincode)

    async def is_available_core(self, vehicle_id: int, start: datetime, end: datetime) -> bool:
        return await is_available(self.store, vehicle_id, start, end)

    @track_performance(service_name="BookingService")
    async def book_vehicle_core(
        self,
        vehicle_id: int,
        from_pincode: str,
        to_pincode: str,
        start_time: Union[datetime, str],
        customer_id: str,
    ) -> Reservation:
        """
        Books a vehicle for the ride between two pincodes starting at ``start_time``.

        Args:
            vehicle_id (int): Vehicle to book
            from_pincode (str): 6-digit origin code
            to_pincode (str): 6-digit destination code
            start_time (datetime | str): Ride start, strictly in the future
            customer_id (str): Customer making the booking

        Returns:
            Reservation: The confirmed reservation, with its vehicle loaded

        Raises:
            BookingValidationError: Malformed input, nothing is written
            VehicleNotFoundError: No vehicle with that id
            BookingConflictError: The vehicle is already booked for an overlapping window
            StorageError: Propagated from the store

        Concurrency Control:
            - The vehicle row is resolved with lock=True (SELECT ... FOR UPDATE
              where supported), so a concurrent booking of the same vehicle
              waits until this one commits or rolls back
            - Availability is re-checked after the lock, since the caller may
              have seen a stale search result
        """
        vehicle_id = BusinessRules.validate_vehicle_id(vehicle_id)
        BusinessRules.validate_pincode(from_pincode, "from_pincode")
        BusinessRules.validate_pincode(to_pincode, "to_pincode")
        start = BusinessRules.parse_start_time(start_time, self.get_datetime_now_core())
        customer_id = BusinessRules.validate_customer_id(customer_id)

        try:
            vehicle = await self.store.find_vehicle_by_id(vehicle_id, lock=True)
            if vehicle is None:
                raise VehicleNotFoundError("Vehicle not found")

            duration_hours = estimate_ride_duration(from_pincode, to_pincode)
            end = start + timedelta(hours=duration_hours)

            # Re-verify availability to guard against stale search results
            if not await is_available(self.store, vehicle.id, start, end):
                prometheus_collector.record_booking_conflict()
                logger.info(
                    "Booking rejected, vehicle already reserved",
                    extra={"vehicle_id": vehicle.id, "start_time": start.isoformat(), "end_time": end.isoformat()},
                )
                raise BookingConflictError(
                    "Vehicle is no longer available for the requested time slot"
                )
        except BookingDomainError:
            await self.store.rollback()
            raise

        reservation = await self.store.create_reservation(
            Reservation(
                vehicle_id=vehicle.id,
                customer_id=customer_id,
                from_pincode=from_pincode,
                to_pincode=to_pincode,
                start_time=start,
                end_time=end,
                estimated_ride_duration_hours=duration_hours,
                status=ReservationStatus.CONFIRMED.value,
            )
        )

        prometheus_collector.record_reservation_created()
        logger.info(
            "Reservation created",
            extra={"reservation_id": reservation.id, "vehicle_id": vehicle.id, "customer_id": customer_id},
        )
        return reservation

    @track_performance(service_name="BookingService")
    async def search_available_vehicles_core(
        self,
        capacity_required: Union[float, str],
        from_pincode: str,
        to_pincode: str,
        start_time: Union[datetime, str],
    ) -> List[Dict]:
        """
        Finds vehicles with enough capacity that are free for the whole ride.

        The ride duration is estimated once for the route; each vehicle with
        capacity >= ``capacity_required`` is then checked one by one against its
        active reservations.

        Returns:
            list[dict]: Vehicle fields plus ``estimated_ride_duration_hours``
        """
        capacity = BusinessRules.validate_capacity_required(capacity_required)
        BusinessRules.validate_pincode(from_pincode, "from_pincode")
        BusinessRules.validate_pincode(to_pincode, "to_pincode")
        start = BusinessRules.parse_start_time(start_time, self.get_datetime_now_core())

        duration_hours = estimate_ride_duration(from_pincode, to_pincode)
        end = start + timedelta(hours=duration_hours)

        candidates = await self.store.find_vehicles_by_min_capacity(capacity)

        available = []
        for vehicle in candidates:
            if await is_available(self.store, vehicle.id, start, end):
                available.append(
                    dict(vehicle_to_dict(vehicle), estimated_ride_duration_hours=duration_hours)
                )
        return available

    @track_performance(service_name="BookingService")
    async def cancel_reservation_core(self, reservation_id: int) -> Reservation:
        """
        Cancels a reservation that has not started yet.

        Raises:
            ReservationNotFoundError: No reservation with that id
            InvalidReservationStateError: The reservation already started, status is left as is
        """
        reservation = await self.store.find_reservation_by_id(reservation_id)
        if reservation is None:
            raise ReservationNotFoundError("Booking not found")

        if ensure_utc(reservation.start_time) <= self.get_datetime_now_core():
            logger.info("Cancellation refused, booking already started", extra={"reservation_id": reservation_id})
            raise InvalidReservationStateError("Cannot cancel a booking that has already started")

        if reservation.status == ReservationStatus.CANCELLED.value:
            return reservation

        reservation = await self.store.update_reservation_status(
            reservation, ReservationStatus.CANCELLED.value
        )
        prometheus_collector.record_reservation_cancelled()
        logger.info("Reservation cancelled", extra={"reservation_id": reservation_id})
        return reservation

    @track_performance(service_name="BookingService")
    async def add_vehicle_core(self, name: str, capacity_kg: float, tyres: int) -> Vehicle:
        name, capacity_kg, tyres = BusinessRules.validate_vehicle(name, capacity_kg, tyres)
        vehicle = await self.store.create_vehicle(
            Vehicle(name=name, capacity_kg=capacity_kg, tyres=tyres)
        )
        logger.info("Vehicle added", extra={"vehicle_id": vehicle.id})
        return vehicle

    async def list_vehicles_core(self) -> List[Vehicle]:
        return await self.store.list_vehicles()

    async def list_reservations_core(self, customer_id: Optional[str] = None) -> List[Reservation]:
        """All reservations, newest first, optionally for one customer."""
        return await self.store.list_reservations(customer_id=customer_id)

    @track_performance(service_name="BookingService")
    async def vehicle_booking_stats_core(self, vehicle_id: int) -> Dict[str, int]:
        """
        Summarizes a vehicle's bookings.

        Returns:
            dict: total_bookings, active_bookings (confirmed and not yet started)
                  and completed_bookings
        """
        vehicle = await self.store.find_vehicle_by_id(vehicle_id)
        if vehicle is None:
            raise VehicleNotFoundError("Vehicle not found")

        now = self.get_datetime_now_core()
        return {
            "total_bookings": await self.store.count_reservations(vehicle_id),
            "active_bookings": await self.store.count_reservations(
                vehicle_id, status=ReservationStatus.CONFIRMED.value, starting_from=now
            ),
            "completed_bookings": await self.store.count_reservations(
                vehicle_id, status=ReservationStatus.COMPLETED.value
            ),
        }
