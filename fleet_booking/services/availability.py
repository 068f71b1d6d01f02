import logging
from datetime import datetime

from fleet_booking.models.reservation import ReservationStatus
from fleet_booking.services.store import BookingStore
from fleet_booking.services.validators import BusinessRules, ensure_utc

logger = logging.getLogger(__name__)


def conflicts_with(existing_start: datetime, existing_end: datetime, start: datetime, end: datetime) -> bool:
    """
    True if an existing reservation [existing_start, existing_end) blocks the
    candidate window [start, end).

    The three clauses catch an existing reservation that starts inside the
    window, one that ends inside it, and one that encloses it. For well-formed
    intervals a candidate enclosing a shorter reservation is caught by the
    first clause.
    """
    existing_start = ensure_utc(existing_start)
    existing_end = ensure_utc(existing_end)
    start = ensure_utc(start)
    end = ensure_utc(end)

    starts_inside = start <= existing_start < end
    ends_inside = start < existing_end <= end
    encloses = existing_start <= start and existing_end >= end
    return starts_inside or ends_inside or encloses


async def is_available(store: BookingStore, vehicle_id: int, start: datetime, end: datetime) -> bool:
    """
    Checks whether a vehicle has no active reservation overlapping [start, end).

    Cancelled reservations are excluded by the storage query. Storage errors
    propagate, an unreadable schedule is never reported as available.
    """
    BusinessRules.validate_interval(start, end)

    reservations = await store.find_reservations_by_vehicle(
        vehicle_id, exclude_status=ReservationStatus.CANCELLED.value
    )

    for reservation in reservations:
        if conflicts_with(reservation.start_time, reservation.end_time, start, end):
            logger.debug(
                "Availability conflict",
                extra={"vehicle_id": vehicle_id, "reservation_id": reservation.id},
            )
            return False
    return True
