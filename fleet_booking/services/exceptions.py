from typing import Optional


class BookingDomainError(Exception):
    """Base class for all booking domain errors."""

class BookingValidationError(BookingDomainError, ValueError):
    """Raised when input is missing or malformed. Nothing has been written."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field

class NotFoundError(BookingDomainError):
    """Raised when a referenced entity does not exist."""

class VehicleNotFoundError(NotFoundError):
    """Raised when the vehicle id does not resolve to a vehicle."""

class ReservationNotFoundError(NotFoundError):
    """Raised when the reservation id does not resolve to a reservation."""

class BookingConflictError(BookingDomainError):
    """Raised when the vehicle already has an overlapping, non-cancelled reservation."""

class InvalidReservationStateError(BookingDomainError):
    """Raised when a reservation cannot transition, e.g. cancelling after it started."""

class StorageError(BookingDomainError):
    """Raised when the storage collaborator fails. Wraps the underlying driver error."""
