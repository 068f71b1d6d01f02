import math
import re
from datetime import datetime, timezone
from typing import Optional, Union

from fleet_booking.services.exceptions import BookingValidationError

PINCODE_PATTERN = re.compile(r"[0-9]{6}")


def ensure_utc(value: datetime) -> datetime:
    """Returns ``value`` as an aware UTC datetime. Naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class BusinessRules:
    MIN_CAPACITY_KG = 1
    MAX_CAPACITY_KG = 50000
    MIN_TYRES = 2
    MAX_TYRES = 20
    MIN_NAME_LENGTH = 2
    MAX_NAME_LENGTH = 100

    @staticmethod
    def validate_pincode(value, field: str) -> str:
        if not isinstance(value, str) or not PINCODE_PATTERN.fullmatch(value):
            raise BookingValidationError("Pincodes must be exactly 6 digits", field)
        return value

    @staticmethod
    def parse_start_time(value: Union[datetime, str, None], now: datetime, field: str = "start_time") -> datetime:
        """Parses an ISO string or datetime and requires it to be strictly after ``now``."""
        if value is None or value == "":
            raise BookingValidationError("start_time is required", field)
        if isinstance(value, str):
            try:
                value = datetime.fromisoformat(value)
            except ValueError:
                raise BookingValidationError("start_time must be a valid ISO date string", field)
        if not isinstance(value, datetime):
            raise BookingValidationError("start_time must be a valid ISO date string", field)

        start = ensure_utc(value)
        if start <= ensure_utc(now):
            raise BookingValidationError("start_time must be in the future", field)
        return start

    @staticmethod
    def validate_interval(start: datetime, end: datetime):
        if ensure_utc(end) <= ensure_utc(start):
            raise BookingValidationError("end time must be after start time", "end_time")

    @staticmethod
    def validate_customer_id(value: Optional[str]) -> str:
        if not isinstance(value, str) or not value.strip():
            raise BookingValidationError("customer_id is required", "customer_id")
        return value.strip()

    @staticmethod
    def validate_vehicle_id(value) -> int:
        # bool is an int subclass, reject it explicitly
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise BookingValidationError("vehicle_id must be a positive integer", "vehicle_id")
        return value

    @staticmethod
    def validate_capacity_required(value) -> float:
        try:
            capacity = float(value)
        except (TypeError, ValueError):
            raise BookingValidationError("capacity_required must be a positive number", "capacity_required")
        if not math.isfinite(capacity) or capacity <= 0:
            raise BookingValidationError("capacity_required must be a positive number", "capacity_required")
        return capacity

    @staticmethod
    def validate_vehicle(name: Optional[str], capacity_kg, tyres) -> tuple[str, float, int]:
        if not isinstance(name, str) or not name.strip():
            raise BookingValidationError("Vehicle name is required", "name")
        name = name.strip()
        if len(name) < BusinessRules.MIN_NAME_LENGTH:
            raise BookingValidationError(
                f"Vehicle name must be at least {BusinessRules.MIN_NAME_LENGTH} characters long", "name"
            )
        if len(name) > BusinessRules.MAX_NAME_LENGTH:
            raise BookingValidationError(
                f"Vehicle name cannot exceed {BusinessRules.MAX_NAME_LENGTH} characters", "name"
            )

        if isinstance(capacity_kg, bool) or not isinstance(capacity_kg, (int, float)):
            raise BookingValidationError("capacity_kg must be a number", "capacity_kg")
        if not BusinessRules.MIN_CAPACITY_KG <= capacity_kg <= BusinessRules.MAX_CAPACITY_KG:
            raise BookingValidationError(
                f"Capacity must be between {BusinessRules.MIN_CAPACITY_KG} and {BusinessRules.MAX_CAPACITY_KG} KG",
                "capacity_kg",
            )

        if isinstance(tyres, bool) or not isinstance(tyres, int):
            raise BookingValidationError("tyres must be an integer", "tyres")
        if not BusinessRules.MIN_TYRES <= tyres <= BusinessRules.MAX_TYRES:
            raise BookingValidationError(
                f"Vehicle must have between {BusinessRules.MIN_TYRES} and {BusinessRules.MAX_TYRES} tyres",
                "tyres",
            )

        return name, float(capacity_kg), tyres
