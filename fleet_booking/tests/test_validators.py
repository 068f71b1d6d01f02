import pytest
from datetime import datetime, timedelta, timezone

from fleet_booking.services.exceptions import BookingValidationError
from fleet_booking.services.validators import BusinessRules, ensure_utc
from fleet_booking.tests.conftest import FIXED_NOW


def test_ensure_utc_treats_naive_as_utc():
    naive = datetime(2030, 1, 2, 10, 0)
    assert ensure_utc(naive) == datetime(2030, 1, 2, 10, 0, tzinfo=timezone.utc)

    ist = timezone(timedelta(hours=5, minutes=30))
    converted = ensure_utc(datetime(2030, 1, 2, 15, 30, tzinfo=ist))
    assert converted.tzinfo == timezone.utc
    assert converted.hour == 10


def test_parse_start_time_accepts_offsets():
    start = BusinessRules.parse_start_time("2030-01-02T15:30:00+05:30", FIXED_NOW)
    assert start == datetime(2030, 1, 2, 10, 0, tzinfo=timezone.utc)


def test_parse_start_time_must_be_strictly_future():
    with pytest.raises(BookingValidationError, match="future"):
        BusinessRules.parse_start_time(FIXED_NOW, FIXED_NOW)
    assert BusinessRules.parse_start_time(FIXED_NOW + timedelta(seconds=1), FIXED_NOW) > FIXED_NOW


def test_validation_error_is_a_value_error():
    with pytest.raises(ValueError):
        BusinessRules.validate_pincode("12ab56", "to_pincode")


@pytest.mark.parametrize("name,capacity,tyres,field", [
    ("", 100, 4, "name"),
    ("A", 100, 4, "name"),
    ("x" * 101, 100, 4, "name"),
    ("Truck", "heavy", 4, "capacity_kg"),
    ("Truck", True, 4, "capacity_kg"),
    ("Truck", 0.5, 4, "capacity_kg"),
    ("Truck", 100, 4.5, "tyres"),
    ("Truck", 100, 21, "tyres"),
])
def test_validate_vehicle_rejects(name, capacity, tyres, field):
    with pytest.raises(BookingValidationError) as exc_info:
        BusinessRules.validate_vehicle(name, capacity, tyres)
    assert exc_info.value.field == field


def test_validate_vehicle_bounds_are_inclusive():
    assert BusinessRules.validate_vehicle("Bike", 1, 2) == ("Bike", 1.0, 2)
    assert BusinessRules.validate_vehicle("Trailer", 50000, 20) == ("Trailer", 50000.0, 20)
