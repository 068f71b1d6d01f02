from fleet_booking.services.validators import BusinessRules

MIN_RIDE_DURATION_HOURS = 0.5
HOURS_PER_DAY = 24


def estimate_ride_duration(from_pincode: str, to_pincode: str) -> float:
    """
    Estimates the ride duration in hours between two pincodes.

    There is no routing behind this: the numeric distance between the two
    codes, wrapped to a single day, stands in for travel time. The result is
    floored at half an hour so a reservation never has zero length.

    Args:
        from_pincode (str): 6-digit origin code
        to_pincode (str): 6-digit destination code

    Returns:
        float: Hours, always within [0.5, 23]
    """
    origin = int(BusinessRules.validate_pincode(from_pincode, "from_pincode"))
    destination = int(BusinessRules.validate_pincode(to_pincode, "to_pincode"))

    duration = abs(destination - origin) % HOURS_PER_DAY
    return float(max(duration, MIN_RIDE_DURATION_HOURS))
