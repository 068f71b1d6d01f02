from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

from fleet_booking.schemas.vehicle import VehicleOut

# Format rules (6-digit pincodes, start in the future) are enforced by the
# booking service so the HTTP layer and direct callers fail the same way.
class BookingRequest(BaseModel):
    vehicle_id: int = Field(..., description="Vehicle to book")
    from_pincode: str = Field(..., description="6-digit origin pincode")
    to_pincode: str = Field(..., description="6-digit destination pincode")
    start_time: datetime = Field(..., description="Ride start, must be in the future")
    customer_id: str = Field(..., description="Customer making the booking")

class ReservationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    vehicle_id: int
    customer_id: str
    from_pincode: str
    to_pincode: str
    start_time: datetime
    end_time: datetime
    estimated_ride_duration_hours: float
    status: str
    created_at: Optional[datetime] = None
    vehicle: Optional[VehicleOut] = None

class CancellationOut(BaseModel):
    message: str
    booking: ReservationOut
