from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from datetime import datetime

class VehicleCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=100, description="Display name of the vehicle")
    capacity_kg: float = Field(..., ge=1, le=50000, description="Load capacity in KG")
    tyres: int = Field(..., ge=2, le=20)

    # strip before the length constraints are checked
    @field_validator('name', mode='before')
    @classmethod
    def strip_name(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v

class VehicleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    capacity_kg: float
    tyres: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class AvailableVehicleOut(VehicleOut):
    estimated_ride_duration_hours: float

class VehicleStatsOut(BaseModel):
    vehicle_id: int
    total_bookings: int
    active_bookings: int
    completed_bookings: int
