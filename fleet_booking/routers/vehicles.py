from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, Query

from fleet_booking.routers.deps import get_booking_service
from fleet_booking.schemas.vehicle import AvailableVehicleOut, VehicleCreate, VehicleOut, VehicleStatsOut
from fleet_booking.services.booking_service import BookingService


router = APIRouter(prefix="/api/vehicles", tags=["vehicles"])

@router.post("", status_code=201, response_model=VehicleOut)
async def add_vehicle(req: VehicleCreate, service: BookingService = Depends(get_booking_service)):
    return await service.add_vehicle_core(req.name, req.capacity_kg, req.tyres)


@router.get("", response_model=List[VehicleOut])
async def list_vehicles(service: BookingService = Depends(get_booking_service)):
    return await service.list_vehicles_core()


@router.get("/available", response_model=List[AvailableVehicleOut])
async def find_available_vehicles(
    capacity_required: float = Query(..., description="Minimum capacity in KG"),
    from_pincode: str = Query(...),
    to_pincode: str = Query(...),
    start_time: datetime = Query(..., description="ISO 8601 ride start"),
    service: BookingService = Depends(get_booking_service),
):
    """Vehicles with enough capacity that are free for the estimated ride window."""
    return await service.search_available_vehicles_core(
        capacity_required, from_pincode, to_pincode, start_time
    )


@router.get("/{vehicle_id}/stats", response_model=VehicleStatsOut)
async def vehicle_stats(vehicle_id: int, service: BookingService = Depends(get_booking_service)):
    stats = await service.vehicle_booking_stats_core(vehicle_id)
    return VehicleStatsOut(vehicle_id=vehicle_id, **stats)
