from typing import List, Optional

from fastapi import APIRouter, Depends

from fleet_booking.routers.deps import get_booking_service
from fleet_booking.schemas.reservation import BookingRequest, CancellationOut, ReservationOut
from fleet_booking.services.booking_service import BookingService


router = APIRouter(prefix="/api/bookings", tags=["bookings"])

@router.post("", status_code=201, response_model=ReservationOut)
async def book_vehicle(req: BookingRequest, service: BookingService = Depends(get_booking_service)):
    return await service.book_vehicle_core(
        vehicle_id=req.vehicle_id,
        from_pincode=req.from_pincode,
        to_pincode=req.to_pincode,
        start_time=req.start_time,
        customer_id=req.customer_id,
    )


@router.get("", response_model=List[ReservationOut])
async def list_bookings(customer_id: Optional[str] = None, service: BookingService = Depends(get_booking_service)):
    return await service.list_reservations_core(customer_id=customer_id)


@router.delete("/{reservation_id}", response_model=CancellationOut)
async def cancel_booking(reservation_id: int, service: BookingService = Depends(get_booking_service)):
    reservation = await service.cancel_reservation_core(reservation_id)
    return CancellationOut(
        message="Booking cancelled successfully",
        booking=ReservationOut.model_validate(reservation),
    )
