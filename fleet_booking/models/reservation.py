import enum

from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, Index, func
from sqlalchemy.orm import relationship
from fleet_booking.core.db import Base


class ReservationStatus(str, enum.Enum):
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Reservation(Base):
    __tablename__ = "reservations"
    id = Column(Integer, primary_key=True, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False)
    customer_id = Column(String, nullable=False)
    from_pincode = Column(String(6), nullable=False)
    to_pincode = Column(String(6), nullable=False)
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=False)
    estimated_ride_duration_hours = Column(Float, nullable=False)
    status = Column(String, nullable=False, default=ReservationStatus.CONFIRMED.value)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Always loaded with the reservation, responses embed the vehicle
    vehicle = relationship("Vehicle", lazy="selectin")

    __table_args__ = (
        Index("ix_reservations_vehicle_window", "vehicle_id", "start_time", "end_time"),
        Index("ix_reservations_customer_created", "customer_id", "created_at"),
    )
