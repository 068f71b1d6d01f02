# Table creation picks up models registered here
from .vehicle import Vehicle
from .reservation import Reservation, ReservationStatus
