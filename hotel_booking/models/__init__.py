# Domain Models
from hotel_booking.models.ontology import (
    Room, Booking, RoomCategory, BookingStatus
)

__all__ = ['Room', 'Booking', 'RoomCategory', 'BookingStatus']
