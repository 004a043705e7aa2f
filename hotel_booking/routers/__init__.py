# API Routers
from hotel_booking.routers import bookings, rooms

__all__ = ['bookings', 'rooms']
