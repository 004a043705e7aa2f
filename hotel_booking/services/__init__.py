# Booking Services
from hotel_booking.services.availability_service import AvailabilityService, is_blocking, ranges_overlap
from hotel_booking.services.booking_service import BookingService
from hotel_booking.services.booking_store import BookingStore
from hotel_booking.services.price_service import PriceService, compute_price, count_nights
from hotel_booking.services.room_directory import RoomDirectory
from hotel_booking.services.room_locks import RoomLockRegistry

__all__ = [
    'AvailabilityService', 'BookingService', 'BookingStore', 'PriceService',
    'RoomDirectory', 'RoomLockRegistry', 'compute_price', 'count_nights',
    'is_blocking', 'ranges_overlap'
]
