"""
Price calculator
Total price = nightly rate x nights, where a started day counts as a full night
"""
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Union

from hotel_booking.exceptions import InvalidRangeError, ValidationError

ONE_DAY = timedelta(days=1)

Rate = Union[Decimal, int, float, str]


def count_nights(start: datetime, end: datetime) -> int:
    """
    Number of billable nights in [start, end)

    Ceiling of the elapsed time over one day, so 25 hours is 2 nights and any
    remainder, however small, is a further night.
    """
    if start >= end:
        raise InvalidRangeError(start, end)
    days, remainder = divmod(end - start, ONE_DAY)
    return days + (1 if remainder else 0)


def compute_price(nightly_rate: Rate, start: datetime, end: datetime) -> Decimal:
    """Compute the total price of a stay"""
    rate = Decimal(str(nightly_rate))
    if rate < 0:
        raise ValidationError(f"nightly rate must be non-negative, got {rate}")
    return rate * count_nights(start, end)


class PriceService:
    """Price calculator bound to the room directory's rates"""

    def __init__(self, room_directory):
        self.room_directory = room_directory

    def price_for_room(self, room_id: int, start: datetime, end: datetime) -> Decimal:
        """Price a stay at the room's current nightly rate"""
        room = self.room_directory.get_room(room_id)
        return compute_price(room.nightly_rate, start, end)

    def get_price_quote(self, room_id: int, start: datetime, end: datetime) -> dict:
        """Price breakdown for pre-flight display"""
        room = self.room_directory.get_room(room_id)
        nights = count_nights(start, end)
        return {
            'room_id': room.id,
            'nightly_rate': Decimal(str(room.nightly_rate)),
            'nights': nights,
            'total_price': compute_price(room.nightly_rate, start, end),
        }
