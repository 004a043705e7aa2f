"""
Availability engine
Answers "is room R free for [start, end)?" and "which bookings conflict?"
Read-only: never writes to the booking store.
"""
from datetime import datetime
from typing import List, Optional
import logging

from hotel_booking.exceptions import InvalidRangeError
from hotel_booking.models.ontology import Booking, BookingStatus

logger = logging.getLogger(__name__)

# CANCELLED frees the range; every other status, COMPLETED included, holds it
NON_BLOCKING_STATUSES = frozenset({BookingStatus.CANCELLED})


def is_blocking(status: BookingStatus) -> bool:
    """Whether a booking in this status occupies its date range"""
    return BookingStatus(status) not in NON_BLOCKING_STATUSES


def ranges_overlap(s1: datetime, e1: datetime, s2: datetime, e2: datetime) -> bool:
    """Half-open overlap: [s1, e1) and [s2, e2) share at least one instant"""
    return s1 < e2 and s2 < e1


class AvailabilityService:
    """Availability engine"""

    def __init__(self, booking_store):
        self.booking_store = booking_store

    def find_conflicts(self, room_id: int, start: datetime, end: datetime,
                       exclude_booking_id: Optional[int] = None) -> List[Booking]:
        """Blocking bookings on room_id overlapping [start, end)"""
        if start >= end:
            raise InvalidRangeError(start, end)

        candidates = self.booking_store.find_by_room(
            room_id, exclude_id=exclude_booking_id, start=start, end=end
        )
        return [
            b for b in candidates
            if is_blocking(b.status) and ranges_overlap(b.start_date, b.end_date, start, end)
        ]

    def is_available(self, room_id: int, start: datetime, end: datetime,
                     exclude_booking_id: Optional[int] = None) -> bool:
        """True iff no blocking booking on the room overlaps [start, end)"""
        conflicts = self.find_conflicts(room_id, start, end, exclude_booking_id)
        if conflicts:
            logger.debug(
                f"Room {room_id} unavailable for [{start}, {end}): "
                f"conflicts {[b.id for b in conflicts]}"
            )
            return False
        return True
