"""
Booking store - SQLAlchemy persistence for Booking records

Every write that leaves a booking in a blocking status re-checks for overlaps
inside the same transaction and raises ConflictError instead of committing a
double booking.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

from sqlalchemy.orm import Session

from hotel_booking.exceptions import BookingNotFoundError, ConflictError
from hotel_booking.models.ontology import Booking, BookingStatus
from hotel_booking.services.availability_service import NON_BLOCKING_STATUSES, is_blocking

logger = logging.getLogger(__name__)

RANGE_FIELDS = ('room_id', 'start_date', 'end_date', 'status')


class BookingStore:
    """Booking store"""

    def __init__(self, db: Session):
        self.db = db

    # ============== Queries ==============

    def find_by_id(self, booking_id: int) -> Optional[Booking]:
        return self.db.query(Booking).filter(Booking.id == booking_id).first()

    def reload(self, booking_id: int) -> Optional[Booking]:
        """Re-read a booking, overwriting whatever the session already holds"""
        return self.db.query(Booking).populate_existing().filter(Booking.id == booking_id).first()

    def find_by_room(self, room_id: int, exclude_id: Optional[int] = None,
                     start: Optional[datetime] = None,
                     end: Optional[datetime] = None) -> List[Booking]:
        """
        Bookings on a room, any status

        Args:
            room_id: room to query
            exclude_id: booking to leave out (the one being rescheduled)
            start, end: when both given, only bookings whose range touches
                        [start, end) under the half-open rule are returned
        """
        query = self.db.query(Booking).filter(Booking.room_id == room_id)

        if exclude_id is not None:
            query = query.filter(Booking.id != exclude_id)
        if start is not None and end is not None:
            query = query.filter(Booking.start_date < end, Booking.end_date > start)

        return query.order_by(Booking.start_date).all()

    def find_all(self, status: Optional[BookingStatus] = None,
                 room_id: Optional[int] = None,
                 guest_id: Optional[str] = None) -> List[Booking]:
        """List bookings, optionally filtered"""
        query = self.db.query(Booking)

        if status is not None:
            query = query.filter(Booking.status == status)
        if room_id is not None:
            query = query.filter(Booking.room_id == room_id)
        if guest_id is not None:
            query = query.filter(Booking.guest_id == guest_id)

        return query.order_by(Booking.start_date, Booking.id).all()

    # ============== Writes ==============

    def insert(self, booking: Booking) -> Booking:
        self.db.add(booking)
        self.db.flush()
        self._guard_overlap(booking)
        self.db.commit()
        self.db.refresh(booking)
        return booking

    def update(self, booking_id: int, patch: Dict[str, Any]) -> Booking:
        booking = self.find_by_id(booking_id)
        if not booking:
            raise BookingNotFoundError(booking_id)

        for key, value in patch.items():
            setattr(booking, key, value)
        self.db.flush()

        if any(key in patch for key in RANGE_FIELDS):
            self._guard_overlap(booking)

        self.db.commit()
        self.db.refresh(booking)
        return booking

    def delete(self, booking_id: int) -> bool:
        """Hard delete; False when the booking does not exist"""
        booking = self.find_by_id(booking_id)
        if not booking:
            return False

        self.db.delete(booking)
        self.db.commit()
        return True

    def _guard_overlap(self, booking: Booking) -> None:
        """Roll back and raise ConflictError if the flushed booking overlaps another"""
        # columns not in the patch may have moved under a concurrent commit
        self.db.refresh(booking)
        if not is_blocking(booking.status):
            return

        clashes = self.db.query(Booking.id).filter(
            Booking.room_id == booking.room_id,
            Booking.id != booking.id,
            Booking.status.notin_(list(NON_BLOCKING_STATUSES)),
            Booking.start_date < booking.end_date,
            Booking.end_date > booking.start_date,
        ).all()

        if clashes:
            conflicting_ids = [row.id for row in clashes]
            self.db.rollback()
            logger.warning(
                f"Overlap guard rejected write on room {booking.room_id}: "
                f"conflicts with {conflicting_ids}"
            )
            raise ConflictError(booking.room_id, conflicting_ids)
