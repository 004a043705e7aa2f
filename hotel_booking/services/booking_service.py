"""
Booking lifecycle manager

Orchestrates create / update / cancel / delete. The availability check and the
write it guards run under the room's lock, and the booking store re-checks for
overlaps inside the write transaction; a ConflictError from that guard is
retried once with a fresh availability check, and a second one is reported as
RoomUnavailableError. Updates re-read the booking once its room is locked.

Status graph: PENDING -> CONFIRMED -> COMPLETED, PENDING/CONFIRMED -> CANCELLED.
By default transitions outside the graph are logged and applied; with
enforce_transitions they are rejected.
"""
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional
import logging

from sqlalchemy.orm import Session

from hotel_booking.config import settings
from hotel_booking.exceptions import (
    BookingNotFoundError, ConflictError, InvalidRangeError,
    RoomUnavailableError, ValidationError,
)
from hotel_booking.models.ontology import Booking, BookingStatus, Room
from hotel_booking.services.availability_service import AvailabilityService, is_blocking
from hotel_booking.services.booking_store import BookingStore
from hotel_booking.services.price_service import PriceService
from hotel_booking.services.room_directory import RoomDirectory
from hotel_booking.services.room_locks import RoomLockRegistry, room_locks
from hotel_booking.services.time_utils import InstantLike, to_utc_naive, utcnow

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: {BookingStatus.COMPLETED, BookingStatus.CANCELLED},
    BookingStatus.COMPLETED: set(),
    BookingStatus.CANCELLED: set(),
}

UPDATABLE_FIELDS = {
    'room_id', 'start_date', 'end_date', 'guest_count',
    'total_price', 'status', 'special_requests',
}


@dataclass
class TransitionResult:
    """Result of a status transition validation"""
    allowed: bool
    reason: str
    valid_alternatives: List[str] = field(default_factory=list)


def validate_status_transition(current: BookingStatus, target: BookingStatus) -> TransitionResult:
    current = BookingStatus(current)
    target = BookingStatus(target)
    reachable = ALLOWED_TRANSITIONS[current]

    if current == target:
        return TransitionResult(allowed=True, reason="No status change")
    if target in reachable:
        return TransitionResult(
            allowed=True,
            reason=f"{current.value} -> {target.value}",
            valid_alternatives=sorted(s.value for s in reachable),
        )
    return TransitionResult(
        allowed=False,
        reason=f"Transition {current.value} -> {target.value} is not allowed",
        valid_alternatives=sorted(s.value for s in reachable),
    )


def _coerce_status(value: Any) -> BookingStatus:
    try:
        return BookingStatus(value)
    except ValueError as exc:
        raise ValidationError(f"Unknown booking status '{value}'") from exc


def _coerce_price(value: Any) -> Decimal:
    try:
        price = Decimal(str(value))
    except InvalidOperation as exc:
        raise ValidationError(f"total_price must be numeric, got '{value}'") from exc
    if price < 0:
        raise ValidationError("total_price must be non-negative")
    return price


class BookingService:
    """Booking lifecycle manager"""

    def __init__(self, room_directory: RoomDirectory, booking_store: BookingStore,
                 locks: Optional[RoomLockRegistry] = None,
                 availability: Optional[AvailabilityService] = None,
                 prices: Optional[PriceService] = None,
                 enforce_transitions: Optional[bool] = None):
        self.room_directory = room_directory
        self.booking_store = booking_store
        self.locks = locks or room_locks
        self.availability = availability or AvailabilityService(booking_store)
        self.prices = prices or PriceService(room_directory)
        if enforce_transitions is None:
            enforce_transitions = settings.ENFORCE_STATUS_TRANSITIONS
        self.enforce_transitions = enforce_transitions

    @classmethod
    def from_session(cls, db: Session, locks: Optional[RoomLockRegistry] = None,
                     **kwargs) -> "BookingService":
        """Wire directory and store onto a single session"""
        return cls(RoomDirectory(db), BookingStore(db), locks=locks, **kwargs)

    # ============== Queries ==============

    def get_booking(self, booking_id: int) -> Booking:
        booking = self.booking_store.find_by_id(booking_id)
        if not booking:
            raise BookingNotFoundError(booking_id)
        return booking

    def list_bookings(self, status: Optional[BookingStatus] = None,
                      room_id: Optional[int] = None,
                      guest_id: Optional[str] = None) -> List[Booking]:
        return self.booking_store.find_all(status=status, room_id=room_id, guest_id=guest_id)

    def list_for_guest(self, guest_id: str) -> List[Booking]:
        return self.booking_store.find_all(guest_id=guest_id)

    def list_for_room(self, room_id: int) -> List[Booking]:
        self.room_directory.get_room(room_id)
        return self.booking_store.find_all(room_id=room_id)

    def check_availability(self, room_id: int, start: InstantLike, end: InstantLike) -> bool:
        """Pre-flight check before create"""
        start, end = self._normalize_range(start, end)
        self.room_directory.get_room(room_id)
        return self.availability.is_available(room_id, start, end)

    def find_conflicts(self, room_id: int, start: InstantLike, end: InstantLike,
                       exclude_booking_id: Optional[int] = None) -> List[Booking]:
        start, end = self._normalize_range(start, end)
        self.room_directory.get_room(room_id)
        return self.availability.find_conflicts(room_id, start, end, exclude_booking_id)

    # ============== Lifecycle ==============

    def create(self, room_id: int, guest_id: str, start: InstantLike, end: InstantLike,
               guest_count: int = 1, special_requests: Optional[str] = None) -> Booking:
        """Create a PENDING booking if the room is free for [start, end)"""
        start = to_utc_naive(start, "start_date")
        end = to_utc_naive(end, "end_date")
        room = self.room_directory.get_room(room_id)

        if start >= end:
            raise InvalidRangeError(start, end)
        if not guest_id:
            raise ValidationError("guest_id is required")
        self._check_guest_count(room, guest_count)

        total_price = self.prices.price_for_room(room_id, start, end)

        def write() -> Booking:
            now = utcnow()
            booking = Booking(
                room_id=room_id,
                guest_id=str(guest_id),
                start_date=start,
                end_date=end,
                guest_count=guest_count,
                total_price=total_price,
                status=BookingStatus.PENDING,
                special_requests=special_requests,
                created_at=now,
                updated_at=now,
            )
            return self.booking_store.insert(booking)

        with self.locks.hold(room_id):
            booking = self._checked_write(room_id, start, end, None, write)

        logger.info(
            f"Booking {booking.id} created: room {room_id} "
            f"[{start.isoformat()}, {end.isoformat()}) guest {guest_id} total {total_price}"
        )
        return booking

    def update(self, booking_id: int, patch: Dict[str, Any]) -> Booking:
        """Apply a partial update, re-checking availability when the occupied range moves"""
        unknown = set(patch) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        changes = {k: v for k, v in patch.items() if v is not None or k == 'special_requests'}
        if 'start_date' in changes:
            changes['start_date'] = to_utc_naive(changes['start_date'], "start_date")
        if 'end_date' in changes:
            changes['end_date'] = to_utc_naive(changes['end_date'], "end_date")
        if 'status' in changes:
            changes['status'] = _coerce_status(changes['status'])
        if 'total_price' in changes:
            changes['total_price'] = _coerce_price(changes['total_price'])

        # the booking is re-read under the lock; if it moved rooms meanwhile, lock again
        while True:
            old_room_id = self.get_booking(booking_id).room_id
            with self.locks.hold(old_room_id, changes.get('room_id', old_room_id)):
                booking = self.booking_store.reload(booking_id)
                if not booking:
                    raise BookingNotFoundError(booking_id)
                if booking.room_id == old_room_id:
                    updated, written = self._apply_update(booking, dict(changes))
                    break

        logger.info(f"Booking {booking_id} updated: {sorted(k for k in written if k != 'updated_at')}")
        return updated

    def update_status(self, booking_id: int, status: BookingStatus) -> Booking:
        return self.update(booking_id, {'status': status})

    def cancel(self, booking_id: int) -> Booking:
        """Soft delete: the range is free for others immediately"""
        booking = self.update(booking_id, {'status': BookingStatus.CANCELLED})
        logger.info(f"Booking {booking_id} cancelled")
        return booking

    def delete(self, booking_id: int) -> bool:
        """Hard delete; False if the booking does not exist"""
        deleted = self.booking_store.delete(booking_id)
        if deleted:
            logger.info(f"Booking {booking_id} deleted")
        else:
            logger.info(f"Booking {booking_id} not found for deletion")
        return deleted

    # ============== Internals ==============

    def _normalize_range(self, start: InstantLike, end: InstantLike):
        start = to_utc_naive(start, "start_date")
        end = to_utc_naive(end, "end_date")
        if start >= end:
            raise InvalidRangeError(start, end)
        return start, end

    def _apply_update(self, booking: Booking, changes: Dict[str, Any]):
        """Validate a patch against the booking's current state and write it; caller holds the room locks"""
        booking_id = booking.id
        old_status = BookingStatus(booking.status)

        room_id = changes.get('room_id', booking.room_id)
        start = changes.get('start_date', booking.start_date)
        end = changes.get('end_date', booking.end_date)
        status = changes.get('status', old_status)
        guest_count = changes.get('guest_count', booking.guest_count)

        if start >= end:
            raise InvalidRangeError(start, end)

        room_changed = room_id != booking.room_id
        range_changed = start != booking.start_date or end != booking.end_date

        if room_changed or 'guest_count' in changes:
            room = self.room_directory.get_room(room_id)
            self._check_guest_count(room, guest_count)

        if status != old_status:
            self._apply_transition_policy(booking_id, old_status, status)

        if (room_changed or range_changed) and 'total_price' not in changes:
            changes['total_price'] = self.prices.price_for_room(room_id, start, end)

        changes['updated_at'] = utcnow()

        needs_check = is_blocking(status) and (
            room_changed or range_changed or not is_blocking(old_status)
        )
        if not needs_check:
            return self.booking_store.update(booking_id, changes), changes

        updated = self._checked_write(
            room_id, start, end, booking_id,
            lambda: self.booking_store.update(booking_id, changes)
        )
        return updated, changes

    def _check_guest_count(self, room: Room, guest_count: int) -> None:
        if guest_count is None or guest_count < 1:
            raise ValidationError("guest_count must be at least 1")
        if guest_count > room.capacity:
            raise ValidationError(
                f"guest_count {guest_count} exceeds capacity {room.capacity} of room {room.room_number}"
            )

    def _apply_transition_policy(self, booking_id: int, current: BookingStatus,
                                 target: BookingStatus) -> None:
        result = validate_status_transition(current, target)
        if result.allowed:
            return
        if self.enforce_transitions:
            raise ValidationError(result.reason)
        logger.warning(f"Booking {booking_id}: {result.reason}; applied (transition policy not enforced)")

    def _checked_write(self, room_id: int, start: datetime, end: datetime,
                       exclude_booking_id: Optional[int],
                       write: Callable[[], Booking]) -> Booking:
        """Availability check + write; one retry if the store's overlap guard fires"""
        for attempt in (1, 2):
            conflicts = self.availability.find_conflicts(room_id, start, end, exclude_booking_id)
            if conflicts:
                logger.warning(
                    f"Room {room_id} unavailable for [{start.isoformat()}, {end.isoformat()}): "
                    f"conflicts with {[b.id for b in conflicts]}"
                )
                raise RoomUnavailableError(room_id, start, end, [b.id for b in conflicts])
            try:
                return write()
            except ConflictError as exc:
                if attempt == 2:
                    raise RoomUnavailableError(room_id, start, end, exc.conflicting_ids) from exc
                logger.warning(f"Write conflict on room {room_id}, retrying availability check")
