"""
Booking engine error taxonomy

ValidationError and NotFoundError also derive from ValueError / LookupError so
callers that only know the builtin types still catch them.
"""
from datetime import datetime
from typing import Any, List, Optional


class BookingEngineError(Exception):
    """Base class for all booking engine errors"""


class ValidationError(BookingEngineError, ValueError):
    """Malformed input; the request is rejected with no state change"""


class InvalidRangeError(ValidationError):
    """Stay range where start is not strictly before end"""

    def __init__(self, start: Any, end: Any):
        self.start = start
        self.end = end
        super().__init__(f"start ({start}) must be before end ({end})")


class NotFoundError(BookingEngineError, LookupError):
    """Referenced room or booking does not exist"""

    resource = "resource"

    def __init__(self, identifier: Any):
        self.identifier = identifier
        super().__init__(f"{self.resource} {identifier} not found")


class RoomNotFoundError(NotFoundError):
    resource = "Room"


class BookingNotFoundError(NotFoundError):
    resource = "Booking"


class RoomUnavailableError(BookingEngineError):
    """The room already has a blocking booking overlapping the range"""

    def __init__(self, room_id: int, start: datetime, end: datetime,
                 conflicting_ids: Optional[List[int]] = None):
        self.room_id = room_id
        self.start = start
        self.end = end
        self.conflicting_ids = list(conflicting_ids or [])
        super().__init__(
            f"Room {room_id} is not available from {start.isoformat()} to {end.isoformat()}"
        )


class ConflictError(BookingEngineError):
    """Storage-level overlap guard rejected a write"""

    def __init__(self, room_id: int, conflicting_ids: Optional[List[int]] = None):
        self.room_id = room_id
        self.conflicting_ids = list(conflicting_ids or [])
        super().__init__(f"Overlapping booking detected on room {room_id} at write time")
