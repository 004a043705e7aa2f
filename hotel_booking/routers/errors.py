"""
Booking engine errors -> HTTP status codes
"""
from fastapi import HTTPException, status

from hotel_booking.exceptions import (
    BookingEngineError, ConflictError, NotFoundError,
    RoomUnavailableError, ValidationError,
)


def http_error(exc: BookingEngineError) -> HTTPException:
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, RoomUnavailableError):
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "message": str(exc),
                "roomId": exc.room_id,
                "conflictingBookingIds": exc.conflicting_ids,
            }
        )
    if isinstance(exc, ConflictError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
