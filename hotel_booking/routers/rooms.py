"""
Room lookup routes (read side of the room directory)
"""
from typing import List, Optional
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from hotel_booking.database import get_db
from hotel_booking.exceptions import BookingEngineError, InvalidRangeError
from hotel_booking.models.ontology import RoomCategory
from hotel_booking.models.schemas import RoomResponse
from hotel_booking.routers.errors import http_error
from hotel_booking.services.room_directory import RoomDirectory
from hotel_booking.services.time_utils import to_utc_naive

router = APIRouter(prefix="/rooms", tags=["rooms"])


@router.get("", response_model=List[RoomResponse])
def list_rooms(
    category: Optional[RoomCategory] = None,
    is_available: Optional[bool] = Query(None, alias="isAvailable"),
    db: Session = Depends(get_db)
):
    return RoomDirectory(db).list_rooms(category=category, is_available=is_available)


@router.get("/available", response_model=List[RoomResponse])
def list_available_rooms(
    start_date: datetime = Query(..., alias="startDate"),
    end_date: datetime = Query(..., alias="endDate"),
    category: Optional[RoomCategory] = None,
    db: Session = Depends(get_db)
):
    """Rooms open for booking and free for the whole range"""
    try:
        start = to_utc_naive(start_date, "startDate")
        end = to_utc_naive(end_date, "endDate")
        if start >= end:
            raise InvalidRangeError(start, end)
    except BookingEngineError as e:
        raise http_error(e)
    return RoomDirectory(db).find_available_rooms(start, end, category)


@router.get("/by-number/{room_number}", response_model=RoomResponse)
def get_room_by_number(room_number: str, db: Session = Depends(get_db)):
    room = RoomDirectory(db).find_by_number(room_number)
    if not room:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Room number {room_number} not found"
        )
    return room


@router.get("/{room_id}", response_model=RoomResponse)
def get_room(room_id: int, db: Session = Depends(get_db)):
    try:
        return RoomDirectory(db).get_room(room_id)
    except BookingEngineError as e:
        raise http_error(e)
