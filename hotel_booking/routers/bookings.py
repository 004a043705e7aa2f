"""
Booking routes
Thin adapter over BookingService; non-admin callers only see and edit their own bookings.
"""
from typing import List, Optional
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session
from hotel_booking.database import get_db
from hotel_booking.exceptions import BookingEngineError, BookingNotFoundError
from hotel_booking.models.ontology import Booking, BookingStatus
from hotel_booking.models.schemas import (
    AvailabilityResponse, BookingCreate, BookingResponse, BookingUpdate,
    ConflictsResponse, DeleteResponse,
)
from hotel_booking.routers.errors import http_error
from hotel_booking.security.auth import Caller, get_current_caller, require_admin
from hotel_booking.services.booking_service import BookingService

router = APIRouter(prefix="/bookings", tags=["bookings"])

# Fields a non-admin caller may change on their own booking
USER_EDITABLE_FIELDS = {'special_requests'}


def get_booking_service(request: Request, db: Session):
    """Service wired to this request's session and the app-wide room locks"""
    return BookingService.from_session(db, locks=request.app.state.room_locks)


def _get_visible_booking(service: BookingService, booking_id: int, caller: Caller) -> Booking:
    """Other callers' bookings are reported as not found"""
    booking = service.get_booking(booking_id)
    if not caller.is_admin and booking.guest_id != caller.id:
        raise BookingNotFoundError(booking_id)
    return booking


@router.get("", response_model=List[BookingResponse])
def list_bookings(
    request: Request,
    status: Optional[BookingStatus] = None,
    room_id: Optional[int] = Query(None, alias="roomId"),
    guest_id: Optional[str] = Query(None, alias="guestId"),
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_caller)
):
    """List bookings (admins: all, others: own)"""
    service = get_booking_service(request, db)
    if not caller.is_admin:
        guest_id = caller.id
    return service.list_bookings(status=status, room_id=room_id, guest_id=guest_id)


@router.get("/user", response_model=List[BookingResponse])
def list_my_bookings(
    request: Request,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_caller)
):
    """Current caller's bookings"""
    service = get_booking_service(request, db)
    return service.list_for_guest(caller.id)


@router.get("/user/{guest_id}", response_model=List[BookingResponse])
def list_guest_bookings(
    guest_id: str,
    request: Request,
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_admin)
):
    """Bookings of a given guest"""
    service = get_booking_service(request, db)
    return service.list_for_guest(guest_id)


@router.get("/room/{room_id}/availability", response_model=AvailabilityResponse)
def check_room_availability(
    room_id: int,
    request: Request,
    start_date: datetime = Query(..., alias="startDate"),
    end_date: datetime = Query(..., alias="endDate"),
    db: Session = Depends(get_db)
):
    """Pre-flight availability check"""
    service = get_booking_service(request, db)
    try:
        available = service.check_availability(room_id, start_date, end_date)
    except BookingEngineError as e:
        raise http_error(e)
    return AvailabilityResponse(
        room_id=room_id, start_date=start_date, end_date=end_date, available=available
    )


@router.get("/room/{room_id}/conflicts", response_model=ConflictsResponse)
def list_room_conflicts(
    room_id: int,
    request: Request,
    start_date: datetime = Query(..., alias="startDate"),
    end_date: datetime = Query(..., alias="endDate"),
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_admin)
):
    """Blocking bookings overlapping the range"""
    service = get_booking_service(request, db)
    try:
        conflicts = service.find_conflicts(room_id, start_date, end_date)
    except BookingEngineError as e:
        raise http_error(e)
    return ConflictsResponse(
        room_id=room_id,
        conflicts=[BookingResponse.model_validate(b) for b in conflicts]
    )


@router.get("/{booking_id}", response_model=BookingResponse)
def get_booking(
    booking_id: int,
    request: Request,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_caller)
):
    service = get_booking_service(request, db)
    try:
        return _get_visible_booking(service, booking_id, caller)
    except BookingEngineError as e:
        raise http_error(e)


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def create_booking(
    data: BookingCreate,
    request: Request,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_caller)
):
    """Create a booking; guest defaults to the caller"""
    guest_id = data.guest_id or caller.id
    if not caller.is_admin and guest_id != caller.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Cannot book on behalf of another guest"
        )

    service = get_booking_service(request, db)
    try:
        return service.create(
            room_id=data.room_id,
            guest_id=guest_id,
            start=data.start_date,
            end=data.end_date,
            guest_count=data.guest_count,
            special_requests=data.special_requests,
        )
    except BookingEngineError as e:
        raise http_error(e)


@router.put("/{booking_id}", response_model=BookingResponse)
def update_booking(
    booking_id: int,
    data: BookingUpdate,
    request: Request,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_caller)
):
    """Update a booking; non-admin callers may only change special requests"""
    service = get_booking_service(request, db)
    patch = data.model_dump(exclude_unset=True)
    if not caller.is_admin:
        patch = {k: v for k, v in patch.items() if k in USER_EDITABLE_FIELDS}

    try:
        _get_visible_booking(service, booking_id, caller)
        return service.update(booking_id, patch)
    except BookingEngineError as e:
        raise http_error(e)


@router.post("/{booking_id}/cancel", response_model=BookingResponse)
def cancel_booking(
    booking_id: int,
    request: Request,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_caller)
):
    service = get_booking_service(request, db)
    try:
        _get_visible_booking(service, booking_id, caller)
        return service.cancel(booking_id)
    except BookingEngineError as e:
        raise http_error(e)


@router.delete("/{booking_id}", response_model=DeleteResponse)
def delete_booking(
    booking_id: int,
    request: Request,
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_admin)
):
    """Hard delete; success is false when the booking does not exist"""
    service = get_booking_service(request, db)
    return DeleteResponse(success=service.delete(booking_id))
