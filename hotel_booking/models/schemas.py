"""
Pydantic schemas
Request/response validation for the HTTP adapter. Field names are camelCase
on the wire and snake_case in Python; either is accepted on input.
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from hotel_booking.models.ontology import BookingStatus, RoomCategory
from hotel_booking.services.time_utils import as_utc


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============== Room Schemas ==============

class RoomResponse(ApiModel):
    id: int
    room_number: str
    category: RoomCategory
    nightly_rate: Decimal
    capacity: int
    is_available: bool
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    @field_validator('created_at', 'updated_at')
    @classmethod
    def _as_utc(cls, v):
        return as_utc(v)


# ============== Booking Schemas ==============

class BookingCreate(ApiModel):
    room_id: int
    guest_id: Optional[str] = None               # defaults to the caller
    start_date: datetime
    end_date: datetime
    guest_count: int = Field(default=1, ge=1)
    special_requests: Optional[str] = None


class BookingUpdate(ApiModel):
    room_id: Optional[int] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    guest_count: Optional[int] = Field(None, ge=1)
    total_price: Optional[Decimal] = Field(None, ge=0)
    status: Optional[BookingStatus] = None
    special_requests: Optional[str] = None


class BookingResponse(ApiModel):
    id: int
    room_id: int
    guest_id: str
    start_date: datetime
    end_date: datetime
    guest_count: int
    total_price: Decimal
    status: BookingStatus
    special_requests: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    @field_validator('start_date', 'end_date', 'created_at', 'updated_at')
    @classmethod
    def _as_utc(cls, v):
        return as_utc(v)


class AvailabilityResponse(ApiModel):
    room_id: int
    start_date: datetime
    end_date: datetime
    available: bool

    @field_validator('start_date', 'end_date')
    @classmethod
    def _as_utc(cls, v):
        return as_utc(v)


class ConflictsResponse(ApiModel):
    room_id: int
    conflicts: List[BookingResponse]


class DeleteResponse(BaseModel):
    success: bool
