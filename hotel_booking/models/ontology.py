"""
Domain objects
Room is owned by the room directory and read-only to the booking core;
Booking is the aggregate protected by the non-overlap invariant.
"""
from datetime import datetime
from enum import Enum
from sqlalchemy import (
    Column, Integer, String, DateTime, ForeignKey, Text,
    Enum as SQLEnum, Boolean, Numeric, Index
)
from sqlalchemy.orm import relationship
from hotel_booking.database import Base


# ============== Enums ==============

class RoomCategory(str, Enum):
    """Room category"""
    STANDARD = "standard"
    DELUXE = "deluxe"
    SUITE = "suite"
    PRESIDENTIAL = "presidential"


class BookingStatus(str, Enum):
    """Booking status"""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# ============== Objects ==============

class Room(Base):
    """
    Room object
    is_available is an administrative override, independent of date-based availability
    """
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, index=True)
    room_number = Column(String(10), unique=True, nullable=False)
    category = Column(SQLEnum(RoomCategory), nullable=False, default=RoomCategory.STANDARD)
    nightly_rate = Column(Numeric(10, 2), nullable=False)
    capacity = Column(Integer, nullable=False, default=2)
    is_available = Column(Boolean, default=True)
    description = Column(Text)
    amenities = Column(Text)                             # JSON list
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    bookings = relationship("Booking", back_populates="room")


class Booking(Base):
    """
    Booking object
    Occupies [start_date, end_date) on its room unless CANCELLED
    """
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False)
    guest_id = Column(String(64), nullable=False, index=True)
    start_date = Column(DateTime, nullable=False)         # naive UTC
    end_date = Column(DateTime, nullable=False)           # naive UTC, exclusive
    guest_count = Column(Integer, nullable=False, default=1)
    total_price = Column(Numeric(10, 2), nullable=False, default=0)
    status = Column(SQLEnum(BookingStatus), nullable=False, default=BookingStatus.PENDING)
    special_requests = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow)

    room = relationship("Room", back_populates="bookings")

    __table_args__ = (
        Index("ix_bookings_room_range", "room_id", "start_date", "end_date"),
    )

    def __repr__(self) -> str:
        return (
            f"<Booking id={self.id} room={self.room_id} "
            f"[{self.start_date} - {self.end_date}) {self.status}>"
        )
