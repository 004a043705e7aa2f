"""
Room directory
Lookup side of the room inventory consumed by the booking core
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
import json
import logging

from sqlalchemy.orm import Session

from hotel_booking.exceptions import RoomNotFoundError, ValidationError
from hotel_booking.models.ontology import Booking, Room, RoomCategory
from hotel_booking.services.availability_service import NON_BLOCKING_STATUSES

logger = logging.getLogger(__name__)


class RoomDirectory:
    """Room directory"""

    def __init__(self, db: Session):
        self.db = db

    def get_room(self, room_id: int) -> Room:
        """Get a room, raising RoomNotFoundError if absent"""
        room = self.db.query(Room).filter(Room.id == room_id).first()
        if not room:
            raise RoomNotFoundError(room_id)
        return room

    def find_by_number(self, room_number: str) -> Optional[Room]:
        return self.db.query(Room).filter(Room.room_number == room_number).first()

    def list_rooms(self, category: Optional[RoomCategory] = None,
                   is_available: Optional[bool] = None) -> List[Room]:
        """List rooms, optionally by category and administrative flag"""
        query = self.db.query(Room)

        if category is not None:
            query = query.filter(Room.category == category)
        if is_available is not None:
            query = query.filter(Room.is_available == is_available)

        return query.order_by(Room.room_number).all()

    def find_available_rooms(self, start: datetime, end: datetime,
                             category: Optional[RoomCategory] = None) -> List[Room]:
        """Rooms open for booking with no blocking booking in [start, end)"""
        busy_rooms = self.db.query(Booking.room_id).filter(
            Booking.status.notin_(list(NON_BLOCKING_STATUSES)),
            Booking.start_date < end,
            Booking.end_date > start
        )

        query = self.db.query(Room).filter(
            Room.is_available == True,
            ~Room.id.in_(busy_rooms)
        )
        if category is not None:
            query = query.filter(Room.category == category)

        return query.order_by(Room.room_number).all()

    def add_room(self, room_number: str, nightly_rate, capacity: int = 2,
                 category: RoomCategory = RoomCategory.STANDARD,
                 is_available: bool = True, description: Optional[str] = None,
                 amenities: Optional[list] = None) -> Room:
        """Register a room (admin setup / seeding)"""
        if self.find_by_number(room_number):
            raise ValidationError(f"Room number '{room_number}' already exists")
        if capacity < 1:
            raise ValidationError("capacity must be at least 1")

        rate = Decimal(str(nightly_rate))
        if rate < 0:
            raise ValidationError("nightly rate must be non-negative")

        room = Room(
            room_number=room_number,
            category=RoomCategory(category),
            nightly_rate=rate,
            capacity=capacity,
            is_available=is_available,
            description=description,
            amenities=json.dumps(amenities) if amenities is not None else None,
        )
        self.db.add(room)
        self.db.commit()
        self.db.refresh(room)
        logger.info(f"Room {room.room_number} registered (id={room.id})")
        return room

    def set_availability(self, room_id: int, is_available: bool) -> Room:
        """Toggle the administrative availability flag"""
        room = self.get_room(room_id)
        room.is_available = is_available
        self.db.commit()
        self.db.refresh(room)
        return room
