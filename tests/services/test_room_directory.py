"""
Tests for hotel_booking/services/room_directory.py
"""
import json
import pytest
from datetime import datetime
from decimal import Decimal

from hotel_booking.exceptions import RoomNotFoundError, ValidationError
from hotel_booking.models.ontology import RoomCategory


class TestLookup:

    def test_get_room(self, room_directory, sample_room):
        assert room_directory.get_room(sample_room.id).room_number == "101"

    def test_get_room_missing(self, room_directory):
        with pytest.raises(RoomNotFoundError) as exc_info:
            room_directory.get_room(9999)
        assert "9999" in str(exc_info.value)

    def test_find_by_number(self, room_directory, sample_room):
        assert room_directory.find_by_number("101").id == sample_room.id
        assert room_directory.find_by_number("999") is None

    def test_list_by_category(self, room_directory, sample_room, sample_room_102, suite_room):
        assert len(room_directory.list_rooms()) == 3
        deluxe = room_directory.list_rooms(category=RoomCategory.DELUXE)
        assert [r.room_number for r in deluxe] == ["102"]

    def test_list_by_flag(self, room_directory, sample_room, sample_room_102):
        room_directory.set_availability(sample_room.id, False)
        assert [r.room_number for r in room_directory.list_rooms(is_available=True)] == ["102"]


class TestAddRoom:

    def test_add_room(self, room_directory):
        room = room_directory.add_room("301", "220.5", capacity=2, amenities=["wifi", "minibar"])
        assert room.nightly_rate == Decimal("220.50")
        assert json.loads(room.amenities) == ["wifi", "minibar"]
        assert room.is_available is True

    def test_duplicate_number(self, room_directory, sample_room):
        with pytest.raises(ValidationError):
            room_directory.add_room("101", 90)

    def test_bad_capacity(self, room_directory):
        with pytest.raises(ValidationError):
            room_directory.add_room("302", 90, capacity=0)

    def test_negative_rate(self, room_directory):
        with pytest.raises(ValidationError):
            room_directory.add_room("303", -1)


class TestFindAvailableRooms:

    def test_excludes_booked_and_flagged(self, room_directory, booking_service,
                                         sample_room, sample_room_102, suite_room):
        booking_service.create(sample_room.id, "g1", datetime(2024, 1, 10), datetime(2024, 1, 15))
        room_directory.set_availability(suite_room.id, False)

        free = room_directory.find_available_rooms(datetime(2024, 1, 12), datetime(2024, 1, 14))
        assert [r.room_number for r in free] == ["102"]

    def test_boundary_and_cancelled(self, room_directory, booking_service, sample_room):
        b = booking_service.create(sample_room.id, "g1", datetime(2024, 1, 10), datetime(2024, 1, 15))
        after = room_directory.find_available_rooms(datetime(2024, 1, 15), datetime(2024, 1, 16))
        assert [r.id for r in after] == [sample_room.id]

        assert room_directory.find_available_rooms(datetime(2024, 1, 11), datetime(2024, 1, 12)) == []
        booking_service.cancel(b.id)
        assert len(room_directory.find_available_rooms(datetime(2024, 1, 11), datetime(2024, 1, 12))) == 1

    def test_category_filter(self, room_directory, sample_room, suite_room):
        free = room_directory.find_available_rooms(
            datetime(2024, 1, 1), datetime(2024, 1, 2), category=RoomCategory.SUITE
        )
        assert [r.room_number for r in free] == ["501"]
