"""
Tests for hotel_booking/services/price_service.py
Covers: count_nights, compute_price, PriceService.price_for_room, get_price_quote
"""
import pytest
from datetime import datetime, timedelta
from decimal import Decimal

from hotel_booking.exceptions import InvalidRangeError, RoomNotFoundError, ValidationError
from hotel_booking.services.price_service import PriceService, compute_price, count_nights


class TestCountNights:

    def test_whole_days(self):
        assert count_nights(datetime(2024, 1, 10), datetime(2024, 1, 12)) == 2

    def test_partial_day_rounds_up(self):
        # 25 hours is two nights
        assert count_nights(datetime(2024, 1, 10), datetime(2024, 1, 11, 1)) == 2

    def test_one_millisecond_is_one_night(self):
        start = datetime(2024, 1, 10)
        assert count_nights(start, start + timedelta(milliseconds=1)) == 1

    def test_sub_millisecond_stay_is_one_night(self):
        start = datetime(2024, 1, 10)
        assert count_nights(start, start + timedelta(microseconds=500)) == 1

    def test_sub_millisecond_over_one_day_is_two_nights(self):
        start = datetime(2024, 1, 10)
        assert count_nights(start, start + timedelta(days=1, microseconds=500)) == 2

    def test_exactly_one_day(self):
        assert count_nights(datetime(2024, 1, 10, 14), datetime(2024, 1, 11, 14)) == 1

    def test_crosses_month_end(self):
        assert count_nights(datetime(2024, 1, 30), datetime(2024, 2, 2)) == 3

    def test_empty_range_rejected(self):
        with pytest.raises(InvalidRangeError):
            count_nights(datetime(2024, 1, 10), datetime(2024, 1, 10))

    def test_reversed_range_rejected(self):
        with pytest.raises(InvalidRangeError):
            count_nights(datetime(2024, 1, 12), datetime(2024, 1, 10))


class TestComputePrice:

    def test_two_nights(self):
        price = compute_price(100, datetime(2024, 1, 10), datetime(2024, 1, 12))
        assert price == Decimal("200")

    def test_ceiling_rule(self):
        price = compute_price(100, datetime(2024, 1, 10), datetime(2024, 1, 11, 1))
        assert price == Decimal("200")

    def test_microsecond_remainder_is_billed(self):
        start = datetime(2024, 1, 10)
        assert compute_price(100, start, start + timedelta(microseconds=500)) == Decimal("100")
        assert compute_price(100, start, start + timedelta(days=1, microseconds=500)) == Decimal("200")

    def test_fractional_rate_is_exact(self):
        price = compute_price(Decimal("99.99"), datetime(2024, 1, 10), datetime(2024, 1, 13))
        assert price == Decimal("299.97")

    def test_float_rate_goes_through_str(self):
        price = compute_price(0.1, datetime(2024, 1, 10), datetime(2024, 1, 13))
        assert price == Decimal("0.3")

    def test_zero_rate(self):
        assert compute_price(0, datetime(2024, 1, 10), datetime(2024, 1, 11)) == 0

    def test_negative_rate_rejected(self):
        with pytest.raises(ValidationError):
            compute_price(-1, datetime(2024, 1, 10), datetime(2024, 1, 11))


class TestPriceService:

    def test_price_for_room(self, room_directory, sample_room):
        svc = PriceService(room_directory)
        price = svc.price_for_room(sample_room.id, datetime(2024, 1, 10), datetime(2024, 1, 15))
        assert price == Decimal("500")

    def test_quote(self, room_directory, suite_room):
        quote = PriceService(room_directory).get_price_quote(
            suite_room.id, datetime(2024, 3, 1), datetime(2024, 3, 3)
        )
        assert quote['nights'] == 2
        assert quote['nightly_rate'] == Decimal("480.50")
        assert quote['total_price'] == Decimal("961.00")

    def test_unknown_room(self, room_directory):
        with pytest.raises(RoomNotFoundError):
            PriceService(room_directory).price_for_room(
                9999, datetime(2024, 1, 10), datetime(2024, 1, 11)
            )
