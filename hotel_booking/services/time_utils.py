"""
Instant normalisation
Stored instants are naive UTC; callers may pass aware datetimes, dates or ISO-8601 strings.
"""
from datetime import date, datetime, time, timezone
from typing import Union

from hotel_booking.exceptions import ValidationError

InstantLike = Union[datetime, date, str]


def to_utc_naive(value: InstantLike, field: str = "date") -> datetime:
    """Convert to a naive UTC datetime; naive input is taken as UTC already"""
    if isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            value = datetime.fromisoformat(text)
        except ValueError as exc:
            raise ValidationError(f"{field}: '{value}' is not a valid ISO-8601 date") from exc

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    if isinstance(value, date):
        return datetime.combine(value, time.min)

    raise ValidationError(f"{field}: expected a date, got {type(value).__name__}")


def as_utc(value: datetime) -> datetime:
    """Express an instant in UTC for serialisation; naive values are taken as UTC"""
    if value is None:
        return value
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)
