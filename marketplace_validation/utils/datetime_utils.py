"""
Date and time helpers using python-dateutil for deadline parsing.

All values are normalized to timezone-aware UTC datetimes so that
"now"-relative business rules compare like with like.
"""

import math
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Optional, Union

from dateutil import parser as dateutil_parser
from dateutil import tz

DateTimeInput = Union[datetime, date, str, int, float, Decimal]


class DateParseError(ValueError):
    """Raised when a value cannot be interpreted as a point in time."""
    pass


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=tz.UTC)
    return value.astimezone(tz.UTC)


def _start_of_day(reference: Optional[datetime]) -> datetime:
    reference = ensure_utc(reference) if reference is not None else utc_now()
    return reference.replace(hour=0, minute=0, second=0, microsecond=0)


def parse_datetime(value: DateTimeInput, default: Optional[datetime] = None) -> datetime:
    """
    Interpret a deadline-style value as an aware UTC datetime.

    Accepts datetime and date objects, ISO 8601 or other dateutil-parseable
    strings, and numbers as milliseconds since the Unix epoch. Naive values
    are taken to be UTC.

    Args:
        value: Value to interpret
        default: Reference time supplying the date parts missing from a
            partial string such as "Nov 3"; defaults to today (UTC)

    Raises:
        DateParseError: If the value cannot be parsed
    """
    if isinstance(value, datetime):
        return ensure_utc(value)

    if isinstance(value, date):
        return datetime.combine(value, time.min).replace(tzinfo=tz.UTC)

    if isinstance(value, bool):
        raise DateParseError(f"Unsupported date input type: {type(value).__name__}")

    if isinstance(value, (int, float, Decimal)):
        milliseconds = float(value)
        if not math.isfinite(milliseconds):
            raise DateParseError("Timestamp must be a finite number")
        try:
            return datetime.fromtimestamp(milliseconds / 1000, tz=tz.UTC)
        except (OverflowError, OSError, ValueError) as e:
            raise DateParseError(f"Timestamp out of range: {value}") from e

    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise DateParseError("Cannot parse empty string")
        try:
            return ensure_utc(dateutil_parser.isoparse(text))
        except ValueError:
            pass
        try:
            return ensure_utc(dateutil_parser.parse(text, default=_start_of_day(default)))
        except (ValueError, OverflowError) as e:
            raise DateParseError(f"Unable to parse date string: '{text}'") from e

    raise DateParseError(f"Unsupported date input type: {type(value).__name__}")


__all__ = [
    'DateParseError',
    'DateTimeInput',
    'utc_now',
    'ensure_utc',
    'parse_datetime',
]
