"""
Time parsing and range arithmetic.

The calendar UI sends two shapes for the same concept: a short wall-clock
label ("09:00", meaning that time on the displayed day) and an absolute ISO
8601 timestamp. Everything here normalizes to timezone-aware datetimes.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from core.errors import ValidationError

UTC = timezone.utc

SHORT_TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")


@dataclass(frozen=True)
class TimeRange:
    """Window of absolute instants. Either bound may be open (None)."""

    start: datetime | None = None
    end: datetime | None = None


def resolve_zone(name: str) -> ZoneInfo:
    """Look up an IANA zone name, raising ValidationError if unknown."""
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        # OSError: the name is a tzdata directory such as "America"
        raise ValidationError("Unknown time zone", [f"tz: '{name}' is not a valid IANA zone"])


def is_short_time(value: str) -> bool:
    """True for 'HH:MM' wall-clock labels."""
    return bool(SHORT_TIME_PATTERN.match(value.strip()))


def parse_time(
    value: str | datetime | None,
    reference_date: date | None = None,
    tz: ZoneInfo | timezone = UTC,
) -> datetime | None:
    """
    Parse a short 'HH:MM' label or an absolute timestamp.

    Short labels are combined with ``reference_date`` in ``tz``. Naive
    timestamps are interpreted in ``tz``. Returns None when the value cannot
    be parsed (including a short label with no reference date) or falls at a
    calendar edge where it has no UTC equivalent.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=tz)

    value = value.strip()
    match = SHORT_TIME_PATTERN.match(value)
    if match:
        if reference_date is None:
            return None
        hours, minutes = int(match.group(1)), int(match.group(2))
        if hours > 23 or minutes > 59:
            return None
        return _storable(datetime.combine(reference_date, time(hours, minutes), tzinfo=tz))

    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz)
    return _storable(parsed)


def _storable(instant: datetime) -> datetime | None:
    """The instant, or None when it has no UTC equivalent (calendar edges)."""
    try:
        instant.astimezone(UTC)
    except OverflowError:
        return None
    return instant


def parse_date(value: str) -> date | None:
    """Parse YYYY-MM-DD, returning None when malformed."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        return None


def duration_minutes(start: datetime, end: datetime) -> int:
    """Whole minutes from start to end, clamped at zero."""
    seconds = (end.astimezone(UTC) - start.astimezone(UTC)).total_seconds()
    return max(0, int(seconds // 60))


def shift(
    original_start: datetime, original_end: datetime, new_start: datetime
) -> tuple[datetime, datetime]:
    """Move a window to ``new_start`` keeping its exact elapsed length."""
    elapsed = original_end.astimezone(UTC) - original_start.astimezone(UTC)
    new_end = (new_start.astimezone(UTC) + elapsed).astimezone(new_start.tzinfo)
    return new_start, new_end


def day_range(day: date, tz: ZoneInfo | timezone) -> TimeRange:
    """The [midnight, next midnight) window of ``day`` in ``tz``."""
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=tz)
    return TimeRange(start=start, end=end)


def local_day(instant: datetime, tz: ZoneInfo | timezone) -> date:
    """Calendar day of an instant as seen in ``tz``."""
    return instant.astimezone(tz).date()


def to_storage(instant: datetime) -> str:
    """Fixed-width UTC text form; sorts lexically in time order."""
    return instant.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def from_storage(value: str) -> datetime:
    """Inverse of to_storage."""
    return datetime.fromisoformat(value.replace("Z", "+00:00"))
