"""Tests for time parsing and range arithmetic."""

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from core.errors import ValidationError
from core.timeutils import (
    day_range,
    duration_minutes,
    from_storage,
    local_day,
    parse_time,
    resolve_zone,
    shift,
    to_storage,
)

from conftest import utc

BERLIN = ZoneInfo("Europe/Berlin")


class TestParseTime:
    def test_short_time_uses_reference_day(self):
        parsed = parse_time("09:00", date(2024, 1, 1))
        assert parsed == utc(2024, 1, 1, 9, 0)

    def test_short_time_in_zone(self):
        parsed = parse_time("09:00", date(2024, 1, 1), BERLIN)
        assert parsed == utc(2024, 1, 1, 8, 0)

    def test_short_time_without_reference_is_invalid(self):
        assert parse_time("09:00") is None

    def test_short_time_out_of_range(self):
        assert parse_time("25:00", date(2024, 1, 1)) is None

    def test_iso_with_z(self):
        assert parse_time("2024-01-01T09:00Z") == utc(2024, 1, 1, 9, 0)

    def test_iso_with_offset(self):
        assert parse_time("2024-01-01T10:00:00+01:00") == utc(2024, 1, 1, 9, 0)

    def test_naive_iso_uses_zone(self):
        assert parse_time("2024-07-01T12:00:00", tz=BERLIN) == utc(2024, 7, 1, 10, 0)

    @pytest.mark.parametrize("value", ["", "tomorrow", "2024-13-01T00:00Z", None])
    def test_unparseable_returns_none(self, value):
        assert parse_time(value, date(2024, 1, 1)) is None

    @pytest.mark.parametrize(
        "value", ["0001-01-01T00:00:00+01:00", "9999-12-31T23:59:00-01:00"]
    )
    def test_calendar_edge_without_utc_equivalent(self, value):
        assert parse_time(value) is None

    def test_short_time_on_first_day_east_of_utc(self):
        assert parse_time("00:30", date(1, 1, 1), BERLIN) is None

    def test_datetime_passthrough(self):
        value = utc(2024, 1, 1, 9)
        assert parse_time(value) is value


class TestDuration:
    def test_positive(self):
        assert duration_minutes(utc(2024, 1, 1, 9), utc(2024, 1, 1, 9, 30)) == 30

    def test_partial_minutes_truncate(self):
        start = utc(2024, 1, 1, 9)
        assert duration_minutes(start, start + timedelta(seconds=90)) == 1

    @pytest.mark.parametrize("delta_minutes", [0, -1, -60 * 24])
    def test_never_negative(self, delta_minutes):
        start = utc(2024, 1, 1, 9)
        assert duration_minutes(start, start + timedelta(minutes=delta_minutes)) == 0


class TestShift:
    @pytest.mark.parametrize(
        "new_start",
        [utc(2024, 1, 1, 14), utc(2023, 12, 31, 23, 45), utc(2024, 3, 31, 0, 30)],
    )
    def test_preserves_duration(self, new_start):
        start, end = utc(2024, 1, 1, 9), utc(2024, 1, 1, 10, 45)
        moved_start, moved_end = shift(start, end, new_start)
        assert moved_start == new_start
        assert moved_end - moved_start == end - start

    def test_across_dst_keeps_elapsed_time(self):
        start = datetime(2024, 3, 30, 23, 0, tzinfo=BERLIN)
        end = (start.astimezone(timezone.utc) + timedelta(hours=4)).astimezone(BERLIN)
        new_start = datetime(2024, 3, 31, 0, 0, tzinfo=BERLIN)
        moved_start, moved_end = shift(start, end, new_start)
        assert duration_minutes(moved_start, moved_end) == 240
        assert moved_end == datetime(2024, 3, 31, 5, 0, tzinfo=BERLIN)


class TestDays:
    def test_day_range_utc(self):
        window = day_range(date(2024, 1, 1), timezone.utc)
        assert window.start == utc(2024, 1, 1)
        assert window.end == utc(2024, 1, 2)

    def test_day_range_zone(self):
        window = day_range(date(2024, 1, 1), BERLIN)
        assert window.start == utc(2023, 12, 31, 23)

    def test_local_day_near_midnight(self):
        instant = utc(2024, 1, 1, 23, 30)
        assert local_day(instant, timezone.utc) == date(2024, 1, 1)
        assert local_day(instant, BERLIN) == date(2024, 1, 2)

    def test_resolve_zone(self):
        assert resolve_zone("Europe/Berlin") == BERLIN
        with pytest.raises(ValidationError):
            resolve_zone("Mars/Olympus_Mons")

    @pytest.mark.parametrize("name", ["America", "Europe", ""])
    def test_resolve_zone_rejects_non_zones(self, name):
        with pytest.raises(ValidationError):
            resolve_zone(name)


class TestStorageFormat:
    def test_round_trip_and_ordering(self):
        earlier = utc(2024, 1, 1, 9)
        later = datetime(2024, 1, 1, 11, 0, tzinfo=BERLIN)  # 10:00 UTC
        assert from_storage(to_storage(later)) == later
        assert to_storage(earlier) < to_storage(later)
