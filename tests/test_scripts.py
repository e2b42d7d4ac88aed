"""Tests for the workload report CLI helpers."""

from datetime import date

import pytest

from scripts.create_workload_report import get_date_range


def test_explicit_range():
    assert get_date_range("2024-01-01", "2024-01-07") == (date(2024, 1, 1), date(2024, 1, 7))


def test_start_defaults_to_six_days_before_end():
    assert get_date_range(None, "2024-01-07") == (date(2024, 1, 1), date(2024, 1, 7))


@pytest.mark.parametrize(
    "start, end",
    [(None, "01/07/2024"), ("2024-1-x", "2024-01-07"), ("bad", None)],
)
def test_malformed_dates_exit(start, end):
    with pytest.raises(SystemExit, match="YYYY-MM-DD"):
        get_date_range(start, end)


def test_end_before_start_exits():
    with pytest.raises(SystemExit, match="--end"):
        get_date_range("2024-01-07", "2024-01-01")
