#!/usr/bin/env python3
"""
Create a workload report (Excel) for one caller over a date range.

Reads events and resources from the schedule database, aggregates
per-resource workload, and writes a two-sheet workbook.

Usage:
    uv run python src/scripts/create_workload_report.py --caller alice \
        --start 2024-01-01 --end 2024-01-07 --tz Europe/Berlin
"""

import argparse
import asyncio
import sys
from datetime import date, timedelta
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import DB_PATH, OUTPUT_DIR
from core.timeutils import TimeRange, day_range, parse_date, resolve_zone
from services.aggregation import summarize_workload
from services.reports import create_workload_workbook, report_filename, save_workbook
from services.store import EventStore, ResourceStore


# =============================================================================
# DATE UTILITIES
# =============================================================================


def get_date_range(start_str: str | None, end_str: str | None) -> tuple[date, date]:
    """
    Resolve the report's first and last day.

    Defaults to the seven days ending today.
    """
    last = parse_date(end_str) if end_str else date.today()
    if last is None:
        raise SystemExit("Dates must be in YYYY-MM-DD format")
    first = parse_date(start_str) if start_str else last - timedelta(days=6)
    if first is None:
        raise SystemExit("Dates must be in YYYY-MM-DD format")
    if last < first:
        raise SystemExit("--end must not be before --start")
    return first, last


# =============================================================================
# MAIN
# =============================================================================


async def main(caller: str, start_str: str | None, end_str: str | None, tz_name: str) -> Path:
    """Main entry point for the workload report."""
    zone = resolve_zone(tz_name)
    first_day, last_day = get_date_range(start_str, end_str)
    time_range = TimeRange(
        start=day_range(first_day, zone).start, end=day_range(last_day, zone).end
    )
    print(f"Generating workload report for {first_day} to {last_day} ({tz_name})")

    events = await EventStore(DB_PATH, caller).list_events(time_range)
    resources = await ResourceStore(DB_PATH, caller).list_resources()
    print(f"Found {len(events)} events across {len(resources)} resources")

    report = summarize_workload(events, resources)
    for row in report.rows:
        print(f"  {row.name}: {row.event_count} events, {row.total_hours:.1f} h")

    wb = create_workload_workbook(report, events, resources, zone)
    output_path = save_workbook(
        wb, OUTPUT_DIR / "reports" / caller / report_filename(first_day, last_day)
    )
    print(f"Saved Excel report to: {output_path}")
    return output_path


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Generate workload report")
    parser.add_argument("--caller", required=True, help="Caller id whose schedule to report")
    parser.add_argument("--start", help="First day (YYYY-MM-DD). Defaults to 6 days before --end.")
    parser.add_argument("--end", help="Last day (YYYY-MM-DD). Defaults to today.")
    parser.add_argument("--tz", default="UTC", help="IANA time zone for day boundaries")
    args = parser.parse_args()

    asyncio.run(main(args.caller, args.start, args.end, args.tz))
