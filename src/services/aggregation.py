"""
Workload and heatmap aggregation over an in-memory event collection.

All functions are pure: they never mutate their inputs and return the same
output for the same input.
"""

import math
from collections import defaultdict
from datetime import date, datetime, timedelta, timezone
from typing import Iterable, Sequence
from zoneinfo import ZoneInfo

from core.colors import contrast_text_color
from core.config import HEAT_PALETTE, HEATMAP_INTERVAL_CAP
from core.timeutils import duration_minutes, local_day
from models.events import (
    Event,
    HeatmapBucket,
    Interval,
    Overlap,
    Resource,
    WorkloadReport,
    WorkloadSummary,
)


# =============================================================================
# WORKLOAD
# =============================================================================


def summarize_workload(
    events: Iterable[Event], resources: Sequence[Resource]
) -> WorkloadReport:
    """
    Per-resource workload, busiest first.

    Every resource gets a row, even with no events. Events pointing at a
    resource missing from ``resources`` still get a row (named by id) so the
    row totals always add up to the event totals. Ties on total minutes are
    broken by resource id.
    """
    minutes: dict[str, int] = defaultdict(int)
    counts: dict[str, int] = defaultdict(int)
    total_events = 0

    for event in events:
        minutes[event.resource_id] += event.duration_minutes
        counts[event.resource_id] += 1
        total_events += 1

    known = {resource.id: resource for resource in resources}
    resource_ids = list(known) + sorted(rid for rid in counts if rid not in known)
    total_minutes = sum(minutes.values())

    rows = []
    for resource_id in resource_ids:
        resource = known.get(resource_id)
        row_minutes = minutes.get(resource_id, 0)
        row_count = counts.get(resource_id, 0)
        total_hours = row_minutes / 60
        rows.append(
            WorkloadSummary(
                resource_id=resource_id,
                name=resource.name if resource else resource_id,
                role=resource.role if resource else None,
                event_count=row_count,
                total_minutes=row_minutes,
                total_hours=total_hours,
                avg_hours_per_event=total_hours / row_count if row_count else 0.0,
                share=row_minutes / total_minutes if total_minutes else 0.0,
            )
        )

    rows.sort(key=lambda row: (-row.total_minutes, row.resource_id))

    all_hours = total_minutes / 60
    return WorkloadReport(
        rows=rows,
        total_minutes=total_minutes,
        total_events=total_events,
        total_hours=all_hours,
        avg_hours_per_event=all_hours / total_events if total_events else 0.0,
    )


# =============================================================================
# HEATMAP
# =============================================================================


def merge_intervals(intervals: Iterable[Interval]) -> list[Interval]:
    """
    Collapse intervals into the minimal set of disjoint busy spans.

    Touching intervals (one ends exactly when the next starts) merge the
    same way overlapping ones do.
    """
    merged: list[Interval] = []
    for interval in sorted(intervals, key=lambda item: (item.start, item.end)):
        if merged and interval.start <= merged[-1].end:
            last = merged[-1]
            if interval.end > last.end:
                merged[-1] = Interval(start=last.start, end=interval.end)
        else:
            merged.append(interval)
    return merged


def heat_ratio(minutes: int, max_minutes: int) -> float:
    """Load relative to the busiest day, clamped to [0, 1]."""
    ratio = minutes / max(1, max_minutes)
    return min(1.0, max(0.0, ratio))


def heat_color(minutes: int, max_minutes: int, palette: Sequence[str] = HEAT_PALETTE) -> str:
    """Map a day's load onto the discrete severity palette."""
    ratio = heat_ratio(minutes, max_minutes)
    index = min(math.floor(ratio * len(palette)), len(palette) - 1)
    return palette[index]


def build_heatmap(
    events: Iterable[Event],
    tz: ZoneInfo | timezone,
    cap: int = HEATMAP_INTERVAL_CAP,
    first_day: date | None = None,
    last_day: date | None = None,
    palette: Sequence[str] = HEAT_PALETTE,
) -> list[HeatmapBucket]:
    """
    Bucket events by the calendar day (in ``tz``) on which they start.

    Each bucket carries its merged busy intervals; only the first ``cap``
    are listed, the rest are counted in ``overflow_count`` and labelled
    "+N". When ``first_day`` and ``last_day`` are given, days without events
    are included as empty buckets. Buckets are returned in day order.
    """
    by_day: dict[date, list[Event]] = defaultdict(list)
    for event in events:
        by_day[local_day(event.start, tz)].append(event)

    days = set(by_day)
    if first_day is not None and last_day is not None:
        day = first_day
        while day <= last_day:
            days.add(day)
            day += timedelta(days=1)

    day_minutes = {
        day: sum(event.duration_minutes for event in by_day.get(day, [])) for day in days
    }
    max_minutes = max(day_minutes.values(), default=0)

    buckets = []
    for day in sorted(days):
        day_events = by_day.get(day, [])
        merged = merge_intervals(
            Interval(start=event.start, end=event.end) for event in day_events
        )
        overflow = max(0, len(merged) - cap)
        color = heat_color(day_minutes[day], max_minutes, palette)
        buckets.append(
            HeatmapBucket(
                day=day,
                total_minutes=day_minutes[day],
                event_count=len(day_events),
                earliest_start=min((e.start for e in day_events), default=None),
                latest_end=max((e.end for e in day_events), default=None),
                merged_intervals=merged[:cap],
                overflow_count=overflow,
                overflow_label=f"+{overflow}" if overflow else None,
                ratio=heat_ratio(day_minutes[day], max_minutes),
                color=color,
                text_color=contrast_text_color(color),
            )
        )
    return buckets


# =============================================================================
# DOUBLE BOOKING
# =============================================================================


def find_overlaps(events: Iterable[Event]) -> list[Overlap]:
    """
    Pairs of events on the same resource whose windows intersect.

    Double booking is allowed; this only reports it. Touching events
    (one ends as the next starts) are not overlaps.
    """
    by_resource: dict[str, list[Event]] = defaultdict(list)
    for event in events:
        by_resource[event.resource_id].append(event)

    overlaps = []
    for resource_id in sorted(by_resource):
        ordered = sorted(by_resource[resource_id], key=lambda e: (e.start, e.end, e.id))
        for i, first in enumerate(ordered):
            for second in ordered[i + 1 :]:
                if second.start >= first.end:
                    break
                overlap_end: datetime = min(first.end, second.end)
                overlaps.append(
                    Overlap(
                        resource_id=resource_id,
                        first=first,
                        second=second,
                        overlap_minutes=duration_minutes(second.start, overlap_end),
                    )
                )
    return overlaps
