"""
Data models for resources, schedule events and derived reports.

Stored rows are TypedDicts (what the database hands back); domain entities
are frozen dataclasses.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import TypedDict

from core.timeutils import duration_minutes


class ResourceRow(TypedDict):
    """Row of the resources table."""
    id: str
    owner_id: str
    name: str
    role: str | None
    color: str | None
    created_at: str


class EventRow(TypedDict):
    """Row of the events table."""
    id: str
    owner_id: str
    resource_id: str
    title: str
    description: str | None
    start_at: str
    end_at: str
    color: str | None


@dataclass(frozen=True)
class Resource:
    """A schedulable employee."""

    id: str
    name: str
    role: str | None = None
    color: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class Event:
    """A titled time interval assigned to one resource."""

    id: str
    title: str
    start: datetime
    end: datetime
    resource_id: str
    description: str | None = None
    color: str | None = None

    @property
    def duration_minutes(self) -> int:
        return duration_minutes(self.start, self.end)


@dataclass
class EventDraft:
    """Fields for a new event, before validation."""

    title: str | None
    start: datetime | None
    end: datetime | None
    resource_id: str | None
    description: str | None = None
    color: str | None = None


EVENT_PATCH_FIELDS = ("title", "description", "start", "end", "resource_id", "color")
RESOURCE_PATCH_FIELDS = ("name", "role", "color")


# =============================================================================
# DERIVED REPORT MODELS
# =============================================================================


@dataclass(frozen=True)
class WorkloadSummary:
    """Per-resource load over a queried range."""

    resource_id: str
    name: str
    role: str | None
    event_count: int
    total_minutes: int
    total_hours: float
    avg_hours_per_event: float
    share: float


@dataclass(frozen=True)
class WorkloadReport:
    """Workload rows plus range-wide totals."""

    rows: list[WorkloadSummary]
    total_minutes: int
    total_events: int
    total_hours: float
    avg_hours_per_event: float


@dataclass(frozen=True)
class Interval:
    start: datetime
    end: datetime


@dataclass(frozen=True)
class HeatmapBucket:
    """Load for one calendar day."""

    day: date
    total_minutes: int
    event_count: int
    earliest_start: datetime | None
    latest_end: datetime | None
    merged_intervals: list[Interval] = field(default_factory=list)
    overflow_count: int = 0
    overflow_label: str | None = None
    ratio: float = 0.0
    color: str = ""
    text_color: str = ""


@dataclass(frozen=True)
class Overlap:
    """Two events on the same resource whose windows intersect."""

    resource_id: str
    first: Event
    second: Event
    overlap_minutes: int
