"""Pydantic response models for API endpoints."""

from dataclasses import asdict
from datetime import date, datetime

from pydantic import BaseModel

from core.colors import contrast_text_color
from models.events import Event, HeatmapBucket, Overlap, Resource, WorkloadReport


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "healthy" or "unhealthy"
    version: str
    database_available: bool
    timestamp: str  # ISO 8601 UTC
    error: str | None = None


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    code: str
    details: list[str] = []


class ErrorCodes:
    """Error code constants."""

    INVALID_REQUEST = "INVALID_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    PERSISTENCE_ERROR = "PERSISTENCE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class CallerResponse(BaseModel):
    caller: str


# =============================================================================
# ENTITIES
# =============================================================================


class EventOut(BaseModel):
    id: str
    title: str
    description: str | None
    start_at: datetime
    end_at: datetime
    resource_id: str
    color: str | None
    text_color: str | None

    @classmethod
    def from_event(cls, event: Event) -> "EventOut":
        return cls(
            id=event.id,
            title=event.title,
            description=event.description,
            start_at=event.start,
            end_at=event.end,
            resource_id=event.resource_id,
            color=event.color,
            text_color=contrast_text_color(event.color) if event.color else None,
        )


class EventResponse(BaseModel):
    event: EventOut


class EventListResponse(BaseModel):
    events: list[EventOut]


class ResourceOut(BaseModel):
    id: str
    name: str
    role: str | None
    color: str | None
    text_color: str | None
    created_at: datetime | None

    @classmethod
    def from_resource(cls, resource: Resource) -> "ResourceOut":
        return cls(
            id=resource.id,
            name=resource.name,
            role=resource.role,
            color=resource.color,
            text_color=contrast_text_color(resource.color) if resource.color else None,
            created_at=resource.created_at,
        )


class ResourceResponse(BaseModel):
    resource: ResourceOut


class ResourceListResponse(BaseModel):
    resources: list[ResourceOut]


# =============================================================================
# REPORTS
# =============================================================================


class WorkloadRowOut(BaseModel):
    resource_id: str
    name: str
    role: str | None
    event_count: int
    total_minutes: int
    total_hours: float
    avg_hours_per_event: float
    share: float


class WorkloadResponse(BaseModel):
    start: datetime | None
    end: datetime | None
    rows: list[WorkloadRowOut]
    total_minutes: int
    total_events: int
    total_hours: float
    avg_hours_per_event: float

    @classmethod
    def from_report(
        cls, report: WorkloadReport, start: datetime | None, end: datetime | None
    ) -> "WorkloadResponse":
        return cls(
            start=start,
            end=end,
            rows=[WorkloadRowOut(**asdict(row)) for row in report.rows],
            total_minutes=report.total_minutes,
            total_events=report.total_events,
            total_hours=report.total_hours,
            avg_hours_per_event=report.avg_hours_per_event,
        )


class IntervalOut(BaseModel):
    start: datetime
    end: datetime


class HeatmapBucketOut(BaseModel):
    day: date
    total_minutes: int
    event_count: int
    earliest_start: datetime | None
    latest_end: datetime | None
    merged_intervals: list[IntervalOut]
    overflow_count: int
    overflow_label: str | None
    ratio: float
    color: str
    text_color: str

    @classmethod
    def from_bucket(cls, bucket: HeatmapBucket) -> "HeatmapBucketOut":
        return cls(
            day=bucket.day,
            total_minutes=bucket.total_minutes,
            event_count=bucket.event_count,
            earliest_start=bucket.earliest_start,
            latest_end=bucket.latest_end,
            merged_intervals=[
                IntervalOut(start=i.start, end=i.end) for i in bucket.merged_intervals
            ],
            overflow_count=bucket.overflow_count,
            overflow_label=bucket.overflow_label,
            ratio=bucket.ratio,
            color=bucket.color,
            text_color=bucket.text_color,
        )


class HeatmapResponse(BaseModel):
    tz: str
    buckets: list[HeatmapBucketOut]


class OverlapOut(BaseModel):
    resource_id: str
    first: EventOut
    second: EventOut
    overlap_minutes: int

    @classmethod
    def from_overlap(cls, overlap: Overlap) -> "OverlapOut":
        return cls(
            resource_id=overlap.resource_id,
            first=EventOut.from_event(overlap.first),
            second=EventOut.from_event(overlap.second),
            overlap_minutes=overlap.overlap_minutes,
        )


class OverlapResponse(BaseModel):
    overlaps: list[OverlapOut]
