"""Workload, heatmap and double-booking reports."""

import asyncio
from datetime import timedelta

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from api.dependencies import get_event_store, get_resource_store, get_time_range
from api.models.responses import (
    HeatmapBucketOut,
    HeatmapResponse,
    OverlapOut,
    OverlapResponse,
    WorkloadResponse,
)
from core.config import HEATMAP_INTERVAL_CAP
from core.timeutils import UTC, TimeRange, local_day, resolve_zone
from services.aggregation import build_heatmap, find_overlaps, summarize_workload
from services.reports import create_workload_workbook, report_filename, workbook_to_bytes
from services.store import EventStore, ResourceStore

router = APIRouter(prefix="/reports", tags=["reports"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@router.get("/workload", response_model=WorkloadResponse)
async def workload_report(
    time_range: TimeRange = Depends(get_time_range),
    events_store: EventStore = Depends(get_event_store),
    resource_store: ResourceStore = Depends(get_resource_store),
):
    """Per-resource event count and hours, busiest first."""
    events = await events_store.list_events(time_range)
    resources = await resource_store.list_resources()
    report = summarize_workload(events, resources)
    return WorkloadResponse.from_report(report, time_range.start, time_range.end)


@router.get("/workload.xlsx")
async def workload_spreadsheet(
    time_range: TimeRange = Depends(get_time_range),
    tz: str | None = Query(default=None),
    events_store: EventStore = Depends(get_event_store),
    resource_store: ResourceStore = Depends(get_resource_store),
):
    """Download the workload report as an Excel workbook."""
    zone = resolve_zone(tz) if tz else UTC
    events = await events_store.list_events(time_range)
    resources = await resource_store.list_resources()
    report = summarize_workload(events, resources)

    wb = create_workload_workbook(report, events, resources, zone)
    content = await asyncio.to_thread(workbook_to_bytes, wb)

    first_day = local_day(time_range.start, zone) if time_range.start else None
    last_day = (
        local_day(time_range.end - timedelta(microseconds=1), zone) if time_range.end else None
    )
    filename = report_filename(first_day, last_day)
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/heatmap", response_model=HeatmapResponse)
async def heatmap_report(
    tz: str = Query(..., description="IANA time zone that defines calendar days"),
    cap: int = Query(default=HEATMAP_INTERVAL_CAP, ge=0, le=48),
    time_range: TimeRange = Depends(get_time_range),
    store: EventStore = Depends(get_event_store),
):
    """
    Per-day load buckets.

    When both range bounds are given, every day in the range gets a bucket,
    including idle days.
    """
    zone = resolve_zone(tz)
    events = await store.list_events(time_range)

    first_day = last_day = None
    if time_range.start and time_range.end:
        first_day = local_day(time_range.start, zone)
        last_day = local_day(time_range.end - timedelta(microseconds=1), zone)

    buckets = build_heatmap(events, zone, cap=cap, first_day=first_day, last_day=last_day)
    return HeatmapResponse(tz=tz, buckets=[HeatmapBucketOut.from_bucket(b) for b in buckets])


@router.get("/overlaps", response_model=OverlapResponse)
async def overlap_report(
    time_range: TimeRange = Depends(get_time_range),
    store: EventStore = Depends(get_event_store),
):
    """Double-booked resources: pairs of overlapping events per resource."""
    events = await store.list_events(time_range)
    return OverlapResponse(overlaps=[OverlapOut.from_overlap(o) for o in find_overlaps(events)])
