"""Schedule event endpoints."""

from fastapi import APIRouter, Depends, status

from api.dependencies import get_event_store, get_resource_filter, get_time_range
from api.models.requests import EventCreate, EventMove, EventPatch
from api.models.responses import EventListResponse, EventOut, EventResponse
from core.timeutils import TimeRange
from services.rescheduler import move_event
from services.store import EventStore

router = APIRouter(prefix="/events", tags=["events"])


@router.get("", response_model=EventListResponse)
async def list_events(
    time_range: TimeRange = Depends(get_time_range),
    resource_id: str | None = Depends(get_resource_filter),
    store: EventStore = Depends(get_event_store),
):
    """List events inside the range, ordered by start."""
    events = await store.list_events(time_range, resource_id)
    return EventListResponse(events=[EventOut.from_event(e) for e in events])


@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(body: EventCreate, store: EventStore = Depends(get_event_store)):
    event = await store.create_event(body.to_draft())
    return EventResponse(event=EventOut.from_event(event))


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(event_id: str, store: EventStore = Depends(get_event_store)):
    event = await store.get_event(event_id)
    return EventResponse(event=EventOut.from_event(event))


@router.patch("/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: str, body: EventPatch, store: EventStore = Depends(get_event_store)
):
    """
    Update only the fields present in the body.

    Returns 400 when the body carries no updatable field.
    """
    event = await store.update_event(event_id, body.to_changes())
    return EventResponse(event=EventOut.from_event(event))


@router.post("/{event_id}/move", response_model=EventResponse)
async def move_event_endpoint(
    event_id: str, body: EventMove, store: EventStore = Depends(get_event_store)
):
    """Move an event to a new start (and resource), keeping its duration."""
    event = await move_event(store, event_id, body.new_start(), body.resource_id)
    return EventResponse(event=EventOut.from_event(event))


@router.delete("/{event_id}", response_model=EventResponse)
async def delete_event(event_id: str, store: EventStore = Depends(get_event_store)):
    """Delete an event and return the removed snapshot."""
    event = await store.delete_event(event_id)
    return EventResponse(event=EventOut.from_event(event))
