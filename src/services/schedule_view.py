"""
In-memory event collection owned by the active calendar view.

The collection changes in exactly three ways, each applied as one
synchronous step:

1. a completed range fetch replaces everything
2. a tentative (optimistic) patch changes one event and marks it unconfirmed
3. a server-confirmed create/update/delete upserts or removes one event

Range fetches are numbered. A fetch that completes after a newer one was
started is stale and its result is dropped.
"""

import logging
from dataclasses import dataclass, replace
from typing import Any

from core.errors import StaleResponseError
from core.timeutils import TimeRange
from models.events import Event
from services.store import EventStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ViewEntry:
    event: Event
    confirmed: bool = True


class ScheduleView:
    """Locally held, possibly stale copy of the events in one range."""

    def __init__(self, store: EventStore, resource_id: str | None = None):
        self.store = store
        self.resource_id = resource_id
        self.current_range: TimeRange | None = None
        self._entries: dict[str, ViewEntry] = {}
        self._generation = 0

    # -------------------------------------------------------------------------
    # Range fetches
    # -------------------------------------------------------------------------

    def begin_fetch(self, time_range: TimeRange) -> int:
        """Select a new range and return the generation number for its fetch."""
        self._generation += 1
        self.current_range = time_range
        return self._generation

    def commit_fetch(self, generation: int, events: list[Event]) -> None:
        """Replace the collection with a fetch result, unless it is stale."""
        if generation != self._generation:
            raise StaleResponseError(generation, self._generation)
        self._entries = {event.id: ViewEntry(event) for event in events}

    async def load(self, time_range: TimeRange) -> bool:
        """
        Fetch ``time_range`` from the store and show it.

        Returns False when a newer load superseded this one before it
        completed; the stale result is discarded.
        """
        generation = self.begin_fetch(time_range)
        events = await self.store.list_events(time_range, self.resource_id)
        try:
            self.commit_fetch(generation, events)
        except StaleResponseError as e:
            logger.debug("Discarding stale range fetch: %s", e)
            return False
        return True

    async def refresh(self) -> bool:
        """Re-fetch the current range from the store."""
        if self.current_range is None:
            return False
        return await self.load(self.current_range)

    # -------------------------------------------------------------------------
    # Single-event mutations
    # -------------------------------------------------------------------------

    def apply_tentative(self, event_id: str, **changes: Any) -> Event:
        """Patch one event locally and mark it unconfirmed."""
        entry = self._entries[event_id]
        patched = replace(entry.event, **changes)
        self._entries[event_id] = ViewEntry(patched, confirmed=False)
        return patched

    def confirm(self, event: Event) -> None:
        """Upsert the server's canonical copy of an event."""
        self._entries[event.id] = ViewEntry(event, confirmed=True)

    def remove(self, event_id: str) -> None:
        self._entries.pop(event_id, None)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get(self, event_id: str) -> Event | None:
        entry = self._entries.get(event_id)
        return entry.event if entry else None

    def is_confirmed(self, event_id: str) -> bool:
        return self._entries[event_id].confirmed

    def events(self) -> list[Event]:
        """Snapshot of the collection ordered by start."""
        return sorted(
            (entry.event for entry in self._entries.values()),
            key=lambda event: (event.start, event.id),
        )

    @property
    def generation(self) -> int:
        return self._generation
