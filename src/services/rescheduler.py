"""
Drag/drop rescheduling.

Moving an event keeps its length: only the start anchor (and optionally the
resource) changes. On the client side the move is optimistic; a failed write
is recovered by re-fetching the range, never by undoing locally, because
after a failed write the store's real state is unknown.
"""

import logging
from datetime import datetime

from core.errors import ScheduleError
from core.timeutils import shift
from models.events import Event
from services.notifications import LoggingNotifier, Notifier
from services.schedule_view import ScheduleView
from services.store import EventStore

logger = logging.getLogger(__name__)


def move_changes(event: Event, new_start: datetime, resource_id: str | None = None) -> dict:
    """Sparse patch that moves ``event`` to ``new_start`` (and resource)."""
    start, end = shift(event.start, event.end, new_start)
    changes = {"start": start, "end": end}
    if resource_id is not None:
        changes["resource_id"] = resource_id
    return changes


async def move_event(
    store: EventStore, event_id: str, new_start: datetime, resource_id: str | None = None
) -> Event:
    """Move a stored event to a new start (and resource), preserving duration."""
    current = await store.get_event(event_id)
    return await store.update_event(event_id, move_changes(current, new_start, resource_id))


class Rescheduler:
    """Applies drag/drop moves to a ScheduleView and its store."""

    def __init__(self, view: ScheduleView, notifier: Notifier | None = None):
        self.view = view
        self.notifier = notifier or LoggingNotifier()

    async def move(
        self, event_id: str, new_start: datetime, resource_id: str | None = None
    ) -> Event | None:
        """
        Move an event shown in the view.

        1. Compute the new window from the event's current duration
        2. Show it immediately as an unconfirmed change
        3. Write it to the store
        4. On success, replace it with the server's copy
        5. On failure, notify and re-fetch the whole range

        Returns the confirmed event, or None if the move failed.
        """
        original = self.view.get(event_id)
        if original is None:
            raise KeyError(f"Event '{event_id}' is not in the current view")

        changes = move_changes(original, new_start, resource_id)
        self.view.apply_tentative(event_id, **changes)

        try:
            updated = await self.view.store.update_event(event_id, changes)
        except ScheduleError as e:
            logger.warning("Move of event %s failed: %s", event_id, e)
            self.notifier.notify("error", e.message)
            await self.view.refresh()
            return None

        self.view.confirm(updated)
        return updated
