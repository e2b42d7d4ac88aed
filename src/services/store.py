"""
Async store interface for resources and schedule events.

Each store is bound to one caller; every method is a single round trip to
the database, run in a worker thread so the event loop stays free. Nothing
is retried: an operation either succeeds once or raises.
"""

import asyncio
import logging
import sqlite3
import uuid
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Mapping, TypeVar

from core import database
from core.errors import NotFoundError, PersistenceError
from core.timeutils import TimeRange, from_storage, to_storage
from core.validation import (
    validate_event_draft,
    validate_event_patch,
    validate_resource,
    validate_resource_patch,
)
from models.events import Event, EventDraft, EventRow, Resource, ResourceRow

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Domain field -> events table column
EVENT_COLUMN_MAP = {
    "title": "title",
    "description": "description",
    "start": "start_at",
    "end": "end_at",
    "resource_id": "resource_id",
    "color": "color",
}


def row_to_event(row: EventRow) -> Event:
    return Event(
        id=row["id"],
        title=row["title"],
        start=from_storage(row["start_at"]),
        end=from_storage(row["end_at"]),
        resource_id=row["resource_id"],
        description=row["description"],
        color=row["color"],
    )


def row_to_resource(row: ResourceRow) -> Resource:
    return Resource(
        id=row["id"],
        name=row["name"],
        role=row["role"],
        color=row["color"],
        created_at=from_storage(row["created_at"]) if row["created_at"] else None,
    )


class _ScopedStore:
    """Shared plumbing: one connection and transaction per operation."""

    def __init__(self, db_path: Path, caller_id: str):
        self.db_path = db_path
        self.caller_id = caller_id

    async def _run(self, func: Callable[..., T], *args: Any) -> T:
        return await asyncio.to_thread(self._in_transaction, func, *args)

    def _in_transaction(self, func: Callable[..., T], *args: Any) -> T:
        conn = None
        try:
            conn = database.get_connection(self.db_path)
            result = func(conn, *args)
            conn.commit()
            return result
        except sqlite3.IntegrityError as e:
            if conn is not None:
                conn.rollback()
            logger.warning("Store rejected write for %s: %s", self.caller_id, e)
            raise PersistenceError(str(e), integrity=True) from e
        except sqlite3.Error as e:
            if conn is not None:
                conn.rollback()
            logger.error("Store failure for %s: %s", self.caller_id, e)
            raise PersistenceError(str(e)) from e
        finally:
            if conn is not None:
                conn.close()


class EventStore(_ScopedStore):
    """CRUD and range queries for schedule events."""

    async def list_events(
        self, time_range: TimeRange | None = None, resource_id: str | None = None
    ) -> list[Event]:
        """
        Events inside ``time_range``, ordered by start ascending.

        An event is inside the range when it starts at or after
        ``time_range.start`` and ends at or before ``time_range.end``.
        Open bounds are not filtered.
        """
        time_range = time_range or TimeRange()
        start_at = to_storage(time_range.start) if time_range.start else None
        end_at = to_storage(time_range.end) if time_range.end else None

        rows = await self._run(
            database.select_events, self.caller_id, start_at, end_at, resource_id
        )
        return [row_to_event(row) for row in rows]

    async def get_event(self, event_id: str) -> Event:
        row = await self._run(database.select_event, self.caller_id, event_id)
        if row is None:
            raise NotFoundError("Event", event_id)
        return row_to_event(row)

    async def create_event(self, draft: EventDraft) -> Event:
        """Validate and insert a new event. Returns the stored copy."""
        validate_event_draft(draft)
        return await self._run(self._create, draft)

    def _create(self, conn: sqlite3.Connection, draft: EventDraft) -> Event:
        event_id = str(uuid.uuid4())
        database.insert_event(
            conn,
            {
                "id": event_id,
                "owner_id": self.caller_id,
                "resource_id": draft.resource_id,
                "title": draft.title.strip(),
                "description": draft.description,
                "start_at": to_storage(draft.start),
                "end_at": to_storage(draft.end),
                "color": draft.color,
            },
        )
        logger.info("Created event %s for resource %s", event_id, draft.resource_id)
        return row_to_event(database.select_event(conn, self.caller_id, event_id))

    async def update_event(self, event_id: str, changes: Mapping[str, Any]) -> Event:
        """
        Apply a sparse patch.

        Only keys present in ``changes`` are written; the merged event must
        still satisfy every creation rule.
        """
        validate_event_patch(changes)
        return await self._run(self._update, event_id, dict(changes))

    def _update(
        self, conn: sqlite3.Connection, event_id: str, changes: dict[str, Any]
    ) -> Event:
        row = database.select_event(conn, self.caller_id, event_id)
        if row is None:
            raise NotFoundError("Event", event_id)

        current = row_to_event(row)
        merged = EventDraft(
            title=current.title,
            start=current.start,
            end=current.end,
            resource_id=current.resource_id,
            description=current.description,
            color=current.color,
        )
        merged = replace(merged, **changes)
        validate_event_draft(merged)

        columns = {}
        for name, value in changes.items():
            if name in ("start", "end"):
                value = to_storage(value)
            elif name == "title":
                value = value.strip()
            columns[EVENT_COLUMN_MAP[name]] = value

        database.update_event_row(conn, self.caller_id, event_id, columns)
        return row_to_event(database.select_event(conn, self.caller_id, event_id))

    async def delete_event(self, event_id: str) -> Event:
        """Delete and return the removed event."""
        return await self._run(self._delete, event_id)

    def _delete(self, conn: sqlite3.Connection, event_id: str) -> Event:
        row = database.select_event(conn, self.caller_id, event_id)
        if row is None:
            raise NotFoundError("Event", event_id)
        database.delete_event_row(conn, self.caller_id, event_id)
        logger.info("Deleted event %s", event_id)
        return row_to_event(row)


class ResourceStore(_ScopedStore):
    """CRUD for resources (employees). Deleting one removes its events."""

    async def list_resources(self) -> list[Resource]:
        rows = await self._run(database.select_resources, self.caller_id)
        return [row_to_resource(row) for row in rows]

    async def get_resource(self, resource_id: str) -> Resource:
        row = await self._run(database.select_resource, self.caller_id, resource_id)
        if row is None:
            raise NotFoundError("Resource", resource_id)
        return row_to_resource(row)

    async def create_resource(
        self, name: str | None, role: str | None = None, color: str | None = None
    ) -> Resource:
        validate_resource(name, color)
        return await self._run(self._create, name.strip(), role, color)

    def _create(
        self, conn: sqlite3.Connection, name: str, role: str | None, color: str | None
    ) -> Resource:
        resource_id = str(uuid.uuid4())
        database.insert_resource(
            conn,
            {
                "id": resource_id,
                "owner_id": self.caller_id,
                "name": name,
                "role": role,
                "color": color,
            },
        )
        logger.info("Created resource %s (%s)", resource_id, name)
        return row_to_resource(database.select_resource(conn, self.caller_id, resource_id))

    async def update_resource(self, resource_id: str, changes: Mapping[str, Any]) -> Resource:
        validate_resource_patch(changes)
        return await self._run(self._update, resource_id, dict(changes))

    def _update(
        self, conn: sqlite3.Connection, resource_id: str, changes: dict[str, Any]
    ) -> Resource:
        row = database.select_resource(conn, self.caller_id, resource_id)
        if row is None:
            raise NotFoundError("Resource", resource_id)

        validate_resource(changes.get("name", row["name"]), changes.get("color", row["color"]))
        if changes.get("name"):
            changes["name"] = changes["name"].strip()

        database.update_resource_row(conn, self.caller_id, resource_id, changes)
        return row_to_resource(database.select_resource(conn, self.caller_id, resource_id))

    async def delete_resource(self, resource_id: str) -> Resource:
        """Delete a resource and, by cascade, all of its events."""
        return await self._run(self._delete, resource_id)

    def _delete(self, conn: sqlite3.Connection, resource_id: str) -> Resource:
        row = database.select_resource(conn, self.caller_id, resource_id)
        if row is None:
            raise NotFoundError("Resource", resource_id)
        database.delete_resource_row(conn, self.caller_id, resource_id)
        logger.info("Deleted resource %s and its events", resource_id)
        return row_to_resource(row)
