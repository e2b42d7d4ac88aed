"""
SQLite storage for resources and schedule events.

Every query is scoped by ``owner_id`` (the authenticated caller); no function
here reads or writes across callers. The schema enforces ``end_at > start_at``
and cascades event deletion from resources.
"""

import sqlite3
from pathlib import Path
from typing import Any, Mapping

from models.events import EventRow, ResourceRow

SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS resources (
        id TEXT PRIMARY KEY,
        owner_id TEXT NOT NULL,
        name TEXT NOT NULL CHECK(length(trim(name)) > 0),
        role TEXT,
        color TEXT,
        created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now')),
        UNIQUE (id, owner_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS events (
        id TEXT PRIMARY KEY,
        owner_id TEXT NOT NULL,
        resource_id TEXT NOT NULL,
        title TEXT NOT NULL CHECK(length(trim(title)) > 0),
        description TEXT,
        start_at TEXT NOT NULL,
        end_at TEXT NOT NULL,
        color TEXT,
        CHECK (end_at > start_at),
        FOREIGN KEY (resource_id, owner_id)
            REFERENCES resources(id, owner_id) ON DELETE CASCADE
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_events_owner_start ON events(owner_id, start_at)",
    "CREATE INDEX IF NOT EXISTS idx_events_resource ON events(resource_id, owner_id)",
    # API request logging
    """
    CREATE TABLE IF NOT EXISTS api_requests (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        request_id TEXT UNIQUE NOT NULL,
        timestamp TEXT NOT NULL,
        endpoint TEXT NOT NULL,
        method TEXT NOT NULL,
        client_ip TEXT,
        caller_id TEXT,
        status_code INTEGER NOT NULL,
        error_code TEXT,
        error_message TEXT,
        processing_time_ms INTEGER NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS api_request_details (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        request_id TEXT NOT NULL,
        detail_type TEXT NOT NULL CHECK(detail_type IN ('validation_error', 'warning')),
        message TEXT NOT NULL,
        FOREIGN KEY (request_id) REFERENCES api_requests(request_id)
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_api_requests_timestamp ON api_requests(timestamp)",
    "CREATE INDEX IF NOT EXISTS idx_api_requests_status ON api_requests(status_code)",
    "CREATE INDEX IF NOT EXISTS idx_api_request_details_request ON api_request_details(request_id)",
]

RESOURCE_COLUMNS = "id, owner_id, name, role, color, created_at"
EVENT_COLUMNS = "id, owner_id, resource_id, title, description, start_at, end_at, color"


def get_connection(db_path: Path) -> sqlite3.Connection:
    """Get a database connection with foreign keys enforced."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def create_schema(db_path: Path) -> None:
    """Create tables and indexes if they don't exist."""
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(db_path)
    try:
        for statement in SCHEMA:
            conn.execute(statement)
        conn.commit()
    finally:
        conn.close()


# =============================================================================
# RESOURCES
# =============================================================================


def select_resources(conn: sqlite3.Connection, owner_id: str) -> list[ResourceRow]:
    cursor = conn.execute(
        f"SELECT {RESOURCE_COLUMNS} FROM resources WHERE owner_id = ? "
        "ORDER BY created_at, rowid",
        (owner_id,),
    )
    return [dict(row) for row in cursor.fetchall()]


def select_resource(
    conn: sqlite3.Connection, owner_id: str, resource_id: str
) -> ResourceRow | None:
    row = conn.execute(
        f"SELECT {RESOURCE_COLUMNS} FROM resources WHERE owner_id = ? AND id = ?",
        (owner_id, resource_id),
    ).fetchone()
    return dict(row) if row else None


def insert_resource(conn: sqlite3.Connection, row: Mapping[str, Any]) -> None:
    conn.execute(
        "INSERT INTO resources (id, owner_id, name, role, color) VALUES (?, ?, ?, ?, ?)",
        (row["id"], row["owner_id"], row["name"], row.get("role"), row.get("color")),
    )


def update_resource_row(
    conn: sqlite3.Connection, owner_id: str, resource_id: str, changes: Mapping[str, Any]
) -> int:
    """Write only the given columns. Returns the number of rows touched."""
    return _update_row(conn, "resources", owner_id, resource_id, changes)


def delete_resource_row(conn: sqlite3.Connection, owner_id: str, resource_id: str) -> int:
    cursor = conn.execute(
        "DELETE FROM resources WHERE owner_id = ? AND id = ?", (owner_id, resource_id)
    )
    return cursor.rowcount


# =============================================================================
# EVENTS
# =============================================================================


def select_events(
    conn: sqlite3.Connection,
    owner_id: str,
    start_at: str | None = None,
    end_at: str | None = None,
    resource_id: str | None = None,
) -> list[EventRow]:
    """
    Events for one owner, ordered by start.

    ``start_at``/``end_at`` bound the event window: events must start at or
    after ``start_at`` and end at or before ``end_at``.
    """
    clauses = ["owner_id = ?"]
    params: list[Any] = [owner_id]
    if start_at is not None:
        clauses.append("start_at >= ?")
        params.append(start_at)
    if end_at is not None:
        clauses.append("end_at <= ?")
        params.append(end_at)
    if resource_id is not None:
        clauses.append("resource_id = ?")
        params.append(resource_id)

    cursor = conn.execute(
        f"SELECT {EVENT_COLUMNS} FROM events WHERE {' AND '.join(clauses)} "
        "ORDER BY start_at ASC, id ASC",
        params,
    )
    return [dict(row) for row in cursor.fetchall()]


def select_event(conn: sqlite3.Connection, owner_id: str, event_id: str) -> EventRow | None:
    row = conn.execute(
        f"SELECT {EVENT_COLUMNS} FROM events WHERE owner_id = ? AND id = ?",
        (owner_id, event_id),
    ).fetchone()
    return dict(row) if row else None


def insert_event(conn: sqlite3.Connection, row: Mapping[str, Any]) -> None:
    conn.execute(
        """
        INSERT INTO events (
            id, owner_id, resource_id, title, description, start_at, end_at, color
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            row["id"],
            row["owner_id"],
            row["resource_id"],
            row["title"],
            row.get("description"),
            row["start_at"],
            row["end_at"],
            row.get("color"),
        ),
    )


def update_event_row(
    conn: sqlite3.Connection, owner_id: str, event_id: str, changes: Mapping[str, Any]
) -> int:
    return _update_row(conn, "events", owner_id, event_id, changes)


def delete_event_row(conn: sqlite3.Connection, owner_id: str, event_id: str) -> int:
    cursor = conn.execute(
        "DELETE FROM events WHERE owner_id = ? AND id = ?", (owner_id, event_id)
    )
    return cursor.rowcount


def _update_row(
    conn: sqlite3.Connection,
    table: str,
    owner_id: str,
    record_id: str,
    changes: Mapping[str, Any],
) -> int:
    # Column names come from the fixed patch field lists, never from callers
    assignments = ", ".join(f"{column} = ?" for column in changes)
    cursor = conn.execute(
        f"UPDATE {table} SET {assignments} WHERE owner_id = ? AND id = ?",
        (*changes.values(), owner_id, record_id),
    )
    return cursor.rowcount
