"""SQLite request logging for API."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from core.database import get_connection

LOGGED_COLUMNS = (
    "request_id",
    "timestamp",
    "endpoint",
    "method",
    "client_ip",
    "caller_id",
    "status_code",
    "error_code",
    "error_message",
    "processing_time_ms",
)


@dataclass
class RequestLog:
    """One handled request: who called what, and how it ended."""

    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    endpoint: str = ""
    method: str = ""
    client_ip: str | None = None
    caller_id: str | None = None
    status_code: int = 0
    error_code: str | None = None
    error_message: str | None = None
    processing_time_ms: int = 0
    validation_errors: list[str] = field(default_factory=list)


def log_request(log: RequestLog, db_path: Path) -> None:
    """Write the request row, plus one detail row per validation message."""
    conn = get_connection(db_path)
    try:
        placeholders = ", ".join("?" for _ in LOGGED_COLUMNS)
        conn.execute(
            f"INSERT INTO api_requests ({', '.join(LOGGED_COLUMNS)}) VALUES ({placeholders})",
            tuple(getattr(log, column) for column in LOGGED_COLUMNS),
        )
        conn.executemany(
            """
            INSERT INTO api_request_details (request_id, detail_type, message)
            VALUES (?, 'validation_error', ?)
            """,
            [(log.request_id, message) for message in log.validation_errors],
        )
        conn.commit()
    finally:
        conn.close()
