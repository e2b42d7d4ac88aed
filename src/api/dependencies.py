"""FastAPI dependencies for caller identity, stores and query parameters."""

import secrets
from pathlib import Path

from fastapi import Depends, Header, HTTPException, Query, Request, status

from api.models.responses import ErrorCodes
from core.config import API_TOKENS
from core.errors import ValidationError
from core.timeutils import (
    UTC,
    TimeRange,
    day_range,
    parse_date,
    parse_time,
    resolve_zone,
    to_storage,
)
from services.store import EventStore, ResourceStore


async def get_current_caller(
    request: Request, authorization: str | None = Header(default=None)
) -> str:
    """
    Resolve the bearer token to an opaque caller id.

    The token's contents are never inspected; it is only looked up.

    Raises:
        HTTPException: 401 if the token is missing or unknown
    """
    if not API_TOKENS:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "API tokens not configured on server",
                "code": ErrorCodes.INTERNAL_ERROR,
                "details": [],
            },
        )

    scheme, _, token = (authorization or "").partition(" ")
    caller_id = None
    if scheme.lower() == "bearer" and token:
        # Constant-time comparison against every known token
        for known_token, known_caller in API_TOKENS.items():
            if secrets.compare_digest(token.strip(), known_token):
                caller_id = known_caller

    if caller_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error": "Unauthorized",
                "code": ErrorCodes.UNAUTHORIZED,
                "details": [],
            },
        )

    request.state.caller_id = caller_id
    return caller_id


def get_db_path(request: Request) -> Path:
    return request.app.state.db_path


def get_event_store(
    caller_id: str = Depends(get_current_caller), db_path: Path = Depends(get_db_path)
) -> EventStore:
    return EventStore(db_path, caller_id)


def get_resource_store(
    caller_id: str = Depends(get_current_caller), db_path: Path = Depends(get_db_path)
) -> ResourceStore:
    return ResourceStore(db_path, caller_id)


def get_time_range(
    start: str | None = Query(default=None, description="Range start (ISO 8601)"),
    end: str | None = Query(default=None, description="Range end (ISO 8601)"),
    date: str | None = Query(default=None, description="Single day (YYYY-MM-DD), needs tz"),
    tz: str | None = Query(default=None, description="IANA time zone"),
) -> TimeRange:
    """
    Build the queried range from ``start``/``end`` or a single ``date``.

    ``date`` is only used when neither bound is given, and requires ``tz``
    because a calendar day is zone-dependent.
    """
    zone = resolve_zone(tz) if tz else UTC

    if start is None and end is None and date is not None:
        if tz is None:
            raise ValidationError("Missing time zone", ["tz is required with date"])
        day = parse_date(date)
        if day is None:
            raise ValidationError("Invalid date", ["date: expected format YYYY-MM-DD"])
        try:
            window = day_range(day, zone)
            for bound in (window.start, window.end):
                to_storage(bound)
        except OverflowError:
            raise ValidationError("Invalid date", [f"date: '{date}' is out of range"])
        return window

    errors = []
    range_start = parse_time(start, tz=zone) if start is not None else None
    range_end = parse_time(end, tz=zone) if end is not None else None
    if start is not None and range_start is None:
        errors.append(f"start: '{start}' is not a valid timestamp")
    if end is not None and range_end is None:
        errors.append(f"end: '{end}' is not a valid timestamp")
    if errors:
        raise ValidationError("Invalid range", errors)

    return TimeRange(start=range_start, end=range_end)


def get_resource_filter(
    resource_id: str | None = Query(default=None, alias="resourceId"),
    employee_id: str | None = Query(default=None, alias="employeeId"),
) -> str | None:
    """Resource to filter on; the calendar client sends either name."""
    if resource_id and employee_id and resource_id != employee_id:
        raise ValidationError(
            "Conflicting filters", ["resourceId and employeeId name different resources"]
        )
    return resource_id or employee_id
