"""Health check and caller identity endpoints."""

import sqlite3
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.dependencies import get_current_caller
from api.models.responses import CallerResponse, HealthResponse
from core.config import API_VERSION
from core.database import get_connection

router = APIRouter()


def database_available(request: Request) -> bool:
    """True when the schedule database opens and has its tables."""
    try:
        conn = get_connection(request.app.state.db_path)
    except sqlite3.Error:
        return False
    try:
        conn.execute("SELECT 1 FROM events LIMIT 1")
        return True
    except sqlite3.Error:
        return False
    finally:
        conn.close()


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request):
    """
    Health check endpoint for monitoring.

    Returns 200 if healthy, 503 if unhealthy.
    """
    available = database_available(request)
    timestamp = datetime.now(timezone.utc).isoformat()

    if available:
        return HealthResponse(
            status="healthy",
            version=API_VERSION,
            database_available=True,
            timestamp=timestamp,
        )
    else:
        return JSONResponse(
            status_code=503,
            content=HealthResponse(
                status="unhealthy",
                version=API_VERSION,
                database_available=False,
                timestamp=timestamp,
                error="Schedule database not initialized",
            ).model_dump(),
        )


@router.get("/auth/user", response_model=CallerResponse)
async def current_user(caller_id: str = Depends(get_current_caller)):
    """The caller id the bearer token resolves to."""
    return CallerResponse(caller=caller_id)
