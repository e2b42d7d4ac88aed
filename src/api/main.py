"""FastAPI application entry point."""

import asyncio
import logging
import sqlite3
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.logging import RequestLog, log_request
from api.models.responses import ErrorCodes, ErrorResponse
from api.routes import events_router, health_router, reports_router, resources_router
from core.config import ALLOWED_ORIGINS, API_DEBUG, API_VERSION, DB_PATH, LOG_LEVEL
from core.database import create_schema
from core.errors import NotFoundError, PersistenceError, ScheduleError, ValidationError

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    # Startup: make sure the schema exists
    create_schema(app.state.db_path)
    logger.info("Schedule database ready at %s", app.state.db_path)

    yield


app = FastAPI(
    title="Staff Schedule API",
    description="REST API for employees, schedule events and workload reporting",
    version=API_VERSION,
    debug=API_DEBUG,
    lifespan=lifespan,
)
app.state.db_path = DB_PATH

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS or ["*"],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


def get_client_ip(request: Request) -> str:
    """Extract client IP from request, handling proxies."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def error_response(
    request: Request, status_code: int, error: str, code: str, details: list[str] | None = None
) -> JSONResponse:
    """Standard error body; also records the error for the request log."""
    request.state.error_code = code
    request.state.error_message = error
    request.state.error_details = details or []
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, code=code, details=details or []).model_dump(),
    )


@app.middleware("http")
async def record_request(request: Request, call_next):
    """Write one api_requests row per request."""
    start_time = time.time()
    request_log = RequestLog(
        endpoint=request.url.path,
        method=request.method,
        client_ip=get_client_ip(request),
    )

    try:
        response = await call_next(request)
        request_log.status_code = response.status_code
        return response
    except Exception as e:
        request_log.status_code = 500
        request_log.error_code = ErrorCodes.INTERNAL_ERROR
        request_log.error_message = str(e)
        raise
    finally:
        request_log.caller_id = getattr(request.state, "caller_id", None)
        request_log.error_code = request_log.error_code or getattr(
            request.state, "error_code", None
        )
        request_log.error_message = request_log.error_message or getattr(
            request.state, "error_message", None
        )
        if request_log.error_code in (ErrorCodes.VALIDATION_ERROR, ErrorCodes.INVALID_REQUEST):
            request_log.validation_errors = getattr(request.state, "error_details", [])
        request_log.processing_time_ms = int((time.time() - start_time) * 1000)
        try:
            await asyncio.to_thread(log_request, request_log, request.app.state.db_path)
        except sqlite3.Error as e:
            # Don't fail the request if logging fails
            logger.warning("Could not write request log: %s", e)


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return error_response(request, 400, exc.message, ErrorCodes.VALIDATION_ERROR, exc.details)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return error_response(request, 404, exc.message, ErrorCodes.NOT_FOUND)


@app.exception_handler(PersistenceError)
async def persistence_error_handler(request: Request, exc: PersistenceError):
    status_code = 409 if exc.integrity else 500
    return error_response(request, status_code, exc.message, ErrorCodes.PERSISTENCE_ERROR)


@app.exception_handler(ScheduleError)
async def schedule_error_handler(request: Request, exc: ScheduleError):
    return error_response(request, 500, exc.message, exc.code)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    details = [
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    ]
    return error_response(request, 400, "Invalid request", ErrorCodes.INVALID_REQUEST, details)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if isinstance(exc.detail, dict):
        return error_response(
            request,
            exc.status_code,
            exc.detail.get("error", ""),
            exc.detail.get("code", ErrorCodes.INVALID_REQUEST),
            exc.detail.get("details", []),
        )
    return error_response(request, exc.status_code, str(exc.detail), ErrorCodes.INVALID_REQUEST)


# Global exception handler for unexpected errors
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions with standard error format."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="Internal server error",
            code=ErrorCodes.INTERNAL_ERROR,
            details=[],
        ).model_dump(),
    )


# Include routers
app.include_router(health_router)
app.include_router(resources_router)
app.include_router(events_router)
app.include_router(reports_router)


# Entry point for uvicorn
if __name__ == "__main__":
    import uvicorn

    from core.config import API_HOST, API_PORT

    uvicorn.run(
        "api.main:app",
        host=API_HOST,
        port=API_PORT,
        reload=API_DEBUG,
    )
