"""API Pydantic models."""

from .requests import EventCreate, EventMove, EventPatch, ResourceCreate, ResourcePatch
from .responses import ErrorCodes, ErrorResponse, HealthResponse

__all__ = [
    "HealthResponse",
    "ErrorResponse",
    "ErrorCodes",
    "EventCreate",
    "EventPatch",
    "EventMove",
    "ResourceCreate",
    "ResourcePatch",
]
