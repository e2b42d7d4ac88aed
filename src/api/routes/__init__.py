"""API route modules."""

from .events import router as events_router
from .health import router as health_router
from .reports import router as reports_router
from .resources import router as resources_router

__all__ = ["health_router", "events_router", "resources_router", "reports_router"]
