"""
Pytest configuration and shared fixtures.
"""

import asyncio
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.database import create_schema  # noqa: E402
from models.events import Event, EventDraft, Resource  # noqa: E402
from services.store import EventStore, ResourceStore  # noqa: E402

CALLER = "user-1"


def utc(year, month, day, hour=0, minute=0):
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


def run(coro):
    """Run a coroutine to completion on a fresh event loop."""
    return asyncio.run(coro)


@pytest.fixture
def db_path(tmp_path):
    """Empty schedule database in a temp dir."""
    path = tmp_path / "schedule.db"
    create_schema(path)
    return path


@pytest.fixture
def event_store(db_path):
    return EventStore(db_path, CALLER)


@pytest.fixture
def resource_store(db_path):
    return ResourceStore(db_path, CALLER)


@pytest.fixture
def resource(resource_store):
    """A stored resource to hang events on."""
    return run(resource_store.create_resource("Alice", "Manager", "#1677ff"))


@pytest.fixture
def standup_draft(resource):
    return EventDraft(
        title="Standup",
        start=utc(2024, 1, 1, 9, 0),
        end=utc(2024, 1, 1, 9, 30),
        resource_id=resource.id,
        description="D",
    )


@pytest.fixture
def sample_resources():
    return [
        Resource(id="r1", name="Alice", role="Manager"),
        Resource(id="r2", name="Bob"),
        Resource(id="r3", name="Carol"),
    ]


@pytest.fixture
def sample_events():
    """Events over two days for r1/r2; r3 has none."""
    return [
        Event(id="e1", title="Standup", start=utc(2024, 1, 1, 9, 0), end=utc(2024, 1, 1, 9, 30), resource_id="r1"),
        Event(id="e2", title="Review", start=utc(2024, 1, 1, 9, 15), end=utc(2024, 1, 1, 10, 0), resource_id="r1"),
        Event(id="e3", title="Lunch cover", start=utc(2024, 1, 1, 11, 0), end=utc(2024, 1, 1, 11, 30), resource_id="r2"),
        Event(id="e4", title="Shift", start=utc(2024, 1, 2, 9, 0), end=utc(2024, 1, 2, 17, 0), resource_id="r2"),
    ]
