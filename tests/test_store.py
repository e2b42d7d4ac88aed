"""Tests for the async event and resource stores."""

from dataclasses import replace

import pytest

from core.errors import NotFoundError, PersistenceError, ValidationError
from core.timeutils import TimeRange
from models.events import EventDraft
from services.store import EventStore, ResourceStore

from conftest import run, utc


class TestEventCreate:
    def test_create_and_get(self, event_store, standup_draft):
        event = run(event_store.create_event(standup_draft))

        assert event.id
        assert event.title == "Standup"
        assert event.start == utc(2024, 1, 1, 9, 0)
        assert event.end == utc(2024, 1, 1, 9, 30)
        assert event.duration_minutes == 30
        assert run(event_store.get_event(event.id)) == event

    def test_inverted_range_rejected_without_write(self, event_store, standup_draft):
        draft = replace(standup_draft, start=utc(2024, 1, 1, 10), end=utc(2024, 1, 1, 9))
        with pytest.raises(ValidationError):
            run(event_store.create_event(draft))
        assert run(event_store.list_events()) == []

    def test_unknown_resource_is_persistence_error(self, event_store, standup_draft):
        draft = replace(standup_draft, resource_id="no-such-resource")
        with pytest.raises(PersistenceError) as exc_info:
            run(event_store.create_event(draft))
        assert exc_info.value.integrity

    def test_other_callers_resource_is_rejected(self, db_path, standup_draft):
        intruder = EventStore(db_path, "user-2")
        with pytest.raises(PersistenceError):
            run(intruder.create_event(standup_draft))

    def test_title_is_trimmed(self, event_store, standup_draft):
        event = run(event_store.create_event(replace(standup_draft, title="  Standup  ")))
        assert event.title == "Standup"


class TestEventList:
    def test_range_and_order(self, event_store, resource):
        for title, hour in [("Late", 15), ("Early", 8), ("Mid", 12)]:
            run(
                event_store.create_event(
                    EventDraft(
                        title=title,
                        start=utc(2024, 1, 1, hour),
                        end=utc(2024, 1, 1, hour, 45),
                        resource_id=resource.id,
                    )
                )
            )
        run(
            event_store.create_event(
                EventDraft(
                    title="Next day",
                    start=utc(2024, 1, 2, 9),
                    end=utc(2024, 1, 2, 10),
                    resource_id=resource.id,
                )
            )
        )

        window = TimeRange(start=utc(2024, 1, 1), end=utc(2024, 1, 1, 23, 59))
        titles = [e.title for e in run(event_store.list_events(window))]
        assert titles == ["Early", "Mid", "Late"]

    def test_event_crossing_range_end_is_excluded(self, event_store, resource):
        run(
            event_store.create_event(
                EventDraft(
                    title="Night shift",
                    start=utc(2024, 1, 1, 22),
                    end=utc(2024, 1, 2, 6),
                    resource_id=resource.id,
                )
            )
        )
        window = TimeRange(start=utc(2024, 1, 1), end=utc(2024, 1, 2))
        assert run(event_store.list_events(window)) == []

    def test_filter_by_resource(self, event_store, resource_store, standup_draft, resource):
        other = run(resource_store.create_resource("Bob"))
        run(event_store.create_event(standup_draft))
        run(event_store.create_event(replace(standup_draft, resource_id=other.id)))

        events = run(event_store.list_events(resource_id=other.id))
        assert [e.resource_id for e in events] == [other.id]

    def test_list_is_scoped_to_caller(self, db_path, event_store, standup_draft):
        run(event_store.create_event(standup_draft))
        assert run(EventStore(db_path, "user-2").list_events()) == []


class TestEventUpdate:
    def test_sparse_patch_keeps_other_fields(self, event_store, standup_draft):
        event = run(event_store.create_event(standup_draft))
        updated = run(event_store.update_event(event.id, {"title": "New"}))

        assert updated.title == "New"
        assert updated.description == "D"
        assert updated.start == event.start
        assert updated.end == event.end
        assert updated.resource_id == event.resource_id

    def test_explicit_none_clears_optional_field(self, event_store, standup_draft):
        event = run(event_store.create_event(standup_draft))
        updated = run(event_store.update_event(event.id, {"description": None}))
        assert updated.description is None

    def test_patch_that_inverts_range_is_rejected(self, event_store, standup_draft):
        event = run(event_store.create_event(standup_draft))
        with pytest.raises(ValidationError):
            run(event_store.update_event(event.id, {"end": utc(2024, 1, 1, 8)}))
        assert run(event_store.get_event(event.id)).end == event.end

    def test_empty_patch(self, event_store, standup_draft):
        event = run(event_store.create_event(standup_draft))
        with pytest.raises(ValidationError):
            run(event_store.update_event(event.id, {}))

    def test_missing_event(self, event_store):
        with pytest.raises(NotFoundError):
            run(event_store.update_event("missing", {"title": "x"}))

    def test_cannot_patch_other_callers_event(self, db_path, event_store, standup_draft):
        event = run(event_store.create_event(standup_draft))
        with pytest.raises(NotFoundError):
            run(EventStore(db_path, "user-2").update_event(event.id, {"title": "x"}))


class TestEventDelete:
    def test_delete_returns_snapshot(self, event_store, standup_draft):
        event = run(event_store.create_event(standup_draft))
        deleted = run(event_store.delete_event(event.id))
        assert deleted == event
        with pytest.raises(NotFoundError):
            run(event_store.get_event(event.id))

    def test_delete_missing(self, event_store):
        with pytest.raises(NotFoundError):
            run(event_store.delete_event("missing"))


class TestResources:
    def test_list_in_creation_order(self, resource_store):
        for name in ["Zed", "Amy", "Kim"]:
            run(resource_store.create_resource(name))
        assert [r.name for r in run(resource_store.list_resources())] == ["Zed", "Amy", "Kim"]

    def test_update_is_sparse(self, resource_store, resource):
        updated = run(resource_store.update_resource(resource.id, {"role": "Owner"}))
        assert updated.role == "Owner"
        assert updated.name == "Alice"
        assert updated.color == "#1677ff"

    def test_blank_name_rejected(self, resource_store, resource):
        with pytest.raises(ValidationError):
            run(resource_store.update_resource(resource.id, {"name": "  "}))

    def test_cascade_delete(self, event_store, resource_store, standup_draft, resource):
        run(event_store.create_event(standup_draft))
        run(event_store.create_event(replace(standup_draft, title="Review")))

        deleted = run(resource_store.delete_resource(resource.id))

        assert deleted.id == resource.id
        assert run(event_store.list_events()) == []
        with pytest.raises(NotFoundError):
            run(resource_store.get_resource(resource.id))

    def test_delete_missing(self, resource_store):
        with pytest.raises(NotFoundError):
            run(resource_store.delete_resource("missing"))


def test_unreachable_database_is_persistence_error(tmp_path):
    store = ResourceStore(tmp_path / "missing-dir" / "schedule.db", "user-1")
    with pytest.raises(PersistenceError) as exc_info:
        run(store.list_resources())
    assert not exc_info.value.integrity
