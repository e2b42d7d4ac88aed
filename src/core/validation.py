"""
Boundary validation for events and resources.

Every check runs before a write leaves the process; all problems found are
reported together in one ValidationError.
"""

from typing import Any, Mapping

from core.colors import parse_color
from core.errors import ValidationError
from models.events import EVENT_PATCH_FIELDS, RESOURCE_PATCH_FIELDS, EventDraft


def _color_errors(color: str | None) -> list[str]:
    if color is not None and parse_color(color) is None:
        return [f"color: '{color}' is not a hex or rgb() color"]
    return []


def collect_event_errors(draft: EventDraft) -> list[str]:
    """
    Check an event's fields and return every problem found.

    Checks:
    1. title is present and not blank
    2. start and end are present (parsed)
    3. start is strictly before end
    4. resource_id is present
    5. color, if given, is parseable
    """
    errors = []

    if not draft.title or not draft.title.strip():
        errors.append("title is required")
    if draft.start is None:
        errors.append("start_at is missing or invalid")
    if draft.end is None:
        errors.append("end_at is missing or invalid")
    if draft.start is not None and draft.end is not None and draft.end <= draft.start:
        errors.append("end_at must be after start_at")
    if not draft.resource_id:
        errors.append("resource_id is required")

    errors.extend(_color_errors(draft.color))
    return errors


def validate_event_draft(draft: EventDraft) -> EventDraft:
    """Raise ValidationError unless the draft describes a valid event."""
    errors = collect_event_errors(draft)
    if errors:
        raise ValidationError("Invalid event", errors)
    return draft


def validate_patch_keys(changes: Mapping[str, Any], allowed: tuple[str, ...]) -> None:
    """Reject empty patches and unknown field names."""
    if not changes:
        raise ValidationError("No valid fields to update")
    unknown = sorted(set(changes) - set(allowed))
    if unknown:
        raise ValidationError(
            "Unknown fields in update", [f"{name} cannot be updated" for name in unknown]
        )


def validate_event_patch(changes: Mapping[str, Any]) -> None:
    validate_patch_keys(changes, EVENT_PATCH_FIELDS)


def validate_resource(name: str | None, color: str | None) -> None:
    """Check resource fields: name required, color parseable."""
    errors = []
    if not name or not name.strip():
        errors.append("name is required")
    errors.extend(_color_errors(color))
    if errors:
        raise ValidationError("Invalid resource", errors)


def validate_resource_patch(changes: Mapping[str, Any]) -> None:
    validate_patch_keys(changes, RESOURCE_PATCH_FIELDS)
