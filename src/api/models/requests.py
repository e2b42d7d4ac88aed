"""
Pydantic request models.

The calendar client sends the same field under more than one name
(``start_at``/``start``, ``employee_id``/``resourceId``...). The aliases are
resolved here; nothing past this module sees them.
"""

from datetime import date, datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from core.errors import ValidationError
from core.timeutils import is_short_time, parse_time, resolve_zone
from models.events import EventDraft

START_ALIASES = AliasChoices("start_at", "start")
END_ALIASES = AliasChoices("end_at", "end")
RESOURCE_ALIASES = AliasChoices("resource_id", "resourceId", "employee_id", "employeeId")


def resolve_time(
    value: str | None, field: str, reference_date: date | None, tz_name: str
) -> datetime | None:
    """
    Turn a client time value into an absolute instant.

    Short "HH:MM" labels need ``reference_date`` (the day shown in the
    calendar). Raises ValidationError for values that cannot be parsed.
    """
    if value is None:
        return None
    if is_short_time(value) and reference_date is None:
        raise ValidationError(
            "Invalid time", [f"{field}: reference_date is required for HH:MM times"]
        )
    parsed = parse_time(value, reference_date, resolve_zone(tz_name))
    if parsed is None:
        raise ValidationError("Invalid time", [f"{field}: '{value}' is not a valid time"])
    return parsed


class _TimeContext(BaseModel):
    """Reference day and zone for short wall-clock times."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    reference_date: date | None = Field(
        default=None, validation_alias=AliasChoices("reference_date", "referenceDate", "date")
    )
    tz: str = Field(default="UTC", validation_alias=AliasChoices("tz", "timeZone"))


class EventCreate(_TimeContext):
    title: str | None = None
    description: str | None = None
    start_at: str | None = Field(default=None, validation_alias=START_ALIASES)
    end_at: str | None = Field(default=None, validation_alias=END_ALIASES)
    resource_id: str | None = Field(default=None, validation_alias=RESOURCE_ALIASES)
    color: str | None = None

    def to_draft(self) -> EventDraft:
        return EventDraft(
            title=self.title,
            start=resolve_time(self.start_at, "start_at", self.reference_date, self.tz),
            end=resolve_time(self.end_at, "end_at", self.reference_date, self.tz),
            resource_id=self.resource_id,
            description=self.description,
            color=self.color,
        )


class EventPatch(EventCreate):
    """Sparse update: only fields present in the body are changed."""

    def to_changes(self) -> dict[str, Any]:
        present = self.model_fields_set
        changes: dict[str, Any] = {}
        for name in ("title", "description", "resource_id", "color"):
            if name in present:
                changes[name] = getattr(self, name)
        if "start_at" in present:
            changes["start"] = resolve_time(
                self.start_at, "start_at", self.reference_date, self.tz
            )
        if "end_at" in present:
            changes["end"] = resolve_time(self.end_at, "end_at", self.reference_date, self.tz)
        return changes


class EventMove(_TimeContext):
    """New anchor for a drag/drop move; the end follows from the duration."""

    start_at: str = Field(validation_alias=START_ALIASES)
    resource_id: str | None = Field(default=None, validation_alias=RESOURCE_ALIASES)

    def new_start(self) -> datetime:
        return resolve_time(self.start_at, "start_at", self.reference_date, self.tz)


class ResourceCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    role: str | None = None
    color: str | None = None


class ResourcePatch(ResourceCreate):
    def to_changes(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in self.model_fields_set}
