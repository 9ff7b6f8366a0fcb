from __future__ import annotations

import uuid
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import date, datetime, time, tzinfo

from gridcal.core.date_utils import format_for_local_input, parse_local_input
from gridcal.core.models import DEFAULT_COLOR, CalendarEvent, EventDraft, color_by_tag

FORM_FIELDS = ("title", "start", "end", "description", "location")
DEFAULT_START_TIME = time(9, 0)
DEFAULT_END_TIME = time(10, 0)


class EventValidationError(ValueError):
    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class EventForm:
    """Editable creation form; start/end hold local-input strings."""

    title: str = ""
    start: str = ""
    end: str = ""
    description: str = ""
    location: str = ""
    color: str = DEFAULT_COLOR

    def with_field(self, name: str, value: str) -> EventForm:
        if name not in FORM_FIELDS and name != "color":
            raise ValueError(f"Unknown form field: {name}")
        return replace(self, **{name: value})


def new_event_id() -> str:
    return uuid.uuid4().hex


def default_form(selected_day: date, tz: tzinfo) -> EventForm:
    start = datetime.combine(selected_day, DEFAULT_START_TIME, tzinfo=tz)
    end = datetime.combine(selected_day, DEFAULT_END_TIME, tzinfo=tz)
    return EventForm(
        start=format_for_local_input(start, tz),
        end=format_for_local_input(end, tz),
    )


def apply_draft(form: EventForm, draft: EventDraft, tz: tzinfo) -> EventForm:
    updated = replace(
        form,
        title=draft.title,
        start=format_for_local_input(draft.start, tz),
        end=format_for_local_input(draft.end, tz),
    )
    if draft.description:
        updated = replace(updated, description=draft.description)
    if draft.location:
        updated = replace(updated, location=draft.location)
    return updated


def create_event(
    form: EventForm,
    *,
    tz: tzinfo,
    id_factory: Callable[[], str] = new_event_id,
) -> CalendarEvent:
    """Validate ``form`` and build a new event.

    Raises EventValidationError naming the offending field. A range whose
    start is after its end is rejected; equal start and end are allowed.
    """
    title = form.title.strip()
    if not title:
        raise EventValidationError("title", "Title is required.")
    start = _parse_required(form.start, "start", tz)
    end = _parse_required(form.end, "end", tz)
    if start > end:
        raise EventValidationError("end", "End must not be before start.")
    color = form.color.strip() or DEFAULT_COLOR
    if color_by_tag(color) is None:
        raise EventValidationError("color", f"Unknown color: {color}")
    return CalendarEvent(
        id=id_factory(),
        title=title,
        start=start,
        end=end,
        color=color,
        description=form.description.strip() or None,
        location=form.location.strip() or None,
    )


def _parse_required(value: str, field: str, tz: tzinfo) -> datetime:
    if not value.strip():
        raise EventValidationError(field, f"{field.capitalize()} is required.")
    try:
        return parse_local_input(value, tz)
    except ValueError as exc:
        raise EventValidationError(
            field,
            f"{field.capitalize()} must look like YYYY-MM-DDTHH:MM.",
        ) from exc
