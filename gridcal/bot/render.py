from __future__ import annotations

from datetime import date, tzinfo

from gridcal.core.calendar_grid import month_title
from gridcal.core.date_utils import format_full_date, format_time_of_day
from gridcal.core.event_form import EventForm
from gridcal.core.models import CalendarEvent, color_by_tag

NO_EVENTS_TEXT = "No events scheduled for this day."

FIELD_PROMPTS = {
    "title": "Send the event title.",
    "start": "Send the start time as YYYY-MM-DDTHH:MM (e.g. 2024-03-15T10:00).",
    "end": "Send the end time as YYYY-MM-DDTHH:MM (e.g. 2024-03-15T11:00).",
    "description": "Send a description, or '-' to clear it.",
    "location": "Send a location, or '-' to clear it.",
    "ai": "Describe the event in your own words, e.g. \"Lunch with Sam tomorrow at 1pm at Taco Place\".",
}


def render_event(event: CalendarEvent, *, tz: tzinfo, hour12: bool) -> str:
    color = color_by_tag(event.color)
    marker = color.emoji if color else "•"
    start = format_time_of_day(event.start, tz=tz, hour12=hour12)
    end = format_time_of_day(event.end, tz=tz, hour12=hour12)
    lines = [f"{marker} {start} - {end}  {event.title}"]
    if event.location:
        lines.append(f"    📍 {event.location}")
    if event.description:
        lines.append(f"    {event.description}")
    return "\n".join(lines)


def render_day_panel(
    *,
    year: int,
    month: int,
    selected_day: date,
    events: list[CalendarEvent],
    tz: tzinfo,
    hour12: bool,
) -> str:
    """Header for the month view plus the selected day's agenda."""
    lines = [f"📅 {month_title(year, month)}", "", f"🗓 {format_full_date(selected_day)}"]
    if not events:
        lines.append(NO_EVENTS_TEXT)
        lines.append("Tap ➕ New event to create one.")
    else:
        lines.extend(render_event(event, tz=tz, hour12=hour12) for event in events)
    return "\n".join(lines)


def render_form(form: EventForm, *, note: str | None = None) -> str:
    color = color_by_tag(form.color)
    lines = [
        "New event",
        f"Title: {form.title or '—'}",
        f"Start: {form.start or '—'}",
        f"End: {form.end or '—'}",
        f"Description: {form.description or '—'}",
        f"Location: {form.location or '—'}",
        f"Color: {color.label if color else form.color}",
    ]
    if note:
        lines.extend(["", note])
    return "\n".join(lines)
