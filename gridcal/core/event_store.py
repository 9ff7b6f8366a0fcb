from __future__ import annotations

import logging
from collections.abc import Iterator
from datetime import date, datetime, time, timedelta, tzinfo

from gridcal.core.calendar_grid import events_on_day
from gridcal.core.models import CalendarEvent

LOGGER = logging.getLogger(__name__)


class DuplicateEventError(ValueError):
    """Raised when an event id is already present in the store."""


class EventStore:
    """In-memory, append-only list of events for one chat session."""

    def __init__(self, events: list[CalendarEvent] | None = None) -> None:
        self._events: list[CalendarEvent] = []
        self._ids: set[str] = set()
        for event in events or []:
            self.add(event)

    def add(self, event: CalendarEvent) -> CalendarEvent:
        if event.id in self._ids:
            raise DuplicateEventError(f"Event id already exists: {event.id}")
        self._events.append(event)
        self._ids.add(event.id)
        LOGGER.debug("Event added: id=%s start=%s", event.id, event.start.isoformat())
        return event

    def get(self, event_id: str) -> CalendarEvent | None:
        for event in self._events:
            if event.id == event_id:
                return event
        return None

    def list_events(self) -> list[CalendarEvent]:
        return list(self._events)

    def events_on(self, day: date, tz: tzinfo | None = None) -> list[CalendarEvent]:
        """Events starting on ``day`` ordered by start time."""
        matched = events_on_day(self._events, day, tz=tz)
        return sorted(matched, key=lambda event: event.start)

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[CalendarEvent]:
        return iter(list(self._events))


def demo_events(now: datetime, tz: tzinfo) -> list[CalendarEvent]:
    local_now = now.astimezone(tz)
    today = local_now.date()
    lunch_day = today + timedelta(days=2)
    return [
        CalendarEvent(
            id="demo-1",
            title="Design Review",
            start=datetime.combine(today, time(10, 0), tzinfo=tz),
            end=datetime.combine(today, time(11, 30), tzinfo=tz),
            color="indigo",
            description="Review new calendar mockups.",
            location="Conference Room A",
        ),
        CalendarEvent(
            id="demo-2",
            title="Team Lunch",
            start=datetime.combine(lunch_day, time(12, 30), tzinfo=tz),
            end=datetime.combine(lunch_day, time(14, 0), tzinfo=tz),
            color="green",
            location="Taco Place",
        ),
    ]
