from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Literal


@dataclass(frozen=True)
class EventColor:
    tag: str
    label: str
    emoji: str


EVENT_COLORS: list[EventColor] = [
    EventColor(tag="blue", label="Blue", emoji="🔵"),
    EventColor(tag="indigo", label="Indigo", emoji="🟣"),
    EventColor(tag="red", label="Red", emoji="🔴"),
    EventColor(tag="green", label="Green", emoji="🟢"),
    EventColor(tag="amber", label="Amber", emoji="🟠"),
    EventColor(tag="purple", label="Purple", emoji="🟪"),
]

DEFAULT_COLOR = EVENT_COLORS[0].tag


def color_by_tag(tag: str) -> EventColor | None:
    for color in EVENT_COLORS:
        if color.tag == tag:
            return color
    return None


@dataclass(frozen=True)
class CalendarEvent:
    """A single calendar entry. ``start``/``end`` are timezone-aware."""

    id: str
    title: str
    start: datetime
    end: datetime
    color: str = DEFAULT_COLOR
    description: str | None = None
    location: str | None = None


@dataclass(frozen=True)
class DayInfo:
    """One cell of the month grid."""

    date: date
    is_current_month: bool
    is_today: bool
    events: list[CalendarEvent] = field(default_factory=list)


@dataclass(frozen=True)
class EventDraft:
    title: str
    start: datetime
    end: datetime
    description: str | None = None
    location: str | None = None


ParseStatus = Literal["ok", "unavailable", "failed"]


@dataclass(frozen=True)
class ParseOutcome:
    status: ParseStatus
    draft: EventDraft | None = None
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == "ok" and self.draft is not None
