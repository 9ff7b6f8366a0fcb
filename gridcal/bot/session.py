from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime, timezone, tzinfo

from gridcal.core.date_utils import shift_month, to_local_date
from gridcal.core.event_form import EventForm, default_form
from gridcal.core.event_store import EventStore, demo_events

LOGGER = logging.getLogger(__name__)

AI_INPUT = "ai"


@dataclass
class CalendarSession:
    """UI state of one chat: displayed month, selected day, open form."""

    view_year: int
    view_month: int
    selected_day: date
    store: EventStore = field(default_factory=EventStore)
    form: EventForm | None = None
    awaiting_field: str | None = None
    ai_pending: bool = False
    form_generation: int = 0

    def navigate(self, delta: int) -> None:
        self.view_year, self.view_month = shift_month(self.view_year, self.view_month, delta)

    def show_day(self, day: date) -> None:
        self.selected_day = day
        self.view_year, self.view_month = day.year, day.month - 1

    def select_day(self, day: date) -> None:
        if (day.year, day.month - 1) != (self.view_year, self.view_month):
            self.show_day(day)
            return
        self.selected_day = day

    def open_form(self, tz: tzinfo) -> EventForm:
        self.form = default_form(self.selected_day, tz)
        self.awaiting_field = None
        self.ai_pending = False
        self.form_generation += 1
        return self.form

    def close_form(self) -> None:
        self.form = None
        self.awaiting_field = None
        self.ai_pending = False
        # Bumped so a parse result arriving after close is discarded.
        self.form_generation += 1


class SessionStore:
    def __init__(
        self,
        *,
        tz: tzinfo,
        seed_demo_events: bool = False,
        now_provider: Callable[[], datetime] | None = None,
    ) -> None:
        self.tz = tz
        self._seed_demo_events = seed_demo_events
        self._now_provider = now_provider or (lambda: datetime.now(timezone.utc))
        self._sessions: dict[tuple[int, int], CalendarSession] = {}

    def now(self) -> datetime:
        return self._now_provider()

    def today(self) -> date:
        return to_local_date(self.now(), self.tz)

    def get(self, *, chat_id: int, user_id: int) -> CalendarSession:
        key = (chat_id, user_id)
        session = self._sessions.get(key)
        if session is None:
            session = self._create_session()
            self._sessions[key] = session
            LOGGER.info("Session created: chat_id=%s user_id=%s events=%s", chat_id, user_id, len(session.store))
        return session

    def reset(self, *, chat_id: int, user_id: int) -> None:
        self._sessions.pop((chat_id, user_id), None)

    def _create_session(self) -> CalendarSession:
        today = self.today()
        store = EventStore(demo_events(self.now(), self.tz) if self._seed_demo_events else None)
        return CalendarSession(
            view_year=today.year,
            view_month=today.month - 1,
            selected_day=today,
            store=store,
        )
