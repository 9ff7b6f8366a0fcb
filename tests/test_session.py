from __future__ import annotations

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from gridcal.bot.session import SessionStore


def _store(**kwargs) -> SessionStore:
    now = datetime(2024, 12, 31, 23, 30, tzinfo=timezone.utc)
    return SessionStore(tz=kwargs.pop("tz", timezone.utc), now_provider=lambda: now, **kwargs)


def test_session_starts_on_local_today() -> None:
    sessions = _store(tz=ZoneInfo("Asia/Tokyo"))

    session = sessions.get(chat_id=1, user_id=2)

    assert session.selected_day == date(2025, 1, 1)
    assert (session.view_year, session.view_month) == (2025, 0)
    assert sessions.get(chat_id=1, user_id=2) is session
    assert sessions.get(chat_id=1, user_id=3) is not session


def test_demo_seeding_is_optional() -> None:
    assert len(_store().get(chat_id=1, user_id=1).store) == 0
    assert len(_store(seed_demo_events=True).get(chat_id=1, user_id=1).store) == 2


def test_navigation_wraps_years() -> None:
    session = _store().get(chat_id=1, user_id=1)

    session.navigate(1)
    assert (session.view_year, session.view_month) == (2025, 0)
    session.navigate(-2)
    assert (session.view_year, session.view_month) == (2024, 10)


def test_selecting_outside_day_moves_view() -> None:
    session = _store().get(chat_id=1, user_id=1)

    session.select_day(date(2024, 12, 5))
    assert (session.view_year, session.view_month) == (2024, 11)

    session.select_day(date(2025, 1, 2))
    assert session.selected_day == date(2025, 1, 2)
    assert (session.view_year, session.view_month) == (2025, 0)


def test_form_generation_changes_on_open_and_close() -> None:
    sessions = _store()
    session = sessions.get(chat_id=1, user_id=1)

    form = session.open_form(sessions.tz)
    opened = session.form_generation
    assert form.start == "2024-12-31T09:00"

    session.ai_pending = True
    session.close_form()

    assert session.form is None
    assert session.ai_pending is False
    assert session.form_generation == opened + 1


def test_reset_drops_session() -> None:
    sessions = _store(seed_demo_events=True)
    session = sessions.get(chat_id=1, user_id=1)

    sessions.reset(chat_id=1, user_id=1)

    assert sessions.get(chat_id=1, user_id=1) is not session
