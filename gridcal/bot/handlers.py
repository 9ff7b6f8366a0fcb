from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from datetime import date
from functools import wraps

from telegram import Update
from telegram.ext import ContextTypes

from gridcal.bot import keyboards, render
from gridcal.bot.session import AI_INPUT, CalendarSession, SessionStore
from gridcal.core.calendar_grid import build_grid
from gridcal.core.date_utils import parse_local_input, to_local_date
from gridcal.core.event_form import FORM_FIELDS, EventValidationError, apply_draft, create_event
from gridcal.core.models import ParseOutcome, color_by_tag
from gridcal.core.nl_parser import parse_natural_language_event
from gridcal.infra.config import Settings
from gridcal.infra.llm.base import LLMClient
from gridcal.infra.messaging import safe_edit_message, safe_edit_text, safe_send_text

LOGGER = logging.getLogger(__name__)

CALENDAR_BUTTON = "📅 Calendar"
CLEAR_VALUE = "-"
FORM_CLOSED_TEXT = "Event form closed."

HELP_TEXT = (
    "Commands:\n"
    "/calendar — show the month grid\n"
    "/new [text] — create an event; with text, fill the form from your description\n"
    "/cancel — close the event form\n"
    "/help — this message\n\n"
    "Tap a day to see its events, ‹ › to change month, ➕ New event to open the form."
)

PARSE_NOTES = {
    "ok": "✨ Filled from your description. Review and tap 💾 Save.",
    "unavailable": "Magic create is not configured. Fill the fields manually.",
    "failed": "Couldn't understand that. Fill the fields manually or try again.",
}


def _get_sessions(context: ContextTypes.DEFAULT_TYPE) -> SessionStore:
    return context.application.bot_data["sessions"]


def _get_settings(context: ContextTypes.DEFAULT_TYPE) -> Settings:
    return context.application.bot_data["settings"]


def _get_llm_client(context: ContextTypes.DEFAULT_TYPE) -> LLMClient | None:
    return context.application.bot_data.get("llm_client")


def _get_session(update: Update, context: ContextTypes.DEFAULT_TYPE) -> CalendarSession:
    user_id = update.effective_user.id if update.effective_user else 0
    chat_id = update.effective_chat.id if update.effective_chat else 0
    return _get_sessions(context).get(chat_id=chat_id, user_id=user_id)


def _with_error_handling(
    handler: Callable[[Update, ContextTypes.DEFAULT_TYPE], Awaitable[None]],
) -> Callable[[Update, ContextTypes.DEFAULT_TYPE], Awaitable[None]]:
    @wraps(handler)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        user_id = update.effective_user.id if update.effective_user else 0
        LOGGER.info("Route: user_id=%s handler=%s", user_id, handler.__name__)
        try:
            await handler(update, context)
        except Exception as exc:
            await _handle_exception(update, context, exc)

    return wrapper


async def _handle_exception(update: Update, context: ContextTypes.DEFAULT_TYPE, error: Exception) -> None:
    try:
        await context.application.process_error(update, error)
    except Exception:
        LOGGER.exception("Failed to forward exception to error handler")


def _month_view(session: CalendarSession, context: ContextTypes.DEFAULT_TYPE):
    sessions = _get_sessions(context)
    settings = _get_settings(context)
    events = session.store.list_events()
    grid = build_grid(session.view_year, session.view_month, events, now=sessions.now(), tz=sessions.tz)
    text = render.render_day_panel(
        year=session.view_year,
        month=session.view_month,
        selected_day=session.selected_day,
        events=session.store.events_on(session.selected_day, sessions.tz),
        tz=sessions.tz,
        hour12=settings.hour12,
    )
    markup = keyboards.build_month_keyboard(
        grid,
        year=session.view_year,
        month=session.view_month,
        selected_day=session.selected_day,
    )
    return text, markup


async def _send_month_view(update: Update, context: ContextTypes.DEFAULT_TYPE, session: CalendarSession) -> None:
    text, markup = _month_view(session, context)
    await safe_send_text(update, text, reply_markup=markup)


async def _edit_month_view(update: Update, context: ContextTypes.DEFAULT_TYPE, session: CalendarSession) -> None:
    text, markup = _month_view(session, context)
    await safe_edit_text(update, text, reply_markup=markup)


async def _show_form(
    update: Update,
    session: CalendarSession,
    *,
    note: str | None = None,
    edit: bool = False,
):
    if session.form is None:
        return None
    text = render.render_form(session.form, note=note)
    markup = keyboards.build_form_keyboard(session.form, ai_pending=session.ai_pending)
    if edit:
        return await safe_edit_text(update, text, reply_markup=markup)
    return await safe_send_text(update, text, reply_markup=markup)


@_with_error_handling
async def start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    session = _get_session(update, context)
    await safe_send_text(update, "Hi! I'm your calendar.\n\n" + HELP_TEXT)
    await _send_month_view(update, context, session)


@_with_error_handling
async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await safe_send_text(update, HELP_TEXT)


@_with_error_handling
async def calendar_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    session = _get_session(update, context)
    await _send_month_view(update, context, session)


@_with_error_handling
async def new_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    session = _get_session(update, context)
    session.open_form(_get_sessions(context).tz)
    text = " ".join(context.args or []).strip()
    if not text:
        await _show_form(update, session)
        return
    await _run_magic_create(update, context, session, text)


@_with_error_handling
async def cancel_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    session = _get_session(update, context)
    if session.form is None:
        await safe_send_text(update, "Nothing to cancel.")
        return
    session.close_form()
    await safe_send_text(update, FORM_CLOSED_TEXT)


@_with_error_handling
async def callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    query = update.callback_query
    if query is None:
        return
    parsed = keyboards.parse_callback(query.data)
    session = _get_session(update, context)
    if parsed is None:
        LOGGER.warning("Unknown callback data: %r", query.data)
        await query.answer("This button is no longer supported.")
        return
    if parsed.kind == "form" and parsed.args == ("ai",) and session.ai_pending:
        await query.answer("Already working on it…")
        return
    await query.answer()
    if parsed.kind == "nav":
        await _handle_nav(update, context, session, parsed.args)
    elif parsed.kind == "day":
        await _handle_day(update, context, session, parsed.args)
    elif parsed.kind == "form":
        await _handle_form(update, context, session, parsed.args)
    elif parsed.kind != keyboards.NOOP:
        LOGGER.warning("Unhandled callback kind=%s", parsed.kind)


async def _handle_nav(
    update: Update,
    context: ContextTypes.DEFAULT_TYPE,
    session: CalendarSession,
    args: tuple[str, ...],
) -> None:
    direction = args[0] if args else ""
    if direction == "prev":
        session.navigate(-1)
    elif direction == "next":
        session.navigate(1)
    elif direction == "today":
        session.show_day(_get_sessions(context).today())
    else:
        LOGGER.warning("Unknown nav direction: %s", direction)
        return
    await _edit_month_view(update, context, session)


async def _handle_day(
    update: Update,
    context: ContextTypes.DEFAULT_TYPE,
    session: CalendarSession,
    args: tuple[str, ...],
) -> None:
    try:
        day = date.fromisoformat(args[0]) if args else None
    except ValueError:
        day = None
    if day is None:
        LOGGER.warning("Invalid day callback args=%s", args)
        return
    session.select_day(day)
    await _edit_month_view(update, context, session)


async def _handle_form(
    update: Update,
    context: ContextTypes.DEFAULT_TYPE,
    session: CalendarSession,
    args: tuple[str, ...],
) -> None:
    action = args[0] if args else ""
    if action == "open":
        session.open_form(_get_sessions(context).tz)
        await _show_form(update, session)
        return
    if session.form is None:
        await safe_send_text(update, "The form is closed. Tap ➕ New event to start again.")
        return
    if action == "cancel":
        session.close_form()
        await safe_edit_text(update, FORM_CLOSED_TEXT)
    elif action == "save":
        await _save_form(update, context, session)
    elif action == "ai":
        if _get_llm_client(context) is None:
            await _show_form(update, session, note=PARSE_NOTES["unavailable"], edit=True)
            return
        session.awaiting_field = AI_INPUT
        await safe_send_text(update, render.FIELD_PROMPTS[AI_INPUT])
    elif action == "field" and len(args) > 1 and args[1] in FORM_FIELDS:
        session.awaiting_field = args[1]
        await safe_send_text(update, render.FIELD_PROMPTS[args[1]])
    elif action == "color" and len(args) > 1 and color_by_tag(args[1]) is not None:
        session.form = session.form.with_field("color", args[1])
        await _show_form(update, session, edit=True)
    else:
        LOGGER.warning("Unknown form action args=%s", args)


async def _save_form(update: Update, context: ContextTypes.DEFAULT_TYPE, session: CalendarSession) -> None:
    tz = _get_sessions(context).tz
    try:
        event = create_event(session.form, tz=tz)
    except EventValidationError as exc:
        LOGGER.info("Form rejected: field=%s reason=%s", exc.field, exc.message)
        await _show_form(update, session, note=f"⚠️ {exc.message}", edit=True)
        return
    session.store.add(event)
    session.close_form()
    session.show_day(to_local_date(event.start, tz))
    LOGGER.info("Event created: id=%s", event.id)
    await safe_edit_text(update, f"Saved: {event.title}")
    await _send_month_view(update, context, session)


async def _run_magic_create(
    update: Update,
    context: ContextTypes.DEFAULT_TYPE,
    session: CalendarSession,
    text: str,
) -> None:
    sessions = _get_sessions(context)
    settings = _get_settings(context)
    generation = session.form_generation
    session.ai_pending = True
    interim = await _show_form(update, session, note="⏳ Reading your description…")
    outcome: ParseOutcome
    try:
        outcome = await parse_natural_language_event(
            text,
            reference=sessions.now(),
            client=_get_llm_client(context),
            model=settings.openai_model,
            tz=sessions.tz,
        )
    finally:
        if generation == session.form_generation:
            session.ai_pending = False
    if session.form is None or generation != session.form_generation:
        LOGGER.info("Discarding parse result for a closed form: status=%s", outcome.status)
        await safe_edit_message(interim, FORM_CLOSED_TEXT)
        return
    if outcome.ok and outcome.draft is not None:
        session.form = apply_draft(session.form, outcome.draft, sessions.tz)
    else:
        LOGGER.info("Magic create had no effect: status=%s reason=%s", outcome.status, outcome.reason)
    body = render.render_form(session.form, note=PARSE_NOTES[outcome.status])
    markup = keyboards.build_form_keyboard(session.form, ai_pending=session.ai_pending)
    if interim is None:
        await safe_send_text(update, body, reply_markup=markup)
    else:
        await safe_edit_message(interim, body, reply_markup=markup)


@_with_error_handling
async def text_message(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    message = update.effective_message
    if not message or not message.text:
        return
    text = message.text.strip()
    session = _get_session(update, context)
    if text == CALENDAR_BUTTON:
        await _send_month_view(update, context, session)
        return
    field = session.awaiting_field
    if session.form is None or field is None:
        await safe_send_text(update, "Use /calendar to open the month view or /new to add an event.")
        return
    if field == AI_INPUT:
        session.awaiting_field = None
        await _run_magic_create(update, context, session, text)
        return
    if field in {"start", "end"}:
        try:
            parse_local_input(text, _get_sessions(context).tz)
        except ValueError:
            await safe_send_text(update, f"Couldn't read that time. {render.FIELD_PROMPTS[field]}")
            return
    value = "" if text == CLEAR_VALUE else text
    session.form = session.form.with_field(field, value)
    session.awaiting_field = None
    await _show_form(update, session)


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    LOGGER.exception("Unhandled exception", exc_info=context.error)
    if isinstance(update, Update) and update.effective_message:
        await safe_send_text(update, "Something went wrong. Please try again.")
