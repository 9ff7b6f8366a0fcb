from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from telegram import InlineKeyboardButton, InlineKeyboardMarkup

from gridcal.core.calendar_grid import month_title
from gridcal.core.date_utils import WEEK_DAYS
from gridcal.core.event_form import EventForm
from gridcal.core.models import EVENT_COLORS, DayInfo

CALLBACK_PREFIX = "cb:"
MAX_CALLBACK_BYTES = 64

NOOP = "noop"
NAV_PREV = "nav:prev"
NAV_NEXT = "nav:next"
NAV_TODAY = "nav:today"
FORM_OPEN = "form:open"
FORM_SAVE = "form:save"
FORM_CANCEL = "form:cancel"
FORM_AI = "form:ai"

FIELD_LABELS = {
    "title": "✏️ Title",
    "start": "🕘 Start",
    "end": "🕙 End",
    "description": "📝 Description",
    "location": "📍 Location",
}


@dataclass(frozen=True)
class Callback:
    kind: str
    args: tuple[str, ...]


def callback_data(*parts: str) -> str:
    data = CALLBACK_PREFIX + ":".join(parts)
    if len(data.encode("utf-8")) > MAX_CALLBACK_BYTES:
        raise ValueError(f"Callback data too long: {data}")
    return data


def parse_callback(data: str | None) -> Callback | None:
    if not data or not data.startswith(CALLBACK_PREFIX):
        return None
    parts = data[len(CALLBACK_PREFIX) :].split(":")
    if not parts or not parts[0]:
        return None
    return Callback(kind=parts[0], args=tuple(parts[1:]))


def day_label(cell: DayInfo, *, selected_day: date | None) -> str:
    label = str(cell.date.day)
    if cell.is_today:
        label = f"[{label}]"
    if not cell.is_current_month:
        label = f"({label})"
    if cell.date == selected_day:
        label = f"›{label}‹"
    if cell.events:
        label += "•"
    return label


def build_month_keyboard(
    grid: list[DayInfo],
    *,
    year: int,
    month: int,
    selected_day: date | None,
) -> InlineKeyboardMarkup:
    rows: list[list[InlineKeyboardButton]] = [
        [
            InlineKeyboardButton("‹", callback_data=callback_data(NAV_PREV)),
            InlineKeyboardButton(month_title(year, month), callback_data=callback_data(NOOP)),
            InlineKeyboardButton("›", callback_data=callback_data(NAV_NEXT)),
        ],
        [InlineKeyboardButton(name, callback_data=callback_data(NOOP)) for name in WEEK_DAYS],
    ]
    for week_start in range(0, len(grid), 7):
        rows.append(
            [
                InlineKeyboardButton(
                    day_label(cell, selected_day=selected_day),
                    callback_data=callback_data("day", cell.date.isoformat()),
                )
                for cell in grid[week_start : week_start + 7]
            ]
        )
    rows.append(
        [
            InlineKeyboardButton("Today", callback_data=callback_data(NAV_TODAY)),
            InlineKeyboardButton("➕ New event", callback_data=callback_data(FORM_OPEN)),
        ]
    )
    return InlineKeyboardMarkup(rows)


def build_form_keyboard(form: EventForm, *, ai_pending: bool = False) -> InlineKeyboardMarkup:
    field_buttons = [
        InlineKeyboardButton(label, callback_data=callback_data("form", "field", name))
        for name, label in FIELD_LABELS.items()
    ]
    rows = [field_buttons[index : index + 2] for index in range(0, len(field_buttons), 2)]
    rows.append(
        [
            InlineKeyboardButton(
                f"✅{color.emoji}" if color.tag == form.color else color.emoji,
                callback_data=callback_data("form", "color", color.tag),
            )
            for color in EVENT_COLORS
        ]
    )
    if ai_pending:
        rows.append([InlineKeyboardButton("⏳ Parsing…", callback_data=callback_data(NOOP))])
    else:
        rows.append([InlineKeyboardButton("✨ Magic create", callback_data=callback_data(FORM_AI))])
    rows.append(
        [
            InlineKeyboardButton("💾 Save", callback_data=callback_data(FORM_SAVE)),
            InlineKeyboardButton("✖️ Cancel", callback_data=callback_data(FORM_CANCEL)),
        ]
    )
    return InlineKeyboardMarkup(rows)
