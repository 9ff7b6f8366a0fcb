from __future__ import annotations

import logging

from telegram import Update
from telegram.error import BadRequest

LOGGER = logging.getLogger(__name__)

MAX_MESSAGE_SIZE = 4000
EMPTY_MESSAGE_PLACEHOLDER = "(empty)"


def clip_text(text: str | None, max_len: int = MAX_MESSAGE_SIZE) -> str:
    payload = text if text and text.strip() else EMPTY_MESSAGE_PLACEHOLDER
    if len(payload) <= max_len:
        return payload
    return payload[: max_len - 1].rstrip() + "…"


async def safe_send_text(update: Update | None, text: str | None, reply_markup=None):
    message = update.effective_message if update else None
    if not message:
        return None
    try:
        return await message.reply_text(clip_text(text), reply_markup=reply_markup)
    except BadRequest as exc:
        LOGGER.exception("Failed to send message: %s", exc)
        return None


async def safe_edit_text(update: Update | None, text: str | None, reply_markup=None):
    """Edit the message behind a callback, or reply when there is none."""
    callback_query = update.callback_query if update else None
    if callback_query is None or getattr(callback_query, "message", None) is None:
        return await safe_send_text(update, text, reply_markup=reply_markup)
    payload = clip_text(text)
    try:
        return await callback_query.edit_message_text(payload, reply_markup=reply_markup)
    except BadRequest as exc:
        msg = str(exc)
        if "Message is not modified" in msg:
            return None
        if "Query is too old" in msg or "query id is invalid" in msg:
            LOGGER.info("Telegram rejected callback edit (expired): %s", msg)
        else:
            LOGGER.exception("Failed to edit message text: %s", exc)
    # Fallback: the original message can't be edited, send a fresh one.
    return await safe_send_text(update, payload, reply_markup=reply_markup)


async def safe_edit_message(message, text: str | None, reply_markup=None):
    """Edit a message the bot sent earlier; no-op when it is gone or unchanged."""
    if message is None:
        return None
    try:
        return await message.edit_text(clip_text(text), reply_markup=reply_markup)
    except BadRequest as exc:
        if "Message is not modified" not in str(exc):
            LOGGER.exception("Failed to edit sent message: %s", exc)
        return None
