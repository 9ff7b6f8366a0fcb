"""Free-text event drafting through a hosted language model.

The parser never writes events anywhere: it returns a ParseOutcome whose
draft the form may pre-fill. Every failure path collapses to an outcome
instead of an exception, tagged ``unavailable`` (no credentials) or
``failed`` (request or reply problem) so callers can tell them apart.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta, tzinfo
from typing import Any

from gridcal.core.models import EventDraft, ParseOutcome
from gridcal.infra.llm.base import LLMClient

LOGGER = logging.getLogger(__name__)

DEFAULT_DURATION = timedelta(hours=1)
MAX_INPUT_CHARS = 1000

SYSTEM_PROMPT = (
    "You extract a single calendar event from the user's message. "
    "Reply with one JSON object and nothing else, using the keys: "
    '"title" (short event title, string), '
    '"start" (ISO 8601 start date-time, string), '
    '"end" (ISO 8601 end date-time, string), '
    '"description" (additional details, string, optional), '
    '"location" (location if specified, string, optional). '
    "Resolve relative dates such as 'tomorrow' or 'next friday' against the reference date "
    "given by the user. If no end time is stated, assume a duration of 1 hour."
)


def build_messages(text: str, *, reference: datetime, tz: tzinfo | None = None) -> list[dict[str, Any]]:
    local_reference = reference.astimezone(tz) if tz is not None and reference.tzinfo else reference
    user_content = (
        f"Current reference date: {reference.isoformat()} "
        f"({local_reference.strftime('%A, %B %d %Y %H:%M')} local time)\n"
        f'User input: "{text}"\n'
        "Extract the event details from the user input relative to the reference date."
    )
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": user_content},
    ]


async def parse_natural_language_event(
    text: str,
    *,
    reference: datetime,
    client: LLMClient | None,
    model: str | None = None,
    tz: tzinfo | None = None,
) -> ParseOutcome:
    if client is None or not getattr(client, "api_key", None):
        LOGGER.warning("nl_parser unavailable: no LLM API key configured")
        return ParseOutcome(status="unavailable", reason="missing_api_key")
    cleaned = (text or "").strip()
    if not cleaned:
        return ParseOutcome(status="failed", reason="empty_input")
    cleaned = cleaned[:MAX_INPUT_CHARS]

    try:
        response = await client.create_chat_completion(
            model=model,
            messages=build_messages(cleaned, reference=reference, tz=tz),
            response_format={"type": "json_object"},
        )
    except Exception:
        LOGGER.exception("nl_parser request failed")
        return ParseOutcome(status="failed", reason="request_error")

    content = response.get("content") if isinstance(response, dict) else None
    if not isinstance(content, str) or not content.strip():
        LOGGER.warning("nl_parser failed: empty response")
        return ParseOutcome(status="failed", reason="empty_response")
    try:
        draft = parse_draft_payload(content, tz=tz)
    except ValueError as exc:
        LOGGER.warning("nl_parser failed: malformed response: %s", exc)
        return ParseOutcome(status="failed", reason="malformed_response")
    LOGGER.info("nl_parser ok: start=%s end=%s", draft.start.isoformat(), draft.end.isoformat())
    return ParseOutcome(status="ok", draft=draft)


def parse_draft_payload(content: str, *, tz: tzinfo | None = None) -> EventDraft:
    """Turn the model's JSON reply into an EventDraft.

    Raises ValueError for anything that is not an object with a non-empty
    ``title`` and parseable ``start``. A missing ``end`` defaults to one hour
    after the start.
    """
    try:
        payload = json.loads(_strip_code_fence(content))
    except json.JSONDecodeError as exc:
        raise ValueError("response is not JSON") from exc
    if not isinstance(payload, dict):
        raise ValueError("response is not a JSON object")

    title = payload.get("title")
    if not isinstance(title, str) or not title.strip():
        raise ValueError("title missing")
    start = _parse_timestamp(payload.get("start"), "start", tz)
    raw_end = payload.get("end")
    if raw_end is None or (isinstance(raw_end, str) and not raw_end.strip()):
        end = start + DEFAULT_DURATION
    else:
        end = _parse_timestamp(raw_end, "end", tz)
    return EventDraft(
        title=title.strip(),
        start=start,
        end=end,
        description=_optional_text(payload.get("description")),
        location=_optional_text(payload.get("location")),
    )


def _parse_timestamp(value: object, field: str, tz: tzinfo | None) -> datetime:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{field} missing")
    raw = value.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError as exc:
        raise ValueError(f"{field} is not ISO 8601: {value!r}") from exc
    if parsed.tzinfo is None and tz is not None:
        parsed = parsed.replace(tzinfo=tz)
    return parsed


def _optional_text(value: object) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _strip_code_fence(content: str) -> str:
    stripped = content.strip()
    if stripped.startswith("```"):
        stripped = stripped.strip("`")
        if stripped.lower().startswith("json"):
            stripped = stripped[4:]
    return stripped.strip()
