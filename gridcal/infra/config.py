from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

LOGGER = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "UTC"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_OPENAI_BASE_URL = "https://api.openai.com/v1"
DRY_RUN_TOKEN = "000000:DRY_RUN_TOKEN"
_TIME_FORMATS = {"12h", "24h"}


@dataclass(frozen=True)
class Settings:
    bot_token: str
    openai_api_key: str | None
    openai_model: str
    openai_base_url: str
    openai_timeout_seconds: float
    timezone_name: str
    time_format: str
    seed_demo_events: bool
    dry_run: bool

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone_name)

    @property
    def hour12(self) -> bool:
        return self.time_format == "12h"


@dataclass(frozen=True)
class StartupFeatures:
    llm_enabled: bool


def validate_startup_env(settings: Settings, *, logger: logging.Logger | None = None) -> StartupFeatures:
    log = logger or LOGGER
    # DRY_RUN lets smoke tests start without real Telegram credentials.
    if not settings.dry_run and not settings.bot_token:
        log.error("startup.env invalid: BOT_TOKEN missing")
        raise SystemExit("BOT_TOKEN is not set")

    llm_enabled = bool(settings.openai_api_key)
    if not llm_enabled:
        log.warning("startup.env llm disabled: OPENAI_API_KEY not configured; magic create is off")
    return StartupFeatures(llm_enabled=llm_enabled)


def load_settings(raw_env: dict[str, str] | None = None) -> Settings:
    if raw_env is None:
        _load_dotenv()
    env = raw_env if raw_env is not None else os.environ
    dry_run = _parse_optional_bool(env.get("DRY_RUN")) is True

    token = (env.get("BOT_TOKEN") or "").strip()
    if not token and dry_run:
        token = DRY_RUN_TOKEN

    timezone_name = _parse_timezone(env.get("CALENDAR_TZ"))
    time_format = (env.get("TIME_FORMAT") or "12h").strip().lower()
    if time_format not in _TIME_FORMATS:
        LOGGER.warning("config: unsupported TIME_FORMAT=%s, using 12h", time_format)
        time_format = "12h"
    seed_demo_events = _parse_optional_bool(env.get("SEED_DEMO_EVENTS"))
    if seed_demo_events is None:
        seed_demo_events = True

    return Settings(
        bot_token=token,
        openai_api_key=env.get("OPENAI_API_KEY") or None,
        openai_model=env.get("OPENAI_MODEL") or DEFAULT_OPENAI_MODEL,
        openai_base_url=env.get("OPENAI_BASE_URL") or DEFAULT_OPENAI_BASE_URL,
        openai_timeout_seconds=_parse_optional_float(env.get("OPENAI_TIMEOUT_SECONDS"), 30.0),
        timezone_name=timezone_name,
        time_format=time_format,
        seed_demo_events=seed_demo_events,
        dry_run=dry_run,
    )


def _load_dotenv() -> None:
    try:
        from dotenv import load_dotenv
    except ImportError:
        LOGGER.debug("python-dotenv is not installed; skipping .env loading")
        return
    load_dotenv()


def _parse_timezone(value: str | None) -> str:
    name = (value or "").strip() or DEFAULT_TIMEZONE
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        LOGGER.warning("config: unknown CALENDAR_TZ=%s, using %s", name, DEFAULT_TIMEZONE)
        return DEFAULT_TIMEZONE
    return name


def _parse_optional_float(value: str | None, default: float) -> float:
    if value is None:
        return default
    trimmed = value.strip()
    if not trimmed:
        return default
    return float(trimmed)


def _parse_optional_bool(value: str | None) -> bool | None:
    if value is None:
        return None
    trimmed = value.strip().lower()
    if not trimmed:
        return None
    return trimmed in {"1", "true", "yes", "on"}
