"""Process logging for the calendar bot.

Reads LOG_LEVEL and LOG_FILE. Everything goes to stderr; LOG_FILE adds a
rotating copy. Telegram and HTTP client chatter is held at WARNING unless the
bot itself runs quieter than that.
"""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUPS = 3
THIRD_PARTY_LOGGERS = ("httpx", "httpcore", "telegram", "telegram.ext")


def level_from_env(default: int = logging.INFO) -> int:
    name = os.environ.get("LOG_LEVEL", "").strip().upper()
    if not name:
        return default
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else default


def _file_handler(log_file: str) -> logging.Handler:
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)
    return RotatingFileHandler(
        log_file,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8",
    )


def configure_logging(*, level: int | None = None, log_file: str | None = None) -> None:
    """Install the bot's handlers on the root logger, replacing any present.

    ``level`` and ``log_file`` default to LOG_LEVEL and LOG_FILE.
    """
    if level is None:
        level = level_from_env()
    if log_file is None:
        log_file = os.environ.get("LOG_FILE", "").strip()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    file_error: OSError | None = None
    if log_file:
        try:
            handlers.append(_file_handler(log_file))
        except OSError as exc:
            file_error = exc

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    root = logging.getLogger()
    for existing in root.handlers[:]:
        root.removeHandler(existing)
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(level)

    for name in THIRD_PARTY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    if file_error is not None:
        root.warning("Could not open log file %s: %s; logging to stderr only", log_file, file_error)
