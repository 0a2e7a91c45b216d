"""structlog configuration shared by the web server and the import scripts.

Environment variables:
- LOG_FORMAT: "json" for machine-readable lines, "console" or unset for
  human-readable output.
- LOG_LEVEL: "DEBUG", "INFO" (default), "WARNING", "ERROR", or "CRITICAL".
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import UTC, date, datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from collections.abc import MutableMapping
    from typing import Any

LOG_FILE_TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"

_LOG_FORMATS = ("json", "console", "")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Loggers that report every outgoing request at INFO.
_CHATTY_LOGGERS = ("httpx", "httpcore")


def _plain_values(
    _logger: object,
    _method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Render enums by value and dates as ISO strings."""
    for key, value in event_dict.items():
        if isinstance(value, Enum):
            event_dict[key] = value.value
        elif isinstance(value, date | datetime):
            event_dict[key] = value.isoformat()
    return event_dict


def _running_under_pytest() -> bool:
    return "pytest" in sys.modules


def log_format_is_json() -> bool:
    """Read LOG_FORMAT. Raises ValueError for an unknown format."""
    value = os.environ.get("LOG_FORMAT", "").lower()
    if value not in _LOG_FORMATS:
        raise ValueError(f"Invalid LOG_FORMAT={value!r}. Must be 'json', 'console', or unset.")
    return value == "json"


def log_level_from_env() -> int:
    """Read LOG_LEVEL (default INFO). Raises ValueError for an unknown level."""
    value = os.environ.get("LOG_LEVEL", "INFO").upper()
    if value not in _LOG_LEVELS:
        raise ValueError(f"Invalid LOG_LEVEL={value!r}. Must be one of {', '.join(_LOG_LEVELS)}.")
    return logging.getLevelNamesMapping()[value]


def _formatter(*, json_mode: bool, colors: bool) -> logging.Formatter:
    renderer = structlog.processors.JSONRenderer() if json_mode else structlog.dev.ConsoleRenderer(colors=colors)
    return structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
    )


def setup_logging(
    log_dir: Path | str | None = None,
    level: int | None = None,
    *,
    file_prefix: str = "daydle",
) -> Path | None:
    """Route structlog through the stdlib root logger to stdout and an optional file.

    With log_dir set (and not under pytest) a timestamped
    ``<file_prefix>-<timestamp>.log`` is created there and its path returned.
    """
    json_mode = log_format_is_json()
    if level is None:
        level = log_level_from_env()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            _plain_values,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(_formatter(json_mode=json_mode, colors=sys.stdout.isatty()))
    root.addHandler(console)

    if log_dir is None or _running_under_pytest():
        return None

    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now(tz=UTC).strftime(LOG_FILE_TIMESTAMP_FORMAT)
    log_file = directory / f"{file_prefix}-{stamp}.log"
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setFormatter(_formatter(json_mode=json_mode, colors=False))
    root.addHandler(file_handler)
    return log_file
