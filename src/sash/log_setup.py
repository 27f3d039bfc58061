"""Logging setup for command-line execution."""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any, Literal

LogFormat = Literal["plain", "json"]


class PlainConsoleFormatter(logging.Formatter):
    """One-line ``sash: message`` diagnostics, the way classic Unix tools print."""

    def __init__(self, prog: str = "sash") -> None:
        super().__init__()
        self.prog = prog

    def format(self, record: logging.LogRecord) -> str:
        text = f"{self.prog}: {record.getMessage()}"
        if record.exc_info:
            text = f"{text}\n{self.formatException(record.exc_info)}"
        return text


class JsonConsoleFormatter(logging.Formatter):
    """Simple JSON formatter for structured console logs."""

    def format(self, record: logging.LogRecord) -> str:
        event: dict[str, Any] = {
            "ts": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            event["exception"] = self.formatException(record.exc_info)
        return json.dumps(event, default=str)


def setup_logger(
    name: str = "sash",
    level: int | str = logging.INFO,
    log_format: LogFormat = "plain",
) -> logging.Logger:
    """Create and configure the process-wide logger.

    Diagnostics always go to stderr: stdout may be carrying passthrough data.
    Calling this again re-targets the existing handler at the current
    ``sys.stderr`` and swaps its formatter.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False
    formatter: logging.Formatter = (
        JsonConsoleFormatter() if log_format == "json" else PlainConsoleFormatter(name)
    )
    if logger.handlers:
        for handler in logger.handlers:
            if isinstance(handler, logging.StreamHandler):
                handler.setStream(sys.stderr)
            handler.setFormatter(formatter)
        return logger

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    return logger
