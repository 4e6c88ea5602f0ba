"""
Structured JSON Lines logging.

Each record is rendered as one JSON object per line:

    {"ts": "2026-01-15T10:30:00Z", "level": "INFO", "logger": "jsonhttp.client",
     "event": "http_request", "msg": "GET https://api.example.com/items",
     "extra": {"status": 200, "latency_ms": 12.4}}

``log_event`` is the only way the package emits records, so every entry
carries an event name that can be filtered with jq or a log aggregator.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class LogSettings:
    """
    Configuration for logger initialization.

    Attributes:
        level: Log level string (DEBUG, INFO, WARNING, ERROR).
        name: Logger name.
        log_file: Optional path to a log file (None for console only).
        jsonl: If True, use JSON Lines format; otherwise plain text.
    """
    level: str = "INFO"
    name: str = "jsonhttp"
    log_file: Path | None = None
    jsonl: bool = True


class JsonLineFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        event = getattr(record, "event", "log")
        extra = getattr(record, "extra", {})
        if not isinstance(extra, dict):
            extra = {"value": extra}

        payload = {
            "ts": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "event": event,
            "msg": record.getMessage(),
            "extra": extra,
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def build_logger(settings: LogSettings) -> logging.Logger:
    """
    Create and configure a logger.

    The logger does not propagate, writes to stderr and optionally to a
    file. JSON Lines formatting is used when ``settings.jsonl`` is True.

    Args:
        settings: LogSettings with level, name, file path and format.

    Returns:
        Configured Logger instance.
    """
    logger = logging.getLogger(settings.name)
    logger.setLevel(settings.level)
    logger.handlers.clear()
    logger.propagate = False

    formatter = JsonLineFormatter() if settings.jsonl else None

    stream_handler = logging.StreamHandler()
    if formatter:
        stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if settings.log_file:
        file_handler = logging.FileHandler(settings.log_file, encoding="utf-8")
        if formatter:
            file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def log_event(
    logger: logging.Logger,
    level: int,
    event: str,
    message: str,
    *,
    exc_info: logging._ExcInfoType | None = None,
    **extra: Any,
) -> None:
    """Emit ``message`` tagged with ``event``; keyword arguments land under ``extra`` in the JSONL record."""
    logger.log(level, message, extra={"event": event, "extra": extra}, exc_info=exc_info)
