# Copyright (c) 2026 Pointmatic
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Structured logging setup (console + JSONL)."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler


LOGGER_NAME = "tubeten"

_console = Console(stderr=True)


class JsonlFormatter(logging.Formatter):
    """Formats log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "playlist_id": getattr(record, "playlist_id", None),
            "event": getattr(record, "event", None),
            "details": getattr(record, "details", None),
            "error": getattr(record, "error", None),
        }
        # Upstream call context, present only on catalog failures.
        for field in ("stage", "status"):
            value = getattr(record, field, None)
            if value is not None:
                entry[field] = value
        if record.getMessage():
            entry["message"] = record.getMessage()
        return json.dumps(entry, default=str)


class JsonlFileHandler(logging.FileHandler):
    """File handler that uses JsonlFormatter by default."""

    def __init__(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        super().__init__(str(path), mode="a", encoding="utf-8")
        self.setFormatter(JsonlFormatter())


def setup_logging(*, verbose: bool = False, jsonl_path: Path | None = None) -> logging.Logger:
    """Configure and return the tubeten logger.

    Args:
        verbose: If True, set level to DEBUG; otherwise INFO.
        jsonl_path: If provided, also write structured JSONL logs to this file.

    Returns:
        The configured 'tubeten' logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    rich_handler = RichHandler(
        console=_console,
        show_time=verbose,
        show_path=verbose,
        rich_tracebacks=True,
        markup=False,
    )
    rich_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.addHandler(rich_handler)

    if jsonl_path is not None:
        jsonl_handler = JsonlFileHandler(Path(jsonl_path))
        jsonl_handler.setLevel(logging.DEBUG)
        logger.addHandler(jsonl_handler)

    return logger


def get_logger() -> logging.Logger:
    """Get the tubeten logger (call setup_logging first for handlers)."""
    return logging.getLogger(LOGGER_NAME)


def log_event(
    level: int,
    message: str,
    *,
    playlist_id: str | None = None,
    event: str | None = None,
    details: str | None = None,
    error: str | None = None,
    stage: str | None = None,
    status: int | None = None,
) -> None:
    """Log a structured event with optional pipeline-specific fields.

    ``stage`` and ``status`` name the catalog call (``playlistItems`` or
    ``videos``) and its HTTP status when the event reports an upstream failure.
    """
    logger = get_logger()
    logger.log(
        level,
        message,
        extra={
            "playlist_id": playlist_id,
            "event": event,
            "details": details,
            "error": error,
            "stage": stage,
            "status": status,
        },
    )
