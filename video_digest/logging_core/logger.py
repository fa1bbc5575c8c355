# video_digest/logging_core/logger.py
"""
Centralized structured logging for video_digest.

Emits JSON lines with the fields:
- timestamp (ISO, UTC)
- run_id
- stage_name (optional, filled by caller)
- event_type (start/success/failure/retry/progress)
- level
- message
- metadata (dict)

Pipeline code logs through the logger returned by get_logger(run_id).
Library code without a run logs through logging.getLogger(__name__) and the
same log_event() helper, so records look alike either way.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from logging import Logger
from typing import Any, Dict
from uuid import UUID


class JSONFormatter(logging.Formatter):
    """Formatter that outputs one JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        log_record: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).replace(microsecond=0, tzinfo=None).isoformat() + "Z",
            "level": record.levelname,
            "message": record.getMessage(),
        }

        if hasattr(record, "run_id"):
            log_record["run_id"] = str(record.run_id)

        for field in ("stage_name", "event_type", "metadata"):
            value = getattr(record, field, None)
            if value is not None:
                log_record[field] = value

        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(log_record, ensure_ascii=False, default=str)


class RunIdFilter(logging.Filter):
    """Stamps every record with the run it belongs to."""

    def __init__(self, run_id: str) -> None:
        super().__init__()
        self.run_id = run_id

    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = self.run_id  # type: ignore[attr-defined]
        return True


# One logger per run_id
_loggers: Dict[str, Logger] = {}
_level: int = logging.INFO


def set_level(level: int | str) -> None:
    """Set the level for all current and future run loggers."""
    global _level  # pylint: disable=global-statement
    resolved = logging.getLevelName(level.upper()) if isinstance(level, str) else level
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    _level = resolved
    for logger in _loggers.values():
        logger.setLevel(_level)


def get_logger(run_id: UUID) -> Logger:
    """
    Return the configured logger for a pipeline run.

    Logs are emitted as JSON lines to stdout. Idempotent per run_id.
    """
    run_id_str = str(run_id)

    if run_id_str in _loggers:
        return _loggers[run_id_str]

    logger = logging.getLogger(f"video_digest.run.{run_id_str}")
    logger.setLevel(_level)
    logger.propagate = False

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)

    if not any(isinstance(existing, RunIdFilter) for existing in logger.filters):
        logger.addFilter(RunIdFilter(run_id_str))
    _loggers[run_id_str] = logger
    return logger


def release_logger(run_id: UUID) -> None:
    """
    Close a finished run's handlers and drop it from the run registry.

    The Logger object itself stays registered with the logging module (loggers
    are never destroyed), stripped of handlers and filters.
    """
    logger = _loggers.pop(str(run_id), None)
    if logger is None:
        return
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    for run_filter in list(logger.filters):
        logger.removeFilter(run_filter)


def log_event(
    logger: Logger,
    level: int,
    message: str,
    *,
    stage_name: str | None = None,
    event_type: str,
    metadata: Dict[str, Any] | None = None,
) -> None:
    """Convenience wrapper for structured logging."""
    extra: Dict[str, Any] = {"event_type": event_type}
    if stage_name:
        extra["stage_name"] = stage_name
    if metadata:
        extra["metadata"] = metadata

    logger.log(level, message, extra=extra)
