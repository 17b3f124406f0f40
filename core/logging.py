# ============================================================================
# STRUCTURED LOGGING
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Core - Structured logging with request context
# PURPOSE: Consistent, queryable logging across functions and services
# CREATED: 14 OCT 2026
# ============================================================================
"""
Structured Logging

JSON or human-readable logging for the function app. Application
Insights picks up stdout from the Functions host, so LOG_FORMAT=json
gives queryable records in production.

A LogContext carries the fields that identify one unit of work (the
invocation, the caller's UPN, the registration being processed). It lives
in a ContextVar, so every thread the Functions worker dispatches into
sees only its own context.

Usage:
    import logging
    from core.logging import log_context

    logger = logging.getLogger(__name__)

    with log_context(registration_id="reg-123", upn="jane@example.com"):
        logger.info("Completing registration")
"""

import json
import logging
import os
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field, fields, replace
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional, Union

_HANDLER_MARKER = "_author_platform"

# Loggers that are chatty at INFO under the Functions host
_QUIET_LOGGERS = (
    "azure.core.pipeline.policies.http_logging_policy",
    "azure.identity",
    "httpx",
)


@dataclass(frozen=True)
class LogContext:
    """Identifying fields attached to every record logged inside log_context()."""
    invocation_id: Optional[str] = None
    upn: Optional[str] = None
    registration_id: Optional[str] = None
    operation: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "extra" and getattr(self, f.name) is not None
        }
        data.update(self.extra)
        return data

    def short_tags(self) -> List[str]:
        """Compact key=value tags for single-line output."""
        tags = []
        if self.invocation_id:
            tags.append(f"inv={self.invocation_id[:8]}")
        if self.upn:
            tags.append(f"upn={self.upn}")
        if self.registration_id:
            tags.append(f"reg={self.registration_id}")
        return tags


_current: ContextVar[LogContext] = ContextVar("log_context", default=LogContext())


def get_current_context() -> LogContext:
    return _current.get()


@contextmanager
def log_context(**kwargs) -> Iterator[LogContext]:
    """
    Layer fields over the enclosing context for the duration of the block.

    Unknown keywords are not accepted; free-form values go in extra=,
    which merges with (rather than replaces) the parent's extra.

    Example:
        with log_context(operation="complete_registration", registration_id=reg_id):
            logger.info("Starting")
    """
    parent = _current.get()
    extra = kwargs.pop("extra", None)
    merged = replace(parent, **kwargs)
    if extra:
        merged = replace(merged, extra={**parent.extra, **extra})

    token = _current.set(merged)
    try:
        yield merged
    finally:
        _current.reset(token)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _record_data(record: logging.LogRecord) -> Optional[Dict[str, Any]]:
    # Callers pass structured data as logger.info(msg, extra={"extra": {...}})
    return getattr(record, "extra", None) or None


class StructuredFormatter(logging.Formatter):
    """One JSON object per line, for Application Insights queries."""

    def __init__(self, include_context: bool = True, include_source: bool = True):
        super().__init__()
        self.include_context = include_context
        self.include_source = include_source

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": _timestamp(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = get_current_context().to_dict() if self.include_context else {}
        if context:
            payload["context"] = context

        data = _record_data(record)
        if data:
            payload["data"] = data

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        if self.include_source:
            payload["source"] = {"file": record.filename, "line": record.lineno, "function": record.funcName}

        return json.dumps(payload, default=str)


class HumanFormatter(logging.Formatter):
    """Single-line output for local `func start` sessions."""

    def format(self, record: logging.LogRecord) -> str:
        when = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        tags = get_current_context().short_tags()

        line = f"{when} {record.levelname:<8} {record.name}"
        if tags:
            line += f" [{', '.join(tags)}]"
        line += f": {record.getMessage()}"

        data = _record_data(record)
        if data:
            line += f" {data}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def _resolve_level(level: Union[str, int, None]) -> int:
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(level: Union[str, int, None] = None, json_output: bool = False) -> None:
    """
    Install the app's formatter on the root logger.

    Safe to call repeatedly: the host's own handlers are left alone and
    our stdout handler is added once, then only re-formatted.

    Args:
        level: Log level name or number. Defaults to LOG_LEVEL, then INFO.
        json_output: Force JSON output. LOG_FORMAT=json has the same effect.
    """
    use_json = json_output or os.getenv("LOG_FORMAT", "").lower() == "json"
    formatter: logging.Formatter = StructuredFormatter() if use_json else HumanFormatter()

    root = logging.getLogger()
    root.setLevel(_resolve_level(level))

    ours = [h for h in root.handlers if getattr(h, _HANDLER_MARKER, False)]
    if ours:
        ours[0].setFormatter(formatter)
    else:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_MARKER, True)
        root.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def log_checkpoint(
    name: str,
    data: Optional[Dict[str, Any]] = None,
    logger: Optional[logging.Logger] = None,
) -> None:
    """
    Record that a workflow step finished.

    The active registration and invocation ids are copied into the
    record, so one query over "CHECKPOINT:" reconstructs a registration's
    history.
    """
    context = get_current_context()
    payload: Dict[str, Any] = {"checkpoint": name, "timestamp": _timestamp()}
    for key in ("registration_id", "invocation_id"):
        value = getattr(context, key)
        if value:
            payload[key] = value
    if data:
        payload["data"] = data

    (logger or logging.getLogger("checkpoint")).info(f"CHECKPOINT: {name}", extra={"extra": payload})


__all__ = [
    "LogContext",
    "StructuredFormatter",
    "HumanFormatter",
    "configure_logging",
    "log_context",
    "get_current_context",
    "log_checkpoint",
]
