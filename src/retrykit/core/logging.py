"""Structured logging for retrykit.

retrykit logs through structlog on top of the stdlib ``logging`` tree, so
host applications keep control of handlers and levels. Every entry
emitted inside a retry cycle carries the cycle's operation name and
invocation id.

Example usage:
    from retrykit.core.logging import OperationContext, configure_logging, get_logger, with_context

    configure_logging(level="DEBUG", format="console")

    logger = get_logger("retry_engine")
    with with_context(OperationContext(operation="load-universities")):
        logger.warning("retry.scheduled", attempt=1, delay_ms=1000)
"""

from __future__ import annotations

import logging
import re
import sys
import uuid
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import asdict, dataclass, field, replace
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Literal

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console", "both"]

# Keys whose values are replaced before rendering: credentials an HTTP
# client may carry in headers, cookies or request parameters.
SENSITIVE_KEY_PATTERN = re.compile(
    r"api[_-]?key|token|secret|passw(or)?d|credential|bearer|authorization|cookie|session",
    re.IGNORECASE,
)
REDACTED = "[REDACTED]"


@dataclass(frozen=True)
class OperationContext:
    """Correlation fields for one retry cycle.

    Attributes:
        operation: Name of the wrapped operation (e.g. "load-faculties").
        invocation_id: Unique id of one ``execute()`` call.
        component: Component that opened the context.
    """

    operation: str
    invocation_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    component: str = "unknown"

    def with_component(self, component: str) -> OperationContext:
        return replace(self, component=component)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# One slot per asyncio task: concurrent retry cycles never see each other's context
_operation_context: ContextVar[OperationContext | None] = ContextVar(
    "retrykit_operation_context", default=None
)


def get_current_context() -> OperationContext | None:
    return _operation_context.get()


@contextmanager
def with_context(ctx: OperationContext) -> Iterator[OperationContext]:
    """Make ``ctx`` the current OperationContext inside the block."""
    token = _operation_context.set(ctx)
    try:
        yield ctx
    finally:
        _operation_context.reset(token)


def _redact(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {
            k: REDACTED if SENSITIVE_KEY_PATTERN.search(str(k)) else _redact(v)
            for k, v in value.items()
        }
    return value


def redact_sensitive(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Processor replacing credential-like values, at any nesting depth."""
    return _redact(event_dict)


def merge_operation_context(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Processor adding the current OperationContext's fields.

    Keys already bound on the logger or passed to the call win.
    """
    ctx = _operation_context.get()
    if ctx is None:
        return event_dict
    return {**ctx.to_dict(), **event_dict}


class RetrykitLogger:
    """Component logger over structlog.

    The structlog logger is resolved on every call, so module-level loggers
    created at import time follow a later ``configure_logging()``.
    """

    def __init__(self, component: str, **initial_context: Any) -> None:
        self._bound: dict[str, Any] = {"component": component, **initial_context}

    @property
    def component(self) -> str:
        return str(self._bound["component"])

    def bind(self, **context: Any) -> RetrykitLogger:
        """Return a logger with extra context bound on top of this one."""
        child = RetrykitLogger(self.component)
        child._bound = {**self._bound, **context}
        return child

    def _emit(self, method: str, event: str, kw: dict[str, Any]) -> None:
        logger = structlog.get_logger().bind(**self._bound)
        getattr(logger, method)(event, **kw)

    def debug(self, event: str, **kw: Any) -> None:
        self._emit("debug", event, kw)

    def info(self, event: str, **kw: Any) -> None:
        self._emit("info", event, kw)

    def warning(self, event: str, **kw: Any) -> None:
        self._emit("warning", event, kw)

    def error(self, event: str, **kw: Any) -> None:
        self._emit("error", event, kw)

    def exception(self, event: str, **kw: Any) -> None:
        """Log at error level with the active exception's traceback."""
        self._emit("exception", event, kw)


def _shared_processors(include_timestamps: bool, include_context: bool) -> list[Processor]:
    chain: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
    ]
    if include_context:
        chain.append(merge_operation_context)
    chain.append(redact_sensitive)
    if include_timestamps:
        chain.append(structlog.processors.TimeStamper(fmt="iso", utc=True))
    chain += [
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    return chain


def _formatter(*processors: Processor) -> logging.Formatter:
    return structlog.stdlib.ProcessorFormatter(
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *processors],
    )


def _build_handlers(
    format: LogFormat,  # noqa: A002
    file_path: Path | None,
    max_bytes: int,
    backup_count: int,
) -> list[logging.Handler]:
    handlers: list[logging.Handler] = []

    if format in ("console", "both"):
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(_formatter(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())))
        handlers.append(console)

    if format in ("json", "both"):
        json_handler: logging.Handler
        if file_path is None:
            json_handler = logging.StreamHandler(sys.stdout)
        else:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            json_handler = RotatingFileHandler(
                file_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
            )
        # ConsoleRenderer formats tracebacks itself; JSON needs them as strings
        json_handler.setFormatter(
            _formatter(structlog.processors.format_exc_info, structlog.processors.JSONRenderer())
        )
        handlers.append(json_handler)

    return handlers


def configure_logging(
    level: LogLevel = "INFO",
    format: LogFormat = "console",  # noqa: A002
    file_path: Path | None = None,
    max_file_size_mb: int = 50,
    backup_count: int = 5,
    include_timestamps: bool = True,
    include_context: bool = True,
) -> None:
    """Route retrykit's structlog output through the root stdlib logger.

    Replaces the root logger's handlers. Call once at startup.

    Args:
        level: Minimum level captured.
        format: "console" renders for humans on stderr; "json" writes one
            JSON object per line to ``file_path`` (or stdout); "both" does
            both and requires ``file_path``.
        file_path: Destination of JSON output, rotated by size.
        max_file_size_mb: Size at which the log file rotates.
        backup_count: Rotated files kept.
        include_timestamps: Add an ISO8601 UTC ``timestamp`` field.
        include_context: Merge the current OperationContext.

    Raises:
        ValueError: If the level or format is unknown, or format="both"
            is requested without file_path.
    """
    if format not in ("json", "console", "both"):
        raise ValueError(f"Unknown log format {format!r}: expected json, console or both")
    if format == "both" and file_path is None:
        raise ValueError("file_path is required when format='both'")

    numeric_level = logging.getLevelName(level)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level {level!r}")
    handlers = _build_handlers(format, file_path, max_file_size_mb * 1024 * 1024, backup_count)

    root = logging.getLogger()
    for old in list(root.handlers):
        root.removeHandler(old)
    for handler in handlers:
        handler.setLevel(numeric_level)
        root.addHandler(handler)
    root.setLevel(numeric_level)

    structlog.configure(
        processors=[
            *_shared_processors(include_timestamps, include_context),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Not cached: import-time loggers must pick up reconfiguration
        cache_logger_on_first_use=False,
    )


def get_logger(component: str, **initial_context: Any) -> RetrykitLogger:
    """Logger for one retrykit component (e.g. "retry_engine", "connectivity")."""
    return RetrykitLogger(component, **initial_context)


__all__ = [
    "OperationContext",
    "REDACTED",
    "RetrykitLogger",
    "SENSITIVE_KEY_PATTERN",
    "configure_logging",
    "get_current_context",
    "get_logger",
    "merge_operation_context",
    "redact_sensitive",
    "with_context",
]
