"""
Structured Logging Configuration

Every module logs snake_case events with key/value fields through structlog.
Prompts and generated code can run to thousands of characters, so string
fields are clipped before rendering.
"""

import logging
import sys
from typing import Any

import structlog
from pythonjsonlogger import jsonlogger


# Longest string value rendered in a log line.
FIELD_LIMIT = 300

# Third-party loggers that are chatty at INFO.
_QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


def clip_long_values(_logger: Any, _method: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Processor: shorten oversized string fields, keeping the event name intact."""
    for key, value in event_dict.items():
        if key != "event" and isinstance(value, str) and len(value) > FIELD_LIMIT:
            event_dict[key] = f"{value[:FIELD_LIMIT]}... [{len(value)} chars]"
    return event_dict


def _stdlib_handler(json_logs: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    if json_logs:
        handler.setFormatter(jsonlogger.JsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    return handler


def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """
    Configure structured logging for the service.

    Safe to call more than once; the last call wins.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Render one JSON object per line instead of console output
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=log_level, handlers=[_stdlib_handler(json_logs)], force=True)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            clip_long_values,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Logger for a module; pass ``__name__``."""
    return structlog.get_logger(name)


class LogContext:
    """
    Bind fields (``session_id``, ``request_id`` ...) to every log line in scope.

    Fields bound by an enclosing context are restored on exit.
    """

    def __init__(self, **fields: Any):
        self.fields = fields
        self._previous: dict[str, Any] = {}

    def __enter__(self) -> "LogContext":
        current = structlog.contextvars.get_contextvars()
        self._previous = {k: current[k] for k in self.fields if k in current}
        structlog.contextvars.bind_contextvars(**self.fields)
        return self

    def __exit__(self, *args: Any) -> None:
        structlog.contextvars.unbind_contextvars(*self.fields)
        if self._previous:
            structlog.contextvars.bind_contextvars(**self._previous)
