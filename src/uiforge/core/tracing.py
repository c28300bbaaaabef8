"""
Tracing

A pipeline run is one trace; each stage (planner, generator, validator,
explainer) is a child span. Finished spans are reported as log events, and
the active trace id is bound into the structlog context so every log line
inside a run carries it.
"""

import contextvars
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterator

import structlog

from .id import new_request_id

logger = structlog.get_logger(__name__)

_current: contextvars.ContextVar["Span | None"] = contextvars.ContextVar("current_span", default=None)

# Stages slower than this are reported at WARNING.
SLOW_SPAN_SECONDS = 5.0


@dataclass
class Span:
    """One timed stage of a pipeline run."""

    name: str
    trace_id: str
    span_id: str = field(default_factory=new_request_id)
    parent_id: str = ""
    attributes: dict[str, str] = field(default_factory=dict)
    started: float = field(default_factory=time.perf_counter)
    duration: float = 0.0
    error: Exception | None = None

    def close(self) -> None:
        self.duration = time.perf_counter() - self.started


class Tracer:
    """Opens spans for one service and reports them when they close."""

    def __init__(self, service: str) -> None:
        self.service = service

    def open(self, name: str, attributes: dict[str, str]) -> Span:
        parent = _current.get()
        if parent is None:
            return Span(name=name, trace_id=new_request_id(), attributes=attributes)
        return Span(name=name, trace_id=parent.trace_id, parent_id=parent.span_id, attributes=attributes)

    def report(self, span: Span) -> None:
        fields: dict[str, Any] = {
            "span": span.name,
            "service": self.service,
            "duration_ms": round(span.duration * 1000, 2),
            **span.attributes,
        }
        if span.parent_id:
            fields["parent_id"] = span.parent_id

        if span.error is not None:
            logger.error("span_failed", error_type=type(span.error).__name__, error=str(span.error), **fields)
        elif span.duration > SLOW_SPAN_SECONDS:
            logger.warning("span_slow", **fields)
        else:
            logger.debug("span_done", **fields)


_tracer: Tracer | None = None


def init_tracer(service: str) -> Tracer:
    """Install the process-wide tracer."""
    global _tracer
    _tracer = Tracer(service)
    return _tracer


def get_trace_id() -> str:
    """Trace id of the innermost open span, or ``""`` outside any span."""
    span = _current.get()
    return span.trace_id if span is not None else ""


@contextmanager
def trace_operation(operation: str, **attributes: Any) -> Iterator[Span | None]:
    """Time a block as a span; yields ``None`` until ``init_tracer`` has been called."""
    tracer = _tracer
    if tracer is None:
        yield None
        return

    span = tracer.open(operation, {k: str(v) for k, v in attributes.items()})
    token = _current.set(span)
    with structlog.contextvars.bound_contextvars(trace_id=span.trace_id):
        try:
            yield span
        except Exception as e:
            span.error = e
            raise
        finally:
            span.close()
            _current.reset(token)
            tracer.report(span)
