"""Resilient invoker tests."""

import threading

import pytest

from uiforge.agents import ResilientInvoker
from uiforge.core import (
    OperationCancelled,
    RateLimitedError,
    UpstreamError,
    UpstreamExhausted,
)


class Flaky:
    """Raises the queued errors, then returns ``result``."""

    def __init__(self, errors, result="ok"):
        self.errors = list(errors)
        self.result = result
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return self.result


# ============================================================================
# Retry behaviour
# ============================================================================

@pytest.mark.unit
def test_success_first_try_does_not_sleep(invoker, sleeps):
    op = Flaky([])
    assert invoker.invoke(op) == "ok"
    assert op.calls == 1
    assert sleeps == []


@pytest.mark.unit
def test_two_rate_limits_then_success(invoker, sleeps):
    op = Flaky([RateLimitedError("429"), RateLimitedError("429")])
    assert invoker.invoke(op) == "ok"
    assert op.calls == 3
    assert sleeps == [10.0, 20.0]


@pytest.mark.unit
def test_exhaustion_after_budget(invoker, sleeps):
    op = Flaky([RateLimitedError("429")] * 5)
    with pytest.raises(UpstreamExhausted) as exc:
        invoker.invoke(op)
    assert op.calls == 3
    assert exc.value.attempts == 3
    assert isinstance(exc.value.__cause__, RateLimitedError)
    # No sleep after the final attempt.
    assert sleeps == [10.0, 20.0]


@pytest.mark.unit
def test_non_rate_limit_error_propagates_immediately(invoker, sleeps):
    op = Flaky([UpstreamError("boom")])
    with pytest.raises(UpstreamError, match="boom"):
        invoker.invoke(op)
    assert op.calls == 1
    assert sleeps == []


@pytest.mark.unit
def test_arbitrary_exception_propagates_immediately(invoker):
    op = Flaky([KeyError("nope")])
    with pytest.raises(KeyError):
        invoker.invoke(op)
    assert op.calls == 1


@pytest.mark.unit
def test_max_attempts_override(invoker, sleeps):
    op = Flaky([RateLimitedError("429")] * 5)
    with pytest.raises(UpstreamExhausted):
        invoker.invoke(op, max_attempts=1)
    assert op.calls == 1
    assert sleeps == []


@pytest.mark.unit
@pytest.mark.parametrize("attempt,expected", [(0, 10.0), (1, 20.0), (2, 40.0)])
def test_backoff_schedule(attempt, expected):
    assert ResilientInvoker(backoff_base=5.0).backoff_delay(attempt) == expected


@pytest.mark.unit
def test_rejects_non_positive_budget():
    with pytest.raises(ValueError):
        ResilientInvoker(max_attempts=0)


# ============================================================================
# Cancellation
# ============================================================================

@pytest.mark.unit
def test_cancelled_before_first_attempt(invoker):
    cancel = threading.Event()
    cancel.set()
    op = Flaky([])
    with pytest.raises(OperationCancelled):
        invoker.invoke(op, cancel=cancel)
    assert op.calls == 0


@pytest.mark.unit
def test_cancel_interrupts_backoff():
    cancel = threading.Event()

    def op():
        cancel.set()
        raise RateLimitedError("429")

    invoker = ResilientInvoker(max_attempts=3, backoff_base=60.0)
    with pytest.raises(OperationCancelled):
        invoker.invoke(op, cancel=cancel)


@pytest.mark.unit
def test_unset_cancel_does_not_interfere():
    cancel = threading.Event()
    invoker = ResilientInvoker(max_attempts=3, backoff_base=0.0)
    op = Flaky([RateLimitedError("429")])
    assert invoker.invoke(op, cancel=cancel) == "ok"
    assert op.calls == 2
