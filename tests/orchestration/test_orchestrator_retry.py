"""Tests for the retry executor."""

import pytest

from orchestration.retry import call_with_retry, retry
from orchestration.workflow import RetryPolicy


class FakeSleep:
    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


def _flaky(failures: int):
    counter = {"n": 0}

    async def operation() -> str:
        counter["n"] += 1
        if counter["n"] <= failures:
            raise ValueError(f"temporary error {counter['n']}")
        return "ok"

    return operation, counter


@pytest.mark.asyncio
async def test_retry_success_after_failures():
    """Fails exactly m times, max attempts >= m+1: succeeds after m+1 attempts."""
    operation, counter = _flaky(failures=2)
    sleep = FakeSleep()

    result = await call_with_retry(operation, RetryPolicy(max_attempts=3, backoff_seconds=2.0), "flaky", sleep)

    assert result.value == "ok"
    assert result.attempts == 3
    assert counter["n"] == 3
    assert sleep.calls == [2.0, 2.0]


@pytest.mark.asyncio
async def test_retry_fails_after_max_attempts():
    """With max attempts <= m the failure propagates after exactly max attempts."""
    operation, counter = _flaky(failures=5)

    with pytest.raises(ValueError, match="temporary error 2"):
        await call_with_retry(operation, RetryPolicy(max_attempts=2, backoff_seconds=0.0), "flaky")

    assert counter["n"] == 2


@pytest.mark.asyncio
async def test_last_exception_is_propagated_unchanged():
    raised: list[Exception] = []

    async def operation() -> None:
        exc = KeyError(f"attempt {len(raised) + 1}")
        raised.append(exc)
        raise exc

    with pytest.raises(KeyError) as info:
        await call_with_retry(operation, RetryPolicy(max_attempts=3), "always fails")

    assert info.value is raised[-1]


@pytest.mark.asyncio
async def test_returned_value_is_never_inspected():
    """A falsy or error-looking return value is still a success."""
    calls = {"n": 0}

    async def operation() -> dict:
        calls["n"] += 1
        return {"status": 500, "error": "looks bad"}

    result = await call_with_retry(operation, RetryPolicy(max_attempts=3), "payload")

    assert result.attempts == 1
    assert calls["n"] == 1


@pytest.mark.asyncio
async def test_no_sleep_after_final_failure():
    operation, _ = _flaky(failures=10)
    sleep = FakeSleep()

    with pytest.raises(ValueError):
        await call_with_retry(operation, RetryPolicy(max_attempts=3, backoff_seconds=1.5), "x", sleep)

    assert sleep.calls == [1.5, 1.5]


@pytest.mark.asyncio
async def test_retry_decorator_returns_bare_value():
    counter = {"n": 0}

    @retry(RetryPolicy(max_attempts=2))
    async def fetch(value: int) -> int:
        counter["n"] += 1
        if counter["n"] == 1:
            raise TimeoutError("slow")
        return value * 2

    assert await fetch(21) == 42
    assert counter["n"] == 2


def test_retry_policy_validation():
    with pytest.raises(ValueError):
        RetryPolicy(max_attempts=0)
    with pytest.raises(ValueError):
        RetryPolicy(max_attempts=1, backoff_seconds=-1)
