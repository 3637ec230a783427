"""Retry executor - bounded attempts with a fixed pause, last failure re-raised."""

import asyncio
import functools
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from carebook_sdk.logging import get_logger

from .workflow import RetryPolicy

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]

_logger = get_logger("orchestration.retry")


@dataclass(frozen=True)
class RetryResult(Generic[T]):
    """Value returned by the operation and how many attempts it took."""

    value: T
    attempts: int


async def call_with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    description: str = "operation",
    sleep: Sleep = asyncio.sleep,
) -> RetryResult[T]:
    """Run ``operation`` until it returns or ``policy.max_attempts`` is exhausted.

    Only a raised exception counts as a failure; the returned value is
    never inspected. When every attempt fails the last exception is
    re-raised as is.

    Args:
        operation: Zero-argument coroutine factory
        policy: Attempt count and fixed pause between attempts
        description: Name used in log lines
        sleep: Pause function (injectable for tests)

    Returns:
        RetryResult with the value and the number of attempts used
    """
    for attempt in range(1, policy.max_attempts + 1):
        try:
            value = await operation()
        except Exception as exc:
            if attempt == policy.max_attempts:
                _logger.warning(
                    f"{description} failed after {policy.max_attempts} attempts: {exc}"
                )
                raise
            _logger.info(
                f"{description} attempt {attempt}/{policy.max_attempts} failed, "
                f"retrying in {policy.backoff_seconds}s: {exc}"
            )
            if policy.backoff_seconds > 0:
                await sleep(policy.backoff_seconds)
            continue

        if attempt > 1:
            _logger.info(f"{description} succeeded on attempt {attempt}/{policy.max_attempts}")
        return RetryResult(value=value, attempts=attempt)

    # max_attempts >= 1 is enforced by RetryPolicy
    raise AssertionError("unreachable")


def retry(policy: RetryPolicy, description: str | None = None):
    """Decorator form of call_with_retry returning the bare value."""

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        label = description or func.__name__

        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            result = await call_with_retry(lambda: func(*args, **kwargs), policy, label)
            return result.value

        return wrapper

    return decorator
