"""Tests for first-qualifying-success selection."""

import pytest

from core.scheduling.selection import first_qualifying


@pytest.mark.asyncio
async def test_stops_at_first_qualifying_candidate():
    tried: list[int] = []

    async def attempt(candidate: int) -> int:
        tried.append(candidate)
        return candidate * 10

    selection = await first_qualifying([1, 2, 3, 4], attempt, lambda r: r >= 30)

    assert selection.found is True
    assert selection.index == 2
    assert selection.candidate == 3
    assert selection.result == 30
    assert tried == [1, 2, 3]
    assert selection.tried == [(1, 10), (2, 20), (3, 30)]


@pytest.mark.asyncio
async def test_nothing_qualifies():
    async def attempt(candidate: str) -> str:
        return candidate.upper()

    selection = await first_qualifying(["a", "b"], attempt, lambda r: r == "Z")

    assert selection.found is False
    assert selection.result is None
    assert selection.last_result == "B"
    assert len(selection.tried) == 2


@pytest.mark.asyncio
async def test_empty_candidates():
    async def attempt(candidate):
        raise AssertionError("never called")

    selection = await first_qualifying([], attempt, bool)

    assert selection.found is False
    assert selection.last_result is None


@pytest.mark.asyncio
async def test_attempt_exceptions_propagate():
    async def attempt(candidate: int) -> int:
        raise RuntimeError(f"candidate {candidate} exploded")

    with pytest.raises(RuntimeError, match="candidate 1"):
        await first_qualifying([1, 2], attempt, bool)


@pytest.mark.asyncio
async def test_pause_between_candidates_uses_injected_sleep():
    pauses: list[float] = []

    async def fake_sleep(seconds: float) -> None:
        pauses.append(seconds)

    async def attempt(candidate: int) -> int:
        return candidate

    await first_qualifying([1, 2, 3], attempt, lambda r: r == 3, pause_seconds=0.5, sleep=fake_sleep)

    assert pauses == [0.5, 0.5]
