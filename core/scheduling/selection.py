"""First-qualifying-success selection over an ordered list of candidates."""
from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Generic, TypeVar

C = TypeVar("C")
R = TypeVar("R")


@dataclass
class Selection(Generic[C, R]):
    """Outcome of a selection pass.

    ``index``/``candidate``/``result`` describe the winner and are None
    when nothing qualified. ``tried`` holds every (candidate, result)
    pair in the order they were attempted.
    """

    index: int | None = None
    candidate: C | None = None
    result: R | None = None
    tried: list[tuple[C, R]] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.index is not None

    @property
    def last_result(self) -> R | None:
        return self.tried[-1][1] if self.tried else None


async def first_qualifying(
    candidates: Sequence[C],
    attempt: Callable[[C], Awaitable[R]],
    qualifies: Callable[[R], bool],
    pause_seconds: float = 0.0,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> Selection[C, R]:
    """
    Attempt candidates in order and stop at the first qualifying result.

    Candidates after the winner are never attempted. Exceptions raised by
    ``attempt`` propagate; callers that treat a failure as "try the next
    one" must turn it into a non-qualifying result themselves.
    """
    selection: Selection[C, R] = Selection()
    for index, candidate in enumerate(candidates):
        if index and pause_seconds > 0:
            await sleep(pause_seconds)
        result = await attempt(candidate)
        selection.tried.append((candidate, result))
        if qualifies(result):
            selection.index = index
            selection.candidate = candidate
            selection.result = result
            break
    return selection
