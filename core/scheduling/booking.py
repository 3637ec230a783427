"""
Booking strategies.

A strategy is a named, ordered list of windows worth trying. Strategies
are flattened in order and handed to the same first-qualifying-success
selection the slot prober uses: the first confirmed booking wins.
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from carebook_sdk.errors import TransportError
from carebook_sdk.transport import Response
from core.scheduling.selection import first_qualifying
from core.scheduling.slots import SlotWindow
from core.scheduling.timewindow import describe_instant

logger = logging.getLogger(__name__)

BookCall = Callable[[dict[str, Any]], Awaitable[Response]]
PayloadBuilder = Callable[[SlotWindow, str], dict[str, Any]]


@dataclass(frozen=True)
class BookingStrategy:
    name: str
    windows: tuple[SlotWindow, ...]


@dataclass
class BookingAttempt:
    strategy: str
    window: SlotWindow
    response: Response | None = None
    error: str | None = None

    @property
    def confirmed(self) -> bool:
        return self.response is not None and self.response.ok

    @property
    def status_code(self) -> int:
        return self.response.status_code if self.response is not None else 0

    @property
    def reason(self) -> str:
        if self.error:
            return self.error
        if self.response is None:
            return "not attempted"
        return self.response.message or f"HTTP {self.response.status_code}"


@dataclass
class BookingResult:
    booked: bool
    attempts: list[BookingAttempt] = field(default_factory=list)
    winner: BookingAttempt | None = None

    @property
    def last_attempt(self) -> BookingAttempt | None:
        return self.attempts[-1] if self.attempts else None

    @property
    def appointment_id(self) -> str | None:
        if self.winner is None or self.winner.response is None:
            return None
        data = self.winner.response.data
        if isinstance(data, dict):
            return data.get("uuid") or data.get("id")
        return None


async def book_first_available(
    book: BookCall,
    strategies: Sequence[BookingStrategy],
    build_payload: PayloadBuilder,
    pause_seconds: float = 0.0,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> BookingResult:
    """
    Try every window of every strategy, in order, until one is confirmed.

    A confirmed booking is a 2xx answer. Conflicts and transport errors
    only move on to the next window.
    """
    plan = [(s.name, w) for s in strategies for w in s.windows]

    async def attempt(item: tuple[str, SlotWindow]) -> BookingAttempt:
        strategy, window = item
        logger.info(f"Booking via {strategy}: {describe_instant(window.start, window.timezone_label)}")
        try:
            response = await book(build_payload(window, strategy))
        except TransportError as exc:
            return BookingAttempt(strategy=strategy, window=window, error=f"transport error: {exc}")
        booking = BookingAttempt(strategy=strategy, window=window, response=response)
        if not booking.confirmed:
            logger.info(f"{strategy} failed: {booking.reason}")
        return booking

    selection = await first_qualifying(plan, attempt, lambda b: b.confirmed, pause_seconds, sleep)
    attempts = [result for _, result in selection.tried]
    return BookingResult(booked=selection.found, attempts=attempts, winner=selection.result)
