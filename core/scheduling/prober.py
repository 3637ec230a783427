"""
Endpoint probing for slot discovery.

The availability API has no single stable location. Candidates are
listed in order of confidence and tried until one yields usable slots;
the table below is data, not branching, so each location/shape pair can
be tested on its own.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Mapping
from urllib.parse import quote

from carebook_sdk.errors import SlotShapeError, TransportError
from carebook_sdk.transport import Response, Transport
from core.scheduling.selection import first_qualifying
from core.scheduling.slots import SlotNormalizer, SlotWindow, normalize_slots

logger = logging.getLogger(__name__)

NO_USABLE_ENDPOINT = "no usable endpoint"


@dataclass(frozen=True)
class EndpointCandidate:
    """
    One place availability might live.

    ``location`` is a template with ``{provider_id}``, ``{date}`` and
    ``{timezone}`` placeholders. ``accept_empty`` lets a well-formed but
    empty answer count as success for this candidate.
    """

    location: str
    normalizer: SlotNormalizer = normalize_slots
    accept_empty: bool = False

    def render(self, provider_id: str, query_date: date, timezone_label: str) -> str:
        return self.location.format(
            provider_id=quote(str(provider_id), safe=""),
            date=query_date.isoformat(),
            timezone=quote(timezone_label, safe=""),
        )


DEFAULT_SLOT_CANDIDATES: tuple[EndpointCandidate, ...] = (
    EndpointCandidate(
        "/api/master/provider/{provider_id}/availability"
        "?startDate={date}&endDate={date}&timeZone={timezone}"
    ),
    EndpointCandidate("/api/master/appointment/{provider_id}/available-slots?date={date}&timezone={timezone}"),
    EndpointCandidate("/api/master/provider/availability/{provider_id}?date={date}&timezone={timezone}"),
    EndpointCandidate("/api/master/slots?providerId={provider_id}&date={date}&timezone={timezone}"),
    EndpointCandidate("/api/master/provider/{provider_id}/slots?date={date}&timezone={timezone}"),
)


@dataclass
class CandidateAttempt:
    """What happened when one candidate was read."""

    candidate_index: int
    location: str
    status_code: int = 0
    slots: list[SlotWindow] = field(default_factory=list)
    usable: bool = False
    reason: str | None = None


@dataclass
class ProbeResult:
    """Slots found by the prober, tagged with the candidate that produced them."""

    found: bool
    slots: list[SlotWindow] = field(default_factory=list)
    candidate_index: int | None = None
    location: str | None = None
    status_code: int = 0
    reason: str | None = None
    attempts: list[CandidateAttempt] = field(default_factory=list)

    @property
    def endpoint(self) -> str | None:
        """Location without its query string."""
        return self.location.split("?", 1)[0] if self.location else None


class EndpointProber:
    """Reads candidate locations in order until one yields slots."""

    def __init__(self, transport: Transport, candidates: tuple[EndpointCandidate, ...] | list[EndpointCandidate] = DEFAULT_SLOT_CANDIDATES):
        if not candidates:
            raise ValueError("at least one endpoint candidate is required")
        self._transport = transport
        self._candidates = tuple(candidates)

    @property
    def candidates(self) -> tuple[EndpointCandidate, ...]:
        return self._candidates

    async def probe(
        self,
        headers: Mapping[str, str],
        provider_id: str,
        query_date: date,
        timezone_label: str,
    ) -> ProbeResult:
        """
        Probe every candidate in order.

        Never raises for "nothing found": that is an expected outcome and
        comes back as ``ProbeResult(found=False)``.
        """

        async def read(indexed: tuple[int, EndpointCandidate]) -> CandidateAttempt:
            index, candidate = indexed
            location = candidate.render(provider_id, query_date, timezone_label)
            return await self._read_candidate(index, candidate, location, headers, query_date, timezone_label)

        selection = await first_qualifying(
            list(enumerate(self._candidates)),
            read,
            lambda attempt: attempt.usable,
        )
        attempts = [result for _, result in selection.tried]

        if not selection.found:
            logger.info(
                f"No usable slot endpoint for provider {provider_id} on {query_date} "
                f"after {len(attempts)} candidates"
            )
            return ProbeResult(found=False, reason=NO_USABLE_ENDPOINT, attempts=attempts)

        winner = selection.result
        logger.info(f"Found {len(winner.slots)} slots using {winner.location.split('?', 1)[0]}")
        return ProbeResult(
            found=True,
            slots=winner.slots,
            candidate_index=winner.candidate_index,
            location=winner.location,
            status_code=winner.status_code,
            attempts=attempts,
        )

    async def _read_candidate(
        self,
        index: int,
        candidate: EndpointCandidate,
        location: str,
        headers: Mapping[str, str],
        query_date: date,
        timezone_label: str,
    ) -> CandidateAttempt:
        attempt = CandidateAttempt(candidate_index=index, location=location)
        logger.debug(f"Trying slot endpoint {location.split('?', 1)[0]}")

        try:
            response: Response = await self._transport.send("GET", location, headers)
        except TransportError as exc:
            attempt.reason = f"transport error: {exc}"
            logger.debug(f"Endpoint failed: {exc}")
            return attempt

        attempt.status_code = response.status_code
        if not response.ok:
            attempt.reason = f"HTTP {response.status_code}"
            return attempt

        payload: Any = response.data
        try:
            attempt.slots = candidate.normalizer(payload, query_date, timezone_label)
        except SlotShapeError as exc:
            attempt.reason = f"unrecognised shape: {exc}"
            return attempt

        attempt.usable = bool(attempt.slots) or candidate.accept_empty
        if not attempt.usable:
            attempt.reason = "no slots"
        return attempt
