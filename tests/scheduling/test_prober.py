"""Tests for slot endpoint probing."""

from datetime import date

import pytest

from carebook_sdk.errors import TransportError
from carebook_sdk.mock_transport import MockTransport
from carebook_sdk.transport import Response
from core.scheduling.prober import (
    DEFAULT_SLOT_CANDIDATES,
    NO_USABLE_ENDPOINT,
    EndpointCandidate,
    EndpointProber,
)

QUERY_DATE = date(2026, 10, 26)
HEADERS = {"Authorization": "Bearer t"}

SLOTS = [
    {"startTime": "2026-10-26T14:00:00.000Z", "endTime": "2026-10-26T14:30:00.000Z"},
    {"startTime": "2026-10-26T15:00:00.000Z", "endTime": "2026-10-26T15:30:00.000Z"},
    {"startTime": "2026-10-26T16:00:00.000Z", "endTime": "2026-10-26T16:30:00.000Z"},
]


def _candidates(count: int) -> list[EndpointCandidate]:
    return [EndpointCandidate(f"/c{i}/{{provider_id}}?date={{date}}&tz={{timezone}}") for i in range(count)]


@pytest.mark.asyncio
@pytest.mark.parametrize("winner", [0, 1, 2, 3])
async def test_stops_at_first_usable_candidate(winner):
    """Candidates before the winner are tried, candidates after it never are."""
    transport = MockTransport()
    transport.add_route("GET", f"/c{winner}/prov-1", Response(200, {"data": SLOTS}))

    result = await EndpointProber(transport, _candidates(4)).probe(HEADERS, "prov-1", QUERY_DATE, "EST")

    assert result.found is True
    assert result.candidate_index == winner
    assert len(result.slots) == 3
    assert result.endpoint == f"/c{winner}/prov-1"
    assert [r.path for r in transport.requests] == [f"/c{i}/prov-1" for i in range(winner + 1)]


@pytest.mark.asyncio
async def test_every_kind_of_failure_moves_to_next_candidate():
    transport = MockTransport()
    transport.add_route("GET", "/c0/prov-1", TransportError("connection refused"))
    transport.add_route("GET", "/c1/prov-1", Response(500, {"message": "boom"}))
    transport.add_route("GET", "/c2/prov-1", Response(200, {"data": {"unexpected": True}}))
    transport.add_route("GET", "/c3/prov-1", Response(200, {"data": []}))
    transport.add_route("GET", "/c4/prov-1", Response(200, {"data": SLOTS[:1]}))

    result = await EndpointProber(transport, _candidates(5)).probe(HEADERS, "prov-1", QUERY_DATE, "EST")

    assert result.found is True
    assert result.candidate_index == 4
    reasons = [a.reason for a in result.attempts]
    assert reasons[0].startswith("transport error")
    assert reasons[1] == "HTTP 500"
    assert reasons[2].startswith("unrecognised shape")
    assert reasons[3] == "no slots"
    assert reasons[4] is None


@pytest.mark.asyncio
async def test_nothing_found_is_a_result_not_an_exception():
    transport = MockTransport()

    result = await EndpointProber(transport, _candidates(3)).probe(HEADERS, "prov-1", QUERY_DATE, "EST")

    assert result.found is False
    assert result.slots == []
    assert result.reason == NO_USABLE_ENDPOINT
    assert len(result.attempts) == 3
    assert len(transport.requests) == 3


@pytest.mark.asyncio
async def test_accept_empty_candidate_counts_as_success():
    transport = MockTransport()
    transport.add_route("GET", "/c0/prov-1", Response(200, {"data": []}))
    candidates = [EndpointCandidate("/c0/{provider_id}", accept_empty=True), *_candidates(2)[1:]]

    result = await EndpointProber(transport, candidates).probe(HEADERS, "prov-1", QUERY_DATE, "EST")

    assert result.found is True
    assert result.slots == []
    assert len(transport.requests) == 1


@pytest.mark.asyncio
async def test_placeholders_are_rendered_and_headers_forwarded():
    transport = MockTransport()

    await EndpointProber(transport, DEFAULT_SLOT_CANDIDATES).probe(HEADERS, "prov 1", QUERY_DATE, "EST")

    first = transport.requests[0]
    assert first.location == (
        "/api/master/provider/prov%201/availability"
        "?startDate=2026-10-26&endDate=2026-10-26&timeZone=EST"
    )
    assert first.query == {"startDate": "2026-10-26", "endDate": "2026-10-26", "timeZone": "EST"}
    assert first.headers == HEADERS
    assert len(transport.requests) == len(DEFAULT_SLOT_CANDIDATES)


def test_prober_requires_candidates():
    with pytest.raises(ValueError):
        EndpointProber(MockTransport(), [])
