"""Shared fixtures for care flow tests."""

from datetime import date

import pytest

from carebook_sdk.client import CareApiClient
from carebook_sdk.mock_transport import MockTransport, RecordedRequest
from carebook_sdk.transport import Response
from core.application.use_cases.care_flow import CareFlowOptions
from core.scheduling.prober import EndpointCandidate

TODAY = date(2026, 10, 19)

SLOT_CANDIDATES = [
    EndpointCandidate(f"/slots/v{i}/{{provider_id}}?date={{date}}&tz={{timezone}}") for i in range(4)
]

THREE_SLOTS = [
    {"startTime": "2026-10-26T14:00:00.000Z", "endTime": "2026-10-26T14:30:00.000Z"},
    {"startTime": "2026-10-26T15:00:00.000Z", "endTime": "2026-10-26T15:30:00.000Z"},
    {"startTime": "2026-10-26T16:00:00.000Z", "endTime": "2026-10-26T16:30:00.000Z"},
]


class FakeSleep:
    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class ScriptedService(MockTransport):
    """Mock scheduling service remembering the resources it was sent."""

    def __init__(self) -> None:
        super().__init__()
        self.created: dict[str, list[dict]] = {"provider": [], "patient": []}

    def creates(self, kind: str, uuid: str):
        def handler(request: RecordedRequest) -> Response:
            self.created[kind].append({**request.body, "uuid": uuid, "status": True, "active": True})
            return Response(201, {"message": f"{kind} created", "data": {"uuid": uuid}})

        return handler

    def lists(self, kind: str, existing: list[dict] | None = None):
        def handler(request: RecordedRequest) -> Response:
            content = list(existing or []) + self.created[kind]
            return Response(200, {"data": {"content": content, "totalElements": len(content)}})

        return handler


@pytest.fixture
def fake_sleep():
    return FakeSleep()


@pytest.fixture
def build_service():
    """
    Factory for a service where every capability works and slots live on
    the second candidate. ``overrides`` maps ``(METHOD, path)`` to the
    replies that replace the default route.
    """

    def build(overrides: dict | None = None) -> ScriptedService:
        transport = ScriptedService()
        routes = {
            ("POST", "/api/master/login"): (Response(200, {"data": {"access_token": "tok-1"}}),),
            ("POST", "/api/master/provider"): (transport.creates("provider", "prov-1"),),
            ("GET", "/api/master/provider"): (transport.lists("provider"),),
            ("POST", "/api/master/provider/availability-setting"): (Response(200, {"message": "saved"}),),
            ("POST", "/api/master/patient"): (transport.creates("patient", "pat-1"),),
            ("GET", "/api/master/patient"): (transport.lists("patient"),),
            ("GET", "/slots/v0/prov-1"): (Response(404, {"message": "Not Found"}),),
            ("GET", "/slots/v1/prov-1"): (Response(200, {"data": THREE_SLOTS}),),
            ("POST", "/api/master/appointment"): (Response(200, {"data": {"uuid": "appt-1"}}),),
        }
        for key, replies in (overrides or {}).items():
            routes[key] = replies if isinstance(replies, tuple) else (replies,)
        for (method, path), replies in routes.items():
            if replies:
                transport.add_route(method, path, *replies)
        return transport

    return build


@pytest.fixture
def service(build_service):
    return build_service()


@pytest.fixture
def options():
    return CareFlowOptions(username="admin", password="secret", today=TODAY)


@pytest.fixture
def make_client():
    def make(transport: MockTransport) -> CareApiClient:
        return CareApiClient(transport, tenant="demo", slot_candidates=SLOT_CANDIDATES)

    return make
