"""
Offline Demo: Care Flow

Runs the complete flow against an in-memory scripted service:
1. Login
2. Create provider / resolve it from the listing
3. Set availability
4. Create patient / resolve it from the listing
5. Probe slot endpoints (the first one is missing, the second answers)
6. Book (the first slot conflicts, the calculated time is accepted)

Uses MockTransport (no network needed).
"""
import asyncio
import logging
import sys
from pathlib import Path

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

from carebook_sdk.client import CareApiClient
from carebook_sdk.mock_transport import MockTransport, RecordedRequest
from carebook_sdk.transport import Response
from core.application.use_cases.care_flow import CareFlowOptions, CareFlowUseCase
from core.reporting.summary import render_summary
from orchestration import create_default_orchestrator

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


def build_service() -> MockTransport:
    """Scripted service remembering the provider and patient it was sent."""
    created: dict[str, dict] = {}

    def create(kind: str, uuid: str):
        def handler(request: RecordedRequest) -> Response:
            created[kind] = {**request.body, "uuid": uuid, "status": True, "active": True}
            return Response(201, {"message": f"{kind.title()} created successfully"})
        return handler

    def listing(kind: str):
        def handler(request: RecordedRequest) -> Response:
            content = [c for k, c in created.items() if k == kind]
            return Response(200, {"data": {"content": content, "totalElements": len(content)}})
        return handler

    def day_slots(request: RecordedRequest) -> Response:
        day = request.query["date"]
        return Response(200, {"data": {"date": day, "daySlots": [
            {"left": "15:00:00", "right": "15:30:00"},
            {"left": "16:00:00", "right": "16:30:00"},
        ]}})

    transport = MockTransport()
    transport.add_route("POST", "/api/master/login", Response(200, {"data": {"access_token": "demo-token"}}))
    transport.add_route("POST", "/api/master/provider", create("provider", "prov-demo-1"))
    transport.add_route("GET", "/api/master/provider", listing("provider"))
    transport.add_route("POST", "/api/master/provider/availability-setting", Response(200, {"message": "Availability saved successfully"}))
    transport.add_route("POST", "/api/master/patient", create("patient", "pat-demo-1"))
    transport.add_route("GET", "/api/master/patient", listing("patient"))
    transport.add_route("GET", "/api/master/appointment/prov-demo-1/available-slots", day_slots)
    transport.add_route(
        "POST",
        "/api/master/appointment",
        Response(409, {"message": "Slot already booked"}),
        Response(200, {"message": "Appointment booked successfully", "data": {"uuid": "appt-demo-1"}}),
    )
    return transport


async def demo_care_flow():
    """Demo: full care flow against the scripted service."""

    print("\n" + "="*80)
    print("DEMO: Offline Care Flow")
    print("="*80 + "\n")

    client = CareApiClient(build_service(), tenant="demo_tenant")
    use_case = CareFlowUseCase(client, CareFlowOptions(username="demo", password="demo"))
    response = await use_case.execute(create_default_orchestrator())

    print(render_summary(response.result.report, "mock://carebook", "demo_tenant", response.verdict))
    print(f"\nRun status: {response.result.status.value}")
    return response.accepted


if __name__ == "__main__":
    accepted = asyncio.run(demo_care_flow())
    sys.exit(0 if accepted else 1)
