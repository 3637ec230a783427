"""
Care Flow Use Case.

End-to-end scheduling run against the remote API:

1. Provider login                     (fatal)
2. Add provider                       (recoverable)
3. Get provider                       (fatal - falls back to an existing provider)
4. Set availability                   (recoverable)
5. Create patient                     (recoverable)
6. Get patient                        (fatal - falls back to an existing patient)
7. Get available slots                (recoverable - probes dates, endpoints, fallback provider)
8. Book appointment                   (recoverable - slot, calculated time, time sweep)

Each step reads what earlier steps left in the WorkflowContext and
writes its own results there. Network calls inside a step go through
the retry executor; the step itself is never retried.
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional

from carebook_sdk.client import CareApiClient, ResourceKind
from carebook_sdk.errors import AuthenticationError
from carebook_sdk.transport import Response
from core.domain.enums import Criticality
from core.fixtures.sample_data import (
    appointment_payload,
    availability_payload,
    generate_person,
    patient_payload,
    provider_payload,
)
from core.reporting.recorder import (
    CRITICAL_CONTEXT_KEYS,
    DEFAULT_SUCCESS_THRESHOLD,
    AcceptanceVerdict,
    evaluate_acceptance,
)
from core.scheduling.booking import BookingStrategy, book_first_available
from core.scheduling.prober import ProbeResult
from core.scheduling.selection import first_qualifying
from core.scheduling.slots import SlotWindow
from core.scheduling.timewindow import appointment_window, describe_instant
from core.settings import CareSettings
from orchestration import (
    Orchestrator,
    Outcome,
    RetryPolicy,
    WorkflowContext,
    WorkflowDefinition,
    WorkflowResult,
    WorkflowStep,
    call_with_retry,
)

logger = logging.getLogger(__name__)

WORKFLOW_NAME = "care_flow"

# (weeks ahead, weekday, local hour) probed in order for open slots
DEFAULT_SLOT_PROBE_PLAN: tuple[tuple[int, str, int], ...] = (
    (0, "MONDAY", 10),
    (0, "TUESDAY", 14),
    (1, "MONDAY", 10),
    (0, "WEDNESDAY", 11),
)
FALLBACK_PROBE = (1, "MONDAY", 10)
CALCULATED_BOOKING = (1, "MONDAY", 14)
SWEEP_HOURS = (9, 10, 11, 12, 13)


class ContextKeys:
    """Names of the WorkflowContext entries written by the care flow."""

    ACCESS_TOKEN = "access_token"
    PROVIDER_EMAIL = "provider_email"
    PROVIDER_NAME = "provider_name"
    CREATED_PROVIDER = "created_provider"
    PROVIDER_ID = "provider_id"
    PATIENT_EMAIL = "patient_email"
    PATIENT_NAME = "patient_name"
    CREATED_PATIENT = "created_patient"
    PATIENT_ID = "patient_id"
    APPOINTMENT_WINDOW = "appointment_window"
    AVAILABLE_SLOTS = "available_slots"
    SLOT_ENDPOINT = "slot_endpoint"
    APPOINTMENT_ID = "appointment_id"
    BOOKED_WINDOW = "booked_window"


# =============================================================================
# REQUEST / RESPONSE DTOs
# =============================================================================

@dataclass
class CareFlowOptions:
    """Everything a run needs besides the client."""

    username: str
    password: str
    timezone_label: str = "EST"
    retry_policy: RetryPolicy = field(default_factory=RetryPolicy)
    availability_settle_seconds: float = 0.0
    strategy_pause_seconds: float = 0.0
    success_threshold: int = DEFAULT_SUCCESS_THRESHOLD
    fallback_provider_id: Optional[str] = None
    slot_probe_plan: tuple[tuple[int, str, int], ...] = DEFAULT_SLOT_PROBE_PLAN
    today: Optional[date] = None

    @classmethod
    def from_settings(cls, settings: CareSettings) -> "CareFlowOptions":
        return cls(
            username=settings.api.username,
            password=settings.api.password,
            timezone_label=settings.run.timezone,
            retry_policy=settings.retry.policy(),
            availability_settle_seconds=settings.run.availability_settle,
            strategy_pause_seconds=settings.run.strategy_pause,
            success_threshold=settings.run.success_threshold,
            fallback_provider_id=settings.run.fallback_provider_id,
        )


@dataclass
class CareFlowResponse:
    """Workflow result plus the acceptance verdict derived from it."""

    result: WorkflowResult
    verdict: AcceptanceVerdict

    @property
    def accepted(self) -> bool:
        return self.verdict.accepted


# =============================================================================
# HELPERS
# =============================================================================

def listing_content(response: Response) -> list[dict[str, Any]]:
    """Items of a paged listing (``data.content``), tolerating a bare list."""
    data = response.data
    if isinstance(data, dict):
        data = data.get("content")
    if isinstance(data, list):
        return [item for item in data if isinstance(item, dict)]
    return []


def created_identifier(response: Response) -> Optional[str]:
    data = response.data
    if isinstance(data, dict):
        return data.get("uuid") or data.get("id")
    return None


def _display_name(item: dict[str, Any]) -> str:
    return f"{item.get('firstName', '')} {item.get('lastName', '')}".strip()


# =============================================================================
# USE CASE
# =============================================================================

class CareFlowUseCase:
    """
    Builds and runs the care workflow for one run.

    A use case instance owns its client (and therefore its token) and is
    meant to be used for a single run.
    """

    def __init__(
        self,
        client: CareApiClient,
        options: CareFlowOptions,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.client = client
        self.options = options
        self._sleep = sleep
        self._today = options.today or date.today()

    def build_workflow(self) -> WorkflowDefinition:
        fatal, recoverable = Criticality.FATAL, Criticality.RECOVERABLE
        return WorkflowDefinition(
            name=WORKFLOW_NAME,
            steps=[
                WorkflowStep("Provider Login", self.login, fatal),
                WorkflowStep("Add Provider", self.create_provider, recoverable),
                WorkflowStep("Get Provider", self.get_provider, fatal),
                WorkflowStep("Set Availability", self.set_availability, recoverable),
                WorkflowStep("Create Patient", self.create_patient, recoverable),
                WorkflowStep("Get Patient", self.get_patient, fatal),
                WorkflowStep("Get Available Slots", self.get_available_slots, recoverable),
                WorkflowStep("Book Appointment", self.book_appointment, recoverable),
            ],
        )

    async def execute(self, orchestrator: Orchestrator) -> CareFlowResponse:
        result = await orchestrator.run(self.build_workflow(), WorkflowContext())
        verdict = evaluate_acceptance(
            result.report,
            result.context,
            CRITICAL_CONTEXT_KEYS,
            self.options.success_threshold,
        )
        return CareFlowResponse(result=result, verdict=verdict)

    async def _with_retry(self, operation: Callable[[], Awaitable[Any]], description: str) -> Any:
        result = await call_with_retry(operation, self.options.retry_policy, description, self._sleep)
        return result.value

    # -------------------------------------------------------------------------
    # Steps
    # -------------------------------------------------------------------------

    async def login(self, ctx: WorkflowContext) -> Outcome:
        try:
            token = await self._with_retry(
                lambda: self.client.authenticate(self.options.username, self.options.password),
                "Provider Login",
            )
        except AuthenticationError as exc:
            return Outcome.failure(exc.status_code or 0, exc.body, str(exc))

        self.client.authorize(token)
        ctx[ContextKeys.ACCESS_TOKEN] = token
        return Outcome.success(200, None, "Login successful, access token received")

    async def create_provider(self, ctx: WorkflowContext) -> Outcome:
        person = generate_person(email_prefix="test.provider")
        ctx[ContextKeys.PROVIDER_EMAIL] = person.email
        ctx[ContextKeys.PROVIDER_NAME] = person.full_name

        response = await self._with_retry(
            lambda: self.client.create_resource(ResourceKind.PROVIDER, provider_payload(person)),
            "Add Provider",
        )
        if not response.ok:
            return Outcome.failure(
                response.status_code,
                response.body,
                f"Provider creation failed: {response.message or 'Unknown error'}",
            )

        ctx[ContextKeys.CREATED_PROVIDER] = response.body
        identifier = created_identifier(response)
        if identifier:
            ctx[ContextKeys.PROVIDER_ID] = identifier
        return Outcome.success(response.status_code, response.body, f"Provider {person.email} created")

    async def get_provider(self, ctx: WorkflowContext) -> Outcome:
        response = await self._with_retry(
            lambda: self.client.list_resources(ResourceKind.PROVIDER, page=0, size=50),
            "Get Provider",
        )
        if not response.ok:
            return Outcome.failure(response.status_code, response.body, "Provider listing failed")

        providers = listing_content(response)
        email = ctx.get(ContextKeys.PROVIDER_EMAIL)
        found = next((p for p in providers if email and p.get("email") == email), None)

        if found is None and ctx.has(ContextKeys.PROVIDER_ID):
            return Outcome.success(
                response.status_code,
                None,
                f"Created provider {ctx[ContextKeys.PROVIDER_ID]} kept (not yet listed)",
            )
        if found is None:
            found = next((p for p in providers if p.get("status") and p.get("active")), None)
            found = found or (providers[0] if providers else None)
            if found is not None:
                logger.info(f"Using existing provider: {_display_name(found)}")

        if found is None or not found.get("uuid"):
            return Outcome.failure(response.status_code, response.body, "No provider available")

        ctx[ContextKeys.PROVIDER_ID] = found["uuid"]
        ctx[ContextKeys.PROVIDER_NAME] = _display_name(found)
        return Outcome.success(
            response.status_code, None, f"Provider found, UUID: {found['uuid']}"
        )

    async def set_availability(self, ctx: WorkflowContext) -> Outcome:
        descriptor = availability_payload(
            ctx.require(ContextKeys.PROVIDER_ID), self.options.timezone_label
        )
        response = await self._with_retry(
            lambda: self.client.set_availability(descriptor), "Set Availability"
        )
        if not response.ok:
            return Outcome.failure(
                response.status_code,
                response.body,
                f"Availability setup failed: {response.message or 'Unknown error'}",
            )

        if self.options.availability_settle_seconds > 0:
            logger.info("Waiting for availability to be processed...")
            await self._sleep(self.options.availability_settle_seconds)
        return Outcome.success(response.status_code, response.body, "Availability saved")

    async def create_patient(self, ctx: WorkflowContext) -> Outcome:
        person = generate_person()
        ctx[ContextKeys.PATIENT_EMAIL] = person.email
        ctx[ContextKeys.PATIENT_NAME] = person.full_name

        response = await self._with_retry(
            lambda: self.client.create_resource(
                ResourceKind.PATIENT, patient_payload(person, self.options.timezone_label)
            ),
            "Create Patient",
        )
        if not response.ok:
            return Outcome.failure(
                response.status_code,
                response.body,
                f"Patient creation failed: {response.message or 'Unknown error'}",
            )

        ctx[ContextKeys.CREATED_PATIENT] = response.body
        identifier = created_identifier(response)
        if identifier:
            ctx[ContextKeys.PATIENT_ID] = identifier
        return Outcome.success(response.status_code, response.body, f"Patient {person.email} created")

    async def get_patient(self, ctx: WorkflowContext) -> Outcome:
        response = await self._with_retry(
            lambda: self.client.list_resources(ResourceKind.PATIENT, page=0, size=50, search=""),
            "Get Patient",
        )
        if not response.ok:
            return Outcome.failure(response.status_code, response.body, "Patient listing failed")

        patients = listing_content(response)
        email = ctx.get(ContextKeys.PATIENT_EMAIL)
        found = next((p for p in patients if email and p.get("email") == email), None)

        if found is None and ctx.has(ContextKeys.PATIENT_ID):
            return Outcome.success(
                response.status_code,
                None,
                f"Created patient {ctx[ContextKeys.PATIENT_ID]} kept (not yet listed)",
            )
        if found is None and patients:
            found = patients[0]
            logger.info(f"Using existing patient: {_display_name(found)}")

        if found is None or not found.get("uuid"):
            return Outcome.failure(response.status_code, response.body, "No patient available")

        ctx[ContextKeys.PATIENT_ID] = found["uuid"]
        ctx[ContextKeys.PATIENT_NAME] = _display_name(found)
        return Outcome.success(response.status_code, None, f"Patient found, UUID: {found['uuid']}")

    async def get_available_slots(self, ctx: WorkflowContext) -> Outcome:
        provider_id = ctx.require(ContextKeys.PROVIDER_ID)
        label = self.options.timezone_label
        windows = [
            appointment_window(self._today, day, hour, label, weeks_ahead=weeks)
            for weeks, day, hour in self.options.slot_probe_plan
        ]
        if windows:
            ctx[ContextKeys.APPOINTMENT_WINDOW] = windows[0]

        async def probe(window: SlotWindow) -> ProbeResult:
            logger.info(f"Checking slots for {window.date.isoformat()}")
            return await self.client.probe_slots(provider_id, window.date, label)

        selection = await first_qualifying(windows, probe, lambda r: r.found)
        probe_result = selection.result

        if probe_result is None and self.options.fallback_provider_id:
            fallback_id = self.options.fallback_provider_id
            weeks, day, hour = FALLBACK_PROBE
            window = appointment_window(self._today, day, hour, label, weeks_ahead=weeks)
            logger.info(f"Trying with known working provider {fallback_id}...")
            candidate = await self.client.probe_slots(fallback_id, window.date, label)
            if candidate.found:
                probe_result = candidate
                ctx[ContextKeys.PROVIDER_ID] = fallback_id
                ctx[ContextKeys.PROVIDER_NAME] = "Known Provider"

        if probe_result is None:
            return Outcome.failure(
                404,
                None,
                "Could not find available slots with any provider or date combination",
            )

        slots = probe_result.slots
        ctx[ContextKeys.AVAILABLE_SLOTS] = slots
        ctx[ContextKeys.SLOT_ENDPOINT] = probe_result.endpoint
        if slots:
            ctx[ContextKeys.APPOINTMENT_WINDOW] = slots[0]
        return Outcome.success(
            probe_result.status_code,
            [slot.to_dict() for slot in slots],
            f"Found {len(slots)} slots using {probe_result.endpoint}",
        )

    async def book_appointment(self, ctx: WorkflowContext) -> Outcome:
        provider_id = ctx.require(ContextKeys.PROVIDER_ID)
        patient_id = ctx.require(ContextKeys.PATIENT_ID)
        strategies = self._booking_strategies(ctx)

        def build_payload(window: SlotWindow, strategy: str) -> dict[str, Any]:
            return appointment_payload(
                provider_id,
                patient_id,
                window,
                chief_complaint=f"Automated test appointment ({strategy})",
            )

        booking = await book_first_available(
            self.client.book_appointment,
            strategies,
            build_payload,
            self.options.strategy_pause_seconds,
            self._sleep,
        )

        if booking.booked:
            winner = booking.winner
            ctx[ContextKeys.BOOKED_WINDOW] = winner.window
            if booking.appointment_id:
                ctx[ContextKeys.APPOINTMENT_ID] = booking.appointment_id
            return Outcome.success(
                winner.status_code,
                winner.response.body,
                f"Appointment booked via {winner.strategy} at "
                f"{describe_instant(winner.window.start, winner.window.timezone_label)}",
            )

        last = booking.last_attempt
        if last is None:
            return Outcome.failure(0, None, "Could not book appointment with any strategy")
        return Outcome.failure(
            last.status_code,
            last.response.body if last.response is not None else None,
            f"All {len(booking.attempts)} booking attempts failed, last: {last.reason}",
        )

    def _booking_strategies(self, ctx: WorkflowContext) -> list[BookingStrategy]:
        label = self.options.timezone_label
        strategies = []

        slots = ctx.get(ContextKeys.AVAILABLE_SLOTS) or []
        if slots:
            strategies.append(BookingStrategy("available-slot", (slots[0],)))

        weeks, day, hour = CALCULATED_BOOKING
        strategies.append(
            BookingStrategy(
                "calculated-time",
                (appointment_window(self._today, day, hour, label, weeks_ahead=weeks),),
            )
        )
        strategies.append(
            BookingStrategy(
                "time-sweep",
                tuple(
                    appointment_window(self._today, "MONDAY", h, label, weeks_ahead=1)
                    for h in SWEEP_HOURS
                ),
            )
        )
        return strategies
