"""Orchestrator - runs workflows step by step with eventing and outcome recording."""

import asyncio
from collections.abc import Awaitable, Callable
from uuid import uuid4

from carebook_sdk.logging import get_logger
from carebook_sdk.utils.datetime import utc_now
from core.domain.enums import RunStatus, StepState
from core.reporting.recorder import ResultRecorder

from .bus import EventBusProtocol, InMemoryEventBus
from .events import Event, EventMetadata
from .models import Outcome, StepResult, WorkflowContext, WorkflowResult
from .workflow import WorkflowDefinition, WorkflowStep

Sleep = Callable[[float], Awaitable[None]]


class Orchestrator:
    """Runs a workflow's steps strictly in order over one shared context.

    A failing FATAL step aborts the run; a failing RECOVERABLE step is
    recorded and the next step starts as if nothing happened. Steps are
    never retried here, retries belong to the operations inside them.
    """

    def __init__(
        self,
        event_bus: EventBusProtocol | None = None,
        pause_seconds: float = 0.0,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        """Initialize orchestrator.

        Args:
            event_bus: EventBusProtocol for publishing events
            pause_seconds: Fixed pause between consecutive steps
            sleep: Pause function (injectable for tests)
        """
        self._event_bus = event_bus or InMemoryEventBus()
        self._pause_seconds = pause_seconds
        self._sleep = sleep
        self._logger = get_logger("orchestration.orchestrator")

    @property
    def event_bus(self) -> EventBusProtocol:
        return self._event_bus

    async def run(
        self, workflow: WorkflowDefinition, context: WorkflowContext | None = None
    ) -> WorkflowResult:
        """Run a workflow.

        Args:
            workflow: WorkflowDefinition to run
            context: Optional pre-seeded context; a fresh one is created otherwise

        Returns:
            WorkflowResult with per-step results, the run report and the context
        """
        started_at = utc_now()
        execution_id = f"{workflow.name}-{uuid4().hex[:12]}"
        ctx = context if context is not None else WorkflowContext()
        recorder = ResultRecorder()
        states = {step.name: StepState.PENDING for step in workflow.steps}

        self._logger.info(
            f"workflow_starting execution_id={execution_id} "
            f"workflow={workflow.name} steps={len(workflow.steps)}"
        )
        await self._publish_event(
            "workflow.started",
            execution_id,
            workflow.name,
            {"step_count": len(workflow.steps)},
        )

        step_results: list[StepResult] = []
        status = RunStatus.COMPLETED

        for position, step in enumerate(workflow.steps):
            if position and self._pause_seconds > 0:
                await self._sleep(self._pause_seconds)

            states[step.name] = StepState.RUNNING
            step_result = await self._execute_step(execution_id, workflow.name, ctx, step)
            states[step.name] = step_result.state
            step_results.append(step_result)
            recorded = recorder.record(step.name, step_result.outcome)

            await self._publish_event(
                f"workflow.step.{'succeeded' if step_result.success else 'failed'}",
                execution_id,
                workflow.name,
                {
                    "step_name": step.name,
                    "state": step_result.state.value,
                    "recorded": recorded,
                },
            )

            if step_result.state is StepState.FAILED_FATAL:
                status = RunStatus.ABORTED
                self._logger.warning(
                    f"workflow_aborted execution_id={execution_id} step={step.name} "
                    f"reason={step_result.outcome.reason}"
                )
                break
            if step_result.state is StepState.FAILED_RECOVERABLE:
                status = RunStatus.COMPLETED_WITH_FAILURES

        finished_at = utc_now()
        report = recorder.summarize()

        result = WorkflowResult(
            execution_id=execution_id,
            workflow_name=workflow.name,
            status=status,
            started_at=started_at,
            finished_at=finished_at,
            steps=step_results,
            states=states,
            report=report,
            context=ctx,
        )

        await self._publish_event(
            "workflow.finished",
            execution_id,
            workflow.name,
            {
                "status": status.value,
                "step_count": len(step_results),
                "success_rate": report.success_rate,
            },
        )
        self._logger.info(
            f"workflow_finished execution_id={execution_id} workflow={workflow.name} "
            f"status={status.value} success_rate={report.success_rate} "
            f"duration_ms={result.duration_ms}"
        )
        return result

    async def _execute_step(
        self,
        execution_id: str,
        workflow_name: str,
        ctx: WorkflowContext,
        step: WorkflowStep,
    ) -> StepResult:
        """Execute a single workflow step.

        An exception escaping the activity becomes an ERROR outcome; it
        never escapes the runner.
        """
        step_started_at = utc_now()
        await self._publish_event(
            "workflow.step.started", execution_id, workflow_name, {"step_name": step.name}
        )

        try:
            outcome = await step.activity(ctx)
            if not isinstance(outcome, Outcome):
                raise TypeError(
                    f"step {step.name!r} returned {type(outcome).__name__}, expected Outcome"
                )
        except Exception as exc:
            self._logger.warning(
                f"step_error execution_id={execution_id} step={step.name} "
                f"error={type(exc).__name__}: {exc}"
            )
            outcome = Outcome.error(f"{type(exc).__name__}: {exc}")

        if outcome.passed:
            state = StepState.SUCCEEDED
        elif step.fatal:
            state = StepState.FAILED_FATAL
        else:
            state = StepState.FAILED_RECOVERABLE

        duration_ms = int((utc_now() - step_started_at).total_seconds() * 1000)
        return StepResult(
            name=step.name,
            criticality=step.criticality,
            state=state,
            outcome=outcome,
            duration_ms=duration_ms,
        )

    async def _publish_event(
        self, name: str, execution_id: str, workflow_name: str, payload: dict[str, object]
    ) -> None:
        """Publish an event.

        Args:
            name: Event name
            execution_id: Run identifier
            workflow_name: Workflow name
            payload: Event payload
        """
        metadata = EventMetadata(
            execution_id=execution_id,
            workflow_name=workflow_name,
            timestamp=utc_now(),
        )
        await self._event_bus.publish(Event(name=name, payload=payload, metadata=metadata))
