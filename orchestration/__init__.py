"""Orchestration layer - workflow orchestration with eventing."""

from .models import Outcome, StepResult, WorkflowContext, WorkflowResult
from .bus import EventBusProtocol, InMemoryEventBus
from .events import Event, EventMetadata
from .workflow import Activity, RetryPolicy, WorkflowDefinition, WorkflowStep
from .retry import RetryResult, call_with_retry, retry
from .orchestrator import Orchestrator

__all__ = [
    "Activity",
    "Event",
    "EventBusProtocol",
    "EventMetadata",
    "InMemoryEventBus",
    "Orchestrator",
    "Outcome",
    "RetryPolicy",
    "RetryResult",
    "StepResult",
    "WorkflowContext",
    "WorkflowDefinition",
    "WorkflowResult",
    "WorkflowStep",
    "call_with_retry",
    "create_default_orchestrator",
    "retry",
]


def create_default_orchestrator(pause_seconds: float = 0.0) -> Orchestrator:
    """Create a default orchestrator with in-memory event bus.

    Args:
        pause_seconds: Fixed pause between consecutive steps

    Returns:
        Orchestrator instance
    """
    return Orchestrator(event_bus=InMemoryEventBus(), pause_seconds=pause_seconds)
