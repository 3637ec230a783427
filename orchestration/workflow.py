"""Workflow definitions - Activity, RetryPolicy, WorkflowStep, WorkflowDefinition."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from core.domain.enums import Criticality

from .models import Outcome, WorkflowContext

# Type alias for workflow activities
Activity = Callable[[WorkflowContext], Awaitable[Outcome]]


@dataclass(frozen=True)
class RetryPolicy:
    """Retry policy for a single network operation."""

    max_attempts: int = 3
    backoff_seconds: float = 0.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.backoff_seconds < 0:
            raise ValueError("backoff_seconds must be >= 0")


@dataclass
class WorkflowStep:
    """A single step in a workflow."""

    name: str
    activity: Activity
    criticality: Criticality = Criticality.RECOVERABLE

    @property
    def fatal(self) -> bool:
        return self.criticality is Criticality.FATAL


@dataclass
class WorkflowDefinition:
    """Definition of a workflow."""

    name: str
    steps: list[WorkflowStep] = field(default_factory=list)

    def __post_init__(self) -> None:
        names = [step.name for step in self.steps]
        duplicates = {n for n in names if names.count(n) > 1}
        if duplicates:
            raise ValueError(f"duplicate step names: {sorted(duplicates)}")
