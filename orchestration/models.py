"""Orchestration models - WorkflowContext, Outcome, StepResult, WorkflowResult."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

from carebook_sdk.errors import MissingContextError
from core.domain.enums import Criticality, OutcomeStatus, RunStatus, StepState

if TYPE_CHECKING:
    from core.reporting.recorder import RunReport

_MISSING = object()


class WorkflowContext:
    """Values shared by the steps of one run.

    Steps write what they produce (tokens, identifiers, windows) and read
    what earlier steps wrote. Entries can be overwritten but never removed.
    One instance belongs to exactly one run.
    """

    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(initial or {})

    def __getitem__(self, key: str) -> Any:
        try:
            return self._values[key]
        except KeyError:
            raise MissingContextError(key) from None

    def __setitem__(self, key: str, value: Any) -> None:
        self._values[key] = value

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def has(self, key: str) -> bool:
        """True when the entry exists and is not empty (None, "" or empty collection)."""
        value = self._values.get(key, _MISSING)
        if value is _MISSING or value is None:
            return False
        if isinstance(value, (str, list, tuple, dict, set)) and not value:
            return False
        return True

    def require(self, key: str) -> Any:
        """Value of a non-empty entry; raises MissingContextError otherwise."""
        if not self.has(key):
            raise MissingContextError(key)
        return self._values[key]

    def update(self, values: Mapping[str, Any]) -> None:
        self._values.update(values)

    def snapshot(self) -> dict[str, Any]:
        """Shallow copy for reporting."""
        return dict(self._values)

    def __repr__(self) -> str:
        return f"WorkflowContext(keys={sorted(self._values)})"


@dataclass(frozen=True)
class Outcome:
    """Result of one step: SUCCESS, FAILURE (well-formed negative answer) or ERROR."""

    status: OutcomeStatus
    status_code: int = 0
    payload: Any = None
    reason: str | None = None

    @classmethod
    def success(cls, status_code: int = 200, payload: Any = None, reason: str | None = None) -> Outcome:
        return cls(OutcomeStatus.SUCCESS, status_code, payload, reason)

    @classmethod
    def failure(cls, status_code: int, payload: Any = None, reason: str = "request failed") -> Outcome:
        return cls(OutcomeStatus.FAILURE, status_code, payload, reason)

    @classmethod
    def error(cls, reason: str, payload: Any = None) -> Outcome:
        return cls(OutcomeStatus.ERROR, 0, payload, reason)

    @property
    def passed(self) -> bool:
        return self.status is OutcomeStatus.SUCCESS

    @property
    def failed(self) -> bool:
        return self.status is OutcomeStatus.FAILURE

    @property
    def errored(self) -> bool:
        return self.status is OutcomeStatus.ERROR


@dataclass
class StepResult:
    """Result of a workflow step execution."""

    name: str
    criticality: Criticality
    state: StepState
    outcome: Outcome
    duration_ms: int

    @property
    def success(self) -> bool:
        return self.state is StepState.SUCCEEDED


@dataclass
class WorkflowResult:
    """Result of a workflow execution."""

    execution_id: str
    workflow_name: str
    status: RunStatus
    started_at: datetime
    finished_at: datetime
    steps: list[StepResult]
    states: dict[str, StepState]
    report: RunReport
    context: WorkflowContext

    @property
    def aborted(self) -> bool:
        return self.status is RunStatus.ABORTED

    @property
    def duration_ms(self) -> int:
        return int((self.finished_at - self.started_at).total_seconds() * 1000)
