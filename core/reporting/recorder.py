"""
Result recording and run acceptance.

One recorder per run. Outcomes are appended in execution order and
never touched again; the summary is derived from them at the end.
"""
from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

from carebook_sdk.utils.datetime import utc_now
from core.domain.enums import OutcomeStatus

if TYPE_CHECKING:
    from orchestration.models import Outcome

DEFAULT_SUCCESS_THRESHOLD = 75
CRITICAL_CONTEXT_KEYS = ("access_token", "provider_id", "patient_id")


class ContextReader(Protocol):
    def has(self, key: str) -> bool: ...


@dataclass(frozen=True)
class RecordedOutcome:
    """A step outcome as stored by the recorder."""

    index: int
    step_name: str
    outcome: Outcome
    recorded_at: datetime

    @property
    def status(self) -> OutcomeStatus:
        return self.outcome.status


@dataclass(frozen=True)
class RunReport:
    """Aggregate counts over every recorded outcome of a run."""

    total: int
    passed: int
    failed: int
    errored: int
    success_rate: int
    outcomes: tuple[RecordedOutcome, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class AcceptanceVerdict:
    """Whether a run meets the success threshold and produced its critical values."""

    accepted: bool
    success_rate: int
    threshold: int
    missing_keys: tuple[str, ...] = ()

    @property
    def reasons(self) -> list[str]:
        reasons = []
        if self.success_rate < self.threshold:
            reasons.append(f"success rate {self.success_rate}% below {self.threshold}%")
        if self.missing_keys:
            reasons.append(f"missing context values: {', '.join(self.missing_keys)}")
        return reasons


def success_rate(passed: int, total: int) -> int:
    """Percentage of passed outcomes, rounded half up; 0 for an empty run."""
    if total <= 0:
        return 0
    return int(math.floor(passed * 100 / total + 0.5))


class ResultRecorder:
    """Append-only store of step outcomes for one run."""

    def __init__(self) -> None:
        self._entries: list[RecordedOutcome] = []

    def record(self, step_name: str, outcome: Outcome) -> RecordedOutcome:
        entry = RecordedOutcome(
            index=len(self._entries),
            step_name=step_name,
            outcome=outcome,
            recorded_at=utc_now(),
        )
        self._entries.append(entry)
        return entry

    @property
    def outcomes(self) -> tuple[RecordedOutcome, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def summarize(self) -> RunReport:
        statuses = [entry.status for entry in self._entries]
        total = len(statuses)
        passed = statuses.count(OutcomeStatus.SUCCESS)
        return RunReport(
            total=total,
            passed=passed,
            failed=statuses.count(OutcomeStatus.FAILURE),
            errored=statuses.count(OutcomeStatus.ERROR),
            success_rate=success_rate(passed, total),
            outcomes=tuple(self._entries),
        )


def evaluate_acceptance(
    report: RunReport,
    context: ContextReader | Mapping[str, Any],
    required_keys: Iterable[str] = CRITICAL_CONTEXT_KEYS,
    threshold: int = DEFAULT_SUCCESS_THRESHOLD,
) -> AcceptanceVerdict:
    """Run passes when success_rate >= threshold and every required value is non-empty."""
    if hasattr(context, "has"):
        present = context.has
    else:
        present = lambda key: bool(context.get(key))  # noqa: E731

    missing = tuple(key for key in required_keys if not present(key))
    return AcceptanceVerdict(
        accepted=report.success_rate >= threshold and not missing,
        success_rate=report.success_rate,
        threshold=threshold,
        missing_keys=missing,
    )
