"""Human-readable run summary."""
from __future__ import annotations

import json
from datetime import datetime
from typing import Any

from carebook_sdk.utils.datetime import utc_now
from core.domain.enums import OutcomeStatus
from core.reporting.recorder import AcceptanceVerdict, RecordedOutcome, RunReport

WIDTH = 60
EXCERPT_CHARS = 200

_STATUS_MARKS = {
    OutcomeStatus.SUCCESS: "✅",
    OutcomeStatus.FAILURE: "❌",
    OutcomeStatus.ERROR: "⚠️",
}


def excerpt(payload: Any, limit: int = EXCERPT_CHARS) -> str:
    """Compact, truncated rendering of a response payload."""
    if payload is None:
        return ""
    if isinstance(payload, str):
        text = payload
    else:
        try:
            text = json.dumps(payload, default=str)
        except (TypeError, ValueError):
            text = repr(payload)
    return text if len(text) <= limit else text[:limit] + "..."


def format_outcome_line(entry: RecordedOutcome) -> str:
    """One-line progress rendering, e.g. ``✅ Provider Login: PASS (200)``."""
    outcome = entry.outcome
    line = f"{_STATUS_MARKS[outcome.status]} {entry.step_name}: {outcome.status.value} ({outcome.status_code})"
    if not outcome.passed and outcome.reason:
        line += f" - {outcome.reason}"
    return line


def render_summary(
    report: RunReport,
    environment: str,
    tenant: str,
    verdict: AcceptanceVerdict | None = None,
    executed_at: datetime | None = None,
) -> str:
    """Summary block followed by per-step detail."""
    executed_at = executed_at or utc_now()
    lines = [
        "=" * WIDTH,
        "TEST EXECUTION SUMMARY".center(WIDTH).rstrip(),
        "=" * WIDTH,
        f"Environment: {environment}",
        f"Tenant: {tenant}",
        f"Execution Time: {executed_at.isoformat()}",
        "-" * WIDTH,
        f"Total Tests: {report.total}",
        f"Passed: {report.passed}",
        f"Failed: {report.failed}",
        f"Errors: {report.errored}",
        f"Success Rate: {report.success_rate}%",
    ]
    if verdict is not None:
        gate = "PASSED" if verdict.accepted else "FAILED"
        lines.append(f"Acceptance Gate (>= {verdict.threshold}%): {gate}")
        lines.extend(f"  - {reason}" for reason in verdict.reasons)
    lines.append("=" * WIDTH)

    lines.append("")
    lines.append("DETAILED RESULTS:")
    for entry in report.outcomes:
        outcome = entry.outcome
        lines.append(f"{entry.index + 1}. {entry.step_name}: {outcome.status.value} ({outcome.status_code})")
        if outcome.reason:
            lines.append(f"   Validation: {outcome.reason}")
        lines.append(f"   Time: {entry.recorded_at.isoformat()}")
        if not outcome.passed and outcome.payload is not None:
            lines.append(f"   Response: {excerpt(outcome.payload)}")
        lines.append("-" * 40)

    return "\n".join(lines)
