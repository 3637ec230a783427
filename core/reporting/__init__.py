from .recorder import (
    CRITICAL_CONTEXT_KEYS,
    DEFAULT_SUCCESS_THRESHOLD,
    AcceptanceVerdict,
    RecordedOutcome,
    ResultRecorder,
    RunReport,
    evaluate_acceptance,
    success_rate,
)
from .summary import format_outcome_line, render_summary

__all__ = [
    "AcceptanceVerdict",
    "CRITICAL_CONTEXT_KEYS",
    "DEFAULT_SUCCESS_THRESHOLD",
    "RecordedOutcome",
    "ResultRecorder",
    "RunReport",
    "evaluate_acceptance",
    "format_outcome_line",
    "render_summary",
    "success_rate",
]
