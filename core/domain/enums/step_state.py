"""
Step State Enum.

PENDING -> RUNNING -> {SUCCEEDED, FAILED_RECOVERABLE, FAILED_FATAL}
"""
from enum import Enum


class StepState(str, Enum):
    """Per-step lifecycle values."""

    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED_RECOVERABLE = "failed_recoverable"
    FAILED_FATAL = "failed_fatal"

    @property
    def is_terminal(self) -> bool:
        return self not in (StepState.PENDING, StepState.RUNNING)
