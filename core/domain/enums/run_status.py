"""
Run Status Enum.

Terminal states of a workflow run.
"""
from enum import Enum


class RunStatus(str, Enum):
    """Run status values."""

    COMPLETED = "completed"
    COMPLETED_WITH_FAILURES = "completed_with_failures"
    ABORTED = "aborted"
