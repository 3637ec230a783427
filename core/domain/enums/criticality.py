"""
Criticality Enum.

FATAL steps abort the run on failure; RECOVERABLE steps are recorded
and the run moves on.
"""
from enum import Enum


class Criticality(str, Enum):
    """Step criticality values."""

    FATAL = "fatal"
    RECOVERABLE = "recoverable"
