"""
Outcome Status Enum.

FAILURE is a well-formed negative answer; ERROR means no usable answer
was obtained at all (transport or parse problem).
"""
from enum import Enum


class OutcomeStatus(str, Enum):
    """Outcome tags, rendered as PASS/FAIL/ERROR in reports."""

    SUCCESS = "PASS"
    FAILURE = "FAIL"
    ERROR = "ERROR"
