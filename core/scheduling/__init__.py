"""Scheduling helpers: time windows, slot normalization, endpoint probing, booking."""

from .booking import BookingAttempt, BookingResult, BookingStrategy, book_first_available
from .prober import DEFAULT_SLOT_CANDIDATES, EndpointCandidate, EndpointProber, ProbeResult
from .selection import Selection, first_qualifying
from .slots import SlotWindow, day_slots, flat_slots, normalize_slots, per_date_slots
from .timewindow import (
    TIMEZONE_OFFSETS,
    WEEKDAYS,
    appointment_window,
    describe_instant,
    from_utc,
    next_weekday,
    to_utc,
)

__all__ = [
    "BookingAttempt",
    "BookingResult",
    "BookingStrategy",
    "DEFAULT_SLOT_CANDIDATES",
    "EndpointCandidate",
    "EndpointProber",
    "ProbeResult",
    "Selection",
    "SlotWindow",
    "TIMEZONE_OFFSETS",
    "WEEKDAYS",
    "appointment_window",
    "book_first_available",
    "day_slots",
    "describe_instant",
    "first_qualifying",
    "flat_slots",
    "from_utc",
    "next_weekday",
    "normalize_slots",
    "per_date_slots",
    "to_utc",
]
