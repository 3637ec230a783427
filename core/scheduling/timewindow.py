"""
Appointment window arithmetic.

Timezone labels map to constant UTC offsets. Daylight saving is
ignored on purpose: "EST" is always UTC-5, even in July. This is an
approximation matching how the scheduling API labels zones, not a
calendar-aware conversion.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from core.scheduling.slots import SlotWindow

WEEKDAYS = (
    "MONDAY",
    "TUESDAY",
    "WEDNESDAY",
    "THURSDAY",
    "FRIDAY",
    "SATURDAY",
    "SUNDAY",
)

TIMEZONE_OFFSETS: dict[str, timedelta] = {
    "UTC": timedelta(0),
    "GMT": timedelta(0),
    "EST": timedelta(hours=-5),
    "EDT": timedelta(hours=-4),
    "CST": timedelta(hours=-6),
    "CDT": timedelta(hours=-5),
    "MST": timedelta(hours=-7),
    "MDT": timedelta(hours=-6),
    "PST": timedelta(hours=-8),
    "PDT": timedelta(hours=-7),
    "IST": timedelta(hours=5, minutes=30),
}

DEFAULT_DURATION_MINUTES = 30


def weekday_index(day_name: str) -> int:
    """Monday-based index of a weekday name (case-insensitive)."""
    try:
        return WEEKDAYS.index(day_name.strip().upper())
    except ValueError:
        raise ValueError(f"unknown weekday: {day_name!r}") from None


def next_weekday(today: date, day_name: str, weeks_ahead: int = 0) -> date:
    """
    Next date falling on ``day_name`` strictly after ``today``.

    When today already is that weekday the answer is one week out.
    ``weeks_ahead`` skips that many further whole weeks.
    """
    if weeks_ahead < 0:
        raise ValueError("weeks_ahead must be >= 0")
    offset = weekday_index(day_name) - today.weekday()
    if offset <= 0:
        offset += 7
    return today + timedelta(days=offset + 7 * weeks_ahead)


def resolve_timezone(label: str) -> timezone:
    """Fixed-offset tzinfo for a label such as ``EST`` or ``IST``."""
    key = label.strip().upper()
    if key not in TIMEZONE_OFFSETS:
        raise ValueError(f"unknown timezone label: {label!r}")
    return timezone(TIMEZONE_OFFSETS[key], key)


def to_utc(local: datetime, timezone_label: str) -> datetime:
    """Interpret a naive wall-clock time in ``timezone_label`` and return the UTC instant."""
    if local.tzinfo is not None:
        raise ValueError("to_utc expects a naive wall-clock datetime")
    return local.replace(tzinfo=resolve_timezone(timezone_label)).astimezone(timezone.utc)


def from_utc(instant: datetime, timezone_label: str) -> datetime:
    """Naive wall-clock time in ``timezone_label`` for an aware instant."""
    if instant.tzinfo is None:
        raise ValueError("from_utc expects an aware datetime")
    return instant.astimezone(resolve_timezone(timezone_label)).replace(tzinfo=None)


def describe_instant(instant: datetime, timezone_label: str) -> str:
    """Same instant in UTC and in the source zone, for log lines."""
    utc = instant.astimezone(timezone.utc)
    local = from_utc(instant, timezone_label)
    return (
        f"{utc.strftime('%Y-%m-%d %H:%M')} UTC "
        f"({local.strftime('%Y-%m-%d %H:%M')} {timezone_label.upper()})"
    )


def appointment_window(
    today: date,
    day_name: str,
    hour: int,
    timezone_label: str = "EST",
    weeks_ahead: int = 0,
    duration_minutes: int = DEFAULT_DURATION_MINUTES,
    minute: int = 0,
) -> SlotWindow:
    """
    Appointment interval at ``hour:minute`` local time on the next ``day_name``.

    The returned window holds UTC instants; its ``date`` is the local
    calendar date the appointment was requested for.
    """
    if not 0 <= hour <= 23:
        raise ValueError(f"hour out of range: {hour}")
    if duration_minutes <= 0:
        raise ValueError("duration_minutes must be positive")

    target = next_weekday(today, day_name, weeks_ahead)
    local_start = datetime(target.year, target.month, target.day, hour, minute)
    start = to_utc(local_start, timezone_label)
    return SlotWindow(
        date=target,
        start=start,
        end=start + timedelta(minutes=duration_minutes),
        timezone_label=timezone_label.upper(),
    )
