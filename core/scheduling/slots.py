"""
Slot normalization.

Availability endpoints answer in different shapes. Each normalizer turns
one shape into a flat list of ``SlotWindow``; ``normalize_slots`` picks
the right one by inspecting the payload.

Known shapes:
    (a) flat list:   [{"startTime": "...Z", "endTime": "...Z"}, ...]
    (b) day slots:   {"date": "2026-10-26", "daySlots": [{"left": "15:00:00", "right": "15:30:00"}]}
    (c) per date:    [ <shape b>, <shape b>, ... ]
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Any, Callable

from carebook_sdk.errors import SlotShapeError
from carebook_sdk.utils.datetime import parse_iso, to_iso_z

SlotNormalizer = Callable[[Any, date, str], list["SlotWindow"]]


@dataclass(frozen=True)
class SlotWindow:
    """One bookable interval, start and end held as UTC instants."""

    date: date
    start: datetime
    end: datetime
    timezone_label: str

    def __post_init__(self):
        if self.start.tzinfo is None or self.end.tzinfo is None:
            raise ValueError("SlotWindow instants must be timezone-aware")
        if self.end <= self.start:
            raise ValueError(f"slot ends before it starts: {self.start} - {self.end}")

    @property
    def duration_minutes(self) -> int:
        return int((self.end - self.start).total_seconds() // 60)

    @property
    def start_iso(self) -> str:
        return to_iso_z(self.start)

    @property
    def end_iso(self) -> str:
        return to_iso_z(self.end)

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "startTime": self.start_iso,
            "endTime": self.end_iso,
            "duration": self.duration_minutes,
            "timeZone": self.timezone_label,
        }


def _parse_date(value: Any, fallback: date) -> date:
    if value in (None, ""):
        return fallback
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError as exc:
        raise SlotShapeError(f"invalid slot date: {value!r}") from exc


def _parse_day_fraction(value: Any) -> time:
    try:
        return time.fromisoformat(str(value).rstrip("Z"))
    except ValueError as exc:
        raise SlotShapeError(f"invalid day fraction: {value!r}") from exc


def _window(day: date, start: datetime, end: datetime, timezone_label: str) -> SlotWindow:
    try:
        return SlotWindow(date=day, start=start, end=end, timezone_label=timezone_label)
    except ValueError as exc:
        raise SlotShapeError(str(exc)) from exc


def _is_day_slots_object(item: Any) -> bool:
    return isinstance(item, dict) and isinstance(item.get("daySlots"), list)


def flat_slots(payload: Any, query_date: date, timezone_label: str) -> list[SlotWindow]:
    """Shape (a): list of objects carrying explicit start and end instants."""
    if not isinstance(payload, list):
        raise SlotShapeError("expected a list of slot objects")

    windows = []
    for item in payload:
        if not isinstance(item, dict):
            raise SlotShapeError(f"slot entry is not an object: {item!r}")
        start_raw = item.get("startTime", item.get("start"))
        end_raw = item.get("endTime", item.get("end"))
        if start_raw is None or end_raw is None:
            raise SlotShapeError("slot entry has no start/end")
        try:
            start = parse_iso(start_raw)
            end = parse_iso(end_raw)
        except ValueError as exc:
            raise SlotShapeError(f"invalid slot instant: {exc}") from exc
        day = _parse_date(item.get("date"), start.date())
        label = item.get("timeZone") or item.get("timezone") or timezone_label
        windows.append(_window(day, start, end, label))
    return windows


def day_slots(payload: Any, query_date: date, timezone_label: str) -> list[SlotWindow]:
    """
    Shape (b): one availability object with ``daySlots`` pairs.

    ``left``/``right`` are UTC times of day, projected onto the object's
    own ``date`` or, when it has none, the queried date.
    """
    if not _is_day_slots_object(payload):
        raise SlotShapeError("expected an availability object with daySlots")

    day = _parse_date(payload.get("date"), query_date)
    windows = []
    for pair in payload["daySlots"]:
        if not isinstance(pair, dict) or "left" not in pair or "right" not in pair:
            raise SlotShapeError(f"daySlots entry is not a left/right pair: {pair!r}")
        start = datetime.combine(day, _parse_day_fraction(pair["left"]), tzinfo=timezone.utc)
        end = datetime.combine(day, _parse_day_fraction(pair["right"]), tzinfo=timezone.utc)
        windows.append(_window(day, start, end, timezone_label))
    return windows


def per_date_slots(payload: Any, query_date: date, timezone_label: str) -> list[SlotWindow]:
    """Shape (c): list of per-date availability objects, flattened."""
    if not isinstance(payload, list) or not all(_is_day_slots_object(i) for i in payload):
        raise SlotShapeError("expected a list of availability objects with daySlots")

    windows = []
    for item in payload:
        windows.extend(day_slots(item, query_date, timezone_label))
    return windows


def normalize_slots(payload: Any, query_date: date, timezone_label: str) -> list[SlotWindow]:
    """Dispatch on payload shape; raises SlotShapeError when nothing fits."""
    if _is_day_slots_object(payload):
        return day_slots(payload, query_date, timezone_label)
    if isinstance(payload, list):
        if not payload:
            return []
        if all(_is_day_slots_object(i) for i in payload):
            return per_date_slots(payload, query_date, timezone_label)
        return flat_slots(payload, query_date, timezone_label)
    raise SlotShapeError(f"unrecognised slot payload: {type(payload).__name__}")
