"""Datetime helpers."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def to_iso_z(instant: datetime) -> str:
    """Render an aware instant as ``YYYY-MM-DDTHH:MM:SS.000Z``."""
    utc = instant.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def parse_iso(value: str) -> datetime:
    """
    Parse an ISO8601 string into an aware UTC datetime.

    A trailing ``Z`` is accepted; naive values are taken as UTC.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"invalid ISO8601 value: {value!r}")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
