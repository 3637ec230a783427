from __future__ import annotations

from typing import Optional

from pydantic import Field, field_validator

from core.settings.base import CareBaseSettings
from core.scheduling.timewindow import TIMEZONE_OFFSETS


class RunSettings(CareBaseSettings):
    """
    Pacing, acceptance and scheduling defaults for one end-to-end run.
    """

    step_pause: float = Field(2.0, ge=0, alias="CAREBOOK_STEP_PAUSE")
    availability_settle: float = Field(5.0, ge=0, alias="CAREBOOK_AVAILABILITY_SETTLE")
    strategy_pause: float = Field(0.5, ge=0, alias="CAREBOOK_STRATEGY_PAUSE")
    success_threshold: int = Field(75, ge=0, le=100, alias="CAREBOOK_SUCCESS_THRESHOLD")
    timezone: str = Field("EST", alias="CAREBOOK_TIMEZONE")
    fallback_provider_id: Optional[str] = Field(None, alias="CAREBOOK_FALLBACK_PROVIDER_ID")
    log_level: str = Field("INFO", alias="CAREBOOK_LOG_LEVEL")

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        label = value.strip().upper()
        if label not in TIMEZONE_OFFSETS:
            raise ValueError(f"unknown timezone label {value!r}, expected one of {sorted(TIMEZONE_OFFSETS)}")
        return label

    @field_validator("fallback_provider_id")
    @classmethod
    def _blank_is_none(cls, value: Optional[str]) -> Optional[str]:
        return value or None
