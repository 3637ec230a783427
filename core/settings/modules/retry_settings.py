from __future__ import annotations

from pydantic import Field

from core.settings.base import CareBaseSettings
from orchestration.workflow import RetryPolicy


class RetrySettings(CareBaseSettings):
    """Retry policy applied to each network operation."""

    attempts: int = Field(3, ge=1, alias="CAREBOOK_RETRY_ATTEMPTS")
    delay_seconds: float = Field(2.0, ge=0, alias="CAREBOOK_RETRY_DELAY")

    def policy(self) -> RetryPolicy:
        return RetryPolicy(max_attempts=self.attempts, backoff_seconds=self.delay_seconds)
