from __future__ import annotations

from functools import lru_cache

from pydantic import BaseModel, ConfigDict

from core.settings.modules.api_settings import ApiSettings
from core.settings.modules.retry_settings import RetrySettings
from core.settings.modules.run_settings import RunSettings


class CareSettings(BaseModel):
    """Aggregates the settings sections as nested objects."""

    model_config = ConfigDict(extra="ignore")

    api: ApiSettings
    retry: RetrySettings
    run: RunSettings


@lru_cache()
def get_care_settings() -> CareSettings:
    return CareSettings(
        api=ApiSettings(),
        retry=RetrySettings(),
        run=RunSettings(),
    )
