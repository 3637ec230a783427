# Settings package
from core.settings.modules import (
    ApiSettings,
    CareSettings,
    RetrySettings,
    RunSettings,
    get_care_settings,
)

__all__ = ["ApiSettings", "CareSettings", "RetrySettings", "RunSettings", "get_care_settings"]
