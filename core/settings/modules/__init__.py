# Settings modules
from .api_settings import ApiSettings
from .app_settings import CareSettings, get_care_settings
from .retry_settings import RetrySettings
from .run_settings import RunSettings

__all__ = [
    "ApiSettings",
    "CareSettings",
    "RetrySettings",
    "RunSettings",
    "get_care_settings",
]
