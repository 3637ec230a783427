from __future__ import annotations

from pydantic import Field

from core.settings.base import CareBaseSettings


class ApiSettings(CareBaseSettings):
    """
    Remote scheduling API settings.
    Loaded from .env with exact variable name matching.
    """

    base_url: str = Field("https://stage-api.ecarehealth.com", alias="CAREBOOK_BASE_URL")
    portal_url: str = Field(
        "https://stage_aithinkitive.uat.provider.ecarehealth.com",
        alias="CAREBOOK_PORTAL_URL",
    )
    tenant: str = Field(..., alias="CAREBOOK_TENANT")
    username: str = Field(..., alias="CAREBOOK_USERNAME")
    password: str = Field(..., alias="CAREBOOK_PASSWORD", repr=False)
    request_timeout: float = Field(30.0, gt=0, alias="CAREBOOK_REQUEST_TIMEOUT")
