"""
Capability client for the scheduling API.

One method per capability the end-to-end flow needs. Every call carries
the bearer token and the tenant header; status codes are returned to
the caller untouched, except for ``authenticate`` which has nothing
useful to return without a token.
"""

import logging
from datetime import date
from enum import Enum
from typing import Any, Dict, Optional, Sequence
from urllib.parse import quote

from carebook_sdk.errors import AuthenticationError
from carebook_sdk.transport import Response, Transport
from core.scheduling.prober import DEFAULT_SLOT_CANDIDATES, EndpointCandidate, EndpointProber, ProbeResult

logger = logging.getLogger(__name__)

LOGIN_PATH = "/api/master/login"
AVAILABILITY_SETTING_PATH = "/api/master/provider/availability-setting"
APPOINTMENT_PATH = "/api/master/appointment"


class ResourceKind(str, Enum):
    PROVIDER = "provider"
    PATIENT = "patient"

    @property
    def path(self) -> str:
        return f"/api/master/{self.value}"


class CareApiClient:
    """Capability facade over a Transport, scoped to one tenant and one run."""

    def __init__(
        self,
        transport: Transport,
        tenant: str,
        slot_candidates: Sequence[EndpointCandidate] = DEFAULT_SLOT_CANDIDATES,
    ):
        self.transport = transport
        self.tenant = tenant
        self.access_token: Optional[str] = None
        self.prober = EndpointProber(transport, tuple(slot_candidates))

    def authorize(self, access_token: str) -> None:
        """Attach the bearer token used by every later call."""
        self.access_token = access_token

    def headers(self, with_body: bool = False) -> Dict[str, str]:
        headers = {
            "Accept": "application/json, text/plain, */*",
            "X-TENANT-ID": self.tenant,
        }
        if with_body:
            headers["Content-Type"] = "application/json"
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    async def authenticate(self, username: str, password: str) -> str:
        """Log in and return the access token. Raises AuthenticationError when refused."""
        response = await self.transport.send(
            "POST",
            LOGIN_PATH,
            self.headers(with_body=True),
            {"username": username, "password": password, "xTENANTID": self.tenant},
        )
        if response.status_code != 200:
            raise AuthenticationError(
                f"Login failed with status {response.status_code}: {response.message or response.body}",
                status_code=response.status_code,
                body=response.body,
            )

        data = response.data
        token = None
        if isinstance(data, dict):
            token = data.get("access_token") or data.get("token")
        if not token:
            raise AuthenticationError(
                "Login response carried no access token",
                status_code=response.status_code,
                body=response.body,
            )
        logger.info("Login successful, access token received")
        return token

    async def create_resource(self, kind: ResourceKind, payload: Dict[str, Any]) -> Response:
        return await self.transport.send("POST", kind.path, self.headers(with_body=True), payload)

    async def list_resources(
        self,
        kind: ResourceKind,
        page: int = 0,
        size: int = 50,
        search: Optional[str] = None,
    ) -> Response:
        location = f"{kind.path}?page={page}&size={size}"
        if search is not None:
            location += f"&searchString={quote(search, safe='')}"
        return await self.transport.send("GET", location, self.headers())

    async def set_availability(self, descriptor: Dict[str, Any]) -> Response:
        return await self.transport.send(
            "POST", AVAILABILITY_SETTING_PATH, self.headers(with_body=True), descriptor
        )

    async def probe_slots(self, provider_id: str, query_date: date, timezone_label: str) -> ProbeResult:
        return await self.prober.probe(self.headers(), provider_id, query_date, timezone_label)

    async def book_appointment(self, payload: Dict[str, Any]) -> Response:
        logger.debug(f"Booking payload: {payload}")
        return await self.transport.send("POST", APPOINTMENT_PATH, self.headers(with_body=True), payload)

    async def close(self) -> None:
        await self.transport.close()
