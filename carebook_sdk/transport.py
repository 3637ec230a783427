"""
HTTP transport for the scheduling API.

Only moves requests and responses: status codes are never interpreted
here, callers decide what a 4xx/5xx reply means.
"""

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol

import aiohttp

from carebook_sdk.errors import TransportError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Response:
    """Status code plus decoded JSON body (None when the body is empty)."""

    status_code: int
    body: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def field(self, name: str, default: Any = None) -> Any:
        """Nested field of a dict body, e.g. ``data`` or ``message``."""
        if isinstance(self.body, dict):
            return self.body.get(name, default)
        return default

    @property
    def data(self) -> Any:
        """The ``data`` envelope when present, otherwise the whole body."""
        if isinstance(self.body, dict) and "data" in self.body:
            return self.body["data"]
        return self.body

    @property
    def message(self) -> str:
        value = self.field("message")
        return value if isinstance(value, str) else ""


class Transport(Protocol):
    """Anything able to send one request to the remote service."""

    async def send(
        self,
        method: str,
        location: str,
        headers: Mapping[str, str],
        body: Optional[Any] = None,
    ) -> Response:
        """Send a request. Raises TransportError when no response could be obtained."""
        ...

    async def close(self) -> None:
        ...


def decode_body(raw: str) -> Any:
    """Decode a response body, keeping empty bodies as None."""
    if not raw:
        return None
    return json.loads(raw)


class AiohttpTransport:
    """aiohttp-backed transport sharing one session for the whole run."""

    def __init__(self, base_url: str, timeout: float = 30.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session: Optional[aiohttp.ClientSession] = None

    async def _ensure_session(self):
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession()

    def url_for(self, location: str) -> str:
        if location.startswith(("http://", "https://")):
            return location
        return f"{self.base_url}/{location.lstrip('/')}"

    async def send(
        self,
        method: str,
        location: str,
        headers: Mapping[str, str],
        body: Optional[Any] = None,
    ) -> Response:
        await self._ensure_session()
        url = self.url_for(location)
        logger.debug(f"[Transport] {method} {url}")

        try:
            async with self.session.request(
                method,
                url,
                json=body,
                headers=dict(headers),
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as response:
                raw = await response.text()
                status = response.status
        except asyncio.TimeoutError as exc:
            raise TransportError(f"{method} {url} timed out after {self.timeout}s", url) from exc
        except aiohttp.ClientError as exc:
            raise TransportError(f"{method} {url} failed: {type(exc).__name__}: {exc}", url) from exc

        try:
            decoded = decode_body(raw)
        except ValueError as exc:
            raise TransportError(f"{method} {url} returned unparseable body (HTTP {status})", url) from exc

        logger.debug(f"[Transport] {method} {url} -> {status}")
        return Response(status_code=status, body=decoded)

    async def close(self):
        if self.session and not self.session.closed:
            await self.session.close()

    async def __aenter__(self) -> "AiohttpTransport":
        await self._ensure_session()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
