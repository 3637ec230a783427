"""
Browser-backed transport.

Runs the same capability calls from inside a Chromium session opened on
the provider portal, so requests carry the portal's cookies and origin.
Lets the UI-driven flow share the workflow and step logic of the API
flow instead of duplicating it.
"""

import logging
from typing import Any, Mapping, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from carebook_sdk.errors import TransportError
from carebook_sdk.transport import Response, decode_body

logger = logging.getLogger(__name__)


class BrowserTransport:
    """Transport issuing requests through a Playwright browser context."""

    def __init__(
        self,
        base_url: str,
        portal_url: Optional[str] = None,
        headless: bool = True,
        timeout: float = 30.0,
        request_context: Any = None,
    ):
        """
        Initialize browser transport.

        Args:
            base_url: API root requests are resolved against
            portal_url: Page opened before the first request, if any
            headless: Launch Chromium without a window
            timeout: Per-request timeout in seconds
            request_context: Ready APIRequestContext; skips launching a browser
        """
        self.base_url = base_url.rstrip("/")
        self.portal_url = portal_url
        self.headless = headless
        self.timeout = timeout
        self._request = request_context
        self._playwright = None
        self._browser = None
        self._context = None

    async def start(self) -> None:
        """Launch Chromium and open the portal once."""
        if self._request is not None:
            return

        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(headless=self.headless)
            self._context = await self._browser.new_context()
            if self.portal_url:
                page = await self._context.new_page()
                logger.info(f"Opening provider portal {self.portal_url}")
                await page.goto(self.portal_url, wait_until="networkidle", timeout=self.timeout * 1000)
        except PlaywrightError as exc:
            await self.close()
            raise TransportError(
                f"browser session could not be started: {exc}", self.portal_url or self.base_url
            ) from exc
        self._request = self._context.request

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
        await self.start()
        url = self.url_for(location)

        try:
            response = await self._request.fetch(
                url,
                method=method,
                headers=dict(headers),
                data=body,
                timeout=self.timeout * 1000,
            )
            raw = await response.text()
        except PlaywrightError as exc:
            raise TransportError(f"{method} {url} failed in browser: {exc}", url) from exc

        try:
            decoded = decode_body(raw)
        except ValueError as exc:
            raise TransportError(
                f"{method} {url} returned unparseable body (HTTP {response.status})", url
            ) from exc
        return Response(status_code=response.status, body=decoded)

    async def close(self) -> None:
        if self._context is not None:
            await self._context.close()
            self._context = None
            self._request = None
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
