"""Tests for BrowserTransport with an injected request context."""

import pytest
from playwright.async_api import Error as PlaywrightError

from carebook_sdk.browser_transport import BrowserTransport
from carebook_sdk.errors import TransportError


class FakeApiResponse:
    def __init__(self, status: int, text: str) -> None:
        self.status = status
        self._text = text

    async def text(self) -> str:
        return self._text


class FakeRequestContext:
    """Stands in for Playwright's APIRequestContext."""

    def __init__(self, *replies) -> None:
        self.replies = list(replies)
        self.calls: list[dict] = []

    async def fetch(self, url, method, headers, data, timeout):
        self.calls.append(
            {"url": url, "method": method, "headers": headers, "data": data, "timeout": timeout}
        )
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.mark.asyncio
async def test_send_goes_through_request_context():
    context = FakeRequestContext(FakeApiResponse(201, '{"data": {"uuid": "p-1"}}'))
    transport = BrowserTransport("https://api.example.test/", request_context=context, timeout=10)

    response = await transport.send(
        "POST", "/api/master/provider", {"X-TENANT-ID": "demo"}, {"firstName": "Ada"}
    )

    assert response.status_code == 201
    assert response.data == {"uuid": "p-1"}
    assert context.calls == [
        {
            "url": "https://api.example.test/api/master/provider",
            "method": "POST",
            "headers": {"X-TENANT-ID": "demo"},
            "data": {"firstName": "Ada"},
            "timeout": 10000,
        }
    ]


@pytest.mark.asyncio
async def test_error_status_passes_through():
    context = FakeRequestContext(FakeApiResponse(404, ""))
    transport = BrowserTransport("https://api.example.test", request_context=context)

    response = await transport.send("GET", "/api/master/slots", {})

    assert response.status_code == 404
    assert response.body is None


@pytest.mark.asyncio
async def test_playwright_failure_is_transport_error():
    context = FakeRequestContext(PlaywrightError("net::ERR_CONNECTION_REFUSED"))
    transport = BrowserTransport("https://api.example.test", request_context=context)

    with pytest.raises(TransportError, match="failed in browser"):
        await transport.send("GET", "/api/master/slots", {})


@pytest.mark.asyncio
async def test_unparseable_body_is_transport_error():
    context = FakeRequestContext(FakeApiResponse(200, "<html>login</html>"))
    transport = BrowserTransport("https://api.example.test", request_context=context)

    with pytest.raises(TransportError, match="unparseable"):
        await transport.send("GET", "/api/master/slots", {})


class FakeDriverFactory:
    """Stands in for ``async_playwright``; counts drivers started and stopped."""

    def __init__(self, launch_error: Exception | None = None, request_context=None) -> None:
        self.launch_error = launch_error
        self.request_context = request_context
        self.started = 0
        self.stopped = 0

    def __call__(self):
        return self

    async def start(self):
        self.started += 1
        return FakeDriver(self)


class FakeDriver:
    def __init__(self, factory: FakeDriverFactory) -> None:
        self.factory = factory
        self.chromium = self

    async def launch(self, headless: bool):
        if self.factory.launch_error is not None:
            raise self.factory.launch_error
        return FakeBrowser(self.factory.request_context)

    async def stop(self) -> None:
        self.factory.stopped += 1


class FakeBrowser:
    def __init__(self, request_context) -> None:
        self.request_context = request_context

    async def new_context(self):
        return FakeBrowserContext(self.request_context)

    async def close(self) -> None:
        pass


class FakeBrowserContext:
    def __init__(self, request_context) -> None:
        self.request = request_context

    async def close(self) -> None:
        pass


@pytest.mark.asyncio
async def test_failed_launch_is_transport_error_and_stops_driver(monkeypatch):
    factory = FakeDriverFactory(launch_error=PlaywrightError("Executable doesn't exist"))
    monkeypatch.setattr("carebook_sdk.browser_transport.async_playwright", factory)
    transport = BrowserTransport("https://api.example.test")

    for _ in range(3):
        with pytest.raises(TransportError, match="could not be started"):
            await transport.send("POST", "/api/master/login", {}, {})

    assert factory.started == 3
    assert factory.stopped == 3


@pytest.mark.asyncio
async def test_launched_session_is_reused_and_closed(monkeypatch):
    context = FakeRequestContext(FakeApiResponse(200, "{}"), FakeApiResponse(200, "{}"))
    factory = FakeDriverFactory(request_context=context)
    monkeypatch.setattr("carebook_sdk.browser_transport.async_playwright", factory)
    transport = BrowserTransport("https://api.example.test")

    await transport.send("GET", "/a", {})
    await transport.send("GET", "/b", {})
    await transport.close()

    assert factory.started == 1
    assert factory.stopped == 1
    assert [c["url"] for c in context.calls] == ["https://api.example.test/a", "https://api.example.test/b"]
