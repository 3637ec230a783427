"""
Mock Transport Implementation.

Scripted in-memory stand-in for the remote scheduling service.
Useful for testing and demos.
"""
import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Union
from urllib.parse import parse_qsl, urlsplit

from carebook_sdk.transport import Response


logger = logging.getLogger(__name__)

Handler = Callable[["RecordedRequest"], Response]
Reply = Union[Response, Exception, Handler]


@dataclass
class RecordedRequest:
    """One request seen by the mock."""

    method: str
    location: str
    headers: dict[str, str]
    body: Any = None
    path: str = ""
    query: dict[str, str] = field(default_factory=dict)


class MockTransport:
    """
    Mock implementation of the Transport protocol.

    Routes are keyed by ``(METHOD, path)`` with the query string stripped.
    Each route holds a queue of replies consumed in order; the last reply
    is sticky so a route keeps answering once its script runs out.
    A reply may be a ``Response``, an exception instance to raise, or a
    callable receiving the ``RecordedRequest``.
    """

    def __init__(self):
        self.requests: list[RecordedRequest] = []
        self._routes: dict[tuple[str, str], deque] = {}
        self.closed = False

    def add_route(self, method: str, path: str, *replies: Reply) -> "MockTransport":
        if not replies:
            raise ValueError("at least one reply is required")
        key = (method.upper(), path)
        self._routes.setdefault(key, deque()).extend(replies)
        return self

    def calls_to(self, path: str, method: Optional[str] = None) -> list[RecordedRequest]:
        return [
            r
            for r in self.requests
            if r.path == path and (method is None or r.method == method.upper())
        ]

    async def send(
        self,
        method: str,
        location: str,
        headers: Mapping[str, str],
        body: Optional[Any] = None,
    ) -> Response:
        parts = urlsplit(location)
        request = RecordedRequest(
            method=method.upper(),
            location=location,
            headers=dict(headers),
            body=body,
            path=parts.path,
            query=dict(parse_qsl(parts.query, keep_blank_values=True)),
        )
        self.requests.append(request)

        replies = self._routes.get((request.method, request.path))
        if not replies:
            logger.debug(f"MockTransport: no route for {request.method} {request.path}")
            return Response(status_code=404, body={"message": "Not Found"})

        reply = replies.popleft() if len(replies) > 1 else replies[0]
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            return reply(request)
        return reply

    async def close(self) -> None:
        self.closed = True
