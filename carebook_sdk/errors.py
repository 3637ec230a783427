"""
SDK errors.

Transport-level problems are kept apart from application responses:
a 4xx/5xx reply is a normal ``Response``, never an exception.
"""


class CarebookError(Exception):
    """Base class for carebook errors."""


class TransportError(CarebookError):
    """Request could not be sent or its response could not be parsed."""

    def __init__(self, message: str, location: str | None = None) -> None:
        super().__init__(message)
        self.location = location


class AuthenticationError(CarebookError):
    """Login was rejected or returned no access token."""

    def __init__(self, message: str, status_code: int | None = None, body: object = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class SlotShapeError(CarebookError):
    """Availability payload does not match any known slot shape."""


class MissingContextError(CarebookError, KeyError):
    """A step asked for a context entry that no earlier step wrote."""

    def __init__(self, key: str) -> None:
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"context entry '{self.key}' is missing"
