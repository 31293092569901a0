"""WaitHuman exceptions.

The engine reports expected failures as `Result` values; these exception
types are raised by the HTTP client (and mapped by the engine) and by the
typed convenience operations on `WaitHuman`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from waithuman.models import WaitHumanError


class WaitHumanException(RuntimeError):
    """Base class for WaitHuman client errors."""


class WaitHumanHTTPError(WaitHumanException):
    """The WaitHuman API answered with a non-2xx status.

    `status_text` is the HTTP reason phrase; the engine reports it as the
    `create_failed` / `poll_failed` description.
    """

    def __init__(
        self,
        status: int,
        *,
        method: str,
        url: str,
        reason: str | None = None,
        detail: str | None = None,
    ):
        self.status = int(status)
        self.method = method
        self.url = url
        self.reason = reason
        self.detail = (detail or "").strip() or None
        super().__init__(self.__str__())

    @property
    def status_text(self) -> str:
        return self.reason or f"HTTP {self.status}"

    def __str__(self) -> str:
        message = f"{self.method} {self.url} returned {self.status} {self.status_text}"
        if self.detail and self.detail != self.reason:
            message += f" ({self.detail[:200]})"
        return message


class WaitHumanProtocolError(WaitHumanException):
    """A WaitHuman API response that doesn't have the expected shape."""

    def __init__(self, message: str, *, payload_preview: str | None = None):
        self.message = message
        self.payload_preview = payload_preview
        super().__init__(self.__str__())

    def __str__(self) -> str:
        if self.payload_preview:
            return f"Malformed WaitHuman response: {self.message}; got {self.payload_preview}"
        return f"Malformed WaitHuman response: {self.message}"


class AskFailedError(WaitHumanException):
    """The request-poll engine returned an error instead of an answer."""

    def __init__(self, error: WaitHumanError):
        self.error = error
        super().__init__(f"WaitHuman Error: {error.reason} {error.description or ''}")


class UnexpectedAnswerTypeError(WaitHumanException):
    def __init__(self, actual: str, expected: str):
        self.actual = actual
        self.expected = expected
        super().__init__(f"Unexpected answer type: {actual}. Expected '{expected}'.")


class InvalidSelectedIndexError(WaitHumanException):
    def __init__(self, index: int | None):
        self.index = index
        super().__init__(f"Invalid selected index received: {index}")
