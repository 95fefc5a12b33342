from __future__ import annotations

from dataclasses import dataclass
from typing import Any


class HttpClientError(Exception):
    """Base class for errors raised by this library."""


@dataclass(frozen=True)
class ErrorInfo:
    """Response metadata attached to a failed request."""

    status: int
    status_text: str
    url: str
    errors: Any | None = None

    def as_dict(self) -> dict[str, Any]:
        # Keep the wire-facing key names callers already branch on.
        return {
            "status": self.status,
            "statusText": self.status_text,
            "url": self.url,
            "errors": self.errors,
        }


@dataclass(eq=False)
class RequestFailed(HttpClientError):
    """The server answered with a non-2xx status.

    `message` is the `message` field of the JSON body; `info` carries the
    status line, the final URL and the body's `errors` field verbatim.
    """

    message: str
    info: ErrorInfo

    def __str__(self) -> str:
        return self.message

    @property
    def status(self) -> int:
        return self.info.status

    @property
    def status_text(self) -> str:
        return self.info.status_text

    @property
    def url(self) -> str:
        return self.info.url

    @property
    def errors(self) -> Any | None:
        return self.info.errors

    @property
    def cause(self) -> dict[str, Any]:
        return self.info.as_dict()
