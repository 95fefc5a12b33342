"""In-process transport helpers shared by the client tests."""

from __future__ import annotations

from typing import Any

import httpx


class Recorder:
    """MockTransport handler that records requests and replays one response."""

    def __init__(self, status: int = 200, body: Any = None, *, content: bytes | None = None) -> None:
        self.status = status
        self.body = {"message": "ok", "data": None} if body is None else body
        self.content = content
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.content is not None:
            return httpx.Response(self.status, content=self.content)
        return httpx.Response(self.status, json=self.body)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]
