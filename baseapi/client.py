from __future__ import annotations

import json
import logging
import time
import uuid
from collections.abc import Mapping
from dataclasses import replace
from functools import lru_cache
from typing import Any

import httpx

from baseapi.core.errors import ErrorInfo, RequestFailed
from baseapi.core.headers import CREDENTIAL_HEADERS, DEFAULT_HEADERS, merge_headers
from baseapi.core.urls import QueryParams, build_url, form_text
from baseapi.schemas.common import RequestConfig
from baseapi.settings import get_settings

logger = logging.getLogger(__name__)

# Marks an argument the caller did not pass; None is a real value that clears a field.
_UNSET: Any = object()


def _as_config(
    config: RequestConfig | str,
    *,
    data: Any = _UNSET,
    query: QueryParams | None = _UNSET,
    headers: Mapping[str, str] | None = _UNSET,
) -> RequestConfig:
    fields = {"data": data, "query": query, "headers": headers}
    overrides = {name: value for name, value in fields.items() if value is not _UNSET}
    if isinstance(config, RequestConfig):
        return replace(config, **overrides) if overrides else config
    return RequestConfig(endpoint=config, **overrides)


def _empty_multipart() -> tuple[bytes, str]:
    """Encode a form with no fields: just the closing boundary."""

    boundary = uuid.uuid4().hex
    return f"--{boundary}--\r\n".encode("ascii"), f"multipart/form-data; boundary={boundary}"


def _form_parts(data: Any) -> list[tuple[str, Any]]:
    if not isinstance(data, Mapping):
        raise TypeError(f"upload data must be a mapping of field name to value, got {type(data).__name__}")

    parts: list[tuple[str, Any]] = []
    for name, value in data.items():
        if isinstance(value, tuple):
            # (filename, content[, content_type])
            parts.append((name, value))
        elif isinstance(value, (bytes, bytearray)):
            parts.append((name, bytes(value)))
        elif hasattr(value, "read"):
            parts.append((name, value))
        else:
            # No filename: rendered as a plain form field.
            parts.append((name, (None, form_text(value))))
    return parts


class HttpClient:
    """Async JSON API client.

    Every call is an independent round trip on a fresh `httpx.AsyncClient`:
    no connection reuse, no retries, no timeout added on top of the
    transport's own. Redirects are followed, so a response and the URL it
    reports are those of the final hop. Responses are parsed as JSON
    whatever their status; 2xx bodies are returned as-is, anything else
    raises `RequestFailed`.

    Verbs accept either a `RequestConfig` or an endpoint string. Keyword
    arguments passed alongside a `RequestConfig` replace its fields; an
    explicit None clears the field, an omitted argument leaves it alone.
    """

    def __init__(self, base_url: str | None = None, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._base_url = base_url or get_settings().api_url
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._base_url

    async def get(
        self,
        config: RequestConfig | str,
        *,
        query: QueryParams | None = _UNSET,
        headers: Mapping[str, str] | None = _UNSET,
    ) -> Any:
        return await self.request("GET", _as_config(config, query=query, headers=headers))

    async def post(
        self,
        config: RequestConfig | str,
        data: Any = _UNSET,
        *,
        query: QueryParams | None = _UNSET,
        headers: Mapping[str, str] | None = _UNSET,
    ) -> Any:
        """POST `data` as JSON; omitted or None data is sent as `null`."""

        return await self.request("POST", _as_config(config, data=data, query=query, headers=headers), send_body=True)

    async def put(
        self,
        config: RequestConfig | str,
        data: Any = _UNSET,
        *,
        query: QueryParams | None = _UNSET,
        headers: Mapping[str, str] | None = _UNSET,
    ) -> Any:
        return await self.request("PUT", _as_config(config, data=data, query=query, headers=headers), send_body=True)

    async def patch(
        self,
        config: RequestConfig | str,
        data: Any = _UNSET,
        *,
        query: QueryParams | None = _UNSET,
        headers: Mapping[str, str] | None = _UNSET,
    ) -> Any:
        return await self.request("PATCH", _as_config(config, data=data, query=query, headers=headers), send_body=True)

    async def delete(
        self,
        config: RequestConfig | str,
        *,
        query: QueryParams | None = _UNSET,
        headers: Mapping[str, str] | None = _UNSET,
    ) -> Any:
        return await self.request("DELETE", _as_config(config, query=query, headers=headers))

    async def upload(
        self,
        config: RequestConfig | str,
        data: Mapping[str, Any] | None = _UNSET,
        *,
        query: QueryParams | None = _UNSET,
        headers: Mapping[str, str] | None = _UNSET,
    ) -> Any:
        """POST `data` as multipart/form-data, one field per entry.

        bytes and file objects become file parts, `(filename, content[, content_type])`
        tuples become named file parts and anything else is sent as text.
        The JSON Content-Type default is not applied so the transport can
        set the multipart boundary. An empty mapping still sends a
        multipart body holding only the closing boundary.
        """

        cfg = _as_config(config, data=data, query=query, headers=headers)
        url = build_url(self._base_url, cfg.endpoint, cfg.query)
        parts = _form_parts(cfg.data)
        if not parts:
            # httpx sends no body at all for an empty `files` list.
            content, content_type = _empty_multipart()
            return await self._send(
                "POST",
                url,
                headers=merge_headers({"Content-Type": content_type}, cfg.headers),
                content=content,
            )
        return await self._send("POST", url, headers=merge_headers(cfg.headers), files=parts)

    def with_credentials(self) -> CredentialedClient:
        return CredentialedClient(self)

    async def request(self, method: str, config: RequestConfig, *, send_body: bool = False) -> Any:
        url = build_url(self._base_url, config.endpoint, config.query)
        kwargs: dict[str, Any] = {"headers": self.get_headers(config.headers)}
        if send_body:
            kwargs["content"] = json.dumps(config.data, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
        return await self._send(method, url, **kwargs)

    async def _send(self, method: str, url: httpx.URL, **kwargs: Any) -> Any:
        start = time.perf_counter()
        async with httpx.AsyncClient(transport=self._transport, timeout=None, follow_redirects=True) as client:
            response = await client.request(method, url, **kwargs)
        duration_ms = (time.perf_counter() - start) * 1000.0
        logger.info("%s %s -> %s (%.1fms)", method, response.url, response.status_code, duration_ms)
        return self.handle_response(response)

    @staticmethod
    def get_headers(headers: Mapping[str, str] | None = None) -> dict[str, str]:
        return merge_headers(DEFAULT_HEADERS, headers)

    @staticmethod
    def handle_response(response: httpx.Response) -> Any:
        """Return the parsed JSON body, or raise `RequestFailed` on a non-2xx status.

        A body that is not JSON raises `json.JSONDecodeError` from here,
        whatever the status.
        """

        body = response.json()
        if response.is_success:
            return body

        fields = body if isinstance(body, dict) else {}
        message = fields.get("message")
        info = ErrorInfo(
            status=response.status_code,
            status_text=response.reason_phrase,
            url=str(response.url),
            errors=fields.get("errors"),
        )
        logger.warning("request failed status=%s url=%s message=%r", info.status, info.url, message)
        raise RequestFailed(message="" if message is None else str(message), info=info)


class CredentialedClient:
    """Verb methods of an `HttpClient` with credential headers forced on.

    `Content-Type: application/json` and `credentials: include` are merged
    after the caller's headers, so they win on conflicting names.
    """

    def __init__(self, client: HttpClient) -> None:
        self._client = client

    def _config(self, config: RequestConfig | str, **fields: Any) -> RequestConfig:
        cfg = _as_config(config, **fields)
        return replace(cfg, headers=merge_headers(cfg.headers, CREDENTIAL_HEADERS))

    async def get(
        self,
        config: RequestConfig | str,
        *,
        query: QueryParams | None = _UNSET,
        headers: Mapping[str, str] | None = _UNSET,
    ) -> Any:
        return await self._client.get(self._config(config, query=query, headers=headers))

    async def post(
        self,
        config: RequestConfig | str,
        data: Any = _UNSET,
        *,
        query: QueryParams | None = _UNSET,
        headers: Mapping[str, str] | None = _UNSET,
    ) -> Any:
        return await self._client.post(self._config(config, data=data, query=query, headers=headers))

    async def put(
        self,
        config: RequestConfig | str,
        data: Any = _UNSET,
        *,
        query: QueryParams | None = _UNSET,
        headers: Mapping[str, str] | None = _UNSET,
    ) -> Any:
        return await self._client.put(self._config(config, data=data, query=query, headers=headers))

    async def patch(
        self,
        config: RequestConfig | str,
        data: Any = _UNSET,
        *,
        query: QueryParams | None = _UNSET,
        headers: Mapping[str, str] | None = _UNSET,
    ) -> Any:
        return await self._client.patch(self._config(config, data=data, query=query, headers=headers))

    async def delete(
        self,
        config: RequestConfig | str,
        *,
        query: QueryParams | None = _UNSET,
        headers: Mapping[str, str] | None = _UNSET,
    ) -> Any:
        return await self._client.delete(self._config(config, query=query, headers=headers))


@lru_cache(maxsize=1)
def get_http_client() -> HttpClient:
    """Return a cached client bound to the configured API_URL."""

    return HttpClient(get_settings().api_url)
