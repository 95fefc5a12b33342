from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Union

import httpx

QueryParams = Union[Mapping[str, Any], Iterable[tuple[str, Any]]]


def form_text(value: Any) -> str:
    """Render a scalar the way browsers do for query and form fields."""

    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_url(origin: str | httpx.URL, endpoint: str, query: QueryParams | None = None) -> httpx.URL:
    """Resolve `endpoint` against `origin` and append `query`.

    Resolution follows RFC 3986, so "/users" replaces the origin's path while
    "users" is relative to it, and an absolute endpoint ignores the origin.
    Query entries whose value is None are skipped; the rest are appended in
    the given order after any query string the endpoint already carries.
    Keys are neither validated nor deduplicated.
    """

    url = httpx.URL(origin).join(endpoint)
    if not query:
        return url

    pairs = query.items() if isinstance(query, Mapping) else query

    params = url.params
    added = False
    for key, value in pairs:
        if value is None:
            continue
        params = params.add(str(key), form_text(value))
        added = True

    if not added:
        return url
    return url.copy_with(params=params)
