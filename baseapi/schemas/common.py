from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypedDict, TypeVar

from pydantic import BaseModel, ConfigDict

from baseapi.core.urls import QueryParams

T = TypeVar("T")


class BaseQueryParams(TypedDict, total=False):
    """Query keys most list endpoints understand. Any other key is accepted too."""

    page: str
    limit: str
    search: str
    populate: str
    order: str


@dataclass(frozen=True)
class RequestConfig:
    endpoint: str
    data: Any = None
    headers: Mapping[str, str] | None = None
    query: QueryParams | None = None


class ResponseEnvelope(BaseModel, Generic[T]):
    """Standard `{ message, data }` success envelope.

    The client returns bodies untouched; validate with
    `ResponseEnvelope[list[User]].model_validate(body)` when a typed view helps.
    """

    model_config = ConfigDict(extra="allow")

    message: str
    data: T | None = None
