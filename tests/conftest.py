from __future__ import annotations

import httpx
import pytest

from baseapi.client import HttpClient, get_http_client
from baseapi.settings import get_settings
from tests.helpers import Recorder

ORIGIN = "http://localhost:3001"


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    # Keep stray API_URL values and .env files out of the tests.
    monkeypatch.delenv("API_URL", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    get_http_client.cache_clear()
    yield
    get_settings.cache_clear()
    get_http_client.cache_clear()


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def make_client():
    def _make(handler, base_url: str = ORIGIN) -> HttpClient:
        return HttpClient(base_url, transport=httpx.MockTransport(handler))

    return _make
