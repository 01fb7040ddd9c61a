"""Shared test fixtures for all test modules."""

import json

import httpx
import pytest

from witstream.models.config import WitConfig
from witstream.services.wit_client import WitClient


_ENV_VARS = [
    "WIT_API_TOKEN",
    "WITSTREAM_BASE_URL",
    "WITSTREAM_API_VERSION",
    "WITSTREAM_STRICT_STREAM_END",
    "WITSTREAM_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's own Wit.ai settings out of the tests."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def wit_config():
    """Test configuration pointing at the default API host."""
    return WitConfig(api_token="test-token")


@pytest.fixture
def frames_body():
    """Concatenate JSON objects with no delimiter, as /speech and /dictation do."""

    def build(*objects) -> bytes:
        return "".join(json.dumps(obj) for obj in objects).encode("utf-8")

    return build


@pytest.fixture
def make_client(wit_config):
    """
    Factory for a WitClient whose blocking and async calls hit a MockTransport.

    The handler receives an httpx.Request and returns an httpx.Response.
    """

    def build(handler, config=None) -> WitClient:
        transport = httpx.MockTransport(handler)
        return WitClient(
            config or wit_config,
            transport=transport,
            async_transport=transport,
        )

    return build
