import os

import pytest

from gemini_sdk.config import GeminiConfig
from gemini_sdk.services.provider import GeminiProvider
from tests.helpers import FakeTransport


@pytest.fixture(autouse=True)
def isolate_gemini_env(monkeypatch):
    """Keep GEMINI_* variables from the developer's shell out of the tests."""
    for key in list(os.environ):
        if key.startswith("GEMINI_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def config() -> GeminiConfig:
    return GeminiConfig(
        _env_file=None,
        api_key="test-key",
        max_retries=3,
        retry_base_delay=1.0,
        retry_max_delay=30.0,
        retry_backoff_multiplier=2.0,
    )


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def provider(transport, config) -> GeminiProvider:
    return GeminiProvider(transport, config)
