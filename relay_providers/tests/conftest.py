"""Pytest configuration for the providers test suite.

Isolates every test from ambient credentials, config files and timeout
overrides so results do not depend on the developer's shell.
"""

from __future__ import annotations

from typing import Iterator

import pytest

from relay_providers.base.resilience.retry import RetryConfig
from relay_providers.config import reset_config_cache

_ISOLATED_ENV = (
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
    "PROVIDERS_CONFIG_FILE",
    "PROVIDERS_LOG_LEVEL",
    "OPENAI_MODEL",
    "OPENAI_BASE_URL",
    "OPENAI_API_KEY_ENV",
    "ANTHROPIC_MODEL",
    "ANTHROPIC_BASE_URL",
    "GEMINI_MODEL",
    "GEMINI_BASE_URL",
    "PT_TIMEOUT_HTTP_SECONDS",
    "PT_TIMEOUT_CONNECT_SECONDS",
    "PT_TIMEOUT_STREAM_SECONDS",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Strip provider-related environment variables for the duration of a test."""
    for name in _ISOLATED_ENV:
        monkeypatch.delenv(name, raising=False)
    reset_config_cache()
    yield
    reset_config_cache()


@pytest.fixture()
def api_keys(monkeypatch: pytest.MonkeyPatch) -> None:
    """Provide dummy credentials for every built-in provider."""
    monkeypatch.setenv("OPENAI_API_KEY", "sk-openai")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-anthropic")
    monkeypatch.setenv("GEMINI_API_KEY", "gm-key")


@pytest.fixture()
def fast_retry() -> RetryConfig:
    """Retry policy with zero delays (two retries)."""
    return RetryConfig(max_retries=2, initial_delay_seconds=0.0, max_delay_seconds=0.0)
