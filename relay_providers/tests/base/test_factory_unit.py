from __future__ import annotations

import httpx
import pytest

from relay_providers.anthropic import AnthropicProvider
from relay_providers.base.factory import (
    ProviderConfig,
    ProviderFactory,
    UnknownProviderError,
    build_fallback_chain,
    create_provider,
)
from relay_providers.base.resilience import FallbackProvider
from relay_providers.config.defaults import ANTHROPIC_DEFAULT_MODEL
from relay_providers.gemini import GeminiProvider
from relay_providers.openai import OpenAIProvider


def test_supported_names():
    assert ProviderFactory.supported() == ("openai", "anthropic", "gemini")


@pytest.mark.parametrize(
    "name,cls",
    [("openai", OpenAIProvider), ("Anthropic", AnthropicProvider), ("GEMINI", GeminiProvider)],
)
def test_builtin_providers(name, cls):
    provider = create_provider(ProviderConfig(provider=name))
    assert isinstance(provider, cls)
    assert provider.name == name.lower()


def test_builtin_fills_defaults():
    provider = create_provider(ProviderConfig(provider="anthropic"))
    assert provider.model == ANTHROPIC_DEFAULT_MODEL


def test_builtin_respects_env_model(monkeypatch):
    monkeypatch.setenv("OPENAI_MODEL", "gpt-4o-mini")
    assert create_provider(ProviderConfig(provider="openai")).model == "gpt-4o-mini"


@pytest.mark.parametrize("name", ["local", "bedrock"])
def test_unregistered_provider_requires_base_url(name):
    with pytest.raises(UnknownProviderError):
        create_provider(ProviderConfig(provider=name))


def test_custom_provider_is_openai_compatible():
    provider = create_provider(ProviderConfig(provider="local-llm", base_url="http://localhost:8000/v1", model="llama"))
    assert isinstance(provider, OpenAIProvider)
    assert provider.name == "local-llm"
    assert provider.api_key_env_var == "LOCAL_LLM_API_KEY"
    assert provider.base_url == "http://localhost:8000/v1"


def test_build_fallback_chain_keeps_order_and_patterns():
    transport = httpx.MockTransport(lambda request: httpx.Response(500))
    chain = build_fallback_chain(
        [
            ProviderConfig(provider="anthropic", models=("claude-*",)),
            ProviderConfig(provider="openai", models=("gpt-*",)),
        ],
        transport=transport,
    )
    assert isinstance(chain, FallbackProvider)
    assert chain.name == "fallback(anthropic,openai)"
    assert [e.provider.name for e in chain.order_providers("gpt-4o")] == ["openai", "anthropic"]
