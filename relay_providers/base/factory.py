"""Provider factory utilities.

Purpose
-------
Centralize creation of adapter instances implementing ``LLMProvider`` from a
declarative :class:`ProviderConfig`. Adapters are imported lazily with
``importlib`` so that importing the factory stays cheap.

Resolution
----------
- ``openai``, ``anthropic`` and ``gemini`` (case-insensitive) map to their
  adapters. Values missing from the config are filled from
  ``get_provider_config`` (defaults, config file, environment).
- Any other name with a ``base_url`` becomes an OpenAI-compatible adapter
  named after the config; its key defaults to ``<NAME>_API_KEY``.
- Any other name without a ``base_url`` raises :class:`UnknownProviderError`.

The factory performs no I/O, retries or fallbacks itself.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from importlib import import_module
from typing import Any, Dict, Optional, Sequence, Tuple, Union

import httpx

from ..config import get_provider_config
from .resilience.fallback import FallbackProvider, ProviderEntry
from .resilience.health import ProviderHealthTracker
from .resilience.retry import RetryConfig


class UnknownProviderError(Exception):
    """Raised when a provider cannot be resolved or initialized.

    Failure modes include:
    - The provider name is not registered and no ``base_url`` was given.
    - The adapter module cannot be imported or the adapter class is missing.
    - The adapter constructor rejected its arguments.
    """


@dataclass(frozen=True)
class ProviderConfig:
    """Declarative description of one adapter.

    Attributes:
        provider: Provider name (``openai``, ``anthropic``, ``gemini`` or a
            custom OpenAI-compatible name).
        model: Default model when requests leave it empty.
        api_key_env_var: Environment variable holding the credential.
        base_url: API root override (required for custom providers).
        max_tokens / temperature: Request defaults.
        retry: Backoff policy; ``None`` uses the executor defaults.
        models: Glob patterns routing matching requests to this adapter
            first when used in a fallback chain.
        timeout: Explicit HTTP timeout.
    """

    provider: str
    model: Optional[str] = None
    api_key_env_var: Optional[str] = None
    base_url: Optional[str] = None
    max_tokens: Optional[int] = None
    temperature: Optional[float] = None
    retry: Optional[RetryConfig] = None
    models: Tuple[str, ...] = field(default_factory=tuple)
    timeout: Optional[Union[float, httpx.Timeout]] = None


class ProviderFactory:
    """Create provider adapters based on a provider name."""

    _PROVIDERS: Dict[str, Dict[str, str]] = {
        "openai": {"module": "relay_providers.openai.client", "class": "OpenAIProvider"},
        "anthropic": {"module": "relay_providers.anthropic.client", "class": "AnthropicProvider"},
        "gemini": {"module": "relay_providers.gemini.client", "class": "GeminiProvider"},
    }

    @classmethod
    def supported(cls) -> Tuple[str, ...]:
        """Return the built-in provider names in deterministic order."""
        return tuple(cls._PROVIDERS.keys())

    @classmethod
    def create(
        cls,
        config: ProviderConfig,
        *,
        client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> Any:
        """Create the adapter described by ``config``.

        Parameters
        ----------
        config:
            Adapter description.
        client / transport:
            Optional shared ``httpx.AsyncClient`` or transport (tests).

        Raises
        ------
        UnknownProviderError
            If the provider is unknown without ``base_url``, the adapter cannot
            be imported, or its constructor rejects the arguments.
        """
        name = (config.provider or "").lower().strip()
        spec = cls._PROVIDERS.get(name)
        if spec is not None:
            merged = get_provider_config(
                name,
                {
                    "model": config.model,
                    "base_url": config.base_url,
                    "api_key_env_var": config.api_key_env_var,
                },
            )
            kwargs: Dict[str, Any] = {
                "model": merged.get("model"),
                "base_url": merged.get("base_url"),
                "api_key_env_var": merged.get("api_key_env_var"),
            }
        elif config.base_url:
            spec = cls._PROVIDERS["openai"]
            kwargs = {
                "model": config.model,
                "base_url": config.base_url,
                "api_key_env_var": config.api_key_env_var or _custom_env_var(name),
                "name": name,
            }
        else:
            raise UnknownProviderError(
                f"Unknown provider '{config.provider}'. Provide a base_url for custom providers."
            )

        kwargs.update(
            max_tokens=config.max_tokens,
            temperature=config.temperature,
            retry_config=config.retry,
            timeout=config.timeout,
            client=client,
            transport=transport,
        )
        module_path, class_name = spec["module"], spec["class"]
        try:
            mod = import_module(module_path)
        except ImportError as exc:  # pragma: no cover - import failure path
            raise UnknownProviderError(
                f"Failed to import module '{module_path}' for provider '{config.provider}': {exc}"
            ) from exc
        try:
            klass = getattr(mod, class_name)
        except AttributeError as exc:
            raise UnknownProviderError(
                f"Adapter class '{class_name}' not found in '{module_path}' for provider '{config.provider}'"
            ) from exc
        try:
            return klass(**kwargs)
        except TypeError as exc:
            raise UnknownProviderError(
                f"Invalid arguments for '{config.provider}' adapter constructor: {exc}"
            ) from exc


def _custom_env_var(name: str) -> str:
    return re.sub(r"\W", "_", name).upper() + "_API_KEY"


def create_provider(config: ProviderConfig, **kwargs: Any) -> Any:
    """Shorthand for :meth:`ProviderFactory.create`."""
    return ProviderFactory.create(config, **kwargs)


def build_fallback_chain(
    configs: Sequence[ProviderConfig],
    health: Optional[ProviderHealthTracker] = None,
    **kwargs: Any,
) -> FallbackProvider:
    """Create every configured adapter and wrap them in a ``FallbackProvider``.

    Entry order follows ``configs``; each config's ``models`` patterns carry
    over to its :class:`ProviderEntry`.
    """
    entries = [ProviderEntry(provider=create_provider(c, **kwargs), models=c.models) for c in configs]
    return FallbackProvider(entries, health=health)


__all__ = [
    "ProviderConfig",
    "ProviderFactory",
    "UnknownProviderError",
    "create_provider",
    "build_fallback_chain",
]
