"""Unified configuration layer for providers.

Merge order (later wins):
    1. Built-in defaults (``defaults.py``)
    2. Optional external config file (JSON, or YAML when PyYAML is installed)
       pointed to by ``PROVIDERS_CONFIG_FILE``
    3. Environment variables ``<PROVIDER>_MODEL``, ``<PROVIDER>_BASE_URL``,
       ``<PROVIDER>_API_KEY_ENV``
    4. In-code overrides passed to ``get_provider_config``

External config file example::

    anthropic:
      model: claude-sonnet-4-20250514
      api_key_env_var: WORK_ANTHROPIC_KEY
    local:
      base_url: http://localhost:8000/v1
      api_key_env_var: LOCAL_LLM_KEY

Credentials themselves are never stored in configuration; only the name of
the environment variable holding them.

Public API
----------
* get_provider_config(provider, overrides=None) -> dict
* get_model(provider) -> str | None
* reset_config_cache()
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from .defaults import (
    ANTHROPIC_DEFAULT_BASE_URL,
    ANTHROPIC_DEFAULT_MODEL,
    GEMINI_DEFAULT_BASE_URL,
    GEMINI_DEFAULT_MODEL,
    OPENAI_DEFAULT_BASE_URL,
    OPENAI_DEFAULT_MODEL,
)
from .env import ENV_MAP

try:  # Optional YAML support
    import yaml  # type: ignore
except ImportError:  # pragma: no cover
    yaml = None  # type: ignore


DEFAULTS: Dict[str, Dict[str, Any]] = {
    "openai": {
        "model": OPENAI_DEFAULT_MODEL,
        "base_url": OPENAI_DEFAULT_BASE_URL,
        "api_key_env_var": ENV_MAP["openai"],
    },
    "anthropic": {
        "model": ANTHROPIC_DEFAULT_MODEL,
        "base_url": ANTHROPIC_DEFAULT_BASE_URL,
        "api_key_env_var": ENV_MAP["anthropic"],
    },
    "gemini": {
        "model": GEMINI_DEFAULT_MODEL,
        "base_url": GEMINI_DEFAULT_BASE_URL,
        "api_key_env_var": ENV_MAP["gemini"],
    },
}


ENV_FIELD_MAP = {
    "model": "MODEL",
    "base_url": "BASE_URL",
    "api_key_env_var": "API_KEY_ENV",
}


_FILE_CACHE: Optional[Dict[str, Any]] = None


def _load_external_config() -> Dict[str, Any]:
    """Load (once) the file named by ``PROVIDERS_CONFIG_FILE``.

    JSON is tried first, then YAML when PyYAML is available. A missing file
    yields an empty mapping; an unparseable file raises ``ValueError``.
    """
    global _FILE_CACHE  # noqa: PLW0603 - documented module cache
    if _FILE_CACHE is not None:
        return _FILE_CACHE
    path = os.getenv("PROVIDERS_CONFIG_FILE")
    if not path or not Path(path).exists():
        _FILE_CACHE = {}
        return _FILE_CACHE
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except ValueError as json_exc:
        if yaml is None:
            raise ValueError(f"config file {path} is not valid JSON and PyYAML is not installed") from json_exc
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"config file {path} is neither valid JSON nor YAML") from exc
    if not isinstance(data, dict):
        raise ValueError(f"config file {path} must contain a mapping at the top level")
    _FILE_CACHE = data
    return data


def reset_config_cache() -> None:
    """Forget the cached external config file (tests switch files at runtime)."""
    global _FILE_CACHE  # noqa: PLW0603
    _FILE_CACHE = None


def _env_overrides(provider: str) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    prefix = provider.upper()
    for field, suffix in ENV_FIELD_MAP.items():
        val = os.getenv(f"{prefix}_{suffix}")
        if val:
            out[field] = val
    return out


def get_provider_config(provider: str, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return merged configuration for a provider.

    Merge order (later wins): defaults -> external config -> env vars -> overrides.
    ``None`` values in ``overrides`` are ignored.
    """
    name = (provider or "").lower().strip()
    cfg: Dict[str, Any] = {}

    cfg |= DEFAULTS.get(name, {})

    file_cfg = _load_external_config().get(name)
    if isinstance(file_cfg, dict):
        cfg |= file_cfg

    cfg |= _env_overrides(name)

    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}

    return cfg


def get_model(provider: str) -> Optional[str]:
    return get_provider_config(provider).get("model")


__all__ = [
    "get_provider_config",
    "get_model",
    "reset_config_cache",
    "DEFAULTS",
]
