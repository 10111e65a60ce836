"""relay_providers.config.env
==========================

Centralized environment variable mapping and helpers for provider credentials.

Design Notes
------------
- Canonical mapping is defined in ``ENV_MAP``. Gemini accepts two variable
  names; ``ENV_ALIASES`` lists them with the canonical name first.
- ``resolve_secret`` never raises; ``require_secret`` raises
  :class:`MissingCredentialError` so adapters fail before any network I/O.
- Secret values are never logged.
"""

from __future__ import annotations

import os
from typing import Dict, Iterable, Optional, Tuple

from ..base.errors_parts.missing_credential_error import MissingCredentialError

# Canonical provider -> env var mapping
ENV_MAP: Dict[str, str] = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "gemini": "GEMINI_API_KEY",
}


# Provider -> ordered tuple of acceptable env var names (canonical first)
ENV_ALIASES: Dict[str, Tuple[str, ...]] = {
    "gemini": ("GEMINI_API_KEY", "GOOGLE_API_KEY"),
}


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if the value looks like a placeholder rather than a key.

    Heuristics (case-insensitive): contains ``placeholder``, ``changeme`` or
    ``your-api-key``.
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return "placeholder" in v or "changeme" in v or "your-api-key" in v


def get_env_var_name(provider: str) -> Optional[str]:
    """Return the canonical environment variable name for a provider, if known."""
    return ENV_MAP.get(provider.lower()) if provider else None


def get_env_var_candidates(provider: str) -> Iterable[str]:
    """Yield acceptable environment variable names, canonical first."""
    p = (provider or "").lower()
    canonical = ENV_MAP.get(p)
    if canonical:
        yield canonical
    for alias in ENV_ALIASES.get(p, ()):
        if alias != canonical:
            yield alias


def resolve_secret(provider: str, env_var: Optional[str] = None) -> Tuple[Optional[str], Optional[str]]:
    """Resolve a credential from the process environment.

    Parameters
    ----------
    provider: str
        Provider identifier (case-insensitive); selects candidate names when
        ``env_var`` is not given.
    env_var: Optional[str]
        Explicit variable name. When set, only this variable is consulted.

    Returns
    -------
    Tuple[Optional[str], Optional[str]]
        ``(value, env_var_used)``. Whitespace-only values count as missing.
        A real value wins over a placeholder found earlier in the candidate
        order. ``(None, None)`` when nothing is set.
    """
    names = [env_var] if env_var else list(get_env_var_candidates(provider))
    fallback: Tuple[Optional[str], Optional[str]] = (None, None)
    for name in names:
        val = (os.environ.get(name) or "").strip()
        if not val:
            continue
        if not is_placeholder(val):
            return val, name
        if fallback[0] is None:
            fallback = (val, name)
    return fallback


def require_secret(provider: str, env_var: Optional[str] = None, *, model: Optional[str] = None) -> str:
    """Return the credential for ``provider`` or raise ``MissingCredentialError``.

    The error names the variable that was expected (``env_var`` or the
    canonical name for the provider).
    """
    value, _ = resolve_secret(provider, env_var)
    if value:
        return value
    expected = env_var or get_env_var_name(provider) or f"{(provider or 'unknown').upper()}_API_KEY"
    raise MissingCredentialError(expected, provider=provider, model=model)


__all__ = [
    "ENV_MAP",
    "ENV_ALIASES",
    "is_placeholder",
    "get_env_var_name",
    "get_env_var_candidates",
    "resolve_secret",
    "require_secret",
]
