"""Unified timeout values for provider HTTP exchanges.

TimeoutConfig
    Dataclass capturing normalized timeout values (seconds).

get_timeout_config()
    Returns a process-cached configuration, parsing environment overrides on
    first use and again only when one of them changes. Supported environment
    variables (all optional, positive floats):
        PT_TIMEOUT_HTTP_SECONDS
        PT_TIMEOUT_CONNECT_SECONDS
        PT_TIMEOUT_STREAM_SECONDS

A timeout surfaces as ``httpx.TimeoutException``, which the retry executor
treats as a network failure and the health tracker counts as a failed attempt.
"""
from __future__ import annotations

import os
from dataclasses import dataclass

import httpx


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        http_timeout_seconds: Read/write/pool timeout for non-streaming calls.
        connect_timeout_seconds: Connection establishment timeout.
        stream_timeout_seconds: Idle read timeout between streamed chunks.
    """

    http_timeout_seconds: float = 60.0
    connect_timeout_seconds: float = 10.0
    stream_timeout_seconds: float = 120.0

    def to_httpx(self, *, streaming: bool = False) -> httpx.Timeout:
        """Return an ``httpx.Timeout`` for a plain or streaming exchange."""
        read = self.stream_timeout_seconds if streaming else self.http_timeout_seconds
        return httpx.Timeout(self.http_timeout_seconds, connect=self.connect_timeout_seconds, read=read)


_ENV_VARS = (
    "PT_TIMEOUT_HTTP_SECONDS",
    "PT_TIMEOUT_CONNECT_SECONDS",
    "PT_TIMEOUT_STREAM_SECONDS",
)

_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None


def _parse_env_float(name: str, default: float) -> float:
    """Read ``name`` as a positive float, falling back to ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached :class:`TimeoutConfig`.

    The cache is refreshed when any ``PT_TIMEOUT_*`` variable changes so tests
    can adjust values with ``monkeypatch.setenv``.
    """
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    guard = "/".join(os.getenv(name, "") for name in _ENV_VARS)
    if _CACHED is not None and _ENV_GUARD == guard:
        return _CACHED
    defaults = TimeoutConfig()
    _CACHED = TimeoutConfig(
        http_timeout_seconds=_parse_env_float("PT_TIMEOUT_HTTP_SECONDS", defaults.http_timeout_seconds),
        connect_timeout_seconds=_parse_env_float("PT_TIMEOUT_CONNECT_SECONDS", defaults.connect_timeout_seconds),
        stream_timeout_seconds=_parse_env_float("PT_TIMEOUT_STREAM_SECONDS", defaults.stream_timeout_seconds),
    )
    _ENV_GUARD = guard
    return _CACHED


__all__ = ["TimeoutConfig", "get_timeout_config"]
