"""Resilience package: retry/backoff, circuit-breaker health, fallback chain."""

from .retry import DEFAULT_RETRY_CONFIG, AttemptLogger, RetryConfig, execute, parse_retry_after
from .health import CircuitState, HealthConfig, ProviderHealthSnapshot, ProviderHealthTracker
from .fallback import FallbackProvider, ProviderEntry

__all__ = [
    "AttemptLogger",
    "RetryConfig",
    "DEFAULT_RETRY_CONFIG",
    "execute",
    "parse_retry_after",
    "CircuitState",
    "HealthConfig",
    "ProviderHealthSnapshot",
    "ProviderHealthTracker",
    "ProviderEntry",
    "FallbackProvider",
]
