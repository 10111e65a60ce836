"""relay_providers.config.defaults
===============================

Central place for small, stable default values used across the
relay_providers package. These defaults can be overridden via environment
variables, an external configuration file or explicit arguments, but provide
sensible fallbacks for local development and tests.

This module intentionally avoids importing from other provider packages to
prevent circular dependencies. Only plain constants live here.
"""

from __future__ import annotations

# ---- Vendor endpoints and models ----

OPENAI_DEFAULT_MODEL = "gpt-4o"
OPENAI_DEFAULT_BASE_URL = "https://api.openai.com/v1"

ANTHROPIC_DEFAULT_MODEL = "claude-sonnet-4-20250514"
ANTHROPIC_DEFAULT_BASE_URL = "https://api.anthropic.com/v1"
# Value of the required ``anthropic-version`` header.
ANTHROPIC_API_VERSION = "2023-06-01"
# The Messages API requires max_tokens; used when the request leaves it unset.
ANTHROPIC_DEFAULT_MAX_TOKENS = 4096

GEMINI_DEFAULT_MODEL = "gemini-2.0-flash"
GEMINI_DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


# ---- Retry / backoff ----

RETRY_DEFAULT_MAX_RETRIES = 2
RETRY_DEFAULT_INITIAL_DELAY_SECONDS = 0.5
RETRY_DEFAULT_MAX_DELAY_SECONDS = 4.0
RETRY_DEFAULT_BACKOFF_MULTIPLIER = 2.0


# ---- Circuit breaker ----

HEALTH_DEFAULT_FAILURE_THRESHOLD = 3
HEALTH_DEFAULT_RECOVERY_TIME_SECONDS = 30.0


# ---- Streaming ----

# Upper bound for one pending SSE frame (1 MiB).
SSE_MAX_FRAME_BYTES = 1024 * 1024
# Response bodies quoted in error messages are truncated to this many characters.
ERROR_BODY_MAX_CHARS = 2000
