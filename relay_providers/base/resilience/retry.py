"""Retry/backoff executor for vendor HTTP exchanges.

``execute`` performs one HTTP exchange through a caller-supplied coroutine
factory and retries transient failures with capped exponential backoff:

- network-level exceptions (``httpx.TransportError``, timeouts included) and
  HTTP 429/5xx are retried;
- any other non-2xx status fails immediately with :class:`ProviderHttpError`;
- ``Retry-After`` (seconds or HTTP date) replaces the computed delay, still
  capped at ``max_delay_seconds``;
- when every attempt failed, :class:`RetryableProviderError` carries the last
  status/body, or the last exception in ``raw``.

The returned response may be unread (``client.send(..., stream=True)``); the
caller owns it and must close it. Failed responses are read and closed here.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Awaitable, Callable, Optional, Protocol

import httpx

from ...config.defaults import (
    ERROR_BODY_MAX_CHARS,
    RETRY_DEFAULT_BACKOFF_MULTIPLIER,
    RETRY_DEFAULT_INITIAL_DELAY_SECONDS,
    RETRY_DEFAULT_MAX_DELAY_SECONDS,
    RETRY_DEFAULT_MAX_RETRIES,
)
from ..errors import (
    ProviderHttpError,
    RetryableProviderError,
    classify_exception,
    code_for_status,
    is_retryable_status,
)
from ..logging import LogContext, get_logger, normalized_log_event

_logger = get_logger("providers.retry")

HttpCall = Callable[[], Awaitable[httpx.Response]]


class AttemptLogger(Protocol):  # pragma: no cover - structural protocol
    def __call__(
        self,
        *,
        attempt: int,
        max_attempts: int,
        delay: float | None,
        status_code: int | None,
        error: BaseException | None,
    ) -> None: ...


@dataclass(frozen=True)
class RetryConfig:
    """Backoff policy.

    ``max_retries`` counts retries after the first attempt, so a persistently
    failing call is made ``max_retries + 1`` times.
    """

    max_retries: int = RETRY_DEFAULT_MAX_RETRIES
    initial_delay_seconds: float = RETRY_DEFAULT_INITIAL_DELAY_SECONDS
    max_delay_seconds: float = RETRY_DEFAULT_MAX_DELAY_SECONDS
    backoff_multiplier: float = RETRY_DEFAULT_BACKOFF_MULTIPLIER
    attempt_logger: AttemptLogger | None = None

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.initial_delay_seconds < 0 or self.max_delay_seconds < 0:
            raise ValueError("retry delays must be >= 0")

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def delay_for(self, retry_index: int, retry_after: float | None = None) -> float:
        """Delay before retry number ``retry_index`` (0-based)."""
        if retry_after is not None:
            return min(retry_after, self.max_delay_seconds)
        delay = self.initial_delay_seconds * self.backoff_multiplier**retry_index
        return min(delay, self.max_delay_seconds)


DEFAULT_RETRY_CONFIG = RetryConfig()


def parse_retry_after(value: str | None, *, now: datetime | None = None) -> float | None:
    """Parse a ``Retry-After`` header into seconds.

    Accepts delta-seconds or an HTTP date. Non-positive or unparseable values
    yield ``None``.
    """
    if not value:
        return None
    value = value.strip()
    try:
        seconds = float(value)
    except ValueError:
        seconds = None
    if seconds is not None:
        return seconds if seconds > 0 else None
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    delta = (when - (now or datetime.now(timezone.utc))).total_seconds()
    return delta if delta > 0 else None


def _truncate(body: str) -> str:
    if len(body) <= ERROR_BODY_MAX_CHARS:
        return body
    return body[:ERROR_BODY_MAX_CHARS] + "..."


def _default_attempt_logger(provider: str, model: Optional[str]) -> AttemptLogger:
    ctx = LogContext(provider=provider, model=model)

    def _log(*, attempt: int, max_attempts: int, delay: float | None, status_code: int | None, error: BaseException | None) -> None:
        normalized_log_event(
            _logger,
            "retry.attempt",
            ctx,
            phase="retry",
            attempt=attempt,
            error_code=classify_exception(error).value if error is not None else None,
            emitted=False,
            level=logging.WARNING,
            max_attempts=max_attempts,
            delay=delay,
            status_code=status_code,
        )

    return _log


async def _read_failed(response: httpx.Response) -> str:
    try:
        await response.aread()
        return response.text
    finally:
        await response.aclose()


async def execute(
    http_call: HttpCall,
    config: RetryConfig = DEFAULT_RETRY_CONFIG,
    *,
    provider: str = "unknown",
    model: Optional[str] = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> httpx.Response:
    """Run ``http_call`` with retry and return the first 2xx response.

    Parameters:
        http_call: Zero-argument coroutine factory performing one exchange.
        config: Backoff policy.
        provider / model: Attribution for errors and log events.
        sleep: Awaitable sleep (injectable for tests).

    Raises:
        ProviderHttpError: Non-retryable non-2xx status (first occurrence).
        RetryableProviderError: Every attempt hit a retryable condition.
    """
    log_attempt = config.attempt_logger or _default_attempt_logger(provider, model)
    attempts = config.max_attempts
    for attempt in range(attempts):
        is_last = attempt == attempts - 1
        try:
            response = await http_call()
        except httpx.TransportError as exc:
            if is_last:
                raise RetryableProviderError(
                    f"Provider request failed after {attempts} attempts: {exc}",
                    code=classify_exception(exc),
                    attempts=attempts,
                    provider=provider,
                    model=model,
                    raw=exc,
                ) from exc
            delay = config.delay_for(attempt)
            log_attempt(attempt=attempt + 1, max_attempts=attempts, delay=delay, status_code=None, error=exc)
            await sleep(delay)
            continue

        if response.is_success:
            return response

        status = response.status_code
        body = _truncate(await _read_failed(response))
        if not is_retryable_status(status):
            raise ProviderHttpError(status, body, code=code_for_status(status), provider=provider, model=model)

        retry_after = parse_retry_after(response.headers.get("retry-after"))
        if is_last:
            raise RetryableProviderError(
                f"Provider returned {status}: {body}",
                code=code_for_status(status),
                status_code=status,
                response_body=body,
                attempts=attempts,
                retry_after=retry_after,
                provider=provider,
                model=model,
            )
        delay = config.delay_for(attempt, retry_after)
        log_attempt(attempt=attempt + 1, max_attempts=attempts, delay=delay, status_code=status, error=None)
        await sleep(delay)

    raise RuntimeError("retry: loop exited without a result")  # pragma: no cover


__all__ = [
    "AttemptLogger",
    "RetryConfig",
    "DEFAULT_RETRY_CONFIG",
    "parse_retry_after",
    "execute",
]
