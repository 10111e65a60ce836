"""Retries-exhausted error for transient conditions.

Raised by the retry executor after the final attempt still hit a retryable
condition (HTTP 429/5xx or a network-level exception). It carries the last
observed condition: the HTTP status and body, or the transport exception in
``raw`` when no response was received.
"""
from __future__ import annotations

from typing import Optional

from .error_code import ErrorCode
from .provider_error import ProviderError


class RetryableProviderError(ProviderError):
    """Transient failure that persisted through every retry attempt.

    Attributes:
        status_code: Last HTTP status observed, or ``None`` for network errors.
        response_body: Last response body observed (empty for network errors).
        attempts: Number of calls made before giving up.
        retry_after: Last vendor-advertised ``Retry-After`` delay in seconds.
    """

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode = ErrorCode.TRANSIENT,
        status_code: Optional[int] = None,
        response_body: str = "",
        attempts: int = 1,
        retry_after: Optional[float] = None,
        provider: str = "unknown",
        model: Optional[str] = None,
        raw: Optional[BaseException] = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            provider=provider,
            model=model,
            retryable=True,
            raw=raw,
        )
        self.status_code = status_code
        self.response_body = response_body
        self.attempts = attempts
        self.retry_after = retry_after


__all__ = ["RetryableProviderError"]
