"""Non-retryable HTTP status error.

Raised by the retry executor as soon as a vendor answers with a non-2xx status
that is neither 429 nor 5xx. The normalized code is derived from the status.
"""
from __future__ import annotations

from typing import Optional

from .error_code import ErrorCode
from .provider_error import ProviderError


class ProviderHttpError(ProviderError):
    """Vendor returned a non-retryable HTTP status.

    Attributes:
        status_code: HTTP status returned by the vendor.
        response_body: Decoded response body (may be truncated by the caller).
    """

    def __init__(
        self,
        status_code: int,
        response_body: str = "",
        *,
        code: ErrorCode = ErrorCode.UNKNOWN,
        provider: str = "unknown",
        model: Optional[str] = None,
    ) -> None:
        super().__init__(
            code=code,
            message=f"Provider returned {status_code}: {response_body}",
            provider=provider,
            model=model,
            retryable=False,
        )
        self.status_code = status_code
        self.response_body = response_body


__all__ = ["ProviderHttpError"]
