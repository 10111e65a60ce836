"""Vendor contract violation error.

Raised when a vendor payload does not have the shape an adapter requires (for
example no choice or candidate to parse). Never retried.
"""
from __future__ import annotations

from typing import Optional

from .error_code import ErrorCode
from .provider_error import ProviderError


class MalformedResponseError(ProviderError):
    """Vendor payload shape was unexpected."""

    def __init__(self, message: str, *, provider: str = "unknown", model: Optional[str] = None) -> None:
        super().__init__(
            code=ErrorCode.MALFORMED_RESPONSE,
            message=message,
            provider=provider,
            model=model,
            retryable=False,
        )


__all__ = ["MalformedResponseError"]
