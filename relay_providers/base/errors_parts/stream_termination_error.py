"""Streaming termination errors.

``StreamTerminationError`` is raised when a streaming response has no body to
read. ``StreamBufferOverflowError`` narrows it to a single pending frame that
grew past the parser's buffer limit without reaching a frame boundary.
"""
from __future__ import annotations

from typing import Optional

from .error_code import ErrorCode
from .provider_error import ProviderError


class StreamTerminationError(ProviderError):
    """Streaming response could not be consumed."""

    def __init__(self, message: str, *, provider: str = "unknown", model: Optional[str] = None) -> None:
        super().__init__(
            code=ErrorCode.STREAM_TERMINATED,
            message=message,
            provider=provider,
            model=model,
            retryable=False,
        )


class StreamBufferOverflowError(StreamTerminationError):
    """A pending SSE frame exceeded the configured buffer limit."""

    def __init__(self, limit: int, *, provider: str = "unknown", model: Optional[str] = None) -> None:
        super().__init__(
            f"SSE stream buffer exceeded {limit} bytes",
            provider=provider,
            model=model,
        )
        self.limit = limit


__all__ = ["StreamTerminationError", "StreamBufferOverflowError"]
