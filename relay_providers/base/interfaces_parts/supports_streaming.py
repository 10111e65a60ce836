"""SupportsStreaming Protocol (single-class module).

Capability marker for providers that can stream incremental deltas.
"""

from __future__ import annotations

from typing import Any, AsyncIterator, Protocol, runtime_checkable

from ..models import CompletionRequest
from ..streaming import StreamEvent


@runtime_checkable
class SupportsStreaming(Protocol):
    """Capability marker for providers that can stream incremental deltas.

    Implementations yield zero or more ``StreamDelta`` events then exactly one
    terminal ``StreamCompleted``. Errors are raised from the iterator.
    Closing the iterator early (``aclose()``) releases the connection.
    """

    def supports_streaming(self) -> bool:  # pragma: no cover - trivial
        """Return True if the provider can stream right now."""
        ...

    def complete_stream(self, request: CompletionRequest) -> AsyncIterator[StreamEvent]:  # pragma: no cover - interface
        """Stream a completion as delta events plus one terminal event."""
        ...


def streaming_supported(provider: Any) -> bool:
    """Return True when ``provider`` both implements and enables streaming."""
    if not isinstance(provider, SupportsStreaming):
        return False
    return bool(provider.supports_streaming())
