"""Streaming primitives for the provider layer.

A stream is an async iterator of :data:`StreamEvent` values: zero or more
:class:`StreamDelta` text fragments followed by exactly one terminal
:class:`StreamCompleted` carrying the final :class:`CompletionResponse`.
Errors are raised from the iterator, never encoded as events.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import AsyncIterable, Optional, Union

from ..errors import StreamTerminationError
from ..models import CompletionResponse


@dataclass(frozen=True)
class StreamDelta:
    """Incremental text fragment. Tool-call data is never exposed mid-stream."""

    content: str


@dataclass(frozen=True)
class StreamCompleted:
    """Terminal event carrying the synthesized final response."""

    response: CompletionResponse


StreamEvent = Union[StreamDelta, StreamCompleted]


async def collect_stream(events: AsyncIterable[StreamEvent], *, provider: str = "unknown", model: Optional[str] = None) -> CompletionResponse:
    """Drain a stream and return the terminal response.

    Contract:
        - Consumes every event and returns the response carried by
          :class:`StreamCompleted`.
        - Raises :class:`StreamTerminationError` if the iterator ends without
          a terminal event or yields anything after it.
    """
    final: Optional[CompletionResponse] = None
    async for event in events:
        if final is not None:
            raise StreamTerminationError("stream yielded events after completion", provider=provider, model=model)
        if isinstance(event, StreamCompleted):
            final = event.response
    if final is None:
        raise StreamTerminationError("stream ended without a completion event", provider=provider, model=model)
    return final


__all__ = [
    "StreamDelta",
    "StreamCompleted",
    "StreamEvent",
    "collect_stream",
]
