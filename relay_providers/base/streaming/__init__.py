"""Streaming package for the provider layer.

Exposes the stream event types, the SSE frame parser and the per-call
accumulator under a single namespace.
"""

from .streaming import StreamCompleted, StreamDelta, StreamEvent, collect_stream
from .accumulator import StreamAccumulator
from .sse import DONE_SENTINEL, SSEFrameParser, iter_sse_payloads

__all__ = [
    "StreamDelta",
    "StreamCompleted",
    "StreamEvent",
    "collect_stream",
    "StreamAccumulator",
    "SSEFrameParser",
    "iter_sse_payloads",
    "DONE_SENTINEL",
]
