"""Server-sent events frame parser.

Turns an async byte stream into decoded JSON payloads, one per frame.

Framing rules:
    - Lines end with ``\\n``, ``\\r\\n`` or a bare ``\\r``; a blank line
      dispatches the pending frame.
    - ``data:`` lines accumulate (joined with ``\\n``); one leading space
      after the colon is stripped.
    - Comment lines (leading ``:``) and other fields (``event:``, ``id:``,
      ``retry:``) are ignored; vendors repeat the event type in the payload.
    - ``[DONE]`` ends the stream. Payloads that are not JSON are skipped.
    - A frame left pending when the byte stream ends is discarded.

The parser is vendor-agnostic and holds no state beyond the current frame.
"""
from __future__ import annotations

import json
import logging
from typing import Any, AsyncIterable, AsyncIterator, List, Optional

from ...config.defaults import SSE_MAX_FRAME_BYTES
from ..errors import StreamBufferOverflowError, StreamTerminationError
from ..logging import get_logger, log_event

DONE_SENTINEL = "[DONE]"

_logger = get_logger("providers.sse")


class SSEFrameParser:
    """Incremental SSE parser fed with raw byte chunks.

    Parameters:
        max_frame_bytes: Upper bound on bytes buffered for one pending frame
            (partial line plus accumulated ``data`` lines).
        provider / model: Attribution for raised errors.
    """

    def __init__(self, max_frame_bytes: int = SSE_MAX_FRAME_BYTES, *, provider: str = "unknown", model: Optional[str] = None) -> None:
        self.max_frame_bytes = max_frame_bytes
        self.provider = provider
        self.model = model
        self.done = False
        self._line = bytearray()
        self._data: List[str] = []
        self._data_bytes = 0
        self._pending_cr = False

    def feed(self, chunk: bytes) -> List[Any]:
        """Consume one chunk and return the payloads of every completed frame."""
        payloads: List[Any] = []
        if self.done:
            return payloads
        for line in self._split_lines(chunk):
            if not line:
                self._dispatch(payloads)
                if self.done:
                    break
                continue
            self._field(line)
        if self._data_bytes + len(self._line) > self.max_frame_bytes:
            raise StreamBufferOverflowError(self.max_frame_bytes, provider=self.provider, model=self.model)
        return payloads

    def _split_lines(self, chunk: bytes) -> List[str]:
        lines: List[str] = []
        for byte in chunk:
            if self._pending_cr:
                self._pending_cr = False
                if byte == 0x0A:
                    continue
            if byte in (0x0A, 0x0D):
                self._pending_cr = byte == 0x0D
                lines.append(self._line.decode("utf-8", errors="replace"))
                self._line.clear()
                continue
            self._line.append(byte)
        return lines

    def _field(self, line: str) -> None:
        if line.startswith(":"):
            return
        name, sep, value = line.partition(":")
        if not sep or name != "data":
            return
        if value.startswith(" "):
            value = value[1:]
        self._data.append(value)
        self._data_bytes += len(value) + 1
        if self._data_bytes > self.max_frame_bytes:
            raise StreamBufferOverflowError(self.max_frame_bytes, provider=self.provider, model=self.model)

    def _dispatch(self, payloads: List[Any]) -> None:
        if not self._data:
            return
        data = "\n".join(self._data)
        self._data = []
        self._data_bytes = 0
        if data.strip() == DONE_SENTINEL:
            self.done = True
            return
        try:
            payloads.append(json.loads(data))
        except ValueError:
            log_event(
                _logger,
                "sse.skip",
                level=logging.DEBUG,
                provider=self.provider,
                model=self.model,
                reason="non_json_payload",
                size=len(data),
            )


async def iter_sse_payloads(
    chunks: AsyncIterable[bytes],
    *,
    max_frame_bytes: int = SSE_MAX_FRAME_BYTES,
    provider: str = "unknown",
    model: Optional[str] = None,
) -> AsyncIterator[Any]:
    """Yield decoded JSON payloads from an async byte stream.

    Raises:
        StreamTerminationError: The byte stream ended without producing a byte.
        StreamBufferOverflowError: A pending frame exceeded ``max_frame_bytes``.
    """
    parser = SSEFrameParser(max_frame_bytes, provider=provider, model=model)
    received = False
    async for chunk in chunks:
        if not chunk:
            continue
        received = True
        for payload in parser.feed(chunk):
            yield payload
        if parser.done:
            return
    if not received:
        raise StreamTerminationError("stream body was empty", provider=provider, model=model)


__all__ = ["SSEFrameParser", "iter_sse_payloads", "DONE_SENTINEL"]
