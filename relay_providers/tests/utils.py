"""Shared helpers for provider tests (SSE bodies, recording transports)."""
from __future__ import annotations

import json
from typing import Any, AsyncIterator, Callable, Iterable, List

import httpx


def sse_body(*payloads: Any, done: bool = True, crlf: bool = False) -> bytes:
    """Encode payloads as ``data:`` frames, optionally ending with ``[DONE]``."""
    nl = "\r\n" if crlf else "\n"
    frames = [f"data: {p if isinstance(p, str) else json.dumps(p)}{nl}{nl}" for p in payloads]
    if done:
        frames.append(f"data: [DONE]{nl}{nl}")
    return "".join(frames).encode("utf-8")


async def aiter_chunks(chunks: Iterable[bytes]) -> AsyncIterator[bytes]:
    for chunk in chunks:
        yield chunk


class RecordingTransport(httpx.MockTransport):
    """``MockTransport`` that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: List[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)

    def json_body(self, index: int = -1) -> Any:
        return json.loads(self.requests[index].content.decode("utf-8"))


def respond_sequence(*responses: httpx.Response) -> Callable[[httpx.Request], httpx.Response]:
    """Handler returning ``responses`` in order, repeating the last one."""
    queue = list(responses)

    def _handler(request: httpx.Request) -> httpx.Response:
        if len(queue) > 1:
            return queue.pop(0)
        return queue[0]

    return _handler
