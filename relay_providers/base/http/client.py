"""Async HTTP client construction for provider adapters.

Purpose:
    Build ``httpx.AsyncClient`` instances with timeouts derived from
    :func:`get_timeout_config` so adapters never hard-code numeric timeouts.

External dependencies:
    - ``httpx`` for the underlying async HTTP client.

Lifecycle:
    Adapters own the client they create and close it through ``aclose()``.
    Callers may inject a shared client instead, in which case they own it.
    Tests inject ``httpx.MockTransport`` through ``transport``.
"""
from __future__ import annotations

from typing import Optional, Union

import httpx

from ..timeouts import get_timeout_config


def create_async_client(
    *,
    timeout: Optional[Union[float, httpx.Timeout]] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    base_url: Optional[str] = None,
) -> httpx.AsyncClient:
    """Return a new ``httpx.AsyncClient``.

    Parameters:
        timeout: Caller-supplied timeout. Defaults to the streaming profile of
            :func:`get_timeout_config` (longest read window), since the same
            client serves both plain and streamed calls. Plain calls pass a
            tighter per-request timeout.
        transport: Optional transport (e.g. ``httpx.MockTransport``).
        base_url: Optional base URL for relative requests.

    Returns:
        A fresh ``httpx.AsyncClient``.
    """
    if timeout is None:
        timeout = get_timeout_config().to_httpx(streaming=True)
    kwargs = {"timeout": timeout}
    if transport is not None:
        kwargs["transport"] = transport
    if base_url:
        kwargs["base_url"] = base_url
    return httpx.AsyncClient(**kwargs)


__all__ = ["create_async_client"]
