"""HTTP utilities package for providers.

Exposes the async ``httpx`` client builder used by every adapter.
"""

from .client import create_async_client

__all__ = ["create_async_client"]
