"""
Provider-agnostic interfaces (Protocols) for the providers layer.

Re-exports the single-class modules under
``relay_providers.base.interfaces_parts``.
"""

from __future__ import annotations

from .interfaces_parts import LLMProvider, SupportsStreaming, streaming_supported

__all__ = [
    "LLMProvider",
    "SupportsStreaming",
    "streaming_supported",
]
