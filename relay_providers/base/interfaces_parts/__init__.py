"""Interfaces (Protocols) split into single-class modules.

``relay_providers.base.interfaces`` re-exports the stable API.
"""

from .llm_provider import LLMProvider
from .supports_streaming import SupportsStreaming, streaming_supported

__all__ = [
    "LLMProvider",
    "SupportsStreaming",
    "streaming_supported",
]
