"""LLMProvider Protocol (single-class module).

Defines the minimal completion contract every adapter and the fallback chain
implement.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..models import CompletionRequest, CompletionResponse


@runtime_checkable
class LLMProvider(Protocol):
    """Minimal interface for Large Language Model providers.

    Implementations map ``CompletionRequest`` onto their vendor wire format,
    normalize results to ``CompletionResponse`` and never leak vendor payloads
    upstream. Failures are raised as ``ProviderError`` subclasses.
    """

    @property
    def name(self) -> str:
        """Provider identifier used for health tracking and logs."""
        ...

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """Execute a single non-streaming completion."""
        ...
