"""AnthropicProvider adapter.

Speaks the Messages REST API (``POST {base_url}/messages``) with
``x-api-key`` authentication and the pinned ``anthropic-version`` header.
Streaming uses the typed SSE events (``message_start``,
``content_block_start``, ``content_block_delta``, ``message_delta``,
``message_stop``, ``error``).
"""

from __future__ import annotations

from typing import Any, Dict, Iterable

from ..base.http_style import BaseHttpProvider
from ..base.models import CompletionRequest, CompletionResponse
from ..base.streaming import StreamAccumulator
from ..config.defaults import ANTHROPIC_API_VERSION, ANTHROPIC_DEFAULT_BASE_URL, ANTHROPIC_DEFAULT_MODEL
from . import translation


class AnthropicProvider(BaseHttpProvider):
    """Adapter for the Anthropic Messages API."""

    provider_name = "anthropic"
    default_base_url = ANTHROPIC_DEFAULT_BASE_URL
    default_model = ANTHROPIC_DEFAULT_MODEL

    def endpoint(self, model: str, *, stream: bool) -> str:
        return f"{self.base_url}/messages"

    def auth_headers(self, api_key: str) -> Dict[str, str]:
        return {"x-api-key": api_key, "anthropic-version": ANTHROPIC_API_VERSION}

    def build_body(self, request: CompletionRequest, model: str, *, stream: bool) -> Dict[str, Any]:
        return translation.build_body(request, model, stream=stream)

    def parse_response(self, payload: Any, model: str) -> CompletionResponse:
        return translation.parse_response(payload, provider=self.name, model=model)

    def interpret_event(self, acc: StreamAccumulator, payload: Any, model: str) -> Iterable[str]:
        return translation.interpret_event(acc, payload, provider=self.name, model=model)


__all__ = ["AnthropicProvider"]
