"""OpenAIProvider adapter.

Speaks the Chat Completions REST API (``POST {base_url}/chat/completions``)
with bearer authentication. Any OpenAI-compatible endpoint works through
``base_url`` and ``api_key_env_var``; the factory builds such adapters for
unknown provider names that come with a base URL.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable

from ..base.http_style import BaseHttpProvider
from ..base.models import CompletionRequest, CompletionResponse
from ..base.streaming import StreamAccumulator
from ..config.defaults import OPENAI_DEFAULT_BASE_URL, OPENAI_DEFAULT_MODEL
from . import translation


class OpenAIProvider(BaseHttpProvider):
    """Adapter for OpenAI and OpenAI-compatible chat completion endpoints."""

    provider_name = "openai"
    default_base_url = OPENAI_DEFAULT_BASE_URL
    default_model = OPENAI_DEFAULT_MODEL

    def endpoint(self, model: str, *, stream: bool) -> str:
        return f"{self.base_url}/chat/completions"

    def auth_headers(self, api_key: str) -> Dict[str, str]:
        return {"authorization": f"Bearer {api_key}"}

    def build_body(self, request: CompletionRequest, model: str, *, stream: bool) -> Dict[str, Any]:
        return translation.build_body(request, model, stream=stream)

    def parse_response(self, payload: Any, model: str) -> CompletionResponse:
        return translation.parse_response(payload, provider=self.name, model=model)

    def interpret_event(self, acc: StreamAccumulator, payload: Any, model: str) -> Iterable[str]:
        return translation.interpret_event(acc, payload, provider=self.name, model=model)


__all__ = ["OpenAIProvider"]
