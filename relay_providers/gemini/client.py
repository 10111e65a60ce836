"""GeminiProvider adapter.

Speaks the Generative Language REST API:
``POST {base_url}/models/{model}:generateContent`` and
``:streamGenerateContent?alt=sse`` for streaming. The key travels in the
``x-goog-api-key`` header rather than the query string so it never lands in
URL logs. Both ``GEMINI_API_KEY`` and ``GOOGLE_API_KEY`` are accepted.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable

from ..base.http_style import BaseHttpProvider
from ..base.models import CompletionRequest, CompletionResponse
from ..base.streaming import StreamAccumulator
from ..config.defaults import GEMINI_DEFAULT_BASE_URL, GEMINI_DEFAULT_MODEL
from . import translation


class GeminiProvider(BaseHttpProvider):
    """Adapter for Google Gemini models."""

    provider_name = "gemini"
    default_base_url = GEMINI_DEFAULT_BASE_URL
    default_model = GEMINI_DEFAULT_MODEL

    def endpoint(self, model: str, *, stream: bool) -> str:
        if stream:
            return f"{self.base_url}/models/{model}:streamGenerateContent?alt=sse"
        return f"{self.base_url}/models/{model}:generateContent"

    def auth_headers(self, api_key: str) -> Dict[str, str]:
        return {"x-goog-api-key": api_key}

    def build_body(self, request: CompletionRequest, model: str, *, stream: bool) -> Dict[str, Any]:
        return translation.build_body(request, model, stream=stream)

    def parse_response(self, payload: Any, model: str) -> CompletionResponse:
        return translation.parse_response(payload, provider=self.name, model=model)

    def interpret_event(self, acc: StreamAccumulator, payload: Any, model: str) -> Iterable[str]:
        return translation.interpret_event(acc, payload, provider=self.name, model=model)


__all__ = ["GeminiProvider"]
