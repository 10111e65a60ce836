"""Gemini provider package."""

from .client import GeminiProvider
from .translation import build_body, format_messages, interpret_event, parse_response

__all__ = ["GeminiProvider", "build_body", "format_messages", "interpret_event", "parse_response"]
