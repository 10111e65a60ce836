"""OpenAI provider package."""

from .client import OpenAIProvider
from .translation import build_body, format_messages, interpret_event, parse_response

__all__ = ["OpenAIProvider", "build_body", "format_messages", "interpret_event", "parse_response"]
