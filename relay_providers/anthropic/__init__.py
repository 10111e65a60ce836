"""Anthropic provider package."""

from .client import AnthropicProvider
from .translation import build_body, format_messages, interpret_event, parse_response

__all__ = ["AnthropicProvider", "build_body", "format_messages", "interpret_event", "parse_response"]
