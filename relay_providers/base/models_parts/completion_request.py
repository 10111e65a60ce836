"""
CompletionRequest DTO for provider-agnostic completion invocations.

``model`` serves twice: the fallback chain routes on it, and adapters send it
as the vendor model identifier.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .message import Message
from .tool_spec import ToolSpec


@dataclass
class CompletionRequest:
    """Normalized completion request sent to provider adapters.

    Attributes:
        model: Target model identifier (also used for routing).
        messages: Ordered conversation.
        tools: Optional capability declarations.
        max_tokens: Maximum tokens for the completion (adapter maps the name).
        temperature: Sampling temperature when supported.
    """

    model: str
    messages: List[Message]
    tools: Optional[List[ToolSpec]] = None
    max_tokens: Optional[int] = None
    temperature: Optional[float] = None

    def has_tools(self) -> bool:
        return bool(self.tools)

    def to_dict(self) -> Dict[str, Any]:
        """Return a compact JSON-serializable summary (for logging)."""
        return {
            "model": self.model,
            "messages": len(self.messages),
            "tools": [t.name for t in self.tools or []],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }


__all__ = ["CompletionRequest"]
