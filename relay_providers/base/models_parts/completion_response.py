"""
CompletionResponse DTO representing normalized provider responses.

``finish_reason`` is reduced to three values. Adapters force ``tool_calls``
whenever the message carries at least one tool call, whatever the vendor said.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional

from .message import Message
from .token_usage import TokenUsage


FinishReason = Literal["stop", "length", "tool_calls"]


@dataclass
class CompletionResponse:
    """Provider-agnostic result of one completion.

    Attributes:
        message: The assistant message (``role == "assistant"``).
        finish_reason: ``"stop"``, ``"length"`` or ``"tool_calls"``.
        usage: Vendor-reported token usage, when available.
    """

    message: Message
    finish_reason: FinishReason = "stop"
    usage: Optional[TokenUsage] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "content": self.message.content,
            "tool_calls": [tc.to_dict() for tc in self.message.tool_calls or []] or None,
            "finish_reason": self.finish_reason,
            "usage": self.usage.to_dict() if self.usage else None,
        }


__all__ = ["CompletionResponse", "FinishReason"]
