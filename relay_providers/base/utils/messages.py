"""Message extraction helpers shared across providers.

Helpers here are side-effect free and operate on provider-agnostic DTOs only.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from ..errors import ErrorCode, ProviderError
from ..models import Message, ToolCall


def split_system(messages: List[Message]) -> Tuple[List[str], List[Message]]:
    """Separate system instructions from the conversation turns.

    Returns
    - ``(system_texts, turns)``: flattened text of every ``system`` message
      in order (empty ones dropped) and all other messages, order preserved.
    """
    system: List[str] = []
    turns: List[Message] = []
    for m in messages:
        if m.role == "system":
            if text := m.text_or_joined():
                system.append(text)
        else:
            turns.append(m)
    return system, turns


def join_system(messages: List[Message], separator: str) -> Tuple[Optional[str], List[Message]]:
    """Like :func:`split_system` but joins the system texts (``None`` when absent)."""
    system, turns = split_system(messages)
    return (separator.join(system) if system else None), turns


def tool_arguments(call: ToolCall, *, provider: str, model: Optional[str] = None) -> Dict[str, Any]:
    """Decode a tool call's raw JSON arguments for vendors that want an object.

    Empty arguments decode to ``{}``. Invalid JSON or a non-object value
    raises ``ProviderError`` with code ``validation`` before any request is sent.
    """
    try:
        return call.parsed_arguments()
    except ValueError as exc:
        raise ProviderError(
            code=ErrorCode.VALIDATION,
            message=f"tool call {call.id or call.name!r} has invalid JSON arguments: {exc}",
            provider=provider,
            model=model,
            raw=exc,
        ) from exc


__all__ = ["split_system", "join_system", "tool_arguments"]
