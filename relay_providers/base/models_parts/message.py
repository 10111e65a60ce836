"""
Message DTO used across providers.

Defines the vendor-neutral `Message` dataclass and the `Role` literal. Plain
``content`` is always present (possibly empty); multimodal ``content_parts``,
assistant ``tool_calls`` and tool-result attribution (``name`` /
``tool_call_id``) are optional.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal, Optional

from .content_part import ContentPart
from .tool_call import ToolCall


# Message roles used across providers.
Role = Literal["system", "user", "assistant", "tool"]

_ROLES = ("system", "user", "assistant", "tool")


@dataclass
class Message:
    """A chat message in the vendor-neutral conversation model.

    Attributes:
        role: Author role (``"system"``, ``"user"``, ``"assistant"`` or ``"tool"``).
        content: Plain text content. May be empty when only tool calls are present.
        content_parts: Optional ordered multimodal parts (text or image reference).
        tool_calls: Tool invocations requested by an assistant message.
        name: Tool name answered by a tool-role message.
        tool_call_id: Id of the assistant tool call a tool-role message answers.

    Raises:
        ValueError: On an unknown role, or ``tool_calls`` on a non-assistant
            message.
    """

    role: Role
    content: str = ""
    content_parts: Optional[List[ContentPart]] = None
    tool_calls: Optional[List[ToolCall]] = None
    name: Optional[str] = None
    tool_call_id: Optional[str] = None

    def __post_init__(self) -> None:
        if self.role not in _ROLES:
            raise ValueError(f"unknown message role: {self.role!r}")
        if self.tool_calls and self.role != "assistant":
            raise ValueError("tool_calls are only valid on assistant messages")

    @classmethod
    def system(cls, content: str) -> "Message":
        return cls(role="system", content=content)

    @classmethod
    def user(cls, content: str = "", parts: Optional[List[ContentPart]] = None) -> "Message":
        return cls(role="user", content=content, content_parts=parts)

    @classmethod
    def assistant(cls, content: str = "", tool_calls: Optional[List[ToolCall]] = None) -> "Message":
        return cls(role="assistant", content=content, tool_calls=tool_calls or None)

    @classmethod
    def tool(cls, content: str, *, tool_call_id: Optional[str] = None, name: Optional[str] = None) -> "Message":
        return cls(role="tool", content=content, tool_call_id=tool_call_id, name=name)

    def has_parts(self) -> bool:
        """Return True if the message carries non-empty multimodal parts."""
        return bool(self.content_parts)

    def text_or_joined(self) -> str:
        """Return a flattened string representation of the message content.

        Plain ``content`` wins when no parts are present. With parts, text
        values and image placeholders are joined by newlines.
        """
        if not self.has_parts():
            return self.content
        return "\n".join(p.placeholder_text() for p in self.content_parts)

    def tool_result_label(self) -> str:
        """Name attribution for a tool result: ``name``, then id, then ``"unknown"``."""
        return self.name or self.tool_call_id or "unknown"

    def tool_result_id(self) -> str:
        """Id attribution for a tool result: id, then ``name``, then ``"unknown"``."""
        return self.tool_call_id or self.name or "unknown"


__all__ = [
    "Message",
    "Role",
]
