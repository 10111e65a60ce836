"""Pydantic models of the Anthropic Messages wire format.

Streaming events are tagged by ``type``; ``STREAM_EVENT_TYPES`` maps each tag
the adapter interprets to its model. Other tags (``ping``,
``content_block_stop``, ``message_stop``) validate as :class:`OtherEvent`.
"""
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Type

from pydantic import BaseModel, ConfigDict, Field


class _Wire(BaseModel):
    model_config = ConfigDict(extra="ignore")


class ContentBlock(_Wire):
    type: str
    text: Optional[str] = None
    id: Optional[str] = None
    name: Optional[str] = None
    input: Optional[Dict[str, Any]] = None


class Usage(_Wire):
    input_tokens: int = 0
    output_tokens: int = 0


class MessageResponse(_Wire):
    id: Optional[str] = None
    role: str = "assistant"
    content: List[ContentBlock]
    stop_reason: Optional[str] = None
    usage: Optional[Usage] = None


class MessageStart(_Wire):
    id: Optional[str] = None
    usage: Optional[Usage] = None


class BlockDelta(_Wire):
    type: str
    text: Optional[str] = None
    partial_json: Optional[str] = None


class MessageDelta(_Wire):
    stop_reason: Optional[str] = None


class DeltaUsage(_Wire):
    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None


class ErrorBody(_Wire):
    type: str = "api_error"
    message: str = ""


class MessageStartEvent(_Wire):
    type: Literal["message_start"]
    message: MessageStart


class ContentBlockStartEvent(_Wire):
    type: Literal["content_block_start"]
    index: int
    content_block: ContentBlock


class ContentBlockDeltaEvent(_Wire):
    type: Literal["content_block_delta"]
    index: int
    delta: BlockDelta


class MessageDeltaEvent(_Wire):
    type: Literal["message_delta"]
    delta: MessageDelta = Field(default_factory=MessageDelta)
    usage: Optional[DeltaUsage] = None


class ErrorEvent(_Wire):
    type: Literal["error"]
    error: ErrorBody


class OtherEvent(_Wire):
    type: str


STREAM_EVENT_TYPES: Dict[str, Type[_Wire]] = {
    "message_start": MessageStartEvent,
    "content_block_start": ContentBlockStartEvent,
    "content_block_delta": ContentBlockDeltaEvent,
    "message_delta": MessageDeltaEvent,
    "error": ErrorEvent,
}


__all__ = [
    "ContentBlock",
    "Usage",
    "MessageResponse",
    "MessageStartEvent",
    "ContentBlockStartEvent",
    "ContentBlockDeltaEvent",
    "MessageDeltaEvent",
    "ErrorEvent",
    "OtherEvent",
    "STREAM_EVENT_TYPES",
]
