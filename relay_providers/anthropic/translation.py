"""Anthropic Messages API translation helpers.

Rules:
- System messages go to the top-level ``system`` string, joined with blank
  lines.
- Assistant tool calls become ``tool_use`` blocks whose ``input`` is the
  decoded arguments object; empty text produces no text block.
- Each tool result becomes its own ``user`` turn holding one
  ``tool_result`` block keyed by ``tool_use_id``.
- Image parts degrade to ``[Image: <url>]`` text blocks.
- ``max_tokens`` is mandatory for this API and defaults to 4096.
"""
from __future__ import annotations

import json
from typing import Any, Dict, Iterable, List, Optional

from ..base.errors import ErrorCode, MalformedResponseError, ProviderError
from ..base.models import CompletionRequest, CompletionResponse, FinishReason, Message, TokenUsage, ToolCall
from ..base.streaming import StreamAccumulator
from ..base.utils.messages import join_system, tool_arguments
from ..base.utils.wire import validate_payload
from ..config.defaults import ANTHROPIC_DEFAULT_MAX_TOKENS
from .wire import (
    STREAM_EVENT_TYPES,
    ContentBlockDeltaEvent,
    ContentBlockStartEvent,
    ErrorEvent,
    MessageDeltaEvent,
    MessageResponse,
    MessageStartEvent,
    OtherEvent,
)

PROVIDER = "anthropic"

_ERROR_TYPE_CODES = {
    "invalid_request_error": ErrorCode.VALIDATION,
    "request_too_large": ErrorCode.VALIDATION,
    "authentication_error": ErrorCode.AUTH,
    "permission_error": ErrorCode.AUTH,
    "not_found_error": ErrorCode.NOT_FOUND,
    "rate_limit_error": ErrorCode.RATE_LIMIT,
    "api_error": ErrorCode.SERVER_ERROR,
    "overloaded_error": ErrorCode.UNAVAILABLE,
}
_RETRYABLE_ERROR_TYPES = {"rate_limit_error", "api_error", "overloaded_error"}


def _text_blocks(message: Message) -> Any:
    if not message.has_parts():
        return message.content
    return [{"type": "text", "text": part.placeholder_text()} for part in message.content_parts]


def _format_turn(message: Message, *, model: Optional[str]) -> Dict[str, Any]:
    if message.role == "tool":
        return {
            "role": "user",
            "content": [
                {
                    "type": "tool_result",
                    "tool_use_id": message.tool_result_id(),
                    "content": message.text_or_joined(),
                }
            ],
        }
    if message.role == "assistant" and message.tool_calls:
        blocks: List[Dict[str, Any]] = []
        if text := message.text_or_joined():
            blocks.append({"type": "text", "text": text})
        for tc in message.tool_calls:
            blocks.append(
                {
                    "type": "tool_use",
                    "id": tc.id,
                    "name": tc.name,
                    "input": tool_arguments(tc, provider=PROVIDER, model=model),
                }
            )
        return {"role": "assistant", "content": blocks}
    return {"role": message.role, "content": _text_blocks(message)}


def format_messages(messages: List[Message], *, model: Optional[str] = None) -> Dict[str, Any]:
    """Return ``{"system": ..., "messages": [...]}``; ``system`` only when present."""
    system, turns = join_system(messages, "\n\n")
    fragment: Dict[str, Any] = {"messages": [_format_turn(m, model=model) for m in turns]}
    if system is not None:
        fragment["system"] = system
    return fragment


def build_body(request: CompletionRequest, model: str, *, stream: bool = False) -> Dict[str, Any]:
    """Build the JSON body for ``POST /messages``."""
    body: Dict[str, Any] = {
        "model": model,
        "max_tokens": request.max_tokens or ANTHROPIC_DEFAULT_MAX_TOKENS,
    }
    body.update(format_messages(request.messages, model=model))
    if request.temperature is not None:
        body["temperature"] = request.temperature
    if request.tools:
        body["tools"] = [
            {"name": t.name, "description": t.description, "input_schema": t.parameters}
            for t in request.tools
        ]
    if stream:
        body["stream"] = True
    return body


def map_finish_reason(reason: Optional[str]) -> FinishReason:
    if reason == "tool_use":
        return "tool_calls"
    if reason == "max_tokens":
        return "length"
    return "stop"


def parse_response(payload: Any, *, provider: str = PROVIDER, model: Optional[str] = None) -> CompletionResponse:
    """Normalize a Messages API response.

    Text blocks are concatenated; ``tool_use`` blocks become tool calls with
    their ``input`` re-serialized as JSON text.
    """
    data = validate_payload(MessageResponse, payload, provider=provider, model=model)
    text = "".join(b.text or "" for b in data.content if b.type == "text")
    calls: List[ToolCall] = []
    for block in data.content:
        if block.type != "tool_use":
            continue
        if not block.id or not block.name:
            raise MalformedResponseError("tool_use block without id or name", provider=provider, model=model)
        calls.append(ToolCall(id=block.id, name=block.name, arguments=json.dumps(block.input or {})))
    usage = None
    if data.usage is not None:
        usage = TokenUsage.of(data.usage.input_tokens, data.usage.output_tokens)
    return CompletionResponse(
        message=Message(role="assistant", content=text, tool_calls=calls or None),
        finish_reason="tool_calls" if calls else map_finish_reason(data.stop_reason),
        usage=usage,
    )


def stream_error(event: ErrorEvent, *, provider: str, model: Optional[str]) -> ProviderError:
    """Translate an in-stream ``error`` event into a classified ``ProviderError``."""
    kind = event.error.type
    return ProviderError(
        code=_ERROR_TYPE_CODES.get(kind, ErrorCode.UNKNOWN),
        message=f"{kind}: {event.error.message}",
        provider=provider,
        model=model,
        retryable=kind in _RETRYABLE_ERROR_TYPES,
    )


def parse_stream_event(payload: Any, *, provider: str = PROVIDER, model: Optional[str] = None):
    """Validate one SSE payload against the model registered for its ``type``."""
    kind = payload.get("type") if isinstance(payload, dict) else None
    schema = STREAM_EVENT_TYPES.get(kind, OtherEvent) if isinstance(kind, str) else OtherEvent
    return validate_payload(schema, payload, provider=provider, model=model)


def interpret_event(acc: StreamAccumulator, payload: Any, *, provider: str = PROVIDER, model: Optional[str] = None) -> Iterable[str]:
    """Fold one streamed event into ``acc``; returns the new text fragments.

    Usage arrives split: prompt tokens on ``message_start``, completion tokens
    on the ``message_delta`` trailer.
    """
    event = parse_stream_event(payload, provider=provider, model=model)
    fragments: List[str] = []
    if isinstance(event, MessageStartEvent):
        if event.message.usage is not None:
            acc.set_usage(
                prompt_tokens=event.message.usage.input_tokens,
                completion_tokens=event.message.usage.output_tokens,
            )
    elif isinstance(event, ContentBlockStartEvent):
        block = event.content_block
        if block.type == "tool_use":
            acc.start_tool_call(event.index, id=block.id, name=block.name)
        elif block.type == "text" and (fragment := acc.append_text(block.text or "")):
            fragments.append(fragment)
    elif isinstance(event, ContentBlockDeltaEvent):
        delta = event.delta
        if delta.type == "text_delta" and (fragment := acc.append_text(delta.text or "")):
            fragments.append(fragment)
        elif delta.type == "input_json_delta" and delta.partial_json:
            acc.append_tool_arguments(event.index, delta.partial_json)
    elif isinstance(event, MessageDeltaEvent):
        if event.delta.stop_reason:
            acc.finish_reason = map_finish_reason(event.delta.stop_reason)
        if event.usage is not None:
            acc.set_usage(prompt_tokens=event.usage.input_tokens, completion_tokens=event.usage.output_tokens)
    elif isinstance(event, ErrorEvent):
        raise stream_error(event, provider=provider, model=model)
    return fragments


__all__ = [
    "format_messages",
    "build_body",
    "map_finish_reason",
    "parse_response",
    "parse_stream_event",
    "interpret_event",
]
