"""OpenAI Chat Completions translation helpers.

Pure functions mapping the vendor-neutral models to the OpenAI wire format
and back. No I/O happens here; ``OpenAIProvider`` wires them to HTTP.

Rules:
- System messages are joined (blank-line separated) into one leading
  ``system`` turn; OpenAI has no separate system field.
- Image parts stay native (``image_url`` content parts).
- Tool results are ``tool`` turns keyed by ``tool_call_id`` (falling back to
  ``name``, then ``"unknown"``), one turn per result.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from ..base.errors import ErrorCode, MalformedResponseError, ProviderError
from ..base.models import (
    CompletionRequest,
    CompletionResponse,
    FinishReason,
    Message,
    TokenUsage,
    ToolCall,
)
from ..base.streaming import StreamAccumulator
from ..base.utils.messages import join_system
from ..base.utils.wire import validate_payload
from .wire import ChatCompletion, ChatCompletionChunk, Usage

PROVIDER = "openai"


def _user_content(message: Message) -> Any:
    if not message.has_parts():
        return message.content
    parts: List[Dict[str, Any]] = []
    for part in message.content_parts:
        if part.type == "image_url":
            parts.append({"type": "image_url", "image_url": {"url": part.image_url or ""}})
        else:
            parts.append({"type": "text", "text": part.text or ""})
    return parts


def _format_turn(message: Message) -> Dict[str, Any]:
    if message.role == "tool":
        return {
            "role": "tool",
            "tool_call_id": message.tool_result_id(),
            "content": message.text_or_joined(),
        }
    if message.role == "assistant":
        turn: Dict[str, Any] = {"role": "assistant", "content": message.text_or_joined()}
        if message.tool_calls:
            turn["tool_calls"] = [
                {
                    "id": tc.id,
                    "type": "function",
                    "function": {"name": tc.name, "arguments": tc.arguments or "{}"},
                }
                for tc in message.tool_calls
            ]
            if not turn["content"]:
                turn["content"] = None
        return turn
    return {"role": "user", "content": _user_content(message)}


def format_messages(messages: List[Message]) -> List[Dict[str, Any]]:
    """Render a conversation as the OpenAI ``messages`` array."""
    system, turns = join_system(messages, "\n\n")
    out: List[Dict[str, Any]] = []
    if system is not None:
        out.append({"role": "system", "content": system})
    out.extend(_format_turn(m) for m in turns)
    return out


def build_body(request: CompletionRequest, model: str, *, stream: bool = False) -> Dict[str, Any]:
    """Build the JSON body for ``POST /chat/completions``."""
    body: Dict[str, Any] = {"model": model, "messages": format_messages(request.messages)}
    if request.max_tokens:
        body["max_tokens"] = request.max_tokens
    if request.temperature is not None:
        body["temperature"] = request.temperature
    if request.tools:
        body["tools"] = [
            {
                "type": "function",
                "function": {"name": t.name, "description": t.description, "parameters": t.parameters},
            }
            for t in request.tools
        ]
    if stream:
        body["stream"] = True
        body["stream_options"] = {"include_usage": True}
    return body


def map_finish_reason(reason: Optional[str]) -> FinishReason:
    if reason == "length":
        return "length"
    if reason in ("tool_calls", "function_call"):
        return "tool_calls"
    return "stop"


def _usage(usage: Optional[Usage]) -> Optional[TokenUsage]:
    if usage is None:
        return None
    total = usage.total_tokens if usage.total_tokens is not None else usage.prompt_tokens + usage.completion_tokens
    return TokenUsage(prompt_tokens=usage.prompt_tokens, completion_tokens=usage.completion_tokens, total_tokens=total)


def parse_response(payload: Any, *, provider: str = PROVIDER, model: Optional[str] = None) -> CompletionResponse:
    """Normalize a Chat Completions response.

    Raises:
        MalformedResponseError: No choice, or a required field is missing.
    """
    data = validate_payload(ChatCompletion, payload, provider=provider, model=model)
    if not data.choices:
        raise MalformedResponseError("no completion choice returned from provider", provider=provider, model=model)
    choice = data.choices[0]
    calls = [
        ToolCall(id=tc.id, name=tc.function.name, arguments=tc.function.arguments)
        for tc in choice.message.tool_calls or []
    ] or None
    finish = "tool_calls" if calls else map_finish_reason(choice.finish_reason)
    return CompletionResponse(
        message=Message(role="assistant", content=choice.message.content or "", tool_calls=calls),
        finish_reason=finish,
        usage=_usage(data.usage),
    )


def interpret_event(acc: StreamAccumulator, payload: Any, *, provider: str = PROVIDER, model: Optional[str] = None) -> Iterable[str]:
    """Fold one streamed chunk into ``acc``; returns the new text fragments.

    The usage trailer arrives in a chunk with an empty ``choices`` list.
    """
    chunk = validate_payload(ChatCompletionChunk, payload, provider=provider, model=model)
    if chunk.error is not None:
        raise ProviderError(
            code=ErrorCode.SERVER_ERROR,
            message=f"stream error: {chunk.error.message or chunk.error.type or 'unknown'}",
            provider=provider,
            model=model,
        )
    if chunk.usage is not None:
        usage = _usage(chunk.usage)
        acc.set_usage(
            prompt_tokens=usage.prompt_tokens,
            completion_tokens=usage.completion_tokens,
            total_tokens=usage.total_tokens,
        )
    fragments: List[str] = []
    if not chunk.choices:
        return fragments
    choice = chunk.choices[0]
    if fragment := acc.append_text(choice.delta.content or ""):
        fragments.append(fragment)
    for tc in choice.delta.tool_calls or []:
        fn = tc.function
        acc.start_tool_call(tc.index, id=tc.id, name=fn.name if fn else None)
        if fn and fn.arguments:
            acc.append_tool_arguments(tc.index, fn.arguments)
    if choice.finish_reason:
        acc.finish_reason = map_finish_reason(choice.finish_reason)
    return fragments


__all__ = [
    "format_messages",
    "build_body",
    "map_finish_reason",
    "parse_response",
    "interpret_event",
]
