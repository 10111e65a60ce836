"""Gemini ``generateContent`` translation helpers.

Rules:
- System messages become ``systemInstruction.parts`` (one text part each).
- Assistant turns use role ``model``; tool calls become ``functionCall``
  parts whose ``args`` is the decoded arguments object.
- Tool results become ``functionResponse`` parts named by the tool ``name``
  (falling back to ``tool_call_id``, then ``"unknown"``). Consecutive tool
  results share one ``user`` turn.
- Image parts degrade to ``[Image: <url>]`` text parts.
- Gemini does not assign call ids; calls get ``call_<i>`` in arrival order.
"""
from __future__ import annotations

import json
from typing import Any, Dict, Iterable, List, Optional

from ..base.errors import MalformedResponseError
from ..base.models import CompletionRequest, CompletionResponse, FinishReason, Message, TokenUsage, ToolCall
from ..base.streaming import StreamAccumulator
from ..base.utils.messages import split_system, tool_arguments
from ..base.utils.wire import validate_payload
from .wire import GenerateContentResponse, UsageMetadata

PROVIDER = "gemini"


def _user_parts(message: Message) -> List[Dict[str, Any]]:
    if not message.has_parts():
        return [{"text": message.content}]
    return [{"text": part.placeholder_text()} for part in message.content_parts]


def format_messages(messages: List[Message], *, model: Optional[str] = None) -> Dict[str, Any]:
    """Return ``{"contents": [...], "systemInstruction": {...}}`` (system only when present)."""
    system, turns = split_system(messages)
    contents: List[Dict[str, Any]] = []
    previous_role: Optional[str] = None
    for m in turns:
        if m.role == "tool":
            part = {
                "functionResponse": {
                    "name": m.tool_result_label(),
                    "response": {"content": m.text_or_joined()},
                }
            }
            if previous_role == "tool":
                contents[-1]["parts"].append(part)
            else:
                contents.append({"role": "user", "parts": [part]})
        elif m.role == "assistant":
            parts: List[Dict[str, Any]] = []
            if text := m.text_or_joined():
                parts.append({"text": text})
            for tc in m.tool_calls or []:
                parts.append(
                    {"functionCall": {"name": tc.name, "args": tool_arguments(tc, provider=PROVIDER, model=model)}}
                )
            if parts:
                contents.append({"role": "model", "parts": parts})
        else:
            contents.append({"role": "user", "parts": _user_parts(m)})
        previous_role = m.role
    fragment: Dict[str, Any] = {"contents": contents}
    if system:
        fragment["systemInstruction"] = {"parts": [{"text": s} for s in system]}
    return fragment


def build_body(request: CompletionRequest, model: str, *, stream: bool = False) -> Dict[str, Any]:
    """Build the JSON body shared by ``generateContent`` and ``streamGenerateContent``."""
    body = format_messages(request.messages, model=model)
    if request.tools:
        body["tools"] = [
            {
                "functionDeclarations": [
                    {"name": t.name, "description": t.description, "parameters": t.parameters}
                    for t in request.tools
                ]
            }
        ]
    generation: Dict[str, Any] = {}
    if request.max_tokens:
        generation["maxOutputTokens"] = request.max_tokens
    if request.temperature is not None:
        generation["temperature"] = request.temperature
    if generation:
        body["generationConfig"] = generation
    return body


def map_finish_reason(reason: Optional[str]) -> FinishReason:
    return "length" if reason == "MAX_TOKENS" else "stop"


def _usage(meta: Optional[UsageMetadata]) -> Optional[TokenUsage]:
    if meta is None:
        return None
    total = meta.total_token_count
    if total is None:
        total = meta.prompt_token_count + meta.candidates_token_count
    return TokenUsage(
        prompt_tokens=meta.prompt_token_count,
        completion_tokens=meta.candidates_token_count,
        total_tokens=total,
    )


def parse_response(payload: Any, *, provider: str = PROVIDER, model: Optional[str] = None) -> CompletionResponse:
    """Normalize a ``generateContent`` response.

    Raises:
        MalformedResponseError: No candidate (including prompts blocked by
            safety filters) or an invalid part.
    """
    data = validate_payload(GenerateContentResponse, payload, provider=provider, model=model)
    if not data.candidates:
        reason = data.prompt_feedback.block_reason if data.prompt_feedback else None
        detail = f" (blocked: {reason})" if reason else ""
        raise MalformedResponseError(f"no candidate returned from provider{detail}", provider=provider, model=model)
    candidate = data.candidates[0]
    text = "".join(p.text or "" for p in candidate.content.parts)
    function_calls = [p.function_call for p in candidate.content.parts if p.function_call is not None]
    calls = [
        ToolCall(id=f"call_{i}", name=fc.name, arguments=json.dumps(fc.args))
        for i, fc in enumerate(function_calls)
    ]
    return CompletionResponse(
        message=Message(role="assistant", content=text, tool_calls=calls or None),
        finish_reason="tool_calls" if calls else map_finish_reason(candidate.finish_reason),
        usage=_usage(data.usage_metadata),
    )


def interpret_event(acc: StreamAccumulator, payload: Any, *, provider: str = PROVIDER, model: Optional[str] = None) -> Iterable[str]:
    """Fold one streamed chunk into ``acc``; returns the new text fragments.

    Each chunk repeats the cumulative ``usageMetadata``; the latest wins.
    Function calls arrive whole, never split across chunks.
    """
    chunk = validate_payload(GenerateContentResponse, payload, provider=provider, model=model)
    if (usage := _usage(chunk.usage_metadata)) is not None:
        acc.set_usage(
            prompt_tokens=usage.prompt_tokens,
            completion_tokens=usage.completion_tokens,
            total_tokens=usage.total_tokens,
        )
    fragments: List[str] = []
    if not chunk.candidates:
        return fragments
    candidate = chunk.candidates[0]
    for part in candidate.content.parts:
        if fragment := acc.append_text(part.text or ""):
            fragments.append(fragment)
        if part.function_call is not None:
            index = acc.tool_call_count()
            acc.start_tool_call(index, id=f"call_{index}", name=part.function_call.name)
            acc.append_tool_arguments(index, json.dumps(part.function_call.args))
    if candidate.finish_reason:
        acc.finish_reason = map_finish_reason(candidate.finish_reason)
    return fragments


__all__ = [
    "format_messages",
    "build_body",
    "map_finish_reason",
    "parse_response",
    "interpret_event",
]
