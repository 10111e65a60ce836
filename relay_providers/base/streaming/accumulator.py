"""Per-call stream accumulator.

Adapters create one :class:`StreamAccumulator` per streaming call and feed it
from their vendor-specific event interpreter. At end of stream
:meth:`StreamAccumulator.build_response` synthesizes the final
:class:`CompletionResponse`.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from ..models import CompletionResponse, FinishReason, Message, TokenUsage, ToolCall


@dataclass
class _PendingToolCall:
    id: str = ""
    name: str = ""
    arguments: str = ""


class StreamAccumulator:
    """Running state of one streamed completion.

    Attributes:
        text: Concatenation of every text fragment appended so far.
        finish_reason: Latest normalized finish signal (``None`` until seen).
        prompt_tokens / completion_tokens: Latest usage counters; vendors may
            report them piecemeal across frames.
    """

    def __init__(self) -> None:
        self._text: List[str] = []
        self._tool_calls: Dict[int, _PendingToolCall] = {}
        self.finish_reason: Optional[FinishReason] = None
        self.prompt_tokens: Optional[int] = None
        self.completion_tokens: Optional[int] = None
        self.total_tokens: Optional[int] = None

    @property
    def text(self) -> str:
        return "".join(self._text)

    def append_text(self, fragment: str) -> Optional[str]:
        """Record a text fragment; returns it when non-empty, else ``None``."""
        if not fragment:
            return None
        self._text.append(fragment)
        return fragment

    def start_tool_call(self, index: int, *, id: Optional[str] = None, name: Optional[str] = None) -> None:  # noqa: A002
        """Open (or update) the tool call at ``index``; later values win."""
        call = self._tool_calls.setdefault(index, _PendingToolCall())
        if id:
            call.id = id
        if name:
            call.name = name

    def append_tool_arguments(self, index: int, fragment: str) -> None:
        """Append an argument fragment to the tool call at ``index`` (arrival order)."""
        call = self._tool_calls.setdefault(index, _PendingToolCall())
        call.arguments += fragment or ""

    def has_tool_calls(self) -> bool:
        return bool(self._tool_calls)

    def tool_call_count(self) -> int:
        return len(self._tool_calls)

    def set_usage(
        self,
        *,
        prompt_tokens: Optional[int] = None,
        completion_tokens: Optional[int] = None,
        total_tokens: Optional[int] = None,
    ) -> None:
        """Overwrite the counters that are provided; others keep their value."""
        if prompt_tokens is not None:
            self.prompt_tokens = prompt_tokens
        if completion_tokens is not None:
            self.completion_tokens = completion_tokens
        if total_tokens is not None:
            self.total_tokens = total_tokens

    def usage(self) -> Optional[TokenUsage]:
        if self.prompt_tokens is None and self.completion_tokens is None and self.total_tokens is None:
            return None
        prompt = self.prompt_tokens or 0
        completion = self.completion_tokens or 0
        total = self.total_tokens if self.total_tokens is not None else prompt + completion
        return TokenUsage(prompt_tokens=prompt, completion_tokens=completion, total_tokens=total)

    def tool_calls(self) -> Optional[List[ToolCall]]:
        """Finished tool calls ordered by vendor index, or ``None`` when there are none."""
        if not self.has_tool_calls():
            return None
        return [
            ToolCall(id=c.id, name=c.name, arguments=c.arguments or "{}")
            for _, c in sorted(self._tool_calls.items())
        ]

    def build_response(self) -> CompletionResponse:
        """Synthesize the final response; tool calls force ``tool_calls``."""
        calls = self.tool_calls()
        finish: FinishReason = "tool_calls" if calls else (self.finish_reason or "stop")
        return CompletionResponse(
            message=Message(role="assistant", content=self.text, tool_calls=calls),
            finish_reason=finish,
            usage=self.usage(),
        )


__all__ = ["StreamAccumulator"]
