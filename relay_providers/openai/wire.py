"""Pydantic models of the OpenAI Chat Completions wire format.

Only the fields the adapter reads are declared; unknown fields are ignored so
additive vendor changes do not break parsing. Required fields are enforced.
"""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class _Wire(BaseModel):
    model_config = ConfigDict(extra="ignore")


class FunctionCall(_Wire):
    name: str
    arguments: str = ""


class ToolCallPayload(_Wire):
    id: str
    type: str = "function"
    function: FunctionCall


class ResponseMessage(_Wire):
    role: str = "assistant"
    content: Optional[str] = None
    tool_calls: Optional[List[ToolCallPayload]] = None


class Choice(_Wire):
    index: int = 0
    message: ResponseMessage
    finish_reason: Optional[str] = None


class Usage(_Wire):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: Optional[int] = None


class ChatCompletion(_Wire):
    id: Optional[str] = None
    choices: List[Choice] = Field(default_factory=list)
    usage: Optional[Usage] = None


class FunctionDelta(_Wire):
    name: Optional[str] = None
    arguments: Optional[str] = None


class ToolCallDelta(_Wire):
    index: int = 0
    id: Optional[str] = None
    function: Optional[FunctionDelta] = None


class ChoiceDelta(_Wire):
    content: Optional[str] = None
    tool_calls: Optional[List[ToolCallDelta]] = None


class StreamChoice(_Wire):
    index: int = 0
    delta: ChoiceDelta = Field(default_factory=ChoiceDelta)
    finish_reason: Optional[str] = None


class ErrorBody(_Wire):
    message: str = ""
    type: Optional[str] = None
    code: Optional[str] = None


class ChatCompletionChunk(_Wire):
    choices: List[StreamChoice] = Field(default_factory=list)
    usage: Optional[Usage] = None
    # OpenAI-compatible servers may report failures inside the stream.
    error: Optional[ErrorBody] = None


__all__ = [
    "ChatCompletion",
    "ChatCompletionChunk",
    "Choice",
    "StreamChoice",
    "ToolCallPayload",
    "ToolCallDelta",
    "Usage",
    "ErrorBody",
]
