"""Pydantic models of the Gemini ``generateContent`` wire format.

Field names are snake_case with camelCase aliases matching the REST payload.
Streamed chunks share the response shape; usage-only chunks carry no
candidates.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class _Wire(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class FunctionCall(_Wire):
    name: str
    args: Dict[str, Any] = Field(default_factory=dict)


class Part(_Wire):
    text: Optional[str] = None
    function_call: Optional[FunctionCall] = Field(default=None, alias="functionCall")


class Content(_Wire):
    role: Optional[str] = None
    parts: List[Part] = Field(default_factory=list)


class Candidate(_Wire):
    content: Content = Field(default_factory=Content)
    finish_reason: Optional[str] = Field(default=None, alias="finishReason")


class UsageMetadata(_Wire):
    prompt_token_count: int = Field(default=0, alias="promptTokenCount")
    candidates_token_count: int = Field(default=0, alias="candidatesTokenCount")
    total_token_count: Optional[int] = Field(default=None, alias="totalTokenCount")


class PromptFeedback(_Wire):
    block_reason: Optional[str] = Field(default=None, alias="blockReason")


class GenerateContentResponse(_Wire):
    candidates: List[Candidate] = Field(default_factory=list)
    usage_metadata: Optional[UsageMetadata] = Field(default=None, alias="usageMetadata")
    prompt_feedback: Optional[PromptFeedback] = Field(default=None, alias="promptFeedback")


__all__ = [
    "FunctionCall",
    "Part",
    "Content",
    "Candidate",
    "UsageMetadata",
    "PromptFeedback",
    "GenerateContentResponse",
]
