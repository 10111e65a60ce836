"""
Provider-agnostic domain models (DTOs) public surface.

This module re-exports the one-class-per-file implementations under
``relay_providers.base.models_parts``.
"""

from .models_parts.content_part import ContentPart, ContentPartType
from .models_parts.tool_call import ToolCall
from .models_parts.tool_spec import ToolSpec
from .models_parts.message import Message, Role
from .models_parts.token_usage import TokenUsage
from .models_parts.completion_request import CompletionRequest
from .models_parts.completion_response import CompletionResponse, FinishReason

__all__ = [
    "ContentPart",
    "ContentPartType",
    "ToolCall",
    "ToolSpec",
    "Message",
    "Role",
    "TokenUsage",
    "CompletionRequest",
    "CompletionResponse",
    "FinishReason",
]
