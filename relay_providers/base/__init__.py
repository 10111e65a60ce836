"""Provider base layer: models, errors, logging, streaming and resilience.

Only dependency-light modules are re-exported here; adapters and the factory
are imported from their own modules.
"""

from .errors import (
    ErrorCode,
    MalformedResponseError,
    MissingCredentialError,
    ProviderError,
    ProviderHttpError,
    RetryableProviderError,
    StreamBufferOverflowError,
    StreamTerminationError,
    classify_exception,
)
from .models import (
    CompletionRequest,
    CompletionResponse,
    ContentPart,
    FinishReason,
    Message,
    Role,
    TokenUsage,
    ToolCall,
    ToolSpec,
)

__all__ = [
    "ErrorCode",
    "ProviderError",
    "MissingCredentialError",
    "ProviderHttpError",
    "RetryableProviderError",
    "MalformedResponseError",
    "StreamTerminationError",
    "StreamBufferOverflowError",
    "classify_exception",
    "CompletionRequest",
    "CompletionResponse",
    "ContentPart",
    "FinishReason",
    "Message",
    "Role",
    "TokenUsage",
    "ToolCall",
    "ToolSpec",
]
