"""relay_providers: vendor-neutral LLM completion layer.

Translates a neutral conversation model to the OpenAI, Anthropic and Gemini
wire formats, parses their streaming protocols into uniform deltas, retries
transient failures and routes requests through a health-aware fallback chain.
"""

from .base.errors import (
    ErrorCode,
    MalformedResponseError,
    MissingCredentialError,
    ProviderError,
    ProviderHttpError,
    RetryableProviderError,
    StreamBufferOverflowError,
    StreamTerminationError,
)
from .base.factory import ProviderConfig, UnknownProviderError, build_fallback_chain, create_provider
from .base.interfaces import LLMProvider, SupportsStreaming
from .base.models import (
    CompletionRequest,
    CompletionResponse,
    ContentPart,
    Message,
    TokenUsage,
    ToolCall,
    ToolSpec,
)
from .base.resilience import (
    FallbackProvider,
    HealthConfig,
    ProviderEntry,
    ProviderHealthSnapshot,
    ProviderHealthTracker,
    RetryConfig,
)
from .base.streaming import StreamCompleted, StreamDelta, StreamEvent, collect_stream
from .anthropic import AnthropicProvider
from .gemini import GeminiProvider
from .openai import OpenAIProvider

__all__ = [
    "ErrorCode",
    "ProviderError",
    "MissingCredentialError",
    "ProviderHttpError",
    "RetryableProviderError",
    "MalformedResponseError",
    "StreamTerminationError",
    "StreamBufferOverflowError",
    "ProviderConfig",
    "UnknownProviderError",
    "create_provider",
    "build_fallback_chain",
    "LLMProvider",
    "SupportsStreaming",
    "CompletionRequest",
    "CompletionResponse",
    "ContentPart",
    "Message",
    "TokenUsage",
    "ToolCall",
    "ToolSpec",
    "FallbackProvider",
    "HealthConfig",
    "ProviderEntry",
    "ProviderHealthSnapshot",
    "ProviderHealthTracker",
    "RetryConfig",
    "StreamDelta",
    "StreamCompleted",
    "StreamEvent",
    "collect_stream",
    "OpenAIProvider",
    "AnthropicProvider",
    "GeminiProvider",
]
