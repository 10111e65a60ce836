"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `relay_providers.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .provider_error import ProviderError
from .missing_credential_error import MissingCredentialError
from .provider_http_error import ProviderHttpError
from .retryable_provider_error import RetryableProviderError
from .malformed_response_error import MalformedResponseError
from .stream_termination_error import StreamBufferOverflowError, StreamTerminationError
from .classification import classify_exception, code_for_status, is_retryable_status

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
    "code_for_status",
    "is_retryable_status",
]
