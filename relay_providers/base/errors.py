"""Unified provider error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``relay_providers.base.errors_parts`` to maintain a stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.provider_error import ProviderError
from .errors_parts.missing_credential_error import MissingCredentialError
from .errors_parts.provider_http_error import ProviderHttpError
from .errors_parts.retryable_provider_error import RetryableProviderError
from .errors_parts.malformed_response_error import MalformedResponseError
from .errors_parts.stream_termination_error import (
    StreamBufferOverflowError,
    StreamTerminationError,
)
from .errors_parts.classification import (
    classify_exception,
    code_for_status,
    is_retryable_status,
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
    "code_for_status",
    "is_retryable_status",
]
