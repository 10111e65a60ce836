"""Missing credential error.

Raised before any network I/O when the environment variable naming a vendor
secret is unset or empty. Never retried.
"""
from __future__ import annotations

from typing import Optional

from .error_code import ErrorCode
from .provider_error import ProviderError


class MissingCredentialError(ProviderError):
    """A required vendor secret could not be resolved.

    Attributes:
        env_var: Name of the environment variable that was consulted, or
            ``None`` when the provider was configured without one.
    """

    def __init__(self, env_var: Optional[str], *, provider: str = "unknown", model: Optional[str] = None) -> None:
        message = (
            f"API key not found in env var: {env_var}"
            if env_var
            else "api_key_env_var is required for this provider"
        )
        super().__init__(
            code=ErrorCode.AUTH,
            message=message,
            provider=provider,
            model=model,
            retryable=False,
        )
        self.env_var = env_var


__all__ = ["MissingCredentialError"]
