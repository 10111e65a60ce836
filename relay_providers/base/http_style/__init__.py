"""Shared template for HTTP/JSON vendor adapters."""

from .base import BaseHttpProvider

__all__ = ["BaseHttpProvider"]
