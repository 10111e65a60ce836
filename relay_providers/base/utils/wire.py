"""Validation of vendor payloads against per-vendor pydantic wire models."""
from __future__ import annotations

from typing import Any, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..errors import MalformedResponseError

M = TypeVar("M", bound=BaseModel)


def validate_payload(schema: Type[M], payload: Any, *, provider: str, model: Optional[str] = None) -> M:
    """Validate ``payload`` as ``schema`` or raise ``MalformedResponseError``.

    The error message names the first offending field location so operators
    can tell which part of the vendor contract changed.
    """
    try:
        return schema.model_validate(payload)
    except ValidationError as exc:
        first = exc.errors()[0] if exc.errors() else {}
        loc = ".".join(str(p) for p in first.get("loc", ())) or "<root>"
        raise MalformedResponseError(
            f"unexpected {schema.__name__} payload at {loc}: {first.get('msg', 'invalid')}",
            provider=provider,
            model=model,
        ) from exc


__all__ = ["validate_payload"]
