"""Token usage counters as reported by the vendor."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class TokenUsage:
    """Prompt/completion/total token counts for one completion."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    @classmethod
    def of(cls, prompt_tokens: int, completion_tokens: int) -> "TokenUsage":
        """Build usage computing the total from its two halves."""
        return cls(prompt_tokens, completion_tokens, prompt_tokens + completion_tokens)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = ["TokenUsage"]
