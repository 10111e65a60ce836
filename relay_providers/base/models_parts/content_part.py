"""
Multimodal content part model for user messages.

A message may carry an ordered list of parts instead of (or alongside) its
plain ``content`` string. Only text and image references are modeled; adapters
whose vendor integration lacks native image parts degrade images to a textual
placeholder.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Literal, Optional


ContentPartType = Literal["text", "image_url"]


@dataclass(frozen=True)
class ContentPart:
    """A single piece of multimodal user content.

    Attributes:
        type: ``"text"`` or ``"image_url"``.
        text: Text payload when ``type == "text"``.
        image_url: Image reference (URL or data URI) when ``type == "image_url"``.
    """

    type: ContentPartType
    text: Optional[str] = None
    image_url: Optional[str] = None

    @classmethod
    def of_text(cls, text: str) -> "ContentPart":
        return cls(type="text", text=text)

    @classmethod
    def of_image(cls, url: str) -> "ContentPart":
        return cls(type="image_url", image_url=url)

    def placeholder_text(self) -> str:
        """Return the text form used by vendors without native image support."""
        if self.type == "text":
            return self.text or ""
        return f"[Image: {self.image_url or ''}]"

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable dictionary representation of the object."""
        return {k: v for k, v in asdict(self).items() if v is not None}


__all__ = [
    "ContentPart",
    "ContentPartType",
]
