"""
Tool call DTO.

A structured request, emitted by the model, to invoke a capability by name.
Arguments stay raw JSON text; consumers parse on demand.
"""
from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class ToolCall:
    """A tool invocation requested by the assistant.

    Attributes:
        id: Opaque handle. Caller-assigned for outgoing calls; vendor- or
            adapter-assigned for calls the model initiates.
        name: Tool name.
        arguments: Raw JSON text of the arguments object.
    """

    id: str
    name: str
    arguments: str = ""

    def parsed_arguments(self) -> Dict[str, Any]:
        """Parse ``arguments`` into a mapping (empty text yields ``{}``).

        Raises:
            ValueError: If the text is not a JSON object.
        """
        if not self.arguments.strip():
            return {}
        value = json.loads(self.arguments)
        if not isinstance(value, dict):
            raise ValueError(f"tool call {self.id!r} arguments are not a JSON object")
        return value

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = ["ToolCall"]
