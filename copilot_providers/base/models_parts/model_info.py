"""
ModelInfo DTO for provider model listings.

Represents a single selectable model as surfaced to the enclosing
application's model picker.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict


@dataclass(frozen=True)
class ModelInfo:
    """A single model listing entry.

    Attributes:
        id: Stable model identifier sent on the wire.
        name: Human-friendly display name.
        provider: Provider key owning this model.
        context_length: Maximum token count accepted by the model.
    """

    id: str
    name: str
    provider: str
    context_length: int

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable dictionary representation of the entry."""
        return asdict(self)


__all__ = [
    "ModelInfo",
]
