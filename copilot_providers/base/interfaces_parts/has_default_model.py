"""HasDefaultModel Protocol (single-class module).

Marker for providers that resolve a default model from configuration.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class HasDefaultModel(Protocol):
    """Interface for providers that have a default model."""

    def default_model(self) -> str:
        """Return the model identifier used when a caller does not choose one."""
        ...
