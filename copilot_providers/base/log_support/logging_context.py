"""Structured logging context object for providers.

:class:`LogContext` carries the fields shared by every event of one
operation (provider, model, operation name) plus free-form ``extra``. Its
``to_dict`` merges ``extra`` and prunes ``None`` values.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict, field
from typing import Any, Dict, Optional


@dataclass
class LogContext:
    """Structured context for provider logging events."""

    provider: Optional[str] = None
    model: Optional[str] = None
    operation: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        extra = data.pop("extra", {}) or {}
        data.update({k: v for k, v in extra.items() if v is not None})
        return {k: v for k, v in data.items() if v is not None}


__all__ = ["LogContext"]
