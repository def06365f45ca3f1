"""Streaming metrics data structures.

Collected by the completion streamer and written once on the finalize log
event.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class StreamMetrics:
    """Collected streaming metrics for a single completion invocation.

    ``time_to_first_token_ms`` is measured from stream start to the first
    emitted delta; ``total_duration_ms`` from stream start to finalize.
    """

    emitted: int = 0
    time_to_first_token_ms: Optional[float] = None
    total_duration_ms: Optional[float] = None
    started_at: float = field(default_factory=time.perf_counter)

    def record_delta(self) -> None:
        if self.emitted == 0:
            self.time_to_first_token_ms = (time.perf_counter() - self.started_at) * 1000.0
        self.emitted += 1

    def finish(self) -> None:
        self.total_duration_ms = (time.perf_counter() - self.started_at) * 1000.0

    def to_fields(self) -> Dict[str, Any]:
        """Return the metrics as log fields."""
        return {
            "emitted_count": self.emitted,
            "time_to_first_token_ms": self.time_to_first_token_ms,
            "total_duration_ms": self.total_duration_ms,
        }


__all__ = ["StreamMetrics"]
