"""Streaming package for provider layer.

Exposes streaming primitives and metrics under a single namespace.
"""

from .streaming import CompletionEvent, collect_text
from .streaming_metrics import StreamMetrics

__all__ = [
    "CompletionEvent",
    "collect_text",
    "StreamMetrics",
]
