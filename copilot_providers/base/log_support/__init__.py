"""JSON formatter and per-operation context consumed by ``base.logging``.

Kept separate so formatters can be imported without configuring the shared
``providers`` logger.
"""

from .json_formatter import JsonFormatter
from .logging_context import LogContext

__all__ = ["JsonFormatter", "LogContext"]
