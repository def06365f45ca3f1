"""
Provider-agnostic domain models (DTOs) public surface.

Re-exports the one-class-per-file implementations under
``copilot_providers.base.models_parts``.
"""

from .models_parts.message import Message, Role
from .models_parts.chat_request import ChatRequest
from .models_parts.model_info import ModelInfo

__all__ = [
    "Message",
    "Role",
    "ChatRequest",
    "ModelInfo",
]
