"""Models parts package public surface.

Re-exports individual DTOs; `copilot_providers.base.models` remains the primary
stable import path.
"""

from .message import Message, Role
from .chat_request import ChatRequest
from .model_info import ModelInfo

__all__ = [
    "Message",
    "Role",
    "ChatRequest",
    "ModelInfo",
]
