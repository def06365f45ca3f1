"""Provider-neutral request to Copilot Chat wire request."""

from __future__ import annotations

from typing import Optional

from ..base.models import ChatRequest, Role
from ..config.defaults import COPILOT_CHAT_DEFAULT_TEMPERATURE
from .catalog import CopilotChatModel
from .wire import WireMessage, WireRequest, WireRole

_ROLE_MAP = {
    Role.USER: WireRole.USER,
    Role.ASSISTANT: WireRole.ASSISTANT,
    Role.SYSTEM: WireRole.SYSTEM,
}


def translate_request(request: ChatRequest, model: Optional[CopilotChatModel] = None) -> WireRequest:
    """Build the completion body for ``request``.

    ``model`` defaults to the catalog entry named by ``request.model``, which
    raises ``ValidationError`` when unknown. Messages keep their order and
    content byte for byte.
    """
    resolved = model if model is not None else CopilotChatModel.from_id(request.model)
    temperature = request.temperature if request.temperature is not None else COPILOT_CHAT_DEFAULT_TEMPERATURE
    return WireRequest(
        model=resolved.id,
        temperature=temperature,
        messages=[WireMessage(role=_ROLE_MAP[m.role], content=m.content) for m in request.messages],
    )


__all__ = ["translate_request"]
