"""Local request validation.

Copilot Chat rejects some conversations server-side with unhelpful errors;
these checks catch them before any credential or network work happens. The
first failing rule wins.
"""

from __future__ import annotations

from ..base.errors import ErrorCode, ValidationError
from ..base.models import ChatRequest, Role
from ..config.defaults import COPILOT_CHAT_PROVIDER

EMPTY_PROMPT_MESSAGE = "Empty prompts aren't allowed. Please provide a non-empty prompt."
LAST_MESSAGE_MUST_BE_USER_MESSAGE = (
    "The final message must be from the user. To provide a system prompt, "
    "you must provide the system prompt followed by a user prompt."
)


def validate_request(request: ChatRequest, *, provider: str = COPILOT_CHAT_PROVIDER) -> None:
    """Raise ``ValidationError`` if ``request`` cannot be sent."""
    last = request.last_message()
    if last is None or last.is_blank():
        raise ValidationError(
            code=ErrorCode.EMPTY_PROMPT,
            message=EMPTY_PROMPT_MESSAGE,
            provider=provider,
            model=request.model or None,
        )
    if last.role is not Role.USER:
        raise ValidationError(
            code=ErrorCode.LAST_MESSAGE_MUST_BE_USER,
            message=LAST_MESSAGE_MUST_BE_USER_MESSAGE,
            provider=provider,
            model=request.model or None,
        )


__all__ = ["EMPTY_PROMPT_MESSAGE", "LAST_MESSAGE_MUST_BE_USER_MESSAGE", "validate_request"]
