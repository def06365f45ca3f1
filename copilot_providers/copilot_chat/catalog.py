"""Copilot Chat model catalog.

The set of selectable models is fixed; Copilot does not expose a listing
endpoint. Declaration order of :class:`CopilotChatModel` is the order shown
to users.
"""

from __future__ import annotations

from enum import Enum
from typing import List

from ..base.errors import ErrorCode, ValidationError
from ..base.models import ModelInfo
from ..config.defaults import COPILOT_CHAT_DEFAULT_MODEL, COPILOT_CHAT_PROVIDER

# id -> (display name, max token count, tokenizer family)
_MODEL_TABLE = {
    "gpt-4": ("GPT 4", 8192, "gpt-4"),
    "gpt-3.5-turbo": ("GPT 3.5", 16385, "gpt-3.5-turbo"),
}


class CopilotChatModel(str, Enum):
    """Models served by the Copilot Chat completion endpoint."""

    GPT_4 = "gpt-4"
    GPT_3_5_TURBO = "gpt-3.5-turbo"

    @property
    def id(self) -> str:
        return self.value

    @property
    def display_name(self) -> str:
        return _MODEL_TABLE[self.value][0]

    @property
    def max_token_count(self) -> int:
        return _MODEL_TABLE[self.value][1]

    @property
    def tokenizer_family(self) -> str:
        """OpenAI model name whose tokenizer matches this model."""
        return _MODEL_TABLE[self.value][2]

    @classmethod
    def default(cls) -> "CopilotChatModel":
        return cls(COPILOT_CHAT_DEFAULT_MODEL)

    @classmethod
    def from_id(cls, model_id: str) -> "CopilotChatModel":
        """Resolve a wire identifier, raising ``ValidationError`` when unknown."""
        try:
            return cls(model_id)
        except ValueError:
            supported = ", ".join(m.value for m in cls)
            raise ValidationError(
                code=ErrorCode.UNSUPPORTED_MODEL,
                message=f"Unsupported Copilot Chat model '{model_id}'. Supported models: {supported}.",
                provider=COPILOT_CHAT_PROVIDER,
                model=model_id,
            ) from None

    def to_model_info(self) -> ModelInfo:
        return ModelInfo(
            id=self.id,
            name=self.display_name,
            provider=COPILOT_CHAT_PROVIDER,
            context_length=self.max_token_count,
        )


class ModelCatalog:
    """Read-only view over :class:`CopilotChatModel`."""

    @staticmethod
    def list_models() -> List[ModelInfo]:
        return [m.to_model_info() for m in CopilotChatModel]

    @staticmethod
    def resolve(model_id: str) -> CopilotChatModel:
        return CopilotChatModel.from_id(model_id)


__all__ = ["CopilotChatModel", "ModelCatalog"]
