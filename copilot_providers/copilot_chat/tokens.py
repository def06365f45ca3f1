"""Prompt token counting via ``tiktoken``.

Counting follows the OpenAI chat format: every message costs a fixed
overhead plus its encoded role and content, and the reply is primed with
three more tokens.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Sequence

import tiktoken

from ..base.models import Message

TOKENS_PER_MESSAGE = 3
REPLY_PRIMING_TOKENS = 3
FALLBACK_ENCODING = "cl100k_base"


@lru_cache(maxsize=8)
def _encoding_for(model_family: str) -> "tiktoken.Encoding":
    try:
        return tiktoken.encoding_for_model(model_family)
    except KeyError:
        return tiktoken.get_encoding(FALLBACK_ENCODING)


class TiktokenTokenizer:
    """Default :class:`Tokenizer` implementation."""

    def count(self, messages: Sequence[Message], model_family: str) -> int:
        enc = _encoding_for(model_family)
        total = REPLY_PRIMING_TOKENS
        for m in messages:
            total += TOKENS_PER_MESSAGE
            total += len(enc.encode(m.role.value))
            total += len(enc.encode(m.content))
        return total


__all__ = ["TiktokenTokenizer", "TOKENS_PER_MESSAGE", "REPLY_PRIMING_TOKENS"]
