"""Streaming completion call and frame adaptation.

``CompletionStreamer.stream`` POSTs one wire request and turns the SSE
response into :class:`CompletionEvent` values:

- a frame whose first choice has content yields one delta;
- a frame whose first choice has no content but a ``finish_reason`` ends the
  stream normally;
- a frame whose first choice has neither is a protocol violation;
- an empty choice list ends the stream normally when the frame is finished
  (a ``finished`` payload flag or the ``[DONE]`` sentinel), otherwise it is
  a protocol violation;
- an undecodable payload is a protocol violation;
- transport failures end the stream with a ``TRANSPORT`` error.

Errors are delivered as the final event rather than raised, so deltas
already received stay usable. Closing the returned iterator (or cancelling
the consuming task) closes the HTTP response.
"""

from __future__ import annotations

import logging
from contextlib import aclosing
from typing import AsyncIterator, Dict, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from ..base.errors import ErrorCode, StreamError, TransportError, classify_exception
from ..base.interfaces import Transport
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.streaming import CompletionEvent, StreamMetrics
from ..config.defaults import (
    COPILOT_CHAT_COMPLETIONS_URL,
    COPILOT_CHAT_EDITOR_VERSION,
    COPILOT_CHAT_INTEGRATION_ID,
    COPILOT_CHAT_PROVIDER,
)
from .credentials import EphemeralKey
from .wire import StreamFrame, WireRequest, decode_frame

EMPTY_CHOICES_MESSAGE = (
    "The Copilot Chat API returned a response with no choices, but hadn't finished the message yet. "
    "Please try again."
)
MISSING_CONTENT_MESSAGE = "The Copilot Chat API returned a choice without content before the message finished."


class CompletionStreamer:
    def __init__(
        self,
        transport: Transport,
        *,
        completions_url: str = COPILOT_CHAT_COMPLETIONS_URL,
        editor_version: str = COPILOT_CHAT_EDITOR_VERSION,
        timeout: Optional[float] = None,
        provider: str = COPILOT_CHAT_PROVIDER,
    ) -> None:
        self._transport = transport
        self._completions_url = completions_url
        self._editor_version = editor_version
        self._timeout = timeout
        self._provider = provider
        self._logger = get_logger(f"providers.{provider}.stream")

    def build_headers(self, key: EphemeralKey) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {key.value}",
            "Content-Type": "application/json",
            "Editor-Version": self._editor_version,
            "Copilot-Integration-Id": COPILOT_CHAT_INTEGRATION_ID,
        }

    async def stream(self, request: WireRequest, key: EphemeralKey) -> AsyncIterator[CompletionEvent]:
        """Execute ``request`` and yield its events in arrival order."""
        ctx = LogContext(provider=self._provider, model=request.model, operation="stream_completion")
        metrics = StreamMetrics()
        normalized_log_event(self._logger, "stream.start", ctx, phase="start", messages=len(request.messages))

        error: Optional[StreamError] = None
        completed = False
        lines = self._transport.stream_lines(
            "POST",
            self._completions_url,
            headers=self.build_headers(key),
            json=request.to_payload(),
            timeout=self._timeout,
        )
        try:
            async with aclosing(lines):
                async for line in lines:
                    try:
                        frame = decode_frame(line)
                    except PydanticValidationError as exc:
                        error = self._error(
                            ErrorCode.PROTOCOL_VIOLATION,
                            f"Failed to decode Copilot Chat stream frame: {exc.error_count()} validation error(s)",
                            request.model,
                            exc,
                        )
                        break
                    if frame is None:
                        continue
                    delta, error, done = self._interpret(frame, request.model)
                    if delta is not None:
                        metrics.record_delta()
                        yield CompletionEvent(delta=delta)
                    if done:
                        break
            completed = True
        except TransportError as exc:
            error = self._error(ErrorCode.TRANSPORT, exc.message, request.model, exc)
            completed = True
        finally:
            metrics.finish()
            self._log_finalize(ctx, metrics, error, completed)

        if error is not None:
            yield CompletionEvent(error=error)

    def _interpret(self, frame: StreamFrame, model: str) -> Tuple[Optional[str], Optional[StreamError], bool]:
        """Return ``(delta, error, done)`` for one decoded frame."""
        if not frame.choices:
            if frame.finished:
                return None, None, True
            return None, self._error(ErrorCode.PROTOCOL_VIOLATION, EMPTY_CHOICES_MESSAGE, model), True
        choice = frame.choices[0]
        if choice.delta.content is not None:
            return choice.delta.content, None, False
        if choice.finish_reason is not None:
            return None, None, True
        return None, self._error(ErrorCode.PROTOCOL_VIOLATION, MISSING_CONTENT_MESSAGE, model), True

    def _error(self, code: ErrorCode, message: str, model: str, raw: Optional[Exception] = None) -> StreamError:
        return StreamError(code=code, message=message, provider=self._provider, model=model, raw=raw)

    def _log_finalize(
        self,
        ctx: LogContext,
        metrics: StreamMetrics,
        error: Optional[StreamError],
        completed: bool,
    ) -> None:
        if error is None:
            normalized_log_event(
                self._logger,
                "stream.adapter.end",
                ctx,
                phase="finalize",
                emitted=metrics.emitted > 0,
                cancelled=not completed,
                **metrics.to_fields(),
            )
            return
        normalized_log_event(
            self._logger,
            "stream.adapter.error",
            ctx,
            phase="finalize",
            emitted=metrics.emitted > 0,
            error_code=error.code.value,
            level=logging.WARNING,
            error=error.message,
            cause=classify_exception(error.raw).value if error.raw is not None else None,
            **metrics.to_fields(),
        )


__all__ = ["CompletionStreamer", "EMPTY_CHOICES_MESSAGE", "MISSING_CONTENT_MESSAGE"]
