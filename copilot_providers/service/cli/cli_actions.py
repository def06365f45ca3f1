"""CLI action handlers.

Purpose
-------
Subcommand handlers for the Copilot Chat debugging CLI, keeping the entrypoint
module minimal (thin presentation layer). This module has no top-level side
effects and is safe to import in tests.

Fallback & Error Semantics
--------------------------
- ``models`` never touches the network or credentials.
- ``status`` reads credentials but performs no network I/O. A provider that
  cannot be built (for example an unsupported configured model) is reported
  like a ``chat`` error.
- ``chat`` performs the key exchange and the streaming call. Provider errors
  are printed as JSON to stderr with exit code ``1``; deltas received before
  a stream error are still printed.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from contextlib import aclosing
from typing import Any, Callable, List, Optional

from ...base.errors import ProviderError
from ...base.http import close_all_clients
from ...base.models import ChatRequest, Message, Role
from ...copilot_chat import CopilotChatProvider, ModelCatalog

ProviderBuilder = Callable[..., CopilotChatProvider]


def build_provider(config_dir: Optional[str] = None) -> CopilotChatProvider:
    """Create a provider using the default authentication discovery."""
    return CopilotChatProvider.from_environment(config_dir=config_dir)


def _error_payload(exc: ProviderError) -> str:
    return json.dumps({"error": {"code": exc.code.value, "message": exc.message}})


def handle_models(args: argparse.Namespace) -> int:
    """Print the model catalog as a table or JSON."""
    models = ModelCatalog.list_models()
    if args.json:
        print(json.dumps({"models": [m.to_dict() for m in models]}))
        return 0
    for m in models:
        print(f"{m.id:<16} {m.name:<10} {m.context_length}")
    return 0


def handle_status(args: argparse.Namespace, *, builder: Optional[ProviderBuilder] = None) -> int:
    """Print whether a token is available and the state of the cached key."""
    try:
        provider = (builder or build_provider)(config_dir=args.config_dir)
    except ProviderError as exc:
        print(_error_payload(exc), file=sys.stderr)
        return 1
    try:
        result: dict[str, Any] = {
            "provider": provider.provider_name,
            "authenticated": provider.is_authenticated(),
            "credential_phase": provider.credential_phase().value,
            "default_model": provider.default_model(),
        }
        try:
            asyncio.run(provider.authenticate())
        except ProviderError as exc:
            result["detail"] = exc.message
    finally:
        provider.close()
    if args.json:
        print(json.dumps(result))
    else:
        for k, v in result.items():
            print(f"{k}: {v}")
    return 0


def build_chat_request(prompt: str, *, model: str, system: Optional[str] = None) -> ChatRequest:
    messages: List[Message] = []
    if system:
        messages.append(Message(role=Role.SYSTEM, content=system))
    messages.append(Message(role=Role.USER, content=prompt))
    return ChatRequest(model=model, messages=messages)


async def run_chat(provider: CopilotChatProvider, request: ChatRequest) -> int:
    """Stream ``request`` to stdout; returns the process exit code."""
    try:
        events = await provider.stream_completion(request)
        async with aclosing(events):
            async for event in events:
                if event.error is not None:
                    print()
                    print(_error_payload(event.error), file=sys.stderr)
                    return 1
                sys.stdout.write(event.delta or "")
                sys.stdout.flush()
        print()
        return 0
    except ProviderError as exc:
        print(_error_payload(exc), file=sys.stderr)
        return 1
    finally:
        await close_all_clients()


def handle_chat(args: argparse.Namespace, *, builder: Optional[ProviderBuilder] = None) -> int:
    """Execute the ``chat`` subcommand."""
    try:
        provider = (builder or build_provider)(config_dir=args.config_dir)
    except ProviderError as exc:
        print(_error_payload(exc), file=sys.stderr)
        return 1
    try:
        request = build_chat_request(args.prompt, model=args.model or provider.default_model(), system=args.system)
        return asyncio.run(run_chat(provider, request))
    finally:
        provider.close()


__all__ = [
    "build_provider",
    "build_chat_request",
    "handle_models",
    "handle_status",
    "handle_chat",
    "run_chat",
]
