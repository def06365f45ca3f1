"""CLI parser construction for copilot-providers-cli.

This module wires subparsers but contains no execution logic. Subcommand
handlers live in ``cli_actions`` to keep files small and testable.
"""

from __future__ import annotations

import argparse

SUBCOMMANDS = ("models", "status", "chat")


def build_parser() -> argparse.ArgumentParser:
    """Construct the top-level CLI parser and subcommands.

    Performs no side effects and wires only argument shapes. No I/O or
    network calls occur here.
    """
    p = argparse.ArgumentParser(
        prog="copilot-providers-cli", description="GitHub Copilot Chat debugging CLI"
    )
    p.add_argument("--log-level", default=None, help="Override PROVIDERS_LOG_LEVEL (e.g. DEBUG)")
    sub = p.add_subparsers(dest="cmd", required=True)

    # models
    p_models = sub.add_parser("models", help="List the selectable models")
    p_models.add_argument("--json", action="store_true")

    # status
    p_status = sub.add_parser("status", help="Show authentication status and credential phase")
    p_status.add_argument("--json", action="store_true")
    p_status.add_argument("--config-dir", default=None, help="Copilot plugin configuration directory")

    # chat
    p_chat = sub.add_parser("chat", help="Stream a completion for a single prompt")
    p_chat.add_argument("--prompt", required=True)
    p_chat.add_argument("--model", default=None)
    p_chat.add_argument("--system", default=None, help="Optional system prompt sent before the user prompt")
    p_chat.add_argument("--config-dir", default=None, help="Copilot plugin configuration directory")

    return p


__all__ = ["build_parser", "SUBCOMMANDS"]
