"""Copilot Chat debugging CLI (package entrypoint).

This package wires argument parsing to action handlers kept in small, focused
modules. It performs no provider logic directly.

Public API re-exports:
- ``main``: CLI entrypoint callable
"""

from __future__ import annotations

import sys
from typing import Optional

from ...base.logging import configure_logger
from .cli_actions import handle_chat, handle_models, handle_status
from .cli_parser import build_parser


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entrypoint.

    Parameters
    ----------
    argv: Optional[list[str]]
        Argument vector; when ``None`` uses ``sys.argv[1:]``.

    Returns
    -------
    int
        Process exit code (0 success, non-zero on error).
    """
    p = build_parser()
    args = p.parse_args(list(sys.argv[1:] if argv is None else argv))
    if args.log_level:
        configure_logger(level=args.log_level)

    if args.cmd == "models":
        return handle_models(args)
    if args.cmd == "status":
        return handle_status(args)
    return handle_chat(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
