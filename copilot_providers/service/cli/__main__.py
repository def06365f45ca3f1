"""``python -m copilot_providers.service.cli`` entry.

Example:

    python -m copilot_providers.service.cli chat --prompt "Explain asyncio.Lock"
"""

from __future__ import annotations

from . import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
