"""Provider Factory utilities.

Purpose
-------
Centralize provider-agnostic creation of adapter instances implementing the
``CompletionProvider`` interface. This is the seam through which the
enclosing application's provider registry obtains adapters. Adapters are
imported lazily using ``importlib`` to keep side effects (logger setup,
config file reads) out of the factory layer.

Timeout and fallback semantics
------------------------------
- No timeouts are introduced here. The factory performs no retries or
  fallbacks; it either returns an instance or raises a clear error.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, Dict, Tuple, Type


class UnknownProviderError(Exception):
    """Raised when a provider cannot be resolved or initialized.

    Failure modes include:
    - The provider name is not registered in the factory mapping.
    - The provider module cannot be imported or the adapter class is missing.
    - The adapter constructor rejected its arguments.
    """


class ProviderFactory:
    """Create provider adapters based on a canonical name (e.g., ``"copilot_chat"``)."""

    # Map canonical provider names to import paths and class names
    _PROVIDERS: Dict[str, Dict[str, str]] = {
        "copilot_chat": {"module": "copilot_providers.copilot_chat.client", "class": "CopilotChatProvider"},
    }

    @classmethod
    def create(cls, provider: str, **kwargs: Any) -> Any:
        """Create a provider adapter instance.

        Parameters
        ----------
        provider:
            Canonical provider name (e.g., ``"copilot_chat"``).
        **kwargs:
            Adapter-specific constructor kwargs (optional).

        Raises
        ------
        UnknownProviderError
            If provider is unknown, the adapter module fails to import, the
            adapter class is missing, or the adapter constructor raises
            ``TypeError``.
        """
        name = (provider or "").lower().strip()
        spec = cls._PROVIDERS.get(name)
        if not spec:
            raise UnknownProviderError(f"Unknown provider '{provider}'")

        module_path, class_name = spec["module"], spec["class"]

        try:
            mod = import_module(module_path)
        except ImportError as exc:  # pragma: no cover - import failure path
            raise UnknownProviderError(
                f"Failed to import module '{module_path}' for provider '{provider}': {exc}"
            ) from exc

        try:
            klass: Type = getattr(mod, class_name)
        except AttributeError as exc:
            raise UnknownProviderError(
                f"Adapter class '{class_name}' not found in '{module_path}' for provider '{provider}'"
            ) from exc

        try:
            return klass(**kwargs)
        except TypeError as exc:
            raise UnknownProviderError(
                f"Invalid arguments for '{provider}' adapter constructor: {exc}"
            ) from exc

    @classmethod
    def supported(cls) -> Tuple[str, ...]:
        """Return the supported canonical provider names in deterministic order."""
        return tuple(cls._PROVIDERS.keys())


def create_provider(provider: str, **kwargs: Any) -> Any:
    """Compatibility helper that delegates to :meth:`ProviderFactory.create`."""
    return ProviderFactory.create(provider, **kwargs)


__all__ = ["ProviderFactory", "UnknownProviderError", "create_provider"]
