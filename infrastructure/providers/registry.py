"""Provider -> oracle adapter registry (populated by provider modules at import time)."""

import logging

from infrastructure.config.models import Provider

from .base import ProviderAdapter

logger = logging.getLogger(__name__)

_ADAPTER_REGISTRY: dict[Provider, type[ProviderAdapter]] = {}


def register_adapter(provider: Provider, adapter_cls: type[ProviderAdapter], *, override: bool = False) -> None:
    """Register the oracle adapter class for a provider.

    Re-registering the same class is a no-op (modules may be reloaded in tests);
    replacing it with a different class requires override=True.
    """
    existing = _ADAPTER_REGISTRY.get(provider)
    if existing is adapter_cls:
        return
    if existing is not None and not override:
        raise RuntimeError(
            f"Adapter already registered for provider={provider.value}: {existing.__name__}. "
            f"Use override=True to replace."
        )
    _ADAPTER_REGISTRY[provider] = adapter_cls
    logger.debug("Registered oracle adapter for provider=%s: %s", provider.value, adapter_cls.__name__)


def get_adapter_class(provider: Provider) -> type[ProviderAdapter] | None:
    """Return the registered adapter class (or None if its module is not imported yet)."""
    return _ADAPTER_REGISTRY.get(provider)


def registered_providers() -> list[str]:
    return sorted(p.value for p in _ADAPTER_REGISTRY)
