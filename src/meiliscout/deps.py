"""Registry access for searchable models."""

from __future__ import annotations

from meiliscout.engines.base.registry import EngineRegistry

# Global registry instance (built from Settings() on first access)
_registry: EngineRegistry | None = None


def set_registry(registry: EngineRegistry | None) -> None:
    """Set the global engine registry. ``None`` resets to the lazy default."""
    global _registry
    _registry = registry


def get_registry() -> EngineRegistry:
    """Get the global engine registry, building a default one if unset."""
    global _registry
    if _registry is None:
        _registry = EngineRegistry()
    return _registry
