"""Engine Registry — Manages registration and retrieval of engine drivers.

The registry maps driver names to factories and builds engine instances
from settings on first use. Built-in drivers:
  - meilisearch: ``MeiliSearchEngine`` over a ``meilisearch.Client``
  - null: ``NullEngine``
"""

from __future__ import annotations

import logging
from collections.abc import Callable

import meilisearch

from meiliscout.config.settings import Settings
from meiliscout.engines.base.engine import Engine
from meiliscout.engines.base.exceptions import ConfigurationError, EngineNotFoundError
from meiliscout.engines.meilisearch.engine import MeiliSearchEngine
from meiliscout.engines.null.engine import NullEngine
from meiliscout.events.dispatcher import EventDispatcher

logger = logging.getLogger(__name__)

EngineFactory = Callable[["EngineRegistry"], Engine]


def _create_meilisearch_engine(registry: EngineRegistry) -> Engine:
    config = registry.settings.meilisearch
    client = meilisearch.Client(config.host, config.key, timeout=config.timeout)
    return MeiliSearchEngine(
        client,
        soft_delete=registry.settings.scout.soft_delete,
        dispatcher=registry.events,
    )


def _create_null_engine(registry: EngineRegistry) -> Engine:
    return NullEngine()


class EngineRegistry:
    """Registry for managing engine instances.

    The registry maintains both driver factories and built engine
    instances. It supports:
      - Registering driver factories by name
      - Lazily building engines on first retrieval
      - Sharing one ``EventDispatcher`` across the engines it builds

    Example:
        >>> registry = EngineRegistry(Settings())
        >>> registry.events.listen(IndexCreated, on_index_created)
        >>> engine = registry.engine()  # default driver from scout.driver
    """

    def __init__(self, settings: Settings | None = None, events: EventDispatcher | None = None) -> None:
        self.settings = settings or Settings()
        self.events = events if events is not None else EventDispatcher()
        self._factories: dict[str, EngineFactory] = {}
        self._instances: dict[str, Engine] = {}

        self.register("meilisearch", _create_meilisearch_engine)
        self.register("null", _create_null_engine)

    def register(self, name: str, factory: EngineFactory) -> None:
        """Register an engine driver.

        Args:
            name: Unique driver name.
            factory: Callable receiving this registry and returning an engine.
        """
        if name in self._factories:
            logger.debug("Overwriting existing engine registration: %s", name)
        self._factories[name] = factory
        self._instances.pop(name, None)

    def engine(self, name: str | None = None) -> Engine:
        """Get the engine for ``name``, building it on first use.

        Args:
            name: Driver name; ``None`` selects ``scout.driver``.

        Raises:
            EngineNotFoundError: If no driver is registered under this name.
            ConfigurationError: If the driver factory fails.
        """
        name = name or self.settings.scout.driver
        if name in self._instances:
            return self._instances[name]

        if name not in self._factories:
            raise EngineNotFoundError(
                f"No engine registered with name '{name}'. "
                f"Available engines: {list(self._factories.keys())}"
            )

        try:
            engine = self._factories[name](self)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Failed to build engine '{name}': {e}") from e

        self._instances[name] = engine
        logger.info("Initialized engine: %s", name)
        return engine

    def set(self, name: str, engine: Engine) -> None:
        """Use a pre-built engine instance for ``name``."""
        self._factories.setdefault(name, lambda registry: engine)
        self._instances[name] = engine

    def forget(self) -> None:
        """Drop built engine instances; they are rebuilt on next use."""
        self._instances.clear()

    @property
    def registered_engines(self) -> list[str]:
        """List all registered driver names."""
        return list(self._factories.keys())

    @property
    def active_engines(self) -> list[str]:
        """List all built engine names."""
        return list(self._instances.keys())
