"""Engine events and a synchronous dispatcher.

Events are delivered in-process, in registration order, on the caller's
thread. Listener exceptions propagate to whoever triggered the event.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

_E = TypeVar("_E", bound=BaseModel)

Listener = Callable[[Any], None]


class IndexCreated(BaseModel):
    """Emitted after an engine lazily created a missing index."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    index: Any = Field(description="Handle of the newly created index")
    model: str = Field(description="Qualified name of the model class that triggered creation")


class EventDispatcher:
    """Routes events to listeners registered for their exact type.

    Example:
        >>> dispatcher = EventDispatcher()
        >>> dispatcher.listen(IndexCreated, lambda e: print(e.model))
        >>> dispatcher.dispatch(IndexCreated(index=handle, model="app.models.Post"))
    """

    def __init__(self) -> None:
        self._listeners: dict[type, list[Listener]] = defaultdict(list)

    def listen(self, event_type: type[_E], listener: Callable[[_E], None]) -> None:
        """Register ``listener`` for events of ``event_type``."""
        self._listeners[event_type].append(listener)

    def has_listeners(self, event_type: type) -> bool:
        return bool(self._listeners.get(event_type))

    def forget(self, event_type: type) -> None:
        """Remove all listeners for ``event_type``."""
        self._listeners.pop(event_type, None)

    def dispatch(self, event: BaseModel) -> None:
        """Deliver ``event`` to every listener of its type."""
        listeners = self._listeners.get(type(event), [])
        logger.debug("Dispatching %s to %d listener(s)", type(event).__name__, len(listeners))
        for listener in list(listeners):
            listener(event)


class RecordingEventDispatcher(EventDispatcher):
    """Dispatcher that records every event it delivers.

    Meant for tests: inspect ``dispatched`` or use the assertion helpers
    instead of wiring listeners by hand.
    """

    def __init__(self) -> None:
        super().__init__()
        self.dispatched: list[BaseModel] = []

    def dispatch(self, event: BaseModel) -> None:
        self.dispatched.append(event)
        super().dispatch(event)

    def recorded(
        self,
        event_type: type[_E],
        predicate: Callable[[_E], bool] | None = None,
    ) -> list[_E]:
        """Return recorded events of ``event_type`` matching ``predicate``."""
        return [
            e
            for e in self.dispatched
            if isinstance(e, event_type) and (predicate is None or predicate(e))
        ]

    def assert_dispatched(
        self,
        event_type: type[_E],
        predicate: Callable[[_E], bool] | None = None,
        times: int | None = None,
    ) -> None:
        matches = self.recorded(event_type, predicate)
        if times is None:
            assert matches, f"The expected [{event_type.__name__}] event was not dispatched."
        else:
            assert len(matches) == times, (
                f"The expected [{event_type.__name__}] event was dispatched {len(matches)} times "
                f"instead of {times} times."
            )

    def assert_not_dispatched(
        self,
        event_type: type[_E],
        predicate: Callable[[_E], bool] | None = None,
    ) -> None:
        matches = self.recorded(event_type, predicate)
        assert not matches, f"The unexpected [{event_type.__name__}] event was dispatched."
