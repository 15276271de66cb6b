"""Lifecycle observer — Keeps the index in step with model persistence.

The observer does not hook into any ORM by itself. Wire its methods to
your persistence layer's events, e.g. with SQLAlchemy::

    observer = SearchableObserver()
    event.listen(Post, "after_insert", lambda m, c, t: observer.saved(t))
    event.listen(Post, "after_update", lambda m, c, t: observer.saved(t))
    event.listen(Post, "after_delete", lambda m, c, t: observer.deleted(t))
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from meiliscout.models.searchable import Searchable

logger = logging.getLogger(__name__)


class SearchableObserver:
    """Translates save / delete / restore events into engine calls.

    Args:
        soft_delete: Keep soft-deleted models in the index with
            ``__soft_deleted`` metadata. ``None`` reads ``scout.soft_delete``.
    """

    def __init__(self, soft_delete: bool | None = None) -> None:
        self._soft_delete = soft_delete
        self._disabled: set[type[Searchable]] = set()

    @property
    def soft_delete(self) -> bool:
        if self._soft_delete is None:
            from meiliscout.deps import get_registry

            return get_registry().settings.scout.soft_delete
        return self._soft_delete

    @contextmanager
    def disable_syncing_for(self, model_class: type[Searchable]) -> Iterator[None]:
        """Suppress index syncing for ``model_class`` inside the block."""
        self._disabled.add(model_class)
        try:
            yield
        finally:
            self._disabled.discard(model_class)

    def syncing_disabled_for(self, model: Searchable) -> bool:
        return any(isinstance(model, cls) for cls in self._disabled)

    def saved(self, model: Searchable) -> None:
        if self.syncing_disabled_for(model):
            logger.debug("Syncing disabled for %s, skipping save", type(model).__name__)
            return
        if not model.should_be_searchable():
            model.unsearchable()
            return
        model.searchable()

    def deleted(self, model: Searchable) -> None:
        if self.syncing_disabled_for(model):
            return
        if self.soft_delete and model.uses_soft_delete():
            # kept in the index, flagged through __soft_deleted
            model.push_soft_delete_metadata()
            model.searchable_using().update(model.new_collection([model]))
            return
        model.unsearchable()

    def force_deleted(self, model: Searchable) -> None:
        if self.syncing_disabled_for(model):
            return
        model.unsearchable()

    def restored(self, model: Searchable) -> None:
        self.saved(model)
