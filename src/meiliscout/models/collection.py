"""Typed model collection."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from meiliscout.models.searchable import Searchable


class ModelCollection(list):
    """A list of searchable models that remembers its model class.

    The model class survives an empty collection, so engines can still
    resolve the target index of an empty batch.
    """

    def __init__(self, models: Iterable[Any] = (), model_class: type[Searchable] | None = None) -> None:
        super().__init__(models)
        if model_class is None and self:
            model_class = type(self[0])
        self.model_class = model_class

    def __repr__(self) -> str:
        name = self.model_class.__name__ if self.model_class else None
        return f"ModelCollection({list.__repr__(self)}, model_class={name})"

    def scout_keys(self) -> list[Any]:
        """Resolved search keys of every model, in collection order."""
        return [model.get_scout_key() for model in self]

    def searchable(self) -> None:
        """Upsert every model of the collection that should be searchable."""
        models = ModelCollection([m for m in self if m.should_be_searchable()], model_class=self.model_class)
        if not models:
            return
        models[0].searchable_using().update(models)

    def unsearchable(self) -> None:
        """Remove every model of the collection from its index."""
        if not self:
            return
        self[0].searchable_using().delete(self)
