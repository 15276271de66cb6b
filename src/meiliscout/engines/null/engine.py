"""Null engine — Discards every mutation and never matches anything.

Useful to switch indexing off (``scout.driver: null``) in tests or
local environments without a Meilisearch instance.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from meiliscout.engines.base.engine import Engine

if TYPE_CHECKING:
    from meiliscout.models.builder import Builder
    from meiliscout.models.collection import ModelCollection
    from meiliscout.models.searchable import Searchable


class NullEngine(Engine):
    def update(self, models: Sequence[Searchable]) -> None:
        pass

    def delete(self, models: Sequence[Searchable]) -> None:
        pass

    def search(self, builder: Builder) -> dict[str, Any]:
        return {"hits": []}

    def paginate(self, builder: Builder, per_page: int, page: int) -> dict[str, Any]:
        return {"hits": []}

    def map_ids(self, results: Any, key_name: str = "id") -> list[Any]:
        return []

    def map(self, builder: Builder, results: Any, model: Searchable) -> ModelCollection:
        return model.new_collection()

    def get_total_count(self, results: Any) -> int:
        return 0

    def flush(self, model: Searchable) -> None:
        pass

    def create_index(self, name: str, options: dict[str, Any] | None = None) -> None:
        pass

    def delete_index(self, name: str) -> None:
        pass
