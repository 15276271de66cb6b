"""Base engine — Abstract interface for all search index drivers.

Every index backend must implement this interface. The engine is
responsible for:
  1. Upserting and deleting model documents
  2. Translating a ``Builder`` into a backend search call
  3. Mapping raw results back onto ordered model collections
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from meiliscout.models.builder import Builder
    from meiliscout.models.collection import ModelCollection
    from meiliscout.models.searchable import Searchable


class Engine(ABC):
    """Abstract base class for search engines.

    All engines must implement:
      - update() / delete() / flush(): index mutations
      - search() / paginate(): raw searches for a builder
      - map_ids() / map() / get_total_count(): result interpretation
      - create_index() / delete_index(): index management
    """

    @abstractmethod
    def update(self, models: Sequence[Searchable]) -> None:
        """Upsert the given models into their index."""

    @abstractmethod
    def delete(self, models: Sequence[Searchable]) -> None:
        """Remove the given models from their index."""

    @abstractmethod
    def search(self, builder: Builder) -> Any:
        """Run the builder's search and return raw results."""

    @abstractmethod
    def paginate(self, builder: Builder, per_page: int, page: int) -> Any:
        """Run one page of the builder's search and return raw results.

        Args:
            builder: The search to run.
            per_page: Page size.
            page: 1-based page number.
        """

    @abstractmethod
    def map_ids(self, results: Any, key_name: str = "id") -> list[Any]:
        """Ordered document keys contained in ``results``."""

    @abstractmethod
    def map(self, builder: Builder, results: Any, model: Searchable) -> ModelCollection:
        """Load the models behind ``results``, preserving result order."""

    @abstractmethod
    def get_total_count(self, results: Any) -> int:
        """Total number of matches reported in ``results``."""

    @abstractmethod
    def flush(self, model: Searchable) -> None:
        """Remove every document of the model's index."""

    @abstractmethod
    def create_index(self, name: str, options: dict[str, Any] | None = None) -> Any:
        """Create an index."""

    @abstractmethod
    def delete_index(self, name: str) -> Any:
        """Delete an index."""

    def keys(self, builder: Builder) -> list[Any]:
        """Search and return only the ordered keys."""
        return self.map_ids(self.search(builder), builder.model.get_key_name())

    def get(self, builder: Builder) -> ModelCollection:
        """Search and return the matching models."""
        return self.map(builder, self.search(builder), builder.model)
