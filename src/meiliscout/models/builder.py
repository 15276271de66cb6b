"""Search builder — Fluent query object bound to a searchable model."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

from meiliscout.models.pagination import Paginator

if TYPE_CHECKING:
    from meiliscout.engines.base.engine import Engine
    from meiliscout.models.collection import ModelCollection
    from meiliscout.models.searchable import Searchable

SearchCallback = Callable[[Any, str, dict[str, Any]], Any]
"""``callback(index, query, options)`` replacing the engine's own search call."""

_SORT_DIRECTIONS = ("asc", "desc")


class Builder:
    """Collects the text, constraints and paging of one search.

    Args:
        model: An instance of the model class being searched.
        query: Raw search text.
        callback: Optional override for the engine search call. It receives
            the index handle, the query text and the translated options and
            its return value is used as the raw result.
        soft_delete: Scope results to models that are not soft-deleted.
    """

    def __init__(
        self,
        model: Searchable,
        query: str = "",
        callback: SearchCallback | None = None,
        soft_delete: bool = False,
    ) -> None:
        self.model = model
        self.query = query
        self.callback = callback
        self.index: str | None = None
        self.wheres: dict[str, Any] = {}
        self.where_ins: dict[str, list[Any]] = {}
        self.limit: int | None = None
        self.orders: list[tuple[str, str]] = []

        if soft_delete:
            self.wheres["__soft_deleted"] = 0

    # ── Constraints ──────────────────────────────────────────────────────

    def within(self, index: str) -> Builder:
        """Search ``index`` instead of the model's own index."""
        self.index = index
        return self

    def where(self, field: str, value: Any) -> Builder:
        self.wheres[field] = value
        return self

    def where_in(self, field: str, values: Iterable[Any]) -> Builder:
        self.where_ins[field] = list(values)
        return self

    def with_trashed(self) -> Builder:
        self.wheres.pop("__soft_deleted", None)
        return self

    def only_trashed(self) -> Builder:
        self.wheres["__soft_deleted"] = 1
        return self

    def take(self, limit: int) -> Builder:
        self.limit = limit
        return self

    def order_by(self, column: str, direction: str = "asc") -> Builder:
        direction = direction.lower()
        if direction not in _SORT_DIRECTIONS:
            raise ValueError(f"Order direction must be 'asc' or 'desc', got '{direction}'")
        self.orders.append((column, direction))
        return self

    # ── Execution ────────────────────────────────────────────────────────

    def engine(self) -> Engine:
        return self.model.searchable_using()

    def raw(self) -> Any:
        """Raw engine results for this search."""
        return self.engine().search(self)

    def keys(self) -> list[Any]:
        """Ordered keys of the matching documents."""
        return self.engine().keys(self)

    def get(self) -> ModelCollection:
        """Matching models, in engine order."""
        return self.engine().get(self)

    def first(self) -> Searchable | None:
        models = self.get()
        return models[0] if models else None

    def paginate_raw(self, per_page: int | None = None, page: int = 1) -> Any:
        return self.engine().paginate(self, self.model.per_page if per_page is None else per_page, page)

    def paginate(self, per_page: int | None = None, page: int = 1) -> Paginator:
        """One page of matching models.

        Args:
            per_page: Page size; defaults to the model's ``per_page``.
            page: 1-based page number.
        """
        if per_page is None:
            per_page = self.model.per_page
        engine = self.engine()
        results = engine.paginate(self, per_page, page)
        return Paginator(
            items=engine.map(self, results, self.model),
            total=engine.get_total_count(results),
            per_page=per_page,
            current_page=page,
        )
