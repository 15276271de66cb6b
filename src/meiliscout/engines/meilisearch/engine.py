"""MeiliSearch engine — Syncs searchable models with Meilisearch indexes.

All index traffic goes through an injected ``meilisearch.Client``; the
engine only shapes documents and options and interprets results.

Usage::

    engine = MeiliSearchEngine(meilisearch.Client("http://localhost:7700", "masterKey"))
    engine.update(ModelCollection([post], model_class=Post))
    posts = engine.get(Post.search("mustang"))
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

import meilisearch
from meilisearch.errors import MeilisearchApiError
from meilisearch.index import Index

from meiliscout.engines.base.engine import Engine
from meiliscout.engines.base.exceptions import IndexResolutionError
from meiliscout.events.dispatcher import EventDispatcher, IndexCreated
from meiliscout.models.collection import ModelCollection

if TYPE_CHECKING:
    from meiliscout.models.builder import Builder
    from meiliscout.models.searchable import Searchable

logger = logging.getLogger(__name__)

INDEX_NOT_FOUND = "index_not_found"


class MeiliSearchEngine(Engine):
    """Search engine backed by Meilisearch.

    Supports:
      - Lazy index creation on first upsert, announced with ``IndexCreated``
      - Soft-delete metadata (``__soft_deleted``)
      - Equality / ``IN`` filters and sorting from the builder
      - Order-preserving mapping of hits back onto models

    Args:
        client: Meilisearch client used for every index call.
        soft_delete: Push ``__soft_deleted`` metadata for models using soft deletes.
        dispatcher: Receives ``IndexCreated`` events. A private dispatcher is
            created when omitted.
    """

    def __init__(
        self,
        client: meilisearch.Client,
        soft_delete: bool = False,
        dispatcher: EventDispatcher | None = None,
    ) -> None:
        self._client = client
        self._soft_delete = soft_delete
        self.events = dispatcher if dispatcher is not None else EventDispatcher()

    @property
    def client(self) -> meilisearch.Client:
        return self._client

    # ── Mutations ────────────────────────────────────────────────────────

    def update(self, models: Sequence[Searchable]) -> None:
        """Upsert ``models`` into their index.

        Models with an empty searchable projection are left out. Nothing is
        sent, and no index is provisioned, when no document remains.
        """
        if not models:
            return

        model = models[0]
        if self._soft_delete and model.uses_soft_delete():
            for m in models:
                m.push_soft_delete_metadata()

        documents = [doc for doc in (self._to_document(m) for m in models) if doc is not None]
        if not documents:
            logger.debug("No searchable data in batch of %d [%s], skipping", len(models), type(model).__name__)
            return

        index = self._resolve_index(model)
        index.add_documents(documents)

    def delete(self, models: Sequence[Searchable]) -> None:
        """Remove ``models`` from their index.

        An empty batch still issues the delete call, with no keys.

        Raises:
            IndexResolutionError: If the batch is empty and carries no model class.
        """
        index = self._client.index(self._index_name_for_batch(models))
        index.delete_documents([m.get_scout_key() for m in models])

    def flush(self, model: Searchable) -> None:
        self._client.index(model.searchable_as()).delete_all_documents()

    # ── Search ───────────────────────────────────────────────────────────

    def search(self, builder: Builder) -> Any:
        return self._perform_search(
            builder,
            _compact(
                {
                    "filter": self._filters(builder),
                    "sort": self._sort(builder),
                    "limit": builder.limit,
                }
            ),
        )

    def paginate(self, builder: Builder, per_page: int, page: int) -> Any:
        if per_page < 1:
            raise ValueError(f"per_page must be >= 1, got {per_page}")
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page}")

        options = _compact(
            {
                "filter": self._filters(builder),
                "sort": self._sort(builder),
            }
        )
        options["limit"] = per_page
        options["offset"] = (page - 1) * per_page
        return self._perform_search(builder, options)

    def _perform_search(self, builder: Builder, options: dict[str, Any]) -> Any:
        index = self._client.index(builder.index or builder.model.searchable_as())
        if builder.callback is not None:
            return builder.callback(index, builder.query, options)
        return index.search(builder.query, options)

    # ── Results ──────────────────────────────────────────────────────────

    def map_ids(self, results: Any, key_name: str = "id") -> list[Any]:
        return [hit[key_name] for hit in _hits(results)]

    def map(self, builder: Builder, results: Any, model: Searchable) -> ModelCollection:
        """Load the models behind ``results`` in hit order.

        Hits whose model cannot be loaded are dropped, as are loaded models
        that do not appear in the hits.
        """
        hits = _hits(results)
        if not hits:
            return model.new_collection()

        key_name = model.get_key_name()
        object_ids = [hit[key_name] for hit in hits]
        positions = {object_id: position for position, object_id in enumerate(object_ids)}

        loaded = model.get_scout_models_by_ids(builder, object_ids)
        found = [m for m in loaded if m.get_scout_key() in positions]
        found.sort(key=lambda m: positions[m.get_scout_key()])
        return model.new_collection(found)

    def get_total_count(self, results: Any) -> int:
        hits = _hits(results)
        if not results:
            return 0
        return int(results.get("estimatedTotalHits", results.get("totalHits", results.get("nbHits", len(hits)))))

    # ── Index management ─────────────────────────────────────────────────

    def create_index(self, name: str, options: dict[str, Any] | None = None) -> Any:
        logger.info("Creating index %s", name)
        return self._client.create_index(name, options or {})

    def delete_index(self, name: str) -> Any:
        logger.info("Deleting index %s", name)
        return self._client.delete_index(name)

    def sync_index_settings(self, name: str, settings: dict[str, Any]) -> Any:
        """Push Meilisearch index settings (filterable attributes, ranking rules, ...)."""
        logger.info("Syncing settings of index %s: %s", name, sorted(settings))
        return self._client.index(name).update_settings(settings)

    # ── Helpers ──────────────────────────────────────────────────────────

    def _resolve_index(self, model: Searchable) -> Index:
        """Fetch the model's index, creating it when Meilisearch reports it missing."""
        name = model.searchable_as()
        try:
            return self._client.get_index(name)
        except MeilisearchApiError as e:
            if e.code != INDEX_NOT_FOUND:
                raise

        self._client.create_index(name, {"primaryKey": model.get_key_name()})
        index = self._client.index(name)
        model_class = type(model)
        logger.info("Created index %s for %s", name, model_class.__name__)
        self.events.dispatch(IndexCreated(index=index, model=f"{model_class.__module__}.{model_class.__qualname__}"))
        return index

    def _to_document(self, model: Searchable) -> dict[str, Any] | None:
        searchable = model.to_searchable_array()
        if not searchable:
            return None
        return {**searchable, **model.scout_metadata(), model.get_key_name(): model.get_scout_key()}

    @staticmethod
    def _index_name_for_batch(models: Sequence[Searchable]) -> str:
        if models:
            return models[0].searchable_as()
        model_class = getattr(models, "model_class", None)
        if model_class is None:
            raise IndexResolutionError("Cannot resolve the index of an empty batch without a model class.")
        return model_class.searchable_as()

    @staticmethod
    def _filters(builder: Builder) -> str:
        clauses = [f"{field} = {_filter_value(value)}" for field, value in builder.wheres.items()]
        clauses.extend(
            f"{field} IN [{', '.join(_filter_value(v) for v in values)}]"
            for field, values in builder.where_ins.items()
        )
        return " AND ".join(clauses)

    @staticmethod
    def _sort(builder: Builder) -> list[str]:
        return [f"{column}:{direction}" for column, direction in builder.orders]


def _hits(results: Any) -> list[dict[str, Any]]:
    if not results:
        return []
    return list(results.get("hits") or [])


def _filter_value(value: Any) -> str:
    """Render a value as a Meilisearch filter literal."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int | float):
        return str(value)
    return json.dumps(str(value))


def _compact(options: dict[str, Any]) -> dict[str, Any]:
    """Drop unset options; zero is a legitimate value and is kept."""
    return {k: v for k, v in options.items() if v is not None and v != "" and v != []}
