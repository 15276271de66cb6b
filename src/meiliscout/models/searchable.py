"""Searchable mixin — Makes any model class indexable.

Mix ``Searchable`` into a model class and implement the two loading hooks
the engine cannot provide on its own:

  - ``get_scout_models_by_ids()``: bulk-load models by search key
  - ``all_searchable()``: iterate every model to (re)import

Usage::

    class Post(Searchable):
        __scout_index__ = "posts"

        def get_scout_models_by_ids(self, builder, ids):
            return self.new_collection(session.query(Post).filter(Post.id.in_(ids)))

    Post.search("mustang").where("published", True).paginate(per_page=10)
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Iterator, Sequence
from itertools import islice
from typing import TYPE_CHECKING, Any, ClassVar

from meiliscout.models.builder import Builder
from meiliscout.models.collection import ModelCollection

if TYPE_CHECKING:
    from meiliscout.engines.base.engine import Engine

logger = logging.getLogger(__name__)

SOFT_DELETED_KEY = "__soft_deleted"


def _default_index_name(class_name: str) -> str:
    """``BlogPost`` -> ``blog_posts``."""
    snake = re.sub(r"(?<!^)(?=[A-Z])", "_", class_name).lower()
    return snake if snake.endswith("s") else f"{snake}s"


def _chunked(items: Iterable[Any], size: int) -> Iterator[list[Any]]:
    iterator = iter(items)
    while chunk := list(islice(iterator, size)):
        yield chunk


class Searchable:
    """Capability set the engines rely on: key resolution, searchable
    projection and scout metadata.

    Class attributes:
        __scout_index__: Index name override (before prefixing).
        __scout_engine__: Engine driver override; ``None`` uses the default.
        __primary_key__: Name of the primary-key attribute.
        soft_deletes: Whether instances are soft-deleted via ``deleted_at``.
        per_page: Default page size for ``Builder.paginate()``.

    ``search()`` and ``remove_all_from_search()`` work on ``scout_instance()``,
    which calls the constructor without arguments.
    """

    __scout_index__: ClassVar[str | None] = None
    __scout_engine__: ClassVar[str | None] = None
    __primary_key__: ClassVar[str] = "id"
    soft_deletes: ClassVar[bool] = False
    per_page: ClassVar[int] = 15

    # ── Index and key resolution ─────────────────────────────────────────

    @classmethod
    def searchable_as(cls) -> str:
        """Name of the index this model class is stored in."""
        from meiliscout.deps import get_registry

        prefix = get_registry().settings.scout.prefix
        name = cls.__scout_index__ or getattr(cls, "__tablename__", None) or _default_index_name(cls.__name__)
        return f"{prefix}{name}"

    @classmethod
    def get_key_name(cls) -> str:
        return cls.__primary_key__

    def get_key(self) -> Any:
        return getattr(self, self.get_key_name(), None)

    def get_scout_key(self) -> Any:
        """Value identifying this model's document. Override for custom keys."""
        return self.get_key()

    # ── Document projection ──────────────────────────────────────────────

    def to_searchable_array(self) -> dict[str, Any]:
        """Fields this model contributes to the index.

        Defaults to the public instance attributes. Return an empty dict to
        keep the model out of the index.
        """
        return {k: v for k, v in vars(self).items() if not k.startswith("_")}

    def scout_metadata(self) -> dict[str, Any]:
        return dict(self.__dict__.get("_scout_metadata", {}))

    def with_scout_metadata(self, key: str, value: Any) -> Searchable:
        self.__dict__.setdefault("_scout_metadata", {})[key] = value
        return self

    # ── Soft deletes ─────────────────────────────────────────────────────

    @classmethod
    def uses_soft_delete(cls) -> bool:
        return cls.soft_deletes

    def trashed(self) -> bool:
        return getattr(self, "deleted_at", None) is not None

    def push_soft_delete_metadata(self) -> Searchable:
        return self.with_scout_metadata(SOFT_DELETED_KEY, 1 if self.trashed() else 0)

    def should_be_searchable(self) -> bool:
        return True

    # ── Loading hooks ────────────────────────────────────────────────────

    def new_collection(self, models: Iterable[Any] = ()) -> ModelCollection:
        return ModelCollection(models, model_class=type(self))

    def get_scout_models_by_ids(self, builder: Builder, ids: Sequence[Any]) -> Sequence[Searchable]:
        """Bulk-load the models whose search keys are ``ids``, in any order."""
        raise NotImplementedError(f"{type(self).__name__} must implement get_scout_models_by_ids()")

    @classmethod
    def all_searchable(cls) -> Iterable[Searchable]:
        """Every model that should be imported by ``make_all_searchable()``."""
        raise NotImplementedError(f"{cls.__name__} must implement all_searchable()")

    # ── Engine access ────────────────────────────────────────────────────

    @classmethod
    def searchable_using(cls) -> Engine:
        from meiliscout.deps import get_registry

        return get_registry().engine(cls.__scout_engine__)

    @classmethod
    def scout_instance(cls) -> Searchable:
        """Blank instance handed to builders and ``flush()``.

        Override when the constructor needs arguments.
        """
        return cls()

    @classmethod
    def search(cls, query: str = "", callback: Callable[..., Any] | None = None) -> Builder:
        """Start a search against this model's index."""
        from meiliscout.deps import get_registry

        soft_delete = get_registry().settings.scout.soft_delete and cls.uses_soft_delete()
        return Builder(cls.scout_instance(), query, callback=callback, soft_delete=soft_delete)

    def searchable(self) -> None:
        self.new_collection([self]).searchable()

    def unsearchable(self) -> None:
        self.new_collection([self]).unsearchable()

    @classmethod
    def make_all_searchable(cls, chunk_size: int | None = None) -> int:
        """Import every model returned by ``all_searchable()``.

        Returns:
            Number of models sent to the engine.
        """
        from meiliscout.deps import get_registry

        size = chunk_size or get_registry().settings.scout.chunk_size
        total = 0
        for chunk in _chunked(cls.all_searchable(), size):
            ModelCollection(chunk, model_class=cls).searchable()
            total += len(chunk)
            logger.info("Imported %d [%s] records", total, cls.__name__)
        return total

    @classmethod
    def remove_all_from_search(cls) -> None:
        cls.searchable_using().flush(cls.scout_instance())
