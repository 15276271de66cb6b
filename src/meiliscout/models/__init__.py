"""Searchable model layer — mixin, builder, collections and lifecycle observer."""

from meiliscout.models.builder import Builder
from meiliscout.models.collection import ModelCollection
from meiliscout.models.observer import SearchableObserver
from meiliscout.models.pagination import Paginator
from meiliscout.models.searchable import Searchable

__all__ = ["Builder", "ModelCollection", "Paginator", "Searchable", "SearchableObserver"]
