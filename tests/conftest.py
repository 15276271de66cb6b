"""Shared test fixtures and configuration."""

from __future__ import annotations

from typing import Any
from unittest.mock import Mock

import meilisearch
import pytest
from meilisearch.index import Index

from meiliscout.config.settings import Settings
from meiliscout.deps import set_registry
from meiliscout.engines.base.registry import EngineRegistry
from meiliscout.models.searchable import Searchable

# ── Fixture models ────────────────────────────────────────────────────────────


class SearchableModel(Searchable):
    """Plain searchable model stored in the ``table`` index."""

    __scout_index__ = "table"

    def __init__(self, id: Any = 1, **attributes: Any) -> None:
        self.id = id
        for key, value in attributes.items():
            setattr(self, key, value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r})"


class CustomKeySearchableModel(SearchableModel):
    def get_scout_key(self) -> Any:
        return f"my-meilisearch-key.{self.get_key()}"


class EmptySearchableModel(SearchableModel):
    def to_searchable_array(self) -> dict[str, Any]:
        return {}


class SoftDeleteSearchableModel(SearchableModel):
    soft_deletes = True


class SoftDeleteEmptySearchableModel(SoftDeleteSearchableModel):
    def to_searchable_array(self) -> dict[str, Any]:
        return {}

    def push_soft_delete_metadata(self) -> Searchable:
        return self

    def scout_metadata(self) -> dict[str, Any]:
        return {"__soft_deleted": 1}


# ── Fixtures ──────────────────────────────────────────────────────────────────


@pytest.fixture
def settings() -> Settings:
    """Create a test Settings instance with defaults."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        scout={"driver": "null"},
    )


@pytest.fixture(autouse=True)
def registry(settings: Settings) -> EngineRegistry:
    """Install a fresh global registry for every test."""
    reg = EngineRegistry(settings)
    set_registry(reg)
    yield reg
    set_registry(None)


@pytest.fixture
def client() -> Mock:
    """Mock Meilisearch client."""
    return Mock(spec=meilisearch.Client)


@pytest.fixture
def index() -> Mock:
    """Mock Meilisearch index handle."""
    return Mock(spec=Index)


@pytest.fixture
def model_cls() -> type[SearchableModel]:
    return SearchableModel


@pytest.fixture
def searchable_model() -> SearchableModel:
    return SearchableModel()


@pytest.fixture
def custom_key_model() -> CustomKeySearchableModel:
    return CustomKeySearchableModel()


@pytest.fixture
def empty_model() -> EmptySearchableModel:
    return EmptySearchableModel()


@pytest.fixture
def soft_delete_model() -> SoftDeleteSearchableModel:
    return SoftDeleteSearchableModel()


@pytest.fixture
def soft_delete_empty_model() -> SoftDeleteEmptySearchableModel:
    return SoftDeleteEmptySearchableModel()
