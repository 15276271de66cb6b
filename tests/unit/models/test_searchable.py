"""Tests for the Searchable mixin and ModelCollection."""

from __future__ import annotations

from typing import Any, ClassVar
from unittest.mock import Mock

import pytest

from meiliscout.config.settings import Settings
from meiliscout.deps import set_registry
from meiliscout.engines.base.engine import Engine
from meiliscout.engines.base.registry import EngineRegistry
from meiliscout.models.builder import Builder
from meiliscout.models.collection import ModelCollection
from meiliscout.models.searchable import Searchable, _default_index_name


class BlogPost(Searchable):
    records: ClassVar[list[BlogPost]] = []

    def __init__(self, id: int = 0, title: str = "", published: bool = True) -> None:
        self.id = id
        self.title = title
        self.published = published

    def should_be_searchable(self) -> bool:
        return self.published

    @classmethod
    def all_searchable(cls) -> list[BlogPost]:
        return cls.records


class Article(Searchable):
    __tablename__ = "articles_v2"


@pytest.fixture
def engine(registry: EngineRegistry) -> Mock:
    mock = Mock(spec=Engine)
    registry.set("null", mock)
    return mock


class TestIndexResolution:
    @pytest.mark.parametrize(
        ("class_name", "expected"),
        [("BlogPost", "blog_posts"), ("User", "users"), ("News", "news")],
    )
    def test_default_index_name(self, class_name: str, expected: str) -> None:
        assert _default_index_name(class_name) == expected

    def test_searchable_as_defaults(self, searchable_model) -> None:
        assert BlogPost.searchable_as() == "blog_posts"
        assert Article.searchable_as() == "articles_v2"
        assert searchable_model.searchable_as() == "table"

    def test_searchable_as_applies_prefix(self) -> None:
        set_registry(EngineRegistry(Settings(_env_file=None, scout={"prefix": "staging_"})))  # type: ignore[call-arg]

        assert BlogPost.searchable_as() == "staging_blog_posts"


class TestKeysAndProjection:
    def test_default_key(self, searchable_model) -> None:
        assert searchable_model.get_key_name() == "id"
        assert searchable_model.get_key() == 1
        assert searchable_model.get_scout_key() == 1

    def test_custom_key(self, custom_key_model) -> None:
        assert custom_key_model.get_key() == 1
        assert custom_key_model.get_scout_key() == "my-meilisearch-key.1"

    def test_to_searchable_array_uses_public_attributes(self) -> None:
        post = BlogPost(id=3, title="Mustang")
        post._cache = {"x": 1}

        assert post.to_searchable_array() == {"id": 3, "title": "Mustang", "published": True}

    def test_scout_metadata(self, searchable_model) -> None:
        assert searchable_model.scout_metadata() == {}

        searchable_model.with_scout_metadata("_rankingRules", "custom")

        assert searchable_model.scout_metadata() == {"_rankingRules": "custom"}
        assert "_scout_metadata" not in searchable_model.to_searchable_array()

    def test_push_soft_delete_metadata(self, soft_delete_model) -> None:
        assert soft_delete_model.uses_soft_delete() is True
        assert soft_delete_model.push_soft_delete_metadata().scout_metadata() == {"__soft_deleted": 0}

        soft_delete_model.deleted_at = "2024-01-01"

        assert soft_delete_model.trashed() is True
        assert soft_delete_model.push_soft_delete_metadata().scout_metadata() == {"__soft_deleted": 1}

    def test_loading_hooks_must_be_implemented(self, searchable_model) -> None:
        with pytest.raises(NotImplementedError, match="get_scout_models_by_ids"):
            searchable_model.get_scout_models_by_ids(Builder(searchable_model), [1])
        with pytest.raises(NotImplementedError, match="all_searchable"):
            type(searchable_model).all_searchable()


class TestSearchableLifecycle:
    def test_search_returns_builder(self) -> None:
        callback = Mock()
        builder = BlogPost.search("mustang", callback)

        assert isinstance(builder, Builder)
        assert isinstance(builder.model, BlogPost)
        assert builder.query == "mustang"
        assert builder.callback is callback
        assert builder.wheres == {}

    def test_search_scopes_soft_deletes_when_enabled(self, soft_delete_model) -> None:
        set_registry(EngineRegistry(Settings(_env_file=None, scout={"soft_delete": True})))  # type: ignore[call-arg]

        assert type(soft_delete_model).search("mustang").wheres == {"__soft_deleted": 0}
        assert BlogPost.search("mustang").wheres == {}

    def test_searchable_and_unsearchable(self, engine) -> None:
        post = BlogPost(id=1)

        post.searchable()
        post.unsearchable()

        assert engine.update.call_args.args[0] == [post]
        assert engine.update.call_args.args[0].model_class is BlogPost
        assert engine.delete.call_args.args[0] == [post]

    def test_collection_searchable_skips_unsearchable_models(self, engine) -> None:
        published, draft = BlogPost(id=1), BlogPost(id=2, published=False)

        ModelCollection([published, draft]).searchable()

        engine.update.assert_called_once()
        assert engine.update.call_args.args[0] == [published]

    def test_collection_searchable_with_nothing_left(self, engine) -> None:
        ModelCollection([BlogPost(id=2, published=False)]).searchable()
        ModelCollection([], model_class=BlogPost).unsearchable()

        engine.update.assert_not_called()
        engine.delete.assert_not_called()

    def test_make_all_searchable_chunks(self, engine, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(BlogPost, "records", [BlogPost(id=i) for i in range(5)])

        total = BlogPost.make_all_searchable(chunk_size=2)

        assert total == 5
        assert [len(c.args[0]) for c in engine.update.call_args_list] == [2, 2, 1]

    def test_make_all_searchable_uses_configured_chunk_size(self, engine, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(BlogPost, "records", [BlogPost(id=i) for i in range(3)])

        assert BlogPost.make_all_searchable() == 3
        engine.update.assert_called_once()

    def test_remove_all_from_search(self, engine) -> None:
        BlogPost.remove_all_from_search()

        flushed = engine.flush.call_args.args[0]
        assert isinstance(flushed, BlogPost)

    def test_search_and_flush_use_scout_instance_hook(self, engine) -> None:
        class Ticket(Searchable):
            def __init__(self, id: int, venue: str) -> None:
                self.id = id
                self.venue = venue

            @classmethod
            def scout_instance(cls) -> Ticket:
                return cls(id=0, venue="")

        assert isinstance(Ticket.search("gig").model, Ticket)

        Ticket.remove_all_from_search()

        assert isinstance(engine.flush.call_args.args[0], Ticket)


class TestModelCollection:
    def test_infers_model_class(self, searchable_model) -> None:
        assert ModelCollection([searchable_model]).model_class is type(searchable_model)
        assert ModelCollection().model_class is None

    def test_explicit_model_class_survives_empty(self, searchable_model) -> None:
        collection = ModelCollection([], model_class=type(searchable_model))

        assert len(collection) == 0
        assert collection.model_class is type(searchable_model)

    def test_scout_keys(self, searchable_model, custom_key_model) -> None:
        collection = ModelCollection([searchable_model, custom_key_model])

        assert collection.scout_keys() == [1, "my-meilisearch-key.1"]

    def test_new_collection(self, searchable_model) -> None:
        others: list[Any] = [searchable_model]
        collection = searchable_model.new_collection(others)

        assert collection == others
        assert collection.model_class is type(searchable_model)
