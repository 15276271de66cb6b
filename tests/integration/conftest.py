"""Integration test fixtures — a live Meilisearch instance.

Expects Meilisearch to be running, e.g.:
    docker run -p 7700:7700 -e MEILI_MASTER_KEY=test-master-key getmeili/meilisearch

Tests are skipped when no instance answers at localhost:7700.
"""

from __future__ import annotations

import time
import uuid
from typing import Any, ClassVar

import meilisearch
import pytest

from meiliscout.config.settings import Settings
from meiliscout.deps import set_registry
from meiliscout.engines.base.registry import EngineRegistry
from meiliscout.events.dispatcher import RecordingEventDispatcher
from meiliscout.models.searchable import Searchable

HOST = "http://localhost:7700"
MASTER_KEY = "test-master-key"

MOCK_DOCUMENTS: list[dict[str, Any]] = [
    {"id": 1, "title": "Ford Mustang GT", "status": "published"},
    {"id": 2, "title": "Mustang Mach-E", "status": "published"},
    {"id": 3, "title": "Chevrolet Camaro", "status": "draft"},
    {"id": 4, "title": "Shelby Mustang GT500", "status": "published"},
]


class Car(Searchable):
    """Searchable model backed by an in-memory table."""

    table: ClassVar[dict[int, Car]] = {}

    def __init__(self, id: int = 0, title: str = "", status: str = "draft") -> None:
        self.id = id
        self.title = title
        self.status = status

    def get_scout_models_by_ids(self, builder, ids):
        return self.new_collection(self.table[i] for i in reversed(ids) if i in self.table)

    @classmethod
    def all_searchable(cls):
        return list(cls.table.values())


def _wait_for_service(client: meilisearch.Client, timeout: float = 30.0) -> bool:
    """Block until Meilisearch reports healthy, or timeout."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if client.is_healthy():
            return True
        time.sleep(1)
    return False


@pytest.fixture(scope="session")
def meilisearch_client() -> meilisearch.Client:
    """Ensure Meilisearch is running."""
    client = meilisearch.Client(HOST, MASTER_KEY)
    if not _wait_for_service(client, timeout=5.0):
        pytest.skip(f"Meilisearch not available at {HOST}")
    return client


@pytest.fixture
def events() -> RecordingEventDispatcher:
    return RecordingEventDispatcher()


@pytest.fixture
def live_registry(meilisearch_client, events) -> EngineRegistry:
    """Registry pointed at the live instance with a unique index prefix."""
    prefix = f"it_{uuid.uuid4().hex[:8]}_"
    settings = Settings(
        _env_file=None,  # type: ignore[call-arg]
        meilisearch={"host": HOST, "key": MASTER_KEY},
        scout={"prefix": prefix, "driver": "meilisearch"},
    )
    registry = EngineRegistry(settings, events=events)
    set_registry(registry)
    Car.table = {doc["id"]: Car(**doc) for doc in MOCK_DOCUMENTS}
    yield registry

    task = meilisearch_client.delete_index(Car.searchable_as())
    meilisearch_client.wait_for_task(task.task_uid)
    set_registry(None)


@pytest.fixture
def car() -> type[Car]:
    return Car
