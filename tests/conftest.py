from __future__ import annotations

from typing import TYPE_CHECKING

import mongomock
import pytest

from dnisync.adapters.mongodb import MongoPersonStore
from tests.support.persons import FakeClock

if TYPE_CHECKING:
    from pymongo.collection import Collection


@pytest.fixture
def mongo_client() -> mongomock.MongoClient:
    return mongomock.MongoClient()


@pytest.fixture
def personas(mongo_client: mongomock.MongoClient) -> Collection:
    return mongo_client["padron"]["personas"]


@pytest.fixture
def mongo_store(personas: Collection) -> MongoPersonStore:
    store = MongoPersonStore(personas, timeout_seconds=5.0)
    store.ensure_indexes()
    return store


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "MONGO_URI",
        "DB_NAME",
        "MONGO_COLLECTION",
        "MONGO_TIMEOUT_SECONDS",
        "LOOKUP_BASE_URL",
        "LOOKUP_ORIGIN",
        "LOOKUP_TIMEOUT_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)
