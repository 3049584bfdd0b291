from __future__ import annotations

import contextlib
import threading
from typing import TYPE_CHECKING

import mongomock
import pytest

from dnisync import app as app_module
from dnisync.app import enrich_identifier_range
from dnisync.config import EnrichmentConfig, MissingConfigurationError, MongoConfig
from dnisync.domain.identifiers import IdentifierRange
from dnisync.domain.outcomes import NoData, RunSummary
from dnisync.domain.reconciliation import UpsertMode
from tests.support.persons import (
    T0,
    FakeClock,
    FakeLookupClient,
    InMemoryPersonStore,
    found,
    make_payload_data,
    transient,
)

if TYPE_CHECKING:
    from datetime import datetime

    from dnisync.domain.model import PersonRecord


def _fail_connect(_config: MongoConfig) -> contextlib.AbstractContextManager[object]:
    raise AssertionError("connect must not be called")


def test_run_stores_found_identifiers_with_injected_adapters(clock: FakeClock) -> None:
    lookup = FakeLookupClient(
        {
            "00000007": found(make_payload_data("00000007")),
            "00000008": NoData(),
            "00000009": transient(),
        }
    )
    store = InMemoryPersonStore()

    summary = enrich_identifier_range(
        IdentifierRange(start=7, end=9),
        lookup_client=lookup,
        store=store,
        clock=clock,
    )

    assert summary == RunSummary(attempted=3, inserted=1, skipped=1, lookup_errors=1)
    assert sorted(lookup.calls) == ["00000007", "00000008", "00000009"]
    assert store.documents["00000007"].created_at == T0


def test_missing_store_settings_fail_before_connecting(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(app_module, "connect", _fail_connect)
    lookup = FakeLookupClient()

    with pytest.raises(MissingConfigurationError, match="MONGO_URI"):
        enrich_identifier_range(IdentifierRange(start=1, end=2), lookup_client=lookup)

    assert lookup.calls == []


def test_run_opens_configured_store(monkeypatch: pytest.MonkeyPatch, clock: FakeClock) -> None:
    mongo_client = mongomock.MongoClient()
    opened: list[MongoConfig] = []

    def fake_connect(config: MongoConfig) -> contextlib.nullcontext[mongomock.MongoClient]:
        opened.append(config)
        return contextlib.nullcontext(mongo_client)

    monkeypatch.setattr(app_module, "connect", fake_connect)
    monkeypatch.setenv("MONGO_URI", "mongodb://db.test:27017")
    monkeypatch.setenv("DB_NAME", "padron")
    lookup = FakeLookupClient({"40000002": found()})

    summary = enrich_identifier_range(
        IdentifierRange(start=40000001, end=40000003),
        enrichment=EnrichmentConfig(concurrency=1),
        lookup_client=lookup,
        clock=clock,
    )

    assert opened == [MongoConfig(uri="mongodb://db.test:27017", database="padron")]
    assert summary.inserted == 1
    documents = list(mongo_client["padron"]["personas"].find({}, {"_id": 0, "dni": 1}))
    assert documents == [{"dni": "40000002"}]


def test_read_then_write_mode_is_honoured(clock: FakeClock) -> None:
    store = InMemoryPersonStore()
    lookup = FakeLookupClient({"40000002": found()})
    enrichment = EnrichmentConfig(upsert_mode=UpsertMode.READ_THEN_WRITE)

    first = enrich_identifier_range(
        IdentifierRange(start=40000002, end=40000002),
        enrichment=enrichment,
        lookup_client=lookup,
        store=store,
        clock=clock,
    )
    second = enrich_identifier_range(
        IdentifierRange(start=40000002, end=40000002),
        enrichment=enrichment,
        lookup_client=lookup,
        store=store,
        clock=clock,
    )

    assert first.inserted == 1
    assert second.updated == 1
    assert len(store.documents) == 1


class _RendezvousStore(InMemoryPersonStore):
    """Every upsert waits until ``parties`` upserts are running at the same time."""

    def __init__(self, parties: int) -> None:
        super().__init__()
        self.barrier = threading.Barrier(parties, timeout=5.0)

    def upsert(self, identifier: str, record: PersonRecord, *, now: datetime) -> bool:
        self.barrier.wait()
        return super().upsert(identifier, record, now=now)


def test_every_worker_gets_its_own_store_thread(clock: FakeClock) -> None:
    workers = 40
    identifiers = IdentifierRange(start=40000000, end=40000000 + workers - 1)
    lookup = FakeLookupClient(
        {str(value): found(make_payload_data(str(value))) for value in identifiers}
    )
    store = _RendezvousStore(parties=workers)

    summary = enrich_identifier_range(
        identifiers,
        enrichment=EnrichmentConfig(concurrency=workers),
        lookup_client=lookup,
        store=store,
        clock=clock,
    )

    assert summary == RunSummary(attempted=workers, inserted=workers)
    assert len(store.documents) == workers
