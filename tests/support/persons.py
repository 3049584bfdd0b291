"""Reusable fakes and helpers for person enrichment tests."""

from __future__ import annotations

import asyncio
import threading
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from dnisync.adapters.apisunat import PersonPayload
from dnisync.domain.model import Address, Person, PersonRecord
from dnisync.domain.outcomes import Found, LookupOutcome, NoData, TransientError
from dnisync.domain.ports.persistence import StoreError

if TYPE_CHECKING:
    from collections.abc import Mapping

T0 = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)
T1 = datetime(2024, 3, 8, 9, 30, tzinfo=UTC)


def make_payload_data(
    dni: str = "40000002",
    *,
    direccion: str = "AV. LOS ALAMOS 123",
    distrito: str = "MIRAFLORES",
) -> dict[str, object]:
    return {
        "dni": dni,
        "nombre": "ROSA MARIA",
        "apellido_paterno": "QUISPE",
        "apellido_materno": "HUAMAN",
        "domicilio": {
            "direccion": direccion,
            "distrito": distrito,
            "provincia": "LIMA",
            "departamento": "LIMA",
            "ubigeo": "150122",
        },
    }


def make_record(*, line: str = "AV. LOS ALAMOS 123", source: int = 1) -> PersonRecord:
    return PersonRecord(
        given_name="ROSA MARIA",
        paternal_surname="QUISPE",
        maternal_surname="HUAMAN",
        address=Address(
            line=line,
            district="MIRAFLORES",
            province="LIMA",
            department="LIMA",
            geo_code="150122",
        ),
        source=source,
    )


def found(data: Mapping[str, object] | None = None, *, source: int = 1) -> Found[PersonPayload]:
    payload = PersonPayload.model_validate(dict(data or make_payload_data()))
    return Found(payload=payload, source=source)


class FakeClock:
    """Clock returning a fixed instant that tests move explicitly."""

    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


class FakeLookupClient:
    """In-memory lookup client; unknown identifiers yield ``NoData``."""

    def __init__(
        self,
        outcomes: Mapping[str, LookupOutcome[PersonPayload]] | None = None,
        *,
        delay: float = 0.0,
    ) -> None:
        self.outcomes: dict[str, LookupOutcome[PersonPayload]] = dict(outcomes or {})
        self.delay = delay
        self.calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def lookup(self, identifier: str) -> LookupOutcome[PersonPayload]:
        self.calls.append(identifier)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
        finally:
            self.in_flight -= 1
        return self.outcomes.get(identifier, NoData())


class InMemoryPersonStore:
    """Thread-safe dictionary store implementing the atomic store port."""

    def __init__(self, *, fail_on: set[str] | None = None) -> None:
        self.documents: dict[str, Person] = {}
        self.fail_on = fail_on or set()
        self._lock = threading.Lock()

    def _check(self, identifier: str) -> None:
        if identifier in self.fail_on:
            raise StoreError("store unavailable", identifier=identifier)

    def find_by_key(self, identifier: str) -> Person | None:
        self._check(identifier)
        with self._lock:
            return self.documents.get(identifier)

    def insert(self, person: Person) -> None:
        self._check(person.identifier)
        with self._lock:
            if person.identifier in self.documents:
                raise StoreError("duplicate key", identifier=person.identifier)
            self.documents[person.identifier] = person

    def update(self, identifier: str, record: PersonRecord, *, updated_at: datetime) -> None:
        self._check(identifier)
        with self._lock:
            existing = self.documents.get(identifier)
            if existing is None:
                raise StoreError("no document", identifier=identifier)
            self.documents[identifier] = replace(existing, record=record, updated_at=updated_at)

    def upsert(self, identifier: str, record: PersonRecord, *, now: datetime) -> bool:
        self._check(identifier)
        with self._lock:
            existing = self.documents.get(identifier)
            if existing is None:
                self.documents[identifier] = Person.first_seen(identifier, record, now=now)
                return True
            self.documents[identifier] = replace(existing, record=record, updated_at=now)
            return False


def transient(message: str = "boom") -> TransientError:
    return TransientError(cause=RuntimeError(message))


__all__ = [
    "T0",
    "T1",
    "FakeClock",
    "FakeLookupClient",
    "InMemoryPersonStore",
    "found",
    "make_payload_data",
    "make_record",
    "transient",
]
