"""MongoDB-backed person store."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import pymongo
from pymongo import ASCENDING, MongoClient
from pymongo.errors import PyMongoError

from dnisync.domain.model import Address, Person, PersonRecord
from dnisync.domain.ports.persistence import StoreError

if TYPE_CHECKING:
    from pymongo.collection import Collection

    from dnisync.config.storage import MongoConfig

KEY_FIELD = "dni"
CREATED_FIELD = "createdat"
UPDATED_FIELD = "updatedat"

type Document = dict[str, Any]


def connect(config: MongoConfig) -> MongoClient[Document]:
    """Open a client whose datetimes come back timezone-aware."""

    return MongoClient(
        config.uri,
        tz_aware=True,
        tzinfo=UTC,
        timeoutMS=int(config.timeout_seconds * 1000),
    )


class MongoPersonStore:
    """Person documents keyed by ``dni``.

    Field names follow the layout already used by the ``personas`` collection so that
    earlier data keeps its ``createdat`` across runs.
    """

    def __init__(
        self,
        collection: Collection[Document],
        *,
        timeout_seconds: float | None = None,
    ) -> None:
        self._collection = collection
        self._timeout_seconds = timeout_seconds

    @classmethod
    def from_client(cls, client: MongoClient[Document], config: MongoConfig) -> MongoPersonStore:
        collection = client[config.database][config.collection]
        return cls(collection, timeout_seconds=config.timeout_seconds)

    @property
    def collection(self) -> Collection[Document]:
        return self._collection

    def ensure_indexes(self) -> None:
        try:
            with pymongo.timeout(self._timeout_seconds):
                self._collection.create_index([(KEY_FIELD, ASCENDING)], unique=True)
        except PyMongoError as exc:
            raise StoreError(f"Could not create index on {KEY_FIELD!r}: {exc}") from exc

    def find_by_key(self, identifier: str) -> Person | None:
        try:
            with pymongo.timeout(self._timeout_seconds):
                document = self._collection.find_one({KEY_FIELD: identifier})
        except PyMongoError as exc:
            raise StoreError(f"Lookup failed: {exc}", identifier=identifier) from exc
        if document is None:
            return None
        return _to_person(document)

    def insert(self, person: Person) -> None:
        document = {
            KEY_FIELD: person.identifier,
            **_record_fields(person.record),
            CREATED_FIELD: person.created_at,
            UPDATED_FIELD: person.updated_at,
        }
        try:
            with pymongo.timeout(self._timeout_seconds):
                self._collection.insert_one(document)
        except PyMongoError as exc:
            raise StoreError(f"Insert failed: {exc}", identifier=person.identifier) from exc

    def update(self, identifier: str, record: PersonRecord, *, updated_at: datetime) -> None:
        changes = {**_record_fields(record), UPDATED_FIELD: updated_at}
        try:
            with pymongo.timeout(self._timeout_seconds):
                result = self._collection.update_one({KEY_FIELD: identifier}, {"$set": changes})
        except PyMongoError as exc:
            raise StoreError(f"Update failed: {exc}", identifier=identifier) from exc
        if result.matched_count == 0:
            raise StoreError("Update matched no document", identifier=identifier)

    def upsert(self, identifier: str, record: PersonRecord, *, now: datetime) -> bool:
        try:
            with pymongo.timeout(self._timeout_seconds):
                result = self._collection.update_one(
                    {KEY_FIELD: identifier},
                    {
                        "$set": {**_record_fields(record), UPDATED_FIELD: now},
                        "$setOnInsert": {CREATED_FIELD: now},
                    },
                    upsert=True,
                )
        except PyMongoError as exc:
            raise StoreError(f"Upsert failed: {exc}", identifier=identifier) from exc
        return result.upserted_id is not None


def _record_fields(record: PersonRecord) -> Document:
    address = record.address
    return {
        "nombre": record.given_name,
        "apellido_paterno": record.paternal_surname,
        "apellido_materno": record.maternal_surname,
        "domicilio": {
            "direccion": address.line,
            "distrito": address.district,
            "provincia": address.province,
            "departamento": address.department,
            "ubigeo": address.geo_code,
        },
        "source": record.source,
    }


def _to_person(document: Document) -> Person:
    identifier = str(document.get(KEY_FIELD, ""))
    address = document.get("domicilio") or {}
    record = PersonRecord(
        given_name=document.get("nombre") or "",
        paternal_surname=document.get("apellido_paterno") or "",
        maternal_surname=document.get("apellido_materno") or "",
        address=Address(
            line=address.get("direccion") or "",
            district=address.get("distrito") or "",
            province=address.get("provincia") or "",
            department=address.get("departamento") or "",
            geo_code=address.get("ubigeo") or "",
        ),
        source=int(document.get("source") or 0),
    )
    return Person(
        identifier=identifier,
        record=record,
        created_at=_timestamp(document, CREATED_FIELD, identifier),
        updated_at=_timestamp(document, UPDATED_FIELD, identifier),
    )


def _timestamp(document: Document, name: str, identifier: str) -> datetime | None:
    value = document.get(name)
    if value is None:
        return None
    if not isinstance(value, datetime):
        raise StoreError(f"Stored {name!r} is not a date: {value!r}", identifier=identifier)
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


__all__ = ["MongoPersonStore", "connect"]
