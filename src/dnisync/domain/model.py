"""Canonical person records."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(frozen=True, slots=True)
class Address:
    line: str = ""
    district: str = ""
    province: str = ""
    department: str = ""
    geo_code: str = ""


@dataclass(frozen=True, slots=True)
class PersonRecord:
    """Mutable fields of a person as reported by the lookup service."""

    given_name: str = ""
    paternal_surname: str = ""
    maternal_surname: str = ""
    address: Address = field(default_factory=Address)
    source: int = 0


@dataclass(frozen=True, slots=True)
class Person:
    """Stored person document.

    ``identifier`` never changes once inserted. ``created_at`` is written by the first
    insert only; ``updated_at`` moves forward on every insert or update. Documents
    written before timestamps were kept read back with ``None`` for the missing ones.
    """

    identifier: str
    record: PersonRecord
    created_at: datetime | None
    updated_at: datetime | None

    @classmethod
    def first_seen(cls, identifier: str, record: PersonRecord, *, now: datetime) -> Person:
        return cls(identifier=identifier, record=record, created_at=now, updated_at=now)

    @property
    def given_name(self) -> str:
        return self.record.given_name

    @property
    def paternal_surname(self) -> str:
        return self.record.paternal_surname

    @property
    def maternal_surname(self) -> str:
        return self.record.maternal_surname

    @property
    def address(self) -> Address:
        return self.record.address

    @property
    def source(self) -> int:
        return self.record.source
