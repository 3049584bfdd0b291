"""Ports for persisting person documents."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from datetime import datetime

    from dnisync.domain.model import Person, PersonRecord


class StoreError(RuntimeError):
    """Raised when the store fails to read or write a person document."""

    def __init__(self, message: str, *, identifier: str | None = None) -> None:
        super().__init__(message)
        self.identifier = identifier


@runtime_checkable
class PersonStore(Protocol):
    """Minimal persistence contract keyed by identifier."""

    def find_by_key(self, identifier: str) -> Person | None: ...

    def insert(self, person: Person) -> None: ...

    def update(self, identifier: str, record: PersonRecord, *, updated_at: datetime) -> None: ...


@runtime_checkable
class AtomicPersonStore(PersonStore, Protocol):
    """Store that can insert-or-update in a single conditional write."""

    def upsert(self, identifier: str, record: PersonRecord, *, now: datetime) -> bool:
        """Write ``record``; return ``True`` when a new document was created."""
        ...


__all__ = ["AtomicPersonStore", "PersonStore", "StoreError"]
