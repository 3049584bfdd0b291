"""Reconcile normalized person records against the store.

Two strategies produce the same timestamps:

``atomic``
    One conditional write: mutable fields and ``updated_at`` are always set, while the
    identifier and ``created_at`` are only written when the document is created. No
    window exists between reading and writing, so concurrent writers cannot clobber
    ``created_at``.

``read-then-write``
    Look the document up, then insert or update depending on whether it exists. Other
    writers sharing the collection can race between the two calls.

Store calls are blocking and run on ``executor``. Size it to the number of workers so
that no call waits for a free thread. Deadlines belong to the store itself: a call that
the store abandons raises ``StoreError`` and leaves nothing written.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol

from dnisync.domain.model import Person
from dnisync.domain.ports.persistence import AtomicPersonStore

if TYPE_CHECKING:
    from collections.abc import Callable
    from concurrent.futures import Executor

    from dnisync.domain.model import PersonRecord
    from dnisync.domain.ports.persistence import PersonStore


class Clock(Protocol):
    def __call__(self) -> datetime: ...


def _utcnow() -> datetime:
    return datetime.now(UTC)


class UpsertMode(StrEnum):
    ATOMIC = "atomic"
    READ_THEN_WRITE = "read-then-write"


class ReconcileResult(StrEnum):
    INSERTED = "inserted"
    UPDATED = "updated"


@dataclass(slots=True)
class UpsertResolver:
    store: PersonStore
    mode: UpsertMode = UpsertMode.ATOMIC
    clock: Clock = field(default=_utcnow)
    executor: Executor | None = None

    def __post_init__(self) -> None:
        self.mode = UpsertMode(self.mode)
        if self.mode is UpsertMode.ATOMIC and not isinstance(self.store, AtomicPersonStore):
            raise ValueError(
                f"{type(self.store).__name__} does not support atomic upserts; "
                f"use mode={UpsertMode.READ_THEN_WRITE.value!r}"
            )

    async def reconcile(self, identifier: str, record: PersonRecord) -> ReconcileResult:
        """Insert or update ``identifier`` with ``record``.

        Raises ``StoreError`` when any store call fails.
        """

        store = self.store
        if self.mode is UpsertMode.ATOMIC and isinstance(store, AtomicPersonStore):
            now = self.clock()
            created = await self._call(lambda: store.upsert(identifier, record, now=now))
            return ReconcileResult.INSERTED if created else ReconcileResult.UPDATED
        return await self._reconcile_read_then_write(identifier, record)

    async def _reconcile_read_then_write(
        self, identifier: str, record: PersonRecord
    ) -> ReconcileResult:
        existing = await self._call(lambda: self.store.find_by_key(identifier))
        now = self.clock()

        if existing is None:
            person = Person.first_seen(identifier, record, now=now)
            await self._call(lambda: self.store.insert(person))
            return ReconcileResult.INSERTED

        await self._call(lambda: self.store.update(identifier, record, updated_at=now))
        return ReconcileResult.UPDATED

    async def _call[T](self, func: Callable[[], T]) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self.executor, func)


__all__ = ["Clock", "ReconcileResult", "UpsertMode", "UpsertResolver"]
