"""Per-identifier outcomes of an enrichment run."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


@dataclass(frozen=True, slots=True)
class Found[TPayload]:
    """The lookup service returned a match."""

    payload: TPayload
    source: int


@dataclass(frozen=True, slots=True)
class NoData:
    """The lookup service explicitly reported no match."""


@dataclass(frozen=True, slots=True)
class TransientError:
    """The lookup could not be completed; ``cause`` is kept for logging."""

    cause: BaseException

    def __str__(self) -> str:
        return f"{type(self.cause).__name__}: {self.cause}"


type LookupOutcome[TPayload] = Found[TPayload] | NoData | TransientError


class ProcessingStatus(StrEnum):
    INSERTED = "inserted"
    UPDATED = "updated"
    NO_DATA = "no_data"
    LOOKUP_FAILED = "lookup_failed"
    STORE_FAILED = "store_failed"
    CRASHED = "crashed"


@dataclass(slots=True)
class RunSummary:
    """Aggregate counts for one enrichment run."""

    attempted: int = 0
    inserted: int = 0
    updated: int = 0
    skipped: int = 0
    lookup_errors: int = 0
    store_errors: int = 0
    unexpected_errors: int = 0

    @property
    def errored(self) -> int:
        return self.lookup_errors + self.store_errors + self.unexpected_errors

    def record(self, status: ProcessingStatus) -> None:
        self.attempted += 1
        match status:
            case ProcessingStatus.INSERTED:
                self.inserted += 1
            case ProcessingStatus.UPDATED:
                self.updated += 1
            case ProcessingStatus.NO_DATA:
                self.skipped += 1
            case ProcessingStatus.LOOKUP_FAILED:
                self.lookup_errors += 1
            case ProcessingStatus.STORE_FAILED:
                self.store_errors += 1
            case ProcessingStatus.CRASHED:
                self.unexpected_errors += 1


__all__ = [
    "Found",
    "LookupOutcome",
    "NoData",
    "ProcessingStatus",
    "RunSummary",
    "TransientError",
]
