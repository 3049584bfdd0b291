"""Domain port definitions for adapters."""

from __future__ import annotations

from .lookup import LookupClient, RecordNormalizer
from .persistence import AtomicPersonStore, PersonStore, StoreError

__all__ = [
    "AtomicPersonStore",
    "LookupClient",
    "PersonStore",
    "RecordNormalizer",
    "StoreError",
]
