"""Ports for querying the external identity lookup service."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from dnisync.domain.model import PersonRecord
    from dnisync.domain.outcomes import LookupOutcome


@runtime_checkable
class LookupClient[TPayload](Protocol):
    """Performs one external call for an identifier and classifies the result.

    Implementations never raise for transport or payload problems; those come back as
    ``TransientError`` outcomes.
    """

    async def lookup(self, identifier: str) -> LookupOutcome[TPayload]: ...


@runtime_checkable
class RecordNormalizer[TPayload](Protocol):
    """Pure mapping from a lookup payload to the mutable person fields."""

    def __call__(self, payload: TPayload, *, source: int) -> PersonRecord: ...


__all__ = ["LookupClient", "RecordNormalizer"]
