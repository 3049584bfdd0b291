"""Application services for enriching identifier ranges."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from dnisync.domain.identifiers import format_identifier
from dnisync.domain.outcomes import (
    Found,
    NoData,
    ProcessingStatus,
    RunSummary,
    TransientError,
)
from dnisync.domain.ports.persistence import StoreError
from dnisync.domain.reconciliation import ReconcileResult

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable

    from dnisync.domain.ports.lookup import LookupClient, RecordNormalizer
    from dnisync.domain.reconciliation import UpsertResolver

DEFAULT_CONCURRENCY = 16

log = getLogger(__name__)


@dataclass(slots=True)
class EnrichmentPipeline[TPayload]:
    """Lookup, normalize and reconcile a single identifier."""

    lookup_client: LookupClient[TPayload]
    normalize: RecordNormalizer[TPayload]
    resolver: UpsertResolver

    async def process(self, identifier: int) -> ProcessingStatus:
        key = format_identifier(identifier)
        outcome = await self.lookup_client.lookup(key)

        match outcome:
            case NoData():
                log.debug("No data for %s", key)
                return ProcessingStatus.NO_DATA
            case TransientError():
                log.warning("Lookup failed for %s: %s", key, outcome)
                return ProcessingStatus.LOOKUP_FAILED
            case Found(payload=payload, source=source):
                record = self.normalize(payload, source=source)
            case _:
                raise TypeError(f"Unexpected lookup outcome: {outcome!r}")

        try:
            result = await self.resolver.reconcile(key, record)
        except StoreError as exc:
            log.warning("Store failed for %s: %s", key, exc)
            return ProcessingStatus.STORE_FAILED

        if result is ReconcileResult.INSERTED:
            log.info("Inserted %s", key)
            return ProcessingStatus.INSERTED
        log.info("Updated %s", key)
        return ProcessingStatus.UPDATED


async def dispatch(
    identifiers: Iterable[int],
    process: Callable[[int], Awaitable[ProcessingStatus]],
    *,
    concurrency: int = DEFAULT_CONCURRENCY,
    queue_size: int | None = None,
) -> RunSummary:
    """Run ``process`` once per identifier on a fixed pool of workers.

    Identifiers are fed through a bounded queue, so at most ``concurrency`` runs are
    in flight and the producer waits when workers fall behind. Completion order is
    unspecified. A failing identifier is logged and counted; it never stops the run.
    """

    if concurrency < 1:
        raise ValueError(f"Concurrency must be at least 1, got {concurrency}")

    summary = RunSummary()
    queue: asyncio.Queue[int | None] = asyncio.Queue(maxsize=queue_size or concurrency * 2)

    async def produce() -> None:
        for identifier in identifiers:
            await queue.put(identifier)
        for _ in range(concurrency):
            await queue.put(None)

    async def work() -> None:
        while (identifier := await queue.get()) is not None:
            try:
                status = await process(identifier)
            except Exception:  # noqa: BLE001
                log.exception("Unexpected failure while processing %s", identifier)
                status = ProcessingStatus.CRASHED
            summary.record(status)

    async with asyncio.TaskGroup() as group:
        group.create_task(produce())
        for _ in range(concurrency):
            group.create_task(work())

    return summary


async def enrich_identifiers[TPayload](
    identifiers: Iterable[int],
    *,
    pipeline: EnrichmentPipeline[TPayload],
    concurrency: int = DEFAULT_CONCURRENCY,
    queue_size: int | None = None,
) -> RunSummary:
    """Enrich every identifier and return the aggregate counts."""

    summary = await dispatch(
        identifiers,
        pipeline.process,
        concurrency=concurrency,
        queue_size=queue_size,
    )
    log.info(
        "Enrichment finished: attempted=%s, inserted=%s, updated=%s, skipped=%s, errored=%s",
        summary.attempted,
        summary.inserted,
        summary.updated,
        summary.skipped,
        summary.errored,
    )
    return summary


__all__ = ["DEFAULT_CONCURRENCY", "EnrichmentPipeline", "dispatch", "enrich_identifiers"]
