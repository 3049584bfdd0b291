"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from concurrent.futures import ThreadPoolExecutor
from contextlib import AsyncExitStack, ExitStack, contextmanager, nullcontext
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from dnisync.adapters.apisunat import ApisunatLookupClient, PersonPayload, normalize_person
from dnisync.adapters.mongodb import MongoPersonStore, connect
from dnisync.config import EnrichmentConfig, get_lookup_config, get_mongo_config
from dnisync.domain.enrichment import EnrichmentPipeline, enrich_identifiers
from dnisync.domain.reconciliation import UpsertResolver

if TYPE_CHECKING:
    from collections.abc import Iterator
    from contextlib import AbstractContextManager

    from dnisync.config import LookupConfig, MongoConfig
    from dnisync.domain.identifiers import IdentifierRange
    from dnisync.domain.outcomes import RunSummary
    from dnisync.domain.ports import LookupClient, PersonStore
    from dnisync.domain.reconciliation import Clock


log = getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


@contextmanager
def _mongo_store(config: MongoConfig) -> Iterator[MongoPersonStore]:
    with connect(config) as client:
        store = MongoPersonStore.from_client(client, config)
        store.ensure_indexes()
        yield store


def enrich_identifier_range(
    identifiers: IdentifierRange,
    *,
    enrichment: EnrichmentConfig | None = None,
    lookup_config: LookupConfig | None = None,
    mongo_config: MongoConfig | None = None,
    lookup_client: LookupClient[PersonPayload] | None = None,
    store: PersonStore | None = None,
    clock: Clock | None = None,
) -> RunSummary:
    """Look up every identifier in ``identifiers`` and store what the service returns.

    Configuration is resolved before any connection is opened, so missing settings
    raise ``ConfigurationError`` without touching the store or the lookup service.
    Adapters passed in explicitly are used as-is and left open.
    """

    effective_enrichment = enrichment or EnrichmentConfig()
    store_context: AbstractContextManager[PersonStore]
    if store is None:
        store_context = _mongo_store(mongo_config or get_mongo_config())
    else:
        store_context = nullcontext(store)
    owned_lookup: ApisunatLookupClient | None = None
    if lookup_client is None:
        owned_lookup = ApisunatLookupClient(
            config=lookup_config or get_lookup_config(),
            deadline_seconds=effective_enrichment.lookup_deadline_seconds,
        )
        lookup_client = owned_lookup

    log.info(
        "Starting enrichment: range=%s..%s, concurrency=%s, upsert_mode=%s",
        identifiers.start,
        identifiers.end,
        effective_enrichment.concurrency,
        effective_enrichment.upsert_mode,
    )

    with ExitStack() as stack:
        resolved_store = stack.enter_context(store_context)
        # one store thread per worker
        executor = stack.enter_context(
            ThreadPoolExecutor(
                max_workers=effective_enrichment.concurrency,
                thread_name_prefix="dnisync-store",
            )
        )
        resolver = UpsertResolver(
            store=resolved_store,
            mode=effective_enrichment.upsert_mode,
            clock=clock or _utcnow,
            executor=executor,
        )
        pipeline = EnrichmentPipeline(
            lookup_client=lookup_client,
            normalize=normalize_person,
            resolver=resolver,
        )
        return asyncio.run(
            _run(
                identifiers,
                pipeline=pipeline,
                enrichment=effective_enrichment,
                owned=owned_lookup,
            )
        )


async def _run(
    identifiers: IdentifierRange,
    *,
    pipeline: EnrichmentPipeline[PersonPayload],
    enrichment: EnrichmentConfig,
    owned: ApisunatLookupClient | None,
) -> RunSummary:
    async with AsyncExitStack() as stack:
        if owned is not None:
            await stack.enter_async_context(owned)
        return await enrich_identifiers(
            identifiers,
            pipeline=pipeline,
            concurrency=enrichment.concurrency,
            queue_size=enrichment.effective_queue_size,
        )
