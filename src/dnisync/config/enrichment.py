"""Pipeline defaults for identifier enrichment runs."""

from __future__ import annotations

from dataclasses import dataclass

from dnisync.domain.enrichment import DEFAULT_CONCURRENCY
from dnisync.domain.reconciliation import UpsertMode

from .errors import ConfigurationError

DEFAULT_LOOKUP_DEADLINE_SECONDS = 60.0


@dataclass(frozen=True, slots=True)
class EnrichmentConfig:
    """Worker pool and per-lookup limits.

    Store deadlines are not set here; they travel with ``MongoConfig.timeout_seconds``
    so the driver itself enforces them.
    """

    concurrency: int = DEFAULT_CONCURRENCY
    queue_size: int | None = None
    lookup_deadline_seconds: float = DEFAULT_LOOKUP_DEADLINE_SECONDS
    upsert_mode: UpsertMode = UpsertMode.ATOMIC

    def __post_init__(self) -> None:
        if self.concurrency < 1:
            raise ConfigurationError(f"Concurrency must be at least 1, got {self.concurrency}")
        if self.queue_size is not None and self.queue_size < 1:
            raise ConfigurationError(f"Queue size must be at least 1, got {self.queue_size}")
        if self.lookup_deadline_seconds <= 0:
            raise ConfigurationError("Lookup deadline must be positive")
        try:
            mode = UpsertMode(self.upsert_mode)
        except ValueError as exc:
            raise ConfigurationError(f"Unknown upsert mode: {self.upsert_mode}") from exc
        object.__setattr__(self, "upsert_mode", mode)

    @property
    def effective_queue_size(self) -> int:
        return self.queue_size or self.concurrency * 2


def get_enrichment_config(
    *,
    concurrency: int | None = None,
    lookup_deadline_seconds: float | None = None,
    upsert_mode: UpsertMode | None = None,
) -> EnrichmentConfig:
    defaults = EnrichmentConfig()
    return EnrichmentConfig(
        concurrency=defaults.concurrency if concurrency is None else concurrency,
        lookup_deadline_seconds=(
            defaults.lookup_deadline_seconds
            if lookup_deadline_seconds is None
            else lookup_deadline_seconds
        ),
        upsert_mode=defaults.upsert_mode if upsert_mode is None else upsert_mode,
    )
