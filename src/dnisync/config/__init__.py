"""Application configuration helpers."""

from __future__ import annotations

from .enrichment import EnrichmentConfig, get_enrichment_config
from .env import require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .lookup import LookupConfig, get_lookup_config
from .storage import MongoConfig, get_mongo_config

__all__ = [
    "ConfigurationError",
    "EnrichmentConfig",
    "LookupConfig",
    "MissingConfigurationError",
    "MongoConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "configure_logging",
    "get_enrichment_config",
    "get_lookup_config",
    "get_mongo_config",
    "require_env_vars",
]
