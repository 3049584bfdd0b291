"""Document store configuration helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .env import optional_env_var, optional_float_env_var, require_env_vars
from .errors import ConfigurationError

DEFAULT_COLLECTION: Final[str] = "personas"
DEFAULT_STORE_TIMEOUT_SECONDS: Final[float] = 10.0


@dataclass(frozen=True, slots=True)
class MongoConfig:
    """Connection settings; ``timeout_seconds`` bounds every single store operation."""

    uri: str
    database: str
    collection: str = DEFAULT_COLLECTION
    timeout_seconds: float = DEFAULT_STORE_TIMEOUT_SECONDS


def get_mongo_config(*, timeout_seconds: float | None = None) -> MongoConfig:
    """Read store settings from the environment.

    ``timeout_seconds`` takes precedence over ``MONGO_TIMEOUT_SECONDS``.
    """

    values = require_env_vars(("MONGO_URI", "DB_NAME"))
    if timeout_seconds is None:
        timeout_seconds = optional_float_env_var(
            "MONGO_TIMEOUT_SECONDS", DEFAULT_STORE_TIMEOUT_SECONDS
        )
    if timeout_seconds <= 0:
        raise ConfigurationError("Store timeout must be positive")
    return MongoConfig(
        uri=values["MONGO_URI"],
        database=values["DB_NAME"],
        collection=optional_env_var("MONGO_COLLECTION", DEFAULT_COLLECTION),
        timeout_seconds=timeout_seconds,
    )
