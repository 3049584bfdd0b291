"""Lookup service configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var, optional_float_env_var
from .errors import ConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

DEFAULT_LOOKUP_BASE_URL = "https://dniruc.apisunat.com/dni"
DEFAULT_LOOKUP_ORIGIN = "https://apisunat.com"
DEFAULT_LOOKUP_TIMEOUT_SECONDS = 15.0
LOOKUP_ACCEPT = "application/json, text/plain, */*"


@dataclass(frozen=True, slots=True)
class LookupConfig:
    """Holds lookup service settings and the HTTP resilience they imply."""

    base_url: str
    origin: str
    resilience: ResilienceConfig


def get_lookup_config(
    *,
    timeout_seconds: float | None = None,
    retries: int | None = None,
    ratelimit: RateLimit | None = None,
) -> LookupConfig:
    base_url = optional_env_var("LOOKUP_BASE_URL", DEFAULT_LOOKUP_BASE_URL).rstrip("/")
    origin = optional_env_var("LOOKUP_ORIGIN", DEFAULT_LOOKUP_ORIGIN)
    if timeout_seconds is None:
        timeout_seconds = optional_float_env_var(
            "LOOKUP_TIMEOUT_SECONDS", DEFAULT_LOOKUP_TIMEOUT_SECONDS
        )
    if timeout_seconds <= 0:
        raise ConfigurationError("Lookup timeout must be positive")
    if retries is not None and retries < 0:
        raise ConfigurationError("Retry count must be non-negative")
    retry = RetryPolicy() if retries is None else RetryPolicy(total=retries)

    return LookupConfig(
        base_url=base_url,
        origin=origin,
        resilience=ResilienceConfig(
            name="apisunat",
            base_url=base_url,
            timeout_seconds=timeout_seconds,
            retry=retry,
            ratelimit=ratelimit,
            default_headers={"accept": LOOKUP_ACCEPT, "origin": origin},
        ),
    )
