"""HTTP client for the identity lookup service."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from dnisync.adapters.http_resilience import ResilientClient
from dnisync.domain.outcomes import Found, LookupOutcome, NoData, TransientError

from .schema import LookupResponse, PersonPayload

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from dnisync.config.http_resilience import ResilienceConfig
    from dnisync.config.lookup import LookupConfig

log = getLogger(__name__)


class LookupAPIError(RuntimeError):
    """Raised when the lookup service returns an unexpected response."""


class ApisunatLookupClient:
    """Looks identifiers up one GET at a time.

    The underlying ``ResilientClient`` is opened lazily and shared by every concurrent
    ``lookup`` call until ``aclose``. Failures never escape ``lookup``: they are
    returned as ``TransientError`` outcomes. ``deadline_seconds`` bounds one lookup
    including its retries; without it only the per-request timeout applies.
    """

    def __init__(
        self,
        *,
        config: LookupConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
        deadline_seconds: float | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient
        self._deadline_seconds = deadline_seconds
        self._client: ResilientClient | None = None

    async def __aenter__(self) -> ApisunatLookupClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def endpoint(self, identifier: str) -> str:
        return f"{self._config.base_url}/{identifier}"

    async def lookup(self, identifier: str) -> LookupOutcome[PersonPayload]:
        try:
            async with asyncio.timeout(self._deadline_seconds):
                response = await self._perform_request(identifier)
        except (TimeoutError, httpx.HTTPError, LookupAPIError, ValidationError) as exc:
            return TransientError(cause=exc)

        if not response.success:
            return NoData()
        if response.data is None:
            return TransientError(
                cause=LookupAPIError(f"Successful response for {identifier} without data")
            )
        return Found(payload=response.data, source=response.source)

    async def _perform_request(self, identifier: str) -> LookupResponse:
        client = self._ensure_client()
        response = await client.get(self.endpoint(identifier))
        response.raise_for_status()

        try:
            payload = response.json()
        except ValueError as exc:
            raise LookupAPIError(f"Malformed JSON body for {identifier}") from exc
        if not isinstance(payload, dict):
            raise LookupAPIError("Unexpected lookup response payload")

        return LookupResponse.model_validate(payload)

    def _ensure_client(self) -> ResilientClient:
        if self._client is None:
            log.debug("Opening HTTP client for %s", self._resilience.name)
            self._client = self._client_factory(self._resilience)
        return self._client
