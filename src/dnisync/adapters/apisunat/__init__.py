"""Public interface for the identity lookup adapter."""

from __future__ import annotations

from .client import ApisunatLookupClient, LookupAPIError
from .schema import AddressPayload, LookupResponse, PersonPayload
from .translator import normalize_person

__all__ = [
    "AddressPayload",
    "ApisunatLookupClient",
    "LookupAPIError",
    "LookupResponse",
    "PersonPayload",
    "normalize_person",
]
