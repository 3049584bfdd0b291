"""Translate lookup payloads into domain records."""

from __future__ import annotations

from dnisync.domain.model import Address, PersonRecord

from .schema import PersonPayload


def normalize_person(payload: PersonPayload, *, source: int) -> PersonRecord:
    address = payload.address
    return PersonRecord(
        given_name=payload.given_name,
        paternal_surname=payload.paternal_surname,
        maternal_surname=payload.maternal_surname,
        address=Address(
            line=address.line,
            district=address.district,
            province=address.province,
            department=address.department,
            geo_code=address.geo_code,
        ),
        source=source,
    )
