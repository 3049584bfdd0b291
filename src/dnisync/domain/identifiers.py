"""Identifier ranges driving an enrichment run."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Iterator

IDENTIFIER_WIDTH: Final[int] = 8


class InvalidRangeError(ValueError):
    """Raised when identifier range bounds are malformed or inverted."""


def format_identifier(value: int) -> str:
    """Render an identifier as the zero-padded string used for lookups and storage."""

    if value < 0:
        raise InvalidRangeError(f"Identifiers must be non-negative, got {value}")
    return str(value).zfill(IDENTIFIER_WIDTH)


@dataclass(frozen=True, slots=True)
class IdentifierRange:
    """Closed interval ``start..end`` of numeric identifiers.

    Iterating yields the identifiers in ascending order; every iteration starts over,
    so the same range can be replayed.
    """

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0:
            raise InvalidRangeError(f"Range start must be non-negative, got {self.start}")
        if self.start > self.end:
            raise InvalidRangeError(
                f"Range start {self.start} must not be greater than end {self.end}"
            )

    def __iter__(self) -> Iterator[int]:
        return iter(range(self.start, self.end + 1))

    def __len__(self) -> int:
        return self.end - self.start + 1

    def __contains__(self, value: object) -> bool:
        return isinstance(value, int) and self.start <= value <= self.end

    @classmethod
    def parse(cls, start: str, end: str) -> IdentifierRange:
        return cls(start=_parse_bound(start, "start"), end=_parse_bound(end, "end"))


def _parse_bound(value: str, label: str) -> int:
    normalized = value.strip()
    if not (normalized.isascii() and normalized.isdigit()):
        raise InvalidRangeError(f"Range {label} must be a non-negative integer, got {value!r}")
    return int(normalized)


__all__ = ["IDENTIFIER_WIDTH", "IdentifierRange", "InvalidRangeError", "format_identifier"]
