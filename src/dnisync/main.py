from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from dnisync.app import enrich_identifier_range
from dnisync.config import (
    ConfigurationError,
    RateLimit,
    configure_logging,
    get_enrichment_config,
    get_lookup_config,
    get_mongo_config,
)
from dnisync.domain.identifiers import IdentifierRange
from dnisync.domain.reconciliation import UpsertMode

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return number


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative, got {value}")
    return number


def _positive_float(value: str) -> float:
    number = float(value)
    if not number > 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return number


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Look up a range of national ID numbers and store the results"
    )
    parser.add_argument("start", help="First identifier of the range (inclusive)")
    parser.add_argument("end", help="Last identifier of the range (inclusive)")
    parser.add_argument(
        "--concurrency",
        type=_positive_int,
        default=None,
        help="Maximum number of identifiers processed at once (defaults to config)",
    )
    parser.add_argument(
        "--rate-limit",
        type=_positive_int,
        help="Maximum lookups per second across all workers",
    )
    parser.add_argument(
        "--retries",
        type=_non_negative_int,
        help="Retries for failed lookup requests (defaults to config)",
    )
    parser.add_argument(
        "--lookup-timeout",
        type=_positive_float,
        help="Seconds allowed for a single lookup, retries included",
    )
    parser.add_argument(
        "--store-timeout",
        type=_positive_float,
        help="Seconds allowed for a single store operation (overrides MONGO_TIMEOUT_SECONDS)",
    )
    parser.add_argument(
        "--upsert-mode",
        type=UpsertMode,
        choices=list(UpsertMode),
        default=None,
        help="How stored documents are reconciled (default: atomic)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(list(argv))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        identifiers = IdentifierRange.parse(parsed_args.start, parsed_args.end)
    except ValueError as exc:
        log.error("Invalid arguments: %s", exc)  # noqa: TRY400
        sys.exit(2)

    ratelimit = (
        RateLimit(max_calls=parsed_args.rate_limit, per_seconds=1.0)
        if parsed_args.rate_limit is not None
        else None
    )

    try:
        enrichment = get_enrichment_config(
            concurrency=parsed_args.concurrency,
            lookup_deadline_seconds=parsed_args.lookup_timeout,
            upsert_mode=parsed_args.upsert_mode,
        )
        mongo_config = get_mongo_config(timeout_seconds=parsed_args.store_timeout)
        lookup_config = get_lookup_config(retries=parsed_args.retries, ratelimit=ratelimit)
        summary = enrich_identifier_range(
            identifiers,
            enrichment=enrichment,
            lookup_config=lookup_config,
            mongo_config=mongo_config,
        )
    except ConfigurationError as exc:
        log.error("Configuration error: %s", exc)  # noqa: TRY400
        sys.exit(1)
    except Exception:
        log.exception("Fatal error during enrichment")
        sys.exit(1)

    log.info(
        "Done: %s identifiers, %s inserted, %s updated, %s without data, %s errors",
        summary.attempted,
        summary.inserted,
        summary.updated,
        summary.skipped,
        summary.errored,
    )


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
