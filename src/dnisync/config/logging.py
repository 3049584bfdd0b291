"""Root logger setup for the command line."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"

# Chatty at INFO (httpx logs every request) or DEBUG (pymongo topology events)
_NOISY_LOGGERS = ("httpx", "httpcore", "pymongo")


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Send records to stderr with a timestamped one-line format.

    Client libraries are held at WARNING unless ``level`` is stricter, so ``--verbose``
    shows per-identifier debug lines without every HTTP request and server heartbeat.
    """

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        force=force,
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
