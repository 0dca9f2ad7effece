"""
Logging configuration for the CLI and server entry points.
"""

from __future__ import annotations

import logging

from rich.logging import RichHandler

NOISY_LOGGERS = ("httpx", "urllib3", "pinecone")


def configure_logging(verbose: bool = False) -> None:
    """Send log records through rich; DEBUG when *verbose*, else INFO."""
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if verbose else logging.INFO)

    # Clear existing handlers to avoid duplicates if configured twice
    root.handlers.clear()
    handler = RichHandler(rich_tracebacks=True, show_path=False)
    handler.setFormatter(logging.Formatter("%(name)s | %(message)s"))
    root.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
