"""Logging configuration helpers."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(level: str = "WARNING") -> None:
    """Send log records to stderr; stdout carries the annotated diff."""
    normalized = level.upper()
    logging.basicConfig(
        level=getattr(logging, normalized, logging.WARNING),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
    logging.getLogger("blamediff").setLevel(getattr(logging, normalized, logging.WARNING))
