"""Logging configuration for the command-line entry point."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging(level: str | int = logging.WARNING) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)
