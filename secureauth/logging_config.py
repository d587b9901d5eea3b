"""Logging setup for the SecureAuth scripts (the library itself never configures logging)."""

import logging

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "WARNING") -> None:
    """Configure root logging with a consistent format; unknown levels fall back to WARNING."""
    normalized = level.strip().upper() if level and level.strip() else "WARNING"
    resolved = getattr(logging, normalized, logging.WARNING)
    if not isinstance(resolved, int):
        resolved = logging.WARNING

    logging.basicConfig(level=resolved, format=_LOG_FORMAT)
