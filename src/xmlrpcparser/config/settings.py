# xmlrpcparser/config/settings.py
import logging
from dataclasses import dataclass
from typing import Any

from xmlrpcparser.config.default import (
    IMPLICIT_STRINGS,
    LOG_FORMAT,
    LOG_LEVEL,
    LOGGER_NAME,
    MAX_DEPTH,
    STRICT_FAULT_SHAPE,
)


# ──────────────────────────────────────────────────────────────
# Logging
# ──────────────────────────────────────────────────────────────
def configure_logging(level: str | int = "INFO", force: bool = False):
    """
    Install the package handler and level on first use.

    Later calls leave an already configured logger alone unless ``force``
    is set.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if logger.handlers and not force:
        return
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)


# ──────────────────────────────────────────────────────────────
# Settings
# ──────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class DecoderSettings:
    log_level: str | int = LOG_LEVEL
    implicit_strings: bool = IMPLICIT_STRINGS
    """Treat bare text inside <value> as a string instead of rejecting it."""
    strict_fault_shape: bool = STRICT_FAULT_SHAPE
    """Reject faults that are not a faultCode/faultString struct."""
    max_depth: int = MAX_DEPTH
    """Upper bound on open elements inside a single <value>."""

    def __post_init__(self):
        if not isinstance(self.max_depth, int) or self.max_depth < 1:
            raise ValueError(f"max_depth must be a positive integer, got {self.max_depth!r}")


def normalize_settings(settings: Any) -> DecoderSettings:
    """Accept a DecoderSettings, a plain dict or None."""
    if settings is None:
        return DecoderSettings()
    if isinstance(settings, DecoderSettings):
        return settings
    if isinstance(settings, dict):
        return DecoderSettings(**settings)
    raise TypeError("settings must be DecoderSettings | dict | None")
