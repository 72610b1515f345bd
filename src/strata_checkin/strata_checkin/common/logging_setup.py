"""Logging configuration for the check-in package.

Modules log through ``get_logger("<feature>")``; this wires a single
console handler onto the ``strata_checkin`` parent logger.
"""

from __future__ import annotations

import logging
import os

ROOT_LOGGER_NAME = "strata_checkin"

_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None, *, log_file: str | None = None) -> logging.Logger:
    base = logging.getLogger(ROOT_LOGGER_NAME)
    level_name = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    base.setLevel(getattr(logging, level_name, logging.INFO))

    if base.handlers:
        return base

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%H:%M:%S"))
    base.addHandler(handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
        except OSError as exc:
            base.warning("Failed to configure logfile '%s': %s", log_file, exc)
        else:
            file_handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
            base.addHandler(file_handler)

    return base


def get_logger(name: str) -> logging.Logger:
    """Return a child of the package logger, independent of import path."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
