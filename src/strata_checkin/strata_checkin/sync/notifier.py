from __future__ import annotations

import logging
from typing import Protocol

from ..common.logging_setup import get_logger

log = get_logger("notices")

_LEVELS = {
    "info": logging.INFO,
    "success": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class Notifier(Protocol):
    """User-facing transient notices (toasts)."""

    def notify(self, message: str, *, level: str = "info") -> None:
        raise NotImplementedError


class LoggingNotifier(Notifier):
    def notify(self, message: str, *, level: str = "info") -> None:
        log.log(_LEVELS.get(level, logging.INFO), message)
