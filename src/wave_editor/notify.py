"""Notification channel used to surface advisories to whoever hosts the editor."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Protocol


logger = logging.getLogger(__name__)


class Severity(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class Notifier(Protocol):
    """Anything that can show a short message to the operator."""

    def advise(self, message: str, severity: Severity = Severity.INFO) -> None:
        ...


_LEVELS = {
    Severity.INFO: logging.INFO,
    Severity.SUCCESS: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
}


class LoggingNotifier:
    """Notifier that forwards advisories to a logger (used by the CLI and headless runs)."""

    def __init__(self, target: logging.Logger | None = None) -> None:
        self._logger = target or logger

    def advise(self, message: str, severity: Severity = Severity.INFO) -> None:
        self._logger.log(_LEVELS[Severity(severity)], "%s", message)
