"""Status-bar backed notifier used by the main window."""

from __future__ import annotations

import logging

from PySide6.QtWidgets import QStatusBar

from ..notify import Severity

logger = logging.getLogger(__name__)

_PREFIXES = {
    Severity.INFO: "",
    Severity.SUCCESS: "",
    Severity.WARNING: "Warning: ",
    Severity.ERROR: "Error: ",
}

_LEVELS = {
    Severity.INFO: logging.INFO,
    Severity.SUCCESS: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
}


class StatusBarNotifier:
    """Show advisories in a ``QStatusBar`` and mirror them to the log."""

    def __init__(self, status_bar: QStatusBar, timeout_ms: int = 3000) -> None:
        self._status_bar = status_bar
        self._timeout_ms = timeout_ms

    def advise(self, message: str, severity: Severity = Severity.INFO) -> None:
        severity = Severity(severity)
        prefix = _PREFIXES[severity]
        if message.startswith(prefix):
            prefix = ""
        self._status_bar.showMessage(f"{prefix}{message}", self._timeout_ms)
        logger.log(_LEVELS[severity], "%s", message)
