"""Exception types shared by the editor core, the exporters and the CLI."""

from __future__ import annotations

from dataclasses import dataclass


class WaveEditorError(Exception):
    """Base class for recoverable editor errors."""


class CurveValidationError(WaveEditorError, ValueError):
    """Raised when an edit would break a curve invariant (state is left unchanged)."""


class CurveImportError(WaveEditorError, ValueError):
    """Raised when a wave file or normalized curve is structurally invalid."""


class PersistenceError(WaveEditorError):
    """Raised when the durable session slot cannot be read or written."""


class GestureError(WaveEditorError, RuntimeError):
    """Raised when a gesture is started while another one is still active."""


@dataclass(frozen=True)
class LayoutAdvisory:
    """Informational note produced when a new point had to be pinned to the edge."""

    message: str
    x: float
