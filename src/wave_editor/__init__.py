"""
Waveform editor package.

Exposes the editing session, the normalized export and the cyclic sampler,
plus the file readers/writers used by the CLI and the GUI.
"""

from .config import EditorConfig, load_editor_config
from .core import (
    AnchorPoint,
    NormalizedCurve,
    WaveformEditor,
    build_default_points,
    export_normalized,
    sample,
    sample_many,
)
from .errors import (
    CurveImportError,
    CurveValidationError,
    GestureError,
    LayoutAdvisory,
    PersistenceError,
    WaveEditorError,
)
from .exporters import load_normalized, load_wave, save_wave, write_normalized
from .notify import LoggingNotifier, Notifier, Severity
from .settings import get_settings, reset_settings_cache, session_state_path

__all__ = [
    "EditorConfig",
    "load_editor_config",
    "AnchorPoint",
    "NormalizedCurve",
    "WaveformEditor",
    "build_default_points",
    "export_normalized",
    "sample",
    "sample_many",
    "CurveImportError",
    "CurveValidationError",
    "GestureError",
    "LayoutAdvisory",
    "PersistenceError",
    "WaveEditorError",
    "load_normalized",
    "load_wave",
    "save_wave",
    "write_normalized",
    "LoggingNotifier",
    "Notifier",
    "Severity",
    "get_settings",
    "reset_settings_cache",
    "session_state_path",
]
