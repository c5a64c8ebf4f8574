"""Qt front end for the waveform editor."""

from .app import WaveEditorWindow, run

__all__ = ["WaveEditorWindow", "run"]
