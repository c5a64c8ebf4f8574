"""Preview controller for the scrolling playback of the authored curve."""

from __future__ import annotations

from PySide6.QtCore import QObject, QTimer, Signal
from PySide6.QtWidgets import QWidget

from ...core.editor import WaveformEditor


class PreviewController(QObject):
    """Drive the editor's preview mode from a ``QTimer``.

    While active the editor ignores pointer gestures; stopping restores the
    editing view untouched.
    """

    finished = Signal()
    frame_advanced = Signal(float)  # current scroll offset

    def __init__(self, editor: WaveformEditor, canvas: QWidget, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._editor = editor
        self._canvas = canvas
        self._timer = QTimer(self)
        self._timer.timeout.connect(self._advance_frame)
        self._interval_ms = editor.config.preview.tick_interval_ms
        self._active = False

    def is_active(self) -> bool:
        """Return whether the preview is currently scrolling."""
        return self._active

    def start(self) -> None:
        if self._active:
            return
        if not self._editor.preview_active:
            self._editor.toggle_preview()
        self._active = True
        self._timer.start(self._interval_ms)
        self._canvas.update()

    def stop(self) -> None:
        """Stop scrolling and return the canvas to editing."""
        if not self._active:
            return
        self._timer.stop()
        if self._editor.preview_active:
            self._editor.toggle_preview()
        self._active = False
        self._canvas.update()
        self.finished.emit()

    def toggle(self) -> bool:
        if self._active:
            self.stop()
        else:
            self.start()
        return self._active

    def _advance_frame(self) -> None:
        self._editor.preview_tick(self._canvas.width())
        self.frame_advanced.emit(self._editor.scroller.offset)
        self._canvas.update()
