"""Editing session facade tying the store, view, selection, gestures and history together.

Core components raise; this facade is where validation, import and
persistence failures are turned into advisories and the state is left as it
was.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Union

from ..config import EditorConfig
from ..errors import CurveImportError, CurveValidationError, PersistenceError
from ..notify import LoggingNotifier, Notifier, Severity
from .curve import CurveStore
from .defaults import build_default_points
from .geometry import Position
from .gestures import NO_MODIFIERS, GestureManager, GestureMode, Modifiers
from .history import INITIAL_LABEL, HistoryManager, HistorySnapshot, SessionStore
from .normalize import NormalizedCurve, export_normalized
from .playback import PreviewScroller
from .points import AnchorPoint
from .selection import SelectionState
from .view import ViewTransform


logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

SOURCE_SESSION = "session"
SOURCE_FILE = "file"
SOURCE_DEFAULT = "default"


class WaveformEditor:
    """One editing session over a single curve.

    Parameters
    ----------
    config:
        Tunables; defaults are used when omitted.
    notifier:
        Receives every user-facing advisory.
    session:
        Durable slot restored on :meth:`bootstrap` and written on every commit.
    """

    def __init__(
        self,
        config: Optional[EditorConfig] = None,
        notifier: Optional[Notifier] = None,
        session: Optional[SessionStore] = None,
    ) -> None:
        self.config = config or EditorConfig()
        self.notifier: Notifier = notifier or LoggingNotifier()
        self.session = session

        self.store = CurveStore(
            canvas_size=self.config.canvas.size,
            baseline_y=self.config.canvas.baseline,
            placement=self.config.placement,
        )
        self.view = ViewTransform(self.config.zoom)
        self.selection = SelectionState()
        self.history = HistoryManager(self.config.history.capacity, session=session)
        self.gestures = GestureManager(
            self.store,
            self.view,
            self.selection,
            self.config.interaction,
            on_commit=self.commit,
        )
        self.scroller = PreviewScroller(self.config.preview.scroll_step)
        self.preview_active = False
        self._listeners: List[Callable[[], None]] = []

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------
    @property
    def points(self) -> List[AnchorPoint]:
        return self.store.ordered()

    @property
    def baseline_y(self) -> float:
        return self.store.baseline_y

    @property
    def selected_point(self) -> Optional[AnchorPoint]:
        primary = self.selection.primary
        if primary is None or primary not in self.store:
            return None
        return self.store.get(primary)

    def subscribe(self, listener: Callable[[], None]) -> None:
        """Register a callback invoked whenever the point set is committed or replaced."""
        self._listeners.append(listener)

    def _changed(self) -> None:
        for listener in list(self._listeners):
            listener()

    def _advise(self, message: str, severity: Severity = Severity.INFO) -> None:
        self.notifier.advise(message, severity)

    # ------------------------------------------------------------------
    # Startup and history
    # ------------------------------------------------------------------
    def bootstrap(self, fallback: Optional[PathLike] = None) -> str:
        """Restore the session slot, else ``fallback``, else the default curve.

        Returns which source was used.
        """
        source = SOURCE_DEFAULT
        points: Optional[List[AnchorPoint]] = None

        if self.session is not None:
            try:
                snapshot = self.session.load()
            except PersistenceError as exc:
                logger.warning("%s", exc)
                self._advise("Saved session is unreadable; starting fresh", Severity.WARNING)
                snapshot = None
            if snapshot is not None:
                points = snapshot.points()
                source = SOURCE_SESSION

        if points is None and fallback is not None:
            from ..exporters import load_wave

            try:
                points = load_wave(fallback)
                source = SOURCE_FILE
            except FileNotFoundError:
                logger.info("Fallback wave %s not found", fallback)
            except CurveImportError as exc:
                logger.warning("%s", exc)

        if points is None:
            width, height = self.config.canvas.size
            points = build_default_points(width, height)

        self.store.replace(points)
        self.selection.clear()
        self.history.reset()
        self.commit(INITIAL_LABEL)
        if source == SOURCE_SESSION:
            self._advise("Restored previous session")
        logger.debug("Bootstrapped %d points from %s", len(self.store), source)
        return source

    def commit(self, label: str) -> None:
        """Snapshot the current point set; storage failures only raise an advisory."""
        try:
            self.history.commit(self.store.ordered(), label)
        except PersistenceError as exc:
            logger.error("%s", exc)
            self._advise("Error saving state", Severity.ERROR)
        self._changed()

    def _restore(self, snapshot: HistorySnapshot) -> None:
        self.store.replace(snapshot.points())
        self.selection.retain(self.store.names)
        self._changed()

    def undo(self) -> bool:
        undone = self.history.current
        snapshot = self.history.undo()
        if snapshot is None:
            self._advise("Nothing to undo")
            return False
        self._restore(snapshot)
        self._advise(f"Undo: {undone.label}")
        return True

    def redo(self) -> bool:
        snapshot = self.history.redo()
        if snapshot is None:
            self._advise("Nothing to redo")
            return False
        self._restore(snapshot)
        self._advise(f"Redo: {snapshot.label}")
        return True

    # ------------------------------------------------------------------
    # Point operations
    # ------------------------------------------------------------------
    def _target(self, name: Optional[str]) -> Optional[str]:
        target = name if name is not None else self.selection.primary
        if target is None or target not in self.store:
            self._advise("Please select a point first", Severity.ERROR)
            return None
        return target

    def add_point(self) -> AnchorPoint:
        insertion = self.store.add_point(self.selected_point)
        self.selection.select(insertion.point.name)
        self.commit("Add Point")
        if insertion.advisory is not None:
            self._advise(f"Warning: {insertion.advisory.message}", Severity.WARNING)
        self._advise("Point added", Severity.SUCCESS)
        return insertion.point

    def delete_point(self, name: Optional[str] = None) -> bool:
        target = self._target(name)
        if target is None:
            return False
        try:
            self.store.delete_point(target)
        except CurveValidationError as exc:
            self._advise(str(exc), Severity.ERROR)
            return False
        self.selection.discard(target)
        self.commit("Delete Point")
        self._advise("Point deleted", Severity.SUCCESS)
        return True

    def toggle_point_type(self, name: Optional[str] = None) -> Optional[str]:
        target = self._target(name)
        if target is None:
            return None
        new_type = self.store.toggle_point_type(target)
        self.commit("Toggle Point Type")
        self._advise(f"Point type changed to {new_type}")
        return new_type

    def toggle_star(self, name: Optional[str] = None) -> Optional[bool]:
        target = self._target(name)
        if target is None:
            return None
        starred = self.store.toggle_star(target)
        self.commit("Toggle Star")
        self._advise(f"Point {'starred' if starred else 'unstarred'}")
        return starred

    def rename_point(self, old: str, new: str) -> bool:
        try:
            point = self.store.rename_point(old, new)
        except (CurveValidationError, KeyError) as exc:
            self._advise(str(exc), Severity.ERROR)
            return False
        if point.name == old:
            return True
        self.selection.rename(old, point.name)
        self.commit("Rename Point")
        return True

    def move_to_baseline(self, names: Optional[Iterable[str]] = None) -> bool:
        targets = sorted(names) if names is not None else sorted(self.selection.selected)
        if not targets:
            self._advise("Please select a point first", Severity.ERROR)
            return False
        self.store.snap_to_baseline(targets)
        self.commit("Move to Baseline")
        return True

    def toggle_transform_mode(self) -> bool:
        """Arm or disarm the scale gesture; returns whether it is armed."""
        if not self.gestures.is_idle:
            return self.gestures.transform_armed
        try:
            armed = self.gestures.toggle_transform_mode()
        except CurveValidationError as exc:
            self._advise(str(exc), Severity.ERROR)
            return False
        self._advise("Transform mode enabled" if armed else "Transform mode disabled")
        return armed

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------
    def load_wave(self, path: PathLike) -> bool:
        from ..exporters import load_wave

        try:
            points = load_wave(path)
            self.store.replace(points)
        except FileNotFoundError as exc:
            self._advise(str(exc), Severity.ERROR)
            return False
        except (CurveImportError, CurveValidationError) as exc:
            self._advise(f"Error loading wave: {exc}", Severity.ERROR)
            return False
        self.selection.clear()
        self.commit("Load Wave")
        self._advise("Wave loaded", Severity.SUCCESS)
        return True

    def save_wave(self, path: PathLike) -> bool:
        from ..exporters import save_wave

        try:
            save_wave(self.store.ordered(), path)
        except OSError as exc:
            self._advise(f"Error saving wave: {exc}", Severity.ERROR)
            return False
        self._advise("Wave saved", Severity.SUCCESS)
        return True

    def export_normalized(self) -> Optional[NormalizedCurve]:
        try:
            return export_normalized(self.store.ordered(), self.baseline_y, self.store.canvas_height)
        except CurveValidationError as exc:
            self._advise(str(exc), Severity.ERROR)
            return None

    def export_for_monitor(self, path: PathLike) -> bool:
        from ..exporters import write_normalized

        curve = self.export_normalized()
        if curve is None:
            return False
        try:
            write_normalized(curve, path)
        except OSError as exc:
            self._advise(f"Error exporting wave: {exc}", Severity.ERROR)
            return False
        self._advise("Exported for monitor", Severity.SUCCESS)
        return True

    # ------------------------------------------------------------------
    # Preview
    # ------------------------------------------------------------------
    def toggle_preview(self) -> bool:
        if not self.preview_active and not self.gestures.is_idle:
            self.gestures.release()
        self.preview_active = not self.preview_active
        self.scroller.reset()
        self._advise("Preview Mode Enabled" if self.preview_active else "Preview Mode Disabled")
        return self.preview_active

    def wave_width(self) -> float:
        left, right = self.store.bounds()
        return right - left

    def preview_offsets(self, canvas_width: Optional[float] = None) -> List[float]:
        width = self.store.canvas_width if canvas_width is None else canvas_width
        return self.scroller.copy_offsets(width, self.wave_width())

    def preview_tick(self, canvas_width: Optional[float] = None) -> List[float]:
        """Advance the scroll by one step and return the copy offsets to draw."""
        self.scroller.advance(self.wave_width())
        return self.preview_offsets(canvas_width)

    # ------------------------------------------------------------------
    # Pointer and key entry points
    # ------------------------------------------------------------------
    def pointer_press(self, x: float, y: float, modifiers: Modifiers = NO_MODIFIERS) -> Optional[GestureMode]:
        if self.preview_active:
            return None
        return self.gestures.press(Position(x, y), modifiers)

    def pointer_move(self, x: float, y: float, modifiers: Modifiers = NO_MODIFIERS) -> None:
        if self.preview_active:
            return
        self.gestures.move(Position(x, y), modifiers)

    def pointer_release(self, x: float, y: float, modifiers: Modifiers = NO_MODIFIERS) -> Optional[str]:
        if self.preview_active:
            return None
        return self.gestures.release(Position(x, y), modifiers)

    def wheel(self, x: float, y: float, delta_y: float) -> float:
        if self.preview_active:
            return self.view.zoom
        return self.view.zoom_by_wheel(Position(x, y), delta_y)

    def set_pan_armed(self, armed: bool) -> None:
        self.gestures.set_pan_armed(armed)

    def escape(self) -> None:
        if self.preview_active:
            return
        self.gestures.cancel()
