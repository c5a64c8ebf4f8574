"""Pointer gesture state machine: box-select, drags, pan and the scale transform."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, FrozenSet, List, Optional, Tuple

from ..config import InteractionConfig
from ..errors import CurveValidationError, GestureError
from .curve import CurveStore, PointGeometry
from .geometry import Position, centroid, find_closest
from .points import AnchorPoint
from .selection import SelectionState
from .view import ViewTransform


logger = logging.getLogger(__name__)

MOVE_LABEL = "Move points"
TRANSFORM_LABEL = "Transform Points"


class GestureMode(str, Enum):
    IDLE = "idle"
    BOX_SELECT = "box-select"
    POINT_DRAG = "point-drag"
    HANDLE_DRAG = "handle-drag"
    PAN = "pan"
    TRANSFORM = "transform-scale"


@dataclass(frozen=True)
class Modifiers:
    """Keyboard modifiers held during a pointer event.

    Attributes:
        additive: Add to (or toggle within) the selection instead of replacing it
        lock_horizontal: Keep the horizontal scale factor at 1 during a transform
    """

    additive: bool = False
    lock_horizontal: bool = False


NO_MODIFIERS = Modifiers()


class GestureManager:
    """Routes press/move/release events to exactly one active gesture.

    Coordinates passed in are screen coordinates; the manager converts them
    through the shared :class:`ViewTransform`. ``on_commit`` is called with a
    history label once per gesture that changed geometry.
    """

    def __init__(
        self,
        store: CurveStore,
        view: ViewTransform,
        selection: SelectionState,
        interaction: Optional[InteractionConfig] = None,
        on_commit: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.store = store
        self.view = view
        self.selection = selection
        self.interaction = interaction or InteractionConfig()
        self.on_commit = on_commit

        self.mode = GestureMode.IDLE
        self.pan_armed = False
        self.transform_armed = False

        self._press_screen: Optional[Position] = None
        self._last_screen: Optional[Position] = None
        self._moved = False
        self._handle: Optional[Tuple[str, str]] = None
        self._box_start: Optional[Position] = None
        self._box_end: Optional[Position] = None
        self._box_base: FrozenSet[str] = frozenset()
        self._box_base_primary: Optional[str] = None
        self._origin: Optional[Position] = None
        self._reference: Dict[str, PointGeometry] = {}

    # ------------------------------------------------------------------
    # Mode switches
    # ------------------------------------------------------------------
    @property
    def is_idle(self) -> bool:
        return self.mode is GestureMode.IDLE

    def set_pan_armed(self, armed: bool) -> None:
        self.pan_armed = armed

    def toggle_transform_mode(self) -> bool:
        """Arm or disarm the scale transform; returns the new armed state."""
        if not self.is_idle:
            raise GestureError(f"Cannot toggle transform mode during {self.mode.value}")
        if self.transform_armed:
            self.transform_armed = False
            return False
        if len(self.selection) < 2:
            raise CurveValidationError("Select at least two points to transform")
        self.transform_armed = True
        return True

    def cancel(self) -> None:
        """Abort box-select, leave transform mode and clear the selection."""
        if self.mode is GestureMode.BOX_SELECT:
            self._reset()
        if self.is_idle:
            self.transform_armed = False
            self.selection.clear()

    def box_rect(self) -> Optional[Tuple[Position, Position]]:
        """World-space corners of the active selection rectangle, if any."""
        if self.mode is not GestureMode.BOX_SELECT or self._box_start is None or self._box_end is None:
            return None
        return self._box_start.copy(), self._box_end.copy()

    # ------------------------------------------------------------------
    # Hit testing
    # ------------------------------------------------------------------
    def _radius(self) -> float:
        return self.interaction.hit_radius_px

    def hit_handle(self, screen: Position) -> Optional[Tuple[str, str]]:
        """Return ``(point name, "cp1"|"cp2")`` for a handle of the smooth primary point."""
        primary = self.selection.primary
        if primary is None or primary not in self.store:
            return None
        handles = self.store.get(primary).active_handles()
        if handles is None:
            return None
        candidates = list(zip(("cp1", "cp2"), handles))
        hit = find_closest(candidates, screen, self._radius(), key=lambda item: self.view.world_to_screen(item[1]))
        return (primary, hit[0]) if hit else None

    def hit_point(self, screen: Position) -> Optional[AnchorPoint]:
        return find_closest(
            self.store.ordered(),
            screen,
            self._radius(),
            key=lambda point: self.view.world_to_screen(point.position),
        )

    def points_in_box(self, start: Position, end: Position) -> List[str]:
        left, right = sorted((start.x, end.x))
        top, bottom = sorted((start.y, end.y))
        return [
            point.name
            for point in self.store.ordered()
            if left <= point.x <= right and top <= point.y <= bottom
        ]

    # ------------------------------------------------------------------
    # Pointer events
    # ------------------------------------------------------------------
    def press(self, screen: Position, modifiers: Modifiers = NO_MODIFIERS) -> GestureMode:
        if not self.is_idle:
            raise GestureError(f"A {self.mode.value} gesture is already active")

        self._press_screen = screen.copy()
        self._last_screen = screen.copy()
        self._moved = False

        if self.transform_armed:
            if len(self.selection) >= 2:
                return self._begin_transform()
            self.transform_armed = False

        if self.pan_armed:
            self.mode = GestureMode.PAN
            return self.mode

        handle = self.hit_handle(screen)
        if handle is not None:
            self._handle = handle
            self.mode = GestureMode.HANDLE_DRAG
            return self.mode

        point = self.hit_point(screen)
        if point is not None:
            if modifiers.additive:
                self.selection.toggle(point.name)
            elif point.name in self.selection:
                self.selection.select(point.name, additive=True)
            else:
                self.selection.select(point.name)
            self.mode = GestureMode.POINT_DRAG
            return self.mode

        if not modifiers.additive:
            self.selection.clear()
        world = self.view.screen_to_world(screen)
        self._box_start = world
        self._box_end = world.copy()
        self._box_base = self.selection.selected
        self._box_base_primary = self.selection.primary
        self.mode = GestureMode.BOX_SELECT
        return self.mode

    def move(self, screen: Position, modifiers: Modifiers = NO_MODIFIERS) -> None:
        if self.is_idle:
            return
        if self.mode is GestureMode.PAN:
            self.view.pan_by_screen(screen.x - self._last_screen.x, screen.y - self._last_screen.y)
        elif self.mode is GestureMode.TRANSFORM:
            self._apply_transform(screen, modifiers)
        elif self.mode is GestureMode.HANDLE_DRAG:
            name, handle = self._handle
            self.store.set_handle(name, handle, self.view.screen_to_world(screen))
            self._moved = True
        elif self.mode is GestureMode.POINT_DRAG:
            before = self.view.screen_to_world(self._last_screen)
            after = self.view.screen_to_world(screen)
            dx, dy = after.x - before.x, after.y - before.y
            if dx or dy:
                self.store.translate(self.selection.selected, dx, dy)
                self._moved = True
        elif self.mode is GestureMode.BOX_SELECT:
            self._box_end = self.view.screen_to_world(screen)
            self._update_box_selection(modifiers)
        self._last_screen = screen.copy()

    def release(self, screen: Optional[Position] = None, modifiers: Modifiers = NO_MODIFIERS) -> Optional[str]:
        """Finish the active gesture; returns the committed history label, if any."""
        if self.is_idle:
            return None
        if screen is not None:
            self.move(screen, modifiers)

        label: Optional[str] = None
        if self._moved:
            label = TRANSFORM_LABEL if self.mode is GestureMode.TRANSFORM else MOVE_LABEL
        logger.debug("Gesture %s finished (commit=%s)", self.mode.value, label)
        self._reset()
        if label is not None and self.on_commit is not None:
            self.on_commit(label)
        return label

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _begin_transform(self) -> GestureMode:
        self._reference = self.store.capture(sorted(self.selection.selected))
        if len(self._reference) < 2:
            raise CurveValidationError("Select at least two points to transform")
        self._origin = centroid(geometry.anchor for geometry in self._reference.values())
        self.mode = GestureMode.TRANSFORM
        return self.mode

    def _apply_transform(self, screen: Position, modifiers: Modifiers) -> None:
        sensitivity = self.interaction.scale_sensitivity_px
        dx = screen.x - self._press_screen.x
        dy = screen.y - self._press_screen.y
        scale_x = 1.0 if modifiers.lock_horizontal else 1.0 + dx / sensitivity
        scale_y = 1.0 + dy / sensitivity
        self.store.scale_around(self._reference.keys(), self._origin, scale_x, scale_y, reference=self._reference)
        self._moved = True

    def _update_box_selection(self, modifiers: Modifiers) -> None:
        hits = self.points_in_box(self._box_start, self._box_end)
        base = self._box_base if modifiers.additive else frozenset()
        primary = hits[-1] if hits else (self._box_base_primary if modifiers.additive else None)
        self.selection.replace(set(base) | set(hits), primary)

    def _reset(self) -> None:
        self.mode = GestureMode.IDLE
        self._press_screen = None
        self._last_screen = None
        self._moved = False
        self._handle = None
        self._box_start = None
        self._box_end = None
        self._box_base = frozenset()
        self._box_base_primary = None
        self._origin = None
        self._reference = {}
