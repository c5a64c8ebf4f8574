"""Zoom/pan state and the mapping between author space and the screen."""

from __future__ import annotations

from typing import Optional

from ..config import ZoomConfig
from .geometry import Position


class ViewTransform:
    """Bijection ``screen = (world - pan) * zoom`` with a bounded zoom factor."""

    def __init__(self, config: Optional[ZoomConfig] = None) -> None:
        self.config = config or ZoomConfig()
        self.zoom = 1.0
        self.pan = Position(0.0, 0.0)

    def reset(self) -> None:
        self.zoom = 1.0
        self.pan = Position(0.0, 0.0)

    # ------------------------------------------------------------------
    # Coordinate mapping
    # ------------------------------------------------------------------
    def world_to_screen(self, point: Position) -> Position:
        return Position((point.x - self.pan.x) * self.zoom, (point.y - self.pan.y) * self.zoom)

    def screen_to_world(self, point: Position) -> Position:
        return Position(point.x / self.zoom + self.pan.x, point.y / self.zoom + self.pan.y)

    def screen_length_to_world(self, length: float) -> float:
        return length / self.zoom

    # ------------------------------------------------------------------
    # Zoom / pan
    # ------------------------------------------------------------------
    def clamp_zoom(self, value: float) -> float:
        return max(self.config.min_zoom, min(self.config.max_zoom, value))

    def zoom_at(self, screen: Position, factor: float) -> float:
        """Multiply the zoom by ``factor`` keeping the world point under ``screen`` fixed.

        Returns the zoom actually applied after clamping.
        """
        before = self.screen_to_world(screen)
        self.zoom = self.clamp_zoom(self.zoom * factor)
        after = self.screen_to_world(screen)
        self.pan.offset(before.x - after.x, before.y - after.y)
        return self.zoom

    def zoom_by_wheel(self, screen: Position, delta_y: float) -> float:
        factor = self.config.wheel_out if delta_y > 0 else self.config.wheel_in
        return self.zoom_at(screen, factor)

    def pan_by_screen(self, dx: float, dy: float) -> None:
        """Drag the view by a screen-space delta (content follows the pointer)."""
        self.pan.offset(-dx / self.zoom, -dy / self.zoom)
