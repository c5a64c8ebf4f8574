"""Geometry helpers shared by the curve store, hit-testing and rendering."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Tuple, TypeVar


T = TypeVar("T")


@dataclass
class Position:
    """Mutable 2D position in author-space units."""

    x: float
    y: float

    def copy(self) -> "Position":
        return Position(self.x, self.y)

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def offset(self, dx: float, dy: float) -> None:
        self.x += dx
        self.y += dy

    def scaled_about(self, origin: "Position", scale_x: float, scale_y: float) -> "Position":
        """Return ``origin + (self - origin) * (scale_x, scale_y)``."""
        return Position(
            origin.x + (self.x - origin.x) * scale_x,
            origin.y + (self.y - origin.y) * scale_y,
        )


def distance(a: Position, b: Position) -> float:
    return math.hypot(b.x - a.x, b.y - a.y)


def centroid(positions: Iterable[Position]) -> Position:
    xs, ys = [], []
    for pos in positions:
        xs.append(pos.x)
        ys.append(pos.y)
    if not xs:
        raise ValueError("Cannot compute the centroid of an empty set")
    return Position(sum(xs) / len(xs), sum(ys) / len(ys))


def find_closest(
    items: Iterable[T],
    target: Position,
    threshold: float,
    key: Callable[[T], Position],
) -> Optional[T]:
    """Return the item whose position is nearest to ``target`` within ``threshold``.

    Items exactly on the threshold still count as hits.
    """
    closest: Optional[T] = None
    best = threshold
    for item in items:
        dist = distance(key(item), target)
        if dist <= best:
            best = dist
            closest = item
    return closest
