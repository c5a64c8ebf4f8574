"""Selection state shared by the gesture manager, the canvas and the point list."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, FrozenSet, Iterable, List, Optional, Set


@dataclass(frozen=True)
class SelectionSnapshot:
    """Immutable view of the current selection."""

    primary: Optional[str]
    selected: FrozenSet[str]


SelectionListener = Callable[[SelectionSnapshot], None]


class SelectionState:
    """Centralizes point selection so every component reads consistent state.

    Points are referred to by name. Listeners are called with a fresh
    :class:`SelectionSnapshot` whenever the selection actually changes.
    """

    def __init__(self) -> None:
        self._primary: Optional[str] = None
        self._selected: Set[str] = set()
        self._listeners: List[SelectionListener] = []

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------
    @property
    def primary(self) -> Optional[str]:
        return self._primary

    @property
    def selected(self) -> FrozenSet[str]:
        return frozenset(self._selected)

    def __contains__(self, name: object) -> bool:
        return name in self._selected

    def __len__(self) -> int:
        return len(self._selected)

    def subscribe(self, listener: SelectionListener) -> None:
        self._listeners.append(listener)

    # ------------------------------------------------------------------
    # Mutation helpers
    # ------------------------------------------------------------------
    def clear(self) -> None:
        if not self._selected and self._primary is None:
            return
        self._selected.clear()
        self._primary = None
        self._emit_changed()

    def select(self, name: str, additive: bool = False) -> None:
        """Select a point, optionally adding to the existing set."""
        changed = False
        if additive:
            if name not in self._selected:
                self._selected.add(name)
                changed = True
        elif self._selected != {name}:
            self._selected = {name}
            changed = True

        if self._primary != name:
            self._primary = name
            changed = True

        if changed:
            self._emit_changed()

    def toggle(self, name: str) -> None:
        """Toggle membership of a point; removing the primary leaves no primary."""
        if name in self._selected:
            self._selected.remove(name)
            if self._primary == name:
                self._primary = None
        else:
            self._selected.add(name)
            self._primary = name
        self._emit_changed()

    def replace(self, selected: Iterable[str], primary: Optional[str] = None) -> None:
        """Replace selection with ``selected`` and ``primary``."""
        new_selected = set(selected)
        if primary is not None and primary not in new_selected:
            primary = None
        if self._selected == new_selected and self._primary == primary:
            return
        self._selected = new_selected
        self._primary = primary
        self._emit_changed()

    def discard(self, name: str) -> None:
        if name not in self._selected and self._primary != name:
            return
        self._selected.discard(name)
        if self._primary == name:
            self._primary = None
        self._emit_changed()

    def rename(self, old: str, new: str) -> None:
        if old not in self._selected and self._primary != old:
            return
        if old in self._selected:
            self._selected.remove(old)
            self._selected.add(new)
        if self._primary == old:
            self._primary = new
        self._emit_changed()

    def retain(self, names: Iterable[str]) -> None:
        """Drop selected names that no longer exist."""
        alive = set(names)
        self.replace(self._selected & alive, self._primary if self._primary in alive else None)

    # ------------------------------------------------------------------
    def snapshot(self) -> SelectionSnapshot:
        return SelectionSnapshot(primary=self._primary, selected=frozenset(self._selected))

    def _emit_changed(self) -> None:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)
