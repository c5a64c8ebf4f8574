"""Snapshot-based undo/redo and the durable single-slot session store."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pydantic import ValidationError

from ..errors import PersistenceError
from ..formats import AuthoredWave
from .points import AnchorPoint


logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 50
INITIAL_LABEL = "Initial State"


@dataclass(frozen=True)
class HistorySnapshot:
    """Deep copy of the point set together with the action that produced it."""

    label: str
    state: Tuple[Dict[str, Any], ...]

    @classmethod
    def capture(cls, points: Sequence[AnchorPoint], label: str) -> "HistorySnapshot":
        return cls(label=label, state=tuple(point.to_dict() for point in points))

    def points(self) -> List[AnchorPoint]:
        """Materialize a fresh, independent copy of the stored points."""
        return [AnchorPoint.from_dict(payload) for payload in self.state]

    def to_dict(self) -> Dict[str, Any]:
        return {"points": [dict(payload) for payload in self.state], "actionName": self.label}


# ---------------------------------------------------------------------------
# Durable storage
# ---------------------------------------------------------------------------


class SessionStore:
    """Single JSON slot holding the most recent snapshot; overwritten on every commit."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def save(self, snapshot: HistorySnapshot) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=".waveform_state.", suffix=".tmp", dir=self.path.parent)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(snapshot.to_dict(), handle, indent=2)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise PersistenceError(f"Could not save session to {self.path}: {exc}") from exc

    def load(self) -> Optional[HistorySnapshot]:
        """Return the stored snapshot, ``None`` when the slot is empty.

        The slot holds author-space points, so it is checked with the same
        model as wave files. Any structural fault raises :class:`PersistenceError`.
        """
        if not self.path.exists():
            return None
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except (OSError, ValueError) as exc:
            raise PersistenceError(f"Could not read session from {self.path}: {exc}") from exc

        if not isinstance(payload, dict):
            raise PersistenceError(f"Session file {self.path} is corrupt: expected a JSON object")
        try:
            points = AuthoredWave.model_validate(payload).to_points()
        except ValidationError as exc:
            first = exc.errors()[0]
            location = ".".join(str(part) for part in first.get("loc", ()))
            raise PersistenceError(f"Session file {self.path} is corrupt: {location}: {first.get('msg')}") from exc

        label = payload.get("actionName")
        return HistorySnapshot.capture(points, label if isinstance(label, str) else INITIAL_LABEL)

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as exc:
            raise PersistenceError(f"Could not remove session file {self.path}: {exc}") from exc


# ---------------------------------------------------------------------------
# Undo / redo
# ---------------------------------------------------------------------------


class HistoryManager:
    """Linear list of snapshots with a cursor.

    Parameters
    ----------
    capacity:
        Maximum number of snapshots; the oldest is evicted first.
    session:
        Optional durable slot written after every commit. Write failures
        raise :class:`PersistenceError` only after the in-memory history has
        been updated.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY, session: Optional[SessionStore] = None) -> None:
        if capacity < 2:
            raise ValueError("History capacity must be at least 2")
        self.capacity = capacity
        self.session = session
        self._entries: List[HistorySnapshot] = []
        self._index = -1

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def index(self) -> int:
        return self._index

    @property
    def current(self) -> Optional[HistorySnapshot]:
        if self._index < 0:
            return None
        return self._entries[self._index]

    def can_undo(self) -> bool:
        return self._index > 0

    def can_redo(self) -> bool:
        return self._index < len(self._entries) - 1

    def labels(self) -> List[str]:
        return [entry.label for entry in self._entries]

    def reset(self) -> None:
        self._entries.clear()
        self._index = -1

    def commit(self, points: Sequence[AnchorPoint], label: str) -> HistorySnapshot:
        snapshot = HistorySnapshot.capture(points, label)
        del self._entries[self._index + 1:]
        self._entries.append(snapshot)
        self._index += 1
        if len(self._entries) > self.capacity:
            self._entries.pop(0)
            self._index -= 1
        logger.debug("Committed %r (%d/%d)", label, self._index + 1, len(self._entries))

        if self.session is not None:
            self.session.save(snapshot)
        return snapshot

    def undo(self) -> Optional[HistorySnapshot]:
        """Step back; returns the snapshot now current, or ``None`` at the start."""
        if not self.can_undo():
            return None
        self._index -= 1
        return self._entries[self._index]

    def redo(self) -> Optional[HistorySnapshot]:
        if not self.can_redo():
            return None
        self._index += 1
        return self._entries[self._index]
