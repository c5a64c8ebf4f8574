from __future__ import annotations

from typing import List, Optional, Tuple

import pytest

from wave_editor.config import EditorConfig
from wave_editor.core.curve import CurveStore
from wave_editor.core.editor import WaveformEditor
from wave_editor.core.geometry import Position
from wave_editor.core.history import SessionStore
from wave_editor.core.points import SMOOTH, AnchorPoint
from wave_editor.notify import Severity
from wave_editor.settings import reset_settings_cache


class CollectingNotifier:
    """Records advisories so tests can assert on them."""

    def __init__(self) -> None:
        self.messages: List[Tuple[Severity, str]] = []

    def advise(self, message: str, severity: Severity = Severity.INFO) -> None:
        self.messages.append((Severity(severity), message))

    def texts(self, severity: Optional[Severity] = None) -> List[str]:
        return [text for level, text in self.messages if severity is None or level is severity]


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    for name in ("WAVE_EDITOR_STATE_DIR", "WAVE_EDITOR_FALLBACK_WAVE", "WAVE_EDITOR_CONFIG"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    reset_settings_cache()
    yield
    reset_settings_cache()


@pytest.fixture
def notifier() -> CollectingNotifier:
    return CollectingNotifier()


@pytest.fixture
def session_path(tmp_path):
    return tmp_path / "state" / "waveform_state.json"


@pytest.fixture
def editor(notifier, session_path) -> WaveformEditor:
    instance = WaveformEditor(EditorConfig(), notifier=notifier, session=SessionStore(session_path))
    instance.bootstrap()
    return instance


@pytest.fixture
def make_point():
    def factory(name, x, y, kind=SMOOTH, cp1=None, cp2=None, starred=False) -> AnchorPoint:
        return AnchorPoint(
            name=name,
            x=x,
            y=y,
            type=kind,
            cp1=Position(*cp1) if cp1 is not None else None,
            cp2=Position(*cp2) if cp2 is not None else None,
            starred=starred,
        )

    return factory


@pytest.fixture
def make_store(make_point):
    """Build a 1000x400 store from ``(name, x, y[, kind])`` tuples."""

    def factory(*rows) -> CurveStore:
        store = CurveStore(canvas_size=(1000, 400))
        store.replace(make_point(*row) for row in rows)
        return store

    return factory
