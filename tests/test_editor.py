import json

import pytest

from wave_editor.config import EditorConfig
from wave_editor.core.editor import SOURCE_DEFAULT, SOURCE_FILE, SOURCE_SESSION, WaveformEditor
from wave_editor.core.history import INITIAL_LABEL, SessionStore
from wave_editor.core.points import SHARP, SMOOTH
from wave_editor.exporters import load_normalized, load_wave, save_wave
from wave_editor.notify import Severity


def _snapshot(editor):
    return [point.to_dict() for point in editor.points]


def test_bootstrap_defaults_and_writes_session(editor, session_path):
    assert len(editor.points) == 13
    assert editor.history.labels() == [INITIAL_LABEL]
    assert json.loads(session_path.read_text(encoding="utf-8"))["actionName"] == INITIAL_LABEL


def test_bootstrap_restores_previous_session(editor, notifier, session_path):
    editor.toggle_star("R")
    fresh = WaveformEditor(EditorConfig(), notifier=notifier, session=SessionStore(session_path))
    assert fresh.bootstrap() == SOURCE_SESSION
    assert fresh.store.get("R").starred
    assert fresh.history.labels() == [INITIAL_LABEL]
    assert not fresh.history.can_undo()
    assert "Restored previous session" in notifier.texts()


def test_bootstrap_uses_fallback_file_when_no_session(tmp_path, notifier, make_point):
    wave = save_wave([make_point("A", 100, 200, kind=SHARP), make_point("B", 900, 200, kind=SHARP)], tmp_path / "w.json")
    instance = WaveformEditor(notifier=notifier, session=SessionStore(tmp_path / "s" / "state.json"))
    assert instance.bootstrap(fallback=wave) == SOURCE_FILE
    assert [point.name for point in instance.points] == ["A", "B"]


def test_bootstrap_ignores_missing_fallback(tmp_path, notifier):
    instance = WaveformEditor(notifier=notifier)
    assert instance.bootstrap(fallback=tmp_path / "missing.json") == SOURCE_DEFAULT
    assert len(instance.points) == 13


def test_corrupt_session_falls_back_to_default(notifier, session_path):
    session_path.parent.mkdir(parents=True)
    session_path.write_text("garbage", encoding="utf-8")
    instance = WaveformEditor(notifier=notifier, session=SessionStore(session_path))
    assert instance.bootstrap() == SOURCE_DEFAULT
    assert notifier.texts(Severity.WARNING)
    # the next commit overwrites the corrupt slot
    assert SessionStore(session_path).load().label == INITIAL_LABEL


_BAD_SLOTS = {
    "duplicate-names": {
        "points": [
            {"name": "A", "x": 0, "y": 200, "type": "sharp"},
            {"name": "A", "x": 900, "y": 200, "type": "sharp"},
        ]
    },
    "non-object-entries": {"points": ["a", "b"]},
    "smooth-without-handles": {
        "points": [
            {"name": "A", "x": 0, "y": 200, "type": "smooth"},
            {"name": "B", "x": 900, "y": 200, "type": "sharp"},
        ]
    },
    "list-payload": [1, 2, 3],
}


@pytest.mark.parametrize("slot", list(_BAD_SLOTS), ids=list(_BAD_SLOTS))
def test_structurally_invalid_session_falls_back_to_default(notifier, session_path, slot):
    session_path.parent.mkdir(parents=True)
    session_path.write_text(json.dumps(_BAD_SLOTS[slot]), encoding="utf-8")
    instance = WaveformEditor(notifier=notifier, session=SessionStore(session_path))
    assert instance.bootstrap() == SOURCE_DEFAULT
    assert len(instance.points) == 13
    assert any("starting fresh" in text for text in notifier.texts(Severity.WARNING))
    assert SessionStore(session_path).load().label == INITIAL_LABEL


@pytest.mark.parametrize("slot", list(_BAD_SLOTS), ids=list(_BAD_SLOTS))
def test_structurally_invalid_session_prefers_fallback_file(tmp_path, notifier, session_path, make_point, slot):
    session_path.parent.mkdir(parents=True)
    session_path.write_text(json.dumps(_BAD_SLOTS[slot]), encoding="utf-8")
    wave = save_wave([make_point("A", 100, 200, kind=SHARP), make_point("B", 900, 200, kind=SHARP)], tmp_path / "w.json")
    instance = WaveformEditor(notifier=notifier, session=SessionStore(session_path))
    assert instance.bootstrap(fallback=wave) == SOURCE_FILE
    assert [point.name for point in instance.points] == ["A", "B"]
    assert notifier.texts(Severity.WARNING)


def test_persistence_failure_is_not_fatal(tmp_path, notifier):
    blocker = tmp_path / "blocked"
    blocker.mkdir()
    instance = WaveformEditor(notifier=notifier, session=SessionStore(blocker))
    instance.bootstrap()
    assert "Error saving state" in notifier.texts(Severity.ERROR)
    instance.add_point()
    assert instance.history.labels() == [INITIAL_LABEL, "Add Point"]


def test_undo_redo_walks_history(editor, notifier):
    states = [_snapshot(editor)]
    editor.add_point()
    states.append(_snapshot(editor))
    editor.toggle_star("R")
    states.append(_snapshot(editor))
    editor.move_to_baseline(["R"])
    states.append(_snapshot(editor))

    for expected in reversed(states[:-1]):
        assert editor.undo()
        assert _snapshot(editor) == expected
    assert not editor.undo()
    assert _snapshot(editor) == states[0]
    assert "Nothing to undo" in notifier.texts()

    for expected in states[1:]:
        assert editor.redo()
        assert _snapshot(editor) == expected
    assert not editor.redo()
    assert _snapshot(editor) == states[-1]
    assert "Nothing to redo" in notifier.texts()
    assert "Undo: Move to Baseline" in notifier.texts()


def test_undo_drops_selection_of_vanished_points(editor):
    point = editor.add_point()
    assert editor.selection.primary == point.name
    editor.undo()
    assert editor.selection.primary is None
    assert point.name not in editor.store


def test_add_point_selects_it_and_warns_when_crowded(editor, notifier):
    editor.selection.select("End")
    point = editor.add_point()
    assert point.x == 950
    assert editor.selection.primary == point.name
    assert any("crowded" in text for text in notifier.texts(Severity.WARNING))


def test_operations_without_selection_advise(editor, notifier):
    assert editor.delete_point() is False
    assert editor.toggle_point_type() is None
    assert editor.move_to_baseline() is False
    assert notifier.texts(Severity.ERROR).count("Please select a point first") == 3
    assert len(editor.history) == 1


def test_delete_guard_keeps_two_points(editor, notifier, make_point):
    editor.store.replace([make_point("A", 50, 200), make_point("B", 950, 200)])
    assert editor.delete_point("A") is False
    assert len(editor.points) == 2
    assert "Cannot delete: minimum 2 points required" in notifier.texts(Severity.ERROR)


def test_delete_removes_from_selection(editor):
    editor.selection.select("R")
    assert editor.delete_point()
    assert "R" not in editor.store
    assert editor.selection.primary is None
    assert editor.history.labels()[-1] == "Delete Point"


def test_toggle_point_type_on_primary(editor):
    editor.selection.select("R")
    assert editor.toggle_point_type() == SMOOTH
    assert editor.store.get("R").is_smooth


def test_rename_follows_selection(editor, notifier):
    editor.selection.select("R")
    assert editor.rename_point("R", "Peak")
    assert editor.selection.primary == "Peak"
    assert editor.history.labels()[-1] == "Rename Point"
    assert not editor.rename_point("Peak", "S")
    assert "Peak" in editor.store


def test_save_load_and_export(editor, tmp_path):
    editor.toggle_star("T")
    assert editor.save_wave(tmp_path / "wave.json")
    assert any(point.starred for point in load_wave(tmp_path / "wave.json"))

    editor.delete_point("T")
    assert editor.load_wave(tmp_path / "wave.json")
    assert "T" in editor.store
    assert editor.history.labels()[-1] == "Load Wave"

    assert editor.export_for_monitor(tmp_path / "monitor.json")
    curve = load_normalized(tmp_path / "monitor.json")
    assert curve.metadata.original_width == 900


def test_load_invalid_wave_leaves_state(editor, notifier, tmp_path):
    before = _snapshot(editor)
    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps({"points": []}), encoding="utf-8")
    assert not editor.load_wave(bad)
    assert not editor.load_wave(tmp_path / "missing.json")
    assert _snapshot(editor) == before
    assert len(notifier.texts(Severity.ERROR)) == 2


def test_preview_suspends_editing_input(editor):
    before = _snapshot(editor)
    assert editor.toggle_preview() is True
    assert editor.pointer_press(365, 100) is None
    editor.pointer_move(400, 150)
    assert editor.pointer_release(400, 150) is None
    assert editor.wheel(10, 10, -120) == 1.0
    assert _snapshot(editor) == before
    assert editor.selection.primary is None


def test_preview_scrolls_copies_of_the_wave(editor):
    editor.toggle_preview()
    assert editor.wave_width() == 900
    assert editor.preview_tick(1000) == [-2, 898, 1798]
    editor.toggle_preview()
    assert editor.preview_offsets(1000) == [0, 900, 1800]


def test_entering_preview_ends_active_gesture(editor):
    editor.pointer_press(365, 100)
    editor.pointer_move(375, 100)
    editor.toggle_preview()
    assert editor.gestures.is_idle
    assert editor.history.labels()[-1] == "Move points"


def test_wheel_zooms_at_cursor(editor):
    assert editor.wheel(500, 200, -120) == pytest.approx(1.1)
    world = editor.view.screen_to_world(editor.view.world_to_screen(editor.store.get("R").position))
    assert world.x == pytest.approx(365)


def test_commit_listeners_fire(editor):
    calls = []
    editor.subscribe(lambda: calls.append(len(editor.points)))
    editor.add_point()
    editor.undo()
    assert calls == [14, 13]
