import pytest

from wave_editor.core.geometry import Position
from wave_editor.core.gestures import MOVE_LABEL, TRANSFORM_LABEL, GestureMode, Modifiers
from wave_editor.errors import CurveValidationError, GestureError

SHIFT = Modifiers(additive=True, lock_horizontal=True)


def test_drag_point_commits_move(editor):
    assert editor.pointer_press(365, 100) is GestureMode.POINT_DRAG
    assert editor.selection.primary == "R"
    editor.pointer_move(370, 105)
    label = editor.pointer_release(375, 110)
    assert label == MOVE_LABEL
    point = editor.store.get("R")
    assert (point.x, point.y) == (375, 110)
    assert editor.history.labels() == ["Initial State", MOVE_LABEL]


def test_click_without_motion_commits_nothing(editor):
    editor.pointer_press(365, 100)
    assert editor.pointer_release(365, 100) is None
    assert len(editor.history) == 1


def test_handles_only_hit_for_smooth_primary(editor):
    # P's outgoing handle sits a third of the way to P-end
    handle = editor.store.get("P").cp2
    assert handle.x == pytest.approx(245)
    assert editor.pointer_press(handle.x, handle.y) is GestureMode.BOX_SELECT
    editor.pointer_release(handle.x, handle.y)

    editor.selection.select("P")
    assert editor.pointer_press(handle.x, handle.y) is GestureMode.HANDLE_DRAG
    editor.pointer_release(250, 170)
    point = editor.store.get("P")
    assert point.cp2 == Position(250, 170)
    assert point.position == Position(230, 180)
    assert editor.history.labels()[-1] == MOVE_LABEL


def test_box_select_is_live_and_does_not_commit(editor):
    assert editor.pointer_press(300, 50) is GestureMode.BOX_SELECT
    editor.pointer_move(400, 260)
    assert editor.selection.selected == frozenset({"Q-start", "Q", "R", "S"})
    assert editor.selection.primary == "S"
    rect = editor.gestures.box_rect()
    assert rect == (Position(300, 50), Position(400, 260))
    assert editor.pointer_release(400, 260) is None
    assert len(editor.history) == 1
    assert editor.gestures.box_rect() is None


def test_additive_box_select_unions_with_previous_selection(editor):
    editor.selection.select("Start")
    editor.pointer_press(355, 90, SHIFT)
    editor.pointer_release(375, 110, SHIFT)
    assert editor.selection.selected == frozenset({"Start", "R"})


def test_plain_box_select_replaces_selection(editor):
    editor.selection.select("Start")
    editor.pointer_press(355, 90)
    editor.pointer_release(375, 110)
    assert editor.selection.selected == frozenset({"R"})


def test_clicking_a_selected_point_drags_the_whole_group(editor):
    editor.selection.replace({"Q", "R", "S"}, primary="Q")
    editor.pointer_press(365, 100)
    assert len(editor.selection) == 3
    assert editor.selection.primary == "R"
    editor.pointer_release(375, 100)
    assert editor.store.get("Q").x == 348
    assert editor.store.get("R").x == 375
    assert editor.store.get("S").x == 402


def test_shift_click_toggles_membership(editor):
    editor.selection.replace({"R", "S"}, primary="R")
    editor.pointer_press(365, 100, SHIFT)
    assert editor.selection.selected == frozenset({"S"})
    assert editor.selection.primary is None
    editor.pointer_release(365, 100, SHIFT)


def test_transform_needs_two_selected_points(editor):
    editor.selection.select("R")
    with pytest.raises(CurveValidationError):
        editor.gestures.toggle_transform_mode()
    assert editor.toggle_transform_mode() is False
    assert "Select at least two points to transform" in editor.notifier.texts()


def test_transform_scales_about_centroid_without_compounding(editor):
    editor.selection.replace({"P-start", "P-end"}, primary="P-end")
    assert editor.toggle_transform_mode() is True
    assert editor.pointer_press(500, 300) is GestureMode.TRANSFORM
    editor.pointer_move(600, 300)
    assert editor.store.get("P-start").x == pytest.approx(140)
    assert editor.store.get("P-end").x == pytest.approx(320)
    assert editor.pointer_release(550, 300) == TRANSFORM_LABEL
    assert editor.store.get("P-start").x == pytest.approx(162.5)
    assert editor.store.get("P-end").x == pytest.approx(297.5)
    assert editor.gestures.transform_armed


def test_transform_with_horizontal_lock_only_scales_y(editor):
    editor.selection.replace({"P", "R"}, primary="R")
    editor.toggle_transform_mode()
    editor.pointer_press(500, 300, SHIFT)
    editor.pointer_release(600, 400, SHIFT)
    p, r = editor.store.get("P"), editor.store.get("R")
    assert (p.x, r.x) == (230, 365)
    assert p.y == pytest.approx(220)
    assert r.y == pytest.approx(60)


def test_pan_gesture_moves_view_only(editor):
    editor.set_pan_armed(True)
    assert editor.pointer_press(100, 100) is GestureMode.PAN
    editor.pointer_release(120, 110)
    assert editor.view.pan == Position(-20, -10)
    assert len(editor.history) == 1


def test_point_hit_respects_zoom(editor):
    editor.view.zoom_at(Position(0, 0), 2.0)
    # R is at (365, 100) in author space, so (730, 200) on screen
    assert editor.pointer_press(730, 200) is GestureMode.POINT_DRAG
    editor.pointer_release(740, 200)
    assert editor.store.get("R").x == pytest.approx(370)


def test_second_press_during_gesture_is_rejected(editor):
    editor.pointer_press(300, 50)
    with pytest.raises(GestureError):
        editor.pointer_press(310, 60)


def test_escape_cancels_box_and_clears_selection(editor):
    editor.selection.select("R")
    editor.pointer_press(300, 50, SHIFT)
    editor.escape()
    assert editor.gestures.is_idle
    assert len(editor.selection) == 0


def test_toggle_transform_during_gesture_is_rejected(editor):
    editor.selection.replace({"P", "R"})
    editor.pointer_press(300, 50, SHIFT)
    with pytest.raises(GestureError):
        editor.gestures.toggle_transform_mode()
