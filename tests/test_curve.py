import pytest

from wave_editor.core.curve import CROWDED_MESSAGE, CurveStore
from wave_editor.core.defaults import build_default_points
from wave_editor.core.geometry import Position
from wave_editor.core.points import SHARP, SMOOTH
from wave_editor.errors import CurveValidationError


@pytest.fixture
def default_store():
    store = CurveStore(canvas_size=(1000, 400))
    store.replace(build_default_points(1000, 400))
    return store


def test_ordered_follows_x_not_insertion(make_store):
    store = make_store(("B", 300, 200), ("A", 100, 200), ("C", 200, 200))
    assert [point.name for point in store.ordered()] == ["A", "C", "B"]
    assert store.bounds() == (100, 300)


def test_replace_rejects_duplicates_and_short_sets(make_store, make_point):
    store = make_store(("A", 0, 0), ("B", 10, 0))
    with pytest.raises(CurveValidationError):
        store.replace([make_point("A", 0, 0), make_point("A", 5, 0)])
    with pytest.raises(CurveValidationError):
        store.replace([make_point("A", 0, 0)])
    assert store.names == ["A", "B"]


def test_add_point_lands_in_first_gap_when_right_edge_is_taken(default_store):
    insertion = default_store.add_point()
    assert insertion.point.x == pytest.approx(117.5)
    assert insertion.point.y == 200
    assert insertion.point.type == SHARP
    assert insertion.point.name == "Point 1"
    assert insertion.advisory is None


def test_add_point_goes_right_of_selection(default_store):
    insertion = default_store.add_point(default_store.get("T-end"))
    assert insertion.point.x == pytest.approx(780)


def test_add_point_appends_right_of_last_point_when_room(make_store):
    store = make_store(("A", 50, 200), ("B", 300, 200))
    assert store.add_point().point.x == pytest.approx(400)


def test_add_point_pins_to_edge_when_crowded(default_store):
    insertion = default_store.add_point(default_store.get("End"))
    assert insertion.point.x == pytest.approx(950)
    assert insertion.advisory is not None
    assert insertion.advisory.message == CROWDED_MESSAGE
    assert len(default_store) == 14


def test_unique_name_fills_lowest_free_index(make_store):
    store = make_store(("Point 1", 0, 0), ("Point 3", 10, 0))
    assert store.unique_name() == "Point 2"


def test_delete_never_goes_below_two_points(make_store):
    store = make_store(("A", 0, 0), ("B", 10, 0), ("C", 20, 0))
    store.delete_point("B")
    with pytest.raises(CurveValidationError, match="minimum 2 points"):
        store.delete_point("A")
    assert store.names == ["A", "C"]


def test_rename_point(make_store):
    store = make_store(("A", 0, 0), ("B", 10, 0))
    renamed = store.rename_point("A", "  Onset ")
    assert renamed.name == "Onset"
    assert "Onset" in store and "A" not in store
    with pytest.raises(CurveValidationError):
        store.rename_point("Onset", "B")
    with pytest.raises(CurveValidationError):
        store.rename_point("Onset", "   ")
    with pytest.raises(KeyError):
        store.rename_point("missing", "X")


def test_toggle_type_keeps_handles(make_store):
    store = make_store(("A", 0, 0), ("B", 10, 0))
    store.set_handle("A", "cp2", Position(4, 4))
    assert store.toggle_point_type("A") == SHARP
    assert store.toggle_point_type("A") == SMOOTH
    assert store.get("A").cp2 == Position(4, 4)


def test_toggle_star(make_store):
    store = make_store(("A", 0, 0), ("B", 10, 0))
    assert store.toggle_star("A") is True
    assert store.toggle_star("A") is False


def test_scale_by_one_is_identity(default_store):
    before = [point.to_dict() for point in default_store.ordered()]
    names = default_store.names
    default_store.scale_around(names, Position(500, 200), 1.0, 1.0)
    assert [point.to_dict() for point in default_store.ordered()] == before


def test_scale_from_reference_does_not_compound(make_store):
    store = make_store(("A", 100, 100), ("B", 300, 100))
    reference = store.capture(["A", "B"])
    origin = Position(200, 100)
    store.scale_around(["A", "B"], origin, 2.0, 1.0, reference=reference)
    store.scale_around(["A", "B"], origin, 2.0, 1.0, reference=reference)
    assert store.get("A").x == 0
    assert store.get("B").x == 400


def test_scale_moves_handles_with_anchor(make_point):
    store = CurveStore(canvas_size=(1000, 400))
    store.replace([make_point("A", 100, 100, cp1=(90, 100), cp2=(110, 100)), make_point("B", 300, 100)])
    store.scale_around(["A"], Position(0, 0), 2.0, 2.0)
    point = store.get("A")
    assert (point.x, point.y) == (200, 200)
    assert point.cp1 == Position(180, 200)
    assert point.cp2 == Position(220, 200)


def test_snap_to_baseline_shifts_handles_by_same_amount(make_point):
    store = CurveStore(canvas_size=(1000, 400))
    store.replace([make_point("A", 100, 150, cp1=(80, 140), cp2=(120, 160)), make_point("B", 300, 90)])
    store.snap_to_baseline(["A"])
    point = store.get("A")
    assert point.y == 200
    assert point.cp1 == Position(80, 190)
    assert point.cp2 == Position(120, 210)
    assert store.get("B").y == 90


def test_translate_ignores_unknown_names(make_store):
    store = make_store(("A", 0, 0), ("B", 10, 0))
    store.translate(["A", "ghost"], 5, 5)
    assert store.get("A").position == Position(5, 5)
