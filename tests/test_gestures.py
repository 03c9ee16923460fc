from __future__ import annotations

import pytest

from envelope_designer.interaction.gestures import (
    Corner,
    GestureKind,
    GestureSession,
    InteractionController,
    resize_geometry,
    scale_for,
)
from envelope_designer.model.geometry import effective_size
from envelope_designer.state.session import EnvelopeSession


def _placed(field_type: str, x: float = 100.0, y: float = 100.0):
    session = EnvelopeSession()
    session.add_recipient()
    document = session.add_document("a.pdf", 1)
    placed = session.add_field(field_type, document.id, 1, x, y)
    assert placed is not None
    return session, InteractionController(session), placed.id


@pytest.mark.parametrize("zoom", [0.5, 1.0, 1.25, 2.0])
def test_drag_applies_total_delta_from_gesture_start(zoom: float) -> None:
    session, controller, field_id = _placed("text", 100, 50)
    start = (400.0, 300.0)
    moves = [(10.0, 4.0), (25.0, -6.0), (-5.0, 30.0)]

    assert controller.begin_drag(field_id, start)
    px, py = start
    for dx, dy in moves:
        px, py = px + dx, py + dy
        controller.move((px, py), zoom)
    controller.release()

    placed = session.get_field(field_id)
    total_x = sum(dx for dx, _ in moves)
    total_y = sum(dy for _, dy in moves)
    assert placed.x == pytest.approx(100 + total_x / zoom)
    assert placed.y == pytest.approx(50 + total_y / zoom)
    assert controller.is_idle


def test_drag_clamps_to_page_origin() -> None:
    session, controller, field_id = _placed("note", 30, 40)

    controller.begin_drag(field_id, (0.0, 0.0))
    controller.move((-500.0, -10.0), 1.0)

    placed = session.get_field(field_id)
    assert (placed.x, placed.y) == (0.0, 30.0)


def test_drag_selects_field() -> None:
    session, controller, field_id = _placed("note")
    session.deselect_field()

    controller.begin_drag(field_id, (0.0, 0.0))

    assert session.selected_field_id == field_id


def test_resize_se_grows_and_respects_minimums() -> None:
    session, controller, field_id = _placed("text")

    assert controller.begin_corner(field_id, "se", (0.0, 0.0))
    assert controller.active.kind is GestureKind.RESIZE
    controller.move((20.0, 10.0), 1.0)
    grown = session.get_field(field_id)
    assert (grown.width, grown.height) == (170.0, 30.0)

    controller.move((-1000.0, -1000.0), 1.0)
    shrunk = session.get_field(field_id)
    assert (shrunk.width, shrunk.height) == (20.0, 14.0)
    assert (shrunk.x, shrunk.y) == (100.0, 100.0)


@pytest.mark.parametrize("pointer", [(30.0, 4.0), (200.0, 50.0), (-40.0, -12.0)])
def test_resize_nw_keeps_opposite_corner_fixed(pointer: tuple[float, float]) -> None:
    session, controller, field_id = _placed("text")
    before = session.get_field(field_id)
    right, bottom = before.x + before.width, before.y + before.height

    controller.begin_corner(field_id, Corner.NW, (0.0, 0.0))
    controller.move(pointer, 1.0)

    after = session.get_field(field_id)
    assert after.x + after.width == pytest.approx(right)
    assert after.y + after.height == pytest.approx(bottom)
    assert after.width >= 20.0
    assert after.height >= 14.0


def test_resize_geometry_per_corner() -> None:
    gesture = GestureSession(
        kind=GestureKind.RESIZE,
        field_id="f",
        pointer=(0.0, 0.0),
        x=10.0,
        y=20.0,
        width=100.0,
        height=40.0,
        corner=Corner.NE,
    )

    assert resize_geometry(gesture, 10.0, 5.0) == {"width": 110.0, "y": 25.0, "height": 35.0}


def test_scale_changes_only_scale_value() -> None:
    session, controller, field_id = _placed("signHere")

    assert controller.begin_corner(field_id, "se", (0.0, 0.0))
    assert controller.active.kind is GestureKind.SCALE
    controller.move((37.0, 0.0), 1.0)

    scaled = session.get_field(field_id)
    assert scaled.scale_value == 150
    assert (scaled.width, scaled.height) == (74, 44)
    assert effective_size(scaled) == (111.0, 66.0)


@pytest.mark.parametrize(
    ("corner", "pointer", "expected"),
    [
        (Corner.SE, (10_000.0, 0.0), 200),
        (Corner.NW, (74.0, 44.0), 50),
        (Corner.NW, (-37.0, 0.0), 150),
        (Corner.SW, (0.0, 22.0), 150),
        (Corner.NE, (0.0, 22.0), 100),
    ],
)
def test_scale_corner_direction_and_clamp(corner: Corner, pointer, expected: int) -> None:
    session, controller, field_id = _placed("stampHere")

    controller.begin_corner(field_id, corner, (0.0, 0.0))
    controller.move(pointer, 1.0)

    assert session.get_field(field_id).scale_value == expected


def test_scale_for_is_relative_to_start_scale() -> None:
    gesture = GestureSession(
        kind=GestureKind.SCALE,
        field_id="f",
        pointer=(0.0, 0.0),
        x=0.0,
        y=0.0,
        width=50.0,
        height=40.0,
        scale_value=120,
        corner=Corner.SE,
    )

    assert scale_for(gesture, 25.0, 0.0) == 180


def test_corner_gesture_refused_for_fixed_size_fields() -> None:
    _, controller, field_id = _placed("fullName")

    assert not controller.begin_corner(field_id, "se", (0.0, 0.0))
    assert controller.is_idle


def test_only_one_gesture_at_a_time() -> None:
    session, controller, field_id = _placed("text")
    other = session.add_field("note", session.documents[0].id, 1, 0, 0)

    assert controller.begin_drag(field_id, (0.0, 0.0))
    assert not controller.begin_drag(other.id, (0.0, 0.0))
    assert controller.active.field_id == field_id


def test_moves_for_deleted_field_are_ignored() -> None:
    session, controller, field_id = _placed("text")

    controller.begin_drag(field_id, (0.0, 0.0))
    session.remove_field(field_id)

    assert controller.move((50.0, 50.0), 1.0) is None
    assert session.fields == []
    controller.release()
    assert controller.is_idle


def test_move_without_gesture_does_nothing() -> None:
    session, controller, field_id = _placed("text")

    assert controller.move((50.0, 50.0), 1.0) is None
    assert session.get_field(field_id).x == 100
