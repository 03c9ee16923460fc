from __future__ import annotations

from envelope_designer.model.field import GroupItem
from envelope_designer.model.geometry import (
    Rect,
    bounding_box_of,
    effective_size,
    round_half_up,
    to_document_space,
    to_screen_space,
)
from envelope_designer.state.session import EnvelopeSession


def _session_with_document() -> tuple[EnvelopeSession, str]:
    session = EnvelopeSession()
    session.add_recipient()
    document = session.add_document("contract.pdf", 2, b"%PDF")
    return session, document.id


def test_to_document_space_divides_by_zoom() -> None:
    assert to_document_space((250.0, 140.0), (50.0, 40.0), 2.0) == (100.0, 50.0)
    assert to_screen_space((100.0, 50.0), (50.0, 40.0), 2.0) == (250.0, 140.0)


def test_round_half_up_matches_browser_rounding() -> None:
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(-2.5) == -2
    assert round_half_up(10.49) == 10


def test_bounding_box_covers_items_with_padding() -> None:
    items = [GroupItem(0, 0, "a"), GroupItem(30, 28, "b"), GroupItem(0, 56, "c")]

    box = bounding_box_of(items, 20, 12, origin=(100, 100))

    assert box == Rect(x=88, y=88, width=74, height=100)
    assert box.right == 162
    assert box.bottom == 188


def test_bounding_box_of_empty_group_is_single_item_at_origin() -> None:
    box = bounding_box_of([], 20, 12, origin=(40, 60))

    assert box == Rect(x=28, y=48, width=44, height=44)


def test_bounding_box_is_repeatable() -> None:
    items = [GroupItem(5, 7, "a"), GroupItem(-3, 40, "b")]

    first = bounding_box_of(items, 20, 12, origin=(10, 10))
    second = bounding_box_of(items, 20, 12, origin=(10, 10))

    assert first == second


def test_effective_size_uses_scale_only_for_scalable_fields() -> None:
    session, document_id = _session_with_document()
    sign = session.add_field("signHere", document_id, 1, 0, 0)
    text = session.add_field("text", document_id, 1, 0, 0)
    assert sign is not None and text is not None

    sign = session.update_field(sign.id, scale_value=150)
    assert sign is not None

    assert effective_size(sign) == (111.0, 66.0)
    assert (sign.width, sign.height) == (74, 44)
    assert effective_size(text) == (150, 20)


def test_rect_contains_edges() -> None:
    rect = Rect(10, 10, 20, 10)

    assert rect.contains((10, 10))
    assert rect.contains((30, 20))
    assert not rect.contains((31, 15))
