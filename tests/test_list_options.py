from __future__ import annotations

from envelope_designer.model.field import FieldType, ListItem
from envelope_designer.state.list_options import (
    add_list_item,
    remove_list_item,
    update_list_item,
)
from envelope_designer.state.session import EnvelopeSession


def _session_with_list() -> tuple[EnvelopeSession, str]:
    session = EnvelopeSession()
    session.add_recipient()
    document = session.add_document("form.pdf", 1)
    placed = session.add_field(FieldType.LIST, document.id, 1, 10, 10)
    assert placed is not None
    return session, placed.id


def test_add_list_item_numbers_after_existing() -> None:
    session, field_id = _session_with_list()

    updated = add_list_item(session, field_id)

    assert updated is not None
    assert updated.config.items == [
        ListItem(text="Option 1", value="option1"),
        ListItem(text="Option 2", value="option2"),
    ]
    assert session.get_field(field_id) is updated


def test_update_list_item_changes_only_given_parts() -> None:
    session, field_id = _session_with_list()
    before = session.get_field(field_id)

    updated = update_list_item(session, field_id, 0, text="Yes")

    assert updated.config.items == [ListItem(text="Yes", value="option1")]
    # The previous snapshot keeps its own list.
    assert before.config.items == [ListItem(text="Option 1", value="option1")]

    updated = update_list_item(session, field_id, 0, value="yes")
    assert updated.config.items == [ListItem(text="Yes", value="yes")]


def test_remove_list_item() -> None:
    session, field_id = _session_with_list()
    add_list_item(session, field_id)

    updated = remove_list_item(session, field_id, 0)

    assert updated.config.items == [ListItem(text="Option 2", value="option2")]


def test_invalid_targets_are_ignored() -> None:
    session, field_id = _session_with_list()
    document_id = session.documents[0].id
    text = session.add_field(FieldType.TEXT, document_id, 1, 50, 50)

    assert update_list_item(session, field_id, 3, text="x") is None
    assert remove_list_item(session, field_id, -1) is None
    assert add_list_item(session, text.id) is None
    assert add_list_item(session, "missing") is None
    assert len(session.get_field(field_id).config.items) == 1
