"""Editing the options of dropdown (list) fields."""

from __future__ import annotations

from dataclasses import replace

from envelope_designer.model.field import Field, ListConfig, ListItem
from envelope_designer.state.session import EnvelopeSession


def _list_items(session: EnvelopeSession, field_id: str) -> list[ListItem] | None:
    placed = session.get_field(field_id)
    if placed is None or not isinstance(placed.config, ListConfig):
        return None
    return list(placed.config.items)


def add_list_item(session: EnvelopeSession, field_id: str) -> Field | None:
    items = _list_items(session, field_id)
    if items is None:
        return None
    number = len(items) + 1
    items.append(ListItem(text=f"Option {number}", value=f"option{number}"))
    return session.update_field(field_id, items=items)


def update_list_item(
    session: EnvelopeSession,
    field_id: str,
    index: int,
    *,
    text: str | None = None,
    value: str | None = None,
) -> Field | None:
    items = _list_items(session, field_id)
    if items is None or not 0 <= index < len(items):
        return None
    current = items[index]
    items[index] = replace(
        current,
        text=current.text if text is None else text,
        value=current.value if value is None else value,
    )
    return session.update_field(field_id, items=items)


def remove_list_item(session: EnvelopeSession, field_id: str, index: int) -> Field | None:
    items = _list_items(session, field_id)
    if items is None or not 0 <= index < len(items):
        return None
    del items[index]
    return session.update_field(field_id, items=items)
