"""Radio and checkbox group overlays.

Group items are stored as offsets from the owning field's origin. Every edit
replaces the item list with a new one so observers holding the previous
field see an unchanged list.
"""

from __future__ import annotations

from dataclasses import replace
import logging

from envelope_designer.model.field import (
    CheckboxGroupConfig,
    Field,
    FieldType,
    GroupItem,
    RadioGroupConfig,
)
from envelope_designer.model.geometry import Rect, bounding_box_of
from envelope_designer.state.session import EnvelopeSession

LOGGER = logging.getLogger(__name__)

RADIO_SIZE = 20.0
CHECKBOX_SIZE = 20.0
GROUP_PADDING = 12.0
ITEM_GAP = 8.0


def item_size(placed: Field) -> float:
    return RADIO_SIZE if placed.field_type is FieldType.RADIO_GROUP else CHECKBOX_SIZE


def group_bounding_box(placed: Field) -> Rect:
    return bounding_box_of(
        placed.group_items,
        item_size(placed),
        GROUP_PADDING,
        origin=(placed.x, placed.y),
    )


def item_rect(placed: Field, index: int) -> Rect | None:
    items = placed.group_items
    if not 0 <= index < len(items):
        return None
    size = item_size(placed)
    return Rect(placed.x + items[index].x, placed.y + items[index].y, size, size)


def item_index_at(placed: Field, point: tuple[float, float]) -> int | None:
    """Return the topmost item under a document-space point."""
    for index in range(len(placed.group_items) - 1, -1, -1):
        rect = item_rect(placed, index)
        if rect is not None and rect.contains(point):
            return index
    return None


def _group_field(session: EnvelopeSession, field_id: str) -> Field | None:
    placed = session.get_field(field_id)
    if placed is None or not placed.is_group:
        LOGGER.debug("Field %s is not a group field", field_id)
        return None
    return placed


def _store_items(session: EnvelopeSession, placed: Field, items: list[GroupItem]) -> Field | None:
    if isinstance(placed.config, RadioGroupConfig):
        return session.update_field(placed.id, radios=items)
    if isinstance(placed.config, CheckboxGroupConfig):
        return session.update_field(placed.id, checkboxes=items)
    return None


def add_group_item(session: EnvelopeSession, field_id: str) -> GroupItem | None:
    placed = _group_field(session, field_id)
    if placed is None:
        return None
    items = list(placed.group_items)
    prefix = "Radio" if placed.field_type is FieldType.RADIO_GROUP else "Check"
    if items:
        last = items[-1]
        x, y = last.x, last.y + item_size(placed) + ITEM_GAP
    else:
        x, y = 0, 0
    item = GroupItem(x=x, y=y, value=f"{prefix}{len(items) + 1}", selected=False)
    items.append(item)
    _store_items(session, placed, items)
    return item


def move_group_item(
    session: EnvelopeSession,
    field_id: str,
    index: int,
    x: float,
    y: float,
) -> Field | None:
    placed = _group_field(session, field_id)
    if placed is None:
        return None
    items = list(placed.group_items)
    if not 0 <= index < len(items):
        LOGGER.debug("Group %s has no item %d", field_id, index)
        return None
    items[index] = replace(items[index], x=x, y=y)
    return _store_items(session, placed, items)


def set_group_item_selected(
    session: EnvelopeSession,
    field_id: str,
    index: int,
    selected: bool,
) -> Field | None:
    """Toggle an item; turning a radio on turns every other radio in the group off."""
    placed = _group_field(session, field_id)
    if placed is None or not 0 <= index < len(placed.group_items):
        return None
    exclusive = placed.field_type is FieldType.RADIO_GROUP
    items = []
    for position, item in enumerate(placed.group_items):
        if position == index:
            items.append(replace(item, selected=selected))
        elif exclusive and selected:
            items.append(replace(item, selected=False))
        else:
            items.append(replace(item))
    return _store_items(session, placed, items)


def set_group_item_value(
    session: EnvelopeSession,
    field_id: str,
    index: int,
    value: str,
) -> Field | None:
    placed = _group_field(session, field_id)
    if placed is None or not 0 <= index < len(placed.group_items):
        return None
    items = list(placed.group_items)
    items[index] = replace(items[index], value=value)
    return _store_items(session, placed, items)


def remove_group_item(session: EnvelopeSession, field_id: str, index: int) -> Field | None:
    placed = _group_field(session, field_id)
    if placed is None or not 0 <= index < len(placed.group_items):
        return None
    items = [item for position, item in enumerate(placed.group_items) if position != index]
    return _store_items(session, placed, items)
