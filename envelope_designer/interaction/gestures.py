"""Pointer gesture sessions for dragging, resizing and scaling fields.

A gesture starts on pointer-down, is updated from every pointer move and is
torn down on pointer-up. Each move is applied relative to the state captured
when the gesture started, never incrementally, so replaying the same pointer
position always yields the same geometry.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from typing import Any

from envelope_designer.interaction import groups
from envelope_designer.model.field import MAX_SCALE, MIN_HEIGHT, MIN_SCALE, MIN_WIDTH, Field
from envelope_designer.model.geometry import Point, clamp, round_half_up
from envelope_designer.state.session import EnvelopeSession

LOGGER = logging.getLogger(__name__)


class GestureKind(str, Enum):
    DRAG = "drag"
    RESIZE = "resize"
    SCALE = "scale"
    ITEM_DRAG = "itemDrag"


class Corner(str, Enum):
    NW = "nw"
    NE = "ne"
    SW = "sw"
    SE = "se"


@dataclass(frozen=True, slots=True)
class GestureSession:
    kind: GestureKind
    field_id: str
    pointer: Point
    x: float
    y: float
    width: float = 0.0
    height: float = 0.0
    scale_value: int = 100
    corner: Corner | None = None
    item_index: int | None = None


def drag_position(gesture: GestureSession, dx: float, dy: float) -> Point:
    return max(0.0, gesture.x + dx), max(0.0, gesture.y + dy)


def resize_geometry(gesture: GestureSession, dx: float, dy: float) -> dict[str, float]:
    """Resize from the dragged corner while the opposite corner stays put."""
    corner = gesture.corner or Corner.SE
    changes: dict[str, float] = {}

    if corner in (Corner.NE, Corner.SE):
        changes["width"] = max(MIN_WIDTH, gesture.width + dx)
    else:
        new_width = max(MIN_WIDTH, gesture.width - dx)
        changes["x"] = gesture.x + gesture.width - new_width
        changes["width"] = new_width

    if corner in (Corner.SW, Corner.SE):
        changes["height"] = max(MIN_HEIGHT, gesture.height + dy)
    else:
        new_height = max(MIN_HEIGHT, gesture.height - dy)
        changes["y"] = gesture.y + gesture.height - new_height
        changes["height"] = new_height

    return changes


def scale_for(gesture: GestureSession, dx: float, dy: float) -> int:
    """Map corner motion onto a scale percentage using the dominant axis."""
    dx_ratio = dx / gesture.width if gesture.width else 0.0
    dy_ratio = dy / gesture.height if gesture.height else 0.0
    corner = gesture.corner or Corner.SE
    if corner is Corner.SE:
        ratio = max(dx_ratio, dy_ratio)
    elif corner is Corner.SW:
        ratio = max(-dx_ratio, dy_ratio)
    elif corner is Corner.NE:
        ratio = max(dx_ratio, -dy_ratio)
    else:
        ratio = max(-dx_ratio, -dy_ratio)
    start = gesture.scale_value
    return int(clamp(round_half_up(start + ratio * start), MIN_SCALE, MAX_SCALE))


class InteractionController:
    """Owns the single gesture that may be in progress across the whole editor."""

    def __init__(self, session: EnvelopeSession) -> None:
        self._session = session
        self._active: GestureSession | None = None

    @property
    def active(self) -> GestureSession | None:
        return self._active

    @property
    def is_idle(self) -> bool:
        return self._active is None

    def begin_drag(self, field_id: str, pointer: Point) -> bool:
        target = self._claim(field_id)
        if target is None:
            return False
        self._session.select_field(field_id)
        self._active = GestureSession(
            kind=GestureKind.DRAG,
            field_id=field_id,
            pointer=pointer,
            x=target.x,
            y=target.y,
        )
        return True

    def begin_corner(self, field_id: str, corner: Corner | str, pointer: Point) -> bool:
        """Start a resize or, for signature-like fields, a scale from ``corner``."""
        target = self._claim(field_id)
        if target is None:
            return False
        if target.is_scalable:
            kind = GestureKind.SCALE
        elif target.is_resizable:
            kind = GestureKind.RESIZE
        else:
            LOGGER.debug("Field %s cannot be resized", field_id)
            return False
        self._active = GestureSession(
            kind=kind,
            field_id=field_id,
            pointer=pointer,
            x=target.x,
            y=target.y,
            width=target.width,
            height=target.height,
            scale_value=target.scale_value or 100,
            corner=Corner(corner),
        )
        return True

    def begin_item_drag(self, field_id: str, index: int, pointer: Point) -> bool:
        target = self._claim(field_id)
        if target is None:
            return False
        items = target.group_items
        if not 0 <= index < len(items):
            return False
        self._session.select_field(field_id)
        item = items[index]
        self._active = GestureSession(
            kind=GestureKind.ITEM_DRAG,
            field_id=field_id,
            pointer=pointer,
            x=item.x,
            y=item.y,
            item_index=index,
        )
        return True

    def move(self, pointer: Point, zoom: float) -> Field | None:
        gesture = self._active
        if gesture is None:
            return None
        if self._session.get_field(gesture.field_id) is None:
            LOGGER.debug("Field %s vanished mid-gesture; ignoring move", gesture.field_id)
            return None

        dx = (pointer[0] - gesture.pointer[0]) / zoom
        dy = (pointer[1] - gesture.pointer[1]) / zoom
        changes: dict[str, Any]

        if gesture.kind is GestureKind.DRAG:
            x, y = drag_position(gesture, dx, dy)
            changes = {"x": x, "y": y}
        elif gesture.kind is GestureKind.RESIZE:
            changes = resize_geometry(gesture, dx, dy)
        elif gesture.kind is GestureKind.SCALE:
            changes = {"scale_value": scale_for(gesture, dx, dy)}
        else:
            return groups.move_group_item(
                self._session,
                gesture.field_id,
                gesture.item_index if gesture.item_index is not None else -1,
                round_half_up(gesture.x + dx),
                round_half_up(gesture.y + dy),
            )

        return self._session.update_field(gesture.field_id, **changes)

    def release(self) -> None:
        self._active = None

    def _claim(self, field_id: str) -> Field | None:
        if self._active is not None:
            LOGGER.debug("Gesture already in progress on %s", self._active.field_id)
            return None
        return self._session.get_field(field_id)
