"""Geometry helpers shared by the canvas, gestures and group overlays.

Document space is page pixels at 100% zoom with a top-left origin; screen
space is document space multiplied by the current zoom.
"""

from __future__ import annotations

from dataclasses import dataclass
import math
from typing import TYPE_CHECKING, Protocol, Sequence

if TYPE_CHECKING:
    from envelope_designer.model.field import Field

Point = tuple[float, float]


class Positioned(Protocol):
    x: float
    y: float


@dataclass(frozen=True, slots=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def contains(self, point: Point) -> bool:
        px, py = point
        return self.x <= px <= self.right and self.y <= py <= self.bottom

    def scaled(self, factor: float) -> Rect:
        return Rect(self.x * factor, self.y * factor, self.width * factor, self.height * factor)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


def round_half_up(value: float) -> int:
    """Round like JavaScript's Math.round: halves go towards positive infinity."""
    return math.floor(value + 0.5)


def to_document_space(pointer: Point, page_origin: Point, scale: float) -> Point:
    return (pointer[0] - page_origin[0]) / scale, (pointer[1] - page_origin[1]) / scale


def to_screen_space(point: Point, page_origin: Point, scale: float) -> Point:
    return point[0] * scale + page_origin[0], point[1] * scale + page_origin[1]


def bounding_box_of(
    items: Sequence[Positioned],
    item_size: float,
    padding: float,
    origin: Point = (0.0, 0.0),
) -> Rect:
    """Return the padded box covering every item placed at ``origin + offset``.

    An empty list yields a single item-sized box at the origin, padded the
    same way, so an emptied group still has something to grab.
    """
    ox, oy = origin
    if not items:
        min_x, min_y = ox, oy
        max_x, max_y = ox + item_size, oy + item_size
    else:
        min_x = min(ox + item.x for item in items)
        min_y = min(oy + item.y for item in items)
        max_x = max(ox + item.x + item_size for item in items)
        max_y = max(oy + item.y + item_size for item in items)

    return Rect(
        x=min_x - padding,
        y=min_y - padding,
        width=max_x - min_x + padding * 2,
        height=max_y - min_y + padding * 2,
    )


def effective_size(field: Field) -> tuple[float, float]:
    scale_value = field.scale_value
    if scale_value is None:
        return field.width, field.height
    factor = scale_value / 100
    return field.width * factor, field.height * factor


def field_rect(field: Field) -> Rect:
    width, height = effective_size(field)
    return Rect(field.x, field.y, width, height)
