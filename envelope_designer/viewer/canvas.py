"""Interactive page canvas for placing, dragging, resizing and scaling fields."""

from __future__ import annotations

from PySide6.QtCore import QPointF, QRectF, Qt, Signal
from PySide6.QtGui import QColor, QPainter, QPen, QPixmap
from PySide6.QtWidgets import QWidget

from envelope_designer.interaction import groups
from envelope_designer.interaction.gestures import Corner, InteractionController
from envelope_designer.model.field import Field, FieldType
from envelope_designer.model.geometry import Rect, field_rect, to_document_space
from envelope_designer.state.session import EnvelopeSession

HANDLE_SIZE = 10.0


class PageCanvas(QWidget):
    field_created = Signal()

    def __init__(self, session: EnvelopeSession, controller: InteractionController) -> None:
        super().__init__()
        self._session = session
        self._controller = controller
        self._pixmap: QPixmap | None = None
        self._document_id: str | None = None
        self._page_number = 1
        self._zoom = 1.0
        self._placement_type: FieldType | None = None

        self.setMouseTracking(True)
        self.setMinimumSize(500, 600)

    @property
    def zoom(self) -> float:
        return self._zoom

    def set_page(
        self,
        pixmap: QPixmap,
        document_id: str,
        page_number: int,
        zoom: float,
        size: tuple[int, int] | None = None,
    ) -> None:
        self._pixmap = pixmap
        self._document_id = document_id
        self._page_number = page_number
        self._zoom = zoom
        self._controller.release()
        if size is None:
            self.resize(pixmap.size())
        else:
            self.resize(*size)
        self.update()

    def clear_page(self) -> None:
        self._pixmap = None
        self._document_id = None
        self._controller.release()
        self.resize(500, 600)
        self.update()

    def set_placement_type(self, field_type: FieldType | None) -> None:
        self._placement_type = field_type

    def _page_fields(self) -> list[Field]:
        if self._document_id is None:
            return []
        return self._session.fields_for_page(self._document_id, self._page_number)

    def paintEvent(self, event) -> None:  # type: ignore[override]
        del event
        painter = QPainter(self)
        painter.fillRect(self.rect(), QColor("#e9eaee"))

        if self._pixmap is None:
            return

        painter.drawPixmap(0, 0, self._pixmap)
        selected_id = self._session.selected_field_id
        for placed in self._page_fields():
            color = QColor(self._session.recipient_color(placed.recipient_id))
            is_selected = placed.id == selected_id
            if placed.is_group:
                self._paint_group(painter, placed, color, is_selected)
                continue

            rect_px = self._to_pixels(field_rect(placed))
            fill = QColor(color)
            fill.setAlpha(32)
            painter.fillRect(rect_px, fill)
            pen = QPen(QColor("#c62828") if is_selected else color)
            pen.setWidth(2)
            painter.setPen(pen)
            painter.drawRect(rect_px)
            painter.drawText(rect_px, Qt.AlignmentFlag.AlignCenter, placed.label)
            if is_selected and (placed.is_resizable or placed.is_scalable):
                for handle in self._handle_rects(rect_px).values():
                    painter.fillRect(handle, QColor("#c62828"))

    def _paint_group(self, painter: QPainter, placed: Field, color: QColor, is_selected: bool) -> None:
        pen = QPen(QColor("#c62828") if is_selected else color)
        pen.setStyle(Qt.PenStyle.DashLine)
        painter.setPen(pen)
        painter.drawRect(self._to_pixels(groups.group_bounding_box(placed)))

        pen.setStyle(Qt.PenStyle.SolidLine)
        pen.setWidth(2)
        painter.setPen(pen)
        for index, item in enumerate(placed.group_items):
            item_px = self._to_pixels(groups.item_rect(placed, index))
            if placed.field_type is FieldType.RADIO_GROUP:
                painter.drawEllipse(item_px)
            else:
                painter.drawRect(item_px)
            if item.selected:
                painter.fillRect(item_px.adjusted(5, 5, -5, -5), color)

    def mousePressEvent(self, event) -> None:  # type: ignore[override]
        if self._pixmap is None or self._document_id is None:
            return

        if event.button() != Qt.MouseButton.LeftButton:
            return

        pointer = (event.position().x(), event.position().y())
        if self._placement_type is not None:
            doc_x, doc_y = to_document_space(pointer, (0.0, 0.0), self._zoom)
            created = self._session.add_field(
                self._placement_type,
                self._document_id,
                self._page_number,
                doc_x,
                doc_y,
            )
            if created is not None:
                self.field_created.emit()
            return

        if self._begin_corner_gesture(event.position(), pointer):
            return

        doc_point = to_document_space(pointer, (0.0, 0.0), self._zoom)
        for placed in reversed(self._page_fields()):
            if placed.is_group:
                index = groups.item_index_at(placed, doc_point)
                if index is not None:
                    self._controller.begin_item_drag(placed.id, index, pointer)
                    return
                if groups.group_bounding_box(placed).contains(doc_point):
                    self._session.select_field(placed.id)
                    return
            elif field_rect(placed).contains(doc_point):
                self._controller.begin_drag(placed.id, pointer)
                return

        self._session.deselect_field()

    def _begin_corner_gesture(self, position: QPointF, pointer: tuple[float, float]) -> bool:
        selected = self._session.selected_field
        if selected is None or not (selected.is_resizable or selected.is_scalable):
            return False
        if selected.document_id != self._document_id or selected.page_number != self._page_number:
            return False
        handles = self._handle_rects(self._to_pixels(field_rect(selected)))
        for corner, handle in handles.items():
            if handle.contains(position):
                return self._controller.begin_corner(selected.id, corner, pointer)
        return False

    def mouseMoveEvent(self, event) -> None:  # type: ignore[override]
        if self._controller.is_idle:
            return
        self._controller.move((event.position().x(), event.position().y()), self._zoom)

    def mouseReleaseEvent(self, event) -> None:  # type: ignore[override]
        del event
        self._controller.release()

    def _to_pixels(self, rect: Rect | None) -> QRectF:
        if rect is None:
            return QRectF()
        scaled = rect.scaled(self._zoom)
        return QRectF(scaled.x, scaled.y, scaled.width, scaled.height)

    def _handle_rects(self, field_rect_px: QRectF) -> dict[Corner, QRectF]:
        half = HANDLE_SIZE / 2.0
        corners = {
            Corner.NW: field_rect_px.topLeft(),
            Corner.NE: field_rect_px.topRight(),
            Corner.SW: field_rect_px.bottomLeft(),
            Corner.SE: field_rect_px.bottomRight(),
        }
        return {
            corner: QRectF(point.x() - half, point.y() - half, HANDLE_SIZE, HANDLE_SIZE)
            for corner, point in corners.items()
        }
