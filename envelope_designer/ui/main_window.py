"""Main application window for document preview, field placement, and payload export."""

from __future__ import annotations

import logging
from pathlib import Path

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QActionGroup, QKeySequence, QPixmap
from PySide6.QtWidgets import (
    QComboBox,
    QFileDialog,
    QInputDialog,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QMessageBox,
    QScrollArea,
    QSplitter,
    QToolBar,
    QVBoxLayout,
    QWidget,
)

from envelope_designer.config import DesignerSettings
from envelope_designer.export.payload import PayloadWriteError, generate_payload, write_payload
from envelope_designer.interaction import groups
from envelope_designer.interaction.gestures import InteractionController
from envelope_designer.model.document import RECIPIENT_TYPE_LABELS, RecipientType
from envelope_designer.model.field import FIELD_TYPES, PALETTE_TYPES, FieldType
from envelope_designer.pdf.importer import PdfImportError, apply_imported_fields, import_pdf_fields
from envelope_designer.pdf.loader import DocumentLoadError, load_document
from envelope_designer.pdf.renderer import PdfRenderError, page_pixel_size, render_page_image
from envelope_designer.state.list_options import add_list_item
from envelope_designer.state.session import EnvelopeSession, EnvelopeStatus
from envelope_designer.viewer.canvas import PageCanvas

LOGGER = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self, settings: DesignerSettings | None = None) -> None:
        super().__init__()
        self.setWindowTitle("Envelope Tab Designer")
        self.resize(1300, 850)

        self._settings = settings or DesignerSettings()
        self._session = EnvelopeSession(duplicate_offset=self._settings.duplicate_offset)
        self._controller = InteractionController(self._session)
        self._current_page_index = 0
        self._zoom = self._settings.zoom

        self.document_list = QListWidget()
        self.document_list.currentRowChanged.connect(self._on_document_selected)
        self.page_list = QListWidget()
        self.page_list.currentRowChanged.connect(self._on_page_selected)

        side_panel = QWidget()
        side_layout = QVBoxLayout(side_panel)
        side_layout.setContentsMargins(0, 0, 0, 0)
        side_layout.addWidget(self.document_list, 1)
        side_layout.addWidget(self.page_list, 3)

        self.canvas = PageCanvas(self._session, self._controller)
        self.canvas.field_created.connect(self._on_canvas_field_created)

        self.scroll_area = QScrollArea()
        self.scroll_area.setWidgetResizable(False)
        self.scroll_area.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.scroll_area.setWidget(self.canvas)

        splitter = QSplitter()
        splitter.addWidget(side_panel)
        splitter.addWidget(self.scroll_area)
        splitter.setStretchFactor(0, 1)
        splitter.setStretchFactor(1, 4)
        self.setCentralWidget(splitter)

        self.recipient_combo = QComboBox()
        self.recipient_combo.currentIndexChanged.connect(self._on_recipient_selected)

        self._build_toolbar()
        self._build_palette()

        self._session.add_listener(self._on_session_changed)
        self._session.add_recipient()
        self._populate_recipients()
        self.statusBar().showMessage("Ready")

    def _build_toolbar(self) -> None:
        toolbar = QToolBar("Main Toolbar")
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        self._add_action(toolbar, "Open Document", self.open_document)
        self._add_action(toolbar, "Remove Document", self.remove_document)
        self._add_action(toolbar, "Export Payload", self.export_payload)
        self._add_action(toolbar, "Email Subject", self.edit_email_subject)
        self._add_action(toolbar, "Envelope Options", self.edit_envelope_options)
        self._add_action(toolbar, "Reset", self.reset_envelope)

        toolbar.addSeparator()

        self._add_action(toolbar, "Add Recipient", self.add_recipient)
        self._add_action(toolbar, "Edit Recipient", self.edit_recipient)
        self._add_action(toolbar, "Remove Recipient", self.remove_recipient)
        toolbar.addWidget(self.recipient_combo)

        toolbar.addSeparator()

        self._add_action(toolbar, "Delete Field", self.delete_selected_field)
        copy_action = self._add_action(toolbar, "Copy Field", self.copy_selected_field)
        copy_action.setShortcut("Ctrl+D")
        self._add_action(toolbar, "Add Item", self.add_group_item)

        toolbar.addSeparator()

        self._add_action(toolbar, "Previous", self.show_previous_page)
        self._add_action(toolbar, "Next", self.show_next_page)
        self._add_action(toolbar, "Zoom In", lambda: self.change_zoom(1))
        self._add_action(toolbar, "Zoom Out", lambda: self.change_zoom(-1))

    def _build_palette(self) -> None:
        palette = QToolBar("Fields")
        palette.setMovable(False)
        self.addToolBar(Qt.ToolBarArea.LeftToolBarArea, palette)

        mode_group = QActionGroup(self)
        mode_group.setExclusive(True)

        self._pointer_action = QAction("Pointer", self)
        self._pointer_action.setCheckable(True)
        self._pointer_action.setChecked(True)
        self._pointer_action.triggered.connect(lambda: self._set_mode(None))
        mode_group.addAction(self._pointer_action)
        palette.addAction(self._pointer_action)

        for field_type in PALETTE_TYPES:
            action = QAction(FIELD_TYPES[field_type].label, self)
            action.setCheckable(True)
            action.triggered.connect(lambda _checked=False, kind=field_type: self._set_mode(kind))
            mode_group.addAction(action)
            palette.addAction(action)

    def _add_action(self, toolbar: QToolBar, text: str, slot) -> QAction:
        action = QAction(text, self)
        action.triggered.connect(slot)
        toolbar.addAction(action)
        return action

    def open_document(self) -> None:
        file_path, _ = QFileDialog.getOpenFileName(
            self,
            "Open Document",
            str(Path.home()),
            "PDF Files (*.pdf)",
        )
        if not file_path:
            return

        try:
            loaded = load_document(file_path)
        except DocumentLoadError as exc:
            LOGGER.warning("%s", exc)
            QMessageBox.critical(self, "Open Failed", str(exc))
            return

        document = self._session.add_document(loaded.name, loaded.page_count, loaded.content)
        self._session.set_active_document(document.id)
        try:
            widgets = import_pdf_fields(loaded.content)
        except PdfImportError as exc:
            LOGGER.warning("%s", exc)
            QMessageBox.warning(self, "Field Import Warning", str(exc))
            widgets = []
        imported = apply_imported_fields(self._session, document.id, widgets)
        self._session.deselect_field()

        self._populate_documents()
        self.statusBar().showMessage(
            f"Loaded: {loaded.name} ({len(imported)} existing field(s) imported)"
        )

    def remove_document(self) -> None:
        document = self._session.active_document
        if document is None:
            return
        self._session.remove_document(document.id)
        self._populate_documents()
        self.statusBar().showMessage(f"Removed: {document.name}")

    def export_payload(self) -> None:
        if not self._session.documents:
            QMessageBox.information(self, "No Document", "Open a document first.")
            return

        output_path, _ = QFileDialog.getSaveFileName(
            self,
            "Export Envelope Payload",
            str(Path.home() / "envelope.json"),
            "JSON Files (*.json)",
        )
        if not output_path:
            return

        try:
            write_payload(generate_payload(self._session.snapshot()), output_path)
        except PayloadWriteError as exc:
            LOGGER.error("%s", exc)
            QMessageBox.critical(self, "Export Failed", str(exc))
            return
        self.statusBar().showMessage(f"Exported: {output_path}")

    def edit_email_subject(self) -> None:
        subject, accepted = QInputDialog.getText(
            self,
            "Email Subject",
            "Subject:",
            text=self._session.options.email_subject,
        )
        if accepted:
            self._session.update_options(email_subject=subject)

    def edit_envelope_options(self) -> None:
        options = self._session.options
        statuses = [status.value for status in EnvelopeStatus]
        status, accepted = QInputDialog.getItem(
            self,
            "Envelope Options",
            "Status:",
            statuses,
            statuses.index(options.status.value),
            False,
        )
        if not accepted:
            return

        reminder_delay, accepted = QInputDialog.getInt(
            self,
            "Envelope Options",
            "Reminder delay in days (0 = off):",
            options.reminder_delay if options.reminder_enabled else 0,
            0,
            999,
        )
        if not accepted:
            return
        expire_after, accepted = QInputDialog.getInt(
            self,
            "Envelope Options",
            "Expire after days (0 = off):",
            options.expire_after if options.expire_enabled else 0,
            0,
            999,
        )
        if not accepted:
            return

        changes = {
            "status": status,
            "reminder_enabled": reminder_delay > 0,
            "expire_enabled": expire_after > 0,
        }
        if reminder_delay > 0:
            changes["reminder_delay"] = reminder_delay
        if expire_after > 0:
            changes["expire_after"] = expire_after
        self._session.update_options(**changes)
        self.statusBar().showMessage(f"Envelope status: {status}")

    def reset_envelope(self) -> None:
        answer = QMessageBox.question(self, "Reset", "Discard all documents, recipients and fields?")
        if answer != QMessageBox.StandardButton.Yes:
            return
        self._controller.release()
        self._session.reset()
        self._session.add_recipient()
        self._populate_recipients()
        self._populate_documents()
        self.statusBar().showMessage("Envelope reset")

    def add_recipient(self) -> None:
        recipient = self._session.add_recipient()
        self._session.set_active_recipient(recipient.id)
        self._populate_recipients()

    def edit_recipient(self) -> None:
        recipient = self._session.active_recipient
        if recipient is None:
            return
        name, accepted = QInputDialog.getText(self, "Recipient", "Name:", text=recipient.name)
        if not accepted:
            return
        email, accepted = QInputDialog.getText(self, "Recipient", "Email:", text=recipient.email)
        if not accepted:
            return
        labels = [RECIPIENT_TYPE_LABELS[role] for role in RecipientType]
        current = labels.index(RECIPIENT_TYPE_LABELS[recipient.recipient_type])
        label, accepted = QInputDialog.getItem(self, "Recipient", "Role:", labels, current, False)
        if not accepted:
            return
        role = list(RecipientType)[labels.index(label)]
        self._session.update_recipient(recipient.id, name=name, email=email, recipient_type=role)
        self._populate_recipients()

    def remove_recipient(self) -> None:
        recipient = self._session.active_recipient
        if recipient is None:
            return
        self._session.remove_recipient(recipient.id)
        self._populate_recipients()

    def show_previous_page(self) -> None:
        if self._session.active_document is None or self._current_page_index <= 0:
            return
        self._current_page_index -= 1
        self.page_list.setCurrentRow(self._current_page_index)

    def show_next_page(self) -> None:
        document = self._session.active_document
        if document is None:
            return
        if self._current_page_index >= document.page_count - 1:
            return
        self._current_page_index += 1
        self.page_list.setCurrentRow(self._current_page_index)

    def change_zoom(self, direction: int) -> None:
        zoom = self._zoom + direction * self._settings.zoom_step
        zoom = max(self._settings.min_zoom, min(zoom, self._settings.max_zoom))
        if zoom == self._zoom:
            return
        self._zoom = zoom
        self._render_current_page()

    def delete_selected_field(self) -> None:
        selected = self._session.selected_field
        if selected is None:
            self.statusBar().showMessage("No selected field to delete.")
            return
        self._session.remove_field(selected.id)
        self.statusBar().showMessage(f"Deleted {selected.tab_label}")

    def copy_selected_field(self) -> None:
        selected = self._session.selected_field
        if selected is None:
            self.statusBar().showMessage("No selected field to copy.")
            return
        duplicate = self._session.duplicate_field(selected.id)
        if duplicate is not None:
            self.statusBar().showMessage(f"Copied field as {duplicate.tab_label}")

    def add_group_item(self) -> None:
        selected = self._session.selected_field
        if selected is not None and selected.field_type is FieldType.LIST:
            updated = add_list_item(self._session, selected.id)
            if updated is not None:
                self.statusBar().showMessage(f"Added {updated.config.items[-1].text}")
            return
        if selected is None or not selected.is_group:
            self.statusBar().showMessage("Select a dropdown, radio or checkbox group first.")
            return
        item = groups.add_group_item(self._session, selected.id)
        if item is not None:
            self.statusBar().showMessage(f"Added {item.value}")

    def keyPressEvent(self, event) -> None:  # type: ignore[override]
        if event.key() == Qt.Key.Key_Delete:
            self.delete_selected_field()
            event.accept()
            return
        if event.matches(QKeySequence.StandardKey.Copy):
            self.copy_selected_field()
            event.accept()
            return
        super().keyPressEvent(event)

    def _set_mode(self, mode: FieldType | None) -> None:
        self.canvas.set_placement_type(mode)
        label = "Pointer mode" if mode is None else f"Placement mode: {FIELD_TYPES[mode].label}"
        self.statusBar().showMessage(label)

    def _populate_documents(self) -> None:
        self.document_list.blockSignals(True)
        self.document_list.clear()
        active_row = -1
        for row, document in enumerate(self._session.documents):
            self.document_list.addItem(QListWidgetItem(document.name))
            if document.id == self._session.active_document_id:
                active_row = row
        self.document_list.setCurrentRow(active_row)
        self.document_list.blockSignals(False)
        self._populate_page_list()

    def _populate_page_list(self) -> None:
        self.page_list.blockSignals(True)
        self.page_list.clear()
        document = self._session.active_document
        if document is not None:
            for page_number in range(1, document.page_count + 1):
                self.page_list.addItem(QListWidgetItem(f"Page {page_number}"))
        self.page_list.blockSignals(False)

        self._current_page_index = 0
        if document is None:
            self.canvas.clear_page()
            return
        self.page_list.setCurrentRow(0)
        self._render_current_page()

    def _populate_recipients(self) -> None:
        self.recipient_combo.blockSignals(True)
        self.recipient_combo.clear()
        for recipient in self._session.recipients:
            label = recipient.name or f"Recipient {recipient.recipient_number}"
            self.recipient_combo.addItem(label, recipient.id)
        active_index = self.recipient_combo.findData(self._session.active_recipient_id)
        self.recipient_combo.setCurrentIndex(active_index)
        self.recipient_combo.blockSignals(False)

    def _on_document_selected(self, row: int) -> None:
        if row < 0 or row >= len(self._session.documents):
            return
        self._session.set_active_document(self._session.documents[row].id)
        self._populate_page_list()

    def _on_page_selected(self, row: int) -> None:
        if self._session.active_document is None or row < 0:
            return
        self._current_page_index = row
        self._render_current_page()

    def _on_recipient_selected(self, index: int) -> None:
        recipient_id = self.recipient_combo.itemData(index)
        if recipient_id is not None:
            self._session.set_active_recipient(recipient_id)

    def _on_session_changed(self) -> None:
        self.canvas.update()

    def _on_canvas_field_created(self) -> None:
        self._pointer_action.setChecked(True)
        self._set_mode(None)
        document = self._session.active_document
        if document is not None:
            count = len(self._session.fields_for_document(document.id))
            self.statusBar().showMessage(f"{document.name}: {count} field(s)")

    def _render_current_page(self) -> None:
        document = self._session.active_document
        content = self._session.binaries.get(document.id) if document is not None else None
        if document is None or content is None:
            self.canvas.clear_page()
            return

        try:
            image = render_page_image(content, self._current_page_index, zoom=self._zoom)
            width, height = page_pixel_size(content, self._current_page_index, zoom=self._zoom)
        except PdfRenderError as exc:
            QMessageBox.critical(self, "Render Failed", str(exc))
            return

        self.canvas.set_page(
            pixmap=QPixmap.fromImage(image),
            document_id=document.id,
            page_number=self._current_page_index + 1,
            zoom=self._zoom,
            size=(width, height),
        )
        self.statusBar().showMessage(
            f"{document.name}: page {self._current_page_index + 1}/{document.page_count} "
            f"at {round(self._zoom * 100)}%"
        )
