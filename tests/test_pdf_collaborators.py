from __future__ import annotations

from io import BytesIO
from pathlib import Path

import fitz
import pytest
from reportlab.pdfgen import canvas

from envelope_designer.model.field import FieldType
from envelope_designer.pdf.importer import (
    ImportedWidget,
    apply_imported_fields,
    import_pdf_fields,
)
from envelope_designer.pdf.loader import DocumentLoadError, load_document
from envelope_designer.state.session import EnvelopeSession

PAGE_SIZE = (600.0, 800.0)


def _blank_pdf(pages: int = 2) -> bytes:
    document = fitz.open()
    for _ in range(pages):
        document.new_page(width=PAGE_SIZE[0], height=PAGE_SIZE[1])
    content = document.tobytes()
    document.close()
    return content


def _pdf_with_widgets() -> bytes:
    buffer = BytesIO()
    report = canvas.Canvas(buffer, pagesize=PAGE_SIZE)
    report.acroForm.textfield(
        name="customer_name",
        x=50,
        y=700,
        width=200,
        height=24,
        value="Ada",
        fieldFlags="required",
    )
    report.showPage()
    report.acroForm.checkbox(name="agree", x=80, y=100, size=18, checked=True)
    report.showPage()
    report.save()
    return buffer.getvalue()


def test_load_document_counts_pages(tmp_path: Path) -> None:
    path = tmp_path / "contract.pdf"
    path.write_bytes(_blank_pdf(3))

    loaded = load_document(path)

    assert loaded.name == "contract.pdf"
    assert loaded.page_count == 3
    assert loaded.content == path.read_bytes()


def test_load_document_errors(tmp_path: Path) -> None:
    with pytest.raises(DocumentLoadError):
        load_document(tmp_path / "missing.pdf")

    broken = tmp_path / "broken.pdf"
    broken.write_bytes(b"not a pdf at all")
    with pytest.raises(DocumentLoadError):
        load_document(broken)


def test_import_converts_widgets_to_top_left_space() -> None:
    widgets = import_pdf_fields(_pdf_with_widgets())

    assert [w.field_type for w in widgets] == [FieldType.TEXT, FieldType.CHECKBOX]
    text, checkbox = widgets
    assert text.page_number == 1
    assert text.name == "customer_name"
    assert (text.x, text.y) == pytest.approx((50.0, 76.0))
    assert (text.width, text.height) == pytest.approx((200.0, 24.0))
    assert text.value == "Ada"
    assert text.required is True
    assert checkbox.page_number == 2
    assert checkbox.value == "true"


def test_apply_imported_fields_places_for_active_recipient() -> None:
    session = EnvelopeSession()
    recipient = session.add_recipient()
    document = session.add_document("form.pdf", 2)
    widgets = [
        ImportedWidget(1, FieldType.TEXT, "customer_name", 50, 76, 200, 10, True, "Ada"),
        ImportedWidget(2, FieldType.CHECKBOX, "", 80, 682, 18, 18, False, "true"),
    ]

    placed = apply_imported_fields(session, document.id, widgets)

    assert len(placed) == 2
    text, checkbox = placed
    assert text.recipient_id == recipient.id
    assert text.label == "customer_name"
    assert (text.width, text.height) == (200, 14.0)
    assert text.value == "Ada"
    assert checkbox.label == "Checkbox"
    assert checkbox.value == "true"
    assert checkbox.required is False


def test_apply_imported_fields_needs_a_recipient() -> None:
    session = EnvelopeSession()
    document = session.add_document("form.pdf", 1)
    widgets = [ImportedWidget(1, FieldType.TEXT, "a", 0, 0, 100, 20)]

    assert apply_imported_fields(session, document.id, widgets) == []
