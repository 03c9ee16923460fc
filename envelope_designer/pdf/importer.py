"""Import existing AcroForm widgets from a PDF as placed fields."""

from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO
import logging

from pypdf import PdfReader

from envelope_designer.model.field import MIN_HEIGHT, MIN_WIDTH, Field, FieldType
from envelope_designer.state.session import EnvelopeSession

LOGGER = logging.getLogger(__name__)


class PdfImportError(RuntimeError):
    """Raised when existing form fields cannot be imported."""


@dataclass(frozen=True, slots=True)
class ImportedWidget:
    """A widget converted to document space (top-left origin, 1-based page)."""

    page_number: int
    field_type: FieldType
    name: str
    x: float
    y: float
    width: float
    height: float
    required: bool = False
    value: str = ""


def import_pdf_fields(content: bytes) -> list[ImportedWidget]:
    imported: list[ImportedWidget] = []

    try:
        reader = PdfReader(BytesIO(content))
        for page_index, page in enumerate(reader.pages):
            page_top = float(page.mediabox.top)
            page_left = float(page.mediabox.left)
            annots = page.get("/Annots") or []
            for annot_ref in annots:
                annot = annot_ref.get_object()
                if annot.get("/Subtype") != "/Widget":
                    continue

                parent = annot.get("/Parent")
                parent_obj = parent.get_object() if parent is not None else None

                field_type = annot.get("/FT") or (parent_obj.get("/FT") if parent_obj else None)
                rect = annot.get("/Rect")
                if field_type is None or rect is None:
                    continue

                llx, lly, urx, ury = (float(value) for value in rect)
                name = str(annot.get("/T") or (parent_obj.get("/T") if parent_obj else "") or "")
                flags = annot.get("/Ff")
                if flags is None and parent_obj is not None:
                    flags = parent_obj.get("/Ff")
                required = bool(int(flags or 0) & 2)

                value_obj = annot.get("/V")
                if value_obj is None and parent_obj is not None:
                    value_obj = parent_obj.get("/V")

                if field_type == "/Tx":
                    kind = FieldType.TEXT
                    value = str(value_obj or "")
                elif field_type == "/Btn":
                    kind = FieldType.CHECKBOX
                    state = str(value_obj or "")
                    appearance = str(annot.get("/AS") or "")
                    checked = state not in {"", "/Off", "Off"} or appearance not in {
                        "",
                        "/Off",
                        "Off",
                    }
                    value = "true" if checked else ""
                else:
                    continue

                imported.append(
                    ImportedWidget(
                        page_number=page_index + 1,
                        field_type=kind,
                        name=name,
                        x=llx - page_left,
                        y=page_top - ury,
                        width=max(0.0, urx - llx),
                        height=max(0.0, ury - lly),
                        required=required,
                        value=value,
                    )
                )
    except Exception as exc:
        raise PdfImportError("Failed to import form fields") from exc

    LOGGER.info("Found %d importable form widget(s)", len(imported))
    return imported


def apply_imported_fields(
    session: EnvelopeSession,
    document_id: str,
    widgets: list[ImportedWidget],
) -> list[Field]:
    """Place each widget for the active recipient; nothing is placed without one."""
    placed: list[Field] = []
    for widget in widgets:
        created = session.add_field(
            widget.field_type,
            document_id,
            widget.page_number,
            widget.x,
            widget.y,
        )
        if created is None:
            break
        changes: dict[str, object] = {
            "required": widget.required,
            "value": widget.value,
        }
        if widget.name:
            changes["label"] = widget.name
        if widget.field_type is FieldType.TEXT:
            changes["width"] = max(MIN_WIDTH, widget.width)
            changes["height"] = max(MIN_HEIGHT, widget.height)
        updated = session.update_field(created.id, **changes)
        placed.append(updated or created)
    return placed
