"""Page rendering helpers using PyMuPDF."""

from __future__ import annotations

import fitz
from PySide6.QtGui import QImage


class PdfRenderError(RuntimeError):
    """Raised when a page cannot be rendered."""


def render_page_image(content: bytes, page_index: int, zoom: float = 1.0) -> QImage:
    """Rasterise a page at ``zoom``; the image size is the page's pixel size at that zoom."""
    try:
        with fitz.open(stream=content, filetype="pdf") as document:
            if page_index < 0 or page_index >= document.page_count:
                raise PdfRenderError(f"Page index out of range: {page_index}")
            page = document.load_page(page_index)
            matrix = fitz.Matrix(zoom, zoom)
            pix = page.get_pixmap(matrix=matrix, alpha=False, annots=False)
    except PdfRenderError:
        raise
    except Exception as exc:  # pragma: no cover
        raise PdfRenderError(f"Failed to render page {page_index + 1}") from exc

    image_format = QImage.Format_RGB888
    image = QImage(pix.samples, pix.width, pix.height, pix.stride, image_format)
    return image.copy()


def page_pixel_size(content: bytes, page_index: int, zoom: float = 1.0) -> tuple[int, int]:
    try:
        with fitz.open(stream=content, filetype="pdf") as document:
            if page_index < 0 or page_index >= document.page_count:
                raise PdfRenderError(f"Page index out of range: {page_index}")
            rect = document.load_page(page_index).rect * fitz.Matrix(zoom, zoom)
    except PdfRenderError:
        raise
    except Exception as exc:  # pragma: no cover
        raise PdfRenderError(f"Failed to read page {page_index + 1}") from exc
    irect = rect.irect
    return irect.width, irect.height
