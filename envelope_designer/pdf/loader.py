"""Document loading helpers."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path

import fitz

LOGGER = logging.getLogger(__name__)


class DocumentLoadError(RuntimeError):
    """Raised when a document cannot be opened."""


@dataclass(frozen=True, slots=True)
class LoadedDocument:
    name: str
    content: bytes
    page_count: int


def count_pages(content: bytes) -> int:
    try:
        with fitz.open(stream=content, filetype="pdf") as handle:
            return handle.page_count
    except Exception as exc:
        raise DocumentLoadError("Failed to read document pages") from exc


def load_document(path: str | Path) -> LoadedDocument:
    source_path = Path(path)
    if not source_path.exists():
        raise DocumentLoadError(f"File not found: {source_path}")

    try:
        content = source_path.read_bytes()
    except OSError as exc:
        raise DocumentLoadError(f"Failed to read: {source_path}") from exc

    try:
        page_count = count_pages(content)
    except DocumentLoadError as exc:
        raise DocumentLoadError(f"Failed to open document: {source_path}") from exc

    LOGGER.info("Loaded %s (%d page(s))", source_path.name, page_count)
    return LoadedDocument(name=source_path.name, content=content, page_count=page_count)
