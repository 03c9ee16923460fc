"""Raw document bytes, kept apart from the envelope metadata."""

from __future__ import annotations


class DocumentBinaryTable:
    """Document bytes keyed by document id.

    Entries are created and removed together with their ``Document`` so the
    metadata model never carries large buffers around.
    """

    def __init__(self) -> None:
        self._storage: dict[str, bytes] = {}

    def put(self, document_id: str, content: bytes) -> None:
        self._storage[document_id] = content

    def get(self, document_id: str) -> bytes | None:
        return self._storage.get(document_id)

    def remove(self, document_id: str) -> None:
        self._storage.pop(document_id, None)

    def clear(self) -> None:
        self._storage.clear()

    def __contains__(self, document_id: object) -> bool:
        return document_id in self._storage

    def __len__(self) -> int:
        return len(self._storage)
