"""Envelope document and recipient models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class RecipientType(str, Enum):
    SIGNERS = "signers"
    CARBON_COPIES = "carbonCopies"
    CERTIFIED_DELIVERIES = "certifiedDeliveries"
    IN_PERSON_SIGNERS = "inPersonSigners"
    AGENTS = "agents"
    INTERMEDIARIES = "intermediaries"


RECIPIENT_TYPE_LABELS: dict[RecipientType, str] = {
    RecipientType.SIGNERS: "Needs to Sign",
    RecipientType.CARBON_COPIES: "Receives a Copy",
    RecipientType.CERTIFIED_DELIVERIES: "Needs to View",
    RecipientType.IN_PERSON_SIGNERS: "In Person Signer",
    RecipientType.AGENTS: "Manages Envelope",
    RecipientType.INTERMEDIARIES: "Allow to Edit",
}


@dataclass(slots=True)
class Document:
    """Metadata for an uploaded document; its bytes live in the binary table."""

    id: str
    name: str
    page_count: int
    order: int

    @property
    def file_extension(self) -> str:
        return self.name.rsplit(".", maxsplit=1)[-1]


@dataclass(slots=True)
class Recipient:
    id: str
    recipient_type: RecipientType
    name: str
    email: str
    routing_order: int
    # External 1-based number; assigned once and never renumbered.
    recipient_number: str
