"""In-memory envelope state: documents, recipients and placed fields."""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field, fields as dataclass_fields, replace
from enum import Enum
import logging
import re
from typing import Any, Callable, Iterable
import uuid

from envelope_designer.model.document import Document, Recipient, RecipientType
from envelope_designer.model.field import (
    FIELD_TYPES,
    MAX_SCALE,
    MIN_HEIGHT,
    MIN_SCALE,
    MIN_WIDTH,
    Field,
    FieldType,
    default_config,
)
from envelope_designer.state.binaries import DocumentBinaryTable

LOGGER = logging.getLogger(__name__)

TAB_LABEL_FLOOR = 1000
DUPLICATE_OFFSET = 20.0

RECIPIENT_COLORS = (
    "#4C71BF",
    "#D95A2B",
    "#2FA44F",
    "#9B3AB1",
    "#E6A522",
    "#1A8BAF",
    "#D4456A",
    "#6B7B8D",
)

_FIELD_ATTRS = frozenset(f.name for f in dataclass_fields(Field))
_RECIPIENT_ATTRS = frozenset(f.name for f in dataclass_fields(Recipient))
_NUMERIC_OPTION_ATTRS = frozenset({"reminder_delay", "reminder_frequency", "expire_after", "expire_warn"})
_FROZEN_FIELD_ATTRS = frozenset({"id", "field_type"})
_FROZEN_RECIPIENT_ATTRS = frozenset({"id", "recipient_number"})
_LEADING_DIGITS = re.compile(r"\d+")


class EnvelopeStatus(str, Enum):
    CREATED = "created"
    SENT = "sent"


@dataclass(frozen=True, slots=True)
class EnvelopeOptions:
    email_subject: str = ""
    email_blurb: str = ""
    status: EnvelopeStatus = EnvelopeStatus.SENT
    reminder_enabled: bool = False
    reminder_delay: int = 1
    reminder_frequency: int = 1
    expire_enabled: bool = False
    expire_after: int = 120
    expire_warn: int = 3


_OPTION_ATTRS = frozenset(f.name for f in dataclass_fields(EnvelopeOptions))


@dataclass(frozen=True, slots=True)
class EnvelopeSnapshot:
    options: EnvelopeOptions
    documents: tuple[Document, ...]
    recipients: tuple[Recipient, ...]
    fields: tuple[Field, ...]


def parse_int(text: Any, fallback: int) -> int:
    """Parse user-entered numeric text, returning ``fallback`` when it does not parse."""
    try:
        return int(str(text).strip())
    except (TypeError, ValueError):
        try:
            return int(float(str(text).strip()))
        except (TypeError, ValueError, OverflowError):
            return fallback


def generate_tab_label(
    field_type: FieldType | str,
    recipient_number: str,
    existing_fields: Iterable[Field],
) -> str:
    """Return ``{type}-{recipient}-{n}`` with ``n`` one past the highest suffix in use.

    The suffix is recomputed from the live fields on every call and never
    drops below ``TAB_LABEL_FLOOR + 1``.
    """
    type_name = field_type.value if isinstance(field_type, FieldType) else str(field_type)
    prefix = f"{type_name}-{recipient_number}-"
    highest = TAB_LABEL_FLOOR
    for existing in existing_fields:
        if not existing.tab_label.startswith(prefix):
            continue
        match = _LEADING_DIGITS.match(existing.tab_label[len(prefix):])
        if match is None:
            continue
        highest = max(highest, int(match.group()))
    return f"{prefix}{highest + 1}"


@dataclass(slots=True)
class EnvelopeSession:
    documents: list[Document] = field(default_factory=list)
    recipients: list[Recipient] = field(default_factory=list)
    fields: list[Field] = field(default_factory=list)
    options: EnvelopeOptions = field(default_factory=EnvelopeOptions)
    selected_field_id: str | None = None
    active_document_id: str | None = None
    active_recipient_id: str | None = None
    binaries: DocumentBinaryTable = field(default_factory=DocumentBinaryTable)
    duplicate_offset: float = DUPLICATE_OFFSET
    _listeners: list[Callable[[], None]] = field(default_factory=list, repr=False)

    # -- listeners -----------------------------------------------------------

    def add_listener(self, callback: Callable[[], None]) -> None:
        self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[], None]) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify(self) -> None:
        for callback in list(self._listeners):
            callback()

    # -- documents -----------------------------------------------------------

    def add_document(self, name: str, page_count: int, content: bytes = b"") -> Document:
        document = Document(
            id=str(uuid.uuid4()),
            name=name,
            page_count=page_count,
            order=len(self.documents) + 1,
        )
        self.binaries.put(document.id, content)
        self.documents = [*self.documents, document]
        if self.active_document_id is None:
            self.active_document_id = document.id
        LOGGER.info("Added document %s (%d page(s))", name, page_count)
        self._notify()
        return document

    def remove_document(self, document_id: str) -> None:
        self.binaries.remove(document_id)
        self.documents = [doc for doc in self.documents if doc.id != document_id]
        self._drop_fields(lambda placed: placed.document_id == document_id)
        if self.active_document_id == document_id:
            self.active_document_id = self.documents[0].id if self.documents else None
        self._notify()

    def set_active_document(self, document_id: str) -> None:
        if self.get_document(document_id) is None:
            LOGGER.debug("Ignoring activation of unknown document %s", document_id)
            return
        self.active_document_id = document_id
        self._notify()

    # -- recipients ----------------------------------------------------------

    def add_recipient(self) -> Recipient:
        count = len(self.recipients)
        # Numbers of removed recipients are never handed out again.
        highest = max(
            (int(r.recipient_number) for r in self.recipients if r.recipient_number.isdigit()),
            default=0,
        )
        recipient = Recipient(
            id=str(uuid.uuid4()),
            recipient_type=RecipientType.SIGNERS,
            name="",
            email="",
            routing_order=count + 1,
            recipient_number=str(max(count, highest) + 1),
        )
        self.recipients = [*self.recipients, recipient]
        if self.active_recipient_id is None:
            self.active_recipient_id = recipient.id
        self._notify()
        return recipient

    def update_recipient(self, recipient_id: str, **changes: Any) -> Recipient | None:
        target = self.get_recipient(recipient_id)
        if target is None:
            return None
        accepted = {}
        for name, value in changes.items():
            if name in _FROZEN_RECIPIENT_ATTRS or name not in _RECIPIENT_ATTRS:
                LOGGER.debug("Ignoring recipient attribute %s", name)
                continue
            if name == "recipient_type":
                try:
                    value = RecipientType(value)
                except ValueError:
                    LOGGER.warning("Ignoring unknown recipient role %r", value)
                    continue
            accepted[name] = value
        updated = replace(target, **accepted)
        self.recipients = [updated if r.id == recipient_id else r for r in self.recipients]
        self._notify()
        return updated

    def remove_recipient(self, recipient_id: str) -> None:
        self.recipients = [r for r in self.recipients if r.id != recipient_id]
        self._drop_fields(lambda placed: placed.recipient_id == recipient_id)
        if self.active_recipient_id == recipient_id:
            self.active_recipient_id = self.recipients[0].id if self.recipients else None
        self._notify()

    def set_active_recipient(self, recipient_id: str) -> None:
        if self.get_recipient(recipient_id) is None:
            LOGGER.debug("Ignoring activation of unknown recipient %s", recipient_id)
            return
        self.active_recipient_id = recipient_id
        self._notify()

    # -- fields --------------------------------------------------------------

    def add_field(
        self,
        field_type: FieldType | str,
        document_id: str,
        page_number: int,
        x: float,
        y: float,
    ) -> Field | None:
        recipient = self.active_recipient
        if recipient is None:
            LOGGER.debug("No active recipient; %s not placed", field_type)
            return None
        try:
            kind = FieldType(field_type)
        except ValueError:
            LOGGER.debug("Unknown field type %r", field_type)
            return None
        if self.get_document(document_id) is None:
            LOGGER.debug("Unknown document %s; %s not placed", document_id, kind.value)
            return None

        definition = FIELD_TYPES[kind]
        placed = Field(
            id=str(uuid.uuid4()),
            field_type=kind,
            document_id=document_id,
            recipient_id=recipient.id,
            page_number=page_number,
            x=x,
            y=y,
            width=definition.default_width,
            height=definition.default_height,
            tab_label=generate_tab_label(kind, recipient.recipient_number, self.fields),
            label=definition.label,
            config=default_config(kind),
        )
        self.fields = [*self.fields, placed]
        self.selected_field_id = placed.id
        self._notify()
        return placed

    def update_field(self, field_id: str, **changes: Any) -> Field | None:
        """Merge ``changes`` into the field, replacing it with a new object.

        Header attributes are set on the field; anything else that names an
        attribute of the field's type config is merged into a copy of it.
        """
        target = self.get_field(field_id)
        if target is None:
            LOGGER.debug("Ignoring update for missing field %s", field_id)
            return None

        header: dict[str, Any] = {}
        config_changes: dict[str, Any] = {}
        for name, value in changes.items():
            if name in _FROZEN_FIELD_ATTRS:
                LOGGER.debug("Ignoring change to %s on field %s", name, field_id)
            elif name in _FIELD_ATTRS:
                header[name] = value
            elif target.config is not None and hasattr(target.config, name):
                config_changes[name] = value
            else:
                LOGGER.debug("Field %s has no attribute %s", field_id, name)

        if config_changes and "config" not in header:
            header["config"] = replace(target.config, **config_changes)
        updated = replace(target, **header)
        self.fields = [updated if f.id == field_id else f for f in self.fields]
        self._notify()
        return updated

    def set_field_number(self, field_id: str, name: str, text: Any) -> Field | None:
        """Apply a numeric edit typed by the user, keeping the old value if it does not parse."""
        target = self.get_field(field_id)
        if target is None:
            return None
        if hasattr(target, name) and name in _FIELD_ATTRS:
            current = getattr(target, name)
        elif target.config is not None and hasattr(target.config, name):
            current = getattr(target.config, name)
        else:
            return None

        value = parse_int(text, current if current is not None else 0)
        if name == "width":
            value = max(MIN_WIDTH, value)
        elif name == "height":
            value = max(MIN_HEIGHT, value)
        elif name == "scale_value":
            value = max(MIN_SCALE, min(value, MAX_SCALE))
        return self.update_field(field_id, **{name: value})

    def remove_field(self, field_id: str) -> None:
        self.fields = [f for f in self.fields if f.id != field_id]
        if self.selected_field_id == field_id:
            self.selected_field_id = None
        self._notify()

    def select_field(self, field_id: str) -> None:
        if self.get_field(field_id) is None:
            return
        self.selected_field_id = field_id
        self._notify()

    def deselect_field(self) -> None:
        self.selected_field_id = None
        self._notify()

    def duplicate_field(self, field_id: str) -> Field | None:
        source = self.get_field(field_id)
        if source is None:
            return None
        recipient = self.get_recipient(source.recipient_id)
        recipient_number = recipient.recipient_number if recipient is not None else "1"

        duplicate = deepcopy(source)
        duplicate.id = str(uuid.uuid4())
        duplicate.x = source.x + self.duplicate_offset
        duplicate.y = source.y + self.duplicate_offset
        duplicate.tab_label = generate_tab_label(source.field_type, recipient_number, self.fields)

        self.fields = [*self.fields, duplicate]
        self.selected_field_id = duplicate.id
        self._notify()
        return duplicate

    def _drop_fields(self, predicate: Callable[[Field], bool]) -> None:
        self.fields = [f for f in self.fields if not predicate(f)]
        if self.selected_field_id is not None and self.get_field(self.selected_field_id) is None:
            self.selected_field_id = None

    # -- envelope ------------------------------------------------------------

    def update_options(self, **changes: Any) -> EnvelopeOptions:
        accepted: dict[str, Any] = {}
        for name, value in changes.items():
            if name not in _OPTION_ATTRS:
                LOGGER.debug("Ignoring envelope option %s", name)
                continue
            if name == "status":
                try:
                    value = EnvelopeStatus(value)
                except ValueError:
                    LOGGER.warning("Ignoring unknown envelope status %r", value)
                    continue
            elif name in _NUMERIC_OPTION_ATTRS:
                value = parse_int(value, getattr(self.options, name))
            accepted[name] = value
        self.options = replace(self.options, **accepted)
        self._notify()
        return self.options

    def reset(self) -> None:
        self.binaries.clear()
        self.documents = []
        self.recipients = []
        self.fields = []
        self.options = EnvelopeOptions()
        self.selected_field_id = None
        self.active_document_id = None
        self.active_recipient_id = None
        self._notify()

    def snapshot(self) -> EnvelopeSnapshot:
        return EnvelopeSnapshot(
            options=self.options,
            documents=tuple(self.documents),
            recipients=tuple(self.recipients),
            fields=tuple(self.fields),
        )

    # -- lookups -------------------------------------------------------------

    def get_document(self, document_id: str | None) -> Document | None:
        return next((doc for doc in self.documents if doc.id == document_id), None)

    def get_recipient(self, recipient_id: str | None) -> Recipient | None:
        return next((r for r in self.recipients if r.id == recipient_id), None)

    def get_field(self, field_id: str | None) -> Field | None:
        return next((f for f in self.fields if f.id == field_id), None)

    @property
    def active_document(self) -> Document | None:
        return self.get_document(self.active_document_id)

    @property
    def active_recipient(self) -> Recipient | None:
        return self.get_recipient(self.active_recipient_id)

    @property
    def selected_field(self) -> Field | None:
        return self.get_field(self.selected_field_id)

    def fields_for_document(self, document_id: str) -> list[Field]:
        return [f for f in self.fields if f.document_id == document_id]

    def fields_for_page(self, document_id: str, page_number: int) -> list[Field]:
        return [
            f for f in self.fields if f.document_id == document_id and f.page_number == page_number
        ]

    def recipient_color(self, recipient_id: str) -> str:
        index = next(
            (i for i, r in enumerate(self.recipients) if r.id == recipient_id),
            0,
        )
        return RECIPIENT_COLORS[index % len(RECIPIENT_COLORS)]
