"""Envelope payload export.

``generate_payload`` turns a session snapshot into the nested envelope
document expected by the e-signature API: recipients grouped by role, each
with its tabs grouped by wire tab type. Every leaf value is a string, and
optional attributes are left out entirely when they are unset.
"""

from __future__ import annotations

from enum import Enum
import json
import logging
from pathlib import Path
from typing import Any

from envelope_designer.model.document import Document
from envelope_designer.model.field import (
    CheckboxGroupConfig,
    Field,
    FieldType,
    FormulaConfig,
    ListConfig,
    RadioGroupConfig,
    TextConfig,
)
from envelope_designer.model.geometry import round_half_up
from envelope_designer.state.session import EnvelopeSession, EnvelopeSnapshot

LOGGER = logging.getLogger(__name__)

DEFAULT_EMAIL_SUBJECT = "Please sign this document"
BASE64_PLACEHOLDER = "{{BASE64_DOCUMENT_CONTENT}}"

WIRE_TAB_TYPES: dict[FieldType, str] = {
    FieldType.SIGN_HERE: "signHereTabs",
    FieldType.INITIAL_HERE: "initialHereTabs",
    FieldType.DATE_SIGNED: "dateSignedTabs",
    FieldType.FULL_NAME: "fullNameTabs",
    FieldType.EMAIL_ADDRESS: "emailAddressTabs",
    FieldType.COMPANY: "companyTabs",
    FieldType.TITLE: "titleTabs",
    FieldType.TEXT: "textTabs",
    FieldType.NUMBER: "numberTabs",
    FieldType.CHECKBOX: "checkboxTabs",
    FieldType.CHECKBOX_GROUP: "checkboxTabs",
    FieldType.LIST: "listTabs",
    FieldType.RADIO_GROUP: "radioGroupTabs",
    FieldType.NOTE: "noteTabs",
    FieldType.APPROVE: "approveTabs",
    FieldType.DECLINE: "declineTabs",
    FieldType.FORMULA: "formulaTabs",
    FieldType.ATTACHMENT: "signerAttachmentTabs",
    FieldType.STAMP_HERE: "stampHereTabs",
}

_CHECKED_VALUES = frozenset({"true", "yes"})


class PayloadWriteError(RuntimeError):
    """Raised when the payload cannot be written to disk."""


def wire_string(value: Any) -> str:
    """Render a value the way the envelope API expects: always a string."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else repr(value)
    return str(value)


def _position(value: float) -> str:
    return str(round_half_up(value))


def generate_payload(source: EnvelopeSnapshot | EnvelopeSession) -> dict[str, Any]:
    snapshot = source.snapshot() if isinstance(source, EnvelopeSession) else source
    options = snapshot.options

    payload: dict[str, Any] = {
        "emailSubject": options.email_subject or DEFAULT_EMAIL_SUBJECT,
        "emailBlurb": options.email_blurb or "",
        "status": wire_string(options.status),
    }

    if options.reminder_enabled or options.expire_enabled:
        payload["notification"] = {
            "useAccountDefaults": "false",
            "reminders": {
                "reminderEnabled": wire_string(options.reminder_enabled),
                "reminderDelay": wire_string(options.reminder_delay),
                "reminderFrequency": wire_string(options.reminder_frequency),
            },
            "expirations": {
                "expireEnabled": wire_string(options.expire_enabled),
                "expireAfter": wire_string(options.expire_after),
                "expireWarn": wire_string(options.expire_warn),
            },
        }

    payload["documents"] = [
        _document_payload(document, index) for index, document in enumerate(snapshot.documents, 1)
    ]

    document_numbers = {document.id: index for index, document in enumerate(snapshot.documents, 1)}
    recipients_by_type: dict[str, list[dict[str, Any]]] = {}
    for recipient in snapshot.recipients:
        tabs: dict[str, list[dict[str, Any]]] = {}
        tab_order = 1
        for placed in snapshot.fields:
            if placed.recipient_id != recipient.id:
                continue
            document_number = str(document_numbers.get(placed.document_id, 0))
            wire_type = WIRE_TAB_TYPES.get(placed.field_type, f"{placed.field_type.value}Tabs")
            if isinstance(placed.config, CheckboxGroupConfig):
                emitted = _checkbox_group_tabs(placed, document_number, tab_order)
            else:
                emitted = [_field_tab(placed, document_number, tab_order)]
            tab_order += len(emitted)
            tabs.setdefault(wire_type, []).extend(emitted)

        recipients_by_type.setdefault(recipient.recipient_type.value, []).append(
            {
                "recipientId": recipient.recipient_number,
                "name": recipient.name,
                "email": recipient.email,
                "routingOrder": wire_string(recipient.routing_order),
                "tabs": tabs,
            }
        )

    payload["recipients"] = recipients_by_type
    return payload


def _document_payload(document: Document, index: int) -> dict[str, str]:
    return {
        "documentId": str(index),
        "name": document.name,
        "fileExtension": document.file_extension,
        "documentBase64": BASE64_PLACEHOLDER,
        "order": wire_string(document.order),
    }


def _base_tab(
    placed: Field,
    document_number: str,
    x: float,
    y: float,
    tab_label: str,
    tab_order: int,
) -> dict[str, Any]:
    return {
        "documentId": document_number,
        "pageNumber": wire_string(placed.page_number),
        "xPosition": _position(x),
        "yPosition": _position(y),
        "tabLabel": tab_label,
        "tabOrder": str(tab_order),
        "required": wire_string(placed.required),
    }


def _add_conditional_parent(tab: dict[str, Any], placed: Field) -> None:
    if placed.conditional_parent_label:
        tab["conditionalParentLabel"] = placed.conditional_parent_label
    if placed.conditional_parent_value:
        tab["conditionalParentValue"] = placed.conditional_parent_value


def _field_tab(placed: Field, document_number: str, tab_order: int) -> dict[str, Any]:
    tab = _base_tab(placed, document_number, placed.x, placed.y, placed.tab_label, tab_order)

    if placed.scale_value is not None:
        tab["scaleValue"] = wire_string(placed.scale_value)
    else:
        if placed.width:
            tab["width"] = wire_string(placed.width)
        if placed.height:
            tab["height"] = wire_string(placed.height)
    if placed.tooltip:
        tab["toolTip"] = placed.tooltip
    if placed.font:
        tab["font"] = placed.font
    if placed.font_size:
        tab["fontSize"] = f"Size{wire_string(placed.font_size)}"
    if placed.font_color:
        tab["fontColor"] = placed.font_color
    if placed.bold:
        tab["bold"] = "true"
    if placed.italic:
        tab["italic"] = "true"
    if placed.underline:
        tab["underline"] = "true"
    if placed.locked:
        tab["locked"] = "true"
    if placed.read_only:
        tab["readOnly"] = "true"
    if placed.field_type is FieldType.CHECKBOX:
        tab["selected"] = wire_string(placed.value in _CHECKED_VALUES)
    elif placed.value:
        tab["value"] = placed.value
    _add_conditional_parent(tab, placed)

    config = placed.config
    if isinstance(config, ListConfig):
        tab["listItems"] = [{"text": item.text, "value": item.value} for item in config.items]
    elif isinstance(config, RadioGroupConfig):
        tab["groupName"] = config.group_name
        tab["radios"] = [
            {
                "pageNumber": wire_string(placed.page_number),
                "xPosition": _position(placed.x + radio.x),
                "yPosition": _position(placed.y + radio.y),
                "value": radio.value,
                "selected": wire_string(radio.selected),
            }
            for radio in config.radios
        ]
    elif isinstance(config, FormulaConfig):
        if config.formula:
            tab["formula"] = config.formula
    elif isinstance(config, TextConfig):
        if config.max_length:
            tab["maxLength"] = wire_string(config.max_length)
        if config.validation_pattern:
            tab["validationPattern"] = config.validation_pattern
        if config.validation_message:
            tab["validationMessage"] = config.validation_message

    return tab


def _checkbox_group_tabs(placed: Field, document_number: str, first_order: int) -> list[dict[str, Any]]:
    tabs = []
    for offset, checkbox in enumerate(placed.group_items):
        tab = _base_tab(
            placed,
            document_number,
            placed.x + checkbox.x,
            placed.y + checkbox.y,
            checkbox.value,
            first_order + offset,
        )
        tab["selected"] = wire_string(checkbox.selected)
        if placed.tooltip:
            tab["toolTip"] = placed.tooltip
        if placed.locked:
            tab["locked"] = "true"
        if placed.read_only:
            tab["readOnly"] = "true"
        _add_conditional_parent(tab, placed)
        tabs.append(tab)
    return tabs


def write_payload(payload: dict[str, Any], output_path: str | Path) -> None:
    output = Path(output_path)
    try:
        output.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    except (OSError, TypeError) as exc:
        raise PayloadWriteError(f"Failed to write payload: {output}") from exc
    LOGGER.info("Wrote envelope payload to %s", output)
