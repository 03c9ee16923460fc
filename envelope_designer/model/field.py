"""Placed field model definitions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union
import uuid


class FieldType(str, Enum):
    SIGN_HERE = "signHere"
    INITIAL_HERE = "initialHere"
    DATE_SIGNED = "dateSignedTabs"
    FULL_NAME = "fullName"
    EMAIL_ADDRESS = "emailAddress"
    COMPANY = "company"
    TITLE = "title"
    TEXT = "text"
    NUMBER = "number"
    CHECKBOX = "checkbox"
    CHECKBOX_GROUP = "checkboxGroup"
    LIST = "list"
    RADIO_GROUP = "radioGroup"
    NOTE = "note"
    APPROVE = "approve"
    DECLINE = "decline"
    FORMULA = "formulaTab"
    ATTACHMENT = "attachmentTab"
    STAMP_HERE = "stampHere"


class FieldCategory(str, Enum):
    SIGNATURE = "signature"
    STANDARD = "standard"
    INPUT = "input"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class FieldTypeDefinition:
    field_type: FieldType
    label: str
    category: FieldCategory
    default_width: float
    default_height: float


def _definition(
    field_type: FieldType,
    label: str,
    category: FieldCategory,
    width: float,
    height: float,
) -> tuple[FieldType, FieldTypeDefinition]:
    return field_type, FieldTypeDefinition(field_type, label, category, width, height)


FIELD_TYPES: dict[FieldType, FieldTypeDefinition] = dict(
    [
        _definition(FieldType.SIGN_HERE, "Sign", FieldCategory.SIGNATURE, 74, 44),
        _definition(FieldType.INITIAL_HERE, "Initial", FieldCategory.SIGNATURE, 50, 40),
        _definition(FieldType.DATE_SIGNED, "Date Signed", FieldCategory.SIGNATURE, 150, 20),
        _definition(FieldType.FULL_NAME, "Name", FieldCategory.STANDARD, 150, 20),
        _definition(FieldType.EMAIL_ADDRESS, "Email", FieldCategory.STANDARD, 200, 20),
        _definition(FieldType.COMPANY, "Company", FieldCategory.STANDARD, 150, 20),
        _definition(FieldType.TITLE, "Title", FieldCategory.STANDARD, 150, 20),
        _definition(FieldType.TEXT, "Text", FieldCategory.INPUT, 150, 20),
        _definition(FieldType.NUMBER, "Number", FieldCategory.INPUT, 120, 20),
        _definition(FieldType.CHECKBOX, "Checkbox", FieldCategory.INPUT, 20, 20),
        _definition(FieldType.CHECKBOX_GROUP, "Checkbox", FieldCategory.INPUT, 20, 20),
        _definition(FieldType.LIST, "Dropdown", FieldCategory.INPUT, 150, 25),
        _definition(FieldType.RADIO_GROUP, "Radio", FieldCategory.INPUT, 20, 20),
        _definition(FieldType.NOTE, "Note", FieldCategory.OTHER, 200, 60),
        _definition(FieldType.APPROVE, "Approve", FieldCategory.OTHER, 100, 30),
        _definition(FieldType.DECLINE, "Decline", FieldCategory.OTHER, 100, 30),
        _definition(FieldType.FORMULA, "Formula", FieldCategory.OTHER, 150, 20),
        _definition(FieldType.ATTACHMENT, "Attachment", FieldCategory.OTHER, 100, 30),
        _definition(FieldType.STAMP_HERE, "Stamp", FieldCategory.SIGNATURE, 74, 44),
    ]
)

# The standalone checkbox only arrives through PDF widget import.
PALETTE_TYPES: tuple[FieldType, ...] = tuple(t for t in FIELD_TYPES if t is not FieldType.CHECKBOX)

RESIZABLE_TYPES = frozenset(
    {
        FieldType.TEXT,
        FieldType.NUMBER,
        FieldType.NOTE,
        FieldType.LIST,
        FieldType.FORMULA,
        FieldType.ATTACHMENT,
    }
)
SCALABLE_TYPES = frozenset({FieldType.SIGN_HERE, FieldType.INITIAL_HERE, FieldType.STAMP_HERE})
GROUP_TYPES = frozenset({FieldType.RADIO_GROUP, FieldType.CHECKBOX_GROUP})

MIN_WIDTH = 20.0
MIN_HEIGHT = 14.0
MIN_SCALE = 50
MAX_SCALE = 200

DEFAULT_FONT = "Lucida Console"
DEFAULT_FONT_SIZE = 9
DEFAULT_FONT_COLOR = "Black"
DEFAULT_MAX_LENGTH = 4000


@dataclass(slots=True)
class ListItem:
    text: str
    value: str


@dataclass(slots=True)
class GroupItem:
    """A radio or checkbox inside a group field, offset from the field origin."""

    x: float
    y: float
    value: str
    selected: bool = False


@dataclass(slots=True)
class TextConfig:
    max_length: int | None = DEFAULT_MAX_LENGTH
    validation_pattern: str = ""
    validation_message: str = ""


@dataclass(slots=True)
class ListConfig:
    items: list[ListItem] = field(default_factory=list)


@dataclass(slots=True)
class RadioGroupConfig:
    group_name: str = ""
    radios: list[GroupItem] = field(default_factory=list)


@dataclass(slots=True)
class CheckboxGroupConfig:
    checkboxes: list[GroupItem] = field(default_factory=list)


@dataclass(slots=True)
class FormulaConfig:
    formula: str = ""


@dataclass(slots=True)
class ScalableConfig:
    scale_value: int = 100


FieldConfig = Union[
    TextConfig,
    ListConfig,
    RadioGroupConfig,
    CheckboxGroupConfig,
    FormulaConfig,
    ScalableConfig,
]


def _default_group_items(prefix: str) -> list[GroupItem]:
    return [
        GroupItem(x=0, y=0, value=f"{prefix}1", selected=True),
        GroupItem(x=0, y=28, value=f"{prefix}2"),
        GroupItem(x=0, y=56, value=f"{prefix}3"),
    ]


def default_config(field_type: FieldType) -> FieldConfig | None:
    if field_type in (FieldType.TEXT, FieldType.NUMBER):
        return TextConfig()
    if field_type is FieldType.LIST:
        return ListConfig(items=[ListItem(text="Option 1", value="option1")])
    if field_type is FieldType.RADIO_GROUP:
        return RadioGroupConfig(
            group_name=f"RadioGroup_{uuid.uuid4().hex[:6]}",
            radios=_default_group_items("Radio"),
        )
    if field_type is FieldType.CHECKBOX_GROUP:
        return CheckboxGroupConfig(checkboxes=_default_group_items("Check"))
    if field_type is FieldType.FORMULA:
        return FormulaConfig()
    if field_type in SCALABLE_TYPES:
        return ScalableConfig()
    return None


@dataclass(slots=True)
class Field:
    id: str
    field_type: FieldType
    document_id: str
    recipient_id: str
    page_number: int
    x: float
    y: float
    width: float
    height: float
    tab_label: str
    label: str = ""
    required: bool = True
    read_only: bool = False
    locked: bool = False
    tooltip: str = ""
    font: str = DEFAULT_FONT
    font_size: int = DEFAULT_FONT_SIZE
    font_color: str = DEFAULT_FONT_COLOR
    bold: bool = False
    italic: bool = False
    underline: bool = False
    value: str = ""
    conditional_parent_label: str = ""
    conditional_parent_value: str = ""
    config: FieldConfig | None = None

    @property
    def scale_value(self) -> int | None:
        if isinstance(self.config, ScalableConfig):
            return self.config.scale_value
        return None

    @property
    def group_items(self) -> list[GroupItem]:
        if isinstance(self.config, RadioGroupConfig):
            return self.config.radios
        if isinstance(self.config, CheckboxGroupConfig):
            return self.config.checkboxes
        return []

    @property
    def is_resizable(self) -> bool:
        return self.field_type in RESIZABLE_TYPES

    @property
    def is_scalable(self) -> bool:
        return self.field_type in SCALABLE_TYPES

    @property
    def is_group(self) -> bool:
        return self.field_type in GROUP_TYPES
