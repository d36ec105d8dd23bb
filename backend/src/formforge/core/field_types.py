"""Field type catalog with categories and runtime fallbacks."""

from dataclasses import dataclass
from enum import Enum
import re
from typing import Any


class FieldType(Enum):
    """Field types exactly as the form API sends them in ``field_type``."""

    TEXT_INPUT = "Text Input"
    TEXT_AREA = "Text Area"
    EMAIL_INPUT = "Email Input"
    PHONE_INPUT = "Phone Input"
    PASSWORD_INPUT = "Password Input"
    URL_INPUT = "URL Input"
    NUMBER_INPUT = "Number Input"
    CURRENCY_INPUT = "Currency Input"
    PERCENTAGE_INPUT = "Percentage Input"
    DATE_INPUT = "Date Input"
    DATETIME_INPUT = "DateTime Input"
    TIME_INPUT = "Time Input"
    CHECKBOX = "Checkbox"
    TOGGLE_SWITCH = "Toggle Switch"
    RADIO_BUTTON = "Radio Button"
    DROPDOWN_SELECT = "Dropdown Select"
    MULTI_SELECT = "Multi_Select"
    FILE_UPLOAD = "File Upload"
    IMAGE_UPLOAD = "Image Upload"
    VIDEO_UPLOAD = "Video Upload"
    DOCUMENT_UPLOAD = "Document Upload"
    SIGNATURE_PAD = "Signature Pad"
    COLOR_PICKER = "Color Picker"
    LOCATION_PICKER = "Location Picker"
    ADDRESS_INPUT = "Address Input"
    RATING = "Rating"
    SLIDER = "Slider"

    @classmethod
    def parse(cls, value: "str | FieldType") -> "FieldType | None":
        """Resolve a wire name or alias to a FieldType.

        Matching ignores case, spaces, dashes and underscores, so
        ``"Multi_Select"``, ``"multi select"`` and ``"multi_select"`` are the
        same type. Short names (``"email"``, ``"dropdown"``) are accepted too.
        Returns None for anything unrecognised.
        """
        if isinstance(value, FieldType):
            return value
        if not isinstance(value, str):
            return None
        return _LOOKUP.get(_normalize_key(value))


def _normalize_key(name: str) -> str:
    return re.sub(r"[^a-z]", "", name.lower())


_ALIASES: dict[str, FieldType] = {
    "text": FieldType.TEXT_INPUT,
    "textarea": FieldType.TEXT_AREA,
    "email": FieldType.EMAIL_INPUT,
    "phone": FieldType.PHONE_INPUT,
    "password": FieldType.PASSWORD_INPUT,
    "url": FieldType.URL_INPUT,
    "number": FieldType.NUMBER_INPUT,
    "currency": FieldType.CURRENCY_INPUT,
    "percentage": FieldType.PERCENTAGE_INPUT,
    "percent": FieldType.PERCENTAGE_INPUT,
    "date": FieldType.DATE_INPUT,
    "datetime": FieldType.DATETIME_INPUT,
    "time": FieldType.TIME_INPUT,
    "toggle": FieldType.TOGGLE_SWITCH,
    "radio": FieldType.RADIO_BUTTON,
    "dropdown": FieldType.DROPDOWN_SELECT,
    "select": FieldType.DROPDOWN_SELECT,
    "multiselect": FieldType.MULTI_SELECT,
    "file": FieldType.FILE_UPLOAD,
    "image": FieldType.IMAGE_UPLOAD,
    "video": FieldType.VIDEO_UPLOAD,
    "document": FieldType.DOCUMENT_UPLOAD,
    "signature": FieldType.SIGNATURE_PAD,
    "color": FieldType.COLOR_PICKER,
    "location": FieldType.LOCATION_PICKER,
    "address": FieldType.ADDRESS_INPUT,
}

_LOOKUP: dict[str, FieldType] = {
    **{_normalize_key(ft.value): ft for ft in FieldType},
    **_ALIASES,
}


@dataclass(frozen=True)
class FieldTypeInfo:
    field_type: FieldType
    category: str
    fallback: Any  # runtime value used when a field has no current/default value


def _info(field_type: FieldType, category: str, fallback: Any = "") -> FieldTypeInfo:
    return FieldTypeInfo(field_type=field_type, category=category, fallback=fallback)


# Built-in field types
FIELD_TYPES: dict[FieldType, FieldTypeInfo] = {
    info.field_type: info
    for info in (
        _info(FieldType.TEXT_INPUT, "Text-based"),
        _info(FieldType.TEXT_AREA, "Text-based"),
        _info(FieldType.EMAIL_INPUT, "Text-based"),
        _info(FieldType.PHONE_INPUT, "Text-based"),
        _info(FieldType.PASSWORD_INPUT, "Text-based", None),
        _info(FieldType.URL_INPUT, "Text-based"),
        _info(FieldType.NUMBER_INPUT, "Numeric", 0),
        _info(FieldType.CURRENCY_INPUT, "Numeric", 0),
        _info(FieldType.PERCENTAGE_INPUT, "Numeric", 0),
        _info(FieldType.DATE_INPUT, "Date/Time"),
        _info(FieldType.DATETIME_INPUT, "Date/Time"),
        _info(FieldType.TIME_INPUT, "Date/Time"),
        _info(FieldType.CHECKBOX, "Boolean", False),
        _info(FieldType.TOGGLE_SWITCH, "Boolean", False),
        _info(FieldType.RADIO_BUTTON, "Selection"),
        _info(FieldType.DROPDOWN_SELECT, "Selection"),
        _info(FieldType.MULTI_SELECT, "Selection", []),
        _info(FieldType.FILE_UPLOAD, "File/Media", None),
        _info(FieldType.IMAGE_UPLOAD, "File/Media", None),
        _info(FieldType.VIDEO_UPLOAD, "File/Media", None),
        _info(FieldType.DOCUMENT_UPLOAD, "File/Media", None),
        _info(FieldType.SIGNATURE_PAD, "Special", None),
        _info(FieldType.COLOR_PICKER, "Special"),
        _info(
            FieldType.LOCATION_PICKER,
            "Special",
            {"lat": None, "lng": None, "address": ""},
        ),
        _info(
            FieldType.ADDRESS_INPUT,
            "Special",
            {"street": "", "city": "", "state": "", "postal_code": "", "country": ""},
        ),
        _info(FieldType.RATING, "Special", 0),
        _info(FieldType.SLIDER, "Special", 0),
    )
}


def field_types_by_category() -> dict[str, list[FieldType]]:
    """Group the catalog by category, preserving declaration order."""
    grouped: dict[str, list[FieldType]] = {}
    for info in FIELD_TYPES.values():
        grouped.setdefault(info.category, []).append(info.field_type)
    return grouped
