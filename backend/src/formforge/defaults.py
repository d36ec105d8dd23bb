"""Initial runtime values for form fields.

Priority: current_value > default_value > type fallback. Stored values are
normalized to the shape each field type works with at runtime (booleans for
checkboxes, lists for multi-selects, dicts for address and location).
"""

import copy
import json
import logging
from typing import Any

from formforge.core.field_types import FIELD_TYPES, FieldType
from formforge.validation.builders.choice import to_bool
from formforge.validation.builders.special import ADDRESS_KEYS
from formforge.validation.types import Field

logger = logging.getLogger(__name__)


def _field_type(field: Field) -> FieldType | None:
    return FieldType.parse(field.field_type)


def parse_default_selected_values(raw: Any) -> list[str]:
    """Multi-select selections from a list or a JSON array string."""
    if isinstance(raw, (list, tuple)):
        return [v for v in raw if isinstance(v, str)]
    if isinstance(raw, str):
        try:
            parsed = json.loads(raw)
        except ValueError as exc:
            logger.warning("Failed to parse default selections %r: %s", raw, exc)
            return []
        if isinstance(parsed, list):
            return [v for v in parsed if isinstance(v, str)]
    return []


def normalize_by_type(field: Field, raw: Any) -> Any:
    """Coerce a stored value into the runtime shape for the field's type."""
    field_type = _field_type(field)

    if field_type in (FieldType.CHECKBOX, FieldType.TOGGLE_SWITCH):
        result = to_bool(raw)
        return bool(raw) if result is None else result

    if field_type == FieldType.MULTI_SELECT:
        return parse_default_selected_values(raw)

    if field_type == FieldType.ADDRESS_INPUT:
        source = raw if isinstance(raw, dict) else {}
        return {
            key: source.get(key) if source.get(key) is not None else ""
            for key in ADDRESS_KEYS
        }

    if field_type == FieldType.LOCATION_PICKER:
        source = raw if isinstance(raw, dict) else {}
        lat, lng = source.get("lat"), source.get("lng")
        address = source.get("address")
        return {
            "lat": lat if _is_number(lat) else None,
            "lng": lng if _is_number(lng) else None,
            "address": address if isinstance(address, str) else "",
        }

    return raw


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def fallback_by_type(field: Field) -> Any:
    """Value for a field with nothing stored; "" for unknown types."""
    field_type = _field_type(field)
    if field_type is None:
        return ""
    # copied so callers can mutate dict/list fallbacks freely
    return copy.deepcopy(FIELD_TYPES[field_type].fallback)


def get_field_default_value(field: Field) -> Any:
    if field.current_value is not None:
        return normalize_by_type(field, field.current_value)
    if field.default_value is not None:
        return normalize_by_type(field, field.default_value)
    return fallback_by_type(field)


def get_form_defaults(fields: list[Field]) -> dict[int, Any]:
    """field_id -> initial value for every field of a form."""
    return {field.field_id: get_field_default_value(field) for field in fields}
