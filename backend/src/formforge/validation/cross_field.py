"""Cross-field comparison rules (``same`` / ``different``).

These compare a field's value with another field's current value in the
same form instance. They never raise: a missing comparison target is a
validation failure.
"""

import json
import logging
from typing import Any, Mapping

from formforge.formatting import format_number
from formforge.validation.rules import extract_cross_field_rules
from formforge.validation.types import Field, FieldValue, RuntimeFieldValues, ValidationResult

logger = logging.getLogger(__name__)

MISSING = object()


def normalize_for_comparison(value: Any) -> str:
    """None -> "", mappings and lists -> canonical JSON, 5.0 -> "5", everything else str."""
    if value is None:
        return ""
    if isinstance(value, (Mapping, list, tuple)):
        return json.dumps(value, sort_keys=True, default=str)
    if isinstance(value, float):
        return format_number(value)
    return str(value)


def lookup_value(values: RuntimeFieldValues, field_id: int) -> Any:
    """Current value of ``field_id``, or MISSING if the form has no such field.

    Accepts int or str keys, and entries that are FieldValue objects or
    plain ``{"value": ...}`` mappings.
    """
    for key in (field_id, str(field_id)):
        if key in values:
            entry = values[key]
            if isinstance(entry, FieldValue):
                return entry.value
            if isinstance(entry, Mapping):
                return entry.get("value")
            return entry
    return MISSING


def has_cross_field_rules(field: Field) -> bool:
    rules = extract_cross_field_rules(field.rules)
    return rules.same_as is not None or rules.different_from is not None


def get_cross_field_dependencies(field: Field) -> list[int]:
    """Field ids this field is compared with; revalidate when they change."""
    rules = extract_cross_field_rules(field.rules)
    return [
        field_id
        for field_id in (rules.same_as, rules.different_from)
        if field_id is not None
    ]


def evaluate_cross_field(
    field: Field,
    value: Any,
    all_field_values: RuntimeFieldValues,
) -> ValidationResult:
    """Apply ``same`` then ``different``; first failure wins."""
    rules = extract_cross_field_rules(field.rules)
    own = normalize_for_comparison(value)

    if rules.same_as is not None:
        target = lookup_value(all_field_values, rules.same_as)
        if target is MISSING:
            return _missing_target(field, rules.same_as)
        if own != normalize_for_comparison(target):
            return ValidationResult.fail(f"{field.label} must match field {rules.same_as}")

    if rules.different_from is not None and own != "":
        target = lookup_value(all_field_values, rules.different_from)
        if target is MISSING:
            return _missing_target(field, rules.different_from)
        if own == normalize_for_comparison(target):
            return ValidationResult.fail(
                f"{field.label} must be different from field {rules.different_from}"
            )

    return ValidationResult.ok()


def _missing_target(field: Field, target_id: int) -> ValidationResult:
    logger.warning(
        "Comparison field %s not found while validating field %s (%s)",
        target_id,
        field.field_id,
        field.label,
    )
    return ValidationResult.fail(
        f"Cannot validate {field.label}: comparison field {target_id} not found"
    )
