"""Schema builders for selection and boolean fields."""

from typing import Any

from formforge.config import EngineConfig
from formforge.validation.rules import is_required, parse_options, resolve_bounds
from formforge.validation.schema import Check, CoercionError, FieldSchema, bound_checks
from formforge.validation.types import Field

_TRUE_VALUES = (True, 1, "true", "1")
_FALSE_VALUES = (False, 0, "false", "0")


def _single_choice_schema(field: Field) -> FieldSchema:
    """Dropdown Select and Radio Button: one string from the option list."""
    options = parse_options(field)
    message = f"Please select a valid option for {field.label}"

    def coerce(value: Any) -> str:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            value = str(value)
        if not isinstance(value, str):
            raise CoercionError(message)
        return value

    checks: list[Check] = []
    if options:
        def check_option(value: str) -> str | None:
            if value not in options:
                return message
            return None

        checks.append(check_option)

    return FieldSchema(
        label=field.label,
        required=is_required(field.rules),
        coerce=coerce,
        checks=tuple(checks),
    )


def build_dropdown_schema(field: Field, config: EngineConfig) -> FieldSchema:
    return _single_choice_schema(field)


def build_radio_schema(field: Field, config: EngineConfig) -> FieldSchema:
    return _single_choice_schema(field)


def build_multi_select_schema(field: Field, config: EngineConfig) -> FieldSchema:
    """Multi_Select: list of strings, each an option; count bounds apply."""
    options = parse_options(field)
    bounds = resolve_bounds(field.rules, config.bound_policy)

    def coerce(value: Any) -> list[str]:
        if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
            raise CoercionError(f"{field.label} must be a list of selections")
        return list(value)

    checks: list[Check] = []
    if options:
        def check_options(value: list[str]) -> str | None:
            if any(v not in options for v in value):
                return f"Please select valid options for {field.label}"
            return None

        checks.append(check_options)

    checks.extend(
        bound_checks(
            bounds.min,
            bounds.max,
            len,
            lambda n: f"{field.label} requires at least {n} selections",
            lambda n: f"{field.label} allows at most {n} selections",
        )
    )

    return FieldSchema(
        label=field.label,
        required=is_required(field.rules),
        coerce=coerce,
        checks=tuple(checks),
    )


def to_bool(value: Any) -> bool | None:
    """Booleans plus 0/1 and "true"/"false"; None for anything else."""
    if isinstance(value, str):
        value = value.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    return None


def _boolean_schema(field: Field, unchecked_message: str) -> FieldSchema:
    """Checkbox and Toggle Switch. Required means the value must be True."""
    required = is_required(field.rules)

    def coerce(value: Any) -> bool:
        result = to_bool(value)
        if result is None:
            raise CoercionError(f"{field.label} must be a boolean")
        return result

    checks: list[Check] = []
    if required:
        def check_on(value: bool) -> str | None:
            if not value:
                return unchecked_message
            return None

        checks.append(check_on)

    return FieldSchema(
        label=field.label,
        required=required,
        is_empty=lambda value: value is None or value == "",
        coerce=coerce,
        checks=tuple(checks),
    )


def build_checkbox_schema(field: Field, config: EngineConfig) -> FieldSchema:
    return _boolean_schema(field, f"{field.label} must be checked")


def build_toggle_schema(field: Field, config: EngineConfig) -> FieldSchema:
    return _boolean_schema(field, f"{field.label} must be enabled")
