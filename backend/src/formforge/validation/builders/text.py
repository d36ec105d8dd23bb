"""Schema builders for text-like fields.

Covers Text Input, Text Area, Email Input, Password Input, URL Input and
Phone Input.
"""

import re
from typing import Any
from urllib.parse import urlsplit

from formforge.config import EngineConfig
from formforge.formatting import clean_phone_number, ensure_protocol
from formforge.validation.rules import (
    compile_pattern,
    extract_text_rules,
    is_required,
    resolve_bounds,
)
from formforge.validation.schema import (
    Check,
    CoercionError,
    FieldSchema,
    affix_checks,
    bound_checks,
)
from formforge.validation.types import Field


# =============================================================================
# Format Patterns
# =============================================================================

# Email: Basic RFC 5322 compliant pattern
EMAIL_PATTERN = re.compile(
    r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
)

# Phone: E.164, "+" followed by up to 15 digits with no leading zero
E164_PATTERN = re.compile(r"^\+[1-9]\d{0,14}$")

# Character classes, strictest last. Text Area also allows whitespace.
_ALPHA_DASH = ("a-zA-Z0-9_\\-", "letters, numbers, dashes, and underscores")
_ALPHA_NUM = ("a-zA-Z0-9", "letters and numbers")
_ALPHA = ("a-zA-Z", "letters")


def _as_text(label: str):
    def coerce(value: Any) -> str:
        if isinstance(value, str):
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        raise CoercionError(f"{label} must be a string")

    return coerce


def _length_checks(field: Field, config: EngineConfig) -> list[Check]:
    bounds = resolve_bounds(field.rules, config.bound_policy)
    return bound_checks(
        bounds.min,
        bounds.max,
        len,
        lambda n: f"{field.label} must be at least {n} characters",
        lambda n: f"{field.label} must be at most {n} characters",
    )


def _pattern_check(pattern: re.Pattern[str], message: str) -> Check:
    def check(value: str) -> str | None:
        if not pattern.search(value):
            return message
        return None

    return check


def _character_class_check(field: Field, allow_whitespace: bool) -> Check | None:
    """Custom regex, else alpha_dash > alpha_num > alpha. Never more than one."""
    text_rules = extract_text_rules(field.rules)

    if text_rules.regex:
        pattern = compile_pattern(text_rules.regex)
        if pattern is not None:
            return _pattern_check(
                pattern,
                f"{field.label} does not match the required pattern",
            )
        return None

    if text_rules.alpha_dash:
        chars, description = _ALPHA_DASH
    elif text_rules.alpha_num:
        chars, description = _ALPHA_NUM
    elif text_rules.alpha:
        chars, description = _ALPHA
    else:
        return None

    if allow_whitespace:
        chars += "\\s"
    return _pattern_check(
        re.compile(f"^[{chars}]*$"),
        f"{field.label} must contain only {description}",
    )


def _build_text(field: Field, config: EngineConfig, allow_whitespace: bool) -> FieldSchema:
    text_rules = extract_text_rules(field.rules)

    checks = _length_checks(field, config)
    character_check = _character_class_check(field, allow_whitespace)
    if character_check is not None:
        checks.append(character_check)
    checks.extend(affix_checks(field.label, text_rules.starts_with, text_rules.ends_with))

    return FieldSchema(
        label=field.label,
        required=is_required(field.rules),
        coerce=_as_text(field.label),
        checks=tuple(checks),
    )


def build_text_input_schema(field: Field, config: EngineConfig) -> FieldSchema:
    return _build_text(field, config, allow_whitespace=False)


def build_text_area_schema(field: Field, config: EngineConfig) -> FieldSchema:
    return _build_text(field, config, allow_whitespace=True)


def build_email_schema(field: Field, config: EngineConfig) -> FieldSchema:
    """Email: a custom regex replaces the default address check."""
    text_rules = extract_text_rules(field.rules)

    custom = compile_pattern(text_rules.regex)
    if custom is not None:
        format_check = _pattern_check(
            custom, f"{field.label} does not match the required pattern"
        )
    else:
        format_check = _pattern_check(
            EMAIL_PATTERN, f"{field.label} must be a valid email address"
        )

    checks = [format_check]
    checks.extend(affix_checks(field.label, text_rules.starts_with, text_rules.ends_with))

    return FieldSchema(
        label=field.label,
        required=is_required(field.rules),
        coerce=lambda value: _as_text(field.label)(value).strip(),
        checks=tuple(checks),
    )


def build_password_schema(field: Field, config: EngineConfig) -> FieldSchema:
    return FieldSchema(
        label=field.label,
        required=is_required(field.rules),
        is_empty=lambda value: value is None or value == "",
        coerce=_as_text(field.label),
        checks=tuple(_length_checks(field, config)),
    )


def build_url_schema(field: Field, config: EngineConfig) -> FieldSchema:
    """URL: trimmed, https:// added when the scheme is missing."""
    text_rules = extract_text_rules(field.rules)

    def coerce(value: Any) -> str:
        return ensure_protocol(_as_text(field.label)(value))

    def check_url(value: str) -> str | None:
        try:
            parts = urlsplit(value)
        except ValueError:
            return f"{field.label} must be a valid URL"
        if parts.scheme.lower() not in ("http", "https") or not parts.hostname:
            return f"{field.label} must be a valid URL"
        if re.search(r"\s", value):
            return f"{field.label} must be a valid URL"
        return None

    checks: list[Check] = [check_url]
    checks.extend(affix_checks(field.label, text_rules.starts_with, text_rules.ends_with))
    checks.extend(_length_checks(field, config))

    return FieldSchema(
        label=field.label,
        required=is_required(field.rules),
        coerce=coerce,
        checks=tuple(checks),
    )


def build_phone_schema(field: Field, config: EngineConfig) -> FieldSchema:
    """Phone: checked after clean_phone_number.

    The default check is E.164. A custom regex replaces it and is matched
    against the cleaned number, as are starts_with prefixes.
    """
    text_rules = extract_text_rules(field.rules)

    def coerce(value: Any) -> str:
        return clean_phone_number(_as_text(field.label)(value))

    custom = compile_pattern(text_rules.regex)
    if custom is not None:
        format_check = _pattern_check(
            custom, f"{field.label} format is invalid"
        )
    else:
        format_check = _pattern_check(
            E164_PATTERN, f"{field.label} must be a valid phone number"
        )

    checks = [format_check]
    checks.extend(affix_checks(field.label, text_rules.starts_with, ()))

    return FieldSchema(
        label=field.label,
        required=is_required(field.rules),
        coerce=coerce,
        checks=tuple(checks),
    )
