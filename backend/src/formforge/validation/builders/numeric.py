"""Schema builders for numeric fields.

Number, Currency, Percentage, Slider and Rating share one coercion and one
bound resolution; they differ only in default bounds, emptiness and message
wording.
"""

import re
from typing import Any, Callable

from formforge.config import EngineConfig
from formforge.validation.rules import is_required, resolve_bounds, resolve_number_type, to_number
from formforge.validation.schema import (
    Check,
    CoercionError,
    FieldSchema,
    bound_checks,
    is_empty_value,
)
from formforge.validation.types import Field

# Stars shown by a Rating field when no max rule is declared
MAX_STARS = 5


def _coerce_number(label: str, strip: str | None = None) -> Callable[[Any], float]:
    def coerce(value: Any) -> float:
        if strip and isinstance(value, str):
            value = re.sub(strip, "", value)
        number = to_number(value)
        if number is None:
            raise CoercionError(f"{label} must be a number")
        return number

    return coerce


def _numeric_schema(
    field: Field,
    config: EngineConfig,
    *,
    default_min: float | None = None,
    default_max: float | None = None,
    unit: str = "",
    strip: str | None = None,
    is_empty: Callable[[Any], bool] = is_empty_value,
) -> FieldSchema:
    bounds = resolve_bounds(field.rules, config.bound_policy)
    number_type = resolve_number_type(field.rules)

    low = bounds.min if bounds.min is not None else default_min
    high = bounds.max if bounds.max is not None else default_max

    checks: list[Check] = []
    if number_type.is_integer:
        def check_integer(value: float) -> str | None:
            if not value.is_integer():
                return f"{field.label} must be an integer (no decimals)"
            return None

        checks.append(check_integer)

    checks.extend(
        bound_checks(
            low,
            high,
            lambda value: value,
            lambda n: f"{field.label} must be at least {n}{unit}",
            lambda n: f"{field.label} must be at most {n}{unit}",
        )
    )

    return FieldSchema(
        label=field.label,
        required=is_required(field.rules),
        is_empty=is_empty,
        coerce=_coerce_number(field.label, strip),
        checks=tuple(checks),
    )


def build_number_schema(field: Field, config: EngineConfig) -> FieldSchema:
    return _numeric_schema(field, config)


def build_currency_schema(field: Field, config: EngineConfig) -> FieldSchema:
    # "1,234.56" and "$ 1,234.56" are accepted as typed
    return _numeric_schema(field, config, strip=r"[,\s$]")


def build_percentage_schema(field: Field, config: EngineConfig) -> FieldSchema:
    return _numeric_schema(
        field,
        config,
        default_min=0,
        default_max=100,
        unit="%",
        strip=r"[%\s]",
    )


def build_slider_schema(field: Field, config: EngineConfig) -> FieldSchema:
    return _numeric_schema(field, config, default_min=0, default_max=100)


def _is_empty_rating(value: Any) -> bool:
    if is_empty_value(value):
        return True
    return to_number(value) == 0


def build_rating_schema(field: Field, config: EngineConfig) -> FieldSchema:
    """Rating: 0 means "not rated yet" and counts as empty."""
    return _numeric_schema(
        field,
        config,
        default_min=0,
        default_max=MAX_STARS,
        is_empty=_is_empty_rating,
    )
