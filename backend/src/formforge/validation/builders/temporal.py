"""Schema builders for Date Input, Time Input and DateTime Input."""

from datetime import date, datetime, time
import logging
import operator
import re
from typing import Any, Callable

from formforge.config import EngineConfig
from formforge.formatting import (
    format_date_for_display,
    format_datetime_for_display,
    format_time_for_display,
)
from formforge.validation.rules import extract_date_bounds, is_required
from formforge.validation.schema import Check, CoercionError, FieldSchema
from formforge.validation.types import Field

logger = logging.getLogger(__name__)

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$", re.ASCII)
TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$", re.ASCII)
DATETIME_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}(:\d{2})?$", re.ASCII)


def _parse_date(text: str) -> date | None:
    if not DATE_PATTERN.match(text):
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        return None


def _parse_time(text: str) -> time | None:
    if not TIME_PATTERN.match(text):
        return None
    try:
        return time.fromisoformat(text)
    except ValueError:
        return None


def _parse_datetime(text: str) -> datetime | None:
    if not DATETIME_PATTERN.match(text):
        return None
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def _parse_datetime_bound(text: str) -> datetime | None:
    """Bounds may be given as plain dates; those mean midnight."""
    parsed = _parse_datetime(text)
    if parsed is None:
        day = _parse_date(text)
        if day is not None:
            parsed = datetime.combine(day, time())
    return parsed


# (rule attribute, comparison that must hold, message phrase)
_BOUND_ORDER = (
    ("after", operator.gt, "must be after"),
    ("after_or_equal", operator.ge, "must be on or after"),
    ("before", operator.lt, "must be before"),
    ("before_or_equal", operator.le, "must be on or before"),
)


def _temporal_schema(
    field: Field,
    parse_value: Callable[[str], Any],
    parse_bound: Callable[[str], Any],
    display: Callable[[Any], str],
    format_error: str,
) -> FieldSchema:
    def coerce(value: Any) -> Any:
        if not isinstance(value, str):
            raise CoercionError(format_error)
        parsed = parse_value(value.strip())
        if parsed is None:
            raise CoercionError(format_error)
        return parsed

    bounds = extract_date_bounds(field.rules)
    checks: list[Check] = []
    for attr, holds, phrase in _BOUND_ORDER:
        raw = getattr(bounds, attr)
        if raw is None:
            continue
        limit = parse_bound(raw)
        if limit is None:
            logger.warning(
                "Ignoring '%s' rule on field %s: unparseable date %r",
                attr,
                field.field_id,
                raw,
            )
            continue
        checks.append(
            _make_bound_check(limit, holds, f"{field.label} {phrase} {display(limit)}")
        )

    return FieldSchema(
        label=field.label,
        required=is_required(field.rules),
        coerce=coerce,
        checks=tuple(checks),
    )


def _make_bound_check(limit: Any, holds: Callable[[Any, Any], bool], message: str) -> Check:
    def check(value: Any) -> str | None:
        if not holds(value, limit):
            return message
        return None

    return check


def build_date_schema(field: Field, config: EngineConfig) -> FieldSchema:
    return _temporal_schema(
        field,
        _parse_date,
        _parse_date,
        format_date_for_display,
        f"{field.label} must be a valid date (YYYY-MM-DD)",
    )


def build_time_schema(field: Field, config: EngineConfig) -> FieldSchema:
    return _temporal_schema(
        field,
        _parse_time,
        _parse_time,
        format_time_for_display,
        f"{field.label} must be a valid time (HH:MM)",
    )


def build_datetime_schema(field: Field, config: EngineConfig) -> FieldSchema:
    return _temporal_schema(
        field,
        _parse_datetime,
        _parse_datetime_bound,
        format_datetime_for_display,
        f"{field.label} must be a valid date and time (YYYY-MM-DDTHH:MM)",
    )
