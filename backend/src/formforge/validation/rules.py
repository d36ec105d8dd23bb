"""Rule parsing and extraction.

Turns the loosely typed ``rule_props`` bags of the form API into typed rule
parameters, and derives the effective constraints every schema builder
consumes:
- required flag
- numeric / length / count bounds (one shared resolution function)
- number type (integer-only or decimals)
- date bounds
- text character-class, pattern and prefix/suffix rules
- file size, MIME type and image dimension rules
- cross-field comparison targets
- option lists stored in ``placeholder``
"""

from dataclasses import dataclass
import json
import logging
import math
import re
from typing import Any, Callable, Iterable, Mapping

from formforge.config import BoundPolicy
from formforge.validation.types import (
    CompareParams,
    DateParams,
    DimensionParams,
    Field,
    FileSizeParams,
    MimeTypesParams,
    PatternParams,
    RangeParams,
    Rule,
    RuleName,
    RuleParams,
    ValueParams,
    ValuesParams,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Rule Parsing
# =============================================================================


class RulePropsError(ValueError):
    """Raised by a props parser when a rule's props have the wrong shape."""


def to_number(raw: Any) -> float | None:
    """Accept ints, floats and numeric strings; reject bools, NaN and infinity."""
    if isinstance(raw, bool) or raw is None:
        return None
    if isinstance(raw, (int, float)):
        number = float(raw)
    elif isinstance(raw, str):
        try:
            number = float(raw.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _to_int(raw: Any) -> int | None:
    number = to_number(raw)
    if number is None:
        return None
    return int(number)


def _require_number(props: Mapping[str, Any], key: str) -> float:
    number = to_number(props.get(key))
    if number is None:
        raise RulePropsError(f"'{key}' must be a number, got {props.get(key)!r}")
    return number


def _string_list(props: Mapping[str, Any], key: str) -> tuple[str, ...]:
    raw = props.get(key)
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, (list, tuple)):
        raise RulePropsError(f"'{key}' must be a list of strings, got {raw!r}")
    return tuple(str(v) for v in raw if v is not None and str(v) != "")


def _parse_value(props: Mapping[str, Any]) -> ValueParams:
    return ValueParams(value=_require_number(props, "value"))


def _parse_range(props: Mapping[str, Any]) -> RangeParams:
    low = to_number(props.get("min"))
    high = to_number(props.get("max"))
    if low is None and high is None:
        raise RulePropsError("between needs at least one of 'min' or 'max'")
    return RangeParams(min=low, max=high)


def _parse_pattern(props: Mapping[str, Any]) -> PatternParams:
    pattern = props.get("pattern")
    if not isinstance(pattern, str) or pattern == "":
        raise RulePropsError(f"'pattern' must be a non-empty string, got {pattern!r}")
    return PatternParams(pattern=pattern)


def _parse_values(props: Mapping[str, Any]) -> ValuesParams:
    return ValuesParams(values=_string_list(props, "values"))


def _parse_date(props: Mapping[str, Any]) -> DateParams:
    date = props.get("date")
    if not isinstance(date, str) or date.strip() == "":
        raise RulePropsError(f"'date' must be a date string, got {date!r}")
    return DateParams(date=date.strip())


def _parse_size(key: str) -> Callable[[Mapping[str, Any]], FileSizeParams]:
    def parse(props: Mapping[str, Any]) -> FileSizeParams:
        return FileSizeParams(size_kb=_require_number(props, key))

    return parse


def _parse_mimetypes(props: Mapping[str, Any]) -> MimeTypesParams:
    return MimeTypesParams(types=_string_list(props, "types"))


def _parse_dimensions(props: Mapping[str, Any]) -> DimensionParams:
    params = DimensionParams(
        width=_to_int(props.get("width")),
        height=_to_int(props.get("height")),
        min_width=_to_int(props.get("minwidth")),
        max_width=_to_int(props.get("maxwidth")),
        min_height=_to_int(props.get("minheight")),
        max_height=_to_int(props.get("maxheight")),
    )
    if params.is_empty():
        raise RulePropsError("dimensions declares no width or height constraint")
    return params


def _parse_compare(props: Mapping[str, Any]) -> CompareParams:
    field_id = to_number(props.get("comparevalue"))
    if field_id is None or not field_id.is_integer():
        raise RulePropsError(
            f"'comparevalue' must be a field id, got {props.get('comparevalue')!r}"
        )
    return CompareParams(field_id=int(field_id))


_PROPS_PARSERS: dict[RuleName, Callable[[Mapping[str, Any]], RuleParams]] = {
    RuleName.MIN: _parse_value,
    RuleName.MAX: _parse_value,
    RuleName.BETWEEN: _parse_range,
    RuleName.REGEX: _parse_pattern,
    RuleName.STARTS_WITH: _parse_values,
    RuleName.ENDS_WITH: _parse_values,
    RuleName.BEFORE: _parse_date,
    RuleName.AFTER: _parse_date,
    RuleName.BEFORE_OR_EQUAL: _parse_date,
    RuleName.AFTER_OR_EQUAL: _parse_date,
    RuleName.MIN_FILE_SIZE: _parse_size("minsize"),
    RuleName.MAX_FILE_SIZE: _parse_size("maxsize"),
    RuleName.MIMETYPES: _parse_mimetypes,
    RuleName.DIMENSIONS: _parse_dimensions,
    RuleName.SAME: _parse_compare,
    RuleName.DIFFERENT: _parse_compare,
}


def parse_rule(data: Mapping[str, Any]) -> Rule:
    """Create a Rule from a form API rule dict.

    Props that don't fit the rule's shape are logged and dropped
    (``params=None``), which every extractor treats as an absent rule.
    """
    name = str(data.get("rule_name", "")).strip()
    props = data.get("rule_props") or {}

    try:
        rule_name = RuleName(name)
    except ValueError:
        logger.debug("Unrecognised rule '%s' kept without parameters", name)
        return Rule(name=name)

    parser = _PROPS_PARSERS.get(rule_name)
    if parser is None:
        return Rule(name=name)

    if not isinstance(props, Mapping):
        logger.warning("Ignoring rule '%s': rule_props is not an object (%r)", name, props)
        return Rule(name=name)

    try:
        return Rule(name=name, params=parser(props))
    except RulePropsError as exc:
        logger.warning("Ignoring malformed rule '%s': %s", name, exc)
        return Rule(name=name)


def _find(rules: Iterable[Rule], name: RuleName, params_type: type) -> Any:
    """Params of the first rule with this name and usable params, or None."""
    for rule in rules:
        if rule.name == name.value and isinstance(rule.params, params_type):
            return rule.params
    return None


def _has(rules: Iterable[Rule], name: RuleName) -> bool:
    return any(rule.name == name.value for rule in rules)


# =============================================================================
# Extractors
# =============================================================================


def is_required(rules: Iterable[Rule]) -> bool:
    return _has(rules, RuleName.REQUIRED)


@dataclass(frozen=True)
class Bounds:
    min: float | None = None
    max: float | None = None


def resolve_bounds(
    rules: Iterable[Rule],
    policy: BoundPolicy = BoundPolicy.STANDALONE_OVERRIDES,
) -> Bounds:
    """Effective min/max from ``between``, ``min`` and ``max`` rules.

    Every numeric, length and count check goes through here so that no two
    field types can disagree about the same rule list.
    """
    rules = list(rules)
    between: RangeParams | None = _find(rules, RuleName.BETWEEN, RangeParams)
    standalone_min: ValueParams | None = _find(rules, RuleName.MIN, ValueParams)
    standalone_max: ValueParams | None = _find(rules, RuleName.MAX, ValueParams)

    low = between.min if between else None
    high = between.max if between else None

    if policy is BoundPolicy.STANDALONE_OVERRIDES:
        if standalone_min is not None:
            low = standalone_min.value
        if standalone_max is not None:
            high = standalone_max.value
    else:
        if low is None and standalone_min is not None:
            low = standalone_min.value
        if high is None and standalone_max is not None:
            high = standalone_max.value

    return Bounds(min=low, max=high)


@dataclass(frozen=True)
class NumberType:
    is_numeric: bool
    is_integer: bool
    allow_decimals: bool


def resolve_number_type(rules: Iterable[Rule]) -> NumberType:
    """``numeric`` beats ``integer``; only ``integer`` forbids decimals."""
    rules = list(rules)
    has_numeric = _has(rules, RuleName.NUMERIC)
    has_integer = _has(rules, RuleName.INTEGER)

    if has_numeric and has_integer:
        return NumberType(is_numeric=True, is_integer=False, allow_decimals=True)
    if has_integer:
        return NumberType(is_numeric=False, is_integer=True, allow_decimals=False)
    return NumberType(is_numeric=has_numeric, is_integer=False, allow_decimals=True)


@dataclass(frozen=True)
class DateBounds:
    before: str | None = None
    after: str | None = None
    before_or_equal: str | None = None
    after_or_equal: str | None = None


def extract_date_bounds(rules: Iterable[Rule]) -> DateBounds:
    """Date inequality rules; each is independent, all must hold."""
    found: dict[str, str] = {}
    for rule in rules:
        if isinstance(rule.params, DateParams) and rule.name in (
            RuleName.BEFORE.value,
            RuleName.AFTER.value,
            RuleName.BEFORE_OR_EQUAL.value,
            RuleName.AFTER_OR_EQUAL.value,
        ):
            found[rule.name] = rule.params.date
    return DateBounds(**found)


@dataclass(frozen=True)
class TextRules:
    regex: str | None = None
    alpha: bool = False
    alpha_num: bool = False
    alpha_dash: bool = False
    starts_with: tuple[str, ...] = ()
    ends_with: tuple[str, ...] = ()


def extract_text_rules(rules: Iterable[Rule]) -> TextRules:
    rules = list(rules)
    pattern: PatternParams | None = _find(rules, RuleName.REGEX, PatternParams)
    starts: ValuesParams | None = _find(rules, RuleName.STARTS_WITH, ValuesParams)
    ends: ValuesParams | None = _find(rules, RuleName.ENDS_WITH, ValuesParams)

    return TextRules(
        regex=pattern.pattern if pattern else None,
        alpha=_has(rules, RuleName.ALPHA),
        alpha_num=_has(rules, RuleName.ALPHA_NUM),
        alpha_dash=_has(rules, RuleName.ALPHA_DASH),
        starts_with=starts.values if starts else (),
        ends_with=ends.values if ends else (),
    )


def compile_pattern(pattern: str | None) -> re.Pattern[str] | None:
    """Compile a user-supplied regex; a malformed pattern counts as absent."""
    if not pattern:
        return None
    try:
        return re.compile(pattern)
    except re.error as exc:
        logger.error("Invalid regex pattern %r: %s", pattern, exc)
        return None


@dataclass(frozen=True)
class FileRules:
    min_size_kb: float | None = None
    max_size_kb: float | None = None
    mime_types: tuple[str, ...] = ()
    dimensions: DimensionParams | None = None


def extract_file_rules(rules: Iterable[Rule]) -> FileRules:
    rules = list(rules)
    min_size: FileSizeParams | None = _find(rules, RuleName.MIN_FILE_SIZE, FileSizeParams)
    max_size: FileSizeParams | None = _find(rules, RuleName.MAX_FILE_SIZE, FileSizeParams)
    mimes: MimeTypesParams | None = _find(rules, RuleName.MIMETYPES, MimeTypesParams)

    return FileRules(
        min_size_kb=min_size.size_kb if min_size else None,
        max_size_kb=max_size.size_kb if max_size else None,
        mime_types=mimes.types if mimes else (),
        dimensions=_find(rules, RuleName.DIMENSIONS, DimensionParams),
    )


@dataclass(frozen=True)
class CrossFieldRules:
    same_as: int | None = None
    different_from: int | None = None


def extract_cross_field_rules(rules: Iterable[Rule]) -> CrossFieldRules:
    rules = list(rules)
    same: CompareParams | None = _find(rules, RuleName.SAME, CompareParams)
    different: CompareParams | None = _find(rules, RuleName.DIFFERENT, CompareParams)
    return CrossFieldRules(
        same_as=same.field_id if same else None,
        different_from=different.field_id if different else None,
    )


def parse_options(field: Field) -> list[str]:
    """Option list stored as a JSON array in the field's placeholder.

    Non-string entries are dropped. Unparseable JSON is logged and yields
    no options, which disables the membership check.
    """
    if not field.placeholder:
        return []
    try:
        parsed = json.loads(field.placeholder)
    except (TypeError, ValueError) as exc:
        logger.warning(
            "Failed to parse options for field %s (%s): %s",
            field.field_id,
            field.label,
            exc,
        )
        return []
    if not isinstance(parsed, list):
        return []
    return [opt for opt in parsed if isinstance(opt, str)]
