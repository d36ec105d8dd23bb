"""Core types for the formforge validation engine.

This module defines the read-only inputs and the single output of the engine:
- Field / Rule: form field definitions as delivered by the form API
- Rule parameter records: one frozen dataclass per rule family
- FieldValue / RuntimeFieldValues: the current state of a form instance
- ValidationResult: pass, or the first failure message
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Union

from formforge.core.field_types import FieldType


class RuleName(Enum):
    """Rule vocabulary understood by the engine."""

    REQUIRED = "required"
    MIN = "min"
    MAX = "max"
    BETWEEN = "between"
    NUMERIC = "numeric"
    INTEGER = "integer"
    REGEX = "regex"
    ALPHA = "alpha"
    ALPHA_NUM = "alpha_num"
    ALPHA_DASH = "alpha_dash"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    BEFORE = "before"
    AFTER = "after"
    BEFORE_OR_EQUAL = "before_or_equal"
    AFTER_OR_EQUAL = "after_or_equal"
    SAME = "same"
    DIFFERENT = "different"
    MIN_FILE_SIZE = "min_file_size"
    MAX_FILE_SIZE = "max_file_size"
    MIMETYPES = "mimetypes"
    DIMENSIONS = "dimensions"
    UNIQUE = "unique"


# =============================================================================
# Rule Parameters
# =============================================================================


@dataclass(frozen=True)
class ValueParams:
    """Parameters for min / max."""

    value: float


@dataclass(frozen=True)
class RangeParams:
    """Parameters for between. Either side may be missing."""

    min: float | None = None
    max: float | None = None


@dataclass(frozen=True)
class PatternParams:
    """Parameters for regex."""

    pattern: str


@dataclass(frozen=True)
class ValuesParams:
    """Parameters for starts_with / ends_with."""

    values: tuple[str, ...]


@dataclass(frozen=True)
class DateParams:
    """Parameters for before / after / before_or_equal / after_or_equal."""

    date: str


@dataclass(frozen=True)
class FileSizeParams:
    """Parameters for min_file_size / max_file_size, in kilobytes."""

    size_kb: float


@dataclass(frozen=True)
class MimeTypesParams:
    """Parameters for mimetypes. Patterns may be ``type/*`` or ``*/*``."""

    types: tuple[str, ...]


@dataclass(frozen=True)
class DimensionParams:
    """Parameters for dimensions, in pixels. Unset constraints are None."""

    width: int | None = None
    height: int | None = None
    min_width: int | None = None
    max_width: int | None = None
    min_height: int | None = None
    max_height: int | None = None

    def is_empty(self) -> bool:
        return all(
            v is None
            for v in (
                self.width,
                self.height,
                self.min_width,
                self.max_width,
                self.min_height,
                self.max_height,
            )
        )


@dataclass(frozen=True)
class CompareParams:
    """Parameters for same / different: the id of the field to compare with."""

    field_id: int


RuleParams = Union[
    ValueParams,
    RangeParams,
    PatternParams,
    ValuesParams,
    DateParams,
    FileSizeParams,
    MimeTypesParams,
    DimensionParams,
    CompareParams,
]


# =============================================================================
# Field Definitions
# =============================================================================


@dataclass(frozen=True)
class Rule:
    """One declarative constraint attached to a field.

    Attributes:
        name: Rule name from the wire format (e.g. "min", "regex")
        params: Typed parameters, or None for flag rules and for rules whose
            props could not be parsed
    """

    name: str
    params: RuleParams | None = None

    @property
    def rule_name(self) -> RuleName | None:
        try:
            return RuleName(self.name)
        except ValueError:
            return None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Rule":
        """Create a Rule from the form API dict (``rule_name`` + ``rule_props``)."""
        from formforge.validation.rules import parse_rule

        return parse_rule(data)


@dataclass(frozen=True)
class Field:
    """A form field definition.

    Attributes:
        field_id: Unique numeric identifier
        field_type: Resolved FieldType, or the raw string for unknown types
        label: Display name, interpolated into error messages
        placeholder: Placeholder text, or a JSON array of options for
            dropdown / radio / multi-select fields
        helper_text: Help text shown under the input
        default_value: Default configured in the form builder
        current_value: Value already stored for this entry, if any
        rules: Ordered rule list
        field_type_id: Numeric type id from the API (informational)
    """

    field_id: int
    field_type: FieldType | str
    label: str
    placeholder: str | None = None
    helper_text: str | None = None
    default_value: Any = None
    current_value: Any = None
    rules: tuple[Rule, ...] = ()
    field_type_id: int | None = None

    @property
    def type_name(self) -> str:
        if isinstance(self.field_type, FieldType):
            return self.field_type.value
        return str(self.field_type)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Field":
        """Create a Field from the form API dict."""
        raw_type = data.get("field_type", "")
        field_type = FieldType.parse(raw_type) or str(raw_type)

        return cls(
            field_id=int(data["field_id"]),
            field_type=field_type,
            label=data.get("label") or f"Field {data['field_id']}",
            placeholder=data.get("placeholder"),
            helper_text=data.get("helper_text"),
            default_value=data.get("default_value"),
            current_value=data.get("current_value"),
            rules=tuple(Rule.from_dict(r) for r in data.get("rules") or []),
            field_type_id=data.get("field_type_id"),
        )


# =============================================================================
# Runtime Values
# =============================================================================


@dataclass(frozen=True)
class FieldValue:
    """Current value of one field in a running form."""

    value: Any = None


# field_id -> FieldValue (or a plain {"value": ...} mapping straight from JSON)
RuntimeFieldValues = Mapping[Any, Union[FieldValue, Mapping[str, Any]]]


@dataclass(frozen=True)
class UploadedFile:
    """A file submitted to an upload field.

    Attributes:
        filename: Original file name
        content_type: MIME type reported by the client
        size: Size in bytes
        content: Raw bytes; required only for checks that decode the file
    """

    filename: str
    content_type: str
    size: int
    content: bytes | None = field(default=None, repr=False)

    @property
    def size_kb(self) -> float:
        return self.size / 1024

    @classmethod
    def from_bytes(cls, filename: str, content_type: str, content: bytes) -> "UploadedFile":
        return cls(
            filename=filename,
            content_type=content_type,
            size=len(content),
            content=content,
        )


# =============================================================================
# Results
# =============================================================================


@dataclass(frozen=True)
class ValidationResult:
    """Result of validating one field value.

    Attributes:
        valid: True if every check passed
        error: Message of the first failing check, None when valid
    """

    valid: bool
    error: str | None = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(valid=True)

    @classmethod
    def fail(cls, message: str) -> "ValidationResult":
        return cls(valid=False, error=message)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"valid": self.valid}
        if self.error is not None:
            result["error"] = self.error
        return result


@dataclass
class FormValidationResult:
    """Result of validating every field of a form.

    Attributes:
        valid: True if no field has an error
        errors: field_id -> first error message for each failing field
    """

    valid: bool
    errors: dict[int, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": {str(k): v for k, v in self.errors.items()},
        }
