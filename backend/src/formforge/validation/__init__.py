"""formforge validation engine.

Validates submitted form values against declarative field rules:
- Field schema: type coercion plus ordered per-type checks
- Cross-field rules: same / different against sibling values

Usage:
    from formforge.validation import Field, validate_field

    field = Field.from_dict(api_field)
    result = validate_field(field, "alice@corp.com", all_field_values)
    if not result.valid:
        show(result.error)
"""

from formforge.config import BoundPolicy, EngineConfig
from formforge.validation.cross_field import normalize_for_comparison
from formforge.validation.engine import (
    ValidationEngine,
    build_dependency_map,
    get_cross_field_dependencies,
    get_default_engine,
    has_cross_field_rules,
    validate_field,
    validate_field_async,
    validate_form,
)
from formforge.validation.registry import SchemaRegistry, default_registry
from formforge.validation.schema import CoercionError, FieldSchema
from formforge.validation.types import (
    Field,
    FieldValue,
    FormValidationResult,
    Rule,
    RuleName,
    RuntimeFieldValues,
    UploadedFile,
    ValidationResult,
)

__all__ = [
    # Types
    "BoundPolicy",
    "EngineConfig",
    "Field",
    "FieldValue",
    "FormValidationResult",
    "Rule",
    "RuleName",
    "RuntimeFieldValues",
    "UploadedFile",
    "ValidationResult",
    # Schemas
    "CoercionError",
    "FieldSchema",
    "SchemaRegistry",
    "default_registry",
    # Engine
    "ValidationEngine",
    "build_dependency_map",
    "get_cross_field_dependencies",
    "get_default_engine",
    "has_cross_field_rules",
    "normalize_for_comparison",
    "validate_field",
    "validate_field_async",
    "validate_form",
]
