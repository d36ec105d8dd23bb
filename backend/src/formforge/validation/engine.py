"""Validation engine for formforge.

Entry points used by form runtimes:
1. validate_field: one field, one value, against its rules and siblings
2. validate_form: every field of a form against a value map
3. has_cross_field_rules / get_cross_field_dependencies / build_dependency_map:
   which fields to revalidate when another field changes

A field's own schema runs first; cross-field rules only run once it passes.
"""

import functools
import logging
from typing import Any, Iterable

from formforge.config import EngineConfig
from formforge.validation import cross_field
from formforge.validation.registry import SchemaRegistry, default_registry
from formforge.validation.schema import FieldSchema
from formforge.validation.types import (
    Field,
    FormValidationResult,
    RuntimeFieldValues,
    ValidationResult,
)

logger = logging.getLogger(__name__)


class ValidationEngine:
    """Validates field values with one registry and one configuration.

    Stateless after construction; safe to share between threads and tasks.
    """

    def __init__(
        self,
        registry: SchemaRegistry | None = None,
        config: EngineConfig | None = None,
    ):
        self.registry = registry if registry is not None else default_registry()
        self.config = config if config is not None else EngineConfig()

    def schema_for(self, field: Field) -> FieldSchema:
        return self.registry.build(field, self.config)

    def validate_field(
        self,
        field: Field,
        value: Any,
        all_field_values: RuntimeFieldValues | None = None,
    ) -> ValidationResult:
        """Validate one value against the field's rules.

        Args:
            field: Field definition
            value: Submitted value
            all_field_values: Current values of the form, for same/different

        Returns:
            ValidationResult with the first error, if any
        """
        result = self.schema_for(field).evaluate(value)
        if not result.valid:
            return result
        return self._cross_field(field, value, all_field_values)

    async def validate_field_async(
        self,
        field: Field,
        value: Any,
        all_field_values: RuntimeFieldValues | None = None,
    ) -> ValidationResult:
        """Same as validate_field; image decoding runs in a worker thread."""
        result = await self.schema_for(field).evaluate_async(value)
        if not result.valid:
            return result
        return self._cross_field(field, value, all_field_values)

    def _cross_field(
        self,
        field: Field,
        value: Any,
        all_field_values: RuntimeFieldValues | None,
    ) -> ValidationResult:
        if not cross_field.has_cross_field_rules(field):
            return ValidationResult.ok()
        return cross_field.evaluate_cross_field(field, value, all_field_values or {})

    def validate_form(
        self,
        fields: Iterable[Field],
        values: RuntimeFieldValues,
    ) -> FormValidationResult:
        """Validate every field; a field with no entry in ``values`` is None."""
        errors: dict[int, str] = {}
        for field in fields:
            value = cross_field.lookup_value(values, field.field_id)
            if value is cross_field.MISSING:
                value = None
            result = self.validate_field(field, value, values)
            if not result.valid:
                errors[field.field_id] = result.error or "Invalid value"

        if errors:
            logger.debug("Form validation failed for fields %s", sorted(errors))
        return FormValidationResult(valid=not errors, errors=errors)


def build_dependency_map(fields: Iterable[Field]) -> dict[int, list[int]]:
    """Map each comparison target id to the fields that depend on it.

    When the value of a key changes, the listed fields must be revalidated.
    """
    dependents: dict[int, list[int]] = {}
    for field in fields:
        for target in cross_field.get_cross_field_dependencies(field):
            ids = dependents.setdefault(target, [])
            if field.field_id not in ids:
                ids.append(field.field_id)
    return dependents


@functools.lru_cache(maxsize=1)
def get_default_engine() -> ValidationEngine:
    """Engine built from the environment, created on first use."""
    return ValidationEngine(config=EngineConfig.from_env())


def validate_field(
    field: Field,
    value: Any,
    all_field_values: RuntimeFieldValues | None = None,
) -> ValidationResult:
    return get_default_engine().validate_field(field, value, all_field_values)


async def validate_field_async(
    field: Field,
    value: Any,
    all_field_values: RuntimeFieldValues | None = None,
) -> ValidationResult:
    return await get_default_engine().validate_field_async(field, value, all_field_values)


def validate_form(fields: Iterable[Field], values: RuntimeFieldValues) -> FormValidationResult:
    return get_default_engine().validate_form(fields, values)


has_cross_field_rules = cross_field.has_cross_field_rules
get_cross_field_dependencies = cross_field.get_cross_field_dependencies
