"""Schema registry for formforge.

Maps field types to schema builders. A registry is an ordinary value: it is
built once, passed to a ValidationEngine, and never changed afterwards.
Custom or overridden field types are added with ``with_builder``, which
returns a new registry.

Example:
    registry = default_registry().with_builder("Star Rating", build_rating_schema)
    engine = ValidationEngine(registry=registry)
"""

import logging
from types import MappingProxyType
from typing import Mapping

from formforge.config import EngineConfig
from formforge.core.field_types import FieldType
from formforge.validation.builders import BUILTIN_BUILDERS, SchemaBuilder
from formforge.validation.schema import FieldSchema, permissive_schema
from formforge.validation.rules import is_required
from formforge.validation.types import Field

logger = logging.getLogger(__name__)


def _key(field_type: FieldType | str) -> FieldType | str:
    """Catalog types resolve to their FieldType; anything else stays a string."""
    return FieldType.parse(field_type) or str(field_type)


class SchemaRegistry:
    """Immutable field type -> builder mapping."""

    def __init__(self, builders: Mapping[FieldType | str, SchemaBuilder] | None = None):
        resolved = {_key(k): v for k, v in (builders or {}).items()}
        self._builders: Mapping[FieldType | str, SchemaBuilder] = MappingProxyType(resolved)

    def with_builder(self, field_type: FieldType | str, builder: SchemaBuilder) -> "SchemaRegistry":
        """Return a new registry with ``builder`` registered for ``field_type``.

        Replaces an existing builder for the same type.
        """
        return SchemaRegistry({**self._builders, _key(field_type): builder})

    def get(self, field_type: FieldType | str) -> SchemaBuilder | None:
        return self._builders.get(_key(field_type))

    def is_registered(self, field_type: FieldType | str) -> bool:
        return _key(field_type) in self._builders

    def list_registered(self) -> list[str]:
        """List all registered type names."""
        return sorted(k.value if isinstance(k, FieldType) else k for k in self._builders)

    def build(self, field: Field, config: EngineConfig) -> FieldSchema:
        """Build the schema for a field.

        Unknown types get a permissive schema that only enforces ``required``.
        """
        builder = self.get(field.field_type)
        if builder is None:
            logger.warning(
                "No validator for field type '%s' (field %s); only 'required' is enforced",
                field.type_name,
                field.field_id,
            )
            return permissive_schema(field.label, is_required(field.rules))

        logger.debug("Building %s schema for field %s", field.type_name, field.field_id)
        return builder(field, config)

    def __len__(self) -> int:
        return len(self._builders)

    def __contains__(self, field_type: object) -> bool:
        if not isinstance(field_type, (FieldType, str)):
            return False
        return self.is_registered(field_type)


def default_registry() -> SchemaRegistry:
    """Registry with a builder for every catalog field type."""
    return SchemaRegistry(BUILTIN_BUILDERS)
