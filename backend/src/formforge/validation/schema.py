"""Composable per-field schemas.

A FieldSchema is the compiled form of one field definition: an emptiness
test, the required flag, an optional coercion step and an ordered list of
checks. Each check takes the (coerced) value and returns an error message or
None; evaluation stops at the first message.

Checks that decode binary data (image dimensions, signature pixels) are kept
apart so that async callers can run them in a worker thread.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Callable

from formforge.formatting import format_number
from formforge.validation.types import ValidationResult

Check = Callable[[Any], "str | None"]


class CoercionError(ValueError):
    """Raised by a schema's coerce step; the message is the user-facing error."""


def is_empty_value(value: Any) -> bool:
    """Check if a value is considered empty."""
    if value is None:
        return True
    if isinstance(value, str) and value.strip() == "":
        return True
    if isinstance(value, (list, tuple, dict)) and len(value) == 0:
        return True
    return False


@dataclass(frozen=True)
class FieldSchema:
    """Compiled validation for a single field.

    Attributes:
        label: Field label used in messages
        required: Whether an empty value is an error
        is_empty: Emptiness test for this field type
        coerce: Normalizes the value before checks; raises CoercionError
        checks: Ordered checks, first failure wins
        decode_checks: Checks that decode file content, run after ``checks``
        required_message: Message for a required field left empty
    """

    label: str
    required: bool = False
    is_empty: Callable[[Any], bool] = is_empty_value
    coerce: Callable[[Any], Any] | None = None
    checks: tuple[Check, ...] = ()
    decode_checks: tuple[Check, ...] = ()
    required_message: str | None = None

    def _prepare(self, value: Any) -> tuple[ValidationResult | None, Any]:
        """Empty handling, coercion and the plain checks.

        Returns a final result when evaluation is already decided, otherwise
        (None, coerced value) so the decode checks can run.
        """
        if self.is_empty(value):
            if self.required:
                message = self.required_message or f"{self.label} is required"
                return ValidationResult.fail(message), value
            return ValidationResult.ok(), value

        if self.coerce is not None:
            try:
                value = self.coerce(value)
            except CoercionError as exc:
                return ValidationResult.fail(str(exc)), value

        for check in self.checks:
            message = check(value)
            if message:
                return ValidationResult.fail(message), value

        if not self.decode_checks:
            return ValidationResult.ok(), value
        return None, value

    def _decode(self, value: Any) -> ValidationResult:
        for check in self.decode_checks:
            message = check(value)
            if message:
                return ValidationResult.fail(message)
        return ValidationResult.ok()

    def evaluate(self, value: Any) -> ValidationResult:
        result, value = self._prepare(value)
        if result is not None:
            return result
        return self._decode(value)

    async def evaluate_async(self, value: Any) -> ValidationResult:
        """Same as evaluate, with decode checks off the event loop."""
        result, value = self._prepare(value)
        if result is not None:
            return result
        return await asyncio.to_thread(self._decode, value)


# =============================================================================
# Shared Checks
# =============================================================================


def bound_checks(
    low: float | None,
    high: float | None,
    measure: Callable[[Any], float],
    too_small: Callable[[str], str],
    too_large: Callable[[str], str],
) -> list[Check]:
    """Inclusive lower/upper bound checks on ``measure(value)``.

    ``too_small`` / ``too_large`` receive the formatted bound and return the
    message, so every builder can word its own bounds.
    """
    checks: list[Check] = []
    if low is not None:
        def check_low(value: Any) -> str | None:
            if measure(value) < low:
                return too_small(format_number(low))
            return None

        checks.append(check_low)
    if high is not None:
        def check_high(value: Any) -> str | None:
            if measure(value) > high:
                return too_large(format_number(high))
            return None

        checks.append(check_high)
    return checks


def affix_checks(
    label: str,
    starts_with: tuple[str, ...],
    ends_with: tuple[str, ...],
    transform: Callable[[Any], str] = str,
) -> list[Check]:
    """starts_with / ends_with checks; any listed value satisfies the rule."""
    checks: list[Check] = []
    if starts_with:
        def check_prefix(value: Any) -> str | None:
            if not transform(value).startswith(starts_with):
                return f"{label} must start with: {' or '.join(starts_with)}"
            return None

        checks.append(check_prefix)
    if ends_with:
        def check_suffix(value: Any) -> str | None:
            if not transform(value).endswith(ends_with):
                return f"{label} must end with: {' or '.join(ends_with)}"
            return None

        checks.append(check_suffix)
    return checks


def permissive_schema(label: str, required: bool) -> FieldSchema:
    """Schema for unrecognised field types: only ``required`` is enforced."""
    return FieldSchema(label=label, required=required)
