"""Tests for Number, Currency, Percentage, Slider and Rating validation."""

import pytest

from formforge.config import BoundPolicy, EngineConfig
from formforge.core.field_types import FieldType
from formforge.validation import Field, Rule, ValidationEngine
from formforge.validation.builders.numeric import MAX_STARS
from formforge.validation.rules import to_number


def make_field(
    field_type: FieldType = FieldType.NUMBER_INPUT,
    label: str = "Quantity",
    rules: list[dict] | None = None,
) -> Field:
    return Field(
        field_id=1,
        field_type=field_type,
        label=label,
        rules=tuple(Rule.from_dict(r) for r in rules or []),
    )


def rule(name: str, **props) -> dict:
    return {"rule_name": name, "rule_props": props or None}


@pytest.fixture
def engine():
    return ValidationEngine()


class TestToNumber:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            (3, 3.0),
            ("4.5", 4.5),
            (" 7 ", 7.0),
            ("abc", None),
            (True, None),
            (float("nan"), None),
            ("inf", None),
            (None, None),
        ],
    )
    def test_values(self, raw, expected):
        assert to_number(raw) == expected


# =============================================================================
# Number Input
# =============================================================================


class TestNumber:
    def test_numeric_string_accepted(self, engine):
        assert engine.validate_field(make_field(), "12.5").valid

    def test_not_a_number(self, engine):
        result = engine.validate_field(make_field(), "twelve")
        assert result.error == "Quantity must be a number"

    def test_bounds(self, engine):
        field = make_field(rules=[rule("min", value=1), rule("max", value=10)])
        assert engine.validate_field(field, 0).error == "Quantity must be at least 1"
        assert engine.validate_field(field, 11).error == "Quantity must be at most 10"
        assert engine.validate_field(field, 1).valid
        assert engine.validate_field(field, 10).valid

    def test_decimal_bound_in_message(self, engine):
        field = make_field(rules=[rule("min", value=0.5)])
        assert engine.validate_field(field, 0.1).error == "Quantity must be at least 0.5"

    def test_integer_rule_rejects_decimals(self, engine):
        field = make_field(rules=[rule("integer")])
        assert engine.validate_field(field, 3).valid
        assert engine.validate_field(field, "3.0").valid
        result = engine.validate_field(field, 3.5)
        assert result.error == "Quantity must be an integer (no decimals)"

    def test_numeric_with_integer_allows_decimals(self, engine):
        field = make_field(rules=[rule("numeric"), rule("integer")])
        assert engine.validate_field(field, 3.5).valid

    def test_zero_is_a_value(self, engine):
        field = make_field(rules=[rule("required"), rule("min", value=1)])
        assert engine.validate_field(field, 0).error == "Quantity must be at least 1"

    def test_required_empty(self, engine):
        field = make_field(rules=[rule("required")])
        assert engine.validate_field(field, "").error == "Quantity is required"

    def test_range_policy(self):
        field = make_field(rules=[rule("between", min=1, max=5), rule("min", value=3)])
        ranged = ValidationEngine(config=EngineConfig(bound_policy=BoundPolicy.RANGE_OVERRIDES))
        assert ranged.validate_field(field, 2).valid
        assert not ValidationEngine().validate_field(field, 2).valid


# =============================================================================
# Currency / Percentage / Slider
# =============================================================================


class TestCurrency:
    def test_formatted_input(self, engine):
        field = make_field(FieldType.CURRENCY_INPUT, label="Price", rules=[rule("max", value=2000)])
        assert engine.validate_field(field, "$ 1,234.56").valid
        assert engine.validate_field(field, "2,500").error == "Price must be at most 2000"


class TestPercentage:
    def test_default_bounds(self, engine):
        field = make_field(FieldType.PERCENTAGE_INPUT, label="Discount")
        assert engine.validate_field(field, "50%").valid
        assert engine.validate_field(field, 101).error == "Discount must be at most 100%"
        assert engine.validate_field(field, -1).error == "Discount must be at least 0%"

    def test_rule_overrides_default_bound(self, engine):
        field = make_field(
            FieldType.PERCENTAGE_INPUT,
            label="Discount",
            rules=[rule("max", value=30)],
        )
        assert engine.validate_field(field, 40).error == "Discount must be at most 30%"


class TestSlider:
    def test_default_bounds(self, engine):
        field = make_field(FieldType.SLIDER, label="Volume")
        assert engine.validate_field(field, 100).valid
        assert not engine.validate_field(field, 150).valid


# =============================================================================
# Rating
# =============================================================================


class TestRating:
    def test_zero_is_empty(self, engine):
        field = make_field(FieldType.RATING, label="Rating", rules=[rule("required")])
        assert engine.validate_field(field, 0).error == "Rating is required"

    def test_optional_zero_passes(self, engine):
        field = make_field(FieldType.RATING, label="Rating", rules=[rule("min", value=2)])
        assert engine.validate_field(field, 0).valid

    def test_default_max_is_star_count(self, engine):
        field = make_field(FieldType.RATING, label="Rating")
        assert engine.validate_field(field, MAX_STARS).valid
        assert engine.validate_field(field, MAX_STARS + 1).error == (
            f"Rating must be at most {MAX_STARS}"
        )

    def test_min_rating(self, engine):
        field = make_field(FieldType.RATING, label="Rating", rules=[rule("min", value=3)])
        assert engine.validate_field(field, 2).error == "Rating must be at least 3"
