"""Tests for Date, Time and DateTime validation."""

import logging

import pytest

from formforge.core.field_types import FieldType
from formforge.validation import Field, Rule, ValidationEngine


def make_field(
    field_type: FieldType = FieldType.DATE_INPUT,
    label: str = "Start",
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


class TestDate:
    def test_valid_date(self, engine):
        assert engine.validate_field(make_field(), "2024-02-29").valid

    @pytest.mark.parametrize("value", ["2023-02-29", "2024-13-01", "01/02/2024", "2024-1-1", 20240101])
    def test_invalid_date(self, engine, value):
        result = engine.validate_field(make_field(), value)
        assert result.error == "Start must be a valid date (YYYY-MM-DD)"

    def test_after(self, engine):
        field = make_field(rules=[rule("after", date="2024-01-10")])
        assert engine.validate_field(field, "2024-01-11").valid
        assert engine.validate_field(field, "2024-01-10").error == (
            "Start must be after Jan 10, 2024"
        )

    def test_after_or_equal(self, engine):
        field = make_field(rules=[rule("after_or_equal", date="2024-01-10")])
        assert engine.validate_field(field, "2024-01-10").valid
        assert engine.validate_field(field, "2024-01-09").error == (
            "Start must be on or after Jan 10, 2024"
        )

    def test_before_and_before_or_equal(self, engine):
        field = make_field(
            rules=[
                rule("before", date="2024-12-31"),
                rule("before_or_equal", date="2024-06-30"),
            ]
        )
        assert engine.validate_field(field, "2024-06-30").valid
        assert engine.validate_field(field, "2024-12-31").error == (
            "Start must be before Dec 31, 2024"
        )
        assert engine.validate_field(field, "2024-07-01").error == (
            "Start must be on or before Jun 30, 2024"
        )

    def test_unparseable_bound_is_skipped(self, engine, caplog):
        field = make_field(rules=[rule("after", date="next tuesday")])
        with caplog.at_level(logging.WARNING):
            assert engine.validate_field(field, "2020-01-01").valid
        assert "unparseable date" in caplog.text

    def test_non_ascii_digits_are_invalid(self, engine):
        result = engine.validate_field(make_field(), "202٣-01-01")
        assert result.error == "Start must be a valid date (YYYY-MM-DD)"

    def test_required(self, engine):
        field = make_field(rules=[rule("required")])
        assert engine.validate_field(field, "").error == "Start is required"


class TestTime:
    def test_valid_time(self, engine):
        field = make_field(FieldType.TIME_INPUT, label="Opens")
        assert engine.validate_field(field, "09:30").valid

    def test_invalid_time(self, engine):
        field = make_field(FieldType.TIME_INPUT, label="Opens")
        assert engine.validate_field(field, "24:00").error == "Opens must be a valid time (HH:MM)"

    def test_time_bounds(self, engine):
        field = make_field(
            FieldType.TIME_INPUT,
            label="Opens",
            rules=[rule("after_or_equal", date="08:00")],
        )
        assert engine.validate_field(field, "08:00").valid
        assert engine.validate_field(field, "07:59").error == "Opens must be on or after 08:00 AM"

    @pytest.mark.parametrize("value", ["1٣:00", "09:٣0", "١٢:٣٤"])
    def test_non_ascii_digits_are_invalid(self, engine, value):
        field = make_field(FieldType.TIME_INPUT, label="Opens")
        assert engine.validate_field(field, value).error == "Opens must be a valid time (HH:MM)"

    def test_non_ascii_digit_bound_is_skipped(self, engine, caplog):
        field = make_field(
            FieldType.TIME_INPUT,
            label="Opens",
            rules=[rule("after", date="1٣:00")],
        )
        with caplog.at_level(logging.WARNING):
            assert engine.validate_field(field, "09:30").valid
        assert "unparseable date" in caplog.text


class TestDateTime:
    def test_valid(self, engine):
        field = make_field(FieldType.DATETIME_INPUT, label="Meeting")
        assert engine.validate_field(field, "2024-05-01T14:30").valid
        assert engine.validate_field(field, "2024-05-01T14:30:15").valid

    def test_invalid(self, engine):
        field = make_field(FieldType.DATETIME_INPUT, label="Meeting")
        assert engine.validate_field(field, "2024-05-01").error == (
            "Meeting must be a valid date and time (YYYY-MM-DDTHH:MM)"
        )

    def test_plain_date_bound_means_midnight(self, engine):
        field = make_field(
            FieldType.DATETIME_INPUT,
            label="Meeting",
            rules=[rule("before", date="2024-05-02")],
        )
        assert engine.validate_field(field, "2024-05-01T23:59").valid
        assert engine.validate_field(field, "2024-05-02T00:00").error == (
            "Meeting must be before May 02, 2024 12:00 AM"
        )
