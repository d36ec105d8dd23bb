"""Tests for initial field values."""

from formforge.core.field_types import FieldType
from formforge.defaults import (
    fallback_by_type,
    get_field_default_value,
    get_form_defaults,
    parse_default_selected_values,
)
from formforge.validation import Field


def make_field(
    field_type: FieldType | str,
    default_value=None,
    current_value=None,
    field_id: int = 1,
) -> Field:
    return Field(
        field_id=field_id,
        field_type=field_type,
        label="Field",
        default_value=default_value,
        current_value=current_value,
    )


class TestPriority:
    def test_current_value_wins(self):
        field = make_field(FieldType.TEXT_INPUT, default_value="d", current_value="c")
        assert get_field_default_value(field) == "c"

    def test_default_value_used(self):
        assert get_field_default_value(make_field(FieldType.TEXT_INPUT, default_value="d")) == "d"

    def test_fallback(self):
        assert get_field_default_value(make_field(FieldType.NUMBER_INPUT)) == 0
        assert get_field_default_value(make_field(FieldType.FILE_UPLOAD)) is None
        assert get_field_default_value(make_field(FieldType.TEXT_INPUT)) == ""

    def test_unknown_type_falls_back_to_empty_string(self):
        assert fallback_by_type(make_field("Hologram")) == ""


class TestNormalization:
    def test_checkbox_strings(self):
        assert get_field_default_value(make_field(FieldType.CHECKBOX, default_value="true")) is True
        assert get_field_default_value(make_field(FieldType.TOGGLE_SWITCH, default_value="0")) is False

    def test_multi_select_json(self):
        field = make_field(FieldType.MULTI_SELECT, default_value='["a", "b"]')
        assert get_field_default_value(field) == ["a", "b"]

    def test_parse_default_selected_values(self):
        assert parse_default_selected_values(["a", 1, "b"]) == ["a", "b"]
        assert parse_default_selected_values("not json") == []
        assert parse_default_selected_values(None) == []

    def test_address_fills_missing_parts(self):
        field = make_field(FieldType.ADDRESS_INPUT, current_value={"city": "Springfield"})
        assert get_field_default_value(field) == {
            "street": "",
            "city": "Springfield",
            "state": "",
            "postal_code": "",
            "country": "",
        }

    def test_location_drops_bad_coordinates(self):
        field = make_field(FieldType.LOCATION_PICKER, default_value={"lat": "x", "lng": 2.5})
        assert get_field_default_value(field) == {"lat": None, "lng": 2.5, "address": ""}


class TestFormDefaults:
    def test_keys_are_field_ids(self):
        fields = [
            make_field(FieldType.TEXT_INPUT, default_value="hi", field_id=1),
            make_field(FieldType.MULTI_SELECT, field_id=2),
        ]
        assert get_form_defaults(fields) == {1: "hi", 2: []}

    def test_fallbacks_are_independent_copies(self):
        fields = [make_field(FieldType.MULTI_SELECT, field_id=1)]
        first = get_form_defaults(fields)
        first[1].append("mutated")
        assert get_form_defaults(fields) == {1: []}
