"""Tests for display and input-normalization helpers."""

from datetime import date, datetime

import pytest

from formforge.formatting import (
    clean_currency_input,
    clean_phone_number,
    ensure_protocol,
    format_coordinates,
    format_currency,
    format_date_for_display,
    format_datetime_for_display,
    format_file_size,
    format_number,
    format_time_for_display,
    normalize_hex_color,
    parse_currency,
    parse_date_value,
)


class TestNumbers:
    def test_format_number(self):
        assert format_number(5.0) == "5"
        assert format_number(2.5) == "2.5"
        assert format_number(7) == "7"

    @pytest.mark.parametrize(
        "value, expected",
        [
            (1234.5, "1,234.50"),
            ("1234567.891", "1,234,567.89"),
            (0, "0.00"),
            (None, ""),
            ("", ""),
            (True, ""),
            (float("inf"), ""),
        ],
    )
    def test_format_currency(self, value, expected):
        assert format_currency(value) == expected

    def test_format_currency_decimals(self):
        assert format_currency(1234.5, decimals=0) == "1,234"

    def test_parse_currency(self):
        assert parse_currency("$1,234.50") == 1234.5
        assert parse_currency("-12") == -12.0
        assert parse_currency("abc") == 0.0
        assert parse_currency(None) == 0.0

    @pytest.mark.parametrize("value", [0, 0.5, -42.1, 98765.43, 1234567890.12, "-1,000.00"])
    def test_format_parse_format_is_stable(self, value):
        formatted = format_currency(value)
        assert format_currency(parse_currency(formatted)) == formatted

    @pytest.mark.parametrize(
        "text, previous, expected",
        [
            ("12a3", "", "123"),
            ("1.2.3", "", "1.23"),
            ("1.234", "1.23", "1.23"),
            ("", "5", ""),
        ],
    )
    def test_clean_currency_input(self, text, previous, expected):
        assert clean_currency_input(text, previous) == expected


class TestFileSize:
    def test_kilobytes(self):
        assert format_file_size(500) == "500 KB"
        assert format_file_size(12.5) == "12.5 KB"

    def test_megabytes(self):
        assert format_file_size(1536) == "1.5 MB"


class TestDates:
    def test_parse_date_value(self):
        assert parse_date_value("2024-01-05") == date(2024, 1, 5)
        assert parse_date_value("2024-01-05T14:30") == datetime(2024, 1, 5, 14, 30)
        assert parse_date_value("soon") is None
        assert parse_date_value("") is None

    def test_display(self):
        assert format_date_for_display("2024-01-05") == "Jan 05, 2024"
        assert format_datetime_for_display("2024-01-05T14:30") == "Jan 05, 2024 02:30 PM"
        assert format_datetime_for_display("2024-01-05") == "Jan 05, 2024 12:00 AM"
        assert format_time_for_display("14:30") == "02:30 PM"

    def test_unparseable_is_returned_as_is(self):
        assert format_date_for_display("whenever") == "whenever"
        assert format_time_for_display("noonish") == "noonish"
        assert format_date_for_display(None) == ""


class TestPhoneUrlColor:
    def test_clean_phone_number(self):
        assert clean_phone_number("+1 (415) 555-0100") == "+14155550100"
        assert clean_phone_number("415.555.0100") == "4155550100"
        assert clean_phone_number("") == ""

    def test_clean_phone_number_is_idempotent(self):
        once = clean_phone_number("+44 20 7946 0958")
        assert clean_phone_number(once) == once

    def test_ensure_protocol(self):
        assert ensure_protocol("example.com") == "https://example.com"
        assert ensure_protocol(" http://example.com ") == "http://example.com"
        assert ensure_protocol("ftp://files.example.com") == "ftp://files.example.com"
        assert ensure_protocol("") == ""

    def test_normalize_hex_color(self):
        assert normalize_hex_color("#abc") == "#AABBCC"
        assert normalize_hex_color("3b82f6") == "#3B82F6"

    def test_format_coordinates(self):
        assert format_coordinates(40.7128, -74.006) == "40.712800, -74.006000"
        assert format_coordinates(1, 2, precision=2) == "1.00, 2.00"
        assert format_coordinates(None, 2) == ""
