"""Display and input-normalization helpers shared by validators and callers."""

from datetime import date, datetime, time
import math
import re
from typing import Any


def format_number(value: float) -> str:
    """Render a bound for an error message: 5.0 -> "5", 2.5 -> "2.5"."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


# =============================================================================
# Currency
# =============================================================================


def format_currency(value: Any, decimals: int = 2) -> str:
    """Format a number with thousands separators: 1234.5 -> "1,234.50".

    Strings are parsed first. Anything that is not a finite number gives "".
    """
    if isinstance(value, bool) or value is None or value == "":
        return ""
    if isinstance(value, str):
        value = parse_currency(value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return ""
    if not math.isfinite(number):
        return ""
    return f"{number:,.{decimals}f}"


def parse_currency(text: Any) -> float:
    """Parse a formatted currency string back to a number; garbage gives 0."""
    if isinstance(text, (int, float)) and not isinstance(text, bool):
        return float(text)
    if not isinstance(text, str):
        return 0.0
    cleaned = re.sub(r"[^0-9.\-]", "", text)
    try:
        number = float(cleaned)
    except ValueError:
        return 0.0
    return number if math.isfinite(number) else 0.0


def clean_currency_input(text: str, previous: str = "") -> str:
    """Filter keystrokes for a currency input.

    Keeps digits and the first decimal point; later points are dropped. A
    third decimal digit returns ``previous`` unchanged.
    """
    if not text:
        return ""
    cleaned = re.sub(r"[^0-9.]", "", text)
    if "." not in cleaned:
        return cleaned
    whole, decimals = cleaned.split(".", 1)
    decimals = decimals.replace(".", "")
    if len(decimals) > 2:
        return previous
    return f"{whole}.{decimals}"


# =============================================================================
# Files
# =============================================================================


def format_file_size(size_kb: float) -> str:
    """Human readable size from kilobytes: 500 -> "500 KB", 1536 -> "1.5 MB"."""
    if size_kb >= 1024:
        return f"{size_kb / 1024:.1f} MB"
    return f"{format_number(round(size_kb, 2))} KB"


# =============================================================================
# Dates
# =============================================================================


def parse_date_value(value: str) -> date | datetime | None:
    """Parse an ISO date or datetime string; None when unparseable."""
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        if "T" in text or " " in text:
            return datetime.fromisoformat(text)
        return date.fromisoformat(text)
    except ValueError:
        return None


def format_date_for_display(value: Any) -> str:
    """"2024-01-05" -> "Jan 05, 2024". Unparseable input is returned as-is."""
    if isinstance(value, (date, datetime)):
        parsed = value
    else:
        parsed = parse_date_value(value)
    if parsed is None:
        return "" if value is None else str(value)
    return parsed.strftime("%b %d, %Y")


def format_datetime_for_display(value: Any) -> str:
    """"2024-01-05T14:30" -> "Jan 05, 2024 02:30 PM"."""
    if isinstance(value, datetime):
        parsed: date | datetime | None = value
    else:
        parsed = parse_date_value(value)
    if parsed is None:
        return "" if value is None else str(value)
    if not isinstance(parsed, datetime):
        parsed = datetime.combine(parsed, time())
    return parsed.strftime("%b %d, %Y %I:%M %p")


def format_time_for_display(value: Any) -> str:
    """"14:30" -> "02:30 PM". Unparseable input is returned as-is."""
    if isinstance(value, time):
        return value.strftime("%I:%M %p")
    try:
        return time.fromisoformat(str(value).strip()).strftime("%I:%M %p")
    except ValueError:
        return "" if value is None else str(value)


# =============================================================================
# Phone / URL / Location
# =============================================================================


def clean_phone_number(value: str) -> str:
    """Keep digits and a single leading "+"; idempotent."""
    if not value:
        return ""
    stripped = value.strip()
    digits = re.sub(r"\D", "", stripped)
    return f"+{digits}" if stripped.startswith("+") else digits


def ensure_protocol(url: str) -> str:
    """Prepend https:// to a URL that has no scheme."""
    url = (url or "").strip()
    if not url:
        return ""
    if re.match(r"^[a-zA-Z][a-zA-Z0-9+.\-]*://", url):
        return url
    return f"https://{url}"


def normalize_hex_color(color: str) -> str:
    """"#abc" -> "#AABBCC"; six-digit colors are upper-cased."""
    hex_digits = (color or "").strip().lstrip("#")
    if len(hex_digits) == 3:
        hex_digits = "".join(ch * 2 for ch in hex_digits)
    return f"#{hex_digits.upper()}"


def format_coordinates(lat: Any, lng: Any, precision: int = 6) -> str:
    """"40.712800, -74.006000"; "" when either coordinate is missing."""
    if lat is None or lng is None:
        return ""
    try:
        return f"{float(lat):.{precision}f}, {float(lng):.{precision}f}"
    except (TypeError, ValueError):
        return ""
