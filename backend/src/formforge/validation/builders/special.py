"""Schema builders for Signature Pad, Color Picker, Location Picker and Address Input."""

import base64
import binascii
import io
import logging
import re
from typing import Any, Mapping

from PIL import Image

from formforge.config import EngineConfig
from formforge.validation.rules import is_required
from formforge.validation.schema import Check, CoercionError, FieldSchema, is_empty_value
from formforge.validation.types import Field

logger = logging.getLogger(__name__)

SIGNATURE_PREFIX = "data:image/png;base64,"

HEX_COLOR_PATTERN = re.compile(r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")

ADDRESS_KEYS = ("street", "city", "state", "postal_code", "country")


# =============================================================================
# Signature Pad
# =============================================================================


def is_blank_signature(data_url: str) -> bool | None:
    """Whether a PNG data URL holds an untouched canvas.

    Blank means fully transparent or a single uniform color. Returns None
    when the payload can't be decoded as an image.
    """
    payload = data_url[len(SIGNATURE_PREFIX):]
    try:
        content = base64.b64decode(payload, validate=True)
        with Image.open(io.BytesIO(content)) as img:
            rgba = img.convert("RGBA")
    except (binascii.Error, OSError, ValueError) as exc:
        logger.debug("Could not decode signature image: %s", exc)
        return None

    if rgba.getchannel("A").getbbox() is None:
        return True
    return all(low == high for low, high in rgba.getextrema())


def build_signature_schema(field: Field, config: EngineConfig) -> FieldSchema:
    """Signature Pad: a PNG data URL.

    With ``blank_signature_is_empty`` the image is decoded and an empty
    canvas is treated like a missing value.
    """
    required = is_required(field.rules)
    invalid = f"{field.label} must be a valid signature"

    def coerce(value: Any) -> str:
        if not isinstance(value, str):
            raise CoercionError(invalid)
        return value.strip()

    def check_prefix(value: str) -> str | None:
        if not value.startswith(SIGNATURE_PREFIX) or value == SIGNATURE_PREFIX:
            return invalid
        return None

    decode_checks: tuple[Check, ...] = ()
    if config.blank_signature_is_empty:
        def check_blank(value: str) -> str | None:
            blank = is_blank_signature(value)
            if blank is None:
                return invalid
            if blank and required:
                return f"{field.label} is required"
            return None

        decode_checks = (check_blank,)

    return FieldSchema(
        label=field.label,
        required=required,
        coerce=coerce,
        checks=(check_prefix,),
        decode_checks=decode_checks,
    )


# =============================================================================
# Color Picker
# =============================================================================


def build_color_schema(field: Field, config: EngineConfig) -> FieldSchema:
    def check_color(value: Any) -> str | None:
        if not isinstance(value, str) or not HEX_COLOR_PATTERN.match(value.strip()):
            return f"{field.label} must be a valid hex color (e.g., #3B82F6)"
        return None

    return FieldSchema(
        label=field.label,
        required=is_required(field.rules),
        checks=(check_color,),
    )


# =============================================================================
# Location Picker
# =============================================================================


def _coordinate(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _is_empty_location(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, Mapping):
        return value.get("lat") is None and value.get("lng") is None
    return False


def build_location_schema(field: Field, config: EngineConfig) -> FieldSchema:
    """Location Picker: {lat, lng, address?} with lat in ±90 and lng in ±180."""

    def check_location(value: Any) -> str | None:
        if not isinstance(value, Mapping):
            return f"{field.label} must be a valid location"

        lat = _coordinate(value.get("lat"))
        lng = _coordinate(value.get("lng"))
        if lat is None or lng is None:
            return f"{field.label} must have valid coordinates"
        if not -90 <= lat <= 90:
            return f"{field.label} latitude must be between -90 and 90"
        if not -180 <= lng <= 180:
            return f"{field.label} longitude must be between -180 and 180"

        address = value.get("address")
        if address is not None and not isinstance(address, str):
            return f"{field.label} address must be text"
        return None

    return FieldSchema(
        label=field.label,
        required=is_required(field.rules),
        is_empty=_is_empty_location,
        checks=(check_location,),
    )


# =============================================================================
# Address Input
# =============================================================================


def _is_empty_address(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, Mapping):
        return all(is_empty_value(value.get(key)) for key in ADDRESS_KEYS)
    return False


def build_address_schema(field: Field, config: EngineConfig) -> FieldSchema:
    """Address Input.

    Required: every sub-field must be filled in. Optional: partial addresses
    are accepted; missing sub-fields read as "".
    """
    required = is_required(field.rules)

    def coerce(value: Any) -> dict[str, str]:
        if not isinstance(value, Mapping):
            raise CoercionError(f"{field.label} must be a valid address")
        address: dict[str, str] = {}
        for key in ADDRESS_KEYS:
            part = value.get(key)
            if part is None:
                part = ""
            elif isinstance(part, int) and not isinstance(part, bool):
                # postal codes often arrive as numbers
                part = str(part)
            elif not isinstance(part, str):
                raise CoercionError(f"{field.label} must be a valid address")
            address[key] = part
        return address

    checks: list[Check] = []
    if required:
        def check_complete(value: dict[str, str]) -> str | None:
            if any(not part.strip() for part in value.values()):
                return f"All fields of {field.label} are required"
            return None

        checks.append(check_complete)

    return FieldSchema(
        label=field.label,
        required=required,
        is_empty=_is_empty_address,
        coerce=coerce,
        checks=tuple(checks),
    )
