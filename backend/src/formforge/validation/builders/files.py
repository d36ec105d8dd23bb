"""Schema builders for upload fields.

File, Image, Video and Document Upload validate an UploadedFile's MIME type
and size. Image Upload can also decode the bytes with Pillow to check pixel
dimensions; that check is a decode check and runs last.
"""

from dataclasses import replace
import io
import logging
from typing import Any, Iterable

from PIL import Image

from formforge.config import EngineConfig
from formforge.formatting import format_file_size
from formforge.validation.rules import extract_file_rules, is_required
from formforge.validation.schema import Check, CoercionError, FieldSchema
from formforge.validation.types import DimensionParams, Field, Rule, UploadedFile

logger = logging.getLogger(__name__)


def matches_mime_type(content_type: str, pattern: str) -> bool:
    """Exact match, ``type/*`` or ``*/*``."""
    content_type = (content_type or "").lower()
    pattern = pattern.strip().lower()
    if pattern == "*/*":
        return True
    if pattern.endswith("/*"):
        return content_type.startswith(pattern[:-1])
    return content_type == pattern


def accepted_mime_types(rules: Iterable[Rule], default: tuple[str, ...] = ()) -> tuple[str, ...]:
    """MIME patterns for a file picker's ``accept`` attribute."""
    return extract_file_rules(rules).mime_types or default


def describe_dimensions(params: DimensionParams | None) -> str:
    """Summary for helper text: "min 100px width, max 800px height"."""
    if params is None:
        return ""
    parts = []
    if params.width:
        parts.append(f"{params.width}px width")
    if params.height:
        parts.append(f"{params.height}px height")
    if params.min_width:
        parts.append(f"min {params.min_width}px width")
    if params.max_width:
        parts.append(f"max {params.max_width}px width")
    if params.min_height:
        parts.append(f"min {params.min_height}px height")
    if params.max_height:
        parts.append(f"max {params.max_height}px height")
    return ", ".join(parts)


def check_dimensions(params: DimensionParams, width: int, height: int) -> str | None:
    """First violated dimension constraint, exact sizes before min/max."""
    if params.width is not None and width != params.width:
        return f"Image width must be exactly {params.width}px (current: {width}px)"
    if params.height is not None and height != params.height:
        return f"Image height must be exactly {params.height}px (current: {height}px)"
    if params.min_width is not None and width < params.min_width:
        return f"Image width must be at least {params.min_width}px (current: {width}px)"
    if params.max_width is not None and width > params.max_width:
        return f"Image width must be at most {params.max_width}px (current: {width}px)"
    if params.min_height is not None and height < params.min_height:
        return f"Image height must be at least {params.min_height}px (current: {height}px)"
    if params.max_height is not None and height > params.max_height:
        return f"Image height must be at most {params.max_height}px (current: {height}px)"
    return None


def read_image_size(content: bytes) -> tuple[int, int] | None:
    """(width, height) of an encoded image, None if Pillow can't read it."""
    try:
        with Image.open(io.BytesIO(content)) as img:
            return img.size
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        logger.debug("Could not decode image: %s", exc)
        return None


def _as_file(label: str):
    def coerce(value: Any) -> UploadedFile:
        if not isinstance(value, UploadedFile):
            raise CoercionError(f"{label} must be a valid file")
        return value

    return coerce


def _size_checks(min_kb: float | None, max_kb: float | None) -> list[Check]:
    checks: list[Check] = []
    if min_kb is not None:
        def check_min(value: UploadedFile) -> str | None:
            if value.size_kb < min_kb:
                return f"File size must be at least {format_file_size(min_kb)}"
            return None

        checks.append(check_min)
    if max_kb is not None:
        def check_max(value: UploadedFile) -> str | None:
            if value.size_kb > max_kb:
                return f"File size must be less than {format_file_size(max_kb)}"
            return None

        checks.append(check_max)
    return checks


def _mime_check(types: tuple[str, ...], message: str) -> Check:
    def check(value: UploadedFile) -> str | None:
        if not any(matches_mime_type(value.content_type, t) for t in types):
            return message
        return None

    return check


def _upload_schema(
    field: Field,
    default_types: tuple[str, ...] = (),
    type_message: str | None = None,
) -> FieldSchema:
    file_rules = extract_file_rules(field.rules)
    types = file_rules.mime_types or default_types

    checks: list[Check] = []
    if types:
        joined = ", ".join(types)
        message = type_message or "File type must be one of: {types}"
        checks.append(_mime_check(types, message.replace("{types}", joined)))
    checks.extend(_size_checks(file_rules.min_size_kb, file_rules.max_size_kb))

    return FieldSchema(
        label=field.label,
        required=is_required(field.rules),
        coerce=_as_file(field.label),
        checks=tuple(checks),
    )


def build_file_upload_schema(field: Field, config: EngineConfig) -> FieldSchema:
    return _upload_schema(field)


def build_document_upload_schema(field: Field, config: EngineConfig) -> FieldSchema:
    return _upload_schema(field)


def build_video_upload_schema(field: Field, config: EngineConfig) -> FieldSchema:
    return _upload_schema(
        field,
        default_types=("video/*",),
        type_message=f"{field.label} must be a valid video file",
    )


def build_image_upload_schema(field: Field, config: EngineConfig) -> FieldSchema:
    """Image Upload: defaults to image/*; dimensions are read from the bytes."""
    schema = _upload_schema(
        field,
        default_types=("image/*",),
        type_message="File must be an image ({types})",
    )

    dimensions = extract_file_rules(field.rules).dimensions
    if dimensions is None:
        return schema

    def check_image(value: UploadedFile) -> str | None:
        size = read_image_size(value.content) if value.content else None
        if size is None:
            return f"{field.label} must be a valid image"
        return check_dimensions(dimensions, *size)

    return replace(schema, decode_checks=(check_image,))
