"""Per-type schema builders.

A builder is ``(field, config) -> FieldSchema``. BUILTIN_BUILDERS maps every
catalog FieldType to its builder and seeds the default SchemaRegistry.
"""

from typing import Callable

from formforge.config import EngineConfig
from formforge.core.field_types import FieldType
from formforge.validation.builders.choice import (
    build_checkbox_schema,
    build_dropdown_schema,
    build_multi_select_schema,
    build_radio_schema,
    build_toggle_schema,
)
from formforge.validation.builders.files import (
    build_document_upload_schema,
    build_file_upload_schema,
    build_image_upload_schema,
    build_video_upload_schema,
)
from formforge.validation.builders.numeric import (
    build_currency_schema,
    build_number_schema,
    build_percentage_schema,
    build_rating_schema,
    build_slider_schema,
)
from formforge.validation.builders.special import (
    build_address_schema,
    build_color_schema,
    build_location_schema,
    build_signature_schema,
)
from formforge.validation.builders.temporal import (
    build_date_schema,
    build_datetime_schema,
    build_time_schema,
)
from formforge.validation.builders.text import (
    build_email_schema,
    build_password_schema,
    build_phone_schema,
    build_text_area_schema,
    build_text_input_schema,
    build_url_schema,
)
from formforge.validation.schema import FieldSchema
from formforge.validation.types import Field

SchemaBuilder = Callable[[Field, EngineConfig], FieldSchema]

BUILTIN_BUILDERS: dict[FieldType, SchemaBuilder] = {
    FieldType.TEXT_INPUT: build_text_input_schema,
    FieldType.TEXT_AREA: build_text_area_schema,
    FieldType.EMAIL_INPUT: build_email_schema,
    FieldType.PHONE_INPUT: build_phone_schema,
    FieldType.PASSWORD_INPUT: build_password_schema,
    FieldType.URL_INPUT: build_url_schema,
    FieldType.NUMBER_INPUT: build_number_schema,
    FieldType.CURRENCY_INPUT: build_currency_schema,
    FieldType.PERCENTAGE_INPUT: build_percentage_schema,
    FieldType.DATE_INPUT: build_date_schema,
    FieldType.DATETIME_INPUT: build_datetime_schema,
    FieldType.TIME_INPUT: build_time_schema,
    FieldType.CHECKBOX: build_checkbox_schema,
    FieldType.TOGGLE_SWITCH: build_toggle_schema,
    FieldType.RADIO_BUTTON: build_radio_schema,
    FieldType.DROPDOWN_SELECT: build_dropdown_schema,
    FieldType.MULTI_SELECT: build_multi_select_schema,
    FieldType.FILE_UPLOAD: build_file_upload_schema,
    FieldType.IMAGE_UPLOAD: build_image_upload_schema,
    FieldType.VIDEO_UPLOAD: build_video_upload_schema,
    FieldType.DOCUMENT_UPLOAD: build_document_upload_schema,
    FieldType.SIGNATURE_PAD: build_signature_schema,
    FieldType.COLOR_PICKER: build_color_schema,
    FieldType.LOCATION_PICKER: build_location_schema,
    FieldType.ADDRESS_INPUT: build_address_schema,
    FieldType.RATING: build_rating_schema,
    FieldType.SLIDER: build_slider_schema,
}

__all__ = ["BUILTIN_BUILDERS", "SchemaBuilder"]
