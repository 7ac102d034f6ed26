"""Core primitives: counted strings, byte buffers, encodings, parsing helpers."""

from .bytebuf import ByteBuffer
from .cancel import (
    CancelState,
    cancel_enable,
    cancel_get_event,
    cancel_reset,
    cancel_set,
    cancel_state,
    is_operation_cancelled,
)
from .encoding import Encoding, MultibyteIO, multibyte
from .environ import get_environment_variable, get_environment_variable_as_number
from .strconv import (
    file_size_to_string,
    string_to_date,
    string_to_date_time,
    string_to_file_size,
    string_to_time,
)
from .strings import CountedString, decimal_string_to_int, number_to_string, string_to_number

__all__ = [
    "ByteBuffer",
    "CancelState",
    "CountedString",
    "Encoding",
    "MultibyteIO",
    "cancel_enable",
    "cancel_get_event",
    "cancel_reset",
    "cancel_set",
    "cancel_state",
    "decimal_string_to_int",
    "file_size_to_string",
    "get_environment_variable",
    "get_environment_variable_as_number",
    "is_operation_cancelled",
    "multibyte",
    "number_to_string",
    "string_to_date",
    "string_to_date_time",
    "string_to_file_size",
    "string_to_number",
    "string_to_time",
]
