"""Multibyte I/O

Conversion between host text (Python str) and the active byte encoding:
a single-byte code page, UTF-8 or UTF-16LE. Input and output encodings
are tracked separately. Conversions into caller buffers are all or
nothing: a result that does not fit raises ConversionError before any
byte or character is written.
"""

from enum import Enum

from .. import config
from ..errors import ConversionError
from .strings import CountedString


class Encoding(Enum):
    SINGLE_BYTE = "single_byte"
    UTF8 = "utf8"
    UTF16LE = "utf16le"


UTF8_BOM = b"\xef\xbb\xbf"
UTF16LE_BOM = b"\xff\xfe"


def encoding_from_name(name: str) -> Encoding:
    normalized = name.lower().replace("-", "").replace("_", "")
    if normalized in ("utf8", "utf8sig"):
        return Encoding.UTF8
    if normalized in ("utf16", "utf16le"):
        return Encoding.UTF16LE
    return Encoding.SINGLE_BYTE


class MultibyteIO:
    """Active encodings and the conversions that use them."""

    def __init__(self, codepage: str = config.SINGLE_BYTE_CODEPAGE):
        self.codepage = codepage
        default = encoding_from_name(config.DEFAULT_ENCODING)
        self.input_encoding = default
        self.output_encoding = default

    def _codec(self, encoding: Encoding) -> str:
        if encoding is Encoding.UTF8:
            return "utf-8"
        if encoding is Encoding.UTF16LE:
            return "utf-16-le"
        return self.codepage

    def unit_size(self, encoding: Encoding | None = None) -> int:
        """Bytes per code unit when scanning for line terminators."""
        encoding = encoding or self.input_encoding
        return 2 if encoding is Encoding.UTF16LE else 1

    # --- input: bytes -> host text ------------------------------------

    def decode(self, data: bytes) -> str:
        return bytes(data).decode(self._codec(self.input_encoding), errors="replace")

    def input_size_needed(self, data: bytes, length: int | None = None) -> int:
        """Characters needed to hold ``data[:length]`` as host text."""
        return len(self.decode(data[:length]))

    def input_convert(
        self, data: bytes, length: int | None, out: CountedString, out_capacity: int | None = None
    ) -> int:
        """Decode ``data[:length]`` into ``out``.

        ``out`` grows as needed unless ``out_capacity`` caps it.

        Returns:
            characters written
        """
        text = self.decode(data[:length])
        if out_capacity is not None and len(text) > out_capacity:
            raise ConversionError(f"{len(text)} chars do not fit in {out_capacity}")
        out.set_text(text)
        return len(text)

    # --- output: host text -> bytes -----------------------------------

    def encode(self, text: str) -> bytes:
        return text.encode(self._codec(self.output_encoding), errors="replace")

    def output_size_needed(self, text: str, length: int | None = None) -> int:
        """Bytes needed to hold ``text[:length]`` in the output encoding."""
        return len(self.encode(text[:length]))

    def output_convert(
        self, text: str, length: int | None, out: bytearray, out_capacity: int | None = None
    ) -> int:
        """Encode ``text[:length]`` and append it to ``out``.

        Returns:
            bytes written
        """
        data = self.encode(text[:length])
        if out_capacity is not None and len(data) > out_capacity:
            raise ConversionError(f"{len(data)} bytes do not fit in {out_capacity}")
        out.extend(data)
        return len(data)

    def get_encoding(self) -> Encoding:
        return self.output_encoding

    def bytes_in_bom(self, data: bytes, encoding: Encoding | None = None) -> int:
        """Length of the byte-order mark at the start of ``data``, if any."""
        encoding = encoding or self.input_encoding
        if encoding is Encoding.UTF8 and data[:3] == UTF8_BOM:
            return 3
        if encoding is Encoding.UTF16LE and data[:2] == UTF16LE_BOM:
            return 2
        return 0


# Process-wide encoding state
multibyte = MultibyteIO()


def get_encoding() -> Encoding:
    return multibyte.get_encoding()


def set_input_encoding(encoding: Encoding) -> None:
    multibyte.input_encoding = encoding


def set_output_encoding(encoding: Encoding) -> None:
    multibyte.output_encoding = encoding


def input_size_needed(data: bytes, length: int | None = None) -> int:
    return multibyte.input_size_needed(data, length)


def input_convert(data: bytes, length: int | None, out: CountedString, out_capacity: int | None = None) -> int:
    return multibyte.input_convert(data, length, out, out_capacity)


def output_size_needed(text: str, length: int | None = None) -> int:
    return multibyte.output_size_needed(text, length)


def output_convert(text: str, length: int | None, out: bytearray, out_capacity: int | None = None) -> int:
    return multibyte.output_convert(text, length, out, out_capacity)
