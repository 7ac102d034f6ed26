"""Tests for core/encoding.py"""

import pytest

from consolecore.core.encoding import (
    UTF8_BOM,
    UTF16LE_BOM,
    Encoding,
    MultibyteIO,
    encoding_from_name,
)
from consolecore.core.strings import CountedString
from consolecore.errors import ConversionError


class TestMultibyteIO:
    """Conversions in each supported encoding."""

    def test_utf8_input(self):
        m = MultibyteIO()
        m.input_encoding = Encoding.UTF8
        out = CountedString.init_empty()
        assert m.input_convert(b"h\xc3\xa9", None, out) == 2
        assert out.text == "hé"

    def test_input_length_limit(self):
        """Only the first ``length`` bytes are converted."""
        m = MultibyteIO()
        m.input_encoding = Encoding.UTF8
        out = CountedString.init_empty()
        m.input_convert(b"abcdef", 3, out)
        assert out.text == "abc"

    def test_input_capacity_exceeded(self):
        """Nothing is written when the output is too small."""
        m = MultibyteIO()
        out = CountedString.from_text("keep")
        with pytest.raises(ConversionError):
            m.input_convert(b"abcdef", None, out, out_capacity=2)
        assert out.text == "keep"

    def test_utf16_input(self):
        m = MultibyteIO()
        m.input_encoding = Encoding.UTF16LE
        assert m.decode(b"a\x00b\x00") == "ab"
        assert m.unit_size() == 2

    def test_single_byte_codepage(self):
        m = MultibyteIO(codepage="cp437")
        m.input_encoding = Encoding.SINGLE_BYTE
        assert m.decode(b"\x82") == "é"

    def test_output_convert_appends(self):
        m = MultibyteIO()
        m.output_encoding = Encoding.UTF8
        out = bytearray(b">")
        assert m.output_convert("hé", None, out) == 3
        assert bytes(out) == b">h\xc3\xa9"

    def test_output_capacity_exceeded(self):
        m = MultibyteIO()
        m.output_encoding = Encoding.UTF8
        out = bytearray()
        with pytest.raises(ConversionError):
            m.output_convert("éé", None, out, out_capacity=3)
        assert out == bytearray()

    def test_size_needed(self):
        m = MultibyteIO()
        m.input_encoding = Encoding.UTF8
        m.output_encoding = Encoding.UTF16LE
        assert m.input_size_needed(b"h\xc3\xa9") == 2
        assert m.output_size_needed("ab") == 4

    def test_bytes_in_bom(self):
        m = MultibyteIO()
        assert m.bytes_in_bom(UTF8_BOM + b"x", Encoding.UTF8) == 3
        assert m.bytes_in_bom(UTF16LE_BOM + b"x", Encoding.UTF16LE) == 2
        assert m.bytes_in_bom(b"plain", Encoding.UTF8) == 0


class TestEncodingFromName:
    def test_names(self):
        assert encoding_from_name("utf-8") is Encoding.UTF8
        assert encoding_from_name("UTF_16") is Encoding.UTF16LE
        assert encoding_from_name("cp1252") is Encoding.SINGLE_BYTE
