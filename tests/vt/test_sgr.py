"""Tests for vt/sgr.py"""

import pytest

from consolecore.color import WINDOW_BITS, AttrCtrl, ColorAttributes, COMMON_LVB_UNDERSCORE
from consolecore.vt.sgr import final_color_from_sequence, strip_vt_escapes, vt_string_for_text_attribute


class TestFinalColor:
    """Applying SGR codes to a console attribute."""

    def test_red_bold_black(self):
        """31;1;40 gives bright red on black."""
        assert final_color_from_sequence(0x07, "\x1b[31;1;40m", 0x07) == 0x0C

    def test_foreground_keeps_background(self):
        assert final_color_from_sequence(0x17, "\x1b[31m", 0x07) == 0x14

    def test_reset_uses_default(self):
        assert final_color_from_sequence(0x4F, "\x1b[0m", 0x1E) == 0x1E

    def test_empty_parameter_is_reset(self):
        assert final_color_from_sequence(0x4F, "\x1b[m", 0x07) == 0x07

    def test_default_foreground_and_background(self):
        assert final_color_from_sequence(0x4C, "\x1b[39m", 0x1E) == 0x4E
        assert final_color_from_sequence(0x4C, "\x1b[49m", 0x1E) == 0x1C

    def test_bright_ranges(self):
        assert final_color_from_sequence(0x00, "\x1b[91m", 0x07) == 0x0C
        assert final_color_from_sequence(0x00, "\x1b[104m", 0x07) == 0x90

    def test_inverse(self):
        assert final_color_from_sequence(0x1E, "\x1b[7m", 0x07) == 0xE1

    def test_underline_cleared_by_reset(self):
        underlined = final_color_from_sequence(0x07, "\x1b[4m", 0x07)
        assert underlined & COMMON_LVB_UNDERSCORE
        assert final_color_from_sequence(underlined, "\x1b[0m", 0x07 | COMMON_LVB_UNDERSCORE) == 0x07

    def test_non_sgr_sequence_ignored(self):
        assert final_color_from_sequence(0x1E, "\x1b[2J", 0x07) == 0x1E

    @pytest.mark.parametrize("sequence", ["\x1b[0m", "\x1b[m", "\x1b[0;0m"])
    @pytest.mark.parametrize("initial", [0x07, 0x4F, 0x1E | COMMON_LVB_UNDERSCORE])
    def test_reset_is_idempotent(self, sequence, initial):
        """A reset applied twice lands on the same colour as once."""
        once = final_color_from_sequence(initial, sequence, 0x1E)
        assert final_color_from_sequence(once, sequence, 0x1E) == once

    def test_unknown_code_ignored(self):
        assert final_color_from_sequence(0x1E, "\x1b[5m", 0x07) == 0x1E


class TestVtStringForTextAttribute:
    def test_explicit_colours(self):
        color = ColorAttributes(AttrCtrl.NONE, 0x1E)
        assert vt_string_for_text_attribute(color) == "\x1b[0;44;33;1m"

    def test_bright_background(self):
        color = ColorAttributes(AttrCtrl.NONE, 0x90)
        assert vt_string_for_text_attribute(color) == "\x1b[0;104;30m"

    def test_window_colours(self):
        color = ColorAttributes(WINDOW_BITS, 0xFF)
        assert vt_string_for_text_attribute(color) == "\x1b[0;49;39m"

    def test_round_trip_through_parser(self):
        """The generated escape selects the same attribute."""
        color = ColorAttributes(AttrCtrl.NONE, 0x2C)
        sequence = vt_string_for_text_attribute(color)
        assert final_color_from_sequence(0x07, sequence, 0x07) == 0x2C


class TestStrip:
    def test_strip(self):
        assert strip_vt_escapes("a\x1b[1;31mb\x1b[0m") == "ab"

    def test_plain_text_unchanged(self):
        assert strip_vt_escapes("plain [text]") == "plain [text]"

    def test_idempotent(self):
        for text in ("a\x1b[31mb", "\x1b[\x1b[0m31mx", "x\x1b[", "\x1b[2J\x1b[H"):
            once = strip_vt_escapes(text)
            assert strip_vt_escapes(once) == once
