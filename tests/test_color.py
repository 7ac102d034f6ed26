"""Tests for color.py"""

from consolecore.color import (
    WINDOW_BITS,
    AttrCtrl,
    ColorAttributes,
    ansi_to_native,
    are_colors_identical,
    attribute_from_string,
    combine_colors,
    native_to_ansi,
    resolve_window_color_components,
    swap_nibbles,
)


class TestAttributeFromString:
    """Colour string parsing."""

    def test_foreground_only(self):
        """An unnamed background defers to the window."""
        color = attribute_from_string("blue")
        assert color == ColorAttributes(AttrCtrl.WINDOW_BG, 0x01)

    def test_foreground_and_background(self):
        color = attribute_from_string("lightred+bg_blue")
        assert color == ColorAttributes(AttrCtrl.NONE, 0x1C)

    def test_background_only(self):
        color = attribute_from_string("bg=blue")
        assert color == ColorAttributes(AttrCtrl.WINDOW_FG, 0x10)

    def test_fg_prefix_and_control(self):
        color = attribute_from_string("fg=blue+continue")
        assert color.ctrl == AttrCtrl.CONTINUE | AttrCtrl.WINDOW_BG
        assert color.win32_attr == 0x01

    def test_parts_are_ored(self):
        assert attribute_from_string("red+bright").win32_attr == 0x0C

    def test_case_and_blanks(self):
        assert attribute_from_string(" Yellow ") == ColorAttributes(AttrCtrl.WINDOW_BG, 0x0E)

    def test_unknown(self):
        assert attribute_from_string("nosuch") is None
        assert attribute_from_string("blue+nosuch") is None


class TestCombine:
    def test_window_is_recessive(self):
        window = ColorAttributes(WINDOW_BITS, 0)
        blue = ColorAttributes(AttrCtrl.WINDOW_BG, 0x01)
        assert combine_colors(window, blue) == ColorAttributes(AttrCtrl.WINDOW_BG, 0x01)

    def test_explicit_nibbles_xor(self):
        a = ColorAttributes(AttrCtrl.NONE, 0x1F)
        b = ColorAttributes(AttrCtrl.NONE, 0x10)
        assert combine_colors(a, b).win32_attr == 0x0F

    def test_other_controls_are_ored(self):
        a = ColorAttributes(AttrCtrl.CONTINUE, 0)
        b = ColorAttributes(AttrCtrl.HIDE, 0)
        assert combine_colors(a, b).ctrl == AttrCtrl.CONTINUE | AttrCtrl.HIDE


class TestResolveWindow:
    def test_background_from_window(self):
        color = ColorAttributes(AttrCtrl.WINDOW_BG, 0x01)
        window = ColorAttributes(WINDOW_BITS, 0x70)
        resolved = resolve_window_color_components(color, window, True)
        assert resolved.win32_attr == 0x71
        assert resolved.ctrl == AttrCtrl.WINDOW_BG

    def test_drop_window_bits(self):
        color = ColorAttributes(WINDOW_BITS, 0)
        window = ColorAttributes(WINDOW_BITS, 0x1E)
        resolved = resolve_window_color_components(color, window, False)
        assert resolved == ColorAttributes(AttrCtrl.NONE, 0x1E)


class TestHelpers:
    def test_ansi_native_mapping(self):
        assert ansi_to_native(1) == 0x04
        assert ansi_to_native(4) == 0x01
        assert native_to_ansi(0x04) == 1
        assert all(native_to_ansi(ansi_to_native(i)) == i for i in range(8))

    def test_swap_nibbles(self):
        assert swap_nibbles(0x1E) == 0xE1
        assert swap_nibbles(0x8000 | 0x1E) == 0x8000 | 0xE1

    def test_identical_compares_attribute_only(self):
        a = ColorAttributes(AttrCtrl.CONTINUE, 0x07)
        b = ColorAttributes(AttrCtrl.NONE, 0x07)
        assert are_colors_identical(a, b)
        assert not are_colors_identical(a, ColorAttributes(AttrCtrl.CONTINUE, 0x70))

    def test_nibble_properties(self):
        color = ColorAttributes(AttrCtrl.NONE, 0x1E)
        assert color.foreground == 0x0E
        assert color.background == 0x01
