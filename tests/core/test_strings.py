"""Tests for core/strings.py"""

import pytest

from consolecore.core.strings import (
    CountedString,
    decimal_string_to_int,
    number_to_string,
    string_to_number,
)


class TestCountedString:
    """CountedString ownership and editing."""

    def test_from_text_owns_buffer(self):
        """from_text copies into an owned buffer."""
        s = CountedString.from_text("hello")
        assert s.text == "hello"
        assert len(s) == 5
        assert s.length_allocated == 5
        assert s.memory_to_free is not None

    def test_constant_is_not_owned(self):
        """Constants wrap a literal without owning it."""
        s = CountedString.constant("abc")
        assert s == "abc"
        assert s.memory_to_free is None

    def test_init_empty(self):
        """Empty strings have no buffer."""
        s = CountedString.init_empty()
        assert len(s) == 0
        assert s.length_allocated == 0
        assert s.text == ""

    def test_view_shares_owner(self):
        """A view references the same buffer and owner."""
        s = CountedString.from_text("hello")
        v = s.view(1, 3)
        assert v.text == "ell"
        assert v.memory_to_free is s.memory_to_free
        assert v.length_allocated == 4

    def test_view_out_of_range(self):
        """Views must stay inside the string."""
        s = CountedString.from_text("abc")
        with pytest.raises(IndexError):
            s.view(2, 5)

    def test_set_text_grows(self):
        """set_text reallocates when the text does not fit."""
        s = CountedString.allocate(2)
        s.set_text("longer")
        assert s.text == "longer"
        assert s.length_allocated >= 6

    def test_set_text_reuses_allocation(self):
        """A shorter text keeps the existing allocation."""
        s = CountedString.allocate(10)
        buffer = s.memory_to_free
        s.set_text("abc")
        assert s.memory_to_free is buffer
        assert s.length_allocated == 10

    def test_free_contents(self):
        """free_contents returns to the empty state."""
        s = CountedString.from_text("abc")
        s.free_contents()
        assert len(s) == 0
        assert s.memory_to_free is None

    def test_getitem(self):
        """Indexing works from both ends."""
        s = CountedString.from_text("abc")
        assert s[0] == "a"
        assert s[-1] == "c"
        with pytest.raises(IndexError):
            s[3]

    def test_trim_spaces(self):
        """Leading and trailing blanks are dropped in place."""
        s = CountedString.from_text("  ab \t")
        s.trim_spaces()
        assert s.text == "ab"
        assert s.start == 2


class TestCompareAndSearch:
    """Comparison and character-class helpers."""

    def test_compare(self):
        assert CountedString.constant("a").compare("b") == -1
        assert CountedString.constant("b").compare("a") == 1
        assert CountedString.constant("a").compare(CountedString.constant("a")) == 0

    def test_compare_insensitive(self):
        """Case is ignored."""
        assert CountedString.constant("abc").compare_insensitive("ABC") == 0

    def test_compare_count(self):
        """Only the leading characters are compared."""
        assert CountedString.constant("abcdef").compare_count("abcxyz", 3) == 0
        assert CountedString.constant("ABCdef").compare_insensitive_count("abcxyz", 3) == 0

    def test_find(self):
        s = CountedString.constant("a.b.c")
        assert s.find_leftmost(".") == 1
        assert s.find_rightmost(".") == 3
        assert s.find_leftmost("x") == -1

    def test_count_containing(self):
        """Leading run lengths over a character set."""
        assert CountedString.constant("fs>=1").count_not_containing("&<>=!") == 2
        assert CountedString.constant(">=1").count_containing("&<>=!") == 2


class TestNumbers:
    """Number parsing and formatting."""

    def test_decimal(self):
        assert string_to_number("123") == (123, 3)

    def test_hex_prefix(self):
        assert string_to_number("0x1F") == (31, 4)

    def test_binary_and_octal(self):
        assert string_to_number("0b101") == (5, 5)
        assert string_to_number("0o17") == (15, 4)

    def test_negative_stops_at_non_digit(self):
        assert string_to_number("-12abc") == (-12, 3)

    def test_unsigned_ignores_minus(self):
        """A minus sign is not a number when unsigned."""
        assert string_to_number("-5", signed=False) == (0, 0)

    def test_no_number(self):
        assert string_to_number("abc") == (0, 0)

    def test_separators(self):
        assert string_to_number("1,024", ignore_separators=True) == (1024, 5)
        assert string_to_number("1,024") == (1, 1)

    def test_zero(self):
        assert string_to_number("0") == (0, 1)

    def test_decimal_string_to_int(self):
        assert decimal_string_to_int("42x") == 42
        assert decimal_string_to_int("x") == 0

    def test_number_to_string_grouping(self):
        assert number_to_string(1234567, digits_per_group=3) == "1,234,567"

    def test_number_to_string_hex_padded(self):
        assert number_to_string(255, base=16, min_width=4) == "00ff"

    def test_number_to_string_negative(self):
        assert number_to_string(-5) == "-5"

    def test_number_to_string_bad_base(self):
        with pytest.raises(ValueError):
            number_to_string(1, base=1)
