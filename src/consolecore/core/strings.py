"""Counted strings

A CountedString is a run of characters inside a backing buffer. It is
either an owner (``memory_to_free`` is its buffer), a view sharing an
owner's buffer, or a constant wrapping a literal it does not own. The
length in use and the allocated length are tracked separately so a
buffer can be refilled without reallocating.
"""

from __future__ import annotations

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


class CountedString:
    """Length-counted string over a shared character buffer.

    Attributes:
        start: offset of the first character in the backing buffer
        length_in_chars: characters currently in use
        length_allocated: characters available from ``start``
        memory_to_free: owning buffer, None for constants and empty strings
    """

    __slots__ = ("_buffer", "start", "length_in_chars", "length_allocated", "memory_to_free")

    def __init__(self):
        self._buffer: list[str] = []
        self.start = 0
        self.length_in_chars = 0
        self.length_allocated = 0
        self.memory_to_free: list[str] | None = None

    # --- construction -------------------------------------------------

    @classmethod
    def init_empty(cls) -> CountedString:
        return cls()

    @classmethod
    def allocate(cls, capacity: int) -> CountedString:
        """New owning string with room for ``capacity`` characters."""
        if capacity < 0:
            raise ValueError("capacity must be non-negative")
        s = cls()
        s._buffer = [""] * capacity
        s.memory_to_free = s._buffer
        s.length_allocated = capacity
        return s

    @classmethod
    def constant(cls, literal: str) -> CountedString:
        """Non-owning string over a literal."""
        s = cls()
        s._buffer = list(literal)
        s.length_in_chars = len(literal)
        s.length_allocated = len(literal)
        return s

    @classmethod
    def from_text(cls, text: str) -> CountedString:
        """Owning copy of ``text``."""
        s = cls.allocate(len(text))
        s.set_text(text)
        return s

    def view(self, offset: int, length: int | None = None) -> CountedString:
        """Substring sharing this string's buffer and owner."""
        if length is None:
            length = self.length_in_chars - offset
        if offset < 0 or length < 0 or offset + length > self.length_in_chars:
            raise IndexError("view out of range")
        s = CountedString()
        s._buffer = self._buffer
        s.start = self.start + offset
        s.length_in_chars = length
        s.length_allocated = self.length_allocated - offset
        s.memory_to_free = self.memory_to_free
        return s

    # --- buffer management --------------------------------------------

    def reallocate(self, new_capacity: int) -> None:
        """Move to a new owned buffer, keeping up to ``new_capacity`` characters."""
        keep = min(self.length_in_chars, new_capacity)
        buffer = self._buffer[self.start:self.start + keep] + [""] * (new_capacity - keep)
        self._buffer = buffer
        self.memory_to_free = buffer
        self.start = 0
        self.length_in_chars = keep
        self.length_allocated = new_capacity

    def free_contents(self) -> None:
        """Drop the reference to the buffer and return to the empty state."""
        self._buffer = []
        self.memory_to_free = None
        self.start = 0
        self.length_in_chars = 0
        self.length_allocated = 0

    def set_text(self, text: str) -> None:
        """Replace the contents, growing the buffer when it is too small."""
        if len(text) > self.length_allocated or self.memory_to_free is None:
            self.reallocate(max(len(text), self.length_allocated))
        self._buffer[self.start:self.start + len(text)] = list(text)
        self.length_in_chars = len(text)

    @property
    def text(self) -> str:
        return "".join(self._buffer[self.start:self.start + self.length_in_chars])

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"CountedString({self.text!r}, allocated={self.length_allocated})"

    def __len__(self) -> int:
        return self.length_in_chars

    def __getitem__(self, index: int) -> str:
        if index < 0:
            index += self.length_in_chars
        if not 0 <= index < self.length_in_chars:
            raise IndexError("CountedString index out of range")
        return self._buffer[self.start + index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, CountedString):
            return self.text == other.text
        if isinstance(other, str):
            return self.text == other
        return NotImplemented

    __hash__ = None  # mutable

    # --- comparison and search ----------------------------------------

    def compare(self, other: CountedString | str) -> int:
        return _cmp(self.text, _as_text(other))

    def compare_insensitive(self, other: CountedString | str) -> int:
        return _cmp(self.text.upper(), _as_text(other).upper())

    def compare_count(self, other: CountedString | str, count: int) -> int:
        """Compare at most ``count`` leading characters."""
        return _cmp(self.text[:count], _as_text(other)[:count])

    def compare_insensitive_count(self, other: CountedString | str, count: int) -> int:
        return _cmp(self.text[:count].upper(), _as_text(other)[:count].upper())

    def find_leftmost(self, ch: str) -> int:
        """Index of the first ``ch``, or -1."""
        return self.text.find(ch)

    def find_rightmost(self, ch: str) -> int:
        """Index of the last ``ch``, or -1."""
        return self.text.rfind(ch)

    def count_containing(self, chars: str) -> int:
        """Length of the leading run made only of characters in ``chars``."""
        count = 0
        for ch in self.text:
            if ch not in chars:
                break
            count += 1
        return count

    def count_not_containing(self, chars: str) -> int:
        """Length of the leading run free of characters in ``chars``."""
        count = 0
        for ch in self.text:
            if ch in chars:
                break
            count += 1
        return count

    def trim_spaces(self) -> None:
        """Drop leading and trailing spaces and tabs in place."""
        text = self.text
        leading = len(text) - len(text.lstrip(" \t"))
        stripped = text.strip(" \t")
        self.start += leading
        self.length_allocated -= leading
        self.length_in_chars = len(stripped)


def _as_text(value: CountedString | str) -> str:
    return value.text if isinstance(value, CountedString) else value


def _cmp(left: str, right: str) -> int:
    if left < right:
        return -1
    if left > right:
        return 1
    return 0


def string_to_number(
    value: CountedString | str, signed: bool = True, ignore_separators: bool = False
) -> tuple[int, int]:
    """Parse a leading integer.

    Recognises ``0x``, ``0n``, ``0o`` and ``0b`` radix prefixes. Each
    leading ``-`` flips the sign when ``signed`` is set. With
    ``ignore_separators`` commas between digits are skipped.

    Returns:
        (value, chars consumed). Zero chars consumed means no number.
    """
    text = _as_text(value)
    base = 10
    negative = False
    index = 0
    while index < len(text):
        if text[index] == "0" and index + 1 < len(text) and text[index + 1] in "xnob":
            base = {"x": 16, "n": 10, "o": 8, "b": 2}[text[index + 1]]
            index += 2
        elif text[index] == "-" and signed:
            negative = not negative
            index += 1
        else:
            break

    prefix_end = index
    result = 0
    while index < len(text):
        ch = text[index]
        if ignore_separators and ch == ",":
            index += 1
            continue
        digit = _DIGITS.find(ch.lower())
        if digit < 0 or digit >= base:
            break
        result = result * base + digit
        index += 1

    if index == prefix_end and not text[:prefix_end].startswith("0"):
        return 0, 0
    return (-result if negative else result), index


def decimal_string_to_int(value: CountedString | str) -> int:
    """Decimal digits only, stopping at the first non-digit; no digits is 0."""
    result = 0
    for ch in _as_text(value):
        if not "0" <= ch <= "9":
            break
        result = result * 10 + ord(ch) - ord("0")
    return result


def number_to_string(
    number: int,
    base: int = 10,
    min_width: int = 0,
    pad: str = "0",
    digits_per_group: int = 0,
    group_separator: str = ",",
) -> str:
    """Render an integer.

    Args:
        number: value to render
        base: radix between 2 and 36, lowercase digits
        min_width: pad the digits on the left to at least this width
        pad: padding character
        digits_per_group: insert ``group_separator`` every N digits, 0 for none
        group_separator: separator character
    """
    if not 2 <= base <= 36:
        raise ValueError(f"Unsupported base: {base}")
    negative = number < 0
    remaining = -number if negative else number
    digits: list[str] = []
    while True:
        digits.append(_DIGITS[remaining % base])
        remaining //= base
        if remaining == 0:
            break
    while len(digits) < min_width:
        digits.append(pad)

    out: list[str] = []
    for count, digit in enumerate(digits):
        if digits_per_group and count and count % digits_per_group == 0:
            out.append(group_separator)
        out.append(digit)
    if negative:
        out.append("-")
    return "".join(reversed(out))
