"""Parsing and formatting of file sizes, dates and times.

Dates and times are plain tuples, (year, month, day) and
(hour, minute, second), so they compare field by field. Components the
user leaves out are zero.
"""

from .strings import string_to_number

_SIZE_SUFFIXES = "bkmgt"


def string_to_file_size(text: str) -> tuple[int, int]:
    """Parse a size such as ``"512"``, ``"4k"`` or ``"1,024M"``.

    Returns:
        (bytes, chars consumed); zero consumed means no number was found
    """
    value, consumed = string_to_number(text, signed=False, ignore_separators=True)
    if consumed == 0:
        return 0, 0
    if consumed < len(text):
        power = _SIZE_SUFFIXES.find(text[consumed].lower())
        if power >= 0:
            value <<= 10 * power
            consumed += 1
    return value, consumed


def file_size_to_string(size: int) -> str:
    """Render a size into at most five characters, e.g. ``"1023b"`` or ``"1.5m"``."""
    suffix_index = 0
    whole = size
    fraction = 0
    while whole >= 1024 and suffix_index < len(_SIZE_SUFFIXES) - 1:
        fraction = ((whole % 1024) * 10) // 1024
        whole //= 1024
        suffix_index += 1
    suffix = _SIZE_SUFFIXES[suffix_index]
    if suffix_index and whole < 10:
        return f"{whole:2d}.{fraction:1d}{suffix}"
    return f"{whole:4d}{suffix}"


def string_to_date(text: str) -> tuple[tuple[int, int, int], int] | None:
    """Parse ``Y[/-M[/-D]]``; two digit years are taken as 20xx.

    Returns:
        ((year, month, day), chars consumed) or None
    """
    parts: list[int] = []
    index = 0
    while len(parts) < 3:
        value, consumed = string_to_number(text[index:], signed=False)
        if consumed == 0:
            if not parts:
                return None
            # separator not followed by a number
            index -= 1
            break
        parts.append(value)
        index += consumed
        if len(parts) == 3 or index >= len(text) or text[index] not in "/-":
            break
        index += 1
    if parts[0] < 100:
        parts[0] += 2000
    while len(parts) < 3:
        parts.append(0)
    return (parts[0], parts[1], parts[2]), index


def string_to_time(text: str) -> tuple[tuple[int, int, int], int] | None:
    """Parse ``H[:M[:S]]``.

    Returns:
        ((hour, minute, second), chars consumed) or None
    """
    parts: list[int] = []
    index = 0
    while len(parts) < 3:
        value, consumed = string_to_number(text[index:], signed=False)
        if consumed == 0:
            if not parts:
                return None
            index -= 1
            break
        parts.append(value)
        index += consumed
        if len(parts) == 3 or index >= len(text) or text[index] != ":":
            break
        index += 1
    while len(parts) < 3:
        parts.append(0)
    return (parts[0], parts[1], parts[2]), index


def string_to_date_time(text: str) -> tuple[int, int, int, int, int, int] | None:
    """Parse ``date:time``, e.g. ``2024/03/01:13:30``; the time part is optional."""
    date = string_to_date(text)
    if date is None:
        return None
    (year, month, day), consumed = date
    hour = minute = second = 0
    if consumed < len(text) and text[consumed] == ":":
        parsed = string_to_time(text[consumed + 1:])
        if parsed is None:
            return None
        (hour, minute, second), _ = parsed
    return year, month, day, hour, minute, second
