"""Parsers turning the value half of a filter element into a CollectedInfo.

Each generator stores the parsed value in the same field the matching
collector fills, and returns False when the text is not a valid value.
"""

import stat

from ..core.strconv import string_to_date, string_to_file_size, string_to_time
from ..core.strings import string_to_number
from . import pe
from .info import CollectedInfo

# effective permission bits (FILE_* access rights)
FILE_READ_DATA = 0x0001
FILE_WRITE_DATA = 0x0002
FILE_APPEND_DATA = 0x0004
FILE_EXECUTE = 0x0020
FILE_READ_ATTRIBUTES = 0x0080
FILE_WRITE_ATTRIBUTES = 0x0100
DELETE = 0x00010000

ATTRIBUTE_LETTERS = (
    ("A", stat.FILE_ATTRIBUTE_ARCHIVE),
    ("R", stat.FILE_ATTRIBUTE_READONLY),
    ("H", stat.FILE_ATTRIBUTE_HIDDEN),
    ("S", stat.FILE_ATTRIBUTE_SYSTEM),
    ("D", stat.FILE_ATTRIBUTE_DIRECTORY),
    ("C", stat.FILE_ATTRIBUTE_COMPRESSED),
    ("E", stat.FILE_ATTRIBUTE_ENCRYPTED),
    ("O", stat.FILE_ATTRIBUTE_OFFLINE),
    ("r", stat.FILE_ATTRIBUTE_REPARSE_POINT),
    ("s", stat.FILE_ATTRIBUTE_SPARSE_FILE),
    ("I", stat.FILE_ATTRIBUTE_INTEGRITY_STREAM),
)

PERMISSION_LETTERS = (
    ("R", FILE_READ_DATA),
    ("r", FILE_READ_ATTRIBUTES),
    ("W", FILE_WRITE_DATA),
    ("w", FILE_WRITE_ATTRIBUTES),
    ("A", FILE_APPEND_DATA),
    ("X", FILE_EXECUTE),
    ("D", DELETE),
)

ARCHITECTURES = {
    "none": 0,
    "i386": pe.IMAGE_FILE_MACHINE_I386,
    "amd64": pe.IMAGE_FILE_MACHINE_AMD64,
    "arm": pe.IMAGE_FILE_MACHINE_ARMNT,
    "arm64": pe.IMAGE_FILE_MACHINE_ARM64,
}

SUBSYSTEMS = {
    "none": 0,
    "nt": 1,
    "gui": 2,
    "cons": 3,
    "os2": 5,
    "os/2": 5,
    "posx": 7,
    "w9x": 8,
    "ce": 9,
    "efia": 10,
    "efib": 11,
    "efid": 12,
    "efir": 13,
    "xbox": 14,
    "boot": 16,
    "xbcc": 17,
}

# compression algorithms as reported by the compression collector
COMPRESSION_NONE = 0
COMPRESSION_LZNT = 1
COMPRESSION_NTFS = 2
COMPRESSION_WIM = 3
COMPRESSION_LZX = 4
COMPRESSION_XPRESS4K = 5
COMPRESSION_XPRESS8K = 6
COMPRESSION_XPRESS16K = 7
COMPRESSION_WOF_FILE = 8
COMPRESSION_WOF = 9

COMPRESSION_ALGORITHMS = {
    "none": COMPRESSION_NONE,
    "lznt": COMPRESSION_LZNT,
    "ntfs": COMPRESSION_NTFS,
    "wim": COMPRESSION_WIM,
    "lzx": COMPRESSION_LZX,
    "xp4": COMPRESSION_XPRESS4K,
    "xp8": COMPRESSION_XPRESS8K,
    "xp16": COMPRESSION_XPRESS16K,
    "file": COMPRESSION_WOF_FILE,
    "wof": COMPRESSION_WOF,
}


def letters_to_flags(text: str, table: tuple[tuple[str, int], ...]) -> int | None:
    """Or together the bits for each letter; exact case wins over a folded match."""
    exact = dict(table)
    folded: dict[str, int] = {}
    for letter, bit in table:
        folded.setdefault(letter.lower(), bit)
    flags = 0
    for ch in text:
        bit = exact.get(ch)
        if bit is None:
            bit = folded.get(ch.lower())
        if bit is None:
            return None
        flags |= bit
    return flags


def _number(text: str) -> int | None:
    value, consumed = string_to_number(text)
    if consumed == 0:
        return None
    return value


def _dotted(text: str, parts: int) -> list[int] | None:
    """Parse up to ``parts`` dot separated numbers, missing ones are zero."""
    values = []
    remaining = text
    while len(values) < parts:
        value, consumed = string_to_number(remaining)
        if consumed == 0:
            return None
        values.append(value & 0xFFFF)
        remaining = remaining[consumed:]
        if not remaining.startswith("."):
            break
        remaining = remaining[1:]
    return values + [0] * (parts - len(values))


def number_generator(field: str):
    """Generator for a plain numeric field."""

    def generate(info: CollectedInfo, text: str) -> bool:
        value = _number(text)
        if value is None:
            return False
        setattr(info, field, value)
        return True

    generate.__name__ = f"generate_{field}"
    return generate


def size_generator(field: str):
    """Generator for a byte count with an optional k/m/g/t suffix."""

    def generate(info: CollectedInfo, text: str) -> bool:
        value, consumed = string_to_file_size(text)
        if consumed == 0:
            return False
        setattr(info, field, value)
        return True

    generate.__name__ = f"generate_{field}"
    return generate


def text_generator(field: str):
    def generate(info: CollectedInfo, text: str) -> bool:
        setattr(info, field, text)
        return True

    generate.__name__ = f"generate_{field}"
    return generate


def date_generator(field: str):
    def generate(info: CollectedInfo, text: str) -> bool:
        parsed = string_to_date(text)
        if parsed is None:
            return False
        setattr(info, field, parsed[0])
        return True

    generate.__name__ = f"generate_{field}"
    return generate


def time_generator(field: str):
    def generate(info: CollectedInfo, text: str) -> bool:
        parsed = string_to_time(text)
        if parsed is None:
            return False
        setattr(info, field, parsed[0])
        return True

    generate.__name__ = f"generate_{field}"
    return generate


def name_generator(field: str, table: dict[str, int]):
    """Generator for a value written as one of a fixed set of names."""

    def generate(info: CollectedInfo, text: str) -> bool:
        value = table.get(text.lower())
        if value is None:
            return False
        setattr(info, field, value)
        return True

    generate.__name__ = f"generate_{field}"
    return generate


def generate_extension(info: CollectedInfo, text: str) -> bool:
    info.extension = text[1:] if text.startswith(".") else text
    return True


def generate_file_attributes(info: CollectedInfo, text: str) -> bool:
    flags = letters_to_flags(text, ATTRIBUTE_LETTERS)
    if flags is None:
        return False
    info.file_attributes = flags
    return True


def generate_effective_permissions(info: CollectedInfo, text: str) -> bool:
    flags = letters_to_flags(text, PERMISSION_LETTERS)
    if flags is None:
        return False
    info.effective_permissions = flags
    return True


def generate_os_version(info: CollectedInfo, text: str) -> bool:
    parts = _dotted(text, 2)
    if parts is None:
        return False
    info.os_version = (parts[0], parts[1])
    return True


def generate_version(info: CollectedInfo, text: str) -> bool:
    """``a.b.c.d`` packed as ((a << 16) | b, (c << 16) | d)."""
    parts = _dotted(text, 4)
    if parts is None:
        return False
    info.file_version = ((parts[0] << 16) | parts[1], (parts[2] << 16) | parts[3])
    return True


def generate_object_id(info: CollectedInfo, text: str) -> bool:
    """Hex digits, at most 16 bytes; a short value is zero padded."""
    digits = text.replace("-", "").replace("{", "").replace("}", "")
    if len(digits) % 2:
        digits += "0"
    try:
        value = bytes.fromhex(digits)
    except ValueError:
        return False
    if len(value) > 16:
        return False
    info.object_id = value.ljust(16, b"\0")
    return True
