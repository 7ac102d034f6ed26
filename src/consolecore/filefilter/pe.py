"""Executable image metadata

Reads the headers of a PE image (machine, subsystem, minimum OS version)
and its version resource (fixed file version plus the string table).
Works on any host; nothing here asks the OS to load the image.
"""

import struct
from dataclasses import dataclass, field
from typing import BinaryIO

IMAGE_FILE_MACHINE_I386 = 0x014C
IMAGE_FILE_MACHINE_AMD64 = 0x8664
IMAGE_FILE_MACHINE_ARMNT = 0x01C4
IMAGE_FILE_MACHINE_ARM64 = 0xAA64

_PE32_MAGIC = 0x10B
_PE32_PLUS_MAGIC = 0x20B
_RESOURCE_DIRECTORY_INDEX = 2
_RT_VERSION = 16
_FIXED_FILE_INFO_SIGNATURE = 0xFEEF04BD
_MAX_VERSION_RESOURCE = 1024 * 1024


@dataclass
class PeImageInfo:
    machine: int = 0
    subsystem: int = 0
    os_version: tuple[int, int] = (0, 0)
    file_version: tuple[int, int] | None = None
    version_strings: dict[str, str] = field(default_factory=dict)


@dataclass
class _Section:
    virtual_address: int
    virtual_size: int
    raw_size: int
    raw_pointer: int


def _read_at(f: BinaryIO, offset: int, size: int) -> bytes:
    f.seek(offset)
    data = f.read(size)
    if len(data) != size:
        raise ValueError("truncated image")
    return data


def _rva_to_offset(sections: list[_Section], rva: int) -> int | None:
    for section in sections:
        extent = max(section.virtual_size, section.raw_size)
        if section.virtual_address <= rva < section.virtual_address + extent:
            return rva - section.virtual_address + section.raw_pointer
    return None


def read_pe_info(f: BinaryIO, with_version: bool = True) -> PeImageInfo | None:
    """Parse an open image; None when it is not a PE file."""
    try:
        if _read_at(f, 0, 2) != b"MZ":
            return None
        (pe_offset,) = struct.unpack("<I", _read_at(f, 0x3C, 4))
        if _read_at(f, pe_offset, 4) != b"PE\0\0":
            return None
        machine, section_count, _, _, _, optional_size, _ = struct.unpack(
            "<HHIIIHH", _read_at(f, pe_offset + 4, 20)
        )
        optional_offset = pe_offset + 24
        optional = _read_at(f, optional_offset, optional_size)
    except (ValueError, struct.error):
        return None

    info = PeImageInfo(machine=machine)
    if len(optional) < 70:
        return info
    (magic,) = struct.unpack_from("<H", optional, 0)
    info.os_version = struct.unpack_from("<HH", optional, 40)
    (info.subsystem,) = struct.unpack_from("<H", optional, 68)
    if not with_version:
        return info

    if magic == _PE32_MAGIC:
        count_offset, directories_offset = 92, 96
    elif magic == _PE32_PLUS_MAGIC:
        count_offset, directories_offset = 108, 112
    else:
        return info
    if len(optional) < count_offset + 4:
        return info
    (directory_count,) = struct.unpack_from("<I", optional, count_offset)
    entry = directories_offset + _RESOURCE_DIRECTORY_INDEX * 8
    if directory_count <= _RESOURCE_DIRECTORY_INDEX or len(optional) < entry + 8:
        return info
    resource_rva, resource_size = struct.unpack_from("<II", optional, entry)
    if not resource_rva or not resource_size:
        return info

    try:
        sections = []
        table = _read_at(f, optional_offset + optional_size, section_count * 40)
        for index in range(section_count):
            vsize, va, raw_size, raw_pointer = struct.unpack_from("<IIII", table, index * 40 + 8)
            sections.append(_Section(va, vsize, raw_size, raw_pointer))
        block = _find_version_resource(f, sections, resource_rva)
    except (ValueError, struct.error):
        return info
    if block is not None:
        info.file_version, info.version_strings = parse_version_info(block)
    return info


def _first_entry(f: BinaryIO, base: int, offset: int, wanted_id: int | None = None) -> int | None:
    """OffsetToData of the first matching entry in a resource directory."""
    named, ids = struct.unpack("<HH", _read_at(f, base + offset + 12, 4))
    entries = _read_at(f, base + offset + 16, (named + ids) * 8)
    for index in range(named + ids):
        name, target = struct.unpack_from("<II", entries, index * 8)
        if wanted_id is not None and (name & 0x80000000 or name != wanted_id):
            continue
        return target
    return None


def _find_version_resource(f: BinaryIO, sections: list[_Section], resource_rva: int) -> bytes | None:
    base = _rva_to_offset(sections, resource_rva)
    if base is None:
        return None
    target = _first_entry(f, base, 0, _RT_VERSION)
    # type -> name -> language -> data entry
    for _ in range(2):
        if target is None or not target & 0x80000000:
            return None
        target = _first_entry(f, base, target & 0x7FFFFFFF)
    if target is None or target & 0x80000000:
        return None
    data_rva, size = struct.unpack("<II", _read_at(f, base + target, 8))
    data_offset = _rva_to_offset(sections, data_rva)
    if data_offset is None or size > _MAX_VERSION_RESOURCE:
        return None
    return _read_at(f, data_offset, size)


def _align4(offset: int) -> int:
    return (offset + 3) & ~3


def _parse_block(data: bytes, offset: int) -> tuple[str, bytes, int, list, int]:
    """Split one version block into (key, value, type, children, end)."""
    length, value_length, value_type = struct.unpack_from("<HHH", data, offset)
    end = min(offset + length, len(data))
    pos = offset + 6
    key_end = pos
    while key_end + 1 < end and data[key_end:key_end + 2] != b"\0\0":
        key_end += 2
    key = data[pos:key_end].decode("utf-16-le", errors="replace")
    pos = _align4(key_end + 2)
    value_size = value_length * 2 if value_type == 1 else value_length
    value = data[pos:pos + value_size]
    pos = _align4(pos + value_size)
    children = []
    while pos + 6 <= end:
        child = _parse_block(data, pos)
        if child[4] <= pos:
            break
        children.append(child)
        pos = _align4(child[4])
    return key, value, value_type, children, end


def parse_version_info(data: bytes) -> tuple[tuple[int, int] | None, dict[str, str]]:
    """Fixed file version (high, low) and string table of a VS_VERSIONINFO block."""
    if len(data) < 6:
        return None, {}
    _, value, _, children, _ = _parse_block(data, 0)

    file_version = None
    if len(value) >= 16:
        signature, _, version_ms, version_ls = struct.unpack_from("<IIII", value, 0)
        if signature == _FIXED_FILE_INFO_SIGNATURE:
            file_version = (version_ms, version_ls)

    strings: dict[str, str] = {}
    for key, _, _, tables, _ in children:
        if key != "StringFileInfo":
            continue
        for _, _, _, entries, _ in tables:
            for name, text, _, _, _ in entries:
                strings.setdefault(name, text.decode("utf-16-le", errors="replace").rstrip("\0"))
    return file_version, strings
