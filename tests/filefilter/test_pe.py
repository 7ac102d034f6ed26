"""Tests for filefilter/pe.py"""

import io
import struct

from consolecore.filefilter.pe import IMAGE_FILE_MACHINE_AMD64, parse_version_info, read_pe_info
from consolecore.fs import record_from_path
from consolecore.filefilter.engine import FileFilter


def version_block(key: str, value: bytes = b"", value_type: int = 0, children: bytes = b"") -> bytes:
    """One VS_VERSIONINFO style block, padded to a four byte boundary."""
    data = bytearray(6) + key.encode("utf-16-le") + b"\0\0"
    data += bytes(-len(data) % 4)
    data += value
    data += bytes(-len(data) % 4)
    data += children
    value_length = len(value) // 2 if value_type == 1 else len(value)
    struct.pack_into("<HHH", data, 0, len(data), value_length, value_type)
    return bytes(data + bytes(-len(data) % 4))


def version_resource(version=(1, 2, 3, 4), strings=None) -> bytes:
    strings = strings or {"FileVersion": "1.2.3.4", "FileDescription": "Test tool"}
    fixed = struct.pack(
        "<IIII",
        0xFEEF04BD,
        0x10000,
        (version[0] << 16) | version[1],
        (version[2] << 16) | version[3],
    ) + bytes(36)
    entries = b"".join(
        version_block(name, (text + "\0").encode("utf-16-le"), value_type=1) for name, text in strings.items()
    )
    table = version_block("040904b0", value_type=1, children=entries)
    string_info = version_block("StringFileInfo", value_type=1, children=table)
    return version_block("VS_VERSION_INFO", fixed, children=string_info)


def resource_tree(rva: int, blob: bytes) -> bytes:
    """type 16 -> name 1 -> language 0x409 -> data entry -> blob."""
    tree = bytearray(0x58)
    for offset, name, target in ((0, 16, 0x80000018), (0x18, 1, 0x80000030), (0x30, 0x409, 0x48)):
        struct.pack_into("<HH", tree, offset + 12, 0, 1)
        struct.pack_into("<II", tree, offset + 16, name, target)
    struct.pack_into("<II", tree, 0x48, rva + 0x58, len(blob))
    return bytes(tree) + blob


def build_image(machine=IMAGE_FILE_MACHINE_AMD64, subsystem=3, os_version=(6, 1), version_blob=None) -> bytes:
    """Minimal PE32+ image, optionally with a version resource."""
    optional = bytearray(240)
    struct.pack_into("<H", optional, 0, 0x20B)
    struct.pack_into("<HH", optional, 40, *os_version)
    struct.pack_into("<H", optional, 68, subsystem)
    struct.pack_into("<I", optional, 108, 16)

    sections = b""
    resources = b""
    if version_blob is not None:
        resources = resource_tree(0x1000, version_blob)
        struct.pack_into("<II", optional, 128, 0x1000, len(resources))
        sections = b".rsrc\0\0\0" + struct.pack("<IIII", len(resources), 0x1000, len(resources), 0x200) + bytes(16)

    header = bytearray(0x40)
    header[0:2] = b"MZ"
    struct.pack_into("<I", header, 0x3C, 0x40)
    coff = struct.pack("<HHIIIHH", machine, 1 if sections else 0, 0, 0, 0, len(optional), 0)
    image = bytes(header) + b"PE\0\0" + coff + bytes(optional) + sections
    if resources:
        image = image.ljust(0x200, b"\0") + resources
    return image


class TestReadPeInfo:
    def test_headers(self):
        info = read_pe_info(io.BytesIO(build_image()))
        assert info.machine == IMAGE_FILE_MACHINE_AMD64
        assert info.subsystem == 3
        assert info.os_version == (6, 1)
        assert info.file_version is None

    def test_not_an_image(self):
        assert read_pe_info(io.BytesIO(b"plain text file")) is None
        assert read_pe_info(io.BytesIO(b"MZ")) is None

    def test_bad_signature(self):
        image = bytearray(build_image())
        image[0x40:0x44] = b"NE\0\0"
        assert read_pe_info(io.BytesIO(bytes(image))) is None

    def test_version_resource(self):
        info = read_pe_info(io.BytesIO(build_image(version_blob=version_resource())))
        assert info.file_version == ((1 << 16) | 2, (3 << 16) | 4)
        assert info.version_strings["FileDescription"] == "Test tool"

    def test_headers_only(self):
        info = read_pe_info(io.BytesIO(build_image(version_blob=version_resource())), with_version=False)
        assert info.file_version is None
        assert info.version_strings == {}


class TestParseVersionInfo:
    def test_fixed_and_strings(self):
        file_version, strings = parse_version_info(version_resource((10, 0, 19041, 1)))
        assert file_version == ((10 << 16) | 0, (19041 << 16) | 1)
        assert strings == {"FileVersion": "1.2.3.4", "FileDescription": "Test tool"}

    def test_bad_signature(self):
        blob = bytearray(version_resource())
        # signature follows the 32 byte header of the root block
        struct.pack_into("<I", blob, 40, 0)
        file_version, strings = parse_version_info(bytes(blob))
        assert file_version is None
        assert strings["FileVersion"] == "1.2.3.4"

    def test_too_short(self):
        assert parse_version_info(b"\0\0") == (None, {})


class TestImageFilters:
    """Image attributes through compiled filters."""

    def test_architecture_subsystem_os(self, tmp_path):
        target = tmp_path / "tool.exe"
        target.write_bytes(build_image())
        record = record_from_path(str(target))
        file_filter = FileFilter()
        file_filter.compile_filter("ar=amd64;ss=cons;os>=6.0")
        assert file_filter.eval_filter(None, record)
        file_filter.compile_filter("os>=6.2")
        assert not file_filter.eval_filter(None, record)

    def test_version_and_description(self, tmp_path):
        target = tmp_path / "tool.exe"
        target.write_bytes(build_image(version_blob=version_resource()))
        record = record_from_path(str(target))
        file_filter = FileFilter()
        file_filter.compile_filter("vr>=1.2;vr<1.3;de=test tool;fv=1.2.3.4")
        assert file_filter.eval_filter(None, record)

    def test_non_image_reports_none(self, tmp_path):
        target = tmp_path / "notes.txt"
        target.write_text("hello")
        record = record_from_path(str(target))
        file_filter = FileFilter()
        file_filter.compile_filter("ar=none;vr=0")
        assert file_filter.eval_filter(None, record)
