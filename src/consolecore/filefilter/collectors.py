"""Collectors: fill a CollectedInfo from a file record and its path.

A collector returns True once its fields are filled. Attributes the host
file system does not have (short names, object ids and USNs off NTFS)
are reported as empty or zero. Attributes that exist but need a facility
this process lacks raise UnsupportedPlatformError; I/O failures raise
OSError. The engine turns either into a rejected record.
"""

import os
import struct
from collections.abc import Callable
from datetime import datetime

from .. import _win32
from .. import capabilities as caps
from ..fs import FileRecord
from ..telemetry import get_logger
from . import generators, pe
from .info import ZERO_DATE, ZERO_TIME, CollectedInfo

logger = get_logger(__name__)

Collector = Callable[[CollectedInfo, FileRecord, str], bool]

FS_IOC_FIEMAP = 0xC020660B
FIEMAP_FLAG_SYNC = 0x1
FSCTL_GET_COMPRESSION = 0x0009003C
FSCTL_GET_OBJECT_ID = 0x0009009C
FSCTL_GET_RETRIEVAL_POINTERS = 0x00090073
FSCTL_QUERY_ALLOCATED_RANGES = 0x000940CF
FSCTL_READ_FILE_USN_DATA = 0x000900EB
COMPRESSION_FORMAT_NONE = 0
COMPRESSION_FORMAT_LZNT1 = 2
_EXTENT_BUFFER = 64 * 1024


def _split_datetime(value: datetime | None):
    if value is None:
        return ZERO_DATE, ZERO_TIME
    return (value.year, value.month, value.day), (value.hour, value.minute, value.second)


def collect_file_name(info: CollectedInfo, record: FileRecord, path: str) -> bool:
    info.file_name = record.name
    dot = record.name.rfind(".")
    info.extension = record.name[dot + 1:] if dot >= 0 else ""
    return True


def collect_file_size(info: CollectedInfo, record: FileRecord, path: str) -> bool:
    info.file_size = record.size
    return True


def collect_allocation_size(info: CollectedInfo, record: FileRecord, path: str) -> bool:
    info.allocation_size = record.allocation_size
    return True


def collect_file_attributes(info: CollectedInfo, record: FileRecord, path: str) -> bool:
    info.file_attributes = record.attributes
    return True


def collect_file_id(info: CollectedInfo, record: FileRecord, path: str) -> bool:
    info.file_id = record.file_id
    return True


def collect_link_count(info: CollectedInfo, record: FileRecord, path: str) -> bool:
    info.link_count = record.link_count
    return True


def collect_reparse_tag(info: CollectedInfo, record: FileRecord, path: str) -> bool:
    info.reparse_tag = record.reparse_tag
    return True


def collect_access_time(info: CollectedInfo, record: FileRecord, path: str) -> bool:
    info.access_date, info.access_time = _split_datetime(record.access_time)
    return True


def collect_create_time(info: CollectedInfo, record: FileRecord, path: str) -> bool:
    info.create_date, info.create_time = _split_datetime(record.create_time)
    return True


def collect_write_time(info: CollectedInfo, record: FileRecord, path: str) -> bool:
    info.write_date, info.write_time = _split_datetime(record.write_time)
    return True


def collect_compressed_size(info: CollectedInfo, record: FileRecord, path: str) -> bool:
    if caps.has("compressed_file_size"):
        info.compressed_size = _win32.compressed_file_size(path)
    else:
        # blocks in use is what compression would shrink
        info.compressed_size = record.allocation_size
    return True


def _count_data_runs(path: str) -> int:
    """Number of allocated regions, walking SEEK_DATA / SEEK_HOLE."""
    fd = os.open(path, os.O_RDONLY)
    try:
        end = os.fstat(fd).st_size
        runs = 0
        offset = 0
        while offset < end:
            try:
                data = os.lseek(fd, offset, os.SEEK_DATA)
            except OSError:
                # ENXIO: nothing but a hole past offset
                break
            runs += 1
            offset = os.lseek(fd, data, os.SEEK_HOLE)
        return runs
    finally:
        os.close(fd)


def collect_allocated_range_count(info: CollectedInfo, record: FileRecord, path: str) -> bool:
    if record.is_directory or record.size == 0:
        info.allocated_range_count = 0
        return True
    if caps.has("device_io_control"):
        query = struct.pack("<qq", 0, record.size)
        ranges = _win32.device_io_control(path, FSCTL_QUERY_ALLOCATED_RANGES, query, _EXTENT_BUFFER)
        info.allocated_range_count = len(ranges) // 16
        return True
    caps.require("seek_data")
    info.allocated_range_count = _count_data_runs(path)
    return True


def _fiemap_extent_count(path: str) -> int:
    import fcntl

    # struct fiemap with fm_extent_count 0 asks only for the count
    request = bytearray(struct.pack("<QQIIII", 0, 0xFFFFFFFFFFFFFFFF, FIEMAP_FLAG_SYNC, 0, 0, 0))
    fd = os.open(path, os.O_RDONLY)
    try:
        fcntl.ioctl(fd, FS_IOC_FIEMAP, request, True)
    finally:
        os.close(fd)
    (mapped,) = struct.unpack_from("<I", request, 20)
    return mapped


def collect_fragment_count(info: CollectedInfo, record: FileRecord, path: str) -> bool:
    if record.is_directory or record.size == 0:
        info.fragment_count = 0
        return True
    if caps.has("device_io_control"):
        pointers = _win32.device_io_control(
            path, FSCTL_GET_RETRIEVAL_POINTERS, struct.pack("<q", 0), _EXTENT_BUFFER
        )
        info.fragment_count = struct.unpack_from("<I", pointers, 0)[0] if len(pointers) >= 4 else 0
        return True
    caps.require("fiemap")
    info.fragment_count = _fiemap_extent_count(path)
    return True


def collect_stream_count(info: CollectedInfo, record: FileRecord, path: str) -> bool:
    if caps.has("stream_enumeration"):
        info.stream_count = _win32.count_streams(path)
    else:
        info.stream_count = 0 if record.is_directory else 1
    return True


def collect_short_name(info: CollectedInfo, record: FileRecord, path: str) -> bool:
    if caps.has("short_names"):
        info.short_name = os.path.basename(_win32.short_path_name(path))
    else:
        info.short_name = record.short_name
    return True


def collect_owner(info: CollectedInfo, record: FileRecord, path: str) -> bool:
    caps.require("posix_owner")
    import pwd

    uid = os.lstat(path).st_uid
    try:
        info.owner = pwd.getpwuid(uid).pw_name
    except KeyError:
        info.owner = str(uid)
    return True


def collect_effective_permissions(info: CollectedInfo, record: FileRecord, path: str) -> bool:
    """Access this process has to the file, as FILE_* access bits."""
    permissions = 0
    if os.path.lexists(path):
        permissions |= generators.FILE_READ_ATTRIBUTES
    if os.access(path, os.R_OK):
        permissions |= generators.FILE_READ_DATA
    if os.access(path, os.W_OK):
        permissions |= (
            generators.FILE_WRITE_DATA | generators.FILE_APPEND_DATA | generators.FILE_WRITE_ATTRIBUTES
        )
    if os.access(path, os.X_OK):
        permissions |= generators.FILE_EXECUTE
    parent = os.path.dirname(os.path.abspath(path))
    if os.access(parent, os.W_OK):
        permissions |= generators.DELETE
    info.effective_permissions = permissions
    return True


def collect_object_id(info: CollectedInfo, record: FileRecord, path: str) -> bool:
    info.object_id = bytes(16)
    if not caps.has("device_io_control"):
        return True
    try:
        data = _win32.device_io_control(path, FSCTL_GET_OBJECT_ID, out_size=64)
    except OSError as e:
        # most files never had an object id assigned
        logger.debug(f"No object id for {path}: {e}")
        return True
    info.object_id = data[:16].ljust(16, b"\0")
    return True


def collect_usn(info: CollectedInfo, record: FileRecord, path: str) -> bool:
    info.usn = 0
    if not caps.has("device_io_control"):
        return True
    data = _win32.device_io_control(path, FSCTL_READ_FILE_USN_DATA, out_size=1024)
    if len(data) >= 32:
        (info.usn,) = struct.unpack_from("<q", data, 24)
    return True


def collect_compression_algorithm(info: CollectedInfo, record: FileRecord, path: str) -> bool:
    info.compression_algorithm = generators.COMPRESSION_NONE
    if not caps.has("device_io_control"):
        return True
    data = _win32.device_io_control(path, FSCTL_GET_COMPRESSION, out_size=2)
    if len(data) >= 2:
        (fmt,) = struct.unpack("<H", data[:2])
        if fmt == COMPRESSION_FORMAT_LZNT1:
            info.compression_algorithm = generators.COMPRESSION_LZNT
        elif fmt != COMPRESSION_FORMAT_NONE:
            info.compression_algorithm = generators.COMPRESSION_NTFS
    return True


def _read_image(record: FileRecord, path: str, with_version: bool) -> pe.PeImageInfo | None:
    if record.is_directory:
        return None
    try:
        with open(path, "rb") as f:
            return pe.read_pe_info(f, with_version=with_version)
    except OSError as e:
        logger.debug(f"Cannot read image {path}: {e}")
        return None


def collect_pe_headers(info: CollectedInfo, record: FileRecord, path: str) -> bool:
    """Architecture, subsystem and minimum OS version; zero for non-images."""
    image = _read_image(record, path, with_version=False)
    if image is None:
        info.architecture, info.subsystem, info.os_version = 0, 0, (0, 0)
        return True
    info.architecture = image.machine
    info.subsystem = image.subsystem
    info.os_version = image.os_version
    return True


def collect_version_info(info: CollectedInfo, record: FileRecord, path: str) -> bool:
    """Fixed file version plus FileVersion / FileDescription strings."""
    image = _read_image(record, path, with_version=True)
    if image is None:
        info.file_version, info.file_version_string, info.description = (0, 0), "", ""
        return True
    info.file_version = image.file_version or (0, 0)
    info.file_version_string = image.version_strings.get("FileVersion", "")
    info.description = image.version_strings.get("FileDescription", "")
    return True
