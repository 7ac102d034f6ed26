"""File-info records and directory enumeration."""

import fnmatch
import os
import stat
from dataclasses import dataclass
from datetime import datetime

from .telemetry import get_logger, metrics

logger = get_logger(__name__)

IO_REPARSE_TAG_SYMLINK = 0xA000000C


@dataclass
class FileRecord:
    """One entry returned by a directory enumeration.

    Attributes:
        name: entry name without directory
        path: full path, when the entry came from the file system
        attributes: FILE_ATTRIBUTE_* bits (synthesised on POSIX)
        size: logical size in bytes
        allocation_size: bytes allocated on disk
        access_time, create_time, write_time: local timestamps
        reparse_tag: reparse tag, 0 for ordinary files
        short_name: 8.3 alias, empty when the volume has none
        file_id: file system identifier (inode number)
        link_count: hard link count
    """

    name: str
    path: str | None = None
    attributes: int = 0
    size: int = 0
    allocation_size: int = 0
    access_time: datetime | None = None
    create_time: datetime | None = None
    write_time: datetime | None = None
    reparse_tag: int = 0
    short_name: str = ""
    file_id: int = 0
    link_count: int = 1

    @property
    def is_directory(self) -> bool:
        return bool(self.attributes & stat.FILE_ATTRIBUTE_DIRECTORY)


def _posix_attributes(name: str, st: os.stat_result) -> int:
    attributes = 0
    if stat.S_ISDIR(st.st_mode):
        attributes |= stat.FILE_ATTRIBUTE_DIRECTORY
    if stat.S_ISLNK(st.st_mode):
        attributes |= stat.FILE_ATTRIBUTE_REPARSE_POINT
    if not st.st_mode & stat.S_IWUSR:
        attributes |= stat.FILE_ATTRIBUTE_READONLY
    if name.startswith(".") and name not in (".", ".."):
        attributes |= stat.FILE_ATTRIBUTE_HIDDEN
    blocks = getattr(st, "st_blocks", None)
    if stat.S_ISREG(st.st_mode) and blocks is not None and blocks * 512 < st.st_size:
        attributes |= stat.FILE_ATTRIBUTE_SPARSE_FILE
    if not attributes:
        attributes = stat.FILE_ATTRIBUTE_NORMAL
    return attributes


def record_from_stat(name: str, path: str | None, st: os.stat_result) -> FileRecord:
    """Build a FileRecord from stat results."""
    attributes = getattr(st, "st_file_attributes", None)
    if attributes is None:
        attributes = _posix_attributes(name, st)
    reparse_tag = getattr(st, "st_reparse_tag", 0)
    if not reparse_tag and stat.S_ISLNK(st.st_mode):
        reparse_tag = IO_REPARSE_TAG_SYMLINK
    blocks = getattr(st, "st_blocks", None)
    allocation_size = blocks * 512 if blocks is not None else st.st_size
    birth = getattr(st, "st_birthtime", None)
    return FileRecord(
        name=name,
        path=path,
        attributes=attributes,
        size=st.st_size,
        allocation_size=allocation_size,
        access_time=datetime.fromtimestamp(st.st_atime),
        create_time=datetime.fromtimestamp(birth if birth is not None else st.st_ctime),
        write_time=datetime.fromtimestamp(st.st_mtime),
        reparse_tag=reparse_tag,
        file_id=st.st_ino,
        link_count=st.st_nlink,
    )


def record_from_path(path: str) -> FileRecord:
    """Stat ``path`` without following a final symlink."""
    st = os.lstat(path)
    return record_from_stat(os.path.basename(os.path.normpath(path)), path, st)


def enumerate_directory(directory: str, pattern: str) -> list[FileRecord]:
    """Entries of ``directory`` whose names match ``pattern``.

    Matching is case-insensitive and results are ordered by case-folded
    name, the order an NTFS enumeration returns.

    Raises:
        OSError: the directory cannot be read
    """
    metrics.inc("path.enumerations")
    folded = pattern.casefold()
    records: list[FileRecord] = []
    with os.scandir(directory or ".") as it:
        for entry in it:
            if not fnmatch.fnmatchcase(entry.name.casefold(), folded):
                continue
            try:
                st = entry.stat(follow_symlinks=False)
            except OSError as e:
                logger.debug(f"Skipping {entry.path}: {e}")
                continue
            records.append(record_from_stat(entry.name, entry.path, st))
    records.sort(key=lambda r: r.name.casefold())
    return records
