"""Holder for attributes gathered while evaluating a filter.

One CollectedInfo is filled per file by the collectors, and one per
criterion holds the parsed right-hand side, so comparators always see
two values of the same shape.
"""

from dataclasses import dataclass, field

Date = tuple[int, int, int]
Time = tuple[int, int, int]

ZERO_DATE: Date = (0, 0, 0)
ZERO_TIME: Time = (0, 0, 0)


@dataclass
class CollectedInfo:
    file_name: str = ""
    extension: str = ""
    short_name: str = ""
    file_size: int = 0
    allocation_size: int = 0
    compressed_size: int = 0
    allocated_range_count: int = 0
    fragment_count: int = 0
    link_count: int = 0
    stream_count: int = 0
    file_id: int = 0
    usn: int = 0
    reparse_tag: int = 0
    file_attributes: int = 0
    effective_permissions: int = 0
    compression_algorithm: int = 0
    access_date: Date = ZERO_DATE
    access_time: Time = ZERO_TIME
    create_date: Date = ZERO_DATE
    create_time: Time = ZERO_TIME
    write_date: Date = ZERO_DATE
    write_time: Time = ZERO_TIME
    architecture: int = 0
    subsystem: int = 0
    os_version: tuple[int, int] = (0, 0)
    file_version: tuple[int, int] = (0, 0)  # (high, low) as packed in the version resource
    file_version_string: str = ""
    description: str = ""
    owner: str = ""
    object_id: bytes = field(default=bytes(16))

    def reset(self) -> None:
        """Clear every field for the next file."""
        self.__init__()
