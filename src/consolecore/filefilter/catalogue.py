"""The closed set of attributes a filter expression can test."""

from dataclasses import dataclass
from collections.abc import Callable

from . import collectors as c
from . import generators as g
from .compare import Comparator, bitwise, ordered, wildcard
from .info import CollectedInfo

Generator = Callable[[CollectedInfo, str], bool]


@dataclass(frozen=True)
class FilterOption:
    """One two-letter attribute.

    Options sharing a collector (access date and access time, say) are
    filled by a single call per file.
    """

    tag: str
    name: str
    collect: c.Collector
    compare: Comparator
    bitwise_compare: Comparator | None
    generate: Generator


def _casefold(value: str) -> str:
    return value.casefold()


OPTIONS: tuple[FilterOption, ...] = (
    FilterOption("ac", "allocated range count", c.collect_allocated_range_count,
                 ordered("allocated_range_count"), None, g.number_generator("allocated_range_count")),
    FilterOption("ad", "access date", c.collect_access_time,
                 ordered("access_date"), None, g.date_generator("access_date")),
    FilterOption("ar", "CPU architecture", c.collect_pe_headers,
                 ordered("architecture"), None, g.name_generator("architecture", g.ARCHITECTURES)),
    FilterOption("as", "allocation size", c.collect_allocation_size,
                 ordered("allocation_size"), None, g.size_generator("allocation_size")),
    FilterOption("at", "access time", c.collect_access_time,
                 ordered("access_time"), None, g.time_generator("access_time")),
    FilterOption("ca", "compression algorithm", c.collect_compression_algorithm,
                 ordered("compression_algorithm"), None,
                 g.name_generator("compression_algorithm", g.COMPRESSION_ALGORITHMS)),
    FilterOption("cd", "create date", c.collect_create_time,
                 ordered("create_date"), None, g.date_generator("create_date")),
    FilterOption("cs", "compressed size", c.collect_compressed_size,
                 ordered("compressed_size"), None, g.size_generator("compressed_size")),
    FilterOption("ct", "create time", c.collect_create_time,
                 ordered("create_time"), None, g.time_generator("create_time")),
    FilterOption("de", "description", c.collect_version_info,
                 ordered("description", _casefold), None, g.text_generator("description")),
    FilterOption("ep", "effective permissions", c.collect_effective_permissions,
                 ordered("effective_permissions"), bitwise("effective_permissions"),
                 g.generate_effective_permissions),
    FilterOption("fa", "file attributes", c.collect_file_attributes,
                 ordered("file_attributes"), bitwise("file_attributes"), g.generate_file_attributes),
    FilterOption("fc", "fragment count", c.collect_fragment_count,
                 ordered("fragment_count"), None, g.number_generator("fragment_count")),
    FilterOption("fe", "file extension", c.collect_file_name,
                 ordered("extension", _casefold), wildcard("extension"), g.generate_extension),
    FilterOption("fi", "file id", c.collect_file_id,
                 ordered("file_id"), None, g.number_generator("file_id")),
    FilterOption("fn", "file name", c.collect_file_name,
                 ordered("file_name", _casefold), wildcard("file_name"), g.text_generator("file_name")),
    FilterOption("fs", "file size", c.collect_file_size,
                 ordered("file_size"), None, g.size_generator("file_size")),
    FilterOption("fv", "file version string", c.collect_version_info,
                 ordered("file_version_string", _casefold), None, g.text_generator("file_version_string")),
    FilterOption("lc", "link count", c.collect_link_count,
                 ordered("link_count"), None, g.number_generator("link_count")),
    FilterOption("oi", "object id", c.collect_object_id,
                 ordered("object_id"), None, g.generate_object_id),
    FilterOption("os", "minimum OS version", c.collect_pe_headers,
                 ordered("os_version"), None, g.generate_os_version),
    FilterOption("ow", "owner", c.collect_owner,
                 ordered("owner", _casefold), None, g.text_generator("owner")),
    FilterOption("rt", "reparse tag", c.collect_reparse_tag,
                 ordered("reparse_tag"), None, g.number_generator("reparse_tag")),
    FilterOption("sc", "stream count", c.collect_stream_count,
                 ordered("stream_count"), None, g.number_generator("stream_count")),
    FilterOption("sn", "short name", c.collect_short_name,
                 ordered("short_name", _casefold), None, g.text_generator("short_name")),
    FilterOption("ss", "subsystem", c.collect_pe_headers,
                 ordered("subsystem"), None, g.name_generator("subsystem", g.SUBSYSTEMS)),
    FilterOption("us", "USN", c.collect_usn,
                 ordered("usn"), None, g.number_generator("usn")),
    FilterOption("vr", "version", c.collect_version_info,
                 ordered("file_version"), None, g.generate_version),
    FilterOption("wd", "write date", c.collect_write_time,
                 ordered("write_date"), None, g.date_generator("write_date")),
    FilterOption("wt", "write time", c.collect_write_time,
                 ordered("write_time"), None, g.time_generator("write_time")),
)

_BY_TAG = {option.tag: option for option in OPTIONS}


def find_option(tag: str) -> FilterOption | None:
    """Look up an attribute by its two-letter tag, ignoring case."""
    return _BY_TAG.get(tag.lower())
