"""File filter and colour rule engine."""

from .catalogue import OPTIONS, FilterOption, find_option
from .compare import CompareResult
from .engine import (
    OPERATORS,
    ColorCriterion,
    FileFilter,
    FilterCriterion,
    filter_compile_color,
    filter_compile_filter,
    filter_eval_color,
    filter_eval_filter,
    filter_free,
)
from .help import filter_help, output_filter_help
from .info import CollectedInfo
from .pe import PeImageInfo, parse_version_info, read_pe_info

__all__ = [
    "OPERATORS",
    "OPTIONS",
    "CollectedInfo",
    "ColorCriterion",
    "CompareResult",
    "FileFilter",
    "FilterCriterion",
    "FilterOption",
    "PeImageInfo",
    "filter_compile_color",
    "filter_compile_filter",
    "filter_eval_color",
    "filter_eval_filter",
    "filter_free",
    "filter_help",
    "find_option",
    "output_filter_help",
    "parse_version_info",
    "read_pe_info",
]
