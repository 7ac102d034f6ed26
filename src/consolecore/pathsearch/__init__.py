"""Executable and search-path resolution."""

from .envsearch import build_full_name, search_env, split_path_variable
from .pathext import PathExtComponent, build_pathext_components, get_pathext
from .resolver import (
    PathResolver,
    classify_query,
    dedupe_matches,
    find_all_executables,
    locate_executable_in_path,
)

__all__ = [
    "PathExtComponent",
    "PathResolver",
    "build_full_name",
    "build_pathext_components",
    "classify_query",
    "dedupe_matches",
    "find_all_executables",
    "get_pathext",
    "locate_executable_in_path",
    "search_env",
    "split_path_variable",
]
