"""Search-path helpers

Splitting of semicolon separated directory lists and a probe for a fully
named file along such a list.
"""

import os
from collections.abc import Callable

from ..telemetry import get_logger

logger = get_logger(__name__)

MatchCallback = Callable[[str], bool]

_SEPARATORS = "\\/"


def split_path_variable(value: str) -> list[str]:
    """Directories in a search-path value.

    Elements are separated by ``;``. An element starting with ``"`` runs
    to the next ``"``, so it may contain ``;``. Empty elements are
    skipped.
    """
    directories: list[str] = []
    index = 0
    length = len(value)
    while index < length:
        if value[index] == ";":
            index += 1
            continue
        if value[index] == '"':
            close = value.find('"', index + 1)
            if close < 0:
                close = length
            element = value[index + 1:close]
            index = close + 1
            # anything between the closing quote and the next ';' belongs to it
            end = value.find(";", index)
            if end < 0:
                end = length
            element += value[index:end]
            index = end
        else:
            end = value.find(";", index)
            if end < 0:
                end = length
            element = value[index:end]
            index = end
        if element:
            directories.append(element)
    return directories


def is_path_separator(ch: str) -> bool:
    return ch in _SEPARATORS


def build_full_name(directory: str, name: str) -> str:
    """Join a directory and a name.

    No separator is added after a bare drive (``C:`` means that drive's
    current directory, ``C:\\`` its root) or after a trailing separator.
    """
    if not directory:
        return name
    if (len(directory) == 2 and directory[1] == ":") or is_path_separator(directory[-1]):
        return directory + name
    separator = "\\" if "\\" in directory else os.sep
    return directory + separator + name


def search_env(
    filename: str,
    env_data: str,
    match_all: MatchCallback | None = None,
    full_path: bool = True,
    exists_fn: Callable[[str], bool] = os.path.exists,
) -> str | None:
    """Probe the current directory, then each directory in ``env_data``.

    Args:
        filename: name to look for, including any extension
        env_data: semicolon separated directory list (e.g. a PATH value)
        match_all: called with every hit; returning False stops the search
        full_path: return absolute paths for current-directory hits
        exists_fn: existence probe, default os.path.exists

    Returns:
        the first hit, or None
    """
    first: str | None = None

    candidates = [filename]
    candidates.extend(build_full_name(directory, filename) for directory in split_path_variable(env_data))
    for index, candidate in enumerate(candidates):
        if not exists_fn(candidate):
            continue
        if index == 0 and full_path:
            candidate = os.path.abspath(candidate)
        logger.debug(f"Found {candidate}")
        if first is None:
            first = candidate
        if match_all is None:
            return first
        if not match_all(candidate):
            break
    return first
