"""PATH resolver

Finds an executable from a command name the way a command processor
does: try the current directory then each PATH directory, and in each
directory accept any extension listed in PATHEXT, earlier extensions
winning. Each directory is enumerated once with ``<stem>*`` and every
returned entry is matched against the extension slots.

In match-all mode a callback receives every hit instead of the search
stopping at the first. A stem ending in ``*`` accepts partial matches;
in match-all mode each partial match re-runs the full extension list on
the matched stem, so the same file can be reported more than once.
Callers that need unique results wrap their callback in
``dedupe_matches``.
"""

import glob
import os
from collections.abc import Callable, Mapping

from ..core.environ import get_environment_variable
from ..fs import FileRecord, enumerate_directory
from ..telemetry import get_logger, metrics
from .envsearch import MatchCallback, build_full_name, is_path_separator, search_env, split_path_variable
from .pathext import PathExtComponent, build_pathext_components

logger = get_logger(__name__)

EnumerateFn = Callable[[str, str], list[FileRecord]]


def dedupe_matches(callback: MatchCallback) -> MatchCallback:
    """Wrap a match-all callback so each path reaches it once (case-insensitive)."""
    seen: set[str] = set()

    def _dedupe(path: str) -> bool:
        key = path.casefold()
        if key in seen:
            return True
        seen.add(key)
        return callback(path)

    return _dedupe


def classify_query(query: str) -> tuple[bool, bool]:
    """(has_path, has_extension) for a command name.

    Scans right to left: a ``.`` before any separator is an extension, a
    separator or drive colon is a path.
    """
    has_path = False
    has_extension = False
    for ch in reversed(query):
        if is_path_separator(ch) or ch == ":":
            has_path = True
            break
        if ch == "." and not has_extension:
            has_extension = True
    return has_path, has_extension


class PathResolver:
    """Executable lookup over one environment.

    Args:
        environ: variables to read PATH and PATHEXT from, default os.environ
        enumerate_fn: directory enumerator, default fs.enumerate_directory
        exists_fn: existence probe for direct lookups, default os.path.exists
    """

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        enumerate_fn: EnumerateFn = enumerate_directory,
        exists_fn: Callable[[str], bool] = os.path.exists,
    ):
        self.environ = environ
        self._enumerate = enumerate_fn
        self._exists = exists_fn
        self._stopped = False

    @property
    def path_variable(self) -> str:
        return get_environment_variable("PATH", self.environ) or ""

    def locate_file_extensions_in_one_path(
        self,
        stem: str,
        directory: str,
        components: list[PathExtComponent],
        match_all: MatchCallback | None = None,
    ) -> str | None:
        """Enumerate ``directory`` once and resolve ``stem`` against the extension slots.

        Returns:
            first-match mode: the path for the earliest extension found, or None.
            match-all mode: the first path reported to the callback, or None.
        """
        partial = stem.endswith("*")
        if partial:
            stem = stem[:-1]
        for component in components:
            component.clear()

        try:
            records = self._enumerate(directory, glob.escape(stem) + "*")
        except OSError as e:
            metrics.inc("path.enumeration_failed")
            logger.warning(f"Skipping {directory}: {e}")
            return None

        first: str | None = None
        for record in records:
            name = record.name
            for component in components:
                if component.found:
                    continue
                ext = component.extension
                if len(name) <= len(ext) or name[-len(ext):].casefold() != ext.casefold():
                    continue
                child_stem = name[: -len(ext)]
                if partial and match_all is not None:
                    found = self.locate_file_extensions_in_one_path(
                        child_stem, directory, [PathExtComponent(c.extension) for c in components], match_all
                    )
                    if first is None:
                        first = found
                    if self._stopped:
                        return first
                elif len(child_stem) == len(stem):
                    component.found = True
                    component.record = record
                elif partial and component.record is None:
                    # held until an exact stem claims the slot
                    component.record = record

        for component in components:
            if component.record is None:
                continue
            path = build_full_name(directory, component.record.name)
            if match_all is None:
                return path
            if first is None:
                first = path
            if not match_all(path):
                self._stopped = True
                return first
        return first

    def locate_unknown_extension_unknown_location(
        self, stem: str, match_all: MatchCallback | None = None
    ) -> str | None:
        """Search the current directory, then PATH, trying every extension."""
        components = build_pathext_components(self.environ)
        first: str | None = None
        for directory in ["."] + split_path_variable(self.path_variable):
            found = self.locate_file_extensions_in_one_path(stem, directory, components, match_all)
            if first is None:
                first = found
            if self._stopped or (first is not None and match_all is None):
                break
        return first

    def locate_unknown_extension_known_location(
        self, query: str, match_all: MatchCallback | None = None
    ) -> str | None:
        """Search only the directory named in ``query``, trying every extension."""
        split = max(query.rfind("\\"), query.rfind("/"), query.rfind(":"))
        directory = query[: split + 1]
        stem = query[split + 1:]
        components = build_pathext_components(self.environ)
        return self.locate_file_extensions_in_one_path(stem, directory, components, match_all)

    def locate_known_extension_unknown_location(
        self, query: str, match_all: MatchCallback | None = None
    ) -> str | None:
        return search_env(query, self.path_variable, match_all, full_path=False, exists_fn=self._exists)

    def locate_executable_in_path(self, query: str, match_all: MatchCallback | None = None) -> str | None:
        """Resolve a command name to a file.

        Args:
            query: name as typed, with or without path and extension
            match_all: receives every match instead of stopping at the first;
                returning False ends the search

        Returns:
            the first match, or None
        """
        self._stopped = False
        has_path, has_extension = classify_query(query)

        if has_path and has_extension:
            if self._exists(query):
                if match_all is not None:
                    match_all(query)
                return query
            return self.locate_unknown_extension_known_location(query, match_all)

        if has_extension:
            found = self.locate_known_extension_unknown_location(query, match_all)
            if match_all is not None or found is None:
                other = self.locate_unknown_extension_unknown_location(query, match_all)
                if found is None:
                    found = other
            return found

        if has_path:
            return self.locate_unknown_extension_known_location(query, match_all)

        return self.locate_unknown_extension_unknown_location(query, match_all)


def locate_executable_in_path(
    query: str, match_all: MatchCallback | None = None, environ: Mapping[str, str] | None = None
) -> str | None:
    """Resolve ``query`` against the process (or supplied) environment."""
    return PathResolver(environ).locate_executable_in_path(query, match_all)


def find_all_executables(query: str, environ: Mapping[str, str] | None = None) -> list[str]:
    """Every distinct match for ``query``, in search order."""
    matches: list[str] = []

    def _collect(path: str) -> bool:
        matches.append(path)
        return True

    PathResolver(environ).locate_executable_in_path(query, dedupe_matches(_collect))
    return matches
