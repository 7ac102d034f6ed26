"""Tests for pathsearch/resolver.py"""

import fnmatch
import os

import pytest

from consolecore.fs import FileRecord
from consolecore.pathsearch.resolver import (
    PathResolver,
    classify_query,
    dedupe_matches,
    find_all_executables,
)
from consolecore.telemetry import metrics


def fake_tree(tree: dict[str, list[str]]):
    """Directory enumerator over an in-memory tree."""

    def enumerate_fn(directory: str, pattern: str) -> list[FileRecord]:
        names = sorted(tree.get(directory, []), key=str.casefold)
        return [FileRecord(name) for name in names if fnmatch.fnmatchcase(name.casefold(), pattern.casefold())]

    return enumerate_fn


def collector():
    found: list[str] = []

    def callback(path: str) -> bool:
        found.append(path)
        return True

    return found, callback


class TestClassifyQuery:
    @pytest.mark.parametrize(
        "query,expected",
        [
            ("tool", (False, False)),
            ("tool.exe", (False, True)),
            ("dir\\tool", (True, False)),
            ("C:tool.exe", (True, True)),
            ("a.b\\tool", (True, False)),
            ("a/tool.exe", (True, True)),
        ],
    )
    def test_classify(self, query, expected):
        assert classify_query(query) == expected


class TestUnknownLocation:
    """Search of the current directory and PATH."""

    def test_later_path_directory(self):
        environ = {"PATH": "C:\\a;C:\\b", "PATHEXT": ".com;.exe"}
        resolver = PathResolver(environ, fake_tree({"C:\\b": ["tool.exe"]}))
        assert resolver.locate_executable_in_path("tool") == "C:\\b\\tool.exe"

    def test_pathext_order_wins(self):
        tree = {"C:\\bin": ["tool.exe", "tool.com"]}
        resolver = PathResolver({"PATH": "C:\\bin", "PATHEXT": ".com;.exe"}, fake_tree(tree))
        assert resolver.locate_executable_in_path("tool") == "C:\\bin\\tool.com"
        resolver = PathResolver({"PATH": "C:\\bin", "PATHEXT": ".exe;.com"}, fake_tree(tree))
        assert resolver.locate_executable_in_path("tool") == "C:\\bin\\tool.exe"

    def test_extension_match_ignores_case(self):
        resolver = PathResolver({"PATH": "C:\\bin", "PATHEXT": ".exe"}, fake_tree({"C:\\bin": ["Tool.EXE"]}))
        assert resolver.locate_executable_in_path("tool") == "C:\\bin\\Tool.EXE"

    def test_current_directory_first(self):
        tree = {".": ["tool.exe"], "C:\\bin": ["tool.exe"]}
        resolver = PathResolver({"PATH": "C:\\bin", "PATHEXT": ".exe"}, fake_tree(tree))
        assert resolver.locate_executable_in_path("tool") == os.path.join(".", "tool.exe")

    def test_longer_names_are_not_matches(self):
        resolver = PathResolver({"PATH": "C:\\bin", "PATHEXT": ".exe"}, fake_tree({"C:\\bin": ["toolbox.exe"]}))
        assert resolver.locate_executable_in_path("tool") is None

    def test_not_found(self):
        resolver = PathResolver({"PATH": "C:\\a", "PATHEXT": ".exe"}, fake_tree({}))
        assert resolver.locate_executable_in_path("tool") is None

    def test_unreadable_directory_skipped(self):
        tree = fake_tree({"C:\\b": ["tool.exe"]})

        def enumerate_fn(directory, pattern):
            if directory == "C:\\a":
                raise PermissionError("denied")
            return tree(directory, pattern)

        resolver = PathResolver({"PATH": "C:\\a;C:\\b", "PATHEXT": ".exe"}, enumerate_fn)
        assert resolver.locate_executable_in_path("tool") == "C:\\b\\tool.exe"
        assert metrics.get_counter("path.enumeration_failed") == 1


class TestPartialStem:
    """A trailing '*' accepts any stem with the prefix."""

    TREE = {".": ["foo.exe", "foobar.exe", "foo.bat"]}
    ENVIRON = {"PATH": "", "PATHEXT": ".com;.exe;.bat;.cmd"}

    def here(self, name: str) -> str:
        return os.path.join(".", name)

    def test_first_match(self):
        resolver = PathResolver(self.ENVIRON, fake_tree(self.TREE))
        assert resolver.locate_executable_in_path("foo") == self.here("foo.exe")
        assert resolver.locate_executable_in_path("foo*") == self.here("foo.exe")

    def test_exact_stem_preferred(self):
        """An exact stem wins its slot even when a longer name sorts first."""
        resolver = PathResolver(self.ENVIRON, fake_tree({".": ["foo-x.exe", "foo.exe"]}))
        assert resolver.locate_executable_in_path("foo*") == self.here("foo.exe")

    def test_partial_only(self):
        resolver = PathResolver(self.ENVIRON, fake_tree({".": ["foobar.bat", "foobar.exe"]}))
        assert resolver.locate_executable_in_path("foo*") == self.here("foobar.exe")

    def test_match_all_reports_duplicates(self):
        """Every partial match re-resolves its own stem."""
        found, callback = collector()
        PathResolver(self.ENVIRON, fake_tree(self.TREE)).locate_executable_in_path("foo*", callback)
        assert found == [self.here(n) for n in ("foo.exe", "foo.bat", "foo.exe", "foo.bat", "foobar.exe")]

    def test_match_all_deduped(self):
        found, callback = collector()
        PathResolver(self.ENVIRON, fake_tree(self.TREE)).locate_executable_in_path("foo*", dedupe_matches(callback))
        assert found == [self.here(n) for n in ("foo.exe", "foo.bat", "foobar.exe")]

    def test_match_all_stops(self):
        found: list[str] = []

        def stop_after_first(path: str) -> bool:
            found.append(path)
            return False

        result = PathResolver(self.ENVIRON, fake_tree(self.TREE)).locate_executable_in_path("foo*", stop_after_first)
        assert result == self.here("foo.exe")
        assert found == [self.here("foo.exe")]


class TestKnownLocation:
    def test_directory_in_query(self):
        resolver = PathResolver({"PATHEXT": ".exe"}, fake_tree({"C:\\b\\": ["tool.exe"]}))
        assert resolver.locate_executable_in_path("C:\\b\\tool") == "C:\\b\\tool.exe"

    def test_drive_relative(self):
        """No separator is added after a bare drive."""
        resolver = PathResolver({"PATHEXT": ".exe"}, fake_tree({"C:": ["tool.exe"]}))
        assert resolver.locate_executable_in_path("C:tool") == "C:tool.exe"

    def test_known_extension_uses_exists_fn(self):
        """A name with an extension is probed along PATH through the resolver's probe."""
        environ = {"PATH": "C:\\a;C:\\b", "PATHEXT": ".exe"}
        resolver = PathResolver(environ, fake_tree({}), exists_fn=lambda path: path == "C:\\b\\tool.exe")
        assert resolver.locate_executable_in_path("tool.exe") == "C:\\b\\tool.exe"

    def test_full_name_exists(self):
        found, callback = collector()
        resolver = PathResolver({}, fake_tree({}), exists_fn=lambda path: True)
        assert resolver.locate_executable_in_path("C:\\b\\tool.exe", callback) == "C:\\b\\tool.exe"
        assert found == ["C:\\b\\tool.exe"]


class TestFileSystem:
    """Resolution against real directories."""

    def test_known_extension_on_path(self, tmp_path, monkeypatch):
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir()
        (bin_dir / "tool.exe").write_bytes(b"")
        monkeypatch.chdir(tmp_path)
        resolver = PathResolver({"PATH": str(bin_dir), "PATHEXT": ".exe"})
        assert resolver.locate_executable_in_path("tool.exe") == os.path.join(str(bin_dir), "tool.exe")

    def test_find_all_executables(self, tmp_path, monkeypatch):
        for name in ("foo.exe", "foo.bat", "other.exe"):
            (tmp_path / name).write_bytes(b"")
        monkeypatch.chdir(tmp_path)
        matches = find_all_executables("foo", environ={"PATH": "", "PATHEXT": ".exe;.bat"})
        assert matches == [os.path.join(".", "foo.exe"), os.path.join(".", "foo.bat")]
