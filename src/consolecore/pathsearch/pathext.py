"""Executable extension list (PATHEXT)."""

from collections.abc import Mapping
from dataclasses import dataclass

from .. import config
from ..core.environ import get_environment_variable
from ..fs import FileRecord


@dataclass
class PathExtComponent:
    """One extension slot, marked when a directory scan finds a match."""

    extension: str
    found: bool = False
    record: FileRecord | None = None

    def clear(self) -> None:
        self.found = False
        self.record = None


def get_pathext(environ: Mapping[str, str] | None = None) -> str:
    value = get_environment_variable("PATHEXT", environ)
    return value if value is not None else config.DEFAULT_PATHEXT


def build_pathext_components(environ: Mapping[str, str] | None = None) -> list[PathExtComponent]:
    """Extension slots in declared order, empty entries dropped."""
    return [PathExtComponent(ext.strip()) for ext in get_pathext(environ).split(";") if ext.strip()]
