"""Comparators between a collected file attribute and a user value."""

import fnmatch
from collections.abc import Callable
from enum import IntEnum
from typing import Any

from .info import CollectedInfo


class CompareResult(IntEnum):
    LESS_THAN = 0
    EQUAL = 1
    GREATER_THAN = 2
    NOT_EQUAL = 3


Comparator = Callable[[CollectedInfo, CollectedInfo], CompareResult]


def compare_values(left: Any, right: Any) -> CompareResult:
    if left < right:
        return CompareResult.LESS_THAN
    if left > right:
        return CompareResult.GREATER_THAN
    return CompareResult.EQUAL


def ordered(field: str, key: Callable[[Any], Any] | None = None) -> Comparator:
    """Three-way comparison of one CollectedInfo field."""

    def compare(collected: CollectedInfo, rhs: CollectedInfo) -> CompareResult:
        left = getattr(collected, field)
        right = getattr(rhs, field)
        if key is not None:
            left, right = key(left), key(right)
        return compare_values(left, right)

    compare.__name__ = f"compare_{field}"
    return compare


def bitwise(field: str) -> Comparator:
    """EQUAL when every bit of the user value is set in the file's value."""

    def compare(collected: CollectedInfo, rhs: CollectedInfo) -> CompareResult:
        mask = getattr(rhs, field)
        if getattr(collected, field) & mask == mask:
            return CompareResult.EQUAL
        return CompareResult.NOT_EQUAL

    compare.__name__ = f"bitwise_{field}"
    return compare


def wildcard(field: str) -> Comparator:
    """EQUAL when the file's value matches the user's wildcard, ignoring case."""

    def compare(collected: CollectedInfo, rhs: CollectedInfo) -> CompareResult:
        if fnmatch.fnmatchcase(getattr(collected, field).casefold(), getattr(rhs, field).casefold()):
            return CompareResult.EQUAL
        return CompareResult.NOT_EQUAL

    compare.__name__ = f"wildcard_{field}"
    return compare
