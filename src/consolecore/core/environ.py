"""Environment variable access with case-insensitive names."""

import os
from collections.abc import Mapping

from .strings import string_to_number


def get_environment_variable(name: str, environ: Mapping[str, str] | None = None) -> str | None:
    """Look up ``name`` ignoring case; exact-case matches win.

    Args:
        name: variable name
        environ: mapping to search, defaults to os.environ
    """
    env = os.environ if environ is None else environ
    value = env.get(name)
    if value is not None:
        return value
    upper = name.upper()
    for key, candidate in env.items():
        if key.upper() == upper:
            return candidate
    return None


def get_environment_variable_as_number(name: str, environ: Mapping[str, str] | None = None) -> int | None:
    """Numeric value of a variable, or None if unset or not a number."""
    value = get_environment_variable(name, environ)
    if value is None:
        return None
    number, consumed = string_to_number(value.strip(), ignore_separators=True)
    if consumed == 0:
        return None
    return number
