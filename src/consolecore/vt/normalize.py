"""Line-ending normalisation for byte devices."""

import re
from functools import lru_cache


@lru_cache(maxsize=8)
def _line_break_re(ending: str) -> re.Pattern:
    # an existing ending stays one break, so normalising twice is a no-op
    if not ending:
        return re.compile(r"\r\n|\r|\n")
    return re.compile(re.escape(ending) + r"|\r\n|\r|\n")


def normalize_line_endings(text: str, ending: str) -> str:
    """Replace every CR, LF and CR-LF in ``text`` with ``ending``."""
    return _line_break_re(ending).sub(lambda _m: ending, text)


class LineEndingNormalizer:
    """Streaming normaliser.

    The tail of a chunk that could still grow into a line break (a CR, or
    the start of ``ending``) is held until the next chunk, so a break
    split across writes becomes a single line ending.
    """

    def __init__(self, ending: str):
        self.ending = ending
        self._held = ""

    def _held_size(self, text: str) -> int:
        for size in range(min(len(text), len(self.ending) - 1), 0, -1):
            if self.ending.startswith(text[-size:]):
                return size
        return 1 if text.endswith("\r") else 0

    def feed(self, text: str) -> str:
        text = self._held + text
        size = self._held_size(text)
        self._held = text[len(text) - size:] if size else ""
        return normalize_line_endings(text[: len(text) - size], self.ending)

    def flush(self) -> str:
        """Emit whatever is held."""
        held, self._held = self._held, ""
        return normalize_line_endings(held, self.ending)
