"""SGR escape parsing and generation."""

import re

from ..color import (
    BACKGROUND_INTENSITY,
    COMMON_LVB_UNDERSCORE,
    FOREGROUND_INTENSITY,
    AttrCtrl,
    ColorAttributes,
    ansi_to_native,
    native_to_ansi,
    swap_nibbles,
)
from ..core.strings import decimal_string_to_int

ESC = "\x1b"
CSI = "\x1b["

# Complete control sequence: ESC [ params final
CSI_SEQUENCE_RE = re.compile(r"\x1b\[[0-9;]*[^0-9;]")


def final_color_from_sequence(initial: int, sequence: str, default_color: int) -> int:
    """Apply an SGR sequence to a native console attribute.

    Args:
        initial: attribute in effect before the sequence
        sequence: full escape, ``ESC [ codes m``
        default_color: process default colour used by resets

    Returns:
        the resulting attribute; non-SGR sequences leave ``initial`` unchanged
    """
    if not sequence.startswith(CSI) or not sequence.endswith("m"):
        return initial

    color = initial
    for code_text in sequence[2:-1].split(";"):
        code = decimal_string_to_int(code_text)
        if code == 0:
            color = default_color & ~COMMON_LVB_UNDERSCORE
        elif code == 1:
            color |= FOREGROUND_INTENSITY
        elif code == 4:
            color |= COMMON_LVB_UNDERSCORE
        elif code == 7:
            color = swap_nibbles(color)
        elif code == 39:
            color = (color & ~0x0F) | (default_color & 0x0F)
        elif code == 49:
            color = (color & ~0xF0) | (default_color & 0xF0)
        elif 30 <= code <= 37:
            color = (color & ~0x0F) | ansi_to_native(code - 30)
        elif 40 <= code <= 47:
            color = (color & ~0xF0) | (ansi_to_native(code - 40) << 4)
        elif 90 <= code <= 97:
            color = (color & ~0x0F) | ansi_to_native(code - 90) | FOREGROUND_INTENSITY
        elif 100 <= code <= 107:
            color = (color & ~0xF0) | (ansi_to_native(code - 100) << 4) | BACKGROUND_INTENSITY
    return color


def vt_string_for_text_attribute(color: ColorAttributes) -> str:
    """Escape that selects ``color``, honouring window-colour control bits."""
    attr = color.win32_attr
    if color.ctrl & AttrCtrl.WINDOW_BG:
        background = 49
    elif attr & BACKGROUND_INTENSITY:
        background = native_to_ansi(attr >> 4) + 100
    else:
        background = native_to_ansi(attr >> 4) + 40

    if color.ctrl & AttrCtrl.WINDOW_FG:
        foreground = 39
        bold = ""
    else:
        foreground = native_to_ansi(attr) + 30
        bold = ";1" if attr & FOREGROUND_INTENSITY else ""
    return f"{CSI}0;{background};{foreground}{bold}m"


def strip_vt_escapes(text: str) -> str:
    """Remove every complete control sequence.

    Removal repeats until nothing changes, so text that only forms an
    escape once an inner one is removed is stripped too.
    """
    while True:
        stripped = CSI_SEQUENCE_RE.sub("", text)
        if stripped == text:
            return stripped
        text = stripped
