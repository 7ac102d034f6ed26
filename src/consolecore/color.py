"""Colour attributes

A ColorAttributes value pairs a native console attribute byte (low
nibble foreground, high nibble background) with control bits saying
which parts defer to the window colour and how rules combine.
"""

from dataclasses import dataclass
from enum import IntFlag

FOREGROUND_BLUE = 0x01
FOREGROUND_GREEN = 0x02
FOREGROUND_RED = 0x04
FOREGROUND_INTENSITY = 0x08
BACKGROUND_BLUE = 0x10
BACKGROUND_GREEN = 0x20
BACKGROUND_RED = 0x40
BACKGROUND_INTENSITY = 0x80
COMMON_LVB_UNDERSCORE = 0x8000

# ANSI index (black, red, green, yellow, blue, magenta, cyan, white) -> native bits
_ANSI_TO_NATIVE = (
    0,
    FOREGROUND_RED,
    FOREGROUND_GREEN,
    FOREGROUND_RED | FOREGROUND_GREEN,
    FOREGROUND_BLUE,
    FOREGROUND_BLUE | FOREGROUND_RED,
    FOREGROUND_BLUE | FOREGROUND_GREEN,
    FOREGROUND_RED | FOREGROUND_GREEN | FOREGROUND_BLUE,
)
_NATIVE_TO_ANSI = tuple(_ANSI_TO_NATIVE.index(native) for native in range(8))


def ansi_to_native(index: int) -> int:
    """Native foreground bits for ANSI colour ``index`` (0-7)."""
    return _ANSI_TO_NATIVE[index & 0x7]


def native_to_ansi(native: int) -> int:
    """ANSI colour index for the low three native colour bits."""
    return _NATIVE_TO_ANSI[native & 0x7]


class AttrCtrl(IntFlag):
    NONE = 0
    INVERT = 0x01
    HIDE = 0x02
    CONTINUE = 0x04
    FILE = 0x08
    WINDOW_BG = 0x10
    WINDOW_FG = 0x20
    UNDERLINE = 0x40


TERMINATE_MASK = AttrCtrl.HIDE
WINDOW_BITS = AttrCtrl.WINDOW_BG | AttrCtrl.WINDOW_FG


@dataclass(frozen=True)
class ColorAttributes:
    ctrl: AttrCtrl = AttrCtrl.NONE
    win32_attr: int = 0

    @property
    def foreground(self) -> int:
        return self.win32_attr & 0x0F

    @property
    def background(self) -> int:
        return (self.win32_attr & 0xF0) >> 4


_COLOR_NAMES = {
    "black": 0x0,
    "blue": 0x1,
    "green": 0x2,
    "cyan": 0x3,
    "red": 0x4,
    "magenta": 0x5,
    "brown": 0x6,
    "gray": 0x7,
    "grey": 0x7,
    "darkgray": 0x8,
    "darkgrey": 0x8,
    "lightblue": 0x9,
    "lightgreen": 0xA,
    "lightcyan": 0xB,
    "lightred": 0xC,
    "lightmagenta": 0xD,
    "yellow": 0xE,
    "white": 0xF,
    "bright": 0x8,
}

_CTRL_NAMES = {
    "invert": AttrCtrl.INVERT,
    "hide": AttrCtrl.HIDE,
    "continue": AttrCtrl.CONTINUE,
    "file": AttrCtrl.FILE,
    "window_bg": AttrCtrl.WINDOW_BG,
    "window_fg": AttrCtrl.WINDOW_FG,
    "underline": AttrCtrl.UNDERLINE,
}


def attribute_from_string(text: str) -> ColorAttributes | None:
    """Parse a colour such as ``"lightred+bg_blue"`` or ``"fg=blue+continue"``.

    Parts are joined with ``+`` and their values are or'ed together. A
    ``bg_`` or ``bg=`` prefix applies a part to the background, ``fg=``
    to the foreground. ``bright`` is the intensity bit on its own. Any
    side not named defers to the window colour.

    Returns:
        parsed attributes, or None if any part is not recognised
    """
    ctrl = AttrCtrl.NONE
    attr = 0
    explicit_fg = False
    explicit_bg = False

    for raw_part in text.split("+"):
        part = raw_part.strip().lower()
        if not part:
            continue
        background = False
        if part[:3] in ("bg_", "bg="):
            background = True
            part = part[3:]
        elif part[:3] == "fg=":
            part = part[3:]

        if part in _CTRL_NAMES:
            ctrl |= _CTRL_NAMES[part]
            continue
        value = _COLOR_NAMES.get(part)
        if value is None:
            return None
        if background:
            attr |= value << 4
            explicit_bg = True
        else:
            attr |= value
            explicit_fg = True

    if not explicit_bg:
        ctrl |= AttrCtrl.WINDOW_BG
    if not explicit_fg:
        ctrl |= AttrCtrl.WINDOW_FG
    return ColorAttributes(ctrl, attr)


def combine_colors(color1: ColorAttributes, color2: ColorAttributes) -> ColorAttributes:
    """Merge two colours; window colour is recessive, explicit nibbles are xored."""
    ctrl = (color1.ctrl | color2.ctrl) & ~WINDOW_BITS
    attr = 0
    if color1.ctrl & AttrCtrl.WINDOW_BG and color2.ctrl & AttrCtrl.WINDOW_BG:
        ctrl |= AttrCtrl.WINDOW_BG
    else:
        attr |= (color1.win32_attr ^ color2.win32_attr) & 0xF0
    if color1.ctrl & AttrCtrl.WINDOW_FG and color2.ctrl & AttrCtrl.WINDOW_FG:
        ctrl |= AttrCtrl.WINDOW_FG
    else:
        attr |= (color1.win32_attr ^ color2.win32_attr) & 0x0F
    return ColorAttributes(AttrCtrl(ctrl), attr)


def resolve_window_color_components(
    color: ColorAttributes, window_color: ColorAttributes, retain_window_ctrl: bool
) -> ColorAttributes:
    """Substitute the window colour for any side marked WINDOW_BG / WINDOW_FG."""
    attr = color.win32_attr
    ctrl = color.ctrl
    if ctrl & AttrCtrl.WINDOW_BG:
        attr = (window_color.win32_attr & 0xF0) | (attr & 0x0F)
    if ctrl & AttrCtrl.WINDOW_FG:
        attr = (attr & 0xF0) | (window_color.win32_attr & 0x0F)
    if not retain_window_ctrl:
        ctrl &= ~WINDOW_BITS
    return ColorAttributes(AttrCtrl(ctrl), attr)


def are_colors_identical(color1: ColorAttributes, color2: ColorAttributes) -> bool:
    return color1.win32_attr == color2.win32_attr


def swap_nibbles(attr: int) -> int:
    """Exchange foreground and background, keeping higher bits."""
    return (attr & ~0xFF) | ((attr & 0x0F) << 4) | ((attr & 0xF0) >> 4)
