"""
Character size and font selection commands.

GS ! packs the horizontal and vertical magnification (1-8 each) into one
byte: width - 1 in the high nibble, height - 1 in the low nibble.

Reference: ESC/POS application programming guide, GS ! / ESC M
"""

from enum import Enum
from typing import Final

__all__ = [
    "MIN_SCALE",
    "MAX_SCALE",
    "FontSize",
    "Font",
    "set_char_size",
    "select_font",
]

MIN_SCALE: Final[int] = 1
MAX_SCALE: Final[int] = 8


class FontSize(Enum):
    """
    Named character sizes used by receipt templates.

    Each value is (width, height) magnification.
    """

    NORMAL = (1, 1)
    MEDIUM = (1, 2)  # double height
    LARGE = (2, 2)  # double width and height

    @property
    def width(self) -> int:
        return self.value[0]

    @property
    def height(self) -> int:
        return self.value[1]

    @property
    def code(self) -> int:
        """GS ! parameter byte for this size."""
        return ((self.width - 1) << 4) | (self.height - 1)


class Font(Enum):
    """
    Character fonts. Value is the ESC M parameter.

    Font A is 12x24 dots (32 columns on a 384-dot head), font B 9x17 (42 columns).
    """

    A = 0
    B = 1
    C = 2


def set_char_size(width: int, height: int) -> bytes:
    """
    Select character magnification.

    Command: GS ! n
    Hex: 1D 21 n

    Args:
        width: Horizontal magnification 1-8.
        height: Vertical magnification 1-8.

    Example:
        >>> set_char_size(2, 2)
        b'\\x1d!\\x11'
    """
    if not (MIN_SCALE <= width <= MAX_SCALE and MIN_SCALE <= height <= MAX_SCALE):
        raise ValueError(f"Invalid font size: {width} x {height}")
    return bytes([0x1D, ord("!"), ((width - 1) << 4) | (height - 1)])


def select_font(font: Font) -> bytes:
    """
    Select character font.

    Command: ESC M n
    Hex: 1B 4D n
    """
    return bytes([0x1B, ord("M"), font.value])
