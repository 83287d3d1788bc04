"""
Horizontal positioning commands: justification, absolute moves, tab stops.

Reference: ESC/POS application programming guide, ESC a / ESC $ / ESC D
"""

from enum import Enum
from typing import Final, Sequence

__all__ = [
    "Justification",
    "DEFAULT_TAB_STOPS",
    "set_justification",
    "move_x",
    "move_y",
    "set_tab_stops",
]

DEFAULT_TAB_STOPS: Final[tuple[int, ...]] = (4, 8, 12, 16, 20, 24, 28)
"""Tab stop every 4 columns on a 32-column line."""

MAX_TAB_STOPS: Final[int] = 32


class Justification(Enum):
    """ESC a parameter values."""

    LEFT = 0
    CENTER = 1
    RIGHT = 2


def set_justification(justification: Justification) -> bytes:
    """
    Align subsequent lines.

    Command: ESC a n
    Hex: 1B 61 n

    Note:
        Only takes effect at the beginning of a line.
    """
    return bytes([0x1B, ord("a"), justification.value])


def _dots(value: int) -> tuple[int, int]:
    if not 0 <= value <= 0xFFFF:
        raise ValueError(f"Position must be 0..65535 dots, got {value}")
    return value % 256, value // 256


def move_x(dots: int) -> bytes:
    """
    Absolute horizontal print position from the line start.

    Command: ESC $ nL nH
    Hex: 1B 24 nL nH
    """
    low, high = _dots(dots)
    return bytes([0x1B, 0x24, low, high])


def move_y(dots: int) -> bytes:
    """
    Absolute vertical position in page mode.

    Command: GS $ nL nH
    Hex: 1D 24 nL nH
    """
    low, high = _dots(dots)
    return bytes([0x1D, 0x24, low, high])


def set_tab_stops(columns: Sequence[int] = DEFAULT_TAB_STOPS) -> bytes:
    """
    Configure horizontal tab stops.

    Command: ESC D n1 ... nk NUL
    Hex: 1B 44 n1 ... nk 00

    Columns must be strictly ascending; NUL terminates the list.

    Example:
        >>> set_tab_stops()
        b'\\x1bD\\x04\\x08\\x0c\\x10\\x14\\x18\\x1c\\x00'
    """
    if len(columns) > MAX_TAB_STOPS:
        raise ValueError(f"At most {MAX_TAB_STOPS} tab stops, got {len(columns)}")
    previous = 0
    for column in columns:
        if not previous < column <= 255:
            raise ValueError(f"Tab stops must be ascending 1..255, got {list(columns)}")
        previous = column
    return bytes([0x1B, ord("D"), *columns, 0x00])
