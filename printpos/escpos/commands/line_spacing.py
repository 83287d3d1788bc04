"""
Paper feed and line spacing commands.

Reference: ESC/POS application programming guide, ESC d / ESC J / ESC 3
"""

from typing import Final

__all__ = [
    "LINE_FEED",
    "MAX_FEED_LINES",
    "MIN_LINE_HEIGHT",
    "feed_lines",
    "feed_rows",
    "set_line_height",
]

LINE_FEED: Final[bytes] = b"\n"
"""Print the buffer and advance one line. Command: LF (0A)"""

MAX_FEED_LINES: Final[int] = 255
MIN_LINE_HEIGHT: Final[int] = 24


def feed_lines(lines: int) -> bytes:
    """
    Print and feed n lines.

    Command: ESC d n
    Hex: 1B 64 n

    Note:
        Firmware before 2.64 feeds extra lines on ESC d; feed those printers
        with individual LF bytes instead.
    """
    if not 0 <= lines <= MAX_FEED_LINES:
        raise ValueError(f"Feed lines must be 0..{MAX_FEED_LINES}, got {lines}")
    return bytes([0x1B, ord("d"), lines])


def feed_rows(rows: int) -> bytes:
    """
    Print and feed paper by dot rows.

    Command: ESC J n
    Hex: 1B 4A n
    """
    if not 0 <= rows <= 255:
        raise ValueError(f"Feed rows must be 0..255, got {rows}")
    return bytes([0x1B, ord("J"), rows])


def set_line_height(dots: int) -> bytes:
    """
    Set line height in dots.

    Command: ESC 3 n
    Hex: 1B 33 n

    The printer does not include the glyph height, so this is effectively
    glyph height plus inter-line spacing. Default is 30 (24 + 6).
    """
    if not 0 <= dots <= 255:
        raise ValueError(f"Line height must be 0..255, got {dots}")
    return bytes([0x1B, ord("3"), dots])
