"""
Text formatting ESC/POS commands for thermal receipt printers.

Bold, double-strike, underline, upside-down, rotation, reverse (white on
black) and smoothing. Every toggle takes n = 1 (on) or 0 (off), the
underline takes a weight 0-2.

Reference: ESC/POS application programming guide, "Character commands"
"""

from typing import Final

__all__ = [
    "MAX_UNDERLINE",
    "set_bold",
    "set_char_spacing",
    "set_emphasize",
    "set_underline",
    "set_upsidedown",
    "set_rotate",
    "set_reverse",
    "set_smooth",
]

MAX_UNDERLINE: Final[int] = 2


def _flag(value: int) -> int:
    return 1 if value else 0


# =============================================================================
# BOLD (EMPHASIZED) MODE
# =============================================================================


def set_bold(enabled: bool) -> bytes:
    """
    Turn bold on or off.

    Command: ESC SP n, then ESC E n
    Hex: 1B 20 n 1B 45 n

    The right-side character spacing is widened by one dot together with
    emphasis so bold glyphs do not run into each other.

    Example:
        >>> set_bold(True)
        b'\\x1b \\x01\\x1bE\\x01'
    """
    n = _flag(enabled)
    return bytes([0x1B, 0x20, n, 0x1B, ord("E"), n])


def set_char_spacing(dots: int) -> bytes:
    """
    Set right-side character spacing.

    Command: ESC SP n
    Hex: 1B 20 n
    """
    if not 0 <= dots <= 255:
        raise ValueError(f"Character spacing must be 0..255, got {dots}")
    return bytes([0x1B, 0x20, dots])


def set_emphasize(enabled: int) -> bytes:
    """
    Double-strike mode.

    Command: ESC G n
    Hex: 1B 47 n
    """
    return bytes([0x1B, ord("G"), _flag(enabled)])


# =============================================================================
# UNDERLINE
# =============================================================================


def set_underline(level: int) -> bytes:
    """
    Underline weight.

    Command: ESC - n
    Hex: 1B 2D n

    Args:
        level: 0 = off, 1 = one dot, 2 = two dots thick.
    """
    if not 0 <= level <= MAX_UNDERLINE:
        raise ValueError(f"Underline level must be 0..{MAX_UNDERLINE}, got {level}")
    return bytes([0x1B, ord("-"), level])


# =============================================================================
# ORIENTATION AND INVERSION
# =============================================================================


def set_upsidedown(enabled: int) -> bytes:
    """Upside-down printing. Command: ESC { n (only at the start of a line)."""
    return bytes([0x1B, ord("{"), _flag(enabled)])


def set_rotate(enabled: int) -> bytes:
    """90 degree clockwise rotation. Command: ESC V n"""
    return bytes([0x1B, ord("V"), _flag(enabled)])


def set_reverse(enabled: int) -> bytes:
    """White-on-black printing. Command: GS B n"""
    return bytes([0x1D, ord("B"), _flag(enabled)])


def set_smooth(enabled: int) -> bytes:
    """Smoothing of enlarged glyphs. Command: GS b n"""
    return bytes([0x1D, ord("b"), _flag(enabled)])
