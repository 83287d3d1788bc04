"""
Character set and code page commands.

The printer has no Unicode support: codes 0x80-0xFF are interpreted through
the selected code page (ESC t), and a few ASCII positions are localized by
the international character set (ESC R).

Reference: ESC/POS application programming guide, ESC t / ESC R
Primary encodings: PC437 (Western), PC866 (Cyrillic)
"""

from enum import Enum

__all__ = [
    "CodePage",
    "InternationalCharset",
    "set_code_page",
    "set_international_charset",
]

# =============================================================================
# CODE PAGES
# =============================================================================


class CodePage(Enum):
    """
    Code pages supported by the printer.

    Each value is (ESC t index, Python codec name).
    """

    PC437 = (0, "cp437")
    """PC437 - USA, standard Europe (default after ESC @)."""

    PC850 = (2, "cp850")
    """PC850 - Multilingual Latin 1."""

    WPC1252 = (16, "cp1252")
    """Windows-1252 - Western European."""

    PC866 = (17, "cp866")
    """PC866 - Cyrillic #2."""

    PC858 = (19, "cp858")
    """PC858 - PC850 with Euro sign."""

    WPC1251 = (46, "cp1251")
    """Windows-1251 - Cyrillic."""

    @property
    def index(self) -> int:
        return self.value[0]

    @property
    def codec(self) -> str:
        return self.value[1]


# =============================================================================
# INTERNATIONAL CHARACTER SETS
# =============================================================================


class InternationalCharset(Enum):
    """
    International character sets keyed by language code.

    Affects codes 0x23, 0x24, 0x40, 0x5B-0x5E, 0x60, 0x7B-0x7E.
    """

    en = 0  # USA
    fr = 1
    de = 2
    uk = 3
    da = 4
    sv = 5
    it = 6
    es = 7
    ja = 8
    no = 9


def set_code_page(code_page: CodePage) -> bytes:
    """
    Select character code table.

    Command: ESC t n
    Hex: 1B 74 n

    Example:
        >>> set_code_page(CodePage.PC866)
        b'\\x1bt\\x11'
    """
    return bytes([0x1B, ord("t"), code_page.index])


def set_international_charset(charset: InternationalCharset) -> bytes:
    """
    Select international character set.

    Command: ESC R n
    Hex: 1B 52 n
    """
    return bytes([0x1B, ord("R"), charset.value])
