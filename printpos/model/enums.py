"""
model/enums.py

Template-level enums for receipt documents: alignment, text style, text
size. Each resolves the loose spellings found in templates and CLI flags
through a fixed alias table and maps onto the command-layer values.

NO byte protocol here; see printpos.escpos.commands.
"""

from __future__ import annotations

from enum import Enum
from typing import Final, Mapping

from printpos.errors import InvalidArgument
from printpos.escpos.commands.positioning import Justification
from printpos.escpos.commands.sizing import FontSize

__all__ = ["Alignment", "TextStyle", "TextSize"]


def _normalize(token: object) -> str:
    if not isinstance(token, str):
        raise InvalidArgument(f"Expected a string token, got {type(token).__name__}")
    return token.strip().lower()


class Alignment(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"

    @property
    def justification(self) -> Justification:
        return Justification[self.name]

    @classmethod
    def from_token(cls, token: str) -> "Alignment":
        """
        Resolve "left", "L", "Centre", "middle", ...

        Raises:
            InvalidArgument: token is not in the alias table.
        """
        key = _normalize(token)
        try:
            return _ALIGNMENT_ALIASES[key]
        except KeyError:
            raise InvalidArgument(f"Invalid alignment: {token!r}", operation="set_align") from None


_ALIGNMENT_ALIASES: Final[Mapping[str, Alignment]] = {
    "left": Alignment.LEFT,
    "l": Alignment.LEFT,
    "center": Alignment.CENTER,
    "centre": Alignment.CENTER,
    "middle": Alignment.CENTER,
    "c": Alignment.CENTER,
    "right": Alignment.RIGHT,
    "r": Alignment.RIGHT,
}


class TextSize(str, Enum):
    NORMAL = "normal"
    MEDIUM = "medium"
    LARGE = "large"

    @property
    def font_size(self) -> FontSize:
        return FontSize[self.name]

    @classmethod
    def from_token(cls, token: str) -> "TextSize":
        key = _normalize(token)
        try:
            return _SIZE_ALIASES[key]
        except KeyError:
            raise InvalidArgument(f"Invalid font size: {token!r}", operation="set_font_size") from None


_SIZE_ALIASES: Final[Mapping[str, TextSize]] = {
    "normal": TextSize.NORMAL,
    "n": TextSize.NORMAL,
    "s": TextSize.NORMAL,
    "regular": TextSize.NORMAL,
    "default": TextSize.NORMAL,
    "medium": TextSize.MEDIUM,
    "m": TextSize.MEDIUM,
    "tall": TextSize.MEDIUM,
    "large": TextSize.LARGE,
    "l": TextSize.LARGE,
    "big": TextSize.LARGE,
    "double": TextSize.LARGE,
}


class TextStyle(str, Enum):
    NONE = "none"
    BOLD = "bold"
    SMALL = "small"

    @classmethod
    def from_token(cls, token: str) -> "TextStyle":
        key = _normalize(token)
        if key in ("", "none", "normal", "regular"):
            return cls.NONE
        if key in ("bold", "b", "strong"):
            return cls.BOLD
        if key in ("small", "s", "condensed"):
            return cls.SMALL
        raise InvalidArgument(f"Invalid text style: {token!r}", operation="write_node")
