"""
Unicode to printer code page transcoding.

The printer understands 8-bit code pages only. Transcoder keeps the selected
page and turns text into the bytes that page expects, or fails with
EncodingError naming the first character it cannot represent. Nothing is
replaced silently: a receipt with "?" in place of a price is worse than an
error.

Also hosts the XML entity replacement applied to template text before
transcoding.
"""

from __future__ import annotations

import logging
from typing import Final, Optional

from printpos.errors import EncodingError, InvalidArgument
from printpos.escpos.commands.charset import CodePage

__all__ = [
    "DEFAULT_CODE_PAGE",
    "lookup_code_page",
    "replace_entities",
    "Transcoder",
]

logger = logging.getLogger(__name__)

DEFAULT_CODE_PAGE: Final[CodePage] = CodePage.PC437

_CODE_PAGE_ALIASES: Final[dict[str, CodePage]] = {
    "PC437": CodePage.PC437,
    "CP437": CodePage.PC437,
    "USA": CodePage.PC437,
    "PC850": CodePage.PC850,
    "CP850": CodePage.PC850,
    "PC858": CodePage.PC858,
    "CP858": CodePage.PC858,
    "WPC1252": CodePage.WPC1252,
    "CP1252": CodePage.WPC1252,
    "WINDOWS1252": CodePage.WPC1252,
    "PC866": CodePage.PC866,
    "CP866": CodePage.PC866,
    "WPC1251": CodePage.WPC1251,
    "CP1251": CodePage.WPC1251,
    "WINDOWS1251": CodePage.WPC1251,
}

# &amp; must stay last to avoid double decoding
_ENTITY_REPLACEMENTS: Final[tuple[tuple[str, str], ...]] = (
    ("&#9;", "\t"),
    ("&#x9;", "\t"),
    ("&#10;", "\n"),
    ("&#xA;", "\n"),
    ("&apos;", "'"),
    ("&quot;", '"'),
    ("&gt;", ">"),
    ("&lt;", "<"),
    ("&amp;", "&"),
)


def replace_entities(text: str) -> str:
    """
    Replace the XML entities used by receipt templates.

    Example:
        >>> replace_entities("Fish &amp; Chips&#10;")
        'Fish & Chips\\n'
    """
    for entity, value in _ENTITY_REPLACEMENTS:
        text = text.replace(entity, value)
    return text


def lookup_code_page(name: str) -> Optional[CodePage]:
    """Resolve a code page name such as "PC437", "cp866" or "Windows-1251"."""
    key = "".join(ch for ch in name.upper() if ch not in "-_ ")
    return _CODE_PAGE_ALIASES.get(key)


class Transcoder:
    """
    Selected code page plus text encoding.

    Args:
        code_page: Initial page (default PC437).
        strict: Raise InvalidArgument for unknown page names instead of
            falling back to the default page.
    """

    def __init__(self, code_page: CodePage = DEFAULT_CODE_PAGE, strict: bool = False) -> None:
        self.code_page = code_page
        self.strict = strict

    def select(self, name: str) -> CodePage:
        """
        Select a code page by name.

        Unknown names fall back to DEFAULT_CODE_PAGE with a warning, so a
        typo in a job setting does not stop the job. In strict mode they
        raise InvalidArgument and the selection is unchanged.

        Returns:
            The page now selected.
        """
        code_page = lookup_code_page(name)
        if code_page is None:
            if self.strict:
                raise InvalidArgument(
                    f"Unknown code page: {name!r}", operation="set_code_page"
                )
            logger.warning(
                "Unknown code page %r, falling back to %s (index %d)",
                name,
                DEFAULT_CODE_PAGE.name,
                DEFAULT_CODE_PAGE.index,
            )
            code_page = DEFAULT_CODE_PAGE
        self.code_page = code_page
        return code_page

    def encode(self, text: str) -> bytes:
        """
        Encode text for the selected page.

        Raises:
            EncodingError: A character has no representation in the page.
        """
        try:
            return text.encode(self.code_page.codec)
        except UnicodeEncodeError as e:
            character = e.object[e.start : e.end]
            raise EncodingError(
                f"Character {character!r} at position {e.start} is not in {self.code_page.name}",
                code_page=self.code_page.name,
                character=character,
                operation="write_text",
            ) from e

    def __repr__(self) -> str:
        return f"Transcoder(code_page={self.code_page.name}, strict={self.strict})"
