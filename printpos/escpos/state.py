"""
Printer state owned by one ThermalPrinter.

PrinterState mirrors what the device believes about the current line:
alignment, font and magnification, derived metrics (glyph height, columns
per line), emphasis toggles, the column counter and the last byte sent.
Each encoder owns exactly one instance; nothing here is module-global.

The per-byte text loop is PrinterState.step(): given one byte it returns the
bytes to put on the wire and the busy time they cost, updating the column
counter and line-feed bookkeeping. No I/O happens here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from typing import Final

from printpos.escpos.commands.charset import CodePage
from printpos.escpos.commands.hardware import LF
from printpos.escpos.commands.positioning import Justification
from printpos.escpos.commands.sizing import MAX_SCALE, MIN_SCALE, Font
from printpos.escpos.timing import (
    DEFAULT_BAUDRATE,
    DOT_FEED_TIME_US,
    DOT_PRINT_TIME_US,
    blank_line_time,
    byte_transmission_time,
    text_line_time,
)

__all__ = [
    "HEAD_DOTS",
    "DEFAULT_FIRMWARE",
    "FIRMWARE_THRESHOLD",
    "STRIPPED_BYTES",
    "GLYPH_DOTS",
    "PrinterState",
]

logger = logging.getLogger(__name__)

HEAD_DOTS: Final[int] = 384
DEFAULT_FIRMWARE: Final[int] = 268
FIRMWARE_THRESHOLD: Final[int] = 264
"""Firmware 2.64 added ESC d feeds, tab stops, ESC 8 sleep off and GS k format B."""

STRIPPED_BYTES: Final[frozenset[int]] = frozenset({0x0D, 0x13})
"""Carriage returns never reach the printer; it feeds on LF only."""

GLYPH_DOTS: Final[dict[Font, tuple[int, int]]] = {
    Font.A: (12, 24),
    Font.B: (9, 17),
    Font.C: (9, 17),
}
"""(width, height) of one unscaled glyph in dots."""

DEFAULT_LINE_SPACING: Final[int] = 6
DEFAULT_BARCODE_HEIGHT: Final[int] = 50
DEFAULT_PRINT_DENSITY: Final[int] = 10
DEFAULT_PRINT_BREAK_TIME: Final[int] = 2


@dataclass(slots=True)
class PrinterState:
    """
    Mutable printer configuration, reset by ThermalPrinter.reset().

    Fields below "line layout" return to defaults on reset; device
    parameters (firmware, density, heating, timing) persist.
    """

    # device parameters
    firmware: int = DEFAULT_FIRMWARE
    baudrate: int = DEFAULT_BAUDRATE
    byte_time: int = field(default=0)
    dot_print_time: int = DOT_PRINT_TIME_US
    dot_feed_time: int = DOT_FEED_TIME_US
    print_density: int = DEFAULT_PRINT_DENSITY
    print_break_time: int = DEFAULT_PRINT_BREAK_TIME

    # line layout
    alignment: Justification = Justification.LEFT
    font: Font = Font.A
    font_width: int = 1
    font_height: int = 1
    char_height: int = 24
    max_column: int = 32
    line_spacing: int = DEFAULT_LINE_SPACING
    column: int = 0
    prev_byte: int = LF
    barcode_height: int = DEFAULT_BARCODE_HEIGHT
    code_page: CodePage = CodePage.PC437

    # toggles
    underline: int = 0
    emphasize: int = 0
    bold: int = 0
    small: int = 0
    upsidedown: int = 0
    rotate: int = 0
    reverse: int = 0
    smooth: int = 0

    def __post_init__(self) -> None:
        if self.byte_time == 0:
            self.byte_time = byte_transmission_time(self.baudrate)
        self.update_metrics()

    # ------------------------------------------------------------------
    # reset and metrics
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Restore line layout and toggles to power-on defaults."""
        self.alignment = Justification.LEFT
        self.font = Font.A
        self.font_width = 1
        self.font_height = 1
        self.line_spacing = DEFAULT_LINE_SPACING
        self.column = 0
        self.prev_byte = LF
        self.barcode_height = DEFAULT_BARCODE_HEIGHT
        self.code_page = CodePage.PC437
        self.underline = 0
        self.emphasize = 0
        self.bold = 0
        self.small = 0
        self.upsidedown = 0
        self.rotate = 0
        self.reverse = 0
        self.smooth = 0
        self.update_metrics()

    def update_metrics(self) -> None:
        """Recompute glyph height and columns per line from font and scale."""
        if not (MIN_SCALE <= self.font_width <= MAX_SCALE and MIN_SCALE <= self.font_height <= MAX_SCALE):
            raise ValueError(f"Invalid font size: {self.font_width} x {self.font_height}")
        glyph_width, glyph_height = GLYPH_DOTS[self.font]
        self.char_height = glyph_height * self.font_height
        self.max_column = HEAD_DOTS // (glyph_width * self.font_width)
        if self.column > self.max_column:
            self.column = self.max_column

    @property
    def supports_extended(self) -> bool:
        """True when firmware has ESC d feeds, tab stops and GS k format B."""
        return self.firmware >= FIRMWARE_THRESHOLD

    def snapshot(self) -> dict:
        """Plain dict of all fields, for comparisons and debug logging."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    # ------------------------------------------------------------------
    # per-byte text loop
    # ------------------------------------------------------------------

    def line_feed_time(self) -> int:
        """Cost of ending the current line: cheap when nothing was printed on it."""
        if self.prev_byte == LF:
            return blank_line_time(self.char_height, self.line_spacing, self.dot_feed_time)
        return text_line_time(
            self.char_height, self.line_spacing, self.dot_print_time, self.dot_feed_time
        )

    def step(self, byte: int) -> tuple[bytes, int]:
        """
        Advance the line model by one byte.

        LF ends the line. Any other byte is a glyph; the glyph that fills
        the last column also ends the line (the printer wraps by itself, so
        no extra byte is sent) and is charged as a printed text line.

        Returns:
            (bytes to send, busy time in microseconds)
        """
        if byte in STRIPPED_BYTES:
            return b"", 0

        delay = self.byte_time
        if byte == LF:
            delay += self.line_feed_time()
            self.column = 0
            self.prev_byte = LF
        else:
            self.column += 1
            if self.column >= self.max_column:
                delay += text_line_time(
                    self.char_height, self.line_spacing, self.dot_print_time, self.dot_feed_time
                )
                self.column = 0
                self.prev_byte = LF
            else:
                self.prev_byte = byte
        return bytes([byte]), delay
