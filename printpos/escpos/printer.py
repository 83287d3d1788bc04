"""
ThermalPrinter: the command encoder and pacer.

Translates print operations (text, alignment, size, style, barcodes, feeds,
bitmaps) into ESC/POS bytes for a serial thermal printer, keeps PrinterState
in step with what the device believes, and throttles output with the
open-loop timing model so the host never overruns the print head.

Failure policy:
    - bad input (alignment, size, font, language, ranges) raises
      InvalidArgument before any byte is sent, state unchanged;
    - unmappable text raises EncodingError, nothing sent;
    - empty text raises EmptyPayload;
    - transport write failures are recorded (transport_error,
      failed_writes) and the job continues with the next write.

Example:
    >>> printer = ThermalPrinter(SerialTransport("/dev/ttyAMA0", 19200))
    >>> printer.begin()
    >>> printer.set_align("center")
    >>> printer.write_text("Hello World!")
    >>> printer.feed(2)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from functools import wraps
from typing import Any, Callable, Mapping, Optional, Sequence, TypeVar, Union

from PIL import Image

from printpos.errors import (
    EmptyPayload,
    EncodingError,
    InvalidArgument,
    NotStartedError,
    PrinterError,
    TransportError,
    UnsupportedNode,
)
from printpos.escpos.commands import barcode as barcode_cmd
from printpos.escpos.commands import graphics, hardware, line_spacing, positioning, sizing
from printpos.escpos.commands import text_formatting
from printpos.escpos.commands.barcode import BarcodeHRI, BarcodeType
from printpos.escpos.commands.charset import (
    CodePage,
    InternationalCharset,
    set_code_page,
    set_international_charset,
)
from printpos.escpos.commands.hardware import LF, NUL
from printpos.escpos.commands.sizing import Font, FontSize
from printpos.escpos.state import PrinterState
from printpos.escpos.timing import (
    BOOT_DELAY_US,
    DEFAULT_BAUDRATE,
    DOT_FEED_TIME_US,
    DOT_PRINT_TIME_US,
    LEGACY_WAKE_DELAY_US,
    WAKE_DELAY_S,
    PacingClock,
    barcode_time,
    bitmap_chunk_time,
    feed_time,
    test_page_time,
)
from printpos.escpos.transcoder import Transcoder, replace_entities
from printpos.escpos.transport import Transport
from printpos.model.enums import Alignment, TextSize, TextStyle
from printpos.model.nodes import (
    BarcodeNode,
    BarcodeOptions,
    ImageNode,
    LineRule,
    PrintNode,
    QrCodeNode,
    TextRun,
)

__all__ = ["PrinterConfig", "ThermalPrinter", "LINE_RULE_CHAR"]

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

LINE_RULE_CHAR = "-"
LEGACY_WAKE_NULS = 10
BARCODE_FEED_LINES = 2
DEFAULT_LINE_HEIGHT = 30
GLYPH_ROWS = 24


@dataclass(slots=True)
class PrinterConfig:
    """
    Device and job settings.

    Built from the package configuration (printpos.load_config) and CLI
    flags; unknown keys are ignored, a value of the wrong type raises
    InvalidArgument.
    """

    device: str = "/dev/ttyAMA0"
    baudrate: int = DEFAULT_BAUDRATE
    firmware: int = 268
    heat_dots: int = 11
    heat_time: int = 120
    heat_interval: int = 40
    print_density: int = 10
    print_break_time: int = 2
    code_page: str = "PC437"
    strict_names: bool = False
    pacing: bool = True

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "PrinterConfig":
        known = {f.name for f in fields(PrinterConfig)}
        values = {k: v for k, v in data.items() if k in known}
        ignored = sorted(set(data) - known)
        if ignored:
            logger.debug("Ignoring non-printer config keys: %s", ", ".join(ignored))
        for f in fields(PrinterConfig):
            if f.name not in values:
                continue
            value, expected = values[f.name], type(f.default)
            # bool is an int subclass; flags and numbers must not mix
            if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
                raise InvalidArgument(
                    f"Config value {f.name!r} must be {expected.__name__}, got {value!r}",
                    operation="config",
                )
        return PrinterConfig(**values)


def requires_begin(func: F) -> F:
    """Refuse operations that produce output before begin() ran."""

    @wraps(func)
    def wrapper(self: "ThermalPrinter", *args: Any, **kwargs: Any) -> Any:
        if not self.started:
            raise NotStartedError(
                "begin() must be called before sending output", operation=func.__name__
            )
        return func(self, *args, **kwargs)

    return wrapper  # type: ignore[return-value]


def _as_flag(value: Union[bool, int], operation: str) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int) and value in (0, 1):
        return value
    raise InvalidArgument(f"Expected a boolean or 0/1, got {value!r}", operation=operation)


class ThermalPrinter:
    """
    Stateful ESC/POS encoder for one printer.

    Args:
        transport: Byte sink; owned by the caller, never closed here.
        config: Device settings (firmware level, baud rate, heating).
        clock: Pacing clock; pass one with a fake clock for tests or
            pacing disabled for dry runs.
    """

    def __init__(
        self,
        transport: Transport,
        config: Optional[PrinterConfig] = None,
        clock: Optional[PacingClock] = None,
    ) -> None:
        self.transport = transport
        self.config = config or PrinterConfig()
        self.state = PrinterState(
            firmware=self.config.firmware,
            baudrate=self.config.baudrate,
            print_density=self.config.print_density,
            print_break_time=self.config.print_break_time,
        )
        self.clock = clock or PacingClock(enabled=self.config.pacing)
        self.transcoder = Transcoder(strict=self.config.strict_names)
        self.heat_dots = self.config.heat_dots
        self.heat_time = self.config.heat_time
        self.heat_interval = self.config.heat_interval

        self.started = False
        self.bytes_written = 0
        self.failed_writes = 0
        self.transport_error: Optional[TransportError] = None

    # =========================================================================
    # LOW-LEVEL OUTPUT
    # =========================================================================

    def _send(self, data: bytes) -> bool:
        try:
            self.transport.write(data)
        except OSError as e:  # serial.SerialException derives from OSError
            self.failed_writes += 1
            self.transport_error = TransportError(
                f"Write of {len(data)} bytes failed: {e}",
                cause=e,
                context={"failed_writes": self.failed_writes},
            )
            logger.error("Transport write failed (%d so far): %s", self.failed_writes, e)
            return False
        self.bytes_written += len(data)
        return True

    def _command(self, data: bytes) -> bool:
        """Wait for the device, then send a command charged at byte time."""
        self.clock.wait_out()
        self.clock.set_delay(len(data) * self.state.byte_time)
        return self._send(data)

    def _write_byte(self, byte: int) -> int:
        out, delay = self.state.step(byte)
        if not out:
            return 0
        self.clock.wait_out()
        self._send(out)
        self.clock.set_delay(delay)
        return len(out)

    def write_bytes(self, *values: Union[int, bytes]) -> bool:
        """
        Send raw values as one command, paced like any other command.

        Example:
            >>> printer.write_bytes(0x1B, ord("a"), 1)
        """
        data = bytearray()
        for value in values:
            if isinstance(value, int):
                if not 0 <= value <= 255:
                    raise InvalidArgument(f"Byte out of range: {value}", operation="write_bytes")
                data.append(value)
            else:
                data.extend(value)
        return self._command(bytes(data))

    # =========================================================================
    # STATUS
    # =========================================================================

    @property
    def is_ready(self) -> bool:
        """Started and no transport failure recorded since the last clear."""
        return self.started and self.transport_error is None

    def clear_transport_error(self) -> Optional[TransportError]:
        error, self.transport_error = self.transport_error, None
        self.failed_writes = 0
        return error

    def status(self) -> dict[str, Any]:
        return {
            "started": self.started,
            "bytes_written": self.bytes_written,
            "failed_writes": self.failed_writes,
            "transport_error": str(self.transport_error) if self.transport_error else None,
            "busy_us": self.clock.remaining(),
        }

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def begin(self) -> None:
        """
        Cold boot: wait for the printer, wake it, reset, configure heating.

        The printer cannot take data right after power-up, so the first
        write waits out half a second.
        """
        logger.debug("begin(): firmware %d, %d baud", self.state.firmware, self.state.baudrate)
        self.clock.set_delay(BOOT_DELAY_US)
        self.wake()
        self.reset()

        self._command(hardware.set_heat_config(self.heat_dots, self.heat_time, self.heat_interval))
        self._command(
            hardware.set_print_density(self.state.print_density, self.state.print_break_time)
        )
        self.state.dot_print_time = DOT_PRINT_TIME_US
        self.state.dot_feed_time = DOT_FEED_TIME_US
        self.started = True
        logger.info("Printer ready (%s)", self.transport.__class__.__name__)

    def wake(self) -> None:
        """Wake from low-energy state; newer firmware also needs sleep turned off."""
        self._command(hardware.WAKE_BYTE)
        if self.state.supports_extended:
            self.clock.sleep(WAKE_DELAY_S)
            self._command(hardware.sleep_after(0, self.state.firmware))
        else:
            # A single wake byte is not enough on old firmware; pad with no-ops.
            for _ in range(LEGACY_WAKE_NULS):
                self._command(bytes([NUL]))
                self.clock.set_delay(LEGACY_WAKE_DELAY_US)

    def reset(self) -> None:
        """ESC @ plus state defaults; tab stops every 4 columns on firmware 2.64+."""
        logger.debug("reset()")
        self._command(hardware.ESC_INIT_PRINTER)
        self.state.reset()
        self.transcoder.code_page = self.state.code_page
        if self.state.supports_extended:
            self._command(positioning.set_tab_stops())

    @requires_begin
    def set_default(self) -> None:
        """Text formatting back to defaults without a hardware reset."""
        self.online()
        self.set_align(Alignment.LEFT.value)
        self.set_reverse(False)
        self.set_small(False)
        self.set_font_size(TextSize.NORMAL.value)
        self.set_line_height(DEFAULT_LINE_HEIGHT)
        self.set_bold(False)
        self.set_underline(0)
        self.set_barcode_height(50)

    @requires_begin
    def test_page(self) -> None:
        """Built-in self-test page; blocks the next write for its print time."""
        self._command(hardware.DC2_TEST_PAGE)
        self.clock.set_delay(test_page_time(self.state.dot_print_time, self.state.dot_feed_time))

    def set_times(self, dot_print_time: int, dot_feed_time: int) -> None:
        """Tune per-dot-row print and feed times in microseconds."""
        if dot_print_time < 0 or dot_feed_time < 0:
            raise InvalidArgument(
                f"Dot times must be non-negative: {dot_print_time}, {dot_feed_time}",
                operation="set_times",
            )
        self.state.dot_print_time = dot_print_time
        self.state.dot_feed_time = dot_feed_time

    @requires_begin
    def set_heat_config(self, heat_dots: int, heat_time: int, heat_interval: int) -> None:
        try:
            data = hardware.set_heat_config(heat_dots, heat_time, heat_interval)
        except ValueError as e:
            raise InvalidArgument(str(e), operation="set_heat_config") from e
        self.heat_dots, self.heat_time, self.heat_interval = heat_dots, heat_time, heat_interval
        self._command(data)

    @requires_begin
    def set_print_density(self, density: int, break_time: int) -> None:
        try:
            data = hardware.set_print_density(density, break_time)
        except ValueError as e:
            raise InvalidArgument(str(e), operation="set_print_density") from e
        self.state.print_density = density
        self.state.print_break_time = break_time
        self._command(data)

    @requires_begin
    def online(self) -> None:
        self._command(hardware.ESC_ONLINE)

    @requires_begin
    def offline(self) -> None:
        self._command(hardware.ESC_OFFLINE)

    @requires_begin
    def sleep_after(self, seconds: int) -> None:
        try:
            data = hardware.sleep_after(seconds, self.state.firmware)
        except ValueError as e:
            raise InvalidArgument(str(e), operation="sleep_after") from e
        self._command(data)

    def sleep(self) -> None:
        self.sleep_after(1)

    # =========================================================================
    # CHARACTER FORMATTING
    # =========================================================================

    @requires_begin
    def set_align(self, value: str) -> None:
        """
        Justify subsequent lines.

        Accepts left/center/right, single letters L/C/R and a few spellings
        ("centre", "middle"), case-insensitive.

        Raises:
            InvalidArgument: anything else; alignment stays as it was.
        """
        alignment = Alignment.from_token(value)
        self._command(positioning.set_justification(alignment.justification))
        self.state.alignment = alignment.justification

    @requires_begin
    def set_font_size(self, token: str) -> None:
        """
        Named size: large (double width and height), medium (double height),
        normal. Updates glyph height and columns per line.
        """
        size = TextSize.from_token(token).font_size
        self._apply_scale(size.width, size.height)

    @requires_begin
    def set_font_scale(self, width: int, height: int) -> None:
        """Arbitrary magnification, 1-8 in each direction."""
        if not (
            isinstance(width, int)
            and isinstance(height, int)
            and sizing.MIN_SCALE <= width <= sizing.MAX_SCALE
            and sizing.MIN_SCALE <= height <= sizing.MAX_SCALE
        ):
            raise InvalidArgument(
                f"Invalid font size passed: {width} x {height}", operation="set_font_scale"
            )
        self._apply_scale(width, height)

    def _apply_scale(self, width: int, height: int) -> None:
        self.state.font_width = width
        self.state.font_height = height
        self.state.update_metrics()
        self._command(sizing.set_char_size(width, height))

    @requires_begin
    def set_bold(self, enabled: Union[bool, int]) -> None:
        flag = _as_flag(enabled, "set_bold")
        self.state.bold = flag
        self._command(text_formatting.set_bold(bool(flag)))

    @requires_begin
    def set_small(self, enabled: Union[bool, int]) -> None:
        """Font B (smaller glyphs, more columns) on, or back to font A."""
        flag = _as_flag(enabled, "set_small")
        self._apply_font(Font.B if flag else Font.A)
        self.state.small = flag

    @requires_begin
    def set_font(self, name: str) -> None:
        """Select font A, B or C ("a", "font_b", ...)."""
        key = name.strip().upper() if isinstance(name, str) else ""
        if key.startswith("FONT"):
            key = key[4:].lstrip("_ ")
        try:
            font = Font[key]
        except KeyError:
            raise InvalidArgument(f"Invalid font: {name!r}", operation="set_font") from None
        self._apply_font(font)
        self.state.small = int(font is not Font.A)

    def _apply_font(self, font: Font) -> None:
        self.state.font = font
        self.state.update_metrics()
        self._command(sizing.select_font(font))

    @requires_begin
    def set_underline(self, level: int) -> None:
        if isinstance(level, bool):
            level = int(level)
        if not isinstance(level, int) or not 0 <= level <= text_formatting.MAX_UNDERLINE:
            raise InvalidArgument(f"Invalid underline level: {level}", operation="set_underline")
        self.state.underline = level
        self._command(text_formatting.set_underline(level))

    @requires_begin
    def set_emphasize(self, enabled: Union[bool, int]) -> None:
        self.state.emphasize = _as_flag(enabled, "set_emphasize")
        self._command(text_formatting.set_emphasize(self.state.emphasize))

    @requires_begin
    def set_upsidedown(self, enabled: Union[bool, int]) -> None:
        self.state.upsidedown = _as_flag(enabled, "set_upsidedown")
        self._command(text_formatting.set_upsidedown(self.state.upsidedown))

    @requires_begin
    def set_rotate(self, enabled: Union[bool, int]) -> None:
        self.state.rotate = _as_flag(enabled, "set_rotate")
        self._command(text_formatting.set_rotate(self.state.rotate))

    @requires_begin
    def set_reverse(self, enabled: Union[bool, int]) -> None:
        self.state.reverse = _as_flag(enabled, "set_reverse")
        self._command(text_formatting.set_reverse(self.state.reverse))

    @requires_begin
    def set_smooth(self, enabled: Union[bool, int]) -> None:
        self.state.smooth = _as_flag(enabled, "set_smooth")
        self._command(text_formatting.set_smooth(self.state.smooth))

    @requires_begin
    def set_char_spacing(self, dots: int) -> None:
        try:
            data = text_formatting.set_char_spacing(dots)
        except ValueError as e:
            raise InvalidArgument(str(e), operation="set_char_spacing") from e
        self._command(data)

    @requires_begin
    def set_code_page(self, name: str) -> CodePage:
        """
        Select a code page for both the printer (ESC t) and the transcoder.

        Unknown names fall back to PC437 with a warning unless strict_names
        is configured.
        """
        code_page = self.transcoder.select(name)
        self.state.code_page = code_page
        self._command(set_code_page(code_page))
        return code_page

    @requires_begin
    def set_language(self, code: str) -> None:
        """International character set by language code: en, fr, de, uk, da, sv, it, es, ja, no."""
        try:
            charset = InternationalCharset[code.strip().lower()]
        except (KeyError, AttributeError):
            raise InvalidArgument(f"Invalid language: {code!r}", operation="set_language") from None
        self._command(set_international_charset(charset))

    # =========================================================================
    # TEXT AND FEEDS
    # =========================================================================

    @requires_begin
    def write_text(self, text: str) -> int:
        """
        Print text at the current position.

        XML entities are replaced, the text is transcoded for the selected
        code page, then sent one byte at a time so every byte can be paced:
        glyphs cost one byte time, a line feed or a line that fills up costs
        a mechanical line.

        Returns:
            Number of payload bytes sent.

        Raises:
            EncodingError: a character is not in the code page (nothing sent).
            EmptyPayload: nothing to print.
        """
        if not isinstance(text, str):
            raise InvalidArgument(
                f"Expected text, got {type(text).__name__}", operation="write_text"
            )
        data = self.transcoder.encode(replace_entities(text))
        if not data:
            raise EmptyPayload("Text is empty", operation="write_text")

        sent = 0
        for byte in data:
            sent += self._write_byte(byte)
        logger.debug("write_text(): %d bytes, column %d", sent, self.state.column)
        return sent

    def println(self, text: str = "") -> None:
        if text:
            self.write_text(text)
        self.linefeed()

    @requires_begin
    def linefeed(self) -> None:
        """Single LF through the line model."""
        self._write_byte(LF)

    @requires_begin
    def tab(self) -> None:
        self._command(bytes([hardware.HT]))
        self.state.column = (self.state.column + 4) % self.state.max_column

    @requires_begin
    def feed(self, lines: int = 1) -> None:
        """
        Feed paper by whole lines.

        Firmware 2.64+ takes one ESC d per 255 lines; older firmware feeds
        excess lines on ESC d, so it gets individual LF bytes.
        """
        if not isinstance(lines, int) or isinstance(lines, bool) or lines < 0:
            raise InvalidArgument(f"Invalid line count: {lines!r}", operation="feed")
        if lines == 0:
            return

        if self.state.supports_extended:
            remaining = lines
            while remaining > 0:
                chunk = min(remaining, line_spacing.MAX_FEED_LINES)
                data = line_spacing.feed_lines(chunk)
                self._command(data)
                self.clock.set_delay(
                    len(data) * self.state.byte_time
                    + feed_time(
                        chunk,
                        self.state.char_height,
                        self.state.line_spacing,
                        self.state.dot_feed_time,
                    )
                )
                remaining -= chunk
            self.state.prev_byte = LF
            self.state.column = 0
        else:
            for _ in range(lines):
                self._write_byte(LF)

    @requires_begin
    def feed_rows(self, rows: int) -> None:
        try:
            data = line_spacing.feed_rows(rows)
        except ValueError as e:
            raise InvalidArgument(str(e), operation="feed_rows") from e
        self._command(data)
        self.clock.set_delay(rows * self.state.dot_feed_time)
        self.state.prev_byte = LF
        self.state.column = 0

    @requires_begin
    def set_line_height(self, dots: int = DEFAULT_LINE_HEIGHT) -> None:
        """Line height including the 24-dot glyph; values below 24 are raised to 24."""
        if not isinstance(dots, int) or dots > 255:
            raise InvalidArgument(f"Invalid line height: {dots!r}", operation="set_line_height")
        dots = max(dots, line_spacing.MIN_LINE_HEIGHT)
        self.state.line_spacing = dots - GLYPH_ROWS
        self._command(line_spacing.set_line_height(dots))

    @requires_begin
    def move_x(self, dots: int) -> None:
        try:
            data = positioning.move_x(dots)
        except ValueError as e:
            raise InvalidArgument(str(e), operation="move_x") from e
        self._command(data)

    @requires_begin
    def move_y(self, dots: int) -> None:
        try:
            data = positioning.move_y(dots)
        except ValueError as e:
            raise InvalidArgument(str(e), operation="move_y") from e
        self._command(data)

    # =========================================================================
    # BARCODES
    # =========================================================================

    def _resolve_symbology(self, symbology: Union[str, BarcodeType]) -> BarcodeType:
        if isinstance(symbology, BarcodeType):
            return symbology
        resolved = barcode_cmd.lookup_barcode_type(symbology) if isinstance(symbology, str) else None
        if resolved is None:
            if self.config.strict_names:
                raise InvalidArgument(f"Unknown barcode type: {symbology!r}", operation="barcode")
            logger.warning(
                "Unknown barcode type %r, falling back to %s",
                symbology,
                barcode_cmd.DEFAULT_BARCODE_TYPE.name,
            )
            resolved = barcode_cmd.DEFAULT_BARCODE_TYPE
        return resolved

    def _prepare_barcode(
        self, symbology: Union[str, BarcodeType], payload: str
    ) -> tuple[BarcodeType, bytes]:
        """Resolve and encode a barcode without sending anything."""
        barcode_type = self._resolve_symbology(symbology)
        if not payload:
            raise EmptyPayload("Barcode payload is empty", operation="barcode")
        try:
            data = payload.encode("ascii")
        except UnicodeEncodeError as e:
            raise EncodingError(
                "Barcode payload must be ASCII",
                character=payload[e.start : e.end],
                operation="barcode",
            ) from e
        try:
            command = barcode_cmd.print_barcode(barcode_type, data, self.state.firmware)
        except ValueError as e:
            raise InvalidArgument(str(e), operation="barcode") from e
        return barcode_type, command

    @requires_begin
    def set_barcode_height(self, dots: int = 50) -> None:
        """Bar height in dots; persists until changed. Values below 1 become 1."""
        if not isinstance(dots, int) or dots > 255:
            raise InvalidArgument(f"Invalid barcode height: {dots!r}", operation="set_barcode_height")
        dots = max(dots, 1)
        self.state.barcode_height = dots
        self._command(barcode_cmd.set_barcode_height(dots))

    @requires_begin
    def barcode(
        self,
        symbology: Union[str, BarcodeType],
        payload: str,
        hri: BarcodeHRI = BarcodeHRI.BELOW,
    ) -> None:
        """
        Print a barcode, then feed two lines.

        Unknown symbology names fall back to CODE128 (logged) unless
        strict_names is configured.
        """
        barcode_type, command = self._prepare_barcode(symbology, payload)

        logger.debug("barcode(): %s, %d bytes", barcode_type.name, len(payload))
        self._command(barcode_cmd.set_hri_position(hri) + barcode_cmd.set_barcode_width())
        self.clock.wait_out()
        self._send(command)
        self.clock.set_delay(barcode_time(self.state.barcode_height, self.state.dot_print_time))
        self.state.prev_byte = LF
        self.state.column = 0
        self.feed(BARCODE_FEED_LINES)

    # =========================================================================
    # BITMAPS
    # =========================================================================

    @requires_begin
    def print_bitmap(self, width: int, height: int, bitmap: bytes, line_at_a_time: bool = False) -> None:
        """
        Print a packed 1-bit bitmap (MSB first, 1 = black).

        Rows wider than the 384-dot head are clipped. Data goes out in
        chunks the printer buffer can hold; line_at_a_time sends one row per
        chunk, which avoids feed gaps on tall images.
        """
        if width <= 0 or height <= 0:
            raise InvalidArgument(f"Invalid bitmap size: {width} x {height}", operation="print_bitmap")
        stride = graphics.row_bytes(width)
        if len(bitmap) < stride * height:
            raise InvalidArgument(
                f"Bitmap needs {stride * height} bytes, got {len(bitmap)}", operation="print_bitmap"
            )
        clipped = min(stride, graphics.MAX_ROW_BYTES)
        if line_at_a_time:
            max_chunk = 1
        else:
            max_chunk = max(1, min(255, 255 // clipped))

        for row_start in range(0, height, max_chunk):
            chunk = min(max_chunk, height - row_start)
            self._command(graphics.bitmap_chunk_header(chunk, clipped))
            rows = bytearray()
            for y in range(row_start, row_start + chunk):
                offset = y * stride
                rows.extend(bitmap[offset : offset + clipped])
            self._send(bytes(rows))
            self.clock.set_delay(bitmap_chunk_time(chunk, self.state.dot_print_time))

        self.state.prev_byte = LF
        self.state.column = 0

    def print_image(self, image: Image.Image, line_at_a_time: bool = False) -> None:
        """Dither a Pillow image to 1 bit and print it."""
        width, height, bitmap = graphics.image_to_bitmap(image)
        self.print_bitmap(width, height, bitmap, line_at_a_time=line_at_a_time)

    # =========================================================================
    # PAPER HANDLING
    # =========================================================================

    @requires_begin
    def cut(self, partial: bool = False) -> None:
        self._command(hardware.cut(partial))
        self.state.column = 0
        self.state.prev_byte = LF

    def feed_and_cut(self, lines: int = 3, partial: bool = False) -> None:
        self.feed(lines)
        self.cut(partial)

    @requires_begin
    def pulse(self, pin: int = 0) -> None:
        """Kick the cash drawer."""
        if pin not in (0, 1):
            raise InvalidArgument(f"Drawer pin must be 0 or 1, got {pin!r}", operation="pulse")
        self._command(hardware.pulse(pin))

    @requires_begin
    def has_paper(self) -> Optional[bool]:
        """
        Query the paper sensor.

        Returns:
            True/False, or None when the printer did not answer (the
            failure is recorded as transport_error).
        """
        self._command(hardware.ESC_STATUS_PAPER)
        try:
            reply = self.transport.read(1)
        except OSError as e:
            self.transport_error = TransportError(f"Status read failed: {e}", cause=e)
            logger.error("Status read failed: %s", e)
            return None
        if not reply:
            self.transport_error = TransportError("No status reply from printer")
            logger.warning("No status reply from printer")
            return None
        # bit 2 set means paper out
        return (reply[0] & 0b00000100) == 0

    # =========================================================================
    # TEMPLATE NODES
    # =========================================================================

    @requires_begin
    def write_node(
        self, nodes: Sequence[PrintNode], barcode_options: Optional[BarcodeOptions] = None
    ) -> list[PrinterError]:
        """
        Print template nodes in order.

        Every node starts on a fresh line. A node that fails (bad token,
        unmappable text, empty text, unsupported kind) is logged and skipped;
        the errors are returned in order.
        """
        options = barcode_options or BarcodeOptions()
        errors: list[PrinterError] = []
        for index, node in enumerate(nodes):
            logger.debug("Write node %d: %r", index, node)
            try:
                self._write_one(node, options)
            except (InvalidArgument, EncodingError, EmptyPayload, UnsupportedNode) as e:
                logger.warning("Node %d skipped: %s", index, e)
                errors.append(e)
        return errors

    def _start_line(self) -> None:
        if self.state.column > 0:
            self.feed(1)

    def _write_one(self, node: PrintNode, options: BarcodeOptions) -> None:
        if isinstance(node, TextRun):
            self._write_text_run(node)
        elif isinstance(node, LineRule):
            if node.text:
                self._write_text_run(TextRun(node.text))
            self._start_line()
            self.write_text(LINE_RULE_CHAR * self.state.max_column)
        elif isinstance(node, BarcodeNode):
            self._write_barcode_node(node, options)
        elif isinstance(node, (ImageNode, QrCodeNode)):
            raise UnsupportedNode(
                f"{type(node).__name__} is not supported by this printer driver",
                operation="write_node",
            )
        else:
            raise TypeError(f"Not a print node: {node!r}")

    def _write_text_run(self, node: TextRun) -> None:
        # resolve every token first: a bad one leaves the printer untouched
        alignment = Alignment.from_token(node.align) if node.align else None
        style = TextStyle.from_token(node.style)
        size = TextSize.from_token(node.size) if node.size else TextSize.NORMAL
        if not node.text:
            raise EmptyPayload("Text node is empty", operation="write_node")
        self.transcoder.encode(replace_entities(node.text))

        self._start_line()
        if alignment is not None:
            self.set_align(alignment.value)
        if style is TextStyle.BOLD:
            self.set_bold(True)
        elif style is TextStyle.SMALL:
            self.set_small(True)
        if size is not TextSize.NORMAL:
            self.set_font_size(size.value)
        try:
            self.write_text(node.text)
        finally:
            if size is not TextSize.NORMAL:
                self.set_font_size(TextSize.NORMAL.value)
            if style is TextStyle.BOLD:
                self.set_bold(False)
            elif style is TextStyle.SMALL:
                self.set_small(False)

    def _write_barcode_node(self, node: BarcodeNode, options: BarcodeOptions) -> None:
        if not node.text:
            raise EmptyPayload("Barcode node is empty", operation="write_node")
        # a bad symbology or payload leaves height and paper untouched
        barcode_type, _ = self._prepare_barcode(options.code, node.text)
        self._start_line()
        self.set_barcode_height(options.height)
        self.barcode(barcode_type, node.text, hri=options.hri)

    def __repr__(self) -> str:
        return (
            f"ThermalPrinter(transport={self.transport.__class__.__name__}, "
            f"firmware={self.state.firmware}, started={self.started}, "
            f"column={self.state.column}/{self.state.max_column})"
        )
