"""
Open-loop timing model for the thermal print head.

There is no flow control between host and printer, so output is throttled
from an estimate of how long the device stays busy: serial transmission time
per byte plus the mechanical print and feed time per dot row. After every
write the encoder records a busy-until moment; before the next write it
waits that moment out.

The estimates below are pure functions of printer state. Only PacingClock
blocks, and its clock and sleep functions are injectable.

Printer performance varies with supply voltage, paper thickness and other
factors; ThermalPrinter.set_times() lets callers tune the dot times.
In the default state normal text is 24 dots tall with 6 dots of spacing, so
one text line costs about 24 * dot_print_time + 6 * dot_feed_time.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Final

__all__ = [
    "BITS_PER_BYTE",
    "DEFAULT_BAUDRATE",
    "DOT_PRINT_TIME_US",
    "DOT_FEED_TIME_US",
    "BOOT_DELAY_US",
    "WAKE_DELAY_S",
    "LEGACY_WAKE_DELAY_US",
    "BARCODE_MARGIN_DOTS",
    "byte_transmission_time",
    "text_line_time",
    "blank_line_time",
    "feed_time",
    "barcode_time",
    "test_page_time",
    "bitmap_chunk_time",
    "PacingClock",
]

logger = logging.getLogger(__name__)

# =============================================================================
# CONSTANTS (microseconds unless noted)
# =============================================================================

BITS_PER_BYTE: Final[int] = 11  # 8 data bits + start + stop + idle
DEFAULT_BAUDRATE: Final[int] = 19200

DOT_PRINT_TIME_US: Final[int] = 30000
DOT_FEED_TIME_US: Final[int] = 2100

BOOT_DELAY_US: Final[int] = 500_000
WAKE_DELAY_S: Final[float] = 0.05
LEGACY_WAKE_DELAY_US: Final[int] = 10_000

BARCODE_MARGIN_DOTS: Final[int] = 40

# Self-test page: 26 text lines of 24 dots, 6 dots spacing each plus a blank line
_TEST_PAGE_LINES: Final[int] = 26
_TEST_PAGE_LINE_HEIGHT: Final[int] = 24
_TEST_PAGE_FEED_DOTS: Final[int] = 6 * 26 + 30


def byte_transmission_time(baudrate: int) -> int:
    """
    Microseconds needed to clock one byte across the serial line.

    11 bits per byte (not 8) to cover start, stop and idle bits; the
    result is rounded half up.

    Example:
        >>> byte_transmission_time(19200)
        573
    """
    if baudrate <= 0:
        raise ValueError(f"Baud rate must be positive, got {baudrate}")
    numerator = BITS_PER_BYTE * 1_000_000
    return (2 * numerator + baudrate) // (2 * baudrate)


def text_line_time(
    char_height: int, line_spacing: int, dot_print_time: int, dot_feed_time: int
) -> int:
    """Line feed after printed text: glyph rows burn, spacing rows feed."""
    return char_height * dot_print_time + line_spacing * dot_feed_time


def blank_line_time(char_height: int, line_spacing: int, dot_feed_time: int) -> int:
    """Line feed on an empty line: every row is a plain feed."""
    return (char_height + line_spacing) * dot_feed_time


def feed_time(lines: int, char_height: int, line_spacing: int, dot_feed_time: int) -> int:
    """Time for ESC d n: n blank lines."""
    return lines * blank_line_time(char_height, line_spacing, dot_feed_time)


def barcode_time(barcode_height: int, dot_print_time: int) -> int:
    """Barcode rows plus a fixed margin for the label text."""
    return (barcode_height + BARCODE_MARGIN_DOTS) * dot_print_time


def test_page_time(dot_print_time: int, dot_feed_time: int) -> int:
    """Duration of the built-in self-test page."""
    return (
        dot_print_time * _TEST_PAGE_LINE_HEIGHT * _TEST_PAGE_LINES
        + dot_feed_time * _TEST_PAGE_FEED_DOTS
    )


def bitmap_chunk_time(rows: int, dot_print_time: int) -> int:
    """One DC2 * chunk burns one dot row per bitmap row."""
    return rows * dot_print_time


# =============================================================================
# BUSY-UNTIL CLOCK
# =============================================================================


class PacingClock:
    """
    Busy-until bookkeeping for one printer.

    set_delay() records when the device will be idle again; wait_out()
    blocks the caller until then. Disabled clocks record but never block,
    which is what buffer transports and dry runs want.

    Args:
        clock: Monotonic time source in seconds.
        sleeper: Blocking sleep in seconds.
        enabled: When False, wait_out() and sleep() return immediately.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sleeper: Callable[[float], None] = time.sleep,
        enabled: bool = True,
    ) -> None:
        self._clock = clock
        self._sleeper = sleeper
        self.enabled = enabled
        self.resume_at: float = clock()
        self.last_delay: int = 0
        self.total_delay: int = 0

    def set_delay(self, micros: int) -> None:
        """Device is busy for micros from now."""
        if micros < 0:
            raise ValueError(f"Delay must be non-negative, got {micros}")
        self.last_delay = micros
        self.total_delay += micros
        self.resume_at = self._clock() + micros / 1_000_000

    def remaining(self) -> int:
        """Microseconds until the device is idle, never negative."""
        return max(0, round((self.resume_at - self._clock()) * 1_000_000))

    def wait_out(self) -> float:
        """
        Block until the recorded busy period has passed.

        Returns:
            Seconds actually slept.
        """
        if not self.enabled:
            return 0.0
        pending = self.resume_at - self._clock()
        if pending <= 0:
            return 0.0
        self._sleeper(pending)
        return pending

    def sleep(self, seconds: float) -> None:
        """Fixed pause, e.g. the 50 ms after waking the printer."""
        if self.enabled and seconds > 0:
            self._sleeper(seconds)
