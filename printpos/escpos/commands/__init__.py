"""
ESC/POS command builders for serial thermal receipt printers.

Low-level byte sequences, one module per capability family. Nothing here
keeps state or touches a transport; ThermalPrinter (printpos.escpos.printer)
combines these builders with printer state and pacing.

Module Structure:
    commands/
    ├── __init__.py             # This file (public API exports)
    ├── text_formatting.py      # Bold, double-strike, underline, rotation, reverse
    ├── sizing.py               # GS ! magnification, font A/B
    ├── positioning.py          # Justification, absolute moves, tab stops
    ├── line_spacing.py         # Line feed, ESC d, ESC J, line height
    ├── graphics.py             # DC2 * bitmap chunks, Pillow packing
    ├── barcode.py              # GS H / h / w / k
    ├── hardware.py             # Lead bytes, reset, wake, heat, density, cut
    └── charset.py              # Code pages and international character sets

Target Printer: 58 mm serial thermal printer, 384-dot head, 19200 baud
Firmware: 2.64+ preferred (older firmware handled where commands differ)

Usage:
    >>> from printpos.escpos.commands import set_bold, set_char_size
    >>> data = set_bold(True) + b"TOTAL" + set_bold(False)
    >>> transport.write(data)
"""

from printpos.escpos.commands.barcode import (
    BarcodeHRI,
    BarcodeType,
    lookup_barcode_type,
    print_barcode,
    set_barcode_height,
    set_barcode_width,
    set_hri_position,
)
from printpos.escpos.commands.charset import (
    CodePage,
    InternationalCharset,
    set_code_page,
    set_international_charset,
)
from printpos.escpos.commands.graphics import (
    bitmap_chunk_header,
    image_to_bitmap,
)
from printpos.escpos.commands.hardware import (
    DC2_TEST_PAGE,
    ESC_INIT_PRINTER,
    ESC_OFFLINE,
    ESC_ONLINE,
    cut,
    pulse,
    set_heat_config,
    set_print_density,
    sleep_after,
)
from printpos.escpos.commands.line_spacing import (
    LINE_FEED,
    feed_lines,
    feed_rows,
    set_line_height,
)
from printpos.escpos.commands.positioning import (
    Justification,
    move_x,
    move_y,
    set_justification,
    set_tab_stops,
)
from printpos.escpos.commands.sizing import Font, FontSize, select_font, set_char_size
from printpos.escpos.commands.text_formatting import (
    set_bold,
    set_char_spacing,
    set_emphasize,
    set_reverse,
    set_rotate,
    set_smooth,
    set_underline,
    set_upsidedown,
)

__all__ = [
    # Barcode
    "BarcodeHRI",
    "BarcodeType",
    "lookup_barcode_type",
    "print_barcode",
    "set_barcode_height",
    "set_barcode_width",
    "set_hri_position",
    # Character sets
    "CodePage",
    "InternationalCharset",
    "set_code_page",
    "set_international_charset",
    # Graphics
    "bitmap_chunk_header",
    "image_to_bitmap",
    # Hardware
    "DC2_TEST_PAGE",
    "ESC_INIT_PRINTER",
    "ESC_OFFLINE",
    "ESC_ONLINE",
    "cut",
    "pulse",
    "set_heat_config",
    "set_print_density",
    "sleep_after",
    # Line spacing
    "LINE_FEED",
    "feed_lines",
    "feed_rows",
    "set_line_height",
    # Positioning
    "Justification",
    "move_x",
    "move_y",
    "set_justification",
    "set_tab_stops",
    # Sizing
    "Font",
    "FontSize",
    "select_font",
    "set_char_size",
    # Text formatting
    "set_bold",
    "set_char_spacing",
    "set_emphasize",
    "set_reverse",
    "set_rotate",
    "set_smooth",
    "set_underline",
    "set_upsidedown",
]
