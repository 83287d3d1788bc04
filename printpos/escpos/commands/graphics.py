"""
Bit image commands and Pillow image packing.

Mini thermal printers take bitmaps in row chunks (DC2 *), one bit per dot,
MSB first, 1 = black. The print head is 384 dots wide, so rows are clipped
to 48 bytes.

Reference: mini thermal printer datasheet (DC2 *)
"""

from __future__ import annotations

import logging
from typing import Final

from PIL import Image

__all__ = [
    "MAX_DOTS",
    "MAX_ROW_BYTES",
    "row_bytes",
    "bitmap_chunk_header",
    "image_to_bitmap",
]

logger = logging.getLogger(__name__)

MAX_DOTS: Final[int] = 384
MAX_ROW_BYTES: Final[int] = MAX_DOTS // 8


def row_bytes(width: int) -> int:
    """Bytes per bitmap row, rounded up to the next byte boundary."""
    return (width + 7) // 8


def bitmap_chunk_header(rows: int, bytes_per_row: int) -> bytes:
    """
    Header for one chunk of bitmap rows.

    Command: DC2 * r n d1...d(r*n)
    Hex: 12 2A r n
    """
    if not 1 <= rows <= 255:
        raise ValueError(f"Chunk height must be 1..255, got {rows}")
    if not 1 <= bytes_per_row <= MAX_ROW_BYTES:
        raise ValueError(f"Row width must be 1..{MAX_ROW_BYTES} bytes, got {bytes_per_row}")
    return bytes([0x12, ord("*"), rows, bytes_per_row])


def image_to_bitmap(image: Image.Image, max_width: int = MAX_DOTS) -> tuple[int, int, bytes]:
    """
    Convert a Pillow image to a packed 1-bit bitmap.

    The image is converted to mode "1" (Floyd-Steinberg dithering) and
    cropped to max_width dots.

    Returns:
        (width, height, bitmap) where bitmap has row_bytes(width) * height bytes.
    """
    if image.mode != "1":
        image = image.convert("1")

    width = min(image.size[0], max_width)
    height = image.size[1]
    if width != image.size[0]:
        logger.debug("Image cropped from %d to %d dots", image.size[0], width)

    stride = row_bytes(width)
    bitmap = bytearray(stride * height)
    pixels = image.load()

    for y in range(height):
        offset = y * stride
        for x in range(width):
            # mode "1": 0 is black
            if pixels[x, y] == 0:
                bitmap[offset + (x >> 3)] |= 0x80 >> (x & 7)

    return width, height, bytes(bitmap)
