"""
Barcode commands for thermal receipt printers.

Barcodes are rendered by the printer firmware (GS k). The host sets the
label (HRI) position, module width and height, then sends the symbology code
and the payload.

Two payload formats exist:
    Format A (firmware < 2.64): GS k m d1...dk NUL     with m = 0..9
    Format B (firmware >= 2.64): GS k (m + 65) n d1...dn

Reference: ESC/POS application programming guide, GS H / GS h / GS w / GS k
"""

from enum import Enum
from typing import Final, Optional

__all__ = [
    "BarcodeType",
    "BarcodeHRI",
    "DEFAULT_BARCODE_TYPE",
    "DEFAULT_BARCODE_WIDTH",
    "FORMAT_B_FIRMWARE",
    "lookup_barcode_type",
    "set_hri_position",
    "set_barcode_height",
    "set_barcode_width",
    "print_barcode",
]

FORMAT_B_FIRMWARE: Final[int] = 264
DEFAULT_BARCODE_WIDTH: Final[int] = 3
MAX_PAYLOAD: Final[int] = 255

# =============================================================================
# BARCODE TYPE CONSTANTS
# =============================================================================


class BarcodeType(Enum):
    """
    Barcode symbologies. Value is the format A code (format B adds 65).
    """

    UPC_A = 0
    """UPC-A, 11-12 digits."""

    UPC_E = 1
    """UPC-E, zero-suppressed UPC."""

    EAN13 = 2
    """EAN-13 (JAN13), 12-13 digits."""

    EAN8 = 3
    """EAN-8 (JAN8), 7-8 digits."""

    CODE39 = 4
    """CODE39, digits, upper case, space $ % + - . /"""

    ITF = 5
    """Interleaved 2 of 5, even number of digits."""

    CODABAR = 6
    """CODABAR (NW-7), digits and $ + - . / : with A-D start/stop."""

    CODE93 = 7
    """CODE93, full ASCII. Format B only on most firmware."""

    CODE128 = 8
    """CODE128, full ASCII. Format B only on most firmware."""

    CODE11 = 9
    """CODE11, digits and dash."""


DEFAULT_BARCODE_TYPE: Final[BarcodeType] = BarcodeType.CODE128
"""Used when a template names an unknown symbology."""

_ALIASES: Final[dict[str, BarcodeType]] = {
    "UPCA": BarcodeType.UPC_A,
    "UPCE": BarcodeType.UPC_E,
    "EAN13": BarcodeType.EAN13,
    "JAN13": BarcodeType.EAN13,
    "EAN8": BarcodeType.EAN8,
    "JAN8": BarcodeType.EAN8,
    "CODE39": BarcodeType.CODE39,
    "ITF": BarcodeType.ITF,
    "I25": BarcodeType.ITF,
    "I2OF5": BarcodeType.ITF,
    "CODABAR": BarcodeType.CODABAR,
    "CODEBAR": BarcodeType.CODABAR,
    "NW7": BarcodeType.CODABAR,
    "CODE93": BarcodeType.CODE93,
    "CODE128": BarcodeType.CODE128,
    "CODE11": BarcodeType.CODE11,
}


def lookup_barcode_type(name: str) -> Optional[BarcodeType]:
    """
    Resolve a symbology name, ignoring case, dashes, underscores and spaces.

    Returns:
        The BarcodeType, or None for unknown names.

    Example:
        >>> lookup_barcode_type("upc-a")
        <BarcodeType.UPC_A: 0>
    """
    key = "".join(ch for ch in name.upper() if ch not in "-_ ")
    return _ALIASES.get(key)


class BarcodeHRI(Enum):
    """Position of human readable interpretation (label) characters."""

    NONE = 0
    ABOVE = 1
    BELOW = 2
    BOTH = 3


# =============================================================================
# BARCODE COMMANDS
# =============================================================================


def set_hri_position(position: BarcodeHRI) -> bytes:
    """
    Select label printing position.

    Command: GS H n
    Hex: 1D 48 n
    """
    return bytes([0x1D, ord("H"), position.value])


def set_barcode_height(dots: int) -> bytes:
    """
    Set barcode height in dots.

    Command: GS h n
    Hex: 1D 68 n
    """
    if not 1 <= dots <= 255:
        raise ValueError(f"Barcode height must be 1..255, got {dots}")
    return bytes([0x1D, ord("h"), dots])


def set_barcode_width(width: int = DEFAULT_BARCODE_WIDTH) -> bytes:
    """
    Set barcode module width.

    Command: GS w n
    Hex: 1D 77 n (2..6)
    """
    if not 2 <= width <= 6:
        raise ValueError(f"Barcode width must be 2..6, got {width}")
    return bytes([0x1D, ord("w"), width])


def print_barcode(barcode_type: BarcodeType, data: bytes, firmware: int) -> bytes:
    """
    Build the GS k command with its payload.

    Args:
        barcode_type: Symbology.
        data: Payload, already encoded to bytes.
        firmware: Firmware level, selects format A or B.

    Returns:
        Command bytes including the payload.

    Example:
        >>> print_barcode(BarcodeType.CODE39, b"AB1", 268)
        b'\\x1dkE\\x03AB1'
    """
    if not data:
        raise ValueError("Barcode data must not be empty")
    if len(data) > MAX_PAYLOAD:
        raise ValueError(f"Barcode data must be at most {MAX_PAYLOAD} bytes, got {len(data)}")
    if firmware >= FORMAT_B_FIRMWARE:
        return bytes([0x1D, ord("k"), barcode_type.value + 65, len(data)]) + data
    if 0x00 in data:
        raise ValueError("Format A barcode data must not contain NUL")
    return bytes([0x1D, ord("k"), barcode_type.value]) + data + b"\x00"
