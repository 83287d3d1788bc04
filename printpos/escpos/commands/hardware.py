"""
Printer control commands for serial thermal receipt printers.

Lead bytes, initialization, wake/sleep, heating parameters, print density,
self-test, paper cut, cash drawer pulse and status query.

Reference: ESC/POS application programming guide; mini thermal printer
(A2/CSN-A2 family) datasheet, firmware 2.64-2.69.
"""

from typing import Final

__all__ = [
    "NUL",
    "LF",
    "HT",
    "FF",
    "DC2",
    "ESC",
    "FS",
    "GS",
    "WAKE_BYTE",
    "ESC_INIT_PRINTER",
    "DC2_TEST_PAGE",
    "ESC_ONLINE",
    "ESC_OFFLINE",
    "ESC_STATUS_PAPER",
    "sleep_after",
    "set_heat_config",
    "set_print_density",
    "cut",
    "pulse",
]

# =============================================================================
# ASCII LEAD BYTES
# =============================================================================

NUL: Final[int] = 0x00
LF: Final[int] = 0x0A
HT: Final[int] = 0x09
FF: Final[int] = 0x0C
DC2: Final[int] = 0x12
ESC: Final[int] = 0x1B
FS: Final[int] = 0x1C
GS: Final[int] = 0x1D

WAKE_BYTE: Final[bytes] = b"\xff"
"""
Wake the printer from its low-energy state.

Any byte wakes the printer, 0xFF is ignored by the command parser.
Firmware 2.64+ also needs ESC 8 0 0 (sleep off) about 50 ms later.
"""

# =============================================================================
# INITIALIZATION
# =============================================================================

ESC_INIT_PRINTER: Final[bytes] = b"\x1b@"
"""
Initialize printer.

Command: ESC @
Hex: 1B 40
Effect: Clears the print buffer and restores all modes to power-on defaults
        (alignment, size, emphasis, code page 0, line spacing).
"""

DC2_TEST_PAGE: Final[bytes] = b"\x12T"
"""
Print the built-in self-test page.

Command: DC2 T
Hex: 12 54
Duration: about 26 text lines, see timing.test_page_time().
"""

ESC_ONLINE: Final[bytes] = b"\x1b=\x01"
"""Take the printer online; subsequent commands are obeyed. Command: ESC = 1"""

ESC_OFFLINE: Final[bytes] = b"\x1b=\x00"
"""Take the printer offline; commands are ignored until ESC = 1."""

ESC_STATUS_PAPER: Final[bytes] = b"\x1bv\x00"
"""
Request paper sensor status.

Command: ESC v 0
Response: one byte, bit 2 set when the paper is out.
"""


def sleep_after(seconds: int, firmware: int) -> bytes:
    """
    Put the printer into low-energy state after the given idle time.

    Command: ESC 8 n1 n2 (firmware >= 264), ESC 8 n (older)

    Args:
        seconds: Idle seconds before sleeping, 0 disables sleep.
        firmware: Firmware level of the target printer.

    Returns:
        Command bytes.
    """
    if seconds < 0 or seconds > 0xFFFF:
        raise ValueError(f"Sleep time must be 0..65535 seconds, got {seconds}")
    if firmware >= 264:
        return bytes([ESC, ord("8"), seconds & 0xFF, seconds >> 8])
    return bytes([ESC, ord("8"), min(seconds, 0xFF)])


# =============================================================================
# HEATING AND DENSITY
# =============================================================================


def set_heat_config(heat_dots: int, heat_time: int, heat_interval: int) -> bytes:
    """
    Set heating control parameters.

    Command: ESC 7 n1 n2 n3
    Hex: 1B 37 n1 n2 n3

    Args:
        heat_dots: Max heating dots, units of 8 dots minus one (default 7).
        heat_time: Heating time, units of 10 us (3-255, default 80).
        heat_interval: Heating interval, units of 10 us (default 2).

    More heating dots means more peak current but faster printing. More heating
    time gives darker print but slower printing.
    """
    for name, value in (
        ("heat_dots", heat_dots),
        ("heat_time", heat_time),
        ("heat_interval", heat_interval),
    ):
        if not 0 <= value <= 255:
            raise ValueError(f"{name} must be 0..255, got {value}")
    return bytes([ESC, ord("7"), heat_dots, heat_time, heat_interval])


def set_print_density(density: int, break_time: int) -> bytes:
    """
    Set printing density and break time.

    Command: DC2 # n
    Hex: 12 23 n

    D4..D0 of n is the density (50% + 5% * n), D7..D5 the break time
    (n * 250 us). Defaults 10 and 2 give n = 0x4A.
    """
    if not 0 <= density <= 0x1F:
        raise ValueError(f"density must be 0..31, got {density}")
    if not 0 <= break_time <= 0x07:
        raise ValueError(f"break_time must be 0..7, got {break_time}")
    return bytes([DC2, ord("#"), (break_time << 5) | density])


# =============================================================================
# CUT AND DRAWER
# =============================================================================


def cut(partial: bool = False) -> bytes:
    """
    Cut the paper.

    Command: GS V A 0 (full) / GS V B 0 (partial)
    Hex: 1D 56 41 00
    """
    return bytes([GS, ord("V"), ord("B") if partial else ord("A"), NUL])


def pulse(pin: int = 0, on_time: int = 25, off_time: int = 25) -> bytes:
    """
    Generate a cash drawer kick pulse.

    Command: ESC p m t1 t2
    Hex: 1B 70 m t1 t2

    Args:
        pin: Drawer connector pin, 0 or 1.
        on_time: Pulse on time in 2 ms units (25 = 50 ms).
        off_time: Pulse off time in 2 ms units.
    """
    return bytes([ESC, ord("p"), pin & 1, on_time & 0xFF, off_time & 0xFF])
