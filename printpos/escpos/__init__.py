"""
ESC/POS driver layer: byte commands, timing model, transcoder, printer
state, transports and the ThermalPrinter encoder that ties them together.
"""

from printpos.escpos.printer import PrinterConfig, ThermalPrinter
from printpos.escpos.state import PrinterState
from printpos.escpos.timing import PacingClock, byte_transmission_time
from printpos.escpos.transcoder import Transcoder, replace_entities
from printpos.escpos.transport import (
    BufferTransport,
    FileTransport,
    SerialTransport,
    Transport,
    open_transport,
)

__all__ = [
    "ThermalPrinter",
    "PrinterConfig",
    "PrinterState",
    "PacingClock",
    "byte_transmission_time",
    "Transcoder",
    "replace_entities",
    "Transport",
    "SerialTransport",
    "FileTransport",
    "BufferTransport",
    "open_transport",
]
