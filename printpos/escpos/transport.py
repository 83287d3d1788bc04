"""
Byte sinks the encoder writes to.

The encoder only needs write(), read() and close(). Three implementations:
a pyserial port (the usual TTL/RS-232 hookup), a device file (USB printer
class devices such as /dev/usb/lp0) and an in-memory buffer for dry runs
and tests.
"""

from __future__ import annotations

import io
import logging
import re
from typing import BinaryIO, Optional, Protocol, runtime_checkable

import serial

__all__ = [
    "Transport",
    "SerialTransport",
    "FileTransport",
    "BufferTransport",
    "MEMORY_DEVICE",
    "open_transport",
]

logger = logging.getLogger(__name__)

MEMORY_DEVICE = ":memory:"

_SERIAL_DEVICE = re.compile(r"^(COM\d+|/dev/tty\w*|/dev/serial\S*|/dev/cu\.\S+)$", re.IGNORECASE)


@runtime_checkable
class Transport(Protocol):
    """Raw byte sink/source. Errors surface as OSError (or subclasses)."""

    def write(self, data: bytes) -> Optional[int]: ...

    def read(self, size: int = 1) -> bytes: ...

    def close(self) -> None: ...


class SerialTransport:
    """
    Serial port via pyserial.

    Flow control stays off: the printer's DTR/CTS lines are not wired on
    most hookups, pacing is done by the encoder's timing model.
    """

    def __init__(self, device: str, baudrate: int, timeout: float = 1.0) -> None:
        self.device = device
        self.baudrate = baudrate
        self._port = serial.Serial(device, baudrate=baudrate, timeout=timeout, rtscts=False)
        logger.info("Opened serial printer %s at %d baud", device, baudrate)

    def write(self, data: bytes) -> Optional[int]:
        return self._port.write(data)

    def read(self, size: int = 1) -> bytes:
        return self._port.read(size)

    def close(self) -> None:
        if self._port.is_open:
            self._port.close()
            logger.info("Closed serial printer %s", self.device)


class FileTransport:
    """Device file such as /dev/usb/lp0, opened unbuffered."""

    def __init__(self, path: str) -> None:
        self.path = path
        self._file: BinaryIO = open(path, "r+b", buffering=0)
        logger.info("Opened printer device %s", path)

    def write(self, data: bytes) -> Optional[int]:
        return self._file.write(data)

    def read(self, size: int = 1) -> bytes:
        return self._file.read(size) or b""

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()


class BufferTransport:
    """
    In-memory sink. Collects every write; optional canned status bytes for reads.

    Example:
        >>> sink = BufferTransport()
        >>> sink.write(b"\\x1b@")
        2
        >>> sink.getvalue()
        b'\\x1b@'
    """

    def __init__(self, responses: bytes = b"") -> None:
        self._buffer = bytearray()
        self._responses = io.BytesIO(responses)
        self.writes: list[bytes] = []
        self.closed = False

    def write(self, data: bytes) -> Optional[int]:
        if self.closed:
            raise OSError("write to closed buffer transport")
        self._buffer.extend(data)
        self.writes.append(bytes(data))
        return len(data)

    def read(self, size: int = 1) -> bytes:
        return self._responses.read(size)

    def getvalue(self) -> bytes:
        return bytes(self._buffer)

    def clear(self) -> None:
        self._buffer.clear()
        self.writes.clear()

    def close(self) -> None:
        self.closed = True


def open_transport(device: str, baudrate: int) -> Transport:
    """
    Pick a transport from a device string.

    ":memory:" gives a BufferTransport, serial-looking names (COM3,
    /dev/ttyAMA0, /dev/serial0) a SerialTransport, anything else a
    FileTransport.
    """
    if device == MEMORY_DEVICE:
        return BufferTransport()
    if _SERIAL_DEVICE.match(device):
        return SerialTransport(device, baudrate)
    return FileTransport(device)
