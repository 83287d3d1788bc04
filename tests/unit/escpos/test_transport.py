from pathlib import Path
from unittest import mock

import pytest

from printpos.escpos.transport import (
    MEMORY_DEVICE,
    BufferTransport,
    FileTransport,
    SerialTransport,
    Transport,
    open_transport,
)


class TestBufferTransport:
    def test_collects_writes(self) -> None:
        sink = BufferTransport()
        sink.write(b"\x1b@")
        sink.write(b"hi")

        assert sink.getvalue() == b"\x1b@hi"
        assert sink.writes == [b"\x1b@", b"hi"]
        assert isinstance(sink, Transport)

    def test_canned_responses(self) -> None:
        sink = BufferTransport(responses=b"\x04")
        assert sink.read(1) == b"\x04"
        assert sink.read(1) == b""

    def test_write_after_close(self) -> None:
        sink = BufferTransport()
        sink.close()
        with pytest.raises(OSError):
            sink.write(b"x")

    def test_clear(self) -> None:
        sink = BufferTransport()
        sink.write(b"abc")
        sink.clear()
        assert sink.getvalue() == b""
        assert sink.writes == []


def test_file_transport_writes_device(tmp_path: Path) -> None:
    device = tmp_path / "lp0"
    device.write_bytes(b"")

    transport = FileTransport(str(device))
    transport.write(b"\x1b@")
    transport.close()

    assert device.read_bytes() == b"\x1b@"


def test_serial_transport_uses_pyserial() -> None:
    with mock.patch("printpos.escpos.transport.serial.Serial") as serial_cls:
        port = serial_cls.return_value
        port.is_open = True

        transport = SerialTransport("/dev/ttyAMA0", 19200)
        transport.write(b"A")
        transport.close()

    serial_cls.assert_called_once_with("/dev/ttyAMA0", baudrate=19200, timeout=1.0, rtscts=False)
    port.write.assert_called_once_with(b"A")
    port.close.assert_called_once()


class TestOpenTransport:
    def test_memory(self) -> None:
        assert isinstance(open_transport(MEMORY_DEVICE, 19200), BufferTransport)

    @pytest.mark.parametrize("device", ["/dev/ttyAMA0", "/dev/ttyUSB0", "/dev/serial0", "COM3"])
    def test_serial_names(self, device: str) -> None:
        with mock.patch("printpos.escpos.transport.serial.Serial"):
            assert isinstance(open_transport(device, 9600), SerialTransport)

    def test_other_paths_are_files(self, tmp_path: Path) -> None:
        device = tmp_path / "printer.bin"
        device.write_bytes(b"")
        transport = open_transport(str(device), 19200)
        try:
            assert isinstance(transport, FileTransport)
        finally:
            transport.close()
