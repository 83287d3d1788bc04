import json
import logging
from pathlib import Path
from typing import Iterator
from unittest import mock

import pytest

from printpos import cli
from printpos.escpos.transport import BufferTransport


@pytest.fixture(autouse=True)
def in_tmp(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run every command away from any printpos.json in the checkout."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture(autouse=True)
def log_levels() -> Iterator[None]:
    """--verbose changes package logger levels; put them back."""
    package_logger = logging.getLogger("printpos")
    saved = [(h, h.level) for h in package_logger.handlers]
    level = package_logger.level
    yield
    package_logger.setLevel(level)
    for handler, handler_level in saved:
        handler.setLevel(handler_level)


@pytest.fixture
def memory() -> Iterator[BufferTransport]:
    sink = BufferTransport()
    with mock.patch.object(cli, "open_transport", return_value=sink):
        yield sink


def test_requires_command() -> None:
    with pytest.raises(SystemExit):
        cli.main([])


def test_version(capsys: pytest.CaptureFixture) -> None:
    with pytest.raises(SystemExit):
        cli.main(["--version"])
    assert "0.1.0" in capsys.readouterr().out


def test_hexdump() -> None:
    dump = cli._hexdump(b"\x1b@Hello, printer!\n")
    lines = dump.splitlines()
    assert lines[0].startswith("00000000  1b 40 48 65 6c 6c 6f")
    assert lines[0].endswith(".@Hello, printer")
    assert lines[1].startswith("00000010  21 0a")


def test_debug_test_page(capsys: pytest.CaptureFixture) -> None:
    assert cli.main(["--debug", "test"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("00000000  ff 1b 38 00 00 1b 40")
    assert "12 54" in out


def test_debug_text(memory: BufferTransport, capsys: pytest.CaptureFixture) -> None:
    assert cli.main(["--debug", "--verbose", "text", "-a", "C", "Hello"]) == 0
    assert b"\x1ba\x01Hello\n\x1bd\x02" in memory.getvalue()
    out = capsys.readouterr().out
    assert out.startswith("Print text")
    assert out.rstrip().endswith("Finish :)")


def test_text_reports_unprintable_line(memory: BufferTransport, capsys: pytest.CaptureFixture) -> None:
    assert cli.main(["--debug", "text", "ok", "Ц"]) == 1
    assert b"ok\n\n" in memory.getvalue()
    assert "EncodingError" in capsys.readouterr().err


def test_bad_alignment(capsys: pytest.CaptureFixture) -> None:
    assert cli.main(["--debug", "text", "-a", "up", "x"]) == 2
    assert "Invalid alignment" in capsys.readouterr().err


def test_file(in_tmp: Path, memory: BufferTransport) -> None:
    path = in_tmp / "receipt.json"
    path.write_text(
        json.dumps({"header": [{"text": "STORE", "align": "center"}], "lines": [{"line": True}]}),
        encoding="utf-8",
    )
    assert cli.main(["--debug", "file", str(path)]) == 0
    assert memory.getvalue().endswith(b"\x1ba\x01STORE\x1bd\x01" + b"-" * 32)


def test_file_with_skipped_nodes(in_tmp: Path, capsys: pytest.CaptureFixture) -> None:
    path = in_tmp / "receipt.json"
    path.write_text(json.dumps({"lines": [{"qrCode": True, "text": "x"}]}), encoding="utf-8")
    assert cli.main(["--debug", "file", str(path)]) == 1
    assert "UnsupportedNode" in capsys.readouterr().err


def test_missing_file(capsys: pytest.CaptureFixture) -> None:
    assert cli.main(["--debug", "file", "missing.json"]) == 2
    assert "TemplateError" in capsys.readouterr().err


def test_code_page_flag(memory: BufferTransport) -> None:
    assert cli.main(["--debug", "--encode", "PC866", "text", "Привет"]) == 0
    data = memory.getvalue()
    assert b"\x1bt\x11" in data
    assert "Привет".encode("cp866") in data


def test_strict_code_page(capsys: pytest.CaptureFixture) -> None:
    assert cli.main(["--debug", "--strict", "--encode", "KOI8", "text", "x"]) == 2
    assert "InvalidArgument" in capsys.readouterr().err


def test_config_file_and_flag_precedence(in_tmp: Path) -> None:
    (in_tmp / "printpos.json").write_text(
        json.dumps({"device": "/dev/usb/lp9", "firmware": 260}), encoding="utf-8"
    )
    args = cli.build_parser().parse_args(["--firmware", "268", "test"])
    config = cli._printer_config(args)
    assert config.device == "/dev/usb/lp9"
    assert config.firmware == 268
    assert config.pacing


def test_debug_overrides_device() -> None:
    args = cli.build_parser().parse_args(["--debug", "--device", "/dev/serial0", "test"])
    config = cli._printer_config(args)
    assert config.device == ":memory:"
    assert not config.pacing


def test_device_open_failure(capsys: pytest.CaptureFixture) -> None:
    with mock.patch.object(cli, "open_transport", side_effect=OSError("no such device")):
        assert cli.main(["--device", "/dev/ttyS9", "test"]) == 2
    assert "no such device" in capsys.readouterr().err


def test_transport_closed(memory: BufferTransport) -> None:
    assert cli.main(["--debug", "test"]) == 0
    assert memory.closed


def test_verbose_lowers_console_handler() -> None:
    assert cli.main(["--debug", "--verbose", "test"]) == 0
    package_logger = logging.getLogger("printpos")
    assert package_logger.level == logging.DEBUG
    consoles = [h for h in package_logger.handlers if type(h) is logging.StreamHandler]
    assert consoles and all(h.level == logging.DEBUG for h in consoles)


@pytest.mark.parametrize(
    "settings",
    [{"baudrate": "19200"}, {"code_page": None}, {"strict_names": 1}, {"firmware": True}],
)
def test_bad_config_value(in_tmp: Path, capsys: pytest.CaptureFixture, settings: dict) -> None:
    path = in_tmp / "bad.json"
    path.write_text(json.dumps(settings), encoding="utf-8")

    assert cli.main(["--config", str(path), "--debug", "test"]) == 2

    err = capsys.readouterr().err
    assert "InvalidArgument" in err
    assert next(iter(settings)) in err
