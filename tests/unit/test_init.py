"""
Unit tests for printpos/__init__.py
Package metadata, logging setup, configuration loading and public API.
"""

import json
import logging
import logging.handlers
import re
from pathlib import Path
from typing import Iterator
from unittest import mock

import pytest

import printpos
from printpos.escpos.printer import PrinterConfig


class TestVersionMetadata:
    """Version metadata and constants."""

    def test_version_format(self) -> None:
        assert re.match(r"^\d+\.\d+\.\d+$", printpos.__version__)

    def test_version_components(self) -> None:
        expected = f"{printpos.VERSION_MAJOR}.{printpos.VERSION_MINOR}.{printpos.VERSION_PATCH}"
        assert printpos.__version__ == expected

    def test_metadata_attributes(self) -> None:
        for name in ("__author__", "__description__", "__license__", "__python_requires__"):
            value = getattr(printpos, name)
            assert isinstance(value, str) and value, f"{name} must be a non-empty string"


class TestPublicAPI:
    """Public API exports."""

    def test_all_exports_exist(self) -> None:
        for name in printpos.__all__:
            assert hasattr(printpos, name), f"'{name}' from __all__ is missing"

    def test_no_duplicate_exports(self) -> None:
        assert len(printpos.__all__) == len(set(printpos.__all__))

    def test_core_exported(self) -> None:
        for name in ("ThermalPrinter", "print_receipt", "load_template", "PrinterError"):
            assert name in printpos.__all__


class TestLogging:
    """Package logger configuration."""

    @pytest.fixture
    def bare_logger(self) -> Iterator[logging.Logger]:
        logger = logging.getLogger("printpos")
        handlers, level = logger.handlers[:], logger.level
        for handler in handlers:
            logger.removeHandler(handler)
        yield logger
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
            handler.close()
        for handler in handlers:
            logger.addHandler(handler)
        logger.setLevel(level)

    def test_get_logger_namespaces(self) -> None:
        assert printpos.get_logger("jobs").name == "printpos.jobs"
        assert printpos.get_logger("printpos.cli").name == "printpos.cli"
        assert printpos.get_logger("__main__").name == "printpos.main"

    def test_package_logger_has_stderr_handler(self) -> None:
        handlers = logging.getLogger("printpos").handlers
        assert any(isinstance(h, logging.StreamHandler) for h in handlers)

    def test_level_from_environment(self, bare_logger: logging.Logger) -> None:
        with mock.patch.dict("os.environ", {"PRINTPOS_LOG_LEVEL": "DEBUG"}):
            printpos._setup_logging()
        assert bare_logger.level == logging.DEBUG

    def test_unknown_level_defaults_to_info(self, bare_logger: logging.Logger) -> None:
        with mock.patch.dict("os.environ", {"PRINTPOS_LOG_LEVEL": "LOUD"}):
            printpos._setup_logging()
        assert bare_logger.level == logging.INFO

    def test_log_file(self, bare_logger: logging.Logger, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "printpos.log"
        with mock.patch.dict("os.environ", {"PRINTPOS_LOG_FILE": str(log_file)}):
            printpos._setup_logging()

        file_handlers = [
            h for h in bare_logger.handlers if isinstance(h, logging.handlers.RotatingFileHandler)
        ]
        assert len(file_handlers) == 1
        assert log_file.parent.is_dir()

    def test_set_console_level(self, bare_logger: logging.Logger, tmp_path: Path) -> None:
        env = {"PRINTPOS_LOG_FILE": str(tmp_path / "p.log"), "PRINTPOS_LOG_LEVEL": "INFO"}
        with mock.patch.dict("os.environ", env):
            printpos._setup_logging()

        printpos.set_console_level(logging.DEBUG)

        assert bare_logger.level == logging.DEBUG
        levels = {type(h): h.level for h in bare_logger.handlers}
        assert levels[logging.StreamHandler] == logging.DEBUG
        assert levels[logging.handlers.RotatingFileHandler] == logging.INFO

    def test_setup_is_idempotent(self) -> None:
        before = list(logging.getLogger("printpos").handlers)
        printpos._setup_logging()
        assert logging.getLogger("printpos").handlers == before


class TestConfiguration:
    """load_config() and PrinterConfig."""

    def test_defaults_when_missing(self, tmp_path: Path) -> None:
        config = printpos.load_config(tmp_path / "absent.json")
        assert config["device"] == "/dev/ttyAMA0"
        assert config["baudrate"] == 19200
        assert config["firmware"] == 268
        assert config["code_page"] == "PC437"

    def test_merges_over_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "printpos.json"
        path.write_text(json.dumps({"device": "/dev/serial0", "firmware": 260}), encoding="utf-8")

        config = printpos.load_config(path)

        assert config["device"] == "/dev/serial0"
        assert config["firmware"] == 260
        assert config["heat_time"] == 120

    def test_invalid_json_warns(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        path = tmp_path / "printpos.json"
        path.write_text("{invalid json", encoding="utf-8")

        with caplog.at_level(logging.WARNING):
            config = printpos.load_config(path)

        assert config["device"] == "/dev/ttyAMA0"
        assert "invalid JSON" in caplog.text

    def test_non_object_json(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        path = tmp_path / "printpos.json"
        path.write_text(json.dumps(["not", "a", "dict"]), encoding="utf-8")

        with caplog.at_level(logging.WARNING):
            config = printpos.load_config(path)

        assert config["baudrate"] == 19200
        assert "JSON object" in caplog.text

    def test_defaults_not_mutated(self, tmp_path: Path) -> None:
        path = tmp_path / "printpos.json"
        path.write_text(json.dumps({"baudrate": 9600}), encoding="utf-8")
        printpos.load_config(path)
        assert printpos.load_config(tmp_path / "absent.json")["baudrate"] == 19200

    def test_printer_config_from_dict(self) -> None:
        config = PrinterConfig.from_dict({**printpos.load_config(Path("/nonexistent.json")), "extra": 1})
        assert config == PrinterConfig()


class TestDependencyCheck:
    """check_dependencies()."""

    def test_reports_runtime_dependencies(self) -> None:
        deps = printpos.check_dependencies()
        assert set(deps) == {"pyserial", "pillow"}
        assert all(isinstance(v, bool) for v in deps.values())
        # both are hard requirements of the package itself
        assert deps["pyserial"] and deps["pillow"]


class TestPrinterConfigTypes:
    """PrinterConfig.from_dict() rejects values of the wrong type."""

    @pytest.mark.parametrize(
        "key,value",
        [("baudrate", "19200"), ("firmware", True), ("code_page", None), ("pacing", "yes"), ("device", 0)],
    )
    def test_wrong_type(self, key: str, value: object) -> None:
        with pytest.raises(printpos.InvalidArgument) as exc_info:
            PrinterConfig.from_dict({key: value})
        assert key in str(exc_info.value)

    def test_accepts_matching_types(self) -> None:
        config = PrinterConfig.from_dict({"baudrate": 9600, "strict_names": True, "code_page": "PC866"})
        assert config.baudrate == 9600
        assert config.strict_names
