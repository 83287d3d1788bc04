"""
printpos
========

Driver for serial thermal receipt printers (ESC/POS, 384-dot head).

This package provides:
    - ThermalPrinter: stateful command encoder with open-loop pacing
    - Byte builders for every supported ESC/POS command family
    - Code page transcoding (PC437, PC850, PC858, WPC1252, PC866, WPC1251)
    - JSON receipt templates (header, lines, footer, barcode options)
    - Serial, device file and in-memory transports
    - The print-pos command line tool

Basic usage:
    >>> from printpos import ThermalPrinter, SerialTransport, get_logger
    >>>
    >>> logger = get_logger(__name__)
    >>> printer = ThermalPrinter(SerialTransport("/dev/ttyAMA0", 19200))
    >>> printer.begin()
    >>> printer.set_align("center")
    >>> printer.set_font_size("large")
    >>> printer.write_text("STORE")
    >>> printer.feed(2)

Printing a template:
    >>> from printpos import load_template, print_receipt
    >>>
    >>> errors = print_receipt(printer, load_template("receipt.json"))
    >>> for error in errors:
    ...     logger.warning("Skipped: %s", error)

Configuration:
    >>> import os
    >>> os.environ["PRINTPOS_LOG_LEVEL"] = "DEBUG"
    >>>
    >>> from printpos import load_config, PrinterConfig
    >>>
    >>> config = PrinterConfig.from_dict(load_config())
    >>> print(config.device)
    /dev/ttyAMA0

Version: 0.1.0
License: MIT
Python: 3.11+
"""

import importlib.util
import json
import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

# =============================================================================
# VERSION METADATA
# =============================================================================

__version__ = "0.1.0"
__author__ = "printpos developers"
__description__ = "Serial thermal receipt printer driver and CLI"
__license__ = "MIT"
__python_requires__ = ">=3.11"

VERSION_MAJOR = 0
VERSION_MINOR = 1
VERSION_PATCH = 0

if sys.version_info < (3, 11):
    raise RuntimeError(
        f"printpos requires Python 3.11 or newer. "
        f"Current version: {sys.version_info.major}."
        f"{sys.version_info.minor}.{sys.version_info.micro}"
    )

# =============================================================================
# LOGGING
# =============================================================================

LOGGER_NAME = "printpos"

_LOG_LEVELS: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def _setup_logging() -> None:
    """
    Configure the package logger.

    - stderr handler for WARNING and above
    - rotating file handler for every level, only when PRINTPOS_LOG_FILE is set
    - level from PRINTPOS_LOG_LEVEL (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Called once on import; calling again does nothing.
    """
    log_level = _LOG_LEVELS.get(os.environ.get("PRINTPOS_LOG_LEVEL", "INFO").upper(), logging.INFO)

    package_logger = logging.getLogger(LOGGER_NAME)
    if package_logger.handlers:
        return

    package_logger.setLevel(log_level)

    formatter = logging.Formatter(
        fmt="[%(asctime)s] %(levelname)-8s [%(name)s.%(funcName)s:%(lineno)d] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)

    log_file = os.environ.get("PRINTPOS_LOG_FILE")
    if log_file:
        try:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                filename=log_file,
                maxBytes=10 * 1024 * 1024,  # 10 MB
                backupCount=5,
                encoding="utf-8",
            )
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            package_logger.addHandler(file_handler)
        except OSError as e:
            package_logger.warning("Cannot open log file %s: %s. Logging to stderr only.", log_file, e)


def get_logger(module_name: str) -> logging.Logger:
    """
    Logger namespaced under "printpos".

    Example:
        >>> get_logger("jobs").name
        'printpos.jobs'
        >>> get_logger("printpos.cli").name
        'printpos.cli'
    """
    if module_name.startswith(LOGGER_NAME):
        return logging.getLogger(module_name)
    if module_name == "__main__":
        return logging.getLogger(f"{LOGGER_NAME}.main")
    return logging.getLogger(f"{LOGGER_NAME}.{module_name.lstrip('.')}")


def set_console_level(level: int) -> None:
    """Set the package logger and its stderr handler to the same level (CLI --verbose)."""
    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.setLevel(level)
    for handler in package_logger.handlers:
        # file handlers are StreamHandlers too
        if type(handler) is logging.StreamHandler:
            handler.setLevel(level)


# =============================================================================
# CONFIGURATION
# =============================================================================

DEFAULT_CONFIG_FILE = "printpos.json"

_DEFAULT_CONFIG: Dict[str, Any] = {
    "device": "/dev/ttyAMA0",
    "baudrate": 19200,
    "firmware": 268,
    "heat_dots": 11,
    "heat_time": 120,
    "heat_interval": 40,
    "print_density": 10,
    "print_break_time": 2,
    "code_page": "PC437",
    "strict_names": False,
    "pacing": True,
}


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load settings from a JSON file merged over the defaults.

    A missing file, invalid JSON or a non-object document logs a warning
    and gives the defaults; printing never stops on a bad config file.

    Keys:
        device, baudrate, firmware, heat_dots, heat_time, heat_interval,
        print_density, print_break_time, code_page, strict_names, pacing

    Args:
        config_path: File to read; defaults to printpos.json in the current
            directory.

    Example:
        >>> config = load_config()
        >>> config["baudrate"]
        19200
    """
    logger = get_logger(__name__)

    if config_path is None:
        config_path = Path(DEFAULT_CONFIG_FILE)

    config = _DEFAULT_CONFIG.copy()

    if not config_path.exists():
        logger.info("Config file %s not found, using defaults", config_path)
        return config

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            user_config = json.load(f)
        if not isinstance(user_config, dict):
            raise ValueError(f"Config must be a JSON object, got {type(user_config).__name__}")
        config.update(user_config)
        logger.info("Config loaded from %s", config_path)
        logger.debug("Config: %s", config)
    except json.JSONDecodeError as e:
        logger.warning(
            "Cannot parse %s: invalid JSON at line %d, column %d. Using defaults.",
            config_path,
            e.lineno,
            e.colno,
        )
    except OSError as e:
        logger.warning("Cannot read %s: %s. Using defaults.", config_path, e)
    except ValueError as e:
        logger.warning("Invalid config format: %s. Using defaults.", e)

    return config


def check_dependencies() -> Dict[str, bool]:
    """
    Report which third-party libraries are importable.

    Example:
        >>> deps = check_dependencies()
        >>> if not deps["pyserial"]:
        ...     print("pyserial missing: only file and memory transports work")
    """
    modules = {"pyserial": "serial", "pillow": "PIL"}
    return {name: importlib.util.find_spec(module) is not None for name, module in modules.items()}


_setup_logging()

# =============================================================================
# PUBLIC API
# =============================================================================

from printpos.errors import (  # noqa: E402
    EmptyPayload,
    EncodingError,
    InvalidArgument,
    NotStartedError,
    PrinterError,
    TemplateError,
    TransportError,
    UnsupportedNode,
)
from printpos.escpos import (  # noqa: E402
    BufferTransport,
    FileTransport,
    PacingClock,
    PrinterConfig,
    SerialTransport,
    ThermalPrinter,
    open_transport,
)
from printpos.model import PrintTemplate, load_template  # noqa: E402
from printpos.receipt import print_receipt  # noqa: E402

__all__ = [
    # version metadata
    "__version__",
    "__author__",
    "__description__",
    "__license__",
    "__python_requires__",
    "VERSION_MAJOR",
    "VERSION_MINOR",
    "VERSION_PATCH",
    # utilities
    "get_logger",
    "set_console_level",
    "load_config",
    "check_dependencies",
    # errors
    "PrinterError",
    "InvalidArgument",
    "EncodingError",
    "EmptyPayload",
    "TransportError",
    "NotStartedError",
    "UnsupportedNode",
    "TemplateError",
    # driver
    "ThermalPrinter",
    "PrinterConfig",
    "PacingClock",
    "SerialTransport",
    "FileTransport",
    "BufferTransport",
    "open_transport",
    # templates
    "PrintTemplate",
    "load_template",
    "print_receipt",
]
