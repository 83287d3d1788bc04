"""Command-line interface."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

from printpos import __version__, load_config, set_console_level
from printpos.errors import PrinterError
from printpos.escpos.printer import PrinterConfig, ThermalPrinter
from printpos.escpos.transport import MEMORY_DEVICE, BufferTransport, Transport, open_transport
from printpos.model.template import load_template
from printpos.receipt import print_receipt

logger = logging.getLogger(__name__)

TEXT_FEED_LINES = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="print-pos",
        description="Mini thermal printer CLI print",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s test                              Print the self-test page
  %(prog)s text "Hello" "World" -a center    Print two centered lines
  %(prog)s file receipt.json                 Print a JSON receipt template
  %(prog)s --encode PC866 text "Привет"      Select a Cyrillic code page
  %(prog)s --debug file receipt.json         Dump bytes instead of printing
        """,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", action="store_true", help="Verbose mode")
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Debug mode: encode into memory without pacing and print a hex dump",
    )
    parser.add_argument("--config", metavar="PATH", type=Path, help="JSON config file")
    parser.add_argument("--device", metavar="DEVICE", help="Serial port or device file")
    parser.add_argument("--baudrate", type=int, metavar="BAUD", help="Serial baud rate")
    parser.add_argument("--firmware", type=int, metavar="N", help="Firmware level, e.g. 268 for 2.68")
    parser.add_argument("--encode", metavar="CODEPAGE", help="Setting code page (default: PC437)")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on unknown code page and barcode names instead of falling back",
    )

    commands = parser.add_subparsers(dest="command", metavar="COMMAND")
    commands.required = True

    commands.add_parser("test", help="Print test page")

    text = commands.add_parser("text", help="Print text")
    text.add_argument("-a", "--align", default="left", help="text align (L,C,R)")
    text.add_argument("text", nargs="+", help="Lines to print")

    file = commands.add_parser("file", help="Print from file")
    file.add_argument("path", type=Path, help="JSON template")

    return parser


def _printer_config(args: argparse.Namespace) -> PrinterConfig:
    settings: dict[str, Any] = dict(load_config(args.config))
    overrides = {
        "device": args.device,
        "baudrate": args.baudrate,
        "firmware": args.firmware,
        "code_page": args.encode,
    }
    settings.update({k: v for k, v in overrides.items() if v is not None})
    if args.strict:
        settings["strict_names"] = True
    if args.debug:
        settings["device"] = MEMORY_DEVICE
        settings["pacing"] = False
    return PrinterConfig.from_dict(settings)


def _hexdump(data: bytes, width: int = 16) -> str:
    lines = []
    for offset in range(0, len(data), width):
        chunk = data[offset : offset + width]
        text = "".join(chr(b) if 0x20 <= b < 0x7F else "." for b in chunk)
        lines.append(f"{offset:08x}  {chunk.hex(' '):<{width * 3}} {text}")
    return "\n".join(lines)


def run_test(printer: ThermalPrinter, args: argparse.Namespace) -> int:
    printer.test_page()
    return 0


def run_text(printer: ThermalPrinter, args: argparse.Namespace) -> int:
    status = 0
    printer.set_align(args.align)
    for line in args.text:
        try:
            printer.write_text(line)
        except PrinterError as e:
            print(e, file=sys.stderr)
            status = 1
        printer.linefeed()
    printer.feed(TEXT_FEED_LINES)
    return status


def run_file(printer: ThermalPrinter, args: argparse.Namespace) -> int:
    template = load_template(args.path)
    errors = print_receipt(printer, template)
    for error in errors:
        print(error, file=sys.stderr)
    return 1 if errors else 0


COMMANDS = {
    "test": run_test,
    "text": run_text,
    "file": run_file,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point with CLI argument parsing."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        set_console_level(logging.DEBUG)
        print(f"Print {args.command}")

    transport: Optional[Transport] = None
    try:
        config = _printer_config(args)
        transport = open_transport(config.device, config.baudrate)
        printer = ThermalPrinter(transport, config)
        printer.begin()
        printer.set_code_page(config.code_page)
        status = COMMANDS[args.command](printer, args)
    except PrinterError as e:
        print(e, file=sys.stderr)
        return 2
    except OSError as e:
        print(f"Cannot open printer {config.device}: {e}", file=sys.stderr)
        return 2
    finally:
        if transport is not None:
            transport.close()

    if isinstance(transport, BufferTransport) and args.debug:
        print(_hexdump(transport.getvalue()))
    if printer.transport_error is not None:
        print(f"{printer.failed_writes} write(s) failed: {printer.transport_error}", file=sys.stderr)
        status = status or 3
    if args.verbose:
        print("Finish :)")
    return status


if __name__ == "__main__":
    sys.exit(main())
