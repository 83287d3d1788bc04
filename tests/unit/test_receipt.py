import logging

import pytest

from printpos.errors import UnsupportedNode
from printpos.escpos.printer import ThermalPrinter
from printpos.escpos.transport import BufferTransport
from printpos.model.template import PrintTemplate
from printpos.receipt import print_receipt

STORE_RECEIPT = {
    "header": [{"text": "STORE", "align": "center"}],
    "lines": [{"text": "item 1", "align": "left"}, {"line": True}],
    "footer": [{"text": "THANKS", "align": "center"}],
    "barCode": {"height": 50, "chr": 2, "code": "CODE128"},
}


def test_end_to_end_emission_order(started: ThermalPrinter, sink: BufferTransport) -> None:
    errors = print_receipt(started, PrintTemplate.from_dict(STORE_RECEIPT))

    assert errors == []
    assert sink.getvalue() == (
        b"\x1ba\x01STORE"  # header, centered
        b"\x1bd\x01"  # header feed
        b"\x1ba\x00item 1"  # line, left
        b"\x1bd\x01"  # fresh line for the rule
        + b"-" * 32
        + b"\x1ba\x01THANKS"  # footer, centered
        b"\x1bd\x03"  # footer feed
    )
    assert b"\x1dk" not in sink.getvalue()


def test_empty_template_sends_nothing(started: ThermalPrinter, sink: BufferTransport) -> None:
    errors = print_receipt(started, PrintTemplate())
    assert errors == []
    assert sink.getvalue() == b""


def test_barcode_in_footer(started: ThermalPrinter, sink: BufferTransport) -> None:
    template = PrintTemplate.from_dict(
        {
            "footer": [{"barCode": True, "text": "ABC-1"}],
            "barCode": {"height": 40, "chr": 1, "code": "CODE39"},
        }
    )

    print_receipt(started, template)

    assert sink.getvalue() == (
        b"\x1dh\x28\x1dH\x01\x1dw\x03" + b"\x1dk\x45\x05ABC-1" + b"\x1bd\x02" + b"\x1bd\x03"
    )


def test_errors_collected_across_sections(
    started: ThermalPrinter, sink: BufferTransport, caplog: pytest.LogCaptureFixture
) -> None:
    template = PrintTemplate.from_dict(
        {
            "header": [{"image": True, "text": "logo.png"}],
            "lines": [{"text": "ok"}],
            "footer": [{"qrCode": True, "text": "https://example.org"}],
        }
    )

    with caplog.at_level(logging.WARNING):
        errors = print_receipt(started, template)

    assert [type(e) for e in errors] == [UnsupportedNode, UnsupportedNode]
    assert b"ok" in sink.getvalue()
    assert "2 skipped node(s)" in caplog.text
