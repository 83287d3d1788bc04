"""
Receipt orchestration: walks a PrintTemplate through a ThermalPrinter.

Section layout:
    header  -> nodes, then one blank line
    lines   -> nodes
    footer  -> nodes, then three lines so the tear bar clears the text

Empty sections send nothing at all.
"""

from __future__ import annotations

import logging
from typing import Final

from printpos.errors import PrinterError
from printpos.escpos.printer import ThermalPrinter
from printpos.model.template import PrintTemplate

__all__ = ["HEADER_FEED", "FOOTER_FEED", "print_receipt"]

logger: Final = logging.getLogger(__name__)

HEADER_FEED: Final[int] = 1
FOOTER_FEED: Final[int] = 3


def print_receipt(printer: ThermalPrinter, template: PrintTemplate) -> list[PrinterError]:
    """
    Print every section of a template on a started printer.

    Returns:
        Node errors in print order; an empty list means every node printed.
    """
    errors: list[PrinterError] = []
    options = template.barcode

    if template.header:
        errors += printer.write_node(template.header, options)
        printer.feed(HEADER_FEED)
    if template.lines:
        errors += printer.write_node(template.lines, options)
    if template.footer:
        errors += printer.write_node(template.footer, options)
        printer.feed(FOOTER_FEED)

    if errors:
        logger.warning("Receipt printed with %d skipped node(s)", len(errors))
    else:
        logger.info("Receipt printed: %d node(s)", template.node_count())
    if printer.transport_error is not None:
        logger.error("Transport failures during receipt: %s", printer.transport_error)
    return errors
