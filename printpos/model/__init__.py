"""Receipt document model: print nodes, barcode options, templates."""

from printpos.model.enums import Alignment, TextSize, TextStyle
from printpos.model.nodes import (
    BarcodeNode,
    BarcodeOptions,
    ImageNode,
    LineRule,
    PrintNode,
    QrCodeNode,
    TextRun,
    node_from_dict,
)
from printpos.model.template import PrintTemplate, load_template

__all__ = [
    "Alignment",
    "TextSize",
    "TextStyle",
    "BarcodeNode",
    "BarcodeOptions",
    "ImageNode",
    "LineRule",
    "PrintNode",
    "QrCodeNode",
    "TextRun",
    "node_from_dict",
    "PrintTemplate",
    "load_template",
]
