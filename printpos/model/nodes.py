"""
Print nodes: the units of a receipt template.

A node is one of a closed set of variants (PrintNode). The template loader
picks the variant once; the encoder dispatches on the type, so a record with
several mode flags never reaches the printer ambiguous.

Raw template record:
    {"line": bool, "align": str, "style": str, "size": str, "text": str,
     "image": bool, "barCode": bool, "qrCode": bool}
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Final, Mapping, Union

from printpos.errors import TemplateError
from printpos.escpos.commands.barcode import BarcodeHRI

__all__ = [
    "TextRun",
    "LineRule",
    "BarcodeNode",
    "ImageNode",
    "QrCodeNode",
    "PrintNode",
    "BarcodeOptions",
    "node_from_dict",
    "node_to_dict",
]

logger: Final = logging.getLogger(__name__)

MODE_FLAGS: Final[tuple[str, ...]] = ("barCode", "qrCode", "image", "line")
"""Mode flags in precedence order: the first one set wins."""


@dataclass(frozen=True, slots=True)
class TextRun:
    """Text printed with its own alignment, style and size; state is restored afterwards."""

    text: str
    align: str = ""
    style: str = ""
    size: str = ""


@dataclass(frozen=True, slots=True)
class LineRule:
    """Full-width dashed separator, with an optional caption printed above it."""

    text: str = ""


@dataclass(frozen=True, slots=True)
class BarcodeNode:
    """Barcode with the template's shared BarcodeOptions; text is the payload."""

    text: str


@dataclass(frozen=True, slots=True)
class ImageNode:
    text: str = ""


@dataclass(frozen=True, slots=True)
class QrCodeNode:
    text: str = ""


PrintNode = Union[TextRun, LineRule, BarcodeNode, ImageNode, QrCodeNode]


@dataclass(frozen=True, slots=True)
class BarcodeOptions:
    """
    Barcode settings shared by every barcode node of a template.

    Attributes:
        height: Bar height in dots, 0-255 (0 is printed as 1).
        chr: Label position, 0 none, 1 above, 2 below, 3 both.
        code: Symbology name, e.g. "CODE128", "EAN13".
    """

    height: int = 50
    chr: int = 2
    code: str = "CODE128"

    def validate(self) -> None:
        if not isinstance(self.height, int) or isinstance(self.height, bool):
            raise TemplateError(f"barCode.height must be an integer, got {self.height!r}")
        if not 0 <= self.height <= 255:
            raise TemplateError(f"barCode.height must be 0..255, got {self.height}")
        if not isinstance(self.chr, int) or isinstance(self.chr, bool):
            raise TemplateError(f"barCode.chr must be an integer, got {self.chr!r}")
        if not 0 <= self.chr <= 3:
            raise TemplateError(f"barCode.chr must be 0..3, got {self.chr}")
        if not isinstance(self.code, str):
            raise TemplateError(f"barCode.code must be a string, got {self.code!r}")

    @property
    def hri(self) -> BarcodeHRI:
        return BarcodeHRI(self.chr)

    def to_dict(self) -> dict[str, Any]:
        return {"height": self.height, "chr": self.chr, "code": self.code}

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "BarcodeOptions":
        if not isinstance(data, Mapping):
            raise TemplateError(f"barCode must be an object, got {type(data).__name__}")
        options = BarcodeOptions(
            height=data.get("height", 50),
            chr=data.get("chr", 2),
            code=data.get("code", "CODE128"),
        )
        options.validate()
        return options


def _text(record: Mapping[str, Any]) -> str:
    value = record.get("text", "")
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TemplateError(f"Node text must be a string, got {type(value).__name__}")
    return value


def node_from_dict(record: Mapping[str, Any]) -> PrintNode:
    """
    Build the node variant for one template record.

    Precedence when several mode flags are set: barCode, qrCode, image,
    line; the conflict is logged. No flag means a text run.
    """
    if not isinstance(record, Mapping):
        raise TemplateError(f"Node must be an object, got {type(record).__name__}")

    flags = [name for name in MODE_FLAGS if bool(record.get(name, False))]
    if len(flags) > 1:
        logger.warning("Node sets several mode flags %s, using %r", flags, flags[0])

    text = _text(record)
    mode = flags[0] if flags else None
    if mode == "barCode":
        return BarcodeNode(text=text)
    if mode == "qrCode":
        return QrCodeNode(text=text)
    if mode == "image":
        return ImageNode(text=text)
    if mode == "line":
        return LineRule(text=text)
    return TextRun(
        text=text,
        align=str(record.get("align") or ""),
        style=str(record.get("style") or ""),
        size=str(record.get("size") or ""),
    )


def node_to_dict(node: PrintNode) -> dict[str, Any]:
    """Inverse of node_from_dict, in template record form."""
    if isinstance(node, TextRun):
        return {"text": node.text, "align": node.align, "style": node.style, "size": node.size}
    if isinstance(node, LineRule):
        return {"line": True, "text": node.text} if node.text else {"line": True}
    if isinstance(node, BarcodeNode):
        return {"barCode": True, "text": node.text}
    if isinstance(node, ImageNode):
        return {"image": True, "text": node.text}
    if isinstance(node, QrCodeNode):
        return {"qrCode": True, "text": node.text}
    raise TypeError(f"Not a print node: {node!r}")
