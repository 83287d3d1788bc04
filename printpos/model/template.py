"""
Receipt template: header, lines and footer node sequences plus shared
barcode options, loaded from JSON.

File format:
    {
      "header": [ {node}, ... ],
      "lines":  [ {node}, ... ],
      "footer": [ {node}, ... ],
      "barCode": {"height": 50, "chr": 2, "code": "CODE128"}
    }

Missing sections are empty, a missing barCode record gives defaults.
Templates are built once and only read afterwards.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final, Mapping, Union

from printpos.errors import TemplateError
from printpos.model.nodes import BarcodeOptions, PrintNode, node_from_dict, node_to_dict

__all__ = ["SECTIONS", "PrintTemplate", "load_template"]

logger: Final = logging.getLogger(__name__)

SECTIONS: Final[tuple[str, ...]] = ("header", "lines", "footer")


def _nodes(data: Mapping[str, Any], section: str) -> tuple[PrintNode, ...]:
    records = data.get(section)
    if records is None:
        return ()
    if not isinstance(records, list):
        raise TemplateError(f"Section {section!r} must be a list, got {type(records).__name__}")
    nodes = []
    for index, record in enumerate(records):
        try:
            nodes.append(node_from_dict(record))
        except TemplateError as e:
            raise TemplateError(
                f"{section}[{index}]: {e.message}", context={"section": section, "index": index}
            ) from e
    return tuple(nodes)


@dataclass(frozen=True, slots=True)
class PrintTemplate:
    header: tuple[PrintNode, ...] = ()
    lines: tuple[PrintNode, ...] = ()
    footer: tuple[PrintNode, ...] = ()
    barcode: BarcodeOptions = field(default_factory=BarcodeOptions)

    def is_empty(self) -> bool:
        return not (self.header or self.lines or self.footer)

    def node_count(self) -> int:
        return len(self.header) + len(self.lines) + len(self.footer)

    def to_dict(self) -> dict[str, Any]:
        return {
            "header": [node_to_dict(n) for n in self.header],
            "lines": [node_to_dict(n) for n in self.lines],
            "footer": [node_to_dict(n) for n in self.footer],
            "barCode": self.barcode.to_dict(),
        }

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "PrintTemplate":
        if not isinstance(data, Mapping):
            raise TemplateError(f"Template must be an object, got {type(data).__name__}")
        barcode_data = data.get("barCode")
        template = PrintTemplate(
            header=_nodes(data, "header"),
            lines=_nodes(data, "lines"),
            footer=_nodes(data, "footer"),
            barcode=BarcodeOptions() if barcode_data is None else BarcodeOptions.from_dict(barcode_data),
        )
        logger.debug(
            "Template loaded: %d header, %d lines, %d footer nodes",
            len(template.header),
            len(template.lines),
            len(template.footer),
        )
        return template


def load_template(path: Union[str, Path]) -> PrintTemplate:
    """
    Read a JSON template file.

    Raises:
        TemplateError: file unreadable, not JSON, or malformed records.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise TemplateError(f"Load file: {e}", context={"path": str(path)}) from e
    except json.JSONDecodeError as e:
        raise TemplateError(
            f"Invalid JSON at line {e.lineno}, column {e.colno}", context={"path": str(path)}
        ) from e
    logger.info("Loading template %s", path)
    return PrintTemplate.from_dict(data)
