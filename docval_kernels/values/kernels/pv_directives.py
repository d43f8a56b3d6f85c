"""
Kernel: pv_directives
Stage: 1 (Collection)

Read symbol documentation pages and extract their possible-value directives
(``- PossibleValue name: ...`` and ``- PossibleValues:`` blocks), with the
symbol each page documents.

Config:
    pages: list of page paths, or of ``{"path", "variant", "symbol"}`` mappings
    values: ValuesConfig as a dict (directive keywords)

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-03-02
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from docval_kernels.base import Kernel, KernelInput
from docval_kernels.values.config import ValuesConfig
from docval_kernels.values.md_parser import extract_page_title, parse_directives

import logging

logger = logging.getLogger(__name__)


def _page_spec(item: Any) -> Dict[str, Optional[str]]:
    if isinstance(item, (str, Path)):
        return {"path": str(item), "variant": None, "symbol": None}
    if isinstance(item, dict) and item.get("path"):
        return {"path": str(item["path"]), "variant": item.get("variant"), "symbol": item.get("symbol")}
    raise RuntimeError(f"Invalid page entry: {item!r}")


class PvDirectivesKernel(Kernel):
    """Extract located possible-value entries from documentation pages."""

    name = "pv_directives"
    version = "1.0.0"
    category = "values"
    stage = 1
    description = "Possible-value directives of documentation pages"

    requires: List[str] = []
    provides: List[str] = ["documented_values"]

    def compute(self, input: KernelInput) -> Dict[str, Any]:
        pages_cfg = input.config.get("pages") or []
        if not pages_cfg:
            raise RuntimeError("No documentation pages configured")
        cfg = ValuesConfig.from_dict(input.config.get("values"))

        pages = []
        total = 0
        for item in pages_cfg:
            spec = _page_spec(item)
            path = Path(spec["path"])
            if not path.is_file():
                raise RuntimeError(f"Documentation page not found: {path}")

            text = path.read_text(encoding="utf-8")
            title, body, line_offset = extract_page_title(text)
            symbol = spec["symbol"] or title
            if not symbol:
                raise RuntimeError(f"Cannot tell which symbol {path} documents (no ``Symbol`` heading)")

            entries = parse_directives(body, spec["path"], line_offset, spec["variant"], cfg)
            total += len(entries)
            pages.append({
                "path": spec["path"],
                "symbol": symbol,
                "variant": spec["variant"],
                "line_offset": line_offset,
                "entries": [e.to_dict() for e in entries],
            })
            logger.info(f"[pv_directives] {spec['path']}: {len(entries)} possible value(s) for '{symbol}'")

        return {"pages": pages, "total_pages": len(pages), "total_entries": total}

    def summarize(self, data: Dict[str, Any]) -> str:
        symbols = sorted({p["symbol"] for p in data.get("pages", [])})
        return (
            f"Directives: {data['total_entries']} possible value(s) in "
            f"{data['total_pages']} page(s). Symbols: {', '.join(symbols) if symbols else 'none'}"
        )
