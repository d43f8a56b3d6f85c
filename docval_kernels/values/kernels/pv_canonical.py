"""
Kernel: pv_canonical
Stage: 1 (Collection)

Load the symbol catalog and extract each symbol's declared (canonical)
possible values, in declaration order.

Config:
    catalog: path to the catalog JSON (see canonical.parse_symbol_catalog)

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-03-02
"""

from pathlib import Path
from typing import Any, Dict, List

from docval_kernels.base import Kernel, KernelInput
from docval_kernels.values.canonical import load_symbol_catalog

import logging

logger = logging.getLogger(__name__)


class PvCanonicalKernel(Kernel):
    """Declared possible values per catalog symbol."""

    name = "pv_canonical"
    version = "1.0.0"
    category = "values"
    stage = 1
    description = "Canonical possible values from the symbol catalog"

    requires: List[str] = []
    provides: List[str] = ["canonical_values"]

    def compute(self, input: KernelInput) -> Dict[str, Any]:
        catalog_cfg = input.config.get("catalog")
        if not catalog_cfg:
            raise RuntimeError("No symbol catalog configured")
        path = Path(catalog_cfg)
        if not path.is_file():
            raise RuntimeError(f"Symbol catalog not found: {path}")

        catalog = load_symbol_catalog(path)

        symbols = []
        for symbol in catalog.symbols:
            canonical = symbol.canonical_values
            symbols.append({
                **symbol.to_dict(),
                "canonical": [c.to_dict() for c in canonical],
            })

        with_values = sum(1 for s in symbols if s["canonical"])
        logger.info(f"[pv_canonical] {len(symbols)} symbol(s), {with_values} with possible values")

        return {
            "module": catalog.module,
            "articles": list(catalog.articles),
            "symbols": symbols,
            "total_symbols": len(symbols),
            "symbols_with_values": with_values,
        }

    def summarize(self, data: Dict[str, Any]) -> str:
        return (
            f"Catalog '{data['module']}': {data['total_symbols']} symbol(s), "
            f"{data['symbols_with_values']} declaring possible values, "
            f"{len(data['articles'])} article(s)"
        )
