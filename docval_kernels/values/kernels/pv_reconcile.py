"""
Kernel: pv_reconcile
Stage: 2 (Analysis)

Reconcile the documented possible values of every page with the values its
symbol declares: one reconciled entry per declared value, a warning (with a
suggested fix) per undeclared documented value, a warning per unresolved
reference in the documented content, and the render plan of each symbol.

Diagnostics are also written to ``stage2/diagnostics.log`` (text) and
``stage2/diagnostics.jsonl`` (one JSON record per diagnostic); the ``logging``
config can move them.

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-03-02
"""

from pathlib import Path
from typing import Any, Dict, List

from docval_core.logging_utils import DiagnosticLog, LogLevel
from docval_kernels.base import Kernel, KernelInput, load_kernel_data
from docval_kernels.values.canonical import SymbolCatalog, SymbolMetadata
from docval_kernels.values.config import ValuesConfig
from docval_kernels.values.diagnostics import DiagnosticEngine
from docval_kernels.values.links import CatalogLinkResolver
from docval_kernels.values.models import CanonicalEntry, DocumentedEntry
from docval_kernels.values.pipeline import SymbolJob, reconcile_symbols

import logging

logger = logging.getLogger(__name__)


def _catalog_from_data(data: Dict[str, Any]) -> SymbolCatalog:
    return SymbolCatalog(
        module=data.get("module", ""),
        symbols=[
            SymbolMetadata(title=s["title"], path=s["path"], metadata=s.get("metadata", {}))
            for s in data.get("symbols", [])
        ],
        articles=list(data.get("articles", [])),
    )


def _diagnostic_log(input: KernelInput) -> DiagnosticLog:
    log_cfg = input.config.get("logging") or {}
    log_dir = Path(log_cfg.get("log_dir") or "stage2")
    if not log_dir.is_absolute():
        log_dir = input.workspace / log_dir
    try:
        level = LogLevel(str(log_cfg.get("level", "INFO")).upper())
    except ValueError:
        level = LogLevel.INFO
    return DiagnosticLog(
        log_dir,
        min_level=level,
        text_name=log_cfg.get("text_log", "diagnostics.log"),
        json_name=log_cfg.get("json_log", "diagnostics.jsonl"),
    )


class PvReconcileKernel(Kernel):
    """Reconciliation, diagnostics and render plans per documented symbol."""

    name = "pv_reconcile"
    version = "1.0.0"
    category = "values"
    stage = 2
    description = "Reconcile documented and declared possible values"

    requires: List[str] = ["pv_directives", "pv_canonical"]
    provides: List[str] = ["reconciled_values", "possible_values_diagnostics", "render_plans"]

    def compute(self, input: KernelInput) -> Dict[str, Any]:
        directives = load_kernel_data(input.dependencies["pv_directives"])
        canonical = load_kernel_data(input.dependencies["pv_canonical"])
        cfg = ValuesConfig.from_dict(input.config.get("values"))

        catalog = _catalog_from_data(canonical)
        declared = {
            s["title"]: [CanonicalEntry.from_dict(c) for c in s.get("canonical", [])]
            for s in canonical.get("symbols", [])
        }

        # Pages documenting the same symbol (e.g. per variant) form one pass
        jobs: Dict[str, SymbolJob] = {}
        for page in directives.get("pages", []):
            symbol = catalog.find(page["symbol"])
            if symbol is None:
                raise RuntimeError(f"Symbol '{page['symbol']}' documented in {page['path']} is not in the catalog")
            entries = [DocumentedEntry.from_dict(e) for e in page.get("entries", [])]
            job = jobs.get(symbol.title)
            if job is None:
                jobs[symbol.title] = SymbolJob(
                    symbol=symbol.title,
                    documentation=entries,
                    canonical=declared.get(symbol.title, []),
                    context_path=symbol.path,
                    source=page["path"],
                    variant=input.config.get("variant"),
                )
            else:
                job.documentation = list(job.documentation) + entries

        engine = DiagnosticEngine()
        results = reconcile_symbols(
            list(jobs.values()),
            resolver=CatalogLinkResolver(catalog),
            engine=engine,
            config=cfg,
        )
        diagnostics = [d.to_dict() for d in engine.drain()]

        diag_log = _diagnostic_log(input)
        for path in (diag_log.text_log, diag_log.json_log):
            path.unlink(missing_ok=True)
        diag_log.log_diagnostics(diagnostics)

        by_kind: Dict[str, int] = {}
        for d in diagnostics:
            by_kind[d["kind"]] = by_kind.get(d["kind"], 0) + 1

        logger.info(
            f"[pv_reconcile] {len(results)} symbol(s), {len(diagnostics)} diagnostic(s)"
        )

        return {
            "symbols": [r.to_dict() for r in results],
            "diagnostics": diagnostics,
            "total_symbols": len(results),
            "total_diagnostics": len(diagnostics),
            "by_kind": by_kind,
            "diagnostics_file": str(diag_log.json_log),
        }

    def summarize(self, data: Dict[str, Any]) -> str:
        modes = [f"{s['symbol']}={s['render']['mode']}" for s in data.get("symbols", [])]
        by_kind = data.get("by_kind", {})
        parts = [f"{v} {k}" for k, v in sorted(by_kind.items())]
        return (
            f"Possible values: {data['total_symbols']} symbol(s) [{', '.join(modes)}]. "
            f"Diagnostics: {data['total_diagnostics']}"
            + (f" ({', '.join(parts)})" if parts else "")
        )
