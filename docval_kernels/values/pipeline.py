"""
Possible-values pass for one symbol, and for a batch of independent symbols.

    parse_directives ─┐
                      ├─> reconcile ─┬─> emit_unknown_values ─> DiagnosticEngine
    extract_canonical ┘              └─> merge_content ─> route_render ─> RenderPlan

A pass is pure and synchronous. Its diagnostics are collected locally, sorted
by location, returned on the result and forwarded to the caller's engine, so
batches run on a thread pool give the same output as sequential runs.

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-03-02
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from docval_kernels.values.canonical import extract_canonical_values
from docval_kernels.values.config import ValuesConfig, get_values_config
from docval_kernels.values.diagnostics import DiagnosticEngine, emit_unknown_values
from docval_kernels.values.links import LinkResolver
from docval_kernels.values.md_parser import parse_directives
from docval_kernels.values.merge import merge_content
from docval_kernels.values.models import (
    CanonicalEntry,
    Diagnostic,
    DocumentedEntry,
    PassthroughAttribute,
    ReconciledEntry,
    RenderPlan,
)
from docval_kernels.values.reconcile import Reconciliation, reconcile
from docval_kernels.values.render import plan_to_dict, route_render

import logging

logger = logging.getLogger(__name__)

# Raw body, bodies keyed by variant tag, or already-parsed entries
Documentation = Union[str, Mapping[Optional[str], str], List[DocumentedEntry]]


@dataclass
class PossibleValuesResult:
    """Outcome of one symbol's pass."""
    symbol: str
    context_path: str
    entries: List[ReconciledEntry]
    reconciliation: Reconciliation
    plan: RenderPlan
    diagnostics: List[Diagnostic] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "symbol": self.symbol,
            "context_path": self.context_path,
            "entries": [e.to_dict() for e in self.entries],
            "extra": [e.name for e in self.reconciliation.extra],
            "implicit": [c.name for c in self.reconciliation.implicit],
            "render": plan_to_dict(self.plan),
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }


def _documented_entries(
    documentation: Documentation,
    source: Optional[str],
    line_offset: int,
    config: ValuesConfig,
) -> List[DocumentedEntry]:
    if isinstance(documentation, str):
        return parse_directives(documentation, source, line_offset, None, config)
    if isinstance(documentation, Mapping):
        entries: List[DocumentedEntry] = []
        for variant, text in documentation.items():
            entries.extend(parse_directives(text, source, line_offset, variant, config))
        return entries
    return list(documentation)


def _canonical_entries(canonical: Any) -> List[CanonicalEntry]:
    if isinstance(canonical, list) and canonical and all(isinstance(c, CanonicalEntry) for c in canonical):
        return canonical
    return extract_canonical_values(canonical)


def reconcile_symbol(
    symbol: str,
    documentation: Documentation,
    canonical: Any,
    resolver: Optional[LinkResolver] = None,
    engine: Optional[DiagnosticEngine] = None,
    context_path: Optional[str] = None,
    source: Optional[str] = None,
    line_offset: int = 0,
    variant: Optional[str] = None,
    extra_attributes: Iterable[PassthroughAttribute] = (),
    config: Optional[ValuesConfig] = None,
) -> PossibleValuesResult:
    """
    Run the possible-values pass for one symbol.

    Args:
        symbol: Symbol title (used in diagnostic summaries)
        documentation: Authored body, ``{variant: body}``, or parsed entries
        canonical: Symbol metadata or a CanonicalEntry list
        resolver: Link resolver; references stay unresolved text when None
        engine: Caller-owned sink that also receives this pass's diagnostics
        context_path: Symbol path for link resolution (default ``/{symbol}``)
        source: File reference for parsed entries
        line_offset: Lines preceding the body in its file
        variant: Content variant selected for rendering
        extra_attributes: Other attributes carried into the render plan
        config: Values configuration (global default if None)

    Returns:
        PossibleValuesResult
    """
    cfg = config or get_values_config()
    path = context_path or f"/{symbol}"
    local = DiagnosticEngine()

    documented = _documented_entries(documentation, source, line_offset, cfg)
    declared = _canonical_entries(canonical)

    reconciliation = reconcile(documented, declared, cfg)
    emit_unknown_values(reconciliation.extra, declared, symbol, local, cfg)

    entries = reconciliation.entries
    if resolver is not None:
        entries = merge_content(entries, resolver, path, local)

    plan = route_render(entries, variant=variant, extra_attributes=extra_attributes)
    diagnostics = local.drain()
    if engine is not None:
        engine.emit_all(diagnostics)

    logger.info(
        f"[{symbol}] {len(entries)} value(s), {plan.mode.value}, "
        f"{len(diagnostics)} diagnostic(s)"
    )
    return PossibleValuesResult(
        symbol=symbol,
        context_path=path,
        entries=entries,
        reconciliation=reconciliation,
        plan=plan,
        diagnostics=diagnostics,
    )


@dataclass
class SymbolJob:
    """Inputs of one symbol's pass in a batch."""
    symbol: str
    documentation: Documentation
    canonical: Any
    context_path: Optional[str] = None
    source: Optional[str] = None
    line_offset: int = 0
    variant: Optional[str] = None


def reconcile_symbols(
    jobs: List[SymbolJob],
    resolver: Optional[LinkResolver] = None,
    engine: Optional[DiagnosticEngine] = None,
    config: Optional[ValuesConfig] = None,
    max_workers: Optional[int] = None,
) -> List[PossibleValuesResult]:
    """
    Run independent symbols' passes on a thread pool.

    Results come back in input order; diagnostics go to ``engine``.
    """
    cfg = config or get_values_config()
    workers = max_workers or cfg.max_workers

    def _run(job: SymbolJob) -> PossibleValuesResult:
        return reconcile_symbol(
            job.symbol,
            job.documentation,
            job.canonical,
            resolver=resolver,
            engine=engine,
            context_path=job.context_path,
            source=job.source,
            line_offset=job.line_offset,
            variant=job.variant,
            config=cfg,
        )

    if workers <= 1 or len(jobs) <= 1:
        return [_run(job) for job in jobs]

    with ThreadPoolExecutor(max_workers=workers) as executor:
        return list(executor.map(_run, jobs))
