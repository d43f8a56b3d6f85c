"""
Diagnostics for documented-but-undeclared possible values.

``DiagnosticEngine`` is the context object every diagnostic-producing step
appends to. It is owned by the caller, append-only while a pass runs, safe
for concurrent appends, and drained by the caller afterwards.

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-03-02
"""

import threading
from typing import Iterable, List, Optional

from docval_kernels.values.config import ValuesConfig
from docval_kernels.values.models import (
    CanonicalEntry,
    Diagnostic,
    DiagnosticKind,
    DocumentedEntry,
    Severity,
)
from docval_kernels.values.suggest import suggest_solutions

import logging

logger = logging.getLogger(__name__)


class DiagnosticEngine:
    """
    Collects diagnostics emitted during documentation passes.

    Example:
        engine = DiagnosticEngine()
        result = reconcile_symbol(..., engine=engine)
        for problem in engine.drain():
            print(problem.summary)
    """

    def __init__(self):
        self._problems: List[Diagnostic] = []
        self._lock = threading.Lock()

    def emit(self, diagnostic: Diagnostic) -> None:
        with self._lock:
            self._problems.append(diagnostic)
        logger.debug(f"[{diagnostic.identifier}] {diagnostic.summary}")

    def emit_all(self, diagnostics: Iterable[Diagnostic]) -> None:
        for diagnostic in diagnostics:
            self.emit(diagnostic)

    @property
    def problems(self) -> List[Diagnostic]:
        """Snapshot of collected diagnostics in emission order."""
        with self._lock:
            return list(self._problems)

    def count(self, kind: Optional[DiagnosticKind] = None) -> int:
        with self._lock:
            if kind is None:
                return len(self._problems)
            return sum(1 for p in self._problems if p.kind == kind)

    def drain(self) -> List[Diagnostic]:
        """Hand over and clear the collected diagnostics, sorted by source location."""
        with self._lock:
            problems, self._problems = self._problems, []
        return sorted(problems, key=Diagnostic.sort_key)

    def __len__(self) -> int:
        return self.count()


def unknown_value_summary(name: str, symbol_name: str) -> str:
    return f"'{name}' is not a known possible value for '{symbol_name}'."


def emit_unknown_values(
    extra: List[DocumentedEntry],
    canonical: List[CanonicalEntry],
    symbol_name: str,
    engine: DiagnosticEngine,
    config: Optional[ValuesConfig] = None,
) -> List[Diagnostic]:
    """
    Emit one warning per authored value that the symbol does not declare.

    Args:
        extra: Unmatched authored entries from the reconciler
        canonical: Declared values (for suggestions)
        symbol_name: Symbol title used in the summary
        engine: Caller-owned diagnostic sink
        config: Values configuration (global default if None)

    Returns:
        The emitted diagnostics, in authored order
    """
    emitted = []
    for entry in extra:
        diagnostic = Diagnostic(
            kind=DiagnosticKind.UNKNOWN_VALUE_DOCUMENTED,
            summary=unknown_value_summary(entry.name, symbol_name),
            source=entry.source,
            range=entry.range,
            solutions=tuple(suggest_solutions(entry, canonical, config)),
            severity=Severity.WARNING,
        )
        engine.emit(diagnostic)
        emitted.append(diagnostic)
    return emitted
