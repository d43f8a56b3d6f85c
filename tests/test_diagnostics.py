"""
Test the diagnostic engine and unknown-value diagnostics

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-03-02
"""

import threading

from docval_kernels.values.diagnostics import DiagnosticEngine, emit_unknown_values
from docval_kernels.values.md_parser import extract_page_title, parse_directives
from docval_kernels.values.models import (
    Diagnostic,
    DiagnosticKind,
    Severity,
    SourcePosition,
    SourceRange,
)
from docval_kernels.values.reconcile import reconcile

from conftest import MONTH_PAGE


def _diag(source, line, column=1, summary="x"):
    return Diagnostic(
        kind=DiagnosticKind.UNKNOWN_VALUE_DOCUMENTED,
        summary=summary,
        source=source,
        range=SourceRange.on_line(line, column, column + 1),
    )


class TestDiagnosticEngine:

    def test_emit_and_snapshot(self):
        engine = DiagnosticEngine()
        engine.emit(_diag("a.md", 1))
        snapshot = engine.problems
        engine.emit(_diag("a.md", 2))
        assert len(snapshot) == 1
        assert len(engine) == 2

    def test_drain_sorts_by_location_and_clears(self):
        engine = DiagnosticEngine()
        engine.emit_all([_diag("b.md", 1), _diag("a.md", 9), _diag("a.md", 2, 5), _diag("a.md", 2, 3)])
        drained = engine.drain()
        assert [(d.source, d.range.lower.line, d.range.lower.column) for d in drained] == [
            ("a.md", 2, 3), ("a.md", 2, 5), ("a.md", 9, 1), ("b.md", 1, 1),
        ]
        assert len(engine) == 0

    def test_count_by_kind(self):
        engine = DiagnosticEngine()
        engine.emit(_diag("a.md", 1))
        engine.emit(Diagnostic(kind=DiagnosticKind.UNRESOLVED_REFERENCE, summary="y"))
        assert engine.count(DiagnosticKind.UNRESOLVED_REFERENCE) == 1
        assert engine.count() == 2

    def test_concurrent_emits(self):
        engine = DiagnosticEngine()

        def worker(n):
            for i in range(50):
                engine.emit(_diag(f"{n}.md", i + 1))

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(engine) == 400


class TestUnknownValues:

    def _month(self, month_canonical, text=MONTH_PAGE):
        _, body, offset = extract_page_title(text)
        entries = parse_directives(body, source="Month.md", line_offset=offset)
        result = reconcile(entries, month_canonical)
        engine = DiagnosticEngine()
        emitted = emit_unknown_values(result.extra, month_canonical, "Month", engine)
        return emitted, engine

    def test_one_diagnostic_per_extra(self, month_canonical):
        emitted, engine = self._month(month_canonical)
        (diagnostic,) = emitted
        assert engine.problems == emitted
        assert diagnostic.summary == "'April' is not a known possible value for 'Month'."
        assert diagnostic.severity == Severity.WARNING
        assert diagnostic.identifier == "docval.PossibleValues.UnknownValue"
        assert diagnostic.source == "Month.md"
        assert diagnostic.range == SourceRange(SourcePosition(9, 3), SourcePosition(9, 18))
        assert len(diagnostic.solutions) == 1

    def test_no_diagnostic_when_all_declared(self, month_canonical):
        text = MONTH_PAGE.replace("  - April: Fourth\n", "")
        emitted, engine = self._month(month_canonical, text)
        assert emitted == []
        assert len(engine) == 0

    def test_no_diagnostic_for_undocumented_values(self, month_canonical):
        emitted, _ = self._month(month_canonical, "#  ``Month``\n\n- PossibleValue January: First\n")
        assert emitted == []

    def test_replacement_suggestion(self, month_canonical):
        text = MONTH_PAGE.replace("  - March: Third\n", "  - Marc: Third\n").replace("  - April: Fourth\n", "")
        (diagnostic,) = self._month(month_canonical, text)[0]
        assert diagnostic.summary == "'Marc' is not a known possible value for 'Month'."
        (solution,) = diagnostic.solutions
        assert solution.summary == "Replace 'Marc' with 'March'"
        assert solution.replacement_range == SourceRange.on_line(8, 5, 9)

    def test_round_trip(self, month_canonical):
        (diagnostic,) = self._month(month_canonical)[0]
        assert Diagnostic.from_dict(diagnostic.to_dict()) == diagnostic
