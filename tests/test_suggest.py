"""
Test near-miss suggestions

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-03-02
"""

import pytest

from docval_kernels.values.config import (
    MatchingConfig,
    SuggestionConfig,
    TIE_BREAK_ALPHABETICAL,
    TIE_BREAK_DECLARATION_ORDER,
    ValuesConfig,
)
from docval_kernels.values.models import CanonicalEntry, DocumentedEntry, SourceRange
from docval_kernels.values.suggest import (
    best_match,
    known_values_message,
    levenshtein_distance,
    nearest_values,
    suggest_solutions,
)


@pytest.mark.parametrize("a,b,expected", [
    ("", "", 0),
    ("abc", "", 3),
    ("kitten", "sitting", 3),
    ("Marc", "March", 1),
    ("March", "March", 0),
])
def test_levenshtein_distance(a, b, expected):
    assert levenshtein_distance(a, b) == expected
    assert levenshtein_distance(b, a) == expected


class TestSuggestions:

    def test_close_name_gets_a_replacement(self, month_canonical):
        entry = DocumentedEntry(name="Marc", name_range=SourceRange.on_line(8, 5, 9))
        (solution,) = suggest_solutions(entry, month_canonical)
        assert solution.summary == "Replace 'Marc' with 'March'"
        assert solution.replacement == "March"
        assert solution.replacement_range == SourceRange.on_line(8, 5, 9)

    def test_far_name_gets_the_known_values(self, month_canonical):
        (solution,) = suggest_solutions(DocumentedEntry(name="April"), month_canonical)
        assert solution.summary == (
            "Remove 'April' possible value documentation or replace it with a known value.\n"
            "Known Values:\n\n- February\n- January\n- March\n"
        )
        assert solution.replacement is None

    def test_threshold_is_configurable(self, month_canonical):
        cfg = ValuesConfig(suggestion=SuggestionConfig(max_edit_distance=0))
        (solution,) = suggest_solutions(DocumentedEntry(name="Marc"), month_canonical, cfg)
        assert solution.replacement is None
        assert solution.summary.startswith("Remove 'Marc'")

    def test_no_declared_values(self):
        (solution,) = suggest_solutions(DocumentedEntry(name="April"), [])
        assert solution.replacement is None
        assert solution.summary.endswith("Known Values:\n\n")


class TestTies:

    canonical = [CanonicalEntry("Mat", 0), CanonicalEntry("Map", 1)]

    def test_nearest_values(self):
        distance, nearest = nearest_values("Mab", self.canonical)
        assert distance == 1
        assert [v.name for v in nearest] == ["Mat", "Map"]

    def test_ambiguous_by_default(self):
        assert best_match("Mab", self.canonical) is None

    def test_declaration_order(self):
        cfg = ValuesConfig(suggestion=SuggestionConfig(tie_break=TIE_BREAK_DECLARATION_ORDER))
        assert best_match("Mab", self.canonical, cfg) == "Mat"

    def test_alphabetical(self):
        cfg = ValuesConfig(suggestion=SuggestionConfig(tie_break=TIE_BREAK_ALPHABETICAL))
        assert best_match("Mab", self.canonical, cfg) == "Map"


def test_case_insensitive_distance(month_canonical):
    cfg = ValuesConfig(matching=MatchingConfig(case_sensitive=False))
    assert best_match("MARC", month_canonical, cfg) == "March"
    assert best_match("MARC", month_canonical) is None


def test_known_values_are_sorted(month_canonical):
    assert known_values_message("X", month_canonical).endswith("- February\n- January\n- March\n")


def test_invalid_config_falls_back():
    cfg = SuggestionConfig(max_edit_distance=-3, tie_break="random")
    assert cfg.max_edit_distance == 0
    assert cfg.tie_break == "none"
