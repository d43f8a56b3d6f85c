"""
Near-miss suggestions for undeclared possible values.

For an authored name that matches no declared value, the closest declared
name by Levenshtein distance is proposed as a replacement when it is
unambiguous and close enough; otherwise the author is asked to remove the
entry and shown every known value.

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-03-02
"""

from typing import List, Optional, Tuple

from docval_kernels.values.config import (
    TIE_BREAK_ALPHABETICAL,
    TIE_BREAK_DECLARATION_ORDER,
    ValuesConfig,
    get_values_config,
)
from docval_kernels.values.models import CanonicalEntry, DocumentedEntry, Solution
from docval_kernels.values.reconcile import name_key


def levenshtein_distance(s1: str, s2: str) -> int:
    """Compute Levenshtein edit distance between two strings."""
    if len(s1) < len(s2):
        return levenshtein_distance(s2, s1)
    if len(s2) == 0:
        return len(s1)

    prev_row = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1):
        curr_row = [i + 1]
        for j, c2 in enumerate(s2):
            insertions = prev_row[j + 1] + 1
            deletions = curr_row[j] + 1
            substitutions = prev_row[j] + (c1 != c2)
            curr_row.append(min(insertions, deletions, substitutions))
        prev_row = curr_row
    return prev_row[-1]


def nearest_values(
    name: str,
    canonical: List[CanonicalEntry],
    case_sensitive: bool = True,
) -> Tuple[Optional[int], List[CanonicalEntry]]:
    """Minimal distance from ``name`` to the declared values, and every value attaining it."""
    key = name_key(case_sensitive)
    best: Optional[int] = None
    nearest: List[CanonicalEntry] = []
    for value in canonical:
        distance = levenshtein_distance(key(name), key(value.name))
        if best is None or distance < best:
            best = distance
            nearest = [value]
        elif distance == best:
            nearest.append(value)
    return best, nearest


def best_match(
    name: str,
    canonical: List[CanonicalEntry],
    config: Optional[ValuesConfig] = None,
) -> Optional[str]:
    """
    Declared name to propose instead of ``name``, if any.

    A candidate must be at or below ``suggestion.max_edit_distance``. Ties
    are settled by ``suggestion.tie_break``: ``none`` gives up,
    ``declaration_order`` and ``alphabetical`` pick the first candidate in
    that order.
    """
    cfg = config or get_values_config()
    distance, nearest = nearest_values(name, canonical, cfg.matching.case_sensitive)
    if distance is None or distance > cfg.suggestion.max_edit_distance:
        return None

    if len(nearest) == 1:
        return nearest[0].name
    if cfg.suggestion.tie_break == TIE_BREAK_DECLARATION_ORDER:
        return min(nearest, key=lambda v: v.declaration_order).name
    if cfg.suggestion.tie_break == TIE_BREAK_ALPHABETICAL:
        return min(v.name for v in nearest)
    return None


def known_values_message(name: str, canonical: List[CanonicalEntry]) -> str:
    known = "".join(f"- {value}\n" for value in sorted(v.name for v in canonical))
    return (
        f"Remove '{name}' possible value documentation or replace it with a known value.\n"
        f"Known Values:\n\n{known}"
    )


def suggest_solutions(
    entry: DocumentedEntry,
    canonical: List[CanonicalEntry],
    config: Optional[ValuesConfig] = None,
) -> List[Solution]:
    """Exactly one solution for an undeclared authored value."""
    match = best_match(entry.name, canonical, config)
    if match is not None:
        return [Solution(
            summary=f"Replace '{entry.name}' with '{match}'",
            replacement=match,
            replacement_range=entry.name_range,
        )]
    return [Solution(summary=known_values_message(entry.name, canonical))]
