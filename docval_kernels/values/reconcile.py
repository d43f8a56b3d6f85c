"""
Reconcile authored possible values against the declared ones.

Authored entries are aligned with canonical entries by exact name:

- matched:  authored entries whose name is declared
- extra:    authored entries whose name is not declared (diagnosed elsewhere)
- implicit: declared values nobody documented

The reconciled list always has one entry per declared value, in declaration
order. Authoring can neither add nor remove values, and authored order has
no effect on the output.

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-03-02
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from docval_kernels.values.config import ValuesConfig, get_values_config
from docval_kernels.values.models import (
    CanonicalEntry,
    DocumentedEntry,
    ReconciledEntry,
    VariantContent,
)

import logging

logger = logging.getLogger(__name__)


@dataclass
class Reconciliation:
    """Partitions of one symbol's authored and declared values."""
    entries: List[ReconciledEntry] = field(default_factory=list)
    matched: List[DocumentedEntry] = field(default_factory=list)
    extra: List[DocumentedEntry] = field(default_factory=list)
    implicit: List[CanonicalEntry] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entries": [e.to_dict() for e in self.entries],
            "matched": [e.name for e in self.matched],
            "extra": [e.to_dict() for e in self.extra],
            "implicit": [c.name for c in self.implicit],
        }


def name_key(case_sensitive: bool = True) -> Callable[[str], str]:
    """Key function used to compare value names."""
    if case_sensitive:
        return lambda name: name
    return lambda name: name.casefold()


def reconcile(
    documented: List[DocumentedEntry],
    canonical: List[CanonicalEntry],
    config: Optional[ValuesConfig] = None,
) -> Reconciliation:
    """
    Align authored entries with declared values.

    When several authored entries document the same value for the same
    variant, the first one supplies the content and later ones are ignored.

    Args:
        documented: Entries from the directive parser, in authored order
        canonical: Declared values from the metadata extractor
        config: Values configuration (global default if None)

    Returns:
        Reconciliation with the canonical-order entry list and partitions
    """
    cfg = config or get_values_config()
    key = name_key(cfg.matching.case_sensitive)

    declared: Dict[str, CanonicalEntry] = {}
    for entry in canonical:
        declared.setdefault(key(entry.name), entry)

    matched: List[DocumentedEntry] = []
    extra: List[DocumentedEntry] = []
    authored: Dict[str, Dict[Optional[str], DocumentedEntry]] = {}

    for doc in documented:
        target = declared.get(key(doc.name))
        if target is None:
            extra.append(doc)
            continue
        matched.append(doc)
        by_variant = authored.setdefault(target.name, {})
        if doc.variant in by_variant:
            logger.debug(f"Possible value '{doc.name}' documented more than once; keeping the first")
            continue
        by_variant[doc.variant] = doc

    entries: List[ReconciledEntry] = []
    implicit: List[CanonicalEntry] = []
    for value in sorted(canonical, key=lambda c: c.declaration_order):
        docs = authored.get(value.name)
        if not docs:
            implicit.append(value)
            entries.append(ReconciledEntry(name=value.name, canonical_order=value.declaration_order))
            continue
        content = VariantContent({variant: doc.content_blocks() for variant, doc in docs.items()})
        first = next(iter(docs.values()))
        entries.append(ReconciledEntry(
            name=value.name,
            canonical_order=value.declaration_order,
            content=content,
            source=first.source,
        ))

    logger.debug(
        f"Reconciled {len(entries)} value(s): {len(matched)} matched, "
        f"{len(extra)} extra, {len(implicit)} implicit"
    )
    return Reconciliation(entries=entries, matched=matched, extra=extra, implicit=implicit)
