"""
Content merger: resolve the references in documented possible values.

Every block of authored content (description and prose, in every variant)
is scanned for references. Resolved references become link segments; each
unresolved one is reported as a warning at the reference's own span, and the
entry is rendered anyway with the reference degraded to code voice (symbols)
or plain text (articles). Code blocks are left untouched.

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-03-02
"""

from dataclasses import replace
from typing import List, Optional, Tuple

from docval_kernels.values.diagnostics import DiagnosticEngine
from docval_kernels.values.links import (
    REFERENCE_SYMBOL,
    LinkResolver,
    Reference,
    ResolvedLink,
    find_references,
)
from docval_kernels.values.models import (
    BlockKind,
    ContentBlock,
    Diagnostic,
    DiagnosticKind,
    InlineKind,
    InlineSegment,
    ReconciledEntry,
    Severity,
    SourceRange,
    VariantContent,
)

import logging

logger = logging.getLogger(__name__)


def unresolved_reference_summary(target: str, context_path: str) -> str:
    return f"'{target}' doesn't exist at '{context_path}'"


def _reference_range(block: ContentBlock, ref: Reference) -> Optional[SourceRange]:
    lower = block.position_of(ref.start)
    upper = block.position_of(ref.end)
    if lower is None or upper is None:
        return block.range
    return SourceRange(lower, upper)


def resolve_block(
    block: ContentBlock,
    resolver: LinkResolver,
    context_path: str,
    engine: DiagnosticEngine,
    source: Optional[str] = None,
) -> ContentBlock:
    """Return ``block`` with its inline segments filled in."""
    if block.kind == BlockKind.CODE:
        return block

    segments: List[InlineSegment] = []
    cursor = 0
    for ref in find_references(block.text):
        if ref.start > cursor:
            segments.append(InlineSegment(InlineKind.TEXT, block.text[cursor:ref.start]))
        cursor = ref.end

        result = resolver.resolve(ref, context_path)
        if isinstance(result, ResolvedLink):
            segments.append(InlineSegment(InlineKind.REFERENCE, result.title, result.destination))
            continue

        engine.emit(Diagnostic(
            kind=DiagnosticKind.UNRESOLVED_REFERENCE,
            summary=unresolved_reference_summary(ref.target, context_path),
            source=source,
            range=_reference_range(block, ref),
            severity=Severity.WARNING,
        ))
        kind = InlineKind.CODE_VOICE if ref.kind == REFERENCE_SYMBOL else InlineKind.TEXT
        segments.append(InlineSegment(kind, ref.target))

    if cursor < len(block.text):
        segments.append(InlineSegment(InlineKind.TEXT, block.text[cursor:]))

    return replace(block, inlines=tuple(segments))


def merge_content(
    entries: List[ReconciledEntry],
    resolver: LinkResolver,
    context_path: str,
    engine: DiagnosticEngine,
) -> List[ReconciledEntry]:
    """
    Resolve the authored content of reconciled entries.

    Args:
        entries: Reconciled entries in canonical order
        resolver: Link resolver for symbol and article references
        context_path: Path of the documented symbol (e.g. ``/DictionaryData/Month``)
        engine: Caller-owned diagnostic sink for unresolved references

    Returns:
        New entries, same order and length, with resolved content
    """
    merged: List[ReconciledEntry] = []
    for entry in entries:
        if not entry.has_content:
            merged.append(entry)
            continue

        variants = {}
        for tag, blocks in entry.content.items():
            variants[tag] = [
                resolve_block(block, resolver, context_path, engine, block.source or entry.source)
                for block in blocks
            ]
        merged.append(replace(entry, content=VariantContent(variants)))

    logger.debug(f"Merged content of {len(merged)} value(s) at {context_path}")
    return merged


def resolved_text(blocks: Tuple[ContentBlock, ...]) -> str:
    """Plain-text rendering of resolved blocks (references shown by title)."""
    parts = []
    for block in blocks:
        if block.inlines:
            parts.append("".join(segment.text for segment in block.inlines))
        else:
            parts.append(block.text)
    return "\n\n".join(parts)
