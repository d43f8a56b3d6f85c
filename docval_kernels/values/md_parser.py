"""
Possible-value directive parser for symbol documentation pages.

Line-based (regex) scanner that recognizes two authoring forms in the body
of a symbol's documentation:

Shorthand, one value per top-level list item::

    - PossibleValue January: The first month.

Block, a labeled list introducing nested ``name: description`` items, each
optionally followed by nested prose that becomes the entry's content::

    - PossibleValues:
      - January: The first month.

        Named after Janus.
      - February: The second month.

Each entry records the span of its own line(s) only (list marker to the end
of the last continuation line), never its nested children, so diagnostics
point at the offending name. Items without ``name:`` syntax are skipped;
reporting Markdown syntax errors is not this module's job.

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-03-02
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Pattern, Tuple

from docval_kernels.values.config import DirectiveConfig, ValuesConfig, get_values_config
from docval_kernels.values.models import (
    BlockKind,
    ContentBlock,
    DocumentedEntry,
    SourcePosition,
    SourceRange,
)

import logging

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

_LIST_ITEM_RE = re.compile(r'^(\s*)([*\-+]|\d+[.)])(\s+)(.*)$')
_FENCE_RE = re.compile(r'^\s*(`{3,}|~{3,})')
_PAGE_TITLE_RE = re.compile(r'^#\s+``(.+?)``\s*$')

# "name: description" where the name may be wrapped in backticks
_VALUE_ITEM_RE = re.compile(
    r'^(?:`(?P<quoted>[^`]+)`|(?P<plain>[^:`]*[^:`\s]))\s*:(?P<desc>.*)$'
)


def _keyword_alternation(keywords: List[str]) -> str:
    """Regex alternation for keywords; inner spaces become optional whitespace."""
    alts = [r"\s*".join(re.escape(part) for part in kw.split()) for kw in keywords if kw.strip()]
    return "(?:" + "|".join(alts) + ")"


def _directive_patterns(cfg: DirectiveConfig) -> Tuple[Pattern, Pattern]:
    block = re.compile(rf"^{_keyword_alternation(cfg.block_keywords)}\s*:\s*$", re.IGNORECASE)
    inline = re.compile(rf"^{_keyword_alternation(cfg.inline_keywords)}\s+(?P<rest>.+)$", re.IGNORECASE)
    return block, inline


@dataclass(frozen=True)
class _Context:
    source: Optional[str]
    line_offset: int
    variant: Optional[str]

    def line_no(self, idx: int) -> int:
        return idx + 1 + self.line_offset


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_page_title(text: str) -> Tuple[Optional[str], str, int]:
    """
    Split a documentation page into its symbol title and body.

    The title is the symbol link of a level-1 heading (``# ``Month````),
    optionally preceded by YAML front matter.

    Returns:
        (title or None, body text, number of lines before the body)
    """
    lines = text.splitlines()
    start = 0
    if lines and lines[0].strip() == "---":
        for j in range(1, len(lines)):
            if lines[j].strip() == "---":
                start = j + 1
                break

    for idx in range(start, len(lines)):
        if not lines[idx].strip():
            continue
        m = _PAGE_TITLE_RE.match(lines[idx])
        if m:
            return m.group(1).strip(), "\n".join(lines[idx + 1:]), idx + 1
        break

    return None, text, 0


def parse_directives(
    text: str,
    source: Optional[str] = None,
    line_offset: int = 0,
    variant: Optional[str] = None,
    config: Optional[ValuesConfig] = None,
) -> List[DocumentedEntry]:
    """
    Extract ordered, located possible-value entries from a documentation body.

    Args:
        text: Raw Markdown body of one symbol
        source: File reference recorded on every entry (for diagnostics)
        line_offset: Lines preceding ``text`` in its file
        variant: Optional variant tag (e.g. source language) for the content
        config: Values configuration (global default if None)

    Returns:
        Entries in authored order; empty when no directive is present
    """
    cfg = config or get_values_config()
    block_re, inline_re = _directive_patterns(cfg.directives)
    ctx = _Context(source=source, line_offset=line_offset, variant=variant)

    lines = text.splitlines()
    entries: List[DocumentedEntry] = []
    top_content_col: Optional[int] = None   # content column of the current top-level item
    fence: Optional[str] = None

    i = 0
    while i < len(lines):
        line = lines[i]
        stripped = line.strip()

        if fence:
            if stripped.startswith(fence):
                fence = None
            i += 1
            continue

        if not stripped:
            i += 1
            continue

        indent = _indent(line)
        nested = top_content_col is not None and indent >= top_content_col

        fence_match = _FENCE_RE.match(line)
        if fence_match and not nested and indent <= 3:
            fence = fence_match.group(1)
            top_content_col = None
            i += 1
            continue

        m = _LIST_ITEM_RE.match(line)
        if m is None or nested or indent > 3:
            if m is None and not nested:
                top_content_col = None
            i += 1
            continue

        # Top-level list item
        content_col = len(m.group(1)) + len(m.group(2)) + len(m.group(3))
        top_content_col = content_col
        content = m.group(4)
        region_end = _region_end(lines, i + 1, indent)

        if block_re.match(content.strip()):
            entries.extend(_parse_block(lines, i + 1, region_end, ctx))
            i = region_end
            continue

        inline = inline_re.match(content)
        if inline:
            value = _VALUE_ITEM_RE.match(inline.group("rest"))
            if value:
                own_end = _own_lines_end(lines, i, indent, region_end)
                entries.append(_make_entry(
                    lines, i, indent, value, content_col + inline.start("rest"),
                    own_end, region_end, ctx,
                ))
            else:
                logger.debug(f"Skipping malformed possible value at line {ctx.line_no(i)}: {stripped!r}")
            i = region_end
            continue

        i += 1

    logger.debug(f"Parsed {len(entries)} possible value(s) from {source or '<body>'}")
    return entries


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _indent(line: str) -> int:
    return len(line) - len(line.lstrip(" \t"))


def _region_end(lines: List[str], start: int, marker_indent: int) -> int:
    """Index one past the last line nested deeper than ``marker_indent`` (trailing blanks excluded)."""
    end = start
    for j in range(start, len(lines)):
        if not lines[j].strip():
            continue
        if _indent(lines[j]) <= marker_indent:
            break
        end = j + 1
    return end


def _own_lines_end(lines: List[str], start: int, marker_indent: int, limit: int) -> int:
    """Index one past an item's own lines: its marker line plus lazy continuation lines."""
    j = start + 1
    while j < limit:
        line = lines[j]
        if not line.strip() or _indent(line) <= marker_indent:
            break
        if _LIST_ITEM_RE.match(line) or _FENCE_RE.match(line):
            break
        j += 1
    return j


def _line_end_column(line: str) -> int:
    return len(line.rstrip()) + 1


def _parse_block(lines: List[str], start: int, end: int, ctx: _Context) -> List[DocumentedEntry]:
    """Parse the value items nested under a block directive."""
    entries: List[DocumentedEntry] = []
    child_indent: Optional[int] = None

    i = start
    while i < end:
        line = lines[i]
        if not line.strip():
            i += 1
            continue

        indent = _indent(line)
        m = _LIST_ITEM_RE.match(line)
        if m is None or (child_indent is not None and indent > child_indent):
            # Stray text directly under the directive label
            i += 1
            continue
        if child_indent is None:
            child_indent = indent

        content_col = indent + len(m.group(2)) + len(m.group(3))
        nested_end = min(_region_end(lines, i + 1, indent), end)

        value = _VALUE_ITEM_RE.match(m.group(4))
        if value is None:
            logger.debug(f"Skipping malformed possible value at line {ctx.line_no(i)}: {line.strip()!r}")
            i = nested_end
            continue

        own_end = _own_lines_end(lines, i, indent, nested_end)
        entries.append(_make_entry(lines, i, indent, value, content_col, own_end, nested_end, ctx))
        i = nested_end

    return entries


def _make_entry(
    lines: List[str],
    idx: int,
    marker_indent: int,
    value: "re.Match",
    value_col: int,
    own_end: int,
    nested_end: int,
    ctx: _Context,
) -> DocumentedEntry:
    """Build one entry from an item line matched by ``_VALUE_ITEM_RE`` at 0-based ``value_col``."""
    line_no = ctx.line_no(idx)

    name_group = "quoted" if value.group("quoted") is not None else "plain"
    raw_name = value.group(name_group)
    name_col = value_col + value.start(name_group) + 1
    name_range = SourceRange.on_line(line_no, name_col, name_col + len(raw_name))

    # Description: rest of the item line plus lazy continuation lines
    desc_lines: List[str] = []
    desc_columns: List[int] = []
    desc_first_line: Optional[int] = None
    raw_desc = value.group("desc")
    if raw_desc.strip():
        desc_lines.append(raw_desc.strip())
        desc_columns.append(value_col + value.start("desc") + _indent(raw_desc) + 1)
        desc_first_line = line_no
    for j in range(idx + 1, own_end):
        desc_lines.append(lines[j].strip())
        desc_columns.append(_indent(lines[j]) + 1)
        if desc_first_line is None:
            desc_first_line = ctx.line_no(j)

    last_own = own_end - 1
    own_upper = SourcePosition(ctx.line_no(last_own), _line_end_column(lines[last_own]))

    description_range = None
    if desc_first_line is not None:
        description_range = SourceRange(SourcePosition(desc_first_line, desc_columns[0]), own_upper)

    return DocumentedEntry(
        name=raw_name.strip(),
        short_description="\n".join(desc_lines),
        prose=tuple(_parse_blocks(lines, own_end, nested_end, ctx)),
        range=SourceRange(SourcePosition(line_no, marker_indent + 1), own_upper),
        name_range=name_range,
        description_range=description_range,
        description_columns=tuple(desc_columns),
        source=ctx.source,
        variant=ctx.variant,
    )


def _parse_blocks(lines: List[str], start: int, end: int, ctx: _Context) -> List[ContentBlock]:
    """Split an item's nested region into paragraph, list and code blocks."""
    blocks: List[ContentBlock] = []

    i = start
    while i < end:
        line = lines[i]
        if not line.strip():
            i += 1
            continue

        base = _indent(line)
        fence_match = _FENCE_RE.match(line)

        if fence_match:
            marker = fence_match.group(1)
            j = i + 1
            while j < end and not lines[j].strip().startswith(marker):
                j += 1
            last = min(j, end - 1)
            kind = BlockKind.CODE
        else:
            kind = BlockKind.LIST if _LIST_ITEM_RE.match(line) else BlockKind.PARAGRAPH
            j = i + 1
            while j < end:
                nxt = lines[j]
                if not nxt.strip() or _FENCE_RE.match(nxt):
                    break
                if kind == BlockKind.PARAGRAPH and _LIST_ITEM_RE.match(nxt):
                    break
                j += 1
            last = j - 1

        text_lines: List[str] = []
        columns: List[int] = []
        for k in range(i, last + 1):
            removed = min(_indent(lines[k]), base) if kind != BlockKind.PARAGRAPH else _indent(lines[k])
            text_lines.append(lines[k][removed:].rstrip())
            columns.append(removed + 1)

        blocks.append(ContentBlock(
            kind=kind,
            text="\n".join(text_lines),
            range=SourceRange(
                SourcePosition(ctx.line_no(i), columns[0]),
                SourcePosition(ctx.line_no(last), _line_end_column(lines[last])),
            ),
            columns=tuple(columns),
        ))
        i = last + 1

    return blocks
