"""
Core data models for the possible-values kernel family.

All models are JSON-serializable dataclasses shared by the directive parser,
the reconciler, the diagnostic emitter, the content merger and the render
router.

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-03-02
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

ValueName = str


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class BlockKind(str, Enum):
    """Kinds of authored prose blocks."""
    DESCRIPTION = "description"   # the short description on the item line
    PARAGRAPH = "paragraph"
    CODE = "code"
    LIST = "list"


class InlineKind(str, Enum):
    """Inline segments of resolved content."""
    TEXT = "text"
    REFERENCE = "reference"
    CODE_VOICE = "code_voice"


class Severity(str, Enum):
    """Diagnostic severity levels. Nothing emitted here is fatal."""
    NOTE = "note"
    WARNING = "warning"


class DiagnosticKind(str, Enum):
    """Diagnostic taxonomy of the possible-values pass."""
    UNKNOWN_VALUE_DOCUMENTED = "unknown_value_documented"
    UNRESOLVED_REFERENCE = "unresolved_reference"


DIAGNOSTIC_IDENTIFIERS: Dict[DiagnosticKind, str] = {
    DiagnosticKind.UNKNOWN_VALUE_DOCUMENTED: "docval.PossibleValues.UnknownValue",
    DiagnosticKind.UNRESOLVED_REFERENCE: "docval.References.Unresolved",
}


class RenderMode(str, Enum):
    """How possible values appear on the rendered page."""
    COMPACT_ATTRIBUTE_LIST = "compact_attribute_list"
    DETAILED_SECTION = "detailed_section"


class SectionKind(str, Enum):
    """Closed set of render sections produced by the render router."""
    ATTRIBUTES = "attributes"
    POSSIBLE_VALUES = "possible_values"


# ---------------------------------------------------------------------------
# Source locations
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SourcePosition:
    """1-based line and column in an authored source file."""
    line: int
    column: int

    def to_dict(self) -> Dict[str, int]:
        return {"line": self.line, "column": self.column}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "SourcePosition":
        return cls(line=d["line"], column=d["column"])


@dataclass(frozen=True)
class SourceRange:
    """Half-open span: ``upper.column`` is one past the last character."""
    lower: SourcePosition
    upper: SourcePosition

    @classmethod
    def on_line(cls, line: int, start_column: int, end_column: int) -> "SourceRange":
        return cls(SourcePosition(line, start_column), SourcePosition(line, end_column))

    def to_dict(self) -> Dict[str, Any]:
        return {"lower": self.lower.to_dict(), "upper": self.upper.to_dict()}

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> Optional["SourceRange"]:
        if not d:
            return None
        return cls(SourcePosition.from_dict(d["lower"]), SourcePosition.from_dict(d["upper"]))


# ---------------------------------------------------------------------------
# Authored content
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class InlineSegment:
    """A piece of resolved prose: plain text, a resolved link, or code voice."""
    kind: InlineKind
    text: str
    destination: Optional[str] = None   # resolved path for references

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"kind": self.kind.value, "text": self.text}
        if self.destination is not None:
            d["destination"] = self.destination
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "InlineSegment":
        return cls(kind=InlineKind(d["kind"]), text=d["text"], destination=d.get("destination"))


@dataclass(frozen=True)
class ContentBlock:
    """
    One block of authored prose.

    ``text`` keeps the raw Markdown; ``inlines`` is filled in once references
    have been resolved (empty tuple until then). ``columns`` holds, for each
    line of ``text``, the source column of that line's first character, so
    references can be located precisely. ``source`` is the page the block
    was written in.
    """
    kind: BlockKind
    text: str
    range: Optional[SourceRange] = None
    columns: Tuple[int, ...] = ()
    inlines: Tuple[InlineSegment, ...] = ()
    source: Optional[str] = None

    def position_of(self, offset: int) -> Optional[SourcePosition]:
        """Source position of the character at ``offset`` in ``text``."""
        if self.range is None:
            return None
        line_idx = self.text.count("\n", 0, offset)
        line_start = self.text.rfind("\n", 0, offset) + 1
        base = self.columns[line_idx] if line_idx < len(self.columns) else 1
        return SourcePosition(self.range.lower.line + line_idx, base + offset - line_start)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "kind": self.kind.value,
            "text": self.text,
            "range": self.range.to_dict() if self.range else None,
            "columns": list(self.columns),
        }
        if self.inlines:
            d["inlines"] = [s.to_dict() for s in self.inlines]
        if self.source is not None:
            d["source"] = self.source
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ContentBlock":
        return cls(
            kind=BlockKind(d["kind"]),
            text=d["text"],
            range=SourceRange.from_dict(d.get("range")),
            columns=tuple(d.get("columns", ())),
            inlines=tuple(InlineSegment.from_dict(s) for s in d.get("inlines", [])),
            source=d.get("source"),
        )


@dataclass(frozen=True)
class DocumentedEntry:
    """A possible value as written by the author."""
    name: ValueName
    short_description: str = ""
    prose: Tuple[ContentBlock, ...] = ()
    range: Optional[SourceRange] = None          # the item's own line(s)
    name_range: Optional[SourceRange] = None     # the name token only
    description_range: Optional[SourceRange] = None
    description_columns: Tuple[int, ...] = ()
    source: Optional[str] = None
    variant: Optional[str] = None

    def content_blocks(self) -> List[ContentBlock]:
        """Short description (as a DESCRIPTION block) followed by the nested prose."""
        blocks: List[ContentBlock] = []
        if self.short_description:
            blocks.append(ContentBlock(
                kind=BlockKind.DESCRIPTION,
                text=self.short_description,
                range=self.description_range,
                columns=self.description_columns,
                source=self.source,
            ))
        for block in self.prose:
            if block.source is None and self.source is not None:
                block = replace(block, source=self.source)
            blocks.append(block)
        return blocks

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "short_description": self.short_description,
            "prose": [b.to_dict() for b in self.prose],
            "range": self.range.to_dict() if self.range else None,
            "name_range": self.name_range.to_dict() if self.name_range else None,
            "description_range": self.description_range.to_dict() if self.description_range else None,
            "description_columns": list(self.description_columns),
            "source": self.source,
            "variant": self.variant,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DocumentedEntry":
        return cls(
            name=d["name"],
            short_description=d.get("short_description", ""),
            prose=tuple(ContentBlock.from_dict(b) for b in d.get("prose", [])),
            range=SourceRange.from_dict(d.get("range")),
            name_range=SourceRange.from_dict(d.get("name_range")),
            description_range=SourceRange.from_dict(d.get("description_range")),
            description_columns=tuple(d.get("description_columns", ())),
            source=d.get("source"),
            variant=d.get("variant"),
        )


@dataclass(frozen=True)
class CanonicalEntry:
    """A value declared by the symbol itself."""
    name: ValueName
    declaration_order: int

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "declaration_order": self.declaration_order}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "CanonicalEntry":
        return cls(name=d["name"], declaration_order=d["declaration_order"])


# ---------------------------------------------------------------------------
# Variant content
# ---------------------------------------------------------------------------

class VariantContent:
    """
    Content blocks keyed by an optional variant tag (e.g. a source language).

    ``None`` is the primary variant. Looking up a variant that was never
    documented falls back to the primary variant; without one, to the first
    tag (alphabetically) that holds content.
    """

    def __init__(self, variants: Optional[Dict[Optional[str], List[ContentBlock]]] = None):
        self._variants: Dict[Optional[str], Tuple[ContentBlock, ...]] = {}
        for tag, blocks in (variants or {}).items():
            self._variants[tag] = tuple(blocks)

    def get(self, variant: Optional[str] = None) -> Tuple[ContentBlock, ...]:
        if variant in self._variants:
            return self._variants[variant]
        if None in self._variants:
            return self._variants[None]
        for tag in self.variants:
            if self._variants[tag]:
                return self._variants[tag]
        return ()

    @property
    def variants(self) -> List[Optional[str]]:
        # Primary first, then tags alphabetically
        return sorted(self._variants, key=lambda v: (v is not None, v or ""))

    def items(self) -> Iterator[Tuple[Optional[str], Tuple[ContentBlock, ...]]]:
        for tag in self.variants:
            yield tag, self._variants[tag]

    def is_empty(self) -> bool:
        return not any(self._variants.values())

    def __eq__(self, other: object) -> bool:
        if isinstance(other, VariantContent):
            return self._variants == other._variants
        return NotImplemented

    def __repr__(self) -> str:
        return f"VariantContent({dict(self.items())!r})"

    def to_dict(self) -> List[Dict[str, Any]]:
        return [
            {"variant": tag, "blocks": [b.to_dict() for b in blocks]}
            for tag, blocks in self.items()
        ]

    @classmethod
    def from_dict(cls, data: List[Dict[str, Any]]) -> "VariantContent":
        return cls({
            item.get("variant"): [ContentBlock.from_dict(b) for b in item.get("blocks", [])]
            for item in data or []
        })


@dataclass(frozen=True)
class ReconciledEntry:
    """
    One canonical value, with whatever the author wrote about it.

    Each content variant starts with the author's short description (a
    ``DESCRIPTION`` block) when one was written, followed by nested prose.
    Implicit (undocumented) values carry empty content.
    """
    name: ValueName
    canonical_order: int
    content: VariantContent = field(default_factory=VariantContent)
    source: Optional[str] = None

    def description(self, variant: Optional[str] = None) -> Optional[ContentBlock]:
        blocks = self.content.get(variant)
        if blocks and blocks[0].kind == BlockKind.DESCRIPTION:
            return blocks[0]
        return None

    def prose(self, variant: Optional[str] = None) -> Tuple[ContentBlock, ...]:
        blocks = self.content.get(variant)
        if blocks and blocks[0].kind == BlockKind.DESCRIPTION:
            return blocks[1:]
        return blocks

    @property
    def short_description(self) -> str:
        block = self.description()
        return block.text if block else ""

    @property
    def has_content(self) -> bool:
        return not self.content.is_empty()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "canonical_order": self.canonical_order,
            "content": self.content.to_dict(),
            "source": self.source,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ReconciledEntry":
        return cls(
            name=d["name"],
            canonical_order=d["canonical_order"],
            content=VariantContent.from_dict(d.get("content", [])),
            source=d.get("source"),
        )


# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Solution:
    """A suggested, never auto-applied fix."""
    summary: str
    replacement: Optional[str] = None
    replacement_range: Optional[SourceRange] = None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"summary": self.summary}
        if self.replacement is not None:
            d["replacement"] = self.replacement
            d["replacement_range"] = self.replacement_range.to_dict() if self.replacement_range else None
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Solution":
        return cls(
            summary=d["summary"],
            replacement=d.get("replacement"),
            replacement_range=SourceRange.from_dict(d.get("replacement_range")),
        )


@dataclass(frozen=True)
class Diagnostic:
    """A located, user-facing problem report."""
    kind: DiagnosticKind
    summary: str
    source: Optional[str] = None
    range: Optional[SourceRange] = None
    solutions: Tuple[Solution, ...] = ()
    severity: Severity = Severity.WARNING

    @property
    def identifier(self) -> str:
        return DIAGNOSTIC_IDENTIFIERS[self.kind]

    def sort_key(self) -> Tuple[str, int, int, str, str]:
        line = self.range.lower.line if self.range else 0
        column = self.range.lower.column if self.range else 0
        return (self.source or "", line, column, self.kind.value, self.summary)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "identifier": self.identifier,
            "kind": self.kind.value,
            "severity": self.severity.value,
            "summary": self.summary,
            "source": self.source,
            "range": self.range.to_dict() if self.range else None,
            "solutions": [s.to_dict() for s in self.solutions],
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Diagnostic":
        return cls(
            kind=DiagnosticKind(d["kind"]),
            summary=d["summary"],
            source=d.get("source"),
            range=SourceRange.from_dict(d.get("range")),
            solutions=tuple(Solution.from_dict(s) for s in d.get("solutions", [])),
            severity=Severity(d.get("severity", "warning")),
        )


# ---------------------------------------------------------------------------
# Render sections (closed tagged union, see render.section_to_dict)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AllowedValuesAttribute:
    """Compact list of value names shown in the attributes summary."""
    values: Tuple[ValueName, ...]
    kind: str = "allowed_values"


@dataclass(frozen=True)
class PassthroughAttribute:
    """Any other attribute (default value, minimum, ...) carried through unchanged."""
    kind: str
    value: Any


Attribute = Union[AllowedValuesAttribute, PassthroughAttribute]


@dataclass(frozen=True)
class AttributesRenderSection:
    attributes: Tuple[Attribute, ...]
    kind: SectionKind = SectionKind.ATTRIBUTES


@dataclass(frozen=True)
class PossibleValueRender:
    name: ValueName
    short_description: str
    content: Tuple[ContentBlock, ...]


@dataclass(frozen=True)
class PossibleValuesRenderSection:
    values: Tuple[PossibleValueRender, ...]
    title: str = "Possible Values"
    kind: SectionKind = SectionKind.POSSIBLE_VALUES


RenderSection = Union[AttributesRenderSection, PossibleValuesRenderSection]


@dataclass(frozen=True)
class RenderPlan:
    """Render mode plus the sections the page converter should emit."""
    mode: RenderMode
    sections: Tuple[RenderSection, ...]

    def section(self, kind: SectionKind) -> Optional[RenderSection]:
        for s in self.sections:
            if s.kind == kind:
                return s
        return None

    @property
    def allowed_values(self) -> List[ValueName]:
        attrs = self.section(SectionKind.ATTRIBUTES)
        if attrs is None:
            return []
        for attribute in attrs.attributes:
            if isinstance(attribute, AllowedValuesAttribute):
                return list(attribute.values)
        return []
