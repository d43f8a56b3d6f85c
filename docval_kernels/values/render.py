"""
Render router: decide how a symbol's possible values appear on its page.

Strict two-way switch over the merged entries:

- no entry has content  -> COMPACT_ATTRIBUTE_LIST: the attributes section lists
  the value names, and there is no possible-values section;
- otherwise             -> DETAILED_SECTION: a "Possible Values" section with
  every value in canonical order; the attributes section drops the name list
  and disappears when nothing else is left in it.

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-03-02
"""

from typing import Any, Callable, Dict, Iterable, List, Optional

from docval_kernels.values.merge import resolved_text
from docval_kernels.values.models import (
    AllowedValuesAttribute,
    Attribute,
    AttributesRenderSection,
    PassthroughAttribute,
    PossibleValueRender,
    PossibleValuesRenderSection,
    ReconciledEntry,
    RenderMode,
    RenderPlan,
    RenderSection,
    SectionKind,
)

import logging

logger = logging.getLogger(__name__)


def choose_mode(entries: Iterable[ReconciledEntry]) -> RenderMode:
    if any(entry.has_content for entry in entries):
        return RenderMode.DETAILED_SECTION
    return RenderMode.COMPACT_ATTRIBUTE_LIST


def route_render(
    entries: List[ReconciledEntry],
    variant: Optional[str] = None,
    extra_attributes: Iterable[PassthroughAttribute] = (),
) -> RenderPlan:
    """
    Build the render plan for one symbol.

    Args:
        entries: Merged entries in canonical order
        variant: Content variant to render (primary fallback)
        extra_attributes: Other attributes of the symbol (default value, ...)

    Returns:
        RenderPlan with mode and sections
    """
    others = tuple(extra_attributes)
    mode = choose_mode(entries)

    if mode == RenderMode.COMPACT_ATTRIBUTE_LIST:
        names = AllowedValuesAttribute(values=tuple(entry.name for entry in entries))
        return RenderPlan(mode=mode, sections=(AttributesRenderSection(attributes=(names,) + others),))

    values = tuple(
        PossibleValueRender(
            name=entry.name,
            short_description=_description_text(entry, variant),
            content=tuple(entry.prose(variant)),
        )
        for entry in entries
    )
    sections: List[RenderSection] = []
    if others:
        sections.append(AttributesRenderSection(attributes=others))
    sections.append(PossibleValuesRenderSection(values=values))

    logger.debug(f"Detailed possible values section with {len(values)} value(s)")
    return RenderPlan(mode=mode, sections=tuple(sections))


def _description_text(entry: ReconciledEntry, variant: Optional[str]) -> str:
    block = entry.description(variant)
    if block is None:
        return ""
    return resolved_text((block,))


# ---------------------------------------------------------------------------
# Serialization (exhaustive dispatch over SectionKind)
# ---------------------------------------------------------------------------

def attribute_to_dict(attribute: Attribute) -> Dict[str, Any]:
    if isinstance(attribute, AllowedValuesAttribute):
        return {"kind": attribute.kind, "values": list(attribute.values)}
    return {"kind": attribute.kind, "value": attribute.value}


def _attributes_to_dict(section: AttributesRenderSection) -> Dict[str, Any]:
    return {
        "kind": section.kind.value,
        "attributes": [attribute_to_dict(a) for a in section.attributes],
    }


def _possible_values_to_dict(section: PossibleValuesRenderSection) -> Dict[str, Any]:
    return {
        "kind": section.kind.value,
        "title": section.title,
        "values": [
            {
                "name": value.name,
                "short_description": value.short_description,
                "content": [block.to_dict() for block in value.content],
            }
            for value in section.values
        ],
    }


_SECTION_SERIALIZERS: Dict[SectionKind, Callable[[Any], Dict[str, Any]]] = {
    SectionKind.ATTRIBUTES: _attributes_to_dict,
    SectionKind.POSSIBLE_VALUES: _possible_values_to_dict,
}


def section_to_dict(section: RenderSection) -> Dict[str, Any]:
    serializer = _SECTION_SERIALIZERS.get(getattr(section, "kind", None))
    if serializer is None:
        raise TypeError(f"Unknown render section: {section!r}")
    return serializer(section)


def plan_to_dict(plan: RenderPlan) -> Dict[str, Any]:
    return {
        "mode": plan.mode.value,
        "sections": [section_to_dict(s) for s in plan.sections],
    }


def format_plan(plan: RenderPlan) -> str:
    """Short plain-text preview of a render plan (used by ``pvctl show``)."""
    lines = [f"mode: {plan.mode.value}"]
    for section in plan.sections:
        if isinstance(section, AttributesRenderSection):
            lines.append("Attributes")
            for attribute in section.attributes:
                if isinstance(attribute, AllowedValuesAttribute):
                    lines.append(f"  Possible values: {', '.join(attribute.values)}")
                else:
                    lines.append(f"  {attribute.kind}: {attribute.value}")
        elif isinstance(section, PossibleValuesRenderSection):
            lines.append(section.title)
            for value in section.values:
                text = f"  {value.name}"
                if value.short_description:
                    text += f": {value.short_description}"
                lines.append(text)
                body = resolved_text(value.content)
                for line in body.splitlines():
                    lines.append(f"      {line}" if line else "")
    return "\n".join(lines)
