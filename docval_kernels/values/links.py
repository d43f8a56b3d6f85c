"""
Link-resolution contract used by the content merger.

Authored prose may reference symbols (````Symbol````) and articles
(``<doc:Article>``). The merger finds those references and asks a
``LinkResolver`` to resolve each one relative to the documented symbol's
path. How references are resolved is the resolver's business; the
``CatalogLinkResolver`` shipped here looks names up in a ``SymbolCatalog``.

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-03-02
"""

import re
from dataclasses import dataclass
from typing import List, Protocol, Union

from docval_kernels.values.canonical import SymbolCatalog

import logging

logger = logging.getLogger(__name__)

REFERENCE_SYMBOL = "symbol"
REFERENCE_ARTICLE = "article"

_REFERENCE_RE = re.compile(r'``(?P<symbol>[^`\n]+)``|<doc:(?P<article>[^>\s]+)>')


@dataclass(frozen=True)
class Reference:
    """A reference found in a block of prose, with its character offsets."""
    target: str
    kind: str       # REFERENCE_SYMBOL or REFERENCE_ARTICLE
    start: int
    end: int        # exclusive

    @property
    def raw(self) -> str:
        if self.kind == REFERENCE_ARTICLE:
            return f"<doc:{self.target}>"
        return f"``{self.target}``"


@dataclass(frozen=True)
class ResolvedLink:
    destination: str
    title: str


@dataclass(frozen=True)
class Unresolved:
    reference: Reference
    context_path: str


ResolutionResult = Union[ResolvedLink, Unresolved]


class LinkResolver(Protocol):
    """Resolves a reference written in the documentation of ``context_path``."""

    def resolve(self, reference: Reference, context_path: str) -> ResolutionResult:
        ...


def find_references(text: str) -> List[Reference]:
    """All symbol and article references in ``text``, in order of appearance."""
    refs = []
    for m in _REFERENCE_RE.finditer(text):
        if m.group("symbol") is not None:
            refs.append(Reference(m.group("symbol").strip(), REFERENCE_SYMBOL, m.start(), m.end()))
        else:
            refs.append(Reference(m.group("article").strip(), REFERENCE_ARTICLE, m.start(), m.end()))
    return refs


class CatalogLinkResolver:
    """
    Resolve references against the symbols and articles of one catalog.

    Symbols match by title or path suffix (``Artist``, ``DictionaryData/Artist``).
    Articles match by name, with or without the module prefix.
    """

    def __init__(self, catalog: SymbolCatalog):
        self.catalog = catalog

    def resolve(self, reference: Reference, context_path: str) -> ResolutionResult:
        if reference.kind == REFERENCE_ARTICLE:
            return self._resolve_article(reference, context_path)

        symbol = self.catalog.find(reference.target)
        if symbol is not None:
            return ResolvedLink(destination=symbol.path, title=symbol.title)

        logger.debug(f"Unresolved symbol reference '{reference.target}' at {context_path}")
        return Unresolved(reference=reference, context_path=context_path)

    def _resolve_article(self, reference: Reference, context_path: str) -> ResolutionResult:
        name = reference.target.strip("/")
        prefix = f"{self.catalog.module}/"
        if name.startswith(prefix):
            name = name[len(prefix):]
        if name in self.catalog.articles:
            return ResolvedLink(destination=f"/{self.catalog.module}/{name}", title=name)

        logger.debug(f"Unresolved article reference '{reference.target}' at {context_path}")
        return Unresolved(reference=reference, context_path=context_path)
