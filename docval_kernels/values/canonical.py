"""
Canonical possible values from symbol metadata.

The ingestion side hands over symbol metadata opaquely; this module only
needs an ordered sequence of declared value names out of it. Accepted shapes:

- a sequence of names: ``["January", "February"]``
- a sequence of mappings: ``[{"value": "January"}, {"name": "February"}]``
- a mapping exposing one of ``possibleValues``, ``allowedValues``, ``cases``
  or ``keys`` holding either of the above

Duplicates keep their first declaration.

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-03-02
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from docval_kernels.values.models import CanonicalEntry

import logging

logger = logging.getLogger(__name__)

# Metadata keys holding declared values, in lookup order
VALUE_KEYS = ("possibleValues", "allowedValues", "cases", "keys")
# Keys naming one declared value inside a mapping
NAME_KEYS = ("value", "name", "key")


def _value_name(item: Any) -> Optional[str]:
    if isinstance(item, str):
        return item
    if isinstance(item, Mapping):
        for key in NAME_KEYS:
            if isinstance(item.get(key), str):
                return item[key]
    return None


def _declared_values(metadata: Any) -> Iterable[Any]:
    if metadata is None:
        return []
    if isinstance(metadata, Mapping):
        for key in VALUE_KEYS:
            if key in metadata:
                return metadata[key] or []
        return []
    if isinstance(metadata, (str, bytes)):
        raise TypeError("Symbol metadata must be a sequence of values or a mapping, not a string")
    return metadata


def extract_canonical_values(metadata: Any) -> List[CanonicalEntry]:
    """
    Read the ordered canonical value set from symbol metadata.

    Args:
        metadata: Opaque symbol metadata (see module docstring)

    Returns:
        CanonicalEntry list in declaration order, first occurrence winning
    """
    entries: List[CanonicalEntry] = []
    seen = set()

    for item in _declared_values(metadata):
        name = _value_name(item)
        if name is None:
            logger.debug(f"Ignoring declared value without a name: {item!r}")
            continue
        if name in seen:
            logger.debug(f"Duplicate declared value '{name}' ignored")
            continue
        seen.add(name)
        entries.append(CanonicalEntry(name=name, declaration_order=len(entries)))

    return entries


# ---------------------------------------------------------------------------
# Symbol catalog (thin collaborator for the kernel pipeline)
# ---------------------------------------------------------------------------

@dataclass
class SymbolMetadata:
    """A documented symbol as listed in a catalog file."""
    title: str
    path: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def canonical_values(self) -> List[CanonicalEntry]:
        return extract_canonical_values(self.metadata)

    def matches(self, reference: str) -> bool:
        """True if ``reference`` names this symbol by title or path suffix."""
        ref = reference.strip().strip("/")
        path = self.path.strip("/")
        return ref == self.title or path == ref or path.endswith("/" + ref)

    def to_dict(self) -> Dict[str, Any]:
        return {"title": self.title, "path": self.path, "metadata": self.metadata}


@dataclass
class SymbolCatalog:
    """Symbols and articles of one documentation module."""
    module: str
    symbols: List[SymbolMetadata] = field(default_factory=list)
    articles: List[str] = field(default_factory=list)

    def find(self, reference: str) -> Optional[SymbolMetadata]:
        for symbol in self.symbols:
            if symbol.matches(reference):
                return symbol
        return None


def parse_symbol_catalog(data: Mapping[str, Any]) -> SymbolCatalog:
    """
    Build a SymbolCatalog from its JSON form::

        {"module": "DictionaryData",
         "symbols": [{"title": "Month", "path": "/DictionaryData/Month",
                      "possibleValues": ["January", "February", "March"]}],
         "articles": ["GettingStarted"]}
    """
    module = data.get("module", "")
    symbols = []
    for raw in data.get("symbols", []):
        title = raw.get("title")
        if not title:
            raise ValueError(f"Catalog symbol without a title: {raw!r}")
        path = raw.get("path") or f"/{module}/{title}"
        metadata = {k: v for k, v in raw.items() if k not in ("title", "path")}
        symbols.append(SymbolMetadata(title=title, path=path, metadata=metadata))
    return SymbolCatalog(module=module, symbols=symbols, articles=list(data.get("articles", [])))


def load_symbol_catalog(path: Union[str, Path]) -> SymbolCatalog:
    """Read a catalog JSON file (see ``parse_symbol_catalog``)."""
    path = Path(path)
    data = json.loads(path.read_text(encoding="utf-8"))
    catalog = parse_symbol_catalog(data)
    logger.info(f"Loaded {len(catalog.symbols)} symbol(s) from {path}")
    return catalog
