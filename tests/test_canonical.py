"""
Test canonical value extraction and the symbol catalog

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-03-02
"""

import json

import pytest

from docval_kernels.values.canonical import (
    extract_canonical_values,
    load_symbol_catalog,
    parse_symbol_catalog,
)
from docval_kernels.values.models import CanonicalEntry


class TestExtractCanonicalValues:

    def test_sequence_of_names(self):
        entries = extract_canonical_values(["January", "February", "March"])
        assert entries == [
            CanonicalEntry("January", 0),
            CanonicalEntry("February", 1),
            CanonicalEntry("March", 2),
        ]

    def test_mapping_with_possible_values(self):
        entries = extract_canonical_values({"possibleValues": ["January", "February"]})
        assert [e.name for e in entries] == ["January", "February"]

    def test_mapping_items(self):
        metadata = {"cases": [{"value": "rock"}, {"name": "jazz"}, {"key": "blues"}]}
        assert [e.name for e in extract_canonical_values(metadata)] == ["rock", "jazz", "blues"]

    def test_first_declaration_wins(self):
        entries = extract_canonical_values(["January", "February", "January"])
        assert [e.name for e in entries] == ["January", "February"]
        assert [e.declaration_order for e in entries] == [0, 1]

    def test_unnamed_items_are_ignored(self):
        assert [e.name for e in extract_canonical_values(["January", 42, {"other": 1}])] == ["January"]

    def test_no_values(self):
        assert extract_canonical_values(None) == []
        assert extract_canonical_values({"kind": "struct"}) == []

    def test_string_metadata_is_rejected(self):
        with pytest.raises(TypeError):
            extract_canonical_values("January")


class TestSymbolCatalog:

    def test_default_symbol_path(self, month_catalog):
        genre = month_catalog.find("Genre")
        assert genre.path == "/DictionaryData/Genre"
        assert [c.name for c in genre.canonical_values] == ["Rock", "Jazz"]

    def test_find_by_title_or_path(self, month_catalog):
        assert month_catalog.find("Month").title == "Month"
        assert month_catalog.find("DictionaryData/Month").title == "Month"
        assert month_catalog.find("/DictionaryData/Artist").title == "Artist"

    def test_partial_names_do_not_match(self, month_catalog):
        assert month_catalog.find("onth") is None
        assert month_catalog.find("NotFoundSymbol") is None

    def test_symbol_without_title(self):
        with pytest.raises(ValueError):
            parse_symbol_catalog({"module": "M", "symbols": [{"path": "/M/X"}]})

    def test_load_from_file(self, catalog_file):
        catalog = load_symbol_catalog(catalog_file)
        assert catalog.module == "DictionaryData"
        assert catalog.articles == ["GettingStarted"]
        month = catalog.find("Month")
        assert [c.name for c in month.canonical_values] == ["January", "February", "March"]

    def test_load_invalid_json(self, temp_dir):
        path = temp_dir / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(json.JSONDecodeError):
            load_symbol_catalog(path)
