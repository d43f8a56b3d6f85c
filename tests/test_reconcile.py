"""
Test reconciliation of authored and declared possible values

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-03-02
"""

import random

from docval_kernels.values.config import MatchingConfig, ValuesConfig
from docval_kernels.values.models import BlockKind, ContentBlock, DocumentedEntry
from docval_kernels.values.reconcile import reconcile


def _doc(name, description="", variant=None, prose=()):
    return DocumentedEntry(name=name, short_description=description, prose=tuple(prose), variant=variant)


class TestReconcile:

    def test_one_entry_per_declared_value(self, month_canonical):
        result = reconcile([_doc("January", "First"), _doc("April", "Fourth")], month_canonical)
        assert [e.name for e in result.entries] == ["January", "February", "March"]
        assert [e.canonical_order for e in result.entries] == [0, 1, 2]

    def test_partitions(self, month_canonical):
        result = reconcile([_doc("March", "Third"), _doc("April", "Fourth")], month_canonical)
        assert [d.name for d in result.matched] == ["March"]
        assert [d.name for d in result.extra] == ["April"]
        assert [c.name for c in result.implicit] == ["January", "February"]

    def test_authored_order_has_no_effect(self, month_canonical):
        docs = [_doc("January", "First"), _doc("February", "Second"), _doc("March", "Third"), _doc("Marc")]
        expected = reconcile(docs, month_canonical).entries
        shuffled = list(docs)
        random.Random(7).shuffle(shuffled)
        assert reconcile(shuffled, month_canonical).entries == expected

    def test_matched_entries_carry_content(self, month_canonical):
        prose = ContentBlock(BlockKind.PARAGRAPH, "Named after Janus.")
        result = reconcile([_doc("January", "First", prose=[prose])], month_canonical)
        january, february, _ = result.entries
        assert january.has_content
        assert january.short_description == "First"
        assert january.prose() == (prose,)
        assert not february.has_content
        assert february.short_description == ""

    def test_description_alone_is_content(self, month_canonical):
        january = reconcile([_doc("January", "First")], month_canonical).entries[0]
        assert len(january.content.get()) == 1
        assert january.description().kind == BlockKind.DESCRIPTION

    def test_duplicates_keep_first(self, month_canonical):
        result = reconcile([_doc("January", "First"), _doc("January", "Again")], month_canonical)
        assert result.entries[0].short_description == "First"
        assert result.extra == []
        assert len(result.matched) == 2

    def test_variants(self, month_canonical):
        docs = [_doc("January", "First"), _doc("January", "Premier", variant="objc")]
        january = reconcile(docs, month_canonical).entries[0]
        assert january.content.variants == [None, "objc"]
        assert january.description("objc").text == "Premier"
        # unknown variant falls back to the primary one
        assert january.description("swift").text == "First"

    def test_no_declared_values(self):
        result = reconcile([_doc("January")], [])
        assert result.entries == []
        assert [d.name for d in result.extra] == ["January"]

    def test_case_sensitive_by_default(self, month_canonical):
        result = reconcile([_doc("january")], month_canonical)
        assert [d.name for d in result.extra] == ["january"]

    def test_case_insensitive_flag(self, month_canonical):
        cfg = ValuesConfig(matching=MatchingConfig(case_sensitive=False))
        result = reconcile([_doc("january", "First")], month_canonical, cfg)
        assert result.extra == []
        assert result.entries[0].name == "January"
        assert result.entries[0].short_description == "First"

    def test_to_dict(self, month_canonical):
        data = reconcile([_doc("April")], month_canonical).to_dict()
        assert data["implicit"] == ["January", "February", "March"]
        assert data["extra"][0]["name"] == "April"
        assert len(data["entries"]) == 3
