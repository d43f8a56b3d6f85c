"""
Test the possible-value directive parser

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-03-02
"""

import pytest

from docval_kernels.values.config import DirectiveConfig, ValuesConfig
from docval_kernels.values.md_parser import extract_page_title, parse_directives
from docval_kernels.values.models import BlockKind, SourcePosition, SourceRange

from conftest import MONTH_PAGE


class TestPageTitle:

    def test_symbol_heading(self):
        title, body, offset = extract_page_title(MONTH_PAGE)
        assert title == "Month"
        assert offset == 1
        assert body.splitlines()[1] == "Month object."

    def test_front_matter_is_skipped(self):
        text = "---\ntitle: x\n---\n# ``Month``\n\nBody"
        title, body, offset = extract_page_title(text)
        assert title == "Month"
        assert offset == 4
        assert body == "\nBody"

    def test_no_symbol_heading(self):
        title, body, offset = extract_page_title("# Month\n\nBody")
        assert title is None
        assert offset == 0
        assert body == "# Month\n\nBody"


class TestBlockForm:

    def _entries(self):
        _, body, offset = extract_page_title(MONTH_PAGE)
        return parse_directives(body, source="Month.md", line_offset=offset)

    def test_names_in_authored_order(self):
        assert [e.name for e in self._entries()] == ["January", "February", "March", "April"]

    def test_item_span_covers_own_line(self):
        april = self._entries()[3]
        assert april.range == SourceRange(SourcePosition(9, 3), SourcePosition(9, 18))
        assert april.source == "Month.md"

    def test_name_and_description(self):
        january = self._entries()[0]
        assert january.short_description == "First"
        assert january.name_range == SourceRange.on_line(6, 5, 12)
        assert january.description_range.lower == SourcePosition(6, 14)
        assert january.prose == ()

    def test_nested_prose_becomes_content(self):
        text = (
            "- PossibleValues:\n"
            "  - January: First month.\n"
            "\n"
            "    Named after Janus.\n"
            "  - February: Second\n"
        )
        january, february = parse_directives(text)
        assert january.short_description == "First month."
        assert len(january.prose) == 1
        block = january.prose[0]
        assert block.kind == BlockKind.PARAGRAPH
        assert block.text == "Named after Janus."
        assert block.range.lower == SourcePosition(4, 5)
        # the item span stops at its own line
        assert january.range.upper == SourcePosition(2, 26)
        assert february.prose == ()

    def test_code_block_in_prose(self):
        text = (
            "- PossibleValues:\n"
            "  - January: First\n"
            "\n"
            "    ```json\n"
            "    {\"month\": \"January\"}\n"
            "    ```\n"
        )
        (january,) = parse_directives(text)
        assert [b.kind for b in january.prose] == [BlockKind.CODE]
        assert "\"month\"" in january.prose[0].text

    def test_continuation_line_extends_description(self):
        text = (
            "- PossibleValues:\n"
            "  - January: First\n"
            "    month of the year.\n"
        )
        (january,) = parse_directives(text)
        assert january.short_description == "First\nmonth of the year."
        assert january.range.upper == SourcePosition(3, 23)

    def test_malformed_items_are_skipped(self):
        text = (
            "- PossibleValues:\n"
            "  - January: First\n"
            "  - just some text\n"
            "  - March: Third\n"
        )
        assert [e.name for e in parse_directives(text)] == ["January", "March"]

    def test_keyword_is_case_insensitive(self):
        text = "- possible values:\n  - January: First\n"
        assert [e.name for e in parse_directives(text)] == ["January"]

    def test_deeper_indented_children(self):
        text = (
            "- PossibleValues:\n"
            "    - January: First\n"
            "    - February: Second links to <doc:NotFoundArticle>\n"
        )
        entries = parse_directives(text)
        assert [e.name for e in entries] == ["January", "February"]
        assert entries[1].short_description == "Second links to <doc:NotFoundArticle>"
        assert entries[1].description_range.lower == SourcePosition(3, 17)


class TestShorthandForm:

    def test_single_value(self):
        (entry,) = parse_directives("- PossibleValue January: First")
        assert entry.name == "January"
        assert entry.short_description == "First"
        assert entry.name_range == SourceRange.on_line(1, 17, 24)
        assert entry.range == SourceRange.on_line(1, 1, 31)

    def test_backticked_name(self):
        (entry,) = parse_directives("- PossibleValue `January`: First")
        assert entry.name == "January"
        assert entry.name_range == SourceRange.on_line(1, 18, 25)

    def test_name_without_description(self):
        (entry,) = parse_directives("- PossibleValue January:")
        assert entry.short_description == ""
        assert entry.description_range is None
        assert entry.content_blocks() == []

    def test_variant_is_recorded(self):
        (entry,) = parse_directives("- PossibleValue January: First", variant="objc")
        assert entry.variant == "objc"


class TestNoDirectives:

    def test_plain_body(self):
        assert parse_directives("Month object.\n\n- A regular list item\n") == []

    def test_directive_inside_code_fence(self):
        text = "```\n- PossibleValue January: First\n```\n"
        assert parse_directives(text) == []

    def test_nested_directive_is_not_top_level(self):
        text = "- Notes\n  - PossibleValue January: First\n"
        assert parse_directives(text) == []

    def test_custom_keywords(self):
        cfg = ValuesConfig(directives=DirectiveConfig(block_keywords=["Cases"], inline_keywords=["Case"]))
        assert parse_directives("- PossibleValue January: First", config=cfg) == []
        assert [e.name for e in parse_directives("- Case January: First", config=cfg)] == ["January"]


@pytest.mark.parametrize("marker", ["-", "*", "+", "1."])
def test_list_markers(marker):
    text = f"{marker} PossibleValue January: First"
    assert [e.name for e in parse_directives(text)] == ["January"]
