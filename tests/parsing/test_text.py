"""Unit tests for the text normalizer and line-level markdown helpers."""

# pylint: disable=missing-class-docstring,missing-function-docstring

from analysis_parser.parsing.text import (
    MAX_FENCE_LINES,
    clean_text,
    extract_paragraphs,
    has_bullet_list,
    has_numbered_list,
    parse_all_list_items,
    parse_bullet_list,
    parse_numbered_list,
    pick_icon,
    split_table_row,
    truncate_at_word,
)

# ===========================================================================
# clean_text tests
# ===========================================================================


class TestCleanText:

    def test_strips_bold_and_italic(self):
        assert clean_text("**Bold** and *italic* text") == "Bold and italic text"

    def test_strips_citation_markers(self):
        assert clean_text("Revenue grew 40%[1][12].") == "Revenue grew 40%."

    def test_keeps_link_text_drops_url(self):
        assert clean_text("See [the report](https://example.com/r) now") == "See the report now"

    def test_strips_html_tags(self):
        assert clean_text("<b>Hello</b> <br/>world") == "Hello world"

    def test_collapses_whitespace(self):
        assert clean_text("  a \n\n b\t c  ") == "a b c"

    def test_empty_input(self):
        assert clean_text("") == ""

    def test_only_markup_yields_empty(self):
        assert clean_text("**[3]**") == ""


class TestTruncateAtWord:

    def test_short_text_unchanged(self):
        assert truncate_at_word("short text", 50) == "short text"

    def test_cuts_at_last_space(self):
        assert truncate_at_word("alpha beta gamma", 12) == "alpha beta..."

    def test_no_space_hard_cut(self):
        assert truncate_at_word("abcdefghij", 4) == "abcd..."


class TestPickIcon:

    def test_known_keyword(self):
        assert pick_icon("Risk Exposure") == "warning"

    def test_first_table_entry_wins(self):
        # "summary" precedes "market" in the keyword table
        assert pick_icon("Market Summary") == "summarize"

    def test_default(self):
        assert pick_icon("Something Else") == "info"


# ===========================================================================
# List helpers
# ===========================================================================


class TestLists:

    def test_single_bullet_is_not_a_list(self):
        assert has_bullet_list("- Solo item") is False

    def test_two_bullets_are_a_list(self):
        assert has_bullet_list("- one\n* two") is True

    def test_numbered_list(self):
        assert has_numbered_list("1. one\n2) two") is True

    def test_parse_bullets_cleans_items(self):
        assert parse_bullet_list("- **Fast** setup\n- Cheap[2]\n-    \nplain") == ["Fast setup", "Cheap"]

    def test_parse_numbered(self):
        assert parse_numbered_list("1. First\n2. Second") == ["First", "Second"]

    def test_all_items_prefers_longer_list(self):
        body = "- a\n1. x\n2. y\n3. z"
        assert parse_all_list_items(body) == ["x", "y", "z"]

    def test_all_items_bullets_win_ties(self):
        body = "- a\n- b\n1. x\n2. y"
        assert parse_all_list_items(body) == ["a", "b"]


# ===========================================================================
# extract_paragraphs tests
# ===========================================================================


class TestExtractParagraphs:

    def test_skips_lists_tables_and_rules(self):
        body = "Intro line.\n- bullet\n| a | b |\n|---|---|\n---\nClosing line."
        assert extract_paragraphs(body) == "Intro line. Closing line."

    def test_skips_fenced_code(self):
        body = "Before.\n```\ncode here\n```\nAfter."
        assert extract_paragraphs(body) == "Before. After."

    def test_strips_heading_and_quote_markers(self):
        assert extract_paragraphs("### Sub\n> quoted") == "Sub quoted"

    def test_skips_images(self):
        assert extract_paragraphs("![diagram](x.png)\nText") == "Text"

    def test_closer_after_runaway_fence_keeps_prose(self):
        code = "\n".join(["code"] * (MAX_FENCE_LINES + 1))
        assert extract_paragraphs(f"```\n{code}\n```\nTail.") == "code Tail."


class TestSplitTableRow:

    def test_outer_pipes(self):
        assert split_table_row("| a | b |") == ["a", "b"]

    def test_escaped_pipe_kept_in_cell(self):
        assert split_table_row("| a \\| b | c |") == ["a | b", "c"]

    def test_empty_cells_preserved(self):
        assert split_table_row("| a |  | c |") == ["a", "", "c"]
