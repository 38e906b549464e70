"""Tests for the 2-part insider tier parser and TL;DR lifting."""

# pylint: disable=missing-class-docstring,missing-function-docstring

from analysis_parser.parsing.schema import RawBlock, SectionType
from analysis_parser.tiers.insider import parse_insider_analysis
from analysis_parser.tiers.tldr import extract_tldr

DOCUMENT = "\n".join(
    [
        "Intro text here.",
        "## TL;DR",
        "This discovery found strong demand among small retailers.",
        "## Users",
        "- Shop owners",
        "- Store managers",
    ]
)


class TestExtractTldr:

    def test_needs_two_blocks(self):
        blocks = [RawBlock("TL;DR", "A long enough summary of the whole thing.")]
        assert extract_tldr(blocks) == (None, blocks)

    def test_removes_block(self):
        blocks = [RawBlock("TLDR", "A long enough summary of the whole thing."), RawBlock("Next", "x")]
        summary, remaining = extract_tldr(blocks)
        assert summary == "A long enough summary of the whole thing."
        assert remaining == [RawBlock("Next", "x")]

    def test_bullet_summary(self):
        blocks = [RawBlock("TL;DR", "- First finding is here\n- Second finding too"), RawBlock("Next", "x")]
        assert extract_tldr(blocks)[0] == "First finding is here. Second finding too"

    def test_short_summary_ignored(self):
        blocks = [RawBlock("TL;DR", "Too short."), RawBlock("Next", "x")]
        assert extract_tldr(blocks) == (None, blocks)

    def test_only_leading_blocks_searched(self):
        blocks = [RawBlock("A", "a"), RawBlock("B", "b"), RawBlock("TL;DR", "A long enough summary of the whole thing.")]
        assert extract_tldr(blocks)[0] is None

    def test_long_summary_truncated(self):
        blocks = [RawBlock("TL;DR", "word " * 400), RawBlock("Next", "x")]
        summary = extract_tldr(blocks)[0]
        assert summary.endswith("...")
        assert len(summary) <= 1003


class TestInsiderParser:

    def test_tldr_lifted_out_of_sections(self):
        phase = parse_insider_analysis(DOCUMENT, 0)
        assert phase.phase_tldr == "This discovery found strong demand among small retailers."
        assert all(section.title != "TL;DR" for section in phase.sections)

    def test_intro_becomes_overview(self):
        phase = parse_insider_analysis(DOCUMENT, 0)
        overview = phase.sections[0]
        assert (overview.id, overview.title, overview.content) == ("section-00", "Overview", "Intro text here.")
        assert phase.sections[1].type == SectionType.list

    def test_ids_and_meta(self):
        phase = parse_insider_analysis(DOCUMENT, 1)
        assert phase.id == "insider-part-2"
        assert phase.title == "Competitor Deep-Dive"
        assert phase.metadata[-1] == "Tier: Insider (2/2)"
        assert phase.sources[0].title == "Competitor Deep-Dive — AI Analysis"

    def test_short_tldr_kept_as_section(self):
        phase = parse_insider_analysis("## TL;DR\nShort.\n## Users\n- a\n- b", 0)
        assert phase.phase_tldr is None
        assert phase.sections[0].title == "TL;DR"

    def test_citations(self):
        phase = parse_insider_analysis(DOCUMENT, 0, ["https://example.com/a"])
        assert phase.sources[0].url == "https://example.com/a"
