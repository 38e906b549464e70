"""2-part (insider) tier: Discovery & User Needs, then Competitor Deep-Dive.

Each part is parsed independently.  A leading TL;DR is lifted out of the
sections into ``PhaseData.phase_tldr`` for the next part's prompt.
"""

import logging

from analysis_parser.parsing.dispatcher import classify_and_parse
from analysis_parser.parsing.schema import ParsedSection, PhaseData, SectionType
from analysis_parser.parsing.segmenter import split_by_headings
from analysis_parser.parsing.sources import build_sources
from analysis_parser.parsing.text import clean_text, extract_paragraphs
from analysis_parser.tiers.meta import INSIDER_META, part_meta
from analysis_parser.tiers.tldr import extract_tldr

logger = logging.getLogger(__name__)


def parse_insider_analysis(markdown: str, part_index: int, citations: list[str] | None = None) -> PhaseData:
    """Parse one insider part (0 or 1) into PhaseData."""
    meta = part_meta(INSIDER_META, part_index)

    blocks = [block for block in split_by_headings(markdown) if block.heading.strip() or block.body.strip()]
    tldr, blocks = extract_tldr(blocks)

    sections: list[ParsedSection] = []
    for i, block in enumerate(blocks):
        if i == 0 and not block.heading.strip():
            content = extract_paragraphs(block.body) or clean_text(block.body)
            if content:
                sections.append(ParsedSection(id="section-00", title="Overview", content=content, type=SectionType.text))
            continue
        sections.append(classify_and_parse(block.heading, block.body, len(sections)))

    logger.debug("Insider part %d: %d section(s), tldr=%s", part_index + 1, len(sections), tldr is not None)
    return PhaseData(
        id=f"insider-part-{part_index + 1}",
        badge=meta.badge,
        title=meta.title,
        subtitle=meta.subtitle,
        metadata=list(meta.metadata),
        sources=build_sources(citations, f"{meta.title} — AI Analysis"),
        sections=sections,
        phase_tldr=tldr,
    )
