"""6-part (syndicate) tier parser.

Parts, by index: 0 discovery, 1 competitors, 2 roadmap (with a synthesized
visual timeline), 3 core design, 4 advanced screens, 5 risk, metrics and ROI.
"""

import logging

from analysis_parser.parsing.dispatcher import classify_and_parse, section_id
from analysis_parser.parsing.schema import ParsedSection, PhaseData, SectionType
from analysis_parser.parsing.segmenter import split_by_headings
from analysis_parser.parsing.sources import build_sources
from analysis_parser.parsing.text import clean_text, extract_paragraphs
from analysis_parser.tiers.meta import SYNDICATE_META, part_meta
from analysis_parser.tiers.timeline import synthesize_visual_timeline

logger = logging.getLogger(__name__)

ROADMAP_PART = 2


def parse_syndicate_analysis(markdown: str, part_index: int, citations: list[str] | None = None) -> PhaseData:
    """Parse one syndicate part (0-5) into PhaseData."""
    meta = part_meta(SYNDICATE_META, part_index)
    blocks = [block for block in split_by_headings(markdown) if block.heading or block.body.strip()]

    sections: list[ParsedSection] = []
    for i, block in enumerate(blocks):
        if i == 0 and not block.heading:
            sections.append(
                ParsedSection(
                    id=section_id(i),
                    title="Overview",
                    content=extract_paragraphs(block.body) or clean_text(block.body),
                    type=SectionType.text,
                )
            )
        else:
            sections.append(classify_and_parse(block.heading, block.body, i))

    if not sections:
        sections.append(
            ParsedSection(
                id=section_id(0),
                title="Overview",
                content=clean_text(markdown) or "No content available. Please try again.",
                type=SectionType.text,
            )
        )

    timeline = synthesize_visual_timeline(sections) if part_index == ROADMAP_PART else None

    logger.debug("Syndicate part %d: %d section(s)", part_index + 1, len(sections))
    return PhaseData(
        id=f"phase-{part_index + 1:02d}",
        badge=meta.badge,
        title=meta.title,
        subtitle=meta.subtitle,
        metadata=list(meta.metadata),
        sources=build_sources(citations, f"{meta.badge} Analysis"),
        sections=sections,
        visual_timeline=timeline,
    )
