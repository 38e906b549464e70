"""Merge secondary classifications into heuristic PhaseData.

A section changes type only when the classification is confident enough,
differs from the heuristic type, and the payload for the new type can be
re-extracted from the section's raw markdown.  Relabelling without
re-extraction would leave a payload the renderer cannot interpret, so any
failure keeps the heuristic section as it was.
"""

import logging

from pydantic import ValidationError

from analysis_parser.classifier.client import classify_sections
from analysis_parser.classifier.control import CancellationToken
from analysis_parser.classifier.schema import ClassificationResult
from analysis_parser.config import ClassifierSettings, load_classifier_settings
from analysis_parser.parsing.dispatcher import build_payload
from analysis_parser.parsing.schema import ParsedSection, PhaseData, SectionType
from analysis_parser.parsing.segmenter import locate_block

logger = logging.getLogger(__name__)


def reparse_section(
    section: ParsedSection, new_type: SectionType, raw_markdown: str, occurrence: int = 0
) -> ParsedSection | None:
    """Rebuild *section* as *new_type* from its raw block; None if that is not possible.

    *occurrence* is the number of earlier sections sharing this title, so that
    repeated headings resolve to the section's own block.
    """
    block = locate_block(section.title, raw_markdown, occurrence)
    if block is None or not block.body.strip():
        logger.debug("No raw block for '%s'; keeping %s", section.title, section.type.value)
        return None

    payload = build_payload(new_type, section.title, block.body)
    if payload is None:
        return None
    try:
        return ParsedSection(
            id=section.id,
            title=section.title,
            content=payload.content,
            type=new_type,
            data=payload.data,
            columns=payload.columns,
        )
    except ValidationError as exc:
        logger.warning("Re-extraction of '%s' as %s failed validation: %s", section.title, new_type.value, exc)
        return None


def enhance_with_classification(
    phase: PhaseData,
    classification: ClassificationResult,
    raw_markdown: str,
    confidence_threshold: float = 0.7,
) -> PhaseData:
    """Apply confident, re-extractable type changes; returns *phase* itself when nothing changes.

    Section count and order never change.
    """
    changes = []
    sections = []
    seen: dict[str, int] = {}
    for index, section in enumerate(phase.sections):
        occurrence = seen.get(section.title, 0)
        seen[section.title] = occurrence + 1
        match = classification.for_index(index)
        if match is None or match.confidence < confidence_threshold or match.suggested_type == section.type:
            sections.append(section)
            continue

        reparsed = reparse_section(section, match.suggested_type, raw_markdown, occurrence)
        if reparsed is None:
            sections.append(section)
            continue

        changes.append(f"#{index} {section.type.value}->{match.suggested_type.value} ({match.confidence:.0%})")
        sections.append(reparsed)

    if not changes:
        return phase

    logger.info("Enhanced %d section(s): %s", len(changes), ", ".join(changes))
    return phase.model_copy(update={"sections": sections})


async def classify_and_enhance(
    phase: PhaseData,
    raw_markdown: str,
    cancel: CancellationToken | None = None,
    *,
    settings: ClassifierSettings | None = None,
    **client_kwargs,
) -> PhaseData:
    """Classify *phase*'s sections and merge the result; falls back to *phase* unchanged."""
    settings = settings or load_classifier_settings()
    result = await classify_sections(phase.sections, raw_markdown, cancel, settings=settings, **client_kwargs)
    if result is None or (cancel is not None and cancel.cancelled):
        return phase
    return enhance_with_classification(phase, result, raw_markdown, settings.confidence_threshold)
