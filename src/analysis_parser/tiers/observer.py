"""1-part (observer) tier: a quick validation with four fixed sections.

Expected sections are Problem Statement, Pain Points, Viability Score, and
Next Step.  Each is matched by heading keyword and parsed by a dedicated
parser; missing ones fall back to the generic dispatcher.  If fewer than two
sections come out, the specialised attempt is discarded and every block is
dispatched generically.
"""

import logging
import re

from analysis_parser.parsing.dispatcher import classify_and_parse
from analysis_parser.parsing.patterns import BOLD_RE
from analysis_parser.parsing.schema import (
    NextStep,
    PainPoint,
    ParsedSection,
    PhaseData,
    RawBlock,
    SectionType,
    ViabilityScore,
)
from analysis_parser.parsing.segmenter import split_by_headings
from analysis_parser.parsing.sources import build_sources
from analysis_parser.parsing.text import clean_text, extract_paragraphs, parse_bullet_list
from analysis_parser.tiers.meta import OBSERVER_META

logger = logging.getLogger(__name__)

OBSERVER_MARKER = "[✅ OBSERVER SANITY CHECK COMPLETE]"

# ─── Patterns ────────────────────────────────────────────────────────────────

PROBLEM_HEADING_RE = re.compile(r"\b(?:problem|statement|overview|summary)\b", re.IGNORECASE)
PAIN_HEADING_RE = re.compile(r"\b(?:pain|challenge|issue|friction)\b", re.IGNORECASE)
VIABILITY_HEADING_RE = re.compile(r"\b(?:viability|score|assessment|feasibility)\b", re.IGNORECASE)
NEXT_STEP_HEADING_RE = re.compile(r"\b(?:next|action|recommendation|step)\b", re.IGNORECASE)

HIGH_SEVERITY_RE = re.compile(r"\b(?:critical|severe|major|high|significant|blocking)\b", re.IGNORECASE)
LOW_SEVERITY_RE = re.compile(r"\b(?:minor|low|slight|trivial|negligible)\b", re.IGNORECASE)
SEVERITY_ICONS = {"low": "🟢", "medium": "🟡", "high": "🔴"}

PAIN_POINT_RE = re.compile(r"^\s*[-*]\s+\*\*(.+?)\*\*\s*[:\-–—]\s*(.+)")

# A score must carry a qualifier so arbitrary numbers are not picked up
QUALIFIED_SCORE_RE = re.compile(r"\b(\d{1,3})\s*(?:/\s*100\b|%|out of 100\b)")
LABELLED_SCORE_RE = re.compile(r"(?:score|viability|rating|assessment)[:\s]*(\d{1,3})\b", re.IGNORECASE)
GLOBAL_SCORE_RE = re.compile(r"\b(\d{1,3})\s*(?:/\s*100|out of 100)\b")
GLOBAL_LABELLED_SCORE_RE = re.compile(r"(?:score|viability|rating)[:\s]*(\d{1,3})\b", re.IGNORECASE)
DEFAULT_SCORE = 50

WHAT_TO_DO_RE = re.compile(r"\bwhat\s+to\s+do\b", re.IGNORECASE)
WHY_FIRST_RE = re.compile(r"\bwhy\s+first\b", re.IGNORECASE)
WHAT_TO_DO_LABEL_RE = re.compile(r"^.*?\bwhat\s+to\s+do\b[:\s]*", re.IGNORECASE)
WHY_FIRST_LABEL_RE = re.compile(r"^.*?\bwhy\s+first\b[:\s]*", re.IGNORECASE)
MAX_NEXT_STEP_TITLE = 80


# ─── Section Parsers ─────────────────────────────────────────────────────────


def detect_severity(text: str) -> str:
    if HIGH_SEVERITY_RE.search(text):
        return "high"
    if LOW_SEVERITY_RE.search(text):
        return "low"
    return "medium"


def _pain_point(title: str, text: str) -> PainPoint:
    severity = detect_severity(f"{title} {text}")
    return PainPoint(title=title, text=text, severity=severity, icon=SEVERITY_ICONS[severity])


def parse_problem(body: str) -> ParsedSection:
    return ParsedSection(
        id="section-01",
        title="Problem Statement",
        content=extract_paragraphs(body) or clean_text(body),
        type=SectionType.text,
    )


def parse_pain_points(body: str) -> ParsedSection:
    """Bold-titled bullets become pain points; plain bullets are the fallback."""
    points = []
    for line in body.split("\n"):
        match = PAIN_POINT_RE.match(line)
        if match:
            points.append(_pain_point(clean_text(match.group(1)), clean_text(match.group(2))))

    if not points:
        for bullet in parse_bullet_list(body):
            title = bullet if len(bullet) <= 60 else bullet[:57] + "..."
            points.append(_pain_point(title, bullet))

    return ParsedSection(
        id="section-02",
        title="Pain Points",
        content=extract_paragraphs(body) or "Key pain points identified in the target market.",
        type=SectionType.pain_points,
        data=points,
    )


def score_band(score: int) -> tuple[str, str]:
    """Return ``(label, emoji)`` for a 0-100 viability score."""
    if score <= 30:
        return "Low Viability", "🔴"
    if score <= 60:
        return "Moderate Viability", "🟡"
    return "High Viability", "🟢"


def parse_viability(body: str) -> ParsedSection:
    match = QUALIFIED_SCORE_RE.search(body) or LABELLED_SCORE_RE.search(body)
    score = min(100, max(0, int(match.group(1)))) if match else DEFAULT_SCORE
    label, emoji = score_band(score)
    return ParsedSection(
        id="section-03",
        title="Viability Score",
        content=f"{emoji} {score}/100 — {label}",
        type=SectionType.viability_score,
        data=ViabilityScore(
            score=score,
            label=label,
            emoji=emoji,
            summary=extract_paragraphs(body) or f"Viability score: {score}/100.",
        ),
    )


def _next_step_fields(body: str) -> tuple[str, str]:
    """Collect text under 'What to do' and 'Why first' labels, inline text included."""
    what: list[str] = []
    why: list[str] = []
    current = None

    for line in body.split("\n"):
        if WHAT_TO_DO_RE.search(line):
            current = what
            inline = WHAT_TO_DO_LABEL_RE.sub("", line, count=1).strip()
        elif WHY_FIRST_RE.search(line):
            current = why
            inline = WHY_FIRST_LABEL_RE.sub("", line, count=1).strip()
        else:
            inline = line.strip()
            if current is None:
                continue
        text = clean_text(inline)
        if text:
            current.append(text)

    return " ".join(what), " ".join(why)


def parse_next_step(body: str) -> ParsedSection:
    what_to_do, why_first = _next_step_fields(body)

    if not what_to_do and not why_first:
        bullets = parse_bullet_list(body)
        if len(bullets) >= 2:
            what_to_do, why_first = bullets[0], bullets[1]
        elif bullets:
            what_to_do, why_first = bullets[0], extract_paragraphs(body)
        else:
            what_to_do = extract_paragraphs(body) or clean_text(body)

    title = "Recommended Next Step"
    bold = BOLD_RE.search(body)
    if bold:
        candidate = clean_text(bold.group(1))
        if len(candidate) < MAX_NEXT_STEP_TITLE and not (WHAT_TO_DO_RE.search(candidate) or WHY_FIRST_RE.search(candidate)):
            title = candidate

    return ParsedSection(
        id="section-04",
        title="Next Step",
        content=what_to_do or "Actionable recommendation based on the analysis.",
        type=SectionType.next_step,
        data=NextStep(title=title, what_to_do=what_to_do, why_first=why_first),
    )


# ─── Tier Entry Point ────────────────────────────────────────────────────────


def _match_blocks(blocks: list[RawBlock]) -> dict[str, RawBlock]:
    """Assign each headed block to the first still-free slot whose heading matcher fires."""
    matchers = (
        ("problem", PROBLEM_HEADING_RE),
        ("pain", PAIN_HEADING_RE),
        ("viability", VIABILITY_HEADING_RE),
        ("next", NEXT_STEP_HEADING_RE),
    )
    found: dict[str, RawBlock] = {}
    for block in blocks:
        if not block.heading:
            continue
        for slot, pattern in matchers:
            if slot not in found and pattern.search(block.heading):
                found[slot] = block
                break
    return found


def _renumbered(section: ParsedSection, section_id: str) -> ParsedSection:
    return section.model_copy(update={"id": section_id})


def _observer_sections(markdown: str, blocks: list[RawBlock]) -> list[ParsedSection]:
    found = _match_blocks(blocks)
    claimed = [id(block) for block in found.values()]
    sections = []

    if "problem" in found:
        sections.append(parse_problem(found["problem"].body))
    else:
        first = next((block for block in blocks if block.body.strip()), None)
        if first is not None:
            claimed.append(id(first))
            sections.append(parse_problem(first.body))
        else:
            sections.append(
                ParsedSection(
                    id="section-01",
                    title="Problem Statement",
                    content=clean_text(markdown)[:500] or "No problem statement detected.",
                    type=SectionType.text,
                )
            )

    if "pain" in found:
        sections.append(parse_pain_points(found["pain"].body))
    else:
        unmatched = next((block for block in blocks if block.heading and id(block) not in claimed), None)
        if unmatched is not None:
            claimed.append(id(unmatched))
            sections.append(_renumbered(classify_and_parse(unmatched.heading, unmatched.body, 1), "section-02"))

    if "viability" in found:
        sections.append(parse_viability(found["viability"].body))
    else:
        match = GLOBAL_SCORE_RE.search(markdown) or GLOBAL_LABELLED_SCORE_RE.search(markdown)
        if match:
            sections.append(parse_viability(match.group(0)))

    if "next" in found:
        sections.append(parse_next_step(found["next"].body))
    elif blocks:
        last = blocks[-1]
        if id(last) not in claimed:
            sections.append(_renumbered(classify_and_parse(last.heading or "Next Step", last.body, 3), "section-04"))

    return sections


def parse_observer_analysis(markdown: str, citations: list[str] | None = None) -> PhaseData:
    """Parse a 1-part observer response into a single PhaseData."""
    if OBSERVER_MARKER not in markdown:
        logger.warning("Observer completion marker not found; continuing with best-effort parsing")

    # The marker is a completion signal, not content
    markdown = markdown.replace(OBSERVER_MARKER, "").strip()
    blocks = split_by_headings(markdown)
    sections = _observer_sections(markdown, blocks)

    if len(sections) < 2:
        logger.info("Observer layout not recognised (%d section(s)); using generic classification", len(sections))
        sections = [classify_and_parse(block.heading or f"Section {i + 1}", block.body, i) for i, block in enumerate(blocks)]

    return PhaseData(
        id="observer-1",
        badge=OBSERVER_META.badge,
        title=OBSERVER_META.title,
        subtitle=OBSERVER_META.subtitle,
        metadata=list(OBSERVER_META.metadata),
        sources=build_sources(citations, "Observer Analysis"),
        sections=sections,
    )
