"""Per-type structured extractors.

Every extractor takes ``(heading, body)`` and returns the payload for its
section type, or an empty/None result when the block does not carry usable
data of that type.  An empty result is not an error: the dispatcher moves on
to the next candidate type.
"""

import logging
import re
from dataclasses import dataclass, field

from analysis_parser.parsing.detectors import has_table, separator_index
from analysis_parser.parsing.patterns import (
    BOLD_LEAD_RE,
    BULLET_PREFIX_RE,
    BULLET_RE,
    CARD_BULLET_RE,
    CARD_NUMBERED_RE,
    CHECKBOX_RE,
    CHECKED_GLYPH_RE,
    COMPETITOR_INFO_END_RE,
    COMPETITOR_PREFIX_RE,
    CRITERIA_RE,
    DANGLING_SEPARATOR_RE,
    DEADLINE_RE,
    DECISIONS_LABEL_RE,
    DELIVERABLES_LABEL_RE,
    HIGH_PRIORITY_RE,
    LIST_ITEM_RE,
    LOW_PRIORITY_RE,
    OBJECTIVES_LABEL_RE,
    OPPORTUNITY_INLINE_RE,
    OPPORTUNITY_LABEL_RE,
    OPPORTUNITY_PARAGRAPH_RE,
    PHASE_PREFIX_RE,
    PRIORITY_ANNOTATION_RES,
    RISK_SCORE_RE,
    ROADMAP_TIMELINE_RE,
    ROI_INVESTMENT_RE,
    ROI_MRR_RE,
    ROI_PAYBACK_RE,
    ROI_ROI_RE,
    ROI_TITLE_SPLIT_RE,
    STAKEHOLDER_RE,
    STRENGTHS_LABEL_RE,
    SUB_SECTION_SPLIT_RE,
    URL_RE,
    WEAKNESSES_LABEL_RE,
)
from analysis_parser.parsing.schema import (
    BlueprintItem,
    CardItem,
    CompetitorData,
    DeepDive,
    MetricRow,
    PhaseDetail,
    RiskHeader,
    RoadmapDecision,
    RoadmapDeliverable,
    RoadmapObjective,
    RoadmapPhaseData,
    ROIScenario,
    TableColumn,
    TaskItem,
)
from analysis_parser.parsing.text import (
    clean_text,
    extract_paragraphs,
    is_list_item,
    parse_all_list_items,
    parse_bullet_list,
    parse_numbered_list,
    pick_icon,
    split_table_row,
    table_lines,
    truncate_at_word,
)

logger = logging.getLogger(__name__)

BLUEPRINT_DESCRIPTION_LIMIT = 200
BLUEPRINT_PROMPT_LIMIT = 2000
COMPETITOR_INFO_LIMIT = 200
STRATEGY_SUMMARY_LIMIT = 300


# ─── Tables ──────────────────────────────────────────────────────────────────


@dataclass
class MarkdownTable:
    """Header columns with synthetic keys, plus one dict per data row."""

    columns: list[TableColumn] = field(default_factory=list)
    rows: list[dict[str, str]] = field(default_factory=list)

    def find_key(self, keywords: tuple[str, ...]) -> str | None:
        """Return the key of the first column whose header contains any keyword."""
        for column in self.columns:
            header = column.header.lower()
            if any(keyword in header for keyword in keywords):
                return column.key
        return None

    def key_at(self, index: int) -> str | None:
        return self.columns[index].key if index < len(self.columns) else None


def parse_markdown_table(body: str) -> MarkdownTable:
    """Parse the pipe lines of *body*: line 1 is the header, data rows follow the separator.

    A second header line before the separator is dropped.  Without a separator
    there is no table.
    """
    lines = table_lines(body)
    separator = separator_index(lines)
    if separator is None:
        return MarkdownTable()

    columns = [TableColumn(header=clean_text(cell), key=f"col_{i}") for i, cell in enumerate(split_table_row(lines[0]))]
    rows = []
    for line in lines[separator + 1 :]:
        cells = split_table_row(line)
        rows.append({col.key: clean_text(cells[i]) if i < len(cells) else "" for i, col in enumerate(columns)})
    return MarkdownTable(columns=columns, rows=rows)


def extract_table(heading: str, body: str) -> MarkdownTable | None:  # pylint: disable=unused-argument
    """Generic table payload; None unless there is a header and at least one data row."""
    table = parse_markdown_table(body)
    if not table.columns or not table.rows:
        return None
    return table


def _semantic_column(table: MarkdownTable, keywords: tuple[str, ...], position: int) -> str | None:
    """Column key by header keyword, falling back to the column at *position*."""
    return table.find_key(keywords) or table.key_at(position)


def _cell(row: dict[str, str], key: str | None) -> str:
    return row.get(key, "") if key else ""


def extract_metrics(heading: str, body: str) -> list[MetricRow]:  # pylint: disable=unused-argument
    """Map a KPI table onto name/baseline/stress/variance rows (needs 3+ columns)."""
    table = parse_markdown_table(body)
    if len(table.columns) < 3:
        return []

    name_key = _semantic_column(table, ("metric", "name", "kpi", "indicator"), 0)
    baseline_key = _semantic_column(table, ("baseline", "current", "actual"), 1)
    stress_key = _semantic_column(table, ("stress", "target", "goal"), 2)
    variance_key = _semantic_column(table, ("variance", "change", "delta", "diff"), 3)

    return [
        MetricRow(
            name=_cell(row, name_key),
            baseline=_cell(row, baseline_key),
            stress=_cell(row, stress_key),
            variance=_cell(row, variance_key),
        )
        for row in table.rows
    ]


# ─── Competitors ─────────────────────────────────────────────────────────────


def _competitor_name(heading: str) -> str:
    """Display name from the heading, without 'Competitor 2:' or '1.' prefixes."""
    name = COMPETITOR_PREFIX_RE.sub("", heading).replace("**", "").strip()
    return name or heading


def _is_label_line(line: str) -> bool:
    """Non-list, non-table line that can act as a section label."""
    return not is_list_item(line) and not line.strip().startswith("|")


def extract_competitor(heading: str, body: str) -> CompetitorData | None:
    """Bucket list items under Strengths / Weaknesses / Opportunity labels.

    Returns None when neither strengths nor weaknesses are found; such a
    block is ambiguous and the dispatcher tries the next type.
    """
    strengths: list[str] = []
    weaknesses: list[str] = []
    opportunity_lines: list[str] = []
    current = None

    for line in body.split("\n"):
        if _is_label_line(line):
            if STRENGTHS_LABEL_RE.search(line):
                current = strengths
                continue
            if WEAKNESSES_LABEL_RE.search(line):
                current = weaknesses
                continue
            if OPPORTUNITY_LABEL_RE.search(line):
                current = opportunity_lines
                inline = clean_text(OPPORTUNITY_INLINE_RE.sub("", line, count=1))
                if inline:
                    opportunity_lines.append(inline)
                continue

        match = LIST_ITEM_RE.match(line)
        if match and current is not None:
            text = clean_text(match.group(1))
            if text:
                current.append(text)

    if not strengths and not weaknesses:
        return None

    opportunity = " ".join(opportunity_lines).strip()
    if not opportunity:
        match = OPPORTUNITY_PARAGRAPH_RE.search(body)
        if match:
            opportunity = clean_text(BULLET_PREFIX_RE.sub("", match.group(1), count=1))

    url = URL_RE.search(body)
    info_end = COMPETITOR_INFO_END_RE.search(body)
    info_part = body[: info_end.start()] if info_end and info_end.start() > 0 else body

    return CompetitorData(
        name=_competitor_name(heading),
        website=url.group(0) if url else "",
        info=extract_paragraphs(info_part)[:COMPETITOR_INFO_LIMIT],
        strengths=strengths,
        weaknesses=weaknesses,
        opportunity=opportunity,
    )


# ─── ROI ─────────────────────────────────────────────────────────────────────


def _roi_field(pattern: re.Pattern, text: str) -> str:
    match = pattern.search(text)
    return match.group(1).strip().rstrip(".") if match else ""


def _roi_from_item(item: str) -> ROIScenario | None:
    """Parse 'Title: investment X, MRR Y, ROI Z, payback W' style list items."""
    patterns = {"investment": ROI_INVESTMENT_RE, "mrr": ROI_MRR_RE, "roi": ROI_ROI_RE, "payback": ROI_PAYBACK_RE}
    fields = {name: _roi_field(pattern, item) for name, pattern in patterns.items()}
    if not any(fields.values()):
        return None

    title = ROI_TITLE_SPLIT_RE.split(item, maxsplit=1)[0].strip()
    if title == item:
        # No separator: title is whatever precedes the first field keyword
        starts = [match.start() for match in (p.search(item) for p in patterns.values()) if match]
        title = item[: min(starts)].strip()
    return ROIScenario(title=title or item[:60], **fields)


def extract_roi(heading: str, body: str) -> list[ROIScenario]:  # pylint: disable=unused-argument
    """ROI scenarios from a keyword-mapped table, else from inline list items."""
    if has_table(body):
        table = parse_markdown_table(body)
        if len(table.columns) < 3:
            return []
        title_key = _semantic_column(table, ("scenario", "title", "case", "type"), 0)
        invest_key = _semantic_column(table, ("investment", "invest", "cost", "spend"), 1)
        mrr_key = _semantic_column(table, ("mrr", "revenue", "monthly"), 2)
        roi_key = _semantic_column(table, ("roi", "return"), 3)
        payback_key = _semantic_column(table, ("payback", "breakeven", "break-even"), 4)
        return [
            ROIScenario(
                title=_cell(row, title_key),
                investment=_cell(row, invest_key),
                mrr=_cell(row, mrr_key),
                roi=_cell(row, roi_key),
                payback=_cell(row, payback_key),
            )
            for row in table.rows
        ]

    scenarios = (_roi_from_item(item) for item in parse_all_list_items(body))
    return [scenario for scenario in scenarios if scenario is not None]


# ─── Risk ────────────────────────────────────────────────────────────────────


def extract_risk_header(heading: str, body: str) -> RiskHeader:
    """Risk dossier header with a severity label (defaults to MEDIUM)."""
    description = extract_paragraphs(body)
    match = RISK_SCORE_RE.search(body.replace("**", ""))
    return RiskHeader(
        title=heading,
        description=description or "Risk assessment overview.",
        score=match.group(1).strip().upper() if match else "MEDIUM",
    )


# ─── Tasks ───────────────────────────────────────────────────────────────────


def _priority(text: str) -> str:
    if HIGH_PRIORITY_RE.search(text):
        return "High"
    if LOW_PRIORITY_RE.search(text):
        return "Low"
    return "Medium"


def _strip_priority(text: str) -> str:
    for pattern in PRIORITY_ANNOTATION_RES:
        text = pattern.sub("", text)
    return clean_text(DANGLING_SEPARATOR_RE.sub("", text))


def extract_tasks(heading: str, body: str) -> list[TaskItem]:  # pylint: disable=unused-argument
    """Prioritized tasks from bullet and numbered items, deduplicated in order."""
    items = list(dict.fromkeys(parse_bullet_list(body) + parse_numbered_list(body)))
    tasks = []
    for item in items:
        content = _strip_priority(item) or item
        tasks.append(TaskItem(id=f"task-{len(tasks) + 1}", content=content, priority=_priority(item)))
    return tasks


def extract_checkbox_tasks(heading: str, body: str) -> list[TaskItem]:  # pylint: disable=unused-argument
    """Checklist items; checked items are done and drop to Low priority."""
    tasks = []
    for line in body.split("\n"):
        match = CHECKBOX_RE.match(line)
        if not match:
            continue
        text = clean_text(match.group(2))
        if not text:
            continue
        done = (match.group(1) or "").lower() == "x" or bool(CHECKED_GLYPH_RE.search(line))
        tasks.append(
            TaskItem(id=f"task-{len(tasks) + 1}", content=text, priority="Low" if done else "Medium", done=done)
        )
    return tasks


# ─── Cards ───────────────────────────────────────────────────────────────────


def extract_cards(heading: str, body: str) -> list[CardItem] | None:  # pylint: disable=unused-argument
    """Bold-title cards from bullet or numbered items; None when fewer than two."""
    bullet_cards: list[CardItem] = []
    numbered_cards: list[CardItem] = []

    for line in body.split("\n"):
        for pattern, cards in ((CARD_BULLET_RE, bullet_cards), (CARD_NUMBERED_RE, numbered_cards)):
            match = pattern.match(line)
            if match:
                title = clean_text(match.group(1))
                cards.append(CardItem(title=title, text=clean_text(match.group(2)), icon=pick_icon(title)))

    cards = bullet_cards if len(bullet_cards) >= len(numbered_cards) else numbered_cards
    return cards if len(cards) >= 2 else None


# ─── Sub-sectioned Blocks ────────────────────────────────────────────────────


def _sub_sections(body: str) -> list[tuple[str, str]]:
    """Split a body on '###' sub-headings into (title line, rest) pairs; text before the first is dropped."""
    pieces = SUB_SECTION_SPLIT_RE.split(body)
    sections = []
    for piece in pieces[1:]:
        first, _, rest = piece.partition("\n")
        sections.append((first, rest))
    return sections


def extract_blueprints(heading: str, body: str) -> list[BlueprintItem]:  # pylint: disable=unused-argument
    """One blueprint per '###' sub-section, else one per bullet item."""
    items = []
    for i, (first, rest) in enumerate(_sub_sections(body), start=1):
        title = clean_text(first) or f"Blueprint {i}"
        description = truncate_at_word(extract_paragraphs(rest) or title, BLUEPRINT_DESCRIPTION_LIMIT)
        items.append(BlueprintItem(id=f"bp-{i}", title=title, description=description, prompt=rest.strip()[:BLUEPRINT_PROMPT_LIMIT]))
    if items:
        return items

    raw_bullets = [BULLET_PREFIX_RE.sub("", line, count=1).strip() for line in body.split("\n") if BULLET_RE.match(line)]
    for raw in (bullet for bullet in raw_bullets if clean_text(bullet)):
        index = len(items) + 1
        bold = BOLD_LEAD_RE.match(raw)
        title = clean_text(bold.group(1)) if bold else f"Blueprint {index}"
        description = (clean_text(bold.group(2)) if bold else "") or clean_text(raw)
        items.append(BlueprintItem(id=f"bp-{index}", title=title, description=description, prompt=clean_text(raw)))
    return items


def extract_strategy_grid(heading: str, body: str) -> list[PhaseDetail]:  # pylint: disable=unused-argument
    """One strategy phase per '###' sub-section, else a single phase built from the list items."""
    phases = []
    for i, (first, rest) in enumerate(_sub_sections(body), start=1):
        title = clean_text(first) or f"Phase {i}"
        bullets = parse_bullet_list(rest)
        summary = extract_paragraphs(rest)
        phases.append(
            PhaseDetail(
                id=f"strategy-{i}",
                title=title,
                summary=summary[:STRATEGY_SUMMARY_LIMIT],
                deep_dive=DeepDive(title=title, content="\n".join(bullets) or summary),
                deliverables=bullets or [summary or title],
            )
        )
    if phases:
        return phases

    items = parse_all_list_items(body)
    if not items:
        return []
    return [
        PhaseDetail(
            id="strategy-1",
            title="Strategic Initiatives",
            summary=extract_paragraphs(body),
            deep_dive=DeepDive(title="Details", content="\n".join(items)),
            deliverables=items,
        )
    ]


# ─── Roadmap ─────────────────────────────────────────────────────────────────


def _decision(text: str) -> RoadmapDecision:
    """Split a decision item into title, stakeholders, deadline, and criteria."""
    stakeholders = STAKEHOLDER_RE.search(text)
    deadline = DEADLINE_RE.search(text)
    criteria = CRITERIA_RE.search(text)
    title = DEADLINE_RE.sub("", STAKEHOLDER_RE.sub("", text, count=1), count=1)
    title = DANGLING_SEPARATOR_RE.sub("", title).strip()
    return RoadmapDecision(
        title=title or text,
        stakeholders=stakeholders.group(1).strip() if stakeholders else "",
        deadline=deadline.group(1).strip() if deadline else "",
        criteria=criteria.group(1).strip() if criteria else "",
    )


def extract_roadmap_phase(heading: str, body: str) -> RoadmapPhaseData | None:
    """Bucket list items under objective / deliverable / decision labels.

    Inside deliverables a bold-led item opens a new group and following plain
    items become its sub-items.  Returns None without objectives or deliverables.
    """
    timeline = ROADMAP_TIMELINE_RE.search(body)
    objectives: list[RoadmapObjective] = []
    deliverables: list[RoadmapDeliverable] = []
    decisions: list[RoadmapDecision] = []
    current = "none"

    for line in body.split("\n"):
        if not is_list_item(line):
            if OBJECTIVES_LABEL_RE.search(line):
                current = "objectives"
                continue
            if DELIVERABLES_LABEL_RE.search(line):
                current = "deliverables"
                continue
            if DECISIONS_LABEL_RE.search(line):
                current = "decisions"
                continue

        match = LIST_ITEM_RE.match(line)
        if not match:
            continue
        raw = match.group(1).strip()
        text = clean_text(raw)
        if not text:
            continue

        if current == "objectives":
            objectives.append(RoadmapObjective(type="Primary", content=text))
        elif current == "deliverables":
            bold = BOLD_LEAD_RE.match(raw)
            if bold:
                rest = clean_text(bold.group(2))
                deliverables.append(RoadmapDeliverable(title=clean_text(bold.group(1)), items=[rest] if rest else []))
            elif deliverables:
                deliverables[-1].items.append(text)
            else:
                deliverables.append(RoadmapDeliverable(title=text, items=[text]))
        elif current == "decisions":
            decisions.append(_decision(text))
        else:
            objectives.append(RoadmapObjective(type="General", content=text))

    if not objectives and not deliverables:
        logger.debug("Roadmap block '%s' has no objectives or deliverables", heading)
        return None

    return RoadmapPhaseData(
        phase=PHASE_PREFIX_RE.sub("", heading).strip() or heading,
        timeline=clean_text(timeline.group(1)) if timeline else "",
        objectives=objectives,
        deliverables=deliverables,
        decisions=decisions,
    )


def extract_list(heading: str, body: str) -> list[str]:  # pylint: disable=unused-argument
    """Plain list payload: the longer of the bullet and numbered item lists."""
    return parse_all_list_items(body)
