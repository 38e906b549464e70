"""Classification dispatcher: an ordered table of detector/builder rules.

Rules are tried in priority order (most specific first).  A rule commits only
when its detector fires AND its builder returns a payload; otherwise the next
rule is tried.  The final ``text`` rule always matches, so every block yields
exactly one ParsedSection.

Builders are also exposed by section type (``build_payload``) so that the
secondary classifier can re-derive a payload for a new type from raw text.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, NamedTuple

from analysis_parser.parsing.detectors import (
    has_card_items,
    has_checkbox_list,
    has_list,
    has_table,
    is_blueprint_block,
    is_competitor_block,
    is_metrics_block,
    is_risk_block,
    is_roadmap_block,
    is_roi_block,
    is_strategy_block,
    is_task_block,
)
from analysis_parser.parsing.extractors import (
    extract_blueprints,
    extract_cards,
    extract_checkbox_tasks,
    extract_competitor,
    extract_list,
    extract_metrics,
    extract_risk_header,
    extract_roadmap_phase,
    extract_roi,
    extract_strategy_grid,
    extract_table,
    extract_tasks,
)
from analysis_parser.parsing.schema import ParsedSection, RawBlock, SectionType, TableColumn
from analysis_parser.parsing.text import clean_text, extract_paragraphs

logger = logging.getLogger(__name__)


class Payload(NamedTuple):
    """What a builder produces: display content plus the typed payload."""

    content: str
    data: Any = None
    columns: list[TableColumn] | None = None


Builder = Callable[[str, str], Payload | None]
Detector = Callable[[str, str], bool]


@dataclass(frozen=True)
class Rule:
    type: SectionType
    detect: Detector
    build: Builder


def section_id(index: int) -> str:
    """Position-derived section id: index 0 -> 'section-01'."""
    return f"section-{index + 1:02d}"


def _content(body: str, default: str) -> str:
    """Block prose when there is any, else the type's default sentence."""
    return extract_paragraphs(body) or default


# ─── Builders ────────────────────────────────────────────────────────────────


def _build_metrics(heading: str, body: str) -> Payload | None:
    rows = extract_metrics(heading, body)
    return Payload(_content(body, "Key performance indicators and targets."), rows) if rows else None


def _build_competitor(heading: str, body: str) -> Payload | None:
    data = extract_competitor(heading, body)
    return Payload(f"Deep dive analysis of {data.name}.", data) if data else None


def _build_roi(heading: str, body: str) -> Payload | None:
    scenarios = extract_roi(heading, body)
    return Payload(_content(body, "ROI scenario analysis across different investment levels."), scenarios) if scenarios else None


def _build_risk(heading: str, body: str) -> Payload:
    header = extract_risk_header(heading, body)
    return Payload(extract_paragraphs(body), header)


def _build_tasks(heading: str, body: str) -> Payload | None:
    tasks = extract_tasks(heading, body)
    return Payload(_content(body, "Prioritized action items."), tasks) if tasks else None


def _build_checkbox(heading: str, body: str) -> Payload | None:
    tasks = extract_checkbox_tasks(heading, body)
    return Payload(_content(body, "Task checklist."), tasks) if tasks else None


def _build_blueprints(heading: str, body: str) -> Payload | None:
    items = extract_blueprints(heading, body)
    return Payload(_content(body, "Design specifications and component blueprints."), items) if items else None


def _build_roadmap(heading: str, body: str) -> Payload | None:
    phase = extract_roadmap_phase(heading, body)
    return Payload(_content(body, heading), phase) if phase else None


def _build_strategy(heading: str, body: str) -> Payload | None:
    phases = extract_strategy_grid(heading, body)
    return Payload(_content(body, heading), phases) if phases else None


def _build_cards(heading: str, body: str) -> Payload | None:
    cards = extract_cards(heading, body)
    return Payload(_content(body, heading), cards) if cards else None


def _build_table(heading: str, body: str) -> Payload | None:
    table = extract_table(heading, body)
    if table is None:
        return None
    return Payload(_content(body, heading), table.rows, table.columns)


def _build_list(heading: str, body: str) -> Payload | None:
    items = extract_list(heading, body)
    return Payload(_content(body, heading), items) if items else None


def _build_text(heading: str, body: str) -> Payload:  # pylint: disable=unused-argument
    return Payload(extract_paragraphs(body) or clean_text(body))


def _always(heading: str, body: str) -> bool:  # pylint: disable=unused-argument
    return True


# ─── Rule Table ──────────────────────────────────────────────────────────────

RULES: tuple[Rule, ...] = (
    Rule(SectionType.metrics, is_metrics_block, _build_metrics),
    Rule(SectionType.competitor, is_competitor_block, _build_competitor),
    Rule(SectionType.roi_analysis, is_roi_block, _build_roi),
    Rule(SectionType.risk_dossier_header, lambda h, b: is_risk_block(h, b) and not has_table(b), _build_risk),
    Rule(SectionType.task_list, is_task_block, _build_tasks),
    Rule(SectionType.task_list_checkbox, lambda h, b: has_checkbox_list(b), _build_checkbox),
    Rule(SectionType.blueprints, is_blueprint_block, _build_blueprints),
    Rule(SectionType.roadmap_phase, is_roadmap_block, _build_roadmap),
    Rule(SectionType.strategy_grid, is_strategy_block, _build_strategy),
    Rule(SectionType.cards, lambda h, b: has_card_items(b), _build_cards),
    Rule(SectionType.table, lambda h, b: has_table(b), _build_table),
    Rule(SectionType.list, lambda h, b: has_list(b), _build_list),
    Rule(SectionType.text, _always, _build_text),
)

# Types a payload can be re-derived for from raw text alone.  Risk headers
# and the tier-specific types are deliberately absent.
REPARSE_BUILDERS: dict[SectionType, Builder] = {
    rule.type: rule.build for rule in RULES if rule.type != SectionType.risk_dossier_header
}


def build_payload(section_type: SectionType, heading: str, body: str) -> Payload | None:
    """Run the builder for *section_type* without its detector; None if unsupported or empty."""
    builder = REPARSE_BUILDERS.get(section_type)
    if builder is None:
        return None
    return builder(heading, body)


def classify_and_parse(heading: str, body: str, index: int) -> ParsedSection:
    """Classify one block and extract its payload; always returns a section."""
    for rule in RULES:
        if not rule.detect(heading, body):
            continue
        payload = rule.build(heading, body)
        if payload is None:
            logger.debug("Block '%s' matched %s but yielded no data", heading, rule.type.value)
            continue
        return ParsedSection(
            id=section_id(index),
            title=heading,
            content=payload.content,
            type=rule.type,
            data=payload.data,
            columns=payload.columns,
        )
    raise AssertionError("text rule always matches")  # pragma: no cover


def parse_blocks(blocks: list[RawBlock], start: int = 0) -> list[ParsedSection]:
    """Dispatch every block in order, numbering ids from *start*."""
    return [classify_and_parse(block.heading, block.body, start + i) for i, block in enumerate(blocks)]
