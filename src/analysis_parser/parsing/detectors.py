"""Boolean type detectors over a block's heading and body.

Each detector is a pure predicate.  They overlap on purpose (a KPI table is
also a table), so the dispatcher applies them in a fixed priority order with
the most specific first.
"""

from analysis_parser.parsing.patterns import (
    BLUEPRINT_BODY_WORDS,
    BLUEPRINT_HEADING_WORDS,
    BLUEPRINT_SUBSECTION_RE,
    CARD_BULLET_RE,
    CARD_NUMBERED_RE,
    CHECKBOX_RE,
    COMPETITOR_BODY_WORDS,
    COMPETITOR_HEADING_WORDS,
    CONS_RE,
    METRIC_WORDS,
    PRIORITY_WORD_RE,
    QUARTER_RE,
    RISK_BODY_WORDS,
    ROADMAP_HEADING_WORDS,
    ROADMAP_STRUCTURE_WORDS,
    ROADMAP_TIME_WORDS,
    ROI_DETAIL_WORDS,
    STRATEGY_BODY_WORDS,
    STRATEGY_HEADING_WORDS,
    TABLE_SEPARATOR_RE,
    TASK_HEADING_WORDS,
    VS_HEADING_RE,
)
from analysis_parser.parsing.text import has_bullet_list, has_numbered_list, table_lines


def _contains_any(text: str, words: tuple[str, ...]) -> bool:
    return any(word in text for word in words)


def separator_index(lines: list[str]) -> int | None:
    """Index of the dash separator row among pipe *lines*; only the 2nd or 3rd line qualifies."""
    for index in (1, 2):
        if index < len(lines):
            stripped = lines[index].strip()
            if TABLE_SEPARATOR_RE.match(stripped) and "-" in stripped:
                return index
    return None


def has_table(body: str) -> bool:
    """Return True for a real markdown table: 3+ pipe lines and a dash separator row.

    The separator must be the second or third pipe line, which rejects bodies
    that merely contain stray '|' characters.
    """
    lines = table_lines(body)
    return len(lines) >= 3 and separator_index(lines) is not None


def has_list(body: str) -> bool:
    """Return True if the body has 2+ bullet lines or 2+ numbered lines."""
    return has_bullet_list(body) or has_numbered_list(body)


def is_metrics_block(heading: str, body: str) -> bool:
    """KPI table: a table plus a metric/kpi/baseline/target keyword."""
    lower = f"{heading} {body}".lower()
    return has_table(body) and _contains_any(lower, METRIC_WORDS)


def is_competitor_block(heading: str, body: str) -> bool:
    """Competitor dossier: competitive heading signal plus strengths/weaknesses structure."""
    heading_lower = heading.lower()
    body_lower = body.lower()
    heading_signal = _contains_any(heading_lower, COMPETITOR_HEADING_WORDS) or bool(VS_HEADING_RE.search(heading))
    structure = _contains_any(body_lower, COMPETITOR_BODY_WORDS) or bool(CONS_RE.search(body_lower))
    return heading_signal and structure


def is_roi_block(heading: str, body: str) -> bool:
    """ROI scenarios: 'roi' plus a scenario/investment/payback keyword anywhere."""
    lower = f"{heading} {body}".lower()
    return "roi" in lower and _contains_any(lower, ROI_DETAIL_WORDS)


def is_risk_block(heading: str, body: str) -> bool:
    """Risk dossier header: risk heading plus a severity/mitigation/assessment/dossier keyword."""
    if "risk" not in heading.lower():
        return False
    return _contains_any(body.lower(), RISK_BODY_WORDS)


def is_task_block(heading: str, body: str) -> bool:
    """Prioritized task list: task-like heading plus a High/Medium/Low word in the body."""
    if not _contains_any(heading.lower(), TASK_HEADING_WORDS):
        return False
    return bool(PRIORITY_WORD_RE.search(body.lower()))


def has_checkbox_list(body: str) -> bool:
    """Checklist: two or more checkbox lines, detected structurally."""
    return sum(1 for line in body.split("\n") if CHECKBOX_RE.match(line)) >= 2


def is_blueprint_block(heading: str, body: str) -> bool:
    """Design blueprint: blueprint signal in heading or body, plus bullets or '###' sub-sections."""
    heading_signal = _contains_any(heading.lower(), BLUEPRINT_HEADING_WORDS)
    body_signal = _contains_any(body.lower(), BLUEPRINT_BODY_WORDS)
    structure = has_bullet_list(body) or bool(BLUEPRINT_SUBSECTION_RE.search(body))
    return (heading_signal or body_signal) and structure


def is_roadmap_block(heading: str, body: str) -> bool:
    """Roadmap phase: phase/roadmap heading plus a time signal or a structure signal."""
    if not _contains_any(heading.lower(), ROADMAP_HEADING_WORDS):
        return False
    body_lower = body.lower()
    time_signal = _contains_any(body_lower, ROADMAP_TIME_WORDS) or bool(QUARTER_RE.search(body_lower))
    return time_signal or _contains_any(body_lower, ROADMAP_STRUCTURE_WORDS)


def is_strategy_block(heading: str, body: str) -> bool:
    """Strategy grid: strategy heading (never a roadmap heading) plus pillar/stream/phase."""
    heading_lower = heading.lower()
    if "roadmap" in heading_lower:
        return False
    if not _contains_any(heading_lower, STRATEGY_HEADING_WORDS):
        return False
    return _contains_any(body.lower(), STRATEGY_BODY_WORDS)


def has_card_items(body: str) -> bool:
    """Card grid: two or more '**Title**: description' bullet or numbered items."""
    lines = body.split("\n")
    bullets = sum(1 for line in lines if CARD_BULLET_RE.match(line))
    numbered = sum(1 for line in lines if CARD_NUMBERED_RE.match(line))
    return max(bullets, numbered) >= 2
