"""Compiled regex patterns and keyword tables for markdown section parsing.

These patterns identify structural elements in model-authored markdown:
headings, code fences, list items, table rows, checkbox items, and the
inline labels that extractors use to bucket content.  Used by text.py,
segmenter.py, detectors.py, and extractors.py.
"""

import re

# ─── Block Structure ─────────────────────────────────────────────────────────

# Opening or closing fence: ``` or ~~~ (3+), checked against the stripped line
FENCE_RE = re.compile(r"^(`{3,}|~{3,})")

# Level-1/level-2 heading that starts a new block
BLOCK_HEADING_RE = re.compile(r"^#{1,2}\s+(.+)")

# Level-3+ heading folded into the parent block
SUB_HEADING_RE = re.compile(r"^#{3,}\s+")

# Sub-heading boundary used to split a block body into sub-sections
SUB_SECTION_SPLIT_RE = re.compile(r"^#{3,}\s+", re.MULTILINE)

# Trailing "##" decoration on a closed-style ATX heading
TRAILING_HASHES_RE = re.compile(r"\s+#+\s*$")

# Any heading marker at line start (stripped from prose)
HEADING_MARKER_RE = re.compile(r"^#{1,6}\s+")

# Horizontal rule variants
HORIZONTAL_RULE_RE = re.compile(r"^(-{3,}|\*{3,}|_{3,}|- - -|\* \* \*)$")

# Line that is nothing but a bold label, e.g. "**Strengths:**"
BOLD_LABEL_LINE_RE = re.compile(r"^\*\*[^*]+\*\*\s*:?\s*$")


# ─── List Items ──────────────────────────────────────────────────────────────

BULLET_RE = re.compile(r"^\s*[-*]\s")
BULLET_PREFIX_RE = re.compile(r"^\s*[-*]\s+")
NUMBERED_RE = re.compile(r"^\s*\d+[.)]\s")
NUMBERED_PREFIX_RE = re.compile(r"^\s*\d+[.)]\s+")

# Bullet or numbered item, capturing the item text
LIST_ITEM_RE = re.compile(r"^\s*(?:[-*]|\d+[.)])\s+(.+)")

# Checkbox item: "- [ ] x", "- [x] x", or a unicode checkbox glyph
CHECKBOX_RE = re.compile(r"^\s*(?:[-*]\s+\[([xX ])\]|[☐☑✅⬜])\s*(.+)")
CHECKED_GLYPH_RE = re.compile(r"[☑✅]")

# "**Title**: description" and "**Title:** description" card items
CARD_BULLET_RE = re.compile(r"^\s*[-*]\s+\*\*(.+?)(?:\*\*\s*[:\-–—]|:\*\*)\s*(.+)")
CARD_NUMBERED_RE = re.compile(r"^\s*\d+[.)]\s+\*\*(.+?)(?:\*\*\s*[:\-–—]|:\*\*)\s*(.+)")

# Bold span and bold-led item text
BOLD_RE = re.compile(r"\*\*(.+?)\*\*")
BOLD_LEAD_RE = re.compile(r"^\*\*(.+?)\*\*\s*[:\-–—]?\s*(.*)")


# ─── Tables ──────────────────────────────────────────────────────────────────

# Separator row: pipes, dashes, colons, whitespace only (dash presence checked separately)
TABLE_SEPARATOR_RE = re.compile(r"^\|[\s:|-]+\|?$")

# Placeholder for escaped pipes while splitting a row
ESCAPED_PIPE = "\x00"


# ─── Text Normalization ──────────────────────────────────────────────────────

CITATION_RE = re.compile(r"\[\d+\]")
MARKDOWN_LINK_RE = re.compile(r"\[([^\]]+)\]\([^)]+\)")
HTML_TAG_RE = re.compile(r"<[^>]*>")
SINGLE_ASTERISK_RE = re.compile(r"(?<!\*)\*(?!\*)")
WHITESPACE_RE = re.compile(r"\s+")
URL_RE = re.compile(r"https?://[^\s)]+")


# ─── Detector Signals ────────────────────────────────────────────────────────

VS_HEADING_RE = re.compile(r"\bvs\.?\s", re.IGNORECASE)
CONS_RE = re.compile(r"\bcons\b")
QUARTER_RE = re.compile(r"\bq[1-4]\b", re.IGNORECASE)
PRIORITY_WORD_RE = re.compile(r"\b(?:high|medium|low)\b")
BLUEPRINT_SUBSECTION_RE = re.compile(r"###\s+")

COMPETITOR_HEADING_WORDS = ("competitor", "competitive")
COMPETITOR_BODY_WORDS = ("strength", "weakness", "pros")
METRIC_WORDS = ("metric", "kpi", "baseline", "target")
ROI_DETAIL_WORDS = ("scenario", "investment", "payback")
RISK_BODY_WORDS = ("dossier", "assessment", "severity", "mitigation")
TASK_HEADING_WORDS = ("task", "todo", "action item", "action list", "priority list", "checklist")
BLUEPRINT_HEADING_WORDS = ("blueprint", "wireframe", "design spec", "component spec", "design prompt")
BLUEPRINT_BODY_WORDS = ("blueprint", "wireframe", "prompt:", "component type:")
ROADMAP_HEADING_WORDS = ("phase", "roadmap")
ROADMAP_TIME_WORDS = ("month", "week", "timeline", "quarter", "sprint")
ROADMAP_STRUCTURE_WORDS = ("objective", "milestone", "deliverable", "goal", "key result")
STRATEGY_HEADING_WORDS = ("strategy", "strategic")
STRATEGY_BODY_WORDS = ("pillar", "stream", "phase")


# ─── Extractor Labels ────────────────────────────────────────────────────────

# Competitor section labels
STRENGTHS_LABEL_RE = re.compile(r"\bstrengths?\b|\bpros\b", re.IGNORECASE)
WEAKNESSES_LABEL_RE = re.compile(r"\bweakness(?:es)?\b|\bcons\b", re.IGNORECASE)
OPPORTUNITY_LABEL_RE = re.compile(r"\bopportunit(?:y|ies)\b|\btakeaway", re.IGNORECASE)
OPPORTUNITY_INLINE_RE = re.compile(r"^.*?(?:opportunit(?:y|ies)|takeaways?)\b[:\s]*", re.IGNORECASE)
OPPORTUNITY_PARAGRAPH_RE = re.compile(r"(?:opportunit(?:y|ies)|takeaway)[:\s]*\n+(.*?)(?:\n\n|\Z)", re.IGNORECASE | re.DOTALL)
COMPETITOR_INFO_END_RE = re.compile(r"\b(?:strengths?|weaknesses?|pros|cons)\b", re.IGNORECASE)
COMPETITOR_PREFIX_RE = re.compile(r"^(?:competitor\s*\d*[:\s]*|\d+[.)]\s*)", re.IGNORECASE)

# Roadmap section labels
PHASE_PREFIX_RE = re.compile(r"^phase\s*\d*[:\s]*", re.IGNORECASE)
ROADMAP_TIMELINE_RE = re.compile(
    r"(?:timeline|duration|time(?:frame)?|months?|weeks?|quarter|Q[1-4]|sprint|period)[:\s]*([^\n,;()]+?)\s*(?:[,;()\n]|$)",
    re.IGNORECASE,
)
OBJECTIVES_LABEL_RE = re.compile(r"\bobjective|\bgoal|\bkey result", re.IGNORECASE)
DELIVERABLES_LABEL_RE = re.compile(r"\bdeliverable|\boutput|\bmilestone", re.IGNORECASE)
DECISIONS_LABEL_RE = re.compile(r"\bdecision|\bgate\b|\bapproval", re.IGNORECASE)
STAKEHOLDER_RE = re.compile(r"stakeholders?[:\s]*([^,;]+)", re.IGNORECASE)
DEADLINE_RE = re.compile(r"\b(?:deadline|by|due)\b[:\s]*([^,;]+)", re.IGNORECASE)
CRITERIA_RE = re.compile(r"\b(?:criteria|if|when)\b[:\s]*([^,;]+)", re.IGNORECASE)

# ROI list-item fields
ROI_INVESTMENT_RE = re.compile(r"\b(?:invest(?:ment)?|cost)\b[:\s]*([^,;]+)", re.IGNORECASE)
ROI_MRR_RE = re.compile(r"\b(?:mrr|revenue)\b[:\s]*([^,;]+)", re.IGNORECASE)
ROI_ROI_RE = re.compile(r"\broi\b[:\s]*([^,;]+)", re.IGNORECASE)
ROI_PAYBACK_RE = re.compile(r"\bpayback\b[:\s]*([^,;]+)", re.IGNORECASE)
ROI_TITLE_SPLIT_RE = re.compile(r"\s*[:–—]\s*|\s+-\s+")

# Task priority keywords and annotations
HIGH_PRIORITY_RE = re.compile(r"\b(?:high|critical|urgent)\b", re.IGNORECASE)
LOW_PRIORITY_RE = re.compile(r"\b(?:low|nice.to.have|optional)\b", re.IGNORECASE)
PRIORITY_ANNOTATION_RES = (
    re.compile(r"\((?:high|medium|low|critical|urgent|optional)\)", re.IGNORECASE),
    re.compile(r"\[(?:high|medium|low|critical|urgent|optional)\]", re.IGNORECASE),
    re.compile(r"\bpriority\s*:\s*(?:high|medium|low)\b", re.IGNORECASE),
)
DANGLING_SEPARATOR_RE = re.compile(r"^[\s\-–—:|,;]+|[\s\-–—:|,;]+$")

# Risk severity label
RISK_SCORE_RE = re.compile(
    r"(?:score|severity|risk\s*level)\s*:\s*(HIGH|MEDIUM|LOW|CRITICAL|EXTREME|\d+(?:\.\d+)?)",
    re.IGNORECASE,
)


# ─── Card Icons ──────────────────────────────────────────────────────────────

# First keyword found in a card title picks its icon (order matters)
ICON_MAP = (
    ("summary", "summarize"),
    ("executive", "description"),
    ("overview", "visibility"),
    ("problem", "error_outline"),
    ("analysis", "analytics"),
    ("constraint", "block"),
    ("timeline", "schedule"),
    ("budget", "savings"),
    ("resource", "savings"),
    ("technical", "integration_instructions"),
    ("platform", "integration_instructions"),
    ("regulatory", "policy"),
    ("compliance", "policy"),
    ("risk", "warning"),
    ("opportunity", "lightbulb"),
    ("strategy", "psychology"),
    ("user", "group"),
    ("market", "trending_up"),
    ("growth", "trending_up"),
    ("competitor", "groups"),
    ("strength", "thumb_up"),
    ("weakness", "thumb_down"),
    ("pricing", "payments"),
    ("design", "palette"),
    ("architecture", "architecture"),
    ("feature", "star"),
    ("metric", "speed"),
    ("roi", "calculate"),
    ("task", "task_alt"),
)
DEFAULT_ICON = "info"
