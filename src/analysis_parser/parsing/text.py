"""Text normalization and line-level markdown helpers.

Every extractor routes display text through clean_text() so that citation
markers, link syntax, HTML tags, and emphasis never reach the renderer.
The list/paragraph helpers here are shared by the detectors, extractors,
and tier parsers.
"""

from analysis_parser.parsing.patterns import (
    BULLET_PREFIX_RE,
    BULLET_RE,
    CITATION_RE,
    DEFAULT_ICON,
    ESCAPED_PIPE,
    FENCE_RE,
    HEADING_MARKER_RE,
    HORIZONTAL_RULE_RE,
    HTML_TAG_RE,
    ICON_MAP,
    MARKDOWN_LINK_RE,
    NUMBERED_PREFIX_RE,
    NUMBERED_RE,
    SINGLE_ASTERISK_RE,
    WHITESPACE_RE,
)

# Lines after which an unterminated fence is force-closed
MAX_FENCE_LINES = 100


# ─── Normalizer ──────────────────────────────────────────────────────────────


def strip_citation_markers(text: str) -> str:
    """Remove numeric citation brackets such as '[12]'."""
    return CITATION_RE.sub("", text)


def strip_markdown_links(text: str) -> str:
    """Replace '[label](url)' with 'label'."""
    return MARKDOWN_LINK_RE.sub(r"\1", text)


def strip_html(text: str) -> str:
    """Remove HTML tags, keeping their inner text."""
    return HTML_TAG_RE.sub("", text)


def strip_emphasis(text: str) -> str:
    """Remove '**bold**' and '*italic*' markers."""
    return SINGLE_ASTERISK_RE.sub("", text.replace("**", ""))


def clean_text(text: str) -> str:
    """Normalize a text fragment for display.

    Strips emphasis, citation brackets, markdown links (keeping the link
    text), and HTML tags, then collapses whitespace and trims.  Total: any
    input yields a string, possibly empty.
    """
    if not text:
        return ""
    cleaned = strip_html(strip_markdown_links(strip_citation_markers(strip_emphasis(text))))
    return WHITESPACE_RE.sub(" ", cleaned).strip()


def truncate_at_word(text: str, limit: int, suffix: str = "...") -> str:
    """Cut text at the last space at or before *limit*, appending *suffix* when shortened."""
    if len(text) <= limit:
        return text
    cut = text.rfind(" ", 0, limit + 1)
    return text[: cut if cut > 0 else limit] + suffix


def pick_icon(text: str) -> str:
    """Return the icon name for the first known keyword found in *text*."""
    lower = text.lower()
    for keyword, icon in ICON_MAP:
        if keyword in lower:
            return icon
    return DEFAULT_ICON


# ─── Lists ───────────────────────────────────────────────────────────────────


def is_list_item(line: str) -> bool:
    """Return True for a bullet ('- x', '* x') or numbered ('1. x', '1) x') line."""
    return bool(BULLET_RE.match(line) or NUMBERED_RE.match(line))


def has_bullet_list(body: str) -> bool:
    """Return True if the body has at least two bullet lines."""
    return sum(1 for line in body.split("\n") if BULLET_RE.match(line)) >= 2


def has_numbered_list(body: str) -> bool:
    """Return True if the body has at least two numbered lines."""
    return sum(1 for line in body.split("\n") if NUMBERED_RE.match(line)) >= 2


def parse_bullet_list(body: str) -> list[str]:
    """Return the cleaned, non-empty text of every bullet line."""
    items = (clean_text(BULLET_PREFIX_RE.sub("", line, count=1)) for line in body.split("\n") if BULLET_RE.match(line))
    return [item for item in items if item]


def parse_numbered_list(body: str) -> list[str]:
    """Return the cleaned, non-empty text of every numbered line."""
    items = (clean_text(NUMBERED_PREFIX_RE.sub("", line, count=1)) for line in body.split("\n") if NUMBERED_RE.match(line))
    return [item for item in items if item]


def parse_all_list_items(body: str) -> list[str]:
    """Return whichever of the bullet or numbered lists is longer (bullets win ties)."""
    bullets = parse_bullet_list(body)
    numbered = parse_numbered_list(body)
    return bullets if len(bullets) >= len(numbered) else numbered


# ─── Prose ───────────────────────────────────────────────────────────────────


def _prose_lines(body: str) -> list[str]:
    """Return body lines that are prose: no fences/code, tables, rules, list items, or images."""
    kept: list[str] = []
    inside_code = False
    code_lines = 0
    force_closed = False

    for line in body.split("\n"):
        stripped = line.strip()
        if FENCE_RE.match(stripped):
            if force_closed:
                force_closed = False
            else:
                inside_code = not inside_code
            code_lines = 0
            continue
        if inside_code:
            code_lines += 1
            if code_lines <= MAX_FENCE_LINES:
                continue
            # Runaway fence: treat the rest as prose again
            inside_code = False
            code_lines = 0
            force_closed = True

        if not stripped or stripped.startswith("|") or stripped.startswith("!["):
            continue
        if HORIZONTAL_RULE_RE.match(stripped) or is_list_item(line):
            continue
        kept.append(line)
    return kept


def extract_paragraphs(body: str) -> str:
    """Flatten the prose of a block body into one cleaned line of text.

    Heading markers and blockquote markers are stripped from the kept lines;
    code, tables, horizontal rules, list items, and images are skipped.
    """
    parts = []
    for line in _prose_lines(body):
        text = HEADING_MARKER_RE.sub("", line).strip()
        if text.startswith(">"):
            text = text[1:].strip()
        if text:
            parts.append(text)
    return clean_text(" ".join(parts))


# ─── Table Rows ──────────────────────────────────────────────────────────────


def split_table_row(line: str) -> list[str]:
    """Split a pipe-delimited row into trimmed cells, honouring escaped pipes ('\\|')."""
    parts = line.replace("\\|", ESCAPED_PIPE).split("|")
    start = 1 if parts[0].strip() == "" else 0
    end = len(parts) - 1 if len(parts) > 1 and parts[-1].strip() == "" else len(parts)
    return [cell.replace(ESCAPED_PIPE, "|").strip() for cell in parts[start:end]]


def table_lines(body: str) -> list[str]:
    """Return the lines of *body* that start (after indentation) with a pipe."""
    return [line for line in body.split("\n") if line.strip().startswith("|")]
