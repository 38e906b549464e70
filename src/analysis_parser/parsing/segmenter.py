"""Split a markdown document into heading-delimited blocks.

Level-1 and level-2 headings start a new block.  Level-3+ headings stay in
the current block's body so that extractors can recognise '###' sub-sections.
Fenced code regions are respected: heading-looking lines inside a fence do
not start a block.  A fence left open for more than MAX_FENCE_LINES lines is
force-closed; this is a heuristic safety valve against runaway state on
truncated or malformed output, not a parser guarantee.
"""

import logging

from analysis_parser.parsing.patterns import BLOCK_HEADING_RE, FENCE_RE, SUB_HEADING_RE, TRAILING_HASHES_RE
from analysis_parser.parsing.schema import RawBlock
from analysis_parser.parsing.text import MAX_FENCE_LINES

logger = logging.getLogger(__name__)


def clean_heading(text: str) -> str:
    """Strip bold markers and trailing '#' decorations from heading text."""
    return TRAILING_HASHES_RE.sub("", text.replace("**", "")).strip()


def split_by_headings(markdown: str) -> list[RawBlock]:
    """Return the ordered heading-delimited blocks of *markdown*.

    Content before the first heading becomes an unheaded intro block.  Empty
    input yields a single empty block rather than an empty list.
    """
    blocks: list[RawBlock] = []
    heading = ""
    body: list[str] = []
    inside_code = False
    code_lines = 0
    force_closed = False

    for line in markdown.split("\n"):
        if FENCE_RE.match(line.strip()):
            if force_closed:
                # Closer of the fence that was force-closed; it opens nothing
                force_closed = False
            else:
                inside_code = not inside_code
            code_lines = 0
            body.append(line)
            continue

        if inside_code:
            code_lines += 1
            if code_lines <= MAX_FENCE_LINES:
                body.append(line)
                continue
            logger.debug("Force-closing code fence after %d lines", MAX_FENCE_LINES)
            inside_code = False
            code_lines = 0
            force_closed = True

        match = BLOCK_HEADING_RE.match(line)
        if match and not SUB_HEADING_RE.match(line):
            if heading or body:
                blocks.append(RawBlock(heading=heading, body="\n".join(body).strip()))
            heading = clean_heading(match.group(1))
            body = []
        else:
            body.append(line)

    if heading or body:
        blocks.append(RawBlock(heading=heading, body="\n".join(body).strip()))
    return blocks


def locate_block(title: str, markdown: str, occurrence: int = 0) -> RawBlock | None:
    """Re-locate a block by heading in the raw document.

    Used to recover the raw body of a section after classification.  When
    several blocks share *title*, *occurrence* picks the n-th of them (0-based).
    Returns None for an empty title or when there is no such block.
    """
    if not title:
        return None
    wanted = title.strip()
    matches = [block for block in split_by_headings(markdown) if block.heading and block.heading == wanted]
    return matches[occurrence] if 0 <= occurrence < len(matches) else None


def render_block(block: RawBlock) -> str:
    """Render a block back to markdown ('## heading' followed by its body)."""
    if not block.heading:
        return block.body
    return f"## {block.heading}\n{block.body}".rstrip()
