"""TL;DR extraction for cross-part context.

The TL;DR block is handed to the upstream caller as context for the next
part's prompt.  It is removed from the visible sections and never rendered.
"""

import re

from analysis_parser.parsing.schema import RawBlock
from analysis_parser.parsing.text import clean_text, extract_paragraphs, parse_bullet_list, truncate_at_word

TLDR_HEADING_RE = re.compile(r"^tl;?\s*dr\b", re.IGNORECASE)

# Only the first blocks are searched; a TL;DR always leads the document
TLDR_SEARCH_LIMIT = 2
MIN_SUMMARY_LENGTH = 20
MAX_SUMMARY_LENGTH = 1000


def extract_tldr(blocks: list[RawBlock]) -> tuple[str | None, list[RawBlock]]:
    """Return ``(summary, remaining_blocks)``.

    With fewer than two blocks the document is assumed to still be streaming
    and nothing is extracted.  A summary shorter than MIN_SUMMARY_LENGTH is
    ignored and the TL;DR block stays in place.
    """
    if len(blocks) < 2:
        return None, blocks

    index = next(
        (i for i, block in enumerate(blocks[:TLDR_SEARCH_LIMIT]) if TLDR_HEADING_RE.match(block.heading.strip())),
        None,
    )
    if index is None:
        return None, blocks

    body = blocks[index].body
    summary = extract_paragraphs(body) or ". ".join(parse_bullet_list(body)) or clean_text(body)
    if len(summary) < MIN_SUMMARY_LENGTH:
        return None, blocks

    summary = truncate_at_word(summary, MAX_SUMMARY_LENGTH).strip()
    return summary, blocks[:index] + blocks[index + 1 :]
