"""Debounced incremental parsing for callers that receive a growing document.

The upstream stream delivers chunks (or the accumulated text so far) and a
completion or error signal.  Intermediate parses are throttled: at most one
per debounce window, only once enough text exists, and only when enough new
text arrived since the last parse.  Completion always triggers a final parse
with citations; an error keeps the last good parse.
"""

import logging
import time
from typing import Callable

from analysis_parser.parsing.schema import PhaseData
from analysis_parser.tiers import AnalysisTier, parse_analysis

logger = logging.getLogger(__name__)

DEBOUNCE_SECONDS = 0.25
MIN_CHARS_FOR_PARSE = 80
MIN_NEW_CHARS_FOR_REPARSE = 40
MAX_ERROR_CHARS = 200


class StreamingParser:
    """Accumulates streamed markdown for one tier part and parses it incrementally."""

    def __init__(
        self,
        tier: str | AnalysisTier,
        part_index: int = 0,
        *,
        clock: Callable[[], float] = time.monotonic,
        debounce: float = DEBOUNCE_SECONDS,
        min_chars: int = MIN_CHARS_FOR_PARSE,
        min_new_chars: int = MIN_NEW_CHARS_FOR_REPARSE,
    ) -> None:
        self.tier = AnalysisTier(tier)
        self.part_index = part_index
        self.debounce = debounce
        self.min_chars = min_chars
        self.min_new_chars = min_new_chars
        self._clock = clock
        self.reset()

    def reset(self) -> None:
        """Forget all text and results (e.g. when switching to another part)."""
        self.text = ""
        self.phase: PhaseData | None = None
        self.error: str | None = None
        self.complete = False
        self._parsed_length = 0
        self._last_parse_at: float | None = None

    # ─── Stream Events ──────────────────────────────────────────────────────

    def append(self, chunk: str) -> PhaseData | None:
        """Add one chunk; returns a fresh parse if one was due, else None."""
        return self.update(self.text + chunk)

    def update(self, accumulated: str) -> PhaseData | None:
        """Replace the accumulated text; returns a fresh parse if one was due, else None."""
        if self.complete:
            return None
        self.text = accumulated
        return self.poll()

    def poll(self) -> PhaseData | None:
        """Parse now if the debounce window has passed and enough new text exists."""
        if self.complete or not self._due():
            return None
        now = self._clock()
        if self._last_parse_at is not None and now - self._last_parse_at < self.debounce:
            return None

        self._last_parse_at = now
        parsed = self._parse(self.text, None)
        if parsed is None:
            return None
        self._parsed_length = len(self.text)
        self.phase = parsed
        return parsed

    def finish(self, full_text: str | None = None, citations: list[str] | None = None) -> PhaseData | None:
        """Final parse with citations.  On failure the last intermediate parse is kept."""
        if full_text is not None:
            self.text = full_text
        self.complete = True
        parsed = self._parse(self.text, citations)
        if parsed is not None:
            self.phase = parsed
            self._parsed_length = len(self.text)
        return self.phase

    def fail(self, message: str) -> PhaseData | None:
        """Record a stream error; the last good parse (if any) stands."""
        self.complete = True
        self.error = message if len(message) <= MAX_ERROR_CHARS else message[:MAX_ERROR_CHARS] + "..."
        logger.error("Stream for %s part %d failed: %s", self.tier.value, self.part_index + 1, self.error)
        return self.phase

    # ─── Internals ──────────────────────────────────────────────────────────

    def _due(self) -> bool:
        return len(self.text) >= self.min_chars and len(self.text) - self._parsed_length >= self.min_new_chars

    def _parse(self, text: str, citations: list[str] | None) -> PhaseData | None:
        try:
            return parse_analysis(self.tier, text, self.part_index, citations)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logger.warning("Parse of %d chars failed: %s", len(text), exc)
            return None
