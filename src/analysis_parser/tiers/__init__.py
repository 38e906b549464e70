"""Tier parsers: one PhaseData per part of a 1-, 2-, or 6-part analysis.

Submodules:
  meta       -- badge/title/subtitle/metadata per tier part
  tldr       -- TL;DR lifting for cross-part context
  timeline   -- visual timeline synthesis from roadmap phases
  observer   -- 1-part quick validation
  insider    -- 2-part analysis
  syndicate  -- 6-part analysis
"""

from enum import Enum

from analysis_parser.parsing.schema import PhaseData
from analysis_parser.tiers.insider import parse_insider_analysis
from analysis_parser.tiers.observer import parse_observer_analysis
from analysis_parser.tiers.syndicate import parse_syndicate_analysis


class AnalysisTier(str, Enum):
    observer = "observer"
    insider = "insider"
    syndicate = "syndicate"


TIER_PART_COUNT = {AnalysisTier.observer: 1, AnalysisTier.insider: 2, AnalysisTier.syndicate: 6}


def _tier(tier: str | AnalysisTier) -> AnalysisTier:
    try:
        return AnalysisTier(tier)
    except ValueError as exc:
        raise ValueError(f"Unknown analysis tier: {tier!r}") from exc


def part_count(tier: str | AnalysisTier) -> int:
    """Number of parts the tier is delivered in."""
    return TIER_PART_COUNT[_tier(tier)]


def parse_analysis(
    tier: str | AnalysisTier, markdown: str, part_index: int = 0, citations: list[str] | None = None
) -> PhaseData:
    """Route *markdown* to the parser for *tier*; *part_index* is clamped into range."""
    tier = _tier(tier)
    index = max(0, min(part_index, TIER_PART_COUNT[tier] - 1))

    if tier == AnalysisTier.observer:
        return parse_observer_analysis(markdown, citations)
    if tier == AnalysisTier.insider:
        return parse_insider_analysis(markdown, index, citations)
    return parse_syndicate_analysis(markdown, index, citations)
