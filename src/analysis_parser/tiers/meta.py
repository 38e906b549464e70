"""Display metadata (badge, title, subtitle, metadata chips) for each tier part."""

from typing import NamedTuple


class PartMeta(NamedTuple):
    badge: str
    title: str
    subtitle: str
    metadata: list[str]


OBSERVER_META = PartMeta(
    badge="Quick Validation",
    title="Observer Sanity Check",
    subtitle="Problem, pain points, viability, and the first move",
    metadata=["Input: Research Model", "Status: Validation", "Tier: Observer"],
)

SYNDICATE_META: tuple[PartMeta, ...] = (
    PartMeta(
        badge="Discovery Phase",
        title="Discovery & User Needs",
        subtitle="Validation of core assumptions",
        metadata=["Input: Research Model", "Status: Exploratory", "Horizon: 3-6 Months"],
    ),
    PartMeta(
        badge="Market Intelligence",
        title="Competitor Deep-Dive",
        subtitle="Landscape analysis and strategic gaps",
        metadata=["Input: Research Model", "Status: Analysis", "Market: Web3/AI"],
    ),
    PartMeta(
        badge="Roadmap",
        title="Phase-by-Phase Roadmap",
        subtitle="Visualizing the 9-month execution path",
        metadata=["Input: Research Model", "Status: Planning", "Horizon: 9 Months"],
    ),
    PartMeta(
        badge="Core Design",
        title="Core Design",
        subtitle="Architectural directives for core application flows",
        metadata=["Input: Research Model", "Status: Design", "Type: UX/UI"],
    ),
    PartMeta(
        badge="Advanced Screens",
        title="Advanced Screens & Edge Cases",
        subtitle="Comprehensive system states including error handling, empty states, and loading patterns",
        metadata=["Input: Research Model", "Status: Design", "Type: Edge Cases"],
    ),
    PartMeta(
        badge="Risk & ROI",
        title="Risk, Metrics & ROI",
        subtitle="Critical exposure analysis, success metrics, and financial justification",
        metadata=["Input: Research Model", "Status: Analysis", "Type: Financial"],
    ),
)

INSIDER_META: tuple[PartMeta, ...] = tuple(
    meta._replace(metadata=[*meta.metadata[:2], f"Tier: Insider ({i}/2)"]) for i, meta in enumerate(SYNDICATE_META[:2], start=1)
)


def part_meta(table: tuple[PartMeta, ...], index: int) -> PartMeta:
    """Meta for *index*, clamped into the table's range."""
    return table[max(0, min(index, len(table) - 1))]
