"""Visual timeline synthesis from roadmap-phase sections."""

import logging
import re

from analysis_parser.parsing.schema import (
    ParsedSection,
    RoadmapPhaseData,
    SectionType,
    TimelineContext,
    TimelineQuarter,
    VisualTimeline,
)

logger = logging.getLogger(__name__)

MONTHS = ("JAN", "FEB", "MAR", "APR", "MAY", "JUN", "JUL", "AUG", "SEP", "OCT", "NOV", "DEC")
STATUSES = ("completed", "active", "upcoming")
DEFAULT_LABELS = ("BUILD", "SHIP", "LAUNCH", "SCALE", "GROW", "OPTIM")

MAX_PHASES = 3
LABEL_LENGTH = 7
CONTEXT_MIN_LENGTH = 30
CONTEXT_MAX_LENGTH = 300

# Filler and generic verbs that make poor activity labels
STOP_WORDS = frozenset(
    (
        "the and for with from into that this will shall must can our their your its each all are has have "
        "been more any also key core main full based using create ensure develop implement define identify "
        "complete establish build make initial first"
    ).split()
)

NON_ALPHA_RE = re.compile(r"[^a-zA-Z\s]")


def short_label(text: str) -> str:
    """First meaningful word of *text*, upper-cased and cut to seven characters."""
    words = [word for word in NON_ALPHA_RE.sub("", text).split() if len(word) > 2]
    meaningful = [word for word in words if word.lower() not in STOP_WORDS]
    if meaningful:
        return meaningful[0].upper()[:LABEL_LENGTH]
    return words[0].upper()[:LABEL_LENGTH] if words else "BUILD"


def activity_labels(phase: RoadmapPhaseData) -> list[str]:
    """Three distinct labels from deliverables, then objectives, then decisions."""
    labels: list[str] = []
    sources = [d.title for d in phase.deliverables] + [o.content for o in phase.objectives] + [d.title for d in phase.decisions]
    for text in sources:
        if len(labels) == 3:
            break
        label = short_label(text)
        if label not in labels:
            labels.append(label)

    while len(labels) < 3:
        fallback = DEFAULT_LABELS[len(labels)]
        labels.append(fallback if fallback not in labels else f"T{len(labels) + 1}")
    return labels


def synthesize_visual_timeline(sections: list[ParsedSection]) -> VisualTimeline | None:
    """Build a three-quarter timeline from the first roadmap phases.

    Requires at least two roadmap sections; returns None otherwise.
    """
    roadmap = [s for s in sections if s.type == SectionType.roadmap_phase and s.data is not None]
    if len(roadmap) < 2:
        logger.debug("Skipping timeline: %d roadmap section(s)", len(roadmap))
        return None

    quarters = []
    for i, section in enumerate(roadmap[:MAX_PHASES]):
        months = MONTHS[i * 3 : i * 3 + 3]
        labels = activity_labels(section.data)
        quarters.append(
            TimelineQuarter(
                id=f"Q{i + 1}",
                title=section.data.phase,
                months=[f"{month}: {label}" for month, label in zip(months, labels)],
                status=STATUSES[i],
            )
        )

    first = quarters[0].title.lower()
    last = quarters[-1].title.lower()

    context = None
    overview = next((s for s in sections if s.type == SectionType.text and len(s.content) > CONTEXT_MIN_LENGTH), None)
    if overview is not None:
        adopted = overview.content
        if len(adopted) > CONTEXT_MAX_LENGTH:
            adopted = adopted[: CONTEXT_MAX_LENGTH - 3] + "..."
        context = TimelineContext(
            title="Why This Roadmap?",
            rejected=(
                f"Linear scaling without a dedicated {first} phase. Sequential market entry without validated "
                "product-market fit risks resource waste and competitive disadvantage."
            ),
            adopted=adopted,
        )

    return VisualTimeline(
        title="The Strategic Trajectory",
        subtitle=f"Visualizing the {len(quarters) * 3}-month execution path from {first} to {last}.",
        quarters=quarters,
        context=context,
    )
