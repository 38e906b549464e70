"""Pydantic models for parsed sections, their typed payloads, and tier results.

Python attributes are snake_case; the rendering layer consumes the camelCase
JSON produced by ``model_dump(by_alias=True)``.  ParsedSection validates that
its payload has the shape its ``type`` promises, so a section with a
mismatched payload can never be constructed.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model: camelCase aliases on output, either name accepted on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SectionType(str, Enum):
    """Fixed vocabulary of section types understood by the renderer."""

    text = "text"
    list = "list"
    table = "table"
    metrics = "metrics"
    cards = "cards"
    competitor = "competitor"
    roi_analysis = "roi_analysis"
    task_list = "task_list"
    task_list_checkbox = "task_list_checkbox"
    risk_dossier_header = "risk_dossier_header"
    blueprints = "blueprints"
    roadmap_phase = "roadmap_phase"
    phase_card = "phase_card"
    strategy_grid = "strategy_grid"
    resource_split = "resource_split"
    error_path_grid = "error_path_grid"
    viability_score = "viability_score"
    pain_points = "pain_points"
    next_step = "next_step"


@dataclass(frozen=True)
class RawBlock:
    """One heading-delimited chunk of source markdown; heading is '' for the intro block."""

    heading: str
    body: str


# ─── Payload Records ─────────────────────────────────────────────────────────


class TableColumn(CamelModel):
    header: str
    key: str


class MetricRow(CamelModel):
    name: str = ""
    baseline: str = ""
    stress: str = ""
    variance: str = ""


class CardItem(CamelModel):
    title: str
    text: str
    icon: str = "info"


class CompetitorData(CamelModel):
    name: str
    website: str = ""
    info: str = ""
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    opportunity: str = ""


class ROIScenario(CamelModel):
    title: str
    investment: str = ""
    mrr: str = ""
    roi: str = ""
    payback: str = ""


class TaskItem(CamelModel):
    id: str
    content: str
    priority: Literal["High", "Medium", "Low"] = "Medium"
    done: bool = False


class RiskHeader(CamelModel):
    title: str
    description: str
    score: str = "MEDIUM"


class BlueprintItem(CamelModel):
    id: str
    title: str
    description: str
    prompt: str


class RoadmapObjective(CamelModel):
    type: Literal["Primary", "General"] = "Primary"
    content: str


class RoadmapDeliverable(CamelModel):
    title: str
    items: list[str] = Field(default_factory=list)


class RoadmapDecision(CamelModel):
    title: str
    stakeholders: str = ""
    deadline: str = ""
    criteria: str = ""


class RoadmapPhaseData(CamelModel):
    phase: str
    timeline: str = ""
    objectives: list[RoadmapObjective] = Field(default_factory=list)
    deliverables: list[RoadmapDeliverable] = Field(default_factory=list)
    decisions: list[RoadmapDecision] = Field(default_factory=list)


class DeepDive(CamelModel):
    title: str
    content: str


class PhaseDetail(CamelModel):
    id: str
    title: str
    summary: str = ""
    deep_dive: DeepDive
    deliverables: list[str] = Field(default_factory=list)
    decision: str = ""
    dependencies: str = ""
    team: str = ""


class PainPoint(CamelModel):
    title: str
    text: str
    severity: Literal["low", "medium", "high"] = "medium"
    icon: str = ""


class ViabilityScore(CamelModel):
    score: int = Field(ge=0, le=100)
    label: str
    emoji: str
    summary: str


class NextStep(CamelModel):
    title: str
    what_to_do: str
    why_first: str = ""


# ─── Payload Shape Registry ──────────────────────────────────────────────────

# kind: "none" (no data), "strings" (list[str]), "rows" (table rows + columns),
# "many" (list of model), "one" (single model).  Render-only types are absent.
PAYLOAD_SHAPES: dict[SectionType, tuple[str, type[BaseModel] | None]] = {
    SectionType.text: ("none", None),
    SectionType.list: ("strings", None),
    SectionType.table: ("rows", None),
    SectionType.metrics: ("many", MetricRow),
    SectionType.cards: ("many", CardItem),
    SectionType.competitor: ("one", CompetitorData),
    SectionType.roi_analysis: ("many", ROIScenario),
    SectionType.task_list: ("many", TaskItem),
    SectionType.task_list_checkbox: ("many", TaskItem),
    SectionType.risk_dossier_header: ("one", RiskHeader),
    SectionType.blueprints: ("many", BlueprintItem),
    SectionType.roadmap_phase: ("one", RoadmapPhaseData),
    SectionType.strategy_grid: ("many", PhaseDetail),
    SectionType.viability_score: ("one", ViabilityScore),
    SectionType.pain_points: ("many", PainPoint),
    SectionType.next_step: ("one", NextStep),
}


def _coerce(value: Any, model: type[BaseModel]) -> BaseModel:
    """Return *value* as an instance of *model*, validating dicts."""
    if isinstance(value, model):
        return value
    if isinstance(value, dict):
        return model.model_validate(value)
    raise ValueError(f"expected {model.__name__}, got {type(value).__name__}")


class ParsedSection(CamelModel):
    """The canonical output unit: one typed section with its payload."""

    id: str
    title: str
    content: str
    type: SectionType
    data: Any = None
    columns: list[TableColumn] | None = None

    @model_validator(mode="after")
    def validate_payload_shape(self) -> "ParsedSection":
        """Ensure data (and columns) match the shape registered for the section type."""
        if self.columns is not None and self.type != SectionType.table:
            raise ValueError(f"columns are only valid for table sections, not {self.type.value}")

        shape = PAYLOAD_SHAPES.get(self.type)
        if shape is None:
            return self
        kind, model = shape

        if kind == "none":
            if self.data is not None:
                raise ValueError(f"{self.type.value} sections carry no data")
        elif kind == "strings":
            if not isinstance(self.data, list) or not all(isinstance(item, str) for item in self.data):
                raise ValueError(f"{self.type.value} data must be a list of strings")
        elif kind == "rows":
            if self.columns is None:
                raise ValueError("table sections require columns")
            if not isinstance(self.data, list) or not all(isinstance(row, dict) for row in self.data):
                raise ValueError("table data must be a list of row dicts")
        elif kind == "many":
            if not isinstance(self.data, list):
                raise ValueError(f"{self.type.value} data must be a list of {model.__name__}")
            self.data = [_coerce(item, model) for item in self.data]
        else:
            self.data = _coerce(self.data, model)
        return self


# ─── Tier Results ────────────────────────────────────────────────────────────


class SourceItem(CamelModel):
    source: str
    title: str
    url: str | None = None
    icon: str | None = None


class TimelineQuarter(CamelModel):
    id: str
    title: str
    months: list[str]
    status: Literal["completed", "active", "upcoming"]


class TimelineContext(CamelModel):
    title: str
    rejected: str
    adopted: str


class VisualTimeline(CamelModel):
    title: str
    subtitle: str
    quarters: list[TimelineQuarter]
    context: TimelineContext | None = None


class PhaseData(CamelModel):
    """One part of a tiered analysis; owns its sections exclusively."""

    id: str
    badge: str
    title: str
    subtitle: str
    metadata: list[str] = Field(default_factory=list)
    sources: list[SourceItem] = Field(default_factory=list)
    sections: list[ParsedSection] = Field(default_factory=list)
    visual_timeline: VisualTimeline | None = None
    # Cross-part context for the upstream caller; never rendered
    phase_tldr: str | None = None
