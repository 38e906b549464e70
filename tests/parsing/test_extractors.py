"""Unit tests for the per-type structured extractors."""

# pylint: disable=missing-class-docstring,missing-function-docstring

from analysis_parser.parsing.extractors import (
    extract_blueprints,
    extract_cards,
    extract_checkbox_tasks,
    extract_competitor,
    extract_metrics,
    extract_risk_header,
    extract_roadmap_phase,
    extract_roi,
    extract_strategy_grid,
    extract_table,
    extract_tasks,
    parse_markdown_table,
)


def make_table(header: list[str], rows: list[list[str]]) -> str:
    """Render a markdown table from a header and rows of cells."""
    lines = ["| " + " | ".join(header) + " |", "|" + "---|" * len(header)]
    lines += ["| " + " | ".join(row) + " |" for row in rows]
    return "\n".join(lines)


def make_competitor(strengths: list[str], weaknesses: list[str], opportunity: str) -> str:
    """Render a competitor body with bold-labelled buckets."""
    parts = ["Acme sells widgets.", "", "**Strengths:**"]
    parts += [f"- {item}" for item in strengths]
    parts += ["", "**Weaknesses:**"]
    parts += [f"- {item}" for item in weaknesses]
    parts += ["", f"**Opportunity:** {opportunity}"]
    return "\n".join(parts)


# ===========================================================================
# Tables and metrics
# ===========================================================================


class TestTables:

    def test_row_count_excludes_header_and_separator(self):
        body = make_table(["A", "B"], [["1", "2"], ["3", "4"], ["5", "6"]])
        table = parse_markdown_table(body)
        assert len(table.rows) == 3

    def test_synthetic_keys_and_clean_cells(self):
        table = parse_markdown_table(make_table(["**Name**", "Value"], [["x[1]", "*y*"]]))
        assert [c.key for c in table.columns] == ["col_0", "col_1"]
        assert table.columns[0].header == "Name"
        assert table.rows == [{"col_0": "x", "col_1": "y"}]

    def test_short_row_padded(self):
        table = parse_markdown_table("| A | B |\n|---|---|\n| only |")
        assert table.rows == [{"col_0": "only", "col_1": ""}]

    def test_separator_on_third_line(self):
        table = parse_markdown_table("| a | b |\n| c | d |\n|---|---|\n| 1 | 2 |")
        assert [c.header for c in table.columns] == ["a", "b"]
        assert table.rows == [{"col_0": "1", "col_1": "2"}]

    def test_no_separator_is_not_a_table(self):
        assert parse_markdown_table("| a | b |\n| 1 | 2 |\n| 3 | 4 |").rows == []

    def test_header_only_table_is_empty(self):
        assert extract_table("T", "| A | B |\n|---|---|") is None


class TestMetrics:

    def test_keyword_mapping(self):
        body = make_table(["Target", "KPI", "Current", "Delta"], [["50", "Speed", "100", "-50%"]])
        rows = extract_metrics("Metrics", body)
        assert rows[0].model_dump() == {"name": "Speed", "baseline": "100", "stress": "50", "variance": "-50%"}

    def test_positional_fallback(self):
        body = make_table(["A", "B", "C", "D"], [["n", "b", "s", "v"]])
        row = extract_metrics("Metrics", body)[0]
        assert (row.name, row.baseline, row.stress, row.variance) == ("n", "b", "s", "v")

    def test_needs_three_columns(self):
        assert extract_metrics("Metrics", make_table(["Metric", "Value"], [["a", "b"]])) == []


# ===========================================================================
# Competitor
# ===========================================================================


class TestCompetitor:

    def test_round_trip_triple(self):
        body = make_competitor(["Fast **delivery**", "Big brand"], ["Pricey"], "Undercut on price.")
        data = extract_competitor("Competitor 2: Acme Corp", body)
        assert data.name == "Acme Corp"
        assert data.strengths == ["Fast delivery", "Big brand"]
        assert data.weaknesses == ["Pricey"]
        assert data.opportunity == "Undercut on price."

    def test_info_is_text_before_strengths(self):
        data = extract_competitor("Competitor: Acme", make_competitor(["a"], ["b"], "c"))
        assert data.info == "Acme sells widgets."

    def test_website_is_first_url(self):
        body = "Site: https://acme.com and https://other.com\n### Strengths\n- Fast"
        assert extract_competitor("Acme", body).website == "https://acme.com"

    def test_opportunity_paragraph_under_heading(self):
        body = "### Strengths\n- Fast\n### Key Takeaway\nThey ignore SMBs."
        assert extract_competitor("Acme", body).opportunity == "They ignore SMBs."

    def test_no_strengths_or_weaknesses(self):
        assert extract_competitor("Acme", "Just a paragraph.\n- a\n- b") is None


# ===========================================================================
# ROI
# ===========================================================================


class TestROI:

    def test_table_form(self):
        body = make_table(
            ["Scenario", "Investment", "MRR", "ROI", "Payback"],
            [["Lean", "$50k", "$10k", "140%", "5 months"]],
        )
        scenario = extract_roi("ROI", body)[0]
        assert scenario.model_dump() == {
            "title": "Lean",
            "investment": "$50k",
            "mrr": "$10k",
            "roi": "140%",
            "payback": "5 months",
        }

    def test_list_form(self):
        body = "- Conservative: investment $100k, MRR $20k, ROI 120%, payback 8 months.\n- Aggressive - cost $300k"
        scenarios = extract_roi("ROI", body)
        assert [s.title for s in scenarios] == ["Conservative", "Aggressive"]
        assert scenarios[0].payback == "8 months"
        assert scenarios[1].investment == "$300k"

    def test_list_item_without_fields_skipped(self):
        assert extract_roi("ROI", "- nothing here\n- or here") == []


# ===========================================================================
# Tasks
# ===========================================================================


class TestTasks:

    def test_priorities_and_annotation_stripping(self):
        body = "- Fix login (High)\n- Add dark mode [optional]\n1. Write docs - Priority: Medium"
        tasks = extract_tasks("Tasks", body)
        assert [(t.content, t.priority) for t in tasks] == [
            ("Fix login", "High"),
            ("Add dark mode", "Low"),
            ("Write docs", "Medium"),
        ]
        assert [t.id for t in tasks] == ["task-1", "task-2", "task-3"]

    def test_deduplicates(self):
        assert len(extract_tasks("Tasks", "- Same\n- Same\n1. Same")) == 1

    def test_checkbox_state(self):
        tasks = extract_checkbox_tasks("Checklist", "- [x] Done thing\n- [ ] Open thing")
        assert [(t.content, t.done, t.priority) for t in tasks] == [
            ("Done thing", True, "Low"),
            ("Open thing", False, "Medium"),
        ]


# ===========================================================================
# Cards, blueprints, strategy
# ===========================================================================


class TestCards:

    def test_bold_title_items(self):
        cards = extract_cards("Highlights", "- **Risk**: churn\n- **Growth:** fast")
        assert [(c.title, c.text, c.icon) for c in cards] == [("Risk", "churn", "warning"), ("Growth", "fast", "trending_up")]

    def test_fewer_than_two(self):
        assert extract_cards("X", "- **Only**: one") is None


class TestBlueprints:

    def test_sub_sections(self):
        body = "Intro.\n### Login Screen\nA clean login form.\nPrompt: build it\n### Dashboard\nCharts."
        items = extract_blueprints("Blueprints", body)
        assert [(i.id, i.title) for i in items] == [("bp-1", "Login Screen"), ("bp-2", "Dashboard")]
        assert items[0].description == "A clean login form. Prompt: build it"
        assert items[0].prompt == "A clean login form.\nPrompt: build it"

    def test_long_description_truncated_at_word(self):
        body = "### Big\n" + "word " * 100
        description = extract_blueprints("Blueprints", body)[0].description
        assert description.endswith("...")
        assert len(description) <= 203

    def test_bullet_fallback_keeps_bold_title(self):
        items = extract_blueprints("Blueprints", "- **Navbar**: sticky top bar\n- plain item")
        assert (items[0].title, items[0].description) == ("Navbar", "sticky top bar")
        assert (items[1].title, items[1].description) == ("Blueprint 2", "plain item")


class TestStrategyGrid:

    def test_sub_sections(self):
        body = "### Pillar A\nSummary A.\n- d1\n- d2\n### Pillar B\nOnly prose."
        phases = extract_strategy_grid("Strategy", body)
        assert [p.id for p in phases] == ["strategy-1", "strategy-2"]
        assert phases[0].deliverables == ["d1", "d2"]
        assert phases[1].deliverables == ["Only prose."]

    def test_list_fallback(self):
        phases = extract_strategy_grid("Strategy", "- one\n- two")
        assert phases[0].title == "Strategic Initiatives"
        assert phases[0].deliverables == ["one", "two"]

    def test_nothing(self):
        assert extract_strategy_grid("Strategy", "just prose") == []


# ===========================================================================
# Roadmap and risk
# ===========================================================================


class TestRoadmap:

    BODY = "\n".join(
        [
            "Timeline: Months 1-3",
            "**Objectives:**",
            "- Validate demand",
            "**Deliverables:**",
            "- **MVP**: core flows",
            "- Auth",
            "- Billing",
            "**Decision Gates:**",
            "- Go/no-go, stakeholders: CEO, deadline: March 1",
        ]
    )

    def test_phase_and_timeline(self):
        data = extract_roadmap_phase("Phase 1: Foundation", self.BODY)
        assert data.phase == "Foundation"
        assert data.timeline == "Months 1-3"

    def test_buckets(self):
        data = extract_roadmap_phase("Phase 1: Foundation", self.BODY)
        assert [o.content for o in data.objectives] == ["Validate demand"]
        assert data.objectives[0].type == "Primary"
        assert data.deliverables[0].title == "MVP"
        assert data.deliverables[0].items == ["core flows", "Auth", "Billing"]

    def test_decisions(self):
        decision = extract_roadmap_phase("Phase 1", self.BODY).decisions[0]
        assert decision.title == "Go/no-go"
        assert decision.stakeholders == "CEO"
        assert decision.deadline == "March 1"

    def test_unlabelled_items_are_general_objectives(self):
        data = extract_roadmap_phase("Phase 2", "- Hire team\n- Raise seed")
        assert [(o.type, o.content) for o in data.objectives] == [("General", "Hire team"), ("General", "Raise seed")]

    def test_nothing_found(self):
        assert extract_roadmap_phase("Phase 3", "Timeline: Q3 only prose") is None


class TestRiskHeader:

    def test_score_from_bold_label(self):
        header = extract_risk_header("Risk Dossier", "Overall exposure.\n**Risk Level:** high")
        assert header.score == "HIGH"
        assert header.description == "Overall exposure. Risk Level: high"

    def test_defaults(self):
        header = extract_risk_header("Risk", "- only bullets\n- here")
        assert header.score == "MEDIUM"
        assert header.description == "Risk assessment overview."
