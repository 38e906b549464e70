"""Tests for the command-line entry point."""

# pylint: disable=missing-class-docstring,missing-function-docstring

import json

import pytest

from analysis_parser.cli import build_parser, main


class TestCli:

    def test_prints_camel_case_json(self, tmp_path, capsys):
        source = tmp_path / "part.md"
        source.write_text("## Key Metrics\n| Metric | Baseline | Target |\n|---|---|---|\n| Speed | 100ms | 50ms |\n", encoding="utf-8")
        citations = tmp_path / "citations.txt"
        citations.write_text("https://example.com/a\njavascript:alert(1)\n", encoding="utf-8")

        assert main(["syndicate", str(source), "--part", "5", "--citations", str(citations)]) == 0
        output = json.loads(capsys.readouterr().out)
        assert output["id"] == "phase-06"
        assert output["sections"][0]["type"] == "metrics"
        assert [s["url"] for s in output["sources"]] == ["https://example.com/a"]
        assert "visualTimeline" not in output

    def test_json_citations(self, tmp_path, capsys):
        source = tmp_path / "part.md"
        source.write_text("## Problem\ntext\n## Pain Points\n- a\n- b", encoding="utf-8")
        citations = tmp_path / "citations.json"
        citations.write_text('["https://a.com/x", "https://b.org/y"]', encoding="utf-8")

        main(["observer", str(source), "--citations", str(citations)])
        output = json.loads(capsys.readouterr().out)
        assert [s["title"] for s in output["sources"]] == ["Source 1", "Source 2"]

    def test_unknown_tier_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["gold", "file.md"])
