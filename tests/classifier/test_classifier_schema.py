"""Tests for classification entry validation and response parsing."""

# pylint: disable=missing-class-docstring,missing-function-docstring

import pytest
from pydantic import ValidationError

from analysis_parser.classifier.schema import (
    ClassificationResult,
    ClassifiedSection,
    parse_response_text,
    response_schema,
    validate_entries,
)
from analysis_parser.parsing.schema import SectionType


def make_entry(index=0, suggested="list", confidence=0.9, **extra) -> dict:
    entry = {"sectionIndex": index, "title": "t", "suggestedType": suggested, "confidence": confidence, "reasoning": "r"}
    entry.update(extra)
    return entry


class TestClassifiedSection:

    def test_confidence_clamped(self):
        assert ClassifiedSection.model_validate(make_entry(confidence=1.7)).confidence == 1.0
        assert ClassifiedSection.model_validate(make_entry(confidence=-0.2)).confidence == 0.0

    def test_integer_confidence_accepted(self):
        assert ClassifiedSection.model_validate(make_entry(confidence=1)).confidence == 1.0

    @pytest.mark.parametrize("confidence", [True, "0.9", None, float("nan"), float("inf")])
    def test_bad_confidence_rejected(self, confidence):
        with pytest.raises(ValidationError):
            ClassifiedSection.model_validate(make_entry(confidence=confidence))

    def test_negative_index_rejected(self):
        with pytest.raises(ValidationError):
            ClassifiedSection.model_validate(make_entry(index=-1))

    def test_null_strings_become_empty(self):
        entry = ClassifiedSection.model_validate(make_entry(title=None, reasoning=None))
        assert (entry.title, entry.reasoning) == ("", "")


class TestResult:

    def test_first_entry_wins(self):
        result = ClassificationResult(
            sections=[ClassifiedSection.model_validate(make_entry(0, "list")), ClassifiedSection.model_validate(make_entry(0, "cards"))]
        )
        assert result.for_index(0).suggested_type == SectionType.list
        assert result.for_index(3) is None


class TestResponseSchema:

    def test_strict_shape(self):
        schema = response_schema()
        entry = schema["properties"]["sections"]["items"]
        assert schema["additionalProperties"] is False
        assert entry["additionalProperties"] is False
        assert set(entry["required"]) == set(entry["properties"])
        assert entry["properties"]["suggestedType"]["enum"] == [member.value for member in SectionType]


class TestParseResponseText:

    def test_plain_json(self):
        assert len(parse_response_text('{"sections": [' + '{"sectionIndex": 0, "suggestedType": "text", "confidence": 1}]}')) == 1

    def test_bare_object_in_prose(self):
        text = 'Sure! {"sections": [{"sectionIndex": 2, "suggestedType": "cards", "confidence": 0.8}]} Done.'
        assert parse_response_text(text)[0].section_index == 2

    def test_not_an_object(self):
        assert parse_response_text("[1, 2, 3]") == []

    def test_empty(self):
        assert parse_response_text(None) == []
        assert parse_response_text("") == []

    def test_sections_not_a_list(self):
        assert validate_entries({"sectionIndex": 0}) == []
