"""Response models and JSON schema for the secondary classification call."""

import json
import logging
import math
import re
from typing import Any

from pydantic import BaseModel, Field, StrictInt, ValidationError, field_validator

from analysis_parser.parsing.schema import CamelModel, SectionType

logger = logging.getLogger(__name__)

FENCED_JSON_RE = re.compile(r"```(?:json)?\s*\n?(.*?)\n?```", re.DOTALL)
BARE_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)


class ClassifiedSection(CamelModel):
    """One suggested classification.  Confidence is clamped into [0, 1]."""

    section_index: StrictInt = Field(ge=0)
    title: str = ""
    suggested_type: SectionType
    confidence: float
    reasoning: str = ""

    @field_validator("title", "reasoning", mode="before")
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("confidence", mode="before")
    @classmethod
    def clamp_confidence(cls, value: Any) -> float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("confidence must be a number")
        if not math.isfinite(value):
            raise ValueError("confidence must be finite")
        return max(0.0, min(1.0, float(value)))


class ClassificationResult(BaseModel):
    sections: list[ClassifiedSection]
    model_used: str = ""
    total_tokens: int = 0

    def for_index(self, index: int) -> ClassifiedSection | None:
        """First classification for *index*; later duplicates are ignored."""
        return next((c for c in self.sections if c.section_index == index), None)


def response_schema() -> dict[str, Any]:
    """Strict JSON schema for the ``response_format`` of the classification request."""
    entry = {
        "type": "object",
        "properties": {
            "sectionIndex": {"type": "integer", "description": "0-based section index"},
            "title": {"type": "string", "description": "Section heading"},
            "suggestedType": {
                "type": "string",
                "enum": [member.value for member in SectionType],
                "description": "The classified section type",
            },
            "confidence": {"type": "number", "description": "Confidence 0.0-1.0"},
            "reasoning": {"type": "string", "description": "Brief classification reasoning"},
        },
        "required": ["sectionIndex", "title", "suggestedType", "confidence", "reasoning"],
        "additionalProperties": False,
    }
    return {
        "type": "object",
        "properties": {"sections": {"type": "array", "items": entry}},
        "required": ["sections"],
        "additionalProperties": False,
    }


def validate_entries(raw_sections: Any) -> list[ClassifiedSection]:
    """Validate entries one by one, dropping the malformed ones."""
    if not isinstance(raw_sections, list):
        logger.warning("Classifier response 'sections' is not a list")
        return []

    valid = []
    for raw in raw_sections:
        try:
            valid.append(ClassifiedSection.model_validate(raw))
        except ValidationError as exc:
            logger.warning("Dropping malformed classification %r: %s", raw, exc.errors(include_url=False))
    return valid


def _loads(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return None


def parse_response_text(text: str | None) -> list[ClassifiedSection]:
    """Extract classifications from the message text.

    Schema-conforming JSON is expected; a ```json fenced block or the first
    bare JSON object in free text is accepted as a fallback.
    """
    if not text:
        return []

    payload = _loads(text.strip())
    if payload is None:
        fenced = FENCED_JSON_RE.search(text)
        bare = BARE_OBJECT_RE.search(text)
        candidate = fenced.group(1) if fenced else (bare.group(0) if bare else "")
        payload = _loads(candidate)
    if not isinstance(payload, dict):
        logger.warning("Classifier response is not a JSON object")
        return []
    return validate_entries(payload.get("sections"))
