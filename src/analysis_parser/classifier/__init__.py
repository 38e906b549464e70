"""Secondary, confidence-gated classification of parsed sections.

Submodules:
  prompts  -- system prompt and per-section user prompt builder
  schema   -- ClassifiedSection / ClassificationResult models and response schema
  control  -- rate limiter, cancellation token, and internal timeout/cancel errors
  client   -- classify_sections(): the rate-limited, retried service call
  enhance  -- re-extraction merge of confident type changes into PhaseData
"""

from analysis_parser.classifier.client import classify_sections
from analysis_parser.classifier.control import CancellationToken, RateLimiter
from analysis_parser.classifier.enhance import classify_and_enhance, enhance_with_classification
from analysis_parser.classifier.schema import ClassificationResult, ClassifiedSection

__all__ = [
    "CancellationToken",
    "ClassificationResult",
    "ClassifiedSection",
    "RateLimiter",
    "classify_and_enhance",
    "classify_sections",
    "enhance_with_classification",
]
