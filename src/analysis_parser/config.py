"""Shared configuration for the analysis parser and its secondary classifier."""

import logging
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

ROOT = Path(__file__).parent.parent.parent.resolve()
load_dotenv(ROOT / ".env")

ENV_PREFIX = "CLASSIFIER_"


class ClassifierSettings(BaseModel):
    """Tunable policy for the secondary classification pass."""

    confidence_threshold: float = Field(default=0.7, ge=0.0, le=1.0, description="Minimum confidence to accept a type change")
    max_retries: int = Field(default=1, ge=0, description="Retries after the first attempt (retryable failures only)")
    base_retry_delay: float = Field(default=1.0, ge=0.0, description="Backoff base in seconds; doubles per attempt")
    retry_jitter: float = Field(default=0.5, ge=0.0, description="Upper bound of random jitter added to each backoff")
    attempt_timeout: float = Field(default=8.0, gt=0.0, description="Seconds allowed per request attempt")
    min_request_gap: float = Field(default=0.5, ge=0.0, description="Minimum seconds between request starts")
    max_tokens: int = Field(default=4096, ge=1)
    temperature: float = Field(default=0.0, ge=0.0, le=2.0)


def load_classifier_settings(overrides: dict[str, Any] | None = None) -> ClassifierSettings:
    """Build ClassifierSettings from defaults, then CLASSIFIER_<FIELD> env vars, then non-None overrides."""
    data: dict[str, Any] = {}
    for name in ClassifierSettings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return ClassifierSettings(**data)


def service_credentials() -> tuple[str, str, str]:
    """Return (endpoint, api_key, deployment) for the classification service; empty strings when unset."""
    endpoint = os.getenv("AZURE_OPENAI_ENDPOINT", "").rstrip("/")
    api_key = os.getenv("AZURE_OPENAI_API_KEY", "")
    deployment = os.getenv("CLASSIFIER_DEPLOYMENT_NAME", "") or os.getenv("AZURE_OPENAI_DEPLOYMENT_NAME", "")
    return endpoint, api_key, deployment
