"""Unit tests for the shared config module."""

# pylint: disable=missing-class-docstring,missing-function-docstring

import pytest
from pydantic import ValidationError

from analysis_parser.config import ROOT, ClassifierSettings, load_classifier_settings, service_credentials


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every CLASSIFIER_* override and service credential from the environment."""
    for name in ClassifierSettings.model_fields:
        monkeypatch.delenv(f"CLASSIFIER_{name.upper()}", raising=False)
    for var in ("AZURE_OPENAI_ENDPOINT", "AZURE_OPENAI_API_KEY", "AZURE_OPENAI_DEPLOYMENT_NAME", "CLASSIFIER_DEPLOYMENT_NAME"):
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


class TestClassifierSettings:

    def test_defaults(self, clean_env):  # pylint: disable=unused-argument
        settings = load_classifier_settings()
        assert settings.confidence_threshold == 0.7
        assert settings.max_retries == 1
        assert settings.attempt_timeout == 8.0
        assert settings.min_request_gap == 0.5

    def test_env_override(self, clean_env):
        clean_env.setenv("CLASSIFIER_CONFIDENCE_THRESHOLD", "0.85")
        clean_env.setenv("CLASSIFIER_MAX_RETRIES", "3")
        settings = load_classifier_settings()
        assert settings.confidence_threshold == 0.85
        assert settings.max_retries == 3

    def test_explicit_overrides_beat_env(self, clean_env):
        clean_env.setenv("CLASSIFIER_MAX_RETRIES", "3")
        assert load_classifier_settings({"max_retries": 0, "temperature": None}).max_retries == 0

    def test_threshold_out_of_range(self):
        with pytest.raises(ValidationError):
            ClassifierSettings(confidence_threshold=1.5)

    def test_bad_env_value(self, clean_env):
        clean_env.setenv("CLASSIFIER_ATTEMPT_TIMEOUT", "soon")
        with pytest.raises(ValidationError):
            load_classifier_settings()


class TestServiceCredentials:

    def test_unset(self, clean_env):  # pylint: disable=unused-argument
        assert service_credentials() == ("", "", "")

    def test_deployment_preference(self, clean_env):
        clean_env.setenv("AZURE_OPENAI_ENDPOINT", "https://example.openai.azure.com/")
        clean_env.setenv("AZURE_OPENAI_API_KEY", "key")
        clean_env.setenv("AZURE_OPENAI_DEPLOYMENT_NAME", "gpt-main")
        clean_env.setenv("CLASSIFIER_DEPLOYMENT_NAME", "gpt-mini")
        assert service_credentials() == ("https://example.openai.azure.com", "key", "gpt-mini")


def test_root_is_project_root():
    """ROOT should point to the project root (contains pyproject.toml)."""
    assert (ROOT / "pyproject.toml").exists()
