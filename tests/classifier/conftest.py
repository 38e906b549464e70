"""Fixtures for classifier tests."""

import pytest

from analysis_parser.classifier.control import RateLimiter
from analysis_parser.config import ClassifierSettings


@pytest.fixture
def fast_settings():
    return ClassifierSettings(base_retry_delay=0, retry_jitter=0, min_request_gap=0, attempt_timeout=2.0)


@pytest.fixture
def limiter():
    return RateLimiter(min_gap=0)
