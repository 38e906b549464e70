"""Secondary classification request against an OpenAI-compatible chat endpoint.

One batched request per call, gated by the rate limiter, with a per-attempt
timeout and a bounded retry on transient failures.  Every failure mode ends
in ``None`` ("no enhancement"); nothing propagates to the caller.
"""

import asyncio
import logging
import random
from typing import Any

from openai import APIConnectionError, APIStatusError, AsyncOpenAI

from analysis_parser.classifier.control import (
    DEFAULT_RATE_LIMITER,
    CancellationToken,
    ClassificationCancelled,
    ClassifierTimeout,
    RateLimiter,
    call_with_token,
)
from analysis_parser.classifier.prompts import SYSTEM_PROMPT, build_user_prompt
from analysis_parser.classifier.schema import ClassificationResult, parse_response_text, response_schema
from analysis_parser.config import ClassifierSettings, load_classifier_settings, service_credentials
from analysis_parser.parsing.schema import ParsedSection

logger = logging.getLogger(__name__)

RETRYABLE_STATUS = frozenset({429, 500, 502, 503, 504})

# Module-level mutable state (lazy-initialised); not true constants.
_CLIENT: AsyncOpenAI | None = None
_DEPLOYMENT: str = ""
_AVAILABLE: bool | None = None  # None = not yet checked


def _init_client() -> bool:
    """Lazy-initialise the async client.  Returns True if credentials are configured."""
    global _CLIENT, _DEPLOYMENT, _AVAILABLE  # pylint: disable=global-statement
    if _AVAILABLE is not None:
        return _AVAILABLE

    endpoint, api_key, deployment = service_credentials()
    if not all([endpoint, api_key, deployment]):
        logger.warning("Classifier credentials not configured; sections keep their heuristic types")
        _AVAILABLE = False
        return False

    base_url = f"{endpoint}/openai/v1/"
    logger.info("Connecting classifier to %s  (deployment=%s)", base_url, deployment)
    # Retries are owned by classify_sections
    _CLIENT = AsyncOpenAI(base_url=base_url, api_key=api_key, max_retries=0)
    _DEPLOYMENT = deployment
    _AVAILABLE = True
    return True


def retry_delay(attempt: int, settings: ClassifierSettings) -> float:
    """Exponential backoff with jitter: base * 2**attempt + U(0, jitter)."""
    return settings.base_retry_delay * 2**attempt + random.uniform(0, settings.retry_jitter)


def _is_retryable(exc: Exception) -> bool:
    if isinstance(exc, APIStatusError):
        return exc.status_code in RETRYABLE_STATUS
    return isinstance(exc, APIConnectionError)


def _request_kwargs(model: str, user_prompt: str, settings: ClassifierSettings) -> dict[str, Any]:
    return {
        "model": model,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": user_prompt},
        ],
        "response_format": {
            "type": "json_schema",
            "json_schema": {"name": "classify_sections", "strict": True, "schema": response_schema()},
        },
        "temperature": settings.temperature,
        "max_tokens": settings.max_tokens,
    }


def _to_result(completion: Any, model: str) -> ClassificationResult | None:
    """Validate the completion message; None when no entry survives validation."""
    if not completion.choices:
        logger.warning("Classifier returned no choices")
        return None
    entries = parse_response_text(completion.choices[0].message.content)
    if not entries:
        logger.warning("Classifier response had no valid classifications")
        return None
    usage = getattr(completion, "usage", None)
    return ClassificationResult(
        sections=entries,
        model_used=getattr(completion, "model", None) or model,
        total_tokens=getattr(usage, "total_tokens", 0) or 0,
    )


async def _attempts(
    client: Any,
    kwargs: dict[str, Any],
    settings: ClassifierSettings,
    cancel: CancellationToken | None,
) -> ClassificationResult | None:
    """The retry loop; raises ClassificationCancelled / ClassifierTimeout for the caller to absorb."""
    for attempt in range(settings.max_retries + 1):
        if cancel is not None:
            cancel.raise_if_cancelled()
        try:
            completion = await call_with_token(
                lambda: client.chat.completions.create(**kwargs), cancel, settings.attempt_timeout
            )
        except (APIStatusError, APIConnectionError) as exc:
            if not _is_retryable(exc):
                logger.warning("Classifier request failed (non-retryable): %s", exc)
                return None
            if attempt >= settings.max_retries:
                logger.warning("Classifier request failed after %d attempt(s): %s", attempt + 1, exc)
                return None
            delay = retry_delay(attempt, settings)
            logger.debug("Retryable classifier failure (%s); retrying in %.2fs", exc, delay)
            if cancel is not None:
                await cancel.sleep(delay)
            else:
                await asyncio.sleep(delay)
            continue
        return _to_result(completion, kwargs["model"])
    return None


async def classify_sections(
    sections: list[ParsedSection],
    raw_markdown: str,
    cancel: CancellationToken | None = None,
    *,
    client: Any = None,
    model: str | None = None,
    settings: ClassifierSettings | None = None,
    rate_limiter: RateLimiter | None = None,
) -> ClassificationResult | None:
    """Ask the secondary classifier for a type per section.

    Args:
        sections: heuristic sections, in document order.
        raw_markdown: the document the sections were parsed from.
        cancel: optional token; cancellation ends the call silently.
        client: an ``AsyncOpenAI``-compatible client; defaults to the
            lazily-initialised client built from environment credentials.
        model: deployment/model name; defaults to the configured deployment.
        settings: retry/timeout/rate policy; defaults to ``load_classifier_settings()``.
        rate_limiter: defaults to the process-wide limiter.

    Returns:
        A ClassificationResult with at least one valid entry, or None.
    """
    if not sections:
        return None
    settings = settings or load_classifier_settings()
    limiter = rate_limiter or DEFAULT_RATE_LIMITER

    if client is None:
        if not _init_client():
            return None
        client = _CLIENT
        model = model or _DEPLOYMENT
    model = model or service_credentials()[2]
    if not model:
        logger.warning("No classifier deployment configured")
        return None

    kwargs = _request_kwargs(model, build_user_prompt(sections, raw_markdown), settings)
    try:
        await limiter.acquire(cancel, settings.min_request_gap)
        result = await _attempts(client, kwargs, settings, cancel)
    except ClassificationCancelled:
        logger.debug("Classification cancelled")
        return None
    except ClassifierTimeout:
        logger.warning("Classifier request timed out after %.1fs", settings.attempt_timeout)
        return None
    except Exception as exc:  # pylint: disable=broad-exception-caught
        logger.warning("Classification failed: %s", exc)
        return None

    if result is not None:
        logger.info("Classified %d section(s) with %s (%d tokens)", len(result.sections), result.model_used, result.total_tokens)
    return result
