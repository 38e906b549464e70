"""Fakes for the classification client."""

import asyncio
from types import SimpleNamespace

import httpx
import openai


class FakeCompletions:
    """Async ``chat.completions`` stand-in that replays scripted outcomes."""

    def __init__(self, outcomes, delay: float = 0.0):
        self.outcomes = list(outcomes)
        self.delay = delay
        self.calls: list[dict] = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.delay:
            await asyncio.sleep(self.delay)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def make_client(*outcomes, delay: float = 0.0):
    """Return ``(client, completions)``; the client exposes ``chat.completions.create``."""
    completions = FakeCompletions(outcomes, delay)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


def make_completion(content: str | None, model: str = "test-model", tokens: int = 42):
    message = SimpleNamespace(content=content)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)], model=model, usage=SimpleNamespace(total_tokens=tokens))


def make_status_error(status: int) -> openai.APIStatusError:
    request = httpx.Request("POST", "http://classifier.test/chat/completions")
    return openai.APIStatusError(f"status {status}", response=httpx.Response(status, request=request), body=None)
