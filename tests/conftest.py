"""Shared fixtures: a controllable clock, a stub AI provider and a seeded workspace."""

from datetime import datetime, timedelta, timezone
from typing import List, Optional

import pytest

from providers.base import LLMProvider, LLMResponse
from seed import bootstrap


NOW = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime = NOW):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


class StubProvider(LLMProvider):
    """Provider returning canned text, or raising, and recording every call."""

    def __init__(self, content: str = "- [Risk Level: Medium]: Stub analysis.",
                 available: bool = True, error: Optional[Exception] = None):
        self.content = content
        self.available = available
        self.error = error
        self.calls: List[dict] = []

    @property
    def name(self) -> str:
        return "stub"

    @property
    def default_model(self) -> str:
        return "stub-model"

    def complete(self, system_prompt, user_message, model=None, max_tokens=1024) -> LLMResponse:
        self.calls.append({
            "system_prompt": system_prompt,
            "user_message": user_message,
            "model": model,
            "max_tokens": max_tokens,
        })
        if self.error is not None:
            raise self.error
        return LLMResponse(
            content=self.content,
            input_tokens=12,
            output_tokens=8,
            model=model or self.default_model,
            provider=self.name,
        )

    def is_available(self) -> bool:
        return self.available


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def stub_provider():
    return StubProvider()


@pytest.fixture
def workspace(clock, stub_provider):
    return bootstrap(now=NOW, provider=stub_provider, clock=clock)


@pytest.fixture
def engine(workspace):
    return workspace.engine
