"""Shared fakes — no network, no model downloads."""

from __future__ import annotations

import pytest

from src.leadermatch.errors import GenerationError
from src.leadermatch.providers import (
    EmbeddingProvider,
    GenerativeProvider,
    reset_providers,
)


class FakeEmbeddingProvider(EmbeddingProvider):
    name = "fake"

    def __init__(self, configured: bool = True, fail: bool = False) -> None:
        self._configured = configured
        self._fail = fail
        self.calls: list[list[str]] = []

    @property
    def is_configured(self) -> bool:
        return self._configured

    @property
    def dimensions(self) -> int:
        return 3

    def _vector(self, text: str) -> list[float]:
        return [float(len(text)), float(text.count("\n") + 1), 1.0]

    def generate_embedding(self, text: str) -> list[float]:
        self.calls.append([text])
        if self._fail:
            raise ConnectionError("embedding backend unreachable")
        return self._vector(text)

    def generate_batch_embeddings(self, texts: list[str]) -> list[list[float]]:
        self.calls.append(list(texts))
        if self._fail:
            raise ConnectionError("embedding backend unreachable")
        return [self._vector(t) for t in texts]


class FakeGenerativeProvider(GenerativeProvider):
    name = "fake"

    def __init__(self, reply: str = "", fail: bool = False) -> None:
        self.reply = reply
        self.fail = fail
        self.prompts: list[tuple[str, str | None]] = []

    def generate_text(self, prompt: str, system_instruction: str | None = None) -> str:
        self.prompts.append((prompt, system_instruction))
        if self.fail:
            raise GenerationError("rate limited")
        return self.reply


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def embedding_provider_cls():
    return FakeEmbeddingProvider


@pytest.fixture
def generative_provider_cls():
    return FakeGenerativeProvider


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture(autouse=True)
def _fresh_providers():
    reset_providers()
    yield
    reset_providers()
