"""AI provider capabilities — embeddings and text generation.

Embedding providers are interchangeable.  Which one runs is decided by the
``AI_PROVIDER`` setting, resolved on first use and cached for the lifetime of
the process; switching providers requires a restart.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

import anthropic
from anthropic import Anthropic
from openai import OpenAI

from src.leadermatch.config import settings
from src.leadermatch.errors import GenerationError, ProviderNotConfiguredError
from src.leadermatch.llm import call_llm_text

logger = logging.getLogger(__name__)

PROVIDER_TYPES = ("openai", "local")

_LOCAL_MODEL_DIMENSIONS = {"all-MiniLM-L6-v2": 384}


# ---------------------------------------------------------------------------
# Interfaces
# ---------------------------------------------------------------------------

class EmbeddingProvider(ABC):
    name: str

    @property
    @abstractmethod
    def is_configured(self) -> bool: ...

    @property
    @abstractmethod
    def dimensions(self) -> int: ...

    @abstractmethod
    def generate_embedding(self, text: str) -> list[float]: ...

    @abstractmethod
    def generate_batch_embeddings(self, texts: list[str]) -> list[list[float]]: ...


class GenerativeProvider(ABC):
    name: str

    @abstractmethod
    def generate_text(
        self, prompt: str, system_instruction: str | None = None,
    ) -> str: ...


# ---------------------------------------------------------------------------
# Embedding variants
# ---------------------------------------------------------------------------

class OpenAIEmbeddingProvider(EmbeddingProvider):
    name = "openai"

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        dimensions: int | None = None,
    ) -> None:
        key = settings.openai_api_key if api_key is None else api_key
        self._client = OpenAI(api_key=key) if key else None
        self._model = model or settings.openai_embedding_model
        self._dimensions = dimensions or settings.embedding_dimensions

    @property
    def is_configured(self) -> bool:
        return self._client is not None

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def _require_client(self) -> OpenAI:
        if self._client is None:
            raise ProviderNotConfiguredError(
                "OpenAI not configured. Set OPENAI_API_KEY in .env",
            )
        return self._client

    def generate_embedding(self, text: str) -> list[float]:
        response = self._require_client().embeddings.create(
            model=self._model, input=text, dimensions=self._dimensions,
        )
        return list(response.data[0].embedding)

    def generate_batch_embeddings(self, texts: list[str]) -> list[list[float]]:
        response = self._require_client().embeddings.create(
            model=self._model, input=texts, dimensions=self._dimensions,
        )
        return [list(item.embedding) for item in response.data]


class LocalEmbeddingProvider(EmbeddingProvider):
    """sentence-transformers model running in-process; needs no credentials."""

    name = "local"

    def __init__(self, model_name: str | None = None) -> None:
        self._model_name = model_name or settings.local_embedding_model
        self._model = None

    def _load_model(self):
        if self._model is None:
            from sentence_transformers import SentenceTransformer
            self._model = SentenceTransformer(self._model_name)
            logger.info("Loaded sentence-transformer model: %s", self._model_name)
        return self._model

    @property
    def is_configured(self) -> bool:
        return True

    @property
    def dimensions(self) -> int:
        known = _LOCAL_MODEL_DIMENSIONS.get(self._model_name)
        if known is not None:
            return known
        return int(self._load_model().get_sentence_embedding_dimension())

    def generate_embedding(self, text: str) -> list[float]:
        vec = self._load_model().encode(
            text, show_progress_bar=False, normalize_embeddings=True,
        )
        return vec.tolist()

    def generate_batch_embeddings(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []
        vectors = self._load_model().encode(
            texts, show_progress_bar=False, normalize_embeddings=True,
        )
        return [vec.tolist() for vec in vectors]


# ---------------------------------------------------------------------------
# Generative variant
# ---------------------------------------------------------------------------

class AnthropicGenerativeProvider(GenerativeProvider):
    name = "anthropic"

    def __init__(self, api_key: str | None = None, client: Anthropic | None = None):
        key = settings.anthropic_api_key if api_key is None else api_key
        if client is None and key:
            client = Anthropic(api_key=key)
        self._client = client

    @property
    def is_configured(self) -> bool:
        return self._client is not None

    def generate_text(
        self, prompt: str, system_instruction: str | None = None,
    ) -> str:
        if self._client is None:
            raise ProviderNotConfiguredError(
                "Anthropic not configured. Set ANTHROPIC_API_KEY in .env",
            )
        try:
            return call_llm_text(self._client, system_instruction, prompt, fast=True)
        except anthropic.APIError as exc:
            raise GenerationError(f"Anthropic generation failed: {exc}") from exc


# ---------------------------------------------------------------------------
# Process-wide factory
# ---------------------------------------------------------------------------

_embedding_provider: EmbeddingProvider | None = None
_generative_provider: GenerativeProvider | None = None
_generative_resolved = False


def resolve_provider_type(value: str | None = None) -> str:
    provider = (value if value is not None else settings.ai_provider).strip().lower()
    if provider not in PROVIDER_TYPES:
        raise ValueError(
            f'Invalid AI_PROVIDER: "{provider}". Must be one of {", ".join(PROVIDER_TYPES)}.'
        )
    return provider


def get_embedding_provider() -> EmbeddingProvider:
    global _embedding_provider
    if _embedding_provider is None:
        provider_type = resolve_provider_type()
        if provider_type == "local":
            _embedding_provider = LocalEmbeddingProvider()
        else:
            _embedding_provider = OpenAIEmbeddingProvider()
        logger.info(
            "Embedding provider: %s (configured=%s, dims=%d)",
            _embedding_provider.name,
            _embedding_provider.is_configured,
            _embedding_provider.dimensions,
        )
    return _embedding_provider


def get_generative_provider() -> GenerativeProvider | None:
    """Anthropic-backed generator, or ``None`` when no API key is set."""
    global _generative_provider, _generative_resolved
    if not _generative_resolved:
        provider = AnthropicGenerativeProvider()
        _generative_provider = provider if provider.is_configured else None
        _generative_resolved = True
        logger.info("Generative provider: %s", provider.name if _generative_provider else "none")
    return _generative_provider


def reset_providers() -> None:
    """Forget resolved providers.  Tests only."""
    global _embedding_provider, _generative_provider, _generative_resolved
    _embedding_provider = None
    _generative_provider = None
    _generative_resolved = False
