"""Semantic embedding path — profile text, provider-backed vectors, cosine.

Callers that want resilience check ``provider.is_configured`` first and use
the attribute-based scorer otherwise; the functions here fail fast.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import numpy as np

from src.leadermatch.errors import (
    EmbeddingError,
    InvalidInputError,
    ProviderNotConfiguredError,
)
from src.leadermatch.models import EmbeddingProfile
from src.leadermatch.providers import EmbeddingProvider, get_embedding_provider

logger = logging.getLogger(__name__)

Vector = Sequence[float] | np.ndarray

# (questionnaire key, label) in output order
_QUESTIONNAIRE_FIELDS: list[tuple[str, str]] = [
    ("industry", "Industry"),
    ("leadershipLevel", "Leadership Level"),
    ("organizationSize", "Organization Size"),
    ("yearsExperience", "Years Experience"),
    ("leadershipPriorities", "Leadership Priorities"),
    ("leadershipChallenges", "Leadership Challenges"),
    ("growthAreas", "Growth Areas"),
    ("networkingGoals", "Networking Goals"),
    ("rechargeActivities", "Recharge Activities"),
    ("customInterests", "Custom Interests"),
    ("fitnessActivities", "Fitness Activities"),
    ("leadershipPhilosophy", "Leadership Philosophy"),
    ("decisionMakingStyle", "Decision Making"),
    ("communicationStyle", "Communication Style"),
]


def _render(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value if v not in (None, ""))
    if value is None:
        return ""
    return str(value)


def create_profile_text(profile: EmbeddingProfile) -> str:
    """Serialize a profile into ``Label: value`` lines for embedding.

    Absent fields are omitted entirely; an empty profile yields ``""``.
    """
    fields: list[tuple[str, Any]] = [
        ("Name", profile.name),
        ("Bio", profile.bio),
        ("Position", profile.position),
        ("Title", profile.title),
        ("Company", profile.company),
        ("Location", profile.location),
        ("Age", profile.age),
        ("Interests", profile.interests),
    ]
    q = profile.questionnaire_data or {}
    fields.extend((label, q.get(key)) for key, label in _QUESTIONNAIRE_FIELDS)

    lines = []
    for label, value in fields:
        rendered = _render(value)
        if rendered:
            lines.append(f"{label}: {rendered}")
    return "\n".join(lines)


def _configured(provider: EmbeddingProvider | None) -> EmbeddingProvider:
    provider = provider or get_embedding_provider()
    if not provider.is_configured:
        raise ProviderNotConfiguredError(
            f'AI provider "{provider.name}" not configured. Check environment variables.'
        )
    return provider


def generate_embedding(
    text: str, provider: EmbeddingProvider | None = None,
) -> list[float]:
    provider = _configured(provider)
    try:
        return provider.generate_embedding(text)
    except Exception as exc:
        logger.exception("Error generating embedding via %s", provider.name)
        raise EmbeddingError("Failed to generate embedding") from exc


def generate_batch_embeddings(
    texts: list[str], provider: EmbeddingProvider | None = None,
) -> list[list[float]]:
    """Embed many texts in a single provider call."""
    provider = _configured(provider)
    try:
        vectors = provider.generate_batch_embeddings(texts)
    except Exception as exc:
        logger.exception("Error generating batch embeddings via %s", provider.name)
        raise EmbeddingError("Failed to generate batch embeddings") from exc
    logger.info("Embedded %d texts via %s", len(vectors), provider.name)
    return vectors


def cosine_similarity(a: Vector, b: Vector) -> float:
    """Cosine of the angle between two vectors.  [-1.0, 1.0].

    Zero-magnitude vectors, and vectors holding inf or NaN, compare as 0.0.
    """
    vec_a = np.asarray(a, dtype=float)
    vec_b = np.asarray(b, dtype=float)
    if vec_a.shape != vec_b.shape:
        raise InvalidInputError("Vectors must have the same length")
    if vec_a.size == 0:
        return 0.0

    # scale by the largest component so the norms cannot overflow
    scale_a = np.max(np.abs(vec_a))
    scale_b = np.max(np.abs(vec_b))
    if scale_a == 0 or scale_b == 0:
        return 0.0
    vec_a = vec_a / scale_a
    vec_b = vec_b / scale_b

    similarity = np.dot(vec_a, vec_b) / (np.linalg.norm(vec_a) * np.linalg.norm(vec_b))
    if not np.isfinite(similarity):
        return 0.0
    return float(np.clip(similarity, -1.0, 1.0))
