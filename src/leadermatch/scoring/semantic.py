"""Semantic similarity scoring — ranks a candidate vector set by cosine.

Used as an alternate matching source when free-text profiles carry more
signal than the structured questionnaire.  The type heuristic mirrors
``composite.determine_match_type`` but is driven by one scalar.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from src.leadermatch.embeddings import Vector, cosine_similarity
from src.leadermatch.models import CandidateUser, MatchType, SemanticMatch

logger = logging.getLogger(__name__)

HIGH_AFFINITY_SIMILARITY = 0.75
STRATEGIC_FLOOR = 0.5
DEFAULT_SPLIT = 0.6


def determine_semantic_match_type(
    similarity: float,
    record_a: Mapping[str, Any] | None = None,
    record_b: Mapping[str, Any] | None = None,
) -> MatchType:
    if similarity >= HIGH_AFFINITY_SIMILARITY:
        return "high-affinity"

    industry_a = (record_a or {}).get("industry")
    industry_b = (record_b or {}).get("industry")
    if industry_a != industry_b and similarity >= STRATEGIC_FLOOR:
        return "strategic"

    return "high-affinity" if similarity >= DEFAULT_SPLIT else "strategic"


def find_semantic_matches(
    user_id: str,
    query_vector: Vector,
    candidates: Iterable[CandidateUser],
    limit: int = 10,
    threshold: float = 0.5,
    user_record: Mapping[str, Any] | None = None,
) -> list[SemanticMatch]:
    """Candidates at or above ``threshold`` similarity, most similar first."""
    scored: list[SemanticMatch] = []
    skipped = 0
    for candidate in candidates:
        if candidate.id == user_id:
            continue
        if not candidate.embedding:
            skipped += 1
            continue
        similarity = cosine_similarity(query_vector, candidate.embedding)
        if similarity < threshold:
            continue
        scored.append(SemanticMatch(
            user_id=candidate.id,
            similarity=similarity,
            match_type=determine_semantic_match_type(
                similarity, user_record, candidate.responses,
            ),
        ))

    scored.sort(key=lambda m: m.similarity, reverse=True)
    logger.debug(
        "Semantic search for %s: %d above %.2f, %d without embeddings",
        user_id, len(scored), threshold, skipped,
    )
    return scored[:limit]
