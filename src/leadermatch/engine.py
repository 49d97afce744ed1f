"""Top-level orchestrator — ties all components together.

Attribute path:
  1. Serve ``matches:{user_id}`` from the result cache unless refreshing
  2. Re-run selection with the recency exclusion window    (deterministic)
  3. Compute quality metrics, replace the cached report

Embedding path:
  1. Check the provider is configured and the user has a vector
  2. Rank the candidate vector set by cosine similarity
  3. Explain each hit with the attribute scorer
  4. Otherwise fall back to the attribute path

Batch path:
  Run the embedding path for every user with a vector, counting failures
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Sequence
from datetime import datetime, timezone
from pathlib import Path

from src.leadermatch.cache import CacheKeys, ResultCache, cache
from src.leadermatch.config import settings
from src.leadermatch.domain_model import ScoringTables, default_tables
from src.leadermatch.embeddings import create_profile_text, generate_batch_embeddings
from src.leadermatch.errors import EmbeddingError, InvalidInputError
from src.leadermatch.models import (
    BatchResult,
    CandidateUser,
    EmbeddingProfile,
    Match,
    MatchCandidate,
    MatchReport,
    SelectionOptions,
)
from src.leadermatch.providers import EmbeddingProvider, get_embedding_provider
from src.leadermatch.scoring.composite import calculate_match_score
from src.leadermatch.scoring.semantic import find_semantic_matches
from src.leadermatch.selection.selector import (
    calculate_match_quality_metrics,
    create_match,
    recently_matched_ids,
    refresh_matches,
)

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent.parent.parent / "data"


def load_profiles_from_json(data: list[dict]) -> list[CandidateUser]:
    return [CandidateUser(**p) for p in data]


def load_sample_profiles() -> list[CandidateUser]:
    path = DATA_DIR / "sample_profiles.json"
    with open(path) as f:
        raw = json.load(f)
    return load_profiles_from_json(raw)


def get_matches(
    user: CandidateUser,
    candidates: Iterable[CandidateUser],
    existing_matches: Sequence[Match] = (),
    *,
    refresh: bool = False,
    options: SelectionOptions | None = None,
    tables: ScoringTables | None = None,
    store: ResultCache | None = None,
    now: datetime | None = None,
) -> MatchReport:
    """Cached attribute-based matches; ``refresh`` replaces the full set."""
    store = store or cache
    key = CacheKeys.matches(user.id)

    if not refresh:
        cached = store.get(key)
        if cached is not None:
            logger.debug("Serving cached matches for %s", user.id)
            return cached

    matches = refresh_matches(
        user, candidates, existing_matches, options, tables or default_tables(), now,
    )
    report = MatchReport(
        user_id=user.id,
        matches=matches,
        metrics=calculate_match_quality_metrics(matches),
        source="attributes",
        generated_at=now or datetime.now(timezone.utc),
    )
    store.set(key, report, settings.cache_ttls.matches)
    logger.info(
        "Match report for %s: %d matches, avg score %.3f",
        user.id, len(matches), report.metrics.average_score,
    )
    return report


def _semantic_candidate(
    user: CandidateUser,
    candidate: CandidateUser,
    similarity: float,
    match_type: str,
    tables: ScoringTables,
) -> MatchCandidate:
    score = calculate_match_score(user.responses, candidate.responses, tables)
    return MatchCandidate(
        user=candidate,
        score=min(max(similarity, 0.0), 1.0),
        affinity_score=score.affinity_score,
        strategic_score=score.strategic_score,
        commonalities=score.commonalities,
        match_type=match_type,
    )


def get_semantic_matches(
    user: CandidateUser,
    candidates: Sequence[CandidateUser],
    existing_matches: Sequence[Match] = (),
    *,
    provider: EmbeddingProvider | None = None,
    limit: int = 10,
    threshold: float = 0.5,
    tables: ScoringTables | None = None,
    store: ResultCache | None = None,
    now: datetime | None = None,
) -> MatchReport:
    """Embedding-driven matches, falling back to attributes when unavailable."""
    provider = provider or get_embedding_provider()
    tables = tables or default_tables()

    if not provider.is_configured or not user.embedding:
        logger.warning(
            "Embedding path unavailable for %s (provider %s configured=%s, "
            "has_vector=%s); using attribute matching",
            user.id, provider.name, provider.is_configured, bool(user.embedding),
        )
        return get_matches(
            user, candidates, existing_matches,
            refresh=True, tables=tables, store=store, now=now,
        )

    recent = set(recently_matched_ids(existing_matches, now))
    pool = [c for c in candidates if c.id not in recent]
    by_id = {c.id: c for c in pool}
    hits = find_semantic_matches(
        user.id, user.embedding, pool,
        limit=limit, threshold=threshold, user_record=user.responses,
    )
    matches = [
        create_match(
            user.id,
            _semantic_candidate(
                user, by_id[hit.user_id], hit.similarity, hit.match_type, tables,
            ),
            now,
        )
        for hit in hits
    ]
    report = MatchReport(
        user_id=user.id,
        matches=matches,
        metrics=calculate_match_quality_metrics(matches),
        source="embeddings",
        generated_at=now or datetime.now(timezone.utc),
    )
    (store or cache).set(CacheKeys.matches(user.id), report, settings.cache_ttls.matches)
    logger.info("Semantic match report for %s: %d matches", user.id, len(matches))
    return report


def _check_dimensions(user: CandidateUser, dimensions: int) -> None:
    if len(user.embedding or ()) != dimensions:
        raise InvalidInputError(
            f"Embedding for {user.id} has {len(user.embedding or ())} dimensions, "
            f"expected {dimensions}"
        )


def compute_all_matches(
    users: Sequence[CandidateUser],
    *,
    provider: EmbeddingProvider | None = None,
    limit: int = 10,
    threshold: float = 0.5,
    store: ResultCache | None = None,
    now: datetime | None = None,
) -> BatchResult:
    """Recompute semantic matches for every user with a vector.

    A failing user is logged and counted; the batch carries on.  Vectors
    whose length differs from the provider's dimensions are left out of
    every candidate pool.
    """
    provider = provider or get_embedding_provider()
    dimensions = provider.dimensions
    embedded = [u for u in users if u.embedding]
    pool = [
        u for u in users
        if not u.embedding or len(u.embedding) == dimensions
    ]

    processed = 0
    failed = 0
    for user in embedded:
        try:
            _check_dimensions(user, dimensions)
            get_semantic_matches(
                user, pool,
                provider=provider, limit=limit, threshold=threshold,
                store=store, now=now,
            )
            processed += 1
        except (InvalidInputError, EmbeddingError):
            logger.exception("Error processing user %s", user.id)
            failed += 1

    result = BatchResult(processed=processed, failed=failed, total=len(embedded))
    logger.info(
        "Batch match run: %d processed, %d failed, %d total",
        result.processed, result.failed, result.total,
    )
    return result


def embed_profiles(
    profiles: dict[str, EmbeddingProfile],
    provider: EmbeddingProvider | None = None,
) -> dict[str, list[float]]:
    """Embed every profile in one batch call, keyed by user id."""
    if not profiles:
        return {}
    user_ids = list(profiles)
    texts = [create_profile_text(profiles[uid]) for uid in user_ids]
    vectors = generate_batch_embeddings(texts, provider)
    return dict(zip(user_ids, vectors))

