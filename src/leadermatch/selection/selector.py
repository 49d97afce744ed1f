"""Match selector — scores a candidate pool, then ranks, diversifies and caps.

Pipeline:
  1. Drop the user and excluded ids from the pool
  2. Score every remaining candidate                        (deterministic)
  3. Drop candidates below ``min_score``
  4. Take the best of each bucket (high-affinity / strategic)
  5. Backfill by total score up to the combined cap
  6. Diversity pass over (industry, leadershipLevel)
  7. Attach conversation starters and build Match objects

Pure computation over the inputs: fetching the pool and persisting the
result belong to the caller.
"""

from __future__ import annotations

import logging
import uuid
from collections import Counter
from collections.abc import Iterable
from datetime import datetime, timedelta, timezone

from src.leadermatch.config import settings
from src.leadermatch.domain_model import ScoringTables, default_tables
from src.leadermatch.explanation.conversation import generate_conversation_starters
from src.leadermatch.models import (
    CandidateUser,
    Match,
    MatchCandidate,
    MatchedUser,
    MatchQualityMetrics,
    SelectionOptions,
)
from src.leadermatch.scoring.composite import calculate_match_score, determine_match_type

logger = logging.getLogger(__name__)

SMALL_SELECTION = 3


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def _score_candidate(
    user: CandidateUser, candidate: CandidateUser, tables: ScoringTables,
) -> MatchCandidate:
    score = calculate_match_score(user.responses, candidate.responses, tables)
    return MatchCandidate(
        user=candidate,
        score=score.total_score,
        affinity_score=score.affinity_score,
        strategic_score=score.strategic_score,
        commonalities=score.commonalities,
        match_type=determine_match_type(score.affinity_score, score.strategic_score),
    )


def _diversity_key(candidate: MatchCandidate) -> tuple[str | None, str | None]:
    responses = candidate.user.responses
    industry = responses.get("industry")
    level = responses.get("leadershipLevel")
    return (
        str(industry) if industry is not None else None,
        str(level) if level is not None else None,
    )


def ensure_match_diversity(
    candidates: list[MatchCandidate], cap: int | None = None,
) -> list[MatchCandidate]:
    """Prefer one candidate per (industry, leadershipLevel), best score first.

    Remaining slots up to ``cap`` are filled with the next-highest scorers
    regardless of key.  Selections of three or fewer pass through unchanged.
    """
    cap = settings.selection.diversity_cap if cap is None else cap
    ordered = sorted(candidates, key=lambda c: c.score, reverse=True)
    if len(ordered) <= SMALL_SELECTION:
        return ordered[:cap]

    result: list[MatchCandidate] = []
    seen: set[tuple[str | None, str | None]] = set()
    for candidate in ordered:
        if len(result) >= cap:
            break
        key = _diversity_key(candidate)
        if key in seen:
            continue
        seen.add(key)
        result.append(candidate)

    if len(result) < cap:
        chosen = {id(c) for c in result}
        rest = [c for c in ordered if id(c) not in chosen]
        result.extend(rest[:cap - len(result)])
        result.sort(key=lambda c: c.score, reverse=True)

    return result


def _new_match_id(now: datetime) -> str:
    return f"match_{int(now.timestamp() * 1000)}_{uuid.uuid4().hex[:9]}"


def create_match(
    user_id: str, candidate: MatchCandidate, now: datetime | None = None,
) -> Match:
    now = _as_utc(now or datetime.now(timezone.utc))
    return Match(
        id=_new_match_id(now),
        user_id=user_id,
        matched_user_id=candidate.user.id,
        matched_user=MatchedUser(
            id=candidate.user.id,
            profile=candidate.user.profile,
            questionnaire_completed=True,
        ),
        type=candidate.match_type,
        commonalities=candidate.commonalities,
        conversation_starters=generate_conversation_starters(
            candidate.commonalities, candidate.match_type,
        ),
        score=min(max(candidate.score, 0.0), 1.0),
        generated_at=now,
    )


def generate_matches(
    user: CandidateUser,
    candidates: Iterable[CandidateUser],
    options: SelectionOptions | None = None,
    tables: ScoringTables | None = None,
    now: datetime | None = None,
) -> list[Match]:
    opts = options or SelectionOptions()
    tables = tables or default_tables()
    excluded = set(opts.exclude_ids)

    eligible = [c for c in candidates if c.id != user.id and c.id not in excluded]
    if not eligible:
        logger.info("No eligible candidates for %s", user.id)
        return []

    scored = [
        mc for mc in (_score_candidate(user, c, tables) for c in eligible)
        if mc.score >= opts.min_score
    ]

    high_affinity = sorted(
        (mc for mc in scored if mc.match_type == "high-affinity"),
        key=lambda mc: mc.affinity_score, reverse=True,
    )
    strategic = sorted(
        (mc for mc in scored if mc.match_type == "strategic"),
        key=lambda mc: mc.strategic_score, reverse=True,
    )
    selected = high_affinity[:opts.max_high_affinity] + strategic[:opts.max_strategic]

    target = opts.max_high_affinity + opts.max_strategic
    if len(selected) < target:
        chosen = {id(mc) for mc in selected}
        remaining = sorted(
            (mc for mc in scored if id(mc) not in chosen),
            key=lambda mc: mc.score, reverse=True,
        )
        selected.extend(remaining[:target - len(selected)])

    diversified = ensure_match_diversity(selected)
    matches = [create_match(user.id, mc, now) for mc in diversified]

    logger.info(
        "Generated %d matches for %s (%d eligible, %d above %.2f)",
        len(matches), user.id, len(eligible), len(scored), opts.min_score,
    )
    return matches


def recently_matched_ids(
    existing_matches: Iterable[Match],
    now: datetime | None = None,
    window_days: int | None = None,
) -> list[str]:
    """Ids of non-passed matches generated inside the recency window."""
    now = _as_utc(now or datetime.now(timezone.utc))
    days = settings.selection.recency_window_days if window_days is None else window_days
    cutoff = now - timedelta(days=days)
    return [
        m.matched_user_id for m in existing_matches
        if not m.passed and _as_utc(m.generated_at) >= cutoff
    ]


def refresh_matches(
    user: CandidateUser,
    candidates: Iterable[CandidateUser],
    existing_matches: Iterable[Match],
    options: SelectionOptions | None = None,
    tables: ScoringTables | None = None,
    now: datetime | None = None,
) -> list[Match]:
    """Regenerate the full match set, skipping recent undismissed matches."""
    opts = options or SelectionOptions()
    recent = recently_matched_ids(existing_matches, now)
    if recent:
        logger.debug("Excluding %d recent matches for %s", len(recent), user.id)
    opts = opts.model_copy(update={"exclude_ids": [*opts.exclude_ids, *recent]})
    return generate_matches(user, candidates, opts, tables, now)


def calculate_match_quality_metrics(matches: list[Match]) -> MatchQualityMetrics:
    if not matches:
        return MatchQualityMetrics()

    categories: Counter[str] = Counter(
        c.category for m in matches for c in m.commonalities
    )
    return MatchQualityMetrics(
        average_score=sum(m.score for m in matches) / len(matches),
        high_affinity_count=sum(1 for m in matches if m.type == "high-affinity"),
        strategic_count=sum(1 for m in matches if m.type == "strategic"),
        category_distribution=dict(categories),
    )
