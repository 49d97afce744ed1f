"""Composite scorer — affinity and strategic signals to one score and type."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from src.leadermatch.config import ScoreWeights, settings
from src.leadermatch.domain_model import ScoringTables, default_tables
from src.leadermatch.explanation.commonalities import rank_commonalities
from src.leadermatch.models import AttributeValue, MatchScore, MatchType
from src.leadermatch.scoring.affinity import shared_commonalities, weighted_similarity
from src.leadermatch.scoring.itemsets import extract_itemsets
from src.leadermatch.scoring.strategic import (
    complementary_commonalities,
    strategic_score,
)

logger = logging.getLogger(__name__)

AFFINITY_DOMINANCE = 1.3
STRATEGIC_PARITY = 0.8


def composite_score(
    affinity: float, strategic: float, weights: ScoreWeights | None = None,
) -> float:
    w = weights or settings.score_weights
    return w.affinity * affinity + w.strategic * strategic


def calculate_match_score(
    record_a: Mapping[str, AttributeValue],
    record_b: Mapping[str, AttributeValue],
    tables: ScoringTables | None = None,
    weights: ScoreWeights | None = None,
) -> MatchScore:
    """Score B from A's perspective and explain the result."""
    tables = tables or default_tables()
    w = weights or settings.score_weights

    items_a = extract_itemsets(record_a, tables)
    items_b = extract_itemsets(record_b, tables)

    affinity = weighted_similarity(items_a, items_b)
    strategic = strategic_score(items_a, items_b, tables, w.complement_factor)

    commonalities = rank_commonalities([
        *shared_commonalities(items_a, items_b),
        *complementary_commonalities(items_a, items_b, tables, w.complement_factor),
    ])
    total = composite_score(affinity, strategic, w)

    logger.debug(
        "Match score: affinity=%.3f strategic=%.3f -> %.3f (%d commonalities)",
        affinity, strategic, total, len(commonalities),
    )
    return MatchScore(
        total_score=total,
        affinity_score=affinity,
        strategic_score=strategic,
        commonalities=commonalities,
    )


def determine_match_type(affinity: float, strategic: float) -> MatchType:
    """Classify a pairing; ties and low scores fall back to high-affinity."""
    if affinity > strategic * AFFINITY_DOMINANCE:
        return "high-affinity"
    if strategic >= affinity * STRATEGIC_PARITY:
        return "strategic"
    return "high-affinity"
