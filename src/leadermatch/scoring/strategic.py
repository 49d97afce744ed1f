"""Strategic score — configured complementary (not identical) attributes.

For every item of A that has complement entries, its weight counts toward the
eligible total.  If B holds any one of the complements, A earns
``weight * complement_factor`` for that item, once.
"""

from __future__ import annotations

import logging

from src.leadermatch.config import settings
from src.leadermatch.domain_model import ScoringTables, default_tables
from src.leadermatch.explanation.commonalities import (
    deduplicate,
    describe_complement,
)
from src.leadermatch.models import AttributeItem, Commonality

logger = logging.getLogger(__name__)


def strategic_score(
    items_a: list[AttributeItem],
    items_b: list[AttributeItem],
    tables: ScoringTables | None = None,
    complement_factor: float | None = None,
) -> float:
    """Earned complementary weight over eligible weight.  [0.0, 1.0]."""
    tables = tables or default_tables()
    factor = (
        settings.score_weights.complement_factor
        if complement_factor is None else complement_factor
    )
    keys_b = {item.key for item in items_b}

    earned = 0.0
    eligible = 0.0
    for item in items_a:
        complements = tables.complements_for(item.key)
        if not complements:
            continue
        eligible += item.weight
        if any(c in keys_b for c in complements):
            earned += item.weight * factor

    if eligible == 0:
        return 0.0
    return earned / eligible


def complementary_commonalities(
    items_a: list[AttributeItem],
    items_b: list[AttributeItem],
    tables: ScoringTables | None = None,
    complement_factor: float | None = None,
) -> list[Commonality]:
    """One commonality per (A item, complement held by B) pair, heaviest first."""
    tables = tables or default_tables()
    factor = (
        settings.score_weights.complement_factor
        if complement_factor is None else complement_factor
    )
    keys_b = {item.key for item in items_b}

    found: list[Commonality] = []
    for item in items_a:
        for complement in tables.complements_for(item.key):
            if complement not in keys_b:
                continue
            attribute, _, value = complement.partition(":")
            found.append(Commonality(
                category=item.category,
                description=describe_complement(item, attribute, value),
                weight=item.weight * factor,
            ))

    found.sort(key=lambda c: c.weight, reverse=True)
    return deduplicate(found)
