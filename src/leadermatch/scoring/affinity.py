"""Affinity score — weighted Jaccard over shared attribute items.

A plain Jaccard index treats a highly diagnostic attribute (industry) the
same as a low-signal one (organization size).  Weighting each item lets a
single shared industry dominate the score.
"""

from __future__ import annotations

from src.leadermatch.explanation.commonalities import deduplicate, describe_shared
from src.leadermatch.models import AttributeItem, Commonality


def _keyed(items: list[AttributeItem]) -> dict[str, AttributeItem]:
    return {item.key: item for item in items}


def weighted_similarity(
    items_a: list[AttributeItem], items_b: list[AttributeItem],
) -> float:
    """Weighted intersection over weighted union.  [0.0, 1.0]."""
    map_a = _keyed(items_a)
    map_b = _keyed(items_b)

    matched = 0.0
    total = 0.0
    for key, item in map_a.items():
        total += item.weight
        if key in map_b:
            matched += item.weight
    for key, item in map_b.items():
        if key not in map_a:
            total += item.weight

    if total == 0:
        return 0.0
    return matched / total


def shared_commonalities(
    items_a: list[AttributeItem], items_b: list[AttributeItem],
) -> list[Commonality]:
    """One commonality per item of A that B also holds, heaviest first."""
    keys_b = {item.key for item in items_b}
    found = [
        Commonality(
            category=item.category,
            description=describe_shared(item),
            weight=item.weight,
        )
        for item in items_a
        if item.key in keys_b
    ]
    found.sort(key=lambda c: c.weight, reverse=True)
    return deduplicate(found)
