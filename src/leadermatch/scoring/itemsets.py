"""Itemset extraction — questionnaire answers to weighted attribute items.

Only attributes on the tables' allow-list produce items; any other key in
the record is skipped and logged at DEBUG.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from src.leadermatch.domain_model import ScoringTables, default_tables
from src.leadermatch.models import AttributeItem, AttributeValue

logger = logging.getLogger(__name__)


def _is_empty(value: AttributeValue) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, list):
        return len(value) == 0
    return False


def extract_itemsets(
    record: Mapping[str, AttributeValue],
    tables: ScoringTables | None = None,
) -> list[AttributeItem]:
    """Explode a record into items, one per value of each known attribute."""
    tables = tables or default_tables()
    items: list[AttributeItem] = []
    ignored: list[str] = []

    for attribute, value in record.items():
        if _is_empty(value):
            continue
        config = tables.config_for(attribute)
        if config is None:
            ignored.append(attribute)
            continue

        values = value if isinstance(value, list) else [value]
        for v in values:
            if v is None or v == "":
                continue
            items.append(AttributeItem(
                category=config.category,
                attribute=attribute,
                value=str(v),
                weight=config.weight,
            ))

    if ignored:
        logger.debug("Ignored unscored attributes: %s", ", ".join(ignored))
    return items


def item_keys(items: list[AttributeItem]) -> set[str]:
    return {item.key for item in items}


def jaccard_similarity(
    items_a: list[AttributeItem], items_b: list[AttributeItem],
) -> float:
    """Unweighted Jaccard index over ``attribute:value`` keys."""
    set_a = item_keys(items_a)
    set_b = item_keys(items_b)
    union = set_a | set_b
    if not union:
        return 0.0
    return len(set_a & set_b) / len(union)
