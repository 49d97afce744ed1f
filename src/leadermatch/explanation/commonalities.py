"""Commonality explainer — matched and complementary items to readable text."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable

from src.leadermatch.models import AttributeItem, Commonality

MAX_COMMONALITIES = 5

_WORD_START_RE = re.compile(r"\b\w")


def format_value(value: str) -> str:
    """``"change-management"`` -> ``"Change Management"``."""
    return _WORD_START_RE.sub(lambda m: m.group(0).upper(), value.replace("-", " "))


_SHARED_TEMPLATES: dict[str, Callable[[str], str]] = {
    "industry": lambda v: f"Both work in {format_value(v)}",
    "yearsExperience": lambda v: f"Similar leadership experience ({v} years)",
    "leadershipLevel": lambda v: f"Both at {format_value(v)} level",
    "organizationSize": lambda v: f"Both lead in {format_value(v)} organizations",
    "leadershipPriorities": lambda v: f"Shared priority: {format_value(v)}",
    "leadershipChallenges": lambda v: f"Both navigating {format_value(v)} challenges",
    "growthAreas": lambda v: f"Both developing {format_value(v)} skills",
    "networkingGoals": lambda v: f"Aligned networking goal: {format_value(v)}",
    "rechargeActivities": lambda v: f"Both enjoy {format_value(v)}",
    "contentPreferences": lambda v: f"Shared interest in {format_value(v)} content",
    "fitnessActivities": lambda v: f"Both active in {format_value(v)}",
    "idealWeekend": lambda v: f"Similar weekend preferences: {format_value(v)}",
    "volunteerCauses": lambda v: f"Both passionate about {format_value(v)}",
    "energizers": lambda v: f"Energized by {format_value(v)}",
    "leadershipPhilosophy": lambda v: f"Share {format_value(v)} leadership style",
    "decisionMakingStyle": lambda v: f"Both {format_value(v)} decision makers",
    "failureApproach": lambda v: f"Similar approach to setbacks: {format_value(v)}",
    "relationshipValues": lambda v: f"Both value {format_value(v)} in relationships",
    "communicationStyle": lambda v: f"{format_value(v)} communication style",
    "leadershipSeason": lambda v: f"Both in {format_value(v)} mode",
}


def describe_shared(item: AttributeItem) -> str:
    template = _SHARED_TEMPLATES.get(item.attribute)
    if template is not None:
        return template(item.value)
    return f"Shared: {format_value(item.value)}"


def describe_complement(
    item: AttributeItem, complement_attribute: str, complement_value: str,
) -> str:
    attr = item.attribute
    val = format_value(item.value)
    comp_val = format_value(complement_value)

    if attr == "industry":
        return f"Complementary industries: {val} + {comp_val}"
    if attr == "leadershipLevel":
        return f"Cross-level connection: {val} ↔ {comp_val}"
    if attr == "organizationSize":
        return f"Different scale perspectives: {val} vs {comp_val}"
    if attr == "decisionMakingStyle":
        return f"Complementary decision styles: {val} + {comp_val}"
    if "Challenges" in attr or "Growth" in attr:
        return "Can help with each other's growth areas"
    return f"Complementary expertise: {val} + {comp_val}"


def deduplicate(commonalities: Iterable[Commonality]) -> list[Commonality]:
    """Keep the first commonality per case-insensitive description."""
    seen: set[str] = set()
    result: list[Commonality] = []
    for c in commonalities:
        key = c.description.lower()
        if key in seen:
            continue
        seen.add(key)
        result.append(c)
    return result


def rank_commonalities(
    commonalities: Iterable[Commonality], limit: int | None = MAX_COMMONALITIES,
) -> list[Commonality]:
    """Sort by weight (heaviest first), drop duplicate descriptions, truncate."""
    ranked = deduplicate(sorted(commonalities, key=lambda c: c.weight, reverse=True))
    if limit is None:
        return ranked
    return ranked[:limit]
