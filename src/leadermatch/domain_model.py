"""Deterministic domain model — attribute weights and complementary pairs.

Two static layers drive all attribute-based scoring. No LLM calls. Fully
unit-testable. The tables are wrapped in an immutable ``ScoringTables``
object that is built once at startup and handed to the scorer, so an event
vertical (or a test) can swap in its own tables.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field

from src.leadermatch.models import CommonalityCategory

# ---------------------------------------------------------------------------
# Layer 1 — Attribute weights
# ---------------------------------------------------------------------------

ATTRIBUTE_WEIGHTS: dict[str, tuple[float, CommonalityCategory]] = {
    # Leadership context
    "industry": (0.9, "professional"),
    "yearsExperience": (0.6, "professional"),
    "leadershipLevel": (0.85, "professional"),
    "organizationSize": (0.5, "professional"),
    # Building & solving
    "leadershipPriorities": (0.9, "professional"),
    "leadershipChallenges": (0.95, "professional"),
    "growthAreas": (0.85, "professional"),
    "networkingGoals": (0.8, "professional"),
    # Beyond the boardroom
    "rechargeActivities": (0.7, "hobby"),
    "customInterests": (0.85, "hobby"),
    "contentPreferences": (0.65, "hobby"),
    "fitnessActivities": (0.6, "hobby"),
    "idealWeekend": (0.55, "lifestyle"),
    "volunteerCauses": (0.7, "values"),
    "energizers": (0.75, "lifestyle"),
    # Leadership style
    "leadershipPhilosophy": (0.9, "values"),
    "decisionMakingStyle": (0.7, "values"),
    "failureApproach": (0.65, "values"),
    "relationshipValues": (0.85, "values"),
    "communicationStyle": (0.6, "values"),
    "leadershipSeason": (0.5, "professional"),
}


# ---------------------------------------------------------------------------
# Layer 2 — Complementary attribute pairs (strategic matching)
# ---------------------------------------------------------------------------

COMPLEMENTARY_PAIRS: dict[str, tuple[str, ...]] = {
    # Industry
    "industry:technology": (
        "industry:finance", "industry:healthcare", "industry:consulting",
    ),
    "industry:finance": (
        "industry:technology", "industry:consulting", "industry:real-estate",
    ),
    "industry:healthcare": (
        "industry:technology", "industry:nonprofit", "industry:consulting",
    ),
    # Leadership level (mentorship)
    "leadershipLevel:c-suite": ("leadershipLevel:director", "leadershipLevel:vp"),
    "leadershipLevel:vp": ("leadershipLevel:c-suite", "leadershipLevel:manager"),
    "leadershipLevel:director": (
        "leadershipLevel:c-suite", "leadershipLevel:senior-executive",
    ),
    "leadershipLevel:manager": ("leadershipLevel:vp", "leadershipLevel:director"),
    "leadershipLevel:emerging": (
        "leadershipLevel:director", "leadershipLevel:vp", "leadershipLevel:manager",
    ),
    # Organization size
    "organizationSize:startup": (
        "organizationSize:enterprise", "organizationSize:large",
    ),
    "organizationSize:enterprise": (
        "organizationSize:startup", "organizationSize:small",
    ),
    # Decision style
    "decisionMakingStyle:decisive": (
        "decisionMakingStyle:collaborative", "decisionMakingStyle:thoughtful",
    ),
    "decisionMakingStyle:data-driven": (
        "decisionMakingStyle:decisive", "decisionMakingStyle:adaptive",
    ),
    "decisionMakingStyle:collaborative": (
        "decisionMakingStyle:decisive", "decisionMakingStyle:strategic",
    ),
    # Challenges <-> growth areas
    "leadershipChallenges:talent": (
        "growthAreas:teams", "leadershipPriorities:mentoring",
    ),
    "leadershipChallenges:change": (
        "growthAreas:change-mgmt", "leadershipPriorities:transformation",
    ),
    "leadershipChallenges:communication": (
        "growthAreas:storytelling", "growthAreas:presence",
    ),
}


# ---------------------------------------------------------------------------
# Immutable tables object
# ---------------------------------------------------------------------------

class AttributeConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    weight: float = Field(gt=0.0, le=1.0)
    category: CommonalityCategory


class ScoringTables(BaseModel):
    """Weight and complement tables plus the attribute allow-list.

    Keys outside the allow-list are ignored during extraction.  When
    ``allowed`` is ``None`` every attribute in the weight table is allowed.
    """

    model_config = ConfigDict(frozen=True)

    attributes: dict[str, AttributeConfig]
    complements: dict[str, tuple[str, ...]] = Field(default_factory=dict)
    allowed: frozenset[str] | None = None

    @property
    def allowed_attributes(self) -> frozenset[str]:
        known = frozenset(self.attributes)
        if self.allowed is None:
            return known
        return known & self.allowed

    def config_for(self, attribute: str) -> AttributeConfig | None:
        if attribute not in self.allowed_attributes:
            return None
        return self.attributes[attribute]

    def complements_for(self, key: str) -> tuple[str, ...]:
        return self.complements.get(key, ())


def build_tables(
    weights: dict[str, tuple[float, CommonalityCategory]],
    complements: dict[str, tuple[str, ...]] | None = None,
    allowed: set[str] | frozenset[str] | None = None,
) -> ScoringTables:
    return ScoringTables(
        attributes={
            name: AttributeConfig(weight=weight, category=category)
            for name, (weight, category) in weights.items()
        },
        complements=dict(complements or {}),
        allowed=frozenset(allowed) if allowed is not None else None,
    )


@lru_cache(maxsize=1)
def default_tables() -> ScoringTables:
    return build_tables(ATTRIBUTE_WEIGHTS, COMPLEMENTARY_PAIRS)
