"""Pydantic v2 data models — the data contracts flowing through the engine."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from src.leadermatch.config import settings


# ---------------------------------------------------------------------------
# Type aliases
# ---------------------------------------------------------------------------

CommonalityCategory = Literal["professional", "hobby", "lifestyle", "values"]

MatchType = Literal["high-affinity", "strategic"]

MatchSource = Literal["attributes", "embeddings"]

AttributeValue = str | int | float | list[str] | None

# Sparse questionnaire answers, keyed by questionnaire field name.
AttributeRecord = dict[str, AttributeValue]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Itemsets and explanations
# ---------------------------------------------------------------------------

class AttributeItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: CommonalityCategory
    attribute: str
    value: str
    weight: float

    @property
    def key(self) -> str:
        return f"{self.attribute}:{self.value}"


class Commonality(BaseModel):
    category: CommonalityCategory
    description: str
    weight: float


# ---------------------------------------------------------------------------
# Users and profiles
# ---------------------------------------------------------------------------

class PublicProfile(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    position: str | None = None
    title: str | None = None
    company: str | None = None
    bio: str | None = None
    location: str | None = None
    photo_url: str | None = None


class CandidateUser(BaseModel):
    """A user as seen by the selector: public profile plus questionnaire answers."""

    id: str
    profile: PublicProfile
    responses: AttributeRecord = Field(default_factory=dict)
    embedding: list[float] | None = None


class MatchedUser(BaseModel):
    id: str
    profile: PublicProfile
    questionnaire_completed: bool = True


class EmbeddingProfile(BaseModel):
    name: str | None = None
    bio: str | None = None
    position: str | None = None
    title: str | None = None
    company: str | None = None
    location: str | None = None
    age: int | None = None
    interests: list[str] = Field(default_factory=list)
    questionnaire_data: dict[str, Any] | None = None


# ---------------------------------------------------------------------------
# Scoring / output types
# ---------------------------------------------------------------------------

class MatchScore(BaseModel):
    total_score: float = 0.0
    affinity_score: float = 0.0
    strategic_score: float = 0.0
    commonalities: list[Commonality] = Field(default_factory=list)


class MatchCandidate(BaseModel):
    user: CandidateUser
    score: float
    affinity_score: float
    strategic_score: float
    commonalities: list[Commonality] = Field(default_factory=list)
    match_type: MatchType


class Match(BaseModel):
    id: str
    user_id: str
    matched_user_id: str
    matched_user: MatchedUser
    type: MatchType
    commonalities: list[Commonality] = Field(default_factory=list)
    conversation_starters: list[str] = Field(default_factory=list)
    score: float = Field(ge=0.0, le=1.0)
    generated_at: datetime = Field(default_factory=_utcnow)
    viewed: bool = False
    passed: bool = False


class SelectionOptions(BaseModel):
    max_high_affinity: int = Field(
        default_factory=lambda: settings.selection.max_high_affinity,
    )
    max_strategic: int = Field(
        default_factory=lambda: settings.selection.max_strategic,
    )
    min_score: float = Field(default_factory=lambda: settings.selection.min_score)
    exclude_ids: list[str] = Field(default_factory=list)


class MatchQualityMetrics(BaseModel):
    average_score: float = 0.0
    high_affinity_count: int = 0
    strategic_count: int = 0
    category_distribution: dict[str, int] = Field(default_factory=dict)


class SemanticMatch(BaseModel):
    user_id: str
    similarity: float
    match_type: MatchType


class MatchReport(BaseModel):
    user_id: str
    matches: list[Match] = Field(default_factory=list)
    metrics: MatchQualityMetrics = Field(default_factory=MatchQualityMetrics)
    source: MatchSource = "attributes"
    generated_at: datetime = Field(default_factory=_utcnow)


class BatchResult(BaseModel):
    processed: int = 0
    failed: int = 0
    total: int = 0


class ConversationContext(BaseModel):
    user_name: str
    match_name: str
    match_type: MatchType
    commonalities: list[str] = Field(default_factory=list)
    match_position: str | None = None
    match_company: str | None = None
