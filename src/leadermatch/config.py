"""Configuration — providers, score weights, selection defaults, cache TTLs."""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


class ScoreWeights(BaseModel):
    affinity: float = Field(default=0.6, ge=0.0, le=1.0)
    strategic: float = Field(default=0.4, ge=0.0, le=1.0)
    complement_factor: float = Field(default=0.8, ge=0.0, le=1.0)


class SelectionDefaults(BaseModel):
    max_high_affinity: int = 3
    max_strategic: int = 3
    min_score: float = 0.15
    diversity_cap: int = 6
    recency_window_days: int = 30


class CacheTTLSettings(BaseModel):
    """Per-domain time-to-live values, in seconds."""

    filter_options: float = 30 * 60
    questionnaire_sections: float = 60 * 60
    user_profile: float = 5 * 60
    matches: float = 10 * 60
    network: float = 10 * 60
    calendar_events: float = 3 * 60


class Settings(BaseSettings):
    ai_provider: str = "openai"  # "openai" | "local"

    openai_api_key: str = ""
    openai_embedding_model: str = "text-embedding-3-small"
    embedding_dimensions: int = 768
    local_embedding_model: str = "all-MiniLM-L6-v2"

    anthropic_api_key: str = ""
    anthropic_model: str = "claude-sonnet-4-20250514"
    anthropic_fast_model: str = "claude-3-haiku-20240307"

    score_weights: ScoreWeights = ScoreWeights()
    selection: SelectionDefaults = SelectionDefaults()

    default_cache_ttl: float = 5 * 60
    cache_ttls: CacheTTLSettings = CacheTTLSettings()

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
