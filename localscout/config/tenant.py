"""Per-tenant (per-city) configuration objects.

A tenant is one city deployment of the assistant.  Each turn is served with
the :class:`TenantConfig` of the city it belongs to, and every completion
client is built from that object at call time, so two cities with different
API keys never share a client.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class RankingConfig(BaseModel):
    """Thresholds that drive tiered inventory resolution."""

    model_config = ConfigDict(frozen=True)

    browse_page_size: int = Field(default=8, ge=1)
    relevance_floor: float = Field(default=2.0, ge=0)
    strong_match_floor: float = Field(default=3.0, ge=0)
    min_relevant_top_tier: int = Field(default=2, ge=1)
    supplementary_cap: int = Field(default=2, ge=0)
    primary_cap: int = Field(default=5, ge=1)
    similarity_threshold: float = Field(default=0.70, ge=0, lt=1)
    semantic_match_count: int = Field(default=12, ge=1)
    semantic_match_count_list_all: int = Field(default=30, ge=1)
    semantic_match_threshold: float | None = Field(default=None, ge=0, le=1)
    closest_cap_meters: float = Field(default=2000.0, gt=0)


class TenantConfig(BaseModel):
    """Everything needed to serve one city."""

    model_config = ConfigDict(frozen=True)

    city: str = Field(description="Canonical lowercase city key, e.g. 'bournemouth'.")
    display_name: str = ""
    timezone: str = "UTC"
    completion_provider: str = "openai"
    openai_api_key: str = ""
    openai_base_url: str = ""
    anthropic_api_key: str = ""
    cheap_model: str = ""
    capable_model: str = ""
    completion_timeout_seconds: float = Field(default=20.0, gt=0)
    temperature: float = Field(default=0.7, ge=0, le=2)
    max_tokens: int = Field(default=500, ge=1)
    ranking: RankingConfig = Field(default_factory=RankingConfig)

    @property
    def label(self) -> str:
        return self.display_name or self.city.title()
