"""Ranking models: scored candidates, reason tags and resolver output.

A :class:`ScoredCandidate` wraps one :class:`BusinessRecord` with everything
the current turn learned about it (relevance, semantic evidence, distance,
offer count, reason tag).  Candidates are frozen; each resolver stage
derives new ones via ``model_copy(update=...)``.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from localscout.models.business import BusinessRecord
from localscout.models.knowledge import KnowledgeSnippet


class ReasonType(str, Enum):  # noqa: UP042
    PICK = "pick"
    FEATURED = "featured"
    PERFECT_RATING = "perfect_rating"
    HIGHEST_RATED = "highest_rated"
    MOST_REVIEWED = "most_reviewed"
    CLOSEST = "closest"
    VERY_CLOSE = "very_close"
    TOP_RATED = "top_rated"
    HIGHLY_RATED = "highly_rated"
    HIDDEN_GEM = "hidden_gem"
    OPEN_NOW = "open_now"
    WELL_RATED = "well_rated"
    CATEGORY_MATCH = "category_match"
    GENERIC = "generic"


class ReasonTag(BaseModel):
    """The single "why is this shown" label for one business in one turn."""

    model_config = ConfigDict(frozen=True)

    type: ReasonType
    label: str


class ReasonMeta(BaseModel):
    """Secondary decoration shown next to the reason tag.

    Always well-formed: missing hours, location or rating degrade to
    ``False``/``None`` rather than to a missing object.
    """

    model_config = ConfigDict(frozen=True)

    is_open_now: bool = False
    distance_meters: int | None = None
    rating_badge: str | None = None


class ScoredCandidate(BaseModel):
    model_config = ConfigDict(frozen=True)

    business: BusinessRecord
    relevance_score: float = Field(default=0.0, ge=0.0)
    similarity: float | None = None
    knowledge_text: str = ""
    distance_meters: float | None = None
    offers_count: int = 0
    reason: ReasonTag | None = None
    meta: ReasonMeta = Field(default_factory=ReasonMeta)

    @property
    def id(self) -> str:
        return self.business.id

    @property
    def name(self) -> str:
        return self.business.name


class ResolutionMode(str, Enum):  # noqa: UP042
    BROWSE = "browse"
    INTENT = "intent"
    FALLBACK_BROWSE = "fallback_browse"


class InventoryResolution(BaseModel):
    """Resolver output for one turn.

    ``primary`` is the answer set in display order; ``more_options`` holds
    relevant lower-tier matches offered as a secondary list;
    ``all_candidates`` is every deduplicated, annotated candidate (the map
    view exposes all of them).
    """

    model_config = ConfigDict(frozen=True)

    mode: ResolutionMode
    primary: list[ScoredCandidate] = Field(default_factory=list)
    more_options: list[ScoredCandidate] = Field(default_factory=list)
    all_candidates: list[ScoredCandidate] = Field(default_factory=list)
    knowledge: list[KnowledgeSnippet] = Field(default_factory=list)
    next_browse_offset: int = 0
    failed_sources: list[str] = Field(default_factory=list)
