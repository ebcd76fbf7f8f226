"""Query-understanding models: intent, browse mode, facets, routing class."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class BrowseMode(str, Enum):  # noqa: UP042
    BROWSE = "browse"
    BROWSE_MORE = "browse_more"
    NOT_BROWSE = "not_browse"

    @property
    def is_browsing(self) -> bool:
        return self is not BrowseMode.NOT_BROWSE


class IntentResult(BaseModel):
    """What the user asked for, as canonical strings.

    ``has_intent`` is derived, never stored: a result without categories or
    keywords has no intent, and the scorer then relies on semantic evidence
    alone.
    """

    model_config = ConfigDict(frozen=True)

    categories: tuple[str, ...] = ()
    keywords: tuple[str, ...] = ()
    negated_categories: tuple[str, ...] = ()
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)

    @property
    def has_intent(self) -> bool:
        return bool(self.categories or self.keywords)


class FacetResult(BaseModel):
    """High-signal boolean facets detected in a query."""

    model_config = ConfigDict(frozen=True)

    alcohol: bool = False

    @property
    def active_facets(self) -> tuple[str, ...]:
        return tuple(name for name in ("alcohol",) if getattr(self, name))

    @property
    def any_active(self) -> bool:
        return bool(self.active_facets)


class QueryComplexity(str, Enum):  # noqa: UP042
    SIMPLE = "simple"
    COMPLEX = "complex"


class QueryClassification(BaseModel):
    model_config = ConfigDict(frozen=True)

    complexity: QueryComplexity
    reason: str
    confidence: float = Field(ge=0.0, le=1.0)


class HardStopKind(str, Enum):  # noqa: UP042
    """Database-authoritative query kinds answered without the completion service."""

    OFFERS = "offers"
    EVENTS = "events"
