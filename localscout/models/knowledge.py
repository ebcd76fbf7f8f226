"""Semantic-search result model.

Snippets are produced per query by the semantic search provider and are
never persisted by the engine.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class KnowledgeType(str, Enum):  # noqa: UP042
    MENU = "menu"
    OFFER = "offer"
    EVENT = "event"
    GENERIC = "generic"


class KnowledgeSnippet(BaseModel):
    """A piece of free-text knowledge returned by semantic search.

    ``business_id`` is ``None`` for city-wide knowledge (local guides,
    transport notes) that belongs to no single business.
    """

    model_config = ConfigDict(frozen=True)

    business_id: str | None = None
    business_name: str = ""
    title: str = ""
    content: str
    similarity: float = Field(ge=0.0, le=1.0)
    knowledge_type: KnowledgeType = KnowledgeType.GENERIC
