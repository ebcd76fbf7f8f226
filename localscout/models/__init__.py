"""localScout domain models: re-exports all public model classes.

Submodules by concern:
    - business.py     : directory rows: businesses, offers, events
    - knowledge.py    : semantic-search snippets
    - intent.py       : intent, browse mode, facets, query classification
    - ranking.py      : scored candidates, reason tags, resolver output
    - conversation.py : per-session conversation state and history entries
    - response.py     : the structured turn response and its payloads
"""

from __future__ import annotations

from localscout.models.business import (
    TIERS_BY_PRIORITY,
    BusinessRecord,
    BusinessTier,
    Event,
    Offer,
)
from localscout.models.conversation import (
    ChatMessage,
    ConversationPhase,
    ConversationState,
    FocalBusiness,
    FocusContext,
    TurnIntent,
    UserPreferences,
)
from localscout.models.intent import (
    BrowseMode,
    FacetResult,
    HardStopKind,
    IntentResult,
    QueryClassification,
    QueryComplexity,
)
from localscout.models.knowledge import KnowledgeSnippet, KnowledgeType
from localscout.models.ranking import (
    InventoryResolution,
    ReasonMeta,
    ReasonTag,
    ReasonType,
    ResolutionMode,
    ScoredCandidate,
)
from localscout.models.response import (
    BusinessCard,
    ChatResponse,
    EventCard,
    MapPin,
    ModelTier,
    RoutingMetadata,
    UIMode,
    WalletAction,
)

__all__ = [
    "TIERS_BY_PRIORITY",
    "BrowseMode",
    "BusinessCard",
    "BusinessRecord",
    "BusinessTier",
    "ChatMessage",
    "ChatResponse",
    "ConversationPhase",
    "ConversationState",
    "Event",
    "EventCard",
    "FacetResult",
    "FocalBusiness",
    "FocusContext",
    "HardStopKind",
    "IntentResult",
    "InventoryResolution",
    "KnowledgeSnippet",
    "KnowledgeType",
    "MapPin",
    "ModelTier",
    "Offer",
    "QueryClassification",
    "QueryComplexity",
    "ReasonMeta",
    "ReasonTag",
    "ReasonType",
    "ResolutionMode",
    "RoutingMetadata",
    "ScoredCandidate",
    "TurnIntent",
    "UIMode",
    "UserPreferences",
    "WalletAction",
]
