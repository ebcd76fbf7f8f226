"""Per-session conversation state models.

:class:`ConversationState` is frozen; the conversation-state reducer
(``localscout.services.conversation_state``) produces a new instance per
turn via ``model_copy(update={...})``.  The state is owned by exactly one
session and is persisted by the session store between turns.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from localscout.models.intent import BrowseMode


class ConversationPhase(str, Enum):  # noqa: UP042
    """greeting -> browsing -> focused -> actioning."""

    GREETING = "greeting"
    BROWSING = "browsing"
    FOCUSED = "focused"
    ACTIONING = "actioning"


class TurnIntent(str, Enum):  # noqa: UP042
    COMPARE = "compare"
    LIST_ALL = "list_all"
    DETAILS = "details"
    SEARCH = "search"
    QUESTION = "question"


class FocusContext(str, Enum):  # noqa: UP042
    DETAILED_VIEW = "detailed_view"
    COMPARING = "comparing"


class FocalBusiness(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    business_id: str | None = None
    context_type: FocusContext = FocusContext.DETAILED_VIEW


class UserPreferences(BaseModel):
    """Preferences learned from user messages.  Lists have set semantics."""

    model_config = ConfigDict(frozen=True)

    dietary_restrictions: tuple[str, ...] = ()
    budget: str | None = None
    favorite_categories: tuple[str, ...] = ()
    avoid_categories: tuple[str, ...] = ()


class ConversationState(BaseModel):
    model_config = ConfigDict(frozen=True)

    current_business: FocalBusiness | None = None
    shown_businesses: tuple[str, ...] = ()
    shown_offers: tuple[str, ...] = ()
    preferences: UserPreferences = Field(default_factory=UserPreferences)
    phase: ConversationPhase = ConversationPhase.GREETING
    last_intent: TurnIntent | None = None
    message_count: int = Field(default=0, ge=0)
    last_browse_mode: BrowseMode | None = None
    browse_offset: int = Field(default=0, ge=0)


class ChatMessage(BaseModel):
    """One entry of the bounded conversation history."""

    model_config = ConfigDict(frozen=True)

    role: str = Field(pattern=r"^(user|assistant)$")
    content: str
