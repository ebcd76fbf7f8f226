"""Structured turn response returned to the request-handling layer.

The response carries the answer text plus typed payload arrays.  Which
arrays are populated is decided by the response assembler: business cards
only ever hold paid-tier businesses, while map pins span every tier.
"""

from __future__ import annotations

from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from localscout.models.business import BusinessTier
from localscout.models.intent import BrowseMode, HardStopKind, QueryComplexity
from localscout.models.ranking import ReasonMeta, ReasonTag, ResolutionMode


class UIMode(str, Enum):  # noqa: UP042
    CONVERSATIONAL = "conversational"
    SUGGESTIONS = "suggestions"
    MAP = "map"


class ModelTier(str, Enum):  # noqa: UP042
    CHEAP = "cheap"
    CAPABLE = "capable"
    NONE = "none"


class BusinessCard(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    tagline: str = ""
    category: str = ""
    tier: BusinessTier
    address: str = ""
    town: str = ""
    logo: str = ""
    images: list[str] = Field(default_factory=list)
    rating: float | None = None
    offers_count: int = 0
    reason: ReasonTag | None = None


class WalletAction(BaseModel):
    """An "add this offer to your wallet" action."""

    model_config = ConfigDict(frozen=True)

    type: str = "add_to_wallet"
    offer_id: str
    offer_name: str
    business_name: str
    business_id: str


class EventCard(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str = ""
    event_type: str = "Other"
    start_date: date
    start_time: str | None = None
    end_time: str | None = None
    location: str = "TBA"
    ticket_url: str | None = None
    image_url: str | None = None
    business_name: str = ""
    business_id: str


class MapPin(BaseModel):
    model_config = ConfigDict(frozen=True)

    business_id: str
    name: str
    latitude: float
    longitude: float
    tier: BusinessTier
    category: str = ""
    rating: float | None = None
    reason: ReasonTag | None = None
    meta: ReasonMeta = Field(default_factory=ReasonMeta)


class RoutingMetadata(BaseModel):
    """How the turn was handled; for logging and analytics, not for display."""

    model_config = ConfigDict(frozen=True)

    complexity: QueryComplexity | None = None
    classification_reason: str = ""
    model_tier: ModelTier = ModelTier.NONE
    model_name: str = ""
    hard_stop: HardStopKind | None = None
    browse_mode: BrowseMode = BrowseMode.NOT_BROWSE
    resolution_mode: ResolutionMode | None = None
    failed_sources: list[str] = Field(default_factory=list)


class ChatResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool = True
    message: str
    ui_mode: UIMode = UIMode.CONVERSATIONAL
    business_cards: list[BusinessCard] = Field(default_factory=list)
    wallet_actions: list[WalletAction] = Field(default_factory=list)
    event_cards: list[EventCard] = Field(default_factory=list)
    map_pins: list[MapPin] = Field(default_factory=list)
    routing: RoutingMetadata = Field(default_factory=RoutingMetadata)
    error_code: str | None = None
