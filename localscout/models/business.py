"""Directory data models: businesses, offers and events.

These mirror the rows of the structured business store.  The store (not
the engine) decides which commercial tier a business is in; the engine only
reads ``tier`` and never infers it.  All models are frozen -- a record is
a snapshot of the directory for the current turn.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from localscout.utils.geo import LatLng, normalize_location


class BusinessTier(str, Enum):  # noqa: UP042
    """Commercial status of a directory entry.

    ``paid`` businesses rank first and are the only ones rendered as visual
    cards; ``claimed_free`` come next; ``unclaimed`` (public listings) last.
    """

    PAID = "paid"
    CLAIMED_FREE = "claimed_free"
    UNCLAIMED = "unclaimed"

    @property
    def priority(self) -> int:
        """Lower is shown first: paid=0 < claimed_free=1 < unclaimed=2."""
        return _TIER_PRIORITY[self]

    @property
    def is_commercial(self) -> bool:
        return self is not BusinessTier.UNCLAIMED


_TIER_PRIORITY: dict[BusinessTier, int] = {
    BusinessTier.PAID: 0,
    BusinessTier.CLAIMED_FREE: 1,
    BusinessTier.UNCLAIMED: 2,
}

TIERS_BY_PRIORITY: tuple[BusinessTier, ...] = (
    BusinessTier.PAID,
    BusinessTier.CLAIMED_FREE,
    BusinessTier.UNCLAIMED,
)


class BusinessRecord(BaseModel):
    """One directory entry as seen by the ranking engine."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    city: str = ""
    tier: BusinessTier = BusinessTier.UNCLAIMED
    # Three forms of category: as imported, the normalised system value,
    # and the label shown to users.
    raw_category: str = ""
    system_category: str = ""
    display_category: str = ""
    tagline: str = ""
    description: str = ""
    latitude: float | None = None
    longitude: float | None = None
    rating: float | None = Field(default=None, ge=0, le=5)
    review_count: int = Field(default=0, ge=0)
    # Weekday map ({"monday": {"open": "09:00", "close": "17:00"}}) or free text.
    opening_hours: dict[str, Any] | str | None = None
    address: str = ""
    town: str = ""
    phone: str = ""
    website: str = ""
    logo: str = ""
    images: list[str] = Field(default_factory=list)

    @property
    def tier_priority(self) -> int:
        return self.tier.priority

    @property
    def coordinates(self) -> LatLng | None:
        return normalize_location({"latitude": self.latitude, "longitude": self.longitude})

    def category_text(self) -> str:
        """All category forms joined and lowercased, for keyword checks."""
        parts = (self.display_category, self.system_category, self.raw_category)
        return " ".join(p for p in parts if p).lower()

    @property
    def category_label(self) -> str:
        return self.display_category or self.system_category or self.raw_category or "Business"


class Offer(BaseModel):
    """An approved offer from the authoritative offers table."""

    model_config = ConfigDict(frozen=True)

    id: str
    business_id: str
    business_name: str = ""
    name: str
    value: str = ""
    status: str = "approved"
    city: str = ""


class Event(BaseModel):
    """An approved event from the authoritative events table."""

    model_config = ConfigDict(frozen=True)

    id: str
    business_id: str
    business_name: str = ""
    title: str
    description: str = ""
    event_type: str = "Other"
    event_date: date
    start_time: str | None = None
    end_time: str | None = None
    location: str = ""
    ticket_url: str | None = None
    image_url: str | None = None
    status: str = "approved"
    city: str = ""
