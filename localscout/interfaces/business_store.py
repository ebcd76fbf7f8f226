"""Abstract base class for the structured business store.

The store exposes three tier-scoped read views keyed by city plus the
authoritative offers and events tables.  Eligibility (which tier a business
is in, which offers are approved) is decided by the store; the engine
trusts it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date

from localscout.models.business import BusinessRecord, BusinessTier, Event, Offer


# Concrete implementation: SQLiteBusinessStore
# Located in: localscout/providers/store/
class IBusinessStore(ABC):
    """Contract for directory reads used by the discovery engine."""

    @abstractmethod
    async def fetch_tier(self, city: str, tier: BusinessTier) -> list[BusinessRecord]:
        """Return every eligible business of *tier* in *city*.

        Raises
        ------
        localscout.utils.errors.DataSourceError
            If the read fails.
        """

    @abstractmethod
    async def fetch_offers(
        self,
        city: str,
        business_ids: list[str] | None = None,
        limit: int = 10,
    ) -> list[Offer]:
        """Return approved offers in *city*, optionally for specific businesses."""

    @abstractmethod
    async def count_offers(self, city: str) -> dict[str, int]:
        """Return approved-offer counts keyed by business id."""

    @abstractmethod
    async def fetch_events(
        self,
        city: str,
        on_date: date | None = None,
        from_date: date | None = None,
        limit: int = 5,
    ) -> list[Event]:
        """Return approved events in *city*, soonest first.

        Parameters
        ----------
        on_date:
            Only events on this exact date.
        from_date:
            Only events on or after this date (ignored when *on_date* is set).
        limit:
            Maximum number of events.
        """

    @abstractmethod
    async def get_business(self, business_id: str) -> BusinessRecord | None:
        """Return one business by id, or ``None`` when it does not exist."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short provider identifier, e.g. ``"sqlite"``."""
