"""Shared pytest fixtures for the localScout test suite."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock
from zoneinfo import ZoneInfo

import pytest

from localscout.config.tenant import RankingConfig, TenantConfig
from localscout.interfaces.business_store import IBusinessStore
from localscout.models.business import BusinessRecord, BusinessTier, Event, Offer
from localscout.models.ranking import ScoredCandidate

OLYMPUS_ID = "11111111-1111-4111-8111-111111111111"
LUIGIS_ID = "22222222-2222-4222-8222-222222222222"
SEAFRONT_ID = "33333333-3333-4333-8333-333333333333"
ZORBAS_ID = "44444444-4444-4444-8444-444444444444"
ANCHOR_ID = "55555555-5555-4555-8555-555555555555"
CRUMBS_ID = "66666666-6666-4666-8666-666666666666"


def make_business(name: str, tier: BusinessTier = BusinessTier.UNCLAIMED, **overrides: Any) -> BusinessRecord:
    """Build a BusinessRecord with a deterministic id derived from *name*."""
    values: dict[str, Any] = {
        "id": overrides.pop("id", f"id-{name.lower().replace(' ', '-')}"),
        "name": name,
        "city": "bournemouth",
        "tier": tier,
    }
    values.update(overrides)
    return BusinessRecord(**values)


def make_candidate(business: BusinessRecord, **overrides: Any) -> ScoredCandidate:
    return ScoredCandidate(business=business, **overrides)


# ---------------------------------------------------------------------------
# Directory data
# ---------------------------------------------------------------------------


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def directory_fixture_path(project_root: Path) -> Path:
    return project_root / "tests" / "fixtures" / "bournemouth_directory.json"


@pytest.fixture
def directory_payload(directory_fixture_path: Path) -> dict[str, Any]:
    with directory_fixture_path.open(encoding="utf-8") as fh:
        return json.load(fh)


@pytest.fixture
def businesses(directory_payload: dict[str, Any]) -> dict[str, BusinessRecord]:
    """Fixture businesses keyed by name, with lowercase cities as the store returns them."""
    records = [
        BusinessRecord.model_validate({**b, "city": b["city"].lower()})
        for b in directory_payload["businesses"]
    ]
    return {r.name: r for r in records}


@pytest.fixture
def offers(directory_payload: dict[str, Any], businesses: dict[str, BusinessRecord]) -> list[Offer]:
    names = {b.id: b.name for b in businesses.values()}
    return [
        Offer.model_validate({**o, "business_name": names[o["business_id"]]})
        for o in directory_payload["offers"]
    ]


@pytest.fixture
def events(directory_payload: dict[str, Any], businesses: dict[str, BusinessRecord]) -> list[Event]:
    names = {b.id: b.name for b in businesses.values()}
    return [
        Event.model_validate({**e, "business_name": names[e["business_id"]]})
        for e in directory_payload["events"]
    ]


@pytest.fixture
def mock_store(
    businesses: dict[str, BusinessRecord],
    offers: list[Offer],
    events: list[Event],
) -> MagicMock:
    """A mock IBusinessStore serving the fixture directory."""

    async def _fetch_tier(city: str, tier: BusinessTier) -> list[BusinessRecord]:
        return [b for b in businesses.values() if b.tier is tier]

    async def _get_business(business_id: str) -> BusinessRecord | None:
        return next((b for b in businesses.values() if b.id == business_id), None)

    store = MagicMock(spec=IBusinessStore)
    store.fetch_tier = AsyncMock(side_effect=_fetch_tier)
    store.count_offers = AsyncMock(return_value={OLYMPUS_ID: 1, SEAFRONT_ID: 1})
    store.fetch_offers = AsyncMock(return_value=offers)
    store.fetch_events = AsyncMock(return_value=events)
    store.get_business = AsyncMock(side_effect=_get_business)
    store.get_provider_name = MagicMock(return_value="mock")
    return store


# ---------------------------------------------------------------------------
# Tenants and clock
# ---------------------------------------------------------------------------


@pytest.fixture
def tenant() -> TenantConfig:
    return TenantConfig(
        city="bournemouth",
        display_name="Bournemouth",
        timezone="Europe/London",
        completion_provider="openai",
        openai_api_key="sk-test",
        cheap_model="gpt-4o-mini",
        capable_model="gpt-4o",
        completion_timeout_seconds=5.0,
        ranking=RankingConfig(),
    )


@pytest.fixture
def fixed_now() -> datetime:
    """Monday 19 October 2026, 13:00 in Bournemouth."""
    return datetime(2026, 10, 19, 13, 0, tzinfo=ZoneInfo("Europe/London"))


@pytest.fixture
def mock_config() -> dict[str, Any]:
    """Return a minimal configuration mapping as produced by load_config."""
    return {
        "app": {"name": "localScout", "version": "0.1.0"},
        "ranking": {"browse_page_size": 8, "primary_cap": 5},
        "tenants": [
            {
                "city": "Bournemouth",
                "display_name": "Bournemouth",
                "timezone": "Europe/London",
                "cheap_model": "gpt-4o-mini",
                "capable_model": "gpt-4o",
            },
            {
                "city": "christchurch",
                "completion_provider": "anthropic",
                "cheap_model": "claude-3-5-haiku-latest",
                "capable_model": "claude-sonnet-4-20250514",
                "ranking": {"browse_page_size": 6},
            },
        ],
    }
