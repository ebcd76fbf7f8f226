"""Integration tests for the discovery turn pipeline.

The real resolver, assembler and in-memory session store run against the
mock directory store; only the completion provider is mocked.
"""

from __future__ import annotations

import asyncio
from datetime import date, datetime
from unittest.mock import AsyncMock, MagicMock
from zoneinfo import ZoneInfo

import pytest

from conftest import OLYMPUS_ID
from localscout.interfaces.completion_provider import ICompletionProvider
from localscout.models.conversation import ConversationPhase
from localscout.models.intent import BrowseMode, HardStopKind
from localscout.models.ranking import ResolutionMode
from localscout.models.response import ModelTier, UIMode
from localscout.pipeline.orchestrator import (
    COMPLETION_FAILED_MESSAGE,
    SERVICE_UNAVAILABLE_MESSAGE,
    DiscoveryChatPipeline,
    enhance_query,
)
from localscout.pipeline.provider_factory import CompletionProviderFactory
from localscout.providers.session.memory_session_store import MemorySessionStore
from localscout.services.conversation_state import create_initial_state, update_conversation_state
from localscout.services.inventory_resolver import InventoryResolver
from localscout.services.response_assembler import OFFERS_EMPTY_MESSAGE
from localscout.utils.errors import CompletionError, ConfigurationError, ValidationError


def _monday_noon(tz: str) -> datetime:
    return datetime(2026, 10, 19, 12, 0, tzinfo=ZoneInfo(tz))


@pytest.fixture
def provider() -> MagicMock:
    mock = MagicMock(spec=ICompletionProvider)
    mock.complete = AsyncMock(return_value="Olympus Taverna does a great mezze, and Zorba's Kitchen is lovely too.")
    mock.get_model_name.return_value = "gpt-4o-mini"
    mock.get_provider_name.return_value = "openai"
    return mock


@pytest.fixture
def factory(provider) -> MagicMock:
    mock = MagicMock(spec=CompletionProviderFactory)
    mock.build.return_value = provider
    return mock


@pytest.fixture
def sessions() -> MemorySessionStore:
    return MemorySessionStore(history_window_turns=4)


@pytest.fixture
def pipeline(tenant, mock_store, sessions, factory) -> DiscoveryChatPipeline:
    return DiscoveryChatPipeline(
        tenants={"Bournemouth": tenant},
        business_store=mock_store,
        session_store=sessions,
        resolver=InventoryResolver(mock_store),
        provider_factory=factory,
        clock=_monday_noon,
    )


class TestDiscoveryTurn:
    async def test_greek_turn(self, pipeline, factory, provider, sessions, tenant) -> None:
        response = await pipeline.handle_turn("s1", "greek food please", "bournemouth")

        assert response.success is True
        assert response.ui_mode is UIMode.CONVERSATIONAL
        assert [card.id for card in response.business_cards] == [OLYMPUS_ID]
        assert len(response.map_pins) == 6
        assert response.routing.model_tier is ModelTier.CHEAP
        assert response.routing.model_name == "gpt-4o-mini"
        assert response.routing.resolution_mode is ResolutionMode.INTENT
        factory.build.assert_called_once_with(tenant, ModelTier.CHEAP)

        system_prompt, history, message = provider.complete.call_args.args
        assert "Olympus Taverna" in system_prompt
        assert history == []
        assert message == "greek food please"

        state, saved_history = await sessions.load("s1")
        assert state.phase is ConversationPhase.BROWSING
        assert "Olympus Taverna" in state.shown_businesses
        assert [m.role for m in saved_history] == ["user", "assistant"]

    async def test_history_is_passed_on_next_turn(self, pipeline, provider) -> None:
        await pipeline.handle_turn("s1", "greek food please", "bournemouth")
        await pipeline.handle_turn("s1", "which one is better for kids?", "bournemouth")

        history = provider.complete.call_args.args[1]
        assert [m.content for m in history][:1] == ["greek food please"]

    async def test_complex_query_uses_capable_model(self, pipeline, factory, tenant) -> None:
        await pipeline.handle_turn("s1", "which is nicer for kids, Olympus or Zorba's", "bournemouth")
        factory.build.assert_called_once_with(tenant, ModelTier.CAPABLE)

    async def test_offer_question_with_qualifier_targets_top_result(self, pipeline, mock_store) -> None:
        response = await pipeline.handle_turn("s1", "any greek deals?", "bournemouth")

        assert response.routing.hard_stop is None
        mock_store.fetch_offers.assert_awaited_once_with("bournemouth", business_ids=[OLYMPUS_ID], limit=10)
        assert response.wallet_actions

    async def test_browse_then_more(self, pipeline, sessions) -> None:
        first = await pipeline.handle_turn("s1", "show me all restaurants", "bournemouth")
        assert first.ui_mode is UIMode.SUGGESTIONS
        assert first.business_cards == []

        state, _ = await sessions.load("s1")
        assert state.last_browse_mode is BrowseMode.BROWSE
        assert state.browse_offset == 3

        more = await pipeline.handle_turn("s1", "more", "bournemouth")
        assert more.routing.browse_mode is BrowseMode.BROWSE_MORE

    async def test_fallback_is_recorded_as_browse(self, pipeline, sessions) -> None:
        response = await pipeline.handle_turn("s1", "sushi", "bournemouth")
        assert response.routing.resolution_mode is ResolutionMode.FALLBACK_BROWSE

        state, _ = await sessions.load("s1")
        assert state.last_browse_mode is BrowseMode.BROWSE


class TestHardStops:
    async def test_offers_hard_stop_skips_completion(self, pipeline, factory, provider, offers) -> None:
        response = await pipeline.handle_turn("s1", "any deals?", "bournemouth")

        assert response.routing.hard_stop is HardStopKind.OFFERS
        assert len(response.wallet_actions) == len(offers)
        assert response.business_cards == []
        factory.build.assert_not_called()
        provider.complete.assert_not_awaited()

    async def test_events_hard_stop_uses_detected_date(self, pipeline, mock_store, factory) -> None:
        response = await pipeline.handle_turn("s1", "what's on tomorrow?", "bournemouth")

        assert response.routing.hard_stop is HardStopKind.EVENTS
        mock_store.fetch_events.assert_awaited_once_with("bournemouth", on_date=date(2026, 10, 20), limit=5)
        assert len(response.event_cards) == 2
        factory.build.assert_not_called()

    async def test_events_without_date_start_today(self, pipeline, mock_store) -> None:
        await pipeline.handle_turn("s1", "any events on?", "bournemouth")
        mock_store.fetch_events.assert_awaited_once_with("bournemouth", from_date=date(2026, 10, 19), limit=5)

    async def test_failed_source_gives_empty_answer(self, pipeline, mock_store) -> None:
        mock_store.fetch_offers.side_effect = RuntimeError("db locked")
        response = await pipeline.handle_turn("s1", "any deals?", "bournemouth")

        assert response.success is True
        assert response.wallet_actions == []
        assert response.routing.failed_sources == ["offers"]

    async def test_no_offers_gives_fixed_empty_answer(self, pipeline, mock_store, factory, provider) -> None:
        mock_store.fetch_offers.return_value = []
        response = await pipeline.handle_turn("s1", "any deals?", "bournemouth")

        assert response.routing.hard_stop is HardStopKind.OFFERS
        assert response.message == OFFERS_EMPTY_MESSAGE
        assert response.business_cards == []
        assert response.wallet_actions == []
        assert response.routing.failed_sources == []
        factory.build.assert_not_called()
        provider.complete.assert_not_awaited()


class TestFailures:
    async def test_empty_message(self, pipeline) -> None:
        with pytest.raises(ValidationError):
            await pipeline.handle_turn("s1", "   ", "bournemouth")

    async def test_unknown_city(self, pipeline, factory) -> None:
        response = await pipeline.handle_turn("s1", "greek food", "atlantis")

        assert response.success is False
        assert response.error_code == "service_unavailable"
        assert response.message == SERVICE_UNAVAILABLE_MESSAGE
        factory.build.assert_not_called()

    async def test_misconfigured_tenant(self, pipeline, factory, sessions) -> None:
        factory.build.side_effect = ConfigurationError(message="no key", provider_name="openai")
        response = await pipeline.handle_turn("s1", "greek food", "bournemouth")

        assert response.error_code == "service_unavailable"
        assert "no key" not in response.message
        _, history = await sessions.load("s1")
        assert history == []

    async def test_completion_error(self, pipeline, provider) -> None:
        provider.complete.side_effect = CompletionError(message="boom", provider_name="openai")
        response = await pipeline.handle_turn("s1", "greek food", "bournemouth")

        assert response.success is False
        assert response.error_code == "completion_failed"
        assert response.message == COMPLETION_FAILED_MESSAGE
        assert response.routing.model_tier is ModelTier.CHEAP

    async def test_completion_timeout(self, tenant, mock_store, sessions, factory, provider) -> None:
        async def _slow(*args, **kwargs) -> str:
            await asyncio.sleep(1)
            return "too late"

        provider.complete.side_effect = _slow
        impatient = tenant.model_copy(update={"completion_timeout_seconds": 0.05})
        pipeline = DiscoveryChatPipeline(
            tenants={"bournemouth": impatient},
            business_store=mock_store,
            session_store=sessions,
            resolver=InventoryResolver(mock_store),
            provider_factory=factory,
            clock=_monday_noon,
        )

        response = await pipeline.handle_turn("s1", "greek food", "bournemouth")
        assert response.error_code == "completion_failed"


class TestBusinessDetails:
    async def test_found(self, pipeline) -> None:
        business = await pipeline.get_business_details(OLYMPUS_ID)
        assert business is not None
        assert business.name == "Olympus Taverna"

    async def test_invalid_id_never_reaches_store(self, pipeline, mock_store) -> None:
        with pytest.raises(ValidationError):
            await pipeline.get_business_details("1; DROP TABLE businesses")
        mock_store.get_business.assert_not_awaited()


class TestEnhanceQuery:
    def test_pronoun_follow_up_gets_focal_name(self) -> None:
        state = update_conversation_state(
            create_initial_state(), "tell me about Olympus Taverna", "Sure.", ["Olympus Taverna"]
        )
        assert enhance_query("do they do vegan?", state) == "Olympus Taverna do they do vegan?"

    def test_no_focus_leaves_query(self) -> None:
        assert enhance_query("do they do vegan?", create_initial_state()) == "do they do vegan?"
