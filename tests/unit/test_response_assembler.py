"""Unit tests for localscout.services.response_assembler."""

from __future__ import annotations

import pytest

from conftest import ANCHOR_ID, LUIGIS_ID, OLYMPUS_ID, make_candidate
from localscout.models.business import BusinessTier
from localscout.models.intent import BrowseMode, HardStopKind
from localscout.models.ranking import InventoryResolution, ReasonTag, ReasonType, ResolutionMode
from localscout.models.response import RoutingMetadata, UIMode
from localscout.services.response_assembler import (
    ALSO_WORTH_PREFIX,
    EVENTS_EMPTY_MESSAGE,
    MORE_OPTIONS_PREFIX,
    OFFERS_EMPTY_MESSAGE,
    OFFERS_FOUND_MESSAGE,
    ResponseAssembler,
    classify_ui_mode,
    map_pins_for,
)

_TOP = ReasonTag(type=ReasonType.TOP_RATED, label="Top rated nearby")
_PICK = ReasonTag(type=ReasonType.PICK, label="Pick")


@pytest.fixture
def assembler() -> ResponseAssembler:
    return ResponseAssembler()


@pytest.fixture
def candidates(businesses):
    return {
        name: make_candidate(record, reason=_PICK if record.tier is BusinessTier.PAID else _TOP)
        for name, record in businesses.items()
    }


@pytest.fixture
def greek_resolution(candidates) -> InventoryResolution:
    return InventoryResolution(
        mode=ResolutionMode.INTENT,
        primary=[candidates["Olympus Taverna"], candidates["Zorba's Kitchen"]],
        all_candidates=list(candidates.values()),
    )


class TestClassifyUiMode:
    def test_map_request_wins(self) -> None:
        assert classify_ui_mode("show all pubs on a map", BrowseMode.BROWSE) is UIMode.MAP

    def test_browse_is_suggestions(self) -> None:
        assert classify_ui_mode("show me everything", BrowseMode.BROWSE) is UIMode.SUGGESTIONS

    def test_default_is_conversational(self) -> None:
        assert classify_ui_mode("greek food", BrowseMode.NOT_BROWSE) is UIMode.CONVERSATIONAL


class TestAssemble:
    def test_only_paid_candidates_become_cards(self, assembler, greek_resolution) -> None:
        response = assembler.assemble(
            "greek food",
            "Olympus Taverna does a lovely mezze.",
            greek_resolution,
            BrowseMode.NOT_BROWSE,
            RoutingMetadata(),
        )

        assert response.success is True
        assert [card.id for card in response.business_cards] == [OLYMPUS_ID]
        assert response.business_cards[0].offers_count == 0
        assert f"{ALSO_WORTH_PREFIX} Zorba's Kitchen (Top rated nearby)" in response.message

    def test_businesses_already_named_are_not_repeated(self, assembler, greek_resolution) -> None:
        response = assembler.assemble(
            "greek food",
            "Olympus Taverna or Zorba's Kitchen are both great.",
            greek_resolution,
            BrowseMode.NOT_BROWSE,
            RoutingMetadata(),
        )
        assert ALSO_WORTH_PREFIX not in response.message

    def test_more_options_listed(self, assembler, candidates) -> None:
        resolution = InventoryResolution(
            mode=ResolutionMode.INTENT,
            primary=[candidates["Olympus Taverna"]],
            more_options=[candidates["The Anchor"]],
        )
        response = assembler.assemble(
            "somewhere for dinner", "Try Olympus Taverna.", resolution, BrowseMode.NOT_BROWSE, RoutingMetadata()
        )
        assert response.message.endswith(f"{MORE_OPTIONS_PREFIX} The Anchor (Top rated nearby)")

    def test_suggestions_mode_has_no_cards(self, assembler, candidates) -> None:
        resolution = InventoryResolution(
            mode=ResolutionMode.BROWSE,
            primary=[candidates["Olympus Taverna"], candidates["Luigi's Pizzeria"]],
        )
        response = assembler.assemble(
            "show me everything", "Here's a selection.", resolution, BrowseMode.BROWSE, RoutingMetadata()
        )
        assert response.ui_mode is UIMode.SUGGESTIONS
        assert response.business_cards == []
        assert "Olympus Taverna (Pick)" in response.message

    def test_map_pins_span_all_tiers(self, assembler, greek_resolution) -> None:
        response = assembler.assemble(
            "put them on a map", "Here you go.", greek_resolution, BrowseMode.NOT_BROWSE, RoutingMetadata()
        )
        assert response.ui_mode is UIMode.MAP
        assert len(response.map_pins) == 6
        assert {pin.tier for pin in response.map_pins} == set(BusinessTier)

    def test_wallet_actions_from_offers(self, assembler, greek_resolution, offers) -> None:
        response = assembler.assemble(
            "greek food",
            "Olympus Taverna has a deal on.",
            greek_resolution,
            BrowseMode.NOT_BROWSE,
            RoutingMetadata(),
            offers=[o for o in offers if o.business_id == OLYMPUS_ID],
        )
        assert len(response.wallet_actions) == 1
        action = response.wallet_actions[0]
        assert action.type == "add_to_wallet"
        assert action.offer_name == "Mezze platter - 10% off"
        assert action.business_name == "Olympus Taverna"

    def test_event_cards_need_event_intent(self, assembler, greek_resolution, events) -> None:
        plain = assembler.assemble(
            "greek food", "Try Olympus.", greek_resolution, BrowseMode.NOT_BROWSE, RoutingMetadata(), events=events
        )
        assert plain.event_cards == []

        evening = assembler.assemble(
            "any live music or events at the pub?",
            "The Anchor has a quiz.",
            greek_resolution,
            BrowseMode.NOT_BROWSE,
            RoutingMetadata(),
            events=events,
        )
        assert {card.title for card in evening.event_cards} == {"Pub Quiz", "Greek Night"}


class TestMapPins:
    def test_category_filter(self, candidates) -> None:
        pins = map_pins_for(list(candidates.values()), "bars on the map")
        assert [pin.business_id for pin in pins] == [ANCHOR_ID]

    def test_filter_with_no_match_keeps_everything(self, candidates) -> None:
        only_pizza = [candidates["Luigi's Pizzeria"]]
        pins = map_pins_for(only_pizza, "bars on the map")
        assert [pin.business_id for pin in pins] == [LUIGIS_ID]

    def test_candidates_without_coordinates_are_skipped(self, businesses) -> None:
        bare = businesses["The Anchor"].model_copy(update={"latitude": None, "longitude": None})
        assert map_pins_for([make_candidate(bare)]) == []


class TestAssembleHardStop:
    def test_offers_found(self, assembler, offers) -> None:
        response = assembler.assemble_hard_stop(HardStopKind.OFFERS, RoutingMetadata(), offers=offers)
        assert response.message == OFFERS_FOUND_MESSAGE
        assert len(response.wallet_actions) == 2
        assert response.business_cards == []

    def test_offers_empty(self, assembler) -> None:
        response = assembler.assemble_hard_stop(HardStopKind.OFFERS, RoutingMetadata())
        assert response.message == OFFERS_EMPTY_MESSAGE
        assert response.wallet_actions == []

    def test_events_empty(self, assembler) -> None:
        response = assembler.assemble_hard_stop(HardStopKind.EVENTS, RoutingMetadata())
        assert response.message == EVENTS_EMPTY_MESSAGE
        assert response.event_cards == []

    def test_events_found(self, assembler, events) -> None:
        response = assembler.assemble_hard_stop(HardStopKind.EVENTS, RoutingMetadata(), events=events)
        assert len(response.event_cards) == 2
        assert response.event_cards[0].location
