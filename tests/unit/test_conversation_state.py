"""Unit tests for the conversation state reducer."""

from __future__ import annotations

import pytest

from localscout.models.conversation import (
    ConversationPhase,
    FocusContext,
    TurnIntent,
)
from localscout.models.intent import BrowseMode
from localscout.services.conversation_state import (
    create_initial_state,
    record_browse_turn,
    summarize_state,
    update_conversation_state,
)


@pytest.fixture
def shown_state():
    state = create_initial_state()
    return update_conversation_state(
        state,
        "greek food please",
        "Try **Olympus Taverna** or Zorba's Kitchen.",
        ["Olympus Taverna", "Zorba's Kitchen"],
        {"Olympus Taverna": "olympus-id", "Zorba's Kitchen": "zorbas-id"},
    )


class TestUpdateConversationState:
    def test_first_turn_moves_to_browsing(self, shown_state) -> None:
        assert shown_state.message_count == 1
        assert shown_state.phase is ConversationPhase.BROWSING
        assert shown_state.shown_businesses == ("Olympus Taverna", "Zorba's Kitchen")

    def test_input_state_is_not_modified(self) -> None:
        state = create_initial_state()
        update_conversation_state(state, "hi", "hello", ["Olympus Taverna"])
        assert state.message_count == 0
        assert state.shown_businesses == ()

    def test_replaying_a_turn_does_not_duplicate_entries(self, shown_state) -> None:
        again = update_conversation_state(
            shown_state,
            "greek food please",
            "Try Olympus Taverna, now 10% off.",
            ["Olympus Taverna", "Zorba's Kitchen"],
        )
        twice = update_conversation_state(
            again,
            "greek food please",
            "Try Olympus Taverna, now 10% off.",
            ["Olympus Taverna", "Zorba's Kitchen"],
        )
        assert twice.shown_businesses == ("Olympus Taverna", "Zorba's Kitchen")
        assert twice.shown_offers == ("10% off",)
        assert twice.preferences.favorite_categories == ("greek",)

    def test_focal_business_detected_from_user_message(self, shown_state) -> None:
        state = update_conversation_state(
            shown_state,
            "tell me about olympus taverna",
            "Sure!",
            [],
            {"Olympus Taverna": "olympus-id"},
        )
        assert state.current_business is not None
        assert state.current_business.name == "Olympus Taverna"
        assert state.current_business.business_id == "olympus-id"
        assert state.current_business.context_type is FocusContext.DETAILED_VIEW
        assert state.phase is ConversationPhase.FOCUSED

    def test_comparison_sets_comparing_context(self, shown_state) -> None:
        state = update_conversation_state(shown_state, "compare Zorba's Kitchen vs Olympus Taverna", "...", [])
        assert state.current_business.context_type is FocusContext.COMPARING
        assert state.last_intent is TurnIntent.COMPARE

    def test_focus_persists_then_clears(self, shown_state) -> None:
        focused = update_conversation_state(shown_state, "tell me about Olympus Taverna", "Sure!", [])
        kept = update_conversation_state(focused, "do they do takeaway?", "Yes.", [])
        assert kept.current_business.name == "Olympus Taverna"

        cleared = update_conversation_state(kept, "anywhere else?", "How about...", [])
        assert cleared.current_business is None

    def test_actioning_after_many_businesses_shown(self, shown_state) -> None:
        state = update_conversation_state(
            shown_state,
            "what else?",
            "Also The Anchor and Crumbs Bakery.",
            ["The Anchor", "Crumbs Bakery"],
        )
        assert state.phase is ConversationPhase.ACTIONING

    def test_preferences_learned(self) -> None:
        state = update_conversation_state(
            create_initial_state(),
            "something vegan and cheap, not seafood",
            "Here you go.",
            [],
        )
        prefs = state.preferences
        assert prefs.dietary_restrictions == ("vegan",)
        assert prefs.budget == "budget"
        assert prefs.avoid_categories == ("seafood",)
        assert "seafood" not in prefs.favorite_categories

    @pytest.mark.parametrize(
        ("message", "intent"),
        [
            ("compare the two", TurnIntent.COMPARE),
            ("list all the cafes", TurnIntent.LIST_ALL),
            ("what time do they open?", TurnIntent.DETAILS),
            ("find me pizza", TurnIntent.SEARCH),
            ("is it any good?", TurnIntent.QUESTION),
        ],
    )
    def test_turn_intent(self, message: str, intent: TurnIntent) -> None:
        state = update_conversation_state(create_initial_state(), message, "ok", [])
        assert state.last_intent is intent


class TestRecordBrowseTurn:
    def test_browse_records_offset(self) -> None:
        state = record_browse_turn(create_initial_state(), BrowseMode.BROWSE, next_offset=3)
        assert state.last_browse_mode is BrowseMode.BROWSE
        assert state.browse_offset == 3

    def test_non_browse_resets_offset(self) -> None:
        browsing = record_browse_turn(create_initial_state(), BrowseMode.BROWSE_MORE, next_offset=9)
        state = record_browse_turn(browsing, BrowseMode.NOT_BROWSE, next_offset=4)
        assert state.last_browse_mode is BrowseMode.NOT_BROWSE
        assert state.browse_offset == 0


class TestSummarizeState:
    def test_new_conversation(self) -> None:
        assert summarize_state(create_initial_state()) == "New conversation"

    def test_summary_parts(self, shown_state) -> None:
        state = update_conversation_state(shown_state, "tell me about Olympus Taverna, I'm vegan", "Sure", [])
        summary = summarize_state(state)
        assert "Currently discussing: Olympus Taverna" in summary
        assert "Already shown: Olympus Taverna, Zorba's Kitchen" in summary
        assert "Dietary needs: vegan" in summary
        assert " | " in summary
