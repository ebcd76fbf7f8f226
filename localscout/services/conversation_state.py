"""Cross-turn conversation state reducer.

Every function here is pure: it takes a frozen :class:`ConversationState`
and returns a new one.  Lists inside the state have set semantics, so
replaying the same turn twice never duplicates an entry.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence

from localscout.config.vocabulary import (
    BUDGET_PREFERENCES,
    CUISINE_SYNONYMS,
    DIETARY_PREFERENCES,
    FAVORITE_CATEGORY_WORDS,
    contains_term,
)
from localscout.models.conversation import (
    ConversationPhase,
    ConversationState,
    FocalBusiness,
    FocusContext,
    TurnIntent,
    UserPreferences,
)
from localscout.models.intent import BrowseMode
from localscout.services.intent_detector import detect_negations
from localscout.utils.text_matching import normalize_name

_OFFER_RE = re.compile(r"\d+%\s*off", re.IGNORECASE)
_COMPARE_RE = re.compile(r"\b(compare|comparing|versus|vs)\b\.?", re.IGNORECASE)
_CLEAR_FOCUS_RE = re.compile(r"\b(anywhere else|other places|somewhere else)\b", re.IGNORECASE)

_INTENT_RULES: tuple[tuple[TurnIntent, re.Pattern[str]], ...] = (
    (TurnIntent.COMPARE, _COMPARE_RE),
    (TurnIntent.LIST_ALL, re.compile(r"\b(list all|show all)\b", re.IGNORECASE)),
    (TurnIntent.DETAILS, re.compile(r"\b(what time|open|opening|hours|menu)\b", re.IGNORECASE)),
    (TurnIntent.SEARCH, re.compile(r"\b(find|show|search)\b", re.IGNORECASE)),
)

_ACTIONING_AFTER_SHOWN = 3
_SUMMARY_SHOWN_LIMIT = 5


def create_initial_state() -> ConversationState:
    return ConversationState()


def _merge(existing: tuple[str, ...], additions: Sequence[str]) -> tuple[str, ...]:
    merged = list(existing)
    for item in additions:
        if item and item not in merged:
            merged.append(item)
    return tuple(merged)


def _find_focal(
    user_message: str,
    names: Sequence[str],
    business_ids: Mapping[str, str],
) -> FocalBusiness | None:
    haystack = normalize_name(user_message)
    for name in names:
        needle = normalize_name(name)
        if needle and needle in haystack:
            context = FocusContext.COMPARING if _COMPARE_RE.search(user_message) else FocusContext.DETAILED_VIEW
            return FocalBusiness(name=name, business_id=business_ids.get(name), context_type=context)
    return None


def _learn_preferences(prefs: UserPreferences, user_message: str) -> UserPreferences:
    negated = detect_negations(user_message)
    negated_terms = {term for cuisine in negated for term in CUISINE_SYNONYMS.get(cuisine, ())}

    dietary = [label for word, label in DIETARY_PREFERENCES.items() if contains_term(user_message, word)]

    budget = prefs.budget
    for word, label in BUDGET_PREFERENCES.items():
        if contains_term(user_message, word):
            budget = label

    favourites = [
        word
        for word in FAVORITE_CATEGORY_WORDS
        if word not in negated_terms and contains_term(user_message, word)
    ]

    return prefs.model_copy(
        update={
            "dietary_restrictions": _merge(prefs.dietary_restrictions, dietary),
            "budget": budget,
            "favorite_categories": _merge(prefs.favorite_categories, favourites),
            "avoid_categories": _merge(prefs.avoid_categories, negated),
        }
    )


def _turn_intent(user_message: str) -> TurnIntent:
    for intent, pattern in _INTENT_RULES:
        if pattern.search(user_message):
            return intent
    return TurnIntent.QUESTION


def update_conversation_state(
    state: ConversationState,
    user_message: str,
    assistant_response: str,
    extracted_business_names: Sequence[str],
    business_ids: Mapping[str, str] | None = None,
) -> ConversationState:
    """Fold one completed turn into *state*.

    Parameters
    ----------
    state:
        State before the turn.
    user_message:
        What the user said this turn.
    assistant_response:
        The reply that was sent back.
    extracted_business_names:
        Directory names recognised in the reply; they join
        ``shown_businesses``.
    business_ids:
        Optional name -> id map used to attach an id to the focal business.

    Returns
    -------
    ConversationState
        A new state; *state* itself is never modified.
    """
    business_ids = business_ids or {}
    shown = _merge(state.shown_businesses, extracted_business_names)

    focal = _find_focal(user_message, shown, business_ids)
    if focal is None:
        focal = None if _CLEAR_FOCUS_RE.search(user_message) else state.current_business

    offers = _merge(state.shown_offers, [m.group(0) for m in _OFFER_RE.finditer(assistant_response)])
    message_count = state.message_count + 1

    phase = state.phase
    if message_count == 1:
        phase = ConversationPhase.BROWSING
    elif focal is not None:
        phase = ConversationPhase.FOCUSED
    elif len(shown) > _ACTIONING_AFTER_SHOWN:
        phase = ConversationPhase.ACTIONING

    return state.model_copy(
        update={
            "current_business": focal,
            "shown_businesses": shown,
            "shown_offers": offers,
            "preferences": _learn_preferences(state.preferences, user_message),
            "phase": phase,
            "last_intent": _turn_intent(user_message),
            "message_count": message_count,
        }
    )


def record_browse_turn(state: ConversationState, mode: BrowseMode, next_offset: int = 0) -> ConversationState:
    """Remember the browse marker so "more" can continue the listing next turn."""
    if not mode.is_browsing:
        return state.model_copy(update={"last_browse_mode": mode, "browse_offset": 0})
    return state.model_copy(update={"last_browse_mode": mode, "browse_offset": max(next_offset, 0)})


def summarize_state(state: ConversationState) -> str:
    """One-line context summary for the system prompt."""
    parts: list[str] = []
    prefs = state.preferences

    if state.current_business is not None:
        parts.append(f"Currently discussing: {state.current_business.name}")
    if state.shown_businesses:
        parts.append(f"Already shown: {', '.join(state.shown_businesses[:_SUMMARY_SHOWN_LIMIT])}")
    if prefs.dietary_restrictions:
        parts.append(f"Dietary needs: {', '.join(prefs.dietary_restrictions)}")
    if prefs.budget:
        parts.append(f"Budget preference: {prefs.budget}")
    if prefs.favorite_categories:
        parts.append(f"Interested in: {', '.join(prefs.favorite_categories)}")
    if prefs.avoid_categories:
        parts.append(f"Avoiding: {', '.join(prefs.avoid_categories)}")

    return " | ".join(parts) if parts else "New conversation"
