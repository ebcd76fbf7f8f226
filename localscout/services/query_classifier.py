"""Rule-based query routing: complexity class and the hard-stop gate.

``classify_complexity`` chooses between the cheap and the capable completion
model without any model call.  ``detect_hard_stop`` recognises *pure* offer
and event questions ("any deals?", "what's on tomorrow?"), which are
answered straight from the directory tables so the reply can never invent
an offer or an event.  Both are pure functions of the message text.
"""

from __future__ import annotations

import re

from localscout.config.vocabulary import (
    ALCOHOL_KEYWORDS,
    ATTRIBUTE_KEYWORDS,
    CUISINE_SYNONYMS,
    PLACE_NOUNS,
    PRICE_WORDS,
    find_terms,
)
from localscout.models.intent import HardStopKind, QueryClassification, QueryComplexity

_SIMPLE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^(show|find|list|get|where|what|tell me about)\s+(me\s+)?(restaurants?|cafes?|bars?|pubs?|deals?|offers?)"),
    re.compile(r"(what time|when|hours|open|close)"),
    re.compile(r"^(restaurants?|cafes?|bars?|deals?|offers?|food|drinks?)$"),
    re.compile(r"(list all|show all|all the)"),
    re.compile(r"^(yeah|yes|yep|sure|ok|okay|nope|no|nah)$"),
    re.compile(r"(picks?|featured|spotlight)"),
)

_COMPLEX_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"(which|compare|best|better|versus|vs\.?|between).+(and|with|or)"),
    re.compile(r"(with|that has|that have).+(and|plus|also)"),
    re.compile(r"(veggie|vegan|gluten.?free|dairy.?free|halal|kosher).+(and|with|plus)"),
    re.compile(r"(why|how come|explain|recommend|suggest|advice)"),
    re.compile(r"(they|them|their|it|its)\s+(also|too|as well)"),
)

_DEEP_HISTORY_MESSAGES = 6
_SHORT_QUERY_WORDS = 5
_LONG_QUERY_WORDS = 15

_OFFER_RE = re.compile(
    r"\b(offers?|deals?|discounts?|vouchers?|promos?|promotions?|coupons?|bargains?|half price|2[- ]for[- ]1|two for one)\b",
    re.IGNORECASE,
)
_EVENT_RE = re.compile(
    r"\b(events?|gigs?|concerts?|festivals?|live music|what'?s on|what is on|happening|things to do)\b",
    re.IGNORECASE,
)
_FOOD_CONTEXT_RE = re.compile(r"\b(menu|menus|food|eat|eating|dish|dishes|cuisine)\b", re.IGNORECASE)
_MAP_RE = re.compile(r"\b(map|atlas)\b", re.IGNORECASE)
_FULL_LIST_RE = re.compile(r"\b(list all|show all|all the)\b", re.IGNORECASE)

_DISCOVERY_TERMS: tuple[str, ...] = (
    *sorted({term for terms in CUISINE_SYNONYMS.values() for term in terms}),
    *ATTRIBUTE_KEYWORDS,
    *ALCOHOL_KEYWORDS,
    *PLACE_NOUNS,
    *PRICE_WORDS,
)


def classify_complexity(message: str, history_length: int = 0) -> QueryClassification:
    """Route *message* to the cheap or the capable model.

    Rules are evaluated in order and the first hit wins: simple patterns,
    complex patterns, conversation depth, then message length.
    """
    q = message.lower().strip()

    if any(p.search(q) for p in _SIMPLE_PATTERNS):
        return QueryClassification(
            complexity=QueryComplexity.SIMPLE, reason="Matches simple query pattern", confidence=0.9
        )

    if any(p.search(q) for p in _COMPLEX_PATTERNS):
        return QueryClassification(
            complexity=QueryComplexity.COMPLEX,
            reason="Requires reasoning or multi-criteria matching",
            confidence=0.85,
        )

    if history_length > _DEEP_HISTORY_MESSAGES:
        return QueryClassification(
            complexity=QueryComplexity.COMPLEX,
            reason="Deep conversation requiring context tracking",
            confidence=0.8,
        )

    word_count = len(q.split())
    if word_count <= _SHORT_QUERY_WORDS:
        return QueryClassification(
            complexity=QueryComplexity.SIMPLE, reason="Short, direct query", confidence=0.75
        )
    if word_count > _LONG_QUERY_WORDS:
        return QueryClassification(
            complexity=QueryComplexity.COMPLEX,
            reason="Long query with multiple requirements",
            confidence=0.7,
        )

    return QueryClassification(
        complexity=QueryComplexity.SIMPLE, reason="No complexity indicators detected", confidence=0.6
    )


def detect_offer_intent(message: str) -> bool:
    return _OFFER_RE.search(message) is not None


def detect_event_intent(message: str) -> bool:
    """Explicit event wording, not "what's on the menu"."""
    return _EVENT_RE.search(message) is not None and _FOOD_CONTEXT_RE.search(message) is None


def detect_map_request(message: str) -> bool:
    return _MAP_RE.search(message) is not None


def wants_full_list(message: str) -> bool:
    return _FULL_LIST_RE.search(message) is not None


def has_discovery_qualifier(message: str) -> bool:
    """True when *message* names a cuisine, attribute, drink, place or price."""
    return bool(find_terms(message, _DISCOVERY_TERMS))


def detect_hard_stop(message: str) -> HardStopKind | None:
    """Return the hard-stop kind for a pure offer or event question.

    "Any deals?" is pure; "cheap pizza deals" is a discovery question about
    pizza and goes through the normal ranking path.  When a message asks
    about both offers and events, offers win.
    """
    offers = detect_offer_intent(message)
    events = detect_event_intent(message)
    if not offers and not events:
        return None
    if has_discovery_qualifier(message):
        return None
    return HardStopKind.OFFERS if offers else HardStopKind.EVENTS
