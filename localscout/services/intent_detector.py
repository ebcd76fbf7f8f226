"""Intent detection: what is the user looking for, and are they browsing?

Two independent questions are answered here:

* :func:`detect_browse` -- is this a "show me everything" request, or a
  request for the next page of one?
* :func:`detect_intent` -- which cuisines and attributes does the query
  name, and which categories does it explicitly exclude?

Both are pure and table-driven (``localscout.config.vocabulary``).
"""

from __future__ import annotations

import re

from localscout.config.vocabulary import ATTRIBUTE_KEYWORDS, CUISINE_SYNONYMS, contains_term
from localscout.models.intent import BrowseMode, IntentResult

_MORE_RE = re.compile(r"^(any\s+more|more|next|show\s+more|any\s+others?)\b", re.IGNORECASE)

_BROWSE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\b(show|list|find|see|give\s+me)\s+(me\s+)?(all|every)\b", re.IGNORECASE),
    re.compile(r"^(all|every)\s+(restaurants?|places?|businesses?|cafes?|bars?)", re.IGNORECASE),
    re.compile(r"\bwhat'?s\s+(here|available|around|nearby)\b", re.IGNORECASE),
    re.compile(r"\b(show|list|find|see)\s+(me\s+)?(restaurants?|places?|businesses?|cafes?|bars?)\b", re.IGNORECASE),
)

_NEGATION_PREFIX = r"(?:not|no|without|except|avoid|anything\s+but|other\s+than)\s+(?:any\s+|more\s+)?"


def detect_browse(query: str, last_turn_mode: BrowseMode | str | None = None) -> BrowseMode:
    """Classify *query* as ``browse``, ``browse_more`` or ``not_browse``.

    "more"/"next" phrasing only continues a listing when the previous turn
    was itself a browse turn; otherwise "more" is probably about details
    ("more about their menu") and is left to intent detection.
    """
    q = query.strip().lower()
    last = BrowseMode(last_turn_mode) if last_turn_mode else None

    if _MORE_RE.search(q):
        if last is not None and last.is_browsing:
            return BrowseMode.BROWSE_MORE
        return BrowseMode.NOT_BROWSE

    if any(pattern.search(q) for pattern in _BROWSE_PATTERNS):
        return BrowseMode.BROWSE
    return BrowseMode.NOT_BROWSE


def _is_negated(query: str, term: str) -> bool:
    pattern = rf"\b{_NEGATION_PREFIX}{re.escape(term)}s?\b"
    return re.search(pattern, query, re.IGNORECASE) is not None


def detect_negations(query: str) -> tuple[str, ...]:
    """Return canonical categories the user explicitly excludes ("not seafood")."""
    q = query.lower()
    return tuple(
        cuisine
        for cuisine, terms in CUISINE_SYNONYMS.items()
        if any(_is_negated(q, term) for term in terms)
    )


def detect_intent(query: str) -> IntentResult:
    """Extract cuisine categories, attribute keywords and negations from *query*."""
    q = query.lower()
    negated = detect_negations(q)

    categories = tuple(
        cuisine
        for cuisine, terms in CUISINE_SYNONYMS.items()
        if cuisine not in negated and any(contains_term(q, term) for term in terms)
    )
    keywords = tuple(term for term in ATTRIBUTE_KEYWORDS if contains_term(q, term))

    if len(categories) >= 2 or len(keywords) >= 2:
        confidence = 0.9
    elif categories or keywords:
        confidence = 0.7
    else:
        confidence = 0.5

    return IntentResult(
        categories=categories,
        keywords=keywords,
        negated_categories=negated,
        confidence=confidence,
    )


def keyword_class(keyword: str) -> str | None:
    """Return the attribute class of *keyword* (``"dietary"``, ``"family"``...)."""
    return ATTRIBUTE_KEYWORDS.get(keyword.lower())
