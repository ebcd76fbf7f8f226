"""Deterministic relevance scoring of one business against one intent.

The score is a plain non-negative number; 0 means *excluded*, not "ranked
last".  Evaluation order is fixed:

1. **Facet gate** -- an active facet (e.g. alcohol) excludes businesses
   whose category cannot satisfy it unless their knowledge text says so.
2. **Negation gate** -- a category the user excluded ("not seafood")
   excludes businesses whose category or name carries it.
3. **Points** -- category +3, name +2, knowledge +1 (or +4 for
   knowledge-priority keywords such as kids/vegan/outdoor), each bucket
   counted once.  No intent means no points.
4. **Semantic evidence** -- a similarity above the threshold maps linearly
   onto (1, 5] and is added to the points, so a business with a literal
   textual hit on "kids menu" always outscores the same business without
   one, however its category labels read.
"""

from __future__ import annotations

from localscout.config.vocabulary import CUISINE_SYNONYMS, KNOWLEDGE_PRIORITY_CLASSES
from localscout.models.business import BusinessRecord
from localscout.models.intent import FacetResult, IntentResult
from localscout.services.facet_detector import category_supports_facet, content_has_facet_signal
from localscout.services.intent_detector import keyword_class

SIMILARITY_THRESHOLD = 0.70
_EVIDENCE_MIN_SCORE = 1.0
_EVIDENCE_MAX_SCORE = 5.0

CATEGORY_POINTS = 3.0
NAME_POINTS = 2.0
KNOWLEDGE_POINTS = 1.0
KNOWLEDGE_PRIORITY_POINTS = 4.0

DEFAULT_RELEVANCE_FLOOR = 2.0


def _fails_facet_gate(business: BusinessRecord, knowledge_text: str | None, facets: FacetResult) -> bool:
    for facet in facets.active_facets:
        if not category_supports_facet(business.category_text(), facet) and not content_has_facet_signal(
            knowledge_text, facet
        ):
            return True
    return False


def _fails_negation_gate(business: BusinessRecord, intent: IntentResult) -> bool:
    if not intent.negated_categories:
        return False
    haystack = f"{business.category_text()} {business.name.lower()}"
    for category in intent.negated_categories:
        terms = CUISINE_SYNONYMS.get(category, (category,))
        if any(term in haystack for term in terms):
            return True
    return False


def rescale_similarity(similarity: float, threshold: float = SIMILARITY_THRESHOLD) -> float:
    """Map a similarity in (threshold, 1.0] linearly onto (1, 5]."""
    span = 1.0 - threshold
    fraction = (min(similarity, 1.0) - threshold) / span
    return _EVIDENCE_MIN_SCORE + fraction * (_EVIDENCE_MAX_SCORE - _EVIDENCE_MIN_SCORE)


def _knowledge_hit(knowledge: str, intent: IntentResult) -> bool:
    if any(category in knowledge for category in intent.categories):
        return True
    for keyword in intent.keywords:
        if keyword in knowledge:
            return True
        # "kids menu" -> also accept "kids" on its own
        if " " in keyword and any(len(word) >= 4 and word in knowledge for word in keyword.split()):
            return True
    return False


def is_knowledge_priority(intent: IntentResult) -> bool:
    """True when the intent asks for attributes that live in free text."""
    return any(keyword_class(kw) in KNOWLEDGE_PRIORITY_CLASSES for kw in intent.keywords)


def passes_gates(
    business: BusinessRecord,
    intent: IntentResult,
    knowledge_text: str | None = None,
    facets: FacetResult | None = None,
) -> bool:
    """False when an active facet or a negated category rules *business* out.

    A gated business is excluded outright: it scores 0 and is not used to
    pad a fallback browse page either.
    """
    if facets is not None and facets.any_active and _fails_facet_gate(business, knowledge_text, facets):
        return False
    return not _fails_negation_gate(business, intent)


def _points(business: BusinessRecord, intent: IntentResult, knowledge_text: str | None) -> float:
    if not intent.has_intent:
        return 0.0

    score = 0.0
    category_text = business.category_text()
    name = business.name.lower()

    if any(category in category_text for category in intent.categories):
        score += CATEGORY_POINTS
    elif any(keyword in category_text for keyword in intent.keywords):
        score += CATEGORY_POINTS

    if any(term in name for term in (*intent.categories, *intent.keywords)):
        score += NAME_POINTS

    knowledge = (knowledge_text or "").lower()
    if knowledge and _knowledge_hit(knowledge, intent):
        score += KNOWLEDGE_PRIORITY_POINTS if is_knowledge_priority(intent) else KNOWLEDGE_POINTS

    return score


def score_business(
    business: BusinessRecord,
    intent: IntentResult,
    knowledge_text: str | None = None,
    semantic_similarity: float | None = None,
    facets: FacetResult | None = None,
    similarity_threshold: float = SIMILARITY_THRESHOLD,
) -> float:
    """Return the relevance of *business* to *intent* for this turn."""
    if not passes_gates(business, intent, knowledge_text, facets):
        return 0.0

    score = _points(business, intent, knowledge_text)
    if semantic_similarity is not None and semantic_similarity > similarity_threshold:
        score += rescale_similarity(semantic_similarity, similarity_threshold)
    return score


def is_relevant(score: float, floor: float = DEFAULT_RELEVANCE_FLOOR) -> bool:
    return score >= floor
