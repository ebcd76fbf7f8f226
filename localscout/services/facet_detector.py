"""High-signal facet detection.

A facet is a boolean query property strong enough to hard-gate category
mismatches: someone asking for "a cold pint" should never be shown a
bakery, however well the bakery scores otherwise.

Detection, the category check and the free-text check all read the same
keyword table (``FACET_KEYWORDS``), so a word that switches a facet on is
exactly the word that proves a business satisfies it.
"""

from __future__ import annotations

from localscout.config.vocabulary import FACET_CAPABLE_CATEGORIES, FACET_KEYWORDS, find_terms
from localscout.models.intent import FacetResult


def detect_facets(query: str) -> FacetResult:
    """Classify *query* into the fixed set of facets."""
    return FacetResult(alcohol=bool(find_terms(query, FACET_KEYWORDS["alcohol"])))


def category_supports_facet(category_text: str, facet: str = "alcohol") -> bool:
    """Return ``True`` if a business category can satisfy *facet*."""
    return bool(find_terms(category_text, FACET_CAPABLE_CATEGORIES.get(facet, ())))


def content_has_facet_signal(text: str | None, facet: str = "alcohol") -> bool:
    """Return ``True`` if free-text knowledge mentions *facet* explicitly."""
    if not text:
        return False
    return bool(find_terms(text, FACET_KEYWORDS.get(facet, ())))
