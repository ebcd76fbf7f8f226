"""Unit tests for localscout.services.relevance_scorer."""

from __future__ import annotations

import pytest

from conftest import make_business
from localscout.models.business import BusinessTier
from localscout.models.intent import FacetResult, IntentResult
from localscout.services.facet_detector import detect_facets
from localscout.services.intent_detector import detect_intent
from localscout.services.relevance_scorer import (
    CATEGORY_POINTS,
    KNOWLEDGE_PRIORITY_POINTS,
    NAME_POINTS,
    is_knowledge_priority,
    is_relevant,
    rescale_similarity,
    score_business,
)


class TestPointScoring:
    def test_category_match_scores_three(self) -> None:
        taverna = make_business("Olympus Taverna", BusinessTier.PAID, display_category="Greek Restaurant")
        assert score_business(taverna, detect_intent("greek food")) == CATEGORY_POINTS

    def test_name_match_scores_two(self) -> None:
        table = make_business("The Greek Table", display_category="Restaurant")
        assert score_business(table, detect_intent("greek food")) == NAME_POINTS

    def test_category_and_name_are_additive(self) -> None:
        corner = make_business("Greek Corner", display_category="Greek Restaurant")
        assert score_business(corner, detect_intent("greek")) == CATEGORY_POINTS + NAME_POINTS

    def test_unrelated_business_scores_zero(self) -> None:
        bakery = make_business("Crumbs Bakery", display_category="Bakery")
        assert score_business(bakery, detect_intent("greek food")) == 0.0

    def test_category_bucket_counted_once(self) -> None:
        both = make_business("Fusion House", display_category="Greek and Italian Restaurant")
        assert score_business(both, detect_intent("greek or italian")) == CATEGORY_POINTS

    def test_attribute_keyword_in_category(self) -> None:
        brunch = make_business("Morning Glory", display_category="Brunch Cafe")
        assert score_business(brunch, IntentResult(keywords=("brunch",))) == CATEGORY_POINTS


class TestKnowledgeScoring:
    def test_priority_keyword_in_knowledge_beats_category(self) -> None:
        bakery = make_business("Crumbs Bakery", display_category="Bakery")
        intent = detect_intent("somewhere with a kids menu")
        assert is_knowledge_priority(intent) is True
        score = score_business(bakery, intent, knowledge_text="We have a dedicated kids menu.")
        assert score == KNOWLEDGE_PRIORITY_POINTS

    def test_partial_phrase_word_counts_for_priority_keyword(self) -> None:
        bakery = make_business("Crumbs Bakery", display_category="Bakery")
        intent = detect_intent("kids menu")
        assert score_business(bakery, intent, knowledge_text="Great for kids and families") == KNOWLEDGE_PRIORITY_POINTS

    def test_generic_knowledge_hit_scores_one(self) -> None:
        cafe = make_business("Seafront Coffee House", display_category="Cafe")
        score = score_business(cafe, detect_intent("greek"), knowledge_text="Serves Greek yoghurt bowls")
        assert score == 1.0

    def test_no_intent_without_semantic_scores_zero(self) -> None:
        cafe = make_business("Seafront Coffee House", display_category="Cafe")
        assert score_business(cafe, IntentResult(), knowledge_text="Lovely view") == 0.0


class TestSemanticEvidence:
    def test_similarity_above_threshold_is_rescaled(self) -> None:
        bakery = make_business("Crumbs Bakery", display_category="Bakery")
        score = score_business(bakery, IntentResult(), semantic_similarity=0.94)
        assert score == pytest.approx(4.2)

    def test_similarity_adds_to_point_scoring(self) -> None:
        corner = make_business("Greek Corner", display_category="Greek Restaurant")
        score = score_business(corner, detect_intent("greek"), semantic_similarity=0.85)
        assert score == pytest.approx(CATEGORY_POINTS + NAME_POINTS + 3.0)

    def test_evidence_never_scores_below_no_evidence(self) -> None:
        corner = make_business("Greek Corner", display_category="Greek Restaurant")
        intent = detect_intent("greek")
        with_evidence = score_business(corner, intent, semantic_similarity=0.85)
        below_threshold = score_business(corner, intent, semantic_similarity=0.70)
        without = score_business(corner, intent)
        assert with_evidence > below_threshold
        assert with_evidence > without

    def test_similarity_at_threshold_falls_back_to_points(self) -> None:
        taverna = make_business("Olympus Taverna", display_category="Greek Restaurant")
        assert score_business(taverna, detect_intent("greek"), semantic_similarity=0.70) == CATEGORY_POINTS

    def test_rescale_bounds(self) -> None:
        assert rescale_similarity(1.0) == pytest.approx(5.0)
        assert rescale_similarity(0.70) == pytest.approx(1.0)
        assert rescale_similarity(0.80, threshold=0.60) == pytest.approx(3.0)


class TestGates:
    def test_alcohol_facet_excludes_bakery_even_with_strong_similarity(self) -> None:
        bakery = make_business("Crumbs Bakery", display_category="Bakery")
        facets = detect_facets("a cold pint")
        assert score_business(bakery, IntentResult(), semantic_similarity=0.95, facets=facets) == 0.0

    def test_alcohol_facet_passes_for_pub(self) -> None:
        pub = make_business("The Anchor", display_category="Pub")
        facets = detect_facets("a cold pint")
        score = score_business(pub, IntentResult(), semantic_similarity=0.95, facets=facets)
        assert score == pytest.approx(1 + (0.25 / 0.30) * 4)

    def test_alcohol_facet_satisfied_by_knowledge(self) -> None:
        bakery = make_business("Crumbs Bakery", display_category="Bakery")
        facets = FacetResult(alcohol=True)
        score = score_business(
            bakery,
            IntentResult(),
            knowledge_text="Local cider served in the garden",
            semantic_similarity=0.9,
            facets=facets,
        )
        assert score > 0

    def test_negated_category_excludes_business(self) -> None:
        grill = make_business("Poseidon Grill", display_category="Seafood Restaurant")
        intent = detect_intent("not seafood, something greek")
        assert score_business(grill, intent, semantic_similarity=0.99) == 0.0

    def test_negation_checks_name_too(self) -> None:
        shack = make_business("The Fish Shack", display_category="Restaurant")
        intent = IntentResult(categories=("greek",), negated_categories=("seafood",))
        assert score_business(shack, intent) == 0.0


class TestIsRelevant:
    def test_default_floor(self) -> None:
        assert is_relevant(2.0) is True
        assert is_relevant(1.99) is False

    def test_custom_floor(self) -> None:
        assert is_relevant(2.5, floor=3.0) is False
        assert is_relevant(3.0, floor=3.0) is True
