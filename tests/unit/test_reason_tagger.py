"""Unit tests for localscout.services.reason_tagger."""

from __future__ import annotations

from collections import Counter
from datetime import datetime
from zoneinfo import ZoneInfo

from conftest import make_business, make_candidate
from localscout.models.business import BusinessTier
from localscout.models.intent import IntentResult
from localscout.models.ranking import ReasonType
from localscout.services.reason_tagger import reason_meta, tag_business, tag_candidates

_NO_INTENT = IntentResult()
_GREEK = IntentResult(categories=("greek",))
_USER = {"lat": 50.7200, "lng": -1.8800}


class TestCommercialBadges:
    def test_paid_is_pick(self) -> None:
        paid = make_business("Olympus Taverna", BusinessTier.PAID, rating=5.0, review_count=500)
        tag = tag_business(paid, _NO_INTENT, 0.0)
        assert tag.type is ReasonType.PICK
        assert tag.label == "Pick"

    def test_claimed_free_is_featured(self) -> None:
        claimed = make_business("Seafront Coffee House", BusinessTier.CLAIMED_FREE)
        assert tag_business(claimed, _NO_INTENT, 0.0).label == "Featured"

    def test_unclaimed_never_gets_commercial_badge(self) -> None:
        unclaimed = make_business("Zorba's Kitchen", BusinessTier.UNCLAIMED)
        tag = tag_business(unclaimed, _NO_INTENT, 0.0)
        assert tag.type not in (ReasonType.PICK, ReasonType.FEATURED)


class TestStatisticalLadder:
    def test_perfect_rating_with_many_reviews(self) -> None:
        star = make_business("Star Diner", rating=5.0, review_count=150)
        assert tag_business(star, _NO_INTENT, 0.0).label == "Perfect 5.0 from 150 reviews"

    def test_perfect_rating_with_some_reviews(self) -> None:
        star = make_business("Star Diner", rating=5.0, review_count=25)
        assert tag_business(star, _NO_INTENT, 0.0).label == "Perfect 5.0 rating"

    def test_highly_rated(self) -> None:
        good = make_business("Good Place", rating=4.5, review_count=30)
        assert tag_business(good, _NO_INTENT, 0.0).type is ReasonType.HIGHLY_RATED

    def test_hidden_gem(self) -> None:
        gem = make_business("Crumbs Bakery", rating=4.6, review_count=8)
        tag = tag_business(gem, _NO_INTENT, 0.0)
        assert tag.type is ReasonType.HIDDEN_GEM
        assert tag.label == "Hidden gem"

    def test_top_rated_nearby(self) -> None:
        top = make_business("Top Spot", rating=4.7, review_count=400)
        assert tag_business(top, _NO_INTENT, 0.0).label == "Top rated nearby"

    def test_open_now(self) -> None:
        always = make_business("Night Owl", rating=3.5, opening_hours="Open 24 hours")
        assert tag_business(always, _NO_INTENT, 0.0).type is ReasonType.OPEN_NOW

    def test_well_rated(self) -> None:
        fine = make_business("Fine Place", rating=4.1, review_count=3)
        assert tag_business(fine, _NO_INTENT, 0.0).label == "Well rated"

    def test_popular_category_spot(self) -> None:
        plain = make_business("Zorba's Kitchen", display_category="Greek Restaurant")
        tag = tag_business(plain, _GREEK, 3.0)
        assert tag.type is ReasonType.CATEGORY_MATCH
        assert tag.label == "Popular Greek spot"

    def test_browse_mode_uses_generic_label(self) -> None:
        plain = make_business("Zorba's Kitchen", display_category="Greek Restaurant")
        tag = tag_business(plain, _GREEK, 3.0, is_browse_mode=True)
        assert tag.type is ReasonType.GENERIC
        assert tag.label == "Recommended"

    def test_missing_rating_is_generic(self) -> None:
        unknown = make_business("Mystery Spot")
        assert tag_business(unknown, _NO_INTENT, 0.0).type is ReasonType.GENERIC


class TestSuperlatives:
    def test_highest_and_most_reviewed(self) -> None:
        a = make_business("Alpha", rating=4.9, review_count=50)
        b = make_business("Bravo", rating=4.5, review_count=500)
        c = make_business("Charlie", rating=4.0, review_count=10)
        pool = [a, b, c]

        assert tag_business(a, _NO_INTENT, 0.0, all_candidates=pool).label == "Highest rated"
        assert tag_business(b, _NO_INTENT, 0.0, all_candidates=pool).label == "Most reviews"
        assert tag_business(c, _NO_INTENT, 0.0, all_candidates=pool).label == "Well rated"

    def test_single_candidate_gets_no_superlative(self) -> None:
        alone = make_business("Alpha", rating=4.9, review_count=50)
        tag = tag_business(alone, _NO_INTENT, 0.0, all_candidates=[alone])
        assert tag.type is ReasonType.HIGHLY_RATED

    def test_commercial_candidates_do_not_compete(self) -> None:
        paid = make_business("Paid Place", BusinessTier.PAID, rating=5.0, review_count=900)
        a = make_business("Alpha", rating=4.2, review_count=40)
        b = make_business("Bravo", rating=4.1, review_count=60)
        pool = [paid, a, b]
        assert tag_business(a, _NO_INTENT, 0.0, all_candidates=pool).label == "Highest rated"
        assert tag_business(b, _NO_INTENT, 0.0, all_candidates=pool).label == "Most reviews"

    def test_each_superlative_goes_to_one_business(self) -> None:
        twins = [
            make_candidate(make_business("Alpha", rating=4.9, review_count=50)),
            make_candidate(make_business("Bravo", rating=4.9, review_count=50)),
            make_candidate(make_business("Charlie", rating=4.9, review_count=50)),
        ]
        tagged = tag_candidates(twins, _NO_INTENT)
        counts = Counter(c.reason.type for c in tagged)
        assert counts[ReasonType.HIGHEST_RATED] == 1
        assert counts[ReasonType.MOST_REVIEWED] <= 1
        assert tagged[0].reason.label == "Highest rated"

    def test_superlatives_only_among_shown(self) -> None:
        shown = [
            make_candidate(make_business("Alpha", rating=4.3, review_count=30)),
            make_candidate(make_business("Bravo", rating=4.1, review_count=20)),
        ]
        hidden = make_candidate(make_business("Charlie", rating=4.9, review_count=900))
        tagged = tag_candidates([*shown, hidden], _NO_INTENT, shown=shown)
        assert [c.reason.label for c in tagged[:2]] == ["Highest rated", "Well rated"]
        assert tagged[2].reason.type not in (ReasonType.HIGHEST_RATED, ReasonType.MOST_REVIEWED)

    def test_closest_within_cap(self) -> None:
        near = make_business("Near", latitude=50.7210, longitude=-1.8800)
        far = make_business("Far", latitude=50.7300, longitude=-1.8800)
        pool = [near, far]
        assert tag_business(near, _NO_INTENT, 0.0, user_location=_USER, all_candidates=pool).label == "Closest to you"
        assert tag_business(far, _NO_INTENT, 0.0, user_location=_USER, all_candidates=pool).label == "Recommended"

    def test_closest_respects_cap(self) -> None:
        a = make_business("A", latitude=50.7600, longitude=-1.8800)
        b = make_business("B", latitude=50.7700, longitude=-1.8800)
        tag = tag_business(a, _NO_INTENT, 0.0, user_location=_USER, all_candidates=[a, b])
        assert tag.type is ReasonType.GENERIC

    def test_very_close_label(self) -> None:
        near = make_business("Near", latitude=50.7210, longitude=-1.8800)
        tag = tag_business(near, _NO_INTENT, 0.0, user_location=_USER, all_candidates=[near])
        assert tag.type is ReasonType.VERY_CLOSE
        assert tag.label == "111m away"


class TestReasonMeta:
    def test_full_meta(self) -> None:
        monday_noon = datetime(2026, 10, 19, 12, 0, tzinfo=ZoneInfo("Europe/London"))
        taverna = make_business(
            "Olympus Taverna",
            rating=4.5,
            review_count=120,
            latitude=50.7210,
            longitude=-1.8800,
            opening_hours={"monday": {"open": "11:00", "close": "22:00"}},
        )
        meta = reason_meta(taverna, _USER, now=monday_noon, timezone="Europe/London")
        assert meta.is_open_now is True
        assert meta.distance_meters == 111
        assert meta.rating_badge == "4.5 (120)"

    def test_meta_degrades_gracefully(self) -> None:
        meta = reason_meta(make_business("Bare"))
        assert meta.is_open_now is False
        assert meta.distance_meters is None
        assert meta.rating_badge is None

    def test_tag_candidates_preserves_order_and_scores(self) -> None:
        candidates = [
            make_candidate(make_business("Alpha", rating=4.0), relevance_score=3.0),
            make_candidate(make_business("Bravo", BusinessTier.PAID), relevance_score=5.0),
        ]
        tagged = tag_candidates(candidates, _GREEK)
        assert [c.name for c in tagged] == ["Alpha", "Bravo"]
        assert [c.relevance_score for c in tagged] == [3.0, 5.0]
        assert all(c.reason is not None for c in tagged)
