"""Reason tagging: one "why is this shown" label per business per turn.

Tags come from a fixed priority ladder, first match wins:

======  ==================================================================
a       commercial badge (paid -> "Pick", claimed_free -> "Featured")
b       perfect 5.0 rating with at least 100 reviews
c       highest rated non-commercial candidate in this result set
d       most reviewed non-commercial candidate in this result set
e       perfect 5.0 rating with at least 20 reviews
f       closest non-commercial candidate (within the distance cap)
g       under 500 m away
h       rating >= 4.6 with at least 100 reviews
i       rating >= 4.4 with at least 10 reviews
j       hidden gem: rating >= 4.4 with fewer than 10 reviews
k       open now
l       rating >= 4.0
m       "Popular {category} spot" or a generic label
======  ==================================================================

Superlatives (c, d, f) are computed against the result set actually shown
(primary plus more options) and go to exactly one business each; a
candidate that was filtered out can neither win one nor take one away.
``unclaimed`` never gets a commercial badge and is always eligible for the
statistical tags.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from localscout.models.business import BusinessRecord, BusinessTier
from localscout.models.intent import IntentResult
from localscout.models.ranking import ReasonMeta, ReasonTag, ReasonType, ScoredCandidate
from localscout.utils.geo import distance_between
from localscout.utils.opening_hours import is_open_now

DEFAULT_CLOSEST_CAP_METERS = 2000.0
VERY_CLOSE_METERS = 500.0

# Superlatives need something to be compared against.
_MIN_SUPERLATIVE_POOL = 2

_COMMERCIAL_TAGS: dict[BusinessTier, ReasonTag] = {
    BusinessTier.PAID: ReasonTag(type=ReasonType.PICK, label="Pick"),
    BusinessTier.CLAIMED_FREE: ReasonTag(type=ReasonType.FEATURED, label="Featured"),
}

_GENERIC_TAG = ReasonTag(type=ReasonType.GENERIC, label="Recommended")


@dataclass(frozen=True)
class _Superlatives:
    highest_rated: str | None = None
    most_reviewed: str | None = None
    closest: str | None = None


def _compute_superlatives(
    candidates: Sequence[BusinessRecord],
    user_location: Any,
    closest_cap_meters: float,
) -> _Superlatives:
    pool = [b for b in candidates if not b.tier.is_commercial]
    if len(pool) < _MIN_SUPERLATIVE_POOL:
        return _Superlatives()

    rated = [b for b in pool if b.rating is not None]
    highest = None
    if rated:
        highest = min(rated, key=lambda b: (-(b.rating or 0.0), -b.review_count, b.name)).id

    reviewed = [b for b in pool if b.review_count > 0]
    most = None
    if reviewed:
        most = min(reviewed, key=lambda b: (-b.review_count, -(b.rating or 0.0), b.name)).id

    closest = None
    if user_location is not None:
        distances = [
            (d, b.name, b.id)
            for b in pool
            if (d := distance_between(user_location, b.coordinates)) is not None and d <= closest_cap_meters
        ]
        if distances:
            closest = min(distances)[2]

    return _Superlatives(highest_rated=highest, most_reviewed=most, closest=closest)


def _ladder(
    business: BusinessRecord,
    intent: IntentResult,
    relevance_score: float,
    distance: float | None,
    open_now: bool,
    is_browse_mode: bool,
    superlatives: _Superlatives,
) -> ReasonTag:
    commercial = _COMMERCIAL_TAGS.get(business.tier)
    if commercial is not None:
        return commercial

    rating = business.rating or 0.0
    reviews = business.review_count

    if rating >= 5.0 and reviews >= 100:
        return ReasonTag(type=ReasonType.PERFECT_RATING, label=f"Perfect 5.0 from {reviews} reviews")
    if superlatives.highest_rated == business.id:
        return ReasonTag(type=ReasonType.HIGHEST_RATED, label="Highest rated")
    if superlatives.most_reviewed == business.id:
        return ReasonTag(type=ReasonType.MOST_REVIEWED, label="Most reviews")
    if rating >= 5.0 and reviews >= 20:
        return ReasonTag(type=ReasonType.PERFECT_RATING, label="Perfect 5.0 rating")
    if superlatives.closest == business.id:
        return ReasonTag(type=ReasonType.CLOSEST, label="Closest to you")
    if distance is not None and distance < VERY_CLOSE_METERS:
        return ReasonTag(type=ReasonType.VERY_CLOSE, label=f"{round(distance)}m away")
    if rating >= 4.6 and reviews >= 100:
        return ReasonTag(type=ReasonType.TOP_RATED, label="Top rated nearby")
    if rating >= 4.4 and reviews >= 10:
        return ReasonTag(type=ReasonType.HIGHLY_RATED, label="Highly rated")
    if rating >= 4.4:
        return ReasonTag(type=ReasonType.HIDDEN_GEM, label="Hidden gem")
    if open_now:
        return ReasonTag(type=ReasonType.OPEN_NOW, label="Open now")
    if rating >= 4.0:
        return ReasonTag(type=ReasonType.WELL_RATED, label="Well rated")

    if not is_browse_mode and relevance_score >= 3 and intent.categories:
        return ReasonTag(
            type=ReasonType.CATEGORY_MATCH,
            label=f"Popular {intent.categories[0].title()} spot",
        )
    return _GENERIC_TAG


def tag_business(
    business: BusinessRecord,
    intent: IntentResult,
    relevance_score: float,
    user_location: Any = None,
    is_browse_mode: bool = False,
    all_candidates: Sequence[BusinessRecord] = (),
    now: datetime | None = None,
    timezone: str | None = None,
    closest_cap_meters: float = DEFAULT_CLOSEST_CAP_METERS,
) -> ReasonTag:
    """Return the single reason tag for *business* within *all_candidates*.

    Parameters
    ----------
    business:
        The business being tagged.
    intent:
        The turn's detected intent; only its first category is used, for
        the "Popular ... spot" fallback.
    relevance_score:
        The business's relevance score for this turn.
    user_location:
        Optional user position in any shape ``normalize_location`` accepts.
    is_browse_mode:
        Whether the turn is a browse turn.
    all_candidates:
        The full result set the superlatives are computed over.
    now, timezone:
        Clock used for the open-now check.
    closest_cap_meters:
        Furthest distance that still qualifies for "Closest to you".
    """
    pool = list(all_candidates) or [business]
    superlatives = _compute_superlatives(pool, user_location, closest_cap_meters)
    return _ladder(
        business,
        intent,
        relevance_score,
        distance_between(user_location, business.coordinates) if user_location is not None else None,
        is_open_now(business.opening_hours, now=now, timezone=timezone),
        is_browse_mode,
        superlatives,
    )


def reason_meta(
    business: BusinessRecord,
    user_location: Any = None,
    now: datetime | None = None,
    timezone: str | None = None,
) -> ReasonMeta:
    """Secondary decoration: open-now flag, rounded distance, rating badge."""
    distance = distance_between(user_location, business.coordinates) if user_location is not None else None
    badge = None
    if business.rating and business.review_count:
        badge = f"{business.rating:.1f} ({business.review_count})"
    return ReasonMeta(
        is_open_now=is_open_now(business.opening_hours, now=now, timezone=timezone),
        distance_meters=round(distance) if distance is not None else None,
        rating_badge=badge,
    )


def tag_candidates(
    candidates: Sequence[ScoredCandidate],
    intent: IntentResult,
    user_location: Any = None,
    is_browse_mode: bool = False,
    now: datetime | None = None,
    timezone: str | None = None,
    closest_cap_meters: float = DEFAULT_CLOSEST_CAP_METERS,
    shown: Sequence[ScoredCandidate] | None = None,
) -> list[ScoredCandidate]:
    """Annotate every candidate with its reason tag and meta.

    Superlatives are computed once over *shown* (all of *candidates* when
    omitted), so each superlative label goes to at most one shown candidate.
    """
    pool = candidates if shown is None else shown
    superlatives = _compute_superlatives(
        [c.business for c in pool], user_location, closest_cap_meters
    )
    tagged: list[ScoredCandidate] = []
    for candidate in candidates:
        meta = reason_meta(candidate.business, user_location, now=now, timezone=timezone)
        reason = _ladder(
            candidate.business,
            intent,
            candidate.relevance_score,
            candidate.distance_meters,
            meta.is_open_now,
            is_browse_mode,
            superlatives,
        )
        tagged.append(candidate.model_copy(update={"reason": reason, "meta": meta}))
    return tagged
