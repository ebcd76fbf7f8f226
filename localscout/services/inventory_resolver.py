"""Tiered inventory resolution for one turn.

The resolver turns a query into an ordered answer set drawn from the three
commercial tiers of the directory.

Architecture overview
---------------------
1. **Fan-out** -- the three tier pools, the semantic search and the offer
   counts are read concurrently via
   :func:`~localscout.utils.concurrency.gather_sources`.  A failing source
   degrades to an empty result and is reported in ``failed_sources``; it
   never fails the turn.
2. **Dedupe** -- a business present in several pools keeps the record of
   its highest-priority tier.
3. **Mode switch**

   * *browse* ("show me everything"): every paid and claimed-free record,
     padded with the best unclaimed records up to one page.  "More" pages
     through the unclaimed pool.  No relevance filter.
   * *intent*: every candidate is scored.  If the paid tier alone holds
     enough relevant matches (and at least one strong one) it leads, with
     a small number of lower-tier matches appended.  Otherwise all
     relevant matches are ranked together so a genuinely relevant
     unclaimed listing can outrank an irrelevant paid one, and overflow
     goes to ``more_options``.
   * *fallback browse*: an intent query where nothing is relevant falls
     back to the browse fill rather than returning nothing.  Businesses a
     facet or negation gate excluded stay excluded from that fill.

4. **Annotation** -- every candidate gets its reason tag and meta once the
   shown set is chosen; superlatives are contested only within it.
"""

from __future__ import annotations

import math
from collections import defaultdict
from datetime import datetime
from typing import Any

import structlog

from localscout.config.tenant import RankingConfig
from localscout.interfaces.business_store import IBusinessStore
from localscout.interfaces.semantic_search_provider import ISemanticSearchProvider
from localscout.models.business import TIERS_BY_PRIORITY, BusinessRecord, BusinessTier
from localscout.models.intent import BrowseMode, FacetResult, IntentResult
from localscout.models.knowledge import KnowledgeSnippet
from localscout.models.ranking import InventoryResolution, ResolutionMode, ScoredCandidate
from localscout.services.reason_tagger import tag_candidates
from localscout.services.relevance_scorer import is_relevant, passes_gates, score_business
from localscout.utils.concurrency import gather_sources
from localscout.utils.geo import distance_between
from localscout.utils.logging import get_logger

_OFFER_COUNTS = "offer_counts"
_SEMANTIC = "semantic"


def _browse_order_key(candidate: ScoredCandidate) -> tuple[float, int, float, str]:
    distance = candidate.distance_meters if candidate.distance_meters is not None else math.inf
    return (-(candidate.business.rating or 0.0), candidate.business.tier_priority, distance, candidate.name)


def _intent_order_key(candidate: ScoredCandidate) -> tuple[float, int, float, float, str]:
    distance = candidate.distance_meters if candidate.distance_meters is not None else math.inf
    return (
        -candidate.relevance_score,
        candidate.business.tier_priority,
        -(candidate.business.rating or 0.0),
        distance,
        candidate.name,
    )


def _unclaimed_pool_key(candidate: ScoredCandidate) -> tuple[float, int, str]:
    return (-(candidate.business.rating or 0.0), -candidate.business.review_count, candidate.name)


def dedupe_by_tier(records: list[BusinessRecord]) -> list[BusinessRecord]:
    """Keep one record per id, preferring the highest-priority tier."""
    best: dict[str, BusinessRecord] = {}
    for record in records:
        current = best.get(record.id)
        if current is None or record.tier_priority < current.tier_priority:
            best[record.id] = record
    return list(best.values())


class InventoryResolver:
    """Resolve a turn's query into primary results and more options.

    Parameters
    ----------
    business_store:
        Structured directory backend (tier pools, offer counts).
    semantic_search:
        Optional knowledge search backend.  When ``None`` the resolver runs
        on structured data alone.
    ranking:
        Ranking thresholds; defaults to :class:`RankingConfig` defaults.
    """

    def __init__(
        self,
        business_store: IBusinessStore,
        semantic_search: ISemanticSearchProvider | None = None,
        ranking: RankingConfig | None = None,
    ) -> None:
        self._store = business_store
        self._semantic = semantic_search
        self._ranking = ranking or RankingConfig()
        self._logger: structlog.BoundLogger = get_logger(__name__)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def resolve(
        self,
        query: str,
        city: str,
        intent: IntentResult,
        browse_mode: BrowseMode,
        facets: FacetResult | None = None,
        user_location: Any = None,
        browse_offset: int = 0,
        semantic_query: str | None = None,
        match_count: int | None = None,
        ranking: RankingConfig | None = None,
        timezone: str | None = None,
        now: datetime | None = None,
    ) -> InventoryResolution:
        """Resolve *query* for *city* into an :class:`InventoryResolution`.

        ``semantic_query`` overrides the text sent to semantic search (used
        for pronoun follow-ups); ``ranking`` overrides the resolver's
        thresholds for one call (per-tenant settings).
        """
        ranking = ranking or self._ranking
        browsing = browse_mode.is_browsing

        sources: dict[str, Any] = {
            tier.value: self._store.fetch_tier(city, tier) for tier in TIERS_BY_PRIORITY
        }
        sources[_OFFER_COUNTS] = self._store.count_offers(city)
        if not browsing and self._semantic is not None:
            sources[_SEMANTIC] = self._semantic.search(
                semantic_query or query,
                city,
                match_count=match_count or ranking.semantic_match_count,
                match_threshold=ranking.semantic_match_threshold,
            )

        results, failed = await gather_sources(
            sources,
            defaults={_OFFER_COUNTS: {}},
            logger=self._logger,
            query=query,
            city=city,
        )

        records = dedupe_by_tier(
            [record for tier in TIERS_BY_PRIORITY for record in results[tier.value]]
        )
        knowledge: list[KnowledgeSnippet] = list(results.get(_SEMANTIC, []))
        candidates = self._build_candidates(records, knowledge, results[_OFFER_COUNTS], user_location)

        if browsing:
            mode = ResolutionMode.BROWSE
        else:
            candidates = [
                c.model_copy(
                    update={
                        "relevance_score": score_business(
                            c.business,
                            intent,
                            knowledge_text=c.knowledge_text,
                            semantic_similarity=c.similarity,
                            facets=facets,
                            similarity_threshold=ranking.similarity_threshold,
                        )
                    }
                )
                for c in candidates
            ]
            mode = ResolutionMode.INTENT

        more_options: list[ScoredCandidate] = []
        next_offset = 0
        if browse_mode is BrowseMode.BROWSE_MORE:
            primary, next_offset = self._browse_more(candidates, browse_offset, ranking)
        elif browsing:
            primary, next_offset = self._browse_fill(candidates, ranking)
        else:
            primary, more_options = self._select_by_intent(candidates, ranking)
            if not primary:
                mode = ResolutionMode.FALLBACK_BROWSE
                eligible = [
                    c for c in candidates if passes_gates(c.business, intent, c.knowledge_text, facets)
                ]
                primary, next_offset = self._browse_fill(eligible, ranking)

        tagged = tag_candidates(
            candidates,
            intent,
            user_location=user_location,
            is_browse_mode=browsing,
            now=now,
            timezone=timezone,
            closest_cap_meters=ranking.closest_cap_meters,
            shown=primary + more_options,
        )
        by_id = {c.id: c for c in tagged}
        primary = [by_id[c.id] for c in primary]
        more_options = [by_id[c.id] for c in more_options]

        self._logger.info(
            "inventory_resolved",
            city=city,
            mode=mode.value,
            candidates=len(tagged),
            primary=len(primary),
            more_options=len(more_options),
            knowledge=len(knowledge),
            failed_sources=failed,
        )

        return InventoryResolution(
            mode=mode,
            primary=primary,
            more_options=more_options,
            all_candidates=tagged,
            knowledge=knowledge,
            next_browse_offset=next_offset,
            failed_sources=failed,
        )

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _build_candidates(
        records: list[BusinessRecord],
        knowledge: list[KnowledgeSnippet],
        offer_counts: dict[str, int],
        user_location: Any,
    ) -> list[ScoredCandidate]:
        texts: dict[str, list[str]] = defaultdict(list)
        best_similarity: dict[str, float] = {}
        for snippet in knowledge:
            if snippet.business_id is None:
                continue
            texts[snippet.business_id].append(snippet.content)
            best_similarity[snippet.business_id] = max(
                snippet.similarity, best_similarity.get(snippet.business_id, 0.0)
            )

        candidates = []
        for record in records:
            distance = None
            if user_location is not None:
                distance = distance_between(user_location, record.coordinates)
            candidates.append(
                ScoredCandidate(
                    business=record,
                    similarity=best_similarity.get(record.id),
                    knowledge_text="\n".join(texts.get(record.id, [])),
                    distance_meters=distance,
                    offers_count=offer_counts.get(record.id, 0),
                )
            )
        return candidates

    @staticmethod
    def _browse_fill(
        candidates: list[ScoredCandidate], ranking: RankingConfig
    ) -> tuple[list[ScoredCandidate], int]:
        commercial = [c for c in candidates if c.business.tier.is_commercial]
        unclaimed = sorted(
            (c for c in candidates if c.business.tier is BusinessTier.UNCLAIMED),
            key=_unclaimed_pool_key,
        )
        padding = unclaimed[: max(ranking.browse_page_size - len(commercial), 0)]
        return sorted(commercial + padding, key=_browse_order_key), len(padding)

    @staticmethod
    def _browse_more(
        candidates: list[ScoredCandidate], offset: int, ranking: RankingConfig
    ) -> tuple[list[ScoredCandidate], int]:
        unclaimed = sorted(
            (c for c in candidates if c.business.tier is BusinessTier.UNCLAIMED),
            key=_unclaimed_pool_key,
        )
        start = max(offset, 0)
        page = unclaimed[start : start + ranking.browse_page_size]
        return sorted(page, key=_browse_order_key), start + len(page)

    @staticmethod
    def _select_by_intent(
        candidates: list[ScoredCandidate], ranking: RankingConfig
    ) -> tuple[list[ScoredCandidate], list[ScoredCandidate]]:
        relevant = sorted(
            (c for c in candidates if is_relevant(c.relevance_score, ranking.relevance_floor)),
            key=_intent_order_key,
        )
        if not relevant:
            return [], []

        paid = [c for c in relevant if c.business.tier is BusinessTier.PAID]
        lower = [c for c in relevant if c.business.tier is not BusinessTier.PAID]
        paid_is_strong = any(c.relevance_score >= ranking.strong_match_floor for c in paid)

        if len(paid) >= ranking.min_relevant_top_tier and paid_is_strong:
            return paid + lower[: ranking.supplementary_cap], []

        primary = relevant[: ranking.primary_cap]
        shown = {c.id for c in primary}
        more_options = [c for c in lower if c.id not in shown]
        return primary, more_options
