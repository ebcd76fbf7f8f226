"""Response assembly: UI mode, typed payloads and the paid-card boundary.

Business cards are a paid-tier benefit, so only ``paid`` primary candidates
ever become cards.  Every other candidate the turn wants to surface is
written into the reply text as a plain mention.  Map pins are the one
place the full multi-tier inventory is exposed.
"""

from __future__ import annotations

from collections.abc import Sequence

from localscout.config.vocabulary import SEARCH_SYNONYMS, contains_term
from localscout.models.business import BusinessTier, Event, Offer
from localscout.models.intent import BrowseMode, HardStopKind
from localscout.models.ranking import InventoryResolution, ScoredCandidate
from localscout.models.response import (
    BusinessCard,
    ChatResponse,
    EventCard,
    MapPin,
    RoutingMetadata,
    UIMode,
    WalletAction,
)
from localscout.services.query_classifier import detect_event_intent, detect_map_request
from localscout.utils.text_matching import normalize_name

OFFERS_EMPTY_MESSAGE = (
    "There aren't any live offers listed right now. New deals are added all the time, so check back soon."
)
OFFERS_FOUND_MESSAGE = "Here are the offers running right now. Tap one to add it to your wallet."
EVENTS_EMPTY_MESSAGE = "There aren't any upcoming events listed for that date yet."
EVENTS_FOUND_MESSAGE = "Here's what's on. Tap an event for the details."

ALSO_WORTH_PREFIX = "Also worth a look:"
MORE_OPTIONS_PREFIX = "More options:"


def classify_ui_mode(message: str, browse_mode: BrowseMode) -> UIMode:
    """``map`` on explicit map requests, ``suggestions`` when browsing."""
    if detect_map_request(message):
        return UIMode.MAP
    if browse_mode.is_browsing:
        return UIMode.SUGGESTIONS
    return UIMode.CONVERSATIONAL


def _mention(candidate: ScoredCandidate) -> str:
    if candidate.reason is not None:
        return f"{candidate.name} ({candidate.reason.label})"
    return candidate.name


def _business_card(candidate: ScoredCandidate) -> BusinessCard:
    business = candidate.business
    return BusinessCard(
        id=business.id,
        name=business.name,
        tagline=business.tagline,
        category=business.category_label,
        tier=business.tier,
        address=business.address,
        town=business.town,
        logo=business.logo,
        images=list(business.images),
        rating=business.rating,
        offers_count=candidate.offers_count,
        reason=candidate.reason,
    )


def wallet_actions_for(offers: Sequence[Offer]) -> list[WalletAction]:
    return [
        WalletAction(
            offer_id=offer.id,
            offer_name=f"{offer.name} - {offer.value}" if offer.value else offer.name,
            business_name=offer.business_name,
            business_id=offer.business_id,
        )
        for offer in offers
    ]


def event_cards_for(events: Sequence[Event]) -> list[EventCard]:
    return [
        EventCard(
            id=event.id,
            title=event.title,
            description=event.description,
            event_type=event.event_type,
            start_date=event.event_date,
            start_time=event.start_time,
            end_time=event.end_time,
            location=event.location or "TBA",
            ticket_url=event.ticket_url,
            image_url=event.image_url,
            business_name=event.business_name,
            business_id=event.business_id,
        )
        for event in events
    ]


def _map_filter_terms(message: str) -> tuple[str, ...]:
    for key, synonyms in SEARCH_SYNONYMS.items():
        if contains_term(message, key):
            return synonyms
    return ()


def map_pins_for(candidates: Sequence[ScoredCandidate], message: str = "") -> list[MapPin]:
    """Pins for every candidate with coordinates, across all tiers.

    A message naming a broad category ("bars on the map") narrows the pins
    to matching categories; if nothing matches, every pin is kept.
    """
    located = [c for c in candidates if c.business.coordinates is not None]
    terms = _map_filter_terms(message)
    if terms:
        narrowed = [c for c in located if any(t in c.business.category_text() for t in terms)]
        located = narrowed or located

    pins = []
    for candidate in located:
        point = candidate.business.coordinates
        pins.append(
            MapPin(
                business_id=candidate.id,
                name=candidate.name,
                latitude=point.latitude,
                longitude=point.longitude,
                tier=candidate.business.tier,
                category=candidate.business.category_label,
                rating=candidate.business.rating,
                reason=candidate.reason,
                meta=candidate.meta,
            )
        )
    return pins


class ResponseAssembler:
    """Build the final :class:`ChatResponse` for a turn."""

    def assemble(
        self,
        message: str,
        reply_text: str,
        resolution: InventoryResolution,
        browse_mode: BrowseMode,
        routing: RoutingMetadata,
        offers: Sequence[Offer] = (),
        events: Sequence[Event] = (),
    ) -> ChatResponse:
        """Combine the completion reply with the resolved inventory.

        Parameters
        ----------
        message:
            The user's message for this turn.
        reply_text:
            The completion service's answer.
        resolution:
            Resolver output for the turn.
        browse_mode:
            Browse classification of the turn.
        routing:
            Routing metadata to attach.
        offers:
            Offers that qualified for wallet actions this turn.
        events:
            Events fetched for an explicit event question.
        """
        ui_mode = classify_ui_mode(message, browse_mode)

        cards: list[BusinessCard] = []
        if ui_mode is not UIMode.SUGGESTIONS:
            cards = [
                _business_card(c) for c in resolution.primary if c.business.tier is BusinessTier.PAID
            ]
        carded = {card.id for card in cards}

        text = self._append_mentions(
            reply_text,
            [c for c in resolution.primary if c.id not in carded],
            resolution.more_options,
        )

        return ChatResponse(
            success=True,
            message=text,
            ui_mode=ui_mode,
            business_cards=cards,
            wallet_actions=wallet_actions_for(offers),
            event_cards=event_cards_for(events) if detect_event_intent(message) else [],
            map_pins=map_pins_for(resolution.all_candidates, message),
            routing=routing,
        )

    def assemble_hard_stop(
        self,
        kind: HardStopKind,
        routing: RoutingMetadata,
        offers: Sequence[Offer] = (),
        events: Sequence[Event] = (),
    ) -> ChatResponse:
        """Deterministic reply for a pure offer or event question."""
        if kind is HardStopKind.OFFERS:
            return ChatResponse(
                success=True,
                message=OFFERS_FOUND_MESSAGE if offers else OFFERS_EMPTY_MESSAGE,
                wallet_actions=wallet_actions_for(offers),
                routing=routing,
            )
        return ChatResponse(
            success=True,
            message=EVENTS_FOUND_MESSAGE if events else EVENTS_EMPTY_MESSAGE,
            event_cards=event_cards_for(events),
            routing=routing,
        )

    @staticmethod
    def _append_mentions(
        reply_text: str,
        uncarded: Sequence[ScoredCandidate],
        more_options: Sequence[ScoredCandidate],
    ) -> str:
        said = normalize_name(reply_text)
        fresh = [c for c in uncarded if normalize_name(c.name) not in said]
        extra = [c for c in more_options if normalize_name(c.name) not in said]

        lines = [reply_text.rstrip()] if reply_text.strip() else []
        if fresh:
            lines.append(f"{ALSO_WORTH_PREFIX} {', '.join(_mention(c) for c in fresh)}")
        if extra:
            lines.append(f"{MORE_OPTIONS_PREFIX} {', '.join(_mention(c) for c in extra)}")
        return "\n\n".join(lines)
