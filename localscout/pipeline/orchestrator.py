"""Turn pipeline for the discovery chat.

Coordinates query understanding, the hard-stop gate, tiered inventory
resolution, the completion call and response assembly for one user turn,
then folds the turn into the session's conversation state.

Each turn follows the same sequence:
    1. Validate the message and load the session.
    2. Detect browse mode, intent and facets; classify complexity.
    3. Pure offer/event questions stop here and are answered from the
       directory tables (no semantic search, no completion call).
    4. Otherwise build the tenant's completion provider, resolve the
       inventory and fetch any offers/events the turn needs.
    5. Call the completion service once, under the tenant's timeout.
    6. Assemble the response, update the state, save the session.

Failures never surface raw exception text to the user: configuration
problems yield ``service_unavailable`` and completion problems yield
``completion_failed``, both with generic messages.
"""

from __future__ import annotations

import asyncio
import re
import uuid
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo

import structlog

from localscout.config.tenant import TenantConfig
from localscout.interfaces.business_store import IBusinessStore
from localscout.interfaces.session_store import ISessionStore
from localscout.models.business import BusinessRecord, Event, Offer
from localscout.models.conversation import ChatMessage, ConversationState
from localscout.models.intent import BrowseMode, HardStopKind, QueryComplexity
from localscout.models.ranking import InventoryResolution, ResolutionMode
from localscout.models.response import ChatResponse, ModelTier, RoutingMetadata
from localscout.pipeline.prompt_builder import build_system_prompt
from localscout.pipeline.provider_factory import CompletionProviderFactory
from localscout.services.conversation_state import record_browse_turn, update_conversation_state
from localscout.services.facet_detector import detect_facets
from localscout.services.intent_detector import detect_browse, detect_intent
from localscout.services.inventory_resolver import InventoryResolver
from localscout.services.query_classifier import (
    classify_complexity,
    detect_event_intent,
    detect_hard_stop,
    detect_offer_intent,
    wants_full_list,
)
from localscout.services.response_assembler import ResponseAssembler
from localscout.utils.concurrency import gather_sources
from localscout.utils.dates import detect_calendar_date
from localscout.utils.errors import (
    CompletionError,
    ConfigurationError,
    ProviderUnavailableError,
    RateLimitError,
    ValidationError,
)
from localscout.utils.logging import get_logger, turn_context
from localscout.utils.text_matching import extract_business_names

SERVICE_UNAVAILABLE_MESSAGE = "Sorry, the assistant isn't available right now. Please try again later."
COMPLETION_FAILED_MESSAGE = "Sorry, I couldn't put an answer together just now. Please try asking again."

_PRONOUN_RE = re.compile(r"\b(their|they|them|it|its)\b", re.IGNORECASE)

_OFFERS_LIMIT = 10
_EVENTS_LIMIT = 5


class DiscoveryChatPipeline:
    """Run one conversational discovery turn end to end.

    Parameters
    ----------
    tenants:
        City key -> :class:`TenantConfig`.
    business_store:
        Structured directory store (offers and events for hard-stop and
        wallet paths, detail lookups).
    session_store:
        Per-session state and history persistence.
    resolver:
        The tiered inventory resolver.
    provider_factory:
        Builds completion providers per tenant; defaults to
        :class:`CompletionProviderFactory`.
    assembler:
        Response assembler; defaults to :class:`ResponseAssembler`.
    clock:
        Returns the current time in a given IANA timezone; injectable for
        tests.
    """

    def __init__(
        self,
        tenants: Mapping[str, TenantConfig],
        business_store: IBusinessStore,
        session_store: ISessionStore,
        resolver: InventoryResolver,
        provider_factory: CompletionProviderFactory | None = None,
        assembler: ResponseAssembler | None = None,
        clock: Callable[[str], datetime] | None = None,
    ) -> None:
        self._tenants = {city.lower(): tenant for city, tenant in tenants.items()}
        self._store = business_store
        self._sessions = session_store
        self._resolver = resolver
        self._factory = provider_factory or CompletionProviderFactory()
        self._assembler = assembler or ResponseAssembler()
        self._clock = clock or (lambda tz: datetime.now(ZoneInfo(tz)))
        self._logger: structlog.BoundLogger = get_logger(__name__)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def handle_turn(
        self,
        session_id: str,
        message: str,
        city: str,
        user_location: Any = None,
    ) -> ChatResponse:
        """Answer *message* for *session_id* in *city*.

        Raises
        ------
        ValidationError
            If *message* is empty or whitespace.
        """
        with turn_context(session_id=session_id, city=city.lower()):
            return await self._run_turn(session_id, message, city, user_location)

    async def get_business_details(self, business_id: str) -> BusinessRecord | None:
        """Return one business by id.

        Raises
        ------
        ValidationError
            If *business_id* is not a UUID; the store is never called.
        """
        try:
            uuid.UUID(str(business_id))
        except ValueError as exc:
            raise ValidationError(message=f"Invalid business id: {business_id!r}") from exc
        return await self._store.get_business(business_id)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _run_turn(self, session_id: str, message: str, city: str, user_location: Any) -> ChatResponse:
        if not message or not message.strip():
            raise ValidationError(message="Message must not be empty")
        message = message.strip()

        tenant = self._tenants.get(city.lower())
        if tenant is None:
            self._logger.error("tenant_not_configured")
            return self._failure(SERVICE_UNAVAILABLE_MESSAGE, "service_unavailable", RoutingMetadata())

        state, history = await self._sessions.load(session_id)
        now = self._clock(tenant.timezone)

        browse_mode = detect_browse(message, state.last_browse_mode)
        intent = detect_intent(message)
        facets = detect_facets(message)
        classification = classify_complexity(message, len(history))

        self._logger.info(
            "turn_started",
            browse_mode=browse_mode.value,
            categories=list(intent.categories),
            keywords=list(intent.keywords),
            facets=list(facets.active_facets),
            complexity=classification.complexity.value,
        )

        hard_stop = detect_hard_stop(message)
        if hard_stop is not None:
            return await self._handle_hard_stop(session_id, message, tenant, state, hard_stop, now)

        tier = ModelTier.CAPABLE if classification.complexity is QueryComplexity.COMPLEX else ModelTier.CHEAP
        routing = RoutingMetadata(
            complexity=classification.complexity,
            classification_reason=classification.reason,
            model_tier=tier,
            browse_mode=browse_mode,
        )

        try:
            provider = self._factory.build(tenant, tier)
        except ConfigurationError as exc:
            self._logger.error(
                "completion_provider_misconfigured",
                error=str(exc),
                provider=exc.provider_name,
            )
            return self._failure(SERVICE_UNAVAILABLE_MESSAGE, "service_unavailable", routing)

        resolution = await self._resolver.resolve(
            message,
            tenant.city,
            intent,
            browse_mode,
            facets=facets,
            user_location=user_location,
            browse_offset=state.browse_offset,
            semantic_query=enhance_query(message, state),
            match_count=(
                tenant.ranking.semantic_match_count_list_all
                if wants_full_list(message)
                else tenant.ranking.semantic_match_count
            ),
            ranking=tenant.ranking,
            timezone=tenant.timezone,
            now=now,
        )

        offers, events, extra_failed = await self._fetch_turn_extras(message, tenant, state, resolution, now)
        routing = routing.model_copy(
            update={
                "model_name": provider.get_model_name(),
                "resolution_mode": resolution.mode,
                "failed_sources": [*resolution.failed_sources, *extra_failed],
            }
        )

        system_prompt = build_system_prompt(tenant, resolution, state, offers, events)
        try:
            reply = await asyncio.wait_for(
                provider.complete(
                    system_prompt,
                    history,
                    message,
                    temperature=tenant.temperature,
                    max_tokens=tenant.max_tokens,
                ),
                timeout=tenant.completion_timeout_seconds,
            )
        except asyncio.TimeoutError:
            self._logger.error(
                "completion_timed_out",
                model=provider.get_model_name(),
                timeout=tenant.completion_timeout_seconds,
            )
            return self._failure(COMPLETION_FAILED_MESSAGE, "completion_failed", routing)
        except (CompletionError, RateLimitError, ProviderUnavailableError) as exc:
            self._logger.error(
                "completion_failed",
                model=provider.get_model_name(),
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return self._failure(COMPLETION_FAILED_MESSAGE, "completion_failed", routing)

        response = self._assembler.assemble(
            message,
            reply,
            resolution,
            browse_mode,
            routing,
            offers=offers,
            events=events,
        )

        candidates = resolution.all_candidates
        names = extract_business_names(response.message, [c.name for c in candidates])
        ids = {c.name: c.id for c in candidates}
        new_state = update_conversation_state(state, message, response.message, names, ids)
        recorded_mode = BrowseMode.BROWSE if resolution.mode is ResolutionMode.FALLBACK_BROWSE else browse_mode
        new_state = record_browse_turn(new_state, recorded_mode, resolution.next_browse_offset)

        await self._sessions.save(
            session_id,
            new_state,
            [
                ChatMessage(role="user", content=message),
                ChatMessage(role="assistant", content=response.message),
            ],
        )

        self._logger.info(
            "turn_completed",
            resolution_mode=resolution.mode.value,
            ui_mode=response.ui_mode.value,
            cards=len(response.business_cards),
            pins=len(response.map_pins),
            model=provider.get_model_name(),
        )
        return response

    async def _handle_hard_stop(
        self,
        session_id: str,
        message: str,
        tenant: TenantConfig,
        state: ConversationState,
        kind: HardStopKind,
        now: datetime,
    ) -> ChatResponse:
        if kind is HardStopKind.OFFERS:
            source = self._store.fetch_offers(tenant.city, limit=_OFFERS_LIMIT)
        else:
            source = self._events_source(message, tenant.city, now)

        results, failed = await gather_sources(
            {kind.value: source}, logger=self._logger, query=message
        )
        rows = results[kind.value]
        routing = RoutingMetadata(hard_stop=kind, failed_sources=failed)
        response = self._assembler.assemble_hard_stop(
            kind,
            routing,
            offers=rows if kind is HardStopKind.OFFERS else (),
            events=rows if kind is HardStopKind.EVENTS else (),
        )

        new_state = update_conversation_state(state, message, response.message, [])
        new_state = record_browse_turn(new_state, BrowseMode.NOT_BROWSE)
        await self._sessions.save(
            session_id,
            new_state,
            [
                ChatMessage(role="user", content=message),
                ChatMessage(role="assistant", content=response.message),
            ],
        )

        self._logger.info(
            "hard_stop_answered",
            kind=kind.value,
            rows=len(rows),
            failed_sources=failed,
        )
        return response

    def _events_source(self, message: str, city: str, now: datetime):
        today = now.date()
        on_date = detect_calendar_date(message, today=today)
        if on_date is not None:
            return self._store.fetch_events(city, on_date=on_date, limit=_EVENTS_LIMIT)
        return self._store.fetch_events(city, from_date=today, limit=_EVENTS_LIMIT)

    async def _fetch_turn_extras(
        self,
        message: str,
        tenant: TenantConfig,
        state: ConversationState,
        resolution: InventoryResolution,
        now: datetime,
    ) -> tuple[list[Offer], list[Event], list[str]]:
        """Offers for wallet actions and events for event cards, when asked for."""
        sources: dict[str, Any] = {}

        if detect_offer_intent(message):
            target = None
            if state.current_business is not None and state.current_business.business_id:
                target = state.current_business.business_id
            elif resolution.primary:
                target = resolution.primary[0].id
            if target is not None:
                sources["offers"] = self._store.fetch_offers(tenant.city, business_ids=[target], limit=_OFFERS_LIMIT)

        if detect_event_intent(message):
            sources["events"] = self._events_source(message, tenant.city, now)

        if not sources:
            return [], [], []

        results, failed = await gather_sources(sources, logger=self._logger, query=message)
        return list(results.get("offers", [])), list(results.get("events", [])), failed

    @staticmethod
    def _failure(message: str, error_code: str, routing: RoutingMetadata) -> ChatResponse:
        return ChatResponse(success=False, message=message, error_code=error_code, routing=routing)


def enhance_query(message: str, state: ConversationState) -> str:
    """Prefix the focal business name to pronoun follow-ups ("do they do vegan?")."""
    if state.current_business is not None and _PRONOUN_RE.search(message):
        return f"{state.current_business.name} {message}"
    return message
