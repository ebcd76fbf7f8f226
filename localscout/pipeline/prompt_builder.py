"""System prompt assembly for the completion call.

The prompt carries only what the directory knows: the resolved businesses
(with their reason tags, offer counts and knowledge), city-wide knowledge,
offers and events fetched this turn, and the conversation summary.  The
instructions forbid naming anything that is not in those blocks.
"""

from __future__ import annotations

from collections.abc import Sequence

from localscout.config.tenant import TenantConfig
from localscout.models.business import Event, Offer
from localscout.models.conversation import ConversationState
from localscout.models.ranking import InventoryResolution, ResolutionMode, ScoredCandidate
from localscout.services.conversation_state import summarize_state

_KNOWLEDGE_CHARS = 400
_CITY_KNOWLEDGE_LIMIT = 3

_INSTRUCTIONS = """\
You are the friendly local guide for {city}. Answer in a warm, concise, conversational tone.

Rules:
- Only recommend businesses listed under AVAILABLE BUSINESSES. Never invent a business.
- Only mention offers listed under CURRENT OFFERS and events listed under UPCOMING EVENTS.
- Bold business names like **Name** the first time you mention them.
- If nothing listed fits the request, say so plainly and suggest a nearby alternative from the list.
- Keep answers under 150 words unless the user asks for a full list."""


def _business_line(candidate: ScoredCandidate) -> str:
    business = candidate.business
    parts = [f"- **{business.name}** ({business.category_label})"]
    if candidate.meta.rating_badge:
        parts.append(f"rated {candidate.meta.rating_badge}")
    if candidate.reason is not None:
        parts.append(candidate.reason.label)
    if business.town:
        parts.append(business.town)
    line = " | ".join(parts)
    if candidate.offers_count:
        line += f" [Has {candidate.offers_count} offers available]"
    if business.tagline:
        line += f"\n  {business.tagline}"
    if candidate.knowledge_text:
        line += f"\n  Knowledge: {candidate.knowledge_text[:_KNOWLEDGE_CHARS]}"
    return line


def build_system_prompt(
    tenant: TenantConfig,
    resolution: InventoryResolution,
    state: ConversationState,
    offers: Sequence[Offer] = (),
    events: Sequence[Event] = (),
) -> str:
    """Render the system prompt for one turn."""
    sections = [_INSTRUCTIONS.format(city=tenant.label)]

    listed = [*resolution.primary, *resolution.more_options]
    if listed:
        heading = "AVAILABLE BUSINESSES"
        if resolution.mode is ResolutionMode.FALLBACK_BROWSE:
            heading += " (nothing matched the request exactly; these are popular picks)"
        sections.append(f"{heading}:\n" + "\n".join(_business_line(c) for c in listed))
    else:
        sections.append("AVAILABLE BUSINESSES:\n(none)")

    city_knowledge = [s for s in resolution.knowledge if s.business_id is None][:_CITY_KNOWLEDGE_LIMIT]
    if city_knowledge:
        sections.append(
            "CITY KNOWLEDGE:\n"
            + "\n".join(f"- {s.title + ': ' if s.title else ''}{s.content[:_KNOWLEDGE_CHARS]}" for s in city_knowledge)
        )

    if offers:
        sections.append(
            "CURRENT OFFERS:\n"
            + "\n".join(f"- {o.name}{' (' + o.value + ')' if o.value else ''} at {o.business_name}" for o in offers)
        )

    if events:
        sections.append(
            "UPCOMING EVENTS:\n"
            + "\n".join(
                f"- {e.title} at {e.business_name} on {e.event_date.isoformat()}"
                + (f" from {e.start_time}" if e.start_time else "")
                for e in events
            )
        )

    sections.append(f"CONVERSATION CONTEXT: {summarize_state(state)}")
    return "\n\n".join(sections)
