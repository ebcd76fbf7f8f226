"""Abstract base class for conversation session storage.

A session holds the :class:`ConversationState` and the bounded history
window of one conversation.  The store enforces the window: callers append
freely and never see more than the configured number of recent turns.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from localscout.models.conversation import ChatMessage, ConversationState


# Concrete implementation: MemorySessionStore
# Located in: localscout/providers/session/
class ISessionStore(ABC):
    """Contract for per-session state persistence.

    All operations are async to allow network-backed stores (e.g. Redis)
    without blocking the event loop.
    """

    @abstractmethod
    async def load(self, session_id: str) -> tuple[ConversationState, list[ChatMessage]]:
        """Return the state and history for *session_id*.

        Unknown or expired sessions yield a fresh state and empty history.
        """

    @abstractmethod
    async def save(
        self,
        session_id: str,
        state: ConversationState,
        new_messages: list[ChatMessage],
    ) -> None:
        """Store *state* and append *new_messages* to the history window."""

    @abstractmethod
    async def delete(self, session_id: str) -> None:
        """Forget *session_id* (no-op if absent)."""
