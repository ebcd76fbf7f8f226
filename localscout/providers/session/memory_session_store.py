"""In-memory session store using cachetools.TTLCache.

Suitable for development and single-process deployments.  Sessions expire
after ``ttl`` seconds of inactivity (each save refreshes the entry); the
history kept per session is bounded by ``history_window_turns``.
"""

from __future__ import annotations

import structlog
from cachetools import TTLCache

from localscout.interfaces.session_store import ISessionStore
from localscout.models.conversation import ChatMessage, ConversationState
from localscout.services.conversation_state import create_initial_state

logger = structlog.get_logger(logger_name=__name__)


class MemorySessionStore(ISessionStore):
    """Session store backed by ``cachetools.TTLCache``.

    Parameters
    ----------
    max_size:
        Maximum number of live sessions before the least-recently-used one
        is evicted.
    ttl:
        Session time-to-live in seconds.
    history_window_turns:
        Number of user/assistant exchanges kept per session.
    """

    def __init__(self, max_size: int = 5000, ttl: int = 3600, history_window_turns: int = 4) -> None:
        self._cache: TTLCache[str, tuple[ConversationState, tuple[ChatMessage, ...]]] = TTLCache(
            maxsize=max_size, ttl=ttl
        )
        self._max_messages = max(history_window_turns, 0) * 2

    async def load(self, session_id: str) -> tuple[ConversationState, list[ChatMessage]]:
        entry = self._cache.get(session_id)
        if entry is None:
            logger.debug("session_miss", session_id=session_id)
            return create_initial_state(), []
        state, history = entry
        return state, list(history)

    async def save(
        self,
        session_id: str,
        state: ConversationState,
        new_messages: list[ChatMessage],
    ) -> None:
        _, history = self._cache.get(session_id, (None, ()))
        combined = (*history, *new_messages)
        if self._max_messages:
            combined = combined[-self._max_messages :]
        else:
            combined = ()
        self._cache[session_id] = (state, combined)
        logger.debug("session_saved", session_id=session_id, history=len(combined))

    async def delete(self, session_id: str) -> None:
        self._cache.pop(session_id, None)
