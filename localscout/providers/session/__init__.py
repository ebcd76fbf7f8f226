"""Session store adapters.

One concrete implementation of ISessionStore
(localscout/interfaces/session_store.py):
    - MemorySessionStore: cachetools.TTLCache, bounded history window
"""

from localscout.providers.session.memory_session_store import MemorySessionStore

__all__ = ["MemorySessionStore"]
