"""Public interface definitions for every external collaborator.

The engine talks to the outside world only through the abstract base
classes below.  Concrete adapters live in ``localscout/providers/`` and are
injected when the pipeline is built (see ``localscout/main.py``), so tests
can pass mocks and deployments can swap backends without touching the
ranking code.

CONCRETE PROVIDER MAP:
    Interface                  →  Concrete implementations
    ─────────────────────────────────────────────────────────────────────
    ICompletionProvider        →  OpenAICompletionProvider,
                                  AnthropicCompletionProvider
    ISemanticSearchProvider    →  ChromaDBSemanticSearchProvider
    IEmbeddingProvider         →  OpenAIEmbeddingProvider
    IBusinessStore             →  SQLiteBusinessStore
    ISessionStore              →  MemorySessionStore
"""

from localscout.interfaces.business_store import IBusinessStore
from localscout.interfaces.completion_provider import ICompletionProvider
from localscout.interfaces.embedding_provider import IEmbeddingProvider
from localscout.interfaces.semantic_search_provider import ISemanticSearchProvider
from localscout.interfaces.session_store import ISessionStore

__all__ = [
    "IBusinessStore",
    "ICompletionProvider",
    "IEmbeddingProvider",
    "ISemanticSearchProvider",
    "ISessionStore",
]
