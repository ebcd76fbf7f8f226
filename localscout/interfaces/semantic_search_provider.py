"""Abstract base class for semantic search over business knowledge.

The embedding model and vector index are implementation details of the
provider.  The engine only sees ranked :class:`KnowledgeSnippet` objects
with a similarity in [0, 1].
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from localscout.models.knowledge import KnowledgeSnippet


# Concrete implementation: ChromaDBSemanticSearchProvider
# Located in: localscout/providers/knowledge/
class ISemanticSearchProvider(ABC):
    """Contract for city-scoped semantic retrieval."""

    @abstractmethod
    async def search(
        self,
        query: str,
        city: str,
        match_count: int = 12,
        match_threshold: float | None = None,
    ) -> list[KnowledgeSnippet]:
        """Return up to *match_count* snippets for *query* in *city*.

        Parameters
        ----------
        query:
            Natural-language query text.
        city:
            Tenant city key; snippets from other cities are never returned.
        match_count:
            Maximum number of snippets.
        match_threshold:
            Optional minimum similarity; lower-scoring snippets are dropped.

        Returns
        -------
        list[KnowledgeSnippet]
            Snippets sorted by similarity, highest first.

        Raises
        ------
        localscout.utils.errors.DataSourceError
            If the underlying index cannot be queried.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short provider identifier, e.g. ``"chromadb"``."""
