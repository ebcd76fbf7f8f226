"""Abstract base class for text-embedding providers.

Knowledge documents are embedded when the CLI seeds a city, and the
semantic search provider embeds each user query with the same model
before querying the index.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementation: OpenAIEmbeddingProvider
# Located in: localscout/providers/embedding/
class IEmbeddingProvider(ABC):
    """Contract for text-embedding services."""

    @abstractmethod
    async def embed(self, texts: list[str]) -> list[list[float]]:
        """Embed a batch of texts, one vector per input in input order.

        Raises
        ------
        localscout.utils.errors.DataSourceError
            If the embedding API call fails.
        """

    @abstractmethod
    async def embed_single(self, text: str) -> list[float]:
        """Embed one text."""

    @abstractmethod
    def get_model_name(self) -> str:
        """Return the embedding model identifier."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this embedding provider."""
