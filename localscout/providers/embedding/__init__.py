"""Embedding provider adapters.

One concrete implementation of IEmbeddingProvider
(localscout/interfaces/embedding_provider.py):
    - OpenAIEmbeddingProvider: text-embedding-3-small (OpenAI-compatible APIs too)
"""

from localscout.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider

__all__ = ["OpenAIEmbeddingProvider"]
