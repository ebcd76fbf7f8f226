"""Semantic knowledge search adapters.

One concrete implementation of ISemanticSearchProvider
(localscout/interfaces/semantic_search_provider.py):
    - ChromaDBSemanticSearchProvider: local ChromaDB collection, city-filtered
"""

from localscout.providers.knowledge.chromadb_knowledge_provider import (
    ChromaDBSemanticSearchProvider,
)

__all__ = ["ChromaDBSemanticSearchProvider"]
