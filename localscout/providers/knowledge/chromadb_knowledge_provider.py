"""ChromaDB semantic search provider adapter.

Wraps ``chromadb.PersistentClient`` to implement
:class:`ISemanticSearchProvider`.  Knowledge documents (menus, offer blurbs,
event write-ups, city guides) live in one cosine-distance collection; every
document carries a ``city`` metadata field and every query is filtered on
it, so one tenant can never read another tenant's knowledge.
"""

from __future__ import annotations

import os
from typing import Any

os.environ["ANONYMIZED_TELEMETRY"] = "False"

import chromadb
import structlog

from localscout.interfaces.embedding_provider import IEmbeddingProvider
from localscout.interfaces.semantic_search_provider import ISemanticSearchProvider
from localscout.models.knowledge import KnowledgeSnippet, KnowledgeType
from localscout.utils.errors import DataSourceError

logger = structlog.get_logger(logger_name=__name__)


class _NoopEmbeddingFunction(chromadb.EmbeddingFunction[list[str]]):
    """Embedding function that is never called.

    Queries and upserts always pass pre-computed embeddings, so ChromaDB's
    default ONNX model is never needed.
    """

    def __call__(self, input: list[str]) -> list[list[float]]:
        raise NotImplementedError("localscout passes pre-computed embeddings to ChromaDB")

    def name(self) -> str:
        return "noop_precomputed"


class ChromaDBSemanticSearchProvider(ISemanticSearchProvider):
    """Semantic search backed by a local ChromaDB collection.

    The injected :class:`IEmbeddingProvider` embeds query text with the same
    model that was used to embed the stored documents.
    """

    def __init__(
        self,
        embedding_provider: IEmbeddingProvider,
        persist_directory: str = "./data/chromadb",
        collection_name: str = "localscout_knowledge",
        client: Any = None,
    ) -> None:
        self._embedding_provider = embedding_provider
        self._client = client or chromadb.PersistentClient(
            path=persist_directory,
            settings=chromadb.config.Settings(anonymized_telemetry=False),
        )
        self._collection = self._client.get_or_create_collection(
            name=collection_name,
            metadata={"hnsw:space": "cosine"},
            embedding_function=_NoopEmbeddingFunction(),
        )

    async def search(
        self,
        query: str,
        city: str,
        match_count: int = 12,
        match_threshold: float | None = None,
    ) -> list[KnowledgeSnippet]:
        try:
            query_embedding = await self._embedding_provider.embed_single(query)
            results = self._collection.query(
                query_embeddings=[query_embedding],
                n_results=match_count,
                where={"city": city.lower()},
            )
        except DataSourceError:
            raise
        except Exception as exc:
            raise DataSourceError(
                message=f"ChromaDB query failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        if not results["documents"] or not results["documents"][0]:
            return []

        documents = results["documents"][0]
        metadatas = results["metadatas"][0] if results["metadatas"] else [{}] * len(documents)
        distances = results["distances"][0] if results["distances"] else [0.0] * len(documents)

        snippets: list[KnowledgeSnippet] = []
        for text, meta, distance in zip(documents, metadatas, distances, strict=True):
            similarity = max(0.0, min(1.0, 1.0 - distance))
            if match_threshold is not None and similarity < match_threshold:
                continue
            snippets.append(self._to_snippet(text, meta or {}, similarity))

        snippets.sort(key=lambda s: s.similarity, reverse=True)
        logger.info(
            "chromadb_query",
            city=city,
            query_length=len(query),
            raw_results=len(documents),
            results_count=len(snippets),
            top_score=snippets[0].similarity if snippets else 0.0,
        )
        return snippets

    async def upsert_documents(self, city: str, documents: list[dict[str, Any]]) -> int:
        """Embed and upsert knowledge *documents* for *city*.

        Each document needs ``id`` and ``content``; ``business_id``,
        ``business_name``, ``title`` and ``knowledge_type`` are optional.
        Returns the number of documents stored.
        """
        if not documents:
            return 0

        embeddings = await self._embedding_provider.embed([d["content"] for d in documents])
        try:
            self._collection.upsert(
                ids=[str(d["id"]) for d in documents],
                embeddings=embeddings,
                documents=[d["content"] for d in documents],
                metadatas=[
                    {
                        "city": city.lower(),
                        "business_id": d.get("business_id") or "",
                        "business_name": d.get("business_name") or "",
                        "title": d.get("title") or "",
                        "knowledge_type": d.get("knowledge_type") or KnowledgeType.GENERIC.value,
                    }
                    for d in documents
                ],
            )
        except Exception as exc:
            raise DataSourceError(
                message=f"ChromaDB upsert failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        logger.info("chromadb_upsert", city=city, documents=len(documents))
        return len(documents)

    def get_provider_name(self) -> str:
        return "chromadb"

    @staticmethod
    def _to_snippet(text: str, meta: dict[str, Any], similarity: float) -> KnowledgeSnippet:
        raw_type = meta.get("knowledge_type") or KnowledgeType.GENERIC.value
        try:
            knowledge_type = KnowledgeType(raw_type)
        except ValueError:
            knowledge_type = KnowledgeType.GENERIC
        return KnowledgeSnippet(
            business_id=meta.get("business_id") or None,
            business_name=meta.get("business_name") or "",
            title=meta.get("title") or "",
            content=text,
            similarity=similarity,
            knowledge_type=knowledge_type,
        )
