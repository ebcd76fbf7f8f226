"""OpenAI embeddings for the knowledge collection.

The same model embeds knowledge documents at seed time and the user's
query on every turn, so ``OPENAI_EMBEDDING_MODEL`` must not change once a
collection has been built.
"""

from __future__ import annotations

import openai
import structlog

from localscout.config.settings import Settings
from localscout.interfaces.embedding_provider import IEmbeddingProvider
from localscout.utils.errors import DataSourceError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_MODEL = "text-embedding-3-small"

# Inputs per embeddings.create call.
_BATCH_SIZE = 256

# Menus pasted in full can run long; the head carries the useful terms.
_MAX_INPUT_CHARS = 8000


def _prepare(text: str) -> str:
    collapsed = " ".join(text.split())
    return collapsed[:_MAX_INPUT_CHARS] or " "


class OpenAIEmbeddingProvider(IEmbeddingProvider):
    """Embeds text through ``embeddings.create`` on an OpenAI-compatible API."""

    def __init__(self, settings: Settings) -> None:
        client_kwargs: dict = {"api_key": settings.openai_api_key, "max_retries": 0}
        if settings.openai_base_url:
            client_kwargs["base_url"] = settings.openai_base_url
        self._client = openai.AsyncOpenAI(**client_kwargs)
        self._model = settings.openai_embedding_model or _DEFAULT_MODEL
        self._compatible = bool(settings.openai_base_url)

    async def embed(self, texts: list[str]) -> list[list[float]]:
        vectors: list[list[float]] = []
        for start in range(0, len(texts), _BATCH_SIZE):
            batch = [_prepare(t) for t in texts[start : start + _BATCH_SIZE]]
            try:
                response = await self._client.embeddings.create(input=batch, model=self._model)
            except openai.APIError as exc:
                raise DataSourceError(
                    message=f"Embedding request failed ({self._model}): {exc}",
                    provider_name=self.get_provider_name(),
                ) from exc
            vectors.extend(item.embedding for item in response.data)

        if texts:
            logger.debug("texts_embedded", model=self._model, count=len(texts))
        return vectors

    async def embed_single(self, text: str) -> list[float]:
        vectors = await self.embed([text])
        return vectors[0]

    def get_model_name(self) -> str:
        return self._model

    def get_provider_name(self) -> str:
        return "openai-compatible" if self._compatible else "openai"
