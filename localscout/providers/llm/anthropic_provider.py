"""Anthropic completion provider adapter.

Wraps the ``anthropic`` async client to implement
:class:`ICompletionProvider`.

Differences from the OpenAI adapter:
    - the system prompt is a top-level parameter, not a message
    - the response is a list of content blocks; text blocks are joined
"""

from __future__ import annotations

import anthropic
import structlog

from localscout.config.tenant import TenantConfig
from localscout.interfaces.completion_provider import ICompletionProvider
from localscout.models.conversation import ChatMessage
from localscout.utils.errors import CompletionError, RateLimitError

logger = structlog.get_logger(logger_name=__name__)


class AnthropicCompletionProvider(ICompletionProvider):
    """Completion provider backed by the Anthropic Messages API."""

    def __init__(self, tenant: TenantConfig, model: str) -> None:
        self._api_key = tenant.anthropic_api_key
        self._model = model
        self._city = tenant.city
        self._client = anthropic.AsyncAnthropic(
            api_key=self._api_key,
            timeout=tenant.completion_timeout_seconds,
            max_retries=0,
        )

    async def complete(
        self,
        system_prompt: str,
        history: list[ChatMessage],
        user_message: str,
        temperature: float = 0.7,
        max_tokens: int = 500,
    ) -> str:
        messages = [{"role": m.role, "content": m.content} for m in history]
        messages.append({"role": "user", "content": user_message})

        try:
            response = await self._client.messages.create(
                model=self._model,
                max_tokens=max_tokens,
                system=system_prompt,
                messages=messages,
                temperature=temperature,
            )
        except anthropic.RateLimitError as exc:
            raise RateLimitError(
                message="Anthropic rate limit exceeded",
                provider_name=self.get_provider_name(),
            ) from exc
        except anthropic.APIError as exc:
            raise CompletionError(
                message=f"Anthropic API error: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        text_blocks = [block.text for block in response.content if block.type == "text"]
        if not text_blocks:
            raise CompletionError(
                message="Anthropic returned no text content",
                provider_name=self.get_provider_name(),
            )

        logger.info(
            "anthropic_completion",
            model=self._model,
            city=self._city,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
        )
        return "\n".join(text_blocks)

    def get_model_name(self) -> str:
        return self._model

    def get_provider_name(self) -> str:
        return "anthropic"

    def is_available(self) -> bool:
        return bool(self._api_key)
