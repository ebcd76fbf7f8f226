"""OpenAI-compatible completion provider adapter.

Wraps the ``openai`` async client to implement
:class:`ICompletionProvider`.  One instance is bound to one tenant and one
model; when the tenant configures ``openai_base_url`` the client points at
that OpenAI-compatible endpoint instead of the default one.
"""

from __future__ import annotations

import openai
import structlog

from localscout.config.tenant import TenantConfig
from localscout.interfaces.completion_provider import ICompletionProvider
from localscout.models.conversation import ChatMessage
from localscout.utils.errors import CompletionError, RateLimitError

logger = structlog.get_logger(logger_name=__name__)


class OpenAICompletionProvider(ICompletionProvider):
    """Completion provider backed by an OpenAI-compatible chat API.

    The SDK's own retries are disabled: a failed completion fails the turn
    and the caller decides what the user sees.
    """

    def __init__(self, tenant: TenantConfig, model: str) -> None:
        self._api_key = tenant.openai_api_key
        self._model = model

        client_kwargs: dict = {
            "api_key": self._api_key,
            "timeout": openai.Timeout(tenant.completion_timeout_seconds, connect=5.0),
            "max_retries": 0,
        }
        if tenant.openai_base_url:
            client_kwargs["base_url"] = tenant.openai_base_url

        self._client = openai.AsyncOpenAI(**client_kwargs)
        self._provider_label = "openai-compatible" if tenant.openai_base_url else "openai"
        self._city = tenant.city

    # ------------------------------------------------------------------
    # ICompletionProvider implementation
    # ------------------------------------------------------------------

    async def complete(
        self,
        system_prompt: str,
        history: list[ChatMessage],
        user_message: str,
        temperature: float = 0.7,
        max_tokens: int = 500,
    ) -> str:
        """Generate the reply via the chat completions API.

        The system prompt goes first as a ``system`` message, followed by the
        windowed history and finally the new user message.
        """
        messages = [{"role": "system", "content": system_prompt}]
        messages.extend({"role": m.role, "content": m.content} for m in history)
        messages.append({"role": "user", "content": user_message})

        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except openai.RateLimitError as exc:
            raise RateLimitError(
                message=f"{self._provider_label} rate limit exceeded",
                provider_name=self.get_provider_name(),
            ) from exc
        except openai.APITimeoutError as exc:
            raise CompletionError(
                message=f"{self._provider_label} timed out",
                provider_name=self.get_provider_name(),
            ) from exc
        except openai.APIError as exc:
            raise CompletionError(
                message=f"{self._provider_label} API error: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise CompletionError(
                message=f"{self._provider_label} returned empty response",
                provider_name=self.get_provider_name(),
            )

        logger.info(
            "openai_completion",
            model=self._model,
            provider=self._provider_label,
            city=self._city,
            tokens=response.usage.total_tokens if response.usage else None,
        )
        return content

    def get_model_name(self) -> str:
        return self._model

    def get_provider_name(self) -> str:
        return self._provider_label

    def is_available(self) -> bool:
        """Return ``True`` if an API key is configured (doesn't verify it works)."""
        return bool(self._api_key)
