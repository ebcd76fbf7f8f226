"""Abstract base class for completion service providers.

The completion service is opaque to the engine: it receives a system
prompt, the bounded conversation history and the user's message, and
returns text.  Concrete adapters wrap the OpenAI or Anthropic SDKs; each
instance is bound to one tenant and one model tier (cheap or capable).
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from localscout.models.conversation import ChatMessage


# Concrete implementations: OpenAICompletionProvider, AnthropicCompletionProvider
# Located in: localscout/providers/llm/
class ICompletionProvider(ABC):
    """Contract for chat completion services."""

    @abstractmethod
    async def complete(
        self,
        system_prompt: str,
        history: list[ChatMessage],
        user_message: str,
        temperature: float = 0.7,
        max_tokens: int = 500,
    ) -> str:
        """Generate the assistant reply for *user_message*.

        Parameters
        ----------
        system_prompt:
            Instructions plus the retrieved business and city context.
        history:
            Prior turns, oldest first, already windowed by the caller.
        user_message:
            The message being answered.
        temperature:
            Sampling temperature.
        max_tokens:
            Upper bound on the reply length.

        Returns
        -------
        str
            The reply text.

        Raises
        ------
        localscout.utils.errors.CompletionError
            If the API call fails or returns no text.
        """

    @abstractmethod
    def get_model_name(self) -> str:
        """Return the model identifier used for completions."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short provider identifier, e.g. ``"openai"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if credentials are configured (no network call)."""
