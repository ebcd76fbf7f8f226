"""Completion provider adapters.

Two concrete implementations of ICompletionProvider
(localscout/interfaces/completion_provider.py):
    - OpenAICompletionProvider   : gpt-4o-mini / gpt-4o (also OpenAI-compatible APIs)
    - AnthropicCompletionProvider: Claude Haiku / Sonnet

Instances are built per tenant and per model tier by
CompletionProviderFactory (localscout/pipeline/provider_factory.py).
"""

from localscout.providers.llm.anthropic_provider import AnthropicCompletionProvider
from localscout.providers.llm.openai_provider import OpenAICompletionProvider

__all__ = ["AnthropicCompletionProvider", "OpenAICompletionProvider"]
