"""Per-tenant completion client construction.

Clients are built from a :class:`TenantConfig` at call time and never
cached process-wide, so tenants with different API keys, endpoints or
models can never share a client.
"""

from __future__ import annotations

from localscout.config.tenant import TenantConfig
from localscout.interfaces.completion_provider import ICompletionProvider
from localscout.models.response import ModelTier
from localscout.providers.llm.anthropic_provider import AnthropicCompletionProvider
from localscout.providers.llm.openai_provider import OpenAICompletionProvider
from localscout.utils.errors import ConfigurationError

_PROVIDERS: dict[str, tuple[type[ICompletionProvider], str]] = {
    "openai": (OpenAICompletionProvider, "openai_api_key"),
    "anthropic": (AnthropicCompletionProvider, "anthropic_api_key"),
}


class CompletionProviderFactory:
    """Build the cheap or capable completion provider for one tenant."""

    def build(self, tenant: TenantConfig, tier: ModelTier) -> ICompletionProvider:
        """Return a provider for *tenant* at model *tier*.

        Raises
        ------
        ConfigurationError
            If the tenant names an unknown provider, has no API key for it,
            or has no model configured for *tier*.
        """
        name = tenant.completion_provider.lower()
        entry = _PROVIDERS.get(name)
        if entry is None:
            raise ConfigurationError(
                message=f"Unknown completion provider '{name}' for tenant '{tenant.city}'",
                provider_name=name,
            )

        provider_cls, key_field = entry
        if not getattr(tenant, key_field):
            raise ConfigurationError(
                message=f"No API key configured for tenant '{tenant.city}'",
                provider_name=name,
            )

        model = tenant.capable_model if tier is ModelTier.CAPABLE else tenant.cheap_model
        if not model:
            raise ConfigurationError(
                message=f"No {tier.value} model configured for tenant '{tenant.city}'",
                provider_name=name,
            )

        return provider_cls(tenant, model)
