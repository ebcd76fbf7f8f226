"""Turn pipeline components for the discovery chat."""

from localscout.pipeline.orchestrator import DiscoveryChatPipeline
from localscout.pipeline.prompt_builder import build_system_prompt
from localscout.pipeline.provider_factory import CompletionProviderFactory

__all__ = [
    "CompletionProviderFactory",
    "DiscoveryChatPipeline",
    "build_system_prompt",
]
