"""Exception hierarchy for localScout.

Every error carries a ``message`` and, when a collaborator is to blame, the
``provider_name`` of that collaborator ("openai", "sqlite", "chromadb").
The classes follow the ways a discovery turn can fail::

    LocalScoutError
    +-- ConfigurationError        tenant has no usable completion service
    +-- ValidationError           malformed caller input (empty message, bad id)
    +-- DataSourceError           a tier pool, offers/events or semantic read
    +-- CompletionError           completion call failed or returned nothing
    +-- ProviderUnavailableError  external service unreachable
    +-- RateLimitError            provider rate limit hit

DataSourceError never reaches the caller of a turn: the failing source is
read as empty.  Configuration and completion failures become failed
``ChatResponse`` objects; ValidationError propagates.
"""


class LocalScoutError(Exception):
    """Base class; ``str()`` prefixes the provider, e.g. ``[openai] Rate limit exceeded``."""

    default_message = "An unexpected error occurred"

    def __init__(self, message: str | None = None, provider_name: str | None = None) -> None:
        self._message = message or self.default_message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


class ConfigurationError(LocalScoutError):
    default_message = "Invalid or missing configuration"


class ValidationError(LocalScoutError):
    default_message = "Invalid input"


class DataSourceError(LocalScoutError):
    default_message = "Data source read failed"


class CompletionError(LocalScoutError):
    """No retry happens at this level; the SDK clients are built with ``max_retries=0``."""

    default_message = "Completion call failed"


class ProviderUnavailableError(LocalScoutError):
    default_message = "External service is unavailable"


class RateLimitError(LocalScoutError):
    default_message = "Rate limit exceeded"
