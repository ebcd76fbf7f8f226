"""Application settings loaded from environment variables via pydantic-settings.

Values are read from, in priority order:

  1. Environment variables -- e.g. ``OPENAI_API_KEY=sk-abc123``
  2. The ``.env`` file in the working directory (local development)

Field names map to upper-cased environment variable names.  Defaults are
used when neither source defines a value.  Empty strings mean "not
configured"; per-tenant values from ``config/config.yaml`` fall back to
these when a tenant does not set its own.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """localScout application settings."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === Completion services (defaults for tenants without their own keys) ===
    openai_api_key: str = ""
    openai_base_url: str = ""
    anthropic_api_key: str = ""
    completion_provider: str = "openai"
    cheap_model: str = ""
    capable_model: str = ""
    completion_timeout_seconds: float = 20.0

    # === Semantic search ===
    semantic_enabled: bool = False
    openai_embedding_model: str = "text-embedding-3-small"
    chromadb_persist_dir: str = "./data/chromadb"
    chromadb_collection: str = "localscout_knowledge"

    # === Directory store ===
    directory_db_path: str = "data/directory.db"

    # === Sessions ===
    session_ttl_seconds: int = 3600
    session_max_entries: int = 5000
    history_window_turns: int = 4

    # === App Config ===
    config_path: str = "config/config.yaml"
    default_city: str = ""
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"
    cors_origins: list[str] = ["*"]
    log_level: str = "INFO"

    def get_available_completion_providers(self) -> list[str]:
        """Return completion provider names that have non-empty API keys configured."""
        providers: list[str] = []
        if self.openai_api_key:
            providers.append("openai")
        if self.anthropic_api_key:
            providers.append("anthropic")
        return providers
