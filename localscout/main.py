"""localScout FastAPI application entry point.

Wires together all providers, services, and routes via dependency injection.
Loads configuration from ``.env`` and ``config/config.yaml`` and configures
structured logging before the app is built.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import structlog
import uvicorn
from fastapi import FastAPI

from localscout.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from localscout.api.routes import router as api_router
from localscout.config.loader import load_config, load_tenants
from localscout.config.settings import Settings
from localscout.config.tenant import TenantConfig
from localscout.interfaces.semantic_search_provider import ISemanticSearchProvider
from localscout.pipeline.orchestrator import DiscoveryChatPipeline
from localscout.pipeline.provider_factory import CompletionProviderFactory
from localscout.providers.session.memory_session_store import MemorySessionStore
from localscout.providers.store.sqlite_business_store import SQLiteBusinessStore
from localscout.services.inventory_resolver import InventoryResolver
from localscout.utils.logging import configure_logging, get_logger

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Semantic search selection
# ---------------------------------------------------------------------------


def _build_semantic_search(app_settings: Settings) -> ISemanticSearchProvider | None:
    """Return the ChromaDB knowledge search when enabled and embeddable.

    Semantic search needs an OpenAI embedding key; without one the resolver
    runs on structured directory data alone.
    """
    if not app_settings.semantic_enabled:
        return None
    if not app_settings.openai_api_key:
        _logger.warning(
            "semantic_enabled_but_no_embedding_provider",
            msg="SEMANTIC_ENABLED=True but OPENAI_API_KEY is not set. Semantic search disabled.",
        )
        return None

    from localscout.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider
    from localscout.providers.knowledge.chromadb_knowledge_provider import (
        ChromaDBSemanticSearchProvider,
    )

    embedding_provider = OpenAIEmbeddingProvider(settings=app_settings)
    semantic = ChromaDBSemanticSearchProvider(
        embedding_provider=embedding_provider,
        persist_directory=app_settings.chromadb_persist_dir,
        collection_name=app_settings.chromadb_collection,
    )
    _logger.info(
        "semantic_enabled",
        embedding_provider=embedding_provider.get_provider_name(),
        embedding_model=embedding_provider.get_model_name(),
        persist_dir=app_settings.chromadb_persist_dir,
    )
    return semantic


def _tenant_has_credentials(tenant: TenantConfig) -> bool:
    if tenant.completion_provider == "anthropic":
        return bool(tenant.anthropic_api_key)
    return bool(tenant.openai_api_key)


# ---------------------------------------------------------------------------
# Full DI assembly for the FastAPI application
# ---------------------------------------------------------------------------


def _build_all(app_settings: Settings) -> dict[str, Any]:
    """Construct every provider and service instance for the application.

    Returns a flat dict of named components to be stored on ``app.state``.
    """
    config = load_config(app_settings.config_path, settings=app_settings)
    tenants = load_tenants(config, app_settings)

    business_store = SQLiteBusinessStore(db_path=app_settings.directory_db_path)
    session_store = MemorySessionStore(
        max_size=app_settings.session_max_entries,
        ttl=app_settings.session_ttl_seconds,
        history_window_turns=app_settings.history_window_turns,
    )
    semantic = _build_semantic_search(app_settings)

    resolver = InventoryResolver(business_store=business_store, semantic_search=semantic)
    pipeline = DiscoveryChatPipeline(
        tenants=tenants,
        business_store=business_store,
        session_store=session_store,
        resolver=resolver,
        provider_factory=CompletionProviderFactory(),
    )

    # -- Provider registry for /health --
    provider_registry: dict[str, bool] = {
        "completion": any(_tenant_has_credentials(t) for t in tenants.values()),
        "semantic": semantic is not None,
        "store": True,
        "sessions": True,
    }

    return {
        "pipeline": pipeline,
        "business_store": business_store,
        "session_store": session_store,
        "semantic_search": semantic,
        "provider_registry": provider_registry,
        "tenants": tenants,
        "version": str(config.get("app", {}).get("version", "0.1.0")),
    }


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Initialise all providers and services on startup."""
    components = _build_all(settings)

    for key, value in components.items():
        setattr(application.state, key, value)

    await components["business_store"].initialize()

    _logger.info(
        "app_startup",
        version=components["version"],
        environment=settings.app_env,
        tenants=sorted(components["tenants"]),
        providers=components["provider_registry"],
    )

    yield

    _logger.info("app_shutdown")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    application = FastAPI(
        title="localScout API",
        version="0.1.0",
        description=(
            "Conversational local-business discovery: ask about places to eat, "
            "drink and visit in a city and get ranked, tier-aware answers with "
            "cards, wallet offers, events and map pins."
        ),
        lifespan=_lifespan,
    )

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application, allowed_origins=settings.cors_origins)

    # -- API routes --
    application.include_router(api_router)

    return application


app = create_app()

# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    uvicorn.run(
        "localscout.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )
