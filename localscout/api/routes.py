"""REST API routes for localScout.

Service dependencies are resolved from ``app.state`` via FastAPI's
``Depends`` using the ``Annotated`` pattern.

# Endpoint                              Method  Description
# ─────────────────────────────────────────────────────────────────────
# /api/v1/chat                          POST    Run one discovery chat turn
# /api/v1/businesses/{business_id}      GET     Directory detail lookup
# /api/v1/health                        GET     Health check + tenant list
"""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Request

from localscout.api.schemas import ChatRequest, HealthResponse
from localscout.models.business import BusinessRecord
from localscout.models.response import ChatResponse
from localscout.pipeline.orchestrator import DiscoveryChatPipeline

router = APIRouter(prefix="/api/v1")


def _get_pipeline(request: Request) -> DiscoveryChatPipeline:
    """Return the turn pipeline built at startup."""
    return request.app.state.pipeline


PipelineDep = Annotated[DiscoveryChatPipeline, Depends(_get_pipeline)]


@router.post(
    "/chat",
    response_model=ChatResponse,
    summary="Run one conversational discovery turn",
)
async def chat(body: ChatRequest, pipeline: PipelineDep) -> ChatResponse:
    """Answer one user message within a session.

    Empty messages raise ``ValidationError``, which the error middleware
    turns into a 400.
    """
    location = body.location.model_dump() if body.location is not None else None
    return await pipeline.handle_turn(body.session_id, body.message, body.city, user_location=location)


@router.get(
    "/businesses/{business_id}",
    response_model=BusinessRecord,
    summary="Look up one directory business",
)
async def get_business(business_id: str, pipeline: PipelineDep) -> BusinessRecord:
    business = await pipeline.get_business_details(business_id)
    if business is None:
        raise HTTPException(status_code=404, detail="Business not found")
    return business


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Application health check",
)
async def health_check(request: Request) -> HealthResponse:
    """Return application health, version, tenants and provider availability."""
    providers: dict[str, Any] = dict(getattr(request.app.state, "provider_registry", {}))
    tenants = sorted(getattr(request.app.state, "tenants", {}))

    status = "healthy" if providers.get("completion", False) and tenants else "degraded"
    return HealthResponse(
        status=status,
        version=getattr(request.app.state, "version", "0.1.0"),
        tenants=tenants,
        providers=providers,
    )
