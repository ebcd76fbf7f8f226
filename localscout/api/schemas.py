"""Request and response schemas for the localScout HTTP API.

Turn responses reuse :class:`~localscout.models.response.ChatResponse`
directly; only request bodies and the small auxiliary responses are
defined here.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class UserLocation(BaseModel):
    """Optional device position sent with a chat turn."""

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class ChatRequest(BaseModel):
    """One user turn."""

    session_id: str = Field(..., min_length=1, max_length=128)
    city: str = Field(..., min_length=1, max_length=64)
    message: str = Field(..., max_length=1000)
    location: UserLocation | None = None


class HealthResponse(BaseModel):
    """Application health check response."""

    status: str
    version: str
    tenants: list[str] = Field(default_factory=list)
    providers: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str
    detail: str | None = None
