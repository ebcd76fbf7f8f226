"""localScout API layer: routes, schemas and middleware."""

from localscout.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from localscout.api.routes import router
from localscout.api.schemas import ChatRequest, ErrorResponse, HealthResponse, UserLocation

__all__ = [
    "ChatRequest",
    "ErrorHandlingMiddleware",
    "ErrorResponse",
    "HealthResponse",
    "RequestLoggingMiddleware",
    "UserLocation",
    "configure_cors",
    "router",
]
