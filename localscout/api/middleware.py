"""API middleware: CORS, request logging and error handling.

Provides a helper to configure cross-origin resource sharing, structured
request logging (via structlog), and automatic conversion of
``LocalScoutError`` subclasses into JSON ``ErrorResponse`` bodies.
"""

from __future__ import annotations

import time

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from localscout.api.schemas import ErrorResponse
from localscout.utils.errors import LocalScoutError, ValidationError
from localscout.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

_GENERIC_DETAIL = "The request could not be completed."
_HEALTH_SUFFIX = "/health"


def configure_cors(app: FastAPI, *, allowed_origins: list[str] | None = None) -> None:
    """Add CORS middleware to the FastAPI application.

    Parameters
    ----------
    app:
        The FastAPI application instance.
    allowed_origins:
        Allowed origins, from ``CORS_ORIGINS`` (a JSON list).  Defaults to
        ``["*"]``.
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every HTTP request with method, path, status code, and duration.

    Health checks are logged at debug level.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        start = time.perf_counter()
        response: Response | None = None

        try:
            response = await call_next(request)
            return response
        finally:
            log = _logger.debug if request.url.path.endswith(_HEALTH_SUFFIX) else _logger.info
            log(
                "http_request",
                method=request.method,
                path=str(request.url.path),
                status=response.status_code if response else 500,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Catch ``LocalScoutError`` subclasses and return structured JSON errors.

    ``ValidationError`` becomes a 400 carrying its message; every other
    domain error becomes a 500 with a generic detail.  Provider messages
    and stack traces stay in the server log.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        try:
            return await call_next(request)
        except ValidationError as exc:
            _logger.warning(
                "validation_error",
                message=exc.message,
                path=str(request.url.path),
            )
            body = ErrorResponse(error=type(exc).__name__, detail=exc.message)
            return JSONResponse(status_code=400, content=body.model_dump())
        except LocalScoutError as exc:
            _logger.error(
                "application_error",
                error_type=type(exc).__name__,
                message=exc.message,
                provider=exc.provider_name,
                path=str(request.url.path),
            )
            body = ErrorResponse(error=type(exc).__name__, detail=_GENERIC_DETAIL)
            return JSONResponse(status_code=500, content=body.model_dump())
