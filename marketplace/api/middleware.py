"""API middleware for the catalog service.

Provides:
- Request ID correlation, bound into the structlog context so catalog engine
  events can be traced back to the request that triggered them
- Error handling in the ``{error_code, message, details, request_id}`` envelope
"""

import time
from typing import Any, Callable
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from marketplace.api.schemas import ErrorCode
from marketplace.domain.exceptions import StoreError, StoreUnavailableError

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"


def error_response(
    request: Request,
    status_code: int,
    error_code: ErrorCode | str,
    message: str,
    details: list[dict[str, Any]] | None = None,
) -> JSONResponse:
    """Build an error response in the catalog API envelope.

    Args:
        request: Request being answered; supplies the correlation ID.
        status_code: HTTP status code.
        error_code: Machine-readable error code.
        message: Human-readable message.
        details: Optional per-field error details.

    Returns:
        JSON error response.
    """
    if isinstance(error_code, ErrorCode):
        error_code = error_code.value
    return JSONResponse(
        status_code=status_code,
        content={
            "error_code": error_code,
            "message": message,
            "details": details or [],
            "request_id": getattr(request.state, "request_id", None),
        },
    )


# ============================================================================
# Request ID Middleware
# ============================================================================


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Correlate each request with an ID.

    The ID is taken from the ``X-Request-ID`` header or generated. It is set
    on ``request.state``, echoed in the response header, and bound into the
    structlog context together with the method and path for the duration of
    the request.
    """

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        start_time = time.perf_counter()
        response = None

        try:
            response = await call_next(request)
        finally:
            duration_ms = (time.perf_counter() - start_time) * 1000

            logger.info(
                "Catalog request completed",
                query=request.url.query or None,
                status_code=getattr(response, "status_code", 500),
                duration_ms=round(duration_ms, 2),
            )

            structlog.contextvars.unbind_contextvars("request_id", "method", "path")

        response.headers[REQUEST_ID_HEADER] = request_id

        return response


# ============================================================================
# Error Handling Middleware
# ============================================================================


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Render exceptions that escape the routes.

    The catalog engine absorbs store failures on the query path, so a
    ``StoreError`` reaching this point comes from a route that talks to the
    store directly (readiness, dependency setup). It maps to 503. Anything
    else is a 500.
    """

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        try:
            return await call_next(request)
        except StoreError as e:
            logger.error(
                "Catalog store failure reached the API layer",
                operation=e.operation,
                error=str(e),
            )
            error_code = (
                ErrorCode.STORE_UNAVAILABLE
                if isinstance(e, StoreUnavailableError)
                else ErrorCode.STORE_ERROR
            )
            return error_response(
                request,
                status.HTTP_503_SERVICE_UNAVAILABLE,
                error_code,
                "The product catalog is temporarily unavailable",
                details=[{"field": None, "message": e.reason}],
            )
        except Exception as e:
            logger.exception("Unhandled exception", error=str(e))
            return error_response(
                request,
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                ErrorCode.INTERNAL_ERROR,
                "An internal error occurred",
            )


# ============================================================================
# Middleware Setup
# ============================================================================


def setup_middleware(app: FastAPI) -> None:
    """Configure all middleware for the application.

    The last middleware added runs first, so request IDs are assigned before
    the error handler can need one.

    Args:
        app: FastAPI application instance.
    """
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(RequestIdMiddleware)
