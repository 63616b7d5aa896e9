"""
Translation of typed errors into HTTP responses.
This is the only place where error types become status codes.
"""

import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..core.exceptions import GatewayError, SalesPracticeError, UpstreamError

logger = logging.getLogger(__name__)

AVAILABLE_ENDPOINTS = [
    'POST /api/session/start',
    'POST /api/chat',
    'POST /api/session/update-context',
    'POST /api/session/analyze',
    'GET /api/session/{sessionId}/history',
    'DELETE /api/session/{sessionId}',
    'GET /api/sessions',
    'GET /health',
]


async def sales_practice_error_handler(request: Request, exc: SalesPracticeError) -> JSONResponse:
    content = {"error": exc.message}
    if isinstance(exc, UpstreamError):
        content["upstreamStatus"] = exc.upstream_status
    if isinstance(exc, GatewayError):
        logger.error(
            f"Model service failure on {request.method} {request.url.path}: {exc.message}",
            extra={"extra_fields": {"error": type(exc).__name__, "path": request.url.path}}
        )
    return JSONResponse(status_code=exc.status_code, content=content)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        return JSONResponse(
            status_code=404,
            content={"error": "Endpoint not found", "availableEndpoints": AVAILABLE_ENDPOINTS},
        )
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request body", "details": jsonable_errors(exc)},
    )


def jsonable_errors(exc: RequestValidationError) -> list:
    return [
        {"loc": [str(part) for part in error.get("loc", ())], "msg": error.get("msg", "")}
        for error in exc.errors()
    ]


def register_exception_handlers(app: FastAPI) -> None:
    """Install the error translation handlers on an application."""
    app.add_exception_handler(SalesPracticeError, sales_practice_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
