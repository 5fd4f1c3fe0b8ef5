"""API middleware and error handlers: CORS, headers, request logging, RFC 7807."""

from __future__ import annotations

import logging
import time
from http import HTTPStatus
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from qrtickets.core.context import (
    new_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)

logger = logging.getLogger(__name__)

SECURITY_HEADERS: dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}

HSTS_HEADER = "max-age=31536000; includeSubDomains"

INVALID_BODY_DETAIL = "Request body is missing or malformed"
INTERNAL_ERROR_DETAIL = "Internal server error"


def setup_middleware(app: FastAPI) -> None:
    """Attach all middleware to the FastAPI app."""
    settings = getattr(app.state, "settings", None)
    is_prod = settings.is_production if settings else False

    # QR data URLs compress well
    app.add_middleware(GZipMiddleware, minimum_size=500)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_get_cors_origins(settings),
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def correlation_and_logging(  # type: ignore[no-untyped-def]
        request: Request, call_next
    ):
        correlation_id = request.headers.get("x-correlation-id") or new_correlation_id()
        token = set_correlation_id(correlation_id)
        try:
            start = time.perf_counter()
            response: Response = await call_next(request)
            elapsed = (time.perf_counter() - start) * 1000

            response.headers["X-Request-ID"] = correlation_id
            response.headers["X-Response-Time"] = f"{elapsed:.1f}ms"
            for header, value in SECURITY_HEADERS.items():
                response.headers[header] = value
            if is_prod:
                response.headers["Strict-Transport-Security"] = HSTS_HEADER

            logger.info(
                "%s %s → %d (%.1fms)",
                request.method,
                request.url.path,
                response.status_code,
                elapsed,
            )
            return response
        finally:
            reset_correlation_id(token)


def setup_exception_handlers(app: FastAPI) -> None:
    """Render every error as an RFC 7807 problem document."""

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return rfc7807_error_response(
            status=exc.status_code,
            title=_title(exc.status_code),
            detail=str(exc.detail),
            instance=request.url.path,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info("Rejected request to %s: %s", request.url.path, exc.errors())
        return rfc7807_error_response(
            status=400,
            title=_title(400),
            detail=INVALID_BODY_DETAIL,
            instance=request.url.path,
        )

    @app.exception_handler(Exception)
    async def unhandled(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error on %s", request.url.path, exc_info=exc)
        return rfc7807_error_response(
            status=500,
            title=_title(500),
            detail=INTERNAL_ERROR_DETAIL,
            instance=request.url.path,
        )


def _title(status: int) -> str:
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return "Error"


def _get_cors_origins(settings: Any) -> list[str]:
    """Resolve CORS origins from settings."""
    if settings is None:
        return ["*"]
    return list(settings.cors_origin_list)


def rfc7807_error_response(
    status: int,
    title: str,
    detail: str,
    type_uri: str = "about:blank",
    instance: str | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build an RFC 7807 Problem Details JSON response."""
    body: dict[str, Any] = {
        "type": type_uri,
        "title": title,
        "status": status,
        "detail": detail,
    }
    if instance:
        body["instance"] = instance
    return JSONResponse(
        status_code=status,
        content=body,
        headers=headers,
        media_type="application/problem+json",
    )
