"""HTTP middleware and exception handler wiring for FastAPI apps."""

from __future__ import annotations

import uuid
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.api.contracts import ApiErrorResponse
from app.api.errors import ApiErrorCode, api_error_from_domain, to_error_payload
from app.core.config import AppConfig
from app.core.logging import set_correlation_id
from app.ocr_extract.ocr import OCRError
from app.records.share import ShareDecodeError
from app.renderers.pdf_helpers import TemplateError

DOMAIN_ERRORS: tuple[type[Exception], ...] = (OCRError, TemplateError, ShareDecodeError)


def _error_response(status_code: int, error_code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ApiErrorResponse(error_code=error_code, message=message).model_dump(),
    )


def register_http_middleware(app: FastAPI, *, config: AppConfig, logger: Any) -> None:
    """Attach request size limiting, correlation ids and request logging."""

    @app.middleware("http")
    async def request_size_limit_middleware(request: Request, call_next):
        content_length = request.headers.get("content-length")
        if content_length:
            try:
                parsed_length = int(content_length)
            except ValueError:
                parsed_length = 0
            if parsed_length > config.security.request_max_bytes:
                return _error_response(
                    413,
                    ApiErrorCode.REQUEST_TOO_LARGE,
                    "Request size exceeds configured limit "
                    f"({config.security.request_max_bytes} bytes).",
                )
        return await call_next(request)

    @app.middleware("http")
    async def request_logging_middleware(request: Request, call_next):
        correlation_id = (
            request.headers.get("x-request-id")
            or request.headers.get("x-correlation-id")
            or uuid.uuid4().hex
        )
        set_correlation_id(correlation_id)
        response = await call_next(request)
        response.headers["X-Request-ID"] = correlation_id
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "no-referrer"
        logger.info(
            "request_completed",
            extra={
                "path": request.url.path,
                "method": request.method,
                "status_code": response.status_code,
            },
        )
        return response


def register_exception_handlers(app: FastAPI, *, logger: Any) -> None:
    """Attach API exception handlers that return stable error contracts."""

    def _log(level: str, event: str, request: Request, status_code: int) -> None:
        getattr(logger, level)(
            event,
            extra={
                "path": request.url.path,
                "method": request.method,
                "status_code": status_code,
            },
        )

    @app.exception_handler(HTTPException)
    async def handle_http_exception(
        request: Request, exc: HTTPException
    ) -> JSONResponse:
        payload = to_error_payload(exc.detail, exc.status_code)
        _log("warning", "http_exception", request, exc.status_code)
        return _error_response(exc.status_code, payload["error_code"], payload["message"])

    @app.exception_handler(RequestValidationError)
    async def handle_validation_exception(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        _log("warning", "validation_exception", request, 422)
        return _error_response(422, ApiErrorCode.VALIDATION_ERROR, str(exc))

    async def handle_domain_exception(request: Request, exc: Exception) -> JSONResponse:
        api_error = api_error_from_domain(exc)
        if api_error is None:
            return await handle_unexpected_exception(request, exc)
        payload = to_error_payload(api_error.detail, api_error.status_code)
        _log("warning", "domain_exception", request, api_error.status_code)
        return _error_response(
            api_error.status_code, payload["error_code"], payload["message"]
        )

    for error_cls in DOMAIN_ERRORS:
        app.add_exception_handler(error_cls, handle_domain_exception)

    @app.exception_handler(Exception)
    async def handle_unexpected_exception(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        _log("exception", "unexpected_exception", request, 500)
        return _error_response(
            500,
            ApiErrorCode.INTERNAL_SERVER_ERROR,
            str(exc) or "Internal server error",
        )
