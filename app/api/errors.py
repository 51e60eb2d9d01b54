"""Shared API error types and helpers."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from fastapi import HTTPException

from app.ocr_extract.ocr import OCRError, OCRTimeoutError, OCRUnavailableError
from app.records.share import ShareDecodeError
from app.renderers.pdf_helpers import TemplateError


class ApiErrorCode(StrEnum):
    """Machine-readable API error codes."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_DOCUMENT_TYPE = "INVALID_DOCUMENT_TYPE"
    IMAGE_REQUIRED = "IMAGE_REQUIRED"
    OCR_FAILED = "OCR_FAILED"
    OCR_TIMEOUT = "OCR_TIMEOUT"
    OCR_UNAVAILABLE = "OCR_UNAVAILABLE"
    TEMPLATE_UNAVAILABLE = "TEMPLATE_UNAVAILABLE"
    SHARE_PAYLOAD_INVALID = "SHARE_PAYLOAD_INVALID"
    REQUEST_TOO_LARGE = "REQUEST_TOO_LARGE"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class ApiError(HTTPException):
    """HTTP exception carrying stable API error envelope."""

    def __init__(
        self, *, status_code: int, error_code: ApiErrorCode, message: str
    ) -> None:
        """Build an HTTP exception with standard detail structure."""
        super().__init__(
            status_code=status_code,
            detail={"error_code": str(error_code), "message": message},
        )


def to_error_payload(detail: Any, status_code: int) -> dict[str, str]:
    """Normalize HTTP exception detail into stable error payload."""
    if isinstance(detail, dict):
        error_code = str(detail.get("error_code") or f"HTTP_{status_code}")
        message = str(detail.get("message") or detail.get("detail") or "HTTP error")
        return {"error_code": error_code, "message": message}
    return {
        "error_code": f"HTTP_{status_code}",
        "message": str(detail or "HTTP error"),
    }


def api_error_from_domain(exc: Exception) -> ApiError | None:
    """Translate pipeline exceptions into API errors, ``None`` if unmapped."""
    if isinstance(exc, OCRTimeoutError):
        return ApiError(
            status_code=504, error_code=ApiErrorCode.OCR_TIMEOUT, message=str(exc)
        )
    if isinstance(exc, OCRUnavailableError):
        return ApiError(
            status_code=503, error_code=ApiErrorCode.OCR_UNAVAILABLE, message=str(exc)
        )
    if isinstance(exc, OCRError):
        return ApiError(
            status_code=502, error_code=ApiErrorCode.OCR_FAILED, message=str(exc)
        )
    if isinstance(exc, TemplateError):
        return ApiError(
            status_code=500,
            error_code=ApiErrorCode.TEMPLATE_UNAVAILABLE,
            message=str(exc),
        )
    if isinstance(exc, ShareDecodeError):
        return ApiError(
            status_code=422,
            error_code=ApiErrorCode.SHARE_PAYLOAD_INVALID,
            message=str(exc),
        )
    return None
