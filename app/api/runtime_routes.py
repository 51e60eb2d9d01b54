"""Runtime route registration for health and document recognition endpoints."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from functools import partial
from pathlib import Path

from fastapi import FastAPI, File, Form, UploadFile

from app.api.contracts import (
    ApiErrorResponse,
    BundleResponse,
    HealthResponse,
    ProcessImageResponse,
)
from app.api.errors import ApiError, ApiErrorCode, api_error_from_domain
from app.core.config import AppConfig
from app.core.logging import role_extra
from app.documents.service import DocumentsService
from app.ocr_extract.ocr import OCRError
from app.records.models import Role, normalize_role

LOGGER = logging.getLogger(__name__)

IMAGE_PARAM = File(default=None)
TYPE_PARAM = Form(default="", alias="type")
OPTIONAL_UPLOAD_PARAM = File(default=None)

# Upload types accepted by the recognition endpoints.
UPLOAD_TYPES = {"vendedor", "comprador", "ficha", "vehiculo"}


@dataclass(frozen=True)
class RuntimeRouteDeps:
    """Dependencies required to mount runtime routes."""

    config: AppConfig
    service: DocumentsService


async def _read_upload(file: UploadFile, *, limit: int) -> bytes:
    data = await file.read()
    if len(data) > limit:
        raise ApiError(
            status_code=413,
            error_code=ApiErrorCode.REQUEST_TOO_LARGE,
            message=f"Uploaded file exceeds configured limit ({limit} bytes).",
        )
    return data


async def _run_blocking(fn, *args, **kwargs):
    loop = asyncio.get_running_loop()
    call = partial(fn, *args, **kwargs)
    return await loop.run_in_executor(None, call)


def register_runtime_routes(app: FastAPI, *, deps: RuntimeRouteDeps) -> None:
    """Register health and recognition endpoints."""
    upload_limit = deps.config.security.upload_max_bytes

    @app.get(
        "/api/health",
        response_model=HealthResponse,
    )
    def health() -> HealthResponse:
        return HealthResponse(
            status="ok",
            ocr_configured=bool(deps.config.ocr.api_key),
            official_form_template=Path(
                deps.config.templates.official_form_path
            ).is_file(),
        )

    @app.post(
        "/api/process-image",
        response_model=ProcessImageResponse,
        responses={
            400: {"model": ApiErrorResponse},
            413: {"model": ApiErrorResponse},
            502: {"model": ApiErrorResponse},
            503: {"model": ApiErrorResponse},
            504: {"model": ApiErrorResponse},
        },
    )
    async def process_image(
        image: UploadFile | None = IMAGE_PARAM,
        document_type: str = TYPE_PARAM,
    ) -> ProcessImageResponse:
        if image is None:
            raise ApiError(
                status_code=400,
                error_code=ApiErrorCode.IMAGE_REQUIRED,
                message="No image was provided.",
            )
        role = normalize_role(document_type) if document_type in UPLOAD_TYPES else None
        if role is None:
            raise ApiError(
                status_code=400,
                error_code=ApiErrorCode.INVALID_DOCUMENT_TYPE,
                message=f"Invalid document type: {document_type!r}.",
            )
        data = await _read_upload(image, limit=upload_limit)
        if not data:
            raise ApiError(
                status_code=400,
                error_code=ApiErrorCode.IMAGE_REQUIRED,
                message="Uploaded image is empty.",
            )
        try:
            record = await _run_blocking(deps.service.process_image, role, data)
        except OCRError as exc:
            LOGGER.warning(
                "Recognition failed: %s",
                exc,
                extra=role_extra(role.value, role.document_kind),
            )
            raise api_error_from_domain(exc) from exc  # type: ignore[misc]
        return ProcessImageResponse(type=document_type, data=record.to_payload())

    @app.post(
        "/api/process",
        response_model=BundleResponse,
        responses={
            413: {"model": ApiErrorResponse},
            503: {"model": ApiErrorResponse},
        },
    )
    async def process_documents(
        vendedor: UploadFile | None = OPTIONAL_UPLOAD_PARAM,
        comprador: UploadFile | None = OPTIONAL_UPLOAD_PARAM,
        ficha: UploadFile | None = OPTIONAL_UPLOAD_PARAM,
    ) -> BundleResponse:
        uploads: dict[Role, bytes] = {}
        for role, file in (
            (Role.SELLER, vendedor),
            (Role.BUYER, comprador),
            (Role.VEHICLE, ficha),
        ):
            if file is not None:
                uploads[role] = await _read_upload(file, limit=upload_limit)
        try:
            result = await _run_blocking(deps.service.process_uploads, uploads)
        except OCRError as exc:
            raise api_error_from_domain(exc) from exc  # type: ignore[misc]
        return BundleResponse(**result.bundle.to_payload(), errors=result.errors)
