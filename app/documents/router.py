"""FastAPI router for document rendering and share endpoints."""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import Response

from app.api.contracts import (
    ApiErrorResponse,
    GeneratePdfRequest,
    GenerateXmlRequest,
    ShareDecodeRequest,
    ShareDecodeResponse,
    ShareEncodeRequest,
    ShareEncodeResponse,
)
from app.api.errors import api_error_from_domain
from app.data_builder.normalizers import normalize_bundle
from app.documents.service import DocumentsService
from app.records.share import ShareDecodeError, decode_bundle, encode_bundle
from app.renderers.dossier import DossierOptions
from app.renderers.pdf_helpers import TemplateError


def _attachment(content: bytes | str, filename: str, media_type: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


class DocumentsRouter:
    """Router factory wrapper for render/share endpoints."""

    def __init__(self, service: DocumentsService) -> None:
        """Store service dependency used by handlers."""
        self._service = service

    def build(self) -> APIRouter:
        """Create configured API router."""
        router = APIRouter(tags=["documents"])

        @router.post(
            "/api/generate-pdf",
            response_class=Response,
            responses={
                422: {"model": ApiErrorResponse},
                500: {"model": ApiErrorResponse},
            },
        )
        def generate_pdf(req: GeneratePdfRequest) -> Response:
            """Render the sale contract or the Mod.02-ES form as a download."""
            bundle = normalize_bundle(req.data)
            try:
                content, filename = self._service.render_pdf(bundle, req.type)
            except TemplateError as exc:
                raise api_error_from_domain(exc) from exc  # type: ignore[misc]
            return _attachment(content, filename, "application/pdf")

        @router.post(
            "/api/generate-xml",
            response_class=Response,
            responses={422: {"model": ApiErrorResponse}},
        )
        def generate_xml(req: GenerateXmlRequest) -> Response:
            """Render the CTIT dossier XML as a download."""
            bundle = normalize_bundle(req.data)
            options = DossierOptions(**req.options.model_dump())
            xml, filename = self._service.render_xml(bundle, options)
            return _attachment(xml, filename, "application/xml")

        @router.post("/api/share/encode", response_model=ShareEncodeResponse)
        def share_encode(req: ShareEncodeRequest) -> ShareEncodeResponse:
            return ShareEncodeResponse(
                encoded=encode_bundle(normalize_bundle(req.data, fill_aliases=False))
            )

        @router.post(
            "/api/share/decode",
            response_model=ShareDecodeResponse,
            responses={422: {"model": ApiErrorResponse}},
        )
        def share_decode(req: ShareDecodeRequest) -> ShareDecodeResponse:
            try:
                bundle = decode_bundle(req.encoded)
            except ShareDecodeError as exc:
                raise api_error_from_domain(exc) from exc  # type: ignore[misc]
            return ShareDecodeResponse(data=bundle.to_payload())

        return router


def create_documents_router(service: DocumentsService) -> APIRouter:
    """Create router for document rendering endpoints."""
    return DocumentsRouter(service=service).build()
