from __future__ import annotations

import asyncio
from io import BytesIO
from typing import Any, cast

import pytest
from fastapi import FastAPI, UploadFile
from fastapi.routing import APIRoute

from app.api.errors import ApiError
from app.api.runtime_routes import RuntimeRouteDeps, register_runtime_routes
from app.documents.service import DocumentsService
from app.ocr_extract.ocr import OCRTimeoutError, OCRUnavailableError
from app.renderers.pdf_helpers import TemplateError
from tests.mock_documents import MOCK_SELLER, MOCK_VEHICLE, make_config


class _DummyOCRClient:
    def __init__(self, answers: dict[bytes, Any] | None = None) -> None:
        self.answers = answers or {}

    def recognize(self, image_bytes: bytes, kind: str) -> dict[str, Any]:
        answer = self.answers.get(image_bytes, {})
        if isinstance(answer, Exception):
            raise answer
        return answer


def _missing_template() -> bytes:
    raise TemplateError("missing")


def _build_app(answers: dict[bytes, Any] | None = None) -> FastAPI:
    app = FastAPI()
    service = DocumentsService(
        ocr_client=_DummyOCRClient(answers),
        load_official_form_template=_missing_template,
    )
    register_runtime_routes(
        app, deps=RuntimeRouteDeps(config=make_config(upload_max_bytes=16), service=service)
    )
    return app


def _route(app: FastAPI, path: str, method: str):
    for route in app.routes:
        if isinstance(route, APIRoute) and route.path == path and method in route.methods:
            return route.endpoint
    raise AssertionError(f"Route {method} {path} not found")


def _upload(data: bytes, filename: str = "dni.jpg") -> UploadFile:
    return UploadFile(filename=filename, file=BytesIO(data))


def _error_code(exc: ApiError) -> str:
    detail: dict[str, Any] = (
        cast(dict[str, Any], exc.detail) if isinstance(exc.detail, dict) else {}
    )
    return str(detail.get("error_code", ""))


def test_runtime_routes_health_reports_configuration() -> None:
    health = _route(_build_app(), "/api/health", "GET")

    assert health().model_dump() == {
        "status": "ok",
        "ocr_configured": False,
        "official_form_template": False,
    }


def test_process_image_returns_normalized_record() -> None:
    process_image = _route(_build_app({b"seller": MOCK_SELLER}), "/api/process-image", "POST")

    response = asyncio.run(
        process_image(image=_upload(b"seller"), document_type="vendedor")
    )

    assert response.type == "vendedor"
    assert response.data["nombre"] == "Ana García López"
    assert response.data["fechaNacimiento"] == "07/03/1985"


def test_process_image_accepts_vehicle_type_alias() -> None:
    process_image = _route(_build_app({b"ficha": MOCK_VEHICLE}), "/api/process-image", "POST")

    response = asyncio.run(process_image(image=_upload(b"ficha"), document_type="ficha"))

    assert response.type == "ficha"
    assert response.data["matricula"] == "1234ABC"


@pytest.mark.parametrize(
    ("image", "document_type", "status_code", "error_code"),
    [
        (None, "vendedor", 400, "IMAGE_REQUIRED"),
        (b"seller", "pasaporte", 400, "INVALID_DOCUMENT_TYPE"),
        (b"seller", "", 400, "INVALID_DOCUMENT_TYPE"),
        (b"", "comprador", 400, "IMAGE_REQUIRED"),
        (b"x" * 17, "comprador", 413, "REQUEST_TOO_LARGE"),
    ],
)
def test_process_image_rejects_invalid_requests(
    image: bytes | None, document_type: str, status_code: int, error_code: str
) -> None:
    process_image = _route(_build_app(), "/api/process-image", "POST")
    upload = _upload(image) if image is not None else None

    with pytest.raises(ApiError) as exc_info:
        asyncio.run(process_image(image=upload, document_type=document_type))

    assert exc_info.value.status_code == status_code
    assert _error_code(exc_info.value) == error_code


def test_process_image_maps_recognition_timeout() -> None:
    app = _build_app({b"seller": OCRTimeoutError("timed out")})
    process_image = _route(app, "/api/process-image", "POST")

    with pytest.raises(ApiError) as exc_info:
        asyncio.run(process_image(image=_upload(b"seller"), document_type="vendedor"))

    assert exc_info.value.status_code == 504
    assert _error_code(exc_info.value) == "OCR_TIMEOUT"


def test_process_documents_returns_bundle_and_errors() -> None:
    app = _build_app(
        {b"seller": MOCK_SELLER, b"ficha": OCRTimeoutError("timed out")}
    )
    process = _route(app, "/api/process", "POST")

    response = asyncio.run(
        process(vendedor=_upload(b"seller"), comprador=None, ficha=_upload(b"ficha"))
    )

    payload = response.model_dump()
    assert payload["vendedor"]["dni"] == "12345678Z"
    assert payload["comprador"]["dni"] == ""
    assert payload["vehiculo"]["matricula"] == ""
    assert payload["errors"] == {"vehiculo": "timed out"}


def test_process_documents_all_unavailable_maps_to_503() -> None:
    app = _build_app({b"seller": OCRUnavailableError("offline")})
    process = _route(app, "/api/process", "POST")

    with pytest.raises(ApiError) as exc_info:
        asyncio.run(process(vendedor=_upload(b"seller"), comprador=None, ficha=None))

    assert exc_info.value.status_code == 503
    assert _error_code(exc_info.value) == "OCR_UNAVAILABLE"
