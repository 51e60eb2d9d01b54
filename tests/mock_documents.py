from __future__ import annotations

from typing import Any

import fitz  # PyMuPDF

from app.core.config import (
    AppConfig,
    DossierConfig,
    LoggingConfig,
    OCRConfig,
    SecurityConfig,
    TemplateConfig,
)
from app.data_builder.normalizers import normalize_bundle
from app.records.models import DocumentBundle

MOCK_SELLER: dict[str, Any] = {
    "nombre": "Ana García López",
    "dni": "12345678Z",
    "fechaNacimiento": "07/03/1985",
    "direccion": "CALLE MAYOR 12, 3ºA",
    "poblacion": "MADRID 28013",
    "fechaCaducidad": "01/01/2030",
}

MOCK_BUYER: dict[str, Any] = {
    "nombre": "Luis Pérez",
    "dni": "X1234567L",
    "fechaNacimiento": "15/11/1990",
    "direccion": "AVDA DIAGONAL 640",
    "poblacion": "BARCELONA 08017",
    "fechaCaducidad": None,
}

MOCK_VEHICLE: dict[str, Any] = {
    "marca": "SEAT",
    "modelo": "KJ1",
    "denominacionComercial": "IBIZA",
    "matricula": "1234ABC",
    "bastidor": "VSSZZZKJZNR000001",
    "fechaMatriculacion": "20/05/2021",
    "categoria": "M1",
    "cilindrada": "999",
    "potencia": "81 kW",
    "combustible": "Gasolina",
    "plazasAsiento": "5",
    "masaOrdenMarcha": "1140 kg",
    "masaMaxima": "1580",
    "dimensionesNeumaticos": "215/45 R18",
}


def mock_bundle() -> DocumentBundle:
    return normalize_bundle(
        {"vendedor": MOCK_SELLER, "comprador": MOCK_BUYER, "vehiculo": MOCK_VEHICLE}
    )


def build_form_template(field_names: list[str]) -> bytes:
    """One-page PDF with an empty text widget per name."""
    doc = fitz.open()
    page = doc.new_page(width=595, height=842)
    for index, name in enumerate(field_names):
        widget = fitz.Widget()
        widget.field_name = name
        widget.field_type = fitz.PDF_WIDGET_TYPE_TEXT
        widget.rect = fitz.Rect(50, 50 + index * 25, 300, 68 + index * 25)
        page.add_widget(widget)
    data = doc.tobytes()
    doc.close()
    return data


def read_form_values(pdf_bytes: bytes) -> dict[str, str]:
    values: dict[str, str] = {}
    with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
        for page in doc:
            for widget in page.widgets() or []:
                values[widget.field_name] = str(widget.field_value or "")
    return values


def make_config(**security: int) -> AppConfig:
    return AppConfig(
        ocr=OCRConfig(api_key="", model="gpt-4o", timeout_seconds=5.0, max_tokens=500),
        templates=TemplateConfig(official_form_path="missing/Mod.02-ES.pdf"),
        dossier=DossierConfig(
            agent_id="", agency_id="", local_division_key="", filename_prefix="CTIT"
        ),
        logging=LoggingConfig(level="INFO"),
        security=SecurityConfig(
            cors_allowed_origins=["http://localhost:3000"],
            request_max_bytes=security.get("request_max_bytes", 1024),
            upload_max_bytes=security.get("upload_max_bytes", 64),
        ),
    )
