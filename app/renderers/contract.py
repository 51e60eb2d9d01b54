"""Sale contract drawn on a blank A4 page."""

from __future__ import annotations

import logging
from datetime import date

import fitz  # PyMuPDF

from app.data_builder.constants import MONTHS_ES
from app.records.models import DocumentBundle, PersonRecord, VehicleRecord
from app.renderers.pdf_helpers import draw_text

LOGGER = logging.getLogger(__name__)

PAGE_WIDTH = 595
PAGE_HEIGHT = 842
LEFT_X = 50
RIGHT_X = 350
TOP_Y = 800
LINE_HEIGHT = 20
FOOTER_Y = 60
PLACEHOLDER = "________________"

TITLE = "CONTRATO DE COMPRAVENTA DE VEHÍCULO"

PERSON_FIELDS: list[tuple[str, str]] = [
    ("Nombre", "nombre"),
    ("DNI/NIE", "dni"),
    ("Fecha de nacimiento", "fecha_nacimiento"),
    ("Domicilio", "direccion"),
    ("Población", "poblacion"),
]

VEHICLE_FIELDS: list[tuple[str, str]] = [
    ("Marca", "marca"),
    ("Modelo", "modelo"),
    ("Matrícula", "matricula"),
    ("Bastidor", "bastidor"),
    ("Fecha de matriculación", "fecha_matriculacion"),
    ("Combustible", "combustible"),
    ("Cilindrada", "cilindrada"),
    ("Potencia", "potencia"),
]

CONDITIONS = [
    "1. El vendedor transmite al comprador el vehículo descrito por el precio de",
    "   ____________ euros, que el comprador abona mediante ____________________.",
    "2. El vendedor declara que el vehículo está libre de cargas y gravámenes.",
    "3. El comprador declara conocer el estado actual del vehículo y lo acepta.",
]


def _value(record: PersonRecord | VehicleRecord, attr: str) -> str:
    return getattr(record, attr).strip() or PLACEHOLDER


def spanish_long_date(day: date) -> str:
    return f"{day.day} de {MONTHS_ES[day.month - 1]} de {day.year}"


class _Cursor:
    """Downward-moving baseline in PDF user space."""

    def __init__(self, page: fitz.Page, y: float) -> None:
        self.page = page
        self.y = y

    def gap(self, lines: float) -> None:
        self.y -= LINE_HEIGHT * lines

    def line(self, text: str, *, x: float = LEFT_X, bold: bool = False, size: float = 11) -> None:
        draw_text(self.page, text, x, self.y, bold=bold, size=size)
        self.gap(1)

    def section(
        self,
        header: str,
        record: PersonRecord | VehicleRecord,
        labelled_fields: list[tuple[str, str]],
    ) -> None:
        self.gap(0.5)
        self.line(header, bold=True, size=12)
        for label, attr in labelled_fields:
            self.line(f"{label}: {_value(record, attr)}")


def render_contract(bundle: DocumentBundle, *, today: date | None = None) -> bytes:
    """Render the sale contract PDF for ``bundle``.

    Content that does not fit the page is clipped; there is no second page.
    """
    today = today or date.today()
    doc = fitz.open()
    try:
        page = doc.new_page(width=PAGE_WIDTH, height=PAGE_HEIGHT)
        cursor = _Cursor(page, TOP_Y)
        cursor.line(TITLE, bold=True, size=16)
        cursor.gap(0.5)

        cursor.section("VENDEDOR", bundle.seller, PERSON_FIELDS)
        cursor.gap(0.5)
        cursor.section("COMPRADOR", bundle.buyer, PERSON_FIELDS)
        cursor.gap(0.5)
        cursor.section("VEHÍCULO", bundle.vehicle, VEHICLE_FIELDS)

        cursor.gap(1)
        cursor.line("CONDICIONES", bold=True, size=12)
        for text in CONDITIONS:
            cursor.line(text, size=10)

        cursor.gap(1)
        signature_y = cursor.y
        draw_text(page, "Firma del vendedor", LEFT_X, signature_y, bold=True)
        draw_text(page, "Firma del comprador", RIGHT_X, signature_y, bold=True)
        draw_text(page, "_______________________", LEFT_X, signature_y - LINE_HEIGHT * 2)
        draw_text(page, "_______________________", RIGHT_X, signature_y - LINE_HEIGHT * 2)
        draw_text(page, _value(bundle.seller, "nombre"), LEFT_X, signature_y - LINE_HEIGHT * 2.75, size=9)
        draw_text(page, _value(bundle.buyer, "nombre"), RIGHT_X, signature_y - LINE_HEIGHT * 2.75, size=9)

        draw_text(page, f"En ____________, a {spanish_long_date(today)}", LEFT_X, FOOTER_Y)
        if signature_y - LINE_HEIGHT * 2.75 < FOOTER_Y + LINE_HEIGHT / 2:
            LOGGER.warning("Contract content overlaps the page footer.")
        return doc.tobytes(garbage=1, deflate=True)
    finally:
        doc.close()
