"""Mod.02-ES ownership transfer form filled through its named fields."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from app.data_builder.name_splitter import split_name
from app.records.models import DocumentBundle, PersonRecord
from app.renderers.pdf_helpers import open_form

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldWrite:
    name: str
    value: str


# Field names are fixed by the published form; renaming breaks the fill.
SELLER_FIELDS = ("NIFNIECIF", "NombreRazón social", "Apellido 1", "Apellido 2")
BUYER_FIELDS = ("NIFNIECIF_2", "NombreRazón social_2", "Apellido 1_2", "Apellido 2_2")


def _person_writes(person: PersonRecord, names: tuple[str, str, str, str]) -> list[FieldWrite]:
    id_field, name_field, surname1_field, surname2_field = names
    parts = split_name(person.nombre)
    return [
        FieldWrite(id_field, person.dni),
        FieldWrite(name_field, parts.first),
        FieldWrite(surname1_field, parts.surname1),
        FieldWrite(surname2_field, parts.surname2),
    ]


def buyer_street_and_locality(buyer: PersonRecord) -> tuple[str, str]:
    """Street part and locality for the buyer's address block.

    The street is the first comma-separated part of ``direccion``. The
    locality comes from ``poblacion``; without it, the last comma part of
    ``direccion`` is used when there is more than one part.
    """
    parts = [part.strip() for part in buyer.direccion.split(",")]
    street = parts[0] if parts else ""
    locality = buyer.poblacion.strip()
    if not locality and len(parts) > 1:
        locality = parts[-1]
    return street, locality


def build_field_writes(bundle: DocumentBundle, today: date) -> list[FieldWrite]:
    """List every field write for the form; empty values are dropped."""
    street, locality = buyer_street_and_locality(bundle.buyer)
    writes = [
        FieldWrite("Matrícula", bundle.vehicle.matricula),
        FieldWrite("Fecha matriculación", bundle.vehicle.fecha_matriculacion),
        *_person_writes(bundle.seller, SELLER_FIELDS),
        FieldWrite("Fecha nacimiento", bundle.seller.fecha_nacimiento),
        *_person_writes(bundle.buyer, BUYER_FIELDS),
        FieldWrite("Nombre de la vía", street),
        FieldWrite("Localidad", locality),
        FieldWrite("a", str(today.day)),
        FieldWrite("de", str(today.month)),
        FieldWrite("de_2", str(today.year)),
    ]
    return [write for write in writes if write.value.strip()]


def render_official_form(
    bundle: DocumentBundle, template_bytes: bytes, *, today: date | None = None
) -> bytes:
    """Fill the Mod.02-ES template and return the PDF bytes.

    Missing fields and failed writes are logged and skipped. An unreadable
    template raises ``TemplateError``. The form is not flattened so it stays
    editable.
    """
    today = today or date.today()
    with open_form(template_bytes) as form:
        filled = 0
        for write in build_field_writes(bundle, today):
            try:
                if form.set_field(write.name, write.value):
                    filled += 1
                else:
                    LOGGER.info(
                        "Template has no field '%s'; skipped.",
                        write.name,
                        extra={"field_name": write.name},
                    )
            except Exception:
                LOGGER.exception(
                    "Failed setting PDF field '%s'",
                    write.name,
                    extra={"field_name": write.name},
                )
        LOGGER.info("Filled %d Mod.02-ES fields", filled)
        return form.render()
