"""CTIT transfer dossier in the DGT matriculation XML schema."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, date, datetime
from xml.sax.saxutils import escape

from app.data_builder.address_parser import parse_address
from app.data_builder.constants import (
    DEFAULT_FISCAL_ID,
    DEFAULT_LOCAL_DIVISION_KEY,
    DEFAULT_VEHICLE_KIND,
    DISPLACEMENT_WIDTH,
    DOSSIER_NAMESPACE,
    DOSSIER_NUMBER_PREFIX,
    MASS_WIDTH,
    MAX_MASS_DEFAULT,
    POWER_WIDTH,
    RUNNING_ORDER_MASS_DEFAULT,
    SEATS_DEFAULT,
    SEATS_WIDTH,
)
from app.data_builder.name_splitter import split_name
from app.data_builder.normalizers import (
    clean,
    format_count,
    format_decimal,
    fuel_code,
    to_iso_date,
)
from app.records.models import DocumentBundle, PersonRecord

# Ordered (tag, text) pairs; a list value renders a nested element.
Element = tuple[str, "str | list[Element]"]


@dataclass(frozen=True)
class DossierOptions:
    """Submission identifiers; blank values fall back to placeholders."""

    agent_id: str = ""
    agency_id: str = ""
    local_division_key: str = ""
    dossier_number: str = ""


def compact_timestamp(now: datetime) -> str:
    return now.strftime("%Y%m%d%H%M%S")


def dossier_filename(now: datetime | None = None, prefix: str = "CTIT") -> str:
    """``<prefix>_YYYYMMDDhhmmss.xml`` for the given instant."""
    now = now or datetime.now(UTC)
    return f"{prefix}_{compact_timestamp(now)}.xml"


def _owner_elements(person: PersonRecord, today: date) -> list[Element]:
    name = split_name(clean(person.nombre))
    address = parse_address(person.direccion, person.poblacion)
    return [
        ("OwnerType", "PERSON"),
        ("FiscalId", clean(person.dni)),
        ("Gender", "V"),
        ("Name", name.first.upper()),
        ("Surname", name.surname1.upper()),
        ("Surname2", name.surname2.upper()),
        ("BirthDate", to_iso_date(person.fecha_nacimiento, today)),
        ("StreetName", address.street_name),
        ("StreetNumber", address.street_number),
        ("StreetType", address.street_type),
        ("BuildFloor", address.floor),
        ("BuildDoor", address.door),
        ("Province", address.province_code),
        ("Municipality", address.municipality_code),
        ("ZipCode", address.postal_code),
        ("Town", ""),
    ]


def build_dossier_tree(
    bundle: DocumentBundle, options: DossierOptions, now: datetime
) -> Element:
    today = now.date()
    vehicle = bundle.vehicle
    matriculation_date = to_iso_date(vehicle.fecha_matriculacion, today)
    dossier_number = clean(options.dossier_number) or (
        f"{DOSSIER_NUMBER_PREFIX}{compact_timestamp(now)}"
    )

    vehicle_data: list[Element] = [
        ("PlateNumber", clean(vehicle.matricula)),
        ("SerialNumber", clean(vehicle.bastidor)),
        ("VehicleKind", clean(vehicle.categoria) or DEFAULT_VEHICLE_KIND),
        ("RealPower", format_decimal(vehicle.potencia, POWER_WIDTH)),
        ("CubicCapacity", format_decimal(vehicle.cilindrada, DISPLACEMENT_WIDTH)),
        ("Cilinder", "00"),
        ("ExpirationDateITV", today.isoformat()),
        ("VehiclePurpose", "B00"),
        ("VehiclePurposeChange", "false"),
        ("FirstMatriculationDate", matriculation_date),
        ("MotiveITV", "PERIODICAL"),
        ("HasITV", "false"),
        ("Historical", "false"),
        ("MMA", format_count(vehicle.masa_maxima, MAX_MASS_DEFAULT, MASS_WIDTH)),
        ("SeatPlaces", format_count(vehicle.plazas_asiento, SEATS_DEFAULT, SEATS_WIDTH)),
        (
            "Tara",
            format_count(vehicle.masa_orden_marcha, RUNNING_ORDER_MASS_DEFAULT, MASS_WIDTH),
        ),
        ("VehicleFuel", fuel_code(vehicle.combustible)),
        ("IsResidence", "false"),
    ]
    tax_data: list[Element] = [
        ("TaxType", "ITP"),
        ("ITPKey", "SU"),
        ("FiscalModel", "FORM620"),
        ("TrasmissionMotive", "CONTRACT"),
        ("IsDUA", "false"),
        ("IsIVTM", "false"),
        ("IsAgriVehicle", "false"),
    ]
    seller: list[Element] = [
        ("MainOwner", "true"),
        *_owner_elements(bundle.seller, today),
        ("Freelance", "false"),
    ]
    buyer: list[Element] = [
        *_owner_elements(bundle.buyer, today),
        ("UpdateResidence", "false"),
    ]

    ctit: list[Element] = [
        ("CTITType", "CTI"),
        ("CTITAction", "ENDCTI"),
        ("CTITPurpose", "TRANSMISSION"),
        ("AssignServiceDGTTax", "false"),
        ("AssignAVPODGTTax", "false"),
        ("AssignDGTTax", "true"),
        ("CTITFileState", "NEW"),
        ("HasUsualDriver", "false"),
        ("DoubleFirst", "false"),
        ("DossierNumber", ""),
        ("CustomDossierNumber", dossier_number),
        ("TaxExempt", "false"),
        ("AgentNif", clean(options.agent_id) or DEFAULT_FISCAL_ID),
        ("AgencyNif", clean(options.agency_id) or DEFAULT_FISCAL_ID),
        # Not stripped: the default key carries a significant trailing space.
        ("DGTLocalDivisionKey", options.local_division_key or DEFAULT_LOCAL_DIVISION_KEY),
        ("MatriculationDate", matriculation_date),
        ("CTITVehicleData", vehicle_data),
        ("CTITTaxData", tax_data),
        ("VehicleOwnerSeller", seller),
        ("VehicleOwnerBuyer", buyer),
    ]
    return ("CTIT", ctit)


def _render_element(element: Element, depth: int, lines: list[str]) -> None:
    tag, content = element
    indent = "  " * depth
    if isinstance(content, list):
        lines.append(f"{indent}<{tag}>")
        for child in content:
            _render_element(child, depth + 1, lines)
        lines.append(f"{indent}</{tag}>")
    else:
        lines.append(f"{indent}<{tag}>{escape(content)}</{tag}>")


def render_dossier(
    bundle: DocumentBundle,
    options: DossierOptions | None = None,
    *,
    now: datetime | None = None,
) -> str:
    """Render the CTIT dossier XML text for ``bundle``.

    Absent or malformed dates become the current date and a missing dossier
    number is derived from ``now``, so pass ``now`` for reproducible output.
    """
    options = options or DossierOptions()
    now = now or datetime.now(UTC)
    lines = ['<?xml version="1.0" encoding="UTF-8"?>', f'<a9 xmlns="{DOSSIER_NAMESPACE}">']
    _render_element(build_dossier_tree(bundle, options, now), 1, lines)
    lines.append("</a9>")
    return "\n".join(lines) + "\n"
