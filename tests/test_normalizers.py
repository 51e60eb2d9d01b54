from __future__ import annotations

from datetime import date

from app.data_builder.normalizers import (
    format_count,
    format_decimal,
    fuel_code,
    normalize_bundle,
    normalize_person,
    normalize_vehicle,
    parse_leading_number,
    to_display_date,
    to_iso_date,
)
from app.records.models import PersonRecord, VehicleRecord
from tests.mock_documents import MOCK_SELLER, MOCK_VEHICLE

FALLBACK = date(2024, 6, 1)


def test_normalize_person_fills_every_field_as_string() -> None:
    record = normalize_person({"nombre": "Ana", "dni": None, "extra": "ignored"})

    assert record == PersonRecord(nombre="Ana")
    assert all(isinstance(value, str) for value in record.to_payload().values())


def test_normalize_person_keeps_recognized_values() -> None:
    record = normalize_person(MOCK_SELLER)

    assert record.dni == "12345678Z"
    assert record.fecha_nacimiento == "07/03/1985"
    assert record.poblacion == "MADRID 28013"


def test_normalize_coerces_non_string_values() -> None:
    record = normalize_vehicle({"cilindrada": 1598, "plazasAsiento": 5, "potencia": 0})

    assert record.cilindrada == "1598"
    assert record.plazas_asiento == "5"
    assert record.plazas == "5"
    assert record.potencia == ""


def test_normalize_vehicle_alias_prefers_own_key() -> None:
    record = normalize_vehicle({"categoria": "M1", "tipoVehiculo": "TURISMO"})

    assert record.tipo_vehiculo == "TURISMO"
    assert record.categoria == "M1"


def test_normalize_handles_non_mapping_input() -> None:
    assert normalize_person(None) == PersonRecord()
    assert normalize_vehicle(["not", "a", "mapping"]) == VehicleRecord()


def test_normalize_bundle_leaves_missing_roles_empty() -> None:
    bundle = normalize_bundle({"vehiculo": MOCK_VEHICLE})

    assert bundle.vehicle.matricula == "1234ABC"
    assert bundle.seller.is_empty()
    assert bundle.buyer.is_empty()


def test_to_iso_date_converts_display_dates() -> None:
    assert to_iso_date("07/03/2025", FALLBACK) == "2025-03-07"
    assert to_iso_date("7-3-2025", FALLBACK) == "2025-03-07"
    assert to_iso_date("07.03.2025", FALLBACK) == "2025-03-07"
    assert to_iso_date("2025-03-07", FALLBACK) == "2025-03-07"


def test_to_iso_date_falls_back_for_bad_input() -> None:
    assert to_iso_date("not-a-date", FALLBACK) == "2024-06-01"
    assert to_iso_date("", FALLBACK) == "2024-06-01"
    assert to_iso_date(None, FALLBACK) == "2024-06-01"
    assert to_iso_date("31/02/2025", FALLBACK) == "2024-06-01"


def test_date_round_trip_is_stable() -> None:
    iso = to_iso_date("2025-03-07", FALLBACK)

    assert to_display_date(iso) == "07/03/2025"
    assert to_iso_date(to_display_date(iso), FALLBACK) == "2025-03-07"


def test_to_display_date_never_raises() -> None:
    assert to_display_date("") == ""
    assert to_display_date("not-a-date") == ""
    assert to_display_date("7/3/2025") == "07/03/2025"


def test_parse_leading_number_reads_prefix() -> None:
    assert parse_leading_number("110 kW") == 110.0
    assert parse_leading_number("1.6") == 1.6
    assert parse_leading_number("N/A") is None
    assert parse_leading_number("") is None


def test_format_decimal_pads_to_width() -> None:
    assert format_decimal("110", 6) == "110.00"
    assert format_decimal("81 kW", 6) == "081.00"
    assert format_decimal("1598", 8) == "01598.00"
    assert format_decimal("", 6) == "000.00"
    assert format_decimal("N/A", 6) == "000.00"


def test_format_count_uses_default_for_zero_or_missing() -> None:
    assert format_count("5 plazas", 5, 3) == "005"
    assert format_count("", 5, 3) == "005"
    assert format_count("0", 1200, 6) == "001200"
    assert format_count("1140 kg", 1200, 6) == "001140"


def test_fuel_code_is_accent_and_case_insensitive() -> None:
    assert fuel_code("Diésel") == "GO"
    assert fuel_code("GASOIL") == "GO"
    assert fuel_code("gasolina") == "GA"
    assert fuel_code("Eléctrico") == "EL"
    assert fuel_code("HÍBRIDO enchufable") == "HI"
    assert fuel_code("hidrógeno") == "GA"
    assert fuel_code("") == "GA"
