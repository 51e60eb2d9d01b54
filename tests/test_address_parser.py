from __future__ import annotations

from app.data_builder.address_parser import (
    canonical_street_type,
    extract_postal_code,
    parse_address,
)


def test_parse_structured_address_with_floor_and_door() -> None:
    address = parse_address("CALLE MAYOR 12, 3ºA", "MADRID 28013")

    assert address.street_type == "CALLE"
    assert address.street_name == "MAYOR"
    assert address.street_number == "12"
    assert address.floor == "3"
    assert address.door == "A"
    assert address.postal_code == "28013"
    assert address.province_code == "28"
    assert address.municipality_code == "2801300"


def test_parse_address_canonicalizes_abbreviated_street_types() -> None:
    assert parse_address("C/ Sol 5", "").street_type == "CALLE"
    assert parse_address("avda diagonal 640", "08017").street_type == "AVENIDA"
    assert parse_address("avda diagonal 640", "08017").street_name == "DIAGONAL"
    assert canonical_street_type("Pso") == "PASEO"
    assert canonical_street_type("PL") == "PLAZA"


def test_parse_address_without_number_defaults_to_zero() -> None:
    address = parse_address("PLAZA ESPAÑA", "SEVILLA 41001")

    assert address.street_type == "PLAZA"
    assert address.street_name == "ESPAÑA"
    assert address.street_number == "0"


def test_parse_address_fallback_splits_trailing_number() -> None:
    address = parse_address("Ronda de Toledo 7", "28005 MADRID")

    assert address.street_type == "CALLE"
    assert address.street_name == "RONDA DE TOLEDO"
    assert address.street_number == "7"
    assert address.postal_code == "28005"


def test_parse_address_fallback_keeps_unnumbered_line_as_name() -> None:
    address = parse_address("Urbanización Los Pinos", "")

    assert address.street_name == "URBANIZACIÓN LOS PINOS"
    assert address.street_number == "0"


def test_parse_empty_address_uses_defaults() -> None:
    address = parse_address("", "")

    assert address.street_type == "CALLE"
    assert address.street_name == ""
    assert address.street_number == "0"
    assert address.postal_code == "00000"
    assert address.province_code == "00"
    assert address.municipality_code == "0000000"


def test_extract_postal_code_takes_first_five_digit_run() -> None:
    assert extract_postal_code("MADRID 28013") == "28013"
    assert extract_postal_code("sin código") == "00000"
