"""Constants and code tables for document normalization and rendering."""

from __future__ import annotations

import re
import unicodedata

STREET_TYPE_PATTERN = r"CALLE|C/|AVDA|AVENIDA|PLAZA|PL|PASEO|PSO"

STREET_TYPE_CANONICAL = {
    "C/": "CALLE",
    "CALLE": "CALLE",
    "AVDA": "AVENIDA",
    "AVENIDA": "AVENIDA",
    "PL": "PLAZA",
    "PLAZA": "PLAZA",
    "PSO": "PASEO",
    "PASEO": "PASEO",
}

DEFAULT_STREET_TYPE = "CALLE"
DEFAULT_STREET_NUMBER = "0"
DEFAULT_POSTAL_CODE = "00000"
MUNICIPALITY_SUFFIX = "00"

# First match wins, so "hibrido gasolina" maps to GA.
FUEL_CODES = [
    ("gasolina", "GA"),
    ("diesel", "GO"),
    ("gasoil", "GO"),
    ("electrico", "EL"),
    ("hibrido", "HI"),
]
DEFAULT_FUEL_CODE = "GA"

DEFAULT_FISCAL_ID = "00000000T"
DEFAULT_LOCAL_DIVISION_KEY = "B "
DEFAULT_VEHICLE_KIND = "40"
DOSSIER_NUMBER_PREFIX = "2025-1/"
DOSSIER_NAMESPACE = "http://a9.gescogroup.com/xmlbeans/matriculation"

POWER_WIDTH = 6
DISPLACEMENT_WIDTH = 8
SEATS_DEFAULT = 5
SEATS_WIDTH = 3
RUNNING_ORDER_MASS_DEFAULT = 1200
MAX_MASS_DEFAULT = 1500
MASS_WIDTH = 6

MONTHS_ES = [
    "enero",
    "febrero",
    "marzo",
    "abril",
    "mayo",
    "junio",
    "julio",
    "agosto",
    "septiembre",
    "octubre",
    "noviembre",
    "diciembre",
]


def strip_accents(value: str) -> str:
    """Remove diacritics so "Diésel" and "diesel" compare equal."""
    decomposed = unicodedata.normalize("NFKD", value or "")
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def norm_street_token(value: str) -> str:
    """Normalize a street-type token for table lookup."""
    normalized = strip_accents(value).upper()
    return re.sub(r"[^A-Z/]+", "", normalized)
