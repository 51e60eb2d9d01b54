"""Shared normalization helpers for recognized document data."""

from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

from dateutil import parser as date_parser  # type: ignore[import-untyped]

from app.data_builder.constants import DEFAULT_FUEL_CODE, FUEL_CODES, strip_accents
from app.records.models import DocumentBundle, PersonRecord, Role, VehicleRecord

_DISPLAY_DATE_RE = re.compile(r"^(\d{1,2})[/.\-](\d{1,2})[/.\-](\d{4})$")
_ISO_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_LEADING_NUMBER_RE = re.compile(r"^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+))")
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def clean_spaces(value: str) -> str:
    """Normalize whitespace and trim string boundaries."""
    return re.sub(r"\s+", " ", (value or "").strip())


def clean(value: Any) -> str:
    """Convert optional value to trimmed string."""
    if value is None:
        return ""
    return str(value).strip()


def normalize_person(raw: Any) -> PersonRecord:
    """Build a ``PersonRecord`` from raw identity-card fields."""
    return PersonRecord.from_payload(raw)


def normalize_vehicle(raw: Any, *, fill_aliases: bool = True) -> VehicleRecord:
    """Build a ``VehicleRecord`` from raw spec-sheet fields.

    Legacy alias fields (``tipoVehiculo``, ``plazas``, ``neumaticos``) fall
    back to the specific field they mirror when absent.
    """
    return VehicleRecord.from_payload(raw, fill_aliases=fill_aliases)


def normalize_for_role(role: Role, raw: Any) -> PersonRecord | VehicleRecord:
    if role is Role.VEHICLE:
        return normalize_vehicle(raw)
    return normalize_person(raw)


def normalize_bundle(raw: Any, *, fill_aliases: bool = True) -> DocumentBundle:
    """Build a bundle from its wire payload; missing roles stay empty.

    Pass ``fill_aliases=False`` to keep the payload exactly as sent.
    """
    source: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}
    return DocumentBundle(
        seller=normalize_person(source.get(Role.SELLER.value)),
        buyer=normalize_person(source.get(Role.BUYER.value)),
        vehicle=normalize_vehicle(
            source.get(Role.VEHICLE.value), fill_aliases=fill_aliases
        ),
    )


def _valid_iso(year: int, month: int, day: int) -> str:
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return ""


def to_iso_date(value: Any, fallback: date) -> str:
    """Convert ``DD/MM/YYYY`` into ``YYYY-MM-DD``.

    ISO input passes through. Empty, malformed or impossible dates return
    ``fallback`` so the result is always a syntactically valid date.
    """
    normalized = clean(value)
    match = _DISPLAY_DATE_RE.match(normalized)
    if match:
        iso = _valid_iso(int(match.group(3)), int(match.group(2)), int(match.group(1)))
        if iso:
            return iso
    match = _ISO_DATE_RE.match(normalized)
    if match:
        iso = _valid_iso(int(match.group(1)), int(match.group(2)), int(match.group(3)))
        if iso:
            return iso
    return fallback.isoformat()


def to_display_date(value: Any) -> str:
    """Convert different date representations into ``DD/MM/YYYY``."""
    normalized = clean_spaces(clean(value))
    if not normalized:
        return ""
    match = _ISO_DATE_RE.match(normalized)
    if match:
        iso = _valid_iso(int(match.group(1)), int(match.group(2)), int(match.group(3)))
        return f"{iso[8:10]}/{iso[5:7]}/{iso[0:4]}" if iso else ""
    match = _DISPLAY_DATE_RE.match(normalized)
    if match:
        iso = _valid_iso(int(match.group(3)), int(match.group(2)), int(match.group(1)))
        return f"{iso[8:10]}/{iso[5:7]}/{iso[0:4]}" if iso else ""

    try:
        parsed = date_parser.parse(normalized, dayfirst=True, yearfirst=False)
    except (ValueError, OverflowError):
        return ""
    if not isinstance(parsed, datetime):
        return ""
    return parsed.strftime("%d/%m/%Y")


def parse_leading_number(value: Any) -> float | None:
    """Read the leading real number of a value such as ``"110 kW"``."""
    match = _LEADING_NUMBER_RE.match(clean(value))
    if not match:
        return None
    return float(match.group(1))


def parse_leading_int(value: Any) -> int | None:
    """Read the leading integer of a value such as ``"5 plazas"``."""
    match = _LEADING_INT_RE.match(clean(value))
    if not match:
        return None
    return int(match.group(1))


def format_decimal(value: Any, width: int) -> str:
    """Two-decimal number left-padded with zeros; unparseable input is 0."""
    number = parse_leading_number(value) or 0.0
    return f"{number:.2f}".rjust(width, "0")


def format_count(value: Any, default: int, width: int) -> str:
    """Integer left-padded with zeros; absent or zero input uses ``default``."""
    number = parse_leading_int(value) or default
    return str(number).rjust(width, "0")


def fuel_code(value: Any) -> str:
    """Map free-text fuel description to the two-letter dossier code."""
    normalized = strip_accents(clean(value)).lower()
    for needle, code in FUEL_CODES:
        if needle in normalized:
            return code
    return DEFAULT_FUEL_CODE
