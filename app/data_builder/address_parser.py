"""Address parsing helpers for the XML dossier owner blocks."""

from __future__ import annotations

import re
from dataclasses import dataclass

from app.data_builder.constants import (
    DEFAULT_POSTAL_CODE,
    DEFAULT_STREET_NUMBER,
    DEFAULT_STREET_TYPE,
    MUNICIPALITY_SUFFIX,
    STREET_TYPE_CANONICAL,
    STREET_TYPE_PATTERN,
    norm_street_token,
)
from app.data_builder.normalizers import clean

_STRUCTURED_RE = re.compile(
    rf"^({STREET_TYPE_PATTERN})\s+(.+?)(?:\s+(\d+))?(?:\s*,?\s*(\d+)º?\s*([A-Z]?))?$",
    flags=re.I,
)
_TRAILING_NUMBER_RE = re.compile(r"^(.+?)[\s,]+(\d+)$")
_POSTAL_CODE_RE = re.compile(r"(\d{5})")


@dataclass(frozen=True)
class AddressComponents:
    """Structured postal address derived from two free-text lines."""

    street_type: str
    street_name: str
    street_number: str
    floor: str
    door: str
    postal_code: str
    province_code: str

    @property
    def municipality_code(self) -> str:
        """Postal code plus ``"00"``; not an official municipality code."""
        return f"{self.postal_code}{MUNICIPALITY_SUFFIX}"


def canonical_street_type(token: str) -> str:
    """Map a street-type token to its long form (``C/`` -> ``CALLE``)."""
    normalized = norm_street_token(token)
    return STREET_TYPE_CANONICAL.get(normalized, normalized or DEFAULT_STREET_TYPE)


def extract_postal_code(locality_line: str) -> str:
    """Return the first five-digit run of the locality line or ``"00000"``."""
    match = _POSTAL_CODE_RE.search(locality_line or "")
    return match.group(1) if match else DEFAULT_POSTAL_CODE


def parse_address(street_line: str | None, locality_line: str | None) -> AddressComponents:
    """Decompose a street line and a locality line into address components.

    Lines starting with a known street type are matched structurally
    (``CALLE MAYOR 12, 3ºA``). Anything else falls back to splitting off a
    trailing number, and an unmatched line becomes the street name.
    """
    street = clean(street_line)
    postal_code = extract_postal_code(clean(locality_line))
    province_code = postal_code[:2]

    match = _STRUCTURED_RE.match(street)
    if match:
        return AddressComponents(
            street_type=canonical_street_type(match.group(1)),
            street_name=match.group(2).upper(),
            street_number=match.group(3) or DEFAULT_STREET_NUMBER,
            floor=match.group(4) or "",
            door=(match.group(5) or "").upper(),
            postal_code=postal_code,
            province_code=province_code,
        )

    fallback = _TRAILING_NUMBER_RE.match(street)
    if fallback:
        street_name, street_number = fallback.group(1), fallback.group(2)
    else:
        street_name, street_number = street, DEFAULT_STREET_NUMBER
    return AddressComponents(
        street_type=DEFAULT_STREET_TYPE,
        street_name=street_name.upper(),
        street_number=street_number,
        floor="",
        door="",
        postal_code=postal_code,
        province_code=province_code,
    )
