"""Shareable text encoding of a document bundle."""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any

from app.records.models import DocumentBundle, PersonRecord, Role, VehicleRecord


class ShareDecodeError(ValueError):
    """Shared text is not an encoded bundle."""


def encode_bundle(bundle: DocumentBundle) -> str:
    """URL-safe base64 of the bundle's JSON wire payload."""
    raw = json.dumps(bundle.to_payload(), ensure_ascii=False, separators=(",", ":"))
    return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii")


def _decode_json(text: str) -> Any:
    compact = "".join((text or "").split())
    if not compact:
        raise ShareDecodeError("Shared payload is empty.")
    padded = compact + "=" * (-len(compact) % 4)
    try:
        # Standard alphabet links from older clients decode too.
        raw = base64.b64decode(padded.replace("-", "+").replace("_", "/"), validate=True)
        return json.loads(raw.decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ShareDecodeError(f"Shared payload is not valid: {exc}") from exc


def decode_bundle(text: str) -> DocumentBundle:
    """Inverse of ``encode_bundle``; raises ``ShareDecodeError`` on bad input."""
    payload = _decode_json(text)
    if not isinstance(payload, dict):
        raise ShareDecodeError("Shared payload must be a JSON object.")
    for role in Role:
        section = payload.get(role.value)
        if section is not None and not isinstance(section, dict):
            raise ShareDecodeError(f"Shared section '{role.value}' must be an object.")
    return DocumentBundle(
        seller=PersonRecord.from_payload(payload.get(Role.SELLER.value), fill_aliases=False),
        buyer=PersonRecord.from_payload(payload.get(Role.BUYER.value), fill_aliases=False),
        vehicle=VehicleRecord.from_payload(payload.get(Role.VEHICLE.value), fill_aliases=False),
    )
