from __future__ import annotations

import base64
import json

import pytest

from app.records.models import DocumentBundle, VehicleRecord
from app.records.share import ShareDecodeError, decode_bundle, encode_bundle
from tests.mock_documents import mock_bundle


def test_share_round_trip_preserves_every_field() -> None:
    bundle = mock_bundle()

    assert decode_bundle(encode_bundle(bundle)) == bundle


def test_share_round_trip_keeps_empty_alias_fields_empty() -> None:
    bundle = DocumentBundle(vehicle=VehicleRecord(categoria="M1", plazas_asiento="5"))

    decoded = decode_bundle(encode_bundle(bundle))

    assert decoded == bundle
    assert decoded.vehicle.tipo_vehiculo == ""


def test_encoded_bundle_is_url_safe() -> None:
    bundle = DocumentBundle(vehicle=VehicleRecord(marca="Citroën ¿?>>>"))
    token = encode_bundle(bundle)

    assert "+" not in token and "/" not in token
    assert decode_bundle(token) == bundle


def test_decode_accepts_standard_alphabet_without_padding() -> None:
    raw = json.dumps({"vehiculo": {"matricula": "1234ABC"}}).encode("utf-8")
    token = base64.b64encode(raw).decode("ascii").rstrip("=")

    assert decode_bundle(token).vehicle.matricula == "1234ABC"


@pytest.mark.parametrize(
    "token",
    [
        "",
        "%%%",
        base64.urlsafe_b64encode(b"not json").decode("ascii"),
        base64.urlsafe_b64encode(b"[1, 2]").decode("ascii"),
        base64.urlsafe_b64encode(b'{"vendedor": "Ana"}').decode("ascii"),
    ],
)
def test_decode_rejects_invalid_tokens(token: str) -> None:
    with pytest.raises(ShareDecodeError):
        decode_bundle(token)
