"""Canonical typed records for transfer parties and the vehicle.

Every record field is a plain ``str`` defaulting to ``""`` so renderers never
need existence checks. Each dataclass field carries its wire key (the
camelCase key used by the recognition prompt, the HTTP API and share links)
in ``metadata["key"]``; legacy alias fields also carry the wire key they fall
back to in ``metadata["alias_of"]``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from enum import StrEnum
from typing import Any


def _wire(key: str, *, alias_of: str = "") -> Any:
    metadata = {"key": key}
    if alias_of:
        metadata["alias_of"] = alias_of
    return field(default="", metadata=metadata)


class Role(StrEnum):
    """Transaction roles, one bundle slot each."""

    SELLER = "vendedor"
    BUYER = "comprador"
    VEHICLE = "vehiculo"

    @property
    def document_kind(self) -> str:
        """Recognition document kind used for this role."""
        return "ficha" if self is Role.VEHICLE else "dni"


ROLE_ALIASES = {
    "ficha": Role.VEHICLE,
    "seller": Role.SELLER,
    "buyer": Role.BUYER,
    "vehicle": Role.VEHICLE,
}


def normalize_role(value: Any) -> Role | None:
    """Resolve a role name or alias, ``None`` when unknown."""
    normalized = str(value or "").strip().lower()
    if not normalized:
        return None
    try:
        return Role(normalized)
    except ValueError:
        return ROLE_ALIASES.get(normalized)


def _coerce(value: Any) -> str:
    if not value:
        return ""
    return value if isinstance(value, str) else str(value)


class _WireRecord:
    """Shared wire conversion for record dataclasses."""

    @classmethod
    def field_names(cls) -> list[str]:
        return [f.name for f in fields(cls)]  # type: ignore[arg-type]

    @classmethod
    def wire_keys(cls) -> dict[str, str]:
        """Map attribute name to wire key."""
        return {f.name: f.metadata["key"] for f in fields(cls)}  # type: ignore[arg-type]

    @classmethod
    def from_payload(cls, raw: Any, *, fill_aliases: bool = True) -> Any:
        """Build a record from wire keys.

        With ``fill_aliases`` an empty legacy alias takes the value of the
        field it mirrors.
        """
        source = raw if isinstance(raw, Mapping) else {}
        values: dict[str, str] = {}
        for f in fields(cls):  # type: ignore[arg-type]
            value = _coerce(source.get(f.metadata["key"]))
            alias_of = f.metadata.get("alias_of")
            if fill_aliases and not value and alias_of:
                value = _coerce(source.get(alias_of))
            values[f.name] = value
        return cls(**values)

    def to_payload(self) -> dict[str, str]:
        return {
            f.metadata["key"]: getattr(self, f.name)
            for f in fields(self)  # type: ignore[arg-type]
        }

    def with_field(self, name: str, value: str) -> Any:
        """Return a copy with one field replaced (manual edit)."""
        if name not in self.field_names():
            by_key = {key: attr for attr, key in self.wire_keys().items()}
            if name not in by_key:
                raise ValueError(f"Unknown field for {type(self).__name__}: {name}")
            name = by_key[name]
        return replace(self, **{name: "" if value is None else str(value)})  # type: ignore[type-var]

    def is_empty(self) -> bool:
        return not any(getattr(self, name) for name in self.field_names())


@dataclass(frozen=True)
class PersonRecord(_WireRecord):
    """Natural person party to the transaction (seller or buyer)."""

    nombre: str = _wire("nombre")
    dni: str = _wire("dni")
    fecha_nacimiento: str = _wire("fechaNacimiento")
    direccion: str = _wire("direccion")
    poblacion: str = _wire("poblacion")
    fecha_caducidad: str = _wire("fechaCaducidad")


@dataclass(frozen=True)
class VehicleRecord(_WireRecord):
    """Vehicle data read from the technical spec sheet."""

    marca: str = _wire("marca")
    modelo: str = _wire("modelo")
    denominacion_comercial: str = _wire("denominacionComercial")
    matricula: str = _wire("matricula")
    bastidor: str = _wire("bastidor")
    fecha_matriculacion: str = _wire("fechaMatriculacion")
    procedencia: str = _wire("procedencia")

    categoria: str = _wire("categoria")
    carroceria: str = _wire("carroceria")
    clase: str = _wire("clase")

    cilindrada: str = _wire("cilindrada")
    potencia: str = _wire("potencia")
    potencia_fiscal: str = _wire("potenciaFiscal")
    combustible: str = _wire("combustible")
    codigo_motor: str = _wire("codigoMotor")
    fabricante_motor: str = _wire("fabricanteMotor")
    velocidad_maxima: str = _wire("velocidadMaxima")

    plazas_asiento: str = _wire("plazasAsiento")
    plazas_pie: str = _wire("plazasPie")

    masa_orden_marcha: str = _wire("masaOrdenMarcha")
    masa_maxima: str = _wire("masaMaxima")
    masa_maxima_tecnica: str = _wire("masaMaximaTecnica")
    masa_remolcable: str = _wire("masaRemolcable")

    longitud: str = _wire("longitud")
    anchura: str = _wire("anchura")
    altura: str = _wire("altura")

    numero_ejes: str = _wire("numeroEjes")
    ejes_motrices: str = _wire("ejesMotrices")
    dimensiones_neumaticos: str = _wire("dimensionesNeumaticos")
    distancia_ejes: str = _wire("distanciaEjes")

    color: str = _wire("color")
    emisiones: str = _wire("emisiones")
    nivel_emisiones: str = _wire("nivelEmisiones")
    homologacion: str = _wire("homologacion")

    # Legacy output fields.
    tipo_vehiculo: str = _wire("tipoVehiculo", alias_of="categoria")
    plazas: str = _wire("plazas", alias_of="plazasAsiento")
    neumaticos: str = _wire("neumaticos", alias_of="dimensionesNeumaticos")


BUNDLE_KEYS = {
    Role.SELLER: "seller",
    Role.BUYER: "buyer",
    Role.VEHICLE: "vehicle",
}


@dataclass(frozen=True)
class DocumentBundle:
    """Seller, buyer and vehicle records for one transaction."""

    seller: PersonRecord = field(default_factory=PersonRecord)
    buyer: PersonRecord = field(default_factory=PersonRecord)
    vehicle: VehicleRecord = field(default_factory=VehicleRecord)

    def get(self, role: Role) -> PersonRecord | VehicleRecord:
        return getattr(self, BUNDLE_KEYS[role])

    def with_record(
        self, role: Role, record: PersonRecord | VehicleRecord
    ) -> "DocumentBundle":
        """Return a bundle with one slot replaced wholesale."""
        expected = VehicleRecord if role is Role.VEHICLE else PersonRecord
        if not isinstance(record, expected):
            raise TypeError(
                f"Role {role.value} expects {expected.__name__}, got {type(record).__name__}"
            )
        return replace(self, **{BUNDLE_KEYS[role]: record})

    def to_payload(self) -> dict[str, dict[str, str]]:
        return {
            Role.SELLER.value: self.seller.to_payload(),
            Role.BUYER.value: self.buyer.to_payload(),
            Role.VEHICLE.value: self.vehicle.to_payload(),
        }
