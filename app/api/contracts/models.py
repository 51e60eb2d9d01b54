"""Pydantic API request and response models used in OpenAPI contracts."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class ApiErrorResponse(BaseModel):
    """Stable error envelope for API responses."""

    error_code: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error message")


class HealthResponse(BaseModel):
    """Health check response payload."""

    status: Literal["ok"]
    ocr_configured: bool = False
    official_form_template: bool = False


class ProcessImageResponse(BaseModel):
    """Recognized record for a single uploaded photo."""

    type: str
    data: dict[str, str]


class BundleResponse(BaseModel):
    """Bundle after multi-document processing, with per-role errors."""

    vendedor: dict[str, str] = Field(default_factory=dict)
    comprador: dict[str, str] = Field(default_factory=dict)
    vehiculo: dict[str, str] = Field(default_factory=dict)
    errors: dict[str, str] = Field(default_factory=dict)


class DossierOptionsRequest(BaseModel):
    """Optional identifiers for the XML dossier."""

    agent_id: str = ""
    agency_id: str = ""
    local_division_key: str = ""
    dossier_number: str = ""


class GeneratePdfRequest(BaseModel):
    """Bundle payload and the PDF to render from it."""

    data: dict[str, Any] = Field(default_factory=dict)
    type: Literal["contract", "mod02"]


class GenerateXmlRequest(BaseModel):
    """Bundle payload for the XML dossier."""

    data: dict[str, Any] = Field(default_factory=dict)
    options: DossierOptionsRequest = Field(default_factory=DossierOptionsRequest)


class ShareEncodeRequest(BaseModel):
    """Bundle payload to encode as a shareable token."""

    data: dict[str, Any] = Field(default_factory=dict)


class ShareEncodeResponse(BaseModel):
    """Shareable token for a bundle."""

    encoded: str


class ShareDecodeRequest(BaseModel):
    """Shareable token to decode."""

    encoded: str


class ShareDecodeResponse(BaseModel):
    """Bundle decoded from a shareable token."""

    data: dict[str, dict[str, str]]
