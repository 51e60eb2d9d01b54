"""Public API request and response contracts."""

from app.api.contracts.models import (
    ApiErrorResponse,
    BundleResponse,
    DossierOptionsRequest,
    GeneratePdfRequest,
    GenerateXmlRequest,
    HealthResponse,
    ProcessImageResponse,
    ShareDecodeRequest,
    ShareDecodeResponse,
    ShareEncodeRequest,
    ShareEncodeResponse,
)

__all__ = [
    "ApiErrorResponse",
    "BundleResponse",
    "DossierOptionsRequest",
    "GeneratePdfRequest",
    "GenerateXmlRequest",
    "HealthResponse",
    "ProcessImageResponse",
    "ShareDecodeRequest",
    "ShareDecodeResponse",
    "ShareEncodeRequest",
    "ShareEncodeResponse",
]
