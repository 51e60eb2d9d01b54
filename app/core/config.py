"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class OCRConfig:
    """Vision recognition service settings."""

    api_key: str
    model: str
    timeout_seconds: float
    max_tokens: int


@dataclass(frozen=True)
class TemplateConfig:
    """Locations of externally supplied PDF templates."""

    official_form_path: str


@dataclass(frozen=True)
class DossierConfig:
    """Default identifiers used in the XML dossier."""

    agent_id: str
    agency_id: str
    local_division_key: str
    filename_prefix: str


@dataclass(frozen=True)
class LoggingConfig:
    """Structured logging configuration."""

    level: str


@dataclass(frozen=True)
class SecurityConfig:
    """API perimeter security settings."""

    cors_allowed_origins: list[str]
    request_max_bytes: int
    upload_max_bytes: int


@dataclass(frozen=True)
class AppConfig:
    """Top-level application configuration."""

    ocr: OCRConfig
    templates: TemplateConfig
    dossier: DossierConfig
    logging: LoggingConfig
    security: SecurityConfig

    @staticmethod
    def from_env() -> "AppConfig":
        """Build app config from process environment."""
        api_key = os.getenv("OPENAI_API_KEY", "").strip()
        model = os.getenv("OCR_MODEL", "gpt-4o").strip() or "gpt-4o"
        timeout_seconds = float(os.getenv("OCR_TIMEOUT_SECONDS", "30"))
        max_tokens = int(os.getenv("OCR_MAX_TOKENS", "1000"))
        official_form_path = (
            os.getenv("MOD02_TEMPLATE_PATH", "templates/Mod.02-ES.pdf").strip()
            or "templates/Mod.02-ES.pdf"
        )
        # Blank values fall through to the renderer's own placeholders.
        agent_id = os.getenv("DGT_AGENT_ID", "").strip()
        agency_id = os.getenv("DGT_AGENCY_ID", "").strip()
        local_division_key = os.getenv("DGT_LOCAL_DIVISION_KEY", "")
        filename_prefix = os.getenv("DOSSIER_FILENAME_PREFIX", "CTIT").strip() or "CTIT"
        log_level = os.getenv("LOG_LEVEL", "INFO").strip() or "INFO"
        cors_allowed_origins = [
            origin.strip()
            for origin in os.getenv(
                "CORS_ALLOWED_ORIGINS",
                "http://localhost:3000,http://127.0.0.1:3000",
            ).split(",")
            if origin.strip()
        ]
        request_max_bytes = int(os.getenv("REQUEST_MAX_BYTES", str(25 * 1024 * 1024)))
        upload_max_bytes = int(os.getenv("UPLOAD_MAX_BYTES", str(20 * 1024 * 1024)))

        return AppConfig(
            ocr=OCRConfig(
                api_key=api_key,
                model=model,
                timeout_seconds=timeout_seconds,
                max_tokens=max_tokens,
            ),
            templates=TemplateConfig(official_form_path=official_form_path),
            dossier=DossierConfig(
                agent_id=agent_id,
                agency_id=agency_id,
                local_division_key=local_division_key,
                filename_prefix=filename_prefix,
            ),
            logging=LoggingConfig(level=log_level),
            security=SecurityConfig(
                cors_allowed_origins=cors_allowed_origins,
                request_max_bytes=request_max_bytes,
                upload_max_bytes=upload_max_bytes,
            ),
        )
