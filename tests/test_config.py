from __future__ import annotations

import pytest

from app.core.config import AppConfig

ENV_KEYS = [
    "OPENAI_API_KEY",
    "OCR_MODEL",
    "OCR_TIMEOUT_SECONDS",
    "OCR_MAX_TOKENS",
    "MOD02_TEMPLATE_PATH",
    "DGT_AGENT_ID",
    "DGT_AGENCY_ID",
    "DGT_LOCAL_DIVISION_KEY",
    "DOSSIER_FILENAME_PREFIX",
    "LOG_LEVEL",
    "CORS_ALLOWED_ORIGINS",
    "REQUEST_MAX_BYTES",
    "UPLOAD_MAX_BYTES",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_from_env_defaults() -> None:
    config = AppConfig.from_env()

    assert config.ocr.api_key == ""
    assert config.ocr.model == "gpt-4o"
    assert config.ocr.timeout_seconds == 30.0
    assert config.templates.official_form_path == "templates/Mod.02-ES.pdf"
    assert config.dossier.filename_prefix == "CTIT"
    assert config.dossier.local_division_key == ""
    assert config.security.cors_allowed_origins == [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
    assert config.security.upload_max_bytes < config.security.request_max_bytes


def test_from_env_reads_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", " sk-test ")
    monkeypatch.setenv("OCR_TIMEOUT_SECONDS", "12.5")
    monkeypatch.setenv("MOD02_TEMPLATE_PATH", "/srv/forms/mod02.pdf")
    monkeypatch.setenv("DGT_AGENT_ID", "11111111H")
    monkeypatch.setenv("DGT_LOCAL_DIVISION_KEY", "M ")
    monkeypatch.setenv("CORS_ALLOWED_ORIGINS", "https://a.example, ,https://b.example")
    monkeypatch.setenv("UPLOAD_MAX_BYTES", "2048")

    config = AppConfig.from_env()

    assert config.ocr.api_key == "sk-test"
    assert config.ocr.timeout_seconds == 12.5
    assert config.templates.official_form_path == "/srv/forms/mod02.pdf"
    assert config.dossier.agent_id == "11111111H"
    assert config.dossier.local_division_key == "M "
    assert config.security.cors_allowed_origins == ["https://a.example", "https://b.example"]
    assert config.security.upload_max_bytes == 2048


def test_config_is_frozen() -> None:
    config = AppConfig.from_env()

    with pytest.raises(AttributeError):
        config.ocr.model = "other"  # type: ignore[misc]
