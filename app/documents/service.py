"""Application service for recognition and rendering of transfer documents."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from functools import partial
from typing import Any, Callable, Protocol

from app.core.config import AppConfig
from app.core.logging import role_extra
from app.data_builder.normalizers import normalize_for_role
from app.documents.session import TransferSession
from app.ocr_extract.ocr import OCRError, OCRUnavailableError, VisionOCRClient
from app.records.models import DocumentBundle, PersonRecord, Role, VehicleRecord
from app.renderers.contract import render_contract
from app.renderers.dossier import DossierOptions, dossier_filename, render_dossier
from app.renderers.official_form import render_official_form
from app.renderers.pdf_helpers import load_template

LOGGER = logging.getLogger(__name__)

PDF_FILENAMES = {
    "contract": "contrato-compraventa.pdf",
    "mod02": "mod-02-es.pdf",
}


class OCRClientProtocol(Protocol):
    """Protocol for the recognition client used by the pipeline."""

    def recognize(self, image_bytes: bytes, kind: str) -> dict[str, Any]:
        """Return raw field mapping for one document photo."""


@dataclass(frozen=True)
class ProcessResult:
    """Bundle after a multi-role upload plus per-role error messages."""

    bundle: DocumentBundle
    errors: dict[str, str] = field(default_factory=dict)


class DocumentsService:
    """Recognize uploaded documents and render transfer artifacts."""

    def __init__(
        self,
        *,
        ocr_client: OCRClientProtocol,
        load_official_form_template: Callable[[], bytes],
        dossier_defaults: DossierOptions | None = None,
        dossier_filename_prefix: str = "CTIT",
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.ocr_client = ocr_client
        self.load_official_form_template = load_official_form_template
        self.dossier_defaults = dossier_defaults or DossierOptions()
        self.dossier_filename_prefix = dossier_filename_prefix
        self.clock = clock or (lambda: datetime.now(UTC))

    def process_image(
        self, role: Role, image_bytes: bytes
    ) -> PersonRecord | VehicleRecord:
        """Recognize one photo for ``role``; recognition errors propagate."""
        kind = role.document_kind
        raw = self.ocr_client.recognize(image_bytes, kind)
        record = normalize_for_role(role, raw)
        LOGGER.info(
            "Document recognized (%d fields filled)",
            sum(1 for value in record.to_payload().values() if value),
            extra=role_extra(role.value, kind),
        )
        return record

    def process_uploads(
        self,
        uploads: Mapping[Role, bytes],
        session: TransferSession | None = None,
    ) -> ProcessResult:
        """Recognize every uploaded role in parallel.

        A failed role keeps its previous record and is reported in
        ``errors``. When every attempted role failed because the service is
        unreachable, ``OCRUnavailableError`` is raised instead.
        """
        attempted = {role: data for role, data in uploads.items() if data}
        bundle = session.snapshot() if session else DocumentBundle()
        if not attempted:
            return ProcessResult(bundle=bundle)

        errors: dict[str, str] = {}
        unavailable: list[OCRUnavailableError] = []
        with ThreadPoolExecutor(
            max_workers=len(attempted), thread_name_prefix="ocr-role"
        ) as executor:
            futures = {
                role: executor.submit(self.process_image, role, data)
                for role, data in attempted.items()
            }
            for role, future in futures.items():
                extra = role_extra(role.value, role.document_kind)
                try:
                    record = future.result()
                except OCRUnavailableError as exc:
                    LOGGER.warning("Recognition unavailable: %s", exc, extra=extra)
                    unavailable.append(exc)
                    errors[role.value] = str(exc)
                    continue
                except OCRError as exc:
                    LOGGER.warning("Recognition failed: %s", exc, extra=extra)
                    errors[role.value] = str(exc)
                    continue
                except Exception as exc:
                    LOGGER.exception("Unexpected failure processing document", extra=extra)
                    errors[role.value] = str(exc) or type(exc).__name__
                    continue
                if session:
                    bundle = session.replace(role, record)
                else:
                    bundle = bundle.with_record(role, record)

        if len(unavailable) == len(attempted):
            raise OCRUnavailableError(
                f"Recognition service unreachable for all documents: {unavailable[0]}"
            ) from unavailable[0]
        if session:
            bundle = session.snapshot()
        return ProcessResult(bundle=bundle, errors=errors)

    def render_pdf(self, bundle: DocumentBundle, kind: str) -> tuple[bytes, str]:
        """Render ``contract`` or ``mod02`` and return ``(pdf, filename)``."""
        if kind not in PDF_FILENAMES:
            raise ValueError(f"Unsupported PDF type: {kind}")
        today = self.clock().date()
        if kind == "contract":
            content = render_contract(bundle, today=today)
        else:
            content = render_official_form(
                bundle, self.load_official_form_template(), today=today
            )
        LOGGER.info("Rendered %s PDF (%d bytes)", kind, len(content))
        return content, PDF_FILENAMES[kind]

    def resolve_dossier_options(self, options: DossierOptions | None) -> DossierOptions:
        """Fill blank request options from configured defaults."""
        if options is None:
            return self.dossier_defaults
        defaults = self.dossier_defaults
        return replace(
            options,
            agent_id=options.agent_id or defaults.agent_id,
            agency_id=options.agency_id or defaults.agency_id,
            local_division_key=options.local_division_key or defaults.local_division_key,
            dossier_number=options.dossier_number or defaults.dossier_number,
        )

    def render_xml(
        self, bundle: DocumentBundle, options: DossierOptions | None = None
    ) -> tuple[str, str]:
        now = self.clock()
        xml = render_dossier(bundle, self.resolve_dossier_options(options), now=now)
        return xml, dossier_filename(now, self.dossier_filename_prefix)


def build_documents_service(config: AppConfig) -> DocumentsService:
    """Wire the service with the configured OCR client and template path."""
    ocr_client = VisionOCRClient(
        config.ocr.api_key or None,
        model=config.ocr.model,
        timeout_seconds=config.ocr.timeout_seconds,
        max_tokens=config.ocr.max_tokens,
    )
    return DocumentsService(
        ocr_client=ocr_client,
        load_official_form_template=partial(
            load_template, config.templates.official_form_path
        ),
        dossier_defaults=DossierOptions(
            agent_id=config.dossier.agent_id,
            agency_id=config.dossier.agency_id,
            local_division_key=config.dossier.local_division_key,
        ),
        dossier_filename_prefix=config.dossier.filename_prefix,
    )
