"""In-memory transfer session holding the current document bundle."""

from __future__ import annotations

import logging
import threading

from app.records.models import DocumentBundle, PersonRecord, Role, VehicleRecord

LOGGER = logging.getLogger(__name__)


class TransferSession:
    """Owns the bundle of one transfer and hands out consistent snapshots.

    The bundle is immutable, so ``snapshot`` is a plain attribute read and a
    renderer never observes a half-edited record. Writers serialize on a
    lock so two concurrent slot replacements cannot lose each other.
    """

    def __init__(self, bundle: DocumentBundle | None = None) -> None:
        self._bundle = bundle or DocumentBundle()
        self._lock = threading.Lock()

    def snapshot(self) -> DocumentBundle:
        return self._bundle

    def replace(self, role: Role, record: PersonRecord | VehicleRecord) -> DocumentBundle:
        with self._lock:
            self._bundle = self._bundle.with_record(role, record)
            return self._bundle

    def update_field(self, role: Role, name: str, value: str) -> DocumentBundle:
        """Apply one manual edit; unknown field names raise ``ValueError``."""
        with self._lock:
            record = self._bundle.get(role).with_field(name, value)
            self._bundle = self._bundle.with_record(role, record)
            LOGGER.debug(
                "Field edited", extra={"role": role.value, "field_name": name}
            )
            return self._bundle

    def reset(self) -> DocumentBundle:
        with self._lock:
            self._bundle = DocumentBundle()
            return self._bundle
