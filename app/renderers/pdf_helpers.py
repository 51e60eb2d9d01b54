"""PyMuPDF helpers shared by the PDF renderers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import fitz  # PyMuPDF

LOGGER = logging.getLogger(__name__)

REGULAR_FONT = "helv"
BOLD_FONT = "hebo"


class TemplateError(RuntimeError):
    """PDF template missing, unreadable or not a PDF."""


@dataclass(frozen=True)
class FormFieldInfo:
    name: str
    field_type: str
    page_index: int


def load_template(path: str | Path) -> bytes:
    """Read template bytes from disk, raising ``TemplateError`` on failure."""
    template_path = Path(path)
    try:
        data = template_path.read_bytes()
    except OSError as exc:
        raise TemplateError(f"PDF template not readable: {template_path}") from exc
    if not data:
        raise TemplateError(f"PDF template is empty: {template_path}")
    return data


def open_pdf(data: bytes) -> fitz.Document:
    if not data:
        raise TemplateError("PDF template is empty.")
    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except (RuntimeError, ValueError) as exc:
        raise TemplateError(f"PDF template is corrupt: {exc}") from exc
    if doc.page_count == 0:
        doc.close()
        raise TemplateError("PDF template has no pages.")
    return doc


def _widget_name(widget: Any) -> str:
    return str((widget.field_name or "")).strip()


def inspect_form_fields(data: bytes) -> list[FormFieldInfo]:
    """List the named form fields of a PDF in page order."""
    doc = open_pdf(data)
    rows: list[FormFieldInfo] = []
    try:
        for page_index, page in enumerate(doc):
            for w in page.widgets() or []:
                name = _widget_name(w)
                if not name:
                    continue
                rows.append(
                    FormFieldInfo(
                        name=name,
                        field_type=str(getattr(w, "field_type_string", "") or ""),
                        page_index=page_index,
                    )
                )
    finally:
        doc.close()
    return rows


class FormHandle:
    """Named-field writer over an open AcroForm document."""

    def __init__(self, doc: fitz.Document) -> None:
        self.doc = doc
        self.field_names: set[str] = set()
        for page in doc:
            for w in page.widgets() or []:
                name = _widget_name(w)
                if name:
                    self.field_names.add(name)

    def has_field(self, name: str) -> bool:
        return name in self.field_names

    def set_field(self, name: str, value: str) -> bool:
        """Write ``value`` to every widget named ``name``.

        Returns ``False`` when the template has no such field. Write errors
        raised by PyMuPDF propagate to the caller.
        """
        if name not in self.field_names:
            return False
        for page in self.doc:
            for w in page.widgets() or []:
                if _widget_name(w) != name:
                    continue
                w.field_value = value
                w.update()
        return True

    def render(self) -> bytes:
        if hasattr(self.doc, "need_appearances"):
            try:
                self.doc.need_appearances(True)
            except Exception:
                LOGGER.exception("Failed setting need_appearances on filled PDF.")
        return self.doc.tobytes(garbage=1, deflate=True)

    def close(self) -> None:
        self.doc.close()

    def __enter__(self) -> "FormHandle":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def open_form(template_bytes: bytes) -> FormHandle:
    return FormHandle(open_pdf(template_bytes))


def draw_text(
    page: fitz.Page,
    text: str,
    x: float,
    y: float,
    *,
    bold: bool = False,
    size: float = 11,
) -> None:
    """Draw one line with its baseline at ``(x, y)`` in PDF user space.

    ``y`` grows upward from the bottom edge; PyMuPDF measures from the top.
    """
    page.insert_text(
        fitz.Point(x, page.rect.height - y),
        text,
        fontname=BOLD_FONT if bold else REGULAR_FONT,
        fontsize=size,
    )
