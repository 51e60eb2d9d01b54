from __future__ import annotations

import base64
import json
import logging
import os
import re
from typing import Any

import openai
from openai import OpenAI

from app.ocr_extract.prompts import PROMPTS

LOGGER = logging.getLogger(__name__)

DOCUMENT_KINDS = frozenset(PROMPTS)


class OCRError(RuntimeError):
    """Base class for recognition failures."""


class OCRUnavailableError(OCRError):
    """Recognition service unreachable or not configured."""


class OCRTimeoutError(OCRUnavailableError):
    """Recognition request exceeded its timeout."""


class OCRResponseError(OCRError):
    """Recognition service answered with content that is not a JSON object."""


def sniff_mime_type(image_bytes: bytes) -> str:
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"


def strip_code_fences(content: str) -> str:
    """Remove Markdown code fences wrapped around a JSON answer."""
    text = (content or "").strip()
    text = re.sub(r"^```(?:json)?\s*", "", text, flags=re.I)
    text = re.sub(r"\s*```$", "", text)
    return text.strip()


def parse_recognition_content(content: str | None) -> dict[str, Any]:
    if not content or not content.strip():
        raise OCRResponseError("Recognition service returned an empty answer.")
    text = strip_code_fences(content)
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as exc:
        preview = content[:500] + ("..." if len(content) > 500 else "")
        raise OCRResponseError(
            f"Recognition answer is not valid JSON: {preview!r}"
        ) from exc
    if not isinstance(parsed, dict):
        raise OCRResponseError(
            f"Recognition answer is JSON {type(parsed).__name__}, expected object."
        )
    return parsed


class VisionOCRClient:
    def __init__(
        self,
        api_key: str | None = None,
        *,
        model: str = "gpt-4o",
        timeout_seconds: float = 30.0,
        max_tokens: int = 1000,
        client: Any | None = None,
    ) -> None:
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        self.model = model
        self.max_tokens = max_tokens
        self.client: Any | None = client
        if self.client is None and self.api_key:
            # Retries are left to the caller; a slow role must fail on its own.
            self.client = OpenAI(
                api_key=self.api_key, timeout=timeout_seconds, max_retries=0
            )
        elif self.client is None:
            LOGGER.warning(
                "OPENAI_API_KEY is not set. Document recognition will be unavailable."
            )

    def recognize(self, image_bytes: bytes, kind: str) -> dict[str, Any]:
        """Read one document photo and return its raw field mapping."""
        if kind not in DOCUMENT_KINDS:
            raise ValueError(f"Unsupported document kind: {kind}")
        if not self.client:
            raise OCRUnavailableError(
                "Recognition client is unavailable. Set OPENAI_API_KEY."
            )

        LOGGER.info(
            "Sending %s document to recognition service (%d bytes)",
            kind,
            len(image_bytes),
            extra={"document_kind": kind},
        )
        data_url = (
            f"data:{sniff_mime_type(image_bytes)};base64,"
            f"{base64.b64encode(image_bytes).decode('ascii')}"
        )
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": PROMPTS[kind]},
                            {"type": "image_url", "image_url": {"url": data_url}},
                        ],
                    }
                ],
                max_tokens=self.max_tokens,
            )
        except openai.APITimeoutError as exc:
            raise OCRTimeoutError(f"Recognition request timed out: {exc}") from exc
        except openai.APIConnectionError as exc:
            raise OCRUnavailableError(f"Recognition service unreachable: {exc}") from exc
        except openai.OpenAIError as exc:
            raise OCRUnavailableError(f"Recognition service error: {exc}") from exc

        choices = getattr(response, "choices", None) or []
        content = choices[0].message.content if choices else None
        LOGGER.debug("Raw recognition answer: %s", content, extra={"document_kind": kind})
        return parse_recognition_content(content)
