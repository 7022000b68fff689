from __future__ import annotations

from io import BytesIO
from typing import Any
from zipfile import ZipFile

PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
TEXT_MIME = "text/plain"

ACCEPTED_CONTENT_TYPES = (PDF_MIME, DOCX_MIME, TEXT_MIME)

CONTENT_TYPE_SOURCE_HINTS = {
    PDF_MIME: "pdf",
    DOCX_MIME: "docx",
    TEXT_MIME: "txt",
}

PDF_MAGIC = b"%PDF-"
ZIP_MAGICS = (b"PK\x03\x04", b"PK\x05\x06", b"PK\x07\x08")


def _safe_str(value: Any, max_len: int = 255) -> str:
    if value is None:
        return ""
    text = str(value).strip()
    if not text:
        return ""
    return text[:max_len]


def normalize_content_type(content_type: str | None) -> str:
    return _safe_str((content_type or "").split(";")[0], 120).lower()


def has_docx_suffix(filename: str | None) -> bool:
    return _safe_str(filename).lower().endswith(".docx")


def source_type_for(content_type: str | None, filename: str | None = None) -> str | None:
    normalized = normalize_content_type(content_type)
    hint = CONTENT_TYPE_SOURCE_HINTS.get(normalized)
    if hint:
        return hint
    if has_docx_suffix(filename):
        return "docx"
    return None


def looks_like_pdf(content: bytes) -> bool:
    return PDF_MAGIC in content[:1024]


def _is_zip_payload(content: bytes) -> bool:
    return any(content.startswith(prefix) for prefix in ZIP_MAGICS)


def _zip_has_paths(content: bytes, prefixes: tuple[str, ...]) -> bool:
    try:
        with ZipFile(BytesIO(content)) as archive:
            names = archive.namelist()
        return any(any(name.startswith(prefix) for prefix in prefixes) for name in names)
    except Exception:
        return False


def looks_like_docx(content: bytes) -> bool:
    return _is_zip_payload(content) and _zip_has_paths(content, ("word/",))
