from __future__ import annotations

import logging
from io import BytesIO
from zipfile import ZipFile

import defusedxml.ElementTree as ET
from docx import Document
from docx.table import Table
from pypdf import PdfReader

from app.core.errors import ExtractionError

from .signatures import looks_like_docx, looks_like_pdf, normalize_content_type, source_type_for

logger = logging.getLogger(__name__)

PAGE_SEPARATOR = "\n\n"
FRAGMENT_SEPARATOR = " "
PARAGRAPH_SEPARATOR = "\n\n"


def _decode_text(content: bytes) -> str:
    return content.decode("utf-8-sig", errors="replace")


def _page_fragments(page) -> list[str]:
    fragments: list[str] = []

    def visitor(text, _cm, _tm, _font_dict, _font_size) -> None:
        fragment = (text or "").strip("\r\n")
        if fragment.strip():
            fragments.append(fragment)

    page.extract_text(visitor_text=visitor)
    return fragments


def _extract_pdf(content: bytes) -> str:
    if not looks_like_pdf(content):
        raise ExtractionError.pdf_unreadable()

    try:
        reader = PdfReader(BytesIO(content))
        if reader.is_encrypted:
            reader.decrypt("")
        page_texts: list[str] = []
        for page in reader.pages:
            page_texts.append(FRAGMENT_SEPARATOR.join(_page_fragments(page)))
    except Exception as exc:
        logger.warning("pdf_extraction_failed error=%s", exc)
        raise ExtractionError.pdf_unreadable() from exc

    text = PAGE_SEPARATOR.join(page_texts).strip()
    if not text:
        logger.warning("pdf_extraction_failed error=no_text_layer pages=%s", len(page_texts))
        raise ExtractionError.pdf_unreadable()
    return text


def _docx_blocks(document) -> list[str]:
    blocks: list[str] = []
    for item in document.iter_inner_content():
        if isinstance(item, Table):
            for row in item.rows:
                for cell in row.cells:
                    blocks.extend(paragraph.text for paragraph in cell.paragraphs)
            continue
        blocks.append(item.text)
    return blocks


def _extract_docx_text_fallback(content: bytes) -> str:
    with ZipFile(BytesIO(content)) as archive:
        raw = archive.read("word/document.xml")
    root = ET.fromstring(raw)
    paragraphs: list[str] = []
    for paragraph in root.iter():
        if not paragraph.tag.endswith("}p"):
            continue
        texts = [node.text for node in paragraph.iter() if node.tag.endswith("}t") and node.text]
        paragraphs.append("".join(texts))
    return PARAGRAPH_SEPARATOR.join(paragraphs)


def _extract_docx(content: bytes) -> str:
    if not looks_like_docx(content):
        raise ExtractionError.docx_unreadable()

    try:
        try:
            document = Document(BytesIO(content))
            text = PARAGRAPH_SEPARATOR.join(_docx_blocks(document))
        except Exception as exc:
            logger.info("docx_parser_fallback error=%s", exc)
            text = _extract_docx_text_fallback(content)
    except Exception as exc:
        logger.warning("docx_extraction_failed error=%s", exc)
        raise ExtractionError.docx_unreadable() from exc
    return text.strip()


def is_supported(declared_type: str | None, file_name: str | None = None) -> bool:
    return source_type_for(declared_type, file_name) is not None


def extract_text(content: bytes, declared_type: str | None, file_name: str | None = None) -> str:
    """Turn an uploaded document into plain text.

    Dispatches on the declared MIME type; a ``.docx`` file name is accepted
    as a Word document even when the declared type is generic.

    Raises ExtractionError with kind ``unsupported_type``, ``pdf_unreadable``
    or ``docx_unreadable``.
    """
    source_type = source_type_for(declared_type, file_name)
    if source_type == "txt":
        return _decode_text(content)
    if source_type == "pdf":
        return _extract_pdf(content)
    if source_type == "docx":
        return _extract_docx(content)
    raise ExtractionError.unsupported_type(normalize_content_type(declared_type))
