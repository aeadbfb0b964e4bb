"""Plain-text extraction from uploaded résumé files (PDF, DOCX, TXT)."""

import io
import logging
import re
from pathlib import PurePath

import pdfplumber
from docx import Document

from services.errors import EmptyDocumentError, ExtractionError, UnsupportedFormatError

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".pdf", ".docx", ".txt")

_CONTROL_CHARS_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_INLINE_SPACE_RE = re.compile(r"[ \t\f\v]+")


def clean_text(text: str) -> str:
    """Normalize line endings, squeeze spaces and drop control characters.

    Newlines are kept; the keyword path and the prompts both read better
    with the document's line structure intact.
    """
    if not text:
        return ""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _CONTROL_CHARS_RE.sub(" ", text)
    text = _INLINE_SPACE_RE.sub(" ", text)
    text = "\n".join(line.strip() for line in text.split("\n"))
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def extract_text_pdf(pdf_bytes: bytes) -> str:
    """Extract all text from a PDF file."""
    with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
        pages = [page.extract_text() or "" for page in pdf.pages]
    return "\n".join(pages)


def extract_text_docx(docx_bytes: bytes) -> str:
    """Extract all text from a DOCX file."""
    doc = Document(io.BytesIO(docx_bytes))
    return "\n".join(p.text for p in doc.paragraphs)


def extract_text_txt(txt_bytes: bytes) -> str:
    try:
        return txt_bytes.decode("utf-8")
    except UnicodeDecodeError:
        return txt_bytes.decode("latin-1")


_EXTRACTORS = {
    ".pdf": extract_text_pdf,
    ".docx": extract_text_docx,
    ".txt": extract_text_txt,
}


def extension_of(filename: str) -> str:
    return PurePath(filename or "").suffix.lower()


def extract_text(data: bytes, extension: str) -> str:
    """Turn file bytes into cleaned plain text.

    ``extension`` is the declared file extension, with or without the dot.
    Raises UnsupportedFormatError, EmptyDocumentError, or ExtractionError
    when the file cannot be parsed.
    """
    ext = extension.lower() if extension.startswith(".") else f".{extension.lower()}"
    extractor = _EXTRACTORS.get(ext)
    if extractor is None:
        raise UnsupportedFormatError(
            f"Unsupported file type: {ext or '(none)'}. "
            f"Supported types: {', '.join(SUPPORTED_EXTENSIONS)}"
        )

    try:
        raw = extractor(data)
    except Exception as e:
        logger.error("Failed to extract text from %s: %s", ext, e)
        raise ExtractionError(f"Failed to extract text from {ext.lstrip('.').upper()}: {e}") from e

    text = clean_text(raw)
    if not text:
        raise EmptyDocumentError(f"No text content found in {ext.lstrip('.').upper()}")

    logger.debug("Extracted %d characters from %s", len(text), ext)
    return text
