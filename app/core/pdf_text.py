"""Plain-text extraction from uploaded PDF documents.

Uses PyMuPDF (fitz) for native text extraction. Scanned pages yield no text;
there is no OCR fallback.
"""

from dataclasses import dataclass

import fitz

from app.core.errors import ExtractionError, FormatError, SizeLimitError
from app.core.logging import get_logger

logger = get_logger(__name__)

PDF_SIGNATURE = b"%PDF"

DEFAULT_MAX_BYTES = 10 * 1024 * 1024  # 10 MB


@dataclass
class PdfText:
    """Result of text extraction from a PDF."""

    text: str
    page_count: int


def has_pdf_signature(data: bytes) -> bool:
    """Check the 4-byte magic signature at the start of the buffer."""
    return data[: len(PDF_SIGNATURE)] == PDF_SIGNATURE


def validate_upload_size(data: bytes, max_bytes: int = DEFAULT_MAX_BYTES) -> None:
    """
    Reject buffers larger than ``max_bytes``.

    Raises:
        SizeLimitError: If the buffer is too large
    """
    size = len(data)
    if size > max_bytes:
        limit_mb = max_bytes / (1024 * 1024)
        raise SizeLimitError(
            f"File size exceeds {limit_mb:g}MB limit", size=size, limit=max_bytes
        )


def _page_text(page) -> str:
    # Collapse layout whitespace so each page becomes one line of prose
    return " ".join(page.get_text("text").split())


def extract_pdf_text(data: bytes, *, max_bytes: int = DEFAULT_MAX_BYTES) -> PdfText:
    """
    Extract plain text from a PDF buffer.

    Pages are concatenated in order, separated by newlines.

    Args:
        data: Raw PDF bytes
        max_bytes: Size limit checked before parsing

    Returns:
        PdfText with the extracted text and the page count

    Raises:
        FormatError: If the buffer does not start with ``%PDF``
        SizeLimitError: If the buffer exceeds ``max_bytes``
        ExtractionError: If PyMuPDF fails while reading the document
    """
    if not has_pdf_signature(data):
        raise FormatError("Invalid PDF file")
    validate_upload_size(data, max_bytes)

    try:
        with fitz.open(stream=data, filetype="pdf") as doc:
            page_count = doc.page_count
            if page_count == 0:
                # MuPDF repairs some broken files into an empty document
                raise ValueError("document has no pages")
            pages = [_page_text(page) for page in doc]
    except Exception as e:
        logger.error(f"PDF extraction failed: {e}")
        raise ExtractionError(f"PDF processing failed: {e}") from e

    text = "\n".join(pages).strip()
    logger.info(
        f"Extracted PDF: {page_count} pages, {len(text)} chars",
        extra={"extra_data": {"page_count": page_count}},
    )
    return PdfText(text=text, page_count=page_count)
