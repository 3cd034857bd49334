"""PDF text extraction for uploaded attachments, using pypdf."""

import io
import logging

from pypdf import PdfReader
from pypdf.errors import PdfReadError

logger = logging.getLogger(__name__)

PDF_MAGIC_BYTES = b"%PDF"


class PDFParseError(Exception):
    """Raised when a PDF attachment cannot be turned into text."""

    pass


def pdf_to_text(file_content: bytes) -> str:
    """Extract the text of every page of a PDF.

    Args:
        file_content: Raw bytes of the PDF file.

    Returns:
        Page texts joined by blank lines.

    Raises:
        PDFParseError: If the file is empty, not a PDF, corrupt or has no text.
    """
    if not file_content:
        raise PDFParseError("Empty file provided")

    if not file_content.lstrip()[:10].startswith(PDF_MAGIC_BYTES):
        raise PDFParseError("Invalid PDF: file does not start with PDF header")

    try:
        reader = PdfReader(io.BytesIO(file_content))
        pages = list(reader.pages)
    except PdfReadError as e:
        raise PDFParseError(f"Corrupt or invalid PDF: {e}") from e
    except Exception as e:
        raise PDFParseError(f"Failed to read PDF: {e}") from e

    text_parts: list[str] = []
    for i, page in enumerate(pages):
        try:
            page_text = page.extract_text()
        except Exception as e:
            logger.warning(f"Failed to extract text from page {i + 1}: {e}")
            continue
        if page_text:
            text_parts.append(page_text)

    text = "\n\n".join(text_parts)
    if not text.strip():
        raise PDFParseError("PDF contains no extractable text (may be scanned/image-based)")
    return text
