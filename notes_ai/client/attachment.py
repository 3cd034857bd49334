"""Holder for the single file attached to the next chat turn."""

import codecs
import logging

from notes_ai.models.schemas import Attachment
from notes_ai.parsing.pdf_text import PDFParseError, pdf_to_text

logger = logging.getLogger(__name__)

MAX_ATTACHMENT_SIZE = 1024 * 1024  # 1MB


class FileReadError(Exception):
    """Raised when an uploaded file cannot be read as text."""

    pass


class AttachmentHolder:
    """Holds at most one attachment; attaching replaces the previous one."""

    def __init__(self) -> None:
        self._attachment = Attachment()

    def attach(self, name: str | None, content: str | None) -> None:
        self._attachment = Attachment(name=name, content=content)

    def clear(self) -> None:
        self._attachment = Attachment()

    def current(self) -> Attachment:
        return self._attachment

    def read_file(self, name: str, data: bytes) -> Attachment:
        """Decode an uploaded file and attach it.

        Text files must be UTF-8 (a BOM is accepted); PDFs are converted to
        text with pypdf.

        Args:
            name: Original file name.
            data: Raw file bytes.

        Returns:
            The new attachment.

        Raises:
            FileReadError: If the file is too large or not readable as text.
                The holder is left empty.
        """
        try:
            content = self._decode(name, data)
        except FileReadError:
            self.clear()
            raise

        self.attach(name, content)
        logger.info(f"Attached {name} ({len(content)} chars)")
        return self._attachment

    @staticmethod
    def _decode(name: str, data: bytes) -> str:
        if len(data) > MAX_ATTACHMENT_SIZE:
            size_mb = len(data) / (1024 * 1024)
            raise FileReadError(
                f"Error reading file: {name} ({size_mb:.1f}MB exceeds the 1MB limit)"
            )

        if name.lower().endswith(".pdf"):
            try:
                return pdf_to_text(data)
            except PDFParseError as e:
                raise FileReadError(f"Error reading file: {name} ({e})") from e

        if data.startswith(codecs.BOM_UTF8):
            data = data[len(codecs.BOM_UTF8):]
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise FileReadError(f"Error reading file: {name}") from e
