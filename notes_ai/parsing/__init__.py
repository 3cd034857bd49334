"""Text extraction for notes and attachments.

Responsibilities:
    - HTML note pages to plain text with BeautifulSoup (title + body)
    - PDF attachments to plain text with pypdf

Output is plain text ready to be placed in the tutor prompt.
"""

from notes_ai.parsing.html_text import NoteText, extract_note
from notes_ai.parsing.pdf_text import PDFParseError, pdf_to_text

__all__ = ["NoteText", "PDFParseError", "extract_note", "pdf_to_text"]
