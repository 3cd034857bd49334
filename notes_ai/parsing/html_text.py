"""Plain-text projection of HTML note pages using BeautifulSoup.

Strips markup and non-content elements, keeping only human-readable text.
"""

import logging
import re

from bs4 import BeautifulSoup
from pydantic import BaseModel

logger = logging.getLogger(__name__)

NON_CONTENT_TAGS = ["head", "script", "style", "noscript", "template"]
_BLANK_RUNS = re.compile(r"\n\s*\n+")


class NoteText(BaseModel):
    """Extracted content of one note page.

    Attributes:
        title: Text of the first h1, or "Note N" when there is none.
        text: Readable text of the whole page.
    """

    title: str
    text: str


def _clean(text: str) -> str:
    lines = (line.strip() for line in text.splitlines())
    return _BLANK_RUNS.sub("\n\n", "\n".join(lines)).strip()


def extract_note(html: str, ordinal: int) -> NoteText:
    """Extract the title and readable text of a note page.

    Args:
        html: Raw HTML of the page (full document or fragment).
        ordinal: 1-based position of the page, used for the fallback title.

    Returns:
        NoteText with the section title and plain text.
    """
    soup = BeautifulSoup(html, "html.parser")

    for tag in soup(NON_CONTENT_TAGS):
        tag.decompose()

    heading = soup.find("h1")
    title = heading.get_text(" ", strip=True) if heading else ""
    if not title:
        logger.debug(f"No h1 in note {ordinal}, using ordinal title")
        title = f"Note {ordinal}"

    text = _clean(soup.get_text("\n"))
    return NoteText(title=title, text=text)
