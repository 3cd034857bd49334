"""Prompt assembly for the tutor.

Merges the instruction template with the notes corpus, the uploaded file and
the student's current turn. The template is configuration data: it lives in
``templates/tutor.md`` (or a file named by ``TUTOR_TEMPLATE_PATH``) and uses
the named placeholders ``{{notes_context}}`` and ``{{file_context}}``.
Substitution is literal, so braces in code samples are left alone.
"""

import logging
from importlib import resources
from pathlib import Path

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

NOTES_PLACEHOLDER = "{{notes_context}}"
FILE_PLACEHOLDER = "{{file_context}}"

NO_NOTES = "No notes were provided."
NO_FILE = "No file was uploaded."

CONVERSATION_HEADER = "--- CURRENT CONVERSATION ---"
STUDENT_LABEL = "Student:"
ASSISTANT_CUE = "PyPro-AI:"

TRUNCATION_MARKER = "\n[... truncated to fit the context window ...]"


class PromptTemplateError(Exception):
    """Raised when the instruction template cannot be used."""

    pass


class PromptBudget(BaseModel):
    """Upper bound on the assembled prompt size.

    Attributes:
        max_chars: Maximum prompt length in characters. Zero disables it.
    """

    max_chars: int = Field(default=0, ge=0)

    @property
    def enabled(self) -> bool:
        return self.max_chars > 0


def load_template(path: str | Path | None = None) -> str:
    """Load the instruction template.

    Args:
        path: Template file. Uses the bundled tutor template when None.

    Returns:
        Template text.

    Raises:
        PromptTemplateError: If the file cannot be read or lacks a placeholder.
    """
    try:
        if path is None:
            template = (
                resources.files("notes_ai.agent")
                .joinpath("templates/tutor.md")
                .read_text(encoding="utf-8")
            )
        else:
            template = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise PromptTemplateError(f"Cannot read prompt template: {e}") from e

    missing = [p for p in (NOTES_PLACEHOLDER, FILE_PLACEHOLDER) if p not in template]
    if missing:
        raise PromptTemplateError(
            f"Prompt template is missing placeholder(s): {', '.join(missing)}"
        )
    return template


def _or_default(value: str | None, default: str) -> str:
    if value is None or not value.strip():
        return default
    return value


def _truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    if limit <= len(TRUNCATION_MARKER):
        return text[:limit]
    return text[: limit - len(TRUNCATION_MARKER)] + TRUNCATION_MARKER


def _fit_to_budget(
    fixed_size: int, notes: str, file_text: str, budget: PromptBudget
) -> tuple[str, str]:
    """Shrink the notes first, then the file, until the prompt fits.

    The template, the query and the conversation cue are never cut, so
    the result can still exceed the budget when they alone are too large.
    """
    overflow = fixed_size + len(notes) + len(file_text) - budget.max_chars
    if overflow <= 0:
        return notes, file_text

    logger.warning(
        f"Prompt exceeds budget by {overflow} chars "
        f"(notes={len(notes)}, file={len(file_text)}, max={budget.max_chars})"
    )
    room_for_notes = max(len(notes) - overflow, 0)
    notes = _truncate(notes, room_for_notes)

    overflow = fixed_size + len(notes) + len(file_text) - budget.max_chars
    if overflow > 0:
        file_text = _truncate(file_text, max(len(file_text) - overflow, 0))
    return notes, file_text


def assemble(
    template: str,
    notes_context: str | None,
    file_context: str | None,
    query: str,
    *,
    budget: PromptBudget | None = None,
) -> str:
    """Build the final prompt for one chat turn.

    Args:
        template: Instruction template with both named placeholders.
        notes_context: Aggregated notes; a default sentence when empty.
        file_context: Uploaded file content; a default sentence when empty.
        query: The student's current turn, included verbatim.
        budget: Optional size budget applied to the notes and the file.

    Returns:
        Prompt text ending with the assistant cue.
    """
    notes = _or_default(notes_context, NO_NOTES)
    file_text = _or_default(file_context, NO_FILE)
    conversation = (
        f"\n\n{CONVERSATION_HEADER}\n\n{STUDENT_LABEL} {query}\n\n{ASSISTANT_CUE}"
    )

    if budget is not None and budget.enabled:
        fixed_size = (
            len(template)
            - len(NOTES_PLACEHOLDER) * template.count(NOTES_PLACEHOLDER)
            - len(FILE_PLACEHOLDER) * template.count(FILE_PLACEHOLDER)
            + len(conversation)
        )
        notes, file_text = _fit_to_budget(fixed_size, notes, file_text, budget)

    # Inserted context is never rescanned for placeholders.
    parts = template.split(NOTES_PLACEHOLDER)
    body = notes.join(part.replace(FILE_PLACEHOLDER, file_text) for part in parts)
    return body + conversation
