from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

NOTE_START = "--- START OF NOTE: {title} ---"
NOTE_END = "--- END OF NOTE: {title} ---"
CORPUS_UNAVAILABLE = "Error: Could not load the notes content."


class Role(str, Enum):
    """Speaker of a chat turn."""

    USER = "user"
    ASSISTANT = "assistant"


class ManifestEntry(BaseModel):
    """One note listed in notes-manifest.json.

    Attributes:
        title: Display title of the note.
        description: Short summary shown on the notes list.
        file: Locator of the HTML document, relative to the manifest.
        available: Whether the note is published.
    """

    model_config = ConfigDict(frozen=True)

    title: str
    description: str = ""
    file: str | None = None
    available: bool = False

    @property
    def is_fetchable(self) -> bool:
        return self.available and bool(self.file)


class CorpusSection(BaseModel):
    """Plain text of a single note."""

    model_config = ConfigDict(frozen=True)

    title: str
    text: str

    def render(self) -> str:
        start = NOTE_START.format(title=self.title)
        end = NOTE_END.format(title=self.title)
        return f"\n\n{start}\n\n{self.text}\n\n{end}\n\n"


class Corpus(BaseModel):
    """Aggregated notes forwarded with every chat request.

    Built once at startup and read-only afterwards. Sections keep
    manifest order.

    Attributes:
        sections: Extracted notes in manifest order.
        error: Set when the manifest could not be loaded.
    """

    model_config = ConfigDict(frozen=True)

    sections: tuple[CorpusSection, ...] = ()
    error: str | None = None

    @classmethod
    def unavailable(cls) -> "Corpus":
        return cls(error=CORPUS_UNAVAILABLE)

    @property
    def titles(self) -> list[str]:
        return [section.title for section in self.sections]

    @property
    def text(self) -> str:
        if self.error:
            return self.error
        return "".join(section.render() for section in self.sections)


class Attachment(BaseModel):
    """The single user-supplied file held for the next turn."""

    name: str | None = None
    content: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.name is None and self.content is None


class ChatTurn(BaseModel):
    """A message in the visible transcript.

    Attributes:
        role: Who said it.
        text: Message text.
        is_error: Whether the turn reports a failure.
        time: Display timestamp.
    """

    model_config = ConfigDict(frozen=True)

    role: Role
    text: str
    is_error: bool = False
    time: str = Field(default_factory=lambda: datetime.now().strftime("%I:%M %p"))


class AskRequest(BaseModel):
    """Request payload for the gateway.

    Wire names follow the browser widget (camelCase); Python code may use
    the snake_case field names.

    Attributes:
        query: The student's question.
        notes_context: Aggregated notes corpus.
        file_context: Content of the attached file.
    """

    model_config = ConfigDict(populate_by_name=True)

    query: str = Field(..., min_length=1)
    notes_context: str | None = Field(None, alias="notesContext")
    file_context: str | None = Field(None, alias="fileContext")

    @field_validator("query", mode="before")
    @classmethod
    def strip_query(cls, v: str) -> str:
        """Strip whitespace from query before validation."""
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("notes_context", "file_context", mode="before")
    @classmethod
    def drop_non_text(cls, v: object) -> str | None:
        """Treat non-string context values as absent."""
        if isinstance(v, str):
            return v
        return None


class AskResponse(BaseModel):
    """Successful gateway response."""

    answer: str


class ErrorResponse(BaseModel):
    """Gateway error body."""

    error: str


class GenerationRequest(BaseModel):
    """Everything needed to build one prompt. Constructed fresh per call."""

    instruction_template: str
    notes_context: str | None = None
    file_context: str | None = None
    query: str


class GenerationResult(BaseModel):
    """Outcome of one gateway call as seen by the chat controller.

    Attributes:
        answer: Generated text on success.
        error: Error message on failure.
        status_code: HTTP status, None when the request never got a response.
    """

    answer: str | None = None
    error: str | None = None
    status_code: int | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.answer is not None
