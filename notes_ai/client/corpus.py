"""Notes corpus aggregation.

Loads the notes manifest, downloads every available note concurrently,
extracts plain text and concatenates it into a single delimited corpus.

The corpus is loaded once per process through ``CorpusCache`` and then
passed explicitly to every chat controller; it is never re-fetched.
"""

import asyncio
import logging

import httpx
from pydantic import TypeAdapter, ValidationError

from notes_ai.models.schemas import Corpus, CorpusSection, ManifestEntry
from notes_ai.parsing.html_text import extract_note

logger = logging.getLogger(__name__)

_MANIFEST_ADAPTER = TypeAdapter(list[ManifestEntry])


class ManifestUnavailable(Exception):
    """Raised when the notes manifest cannot be fetched or parsed."""

    pass


async def load_manifest(
    manifest_url: str, client: httpx.AsyncClient
) -> list[ManifestEntry]:
    """Fetch and validate the notes manifest.

    Args:
        manifest_url: URL of notes-manifest.json.
        client: HTTP client to use.

    Returns:
        Manifest entries in file order.

    Raises:
        ManifestUnavailable: On transport errors, non-2xx status or bad content.
    """
    try:
        response = await client.get(manifest_url)
        response.raise_for_status()
    except httpx.HTTPError as e:
        raise ManifestUnavailable(f"Could not load {manifest_url}: {e}") from e

    try:
        return _MANIFEST_ADAPTER.validate_json(response.content)
    except ValidationError as e:
        raise ManifestUnavailable(f"Invalid manifest at {manifest_url}: {e}") from e


async def _fetch_note(client: httpx.AsyncClient, url: httpx.URL) -> str | None:
    """Download one note page, or None when it is unavailable."""
    try:
        response = await client.get(url)
        response.raise_for_status()
    except httpx.HTTPError as e:
        logger.warning(f"Skipping note {url}: {e}")
        return None
    return response.text


async def build_corpus(
    manifest: list[ManifestEntry],
    manifest_url: str,
    client: httpx.AsyncClient,
) -> Corpus:
    """Download and extract every available note of a manifest.

    Failed downloads are left out with a warning; the rest of the corpus is kept.

    Args:
        manifest: Entries to aggregate.
        manifest_url: Base for resolving relative note locators.
        client: HTTP client to use.

    Returns:
        Corpus with one section per downloaded note, in manifest order.
    """
    base = httpx.URL(manifest_url)
    entries = [entry for entry in manifest if entry.is_fetchable]
    pages = await asyncio.gather(
        *(_fetch_note(client, base.join(entry.file)) for entry in entries)
    )

    sections: list[CorpusSection] = []
    for ordinal, html in enumerate(pages, start=1):
        if html is None:
            continue
        note = extract_note(html, ordinal=ordinal)
        sections.append(CorpusSection(title=note.title, text=note.text))

    logger.info(f"Loaded {len(sections)} of {len(entries)} available notes into the corpus")
    return Corpus(sections=tuple(sections))


async def load_corpus(
    manifest_url: str, *, client: httpx.AsyncClient | None = None
) -> Corpus:
    """Load the manifest and aggregate all available notes.

    Args:
        manifest_url: URL of notes-manifest.json.
        client: Optional HTTP client; a short-lived one is created otherwise.

    Returns:
        The aggregated corpus.

    Raises:
        ManifestUnavailable: If the manifest cannot be fetched or parsed.
    """
    if client is not None:
        manifest = await load_manifest(manifest_url, client)
        return await build_corpus(manifest, manifest_url, client)

    async with httpx.AsyncClient(follow_redirects=True) as own_client:
        manifest = await load_manifest(manifest_url, own_client)
        return await build_corpus(manifest, manifest_url, own_client)


async def load_corpus_or_placeholder(
    manifest_url: str, *, client: httpx.AsyncClient | None = None
) -> Corpus:
    """Like ``load_corpus`` but degrades to the error placeholder corpus."""
    try:
        return await load_corpus(manifest_url, client=client)
    except ManifestUnavailable as e:
        logger.error(f"Failed to load notes context: {e}")
        return Corpus.unavailable()


class CorpusCache:
    """Load-once holder for the session corpus.

    The first ``get()`` starts the load; concurrent callers await the same
    task. Once resolved, the corpus never changes.
    """

    def __init__(self, manifest_url: str, client: httpx.AsyncClient | None = None) -> None:
        self._manifest_url = manifest_url
        self._client = client
        self._task: asyncio.Task[Corpus] | None = None

    @property
    def manifest_url(self) -> str:
        return self._manifest_url

    @property
    def loaded(self) -> bool:
        return self._task is not None and self._task.done()

    async def get(self) -> Corpus:
        if self._task is None:
            self._task = asyncio.ensure_future(
                load_corpus_or_placeholder(self._manifest_url, client=self._client)
            )
        return await asyncio.shield(self._task)
