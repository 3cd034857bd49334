"""Unit tests for notes corpus aggregation.

The notes site is served from memory through httpx.MockTransport.
"""

import asyncio
from collections.abc import Callable

import httpx
import pytest
import pytest_check as check

from notes_ai.client.corpus import (
    CorpusCache,
    ManifestUnavailable,
    load_corpus,
    load_corpus_or_placeholder,
    load_manifest,
)
from notes_ai.models.schemas import CORPUS_UNAVAILABLE
from tests.conftest import MANIFEST_URL, note_page

SiteFactory = Callable[..., httpx.AsyncClient]

MANIFEST = [
    {"title": "A", "description": "first", "file": "notes/a.html", "available": True},
    {"title": "B", "description": "locked", "file": "notes/b.html", "available": False},
    {"title": "C", "description": "third", "file": "notes/c.html", "available": True},
]
PAGES: dict[str, str | int] = {
    "/notes/a.html": note_page("Alpha", "alpha body"),
    "/notes/b.html": note_page("Beta", "beta body"),
    "/notes/c.html": note_page("Gamma", "gamma body"),
}


class TestLoadCorpus:
    """Tests for manifest-driven aggregation."""

    async def test_only_available_entries_in_manifest_order(
        self, notes_site: SiteFactory
    ) -> None:
        """[A(available), B(unavailable), C(available)] yields A then C."""
        requested: list[str] = []
        async with notes_site(MANIFEST, PAGES, requested) as client:
            corpus = await load_corpus(MANIFEST_URL, client=client)

        check.equal(corpus.titles, ["Alpha", "Gamma"])
        text = corpus.text
        check.less(text.index("START OF NOTE: Alpha"), text.index("START OF NOTE: Gamma"))
        check.is_not_in("Beta", text)
        check.is_not_in("/notes/b.html", requested)

    async def test_sections_are_delimited(self, notes_site: SiteFactory) -> None:
        """Each note is wrapped in begin/end markers carrying its title."""
        async with notes_site(MANIFEST[:1], PAGES) as client:
            corpus = await load_corpus(MANIFEST_URL, client=client)

        check.equal(
            corpus.text,
            "\n\n--- START OF NOTE: Alpha ---\n\nAlpha\nalpha body\n\n"
            "--- END OF NOTE: Alpha ---\n\n",
        )

    async def test_failed_note_is_omitted(self, notes_site: SiteFactory) -> None:
        """A note that fails to download is skipped, the rest is kept."""
        pages = {**PAGES, "/notes/a.html": 500}
        async with notes_site(MANIFEST, pages) as client:
            corpus = await load_corpus(MANIFEST_URL, client=client)

        check.equal(corpus.titles, ["Gamma"])
        check.is_none(corpus.error)

    async def test_entries_without_file_are_skipped(self, notes_site: SiteFactory) -> None:
        manifest = [{"title": "Soon", "description": "", "available": True}]
        async with notes_site(manifest, PAGES) as client:
            corpus = await load_corpus(MANIFEST_URL, client=client)

        check.equal(corpus.sections, ())

    async def test_fallback_title_by_position(self, notes_site: SiteFactory) -> None:
        """Pages without an h1 are titled "Note N"."""
        pages = {**PAGES, "/notes/c.html": note_page(None, "untitled body")}
        async with notes_site(MANIFEST, pages) as client:
            corpus = await load_corpus(MANIFEST_URL, client=client)

        check.equal(corpus.titles, ["Alpha", "Note 2"])


class TestManifestFailures:
    """Tests for manifest-level failures."""

    @pytest.mark.parametrize("manifest", [404, b"not json", {"title": "x"}, [{"file": "x"}]])
    async def test_bad_manifest_raises(self, notes_site: SiteFactory, manifest: object) -> None:
        async with notes_site(manifest) as client:
            with pytest.raises(ManifestUnavailable):
                await load_manifest(MANIFEST_URL, client)

    async def test_placeholder_on_manifest_failure(self, notes_site: SiteFactory) -> None:
        """The session keeps going with an explicit error corpus."""
        async with notes_site(404) as client:
            corpus = await load_corpus_or_placeholder(MANIFEST_URL, client=client)

        check.equal(corpus.text, CORPUS_UNAVAILABLE)
        check.equal(corpus.sections, ())


class TestCorpusCache:
    """Tests for the load-once lifecycle."""

    async def test_loads_once(self, notes_site: SiteFactory) -> None:
        """Concurrent and later callers share a single load."""
        requested: list[str] = []
        async with notes_site(MANIFEST, PAGES, requested) as client:
            cache = CorpusCache(MANIFEST_URL, client=client)
            first, second = await asyncio.gather(cache.get(), cache.get())
            third = await cache.get()

        check.is_true(cache.loaded)
        check.is_true(first is second is third)
        check.equal(requested.count("/notes-manifest.json"), 1)
