"""Tests for document ingestion and library operations."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from readall.models.chunk import Chapter, TocEntry
from readall.models.document import DocumentMetadata
from readall.models.enums import FileType
from readall.services.library import Library, build_document, priming_text, resolve_title

NOVEL = (
    "My Novel\n"
    "Copyright 2024. All rights reserved.\n"
    "Chapter 1\n"
    "It was a bright cold day in April.\n"
    "Chapter 2\n"
    "The clocks were striking thirteen."
)


@pytest.fixture
def library(storage, test_settings):
    return Library(storage, test_settings)


def fake_client(summary=None, available=True):
    client = MagicMock()
    client.available = available
    client.priming_summary = AsyncMock(return_value=summary)
    return client


class TestResolveTitle:
    @pytest.mark.parametrize(
        "metadata_title,filename,expected",
        [
            ("Real Title", "file.epub", "Real Title"),
            ("  ", "my-book.epub", "my-book"),
            (None, "/tmp/uploads/notes.txt", "notes"),
            (None, "archive.tar.gz", "archive.tar"),
            (None, None, "Untitled"),
        ],
    )
    def test_precedence(self, metadata_title, filename, expected):
        assert resolve_title(metadata_title, filename) == expected


class TestBuildDocument:
    def test_builds_chunks_and_chapters(self):
        document = build_document(NOVEL, filename="novel.txt")

        assert document.title == "novel"
        assert document.total_chunks == len(NOVEL.split())
        assert [chapter.title for chapter in document.chapters] == ["Chapter 1", "Chapter 2"]

    def test_starts_at_first_chapter(self):
        document = build_document(NOVEL)

        assert document.progress_index == 7
        assert document.chunks[document.progress_index].text == "Chapter"

    def test_toc_overrides_headings(self):
        offset = NOVEL.index("Chapter 2")
        document = build_document(NOVEL, toc=[TocEntry("Second", offset)])
        assert document.chapters == [Chapter("Second", 17)]

    def test_metadata(self):
        metadata = DocumentMetadata(author="Orwell", file_type=FileType.EPUB)
        document = build_document(NOVEL, title="1984", metadata=metadata)

        assert document.title == "1984"
        assert document.metadata.author == "Orwell"
        assert document.metadata.file_type is FileType.EPUB

    @pytest.mark.parametrize("text", ["", "   \n\t  "])
    def test_empty_text_rejected(self, text):
        with pytest.raises(ValueError, match="No text content"):
            build_document(text)

    def test_priming_text_starts_at_progress(self):
        document = build_document(NOVEL)
        assert priming_text(document, 4) == "Chapter 1 It was"


class TestLibrary:
    @pytest.mark.asyncio
    async def test_add_and_list(self, library):
        first = await library.add_text("First document.", title="One")
        second = await library.add_text("Second document.", title="Two")

        documents = await library.list_documents()
        assert {d.id for d in documents} == {first.id, second.id}
        assert await library.get(first.id) == first

    @pytest.mark.asyncio
    async def test_delete(self, library):
        document = await library.add_text("Gone soon.")

        assert await library.delete(document.id) is True
        assert await library.get(document.id) is None
        assert await library.delete(document.id) is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize("index,expected", [(2, 2), (-4, 0), (99, 3)])
    async def test_update_progress(self, library, index, expected):
        document = await library.add_text("one two three four")

        updated = await library.update_progress(document.id, index)
        assert updated.progress_index == expected
        assert (await library.get(document.id)).progress_index == expected

    @pytest.mark.asyncio
    async def test_update_progress_missing(self, library):
        assert await library.update_progress("missing", 3) is None


class TestPriming:
    @pytest.mark.asyncio
    async def test_summary_persisted(self, library):
        document = await library.add_text("word " * 200 + "\nChapter 1\n" + "story " * 300)
        client = fake_client(["a", "b", "c", "d", "e"])

        summary = await library.prime(document, client)

        assert summary == ["a", "b", "c", "d", "e"]
        sent = client.priming_summary.call_args.args[0]
        assert sent.startswith("Chapter 1 story")
        assert (await library.get(document.id)).priming_summary == summary

    @pytest.mark.asyncio
    async def test_word_limit(self, library, test_settings):
        document = await library.add_text("word " * 3000)
        client = fake_client(["a"])

        await library.prime(document, client)

        sent = client.priming_summary.call_args.args[0]
        assert len(sent.split()) == test_settings.priming_word_limit

    @pytest.mark.asyncio
    async def test_short_text_skipped(self, library):
        document = await library.add_text("Too short to prime.")
        client = fake_client(["a"])

        assert await library.prime(document, client) is None
        client.priming_summary.assert_not_called()

    @pytest.mark.asyncio
    async def test_unavailable_client(self, library):
        document = await library.add_text("word " * 300)
        client = fake_client(["a"], available=False)

        assert await library.prime(document, client) is None
        client.priming_summary.assert_not_called()

    @pytest.mark.asyncio
    async def test_failure_leaves_summary_unset(self, library):
        document = await library.add_text("word " * 300)

        assert await library.prime(document, fake_client(None)) is None
        assert (await library.get(document.id)).priming_summary is None
