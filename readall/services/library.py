"""
Document ingestion and library management.

Turns extracted plain text into a Document (chunks, chapters, start
position) and keeps the document store in sync. Binary formats are
extracted elsewhere; this module receives text plus optional metadata.
"""

import logging
from pathlib import PurePath
from typing import List, Optional, Sequence

from readall.config import Settings, get_settings
from readall.logging_config import log_performance
from readall.models.chunk import TocEntry
from readall.models.document import Document, DocumentMetadata
from readall.services.chapters import build_chapters, detect_start_index
from readall.services.enrichment import EnrichmentClient
from readall.services.storage import DocumentStorage
from readall.services.tokenizer import tokenize

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled"


def resolve_title(
    metadata_title: Optional[str] = None,
    filename: Optional[str] = None,
) -> str:
    """Pick a document title: metadata title, then filename stem, then a default."""
    if metadata_title and metadata_title.strip():
        return metadata_title.strip()
    if filename:
        stem = PurePath(filename).stem
        if stem:
            return stem
    return DEFAULT_TITLE


@log_performance("build_document")
def build_document(
    text: str,
    *,
    title: Optional[str] = None,
    filename: Optional[str] = None,
    toc: Optional[Sequence[TocEntry]] = None,
    metadata: Optional[DocumentMetadata] = None,
) -> Document:
    """
    Build a Document from extracted text.

    Args:
        text: Full document text; chunk offsets refer to this string.
        title: Title from document metadata, if any.
        filename: Original file name, used when there is no title.
        toc: Table of contents from document metadata (character offsets).
        metadata: Bibliographic metadata.

    Returns:
        A new Document positioned at the detected start chapter.

    Raises:
        ValueError: If the text is empty or whitespace only.
    """
    if not text or not text.strip():
        raise ValueError(
            "No text content extracted. The file might be empty, password protected, "
            "or contain only images."
        )

    chunks = tokenize(text)
    chapters = build_chapters(text, chunks, toc)
    start_index = detect_start_index(text, chunks)

    return Document(
        title=resolve_title(title, filename),
        content=text,
        chunks=chunks,
        chapters=chapters,
        progress_index=start_index,
        metadata=metadata or DocumentMetadata(),
    )


def priming_text(document: Document, word_limit: int) -> str:
    """Return the first ``word_limit`` words from the document's start position."""
    start_char = 0
    if document.chunks and 0 <= document.progress_index < len(document.chunks):
        start_char = document.chunks[document.progress_index].start
    words = document.content[start_char:].split()
    return " ".join(words[:word_limit])


class Library:
    """Library-level operations on top of DocumentStorage."""

    def __init__(self, storage: DocumentStorage, settings: Optional[Settings] = None):
        self.storage = storage
        self.settings = settings or get_settings()

    @log_performance("add_document")
    async def add_text(
        self,
        text: str,
        *,
        title: Optional[str] = None,
        filename: Optional[str] = None,
        toc: Optional[Sequence[TocEntry]] = None,
        metadata: Optional[DocumentMetadata] = None,
    ) -> Document:
        """Ingest text and persist the new document."""
        document = build_document(text, title=title, filename=filename, toc=toc, metadata=metadata)
        await self.storage.put(document)
        logger.info(
            "Added document %s (%d chunks, %d chapters)",
            document.id,
            document.total_chunks,
            len(document.chapters),
        )
        return document

    async def list_documents(self) -> List[Document]:
        return await self.storage.get_all()

    async def get(self, document_id: str) -> Optional[Document]:
        return await self.storage.get(document_id)

    async def delete(self, document_id: str) -> bool:
        deleted = await self.storage.delete(document_id)
        if deleted:
            logger.info("Deleted document %s", document_id)
        return deleted

    async def update_progress(self, document_id: str, index: int) -> Optional[Document]:
        """Persist a new reading position, clamped to the chunk range."""
        document = await self.storage.get(document_id)
        if document is None:
            return None

        document.progress_index = max(0, min(index, document.total_chunks - 1))
        await self.storage.put(document)
        return document

    async def prime(self, document: Document, client: EnrichmentClient) -> Optional[List[str]]:
        """
        Generate and persist a priming summary for a long enough document.

        Returns:
            The summary, or None when skipped or unavailable.
        """
        if not client.available or len(document.content) <= self.settings.priming_min_chars:
            return None

        logger.info("Generating priming summary for %s", document.title)
        summary = await client.priming_summary(
            priming_text(document, self.settings.priming_word_limit)
        )
        if not summary:
            return None

        document.priming_summary = summary
        await self.storage.put(document)
        return summary
