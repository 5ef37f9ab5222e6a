"""Document model for ingested texts and their reading progress."""

import time
import uuid
from typing import Optional

from pydantic import BaseModel, Field

from readall.models.chunk import Chapter, Chunk
from readall.models.enums import ChunkKind, FileType

ENRICHED_KINDS = frozenset({ChunkKind.PHRASE, ChunkKind.IDIOM})


class DocumentMetadata(BaseModel):
    """Bibliographic metadata carried over from ingestion."""

    author: Optional[str] = None
    publisher: Optional[str] = None
    published_date: Optional[str] = None
    file_type: FileType = FileType.TEXT


class Document(BaseModel):
    """A persisted document record.

    The chunk list is replaced as a whole (never edited in place) so that
    consumers can detect the substitution by identity.
    """

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    title: str
    content: str
    chunks: list[Chunk] = Field(default_factory=list)
    chapters: list[Chapter] = Field(default_factory=list)
    progress_index: int = 0
    created_at: int = Field(default_factory=lambda: int(time.time() * 1000))
    metadata: DocumentMetadata = Field(default_factory=DocumentMetadata)
    priming_summary: Optional[list[str]] = None

    @property
    def total_chunks(self) -> int:
        return len(self.chunks)

    @property
    def has_enriched_chunks(self) -> bool:
        """Whether the enrichment merge has already been applied."""
        return any(chunk.kind in ENRICHED_KINDS for chunk in self.chunks)
