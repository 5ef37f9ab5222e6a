"""Pydantic schemas for the Readall API."""

from readall.schemas.chunk import ChapterDTO, ChunkDTO, ChunkRangeResponse
from readall.schemas.document import (
    DocumentCreateRequest,
    DocumentDetail,
    DocumentMeta,
    DocumentMetadataOut,
    ProgressUpdate,
    TocEntryIn,
)

__all__ = [
    # Document schemas
    "TocEntryIn",
    "DocumentCreateRequest",
    "DocumentMetadataOut",
    "DocumentMeta",
    "DocumentDetail",
    "ProgressUpdate",
    # Chunk schemas
    "ChunkDTO",
    "ChunkRangeResponse",
    "ChapterDTO",
]
