"""Pydantic schemas for chunk and chapter API endpoints."""

from pydantic import BaseModel, ConfigDict, Field

from readall.models.enums import ChunkKind


class SchemaBase(BaseModel):
    """Base schema with attribute support."""

    model_config = ConfigDict(from_attributes=True)


class ChunkDTO(SchemaBase):
    index: int
    text: str
    start: int
    end: int
    kind: ChunkKind
    focal_index: int
    delay_ms: int


class ChunkRangeResponse(BaseModel):
    document_id: str
    total_chunks: int
    range_start: int
    range_end: int
    wpm: int
    # Estimated time to read from range_start to the end of the document
    remaining_ms: int = 0
    remaining_time: str = ""
    chunks: list[ChunkDTO] = Field(default_factory=list)


class ChapterDTO(SchemaBase):
    title: str
    chunk_index: int
