"""Pydantic schemas for document-related API endpoints."""

from pydantic import BaseModel, ConfigDict, Field

from readall.models.enums import FileType


class SchemaBase(BaseModel):
    """Base schema with attribute support."""

    model_config = ConfigDict(from_attributes=True)


class TocEntryIn(BaseModel):
    title: str = Field(..., max_length=500)
    offset: int = Field(..., ge=0)


class DocumentCreateRequest(BaseModel):
    text: str = Field(..., min_length=1)
    title: str | None = Field(None, max_length=500)
    filename: str | None = Field(None, max_length=255)
    toc: list[TocEntryIn] | None = None
    author: str | None = None
    publisher: str | None = None
    published_date: str | None = None
    file_type: FileType = FileType.TEXT
    # Enables the priming summary for long texts
    api_key: str | None = None


class DocumentMetadataOut(SchemaBase):
    author: str | None
    publisher: str | None
    published_date: str | None
    file_type: FileType


class DocumentMeta(SchemaBase):
    id: str
    title: str
    total_chunks: int
    progress_index: int
    created_at: int
    has_enriched_chunks: bool
    metadata: DocumentMetadataOut
    priming_summary: list[str] | None = None


class DocumentDetail(DocumentMeta):
    content: str


class ProgressUpdate(BaseModel):
    progress_index: int = Field(..., ge=0)
