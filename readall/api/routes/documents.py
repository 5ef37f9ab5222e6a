"""Document library and chunk retrieval routes."""

import logging

from fastapi import APIRouter, Query, status

from readall.api.dependencies import LibraryDep, SettingsDep
from readall.api.errors import APIError
from readall.models.chunk import TocEntry
from readall.models.document import Document, DocumentMetadata
from readall.schemas.chunk import ChapterDTO, ChunkDTO, ChunkRangeResponse
from readall.schemas.document import DocumentCreateRequest, DocumentDetail, DocumentMeta, ProgressUpdate
from readall.services.enrichment import EnrichmentClient
from readall.services.library import Library
from readall.services.scheduler import prepare_chunk
from readall.services.tokenizer import estimate_reading_time_formatted, estimate_reading_time_ms

router = APIRouter()
logger = logging.getLogger(__name__)

DEFAULT_CHUNK_LIMIT = 100
MAX_CHUNK_LIMIT = 1000


async def _load_document(library: Library, document_id: str) -> Document:
    try:
        document = await library.get(document_id)
    except ValueError:
        document = None

    if document is None:
        raise APIError.not_found("Document", document_id)
    return document


# =============================================================================
# Library
# =============================================================================


@router.post("", response_model=DocumentDetail, status_code=status.HTTP_201_CREATED)
async def create_document(
    request: DocumentCreateRequest,
    library: LibraryDep,
    settings: SettingsDep,
):
    """Ingest plain text and add it to the library."""
    toc = None
    if request.toc is not None:
        toc = [TocEntry(title=entry.title, offset=entry.offset) for entry in request.toc]

    metadata = DocumentMetadata(
        author=request.author,
        publisher=request.publisher,
        published_date=request.published_date,
        file_type=request.file_type,
    )

    try:
        document = await library.add_text(
            request.text,
            title=request.title,
            filename=request.filename,
            toc=toc,
            metadata=metadata,
        )
    except ValueError as e:
        raise APIError.bad_request(str(e))

    if request.api_key:
        await library.prime(document, EnrichmentClient(request.api_key, settings=settings))

    return DocumentDetail.model_validate(document)


@router.get("", response_model=list[DocumentMeta])
async def list_documents(library: LibraryDep):
    """List all documents, oldest first."""
    documents = await library.list_documents()
    return [DocumentMeta.model_validate(document) for document in documents]


@router.get("/{document_id}", response_model=DocumentDetail)
async def get_document(document_id: str, library: LibraryDep):
    """Get a document including its text."""
    document = await _load_document(library, document_id)
    return DocumentDetail.model_validate(document)


@router.delete("/{document_id}")
async def delete_document(document_id: str, library: LibraryDep):
    """Delete a document."""
    try:
        deleted = await library.delete(document_id)
    except ValueError:
        deleted = False

    if not deleted:
        raise APIError.not_found("Document", document_id)
    return {"success": True, "id": document_id}


# =============================================================================
# Reading
# =============================================================================


@router.get("/{document_id}/chunks", response_model=ChunkRangeResponse)
async def get_chunks(
    document_id: str,
    library: LibraryDep,
    settings: SettingsDep,
    start: int = Query(0, ge=0),
    limit: int = Query(DEFAULT_CHUNK_LIMIT, ge=1, le=MAX_CHUNK_LIMIT),
    wpm: int | None = Query(None, ge=1),
):
    """Get a range of chunks with focal index and display duration."""
    document = await _load_document(library, document_id)
    pacing = wpm or settings.default_wpm

    range_start = min(start, document.total_chunks)
    range_end = min(range_start + limit, document.total_chunks)

    chunks = []
    for index in range(range_start, range_end):
        chunk = document.chunks[index]
        prepared = prepare_chunk(chunk, pacing)
        chunks.append(
            ChunkDTO(
                index=index,
                text=chunk.text,
                start=chunk.start,
                end=chunk.end,
                kind=chunk.kind,
                focal_index=prepared.focal_index,
                delay_ms=prepared.delay_ms,
            )
        )

    remaining = document.chunks[range_start:]
    return ChunkRangeResponse(
        document_id=document.id,
        total_chunks=document.total_chunks,
        range_start=range_start,
        range_end=range_end,
        wpm=pacing,
        remaining_ms=estimate_reading_time_ms(remaining, pacing),
        remaining_time=estimate_reading_time_formatted(remaining, pacing) if remaining else "",
        chunks=chunks,
    )


@router.get("/{document_id}/chapters", response_model=list[ChapterDTO])
async def get_chapters(document_id: str, library: LibraryDep):
    """Get the chapter markers of a document."""
    document = await _load_document(library, document_id)
    return [ChapterDTO.model_validate(chapter) for chapter in document.chapters]


@router.patch("/{document_id}/progress", response_model=DocumentMeta)
async def update_progress(document_id: str, update: ProgressUpdate, library: LibraryDep):
    """Save the reading position."""
    await _load_document(library, document_id)
    document = await library.update_progress(document_id, update.progress_index)
    if document is None:
        raise APIError.not_found("Document", document_id)
    return DocumentMeta.model_validate(document)
