"""
Reader session controller.

Owns the shared ReaderState and wires the scheduler, gesture controller,
persistence and enrichment together. Playback and input handling are
synchronous and never wait on I/O; persistence writes and enrichment
fetches run as background tasks in the session's anyio task group.

Usage:
    async with ReaderSession(storage) as session:
        session.open(document)
        session.handle_key("Space", now=0.0)
        ...
        session.scheduler.tick(frame_time_ms)
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Set

import anyio
from anyio.abc import TaskGroup

from readall.config import Settings, get_settings
from readall.models.chunk import Chapter, Chunk
from readall.models.document import Document
from readall.models.enums import ChunkingMode
from readall.models.settings import ReaderSettings
from readall.models.state import ReaderState
from readall.services.chapters import find_active_chapter, remap_chapters
from readall.services.enrichment import EnrichmentClient
from readall.services.gestures import SEEK_STEP, GestureController
from readall.services.reconciler import EnrichedItem, reconcile, resolve_enriched
from readall.services.scheduler import PlaybackScheduler
from readall.services.storage import DocumentStorage
from readall.services.tokenizer import validate_chunks

logger = logging.getLogger(__name__)

DEFAULT_VIEWPORT_WIDTH = 1080


class ReaderSession:
    """Single-document reading session with background persistence."""

    def __init__(
        self,
        storage: DocumentStorage,
        *,
        reader_settings: Optional[ReaderSettings] = None,
        client: Optional[EnrichmentClient] = None,
        config: Optional[Settings] = None,
        viewport_width: float = DEFAULT_VIEWPORT_WIDTH,
    ) -> None:
        self.config = config or get_settings()
        self.storage = storage
        self.state = ReaderState(
            settings=reader_settings or ReaderSettings(wpm=self.config.default_wpm)
        )
        self.scheduler = PlaybackScheduler(
            self.state,
            window=self.config.lookahead_window,
            on_pause=self._on_pause,
        )
        self.gestures = GestureController(self.state, self.scheduler, viewport_width)
        self._client = client
        self._task_group: Optional[TaskGroup] = None
        self._enrichment_scope: Optional[anyio.CancelScope] = None
        # Latest unsaved snapshot per document id; one writer drains each id
        self._pending: Dict[str, Document] = {}
        self._writers: Set[str] = set()
        # Progress index last handed to storage, None after a failed write
        self._saved_index: Optional[int] = None

    async def __aenter__(self) -> "ReaderSession":
        self._task_group = anyio.create_task_group()
        await self._task_group.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> Optional[bool]:
        try:
            self.close()
            self._cancel_enrichment()
        finally:
            task_group, self._task_group = self._task_group, None
            # Pending persistence writes finish before the group exits
            result = await task_group.__aexit__(exc_type, exc, tb)
        return result

    @property
    def document(self) -> Optional[Document]:
        return self.state.document

    def _require_task_group(self) -> TaskGroup:
        if self._task_group is None:
            raise RuntimeError("ReaderSession must be used with 'async with'")
        return self._task_group

    # ------------------------------------------------------------------
    # Document lifecycle
    # ------------------------------------------------------------------

    def open(self, document: Document) -> None:
        """Make ``document`` active, paused at its saved progress."""
        if self.state.document is not None:
            self.close()

        self.state.document = document
        self._saved_index = document.progress_index
        self.scheduler.load(document.progress_index)
        logger.info(
            "Opened document %s at chunk %d/%d",
            document.id,
            self.scheduler.current_index,
            document.total_chunks,
        )
        self.request_enrichment()

    def close(self) -> None:
        """Checkpoint and release the active document."""
        if self.state.document is None:
            return

        if self.scheduler.is_playing:
            self.scheduler.pause()  # checkpoints via the pause hook
        else:
            self.checkpoint()

        self._cancel_enrichment()
        self.state.document = None
        self.scheduler.load(0)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _on_pause(self, index: int) -> None:
        self.checkpoint()

    def checkpoint(self) -> bool:
        """
        Save the current position if it changed since the last save.

        Returns:
            True if a write was scheduled.
        """
        document = self.state.document
        if document is None:
            return False

        index = self.scheduler.current_index
        if index == self._saved_index:
            return False

        document.progress_index = index
        self._saved_index = index
        self._persist(document)
        return True

    def _persist(self, document: Document) -> None:
        """
        Queue a snapshot of ``document`` for writing.

        Writes for one document run one at a time. Snapshots queued while a
        write is in flight replace each other, so only the newest is written
        next.
        """
        task_group = self._require_task_group()
        self._pending[document.id] = document.model_copy()
        if document.id not in self._writers:
            self._writers.add(document.id)
            task_group.start_soon(self._drain, document.id)

    async def _drain(self, document_id: str) -> None:
        try:
            while document_id in self._pending:
                await self._write(self._pending.pop(document_id))
        finally:
            self._writers.discard(document_id)

    async def _write(self, document: Document) -> None:
        try:
            await self.storage.put(document)
        except (OSError, ValueError):
            logger.exception("Failed to save document %s", document.id)
            active = self.state.document
            if active is not None and active.id == document.id:
                # Forces the next checkpoint to write even at the same index
                self._saved_index = None
        else:
            logger.debug("Saved document %s at chunk %d", document.id, document.progress_index)

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def handle_key(self, key: str, now: Optional[float] = None) -> bool:
        """
        Handle a keyboard event code.

        Space toggles playback, ArrowLeft/ArrowRight seek by ten chunks,
        Escape checkpoints and closes the document.

        Returns:
            True if the key was handled.
        """
        if key == "Space":
            self.scheduler.toggle(now)
        elif key == "ArrowLeft":
            self.scheduler.seek_relative(-SEEK_STEP)
        elif key == "ArrowRight":
            self.scheduler.seek_relative(SEEK_STEP)
        elif key == "Escape":
            self.close()
        else:
            return False
        return True

    def update_settings(self, **changes: Any) -> ReaderSettings:
        """
        Validate and apply settings changes.

        Raises:
            pydantic.ValidationError: If a value is invalid.
        """
        merged = {**self.state.settings.model_dump(), **changes}
        self.state.settings = ReaderSettings.model_validate(merged)

        if {"chunking_mode", "api_key"} & changes.keys():
            self.request_enrichment()
        return self.state.settings

    # ------------------------------------------------------------------
    # Navigation helpers
    # ------------------------------------------------------------------

    def active_chapter(self) -> Optional[Chapter]:
        document = self.state.document
        if document is None:
            return None
        position = find_active_chapter(document.chapters, self.scheduler.current_index)
        return None if position is None else document.chapters[position]

    def jump_to_chapter(self, position: int) -> int:
        """Pause and seek to the start of chapter ``position``."""
        document = self.state.document
        if document is None or not (0 <= position < len(document.chapters)):
            return self.scheduler.current_index

        self.scheduler.pause()
        return self.scheduler.seek(document.chapters[position].chunk_index)

    def remaining_minutes(self) -> int:
        return self.scheduler.remaining_minutes()

    # ------------------------------------------------------------------
    # Enrichment
    # ------------------------------------------------------------------

    def _enrichment_client(self) -> EnrichmentClient:
        if self._client is not None:
            return self._client
        return EnrichmentClient(self.state.settings.api_key, settings=self.config)

    def _cancel_enrichment(self) -> None:
        scope, self._enrichment_scope = self._enrichment_scope, None
        if scope is not None:
            scope.cancel()

    def request_enrichment(self, delay: Optional[float] = None) -> bool:
        """
        Start background enrichment of the active document if it applies.

        Enrichment runs only in enriched chunking mode, with a credential,
        and once per document (skipped if phrase chunks already exist).

        Returns:
            True if a task was started.
        """
        document = self.state.document
        settings = self.state.settings
        if document is None or self._enrichment_scope is not None:
            return False
        if settings.chunking_mode is not ChunkingMode.ENRICHED or not settings.api_key:
            return False
        if document.has_enriched_chunks:
            return False

        # Created here so that a close() before the task starts still cancels it
        scope = anyio.CancelScope()
        self._enrichment_scope = scope
        wait = self.config.enrichment_delay_seconds if delay is None else delay
        self._require_task_group().start_soon(
            self._run_enrichment, scope, document.id, document.chunks, wait
        )
        return True

    async def _run_enrichment(
        self,
        scope: anyio.CancelScope,
        document_id: str,
        chunks: List[Chunk],
        delay: float,
    ) -> None:
        try:
            with scope:
                if delay > 0:
                    await anyio.sleep(delay)
                await self.enrich(document_id, chunks)
        finally:
            if self._enrichment_scope is scope:
                self._enrichment_scope = None

    async def enrich(self, document_id: str, chunks: List[Chunk]) -> bool:
        """
        Fetch enrichment for the start of a document and apply it.

        Returns:
            True if the chunk list was replaced.
        """
        document = self.state.document
        if document is None or document.id != document_id:
            return False

        segment = document.content[: self.config.enrichment_segment_limit]
        logger.info("Starting background enrichment for %s", document_id)
        items = await self._enrichment_client().semantic_chunks(segment)
        return self.apply_enrichment(document_id, chunks, items)

    def apply_enrichment(
        self,
        document_id: str,
        expected_chunks: List[Chunk],
        items: Sequence[EnrichedItem],
    ) -> bool:
        """
        Merge enrichment results into the active document.

        The merge is applied only if the same document and the same chunk
        list (by identity) are still active; otherwise the result is stale
        and discarded.

        Returns:
            True if the chunk list was replaced.
        """
        document = self.state.document
        if document is None or document.id != document_id or document.chunks is not expected_chunks:
            logger.info("Discarding stale enrichment result for %s", document_id)
            return False

        segment = document.content[: self.config.enrichment_segment_limit]
        resolved = resolve_enriched(segment, items)
        if not resolved:
            return False

        merged = reconcile(document.chunks, resolved)
        try:
            validate_chunks(document.content, merged)
        except ValueError:
            logger.exception("Enriched chunk sequence is inconsistent, keeping algorithmic chunks")
            return False

        # Single substitution; the scheduler notices the new list by identity
        document.chapters = remap_chapters(document.chapters, document.chunks, merged)
        document.chunks = merged
        logger.info(
            "Merged %d enriched chunks into %s (%d total)",
            len(resolved),
            document_id,
            len(merged),
        )
        self._persist(document)
        return True
