"""
Frame-paced playback scheduler for RSVP reading.

The scheduler owns the playback position and advances it from a frame
clock: the host calls ``tick(now)`` once per rendered frame with a
millisecond timestamp. At most one chunk is advanced per tick, so a long
frame stall never skips visible content.

Upcoming chunk timings are kept in a lookahead cache. The cache is derived
data only; it is cleared as a whole whenever the pacing rate or the chunk
list (by identity) changes, and every read falls back to direct computation.
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

from readall.models.chunk import Chunk
from readall.models.enums import PlaybackStatus
from readall.models.state import ReaderState
from readall.services.tokenizer import calculate_chunk_delay, calculate_focal_index, split_for_display

logger = logging.getLogger(__name__)

LOOKAHEAD_WINDOW = 50


@dataclass(frozen=True)
class PreparedChunk:
    """Precomputed display data for one chunk."""

    focal_index: int
    delay_ms: int


@dataclass(frozen=True)
class DisplayFrame:
    """What the renderer needs to draw the current chunk."""

    index: int
    chunk: Chunk
    before: str
    focal: str
    after: str
    delay_ms: int


def prepare_chunk(chunk: Chunk, wpm: int) -> PreparedChunk:
    """Compute focal index and display duration for a chunk."""
    focal_index = chunk.focal_index
    if not (0 <= focal_index < max(1, len(chunk.text))):
        focal_index = calculate_focal_index(chunk.text)
    return PreparedChunk(focal_index=focal_index, delay_ms=calculate_chunk_delay(chunk, wpm))


class LookaheadCache:
    """Prepared timings for a window of upcoming indices.

    Bound to one chunk list (by identity) and one pacing rate; ``sync``
    drops everything when either changes.
    """

    def __init__(self, window: int = LOOKAHEAD_WINDOW):
        self.window = window
        self._entries: Dict[int, PreparedChunk] = {}
        self._chunks: Optional[Sequence[Chunk]] = None
        self._wpm: Optional[int] = None

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, index: int) -> bool:
        return index in self._entries

    def get(self, index: int) -> Optional[PreparedChunk]:
        return self._entries.get(index)

    def clear(self) -> None:
        self._entries.clear()

    def sync(self, chunks: Sequence[Chunk], wpm: int) -> bool:
        """
        Rebind the cache to ``chunks`` and ``wpm``.

        Returns:
            True if the cache was invalidated.
        """
        if chunks is self._chunks and wpm == self._wpm:
            return False

        self._entries.clear()
        self._chunks = chunks
        self._wpm = wpm
        return True

    def fill(self, start: int) -> None:
        """Prepare indices ``[start, start + window)`` and drop entries behind ``start``."""
        if self._chunks is None or self._wpm is None:
            return

        for index in [i for i in self._entries if i < start]:
            del self._entries[index]

        stop = min(start + self.window, len(self._chunks))
        for index in range(start, stop):
            if index not in self._entries:
                self._entries[index] = prepare_chunk(self._chunks[index], self._wpm)


class PlaybackScheduler:
    """
    Owns the playback position and the paused/playing state.

    Example usage:
        >>> scheduler = PlaybackScheduler(state)
        >>> scheduler.play(now=0.0)
        >>> scheduler.tick(250.0)  # advances if the first chunk's delay elapsed
        True
    """

    def __init__(
        self,
        state: ReaderState,
        *,
        window: int = LOOKAHEAD_WINDOW,
        on_pause: Optional[Callable[[int], None]] = None,
    ) -> None:
        """
        Initialize the scheduler.

        Args:
            state: Shared reader state (settings and active document).
            window: Number of upcoming chunks kept in the lookahead cache.
            on_pause: Called with the current index whenever playback
                      transitions to paused (checkpoint hook).
        """
        self.state = state
        self.status = PlaybackStatus.PAUSED
        self.cache = LookaheadCache(window)
        self._on_pause = on_pause
        self._bound_chunks: List[Chunk] = state.chunks
        self._current_index = 0
        self._last_advance: Optional[float] = None

        start = state.document.progress_index if state.document else 0
        self.load(start)

    @property
    def chunks(self) -> List[Chunk]:
        return self.state.chunks

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def is_playing(self) -> bool:
        return self.status is PlaybackStatus.PLAYING

    def _clamp(self, index: int) -> int:
        return max(0, min(index, len(self.chunks) - 1))

    def _sync(self) -> None:
        """Pick up chunk-list substitutions and pacing changes."""
        chunks = self.chunks
        if chunks is not self._bound_chunks:
            self._bound_chunks = chunks
            self._current_index = self._clamp(self._current_index)
            logger.debug("Chunk sequence replaced (%d chunks), position %d", len(chunks), self._current_index)

        if self.cache.sync(chunks, self.state.wpm):
            logger.debug("Lookahead cache invalidated (wpm=%d)", self.state.wpm)
            self.cache.fill(self._current_index)

    def load(self, start_index: int = 0) -> None:
        """Reset to a paused state at ``start_index`` for the current document."""
        self.status = PlaybackStatus.PAUSED
        self._last_advance = None
        self._bound_chunks = self.chunks
        self._current_index = self._clamp(start_index)
        self.cache.sync(self._bound_chunks, self.state.wpm)
        self.cache.clear()
        self.cache.fill(self._current_index)

    def play(self, now: Optional[float] = None) -> None:
        """
        Start playback.

        Args:
            now: Optional timestamp (ms) to measure the first delay from.
                 When omitted, the first tick establishes the baseline.
        """
        self._sync()
        if not self.chunks or self.is_playing:
            return

        self.status = PlaybackStatus.PLAYING
        self._last_advance = now
        self.cache.fill(self._current_index)

    def pause(self) -> None:
        """Stop playback and fire the checkpoint hook."""
        if not self.is_playing:
            return
        self._set_paused()

    def toggle(self, now: Optional[float] = None) -> None:
        if self.is_playing:
            self.pause()
        else:
            self.play(now)

    def _set_paused(self) -> None:
        self.status = PlaybackStatus.PAUSED
        self._last_advance = None
        if self._on_pause is not None:
            self._on_pause(self._current_index)

    def seek(self, target_index: int) -> int:
        """
        Move to ``target_index``, clamped into range. Keeps the play state.

        Returns:
            The resulting index.
        """
        self._sync()
        self._current_index = self._clamp(target_index)
        self._last_advance = None
        self.cache.fill(self._current_index)
        return self._current_index

    def seek_relative(self, delta: int) -> int:
        return self.seek(self._current_index + delta)

    def tick(self, now: float) -> bool:
        """
        Advance by one chunk if the current chunk's delay has elapsed.

        Args:
            now: Frame timestamp in milliseconds.

        Returns:
            True if the position advanced.
        """
        if not self.is_playing:
            return False

        self._sync()
        chunks = self.chunks
        if not chunks:
            self._set_paused()
            return False

        if self._last_advance is None:
            self._last_advance = now

        elapsed = now - self._last_advance
        if elapsed < self.prepared(self._current_index).delay_ms:
            return False

        if self._current_index >= len(chunks) - 1:
            logger.info("Reached end of sequence at index %d", self._current_index)
            self._set_paused()
            return False

        self._current_index += 1
        self._last_advance = now
        self.cache.fill(self._current_index)
        return True

    def prepared(self, index: int) -> PreparedChunk:
        """Return focal index and delay for ``index``, from cache when present."""
        self._sync()
        cached = self.cache.get(index)
        if cached is not None:
            return cached
        return prepare_chunk(self.chunks[index], self.state.wpm)

    def current_frame(self) -> Optional[DisplayFrame]:
        """Build the display split for the chunk at the current position."""
        self._sync()
        if not self.chunks:
            return None

        index = self._current_index
        chunk = self.chunks[index]
        prepared = self.prepared(index)
        before, focal, after = split_for_display(chunk.text, prepared.focal_index)
        return DisplayFrame(
            index=index,
            chunk=chunk,
            before=before,
            focal=focal,
            after=after,
            delay_ms=prepared.delay_ms,
        )

    def remaining_minutes(self) -> int:
        """Rough minutes left at the current pacing rate (one chunk per word)."""
        remaining = len(self.chunks) - self._current_index
        return math.ceil(remaining / self.state.wpm) if remaining > 0 else 0
