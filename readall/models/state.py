"""Shared reader state passed by reference to the playback components."""

from dataclasses import dataclass, field
from typing import List, Optional

from readall.models.chunk import Chunk
from readall.models.document import Document
from readall.models.settings import ReaderSettings


@dataclass
class ReaderState:
    """Live settings and the active document.

    Owned by the reader session. The scheduler and the gesture controller
    hold a reference and read through it, so replacing the document or its
    chunk list is visible to them without notification.
    """

    settings: ReaderSettings = field(default_factory=ReaderSettings)
    document: Optional[Document] = None

    @property
    def chunks(self) -> List[Chunk]:
        if self.document is None:
            return []
        return self.document.chunks

    @property
    def wpm(self) -> int:
        return self.settings.wpm
