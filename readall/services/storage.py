"""
Document persistence using JSON files.

Key-value semantics keyed by document id: ``put`` replaces the full record,
``get_all`` returns every stored document, ``delete`` removes one. Writes go
to a uniquely named temp file and are renamed into place, so the last
completed rename wins.
"""

import json
import logging
import re
import uuid
from pathlib import Path
from typing import List, Optional

import anyio
from pydantic import ValidationError

from readall.models.document import Document

logger = logging.getLogger(__name__)

_DOCUMENT_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


class DocumentStorage:
    """Persist and retrieve documents as JSON files."""

    def __init__(self, documents_path: str = "./data/documents"):
        self.documents_path = Path(documents_path)

    async def ensure_directory(self) -> None:
        """Ensure the documents directory exists."""
        await anyio.Path(self.documents_path).mkdir(parents=True, exist_ok=True)

    def _document_file(self, document_id: str) -> Path:
        """Get the file path for a document."""
        if not _DOCUMENT_ID_PATTERN.match(document_id):
            raise ValueError(f"Invalid document id: {document_id!r}")
        return self.documents_path / f"{document_id}.json"

    async def put(self, document: Document) -> None:
        """
        Save a document, replacing any previous record with the same id.

        Args:
            document: The document to save
        """
        await self.ensure_directory()

        data = document.model_dump(mode="json")

        file_path = anyio.Path(self._document_file(document.id))
        # Unique per write so concurrent puts never rename each other's file
        temp_path = anyio.Path(f"{file_path}.{uuid.uuid4().hex}.tmp")

        await temp_path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
        await temp_path.rename(file_path)

    async def get(self, document_id: str) -> Optional[Document]:
        """
        Load a document from disk.

        Returns:
            The loaded document, or None if not found
        """
        file_path = anyio.Path(self._document_file(document_id))

        if not await file_path.exists():
            return None

        text = await file_path.read_text(encoding="utf-8")
        return Document.model_validate(json.loads(text))

    async def get_all(self) -> List[Document]:
        """
        Load every stored document, oldest first.

        Unreadable records are logged and skipped so one corrupt file does
        not hide the rest of the library.
        """
        await self.ensure_directory()

        documents: List[Document] = []
        path = anyio.Path(self.documents_path)

        async for item in path.iterdir():
            if item.suffix != ".json":
                continue
            try:
                text = await item.read_text(encoding="utf-8")
                documents.append(Document.model_validate(json.loads(text)))
            except (OSError, ValueError, ValidationError):
                logger.exception("Skipping unreadable document file %s", item)

        documents.sort(key=lambda document: (document.created_at, document.id))
        return documents

    async def delete(self, document_id: str) -> bool:
        """
        Delete a document from disk.

        Returns:
            True if deleted, False if not found
        """
        file_path = anyio.Path(self._document_file(document_id))

        if await file_path.exists():
            await file_path.unlink()
            return True

        return False
