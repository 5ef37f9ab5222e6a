"""FastAPI dependency providers."""

from typing import Annotated

from fastapi import Depends

from readall.config import Settings, get_settings
from readall.services.library import Library
from readall.services.storage import DocumentStorage


def get_storage(settings: Annotated[Settings, Depends(get_settings)]) -> DocumentStorage:
    return DocumentStorage(settings.documents_path)


def get_library(
    storage: Annotated[DocumentStorage, Depends(get_storage)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> Library:
    return Library(storage, settings)


SettingsDep = Annotated[Settings, Depends(get_settings)]
LibraryDep = Annotated[Library, Depends(get_library)]
