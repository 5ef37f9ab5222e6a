"""Shared fixtures for Readall tests."""

import pytest
from fastapi.testclient import TestClient

from readall.config import Settings, get_settings
from readall.models.document import Document
from readall.models.settings import ReaderSettings
from readall.models.state import ReaderState
from readall.services.storage import DocumentStorage
from readall.services.tokenizer import tokenize


def make_document(text: str, **kwargs) -> Document:
    """Build a document with algorithmic chunks for ``text``."""
    return Document(title=kwargs.pop("title", "Test"), content=text, chunks=tokenize(text), **kwargs)


@pytest.fixture
def word_document():
    """100 chunks of "word", 200 ms each at 300 WPM."""
    return make_document(" ".join(["word"] * 100))


@pytest.fixture
def reader_state(word_document):
    return ReaderState(settings=ReaderSettings(wpm=300), document=word_document)


@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        documents_path=str(tmp_path / "documents"),
        enrichment_delay_seconds=0.0,
        _env_file=None,
    )


@pytest.fixture
def storage(test_settings):
    return DocumentStorage(test_settings.documents_path)


@pytest.fixture
def client(test_settings):
    """API test client backed by a temporary document directory."""
    from readall.main import app

    app.dependency_overrides[get_settings] = lambda: test_settings
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def document_factory():
    return make_document
