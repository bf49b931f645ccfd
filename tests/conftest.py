"""Shared test fixtures and configuration."""

import io
import os

import pytest

from tfidf_engine.search.index_store import IndexStore
from tfidf_engine.search.models import DocumentId


# Complete test environment that overrides every config value
TEST_ENV = {
    "TFIDF_LOG_LEVEL": "info",
    "TFIDF_LOG_JSON": "true",
    "TFIDF_DEFAULT_ANALYZER": "default",
    "TFIDF_INPUT_ENCODING": "utf-8",
    "TFIDF_TRACING_ENABLED": "false",
    "TFIDF_SERVICE_NAME": "tfidf-engine-tests",
}


for key, value in TEST_ENV.items():
    os.environ[key] = value


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Reset TFIDF_* variables before each test."""
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)


@pytest.fixture
def store() -> IndexStore:
    return IndexStore()


@pytest.fixture
def pets_store() -> IndexStore:
    """Two documents sharing the term "dog"."""
    index = IndexStore()
    index.add_document(DocumentId("d1"), io.StringIO("cat dog dog"))
    index.add_document(DocumentId("d2"), io.StringIO("dog dog dog"))
    return index
