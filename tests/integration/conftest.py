"""
Integration test fixtures.

Every test using the ``client`` fixture runs once per shipped document client.
"""

import tempfile

import pytest

from docmodel import Database, DocumentCollection
from docmodel.store import InMemoryDocumentClient, SqliteDocumentClient


@pytest.fixture(params=["memory", "sqlite"])
def client(request):
    """Document client for each backend."""
    if request.param == "memory":
        yield InMemoryDocumentClient()
        return
    with tempfile.TemporaryDirectory() as tmpdir:
        yield SqliteDocumentClient(tmpdir, wal_mode=False)


@pytest.fixture
def database():
    return Database("integration")


@pytest.fixture
def collection():
    return DocumentCollection("documents")
