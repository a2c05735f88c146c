"""
Unit tests for the in-memory document client.

Tests cover:
- Create, upsert, read, delete
- Id assignment and conflicts
- Filtered queries
- Isolation of stored documents from caller mutations
"""

import pytest

from docmodel.errors import DocumentConflictError, DocumentNotFoundError
from docmodel.filters import F
from docmodel.store import DocumentClient, InMemoryDocumentClient

LINK = "dbs/app/colls/documents"


class TestInMemoryDocumentClient:
    """Tests for InMemoryDocumentClient."""

    @pytest.fixture
    def client(self):
        """Create empty client."""
        return InMemoryDocumentClient()

    def test_implements_protocol(self, client):
        assert isinstance(client, DocumentClient)

    @pytest.mark.asyncio
    async def test_create_and_read(self, client):
        stored = await client.create_document(LINK, {"id": "Task_1", "Type": "Task", "Entity": {"id": "1"}})

        assert stored["id"] == "Task_1"
        assert await client.read_document(f"{LINK}/docs/Task_1") == stored

    @pytest.mark.asyncio
    async def test_create_assigns_id(self, client):
        """Documents without id get one from the store."""
        stored = await client.create_document(LINK, {"id": None, "Type": "Tag", "ValueObject": {}})

        assert stored["id"]
        assert client.count(LINK) == 1

    @pytest.mark.asyncio
    async def test_create_conflict(self, client):
        await client.create_document(LINK, {"id": "a"})

        with pytest.raises(DocumentConflictError) as exc_info:
            await client.create_document(LINK, {"id": "a"})

        assert exc_info.value.link == f"{LINK}/docs/a"

    @pytest.mark.asyncio
    async def test_upsert_replaces(self, client):
        await client.upsert_document(LINK, {"id": "a", "value": 1})
        await client.upsert_document(LINK, {"id": "a", "value": 2})

        assert await client.read_document(f"{LINK}/docs/a") == {"id": "a", "value": 2}
        assert client.count(LINK) == 1

    @pytest.mark.asyncio
    async def test_upsert_requires_id(self, client):
        with pytest.raises(ValueError):
            await client.upsert_document(LINK, {"id": None})

    @pytest.mark.asyncio
    async def test_read_missing(self, client):
        with pytest.raises(DocumentNotFoundError):
            await client.read_document(f"{LINK}/docs/missing")

    @pytest.mark.asyncio
    async def test_delete(self, client):
        await client.create_document(LINK, {"id": "a"})
        await client.delete_document(f"{LINK}/docs/a")

        with pytest.raises(DocumentNotFoundError):
            await client.read_document(f"{LINK}/docs/a")

    @pytest.mark.asyncio
    async def test_delete_missing_is_noop(self, client):
        await client.delete_document(f"{LINK}/docs/missing")

    @pytest.mark.asyncio
    async def test_collections_are_isolated(self, client):
        await client.create_document(LINK, {"id": "a"})

        with pytest.raises(DocumentNotFoundError):
            await client.read_document("dbs/app/colls/other/docs/a")

    @pytest.mark.asyncio
    async def test_query_filters_in_order(self, client):
        for i in range(5):
            await client.create_document(LINK, {"id": str(i), "Type": "T", "value": i})

        results = [doc["id"] async for doc in client.query_documents(LINK, F("value") >= 2)]

        assert results == ["2", "3", "4"]

    @pytest.mark.asyncio
    async def test_query_unknown_collection(self, client):
        assert [doc async for doc in client.query_documents("dbs/x/colls/y")] == []

    @pytest.mark.asyncio
    async def test_stored_copy_is_isolated(self, client):
        """Mutating inputs or outputs does not change stored data."""
        document = {"id": "a", "nested": {"value": 1}}
        stored = await client.create_document(LINK, document)
        document["nested"]["value"] = 2
        stored["nested"]["value"] = 3

        assert (await client.read_document(f"{LINK}/docs/a"))["nested"]["value"] == 1

    @pytest.mark.asyncio
    async def test_clear(self, client):
        await client.create_document(LINK, {"id": "a"})
        client.clear()

        assert client.count(LINK) == 0
