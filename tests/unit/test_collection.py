"""
Unit tests for collection descriptors and links.
"""

import pytest

from docmodel.collection import (
    DocumentCollection,
    PartitionKeyDefinition,
    collection_link,
    document_link,
    ensure_unpartitioned,
    parse_collection_link,
    parse_document_link,
)
from docmodel.errors import PartitionedCollectionsNotSupportedError


class TestPartitioning:
    """Tests for the partitioned collection check."""

    def test_unpartitioned_by_default(self):
        collection = DocumentCollection("documents")

        assert not collection.is_partitioned
        ensure_unpartitioned(collection)

    def test_partitioned_rejected(self):
        collection = DocumentCollection("documents", PartitionKeyDefinition(("/tenant",)))

        with pytest.raises(PartitionedCollectionsNotSupportedError) as exc_info:
            ensure_unpartitioned(collection)

        assert exc_info.value.code == "PARTITIONED_COLLECTION"
        assert exc_info.value.details["paths"] == ["/tenant"]


class TestLinks:
    """Tests for building and parsing links."""

    def test_collection_link(self):
        assert collection_link("app", "documents") == "dbs/app/colls/documents"

    def test_document_link(self):
        assert document_link("app", "documents", "Task_1") == "dbs/app/colls/documents/docs/Task_1"

    def test_document_id_with_slash_rejected(self):
        with pytest.raises(ValueError):
            document_link("app", "documents", "a/b")

    def test_parse_round_trip(self):
        assert parse_collection_link("dbs/app/colls/documents") == ("app", "documents")
        assert parse_document_link("dbs/app/colls/documents/docs/Task_1") == ("app", "documents", "Task_1")

    @pytest.mark.parametrize("link", ["", "dbs/app", "dbs/app/colls/", "x/app/colls/c", "dbs/app/colls/c/docs/1"])
    def test_parse_collection_link_rejects_malformed(self, link):
        with pytest.raises(ValueError):
            parse_collection_link(link)

    @pytest.mark.parametrize("link", ["dbs/app/colls/c", "dbs/app/colls/c/docs/", "dbs/app/colls/c/items/1"])
    def test_parse_document_link_rejects_malformed(self, link):
        with pytest.raises(ValueError):
            parse_document_link(link)
